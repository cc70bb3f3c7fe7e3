from datetime import datetime, timedelta

from models.admin import AdminSession
from services.session_service import SessionStore


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


START = datetime(2025, 6, 1, 8, 0, 0)


class TestSessionStore:

    def test_issue_then_validate(self, db):
        store = SessionStore(db, clock=FakeClock(START))
        token, expires_at = store.issue()
        assert len(token) == 64
        assert expires_at == START + timedelta(hours=8)
        assert store.validate(token) is True

    def test_tokens_are_unique(self, db):
        store = SessionStore(db)
        assert store.issue()[0] != store.issue()[0]

    def test_revoke_invalidates(self, db):
        store = SessionStore(db)
        token, _ = store.issue()
        store.revoke(token)
        assert store.validate(token) is False
        # 두 번 지워도 에러 아님
        store.revoke(token)

    def test_expiry_without_revoke(self, db):
        clock = FakeClock(START)
        store = SessionStore(db, clock=clock)
        token, expires_at = store.issue()

        clock.now = expires_at - timedelta(seconds=1)
        assert store.validate(token) is True
        clock.now = expires_at
        assert store.validate(token) is False
        clock.now = START + timedelta(hours=9)
        assert store.validate(token) is False

    def test_validate_bad_input(self, db):
        store = SessionStore(db)
        assert store.validate(None) is False
        assert store.validate("") is False
        assert store.validate("no-such-token") is False

    def test_issue_sweeps_expired_rows(self, db):
        clock = FakeClock(START)
        store = SessionStore(db, clock=clock)
        old, _ = store.issue()

        clock.now = START + timedelta(hours=10)
        fresh, _ = store.issue()

        tokens = {row.token for row in db.query(AdminSession).all()}
        assert old not in tokens
        assert fresh in tokens

    def test_sweep_returns_count(self, db):
        clock = FakeClock(START)
        store = SessionStore(db, clock=clock)
        store.issue()
        store.issue()
        clock.now = START + timedelta(days=1)
        assert store.sweep() == 2
