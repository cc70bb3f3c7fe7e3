import os

import pytest

# config는 import 시점에 환경 변수를 읽으므로 먼저 고정
os.environ["DATABASE_URL"] = ""
os.environ["ADMIN_PASSWORD"] = "Lions"
os.environ["SCHOOLS"] = "wlhs,wvhs"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient  # noqa: E402

from database import ConnectionGuard, init_db  # noqa: E402


class CountingGuard(ConnectionGuard):
    """acquire() 호출 횟수를 세는 가드(저장소 접근 여부 확인용)"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.acquired = 0

    def acquire(self):
        self.acquired += 1
        return super().acquire()


@pytest.fixture()
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'calendar_test.db'}"


@pytest.fixture()
def guard(db_url):
    g = CountingGuard(db_url)
    init_db(g.engine)
    yield g
    g.shutdown()


@pytest.fixture()
def app(guard):
    from main import create_app
    return create_app(guard)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db(guard):
    s = guard.acquire()
    yield s
    s.close()


@pytest.fixture()
def admin_headers(client):
    r = client.post("/api/admin/login", json={"password": "Lions"})
    assert r.status_code == 200, r.text
    return {"X-Admin-Session": r.json()["token"]}
