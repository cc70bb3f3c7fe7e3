import logging

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from errors import NotFoundError, StorageError, ValidationError
from models.calendar import CurriculumEntry, Event
from schemas.calendar_schema import EventCreate, EventUpdate
from services import event_service

from conftest import CountingGuard


def _create(client, headers, school="wlhs", **fields):
    body = {"date": "2025-06-01", "title": "Senior Sunset"}
    body.update(fields)
    r = client.post(f"/api/{school}/events", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


class TestSchoolEventRoutes:

    def test_curriculum_round_trip(self, client, admin_headers):
        created = _create(
            client,
            admin_headers,
            lifeCurriculum={"9": {"links": "http://x"}, "11": {"description": "y"}},
        )
        r = client.get(f"/api/wlhs/events/{created['id']}")
        assert r.status_code == 200
        curriculum = r.json()["life_curriculum"]
        assert [c["grade"] for c in curriculum] == [9, 11]
        assert curriculum[0]["links"] == "http://x"
        assert curriculum[0]["description"] is None
        assert curriculum[1]["description"] == "y"

    def test_event_without_curriculum_has_empty_list(self, client, admin_headers):
        _create(client, admin_headers, time="7:30", department="science")
        rows = client.get("/api/wlhs/events").json()
        assert len(rows) == 1
        assert rows[0]["life_curriculum"] == []
        assert rows[0]["time"] == "07:30"
        assert rows[0]["date"] == "2025-06-01"

    def test_empty_grade_entries_are_skipped(self, client, admin_headers):
        created = _create(client, admin_headers, lifeCurriculum={"10": {}, "12": {"links": "  "}})
        assert created["life_curriculum"] == []

    def test_department_filter(self, client, admin_headers):
        _create(client, admin_headers, title="Lab day", department="science")
        _create(client, admin_headers, title="Concert", department="music")
        _create(client, admin_headers, title="Assembly")

        science = client.get("/api/wlhs/events", params={"department": "science"}).json()
        assert [e["title"] for e in science] == ["Lab day"]
        everything = client.get("/api/wlhs/events", params={"department": "master"}).json()
        assert len(everything) == 3

    def test_date_range(self, client, admin_headers):
        _create(client, admin_headers, date="2025-05-01", title="May")
        _create(client, admin_headers, date="2025-06-15", title="June")
        rows = client.get("/api/wlhs/events", params={"from": "2025-06-01", "to": "2025-06-30"}).json()
        assert [e["title"] for e in rows] == ["June"]

    def test_update_replaces_curriculum(self, client, admin_headers):
        created = _create(client, admin_headers, lifeCurriculum={"9": {"links": "a"}, "10": {"links": "b"}})
        r = client.put(
            f"/api/wlhs/events/{created['id']}",
            json={"title": "Renamed", "lifeCurriculum": {"12": {"description": "seniors"}}},
            headers=admin_headers,
        )
        assert r.status_code == 200
        data = r.json()
        assert data["title"] == "Renamed"
        assert [c["grade"] for c in data["life_curriculum"]] == [12]

    def test_update_without_curriculum_keeps_children(self, client, admin_headers):
        created = _create(client, admin_headers, lifeCurriculum={"9": {"links": "a"}})
        r = client.put(f"/api/wlhs/events/{created['id']}", json={"description": "updated"}, headers=admin_headers)
        assert r.json()["description"] == "updated"
        assert [c["grade"] for c in r.json()["life_curriculum"]] == [9]

    def test_other_school_cannot_touch_event(self, client, admin_headers):
        created = _create(client, admin_headers)
        assert client.get(f"/api/wvhs/events/{created['id']}").status_code == 404
        r = client.delete(f"/api/wvhs/events/{created['id']}", headers=admin_headers)
        assert r.status_code == 404

    def test_delete(self, client, admin_headers):
        created = _create(client, admin_headers)
        r = client.delete(f"/api/wlhs/events/{created['id']}", headers=admin_headers)
        assert r.status_code == 200
        assert client.get(f"/api/wlhs/events/{created['id']}").status_code == 404
        assert client.delete(f"/api/wlhs/events/{created['id']}", headers=admin_headers).status_code == 404

    @pytest.mark.parametrize("fields, field", [
        ({"title": ""}, "title"),
        ({"date": "06/01/2025"}, "date"),
        ({"time": "25:00"}, "time"),
        ({"lifeCurriculum": {"8": {"links": "x"}}}, "lifeCurriculum.8"),
        ({"title": "x" * 256}, "title"),
    ])
    def test_create_validation(self, client, admin_headers, fields, field):
        body = {"date": "2025-06-01", "title": "Prom"}
        body.update(fields)
        r = client.post("/api/wlhs/events", json=body, headers=admin_headers)
        assert r.status_code == 400
        assert r.json()["field"] == field

    def test_non_integer_id(self, client):
        assert client.get("/api/wlhs/events/abc").status_code == 400

    def test_storage_failure_is_generic_500(self, client, admin_headers, monkeypatch, caplog):
        def boom(*args, **kwargs):
            raise SQLAlchemyError("secret detail")

        monkeypatch.setattr(event_service, "_replace_curriculum", boom)
        with caplog.at_level(logging.ERROR):
            r = client.post("/api/wlhs/events", json={"date": "2025-06-01", "title": "Prom"}, headers=admin_headers)
        assert r.status_code == 500
        assert r.json() == {"error": "Database operation failed"}
        assert "secret detail" not in r.text
        assert "[create_event] storage failure school=wlhs" in caplog.text
        # 롤백되어 행사 없음
        assert client.get("/api/wlhs/events").json() == []


class TestLegacyEventRoutes:

    def test_crud(self, client, admin_headers):
        r = client.post(
            "/api/events",
            json={"school": "wvhs", "date": "2025-09-01", "title": "Labor Day BBQ", "description": "Bring chairs"},
            headers=admin_headers,
        )
        assert r.status_code == 200
        event_id = r.json()["id"]

        rows = client.get("/api/events", params={"school": "wvhs"}).json()
        assert [e["title"] for e in rows] == ["Labor Day BBQ"]

        r = client.put(f"/api/events/{event_id}", json={"title": "BBQ"}, headers=admin_headers)
        assert r.json()["title"] == "BBQ"
        assert r.json()["description"] == "Bring chairs"

        assert client.delete(f"/api/events/{event_id}", headers=admin_headers).json() == {"success": True}
        assert client.put(f"/api/events/{event_id}", json={"title": "x"}, headers=admin_headers).status_code == 404

    def test_invalid_school_never_touches_storage(self, db_url):
        from main import create_app

        guard = CountingGuard(db_url)
        with TestClient(create_app(guard)) as c:
            token = c.post("/api/admin/login", json={"password": "Lions"}).json()["token"]
            headers = {"X-Admin-Session": token}
            before = guard.acquired

            r = c.get("/api/events", params={"school": "zzz"})
            assert r.status_code == 400
            assert r.json()["field"] == "school"

            writes = [
                ("/api/events", {"school": "zzz", "date": "2025-06-01", "title": "x"}),
                ("/api/day-schedules", {"school": "zzz", "date": "2025-06-01", "schedule": "A"}),
                ("/api/day-types", {"school": "zzz", "date": "2025-06-01", "type": "finals"}),
            ]
            for path, body in writes:
                # 토큰이 있든 없든 학교 검사가 먼저
                for h in (headers, {}):
                    r = c.post(path, json=body, headers=h)
                    assert r.status_code == 400, (path, r.text)
                    assert r.json()["field"] == "school"
            assert guard.acquired == before
        guard.shutdown()

    def test_invalid_school_with_unconfigured_store(self):
        from main import create_app

        with TestClient(create_app(CountingGuard(None))) as c:
            assert c.get("/api/events", params={"school": "zzz"}).status_code == 400
            assert c.get("/api/events").status_code == 400

    def test_unconfigured_store_is_500(self):
        from main import create_app

        with TestClient(create_app(CountingGuard(None))) as c:
            r = c.get("/api/events", params={"school": "wlhs"})
            assert r.status_code == 500
            assert "not configured" in r.json()["error"]


class TestEventService:

    def test_cascade_delete(self, guard, db):
        ev, entries = event_service.create_event(
            db, "wlhs", EventCreate(date="2025-06-01", title="Grad", lifeCurriculum={"9": {"links": "a"}, "10": {"links": "b"}})
        )
        entry_ids = [e.id for e in entries]
        assert len(entry_ids) == 2

        event_service.delete_event(db, "wlhs", ev.id)

        fresh = guard.acquire()
        try:
            assert fresh.query(CurriculumEntry).count() == 0
            for entry_id in entry_ids:
                with pytest.raises(NotFoundError):
                    event_service.get_curriculum_entry(fresh, entry_id)
        finally:
            fresh.close()

    def test_duplicate_grades_are_allowed(self, db):
        ev, _ = event_service.create_event(db, "wlhs", EventCreate(date="2025-06-01", title="Grad"))
        db.add(CurriculumEntry(event_id=ev.id, grade=9, links="a"))
        db.add(CurriculumEntry(event_id=ev.id, grade=9, links="b"))
        db.commit()
        _, entries = event_service.get_event(db, "wlhs", ev.id)
        assert [e.grade for e in entries] == [9, 9]

    def test_create_rolls_back_event_when_children_fail(self, db, monkeypatch):
        def boom(*args, **kwargs):
            raise SQLAlchemyError("insert failed")

        monkeypatch.setattr(event_service, "_replace_curriculum", boom)
        with pytest.raises(StorageError):
            event_service.create_event(
                db, "wlhs", EventCreate(date="2025-06-01", title="Grad", lifeCurriculum={"9": {"links": "a"}})
            )
        assert db.query(Event).count() == 0

    def test_update_rolls_back_event_when_children_fail(self, db, monkeypatch):
        ev, _ = event_service.create_event(
            db, "wlhs", EventCreate(date="2025-06-01", title="Grad", lifeCurriculum={"11": {"links": "a"}})
        )
        event_id = ev.id

        def boom(*args, **kwargs):
            raise SQLAlchemyError("insert failed")

        monkeypatch.setattr(event_service, "_replace_curriculum", boom)
        with pytest.raises(StorageError):
            event_service.update_event(
                db, "wlhs", event_id, EventUpdate(title="Changed", lifeCurriculum={"12": {"links": "b"}})
            )

        monkeypatch.undo()
        ev, entries = event_service.get_event(db, "wlhs", event_id)
        assert ev.title == "Grad"
        assert [e.grade for e in entries] == [11]

    def test_native_date_values(self, db):
        from datetime import date, datetime

        ev, _ = event_service.create_event(db, "wlhs", EventCreate(date=date(2025, 6, 1), title="A"))
        assert ev.date == date(2025, 6, 1)
        ev, _ = event_service.create_event(db, "wlhs", EventCreate(date=datetime(2025, 6, 2, 15, 30), title="B"))
        assert ev.date == date(2025, 6, 2)

    def test_missing_school(self, db):
        with pytest.raises(ValidationError):
            event_service.create_event(db, None, EventCreate(date="2025-06-01", title="A"))
