class TestMaterials:

    def _body(self, **fields):
        body = {"school": "wlhs", "date": "2025-10-01", "grade": 10, "title": "Study guide", "link": "https://example.org/guide"}
        body.update(fields)
        return body

    def test_crud(self, client):
        r = client.post("/api/materials", json=self._body(password="owl"))
        assert r.status_code == 200, r.text
        created = r.json()
        assert created["date"] == "2025-10-01"
        assert created["has_password"] is True

        rows = client.get("/api/materials", params={"school": "wlhs"}).json()
        assert [m["title"] for m in rows] == ["Study guide"]

        r = client.put(f"/api/materials/{created['id']}", json={"grade": "11", "password": ""})
        assert r.status_code == 200
        assert r.json()["grade"] == 11
        assert r.json()["has_password"] is False

        assert client.delete(f"/api/materials/{created['id']}").json() == {"success": True}
        assert client.delete(f"/api/materials/{created['id']}").status_code == 404

    def test_grade_filter(self, client):
        client.post("/api/materials", json=self._body(grade=9, title="Frosh"))
        client.post("/api/materials", json=self._body(grade=12, title="Senior"))
        rows = client.get("/api/materials", params={"school": "wlhs", "grade": 12}).json()
        assert [m["title"] for m in rows] == ["Senior"]

    def test_validation(self, client):
        assert client.post("/api/materials", json=self._body(grade=13)).json()["field"] == "grade"
        assert client.post("/api/materials", json=self._body(school="abc")).json()["field"] == "school"
        assert client.post("/api/materials", json=self._body(title=" ")).json()["field"] == "title"

    def test_update_missing(self, client):
        assert client.put("/api/materials/999", json={"title": "x"}).status_code == 404
