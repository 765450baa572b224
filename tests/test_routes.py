
import pytest
from fastapi.testclient import TestClient
from api.main import app
import api.routes as routes
from arview.experiences import ExperienceStore
from arview.models import Experience


@pytest.fixture
def catalog(monkeypatch, tmp_path, red_png, blue_png):
    (tmp_path / "red.png").write_bytes(red_png)
    (tmp_path / "blue.png").write_bytes(blue_png)
    store = ExperienceStore({
        "red": Experience(id="red", marker_url=str(tmp_path / "red.png"), video_url="r.mp4", title="Red"),
        "blue": Experience(id="blue", marker_url=str(tmp_path / "blue.png"), video_url="b.mp4"),
    })
    monkeypatch.setattr(routes, "store", store)
    return store


def test_health(catalog):
    with TestClient(app) as client:
        r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "experiences": 2}


def test_compare(red_png, blue_png):
    client = TestClient(app)
    r = client.post("/compare", files={
        "target": ("t.png", red_png, "image/png"),
        "candidate": ("c.png", blue_png, "image/png"),
    })
    assert r.status_code == 200
    j = r.json()
    assert j["score"] == 0.0 and j["matched"] is False
    assert j["label"] == "Poor Match"
    assert "computed_at" in j


def test_compare_undecodable(red_png):
    client = TestClient(app)
    r = client.post("/compare", files={
        "target": ("t.png", red_png, "image/png"),
        "candidate": ("c.txt", b"hello", "text/plain"),
    })
    assert r.status_code == 422


def test_get_experience(catalog):
    client = TestClient(app)
    r = client.get("/experiences/red")
    assert r.status_code == 200
    assert r.json()["title"] == "Red"
    assert client.get("/experiences/nope").status_code == 404


def test_match_experience(catalog, red_png):
    client = TestClient(app)
    r = client.post("/experiences/red/match", files={"file": ("p.png", red_png, "image/png")})
    assert r.status_code == 200
    assert r.json()["score"] == 100.0 and r.json()["label"] == "Excellent Match"

    r = client.post("/experiences/nope/match", files={"file": ("p.png", red_png, "image/png")})
    assert r.status_code == 404


def test_match_catalog(catalog, blue_png):
    client = TestClient(app)
    r = client.post("/match", files={"file": ("p.png", blue_png, "image/png")})
    assert r.status_code == 200
    j = r.json()
    assert [m["experience_id"] for m in j["matches"]] == ["blue", "red"]
    assert j["best"]["experience_id"] == "blue"
