"""
Tests for the HTTP API using FastAPI's TestClient and an in-memory resolver.
"""

import pytest
from fastapi.testclient import TestClient

import api
from poster_engine.models import MovieRecord
from poster_engine.poster_service import PosterService
from poster_engine.repository import PosterRepository

CATALOG = {
	"Alien": MovieRecord(id=348, title="Alien", poster_path="/alien.jpg", release_date="1979-05-25"),
	"Heat": MovieRecord(id=949, title="Heat", poster_path="/heat.jpg"),
	"Ran": MovieRecord(id=11645, title="Ran", poster_path="/ran.jpg"),
}


class FakeClient:
	def get_movie_images(self, movie_id):
		return [{"file_path": "/alt.jpg", "width": 500, "height": 750}]


class FakeResolver:
	client = FakeClient()

	def resolve_entries(self, entries):
		return [CATALOG[e.name] for e in entries if e.name in CATALOG]


@pytest.fixture
def client(tmp_path, monkeypatch):
	service = PosterService(repository=PosterRepository(str(tmp_path)), resolver=FakeResolver())
	monkeypatch.setattr(api, "SERVICE", service)
	return TestClient(api.app)


def create(client, *names):
	rows = [{"name": n, "year": "1990", "date": "2023-01-01"} for n in names] + [{"year": "2000"}]
	resp = client.post("/posters", json={"movies": rows})
	assert resp.status_code == 200
	return resp.json()


def test_health(client):
	resp = client.get("/health")
	assert resp.status_code == 200
	assert resp.json()["service_ready"] is True


def test_create_and_fetch(client):
	poster = create(client, "Alien", "Heat", "Ran")
	assert [m["title"] for m in poster["movies"]] == ["Alien", "Heat", "Ran"]
	assert [(t["x"], t["y"], t["w"], t["h"]) for t in poster["layout"]] == [(0, 0, 1, 3), (1, 0, 1, 3), (2, 0, 1, 3)]

	fetched = client.get(f"/posters/{poster['id']}").json()
	assert fetched == poster
	assert [p["id"] for p in client.get("/posters").json()] == [poster["id"]]


def test_patch_layout(client):
	poster = create(client, "Alien", "Heat")
	layout = poster["layout"]
	layout[0].update({"x": 5, "y": 1, "w": 2})
	resp = client.patch(f"/posters/{poster['id']}", json={"layout": layout})
	assert resp.status_code == 200
	assert resp.json()["layout"][0]["x"] == 5


def test_patch_rejects_bad_layout(client):
	poster = create(client, "Alien", "Heat")
	resp = client.patch(f"/posters/{poster['id']}", json={"layout": poster["layout"][:1]})
	assert resp.status_code == 422

	too_wide = [dict(poster["layout"][0], w=9), poster["layout"][1]]
	resp = client.patch(f"/posters/{poster['id']}", json={"layout": too_wide})
	assert resp.status_code == 422
	assert client.get(f"/posters/{poster['id']}").json()["layout"] == poster["layout"]


def test_append_and_remove(client):
	poster = create(client, "Alien")
	resp = client.post(f"/posters/{poster['id']}/movies", json={"movies": [CATALOG["Ran"].to_dict()]})
	assert resp.status_code == 200
	assert [m["id"] for m in resp.json()["movies"]] == [348, 11645]

	resp = client.delete(f"/posters/{poster['id']}/movies/0")
	assert resp.status_code == 200
	body = resp.json()
	assert [m["id"] for m in body["movies"]] == [11645]
	assert body["layout"][0]["x"] == 1

	assert client.delete(f"/posters/{poster['id']}/movies/7").status_code == 404


def test_repack(client):
	poster = create(client, "Alien", "Heat")
	client.delete(f"/posters/{poster['id']}/movies/0")
	body = client.post(f"/posters/{poster['id']}/repack").json()
	assert body["layout"][0]["x"] == 0


def test_unknown_poster(client):
	assert client.get("/posters/missing").status_code == 404


def test_movie_images(client):
	body = client.get("/movies/348").json()
	assert body == {"id": 348, "images": {"posters": [{"file_path": "/alt.jpg", "width": 500, "height": 750}]}}


def test_delete_poster(client):
	poster = create(client, "Alien")
	resp = client.delete(f"/posters/{poster['id']}")
	assert resp.status_code == 204
	assert client.get(f"/posters/{poster['id']}").status_code == 404
	assert client.delete(f"/posters/{poster['id']}").status_code == 404


def test_grid_config(client):
	body = client.get("/config").json()
	assert body == {
		"maxCols": 10, "rowHeight": 75, "filmWidth": 1, "filmHeight": 3,
		"minW": 1, "maxW": 3, "minH": 2, "maxH": 6,
	}


def test_patch_rejects_fractional_cells(client):
	poster = create(client, "Alien")
	layout = [dict(poster["layout"][0], x=1.7)]
	assert client.patch(f"/posters/{poster['id']}", json={"layout": layout}).status_code == 422
	assert client.get(f"/posters/{poster['id']}").json()["layout"] == poster["layout"]
