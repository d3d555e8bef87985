"""
Tests for the TMDB client and title resolver, using a stub HTTP session.
"""

import pytest
import requests

from poster_engine.models import FilmEntry
from poster_engine.tmdb_client import MovieResolver, TmdbClient


class StubResponse:
	def __init__(self, payload, status=200):
		self.payload = payload
		self.status = status

	def raise_for_status(self):
		if self.status >= 400:
			raise requests.HTTPError(f"{self.status} error")

	def json(self):
		return self.payload


class StubSession:
	"""Records requests and answers from a {path suffix: payload} table."""

	def __init__(self, routes, status=200):
		self.routes = routes
		self.status = status
		self.calls = []

	def get(self, url, params=None, timeout=None):
		self.calls.append((url, dict(params or {})))
		for suffix, payload in self.routes.items():
			if url.endswith(suffix):
				if callable(payload):
					payload = payload(params)
				return StubResponse(payload, self.status)
		return StubResponse({}, 404)


SEARCH_RESULTS = {
	"results": [
		{"id": 1, "title": "Dune", "release_date": "2021-09-15", "poster_path": "/d21.jpg"},
		{"id": 2, "title": "Dune", "release_date": "1984-12-14", "poster_path": "/d84.jpg"},
		{"id": 3, "title": "Dune: Part Two", "release_date": "2024-02-27"},
	]
}


def make_client(routes, status=200):
	session = StubSession(routes, status)
	return TmdbClient(base_url="https://tmdb.test/3/", api_key="secret", session=session), session


def test_search_movie_sends_key_and_query():
	client, session = make_client({"/search/movie": SEARCH_RESULTS})
	results = client.search_movie("dune")
	assert [m.id for m in results] == [1, 2, 3]
	url, params = session.calls[0]
	assert url == "https://tmdb.test/3/search/movie"
	assert params == {"query": "dune", "api_key": "secret"}


def test_get_movie_images():
	client, _ = make_client({"/movie/603/images": {"id": 603, "posters": [{"file_path": "/a.jpg"}]}})
	assert client.get_movie_images(603) == [{"file_path": "/a.jpg"}]


def test_http_errors_propagate():
	client, _ = make_client({"/search/movie": SEARCH_RESULTS}, status=500)
	with pytest.raises(requests.HTTPError):
		client.search_movie("dune")


def test_resolver_prefers_year():
	client, _ = make_client({"/search/movie": SEARCH_RESULTS})
	resolver = MovieResolver(client)
	assert resolver.resolve("Dune", 1984).id == 2
	assert resolver.resolve("Dune").id == 1


def test_resolver_not_found():
	client, _ = make_client({"/search/movie": {"results": []}})
	resolver = MovieResolver(client)
	assert resolver.resolve("No Such Film") is None
	assert resolver.resolve("   ") is None


def test_resolve_entries_skips_misses():
	def search(params):
		return SEARCH_RESULTS if params["query"] == "Dune" else {"results": []}

	client, _ = make_client({"/search/movie": search})
	movies = MovieResolver(client).resolve_entries([
		FilmEntry(name="Dune", year="1984"),
		FilmEntry(name="Unknown"),
		FilmEntry(name="Dune"),
	])
	assert [m.id for m in movies] == [2, 1]
