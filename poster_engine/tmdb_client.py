"""
Movie metadata client.
Talks to The Movie Database (TMDB) over HTTP and resolves free-text film titles to MovieRecord objects.
"""

from typing import Any, Dict, Iterable, List, Optional

import requests  # HTTP client
from rapidfuzz import fuzz, process  # fuzzy title matching

from loguru import logger

from .config import tmdb_api_key, tmdb_api_url
from .models import FilmEntry, MovieRecord


class TmdbClient:
	"""
	Thin wrapper over the TMDB v3 REST API.
	The API key is attached to every request as the `api_key` query parameter.
	"""

	def __init__(
		self,
		base_url: Optional[str] = None,
		api_key: Optional[str] = None,
		session: Optional[requests.Session] = None,  # injected for tests / connection reuse
		timeout: float = 10.0,
	):
		self.base_url = (base_url or tmdb_api_url()).rstrip('/')
		self.api_key = api_key if api_key is not None else tmdb_api_key()
		self.session = session or requests.Session()
		self.timeout = timeout
		if not self.api_key:
			logger.warning("[Tmdb] No API key configured; requests will likely be rejected")

	def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
		params = dict(params or {})
		params['api_key'] = self.api_key
		url = f"{self.base_url}/{path.lstrip('/')}"
		shown = {k: v for k, v in params.items() if k != 'api_key'}  # never log the key
		logger.debug(f"[Tmdb] GET {url} params={shown}")
		try:
			resp = self.session.get(url, params=params, timeout=self.timeout)
			resp.raise_for_status()
		except requests.RequestException as e:
			logger.error(f"[Tmdb] Request to {url} failed: {e}")
			raise
		return resp.json()

	def search_movie(self, query: str, year: Optional[int] = None) -> List[MovieRecord]:
		"""Search movies by title; results keep the service's relevance order."""
		params: Dict[str, Any] = {'query': query}
		if year:
			params['year'] = year
		data = self._get('/search/movie', params)
		results = [MovieRecord.from_tmdb(r) for r in data.get('results', []) if r.get('id') is not None]
		logger.debug(f"[Tmdb] '{query}' ({year or '-'}) -> {len(results)} results")
		return results

	def get_movie_images(self, movie_id: int) -> List[Dict[str, Any]]:
		"""Return the poster image descriptors (file_path, width, height, ...) of a movie."""
		data = self._get(f"/movie/{movie_id}/images")
		return list(data.get('posters', []))


class MovieResolver:
	"""
	Resolves a title (and optional year) to a single MovieRecord.
	Candidates released in the requested year are preferred; among the remaining
	candidates the closest title wins.
	"""

	def __init__(self, client: TmdbClient, min_score: float = 0.0):
		self.client = client
		self.min_score = min_score

	def resolve(self, title: str, year: Optional[int] = None) -> Optional[MovieRecord]:
		if not title or not title.strip():
			return None

		candidates = self.client.search_movie(title.strip())
		if not candidates:
			logger.warning(f"[Resolver] No match for '{title}'")
			return None

		if year:
			same_year = [c for c in candidates if c.release_year == year]
			if same_year:
				candidates = same_year

		best = process.extractOne(
			title.strip(),
			[c.title for c in candidates],
			scorer=fuzz.WRatio,
			processor=str.lower,
		)
		if best is None or best[1] < self.min_score:
			logger.warning(f"[Resolver] No candidate for '{title}' scored above {self.min_score}")
			return None

		_, score, idx = best
		movie = candidates[idx]
		logger.debug(f"[Resolver] '{title}' -> {movie.title} ({movie.id}) score={score:.1f}")
		return movie

	def resolve_entries(self, entries: Iterable[FilmEntry]) -> List[MovieRecord]:
		"""Resolve a batch in order, dropping entries that have no match."""
		movies = []
		missed = 0
		for entry in entries:
			movie = self.resolve(entry.name, entry.year_int)
			if movie is None:
				missed += 1
				continue
			movies.append(movie)
		logger.info(f"[Resolver] Resolved {len(movies)} films ({missed} unmatched)")
		return movies
