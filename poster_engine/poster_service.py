"""
Poster service.
Glues the CSV entries, the metadata resolver, the layout store and persistence into
the workflows used by the API and the CLI.
"""

import threading  # per-poster write locks
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

from loguru import logger

from .config import GridConfig
from .errors import ValidationError
from .layout_store import LayoutStore
from .models import FilmEntry, MovieRecord, Poster, Tile
from .repository import PosterRepository
from .tmdb_client import MovieResolver, TmdbClient


class PosterService:
	"""
	Poster workflows: every mutating call loads the poster, edits it through a
	LayoutStore and saves it only if the edit succeeded. Load-edit-save runs under
	a lock per poster id, so concurrent requests on one poster are applied one at a time.
	"""

	def __init__(
		self,
		repository: PosterRepository,
		resolver: MovieResolver,
		config: Optional[GridConfig] = None,
		client: Optional[TmdbClient] = None,  # for poster image lookups, defaults to the resolver's client
	):
		self.repository = repository
		self.resolver = resolver
		self.config = config or GridConfig()
		self.client = client or getattr(resolver, 'client', None)
		self._locks: Dict[str, threading.Lock] = {}
		self._locks_guard = threading.Lock()

	@contextmanager
	def _locked(self, poster_id: str) -> Iterator[None]:
		with self._locks_guard:
			lock = self._locks.setdefault(poster_id, threading.Lock())
		with lock:
			yield

	def _store_for(self, poster: Optional[Poster] = None) -> LayoutStore:
		return LayoutStore(self.config, poster=poster)

	def create_poster(self, entries: Sequence[FilmEntry]) -> Poster:
		"""Resolve every entry, pack the matched movies and persist the new poster."""
		logger.info(f"[Service] Creating poster from {len(entries)} films")
		movies = self.resolver.resolve_entries(entries)
		store = self._store_for()
		store.append(movies)
		return self.repository.save(store.poster)

	def get_poster(self, poster_id: str) -> Poster:
		return self.repository.get(poster_id)

	def list_posters(self) -> List[Poster]:
		return self.repository.list()

	def delete_poster(self, poster_id: str) -> None:
		with self._locked(poster_id):
			self.repository.delete(poster_id)
		with self._locks_guard:
			self._locks.pop(poster_id, None)

	def append_movies(self, poster_id: str, movies: Sequence[MovieRecord]) -> Poster:
		with self._locked(poster_id):
			store = self._store_for(self.repository.get(poster_id))
			store.append(movies)
			return self.repository.save(store.poster)

	def remove_movie(self, poster_id: str, index: int) -> Poster:
		with self._locked(poster_id):
			store = self._store_for(self.repository.get(poster_id))
			store.remove_at(index)
			return self.repository.save(store.poster)

	def patch_poster(
		self,
		poster_id: str,
		movies: Optional[Sequence[MovieRecord]] = None,
		layout: Optional[Sequence[Tile]] = None,
	) -> Poster:
		"""
		Replace the movie list and/or the layout of a poster.
		When both are given, movies are applied first and the layout is checked against them;
		nothing is saved unless both succeed.
		"""
		if movies is None and layout is None:
			raise ValidationError("Nothing to patch: provide movies and/or layout")

		with self._locked(poster_id):
			store = self._store_for(self.repository.get(poster_id))
			if movies is not None:
				store.replace_movies(movies)
			if layout is not None:
				store.replace_layout(layout)
			return self.repository.save(store.poster)

	def repack_poster(self, poster_id: str) -> Poster:
		with self._locked(poster_id):
			store = self._store_for(self.repository.get(poster_id))
			store.repack()
			return self.repository.save(store.poster)

	def get_movie_posters(self, movie_id: int) -> List[Dict[str, Any]]:
		"""Alternative poster images for a movie, used by the poster picker."""
		if self.client is None:
			raise ValidationError("No metadata client configured for image lookups")
		return self.client.get_movie_images(movie_id)
