"""
Layout store.
Owns one poster's movie/tile pairing and applies incremental edits to it.

Every operation builds the new entry list first and swaps it in only once all
checks have passed, so a rejected operation never leaves a half-edited poster.
"""

import uuid  # stable entry identifiers
from dataclasses import replace  # copy frozen tiles with new labels
from typing import Callable, List, Optional, Sequence

from loguru import logger

from .config import GridConfig
from .errors import NotFoundError, ValidationError
from .models import MovieRecord, Poster, PosterEntry, PosterState, Tile
from .packer import AutoPacker
from .validation import validate_layout


def _new_id() -> str:
	return uuid.uuid4().hex


class LayoutStore:
	"""
	Edit operations for a single poster.
	Callers must serialize operations on the same store; there is no internal locking.
	"""

	def __init__(
		self,
		config: Optional[GridConfig] = None,  # grid geometry; defaults to GridConfig()
		poster: Optional[Poster] = None,  # existing poster to edit, None starts empty
		packer: Optional[AutoPacker] = None,  # injected packer, built from config otherwise
		allow_empty_batches: bool = True,  # whether append([]) is a no-op or an error
		id_factory: Optional[Callable[[], str]] = None,  # generates poster/entry ids
	):
		self.config = config or GridConfig()
		self.packer = packer or AutoPacker(self.config)
		self.allow_empty_batches = allow_empty_batches
		self._new_id = id_factory or _new_id

		if poster is None:
			self._poster = Poster(id=self._new_id())
			self._state = PosterState.UNINITIALIZED
		else:
			self._poster = poster
			self._state = PosterState.POPULATED

	@property
	def poster(self) -> Poster:
		return self._poster

	@property
	def state(self) -> PosterState:
		return self._state

	def append(self, movies: Sequence[MovieRecord]) -> Poster:
		"""Pack the new movies after the existing ones and add them to the poster."""
		movies = list(movies)
		if not movies and not self.allow_empty_batches:
			raise ValidationError("Cannot append an empty batch of movies")

		start = len(self._poster)
		new_tiles = self.packer.pack(start, len(movies))
		new_entries = [
			PosterEntry(entry_id=self._new_id(), movie=movie, tile=tile)
			for movie, tile in zip(movies, new_tiles)
		]

		self._poster.entries = self._poster.entries + new_entries
		self._state = PosterState.POPULATED
		logger.info(f"[LayoutStore] Appended {len(movies)} movies to poster {self._poster.id} | total={len(self._poster)}")
		return self._poster

	def remove_at(self, i: int) -> Poster:
		"""
		Remove the movie and tile at position i.
		Remaining tiles keep their x/y (no re-flow); only their labels follow the new positions.
		"""
		if isinstance(i, bool) or not isinstance(i, int) or i < 0 or i >= len(self._poster):
			raise NotFoundError(f"No entry at index {i!r} (poster has {len(self._poster)} entries)")

		removed = self._poster.entries[i]
		remaining = self._poster.entries[:i] + self._poster.entries[i + 1:]
		self._poster.entries = self._relabel(remaining)
		logger.info(f"[LayoutStore] Removed entry {i} ('{removed.movie.title}') from poster {self._poster.id}")
		return self._poster

	def remove_entry(self, entry_id: str) -> Poster:
		"""Remove an entry addressed by its stable identifier."""
		return self.remove_at(self._poster.position_of(entry_id))

	def replace_layout(self, tiles: Sequence[Tile]) -> Poster:
		"""Replace every tile after a manual drag/resize session."""
		tiles = list(tiles)
		validate_layout(tiles, expected_length=len(self._poster), config=self.config)

		entries = [replace(entry, tile=tile) for entry, tile in zip(self._poster.entries, tiles)]
		self._poster.entries = self._relabel(entries)
		logger.debug(f"[LayoutStore] Replaced layout of poster {self._poster.id} ({len(tiles)} tiles)")
		return self._poster

	def replace_movies(self, movies: Sequence[MovieRecord]) -> Poster:
		"""Replace movies positionally; tiles and entry ids are kept."""
		movies = list(movies)
		if len(movies) != len(self._poster):
			raise ValidationError(
				f"Got {len(movies)} movies but poster has {len(self._poster)} tiles"
			)

		self._poster.entries = [replace(entry, movie=movie) for entry, movie in zip(self._poster.entries, movies)]
		logger.debug(f"[LayoutStore] Replaced movies of poster {self._poster.id}")
		return self._poster

	def repack(self) -> Poster:
		"""Discard manual positions and re-run the packer over every entry, closing gaps."""
		tiles = self.packer.pack(0, len(self._poster))
		self._poster.entries = [replace(entry, tile=tile) for entry, tile in zip(self._poster.entries, tiles)]
		logger.info(f"[LayoutStore] Repacked poster {self._poster.id}")
		return self._poster

	@staticmethod
	def _relabel(entries: List[PosterEntry]) -> List[PosterEntry]:
		# Labels are rendering keys derived from position, so they stay unique after edits
		return [
			entry if entry.tile.index == str(i) else replace(entry, tile=replace(entry.tile, index=str(i)))
			for i, entry in enumerate(entries)
		]
