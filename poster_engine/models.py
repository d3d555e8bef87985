"""
Data models for the Film Poster Builder.
Defines the movie, tile and poster structures shared by the layout engine and its collaborators.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
from enum import Enum  # poster lifecycle states
# Import typing helpers for precise and self-documenting types
from typing import Any, Dict, List, Optional, Tuple  # lists, optional values, and fixed-size tuples

from .errors import NotFoundError, ValidationError  # unknown entry ids, bad tile values


@dataclass(frozen=True)
class MovieRecord:
	"""
	A single movie resolved against the metadata service.
	The layout engine only cares about identity; everything else is carried for display.
	"""
	id: int  # catalog identifier, unique per metadata service
	title: str  # display title
	poster_path: Optional[str] = None  # relative poster image path (e.g. "/abc.jpg")
	original_title: Optional[str] = None  # title in the original language
	overview: Optional[str] = None  # short synopsis
	release_date: Optional[str] = None  # ISO date string as returned by the service
	popularity: float = 0.0  # popularity score from the service
	vote_average: float = 0.0  # average rating on a 0-10 scale
	vote_count: int = 0  # number of votes
	original_language: Optional[str] = None  # ISO 639-1 code
	genre_ids: Tuple[int, ...] = ()  # genre identifiers

	@property
	def release_year(self) -> Optional[int]:
		"""Year part of release_date, or None when missing/unparseable."""
		if not self.release_date or len(self.release_date) < 4:
			return None
		try:
			return int(self.release_date[:4])
		except ValueError:
			return None

	@classmethod
	def from_tmdb(cls, data: Dict[str, Any]) -> 'MovieRecord':
		"""Build a record from a raw metadata-service movie object."""
		return cls(
			id=int(data['id']),
			title=data.get('title') or data.get('original_title') or '',
			poster_path=data.get('poster_path'),
			original_title=data.get('original_title'),
			overview=data.get('overview'),
			release_date=data.get('release_date') or None,
			popularity=float(data.get('popularity') or 0.0),
			vote_average=float(data.get('vote_average') or 0.0),
			vote_count=int(data.get('vote_count') or 0),
			original_language=data.get('original_language'),
			genre_ids=tuple(data.get('genre_ids') or ()),
		)

	def to_dict(self) -> Dict[str, Any]:
		"""Serialize using the metadata service's field names."""
		return {
			'id': self.id,
			'title': self.title,
			'poster_path': self.poster_path,
			'original_title': self.original_title,
			'overview': self.overview,
			'release_date': self.release_date,
			'popularity': self.popularity,
			'vote_average': self.vote_average,
			'vote_count': self.vote_count,
			'original_language': self.original_language,
			'genre_ids': list(self.genre_ids),
		}


def _cell(data: Dict[str, Any], key: str) -> int:
	"""Read a whole-number grid value; 2.0 is accepted, 1.7 or "3" is not."""
	value = data[key]
	if isinstance(value, bool):
		raise ValidationError(f"{key} must be an integer, got {value!r}")
	if isinstance(value, int):
		return value
	if isinstance(value, float) and value.is_integer():
		return int(value)
	raise ValidationError(f"{key} must be an integer, got {value!r}")


@dataclass(frozen=True)
class Tile:
	"""
	Placement of one poster entry on the grid, in cell units.
	y grows downward; min/max bounds limit manual resizing.
	"""
	index: str  # rendering key, derived from the entry's position
	x: int
	y: int
	w: int
	h: int
	min_w: int
	max_w: int
	min_h: int
	max_h: int

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> 'Tile':
		"""Parse the renderer's layout item shape ({"i", "x", ..., "minW", ...})."""
		return cls(
			index=str(data['i']),
			x=_cell(data, 'x'),
			y=_cell(data, 'y'),
			w=_cell(data, 'w'),
			h=_cell(data, 'h'),
			min_w=_cell(data, 'minW'),
			max_w=_cell(data, 'maxW'),
			min_h=_cell(data, 'minH'),
			max_h=_cell(data, 'maxH'),
		)

	def to_dict(self) -> Dict[str, Any]:
		"""Serialize to the renderer's layout item shape."""
		return {
			'i': self.index,
			'x': self.x,
			'y': self.y,
			'w': self.w,
			'h': self.h,
			'minW': self.min_w,
			'maxW': self.max_w,
			'minH': self.min_h,
			'maxH': self.max_h,
		}


@dataclass
class FilmEntry:
	"""
	One watched film as exported by Letterboxd, after key normalization.
	Looked up by name (and year) before it reaches the layout engine.
	"""
	name: str  # film title as typed on Letterboxd
	date: Optional[str] = None  # date the film was logged
	year: Optional[str] = None  # release year, kept as text like the export
	letterboxd_uri: Optional[str] = None  # link back to the Letterboxd page

	@property
	def year_int(self) -> Optional[int]:
		if self.year and self.year.strip().isdigit():
			return int(self.year.strip())
		return None


@dataclass(frozen=True)
class PosterEntry:
	"""A movie and its tile, bound together under a stable identifier."""
	entry_id: str
	movie: MovieRecord
	tile: Tile


class PosterState(Enum):
	UNINITIALIZED = 'uninitialized'
	POPULATED = 'populated'


@dataclass
class Poster:
	"""
	Aggregate of ordered movie entries.
	movies[i] and tiles[i] always describe the same entry, since both are read
	from one list of PosterEntry objects.
	"""
	id: str  # poster identifier used by persistence
	entries: List[PosterEntry] = field(default_factory=list)  # display order

	def __len__(self) -> int:
		return len(self.entries)

	@property
	def movies(self) -> List[MovieRecord]:
		return [e.movie for e in self.entries]

	@property
	def tiles(self) -> List[Tile]:
		return [e.tile for e in self.entries]

	@property
	def entry_ids(self) -> List[str]:
		return [e.entry_id for e in self.entries]

	def position_of(self, entry_id: str) -> int:
		"""Return the current index of an entry, raising NotFoundError if absent."""
		for i, entry in enumerate(self.entries):
			if entry.entry_id == entry_id:
				return i
		raise NotFoundError(f"Entry {entry_id!r} not found in poster {self.id!r}")

	def tile_for(self, entry_id: str) -> Tile:
		return self.entries[self.position_of(entry_id)].tile
