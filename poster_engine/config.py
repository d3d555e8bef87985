"""
Grid configuration shared by the auto-packer and tile validation.
Values are fixed for the lifetime of a process; invalid values fail at construction.
"""

import os  # environment-based overrides
from dataclasses import dataclass, fields  # immutable config record
from typing import Optional, Mapping  # type hints

from .errors import ValidationError  # raised for bad configuration

# Environment variable prefix for grid settings (e.g. POSTER_MAX_COLS)
ENV_PREFIX = 'POSTER_'

DEFAULT_TMDB_API_URL = 'https://api.themoviedb.org/3'  # public TMDB v3 endpoint
DEFAULT_STORE_DIR = 'data/posters'  # where poster documents are written


@dataclass(frozen=True)
class GridConfig:
	"""
	Grid geometry in cell units.
	- max_cols: number of tile columns before wrapping to the next row
	- film_width/film_height: default size of a freshly packed tile
	- min_/max_film_*: resize bounds copied onto every packed tile
	- row_height: pixel height of one grid row, only used by the renderer
	"""
	max_cols: int = 10
	film_width: int = 1
	film_height: int = 3
	min_film_width: int = 1
	max_film_width: int = 3
	min_film_height: int = 2
	max_film_height: int = 6
	row_height: int = 75

	def __post_init__(self):
		for f in fields(self):
			value = getattr(self, f.name)
			if isinstance(value, bool) or not isinstance(value, int):
				raise ValidationError(f"{f.name} must be an integer, got {value!r}")
			if value <= 0:
				raise ValidationError(f"{f.name} must be > 0, got {value}")

		if not (self.min_film_width <= self.film_width <= self.max_film_width):
			raise ValidationError(
				f"film_width ({self.film_width}) must lie within [{self.min_film_width}, {self.max_film_width}]"
			)
		if not (self.min_film_height <= self.film_height <= self.max_film_height):
			raise ValidationError(
				f"film_height ({self.film_height}) must lie within [{self.min_film_height}, {self.max_film_height}]"
			)

	@property
	def grid_width(self) -> int:
		"""Width of the packed area in cells."""
		return self.max_cols * self.film_width

	@classmethod
	def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'GridConfig':
		"""
		Build a config from POSTER_* environment variables, falling back to defaults.
		Example: POSTER_MAX_COLS=12 POSTER_FILM_HEIGHT=4
		"""
		environ = os.environ if environ is None else environ  # allow injected mapping in tests
		overrides = {}
		for f in fields(cls):
			key = ENV_PREFIX + f.name.upper()  # max_cols -> POSTER_MAX_COLS
			raw = environ.get(key)
			if raw is None or not raw.strip():
				continue  # keep default
			try:
				overrides[f.name] = int(raw.strip())
			except ValueError:
				raise ValidationError(f"{key} must be an integer, got {raw!r}")
		return cls(**overrides)


def tmdb_api_url() -> str:
	"""Base URL of the movie metadata service."""
	return os.environ.get('TMDB_API_URL', DEFAULT_TMDB_API_URL)


def tmdb_api_key() -> Optional[str]:
	"""API key sent with every metadata request (None if unset)."""
	return os.environ.get('TMDB_API_KEY')


def store_dir() -> str:
	"""Directory used by the JSON poster repository."""
	return os.environ.get('POSTER_STORE_DIR', DEFAULT_STORE_DIR)
