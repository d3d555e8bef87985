"""
Tile and layout validation used before a manual layout replaces the packed one.
"""

from typing import List, Optional, Sequence

from .config import GridConfig
from .errors import ValidationError
from .models import Tile


def tile_problems(tile: Tile, config: Optional[GridConfig] = None) -> List[str]:
	"""
	Return human-readable reasons why a tile is invalid (empty list if valid).
	With a config, the tile's own resize bounds must also sit inside the grid's bounds.
	"""
	problems = []
	if tile.x < 0 or tile.y < 0:
		problems.append(f"position ({tile.x}, {tile.y}) is negative")
	if tile.min_w > tile.max_w:
		problems.append(f"minW {tile.min_w} > maxW {tile.max_w}")
	if tile.min_h > tile.max_h:
		problems.append(f"minH {tile.min_h} > maxH {tile.max_h}")
	if not (tile.min_w <= tile.w <= tile.max_w):
		problems.append(f"w {tile.w} outside [{tile.min_w}, {tile.max_w}]")
	if not (tile.min_h <= tile.h <= tile.max_h):
		problems.append(f"h {tile.h} outside [{tile.min_h}, {tile.max_h}]")

	if config is not None:
		if tile.min_w < config.min_film_width or tile.max_w > config.max_film_width:
			problems.append(
				f"width bounds [{tile.min_w}, {tile.max_w}] exceed grid bounds [{config.min_film_width}, {config.max_film_width}]"
			)
		if tile.min_h < config.min_film_height or tile.max_h > config.max_film_height:
			problems.append(
				f"height bounds [{tile.min_h}, {tile.max_h}] exceed grid bounds [{config.min_film_height}, {config.max_film_height}]"
			)
	return problems


def validate_tile(tile: Tile, config: Optional[GridConfig] = None) -> None:
	problems = tile_problems(tile, config)
	if problems:
		raise ValidationError(f"Tile {tile.index!r} is invalid: {'; '.join(problems)}")


def validate_layout(tiles: Sequence[Tile], expected_length: int, config: Optional[GridConfig] = None) -> None:
	"""
	Check a full replacement layout.
	The length must match the movie count and no two tiles may share a label;
	each tile must also stay within its own resize bounds, and those within the grid's.
	"""
	if len(tiles) != expected_length:
		raise ValidationError(
			f"Layout has {len(tiles)} tiles but poster has {expected_length} movies"
		)

	seen = set()
	for tile in tiles:
		validate_tile(tile, config)
		if tile.index in seen:
			raise ValidationError(f"Duplicate tile label {tile.index!r}")
		seen.add(tile.index)
