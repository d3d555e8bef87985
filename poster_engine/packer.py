"""
Auto-packer.
Assigns initial tiles to newly added movies in row-major order on a fixed-width grid.
"""

from typing import List

from loguru import logger

from .config import GridConfig
from .errors import ValidationError
from .models import Tile


class AutoPacker:
	"""
	Deterministic row-major packer.
	Item i lands in column (i mod max_cols) of row (i // max_cols); every tile gets
	the default film size and the configured resize bounds.
	"""

	def __init__(self, config: GridConfig):
		self.config = config

	def pack(self, start_index: int, count: int) -> List[Tile]:
		"""
		Produce one tile per new item.
		- start_index: absolute position of the first new item (length of the existing poster)
		- count: number of new items
		"""
		if start_index < 0:
			raise ValidationError(f"start_index must be >= 0, got {start_index}")
		if count < 0:
			raise ValidationError(f"count must be >= 0, got {count}")

		cfg = self.config
		tiles = [self.tile_at(i) for i in range(start_index, start_index + count)]
		logger.debug(
			f"[Packer] Packed {count} tiles from index {start_index} | cols={cfg.max_cols} size={cfg.film_width}x{cfg.film_height}"
		)
		return tiles

	def tile_at(self, i: int) -> Tile:
		"""Tile for the item at absolute position i."""
		cfg = self.config
		return Tile(
			index=str(i),
			x=(i % cfg.max_cols) * cfg.film_width,
			y=i // cfg.max_cols,
			w=cfg.film_width,
			h=cfg.film_height,
			min_w=cfg.min_film_width,
			max_w=cfg.max_film_width,
			min_h=cfg.min_film_height,
			max_h=cfg.max_film_height,
		)
