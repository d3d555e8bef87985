"""
Poster persistence.
Stores each poster as one JSON document named poster-<id>.json inside a directory.
"""

# Standard libs for JSON encoding and paths
import json  # read/write poster documents
import os  # atomic rename
import re  # poster id check
import tempfile  # per-write staging files
from pathlib import Path  # filesystem-safe paths
from typing import List  # type hints

# Console logging
from loguru import logger  # console logger

from .errors import NotFoundError  # missing posters
from .models import Poster  # aggregate being stored
from .serialization import poster_from_dict, poster_to_dict  # document conversion

# Prefix shared by every poster document, mirrors the "poster-<id>" keys of the browser store
KEY_PREFIX = 'poster-'

# Poster ids become file names, so only allow a safe character set
SAFE_ID = re.compile(r"^[A-Za-z0-9_-]+$")


class PosterRepository:
	"""
	File-backed key/value store for posters.
	Each write goes through its own temporary file and a rename, so readers never see
	half a document. Callers serialize load-modify-save per poster (see PosterService).
	"""

	def __init__(self, directory: str):
		self.directory = Path(directory)  # normalize path
		self.directory.mkdir(parents=True, exist_ok=True)  # ensure the store exists
		logger.debug(f"[Repository] Using poster store at {self.directory}")

	def _path_for(self, poster_id: str) -> Path:
		if not SAFE_ID.match(poster_id or ''):
			raise NotFoundError(f"Poster not found: {poster_id}")
		return self.directory / f"{KEY_PREFIX}{poster_id}.json"

	def save(self, poster: Poster) -> Poster:
		"""Create or overwrite the document for this poster."""
		path = self._path_for(poster.id)  # target file
		# Unique staging file in the same directory, hidden from the poster-*.json glob
		with tempfile.NamedTemporaryFile(
			'w', encoding='utf-8', dir=self.directory, prefix=f".{path.name}.", suffix='.tmp', delete=False
		) as f:
			tmp_name = f.name
			json.dump(poster_to_dict(poster), f, ensure_ascii=False)  # serialize verbatim
		try:
			os.replace(tmp_name, path)  # atomic swap
		except OSError:
			os.unlink(tmp_name)  # do not leave staging files behind
			raise
		logger.info(f"[Repository] Saved poster {poster.id} ({len(poster)} movies)")
		return poster

	def get(self, poster_id: str) -> Poster:
		"""Load one poster, raising NotFoundError when no document exists."""
		path = self._path_for(poster_id)
		try:
			with open(path, 'r', encoding='utf-8') as f:
				return poster_from_dict(json.load(f))
		except FileNotFoundError:
			raise NotFoundError(f"Poster not found: {poster_id}")

	def exists(self, poster_id: str) -> bool:
		return self._path_for(poster_id).exists()

	def list(self) -> List[Poster]:
		"""Return every stored poster, oldest document first."""
		paths = sorted(self.directory.glob(f"{KEY_PREFIX}*.json"), key=self._sort_key)
		posters = []  # accumulator
		for path in paths:
			try:
				with open(path, 'r', encoding='utf-8') as f:
					posters.append(poster_from_dict(json.load(f)))
			except FileNotFoundError:
				continue  # deleted since the glob
		logger.debug(f"[Repository] Listed {len(posters)} posters")
		return posters

	def delete(self, poster_id: str) -> None:
		path = self._path_for(poster_id)
		try:
			path.unlink()
		except FileNotFoundError:
			raise NotFoundError(f"Poster not found: {poster_id}")
		logger.info(f"[Repository] Deleted poster {poster_id}")

	@staticmethod
	def _sort_key(path: Path):
		try:
			return (path.stat().st_mtime, path.name)
		except FileNotFoundError:
			return (0.0, path.name)  # vanished; skipped when read
