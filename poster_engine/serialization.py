"""
Conversion between Poster objects and the JSON documents stored by persistence
and returned by the HTTP API.
"""

import uuid
from typing import Any, Dict

from .errors import ValidationError
from .models import MovieRecord, Poster, PosterEntry, Tile


def poster_to_dict(poster: Poster) -> Dict[str, Any]:
	"""Serialize a poster verbatim: id, movie list, parallel layout list and entry ids."""
	return {
		'id': poster.id,
		'movies': [m.to_dict() for m in poster.movies],
		'layout': [t.to_dict() for t in poster.tiles],
		'entryIds': poster.entry_ids,
	}


def poster_from_dict(data: Dict[str, Any]) -> Poster:
	"""
	Rebuild a poster from a stored document.
	Documents written before entry ids existed get fresh ones.
	"""
	if 'id' not in data:
		raise ValidationError("Poster document has no 'id'")

	movies_raw = data.get('movies') or []
	layout_raw = data.get('layout') or []
	if len(movies_raw) != len(layout_raw):
		raise ValidationError(
			f"Poster {data['id']!r} has {len(movies_raw)} movies but {len(layout_raw)} layout items"
		)

	entry_ids = data.get('entryIds') or [uuid.uuid4().hex for _ in movies_raw]
	if len(entry_ids) != len(movies_raw):
		raise ValidationError(f"Poster {data['id']!r} has a mismatched entryIds list")

	try:
		entries = [
			PosterEntry(entry_id=str(eid), movie=MovieRecord.from_tmdb(m), tile=Tile.from_dict(t))
			for eid, m, t in zip(entry_ids, movies_raw, layout_raw)
		]
	except (AttributeError, KeyError, TypeError, ValueError) as e:
		raise ValidationError(f"Malformed poster document {data['id']!r}: {e}")

	return Poster(id=str(data['id']), entries=entries)
