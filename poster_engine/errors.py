"""
Error types raised by the layout engine and its collaborators.
Both kinds are recoverable: the operation is rejected and the poster is left unchanged.
"""


class PosterError(Exception):
	"""Base class for every error raised by the poster engine."""


class ValidationError(PosterError, ValueError):
	"""Input breaks a layout rule (pairing length, tile bounds, configuration)."""


class NotFoundError(PosterError, LookupError):
	"""An entry or poster addressed by index/identifier does not exist."""
