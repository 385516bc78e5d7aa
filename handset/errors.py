"""Exception types raised by the handset capture pipeline.

All errors derive from HandsetError so callers can catch the whole family,
and from ValueError where the failure is caused by bad input data.
"""


class HandsetError(Exception):
    """Base class for handset errors."""


class EmptyCaptureError(HandsetError, ValueError):
    """Raised when a variant is requested from a capture with no points.

    The UI should keep "approve" disabled until at least one stroke with at
    least one point exists.
    """


class InvalidGlyphBoxError(HandsetError, ValueError):
    """Raised when a glyph box has a non-positive or non-finite size."""


class UnsupportedSchemaError(HandsetError, ValueError):
    """Raised when importing a session document with an unknown schema version."""
