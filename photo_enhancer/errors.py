from __future__ import annotations


class EnhanceError(Exception):
    """Base class for every error raised by photo_enhancer."""


class InvalidDimensionsError(EnhanceError, ValueError):
    """A source, target or bounding-box dimension is not a positive integer."""


class DegenerateOutputError(EnhanceError, ValueError):
    """The planned output collapses to zero pixels on one axis."""


class DecodeError(EnhanceError, IOError):
    pass


class EncodeError(EnhanceError, IOError):
    pass
