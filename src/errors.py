"""
Pipeline error types

NoQuadrilateralFound is not an exception: detection simply returns None.
Everything below derives from SpotPipelineError so callers can catch the
whole family at the API boundary.
"""


class SpotPipelineError(Exception):
    """Base class for rectification pipeline failures."""


class DegenerateGeometryError(SpotPipelineError):
    """Corners collapse to a zero-width or zero-height rectangle."""


class UnsupportedChannelLayout(SpotPipelineError):
    """Image is not 1, 3 or 4 channels of uint8 samples."""


class DecodeError(SpotPipelineError):
    """Uploaded bytes could not be decoded into an image."""
