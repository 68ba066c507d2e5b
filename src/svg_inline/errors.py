"""Exceptions raised during SVG conversion."""


class ConversionError(Exception):
    """Base class for conversion errors."""


class ParseFailure(ConversionError):
    """The input text could not be parsed into an element tree."""


class ApplyFailure(ConversionError):
    """A structured pipeline stage failed after the tree was built."""


class FallbackFailure(ConversionError):
    """The textual fallback failed, or the result could not be written."""
