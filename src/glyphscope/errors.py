"""Exceptions raised by the public glyphscope operations."""


class InvalidArgumentError(TypeError, ValueError):
    """Argument has the wrong type, is empty, or is not a valid code point."""


class RangeError(ValueError):
    """Enum-like option outside its recognized set of values."""
