"""
Exception types for tiny-bloom.

The construction errors subclass ValueError so that code written against
plain ``ValueError`` keeps working.
"""


class InvalidParameterError(ValueError):
    """Raised when a filter is constructed with out-of-range parameters."""


class InvalidSizeError(ValueError):
    """Raised when a bit vector is requested with a non-positive size."""


class InvalidHandleError(LookupError):
    """Raised when a null, freed or unknown filter handle is used."""
