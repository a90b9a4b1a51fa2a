"""Exception hierarchy for FieldTagger.

Every error raised by the engine is terminal for the traversal that raised it.
Nothing is retried and mutations applied before the failure are kept.
"""


class TaggerError(Exception):
    """Base class for all FieldTagger errors."""
    pass


class ConfigurationError(TaggerError):
    """Raised when the tagger or traversal configuration can't be used.

    For example: calling in_/out before any tag was registered.
    """
    pass


class UnknownTagError(TaggerError):
    """Raised when a requested tag name is not registered."""
    pass


class InvalidTargetError(TaggerError):
    """Raised when the traversal target is not a usable structure."""
    pass


class TypeMismatchError(TaggerError):
    """Raised when a field can't be set or the value has the wrong type."""
    pass


class HandlerMisconfiguredError(TaggerError):
    """Raised when a matched tag has no handler for the current direction."""
    pass


class HandlerError(TaggerError):
    """Convenience base for errors raised by user handlers.

    The engine propagates handler exceptions of any type unchanged; handlers
    are free to raise this one or their own.
    """
    pass
