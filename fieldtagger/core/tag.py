"""Tag descriptors for FieldTagger.

A Tag is a named annotation together with the grammar used to parse its
text and the handlers run for the In and Out directions. Handlers can be
plain callables or objects implementing InHandler/OutHandler; both reduce
to the same call signature.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Union, TYPE_CHECKING

from ..config import Direction, TagSymbols
from ..errors import ConfigurationError, HandlerMisconfiguredError

if TYPE_CHECKING:
    from .field import Field


class InHandler(ABC):
    """Contract for handlers populating a structure.

    Example:
        class JsonHandler(InHandler):
            def handle(self, data, field, owner):
                field.set(data[field.tag.values()[0]])
    """

    @abstractmethod
    def handle(self, data: Any, field: 'Field', owner: Any) -> None:
        """Fill one field.

        Args:
            data: External data passed to in_() (opaque to the engine)
            field: Field being processed; call field.set() to store a value
            owner: Structure instance the field belongs to
        """
        pass


class OutHandler(ABC):
    """Contract for handlers projecting a structure into external data."""

    @abstractmethod
    def handle(self, data: Any, field: 'Field', owner: Any) -> Any:
        """Project one field.

        Args:
            data: Current accumulator
            field: Field being processed
            owner: Structure instance the field belongs to

        Returns:
            Accumulator passed to the next handler
        """
        pass


InHandlerF = Callable[[Any, 'Field', Any], None]
OutHandlerF = Callable[[Any, 'Field', Any], Any]


def _as_callable(handler: Any) -> Optional[Callable[..., Any]]:
    if handler is None:
        return None
    if isinstance(handler, type):
        raise TypeError(
            f"handler must be an instance, got class {handler.__name__}"
        )
    handle = getattr(handler, "handle", None)
    if callable(handle):
        return handle
    if callable(handler):
        return handler
    raise TypeError(
        f"handler must be callable or define handle(), got {type(handler).__name__}"
    )


class Tag:
    """Custom tag with a name, symbols and handlers.

    Built with chained calls before it is added to a tagger:

        new_tag("my_json").with_in_handler(json_in).with_out_handler(json_out).with_symbols(":", ",")
    """

    def __init__(self, name: str, symbols: Optional[TagSymbols] = None):
        if not name:
            raise ValueError("tag name can't be empty")
        self.name = name
        self.symbols = symbols or TagSymbols()
        self.in_handler: Optional[Union[InHandlerF, InHandler]] = None
        self.out_handler: Optional[Union[OutHandlerF, OutHandler]] = None

    def with_in_handler(self, handler: Union[InHandlerF, InHandler]) -> 'Tag':
        """Set the In handler: a function or an object with handle()."""
        _as_callable(handler)
        self.in_handler = handler
        return self

    def with_out_handler(self, handler: Union[OutHandlerF, OutHandler]) -> 'Tag':
        """Set the Out handler: a function or an object with handle()."""
        _as_callable(handler)
        self.out_handler = handler
        return self

    def with_symbols(self, key_value: str, keys_separator: str) -> 'Tag':
        """Set symbols for the tag.

            new_tag("name").with_symbols(":", "|")  # "a:b|c:d"
        """
        symbols = TagSymbols(key_value, keys_separator)
        errors = symbols.validate()
        if errors:
            raise ConfigurationError(f"Invalid symbols for tag {self.name}: {'; '.join(errors)}")
        self.symbols = symbols
        return self

    # Function/contract wording aliases
    in_function = with_in_handler
    in_contract = with_in_handler
    out_function = with_out_handler
    out_contract = with_out_handler

    def has_handler(self, direction: Direction) -> bool:
        if direction is Direction.IN:
            return self.in_handler is not None
        return self.out_handler is not None

    def handler_for(self, direction: Direction) -> Callable[..., Any]:
        """Return the handler for a direction as a plain callable.

        Raises:
            HandlerMisconfiguredError: If no handler is set for direction
        """
        handler = self.in_handler if direction is Direction.IN else self.out_handler
        if handler is None:
            raise HandlerMisconfiguredError(
                f"{self.name} tag has no {direction.value} handler"
            )
        return _as_callable(handler)

    def __repr__(self) -> str:
        return (f"Tag(name={self.name!r}, symbols={self.symbols!r}, "
                f"in={self.in_handler is not None}, out={self.out_handler is not None})")


def new_tag(name: str) -> Tag:
    """Initialize a tag.

        new_tag("json")
    """
    return Tag(name)
