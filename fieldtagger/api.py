"""High-level API for FieldTagger.

This module provides simple, functional interfaces for common operations.
These functions wrap the tagger and config objects for ease of use in
simple cases.
"""

from typing import Any, Dict, List, Optional

from .config import Direction, TraversalConfig
from .core.field import Field
from .core.schema import fields_of, type_name
from .core.tagger import StructTagger
from .errors import ConfigurationError


def tag_in(tagger: StructTagger,
           data: Any,
           target: Any,
           config: Optional[TraversalConfig] = None) -> Any:
    """Populate target from data using a TraversalConfig.

    Args:
        tagger: Tagger holding the registered tags
        data: External data handed to every In handler
        target: Structure instance to fill
        config: Traversal options (defaults to every tag, no empty-field tag)

    Returns:
        target, to allow chaining

    Example:
        >>> user = tag_in(tagger, document, User(), TraversalConfig.for_in("", "my_json"))
    """
    config = config or TraversalConfig.for_in()
    if config.direction is not Direction.IN:
        raise ConfigurationError("tag_in() requires a Direction.IN config")

    tagger.execute(config, data, target)
    return target


def tag_out(tagger: StructTagger,
            seed: Any,
            source: Any,
            config: Optional[TraversalConfig] = None) -> Any:
    """Project source into data using a TraversalConfig.

    Args:
        tagger: Tagger holding the registered tags
        seed: Initial accumulator
        source: Structure instance to read
        config: Traversal options (defaults to every tag, no empty-field tag)

    Returns:
        Final accumulator
    """
    config = config or TraversalConfig.for_out()
    if config.direction is not Direction.OUT:
        raise ConfigurationError("tag_out() requires a Direction.OUT config")

    return tagger.execute(config, seed, source)


def collect_fields(target: Any) -> List[Field]:
    """Return read-only field descriptors of a structure, without handlers.

    Nested structures are not descended into and nothing is modified.
    """
    tagger = StructTagger()
    specs = tagger.validate_target(target)
    return tagger.collect_fields(target, specs, None, Direction.OUT)


def describe_struct(target: Any) -> List[Dict[str, Any]]:
    """Describe the field table of a structure instance or class.

    Useful for debugging annotations.

    Returns:
        One dictionary per field in declaration order
    """
    return [
        {
            'index': spec.index,
            'name': spec.name,
            'type': type_name(spec.declared_type),
            'kind': spec.kind.value,
            'is_pointer': spec.is_pointer,
            'is_struct': spec.is_struct,
            'tag': str(spec.tag),
        }
        for spec in fields_of(target)
    ]
