"""FieldTagger - Tag-driven structure traversal.

FieldTagger walks dataclasses (or explicitly registered structure types)
field by field and hands every annotated field to the handlers of the
tags it is annotated with:

    from fieldtagger import new_tagger, new_tag, tagged

    tagger = new_tagger().add(
        new_tag("my_json").with_in_handler(json_in).with_out_handler(json_out)
    )
    tagger.in_(document, user)           # populate
    output = tagger.out({}, user)        # project

Handlers supply the format; the engine supplies traversal order, nested
structure recursion and per-field metadata.
"""

import logging

__version__ = "0.1.0"

from .config import Direction, TagSymbols, TraversalConfig
from .errors import (
    TaggerError,
    ConfigurationError,
    UnknownTagError,
    InvalidTargetError,
    TypeMismatchError,
    HandlerMisconfiguredError,
    HandlerError,
)
from .core import (
    FieldTag,
    StructTag,
    parse_tag,
    FieldKind,
    FieldSpec,
    fields_of,
    is_struct_type,
    register_struct,
    tagged,
    unregister_struct,
    zero_value,
    Field,
    ParentStruct,
    InHandler,
    OutHandler,
    Tag,
    new_tag,
    StructTagger,
    Tagger,
    new_tagger,
)
from .planning import ExecutionPlan
from .api import tag_in, tag_out, collect_fields, describe_struct

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # Config
    "Direction",
    "TagSymbols",
    "TraversalConfig",
    "ExecutionPlan",
    # Errors
    "TaggerError",
    "ConfigurationError",
    "UnknownTagError",
    "InvalidTargetError",
    "TypeMismatchError",
    "HandlerMisconfiguredError",
    "HandlerError",
    # Core
    "FieldTag",
    "StructTag",
    "parse_tag",
    "FieldKind",
    "FieldSpec",
    "fields_of",
    "is_struct_type",
    "register_struct",
    "tagged",
    "unregister_struct",
    "zero_value",
    "Field",
    "ParentStruct",
    "InHandler",
    "OutHandler",
    "Tag",
    "new_tag",
    "StructTagger",
    "Tagger",
    "new_tagger",
    # API
    "tag_in",
    "tag_out",
    "collect_fields",
    "describe_struct",
]
