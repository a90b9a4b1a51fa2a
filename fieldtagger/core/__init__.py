"""Core abstractions for FieldTagger.

This module contains the tag, field and engine classes that define
the FieldTagger architecture.
"""

from .field_tag import FieldTag, StructTag, parse_tag
from .schema import (
    FieldKind,
    FieldSpec,
    fields_of,
    is_struct_type,
    register_struct,
    tagged,
    unregister_struct,
    zero_value,
)
from .field import Field, ParentStruct
from .tag import InHandler, OutHandler, Tag, new_tag
from .tagger import StructTagger, Tagger, new_tagger

__all__ = [
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
]
