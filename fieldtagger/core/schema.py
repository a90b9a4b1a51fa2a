"""Field metadata tables for structures.

The engine never inspects objects ad hoc. Every structure type exposes an
ordered table of FieldSpec entries: its name, declared type, pointer-ness,
nested-ness and raw annotation. Dataclasses get the table generated from
dataclasses.fields(); any other class can be registered explicitly with
register_struct().
"""

import dataclasses
import logging
import sys
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .field_tag import StructTag
from ..errors import InvalidTargetError

logger = logging.getLogger(__name__)

# Metadata key holding the annotation of a dataclass field
TAGS_METADATA_KEY = "tags"

_NONE_TYPE = type(None)

if sys.version_info >= (3, 10):
    _UNION_TYPES = (Union, types.UnionType)
else:
    _UNION_TYPES = (Union,)


class FieldKind(Enum):
    """Closed set of value kinds the engine tells handlers about."""
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STR = "str"
    BYTES = "bytes"
    LIST = "list"
    TUPLE = "tuple"
    SET = "set"
    DICT = "dict"
    STRUCT = "struct"
    ANY = "any"
    OTHER = "other"


_KINDS_BY_TYPE = {
    int: FieldKind.INT,
    float: FieldKind.FLOAT,
    bool: FieldKind.BOOL,
    str: FieldKind.STR,
    bytes: FieldKind.BYTES,
    bytearray: FieldKind.BYTES,
    list: FieldKind.LIST,
    tuple: FieldKind.TUPLE,
    set: FieldKind.SET,
    frozenset: FieldKind.SET,
    dict: FieldKind.DICT,
}


@dataclass(frozen=True)
class _StructInfo:
    fields: Tuple['FieldSpec', ...]
    factory: Optional[Callable[[], Any]]


# Explicitly registered (non-dataclass) structure types
_REGISTRY: Dict[type, _StructInfo] = {}


def unwrap_optional(tp: Any) -> Tuple[Any, bool]:
    """Strip one Optional[...] layer.

    Returns:
        Tuple of (inner type, True if tp was Optional)
    """
    if typing.get_origin(tp) in _UNION_TYPES:
        args = typing.get_args(tp)
        if _NONE_TYPE in args:
            others = tuple(arg for arg in args if arg is not _NONE_TYPE)
            if len(others) == 1:
                return others[0], True
            return tp, True
    return tp, False


def is_struct_type(tp: Any) -> bool:
    """Check if a type has a field table the engine can walk."""
    if not isinstance(tp, type):
        return False
    return tp in _REGISTRY or dataclasses.is_dataclass(tp)


def is_struct(value: Any) -> bool:
    """Check if a value is an instance of a structure type."""
    return not isinstance(value, type) and is_struct_type(type(value))


def kind_of(tp: Any) -> FieldKind:
    if tp is Any:
        return FieldKind.ANY
    if is_struct_type(tp):
        return FieldKind.STRUCT
    origin = typing.get_origin(tp) or tp
    if isinstance(origin, type):
        return _KINDS_BY_TYPE.get(origin, FieldKind.OTHER)
    return FieldKind.OTHER


def type_name(tp: Any) -> str:
    """Readable name of a type for error messages."""
    if isinstance(tp, type) and not typing.get_args(tp):
        return tp.__name__
    return str(tp).replace("typing.", "")


def accepts(tp: Any, value: Any) -> bool:
    """Check that value's type is exactly the declared type.

    Subclasses don't match (a bool is not an int). Unions accept any of
    their members, generic aliases compare against their origin class.
    """
    if tp is Any:
        return True
    if tp is None or tp is _NONE_TYPE:
        return value is None

    origin = typing.get_origin(tp)
    if origin in _UNION_TYPES:
        return any(accepts(arg, value) for arg in typing.get_args(tp))
    if origin is not None:
        tp = origin

    if isinstance(tp, str):
        # Unresolved forward reference
        return type(value).__name__ == tp
    if not isinstance(tp, type):
        return True
    return type(value) is tp


@dataclass(frozen=True)
class FieldSpec:
    """One row of a structure's field table."""

    name: str
    declared_type: Any = Any
    tag: StructTag = dataclasses.field(default_factory=StructTag)
    index: int = 0

    @property
    def is_pointer(self) -> bool:
        """Declared as Optional[...], i.e. may reference nothing."""
        return unwrap_optional(self.declared_type)[1]

    @property
    def type(self) -> Any:
        """Declared type after following one Optional indirection."""
        return unwrap_optional(self.declared_type)[0]

    @property
    def is_struct(self) -> bool:
        return is_struct_type(self.type)

    @property
    def kind(self) -> FieldKind:
        return kind_of(self.type)


def _as_spec(entry: Any, index: int) -> FieldSpec:
    if isinstance(entry, FieldSpec):
        return dataclasses.replace(entry, index=index)
    name, declared_type, *rest = entry
    raw_tag = rest[0] if rest else None
    return FieldSpec(name, declared_type, StructTag(raw_tag), index)


def register_struct(cls: type,
                    fields: Sequence[Union[FieldSpec, Tuple[Any, ...]]],
                    factory: Optional[Callable[[], Any]] = None) -> type:
    """Register a field table for a class that is not a dataclass.

    Args:
        cls: Structure class; its instances must support getattr/setattr
            for every listed field
        fields: FieldSpec entries or (name, type[, tag]) tuples in
            declaration order
        factory: Creates a zero-valued instance (defaults to cls())

    Returns:
        cls, so this can be used right after the class statement

    Example:
        register_struct(Point, [("x", int, {"json": "x"}), ("y", int)])
    """
    if not isinstance(cls, type):
        raise TypeError(f"register_struct expects a class, got {cls!r}")

    specs = tuple(_as_spec(entry, i) for i, entry in enumerate(fields))
    _REGISTRY[cls] = _StructInfo(specs, factory)
    return cls


def unregister_struct(cls: type) -> None:
    _REGISTRY.pop(cls, None)


def _scope_classes(cls: type) -> Dict[str, type]:
    """Classes visible from the body of cls but missing from its module globals.

    Covers classes nested in enclosing classes ("Outer.Inner"), classes the
    fields use as default factories or defaults, and registered structures.
    Classes defined inside a function are only reachable through the last two.
    """
    namespace: Dict[str, type] = {cls.__name__: cls}

    scope: Any = sys.modules.get(cls.__module__)
    for part in cls.__qualname__.split(".")[:-1]:
        scope = getattr(scope, part, None)
        if not isinstance(scope, type):
            break
        namespace[scope.__name__] = scope
        for name, value in vars(scope).items():
            if isinstance(value, type):
                namespace.setdefault(name, value)

    for name, value in vars(cls).items():
        if isinstance(value, type):
            namespace.setdefault(name, value)

    for f in dataclasses.fields(cls):
        if isinstance(f.default_factory, type):
            namespace.setdefault(f.default_factory.__name__, f.default_factory)
        if f.default is not dataclasses.MISSING and is_struct(f.default):
            namespace.setdefault(type(f.default).__name__, type(f.default))

    for registered in _REGISTRY:
        namespace.setdefault(registered.__name__, registered)

    return namespace


def _type_hints(cls: type) -> Dict[str, Any]:
    """Resolve the annotations of a dataclass.

    Falls back to evaluating each field on its own, so one bad annotation
    doesn't hide the others. Annotations that still can't be evaluated are
    returned as they are (strings or ForwardRefs).
    """
    module = sys.modules.get(cls.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    localns = {
        name: value for name, value in _scope_classes(cls).items()
        if name not in globalns
    }

    try:
        return typing.get_type_hints(cls, localns=localns)
    except (NameError, TypeError):
        pass

    hints = {}
    for f in dataclasses.fields(cls):
        annotation = f.type
        if isinstance(annotation, str):
            try:
                annotation = eval(annotation, globalns, localns)
            except (NameError, AttributeError, SyntaxError, TypeError):
                logger.debug("Can't resolve annotation %r of %s.%s",
                             annotation, cls.__qualname__, f.name)
        hints[f.name] = annotation
    return hints


def _is_unresolved(tp: Any) -> bool:
    if isinstance(tp, (str, typing.ForwardRef)):
        return True
    if typing.get_origin(tp) is typing.Literal:
        return False
    return any(_is_unresolved(arg) for arg in typing.get_args(tp))


def fields_of(target: Any) -> List[FieldSpec]:
    """Return the field table of a structure instance or class.

    Raises:
        InvalidTargetError: If target is not a structure, or one of its
            dataclass annotations names a type that can't be resolved
    """
    cls = target if isinstance(target, type) else type(target)

    info = _REGISTRY.get(cls)
    if info is not None:
        return list(info.fields)

    if not dataclasses.is_dataclass(cls):
        raise InvalidTargetError(f"{type_name(cls)} is not a structure")

    hints = _type_hints(cls)
    specs = []
    for i, f in enumerate(dataclasses.fields(cls)):
        declared_type = hints.get(f.name, f.type)
        if _is_unresolved(declared_type):
            raise InvalidTargetError(
                f"Can't resolve type of field {cls.__qualname__}.{f.name}: {declared_type!r}"
            )
        specs.append(FieldSpec(
            name=f.name,
            declared_type=declared_type,
            tag=StructTag(f.metadata.get(TAGS_METADATA_KEY)),
            index=i,
        ))
    return specs


def new_struct(cls: type) -> Any:
    """Create a zero-valued instance of a structure type."""
    info = _REGISTRY.get(cls)
    if info is not None:
        return info.factory() if info.factory else cls()

    hints = _type_hints(cls)
    kwargs = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        if f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING:
            continue
        kwargs[f.name] = zero_value(hints.get(f.name, f.type))
    return cls(**kwargs)


def zero_value(tp: Any) -> Any:
    """Return the zero value of a declared type.

    Optional types are None, structures are new zero-valued instances and
    builtin containers and scalars are their empty constructors.
    """
    if tp is Any:
        return None

    _, optional = unwrap_optional(tp)
    if optional:
        return None

    if is_struct_type(tp):
        return new_struct(tp)

    origin = typing.get_origin(tp) or tp
    if isinstance(origin, type):
        try:
            return origin()
        except TypeError:
            return None
    return None


def tagged(raw: Union[str, Mapping[str, str], None] = None, *,
           default: Any = dataclasses.MISSING,
           default_factory: Any = dataclasses.MISSING,
           **tags: str) -> Any:
    """dataclasses.field() carrying a field annotation.

    Example:
        @dataclass
        class User:
            id: int = tagged(my_json="user_id", default=0)
            name: str = tagged('my_json:"username" log:"key:name"', default="")
    """
    struct_tag = StructTag(raw)
    if tags:
        merged = {name: struct_tag.get(name) for name in struct_tag}
        merged.update(tags)
        struct_tag = StructTag(merged)

    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata={TAGS_METADATA_KEY: struct_tag},
    )
