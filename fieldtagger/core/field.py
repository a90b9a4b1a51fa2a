"""Field descriptors handed to tag handlers.

A Field wraps one attribute of a structure for the duration of a single
traversal step. It offers a small, checked API instead of raw
getattr/setattr: set() is the only place the engine mutates user objects.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .field_tag import FieldTag
from .schema import FieldKind, FieldSpec, accepts, type_name
from ..errors import TypeMismatchError


@dataclass
class ParentStruct:
    """Link from the fields of a nested structure to where it lives.

    Handlers only see fields, but sometimes need the enclosing structure
    (value) or the field holding the nested structure (parent_field).
    """
    value: Any
    parent_field: 'Field'


def _is_frozen(owner: Any) -> bool:
    params = getattr(type(owner), "__dataclass_params__", None)
    return bool(params is not None and params.frozen)


class Field:
    """Concrete field of a structure."""

    def __init__(self,
                 owner: Any,
                 spec: FieldSpec,
                 parent_struct: Optional[ParentStruct] = None,
                 settable: bool = True):
        """Initialize a field descriptor.

        Args:
            owner: Structure instance the field belongs to
            spec: Row of the owner's field table
            parent_struct: Link to the enclosing structure when owner is nested
            settable: False for read-only traversals
        """
        self.owner = owner
        self.spec = spec
        self.parent_struct = parent_struct
        self.settable = settable and not _is_frozen(owner)
        self.tag = FieldTag(spec.tag)

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def index(self) -> int:
        return self.spec.index

    @property
    def is_struct(self) -> bool:
        """True if the field holds a nested structure (directly or Optional)."""
        return self.spec.is_struct

    @property
    def kind(self) -> FieldKind:
        return self.spec.kind

    @property
    def declared_type(self) -> Any:
        return self.spec.declared_type

    @property
    def value(self) -> Any:
        return getattr(self.owner, self.spec.name)

    def type(self) -> Any:
        """Declared type, with Optional[...] stripped."""
        return self.spec.type

    def is_ptr(self) -> bool:
        return self.spec.is_pointer

    def get(self) -> Any:
        return self.value

    def get_from_pointer(self) -> Any:
        """Return the value an Optional field refers to (None if unset).

        Raises:
            TypeMismatchError: If the field is not declared Optional
        """
        if not self.is_ptr():
            raise TypeMismatchError(f"Field {self.name} is not a pointer")
        return self.value

    def set(self, value: Any) -> None:
        """Set value to the structure field.

        Raises:
            TypeMismatchError: If the field is read-only or value has
                another type than the declared one
        """
        if not self.settable:
            raise TypeMismatchError(f"Can't set value for field: {self.name}")

        if not accepts(self.spec.declared_type, value):
            raise TypeMismatchError(
                "Incorrect type for field: {}. Your: {}. Actual: {}".format(
                    self.name,
                    type_name(type(value)),
                    type_name(self.spec.declared_type),
                )
            )

        try:
            setattr(self.owner, self.spec.name, value)
        except AttributeError:
            raise TypeMismatchError(f"Can't set value for field: {self.name}") from None

    def __repr__(self) -> str:
        return (f"Field(name={self.name!r}, index={self.index}, "
                f"type={type_name(self.declared_type)}, tag={str(self.tag.struct_tag)!r})")
