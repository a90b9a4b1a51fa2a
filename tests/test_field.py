"""Tests for Field descriptors: get, set and structural flags."""

import sys
import unittest
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Union

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from fieldtagger import Field, FieldKind, TypeMismatchError, fields_of


@dataclass(frozen=True)
class FrozenName:
    name: str = ""


@dataclass
class WithId:
    id: int = 0


@dataclass
class WithUsername:
    username: str = ""


@dataclass
class Inner:
    id: int = 0


@dataclass
class Outer:
    foo: Inner = field(default_factory=Inner)


@dataclass
class Mixed:
    email: Optional[str] = None
    profile: Optional[Inner] = None
    tags: List[str] = field(default_factory=list)
    anything: Any = None
    number_or_text: Union[int, str] = 0


def first_field(obj, settable=True) -> Field:
    return Field(obj, fields_of(obj)[0], settable=settable)


def field_named(obj, name) -> Field:
    spec = next(spec for spec in fields_of(obj) if spec.name == name)
    return Field(obj, spec)


class TestFieldSet(unittest.TestCase):
    """Field.set checks settability and exact types."""

    def test_cannot_set_frozen(self):
        obj = FrozenName()
        with self.assertRaises(TypeMismatchError) as ctx:
            first_field(obj).set("foo")
        self.assertEqual(str(ctx.exception), "Can't set value for field: name")
        self.assertEqual(obj.name, "")

    def test_cannot_set_read_only(self):
        obj = WithId()
        with self.assertRaises(TypeMismatchError) as ctx:
            first_field(obj, settable=False).set(1)
        self.assertEqual(str(ctx.exception), "Can't set value for field: id")

    def test_incorrect_type(self):
        obj = WithId()
        with self.assertRaises(TypeMismatchError) as ctx:
            first_field(obj).set("foo")
        self.assertEqual(
            str(ctx.exception),
            "Incorrect type for field: id. Your: str. Actual: int",
        )
        self.assertEqual(obj.id, 0)

    def test_subclass_is_not_exact_type(self):
        with self.assertRaises(TypeMismatchError) as ctx:
            first_field(WithId()).set(True)
        self.assertIn("Your: bool", str(ctx.exception))

    def test_set_int(self):
        obj = WithId()
        self.assertIsNone(first_field(obj).set(1))
        self.assertEqual(obj.id, 1)

    def test_set_str(self):
        obj = WithUsername()
        first_field(obj).set("foo")
        self.assertEqual(obj.username, "foo")

    def test_set_nested_struct(self):
        obj = Outer()
        first_field(obj).set(Inner(id=1))
        self.assertEqual(obj.foo.id, 1)

    def test_optional_accepts_value_and_none(self):
        obj = Mixed()
        email = field_named(obj, "email")
        email.set("foo@example.com")
        self.assertEqual(obj.email, "foo@example.com")
        email.set(None)
        self.assertIsNone(obj.email)

    def test_optional_rejects_other_type(self):
        with self.assertRaises(TypeMismatchError) as ctx:
            field_named(Mixed(), "email").set(1)
        self.assertIn("Incorrect type for field: email. Your: int.", str(ctx.exception))

    def test_generic_compares_origin(self):
        obj = Mixed()
        field_named(obj, "tags").set(["a"])
        self.assertEqual(obj.tags, ["a"])
        with self.assertRaises(TypeMismatchError):
            field_named(obj, "tags").set(("a",))

    def test_any_accepts_everything(self):
        obj = Mixed()
        field_named(obj, "anything").set(object)
        self.assertIs(obj.anything, object)

    def test_union_accepts_members(self):
        obj = Mixed()
        number_or_text = field_named(obj, "number_or_text")
        number_or_text.set("x")
        number_or_text.set(3)
        self.assertEqual(obj.number_or_text, 3)
        with self.assertRaises(TypeMismatchError):
            number_or_text.set(1.5)


class TestFieldFlags(unittest.TestCase):
    """Pointer and structure detection."""

    def test_plain_field(self):
        f = first_field(WithId(id=7))
        self.assertEqual(f.name, "id")
        self.assertEqual(f.index, 0)
        self.assertEqual(f.get(), 7)
        self.assertIs(f.type(), int)
        self.assertIs(f.kind, FieldKind.INT)
        self.assertFalse(f.is_ptr())
        self.assertFalse(f.is_struct)

    def test_value_struct(self):
        f = first_field(Outer())
        self.assertTrue(f.is_struct)
        self.assertFalse(f.is_ptr())
        self.assertIs(f.kind, FieldKind.STRUCT)

    def test_pointer_struct(self):
        obj = Mixed(profile=Inner(id=3))
        f = field_named(obj, "profile")
        self.assertTrue(f.is_ptr())
        self.assertTrue(f.is_struct)
        self.assertIs(f.type(), Inner)
        self.assertEqual(f.get_from_pointer(), Inner(id=3))
        self.assertEqual(f.index, 1)

    def test_pointer_scalar(self):
        f = field_named(Mixed(email="a@b"), "email")
        self.assertTrue(f.is_ptr())
        self.assertFalse(f.is_struct)
        self.assertIs(f.kind, FieldKind.STR)
        self.assertEqual(f.get_from_pointer(), "a@b")

    def test_get_from_pointer_on_non_pointer(self):
        with self.assertRaises(TypeMismatchError):
            first_field(WithId()).get_from_pointer()

    def test_kinds(self):
        kinds = {spec.name: spec.kind for spec in fields_of(Mixed)}
        self.assertEqual(kinds, {
            "email": FieldKind.STR,
            "profile": FieldKind.STRUCT,
            "tags": FieldKind.LIST,
            "anything": FieldKind.ANY,
            "number_or_text": FieldKind.OTHER,
        })


if __name__ == "__main__":
    unittest.main()
