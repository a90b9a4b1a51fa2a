#!/usr/bin/env python3
"""
JSON-like encoder/decoder built on FieldTagger.

This example demonstrates:
- One tag ("my_json") with both In and Out handlers
- Nested structures, plain and Optional, addressed through ParentStruct
- Out followed by In reproducing the original values
"""

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from fieldtagger import Field, HandlerError, new_tag, new_tagger, tagged

TAG_NAME = "my_json"


@dataclass
class Profile:
    email: Optional[str] = tagged(my_json="email", default=None)


@dataclass
class User:
    id: int = tagged(my_json="user_id", default=0)
    username: Optional[str] = tagged(my_json="username", default=None)
    profile: Profile = tagged(my_json="profile", default_factory=Profile)
    profile2: Optional[Profile] = tagged(my_json="profile2", default=None)


def json_key(field: Field) -> str:
    values = field.tag.values()
    if len(values) != 1:
        raise HandlerError(f"too many values for tag on field {field.name}")
    return values[0]


def json_path(field: Field) -> List[str]:
    """Keys leading to the field, outermost first."""
    keys = [json_key(field)]
    parent = field.parent_struct
    while parent is not None:
        parent_field = parent.parent_field
        keys.insert(0, parent_field.spec.tag.get(TAG_NAME) or parent_field.name)
        parent = parent_field.parent_struct
    return keys


def my_json_in(data: Dict[str, Any], field: Field, owner: Any) -> None:
    # Nested structures are filled field by field
    if field.is_struct:
        return

    keys = json_path(field)
    node: Any = data
    for key in keys:
        if not isinstance(node, dict) or key not in node:
            if field.is_ptr():
                return
            raise HandlerError(f"Can't find key in json: {'.'.join(keys)}")
        node = node[key]

    field.set(node)


def my_json_out(data: Dict[str, Any], field: Field, owner: Any) -> Dict[str, Any]:
    if field.is_struct:
        return data

    keys = json_path(field)
    node = data
    for key in keys[:-1]:
        node = node.setdefault(key, {})
    node[keys[-1]] = field.get()

    return data


def create_tagger():
    return new_tagger().add(
        new_tag(TAG_NAME)
        .with_in_handler(my_json_in)
        .with_out_handler(my_json_out)
        .with_symbols(";", ",")
    )


def encode(user: User) -> str:
    return json.dumps(create_tagger().out({}, user))


def decode(document: str) -> User:
    user = User()
    create_tagger().in_(json.loads(document), user)
    return user


def main():
    user = User(
        id=1,
        username="foo",
        profile=Profile(email="foo@gmail.com"),
        profile2=Profile(email="bar@gmail.com"),
    )

    document = encode(user)
    print(f"Encoded: {document}")

    decoded = decode('{"user_id": 1, "username": "foo", '
                     '"profile": {"email": "foo@gmail.com"}, "profile2": {"email": "11"}}')
    print(f"Decoded: {decoded}")
    print(f"Round trip equal: {decode(document) == user}")


if __name__ == "__main__":
    print("FieldTagger - Simple JSON Example")
    print("=" * 50)
    main()
