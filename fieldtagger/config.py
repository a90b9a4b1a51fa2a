"""Configuration system for FieldTagger.

This module defines how users describe a tag grammar and what a single
traversal should process: its direction, the tags it may use and the
fallback tag for fields without any annotation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, List


class Direction(Enum):
    """Which way data flows during a traversal."""
    IN = "in"      # Populate the structure from external data
    OUT = "out"    # Project the structure into external data


@dataclass(frozen=True)
class TagSymbols:
    """Grammar used to split a field annotation into (key, value) pairs.

    Example:
        TagSymbols(":", "|") parses "key:value|key2:value2"
    """

    key_value: str = ":"        # key:value (: - symbol)
    keys_separator: str = ";"   # key;key2 (; - symbol)

    def validate(self) -> List[str]:
        """Validate the grammar.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if not isinstance(self.key_value, str):
            errors.append("key_value must be a string")
        if not isinstance(self.keys_separator, str):
            errors.append("keys_separator must be a string")
        return errors


@dataclass
class TraversalConfig:
    """Complete configuration for one In or Out traversal.

    The ExecutionPlan validates this configuration against the tags
    registered in a tagger before any field is touched.
    """

    direction: Direction = Direction.IN

    # Tag applied to fields without annotation. Empty means "do nothing".
    tag_for_empty: str = ""

    # Tags allowed for this traversal. Empty means every registered tag.
    tag_names: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def for_in(cls, tag_for_empty: str = "", *tag_names: str) -> 'TraversalConfig':
        """Create config for populating a structure."""
        return cls(Direction.IN, tag_for_empty, tuple(tag_names))

    @classmethod
    def for_out(cls, tag_for_empty: str = "", *tag_names: str) -> 'TraversalConfig':
        """Create config for projecting a structure."""
        return cls(Direction.OUT, tag_for_empty, tuple(tag_names))

    @property
    def uses_all_tags(self) -> bool:
        return len(self.tag_names) == 0

    @property
    def empty_tag(self) -> Optional[str]:
        return self.tag_for_empty or None

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not isinstance(self.direction, Direction):
            errors.append(f"direction must be a Direction, got {self.direction!r}")

        if not isinstance(self.tag_for_empty, str):
            errors.append("tag_for_empty must be a string")

        for name in self.tag_names:
            if not isinstance(name, str) or not name:
                errors.append(f"tag names must be non-empty strings, got {name!r}")

        return errors
