"""Field annotations and the tag text parser.

A field annotation (StructTag) maps tag names to raw text. Each handler
reads the text stored under its own tag name and splits it with its own
grammar (TagSymbols) into an ordered list of (key, value) pairs.
"""

import re
from typing import Iterator, List, Mapping, Optional, Tuple, Union

from ..config import TagSymbols

ParsedTags = List[Tuple[str, str]]

# Space separated name:"value" pairs
_STRUCT_TAG_PAIR = re.compile(r'([^\s:"]+):"((?:[^"\\]|\\.)*)"')


def parse_tag(raw: str, symbols: TagSymbols) -> ParsedTags:
    """Split raw annotation text into (key, value) pairs.

    A token without the key/value separator becomes (token.lower(), token),
    which lets bare markers such as "-" be looked up by themselves. Parts
    after the second one are discarded. Whitespace is kept as is.

    Args:
        raw: Annotation text, e.g. "key:value;key2:value2"
        symbols: Grammar to split with

    Returns:
        Ordered list of (key, value) tuples with lower-cased keys
    """
    output: ParsedTags = []
    if not raw:
        return output

    tokens = raw.split(symbols.keys_separator) if symbols.keys_separator else [raw]
    for token in tokens:
        exploded = token.split(symbols.key_value) if symbols.key_value else [token]
        if len(exploded) == 1:
            if len(token) == 0:
                continue

            output.append((token.lower(), token))
            continue

        output.append((exploded[0].lower(), exploded[1]))

    return output


def _unquote(value: str) -> str:
    return re.sub(r'\\(.)', r'\1', value)


class StructTag:
    """Raw annotation of a single field.

    Accepts either a mapping of tag name to text or a struct-tag string:

        StructTag({"json": "user_id", "log": "key:id"})
        StructTag('json:"user_id" log:"key:id"')
    """

    def __init__(self, raw: Union[str, Mapping[str, str], None] = None):
        if raw is None:
            raw = ""

        if isinstance(raw, StructTag):
            self._raw = raw._raw
            self._tags = dict(raw._tags)
        elif isinstance(raw, str):
            self._raw = raw
            self._tags = {
                name: _unquote(value)
                for name, value in _STRUCT_TAG_PAIR.findall(raw)
            }
        elif isinstance(raw, Mapping):
            self._tags = {str(name): str(value) for name, value in raw.items()}
            self._raw = " ".join(
                '{}:"{}"'.format(name, value.replace('\\', '\\\\').replace('"', '\\"'))
                for name, value in self._tags.items()
            )
        else:
            raise TypeError(f"StructTag expects str or mapping, got {type(raw).__name__}")

    def lookup(self, name: str) -> Tuple[str, bool]:
        """Return (text, found) for a tag name."""
        if name in self._tags:
            return self._tags[name], True
        return "", False

    def get(self, name: str, default: str = "") -> str:
        return self._tags.get(name, default)

    def names(self) -> List[str]:
        return list(self._tags)

    def is_empty(self) -> bool:
        return len(self._raw) == 0

    def __contains__(self, name: object) -> bool:
        return name in self._tags

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __str__(self) -> str:
        return self._raw

    def __repr__(self) -> str:
        return f"StructTag({self._raw!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StructTag):
            return self._raw == other._raw and self._tags == other._tags
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._raw)


class FieldTag:
    """Annotation of a field as seen by the handler currently running.

    The engine binds the tag to a handler right before calling it, so
    parsed_tags always reflect that handler's name and grammar.
    """

    def __init__(self,
                 struct_tag: Union[StructTag, str, Mapping[str, str], None] = None,
                 tag_symbols: Optional[TagSymbols] = None,
                 name: str = ""):
        self.struct_tag = struct_tag if isinstance(struct_tag, StructTag) else StructTag(struct_tag)
        self.tag_symbols = tag_symbols or TagSymbols()
        # Tag name the annotation is currently bound to ("" = whole annotation)
        self.name = name
        self.parsed_tags: ParsedTags = []

    def bind(self, name: str, tag_symbols: TagSymbols) -> 'FieldTag':
        """Rebind to another tag and re-parse under its grammar."""
        self.name = name
        self.tag_symbols = tag_symbols
        self.parsed_tags = self.tags_to_parsed()
        return self

    def to_string(self) -> str:
        if self.name:
            return self.struct_tag.get(self.name)
        return str(self.struct_tag)

    def values(self) -> List[str]:
        """Split the text by the keys separator.

        "foo|bar|baz" with separator '|' gives ["foo", "bar", "baz"]
        """
        if not self.tag_symbols.keys_separator:
            return [self.to_string()]
        return self.to_string().split(self.tag_symbols.keys_separator)

    def tags_to_parsed(self) -> ParsedTags:
        return parse_tag(self.to_string(), self.tag_symbols)

    def is_empty(self) -> bool:
        """True if the field carries no annotation at all."""
        return self.struct_tag.is_empty()

    def exists(self, key: str) -> bool:
        return self.find_index_by_key(key)[1]

    def find_index_by_key(self, key: str) -> Tuple[int, bool]:
        key = key.lower()
        for i, (name, _) in enumerate(self.parsed_tags):
            if name == key:
                return i, True
        return -1, False

    def find_by_key(self, key: str) -> Tuple[str, bool]:
        index, found = self.find_index_by_key(key)
        if not found:
            return "", False
        return self.parsed_tags[index][1], True

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"FieldTag(name={self.name!r}, parsed={self.parsed_tags!r})"
