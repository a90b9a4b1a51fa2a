"""Test fixtures for FieldTagger consumers.

RecordingHandler remembers every call the engine makes, which lets a test
check traversal order, parsed annotations and parent links without
writing a handler of its own.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..config import TagSymbols
from ..core.field import Field
from ..core.tag import Tag


@dataclass
class HandlerCall:
    """Snapshot of one handler invocation."""
    tag: str
    field: str
    parsed_tags: List[Tuple[str, str]]
    parent_field: Optional[str]
    is_struct: bool
    value: Any


@dataclass
class RecordingHandler:
    """Handler usable for both directions that records its calls.

    In direction: if values maps a field name to a value, the field is
    set to it. Out direction: the accumulator is returned unchanged.

    Example:
        recorder = RecordingHandler("json", values={"id": 1})
        tagger.add(make_recording_tag(recorder))
        tagger.in_(None, user)
        assert [c.field for c in recorder.calls] == ["id", "name"]
    """

    tag: str
    values: Dict[str, Any] = field(default_factory=dict)
    calls: List[HandlerCall] = field(default_factory=list)

    def _record(self, field: Field) -> None:
        parent = field.parent_struct.parent_field.name if field.parent_struct else None
        self.calls.append(HandlerCall(
            tag=self.tag,
            field=field.name,
            parsed_tags=list(field.tag.parsed_tags),
            parent_field=parent,
            is_struct=field.is_struct,
            value=field.get(),
        ))

    def handle_in(self, data: Any, field: Field, owner: Any) -> None:
        self._record(field)
        if field.name in self.values:
            field.set(self.values[field.name])

    def handle_out(self, data: Any, field: Field, owner: Any) -> Any:
        self._record(field)
        return data

    @property
    def field_names(self) -> List[str]:
        return [call.field for call in self.calls]

    def reset(self) -> None:
        self.calls.clear()


def make_recording_tag(recorder: RecordingHandler,
                       symbols: Optional[TagSymbols] = None) -> Tag:
    """Create a Tag named after the recorder using it for both directions."""
    tag = Tag(recorder.tag, symbols)
    return tag.with_in_handler(recorder.handle_in).with_out_handler(recorder.handle_out)
