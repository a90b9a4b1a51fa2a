"""Traversal and dispatch engine for FieldTagger.

The tagger keeps the registered tags and walks structures field by field,
calling the handlers of every tag that annotates a field. Nested
structures are walked recursively with a ParentStruct link so their
handlers can see where they live.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from .field import Field, ParentStruct
from .schema import FieldSpec, fields_of, is_struct, new_struct, type_name
from .tag import Tag
from ..config import Direction, TraversalConfig
from ..errors import InvalidTargetError
from ..planning import ExecutionPlan

logger = logging.getLogger(__name__)


class Tagger(ABC):
    """Registry of tags and entry point for In/Out traversals."""

    @abstractmethod
    def add(self, tag: Tag) -> 'Tagger':
        """Add your tag.

            tagger.add(new_tag("test").with_in_handler(handler))
        """
        pass

    @abstractmethod
    def in_(self, data: Any, target: Any, tag_for_empty: str = "", *tags: str) -> None:
        """Fill the structure.

        Args:
            data: Anything the handlers need to fill the structure
                (for example: a JSON document)
            target: Structure instance to fill
            tag_for_empty: Tag handling fields without annotation.
                Empty means such fields are skipped
            *tags: Tags to process. Every registered tag if none given

        Example:
            @dataclass
            class User:
                username: str = tagged(my_json="user", default="")
                id: int = 0

            tagger.in_('{"user": "foo"}', User())         # id is not processed
            tagger.in_('{"user": "foo"}', User(), "foo")  # id is processed by 'foo'
        """
        pass

    @abstractmethod
    def out(self, data: Any, source: Any, tag_for_empty: str = "", *tags: str) -> Any:
        """Project the structure into any data.

        Args:
            data: Initial accumulator shared between field handlers
            source: Structure instance to read
            tag_for_empty: Tag handling fields without annotation.
                Empty means such fields are skipped
            *tags: Tags to process. Every registered tag if none given

        Returns:
            Accumulator returned by the last handler
        """
        pass


class StructTagger(Tagger):
    """Tagger walking dataclasses and registered structure types.

    Tags are dispatched in registration order. Adding a tag whose name is
    already registered replaces the old one and moves it to the end.
    """

    def __init__(self):
        self._tags: Dict[str, Tag] = {}

    @property
    def tags(self) -> Dict[str, Tag]:
        return dict(self._tags)

    def add(self, tag: Tag) -> 'StructTagger':
        if not isinstance(tag, Tag):
            raise TypeError(f"add() expects a Tag, got {type(tag).__name__}")

        if tag.name in self._tags:
            logger.debug("Replacing tag %s", tag.name)
            del self._tags[tag.name]
        self._tags[tag.name] = tag
        return self

    def get(self, name: str) -> Optional[Tag]:
        return self._tags.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tags

    def __len__(self) -> int:
        return len(self._tags)

    def plan(self, config: TraversalConfig) -> ExecutionPlan:
        return ExecutionPlan(config, self._tags)

    def in_(self, data: Any, target: Any, tag_for_empty: str = "", *tags: str) -> None:
        self.execute(TraversalConfig.for_in(tag_for_empty, *tags), data, target)

    def out(self, data: Any, source: Any, tag_for_empty: str = "", *tags: str) -> Any:
        return self.execute(TraversalConfig.for_out(tag_for_empty, *tags), data, source)

    def execute(self, config: TraversalConfig, data: Any, target: Any) -> Any:
        """Run one traversal described by config.

        Returns:
            None for Direction.IN, the final accumulator for Direction.OUT
        """
        plan = self.plan(config)
        specs = self.validate_target(target)
        logger.debug("Starting %s traversal of %s: %s",
                     config.direction.value, type_name(type(target)), plan.get_summary())

        if config.direction is Direction.IN:
            self._in(plan, None, data, target, specs)
            return None
        return self._out(plan, None, data, target, specs)

    def validate_target(self, target: Any) -> List[FieldSpec]:
        """Check the target is a structure instance with at least one field."""
        if target is None:
            raise InvalidTargetError("target cannot be empty")

        if isinstance(target, type):
            raise InvalidTargetError(
                f"target must be a structure instance, got class {type_name(target)}"
            )

        if not is_struct(target):
            raise InvalidTargetError(
                f"target must be a structure, got {type_name(type(target))}"
            )

        specs = fields_of(target)
        if len(specs) == 0:
            raise InvalidTargetError(
                f"target required at least one field ({type_name(type(target))})"
            )
        return specs

    def collect_fields(self,
                       owner: Any,
                       specs: List[FieldSpec],
                       parent_struct: Optional[ParentStruct],
                       direction: Direction) -> List[Field]:
        """Collect all fields of a structure.

        For Direction.IN, nested structure fields holding None get a new
        zero-valued instance so their own fields can be filled. For
        Direction.OUT fields are read-only and nothing is created.
        """
        need_to_set = direction is Direction.IN
        fields = []
        for spec in specs:
            field = Field(owner, spec, parent_struct, settable=need_to_set)
            if need_to_set and field.is_struct and field.settable and field.get() is None:
                field.set(new_struct(field.type()))
            fields.append(field)
        return fields

    def _dispatch(self, plan: ExecutionPlan, owner: Any, specs: List[FieldSpec],
                  parent_struct: Optional[ParentStruct]) -> List[Tuple[Field, List[Tag]]]:
        fields = self.collect_fields(owner, specs, parent_struct, plan.config.direction)
        # Resolve every field's handlers before running any of them
        return [(field, plan.handlers_for(field.spec.tag)) for field in fields]

    def _in(self, plan: ExecutionPlan, parent_struct: Optional[ParentStruct],
            data: Any, owner: Any, specs: List[FieldSpec]) -> None:
        for field, tags in self._dispatch(plan, owner, specs, parent_struct):
            self._call_in_handlers(data, tags, field)

            if field.is_struct:
                nested = field.get()
                if nested is None:
                    continue
                logger.debug("Descending into %s.%s", type_name(type(owner)), field.name)
                self._in(plan, ParentStruct(owner, field), data, nested,
                         self.validate_target(nested))

    def _out(self, plan: ExecutionPlan, parent_struct: Optional[ParentStruct],
             output: Any, owner: Any, specs: List[FieldSpec]) -> Any:
        for field, tags in self._dispatch(plan, owner, specs, parent_struct):
            output = self._call_out_handlers(output, tags, field)

            if field.is_struct:
                nested = field.get()
                if nested is None:
                    continue
                logger.debug("Descending into %s.%s", type_name(type(owner)), field.name)
                output = self._out(plan, ParentStruct(owner, field), output, nested,
                                   self.validate_target(nested))

        return output

    def _call_in_handlers(self, data: Any, tags: List[Tag], field: Field) -> None:
        for tag in tags:
            handle = tag.handler_for(Direction.IN)
            # Each handler sees the annotation parsed with its own grammar
            field.tag.bind(tag.name, tag.symbols)
            handle(data, field, field.owner)

    def _call_out_handlers(self, data: Any, tags: List[Tag], field: Field) -> Any:
        output = data
        for tag in tags:
            handle = tag.handler_for(Direction.OUT)
            field.tag.bind(tag.name, tag.symbols)
            output = handle(output, field, field.owner)
        return output


def new_tagger() -> StructTagger:
    """Create an empty tagger.

        tagger = new_tagger().add(new_tag("my_json").with_in_handler(json_in))
    """
    return StructTagger()
