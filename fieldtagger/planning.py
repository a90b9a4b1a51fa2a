"""Execution planning for FieldTagger.

The ExecutionPlan validates a TraversalConfig against the tags registered
in a tagger before any field is touched, and decides which tags handle
each field.
"""

from typing import Any, Dict, List, Mapping, Optional

from .config import TraversalConfig
from .core.field_tag import StructTag
from .core.tag import Tag
from .errors import ConfigurationError, UnknownTagError


class ExecutionPlan:
    """Validated execution plan for one In or Out traversal.

    The plan resolves, up front, the set of active tags (in registration
    order) and the tag used for fields without annotation. Failing here
    means the target structure has not been modified.
    """

    def __init__(self, config: TraversalConfig, tags: Mapping[str, Tag]):
        """Create and validate an execution plan.

        Args:
            config: Traversal configuration
            tags: Registered tags by name, in registration order

        Raises:
            ConfigurationError: If config is invalid or no tag is registered
            UnknownTagError: If a requested tag isn't registered
        """
        self.config = config

        config_errors = config.validate()
        if config_errors:
            raise ConfigurationError(
                f"Invalid configuration: {'; '.join(config_errors)}"
            )

        if len(tags) == 0:
            raise ConfigurationError("you must register at least one tag")

        self.active_tags = self._collect_active_tags(tags)
        self.empty_field_tag = self._resolve_empty_field_tag()

    def _collect_active_tags(self, tags: Mapping[str, Tag]) -> Dict[str, Tag]:
        """Use the requested tags, or every registered tag if none requested."""
        if self.config.uses_all_tags:
            return dict(tags)

        for name in self.config.tag_names:
            if name not in tags:
                raise UnknownTagError(
                    f"{name} tag doesn't exists. Check provided arguments please."
                )

        requested = set(self.config.tag_names)
        return {name: tag for name, tag in tags.items() if name in requested}

    def _resolve_empty_field_tag(self) -> Optional[Tag]:
        name = self.config.empty_tag
        if name is None:
            return None

        tag = self.active_tags.get(name)
        if tag is None:
            raise UnknownTagError(f"{name} doesn't exists (empty field parser)")
        return tag

    def handlers_for(self, struct_tag: StructTag) -> List[Tag]:
        """Collect the tags handling a field, in registration order.

        A field without any annotation is handled by the empty-field tag
        alone (if configured). Otherwise every active tag named in the
        annotation applies.
        """
        if struct_tag.is_empty() and self.empty_field_tag is not None:
            return [self.empty_field_tag]

        return [tag for name, tag in self.active_tags.items() if name in struct_tag]

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of execution plan.

        Useful for debugging and logging.
        """
        return {
            'direction': self.config.direction.value,
            'active_tags': list(self.active_tags),
            'empty_field_tag': self.empty_field_tag.name if self.empty_field_tag else None,
        }
