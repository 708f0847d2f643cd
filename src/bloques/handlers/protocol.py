"""Handler protocols for atomic and custom blocks.

Atomic blocks embed non-text objects (images, widgets). Custom blocks are
application-defined types the dispatcher does not know. Both are rendered by
caller-supplied handlers, injected through RenderConfig.

Thread Safety:
Handlers must be stateless. In particular an atomic handler must not touch
list numbering: it reports the block's original list type and the dispatcher
numbers the embed itself. Multiple threads may call the same handler
instance concurrently.

Example:
    >>> class ImageHandler:
    ...     def render(self, block, entity_map):
    ...         entity = entity_map[str(block.entity_ranges[0].key)]
    ...         return AtomicResult(Figure(entity.data["src"]), block.data.get("listType"))
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, NamedTuple, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bloques.blocks import ContentBlock, ContentState, Entity
    from bloques.config import RenderConfig


class AtomicResult(NamedTuple):
    """What an atomic handler returns.

    Attributes:
        node: Rendered embed (opaque to the dispatcher)
        original_type: List type the embed replaced ("unordered-list-item",
            "ordered-list-item") or None
    """

    node: Any
    original_type: str | None = None


@dataclass(frozen=True, slots=True)
class RenderParams:
    """Everything a custom block handler may need.

    Wraps the active configuration together with the content state being
    rendered, so handlers can resolve entities and reuse style overrides.
    """

    config: RenderConfig
    content_state: ContentState

    @property
    def entity_map(self) -> Mapping[str, Entity]:
        return self.content_state.entity_map

    @property
    def custom_styles(self) -> Mapping[str, Mapping[str, Any]]:
        return self.config.custom_styles

    @property
    def navigate(self) -> Any:
        return self.config.navigate


@runtime_checkable
class AtomicHandler(Protocol):
    """Protocol for atomic block renderers."""

    def render(self, block: ContentBlock, entity_map: Mapping[str, Entity]) -> AtomicResult:
        """Render an atomic block.

        Args:
            block: The atomic block
            entity_map: Entity lookup for the content state

        Returns:
            AtomicResult with the embed node and the original list type

        """
        ...


@runtime_checkable
class CustomBlockHandler(Protocol):
    """Protocol for renderers of application-defined block types.

    Attributes:
        names: Block types this handler responds to. Only consulted when the
            handler is registered in a BlockHandlerRegistry.
    """

    names: ClassVar[tuple[str, ...]]

    def render(self, block: ContentBlock, params: RenderParams) -> Any:
        """Render a block; the return value is emitted unmodified."""
        ...
