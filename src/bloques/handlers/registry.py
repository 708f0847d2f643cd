"""Custom block handler registry.

The registry maps block type names to handlers. It implements the
CustomBlockHandler protocol itself, so a whole set of application-defined
block types can be plugged in as ``RenderConfig.custom_block_handler``.

Thread Safety:
BlockHandlerRegistry is immutable after creation. Safe to share.
Use BlockHandlerRegistryBuilder for mutable construction.

Example:
    >>> builder = BlockHandlerRegistryBuilder()
    >>> builder.register(CalloutHandler())
    >>> builder.register(TableHandler())
    >>> registry = builder.build()
    >>> config = RenderConfig(custom_block_handler=registry)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from bloques.nodes import View
from bloques.utils.keys import generate_key
from bloques.utils.logger import get_logger

if TYPE_CHECKING:
    from bloques.blocks import ContentBlock
    from bloques.handlers.protocol import CustomBlockHandler, RenderParams

logger = get_logger(__name__)


class BlockHandlerRegistry:
    """Immutable registry of custom block handlers.

    Blocks whose type has no registered handler render as an empty
    placeholder View. Inside BlockRenderer the dispatcher checks has()
    first and builds that placeholder itself, so a Spacer closing a list
    run is kept.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    names: ClassVar[tuple[str, ...]] = ("*",)

    __slots__ = ("_handlers", "_by_name")

    def __init__(
        self,
        handlers: tuple[CustomBlockHandler, ...],
        by_name: dict[str, CustomBlockHandler],
    ) -> None:
        """Initialize registry with pre-built mappings.

        Use BlockHandlerRegistryBuilder to create instances.
        """
        self._handlers = handlers
        self._by_name = by_name

    def get(self, name: str) -> CustomBlockHandler | None:
        """Get handler for a block type, or None."""
        return self._by_name.get(name)

    def has(self, name: str) -> bool:
        return name in self._by_name

    @property
    def names_registered(self) -> frozenset[str]:
        """All registered block type names."""
        return frozenset(self._by_name.keys())

    @property
    def handlers(self) -> tuple[CustomBlockHandler, ...]:
        return self._handlers

    def render(self, block: ContentBlock, params: RenderParams) -> Any:
        """Delegate to the handler for ``block.type``."""
        handler = self._by_name.get(block.type)
        if handler is None:
            logger.debug("No handler registered for block type %r", block.type)
            return View(key=generate_key(block.key))
        return handler.render(block, params)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return len(self._by_name)


class BlockHandlerRegistryBuilder:
    """Mutable builder for BlockHandlerRegistry.

    Example:
        >>> builder = BlockHandlerRegistryBuilder()
        >>> builder.register(CalloutHandler()).register(TableHandler())
        >>> registry = builder.build()
    """

    __slots__ = ("_handlers", "_by_name")

    def __init__(self) -> None:
        self._handlers: list[CustomBlockHandler] = []
        self._by_name: dict[str, CustomBlockHandler] = {}

    def register(self, handler: CustomBlockHandler) -> BlockHandlerRegistryBuilder:
        """Register a block handler.

        Args:
            handler: Handler implementing CustomBlockHandler

        Returns:
            Self for chaining

        Raises:
            TypeError: If handler has no ``names`` attribute
            ValueError: If a block type is already registered
        """
        if not hasattr(handler, "names"):
            msg = f"Handler {type(handler).__name__} missing 'names' attribute"
            raise TypeError(msg)

        for name in handler.names:
            if name in self._by_name:
                existing = self._by_name[name]
                msg = f"Block type '{name}' already registered by {type(existing).__name__}"
                raise ValueError(msg)
            self._by_name[name] = handler

        self._handlers.append(handler)
        return self

    def register_all(self, handlers: list[CustomBlockHandler]) -> BlockHandlerRegistryBuilder:
        for handler in handlers:
            self.register(handler)
        return self

    def build(self) -> BlockHandlerRegistry:
        """Build immutable registry from registered handlers."""
        return BlockHandlerRegistry(
            handlers=tuple(self._handlers),
            by_name=dict(self._by_name),
        )

    def __len__(self) -> int:
        return len(self._handlers)
