"""Atomic and custom block handlers.

Handlers are the extension points of the dispatcher:
- AtomicHandler renders embedded objects and reports the list type they replaced
- CustomBlockHandler renders application-defined block types
- BlockHandlerRegistry routes several custom types to their own handlers
"""

from bloques.handlers.decorator import (
    as_atomic_handler,
    as_block_handler,
    atomic_handler,
    block_handler,
)
from bloques.handlers.protocol import (
    AtomicHandler,
    AtomicResult,
    CustomBlockHandler,
    RenderParams,
)
from bloques.handlers.registry import BlockHandlerRegistry, BlockHandlerRegistryBuilder

__all__ = [
    "AtomicHandler",
    "AtomicResult",
    "BlockHandlerRegistry",
    "BlockHandlerRegistryBuilder",
    "CustomBlockHandler",
    "RenderParams",
    "as_atomic_handler",
    "as_block_handler",
    "atomic_handler",
    "block_handler",
]
