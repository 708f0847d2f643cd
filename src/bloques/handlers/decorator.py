"""Decorators that turn plain functions into block handlers.

Example (atomic):
    >>> @atomic_handler
    ... def render_embed(block, entity_map):
    ...     return Figure(block.data["src"]), block.data.get("listType")

Example (custom block):
    >>> @block_handler("callout", "warning")
    ... def render_callout(block, params):
    ...     return Callout(block.text)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from bloques.handlers.protocol import AtomicResult

if TYPE_CHECKING:
    from bloques.blocks import ContentBlock, Entity
    from bloques.handlers.protocol import AtomicHandler, CustomBlockHandler, RenderParams

AtomicFunc = Callable[["ContentBlock", "Mapping[str, Entity]"], Any]
BlockFunc = Callable[["ContentBlock", "RenderParams"], Any]


def as_atomic_result(value: Any) -> AtomicResult:
    """Coerce a handler return value (result, pair, or bare node)."""
    if isinstance(value, AtomicResult):
        return value
    if isinstance(value, tuple) and len(value) == 2:
        return AtomicResult(*value)
    return AtomicResult(value, None)


def atomic_handler(func: AtomicFunc) -> type:
    """Wrap ``func(block, entity_map)`` into an AtomicHandler class.

    The function may return an AtomicResult, a ``(node, original_type)``
    pair, or a bare node (no original list type).
    """
    render_func = func

    class GeneratedAtomicHandler:
        def render(self, block: ContentBlock, entity_map: Mapping[str, Entity]) -> AtomicResult:
            return as_atomic_result(render_func(block, entity_map))

    func_name = getattr(render_func, "__name__", "anonymous")
    func_qualname = getattr(render_func, "__qualname__", "anonymous")
    GeneratedAtomicHandler.__name__ = f"{func_name}_atomic_handler"
    GeneratedAtomicHandler.__qualname__ = f"{func_qualname}_atomic_handler"
    return GeneratedAtomicHandler


def block_handler(*names: str) -> Callable[[BlockFunc | type], type]:
    """Decorator to create custom block handlers.

    Works with both functions and classes that define ``render``.

    Args:
        *names: Block types handled (e.g., "callout", "table")

    Example (class):
        @block_handler("table")
        class TableHandler:
            def render(self, block, params): ...
    """
    if not names:
        msg = "At least one block type name must be provided"
        raise ValueError(msg)

    def decorator(func_or_class: BlockFunc | type) -> type:
        if isinstance(func_or_class, type):
            func_or_class.names = names
            return func_or_class

        render_func = func_or_class
        _names = names

        class GeneratedBlockHandler:
            names = _names

            def render(self, block: ContentBlock, params: RenderParams) -> Any:
                return render_func(block, params)

        func_name = getattr(render_func, "__name__", "anonymous")
        func_qualname = getattr(render_func, "__qualname__", "anonymous")
        GeneratedBlockHandler.__name__ = f"{func_name}_block_handler"
        GeneratedBlockHandler.__qualname__ = f"{func_qualname}_block_handler"
        return GeneratedBlockHandler

    return decorator


def as_atomic_handler(handler: Any) -> AtomicHandler | None:
    """Normalise a config value to an AtomicHandler instance.

    Accepts None, an object with ``render``, a handler class, or a plain
    function ``(block, entity_map)``.
    """
    if handler is None:
        return None
    if isinstance(handler, type):
        handler = handler()
    if hasattr(handler, "render"):
        return handler
    return atomic_handler(handler)()


def as_block_handler(handler: Any) -> CustomBlockHandler | None:
    """Normalise a config value to a CustomBlockHandler instance.

    A plain function ``(block, params)`` is wrapped with a catch-all name.
    """
    if handler is None:
        return None
    if isinstance(handler, type):
        handler = handler()
    if hasattr(handler, "render"):
        return handler
    return block_handler("*")(handler)()
