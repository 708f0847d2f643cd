"""Block dispatcher: one pass over a flat block sequence.

Each block is classified by its declared type and routed to a rendering
strategy. List grouping and numbering come from ListCounters, which the
dispatcher consults before emitting every block:

    text / quote / default    close any open run   -> Spacer if one was open
    unordered-list-item       close the ordered run -> Spacer if it was open
    ordered-list-item         close the unordered run
    atomic                    behaves like the list item it replaced, or like
                              text when it replaced nothing

Every block yields exactly one top-level node, so the output is as long as
the input.

Thread Safety:
All per-render state is encapsulated in RenderContext, created fresh for each
render() call. Multiple threads can safely share a single BlockRenderer
instance and call render() concurrently without synchronization.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from bloques.blocks import TEXT_BLOCK_TYPES, BlockType, ContentBlock, ContentState
from bloques.config import RenderConfig, get_render_config
from bloques.counters import ListCounters
from bloques.errors import ConfigurationError, HandlerError
from bloques.handlers.decorator import as_atomic_handler, as_atomic_result, as_block_handler
from bloques.handlers.protocol import RenderParams
from bloques.handlers.registry import BlockHandlerRegistry
from bloques.leaves import DefaultLeafRenderer, LeafProps, ListMarker
from bloques.nodes import ListIndicator, Spacer, View
from bloques.serialization import content_state_from_dict
from bloques.utils.keys import generate_key
from bloques.utils.logger import get_logger

logger = get_logger(__name__)

# Marks a handler call that raised and was degraded to a placeholder
_FAILED = object()


@dataclass(slots=True)
class RenderContext:
    """Per-render mutable state.

    Created fresh for each render() call and dropped when it returns, so
    numbering never leaks between calls.
    """

    content_state: ContentState
    params: RenderParams
    counters: ListCounters = field(default_factory=ListCounters)
    separators: int = 0


class BlockRenderer:
    """Render a content state into a tuple of render nodes.

    Usage:
        >>> renderer = BlockRenderer(RenderConfig(ordered_list_separator=")"))
        >>> nodes = renderer.render(content_state)
        >>> len(nodes) == len(content_state.blocks)
        True

    Thread Safety:
        Holds only immutable configuration. Each render() call creates an
        independent RenderContext.
    """

    __slots__ = ("_config", "_leaves", "_atomic", "_custom")

    def __init__(self, config: RenderConfig | None = None) -> None:
        """Initialize renderer.

        Args:
            config: Render configuration; the ambient config when None
        """
        self._config = config if config is not None else get_render_config()
        self._leaves = self._config.leaf_renderer or DefaultLeafRenderer()
        self._atomic = as_atomic_handler(self._config.atomic_handler)
        self._custom = as_block_handler(self._config.custom_block_handler)

    @property
    def config(self) -> RenderConfig:
        return self._config

    def render(self, content_state: ContentState | Mapping[str, Any] | None) -> tuple[Any, ...] | None:
        """Render all blocks.

        Args:
            content_state: ContentState, or a raw Draft-style mapping

        Returns:
            One node per block, or None when there are no blocks
        """
        if isinstance(content_state, Mapping):
            content_state = content_state_from_dict(content_state)
        if content_state is None or content_state.blocks is None:
            return None

        ctx = RenderContext(
            content_state=content_state,
            params=RenderParams(config=self._config, content_state=content_state),
        )
        nodes = tuple(self._render_block(block, ctx) for block in content_state.blocks)

        logger.debug(
            "Rendered %d blocks (%d list separators)", len(nodes), ctx.separators
        )
        return nodes

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _render_block(self, block: ContentBlock, ctx: RenderContext) -> Any:
        kind = block.kind
        match kind:
            case BlockType.BLOCKQUOTE:
                spacer = self._close_runs(ctx)
                return self._wrap(block, spacer, self._leaves.render_quote(block, self._leaf_props(block, ctx)))
            case BlockType.ATOMIC:
                return self._render_atomic(block, ctx)
            case BlockType.UNORDERED_LIST_ITEM | BlockType.ORDERED_LIST_ITEM:
                return self._render_list_item(block, kind, ctx)
            case _ if kind in TEXT_BLOCK_TYPES:
                spacer = self._close_runs(ctx)
                return self._wrap(block, spacer, self._leaves.render_text(block, self._leaf_props(block, ctx)))
            case _:
                return self._render_custom(block, ctx)

    def _render_list_item(self, block: ContentBlock, kind: BlockType, ctx: RenderContext) -> View:
        number = ctx.counters.next_number(kind, block.depth)
        spacer = self._spacer(ctx) if ctx.counters.close_other(kind) else None
        marker = ListMarker(
            ordered=kind is BlockType.ORDERED_LIST_ITEM,
            number=number,
            text=self._marker_text(kind, number),
            depth_margin=self._config.depth_margin,
        )
        leaf = self._leaves.render_list_item(block, self._leaf_props(block, ctx), marker)
        return self._wrap(block, spacer, leaf)

    def _render_atomic(self, block: ContentBlock, ctx: RenderContext) -> Any:
        """Render an embed, numbered like the list item it replaced.

        Without a handler the raw block is returned unchanged.
        """
        if self._atomic is None:
            if self._config.strict_atomic:
                msg = f"atomic block {block.key!r} found but no atomic_handler is configured"
                raise ConfigurationError(msg)
            logger.debug("Atomic block %r passed through: no atomic handler", block.key)
            return block

        entity_map = ctx.content_state.entity_map
        result = self._guarded(block, lambda: self._atomic.render(block, entity_map))
        if result is _FAILED:
            return self._wrap(block, self._close_runs(ctx), None)
        result = as_atomic_result(result)

        kind = BlockType.parse(result.original_type)
        indicator = None
        if kind is not None and kind.is_list:
            spacer = self._spacer(ctx) if ctx.counters.close_other(kind) else None
            number = ctx.counters.next_number(kind, block.depth)
            ordered = kind is BlockType.ORDERED_LIST_ITEM
            indicator = ListIndicator(
                key=generate_key(block.key),
                ordered=ordered,
                marker=self._marker_text(kind, number),
                number=number,
                style=self._config.style(
                    "ordered_list_item_number" if ordered else "unordered_list_item_bullet"
                ),
            )
        else:
            spacer = self._close_runs(ctx)

        row = View(
            key=generate_key(block.key),
            children=tuple(child for child in (indicator, result.node) if child is not None),
            style={"align_items": "center"},
            direction="row",
        )
        if spacer is None:
            return row
        return View(key=generate_key(block.key), children=(spacer, row))

    def _render_custom(self, block: ContentBlock, ctx: RenderContext) -> Any:
        """Delegate an unrecognized block, or emit an empty placeholder."""
        spacer = self._close_runs(ctx)
        unhandled = self._custom is None or (
            isinstance(self._custom, BlockHandlerRegistry) and not self._custom.has(block.type)
        )
        if unhandled:
            logger.debug("No handler for block type %r; rendering placeholder", block.type)
            return self._wrap(block, spacer, None)

        result = self._guarded(block, lambda: self._custom.render(block, ctx.params))
        if result is _FAILED:
            return self._wrap(block, spacer, None)
        return result

    # =========================================================================
    # Helpers
    # =========================================================================

    def _close_runs(self, ctx: RenderContext) -> Spacer | None:
        """Close any open list run; Spacer if one was open."""
        return self._spacer(ctx) if ctx.counters.close_all() else None

    def _spacer(self, ctx: RenderContext) -> Spacer:
        ctx.separators += 1
        return Spacer(key=generate_key(), style=self._config.style("view_after_list"))

    def _marker_text(self, kind: BlockType, number: int) -> str:
        if kind is BlockType.ORDERED_LIST_ITEM:
            return f"{number}{self._config.ordered_list_separator}"
        return self._config.unordered_list_bullet

    def _leaf_props(self, block: ContentBlock, ctx: RenderContext) -> LeafProps:
        return LeafProps(
            entity_map=ctx.content_state.entity_map,
            custom_styles=self._config.custom_styles,
            navigate=self._config.navigate,
            text_props={**self._config.text_props, "block_key": block.key},
        )

    @staticmethod
    def _wrap(block: ContentBlock, spacer: Spacer | None, content: Any) -> View:
        children = tuple(child for child in (spacer, content) if child is not None)
        return View(key=generate_key(block.key), children=children)

    def _guarded(self, block: ContentBlock, call: Callable[[], Any]) -> Any:
        """Run a handler call, isolating failures to this block."""
        try:
            return call()
        except Exception as e:
            if self._config.strict_handlers:
                raise HandlerError(block.key, block.type, str(e)) from e
            logger.warning(
                "Handler for %r block %r failed; rendering placeholder",
                block.type,
                block.key,
                exc_info=True,
            )
            return _FAILED


def render_blocks(
    content_state: ContentState | Mapping[str, Any] | None,
    config: RenderConfig | None = None,
    **options: Any,
) -> tuple[Any, ...] | None:
    """Render a content state into render nodes.

    Args:
        content_state: ContentState or raw Draft-style mapping
        config: Render configuration (ambient config when None)
        **options: RenderConfig field overrides, e.g. ``depth_margin=12``

    Returns:
        One node per block, or None when ``blocks`` is None

    Example:
        >>> nodes = render_blocks(state, ordered_list_separator=")")
    """
    base = config if config is not None else get_render_config()
    if options:
        base = replace(base, **options)
    return BlockRenderer(base).render(content_state)


__all__ = ["BlockRenderer", "RenderContext", "render_blocks"]
