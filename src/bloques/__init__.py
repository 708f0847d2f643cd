"""
bloques: render flat rich-text block sequences into structured nodes

Takes a Draft.js-style content state (a flat list of blocks plus an entity
map) and renders it into a tree of typed render nodes, rebuilding the visual
structure the flat form does not encode: list runs are grouped, nested list
levels are numbered independently, and spacers close list runs before other
content.

Quick Start:
    >>> from bloques import render_blocks, render_text
    >>> raw = {
    ...     "blocks": [
    ...         {"key": "a", "type": "ordered-list-item", "text": "first"},
    ...         {"key": "b", "type": "ordered-list-item", "text": "second"},
    ...         {"key": "c", "type": "unstyled", "text": "After the list"},
    ...     ],
    ...     "entityMap": {},
    ... }
    >>> print(render_text(raw), end="")
    1. first
    2. second
    <BLANKLINE>
    After the list

Custom Blocks:
    >>> from bloques import block_handler, BlockHandlerRegistryBuilder
    >>>
    >>> @block_handler("callout")
    ... def render_callout(block, params):
    ...     return Callout(block.text)
    >>>
    >>> registry = BlockHandlerRegistryBuilder().register(render_callout()).build()
    >>> nodes = render_blocks(raw, custom_block_handler=registry)

Installation:
    pip install bloques              # zero runtime dependencies
    pip install bloques[test]        # + pytest, hypothesis
"""

from collections.abc import Mapping
from typing import Any

from bloques.blocks import (
    LIST_BLOCK_TYPES,
    TEXT_BLOCK_TYPES,
    BlockType,
    ContentBlock,
    ContentState,
    Entity,
    EntityRange,
    StyleRange,
)
from bloques.config import (
    RenderConfig,
    get_render_config,
    render_config_context,
    reset_render_config,
    set_render_config,
)
from bloques.counters import ListCounter, ListCounters
from bloques.dispatch import BlockRenderer, RenderContext, render_blocks
from bloques.errors import (
    BloquesError,
    ConfigurationError,
    ContentStateError,
    HandlerError,
    RenderError,
)
from bloques.handlers import (
    AtomicHandler,
    AtomicResult,
    BlockHandlerRegistry,
    BlockHandlerRegistryBuilder,
    CustomBlockHandler,
    RenderParams,
    atomic_handler,
    block_handler,
)
from bloques.inline import split_spans
from bloques.leaves import DefaultLeafRenderer, LeafProps, LeafRenderer, ListMarker
from bloques.nodes import ListIndicator, ListItem, Node, Quote, Spacer, Span, TextBlock, View
from bloques.renderers import HtmlRenderer, NodeRenderer, TextRenderer
from bloques.serialization import (
    content_state_from_dict,
    content_state_from_json,
    to_dict,
    to_json,
)

__version__ = "0.1.0"


def render_html(
    content_state: ContentState | Mapping[str, Any] | None,
    config: RenderConfig | None = None,
    **options: Any,
) -> str:
    """Render a content state straight to HTML.

    Args:
        content_state: ContentState or raw Draft-style mapping
        config: Render configuration (ambient config when None)
        **options: RenderConfig field overrides

    Returns:
        HTML string ("" when there are no blocks)

    Example:
        >>> render_html({"blocks": [{"key": "a", "type": "header-one", "text": "Hi"}]})
        '<div>\\n<h1 data-block-key="a">Hi</h1>\\n</div>\\n'
    """
    return HtmlRenderer().render(render_blocks(content_state, config, **options))


def render_text(
    content_state: ContentState | Mapping[str, Any] | None,
    config: RenderConfig | None = None,
    **options: Any,
) -> str:
    """Render a content state to plain text.

    Args:
        content_state: ContentState or raw Draft-style mapping
        config: Render configuration (ambient config when None)
        **options: RenderConfig field overrides

    Returns:
        Plain text ("" when there are no blocks)
    """
    return TextRenderer().render(render_blocks(content_state, config, **options))


__all__ = [
    # Input model
    "LIST_BLOCK_TYPES",
    "TEXT_BLOCK_TYPES",
    "BlockType",
    "ContentBlock",
    "ContentState",
    "Entity",
    "EntityRange",
    "StyleRange",
    # Rendering
    "BlockRenderer",
    "RenderContext",
    "render_blocks",
    "render_html",
    "render_text",
    # Config
    "RenderConfig",
    "get_render_config",
    "render_config_context",
    "reset_render_config",
    "set_render_config",
    # Counters
    "ListCounter",
    "ListCounters",
    # Nodes
    "ListIndicator",
    "ListItem",
    "Node",
    "Quote",
    "Spacer",
    "Span",
    "TextBlock",
    "View",
    # Leaves
    "DefaultLeafRenderer",
    "LeafProps",
    "LeafRenderer",
    "ListMarker",
    "split_spans",
    # Handlers
    "AtomicHandler",
    "AtomicResult",
    "BlockHandlerRegistry",
    "BlockHandlerRegistryBuilder",
    "CustomBlockHandler",
    "RenderParams",
    "atomic_handler",
    "block_handler",
    # Output renderers
    "HtmlRenderer",
    "NodeRenderer",
    "TextRenderer",
    # Serialization
    "content_state_from_dict",
    "content_state_from_json",
    "to_dict",
    "to_json",
    # Errors
    "BloquesError",
    "ConfigurationError",
    "ContentStateError",
    "HandlerError",
    "RenderError",
    "__version__",
]
