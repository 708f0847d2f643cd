"""Serialization for bloques.

Inbound: map a raw Draft.js-style content state (as produced by
``convertToRaw`` and stored as JSON) onto typed ContentState objects. The
raw data is already structured; this is a field mapping with defaults, not
a parser.

Outbound: dump render nodes to JSON-compatible dicts with a ``_type``
discriminator, for snapshots, debugging and sending trees over the wire.
All output is deterministic (sorted keys).

Example:
    from bloques.serialization import content_state_from_json, to_json

    state = content_state_from_json(raw_json)
    nodes = render_blocks(state)
    print(to_json(nodes, indent=2))

Thread Safety:
    All functions are pure. Safe to call from any thread.

"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import fields
from typing import Any

from bloques.blocks import ContentBlock, ContentState, Entity, EntityRange, StyleRange
from bloques.errors import ContentStateError
from bloques.nodes import Node, Span


def content_state_from_dict(data: Mapping[str, Any]) -> ContentState:
    """Build a ContentState from a raw Draft-style mapping.

    Args:
        data: Mapping with ``blocks`` (list or None) and ``entityMap``.

    Returns:
        Typed ContentState. ``blocks: None`` (or missing) stays None.

    Raises:
        ContentStateError: If the payload or a block is malformed.

    """
    if not isinstance(data, Mapping):
        msg = f"Expected a mapping for content state, got {type(data).__name__}"
        raise ContentStateError(msg)

    entity_map = _entity_map_from_raw(data.get("entityMap", data.get("entity_map")) or {})

    raw_blocks = data.get("blocks")
    if raw_blocks is None:
        return ContentState(blocks=None, entity_map=entity_map)
    if isinstance(raw_blocks, (str, bytes)) or not isinstance(raw_blocks, Iterable):
        msg = f"'blocks' must be a list, got {type(raw_blocks).__name__}"
        raise ContentStateError(msg)

    blocks = tuple(_block_from_raw(raw, index) for index, raw in enumerate(raw_blocks))
    return ContentState(blocks=blocks, entity_map=entity_map)


def content_state_from_json(data: str | bytes) -> ContentState:
    """Deserialize a ContentState from a JSON string.

    Raises:
        ContentStateError: If the JSON is invalid or malformed.

    """
    try:
        raw = json.loads(data)
    except json.JSONDecodeError as e:
        msg = f"Invalid content state JSON: {e}"
        raise ContentStateError(msg) from e
    return content_state_from_dict(raw)


def _entity_map_from_raw(raw: Any) -> dict[str, Entity]:
    if isinstance(raw, list):
        # Some exporters emit the entity map as a list indexed by key
        raw = dict(enumerate(raw))
    if not isinstance(raw, Mapping):
        msg = f"'entityMap' must be a mapping, got {type(raw).__name__}"
        raise ContentStateError(msg)

    entities: dict[str, Entity] = {}
    for key, value in raw.items():
        if isinstance(value, Entity):
            entities[str(key)] = value
            continue
        if not isinstance(value, Mapping):
            msg = f"Entity {key!r} must be a mapping, got {type(value).__name__}"
            raise ContentStateError(msg)
        entities[str(key)] = Entity(
            type=str(value.get("type", "")),
            mutability=str(value.get("mutability", "MUTABLE")),
            data=dict(value.get("data") or {}),
        )
    return entities


def _block_from_raw(raw: Any, index: int) -> ContentBlock:
    if isinstance(raw, ContentBlock):
        return raw
    if not isinstance(raw, Mapping):
        msg = f"expected a mapping, got {type(raw).__name__}"
        raise ContentStateError(msg, index=index)

    for required in ("key", "type"):
        if raw.get(required) is None:
            msg = f"missing required field {required!r}"
            raise ContentStateError(msg, index=index)

    try:
        depth = int(raw.get("depth") or 0)
        style_ranges = tuple(
            StyleRange(offset=int(r["offset"]), length=int(r["length"]), style=str(r["style"]))
            for r in raw.get("inlineStyleRanges") or ()
        )
        entity_ranges = tuple(
            EntityRange(offset=int(r["offset"]), length=int(r["length"]), key=r["key"])
            for r in raw.get("entityRanges") or ()
        )
    except (KeyError, TypeError, ValueError) as e:
        msg = f"malformed block {raw.get('key')!r}: {e}"
        raise ContentStateError(msg, index=index) from e

    if depth < 0:
        msg = f"depth must not be negative, got {depth}"
        raise ContentStateError(msg, index=index)

    return ContentBlock(
        key=str(raw["key"]),
        type=str(raw["type"]),
        text=str(raw.get("text") or ""),
        depth=depth,
        data=dict(raw.get("data") or {}),
        inline_style_ranges=style_ranges,
        entity_ranges=entity_ranges,
    )


# =============================================================================
# Render node output
# =============================================================================


def to_dict(node: Any) -> Any:
    """Convert a render node (or any emitted value) to JSON-compatible data.

    Nodes and spans get a ``_type`` discriminator. Passed-through content
    blocks are dumped as ``_type: "ContentBlock"``. Callables are skipped.

    """
    if isinstance(node, (Node, Span, ContentBlock, Entity, StyleRange, EntityRange)):
        result: dict[str, Any] = {"_type": type(node).__name__}
        for f in fields(node):
            value = getattr(node, f.name)
            if callable(value):
                continue
            result[f.name] = to_dict(value)
        return result
    if isinstance(node, Mapping):
        return {str(k): to_dict(v) for k, v in node.items() if not callable(v)}
    if isinstance(node, (tuple, list)):
        return [to_dict(item) for item in node]
    if isinstance(node, frozenset):
        return sorted(node)
    if node is None or isinstance(node, (str, int, float, bool)):
        return node
    return repr(node)


def to_json(nodes: Iterable[Any] | None, *, indent: int | None = None) -> str:
    """Serialize render output to a JSON string.

    Args:
        nodes: Output of render_blocks (None serializes as ``null``).
        indent: JSON indentation level (None for compact).

    """
    payload = None if nodes is None else [to_dict(node) for node in nodes]
    return json.dumps(payload, sort_keys=True, indent=indent, ensure_ascii=False)


__all__ = [
    "content_state_from_dict",
    "content_state_from_json",
    "to_dict",
    "to_json",
]
