"""Inline span splitting for content blocks.

Draft-style blocks store inline formatting as offset/length ranges over the
block text. Ranges may overlap (BOLD over a part of an ITALIC run) and entity
ranges sit on top of them. split_spans() flattens that into a sequence of
non-overlapping Span objects, each with the full style set covering it.

Example:
    >>> from bloques.blocks import StyleRange
    >>> spans = split_spans("Hello World", (StyleRange(6, 5, "BOLD"),), ())
    >>> [(s.text, sorted(s.styles)) for s in spans]
    [('Hello ', []), ('World', ['BOLD'])]

Thread Safety:
    Pure functions. Safe to call from any thread.

"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from bloques.blocks import Entity, EntityRange, StyleRange, lookup_entity
from bloques.nodes import Span


def _clamp(offset: int, length: int, size: int) -> tuple[int, int] | None:
    """Clamp a range to ``[0, size)``; None if nothing is left."""
    start = max(offset, 0)
    end = min(offset + length, size)
    if length <= 0 or start >= end:
        return None
    return start, end


def split_spans(
    text: str,
    style_ranges: Iterable[StyleRange],
    entity_ranges: Iterable[EntityRange],
    entity_map: Mapping[str, Entity] | None = None,
) -> tuple[Span, ...]:
    """Split block text into styled spans.

    Args:
        text: Block text
        style_ranges: Inline style ranges (may overlap)
        entity_ranges: Entity ranges (later ranges win where they overlap)
        entity_map: Entity lookup for entity range keys

    Returns:
        Spans covering the whole text in order; empty for empty text.
    """
    size = len(text)
    if not size:
        return ()

    styles: list[tuple[int, int, str]] = []
    entities: list[tuple[int, int, Entity | None]] = []
    cuts = {0, size}

    for rng in style_ranges:
        bounds = _clamp(rng.offset, rng.length, size)
        if bounds is None:
            continue
        styles.append((*bounds, rng.style))
        cuts.update(bounds)

    for rng in entity_ranges:
        bounds = _clamp(rng.offset, rng.length, size)
        if bounds is None:
            continue
        entities.append((*bounds, lookup_entity(entity_map, rng.key)))
        cuts.update(bounds)

    boundaries = sorted(cuts)
    spans: list[Span] = []
    for start, end in zip(boundaries, boundaries[1:]):
        active = frozenset(name for s, e, name in styles if s <= start and end <= e)
        entity = None
        for s, e, candidate in entities:
            if s <= start and end <= e:
                entity = candidate

        # Merge with the previous span when nothing changes at this cut
        if spans and spans[-1].styles == active and spans[-1].entity is entity:
            prev = spans.pop()
            spans.append(Span(prev.text + text[start:end], active, entity))
        else:
            spans.append(Span(text[start:end], active, entity))

    return tuple(spans)


__all__ = ["split_spans"]
