"""List counter state for one render pass.

Draft-style content has no list containers: a list is just a run of
consecutive ``*-list-item`` blocks with a ``depth``. These counters rebuild
grouping and numbering from that flat sequence.

Numbering:
    Depth-0 items form the outer enumeration (1, 2, 3, ...). A run of
    depth >= 1 items restarts at 1 under each outer item, keyed by the outer
    ordinal at the time the nested run began. Depths 2 and deeper share the
    depth-1 bucket. This applies to ordered lists only: every unordered item
    counts as a top-level item whatever its depth, since bullets carry no
    number and the count only tracks whether the run is open.

Grouping:
    A counter is "open" while its top-level count is positive. Closing an
    open counter zeroes the count and tells the caller to emit a Spacer.
    Child counters are cleared lazily, when the next top-level run starts.

Thread Safety:
    ListCounters is created per render call (inside RenderContext) and never
    shared.

"""

from __future__ import annotations

from dataclasses import dataclass, field

from bloques.blocks import BlockType


@dataclass(slots=True)
class ListCounter:
    """Counter for one list kind.

    Attributes:
        kind: List block type this counter tracks
        count: Top-level items seen in the current run
        child_counters: Nested item counts, keyed by the parent ordinal
    """

    kind: BlockType
    count: int = 0
    child_counters: dict[int, int] = field(default_factory=dict)

    @property
    def is_open(self) -> bool:
        return self.count > 0

    def next_number(self, depth: int) -> int:
        """Advance the counter for an item at ``depth`` and return its number.

        Example:
            >>> counter = ListCounter(BlockType.ORDERED_LIST_ITEM)
            >>> [counter.next_number(d) for d in (0, 1, 1, 0, 1)]
            [1, 1, 2, 2, 1]
        """
        if self.kind is BlockType.UNORDERED_LIST_ITEM:
            self.count += 1
            return self.count

        parent_index = self.count

        # New top-level run: drop nested counts left over from the last one
        if parent_index == 0:
            self.child_counters = {}

        if depth >= 1:
            number = self.child_counters.get(parent_index, 0) + 1
            self.child_counters[parent_index] = number
            return number

        self.count += 1
        return self.count

    def close(self) -> bool:
        """End the current run.

        Returns:
            True if a run was open (the caller should emit a Spacer)
        """
        if self.count > 0:
            self.count = 0
            return True
        return False


@dataclass(slots=True)
class ListCounters:
    """Both list counters for one render pass."""

    unordered: ListCounter = field(
        default_factory=lambda: ListCounter(BlockType.UNORDERED_LIST_ITEM)
    )
    ordered: ListCounter = field(
        default_factory=lambda: ListCounter(BlockType.ORDERED_LIST_ITEM)
    )

    def __getitem__(self, kind: BlockType) -> ListCounter:
        match kind:
            case BlockType.UNORDERED_LIST_ITEM:
                return self.unordered
            case BlockType.ORDERED_LIST_ITEM:
                return self.ordered
            case _:
                raise KeyError(kind)

    def other(self, kind: BlockType) -> ListCounter:
        """Counter for the opposite list kind."""
        if kind == BlockType.ORDERED_LIST_ITEM:
            return self.unordered
        return self.ordered

    def close_all(self) -> bool:
        """End any open run before non-list content.

        Both counts are zeroed; only one kind is open in practice.

        Returns:
            True if either kind had an open run
        """
        was_open = self.unordered.is_open or self.ordered.is_open
        self.unordered.count = 0
        self.ordered.count = 0
        return was_open

    def close_other(self, kind: BlockType) -> bool:
        """End the opposite kind's run before an item of ``kind``.

        Returns:
            True if the opposite kind had an open run
        """
        return self.other(kind).close()

    def next_number(self, kind: BlockType, depth: int) -> int:
        return self[kind].next_number(depth)


__all__ = ["ListCounter", "ListCounters"]
