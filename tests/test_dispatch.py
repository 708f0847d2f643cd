"""Tests for the block dispatcher.

Covers grouping, numbering and separator placement for flat block
sequences, plus the atomic and custom block extension points.
"""

from __future__ import annotations

import logging
from typing import Any

import pytest

from bloques import (
    AtomicResult,
    BlockHandlerRegistryBuilder,
    BlockRenderer,
    ConfigurationError,
    ContentBlock,
    ContentState,
    Entity,
    HandlerError,
    ListIndicator,
    ListItem,
    Node,
    Quote,
    RenderConfig,
    Spacer,
    TextBlock,
    View,
    block_handler,
    render_blocks,
    render_config_context,
)

OL = "ordered-list-item"
UL = "unordered-list-item"


def _block(key: str, block_type: str = "unstyled", depth: int = 0, **kwargs: Any) -> ContentBlock:
    kwargs.setdefault("text", f"text {key}")
    return ContentBlock(key=key, type=block_type, depth=depth, **kwargs)


def _state(*blocks: ContentBlock, entity_map: dict[str, Entity] | None = None) -> ContentState:
    return ContentState(blocks=blocks, entity_map=entity_map or {})


def _content(node: View) -> Any:
    """Content node of a wrapping View (the child after any Spacer)."""
    return node.children[-1]


def _spacers(node: View) -> int:
    return sum(isinstance(child, Spacer) for child in node.children)


def _row(node: View) -> View:
    """Row View of an atomic embed, with or without a leading Spacer."""
    return node if node.direction == "row" else node.children[-1]


def _keys(nodes: Any) -> list[str]:
    keys: list[str] = []

    def walk(node: Any) -> None:
        if isinstance(node, Node):
            keys.append(node.key)
        if isinstance(node, View):
            for child in node.children:
                walk(child)

    for node in nodes:
        walk(node)
    return keys


def _embed(block: ContentBlock, entity_map: Any) -> AtomicResult:
    """Atomic handler reporting the list type stored on the block."""
    return AtomicResult(f"embed:{block.key}", block.data.get("listType"))


class TestEmptyInput:
    """No blocks is a valid state, not an error."""

    def test_none_content_state(self) -> None:
        assert render_blocks(None) is None

    def test_content_state_without_blocks(self) -> None:
        assert render_blocks(ContentState(blocks=None)) is None

    def test_raw_mapping_without_blocks(self) -> None:
        assert render_blocks({"blocks": None, "entityMap": {}}) is None

    def test_empty_block_list(self) -> None:
        assert render_blocks(_state()) == ()


class TestOutputShape:
    """One node per input block."""

    def test_length_matches_input(self) -> None:
        state = _state(
            _block("a", "header-one"),
            _block("b", OL),
            _block("c", UL),
            _block("d", "atomic"),
            _block("e", "blockquote"),
            _block("f", "callout"),
            _block("g", "code-block"),
        )
        nodes = render_blocks(state)
        assert nodes is not None
        assert len(nodes) == 7

    def test_text_block_is_wrapped_in_view(self) -> None:
        (node,) = render_blocks(_state(_block("a", "paragraph", text="Hello")))
        assert isinstance(node, View)
        assert node.direction == "column"
        assert len(node.children) == 1
        leaf = _content(node)
        assert isinstance(leaf, TextBlock)
        assert leaf.block_type == "paragraph"
        assert leaf.text == "Hello"

    def test_quote_leaf(self) -> None:
        (node,) = render_blocks(_state(_block("q", "blockquote", text="Said")))
        assert isinstance(_content(node), Quote)
        assert _content(node).text == "Said"

    def test_raw_mapping_input(self) -> None:
        raw = {
            "blocks": [
                {"key": "a", "type": OL, "text": "one"},
                {"key": "b", "type": OL, "text": "two"},
            ],
            "entityMap": {},
        }
        nodes = render_blocks(raw)
        assert [_content(n).marker for n in nodes] == ["1.", "2."]


class TestOrderedNumbering:
    """Ordered list numbering, top level and nested."""

    def test_top_level_run_numbers_from_one(self) -> None:
        nodes = render_blocks(_state(*(_block(str(i), OL) for i in range(4))))
        assert [_content(n).number for n in nodes] == [1, 2, 3, 4]
        assert [_content(n).marker for n in nodes] == ["1.", "2.", "3.", "4."]

    def test_nested_items_number_under_each_parent(self) -> None:
        depths = [0, 1, 1, 0, 1]
        nodes = render_blocks(_state(*(_block(f"b{i}", OL, d) for i, d in enumerate(depths))))
        assert [_content(n).number for n in nodes] == [1, 1, 2, 2, 1]
        assert [_content(n).depth for n in nodes] == depths

    def test_custom_separator(self) -> None:
        nodes = render_blocks(_state(_block("a", OL), _block("b", OL)), ordered_list_separator=")")
        assert [_content(n).marker for n in nodes] == ["1)", "2)"]

    def test_numbering_restarts_after_interruption(self) -> None:
        nodes = render_blocks(_state(_block("a", OL), _block("b", OL), _block("p"), _block("c", OL)))
        assert _content(nodes[1]).number == 2
        assert _content(nodes[3]).number == 1

    def test_unordered_items_use_bullet(self) -> None:
        nodes = render_blocks(_state(_block("a", UL), _block("b", UL, 1)), unordered_list_bullet="-")
        items = [_content(n) for n in nodes]
        assert all(isinstance(item, ListItem) for item in items)
        assert [item.marker for item in items] == ["-", "-"]
        assert not any(item.ordered for item in items)


class TestSeparators:
    """Spacer placement when list runs close."""

    def test_switching_list_kind_emits_one_spacer(self) -> None:
        nodes = render_blocks(
            _state(_block("a", UL), _block("b", UL), _block("c", OL), _block("d", OL))
        )
        assert [_spacers(n) for n in nodes] == [0, 0, 1, 0]
        assert [_content(n).number for n in nodes[2:]] == [1, 2]

    def test_ordered_then_unordered(self) -> None:
        nodes = render_blocks(_state(_block("a", OL), _block("b", UL)))
        assert [_spacers(n) for n in nodes] == [0, 1]

    def test_text_after_list_gets_spacer(self) -> None:
        nodes = render_blocks(_state(_block("a", OL), _block("b", OL, 1), _block("p")))
        assert [_spacers(n) for n in nodes] == [0, 0, 1]
        assert isinstance(nodes[2].children[0], Spacer)
        assert isinstance(nodes[2].children[1], TextBlock)

    def test_text_after_text_has_no_spacer(self) -> None:
        nodes = render_blocks(_state(_block("a"), _block("b", "header-two"), _block("c", "code-block")))
        assert [_spacers(n) for n in nodes] == [0, 0, 0]

    def test_quote_after_list_gets_spacer(self) -> None:
        nodes = render_blocks(_state(_block("a", UL), _block("q", "blockquote")))
        assert _spacers(nodes[1]) == 1

    def test_only_one_spacer_per_transition(self) -> None:
        nodes = render_blocks(_state(_block("a", OL), _block("p1"), _block("p2")))
        assert [_spacers(n) for n in nodes] == [0, 1, 0]

    def test_nested_only_ordered_run_is_not_open(self) -> None:
        """Only depth-0 ordered items open an ordered run."""
        nodes = render_blocks(_state(_block("a", OL, 1), _block("p")))
        assert _content(nodes[0]).number == 1
        assert _spacers(nodes[1]) == 0

    def test_nested_unordered_run_is_open(self) -> None:
        """Bullets open the run at any depth."""
        nodes = render_blocks(_state(_block("a", UL, 1), _block("p")))
        assert _spacers(nodes[1]) == 1
        assert isinstance(nodes[1].children[0], Spacer)

    def test_spacer_uses_view_after_list_style(self) -> None:
        styles = {"view_after_list": {"height": 12}}
        nodes = render_blocks(_state(_block("a", OL), _block("p")), custom_styles=styles)
        spacer = nodes[1].children[0]
        assert isinstance(spacer, Spacer)
        assert spacer.style == {"height": 12}


class TestFreshState:
    """Counters never leak between render calls."""

    def test_same_renderer_twice(self) -> None:
        renderer = BlockRenderer()
        state = _state(_block("a", OL), _block("b", OL))
        first = renderer.render(state)
        second = renderer.render(state)
        assert [_content(n).number for n in first] == [1, 2]
        assert [_content(n).number for n in second] == [1, 2]

    def test_open_run_does_not_carry_into_next_call(self) -> None:
        renderer = BlockRenderer()
        renderer.render(_state(_block("a", UL), _block("b", UL)))
        (node,) = renderer.render(_state(_block("c", OL)))
        assert _content(node).number == 1
        assert _spacers(node) == 0


class TestAtomicBlocks:
    """Atomic embeds and list continuity."""

    def test_passthrough_without_handler(self) -> None:
        block = _block("img", "atomic")
        (node,) = render_blocks(_state(block))
        assert node is block

    def test_strict_atomic_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="atomic_handler"):
            render_blocks(_state(_block("img", "atomic")), strict_atomic=True)

    def test_embed_continues_ordered_numbering(self) -> None:
        state = _state(
            _block("a", OL),
            _block("img", "atomic", data={"listType": OL}),
            _block("b", OL),
        )
        nodes = render_blocks(state, atomic_handler=_embed)

        row = nodes[1]
        assert row.direction == "row"
        indicator, embed = row.children
        assert isinstance(indicator, ListIndicator)
        assert indicator.ordered
        assert indicator.number == 2
        assert indicator.marker == "2."
        assert embed == "embed:img"

        assert _content(nodes[2]).number == 3
        assert [_spacers(n) for n in (nodes[0], nodes[2])] == [0, 0]

    def test_embed_of_other_list_kind_closes_run(self) -> None:
        state = _state(
            _block("a", OL),
            _block("img", "atomic", data={"listType": UL}),
        )
        node = render_blocks(state, atomic_handler=_embed)[1]

        assert node.direction == "column"
        spacer, row = node.children
        assert isinstance(spacer, Spacer)
        assert row.direction == "row"
        assert row.children[0].marker == "•"

    def test_embed_without_list_type_closes_runs(self) -> None:
        state = _state(_block("a", UL), _block("img", "atomic"), _block("b", UL))
        nodes = render_blocks(state, atomic_handler=_embed)

        assert _spacers(nodes[1]) == 1
        assert _row(nodes[1]).children == ("embed:img",)
        assert _content(nodes[2]).number == 1

    def test_nested_unordered_embed_opens_run(self) -> None:
        state = _state(
            _block("img", "atomic", depth=1, data={"listType": UL}),
            _block("p"),
        )
        nodes = render_blocks(state, atomic_handler=_embed)
        assert _spacers(nodes[1]) == 1

    def test_embed_outside_list_has_no_spacer(self) -> None:
        (node,) = render_blocks(_state(_block("img", "atomic")), atomic_handler=_embed)
        assert node.direction == "row"
        assert node.style == {"align_items": "center"}
        assert node.children == ("embed:img",)

    def test_unordered_run_interrupted_by_embed_then_deep_ordered_item(self) -> None:
        state = _state(
            _block("a", UL),
            _block("img", "atomic"),
            _block("b", OL, 2),
        )
        nodes = render_blocks(state, atomic_handler=_embed)

        assert _content(nodes[0]).marker == "•"
        assert _spacers(nodes[1]) == 1
        assert _content(nodes[2]).number == 1
        assert _content(nodes[2]).marker == "1."
        assert _spacers(nodes[2]) == 0

    def test_handler_accepts_bare_node(self) -> None:
        (node,) = render_blocks(
            _state(_block("img", "atomic")),
            atomic_handler=lambda block, entity_map: "figure",
        )
        assert node.children == ("figure",)

    def test_handler_receives_entity_map(self) -> None:
        seen: list[Any] = []

        def handler(block: ContentBlock, entity_map: Any) -> AtomicResult:
            seen.append(entity_map)
            return AtomicResult(entity_map["0"].data["src"])

        entities = {"0": Entity("IMAGE", "IMMUTABLE", {"src": "cat.png"})}
        (node,) = render_blocks(_state(_block("img", "atomic"), entity_map=entities), atomic_handler=handler)
        assert seen == [entities]
        assert node.children == ("cat.png",)

    def test_handler_class_is_instantiated(self) -> None:
        class EmbedHandler:
            def render(self, block: ContentBlock, entity_map: Any) -> AtomicResult:
                return AtomicResult("embed", OL)

        nodes = render_blocks(
            _state(_block("a", "atomic"), _block("b", "atomic")),
            atomic_handler=EmbedHandler,
        )
        assert [n.children[0].number for n in nodes] == [1, 2]


class TestCustomBlocks:
    """Unrecognized block types."""

    def test_placeholder_without_handler(self) -> None:
        (node,) = render_blocks(_state(_block("x", "callout")))
        assert isinstance(node, View)
        assert node.children == ()
        assert node.key.startswith("x-")

    def test_placeholder_after_list_holds_spacer(self) -> None:
        nodes = render_blocks(_state(_block("a", OL), _block("x", "callout")))
        assert len(nodes[1].children) == 1
        assert isinstance(nodes[1].children[0], Spacer)

    def test_handler_result_is_returned_unmodified(self) -> None:
        sentinel = object()
        (node,) = render_blocks(
            _state(_block("x", "callout")),
            custom_block_handler=lambda block, params: sentinel,
        )
        assert node is sentinel

    def test_handler_receives_params(self) -> None:
        seen: list[Any] = []
        entities = {"1": Entity("LINK", data={"url": "https://example.com"})}
        state = _state(_block("x", "callout"), entity_map=entities)
        config = RenderConfig(custom_block_handler=lambda block, params: seen.append(params))

        render_blocks(state, config)

        (params,) = seen
        assert params.config is config
        assert params.content_state is state
        assert params.entity_map is entities

    def test_custom_block_resets_list_numbering(self) -> None:
        state = _state(_block("a", OL), _block("x", "callout"), _block("b", OL))
        nodes = render_blocks(state, custom_block_handler=lambda block, params: "custom")
        assert nodes[1] == "custom"
        assert _content(nodes[2]).number == 1
        assert _spacers(nodes[2]) == 0

    def test_registry_routes_by_type(self) -> None:
        @block_handler("callout")
        def callout(block: ContentBlock, params: Any) -> str:
            return f"callout:{block.text}"

        @block_handler("divider", "rule")
        def divider(block: ContentBlock, params: Any) -> str:
            return "---"

        registry = BlockHandlerRegistryBuilder().register(callout()).register(divider()).build()
        nodes = render_blocks(
            _state(_block("a", "callout", text="Hi"), _block("b", "rule"), _block("c", "table")),
            custom_block_handler=registry,
        )
        assert nodes[0] == "callout:Hi"
        assert nodes[1] == "---"
        assert isinstance(nodes[2], View)
        assert nodes[2].children == ()


    def test_registry_miss_after_list_keeps_spacer(self) -> None:
        @block_handler("callout")
        def callout(block: ContentBlock, params: Any) -> str:
            return "callout"

        registry = BlockHandlerRegistryBuilder().register(callout()).build()
        nodes = render_blocks(
            _state(_block("a", OL), _block("t", "table")),
            custom_block_handler=registry,
        )
        assert isinstance(nodes[1], View)
        assert [type(child) for child in nodes[1].children] == [Spacer]


class TestHandlerFailures:
    """Handler exceptions are isolated to their block."""

    @staticmethod
    def _boom(*args: Any) -> Any:
        msg = "boom"
        raise RuntimeError(msg)

    def test_failing_custom_handler_renders_placeholder(self, caplog: pytest.LogCaptureFixture) -> None:
        state = _state(_block("x", "callout"), _block("p", text="still here"))
        with caplog.at_level(logging.WARNING, logger="bloques"):
            nodes = render_blocks(state, custom_block_handler=self._boom)

        assert isinstance(nodes[0], View)
        assert nodes[0].children == ()
        assert _content(nodes[1]).text == "still here"
        assert "callout" in caplog.text

    def test_failing_atomic_handler_renders_placeholder(self) -> None:
        nodes = render_blocks(_state(_block("a", OL), _block("img", "atomic")), atomic_handler=self._boom)
        assert isinstance(nodes[1], View)
        assert [type(child) for child in nodes[1].children] == [Spacer]

    def test_strict_handlers_raise(self) -> None:
        with pytest.raises(HandlerError, match="callout") as exc_info:
            render_blocks(_state(_block("x", "callout")), custom_block_handler=self._boom, strict_handlers=True)
        assert exc_info.value.block_key == "x"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_strict_handlers_atomic(self) -> None:
        with pytest.raises(HandlerError) as exc_info:
            render_blocks(_state(_block("img", "atomic")), atomic_handler=self._boom, strict_handlers=True)
        assert exc_info.value.block_type == "atomic"


class TestLeafProps:
    """Props the dispatcher hands to leaves."""

    def test_text_props_include_block_key(self) -> None:
        (node,) = render_blocks(_state(_block("a")), text_props={"selectable": True})
        assert _content(node).text_props == {"selectable": True, "block_key": "a"}

    def test_list_item_text_props(self) -> None:
        (node,) = render_blocks(_state(_block("li", UL)))
        assert _content(node).text_props == {"block_key": "li"}

    def test_navigate_is_forwarded(self) -> None:
        def navigate(url: str) -> None:
            pass

        nodes = render_blocks(_state(_block("a"), _block("b", OL), _block("q", "blockquote")), navigate=navigate)
        assert all(_content(n).navigate is navigate for n in nodes)

    def test_block_type_style_applied(self) -> None:
        styles = {"header-one": {"font_size": 32}}
        (node,) = render_blocks(_state(_block("h", "header-one")), custom_styles=styles)
        assert _content(node).style == {"font_size": 32}

    def test_list_margin_scales_with_depth(self) -> None:
        nodes = render_blocks(_state(_block("a", UL), _block("b", UL, 1)), depth_margin=10)
        assert [_content(n).margin_left for n in nodes] == [10, 20]

    def test_marker_style_margin_overrides_unit(self) -> None:
        styles = {"ordered_list_item_number": {"marginLeft": 4}}
        nodes = render_blocks(_state(_block("a", OL), _block("b", OL, 2)), custom_styles=styles)
        assert [_content(n).margin_left for n in nodes] == [4, 12]
        assert _content(nodes[0]).marker_style == {"marginLeft": 4}


class TestConfigResolution:
    """Explicit, ambient and keyword configuration."""

    def test_ambient_config(self) -> None:
        with render_config_context(RenderConfig(ordered_list_separator=":")):
            (node,) = render_blocks(_state(_block("a", OL)))
        assert _content(node).marker == "1:"

    def test_explicit_config_wins_over_ambient(self) -> None:
        with render_config_context(RenderConfig(ordered_list_separator=":")):
            (node,) = render_blocks(_state(_block("a", OL)), RenderConfig())
        assert _content(node).marker == "1."

    def test_keyword_options_override_config(self) -> None:
        config = RenderConfig(ordered_list_separator=":", depth_margin=4)
        (node,) = render_blocks(_state(_block("a", OL)), config, ordered_list_separator=")")
        assert _content(node).marker == "1)"
        assert _content(node).margin_left == 4

    def test_custom_leaf_renderer(self) -> None:
        class TupleLeaves:
            def render_text(self, block, props):
                return ("text", block.text)

            def render_quote(self, block, props):
                return ("quote", block.text)

            def render_list_item(self, block, props, marker):
                return ("item", marker.text, props.text_props["block_key"])

        nodes = render_blocks(
            _state(_block("a", OL), _block("b", "blockquote", text="q"), _block("c", text="t")),
            leaf_renderer=TupleLeaves(),
        )
        assert [_content(n) for n in nodes] == [("item", "1.", "a"), ("quote", "q"), ("text", "t")]
        assert _spacers(nodes[1]) == 1

    def test_renderer_exposes_config(self) -> None:
        config = RenderConfig(depth_margin=3)
        assert BlockRenderer(config).config is config


class TestKeys:
    """Node keys are distinct and never reused."""

    def test_keys_distinct_within_tree(self) -> None:
        state = _state(
            _block("a", OL),
            _block("b", UL),
            _block("img", "atomic", data={"listType": UL}),
            _block("p"),
        )
        keys = _keys(render_blocks(state, atomic_handler=_embed))
        assert len(keys) == len(set(keys))

    def test_keys_not_reused_across_calls(self) -> None:
        state = _state(_block("a", OL), _block("p"))
        first = set(_keys(render_blocks(state)))
        second = set(_keys(render_blocks(state)))
        assert first.isdisjoint(second)

    def test_keys_derive_from_block_key(self) -> None:
        (node,) = render_blocks(_state(_block("intro")))
        assert node.key.startswith("intro-")
        assert _content(node).key.startswith("intro-")
