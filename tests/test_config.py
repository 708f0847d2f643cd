"""Tests for RenderConfig and the ContextVar-based ambient configuration."""

from __future__ import annotations

import threading
from dataclasses import FrozenInstanceError

import pytest

from bloques import render_blocks
from bloques.blocks import ContentBlock, ContentState
from bloques.config import (
    RenderConfig,
    get_render_config,
    render_config_context,
    reset_render_config,
    set_render_config,
)
from bloques.errors import ConfigurationError


class TestRenderConfigDefaults:
    """Default option values."""

    def test_defaults(self) -> None:
        config = RenderConfig()
        assert config.custom_styles == {}
        assert config.navigate is None
        assert config.ordered_list_separator == "."
        assert config.unordered_list_bullet == "•"
        assert config.depth_margin == 8
        assert config.atomic_handler is None
        assert config.custom_block_handler is None
        assert config.text_props == {}
        assert config.leaf_renderer is None
        assert config.strict_atomic is False
        assert config.strict_handlers is False

    def test_frozen(self) -> None:
        config = RenderConfig()
        with pytest.raises(FrozenInstanceError):
            config.depth_margin = 4  # type: ignore[misc]

    def test_style_lookup(self) -> None:
        config = RenderConfig(custom_styles={"view_after_list": {"height": 8}})
        assert config.style("view_after_list") == {"height": 8}
        assert config.style("blockquote_text") == {}
        assert RenderConfig().style("anything") == {}


class TestRenderConfigValidation:
    """Invalid option values raise ConfigurationError."""

    def test_separator_must_be_string(self) -> None:
        with pytest.raises(ConfigurationError, match="ordered_list_separator"):
            RenderConfig(ordered_list_separator=1)  # type: ignore[arg-type]

    def test_bullet_must_be_string(self) -> None:
        with pytest.raises(ConfigurationError, match="unordered_list_bullet"):
            RenderConfig(unordered_list_bullet=None)  # type: ignore[arg-type]

    def test_depth_margin_must_be_number(self) -> None:
        with pytest.raises(ConfigurationError, match="depth_margin"):
            RenderConfig(depth_margin="8")  # type: ignore[arg-type]

    def test_depth_margin_rejects_bool(self) -> None:
        with pytest.raises(ConfigurationError):
            RenderConfig(depth_margin=True)

    def test_depth_margin_rejects_negative(self) -> None:
        with pytest.raises(ConfigurationError, match="negative"):
            RenderConfig(depth_margin=-1)

    def test_float_depth_margin_allowed(self) -> None:
        assert RenderConfig(depth_margin=7.5).depth_margin == 7.5

    def test_handler_must_be_callable(self) -> None:
        with pytest.raises(ConfigurationError, match="atomic_handler"):
            RenderConfig(atomic_handler="images")  # type: ignore[arg-type]

    def test_navigate_must_be_callable(self) -> None:
        with pytest.raises(ConfigurationError, match="navigate"):
            RenderConfig(navigate=42)  # type: ignore[arg-type]

    def test_errors_share_base_class(self) -> None:
        from bloques.errors import BloquesError

        with pytest.raises(BloquesError):
            RenderConfig(depth_margin=-5)


class TestFromDict:
    """Creating config from option dictionaries."""

    def test_snake_case_keys(self) -> None:
        config = RenderConfig.from_dict({"ordered_list_separator": ")", "depth_margin": 12})
        assert config.ordered_list_separator == ")"
        assert config.depth_margin == 12

    def test_camel_case_keys(self) -> None:
        config = RenderConfig.from_dict(
            {
                "orderedListSeparator": ")",
                "unorderedListBullet": "-",
                "customStyles": {"view_after_list": {"height": 4}},
                "textProps": {"selectable": True},
            }
        )
        assert config.ordered_list_separator == ")"
        assert config.unordered_list_bullet == "-"
        assert config.style("view_after_list") == {"height": 4}
        assert config.text_props == {"selectable": True}

    def test_unknown_keys_ignored(self) -> None:
        config = RenderConfig.from_dict({"theme": "dark", "depthMargin": 2})
        assert config.depth_margin == 2

    def test_empty_dict_gives_defaults(self) -> None:
        assert RenderConfig.from_dict({}) == RenderConfig()

    def test_invalid_value_still_validated(self) -> None:
        with pytest.raises(ConfigurationError):
            RenderConfig.from_dict({"depthMargin": -3})


class TestCamelCaseStyleNames:
    """Element style names written the way JavaScript props spell them."""

    def test_style_resolves_camel_case_name(self) -> None:
        config = RenderConfig.from_dict({"customStyles": {"viewAfterList": {"height": 20}}})
        assert config.style("view_after_list") == {"height": 20}

    def test_snake_case_name_wins(self) -> None:
        config = RenderConfig(
            custom_styles={"view_after_list": {"height": 1}, "viewAfterList": {"height": 2}}
        )
        assert config.style("view_after_list") == {"height": 1}

    def test_block_type_keys_unchanged(self) -> None:
        config = RenderConfig.from_dict({"customStyles": {"header-one": {"font_size": 30}}})
        assert config.custom_styles == {"header-one": {"font_size": 30}}
        assert config.style("header-one") == {"font_size": 30}

    def test_camel_case_styles_reach_rendered_nodes(self) -> None:
        config = RenderConfig.from_dict(
            {
                "customStyles": {
                    "viewAfterList": {"height": 20},
                    "orderedListItemNumber": {"color": "gray"},
                    "orderedListItemContainer": {"padding": 2},
                    "blockquoteText": {"font_style": "italic"},
                }
            }
        )
        state = ContentState(
            blocks=(
                ContentBlock(key="a", type="ordered-list-item", text="one"),
                ContentBlock(key="q", type="blockquote", text="said"),
            )
        )
        item_view, quote_view = render_blocks(state, config)

        item = item_view.children[-1]
        assert item.marker_style == {"color": "gray"}
        assert item.style == {"padding": 2}
        spacer, quote = quote_view.children
        assert spacer.style == {"height": 20}
        assert quote.text_style == {"font_style": "italic"}


class TestAmbientConfig:
    """ContextVar accessors."""

    def test_default_config(self) -> None:
        assert get_render_config() == RenderConfig()

    def test_set_and_reset(self) -> None:
        custom = RenderConfig(ordered_list_separator=")")
        set_render_config(custom)
        try:
            assert get_render_config() is custom
        finally:
            reset_render_config()
        assert get_render_config().ordered_list_separator == "."

    def test_context_manager_restores(self) -> None:
        outer = get_render_config()
        with render_config_context(RenderConfig(depth_margin=2)):
            assert get_render_config().depth_margin == 2
        assert get_render_config() is outer

    def test_context_manager_restores_on_error(self) -> None:
        outer = get_render_config()
        with pytest.raises(RuntimeError), render_config_context(RenderConfig(depth_margin=2)):
            raise RuntimeError
        assert get_render_config() is outer

    def test_nested_contexts(self) -> None:
        with render_config_context(RenderConfig(depth_margin=2)):
            with render_config_context(RenderConfig(depth_margin=3)):
                assert get_render_config().depth_margin == 3
            assert get_render_config().depth_margin == 2

    def test_threads_do_not_share_config(self) -> None:
        seen: list[str] = []

        def worker() -> None:
            set_render_config(RenderConfig(ordered_list_separator=")"))
            seen.append(get_render_config().ordered_list_separator)

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        assert seen == [")"]
        assert get_render_config().ordered_list_separator == "."
