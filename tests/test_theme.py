"""
Tests for the static theme store.
"""

import pytest

from ignomi_engine import theme


class TestThemeLookups:
    """Test color, spacing and component lookups."""

    def test_color_by_camel_and_snake_case(self):
        assert theme.get_theme_color("background") == "#1a1a1a"
        assert theme.get_theme_color("accentHover") == "#0056CC"
        assert theme.get_theme_color("accent_hover") == "#0056CC"

    def test_unknown_color(self):
        assert theme.get_theme_color("chartreuse") is None

    def test_spacing(self):
        assert theme.get_theme_spacing("md") == 12
        assert theme.get_theme_spacing("huge") == 0

    def test_component(self):
        assert theme.get_theme_component("listItemHeight") == 52
        assert theme.get_theme_component("list_item_height") == 52
        assert theme.get_theme_component("nope") == 0

    def test_store_is_read_only(self):
        with pytest.raises(TypeError):
            theme.THEME["colors"]["background"] = "#000000"

    def test_get_theme_returns_copy(self):
        data = theme.get_theme()
        data["colors"]["background"] = "#000000"
        assert theme.get_theme_color("background") == "#1a1a1a"
        assert set(data) == {"colors", "spacing", "typography", "radii", "shadows", "components", "animation"}


class TestPalettes:
    """Test named palettes and hex parsing."""

    def test_known_palette(self):
        palette = theme.get_theme_palette("nord")
        assert palette["accent"] == (136, 192, 208)
        assert palette["is_light"] is False

    def test_unknown_palette_falls_back(self):
        assert theme.get_theme_palette("neon") == theme.get_theme_palette("catppuccin-mocha")

    def test_available_themes(self):
        assert "catppuccin-latte" in theme.available_themes()
        assert len(theme.available_themes()) == 9

    def test_parse_hex_color(self):
        assert theme.parse_hex_color("#cba6f7") == (203, 166, 247)
        assert theme.parse_hex_color("#fff") == (203, 166, 247)
        assert theme.parse_hex_color("zzzzzz") == (203, 166, 247)
