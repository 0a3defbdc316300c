"""
Theme Store - Static presentation values shared by every frontend.

Read-only, process-wide data keyed by string. Nothing here touches
session state. Keys are camelCase; lookups also accept snake_case.
"""

import copy
import re
from types import MappingProxyType
from typing import Any, Dict, Optional


def _freeze(sections: Dict[str, Dict[str, Any]]) -> MappingProxyType:
    return MappingProxyType({name: MappingProxyType(values) for name, values in sections.items()})


THEME = _freeze({
    "colors": {
        "background": "#1a1a1a",
        "backgroundSecondary": "#252525",
        "backgroundElevated": "#2d2d2d",
        "foreground": "#ffffff",
        "foregroundSecondary": "#a0a0a0",
        "foregroundTertiary": "#666666",
        "accent": "#007AFF",
        "accentHover": "#0056CC",
        "border": "#3d3d3d",
        "error": "#FF453A",
        "success": "#32D74B",
        "warning": "#FFD60A",
        "selection": "#007AFF",
        "selectionBackground": "#1e3a5f",
    },
    "spacing": {
        "xs": 4,
        "sm": 8,
        "md": 12,
        "lg": 16,
        "xl": 24,
        "xxl": 32,
    },
    "typography": {
        "fontFamily": "system-ui",
        "fontSizeXs": 10,
        "fontSizeSm": 11,
        "fontSizeMd": 13,
        "fontSizeLg": 16,
        "fontSizeXl": 20,
        "fontSizeXxl": 24,
        "fontWeightNormal": 400,
        "fontWeightMedium": 500,
        "fontWeightSemibold": 600,
        "fontWeightBold": 700,
    },
    "radii": {
        "xs": 2,
        "sm": 4,
        "md": 8,
        "lg": 12,
        "xl": 16,
    },
    "shadows": {
        "panel": "0 8px 32px rgba(0,0,0,0.5)",
        "dropdown": "0 4px 16px rgba(0,0,0,0.4)",
        "subtle": "0 2px 8px rgba(0,0,0,0.2)",
    },
    "components": {
        "panelWidth": 620,
        "panelHeight": 400,
        "panelCornerRadius": 12,
        "searchFieldHeight": 48,
        "searchFieldFontSize": 24,
        "searchFieldPaddingHorizontal": 16,
        "searchFieldPaddingVertical": 12,
        "listItemHeight": 52,
        "listItemPaddingHorizontal": 10,
        "listItemPaddingVertical": 8,
        "listItemIconSize": 36,
        "listItemCornerRadius": 8,
        "listItemSpacing": 2,
        "iconSizeXs": 12,
        "iconSizeSm": 16,
        "iconSizeMd": 20,
        "iconSizeLg": 24,
        "iconSizeXl": 32,
        "iconSizeXxl": 36,
        "dividerThickness": 1,
        "dividerMargin": 8,
    },
    "animation": {
        "durationFast": 100,
        "durationNormal": 200,
        "durationSlow": 300,
        "easingDefault": "ease-out",
        "easingSpring": "ease-in-out",
    },
})

# Named palettes: (background, text, subtext, accent) as RGB, plus is_light
PALETTES = MappingProxyType({
    "catppuccin-mocha": ((30, 30, 46), (205, 214, 244), (108, 112, 134), (203, 166, 247), False),
    "catppuccin-macchiato": ((36, 39, 58), (202, 211, 245), (110, 115, 141), (198, 160, 246), False),
    "catppuccin-frappe": ((48, 52, 70), (198, 208, 245), (115, 121, 148), (202, 158, 230), False),
    "catppuccin-latte": ((239, 241, 245), (76, 79, 105), (108, 111, 133), (136, 57, 239), True),
    "nord": ((46, 52, 64), (236, 239, 244), (76, 86, 106), (136, 192, 208), False),
    "dracula": ((40, 42, 54), (248, 248, 242), (98, 114, 164), (189, 147, 249), False),
    "gruvbox-dark": ((40, 40, 40), (235, 219, 178), (146, 131, 116), (250, 189, 47), False),
    "tokyo-night": ((26, 27, 38), (192, 202, 245), (86, 95, 137), (122, 162, 247), False),
    "one-dark": ((40, 44, 52), (171, 178, 191), (92, 99, 112), (198, 120, 221), False),
})
DEFAULT_PALETTE = "catppuccin-mocha"
_FALLBACK_RGB = (203, 166, 247)  # catppuccin mauve


def _camel(key: str) -> str:
    """snake_case -> camelCase; camelCase passes through."""
    return re.sub(r"_([a-z])", lambda m: m.group(1).upper(), key)


def _lookup(section: str, key: str) -> Optional[Any]:
    if not isinstance(key, str):
        return None
    return THEME[section].get(_camel(key))


def get_theme() -> Dict[str, Dict[str, Any]]:
    """Complete theme as plain, mutable dicts (a copy)."""
    return {name: copy.deepcopy(dict(values)) for name, values in THEME.items()}


def get_theme_color(key: str) -> Optional[str]:
    """Color hex string, or None for an unknown key."""
    return _lookup("colors", key)


def get_theme_spacing(key: str) -> int:
    """Spacing in pixels, or 0 for an unknown key."""
    return _lookup("spacing", key) or 0


def get_theme_component(key: str) -> int:
    """Component size in pixels, or 0 for an unknown key."""
    return _lookup("components", key) or 0


def available_themes() -> list[str]:
    return list(PALETTES)


def get_theme_palette(name: str) -> Dict[str, Any]:
    """Palette colors for a named theme. Unknown names get catppuccin-mocha."""
    background, text, subtext, accent, is_light = PALETTES.get(name, PALETTES[DEFAULT_PALETTE])
    return {
        "background": background,
        "text": text,
        "subtext": subtext,
        "accent": accent,
        "is_light": is_light,
    }


def parse_hex_color(value: str) -> tuple[int, int, int]:
    """Parse "#rrggbb" into an RGB tuple; malformed input gets the fallback accent."""
    digits = value.lstrip("#") if isinstance(value, str) else ""
    if len(digits) < 6:
        return _FALLBACK_RGB
    try:
        return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return _FALLBACK_RGB
