"""Theme system: light/dark color palettes and Textual theme builders."""

from __future__ import annotations

from textual.theme import Theme as TextualTheme

DARK_THEME_NAME = "wiki-dark"
LIGHT_THEME_NAME = "wiki-light"

# Deep teal gradient palette of the dark mode
DARK_THEME: dict[str, str] = {
    "background": "#0f2027",
    "panel": "#203a43",
    "panel_alt": "#2c5364",
    "border": "#3e6b7d",
    "text": "#f3f4f6",
    "muted": "#9ca3af",
    "accent": "#60a5fa",  # blue-400
    "accent_alt": "#34d399",  # emerald-400
    "link": "#4ade80",  # URL line
    "match": "#facc15",  # search-match highlight
    "warning": "#facc15",  # "did you mean" row
    "error": "#f87171",
    "highlight": "#1f2937",
    "highlight_focus": "#374151",
    "scrollbar_background": "#203a43",
    "scrollbar": "#3e6b7d",
    "scrollbar_active": "#60a5fa",
    "scrollbar_hover": "#9ca3af",
}

# Soft gray palette of the light mode
LIGHT_THEME: dict[str, str] = {
    "background": "#f3f4f6",
    "panel": "#ffffff",
    "panel_alt": "#e5e7eb",
    "border": "#d1d5db",
    "text": "#111827",
    "muted": "#6b7280",
    "accent": "#2563eb",  # blue-600
    "accent_alt": "#059669",  # emerald-600
    "link": "#16a34a",
    "match": "#b45309",
    "warning": "#a16207",  # yellow-700
    "error": "#dc2626",
    "highlight": "#e5e7eb",
    "highlight_focus": "#d1d5db",
    "scrollbar_background": "#e5e7eb",
    "scrollbar": "#9ca3af",
    "scrollbar_active": "#2563eb",
    "scrollbar_hover": "#6b7280",
}

THEMES: dict[str, dict[str, str]] = {
    DARK_THEME_NAME: DARK_THEME,
    LIGHT_THEME_NAME: LIGHT_THEME,
}

# Active palette for Rich markup; swapped in place by apply_palette()
THEME_COLORS: dict[str, str] = DARK_THEME.copy()


def theme_name_for(dark_mode: bool) -> str:
    """Textual theme name for a dark-mode flag."""
    return DARK_THEME_NAME if dark_mode else LIGHT_THEME_NAME


def apply_palette(dark_mode: bool) -> dict[str, str]:
    """Point THEME_COLORS at the palette for ``dark_mode`` and return it."""
    THEME_COLORS.clear()
    THEME_COLORS.update(THEMES[theme_name_for(dark_mode)])
    return THEME_COLORS


def _build_textual_theme(name: str, colors: dict[str, str], dark: bool) -> TextualTheme:
    """Convert an app color dict to a Textual Theme with custom CSS variables.

    Maps palette keys to $th-* CSS variables used throughout the TCSS.
    """
    variables = {
        "th-background": colors["background"],
        "th-panel": colors["panel"],
        "th-panel-alt": colors["panel_alt"],
        "th-border": colors["border"],
        "th-highlight": colors["highlight"],
        "th-highlight-focus": colors["highlight_focus"],
        "th-accent": colors["accent"],
        "th-accent-alt": colors["accent_alt"],
        "th-muted": colors["muted"],
        "th-text": colors["text"],
        "th-warning": colors["warning"],
        "th-error": colors["error"],
        "th-scrollbar-bg": colors["scrollbar_background"],
        "th-scrollbar-thumb": colors["scrollbar"],
        "th-scrollbar-active": colors["scrollbar_active"],
        "th-scrollbar-hover": colors["scrollbar_hover"],
    }
    return TextualTheme(
        name=name,
        primary=colors["accent"],
        secondary=colors["accent_alt"],
        accent=colors["accent_alt"],
        foreground=colors["text"],
        background=colors["background"],
        surface=colors["panel"],
        panel=colors["panel_alt"],
        warning=colors["warning"],
        error=colors["error"],
        success=colors["accent_alt"],
        dark=dark,
        variables=variables,
    )


TEXTUAL_THEMES: dict[str, TextualTheme] = {
    DARK_THEME_NAME: _build_textual_theme(DARK_THEME_NAME, DARK_THEME, dark=True),
    LIGHT_THEME_NAME: _build_textual_theme(LIGHT_THEME_NAME, LIGHT_THEME, dark=False),
}


__all__ = [
    "DARK_THEME",
    "DARK_THEME_NAME",
    "LIGHT_THEME",
    "LIGHT_THEME_NAME",
    "TEXTUAL_THEMES",
    "THEMES",
    "THEME_COLORS",
    "apply_palette",
    "theme_name_for",
]
