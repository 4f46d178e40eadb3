"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Which syntax-highlighting style goes with which palette

To add a new theme, define it here and add it to THEMES.
"""

from textual.theme import Theme

from .formatting import syntax_theme

LLAMA_DARK = Theme(
    name="llama-dark",
    primary="#58a6ff",      # Blue - user messages, focus
    secondary="#bc8cff",    # Purple - assistant messages
    accent="#d29922",       # Amber - loading, highlights
    foreground="#c9d1d9",
    background="#0d1117",
    success="#3fb950",
    warning="#d29922",
    error="#f85149",
    surface="#161b22",
    panel="#11161d",
    dark=True,
    variables={
        "border": "#30363d",
        "border-blurred": "#21262d",
        "scrollbar": "#21262d",
        "scrollbar-hover": "#30363d",
        "scrollbar-active": "#58a6ff",
        "footer-key-foreground": "#d29922",
        "text-muted": "#8b949e",
    },
)

LLAMA_LIGHT = Theme(
    name="llama-light",
    primary="#0969da",
    secondary="#8250df",
    accent="#9a6700",
    foreground="#1f2328",
    background="#ffffff",
    success="#1a7f37",
    warning="#9a6700",
    error="#cf222e",
    surface="#f6f8fa",
    panel="#eaeef2",
    dark=False,
    variables={
        "border": "#d0d7de",
        "border-blurred": "#eaeef2",
        "scrollbar": "#d0d7de",
        "scrollbar-hover": "#afb8c1",
        "scrollbar-active": "#0969da",
        "footer-key-foreground": "#9a6700",
        "text-muted": "#656d76",
    },
)

THEMES = (LLAMA_DARK, LLAMA_LIGHT)
DEFAULT_THEME = LLAMA_DARK.name


def syntax_theme_for(theme: Theme | None) -> str:
    """Get the code-highlighting style for a UI theme (dark when unknown)."""
    return syntax_theme(theme.dark if theme is not None else True)
