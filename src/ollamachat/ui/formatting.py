"""Text formatting utilities for the TUI.

Hides the details of code-fence detection, language naming and syntax
highlighting. Everything here is pure and free of I/O.
"""

from rich.console import RenderableType
from rich.syntax import Syntax
from rich.text import Text

FENCE = "```"
PLAINTEXT = "plaintext"

# Short tags models commonly emit, mapped to the lexer names Rich/Pygments know
LANGUAGE_ALIASES = {
    "py": "python",
    "python": "python",
    "js": "javascript",
    "javascript": "javascript",
    "ts": "typescript",
    "typescript": "typescript",
    "rb": "ruby",
    "ruby": "ruby",
    "cpp": "cpp",
    "c++": "cpp",
    "cs": "csharp",
    "csharp": "csharp",
    "sh": "bash",
    "bash": "bash",
    "shell": "bash",
    "rs": "rust",
    "rust": "rust",
    "swift": "swift",
    "java": "java",
    "go": "go",
}

DARK_SYNTAX_THEME = "github-dark"
LIGHT_SYNTAX_THEME = "xcode"


def extract_language(text: str) -> tuple[str, str]:
    """Split a message that starts with a code fence into (code, language).

    The first line, minus the fence marker and surrounding whitespace, is the
    language tag ("plaintext" when empty). The code is every line except the
    first and the last; the closing fence itself is not checked. Text that
    does not start with a fence is returned unchanged as plaintext.

    Examples:
        >>> extract_language("```python\\nprint(1)\\n```")
        ('print(1)', 'python')
        >>> extract_language("plain text")
        ('plain text', 'plaintext')
    """
    if not text.startswith(FENCE):
        return text, PLAINTEXT

    lines = text.rstrip().split("\n")
    tag = lines[0].replace(FENCE, "").strip()
    code = "\n".join(lines[1:-1])
    return code, (tag or PLAINTEXT).lower()


def normalize_language(language: str) -> str:
    """Map a language tag to its canonical identifier.

    Unknown tags pass through lower-cased.
    """
    tag = language.strip().lower()
    return LANGUAGE_ALIASES.get(tag, tag)


def has_leading_fence(text: str) -> bool:
    """Check whether a message should be rendered as a single code block."""
    return text.lstrip("\n").startswith(FENCE)


def syntax_theme(dark: bool) -> str:
    """Get the syntax theme matching the UI's light or dark mode."""
    return DARK_SYNTAX_THEME if dark else LIGHT_SYNTAX_THEME


def highlight_code(code: str, language: str, theme: str = DARK_SYNTAX_THEME) -> RenderableType:
    """Highlight code for display.

    Falls back to unstyled text if highlighting fails, so a bad language tag
    or theme never breaks rendering.

    Args:
        code: Source text
        language: Language tag (normalized here)
        theme: Pygments style name

    Returns:
        Syntax renderable, or plain Text on failure
    """
    lexer = normalize_language(language)
    if lexer == PLAINTEXT:
        lexer = "text"
    try:
        return Syntax(
            code,
            lexer,
            theme=theme,
            word_wrap=False,
            background_color="default",
        )
    except Exception:
        return Text(code, overflow="fold")


def truncate(text: str, limit: int) -> str:
    """Shorten text to ``limit`` characters with a trailing ellipsis."""
    if len(text) <= limit:
        return text
    return text[: max(limit - 3, 0)] + "..."
