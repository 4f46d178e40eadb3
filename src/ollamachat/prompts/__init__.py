"""Prompt templates.

Templates are ``<name>.txt`` files shipped beside this module. A file with
the same name in ``./prompts/`` under the working directory takes priority,
so wording can be tuned without reinstalling.
"""

from functools import lru_cache
from pathlib import Path

_PACKAGE_DIR = Path(__file__).parent


def _search_path(name: str) -> list[Path]:
    filename = f"{name}.txt"
    return [Path.cwd() / "prompts" / filename, _PACKAGE_DIR / filename]


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Read the template called ``name``.

    Raises:
        FileNotFoundError: If no candidate file exists
    """
    candidates = _search_path(name)
    for path in candidates:
        if path.is_file():
            return path.read_text(encoding="utf-8")
    searched = "\n".join(f"  - {path}" for path in candidates)
    raise FileNotFoundError(f"Prompt '{name}' not found. Searched:\n{searched}")


def get_title_prompt() -> str:
    """Template for conversation titles, with a ``{transcript}`` placeholder."""
    return load_prompt("title")


def clear_cache() -> None:
    load_prompt.cache_clear()


__all__ = [
    "clear_cache",
    "get_title_prompt",
    "load_prompt",
]
