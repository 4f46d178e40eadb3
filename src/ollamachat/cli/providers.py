"""Backend factory functions for CLI.

Centralizes creation of the generation backend from environment variables.
Hides configuration details from command implementations.
"""

import os
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from ..llm import GenerationBackend, create_backend
from ..llm.providers import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

# Default console for output
_console = Console()


def get_backend(
    host: str | None = None,
    timeout: float | None = None,
    console: Console | None = None,
) -> GenerationBackend:
    """Create the Ollama backend from options and environment variables.

    Args:
        host: Server address, overrides OLLAMA_HOST
        timeout: Request timeout in seconds, overrides OLLAMA_TIMEOUT
        console: Optional Rich console for output

    Returns:
        Ollama backend instance

    Raises:
        typer.Exit: If OLLAMA_TIMEOUT is not a number

    Environment variables:
        OLLAMA_HOST: Server address (default: http://127.0.0.1:11434)
        OLLAMA_TIMEOUT: Request timeout in seconds (default: 60)
    """
    con = console or _console
    base_url = host or os.getenv("OLLAMA_HOST") or DEFAULT_BASE_URL
    if "://" not in base_url:
        base_url = f"http://{base_url}"

    if timeout is None:
        raw_timeout = os.getenv("OLLAMA_TIMEOUT")
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError:
            con.print(f"[red]Error: OLLAMA_TIMEOUT must be a number, got {raw_timeout!r}[/red]")
            raise typer.Exit(code=1)

    return create_backend("ollama", base_url=base_url, timeout=timeout)


def get_preferred_model(model: str | None = None) -> str | None:
    """Resolve the preferred model name.

    Environment variables:
        OLLAMA_MODEL: Model to select once the model list arrives
    """
    return model or os.getenv("OLLAMA_MODEL") or None


def console_debug_callback(console: Console | None = None) -> Any:
    """Build a debug callback that prints log entries to a Rich console."""
    con = console or _console
    colors = {"debug": "dim", "info": "cyan", "warning": "yellow", "error": "red"}

    def _callback(level: str, component: str, message: str) -> None:
        color = colors.get(level, "white")
        con.print(
            f"[{color}]{level.upper():<7}[/{color}] [bold]{escape(component)}[/bold] {escape(message)}",
            highlight=False,
        )

    return _callback
