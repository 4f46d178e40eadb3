"""Main CLI application using Typer."""
import asyncio

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..llm import GenerationBackend, OllamaError
from ..ui.formatting import DARK_SYNTAX_THEME, extract_language, has_leading_fence, highlight_code
from .providers import console_debug_callback, get_backend, get_preferred_model

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="ollamachat",
    help="Chat with models served by a local Ollama server",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


def _format_size(size: int) -> str:
    """Format a byte count the way model listings usually show it."""
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TB"


def _attach_verbose(backend: GenerationBackend, verbose: bool) -> None:
    if verbose and hasattr(backend, "set_debug_callback"):
        backend.set_debug_callback(console_debug_callback(console))


@app.command()
def models(
    host: str | None = typer.Option(
        None,
        "--host",
        "-H",
        help="Ollama server address (default: $OLLAMA_HOST or http://127.0.0.1:11434)"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print request logging"
    ),
):
    """List the models installed on the Ollama server."""
    async def _models():
        backend = get_backend(host, console=console)
        _attach_verbose(backend, verbose)
        try:
            descriptors = await backend.list_models()
        except OllamaError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await backend.close()

        if not descriptors:
            console.print("[yellow]No models installed.[/yellow]")
            console.print("[dim]Pull one with: ollama pull <model>[/dim]")
            return

        table = Table(title=f"Models ({len(descriptors)})")
        table.add_column("Name", style="cyan")
        table.add_column("Family", style="magenta")
        table.add_column("Parameters", justify="right")
        table.add_column("Quantization")
        table.add_column("Size", justify="right", style="green")

        for descriptor in descriptors:
            details = descriptor.details
            table.add_row(
                descriptor.name,
                details.family or "-",
                details.parameter_size or "-",
                details.quantization_level or "-",
                _format_size(descriptor.size),
            )

        console.print(table)

    asyncio.run(_models())


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Prompt to send"),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Model to use (default: $OLLAMA_MODEL, else the first installed model)"
    ),
    host: str | None = typer.Option(
        None,
        "--host",
        "-H",
        help="Ollama server address (default: $OLLAMA_HOST or http://127.0.0.1:11434)"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print request logging"
    ),
):
    """Send a single prompt and print the reply."""
    if not prompt.strip():
        console.print("[red]Error: prompt must not be empty[/red]")
        raise typer.Exit(code=1)

    async def _ask():
        backend = get_backend(host, console=console)
        _attach_verbose(backend, verbose)
        try:
            model_name = get_preferred_model(model)
            if model_name is None:
                descriptors = await backend.list_models()
                if not descriptors:
                    console.print("[red]Error: no models installed on the server[/red]")
                    raise typer.Exit(code=1)
                model_name = descriptors[0].name

            with console.status(f"[dim]Waiting for {model_name}...[/dim]"):
                result = await backend.generate(model_name, prompt)
        except OllamaError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await backend.close()

        if has_leading_fence(result.response):
            code, language = extract_language(result.response.lstrip("\n"))
            console.print(Panel(
                highlight_code(code, language, DARK_SYNTAX_THEME),
                title=f"[bold green]{result.model}[/bold green] [dim]{language}[/dim]",
                border_style="green",
            ))
        else:
            console.print(f"[bold green]{result.model}:[/bold green] ", end="")
            console.print(result.response, markup=False, highlight=False)

    asyncio.run(_ask())


@app.command()
def chat(
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Model to select once the model list arrives (default: $OLLAMA_MODEL)"
    ),
    host: str | None = typer.Option(
        None,
        "--host",
        "-H",
        help="Ollama server address (default: $OLLAMA_HOST or http://127.0.0.1:11434)"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive chat interface."""
    async def _chat():
        from ..ui import run_textual_tui

        backend = get_backend(host, console=console)
        await run_textual_tui(
            backend=backend,
            preferred_model=get_preferred_model(model),
            log_level=log_level,
        )
        console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_chat())
    except KeyboardInterrupt:
        pass


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
