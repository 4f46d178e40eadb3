"""Tests for the Typer CLI."""
import pytest
from typer.testing import CliRunner

import ollamachat.ui
from ollamachat.cli import app as cli_app
from ollamachat.cli.providers import get_backend, get_preferred_model
from ollamachat.llm import OllamaClient, OllamaNetworkError

runner = CliRunner()


@pytest.fixture
def patched_backend(monkeypatch, fake_backend):
    """Make every command use the fake backend."""
    monkeypatch.setattr(cli_app, "get_backend", lambda *args, **kwargs: fake_backend)
    monkeypatch.delenv("OLLAMA_MODEL", raising=False)
    return fake_backend


class TestProviders:
    """Tests for environment-driven configuration."""

    def test_defaults(self, monkeypatch):
        """Test that the default backend points at the local server."""
        monkeypatch.delenv("OLLAMA_HOST", raising=False)
        monkeypatch.delenv("OLLAMA_TIMEOUT", raising=False)

        backend = get_backend()
        assert isinstance(backend, OllamaClient)
        assert backend.base_url == "http://127.0.0.1:11434"

    def test_host_from_environment(self, monkeypatch):
        """Test that OLLAMA_HOST is used and gains an http scheme."""
        monkeypatch.setenv("OLLAMA_HOST", "gpu-box:11434")

        assert get_backend().base_url == "http://gpu-box:11434"

    def test_option_overrides_environment(self, monkeypatch):
        """Test that an explicit host wins over OLLAMA_HOST."""
        monkeypatch.setenv("OLLAMA_HOST", "http://gpu-box:11434")

        assert get_backend("http://localhost:9999").base_url == "http://localhost:9999"

    def test_invalid_timeout_exits(self, monkeypatch):
        """Test that a non-numeric OLLAMA_TIMEOUT aborts the command."""
        import typer

        monkeypatch.setenv("OLLAMA_TIMEOUT", "soon")
        with pytest.raises(typer.Exit):
            get_backend()

    def test_preferred_model(self, monkeypatch):
        """Test the option, environment and unset cases for the preferred model."""
        monkeypatch.setenv("OLLAMA_MODEL", "mistral")

        assert get_preferred_model() == "mistral"
        assert get_preferred_model("phi3") == "phi3"
        monkeypatch.delenv("OLLAMA_MODEL")
        assert get_preferred_model() is None


class TestModelsCommand:
    """Tests for 'ollamachat models'."""

    def test_lists_models(self, patched_backend):
        """Test that every installed model appears in the table."""
        result = runner.invoke(cli_app.app, ["models"])

        assert result.exit_code == 0
        assert "llama3:latest" in result.output
        assert "mistral:latest" in result.output
        assert patched_backend.closed

    def test_no_models(self, patched_backend):
        """Test the hint shown when the server has no models."""
        patched_backend.models = []

        result = runner.invoke(cli_app.app, ["models"])
        assert result.exit_code == 0
        assert "No models installed" in result.output

    def test_server_unreachable(self, patched_backend):
        """Test that a network failure exits with code 1."""
        patched_backend.list_error = OllamaNetworkError("connection refused")

        result = runner.invoke(cli_app.app, ["models"])
        assert result.exit_code == 1
        assert "connection refused" in result.output


class TestAskCommand:
    """Tests for 'ollamachat ask'."""

    def test_ask_uses_first_model(self, patched_backend):
        """Test that ask falls back to the first installed model."""
        result = runner.invoke(cli_app.app, ["ask", "hi"])

        assert result.exit_code == 0
        assert "Hello!" in result.output
        assert patched_backend.generate_calls == [("llama3:latest", "hi")]

    def test_ask_with_model(self, patched_backend):
        """Test that an explicit model skips the model listing."""
        result = runner.invoke(cli_app.app, ["ask", "hi", "--model", "mistral:latest"])

        assert result.exit_code == 0
        assert patched_backend.list_calls == 0
        assert patched_backend.generate_calls == [("mistral:latest", "hi")]

    def test_fenced_reply_is_highlighted(self, patched_backend):
        """Test that a fenced reply is printed without its fence markers."""
        patched_backend.replies = ["```python\nprint(1)\n```"]

        result = runner.invoke(cli_app.app, ["ask", "show code"])
        assert result.exit_code == 0
        assert "print(1)" in result.output
        assert "```" not in result.output

    def test_blank_prompt(self, patched_backend):
        """Test that a blank prompt is rejected before any request."""
        result = runner.invoke(cli_app.app, ["ask", "  "])

        assert result.exit_code == 1
        assert patched_backend.generate_calls == []

    def test_generate_failure(self, patched_backend):
        """Test that a failed generate exits with code 1 and closes the backend."""
        patched_backend.errors = [OllamaNetworkError("connection refused")]

        result = runner.invoke(cli_app.app, ["ask", "hi"])
        assert result.exit_code == 1
        assert "connection refused" in result.output
        assert patched_backend.closed


class TestChatCommand:
    """Tests for 'ollamachat chat'."""

    def test_chat_runs_tui(self, monkeypatch, patched_backend):
        """Test that chat forwards its options to the TUI runner."""
        calls = []

        async def fake_run(**kwargs):
            calls.append(kwargs)

        monkeypatch.setattr(ollamachat.ui, "run_textual_tui", fake_run)

        result = runner.invoke(cli_app.app, ["chat", "--model", "mistral", "--log-level", "info"])

        assert result.exit_code == 0
        assert calls == [
            {"backend": patched_backend, "preferred_model": "mistral", "log_level": "info"}
        ]
