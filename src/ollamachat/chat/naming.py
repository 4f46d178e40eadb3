"""Conversation titling.

Hides how a title is derived: prompt wording, transcript layout and the
cleanup applied to the model's answer.
"""

from collections.abc import Sequence
from typing import Any

from ..llm import GenerationBackend
from ..prompts import get_title_prompt
from .models import Message

# Stripped from both ends of a suggested title
_TITLE_STRIP_CHARS = " \t\r\n\"'`."


class NamingAssistant:
    """Asks the backend for a short title summarizing a conversation."""

    def __init__(self, backend: GenerationBackend, prompt_template: str | None = None):
        """Initialize the naming assistant.

        Args:
            backend: Backend used for the summarization request
            prompt_template: Template with a ``{transcript}`` placeholder
                (or loaded from prompts/title.txt)
        """
        self._backend = backend
        self._template = prompt_template if prompt_template is not None else get_title_prompt()
        self._debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Naming", message)

    def build_prompt(self, messages: Sequence[Message]) -> str:
        """Build the summarization prompt for a transcript."""
        transcript = "\n".join(message.content for message in messages)
        return self._template.format(transcript=transcript)

    async def suggest_title(self, messages: Sequence[Message], model: str) -> str | None:
        """Suggest a title for a conversation.

        Args:
            messages: Conversation so far
            model: Model to ask

        Returns:
            Cleaned-up title, or None for an empty transcript or blank answer

        Raises:
            OllamaError: If the generate request fails
        """
        if not messages:
            return None

        prompt = self.build_prompt(messages)
        self._debug("debug", f"Requesting title from {model} ({len(prompt)} chars)")
        result = await self._backend.generate(model, prompt)

        title = result.response.strip(_TITLE_STRIP_CHARS)
        if not title:
            self._debug("warning", "Model returned an empty title")
            return None
        return title
