"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Input history management
- Chat list rendering
- Message rendering (plain text, markdown, highlighted code)
- Log rendering and level filtering
"""

from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from rich.markup import escape
from rich.text import Text
from textual.app import App
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click, Key
from textual.message import Message as TextualMessage
from textual.widget import Widget
from textual.widgets import Button, Markdown, OptionList, RichLog, Static, TextArea
from textual.widgets.option_list import Option

from ..chat import Chat, Message
from .config import (
    CHAT_TITLE_MAX_LENGTH,
    INPUT_HISTORY_MAX_SIZE,
    LOADING_MARKER,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    MESSAGE_TIMESTAMP_FORMAT,
    LogLevel,
)
from .formatting import extract_language, has_leading_fence, highlight_code, truncate


def copy_text(app: App, text: str) -> str:
    """Copy text to the system clipboard.

    Uses pyperclip, falling back to Textual's OSC 52 when no clipboard
    tool is available.

    Returns:
        Notification text describing where the text went
    """
    try:
        import pyperclip
        pyperclip.copy(text)
        return "Copied to clipboard"
    except Exception:
        app.copy_to_clipboard(text)
        return "Copied (terminal)"


class ClickableMessage(Vertical):
    """A chat message container that copies its raw content when clicked."""

    def __init__(self, *children: Widget, content: str, **kwargs) -> None:
        super().__init__(*children, **kwargs)
        self._content = content

    def on_click(self, event: Click) -> None:
        event.stop()
        self.app.notify(copy_text(self.app, self._content), timeout=2)


class PromptHistory:
    """Previously submitted prompts with a browsing cursor.

    The cursor is None while the user is typing a fresh prompt.
    """

    def __init__(self, max_size: int = INPUT_HISTORY_MAX_SIZE) -> None:
        self._entries: list[str] = []
        self._max_size = max_size
        self._cursor: int | None = None

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, prompt: str) -> None:
        """Remember a prompt, skipping immediate repeats, and reset the cursor."""
        if prompt and (not self._entries or self._entries[-1] != prompt):
            self._entries.append(prompt)
            del self._entries[:-self._max_size]
        self._cursor = None

    def older(self) -> str | None:
        """Step back; stays on the oldest entry once reached."""
        if not self._entries:
            return None
        if self._cursor is None:
            self._cursor = len(self._entries) - 1
        else:
            self._cursor = max(self._cursor - 1, 0)
        return self._entries[self._cursor]

    def newer(self) -> str | None:
        """Step forward; returns "" when moving past the newest entry."""
        if self._cursor is None:
            return None
        if self._cursor + 1 < len(self._entries):
            self._cursor += 1
            return self._entries[self._cursor]
        self._cursor = None
        return ""


def _end_of(text: str) -> tuple[int, int]:
    lines = text.split("\n")
    return len(lines) - 1, len(lines[-1])


class ChatInputBar(Horizontal):
    """Prompt editor with a Send button.

    Ctrl+J submits (terminals do not report modifiers on Enter). Up on the
    first character and Down on the last one browse earlier prompts.
    """

    class Submitted(TextualMessage):
        """Posted with the stripped prompt when the user submits."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.history = PromptHistory()

    def compose(self):
        editor = TextArea(id="chat-input", show_line_numbers=False)
        editor.cursor_blink = False
        editor.highlight_cursor_line = False
        yield editor
        yield Button("Send", id="send-btn", variant="success").with_tooltip("Send (Ctrl+J)")

    @property
    def _editor(self) -> TextArea:
        return self.query_one("#chat-input", TextArea)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            self.submit()

    def on_key(self, event: Key) -> None:
        editor = self._editor
        if event.key == "ctrl+j":
            self.submit()
        elif event.key == "up" and editor.cursor_location == (0, 0):
            self._recall(self.history.older())
        elif event.key == "down" and editor.cursor_location == _end_of(editor.text):
            self._recall(self.history.newer())
        else:
            return
        event.prevent_default()
        event.stop()

    def _recall(self, prompt: str | None) -> None:
        if prompt is not None:
            self._editor.text = prompt

    def submit(self) -> None:
        """Post the current prompt, if any, and clear the editor."""
        editor = self._editor
        value = editor.text.strip()
        if not value:
            return
        self.history.add(value)
        editor.text = ""
        self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        self._editor.focus()


class ChatListPanel(OptionList):
    """Sidebar listing every chat by title."""

    BORDER_TITLE = "Chats"

    def show_chats(
        self,
        chats: Iterable[Chat],
        selected_id: UUID | None,
        loading_ids: Iterable[UUID] = (),
    ) -> None:
        """Replace the list contents and highlight the selected chat."""
        loading = set(loading_ids)
        options = []
        highlighted = None
        for index, chat in enumerate(chats):
            label = truncate(chat.title, CHAT_TITLE_MAX_LENGTH)
            if chat.id in loading:
                label += f" {LOADING_MARKER}"
            options.append(Option(Text(label), id=str(chat.id)))
            if chat.id == selected_id:
                highlighted = index

        self.clear_options()
        self.add_options(options)
        self.highlighted = highlighted
        self.border_subtitle = f"{len(options)}"


class ModelBar(Static):
    """One-line status showing the selected model and request state."""

    def show_status(self, model: str, available: int, loading: bool) -> None:
        if model:
            text = Text.assemble(("Model: ", "bold"), model, f"  ({available} available)")
        else:
            text = Text("No model selected (Ctrl+P to pick, Ctrl+R to refresh)", style="italic")
        if loading:
            text.append("  generating…", style="bold")
        self.update(text)


class ChatHistoryWidget(VerticalScroll):
    """Scrollable view of the selected chat's messages."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._chat: Chat | None = None

    async def show_chat(self, chat: Chat | None, code_theme: str, loading: bool = False) -> None:
        """Re-render the view for ``chat``.

        Args:
            chat: Chat to show, None for an empty view
            code_theme: Syntax style for fenced code
            loading: Whether a reply is pending for this chat
        """
        self._chat = chat
        await self.remove_children()

        if chat is None:
            self.border_title = "Chat"
            self.border_subtitle = "No chat selected (Ctrl+N for a new one)"
            return

        widgets: list[Widget] = [self._render_message(m, code_theme) for m in chat.messages]
        if loading:
            widgets.append(Static(Text("Thinking…"), classes="pending-reply"))
        if chat.error:
            widgets.append(Static(Text(f"Error: {chat.error}"), classes="chat-error"))
        if widgets:
            await self.mount_all(widgets)

        self.border_title = escape(chat.title)
        self.border_subtitle = f"{len(chat.messages)} messages"
        self.scroll_end(animate=False)

    def get_last_response(self) -> str | None:
        """Get the last assistant response in the shown chat."""
        if self._chat is None:
            return None
        for message in reversed(self._chat.messages):
            if not message.is_user:
                return message.content
        return None

    def _render_message(self, message: Message, code_theme: str) -> Widget:
        if message.is_user:
            header = f"> You [{message.created_at.strftime(MESSAGE_TIMESTAMP_FORMAT)}]"
            body: Widget = Static(Text(message.content), classes="message-content")
            css_class = "user-message"
        else:
            header = f"< Assistant [{message.created_at.strftime(MESSAGE_TIMESTAMP_FORMAT)}]"
            css_class = "assistant-message"
            if has_leading_fence(message.content):
                code, language = extract_language(message.content.lstrip("\n"))
                body = Static(
                    highlight_code(code, language, code_theme),
                    classes="message-content code-block",
                )
            else:
                body = Markdown(message.content, classes="message-content")

        return ClickableMessage(
            Static(Text(header), classes="message-header"),
            body,
            content=message.content,
            classes=f"chat-message {css_class}",
        )


class DebugPanel(RichLog):
    """Trace log fed by the store, HTTP client and naming assistant.

    Hidden by the app stylesheet; opened with --log-level or Ctrl+D.
    """

    BORDER_TITLE = "Log"

    LEVEL_STYLES = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    COMPONENT_STYLES = {
        "TUI": "cyan",
        "Store": "green",
        "HTTP": "magenta",
        "Naming": "bright_blue",
    }

    def __init__(self, *args, threshold: LogLevel = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(*args, markup=True, highlight=False, wrap=False, **kwargs)
        self._threshold = threshold

    @property
    def log_level(self) -> LogLevel:
        return self._threshold

    @log_level.setter
    def log_level(self, level: LogLevel) -> None:
        self._threshold = level
        self._refresh_subtitle()

    def _refresh_subtitle(self) -> None:
        self.border_subtitle = f"Level: {self._threshold.name}" if self.display else "Hidden"

    def write_entry(self, component: str, message: str, level: LogLevel = LogLevel.DEBUG) -> None:
        """Append one line unless ``level`` is below the threshold."""
        if level < self._threshold:
            return
        stamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_style = self.LEVEL_STYLES.get(level, "white")
        component_style = self.COMPONENT_STYLES.get(component, "white")
        body = escape(truncate(message, LOG_MAX_MESSAGE_LENGTH))
        self.write(
            f"[dim]{stamp}[/] [{level_style}]{level.name:<7}[/] "
            f"[{component_style}]{escape(f'[{component}]')}[/] {body}"
        )

    def debug(self, component: str, message: str) -> None:
        self.write_entry(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.write_entry(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.write_entry(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.write_entry(component, message, LogLevel.ERROR)

    def show(self) -> None:
        self.display = True
        self._refresh_subtitle()

    def hide(self) -> None:
        self.display = False
        self._refresh_subtitle()

    def toggle(self) -> bool:
        """Flip visibility and return whether the panel is now shown."""
        if self.display:
            self.hide()
        else:
            self.show()
        return bool(self.display)
