"""Main Textual TUI application.

Renders the chat store and forwards user intents into it. The store is the
only owner of chat state; this module just re-renders on change notices.
"""

import asyncio
import contextlib
from typing import Any
from uuid import UUID

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header, OptionList

from ..chat import ChangeKind, ChangeNotice, ChatStore
from ..llm import GenerationBackend
from .config import LogLevel
from .screens import ConfirmationScreen, ModelPickerScreen, RenameScreen
from .styles import APP_CSS
from .themes import DEFAULT_THEME, LLAMA_DARK, LLAMA_LIGHT, THEMES, syntax_theme_for
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    ChatListPanel,
    DebugPanel,
    ModelBar,
    copy_text,
)

# Which parts of the screen each kind of change invalidates
_REFRESH_TARGETS = {
    ChangeKind.CHAT_CREATED: {"list"},
    ChangeKind.CHAT_UPDATED: {"list", "history"},
    ChangeKind.CHAT_DELETED: {"list"},
    ChangeKind.SELECTION_CHANGED: {"list", "history"},
    ChangeKind.MODELS_CHANGED: {"models"},
    ChangeKind.MODEL_SELECTED: {"models"},
    ChangeKind.LOADING_CHANGED: {"list", "history", "models"},
}


class OllamaChatApp(App):
    """Textual TUI for chatting with a local Ollama server."""

    CSS = APP_CSS
    TITLE = "ollamachat"
    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", priority=True),
        Binding("ctrl+n", "new_chat", "New Chat"),
        Binding("ctrl+t", "rename_chat", "Rename"),
        Binding("ctrl+w", "delete_chat", "Delete", priority=True),
        Binding("ctrl+p", "pick_model", "Model"),
        Binding("ctrl+r", "refresh_models", "Refresh Models"),
        Binding("ctrl+y", "copy_last_response", "Copy Response", priority=True),
        Binding("ctrl+d", "toggle_debug", "Log", priority=True),
        Binding("f2", "toggle_dark", "Light/Dark"),
    ]

    def __init__(
        self,
        backend: GenerationBackend,
        preferred_model: str | None = None,
        log_level: str | None = None,
    ) -> None:
        super().__init__()
        self._backend = backend
        self._log_level = log_level
        self.store = ChatStore(backend, preferred_model=preferred_model)
        self._unsubscribe: Any | None = None
        self._pending_refresh: set[str] = set()

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatListPanel(id="chat-list")
        with Vertical(id="main-panel"):
            yield ModelBar(id="model-bar")
            yield ChatHistoryWidget(id="chat-history")
            yield DebugPanel(id="debug-panel")
            yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        for theme in THEMES:
            self.register_theme(theme)
        self.theme = DEFAULT_THEME

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.parse(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        self.store.set_debug_callback(self._route_debug)
        if hasattr(self._backend, "set_debug_callback"):
            self._backend.set_debug_callback(self._route_debug)
        self._unsubscribe = self.store.subscribe(self._on_store_change)

        base_url = getattr(self._backend, "base_url", "")
        self.sub_title = base_url or "local"

        self._schedule_refresh({"list", "history", "models"})
        self._fetch_models()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.store.set_debug_callback(None)
        if hasattr(self._backend, "set_debug_callback"):
            self._backend.set_debug_callback(None)

    def _route_debug(self, level: str, component: str, message: str) -> None:
        """Route debug messages to the log panel."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        if level == "debug":
            log_panel.debug(component, message)
        elif level == "info":
            log_panel.info(component, message)
        elif level == "warning":
            log_panel.warning(component, message)
        elif level == "error":
            log_panel.error(component, message)

    def _on_store_change(self, notice: ChangeNotice) -> None:
        targets = set(_REFRESH_TARGETS.get(notice.kind, ()))
        if "history" in targets and notice.kind in (ChangeKind.CHAT_UPDATED, ChangeKind.LOADING_CHANGED):
            if notice.chat_id != self.store.selected_chat_id:
                targets.discard("history")
        self._schedule_refresh(targets)

    def _schedule_refresh(self, targets: set[str]) -> None:
        """Coalesce re-renders: many notices in one tick cause one refresh."""
        if not targets:
            return
        already_scheduled = bool(self._pending_refresh)
        self._pending_refresh |= targets
        if not already_scheduled:
            self.call_later(self._flush_refresh)

    async def _flush_refresh(self) -> None:
        targets, self._pending_refresh = self._pending_refresh, set()
        store = self.store

        if "list" in targets:
            chat_list = self.query_one("#chat-list", ChatListPanel)
            loading_ids = [chat.id for chat in store.chats if store.is_chat_loading(chat.id)]
            chat_list.show_chats(store.chats, store.selected_chat_id, loading_ids)

        if "models" in targets:
            model_bar = self.query_one("#model-bar", ModelBar)
            model_bar.show_status(store.selected_model, len(store.available_models), store.is_loading)

        if "history" in targets:
            history = self.query_one("#chat-history", ChatHistoryWidget)
            selected = store.selected_chat
            loading = selected is not None and store.is_chat_loading(selected.id)
            await history.show_chat(selected, self._code_theme(), loading)

    def _code_theme(self) -> str:
        return syntax_theme_for(self.get_theme(self.theme))

    @on(OptionList.OptionSelected, "#chat-list")
    def on_chat_chosen(self, event: OptionList.OptionSelected) -> None:
        if event.option.id is not None:
            self.store.select_chat(UUID(event.option.id))

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        prompt = event.value
        if not prompt:
            return
        if not self.store.selected_model:
            self.notify("No model selected. Press Ctrl+P to pick one.", severity="warning", timeout=4)
            return

        chat_id = self.store.selected_chat_id
        if chat_id is None:
            chat_id = self.store.create_chat().id
        self._send(chat_id, prompt)

    @work(group="send")
    async def _send(self, chat_id: UUID, prompt: str) -> None:
        """Send a prompt as a background async worker."""
        reply = await self.store.send_message(chat_id, prompt)
        if reply is None:
            chat = self.store.get_chat(chat_id)
            if chat is not None and chat.error:
                self.notify(f"Error: {chat.error[:80]}", severity="error", timeout=5)

    @work(exclusive=True, group="models")
    async def _fetch_models(self) -> None:
        """Refresh the model list as a background async worker."""
        if not await self.store.fetch_models():
            base_url = getattr(self._backend, "base_url", "the server")
            self.notify(f"Could not list models from {base_url}", severity="error", timeout=5)
        elif not self.store.available_models:
            self.notify("No models installed on the server", severity="warning", timeout=5)

    def action_new_chat(self) -> None:
        self.store.create_chat()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def action_rename_chat(self) -> None:
        chat = self.store.selected_chat
        if chat is None:
            self.notify("No chat selected", severity="warning")
            return

        def _apply(title: str | None) -> None:
            if title:
                self.store.rename_chat(chat.id, title)

        self.push_screen(RenameScreen(chat.title), callback=_apply)

    def action_delete_chat(self) -> None:
        chat = self.store.selected_chat
        if chat is None:
            self.notify("No chat selected", severity="warning")
            return

        def _apply(answer: str | None) -> None:
            if answer == "yes":
                self.store.delete_chat(chat.id)
                self.notify("Chat deleted", timeout=2)

        self.push_screen(ConfirmationScreen(f"Delete chat '{chat.title}'?"), callback=_apply)

    def action_pick_model(self) -> None:
        models = list(self.store.available_models)
        if not models:
            self.notify("No models available. Press Ctrl+R to refresh.", severity="warning")
            return

        def _apply(name: str | None) -> None:
            if name:
                self.store.select_model(name)

        self.push_screen(ModelPickerScreen(models, self.store.selected_model), callback=_apply)

    def action_refresh_models(self) -> None:
        self._fetch_models()

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        history = self.query_one("#chat-history", ChatHistoryWidget)
        response = history.get_last_response()
        if response:
            self.notify(copy_text(self, response), timeout=2)
        else:
            self.notify("No response to copy", severity="warning")

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_toggle_dark(self) -> None:
        self.theme = LLAMA_LIGHT.name if self.theme == LLAMA_DARK.name else LLAMA_DARK.name
        self._schedule_refresh({"history"})


async def run_textual_tui(
    backend: GenerationBackend,
    preferred_model: str | None = None,
    log_level: str | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        backend: Generation backend (closed when the app exits)
        preferred_model: Model to select once the model list arrives
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = OllamaChatApp(
        backend=backend,
        preferred_model=preferred_model,
        log_level=log_level,
    )
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        await app.store.drain()
        with contextlib.suppress(RuntimeError):
            await backend.close()
