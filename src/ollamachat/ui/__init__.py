"""Terminal UI module for ollamachat.

Provides a Textual-based TUI over the chat store.

Module structure (Parnas principle - each module hides a design decision):
- formatting.py: Code-fence extraction and syntax highlighting
- widgets.py: Custom widgets (chat list, history, input history, log rendering)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- screens.py: Modal dialogs (confirm, rename, model picker)
- app.py: Application orchestration (user interaction flow)
"""

from .app import OllamaChatApp, run_textual_tui
from .config import LogLevel
from .formatting import extract_language, highlight_code, normalize_language
from .widgets import ChatHistoryWidget, ChatInputBar, ChatListPanel, DebugPanel, ModelBar

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "ChatListPanel",
    "DebugPanel",
    "LogLevel",
    "ModelBar",
    "OllamaChatApp",
    "extract_language",
    "highlight_code",
    "normalize_language",
    "run_textual_tui",
]
