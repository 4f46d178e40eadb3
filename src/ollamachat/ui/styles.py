"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.

Layout:
- Left: chat list sidebar
- Right: model bar, conversation, optional log panel, input bar
"""

APP_CSS = """
Screen {
    layout: horizontal;
    background: $background;
}

/* Chat list sidebar */
#chat-list {
    width: 34;
    height: 100%;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    padding: 0 1;

    &:focus {
        border: round $primary;
    }
}

#main-panel {
    width: 1fr;
    height: 100%;
}

#model-bar {
    height: 1;
    padding: 0 2;
    color: $text-muted;
}

/* Conversation */
#chat-history {
    height: 1fr;
    background: $panel;
    border: round $secondary 60%;
    border-title-color: $secondary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $secondary;
    }
}

.chat-message {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;

    &:hover {
        background: $surface;
    }
}

.user-message {
    border-left: thick $primary;
}

.assistant-message {
    border-left: thick $secondary;
}

.message-header {
    color: $text-muted;
    text-style: bold;
}

.message-content {
    height: auto;
    margin: 0;
}

.code-block {
    background: $surface;
    padding: 0 1;
    overflow-x: auto;
}

.pending-reply {
    margin: 1 0 0 0;
    color: $accent;
    text-style: italic;
}

.chat-error {
    margin: 1 0 0 0;
    color: $error;
    text-style: bold;
}

/* Log panel */
#debug-panel {
    display: none;
    height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
}

/* Input bar */
#chat-input-bar {
    height: auto;
    max-height: 10;
    padding: 0 0 0 0;
}

#chat-input {
    width: 1fr;
    height: auto;
    min-height: 3;
    max-height: 10;
    border: round $border;

    &:focus {
        border: round $primary;
    }
}

#send-btn {
    width: 10;
    height: 3;
    margin: 0 0 0 1;
}
"""
