"""Modal screens for the TUI.

This module hides the design decisions about:
- Dialog appearance (CSS, layout)
- Keyboard shortcuts for dialogs
- How confirmations, renames and model choices are collected

Each screen dismisses with the chosen value, or None when cancelled.
"""

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, OptionList, Static

DIALOG_CSS = """
{screen} {{
    align: center middle;
    background: $background 70%;
}}

.dialog {{
    width: 60;
    height: auto;
    max-height: 24;
    border: tall $accent;
    background: $surface;
    padding: 1 2;
}}

.dialog-title {{
    width: 100%;
    text-align: center;
    text-style: bold;
    color: $accent;
    padding: 0 0 1 0;
}}

.dialog-help {{
    width: 100%;
    color: $text-muted;
    padding-top: 1;
}}
"""


class ConfirmationScreen(ModalScreen[str | None]):
    """Yes/no style confirmation dialog."""

    CSS = DIALOG_CSS.format(screen="ConfirmationScreen") + """
    #confirmation-prompt {
        width: 100%;
        text-align: center;
        padding: 1 2;
        background: $panel;
        border: round $border;
    }

    #confirmation-buttons {
        width: 100%;
        height: 3;
        align: center middle;
        margin-top: 1;
    }

    #confirmation-buttons Button {
        margin: 0 1;
        min-width: 10;
    }
    """

    BINDINGS = [
        Binding("y", "confirm_yes", "Yes", show=False),
        Binding("n", "confirm_no", "No", show=False),
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def __init__(self, prompt: str, options: list[str] | None = None) -> None:
        super().__init__()
        self._prompt = prompt
        self._options = options or ["yes", "no"]

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static("Confirmation Required", classes="dialog-title")
            yield Static(Text(self._prompt), id="confirmation-prompt")
            with Horizontal(id="confirmation-buttons"):
                for option in self._options:
                    if option.lower() == "yes":
                        variant = "error"
                    elif option.lower() == "no":
                        variant = "primary"
                    else:
                        variant = "default"
                    yield Button(option.capitalize(), id=f"btn-{option}", variant=variant)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id.startswith("btn-"):
            self.dismiss(button_id[4:])

    def action_confirm_yes(self) -> None:
        if "yes" in self._options:
            self.dismiss("yes")

    def action_confirm_no(self) -> None:
        if "no" in self._options:
            self.dismiss("no")

    def action_cancel(self) -> None:
        self.dismiss(None)


class RenameScreen(ModalScreen[str | None]):
    """Prompt for a new chat title."""

    CSS = DIALOG_CSS.format(screen="RenameScreen")

    BINDINGS = [Binding("escape", "cancel", "Cancel", show=False)]

    def __init__(self, current_title: str) -> None:
        super().__init__()
        self._current_title = current_title

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static("Rename Chat", classes="dialog-title")
            yield Input(value=self._current_title, placeholder="Chat title", id="rename-input")
            yield Static("Enter to save  |  Esc to cancel", classes="dialog-help")

    def on_mount(self) -> None:
        self.query_one("#rename-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        title = event.value.strip()
        self.dismiss(title or None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class ModelPickerScreen(ModalScreen[str | None]):
    """Choose one of the models the server reported."""

    CSS = DIALOG_CSS.format(screen="ModelPickerScreen") + """
    #model-picker-options {
        height: auto;
        max-height: 16;
    }
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel", show=False)]

    def __init__(self, models: list[str], active_model: str) -> None:
        super().__init__()
        self._models = models
        self._active_model = active_model

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static("Select Model", classes="dialog-title")
            yield OptionList(*(Text(name) for name in self._models), id="model-picker-options")
            yield Static("Enter/click to select  |  Esc to cancel", classes="dialog-help")

    def on_mount(self) -> None:
        options = self.query_one("#model-picker-options", OptionList)
        if self._active_model in self._models:
            options.highlighted = self._models.index(self._active_model)
        elif self._models:
            options.highlighted = 0
        options.focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        if 0 <= event.option_index < len(self._models):
            self.dismiss(self._models[event.option_index])

    def action_cancel(self) -> None:
        self.dismiss(None)
