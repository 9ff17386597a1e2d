"""Error dialog modal screen."""

from __future__ import annotations

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Static


class ErrorDialog(ModalScreen[str]):
    """Modal dialog for a reading list that cannot be loaded or saved.

    Dismisses with the key of the chosen option, or "dismiss" on escape.
    """

    BINDINGS = [
        Binding("escape", "dismiss", "Close", show=False),
        Binding("r", "choose('r')", "Retry", show=False),
        Binding("q", "choose('q')", "Quit", show=False),
    ]

    def __init__(
        self,
        title: str,
        message: str,
        options: list[tuple[str, str]] | None = None,
        **kwargs,
    ) -> None:
        """Initialize the error dialog.

        Args:
            title: Dialog title
            message: Error message to display
            options: List of (key, label) tuples for action buttons
        """
        super().__init__(**kwargs)
        self.dialog_title = title
        self.message = message
        self.options = options or [("r", "Retry"), ("q", "Quit")]

    def compose(self) -> ComposeResult:
        with Container(id="error-dialog"):
            yield Static(f"[bold red]{escape(self.dialog_title)}[/]", id="error-title")
            yield Static(self.message, id="error-message", markup=False)
            with Horizontal(id="error-actions"):
                for key, label in self.options:
                    yield Button(f"{escape(f'[{key.upper()}]')} {label}", id=f"btn-{key}")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id and button_id.startswith("btn-"):
            self.dismiss(button_id.removeprefix("btn-"))

    def action_choose(self, key: str) -> None:
        if any(option_key == key for option_key, _ in self.options):
            self.dismiss(key)

    def action_dismiss(self) -> None:
        self.dismiss("dismiss")
