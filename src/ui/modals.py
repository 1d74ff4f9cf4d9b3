"""Modal dialogs for preset management."""

from __future__ import annotations

from textual import on
from textual.app import ComposeResult
from textual.containers import Grid, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, Static

from controller.cache import SavedDiff
from ui.ids import css
import ui.ids as ids

# Modal responses
CANCEL = "cancel"
SAVE = "save"
RESET = "reset"


class UnsavedChangesModal(ModalScreen[str]):
    """Confirm resetting while custom symbols are not saved.

    Shows a comparison grid (setting, custom value, saved value) for every
    differing key. Dismisses with CANCEL, SAVE (save first, then reset) or
    RESET (discard the custom values).
    """

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, title: str, rows: list[SavedDiff]) -> None:
        super().__init__()
        self._title = title
        self._rows = rows

    def compose(self) -> ComposeResult:
        with Vertical(id=ids.UNSAVED_MODAL):
            yield Label("Unsaved custom symbols", id=ids.MODAL_TITLE)
            yield Static(
                "Resetting will discard your custom symbols. Do you want to save before resetting?",
                classes="modal-body",
            )
            if self._rows:
                with Grid(id=ids.UNSAVED_GRID):
                    for header in (self._title, "Custom", "Saved"):
                        yield Label(header, classes="grid-heading")
                    for row in self._rows:
                        yield Label(row.summary, classes="grid-heading")
                        yield Label(row.current or "—")
                        yield Label(row.saved or "—")
            with Horizontal(id=ids.MODAL_BUTTONS):
                yield Button("Cancel", id=ids.MODAL_CANCEL_BTN, variant="default")
                yield Button("Save", id=ids.MODAL_SAVE_BTN, variant="success")
                yield Button("Reset", id=ids.MODAL_RESET_BTN, variant="error")

    def on_mount(self) -> None:
        self.query_one(css(ids.MODAL_CANCEL_BTN), Button).focus()

    def action_cancel(self) -> None:
        self.dismiss(CANCEL)

    @on(Button.Pressed, css(ids.MODAL_CANCEL_BTN))
    def on_cancel(self, event: Button.Pressed) -> None:
        self.dismiss(CANCEL)

    @on(Button.Pressed, css(ids.MODAL_SAVE_BTN))
    def on_save(self, event: Button.Pressed) -> None:
        self.dismiss(SAVE)

    @on(Button.Pressed, css(ids.MODAL_RESET_BTN))
    def on_reset(self, event: Button.Pressed) -> None:
        self.dismiss(RESET)
