"""Main TUI application for kbd-informer preferences."""

import logging
from pathlib import Path

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.css.query import NoMatches
from textual.widgets import Button, Label, Static

from constants import APP_NAME, state_dir
from controller import (
    FIELD_MAPPINGS,
    Affordances,
    FieldBindings,
    PresetManager,
    SettingsCache,
    SyncCoordinator,
)
from model import MODIFIERS, ModifierField
from store import ConfigStore
from ui import ModifierRow, UnsavedChangesModal
from ui.ids import css, row_id
from ui.modals import RESET, SAVE
import ui.ids as ids

log = logging.getLogger(__name__)

# Load CSS from file
APP_CSS = (Path(__file__).parent / "ui" / "styles.css").read_text()

# Seconds between checks for changes written by other processes
POLL_INTERVAL = 1.0


def _get_log_path() -> Path:
    """Get the log file path using XDG Base Directory spec."""
    log_dir = state_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "prefs.log"


def setup_logging() -> None:
    """Send debug logging to the XDG state directory."""
    logging.basicConfig(
        filename=str(_get_log_path()),
        level=logging.DEBUG,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


class KeyboardInformerPrefs(App):
    """Preferences surface for the keyboard modifier indicator."""

    TITLE = "Keyboard Informer Preferences"
    ENABLE_COMMAND_PALETTE = False
    CSS = APP_CSS

    BINDINGS = [
        Binding("ctrl+s", "save", "Save", show=True),
        Binding("ctrl+r", "reset", "Reset", show=True),
        Binding("escape", "quit", "Quit", show=True),
        Binding("q", "quit", "Quit", show=False),
    ]

    def __init__(self, store: ConfigStore | None = None, poll_interval: float = POLL_INTERVAL) -> None:
        super().__init__()
        self.store = store if store is not None else ConfigStore()
        self.poll_interval = poll_interval
        self.cache = SettingsCache(self.store)
        self.cache.load()
        self.group = PresetManager.for_modifiers(self.cache)
        self.field_bindings = FieldBindings(defer=self.call_later)
        self.coordinator = SyncCoordinator(
            self.store,
            self.cache,
            [self.group],
            self.field_bindings,
            on_affordances=self._apply_affordances,
            on_error=self._on_write_error,
        )

    def compose(self) -> ComposeResult:
        log.info("compose() called")

        yield Horizontal(
            Label(self.group.title, id=ids.HEADER_TITLE),
            Button("Reset to defaults", id=ids.RESET_BTN, variant="default"),
            Button("Save", id=ids.SAVE_BTN, variant="success"),
            id=ids.HEADER_CONTAINER,
        )
        yield Static(self.group.description, id=ids.GROUP_DESCRIPTION)

        with VerticalScroll(id=ids.MODIFIER_LIST):
            for name in MODIFIERS:
                yield ModifierRow(ModifierField.from_record(name, self.cache.current))

        yield Horizontal(
            Static("", id=ids.STATUS_BAR),
            id=ids.FOOTER,
        )

    # =========================================================================
    # Status and Affordances
    # =========================================================================

    def _set_status(self, message: str) -> None:
        """Set status bar message."""
        try:
            status = self.query_one(css(ids.STATUS_BAR), Static)
            status.update(message)
        except NoMatches:
            pass

    def _apply_affordances(self, group_name: str, affordances: Affordances) -> None:
        """Enable reset / show save according to the group state."""
        try:
            self.query_one(css(ids.RESET_BTN), Button).disabled = not affordances.reset_enabled
            self.query_one(css(ids.SAVE_BTN), Button).display = affordances.save_visible
        except NoMatches:
            log.debug("Group buttons not found")

    def _on_write_error(self, key: str, error: Exception) -> None:
        self._set_status(f"Could not save {key}: {error}")

    # =========================================================================
    # Reset and Save
    # =========================================================================

    @on(Button.Pressed, css(ids.RESET_BTN))
    def on_reset_pressed(self, event: Button.Pressed) -> None:
        self.action_reset()

    @on(Button.Pressed, css(ids.SAVE_BTN))
    def on_save_pressed(self, event: Button.Pressed) -> None:
        self.action_save()

    def action_reset(self) -> None:
        """Reset to defaults, asking first if custom symbols are unsaved."""
        if self.group.is_at_default():
            return
        rows = self.group.unsaved_changes()
        if rows:
            self.push_screen(UnsavedChangesModal(self.group.title, rows), self._on_unsaved_result)
        else:
            self._reset()

    def action_save(self) -> None:
        if self.group.is_at_saved():
            return
        log.debug("Save requested")
        if self.coordinator.save(self.group.name):
            self._set_status("Saved current symbols")

    def _on_unsaved_result(self, response: str | None) -> None:
        log.debug(f"Unsaved changes dialog response: {response}")
        if response == SAVE:
            # Keep the custom values if they could not be saved
            if self.coordinator.save(self.group.name):
                self._reset()
        elif response == RESET:
            self._reset()

    def _reset(self) -> None:
        changed = self.coordinator.reset(self.group.name)
        if changed is None:
            return
        self._set_status(f"Reset {len(changed)} setting(s) to defaults" if changed else "Already at defaults")

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _bind_controls(self) -> None:
        controls = {}
        for name in MODIFIERS:
            row = self.query_one(css(row_id(name)), ModifierRow)
            controls.update(row.controls)
        for mapping in FIELD_MAPPINGS:
            control = controls.get(mapping.key)
            if control is None:
                log.warning(f"No control for {mapping.key}")
                continue
            self.coordinator.bind_field(mapping, control)

    def on_mount(self) -> None:
        """Called when the app is mounted."""
        self._bind_controls()
        self.coordinator.attach()
        self.coordinator.refresh()
        if self.poll_interval > 0:
            self.set_interval(self.poll_interval, self.store.poll)
        log.info(f"{APP_NAME} preferences opened ({self.store.path})")

    def on_unmount(self) -> None:
        self.coordinator.detach()
