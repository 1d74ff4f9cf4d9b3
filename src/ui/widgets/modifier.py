"""Modifier configuration widget: ModifierRow."""

from __future__ import annotations

from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.css.query import NoMatches
from textual.widgets import ContentSwitcher, Input, Label, Switch

from model import ModifierField, modifier_keys
from ui.controls import InputControl, SwitchControl, WidgetControl
from ui.ids import css, row_id, stack_id


class ModifierRow(Horizontal):
    """One modifier: label, symbol or icon-path input, use-icon switch.

    The symbol and icon-path inputs share a ContentSwitcher; the switch picks
    which one is shown. Widget IDs are the setting keys.
    """

    def __init__(self, field: ModifierField) -> None:
        super().__init__(id=row_id(field.id), classes="modifier-row")
        self.field = field
        self.keys = modifier_keys(field.id)
        self.symbol_input = Input(value=field.symbol, id=self.keys.symbol, classes="symbol-input")
        self.icon_input = Input(
            value=field.icon_path,
            placeholder="Select file...",
            id=self.keys.icon,
            classes="icon-input",
        )
        self.use_icon_switch = Switch(value=field.use_icon, id=self.keys.use_icon)
        self._controls: dict[str, WidgetControl] = {
            self.keys.symbol: InputControl(self.symbol_input),
            self.keys.icon: InputControl(self.icon_input),
            self.keys.use_icon: SwitchControl(self.use_icon_switch, on_value_set=self.show_view),
        }

    def compose(self) -> ComposeResult:
        yield Label(self.field.label, classes="modifier-label")
        with ContentSwitcher(
            initial=self._view_for(self.field.use_icon),
            id=stack_id(self.field.id),
            classes="modifier-stack",
        ):
            yield self.symbol_input
            yield self.icon_input
        yield self.use_icon_switch

    @property
    def controls(self) -> dict[str, WidgetControl]:
        """Control adapters keyed by setting key."""
        return self._controls

    def _view_for(self, use_icon: bool) -> str:
        return self.keys.icon if use_icon else self.keys.symbol

    def show_view(self, use_icon: bool) -> None:
        """Show the icon-path input when use_icon, else the symbol input."""
        try:
            stack = self.query_one(css(stack_id(self.field.id)), ContentSwitcher)
            stack.current = self._view_for(use_icon)
        except NoMatches:
            pass

    @on(Input.Changed)
    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        control = self._controls.get(event.input.id or "")
        if control is not None:
            control.emit_changed(event.value)

    @on(Switch.Changed)
    def on_switch_changed(self, event: Switch.Changed) -> None:
        event.stop()
        self.show_view(event.value)
        self._controls[self.keys.use_icon].emit_changed(event.value)
