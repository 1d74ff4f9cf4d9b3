"""Textual adapters implementing the controller's Control protocol."""

from __future__ import annotations

from typing import Any, Callable

from textual.message import Message
from textual.widget import Widget
from textual.widgets import Input, Switch


class WidgetControl:
    """Wraps a value widget (Input, Switch) for a FieldBinding.

    The owning container routes the widget's Changed message to
    emit_changed(). Programmatic writes go through ``value`` and are made
    under ``prevent(<Changed>)``, so Textual does not post a synthetic change
    at all; the binding's own suppression covers toolkits that would.
    """

    changed_message: type[Message]

    def __init__(self, widget: Widget, on_value_set: Callable[[Any], None] | None = None) -> None:
        """Create an adapter.

        Args:
            widget: The wrapped Textual widget
            on_value_set: Called after a programmatic write (e.g. to swap views)
        """
        self.widget = widget
        self._on_value_set = on_value_set
        self._callbacks: list[Callable[[Any], None]] = []

    @property
    def value(self) -> Any:
        return self.widget.value

    @value.setter
    def value(self, value: Any) -> None:
        with self.widget.prevent(self.changed_message):
            self.widget.value = value
        if self._on_value_set is not None:
            self._on_value_set(value)

    @property
    def is_destroyed(self) -> bool:
        """True once the widget has been removed from the DOM."""
        return not self.widget.is_attached

    def connect_changed(self, callback: Callable[[Any], None]) -> None:
        self._callbacks.append(callback)

    def emit_changed(self, value: Any) -> None:
        """Deliver a user change to every connected callback."""
        for callback in list(self._callbacks):
            callback(value)


class InputControl(WidgetControl):
    """Text and file-path inputs."""

    changed_message = Input.Changed


class SwitchControl(WidgetControl):
    """The use-icon switch."""

    changed_message = Switch.Changed
