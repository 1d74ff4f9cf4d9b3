"""UI module containing widgets, control adapters, modals and styles."""

from ui.controls import InputControl, SwitchControl, WidgetControl
from ui.modals import UnsavedChangesModal
from ui.widgets import ModifierRow
from ui import ids

__all__ = [
    # Control adapters
    "InputControl",
    "SwitchControl",
    "WidgetControl",
    # Widgets
    "ModifierRow",
    # Modals
    "UnsavedChangesModal",
]
