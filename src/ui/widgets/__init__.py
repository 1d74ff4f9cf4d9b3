"""Custom Textual widgets for kbd-informer preferences."""

from ui.widgets.modifier import ModifierRow

__all__ = [
    "ModifierRow",
]
