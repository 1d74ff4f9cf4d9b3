"""Field mapping registry for UI ↔ Config synchronization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from textual.widgets import Input, Switch

from controller.validators import validate_icon_path
from model.schema import MODIFIERS, modifier_keys


@dataclass
class FieldMapping:
    """Maps a UI widget to a setting key.

    The widget ID is the setting key itself.
    """

    key: str  # e.g., "shift-symbol"
    widget_type: type  # Input or Switch
    value_transform: Callable[[Any], Any] | None = None  # UI value -> setting value, None = reject


def _modifier_mappings(name: str) -> list[FieldMapping]:
    keys = modifier_keys(name)
    return [
        FieldMapping(keys.symbol, Input),
        # File-path control: just another string-valued field
        FieldMapping(keys.icon, Input, validate_icon_path),
        FieldMapping(keys.use_icon, Switch),
    ]


# Registry of all input/switch mappings, in row order
FIELD_MAPPINGS: list[FieldMapping] = [
    mapping for name in MODIFIERS for mapping in _modifier_mappings(name)
]
