"""Controller layer: mediates between UI controls and the settings store.

This package contains:
- cache: SettingsCache, the single owner of current and saved values
- presets: PresetManager for reset/save over a group of keys
- binding: FieldBinding with echo suppression
- sync: SyncCoordinator tying store notifications, bindings and buttons together
"""

from controller.binding import BindingState, Control, FieldBinding, FieldBindings
from controller.cache import SavedDiff, SettingsCache
from controller.field_mappings import FIELD_MAPPINGS, FieldMapping
from controller.presets import PresetManager
from controller.sync import Affordances, GroupState, SyncCoordinator

__all__ = [
    # Cache
    "SavedDiff",
    "SettingsCache",
    # Presets
    "PresetManager",
    # Bindings
    "BindingState",
    "Control",
    "FieldBinding",
    "FieldBindings",
    "FIELD_MAPPINGS",
    "FieldMapping",
    # Sync
    "Affordances",
    "GroupState",
    "SyncCoordinator",
]
