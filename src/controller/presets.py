"""PresetManager: default/saved-preset derivations for one group of keys."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence

from model.schema import MODIFIERS, SCHEMA, modifier_keys
from store import WriteError

if TYPE_CHECKING:
    from controller.binding import FieldBindings
    from controller.cache import SavedDiff, SettingsCache

log = logging.getLogger(__name__)


class PresetManager:
    """Reset and save operations over a fixed, ordered list of keys.

    Only symbol and icon-path keys belong in a preset group. The use-icon
    booleans are neither compared with nor written to the saved preset; they
    are also left alone by reset_to_default().
    """

    def __init__(
        self,
        cache: SettingsCache,
        keys: Sequence[str],
        defaults: Sequence[Any],
        name: str = "default",
        title: str = "",
        description: str = "",
    ) -> None:
        if len(keys) != len(defaults):
            raise ValueError(
                f"Preset group '{name}': {len(keys)} keys but {len(defaults)} defaults"
            )
        self.cache = cache
        self.keys = list(keys)
        self.defaults = list(defaults)
        self.name = name
        self.title = title
        self.description = description

    @classmethod
    def for_modifiers(
        cls,
        cache: SettingsCache,
        modifiers: Sequence[str] = MODIFIERS,
        name: str = "modifiers",
        title: str = "Symbols for modifier keys",
        description: str = "Sets the symbols or icons displayed for modifier keys when they are pressed.",
    ) -> "PresetManager":
        """Build a group over the symbol and icon-path keys of modifiers."""
        keys = [key for mod in modifiers for key in modifier_keys(mod).preset_keys]
        defaults = [SCHEMA[key].default for key in keys]
        return cls(cache, keys, defaults, name=name, title=title, description=description)

    def is_at_default(self) -> bool:
        """True if every key holds the group's default.

        Compared against the group's own defaults, the values
        reset_to_default() applies, which for_modifiers() takes from the schema.
        """
        return self.cache.equals_default(self.keys, self.defaults)

    def is_at_saved(self) -> bool:
        return self.cache.equals_saved(self.keys)

    def unsaved_changes(self) -> list[SavedDiff]:
        """Keys whose current value would be lost by switching away."""
        return self.cache.saved_diff(self.keys)

    def reset_to_default(self, bindings: FieldBindings | None = None) -> list[str]:
        """Apply defaults in declared order.

        Each differing key is pushed into its bound control first, then
        written through the cache. If a write fails, the control gets its
        previous value back and the error propagates; keys before it stay reset.

        Returns:
            Keys that changed

        Raises:
            WriteError: If a default could not be written
        """
        log.debug(f"Applying defaults for group {self.name}")
        changed = []
        for key, value in zip(self.keys, self.defaults):
            if self.cache.get(key) == value:
                continue
            previous = self.cache.get(key)
            if bindings is not None:
                bindings.push_value(key, value)
            try:
                self.cache.set_string(key, value)
            except WriteError:
                if bindings is not None:
                    bindings.push_value(key, previous)
                raise
            changed.append(key)
        return changed

    def save_as_preset(self) -> None:
        """Promote the group's current values to the saved preset."""
        self.cache.promote(self.keys)
