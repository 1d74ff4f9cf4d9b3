"""SettingsCache: in-memory mirror of the store's current and saved values."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable

from constants import SAVED_SYMBOLS_KEY
from model.schema import FIELD_KEYS, summary_for
from store import WriteError

if TYPE_CHECKING:
    from store import ConfigStore

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavedDiff:
    """One key whose current value differs from the saved preset."""

    key: str
    summary: str
    current: str
    saved: str


class SettingsCache:
    """Owns the "current" record and the "saved" preset.

    Every other component reads through the cache and asks it to mutate;
    nobody keeps a private copy. That single-writer rule is what lets
    reconcile_external() recognise the echo of a local write without locks.

    The saved preset may omit keys. A missing entry compares as "", never as a
    distinct "unset" state.
    """

    def __init__(self, store: ConfigStore) -> None:
        self._store = store
        self.current: dict[str, Any] = {}
        self.saved: dict[str, str] = {}
        self._loaded = False

    def load(self) -> None:
        """Read every field key and the preset from the store."""
        self.current = {key: self._store.get(key) for key in FIELD_KEYS}
        self.saved = self._store.get_preset()
        self._loaded = True
        log.debug(f"Current values: {self.current}")
        log.debug(f"Saved symbols: {self.saved}")

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise RuntimeError("SettingsCache.load() must be called first")

    def get(self, key: str) -> Any:
        self._require_loaded()
        return self.current[key]

    # =========================================================================
    # Writes
    # =========================================================================

    def set_string(self, key: str, value: str) -> None:
        """Write a string setting through to the store."""
        if not isinstance(value, str):
            raise WriteError(f"Invalid value for {key}: expected str, got {type(value).__name__}")
        self._write(key, value)

    def set_boolean(self, key: str, value: bool) -> None:
        """Write a boolean setting through to the store."""
        if not isinstance(value, bool):
            raise WriteError(f"Invalid value for {key}: expected bool, got {type(value).__name__}")
        self._write(key, value)

    def _write(self, key: str, value: Any) -> None:
        self._require_loaded()
        if key == SAVED_SYMBOLS_KEY:
            raise WriteError(f"{key} is written with promote(), not as a field")
        # Validate first so a rejected value leaves current untouched, then
        # update current before the store notifies: the notification of this
        # very write must find the cache already up to date. A write the store
        # could not persist restores the previous value.
        self._store.validate(key, value)
        previous = self.current.get(key)
        self.current[key] = value
        try:
            self._store.set(key, value)
        except WriteError:
            self.current[key] = previous
            raise

    # =========================================================================
    # Queries
    # =========================================================================

    def equals_default(self, keys: Iterable[str], defaults: Iterable[Any] | None = None) -> bool:
        """True if every key holds its default.

        Args:
            keys: Keys to compare
            defaults: Default per key, in the same order; the schema defaults
                when omitted
        """
        self._require_loaded()
        if defaults is None:
            return all(self.current[key] == self._store.get_default(key) for key in keys)
        return all(self.current[key] == default for key, default in zip(keys, defaults))

    def equals_saved(self, keys: Iterable[str]) -> bool:
        """True if every key matches the saved preset (missing = "")."""
        self._require_loaded()
        return all(self.current[key] == self.saved.get(key, "") for key in keys)

    def saved_diff(self, keys: Iterable[str]) -> list[SavedDiff]:
        """Rows for every key whose current value differs from the preset."""
        self._require_loaded()
        rows = []
        for key in keys:
            current = self.current.get(key, "")
            saved = self.saved.get(key, "")
            if current != saved:
                rows.append(SavedDiff(key, summary_for(key), str(current), str(saved)))
        return rows

    # =========================================================================
    # Preset
    # =========================================================================

    def promote(self, keys: Iterable[str]) -> None:
        """Copy current values of keys into the preset and persist all of it.

        Keys already in the preset but not in keys are re-written unchanged.
        """
        self._require_loaded()
        previous = dict(self.saved)
        for key in keys:
            self.saved[key] = self.current[key]
        log.debug(f"Saving current symbols: {self.saved}")
        try:
            self._store.set_preset(self.saved)
        except WriteError:
            self.saved = previous
            raise

    # =========================================================================
    # External changes
    # =========================================================================

    def reconcile_external(self, key: str, new_value: Any) -> bool:
        """Apply a store change notification.

        Returns:
            True if the value differed and dependent UI must refresh;
            False for the echo of a local write.
        """
        self._require_loaded()
        if self.current.get(key) == new_value:
            return False
        log.debug(f"External change {key}: {self.current.get(key)!r} -> {new_value!r}")
        self.current[key] = new_value
        return True

    def reconcile_saved(self, new_saved: dict[str, str]) -> bool:
        """Apply an external change of the preset; True if it differed."""
        self._require_loaded()
        if _symbols_equal(self.saved, new_saved):
            return False
        log.debug("Saved symbols changed externally")
        self.saved = dict(new_saved)
        return True


def _symbols_equal(a: dict[str, str], b: dict[str, str]) -> bool:
    if len(a) != len(b):
        return False
    return all(a.get(key, "") == b.get(key, "") for key in a)
