"""ConfigStore: durable key/value storage for modifier settings."""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator

from constants import SAVED_SYMBOLS_KEY, default_config_path
from model.schema import SCHEMA, SettingSpec

log = logging.getLogger(__name__)

# Subscription key matching every setting
ALL_KEYS = "*"


class WriteError(Exception):
    """Raised when a write names an unknown key, has the wrong value type,
    or cannot be persisted."""


class ConfigStore:
    """JSON-file backed settings store with per-key change notification.

    Only explicitly written keys are kept in the file; everything else reads
    as its schema default. Other processes may write the same file, so every
    local write merges into the on-disk document instead of overwriting it,
    and poll() picks up their changes.

    Notifications are delivered synchronously, in write order, one per
    subscription per write that actually changes the stored value.

    Example usage:
        store = ConfigStore(path)
        store.subscribe("shift-symbol", lambda key: print(key, store.get(key)))
        store.set("shift-symbol", "S")    # prints "shift-symbol S"
        store.set("shift-symbol", "S")    # equal value, nothing fires
    """

    def __init__(self, path: Path | None = None, schema: dict[str, SettingSpec] = SCHEMA) -> None:
        self.path = path if path is not None else default_config_path()
        self.schema = schema
        self._values: dict[str, Any] = {}
        self._handlers: dict[int, tuple[str, Callable[[str], None]]] = {}
        self._next_handler_id = 1
        self._values = self._read_file()

    @property
    def keys(self) -> list[str]:
        """All keys declared by the schema."""
        return list(self.schema)

    # =========================================================================
    # Reads and writes
    # =========================================================================

    def get(self, key: str) -> Any:
        """Get the stored value, or the schema default when unset."""
        spec = self._spec(key)
        if key in self._values:
            return _copy(self._values[key])
        return _copy(spec.default)

    def get_default(self, key: str) -> Any:
        """Get the schema-declared default for a key."""
        return _copy(self._spec(key).default)

    def validate(self, key: str, value: Any) -> None:
        """Raise WriteError unless value may be written to key."""
        spec = self.schema.get(key)
        if spec is None:
            raise WriteError(f"Unknown setting: {key}")
        if not spec.accepts(value):
            raise WriteError(
                f"Invalid value for {key}: expected {spec.type_.__name__}, got {type(value).__name__}"
            )

    def set(self, key: str, value: Any) -> None:
        """Write a value; notify subscribers only if the value changed."""
        self.validate(key, value)
        if self.get(key) == value:
            return
        self._write_key(key, value)
        self._values[key] = _copy(value)
        log.debug(f"Set {key} = {value!r}")
        self._notify(key)

    def get_preset(self) -> dict[str, str]:
        """Get the saved symbols preset."""
        return self.get(SAVED_SYMBOLS_KEY)

    def set_preset(self, preset: dict[str, str]) -> None:
        """Replace the saved symbols preset wholesale."""
        self.validate(SAVED_SYMBOLS_KEY, preset)
        self.set(SAVED_SYMBOLS_KEY, dict(preset))

    # =========================================================================
    # Change notification
    # =========================================================================

    def subscribe(self, key: str, handler: Callable[[str], None]) -> int:
        """Register handler(key) for changes of key ("*" for every key).

        Returns:
            Handler id for unsubscribe()
        """
        if key != ALL_KEYS:
            self._spec(key)
        handler_id = self._next_handler_id
        self._next_handler_id += 1
        self._handlers[handler_id] = (key, handler)
        return handler_id

    def unsubscribe(self, handler_id: int) -> None:
        """Remove a handler registered with subscribe()."""
        self._handlers.pop(handler_id, None)

    def poll(self) -> list[str]:
        """Reload the file and notify keys another process changed.

        An unreadable file keeps the values already in memory.

        Returns:
            Keys whose value changed (each one has been notified)
        """
        document = self._load_document()
        if document is None:
            return []
        old = {key: self.get(key) for key in self.schema}
        self._values = self._parse(document)
        changed = [key for key in self.schema if self.get(key) != old[key]]
        if changed:
            log.info(f"External change to {', '.join(changed)}")
        for key in changed:
            self._notify(key)
        return changed

    def _notify(self, key: str) -> None:
        for sub_key, handler in list(self._handlers.values()):
            if sub_key not in (key, ALL_KEYS):
                continue
            try:
                handler(key)
            except Exception:
                log.exception(f"Change handler for {key} failed")

    # =========================================================================
    # Persistence
    # =========================================================================

    def _spec(self, key: str) -> SettingSpec:
        spec = self.schema.get(key)
        if spec is None:
            raise KeyError(f"Unknown setting: {key}")
        return spec

    def _load_document(self) -> dict[str, Any] | None:
        """Read the raw JSON document; None if it exists but is unusable."""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning(f"Ignoring unreadable settings file {self.path}: {e}")
            return None
        if not isinstance(data, dict):
            log.warning(f"Ignoring settings file {self.path}: top level is not an object")
            return None
        return data

    def _read_file(self) -> dict[str, Any]:
        return self._parse(self._load_document() or {})

    def _parse(self, document: dict[str, Any]) -> dict[str, Any]:
        """Keep known keys whose value has the declared type."""
        values = {}
        for key, value in document.items():
            spec = self.schema.get(key)
            if spec is None:
                log.debug(f"Ignoring unknown key in settings file: {key}")
                continue
            if not spec.accepts(value):
                log.warning(f"Ignoring {key} in settings file: wrong type {type(value).__name__}")
                continue
            values[key] = value
        return values

    def _write_key(self, key: str, value: Any) -> None:
        """Merge one key into the on-disk document.

        The read-merge-replace runs under an exclusive lock on a sidecar file,
        so a concurrent writer (another process, the CLI) cannot drop this key
        or lose its own. Keys written elsewhere survive; the next poll()
        reports them.

        Raises:
            WriteError: If the file cannot be written (nothing is changed)
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self._locked():
                document = self._load_document() or {}
                document[key] = value
                self._replace(document)
        except OSError as e:
            log.error(f"Could not write {key} to {self.path}: {e}")
            raise WriteError(f"Could not write {self.path}: {e}") from e

    @contextmanager
    def _locked(self) -> Iterator[None]:
        lock_path = self.path.with_name(f".{self.path.name}.lock")
        fd = os.open(lock_path, os.O_RDWR | os.O_CREAT, 0o644)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX)
            yield
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
            os.close(fd)

    def _replace(self, document: dict[str, Any]) -> None:
        # Unique temp name per write; a reader never sees half a file
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(json.dumps(document, indent=2, ensure_ascii=False))
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def _copy(value: Any) -> Any:
    return dict(value) if isinstance(value, dict) else value
