"""Shared fixtures for kbd-informer preferences tests."""

from typing import Any, Callable

import pytest

from controller import FieldBindings, PresetManager, SettingsCache
from store import ConfigStore


class FakeLoop:
    """Cooperative single-threaded loop: defer() queues, run() drains FIFO."""

    def __init__(self) -> None:
        self.queue: list[Callable[[], None]] = []

    def defer(self, callback: Callable[[], None]) -> None:
        self.queue.append(callback)

    def run(self) -> None:
        while self.queue:
            self.queue.pop(0)()


class FakeControl:
    """A control that reports a change on every write, like real toolkits do.

    With a loop, the synthetic change event is queued on the loop (delivered
    after the write returns); without one it fires synchronously.
    """

    def __init__(self, value: Any = "", loop: FakeLoop | None = None) -> None:
        self._value = value
        self._loop = loop
        self._callbacks: list[Callable[[Any], None]] = []
        self.destroyed = False
        self.writes = 0

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        self._value = value
        self.writes += 1
        if self._loop is not None:
            self._loop.defer(lambda: self._emit(value))
        else:
            self._emit(value)

    @property
    def is_destroyed(self) -> bool:
        return self.destroyed

    def connect_changed(self, callback: Callable[[Any], None]) -> None:
        self._callbacks.append(callback)

    def user_types(self, value: Any) -> None:
        """Simulate a user edit."""
        self._value = value
        self._emit(value)

    def destroy(self) -> None:
        self.destroyed = True

    def _emit(self, value: Any) -> None:
        for callback in self._callbacks:
            callback(value)


@pytest.fixture
def store_path(tmp_path):
    """Settings file inside a temporary config directory."""
    return tmp_path / "config" / "settings.json"


@pytest.fixture
def store(store_path):
    """ConfigStore backed by a temporary file."""
    return ConfigStore(store_path)


@pytest.fixture
def cache(store):
    """Loaded SettingsCache over the temporary store."""
    cache = SettingsCache(store)
    cache.load()
    return cache


@pytest.fixture
def loop():
    return FakeLoop()


@pytest.fixture
def bindings(loop):
    """FieldBindings deferring restoration to the fake loop."""
    return FieldBindings(defer=loop.defer)


@pytest.fixture
def group(cache):
    """Preset group over every modifier's symbol and icon-path keys."""
    return PresetManager.for_modifiers(cache)


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point XDG directories and the settings override into tmp_path."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "xdg-state"))
    monkeypatch.delenv("KBD_INFORMER_CONFIG", raising=False)
    return tmp_path


@pytest.fixture
def blocked_path(tmp_path):
    """Settings path whose parent is a regular file, so every write fails."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    return blocker / "settings.json"
