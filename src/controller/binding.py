"""FieldBinding: one editable control bound to one setting key.

Pushing a store-originated value into a control makes the toolkit report a
change, just as if the user had typed it. Forwarding that synthetic change
would write the value straight back (an echo) and, across several bindings,
can loop. Each binding therefore walks an explicit state machine:

    IDLE ──push_value()──▶ SUPPRESSED ──write done──▶ PENDING_RESTORE
      ▲                                                     │
      └──────────── deferred restore (next loop turn) ──────┘

User changes are forwarded only in IDLE. Restoration is deferred to the next
turn of the event loop, not the next line, because the toolkit may deliver
the synthetic change event after the write returns.

Controls can be destroyed while a store notification is still in flight
(the preferences surface closed). Pushes and restorations against a destroyed
control are silent no-ops.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Protocol

log = logging.getLogger(__name__)


class Control(Protocol):
    """What a binding needs from a UI control."""

    value: Any

    @property
    def is_destroyed(self) -> bool: ...

    def connect_changed(self, callback: Callable[[Any], None]) -> None: ...


class BindingState(Enum):
    """Listener state of a FieldBinding."""

    IDLE = "idle"
    SUPPRESSED = "suppressed"
    PENDING_RESTORE = "pending_restore"


class FieldBinding:
    """Binds one control to one setting key."""

    def __init__(self, key: str, defer: Callable[[Callable[[], None]], Any]) -> None:
        """Create a binding.

        Args:
            key: Setting key this binding edits
            defer: Schedules a callback on the next event-loop turn
                (e.g. App.call_later)
        """
        self.key = key
        self._defer = defer
        self._control: Control | None = None
        self._on_user_edit: Callable[[Any], None] | None = None
        self.state = BindingState.IDLE
        self._pending_restores = 0

    @property
    def control(self) -> Control | None:
        return self._control

    def bind_control(self, control: Control, on_user_edit: Callable[[Any], None]) -> None:
        """Listen for user changes on control and forward them to on_user_edit."""
        self._control = control
        self._on_user_edit = on_user_edit
        control.connect_changed(self._on_control_changed)
        log.debug(f"Bound control for {self.key}: {control.value!r}")

    def _on_control_changed(self, value: Any) -> None:
        if self.state is not BindingState.IDLE:
            log.debug(f"Suppressed change of {self.key} ({self.state.value}): {value!r}")
            return
        if self._on_user_edit is not None:
            log.debug(f"Control changed {self.key}: -> {value!r}")
            self._on_user_edit(value)

    def push_value(self, value: Any) -> None:
        """Write value into the control without re-triggering on_user_edit."""
        control = self._control
        if control is None or control.is_destroyed:
            return
        log.debug(f"Updating control {self.key}: {control.value!r} -> {value!r}")
        self.state = BindingState.SUPPRESSED
        control.value = value
        self.state = BindingState.PENDING_RESTORE
        self._pending_restores += 1
        self._defer(self._restore)

    def _restore(self) -> None:
        self._pending_restores -= 1
        # Back-to-back pushes each queue a restore; only the last one unmasks
        if self._pending_restores > 0 or self.state is not BindingState.PENDING_RESTORE:
            return
        self.state = BindingState.IDLE
        if self._control is not None and self._control.is_destroyed:
            log.debug(f"Control for {self.key} destroyed before restore")


class FieldBindings:
    """Registry of the bindings of one preferences surface."""

    def __init__(self, defer: Callable[[Callable[[], None]], Any]) -> None:
        self._defer = defer
        self._bindings: dict[str, FieldBinding] = {}

    def bind(self, key: str, control: Control, on_user_edit: Callable[[Any], None]) -> FieldBinding:
        """Create (or replace) the binding for key."""
        binding = FieldBinding(key, self._defer)
        binding.bind_control(control, on_user_edit)
        self._bindings[key] = binding
        return binding

    def get(self, key: str) -> FieldBinding | None:
        return self._bindings.get(key)

    def push_value(self, key: str, value: Any) -> None:
        """Push value into the control bound to key, if any."""
        binding = self._bindings.get(key)
        if binding is not None:
            binding.push_value(value)

    def __contains__(self, key: str) -> bool:
        return key in self._bindings

    def __iter__(self):
        return iter(self._bindings.values())
