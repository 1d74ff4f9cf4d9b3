"""SyncCoordinator: keeps store, cache, presets and controls consistent."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Sequence

from constants import SAVED_SYMBOLS_KEY
from store import ALL_KEYS, WriteError

if TYPE_CHECKING:
    from controller.binding import Control, FieldBinding, FieldBindings
    from controller.cache import SettingsCache
    from controller.field_mappings import FieldMapping
    from controller.presets import PresetManager
    from store import ConfigStore

log = logging.getLogger(__name__)


class GroupState(Enum):
    """Derived state of a preset group; recomputed, never stored."""

    AT_DEFAULT_AT_SAVED = "at_default_at_saved"
    AT_DEFAULT_NOT_SAVED = "at_default_not_saved"
    NOT_DEFAULT_AT_SAVED = "not_default_at_saved"
    NOT_DEFAULT_NOT_SAVED = "not_default_not_saved"

    @classmethod
    def from_flags(cls, at_default: bool, at_saved: bool) -> "GroupState":
        if at_default:
            return cls.AT_DEFAULT_AT_SAVED if at_saved else cls.AT_DEFAULT_NOT_SAVED
        return cls.NOT_DEFAULT_AT_SAVED if at_saved else cls.NOT_DEFAULT_NOT_SAVED

    @property
    def is_at_default(self) -> bool:
        return self in (GroupState.AT_DEFAULT_AT_SAVED, GroupState.AT_DEFAULT_NOT_SAVED)

    @property
    def is_at_saved(self) -> bool:
        return self in (GroupState.AT_DEFAULT_AT_SAVED, GroupState.NOT_DEFAULT_AT_SAVED)

    @property
    def reset_enabled(self) -> bool:
        return not self.is_at_default

    @property
    def save_visible(self) -> bool:
        return not self.is_at_saved


@dataclass(frozen=True)
class Affordances:
    """What the group's buttons should look like."""

    reset_enabled: bool
    save_visible: bool

    @classmethod
    def for_state(cls, state: GroupState) -> "Affordances":
        return cls(reset_enabled=state.reset_enabled, save_visible=state.save_visible)


class SyncCoordinator:
    """Orchestrates edits, store notifications and button state.

    Two flows meet here:

    1. **User edit**: control -> FieldBinding -> user_edit() -> cache write
       -> store notifies -> reconcile is a no-op (cache already current)
       -> affordances recomputed.

    2. **External change** (another process, the CLI): store.poll() notifies
       -> reconcile reports a change -> value pushed into the control with
       echo suppressed -> affordances recomputed.

    on_affordances(group_name, Affordances) fires once per group on every
    recomputation. A notification that turns out to be an echo recomputes
    nothing.

    Example usage:
        coordinator = SyncCoordinator(store, cache, [group], bindings, on_affordances=apply)
        coordinator.attach()
        for mapping in FIELD_MAPPINGS:
            coordinator.bind_field(mapping, controls[mapping.key])
        coordinator.refresh()
    """

    def __init__(
        self,
        store: ConfigStore,
        cache: SettingsCache,
        groups: Sequence[PresetManager],
        bindings: FieldBindings,
        on_affordances: Callable[[str, Affordances], None] | None = None,
        on_error: Callable[[str, Exception], None] | None = None,
    ) -> None:
        self.store = store
        self.cache = cache
        self.groups = {group.name: group for group in groups}
        self.bindings = bindings
        self._on_affordances = on_affordances
        self._on_error = on_error
        self._handler_id: int | None = None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def attach(self) -> None:
        """Start listening to store notifications."""
        if self._handler_id is None:
            self._handler_id = self.store.subscribe(ALL_KEYS, self._on_store_changed)

    def detach(self) -> None:
        """Stop listening (the surface is closing)."""
        if self._handler_id is not None:
            self.store.unsubscribe(self._handler_id)
            self._handler_id = None

    def bind_field(self, mapping: FieldMapping, control: Control) -> FieldBinding:
        """Bind a control so user edits flow into the cache."""

        def forward(value: Any) -> None:
            if mapping.value_transform is not None:
                transformed = mapping.value_transform(value)
                if transformed is None:
                    log.debug(f"Skipping invalid value for {mapping.key}: {value!r}")
                    return
                value = transformed
            self.user_edit(mapping.key, value)

        return self.bindings.bind(mapping.key, control, forward)

    # =========================================================================
    # Mutations
    # =========================================================================

    def user_edit(self, key: str, value: Any) -> None:
        """Apply a user edit of one field."""
        if self.cache.current.get(key) == value:
            return
        try:
            if isinstance(value, bool):
                self.cache.set_boolean(key, value)
            else:
                self.cache.set_string(key, value)
        except WriteError as e:
            log.error(f"Rejected edit of {key}: {e}")
            self._report_error(key, e)
            return
        self.refresh()

    def reset(self, group_name: str) -> list[str] | None:
        """Reset a group to defaults.

        Returns:
            Keys that changed, or None if a write failed and was reported
        """
        try:
            changed = self.groups[group_name].reset_to_default(self.bindings)
        except WriteError as e:
            log.error(f"Reset of {group_name} failed: {e}")
            self._report_error(group_name, e)
            changed = None
        self.refresh()
        return changed

    def save(self, group_name: str) -> bool:
        """Save a group's current values as the preset; False if reported failed."""
        try:
            self.groups[group_name].save_as_preset()
        except WriteError as e:
            log.error(f"Saving {group_name} failed: {e}")
            self._report_error(group_name, e)
            return False
        finally:
            self.refresh()
        return True

    def _report_error(self, key: str, error: WriteError) -> None:
        # Without an on_error listener the caller gets the exception
        if self._on_error is None:
            raise error
        self._on_error(key, error)

    # =========================================================================
    # Derived state
    # =========================================================================

    def state(self, group_name: str) -> GroupState:
        group = self.groups[group_name]
        return GroupState.from_flags(group.is_at_default(), group.is_at_saved())

    def refresh(self) -> None:
        """Recompute and publish the affordances of every group."""
        for name in self.groups:
            affordances = Affordances.for_state(self.state(name))
            log.debug(
                f"Group {name}: reset enabled {affordances.reset_enabled}, "
                f"save visible {affordances.save_visible}"
            )
            if self._on_affordances is not None:
                self._on_affordances(name, affordances)

    # =========================================================================
    # Store notifications
    # =========================================================================

    def _on_store_changed(self, key: str) -> None:
        if key == SAVED_SYMBOLS_KEY:
            if self.cache.reconcile_saved(self.store.get_preset()):
                self.refresh()
            return

        value = self.store.get(key)
        if not self.cache.reconcile_external(key, value):
            return
        self.bindings.push_value(key, value)
        self.refresh()
