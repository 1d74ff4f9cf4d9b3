"""Settings schema: modifier display table and per-key specs.

Every persisted key is described by a SettingSpec carrying its type, default
and a human-readable summary. The table is built once at import time from
MODIFIER_INFO, so nothing has to query schema metadata at runtime.

Layout
------
For each modifier id three keys exist:

    <id>-symbol       str   short glyph or label shown in the panel
    <id>-icon-path    str   image file used instead of the symbol ("" = none)
    <id>-use-icon     bool  prefer the icon over the symbol

plus the aggregate ``saved-symbols`` preset, a str -> str mapping over the
symbol and icon-path keys. The use-icon flags are never part of the preset.

Usage:
    from model.schema import SCHEMA, modifier_keys

    keys = modifier_keys("shift")
    SCHEMA[keys.symbol].default      # "⇧"
    SCHEMA[keys.symbol].summary      # "Shift symbol"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from constants import SAVED_SYMBOLS_KEY


@dataclass(frozen=True)
class ModifierInfo:
    """Static display metadata for one modifier."""

    id: str
    label: str
    default_symbol: str


# Order matters - it is the row order of the preferences surface
MODIFIER_INFO: dict[str, ModifierInfo] = {
    info.id: info
    for info in (
        ModifierInfo("shift", "Shift", "⇧"),
        ModifierInfo("caps", "Caps Lock", "Caps"),
        ModifierInfo("control", "Control", "⌃"),
        ModifierInfo("alt", "Alt", "⎇"),
        ModifierInfo("num", "Num Lock", "Num"),
        ModifierInfo("scroll", "Scroll Lock", "⇳"),
        ModifierInfo("super", "Super", "❖"),
        ModifierInfo("altgr", "AltGr", "⎈"),
    )
}

MODIFIERS: tuple[str, ...] = tuple(MODIFIER_INFO)


@dataclass(frozen=True)
class ModifierKeys:
    """The three setting keys of one modifier."""

    symbol: str
    icon: str
    use_icon: str

    @property
    def preset_keys(self) -> tuple[str, str]:
        """Keys that take part in the saved preset (strings only)."""
        return (self.symbol, self.icon)


def modifier_keys(name: str) -> ModifierKeys:
    """Return the setting keys for a modifier id."""
    return ModifierKeys(
        symbol=f"{name}-symbol",
        icon=f"{name}-icon-path",
        use_icon=f"{name}-use-icon",
    )


@dataclass(frozen=True)
class SettingSpec:
    """Declared type, default and summary of one persisted key."""

    key: str
    type_: type
    default: Any
    summary: str

    def accepts(self, value: Any) -> bool:
        """Check a value against the declared type.

        bool is a subclass of int but never a str, so the only case needing
        care is rejecting non-bool values for bool keys.
        """
        if self.type_ is bool:
            return isinstance(value, bool)
        if self.type_ is dict:
            return isinstance(value, dict) and all(
                isinstance(k, str) and isinstance(v, str) for k, v in value.items()
            )
        return isinstance(value, self.type_)


def _default_preset() -> dict[str, str]:
    preset = {}
    for name, info in MODIFIER_INFO.items():
        keys = modifier_keys(name)
        preset[keys.symbol] = info.default_symbol
        preset[keys.icon] = ""
    return preset


def _build_schema() -> dict[str, SettingSpec]:
    schema: dict[str, SettingSpec] = {}
    for name, info in MODIFIER_INFO.items():
        keys = modifier_keys(name)
        schema[keys.symbol] = SettingSpec(keys.symbol, str, info.default_symbol, f"{info.label} symbol")
        schema[keys.icon] = SettingSpec(keys.icon, str, "", f"{info.label} icon")
        schema[keys.use_icon] = SettingSpec(keys.use_icon, bool, False, f"{info.label}: use icon")
    schema[SAVED_SYMBOLS_KEY] = SettingSpec(
        SAVED_SYMBOLS_KEY, dict, _default_preset(), "Saved symbols preset"
    )
    return schema


SCHEMA: dict[str, SettingSpec] = _build_schema()

# Every key except the aggregate preset
FIELD_KEYS: tuple[str, ...] = tuple(k for k in SCHEMA if k != SAVED_SYMBOLS_KEY)


def summary_for(key: str) -> str:
    """Human-readable summary for a key (falls back to the key itself)."""
    spec = SCHEMA.get(key)
    return spec.summary if spec else key
