"""Model classes for kbd-informer preferences."""

from model.schema import (
    FIELD_KEYS,
    MODIFIER_INFO,
    MODIFIERS,
    SCHEMA,
    ModifierInfo,
    ModifierKeys,
    SettingSpec,
    modifier_keys,
    summary_for,
)
from model.modifier_field import ModifierField

__all__ = [
    "FIELD_KEYS",
    "MODIFIER_INFO",
    "MODIFIERS",
    "SCHEMA",
    "ModifierField",
    "ModifierInfo",
    "ModifierKeys",
    "SettingSpec",
    "modifier_keys",
    "summary_for",
]
