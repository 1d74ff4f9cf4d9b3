"""Modifier field model."""

from dataclasses import dataclass
from typing import Any, Mapping

from model.schema import MODIFIER_INFO, modifier_keys


@dataclass
class ModifierField:
    """One configurable modifier as seen by the indicator."""

    id: str
    symbol: str
    icon_path: str = ""
    use_icon: bool = False

    def __str__(self) -> str:
        if self.prefers_icon:
            return f"{self.id}: {self.icon_path} (icon)"
        return f"{self.id}: {self.symbol}"

    @property
    def label(self) -> str:
        """Display label from the static modifier table."""
        return MODIFIER_INFO[self.id].label

    @property
    def prefers_icon(self) -> bool:
        """True when the icon should be rendered.

        use_icon with an empty icon_path is allowed and falls back to text.
        """
        return self.use_icon and bool(self.icon_path)

    @classmethod
    def from_record(cls, name: str, record: Mapping[str, Any]) -> "ModifierField":
        """Build a field from a key -> value record (e.g. SettingsCache.current)."""
        if name not in MODIFIER_INFO:
            raise KeyError(f"Unknown modifier: {name}")
        keys = modifier_keys(name)
        return cls(
            id=name,
            symbol=record.get(keys.symbol, MODIFIER_INFO[name].default_symbol),
            icon_path=record.get(keys.icon, ""),
            use_icon=bool(record.get(keys.use_icon, False)),
        )
