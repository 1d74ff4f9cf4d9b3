"""Validation functions for controller sync operations."""

from pathlib import Path

from constants import ICON_SUFFIXES

_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


def validate_icon_path(value: str) -> str | None:
    """Validate an icon file path.

    Accepts an empty value (no icon) or a path ending in one of the image
    suffixes the icon picker offers (svg, png, jpeg, webp). Existence is not
    checked: the file may live on a disk that is not mounted yet.

    Args:
        value: String value from input field

    Returns:
        Stripped, user-expanded path, "" for empty, or None if invalid
    """
    stripped = value.strip()
    if not stripped:
        return ""
    if not stripped.lower().endswith(ICON_SUFFIXES):
        return None
    return str(Path(stripped).expanduser())


def parse_bool(value: str) -> bool | None:
    """Parse command-line boolean text.

    Args:
        value: e.g. "true", "off", "1"

    Returns:
        Parsed bool or None if the text is not a boolean word
    """
    word = value.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    return None
