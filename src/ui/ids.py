"""Widget ID constants for the TUI.

Using constants prevents typos and makes refactoring easier.
Input and Switch widgets use their setting key as ID (e.g. "shift-symbol"),
so they are not listed here.
"""


def css(widget_id: str) -> str:
    """Return a CSS selector for a widget ID.

    Usage:
        from ui.ids import css, STATUS_BAR
        self.query_one(css(STATUS_BAR), Static)
    """
    return f"#{widget_id}"


def row_id(modifier: str) -> str:
    """ID of the ModifierRow for a modifier."""
    return f"row-{modifier}"


def stack_id(modifier: str) -> str:
    """ID of the symbol/icon ContentSwitcher for a modifier."""
    return f"{modifier}-stack"


# Container IDs
HEADER_CONTAINER = "header-container"
HEADER_TITLE = "header-title"
GROUP_DESCRIPTION = "group-description"
MODIFIER_LIST = "modifier-list"
FOOTER = "footer"
STATUS_BAR = "status-bar"

# Group buttons
RESET_BTN = "reset-btn"
SAVE_BTN = "save-btn"

# Unsaved changes modal
UNSAVED_MODAL = "unsaved-modal"
UNSAVED_GRID = "unsaved-grid"
MODAL_TITLE = "modal-title"
MODAL_BUTTONS = "modal-buttons"
MODAL_CANCEL_BTN = "modal-cancel-btn"
MODAL_SAVE_BTN = "modal-save-btn"
MODAL_RESET_BTN = "modal-reset-btn"
