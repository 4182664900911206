"""
Form constants for eliminating magic strings throughout the form engine.

This module centralizes all hardcoded strings drawn by the engine so that
surfaces and tests refer to a single source of truth.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldFormConstants:
    """
    Centralized constants for the field form engine.

    Categories:
    - Button and label text
    - Widget key formatting
    - Layout style names
    """

    # Collapsible group toggle
    SHOW_BUTTON_TEXT: str = "Show"
    HIDE_BUTTON_TEXT: str = "Hide"

    # Array editor
    APPEND_BUTTON_TEXT: str = "+"
    REMOVE_BUTTON_TEXT: str = "-"
    ARRAY_ITEM_LABEL: str = "  [{}] "

    # Key chord capture popup
    ASSIGN_BUTTON_TEXT: str = "Assign"
    SAVE_BUTTON_TEXT: str = "Save"
    CLOSE_BUTTON_TEXT: str = "Close"
    PRESS_KEY_TEXT: str = "Press key..."
    CHORD_SEPARATOR_LABEL: str = " + "

    # Popup selectors
    NONE_SELECTED_TEXT: str = "None"
    FLAG_SEPARATOR: str = ", "

    # Slider value label format
    SLIDER_VALUE_FORMAT: str = "{:g}"

    # Widget key formatting: "<scope>:<path>" and "<key>/<part>"
    KEY_SCOPE_SEPARATOR: str = ":"
    KEY_PART_SEPARATOR: str = "/"
    PATH_SEPARATOR: str = "."

    # Layout styles
    BOX_STYLE: str = "box"

    # Visibility expressions
    EXPRESSION_SEPARATOR: str = "|"
    PROPERTY_MARKER: str = "#"


# Create a singleton instance for easy access throughout the codebase
CONSTANTS = FieldFormConstants()
