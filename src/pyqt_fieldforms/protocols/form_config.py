"""Global configuration for field form rendering.

Provides hooks for applications to customize sizes and defaults.
"""

from typing import Optional
from dataclasses import dataclass

from pyqt_fieldforms.forms.draw_attributes import DrawFieldMask


@dataclass
class FieldFormConfig:
    """Base configuration for field form rendering.

    Applications can subclass this to provide custom configuration.

    Attributes:
        ui_scale: Display scale factor applied to every declared size
        row_height: Default height of a single-line row, unscaled
        field_width: Default width of text fields, unscaled
        slider_width: Default width of sliders, unscaled
        text_area_rows: Height multiplier for multi-line text fields
        label_spacing: Space between a field label and its widget, unscaled
        multi_field_precision: Decimals shown by vector and color sub-fields
        default_mask: Mask used by render_fields when the caller passes none
        frame_delay_ms: Delay between an input event and the next Qt frame
    """

    ui_scale: float = 1.0
    row_height: int = 22
    field_width: int = 100
    slider_width: int = 200
    text_area_rows: int = 3
    label_spacing: int = 5
    multi_field_precision: int = 6
    default_mask: DrawFieldMask = DrawFieldMask.ONLY_DRAW_ATTR
    frame_delay_ms: int = 0


# Global config instance (set by application)
_form_config: Optional[FieldFormConfig] = None


def set_form_config(config: FieldFormConfig) -> None:
    """Set the global field form configuration.

    Args:
        config: FieldFormConfig instance
    """
    global _form_config
    _form_config = config


def get_form_config() -> FieldFormConfig:
    """Get the current field form configuration.

    Returns:
        Current FieldFormConfig or default if not set
    """
    if _form_config is None:
        return FieldFormConfig()
    return _form_config
