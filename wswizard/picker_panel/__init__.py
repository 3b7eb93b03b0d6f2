"""Picker-surface UI components."""

from .controller import PickerItem, PickerSession
from .rendering import render_picker

__all__ = [
    "PickerItem",
    "PickerSession",
    "render_picker",
]
