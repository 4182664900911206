"""
Core PyQt6 utilities.

Foundational helpers with no form-specific logic.
"""

from .frame_scheduler import FrameScheduler

__all__ = [
    "FrameScheduler",
]
