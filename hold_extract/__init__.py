"""Top-level package interface for hold_extract.

Expose the main API: detect_holds, resolve_point, manual_hold and the wall helpers.
"""
from .core import (  # re-export
    add_manual_hold,
    delete_boulder,
    detect_holds,
    detect_wall_holds,
    hold_at,
    manual_hold,
    remove_hold,
    resolve_point,
    save_boulder,
)
from .errors import HoldExtractError, NoShapesFoundError, UnprocessableImageError
from .types import Boulder, ClimbingGrade, Hold, HoldSource, NormalizedPoint, NormalizedRect, Wall

__all__ = [
    "detect_holds",
    "resolve_point",
    "manual_hold",
    "detect_wall_holds",
    "remove_hold",
    "hold_at",
    "add_manual_hold",
    "save_boulder",
    "delete_boulder",
    "Wall",
    "Boulder",
    "ClimbingGrade",
    "Hold",
    "HoldSource",
    "NormalizedPoint",
    "NormalizedRect",
    "HoldExtractError",
    "NoShapesFoundError",
    "UnprocessableImageError",
]
