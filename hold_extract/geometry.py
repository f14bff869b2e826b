import math
from typing import List, Sequence, Tuple

import numpy as np

from .config import OUTLINE_MAX_POINTS, RECT_MIN_SIZE
from .types import NativeRect, NormalizedPoint, NormalizedRect


def normalize_rect(native: NativeRect) -> NormalizedRect:
    """Flip a bottom-left-origin rect to top-left origin and clamp it into the unit square."""
    flipped = NormalizedRect(
        x=native.x,
        y=1.0 - (native.y + native.height),
        width=native.width,
        height=native.height,
    )
    return flipped.clamped(min_size=RECT_MIN_SIZE)


def normalize_point(x: float, y: float) -> NormalizedPoint:
    return NormalizedPoint(x=x, y=1.0 - y).clamped()


def decimate(points: Sequence, cap: int = OUTLINE_MAX_POINTS) -> List:
    """
    Uniform index-stride sampling down to at most `cap` items.
    First and last items are always kept.
    """
    n = len(points)
    if n <= cap:
        return list(points)
    if cap < 2:
        return list(points[:cap])
    step = (n - 1) / float(cap - 1)
    return [points[int(round(i * step))] for i in range(cap)]


def normalize_outline(
    points: Sequence[Tuple[float, float]],
    cap: int = OUTLINE_MAX_POINTS,
) -> Tuple[NormalizedPoint, ...]:
    # fewer than 3 points is not a polygon: bbox only
    if len(points) < 3:
        return ()
    pts = [normalize_point(x, y) for x, y in points]
    return tuple(decimate(pts, cap))


def distance(a: NormalizedPoint, b: NormalizedPoint) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def aspect_ratio(rect: NormalizedRect) -> float:
    # a flat rect has unbounded aspect; unclamped rects can reach here
    if rect.width <= 0 or rect.height <= 0:
        return math.inf
    return max(rect.width / rect.height, rect.height / rect.width)


def point_in_polygon(p: NormalizedPoint, polygon: Sequence[NormalizedPoint]) -> bool:
    """Even-odd test; the last vertex connects back to the first."""
    if len(polygon) < 3:
        return False
    pts = np.array([(q.x, q.y) for q in polygon], dtype=np.float64)
    xi, yi = pts[:, 0], pts[:, 1]
    xj, yj = np.roll(xi, 1), np.roll(yi, 1)

    straddles = (yi > p.y) != (yj > p.y)
    with np.errstate(divide="ignore", invalid="ignore"):
        x_cross = (xj - xi) * (p.y - yi) / (yj - yi) + xi
    hits = straddles & (p.x < x_cross)
    return bool(np.count_nonzero(hits) % 2)
