"""
Pytest configuration and shared fixtures.
"""

from typing import Optional, Sequence, Tuple

import cv2
import numpy as np
import pytest

from hold_extract.types import NativeRect, ShapeNode


def make_node(
    x: float,
    y: float,
    w: float,
    h: float,
    points: Optional[Sequence[Tuple[float, float]]] = None,
    children: Sequence[ShapeNode] = (),
) -> ShapeNode:
    """Build a detector node from a top-left-origin rect and outline."""
    native_points = tuple((px, 1.0 - py) for px, py in (points or ()))
    return ShapeNode(
        bbox=NativeRect(x=x, y=1.0 - (y + h), width=w, height=h),
        points=native_points,
        children=tuple(children),
    )


def square_points(x: float, y: float, w: float, h: float):
    return [(x, y), (x + w, y), (x + w, y + h), (x, y + h)]


def make_root(*children: ShapeNode) -> ShapeNode:
    return ShapeNode(bbox=NativeRect(0.0, 0.0, 1.0, 1.0), children=tuple(children))


def fixed_detector(root: ShapeNode):
    def detector(image, params):
        return root
    return detector


@pytest.fixture
def square_image():
    """100x100 black image with a filled white 20x20 square at (20, 20)."""
    img = np.zeros((100, 100, 3), dtype=np.uint8)
    cv2.rectangle(img, (20, 20), (39, 39), (255, 255, 255), -1)
    return img


@pytest.fixture
def blank_image():
    return np.zeros((100, 100, 3), dtype=np.uint8)


@pytest.fixture
def dummy_image():
    return np.zeros((8, 8, 3), dtype=np.uint8)
