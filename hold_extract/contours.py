"""OpenCV contour detector.

Produces the same shape of output as platform contour APIs: a tree of nodes whose
bboxes and points are normalized to the image with the origin at the bottom-left.
The root node spans the whole image and holds the top-level contours as children.
"""
import logging
from collections import defaultdict
from typing import Dict, List, Tuple

import cv2
import numpy as np

from .preprocess import adjust_contrast, binarize, check_image, denoise_light, maybe_resize, to_gray
from .types import DetectorParams, NativeRect, ShapeNode

logger = logging.getLogger(__name__)

ROOT_BBOX = NativeRect(x=0.0, y=0.0, width=1.0, height=1.0)


def find_contours_tree(mask: np.ndarray) -> Tuple[List[np.ndarray], np.ndarray]:
    contours, hierarchy = cv2.findContours(mask, cv2.RETR_TREE, cv2.CHAIN_APPROX_SIMPLE)
    if hierarchy is None:
        return [], np.zeros((0, 4), dtype=np.int32)
    return list(contours), hierarchy.reshape(-1, 4)


def native_node(cnt: np.ndarray, children: Tuple[ShapeNode, ...], width: int, height: int) -> ShapeNode:
    x, y, w, h = cv2.boundingRect(cnt)
    bbox = NativeRect(
        x=x / float(width),
        y=1.0 - (y + h) / float(height),
        width=w / float(width),
        height=h / float(height),
    )
    pts = cnt.reshape(-1, 2).astype(np.float64)
    points = tuple((float(px) / width, 1.0 - float(py) / height) for px, py in pts)
    return ShapeNode(bbox=bbox, points=points, children=children)


def build_tree(contours: List[np.ndarray], hierarchy: np.ndarray, width: int, height: int) -> ShapeNode:
    # hierarchy rows: [next, prev, first_child, parent]
    children_of: Dict[int, List[int]] = defaultdict(list)
    for idx, row in enumerate(hierarchy):
        children_of[int(row[3])].append(idx)

    built: Dict[int, ShapeNode] = {}
    stack = [(-1, False)]
    while stack:
        idx, expanded = stack.pop()
        if not expanded:
            stack.append((idx, True))
            stack.extend((child, False) for child in children_of[idx])
            continue
        kids = tuple(built.pop(child) for child in children_of[idx])
        if idx < 0:
            built[idx] = ShapeNode(bbox=ROOT_BBOX, children=kids)
        else:
            built[idx] = native_node(contours[idx], kids, width, height)
    return built[-1]


def detect_contours(image: np.ndarray, params: DetectorParams) -> ShapeNode:
    img = check_image(image)
    img, _ = maybe_resize(img, max_side=params.max_dimension)
    gray = to_gray(img)
    gray = denoise_light(gray)
    gray = adjust_contrast(gray, params.contrast)
    mask = binarize(gray, dark_on_light=params.dark_on_light)

    contours, hierarchy = find_contours_tree(mask)
    h, w = mask.shape[:2]
    logger.debug("Detector %s found %d contours on %dx%d", params, len(contours), w, h)
    return build_tree(contours, hierarchy, w, h)
