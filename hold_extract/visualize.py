from typing import List, Optional, Sequence, Tuple

import cv2
import matplotlib.pyplot as plt
import numpy as np

from .types import Candidate, Hold, HoldSource, NormalizedPoint, NormalizedRect

COLORS = {
    HoldSource.DETECTED: (0, 255, 0),
    HoldSource.MANUAL: (0, 165, 255),
}


def rect_to_pixels(rect: NormalizedRect, width: int, height: int) -> Tuple[int, int, int, int]:
    x1 = int(round(rect.x * width))
    y1 = int(round(rect.y * height))
    x2 = int(round((rect.x + rect.width) * width))
    y2 = int(round((rect.y + rect.height) * height))
    return x1, y1, x2, y2


def outline_to_pixels(outline: Sequence[NormalizedPoint], width: int, height: int) -> np.ndarray:
    pts = [(int(round(p.x * width)), int(round(p.y * height))) for p in outline]
    return np.array(pts, dtype=np.int32).reshape(-1, 1, 2)


def draw_holds_on_image(image_bgr: np.ndarray, holds: List[Hold]) -> np.ndarray:
    vis = image_bgr.copy()
    H, W = vis.shape[:2]

    for hold in holds:
        color = COLORS[hold.source]
        x1, y1, x2, y2 = rect_to_pixels(hold.rect, W, H)
        cv2.rectangle(vis, (x1, y1), (x2, y2), color, 2)
        if hold.outline:
            cv2.polylines(vis, [outline_to_pixels(hold.outline, W, H)], True, color, 1, cv2.LINE_AA)

        label = f"{hold.confidence:.2f}"
        cv2.putText(vis, label, (x1, max(0, y1 - 6)), cv2.FONT_HERSHEY_SIMPLEX, 0.45, color, 1, cv2.LINE_AA)

    return vis


def draw_candidates_on_image(
    img_bgr: np.ndarray,
    candidates: List[Candidate],
    title: str,
    max_boxes: Optional[int] = None,
) -> None:
    vis = img_bgr.copy()
    if vis.ndim == 2:
        vis = cv2.cvtColor(vis, cv2.COLOR_GRAY2BGR)
    H, W = vis.shape[:2]
    items = candidates if max_boxes is None else candidates[:max_boxes]

    for c in items:
        x1, y1, x2, y2 = rect_to_pixels(c.rect, W, H)
        cv2.rectangle(vis, (x1, y1), (x2, y2), (0, 255, 0), 2)
        if c.outline:
            cv2.polylines(vis, [outline_to_pixels(c.outline, W, H)], True, (255, 0, 255), 1)

    vis_rgb = cv2.cvtColor(vis, cv2.COLOR_BGR2RGB)
    plt.figure(figsize=(14, 10))
    plt.imshow(vis_rgb)
    plt.title(f"{title} (count={len(candidates)})")
    plt.axis("off")
    plt.show()
