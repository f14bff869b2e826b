from typing import List

from .types import Candidate, NormalizedRect


def iou_rect(a: NormalizedRect, b: NormalizedRect) -> float:
    ax, ay, aw, ah = a.as_tuple()
    bx, by, bw, bh = b.as_tuple()
    ax2, ay2 = ax + aw, ay + ah
    bx2, by2 = bx + bw, by + bh

    ix1, iy1 = max(ax, bx), max(ay, by)
    ix2, iy2 = min(ax2, bx2), min(ay2, by2)
    iw, ih = max(0.0, ix2 - ix1), max(0.0, iy2 - iy1)
    inter = iw * ih
    if inter <= 0:
        return 0.0
    union = aw * ah + bw * bh - inter
    return inter / union if union > 0 else 0.0


def dedup_by_iou(cands: List[Candidate], iou_thresh: float) -> List[Candidate]:
    """
    Greedy suppression, largest bbox first: a candidate survives only if its IoU
    with every survivor so far is <= iou_thresh.
    """
    if not cands:
        return []

    # largest first; sort is stable so equal areas keep input order
    ordered = sorted(cands, key=lambda c: c.rect.area, reverse=True)

    keep: List[Candidate] = []
    for c in ordered:
        if all(iou_rect(c.rect, k.rect) <= iou_thresh for k in keep):
            keep.append(c)
    return keep
