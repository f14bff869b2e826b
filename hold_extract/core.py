import logging
from concurrent.futures import Executor
from functools import partial
from typing import Callable, Iterable, List, Optional, Sequence, Union

import numpy as np

from .config import (
    CONFIDENCE_AREA_GAIN,
    DETECTION_SWEEP,
    IOU_THRESH,
    MANUAL_HOLD_SIZE,
    MATCH_SCORE,
    MAX_DETECTED_HOLDS,
    RESOLUTION_SWEEP,
)
from .contours import detect_contours
from .detect import filter_candidates, flatten_tree
from .errors import NoShapesFoundError
from .geometry import distance, point_in_polygon
from .nms import dedup_by_iou
from .preprocess import check_image
from .types import (
    Boulder,
    Candidate,
    ClimbingGrade,
    DetectorParams,
    Hold,
    HoldSource,
    NormalizedPoint,
    NormalizedRect,
    ShapeNode,
    Wall,
)
from .visualize import draw_candidates_on_image

logger = logging.getLogger(__name__)

Detector = Callable[[np.ndarray, DetectorParams], ShapeNode]


def collect_candidates(
    image: np.ndarray,
    sweep: Sequence[DetectorParams],
    detector: Detector = detect_contours,
    executor: Optional[Executor] = None,
) -> List[Candidate]:
    """
    Run the detector once per parameter set and pool every flattened candidate.
    Runs go through `executor.map` when an executor is given; detector errors propagate.
    """
    check_image(image)
    runner = executor.map if executor is not None else map
    trees = list(runner(partial(detector, image), sweep))

    pool: List[Candidate] = []
    for params, root in zip(sweep, trees):
        found = flatten_tree(root)
        logger.debug("Run %s produced %d candidates", params, len(found))
        pool.extend(found)
    return pool


# ---- batch detection

def detection_confidence(rect: NormalizedRect) -> float:
    return min(1.0, rect.area * CONFIDENCE_AREA_GAIN)


def holds_from_candidates(cands: List[Candidate], max_holds: int = MAX_DETECTED_HOLDS) -> List[Hold]:
    filtered = filter_candidates(cands, "detection")
    kept = dedup_by_iou(filtered, IOU_THRESH["detection"])[:max_holds]
    logger.info("Detection: %d candidates, %d after filtering, %d holds", len(cands), len(filtered), len(kept))

    if not kept:
        raise NoShapesFoundError()
    return [
        Hold(rect=c.rect, outline=c.outline, confidence=detection_confidence(c.rect), source=HoldSource.DETECTED)
        for c in kept
    ]


def detect_holds(
    image: np.ndarray,
    *,
    detector: Detector = detect_contours,
    sweep: Sequence[DetectorParams] = DETECTION_SWEEP,
    executor: Optional[Executor] = None,
    max_holds: int = MAX_DETECTED_HOLDS,
    debug: bool = False,
) -> List[Hold]:
    cands = collect_candidates(image, sweep, detector=detector, executor=executor)

    # --- VISUALIZE BEFORE DEDUP
    if debug:
        draw_candidates_on_image(image, filter_candidates(cands, "detection"), title="Before dedup")

    holds = holds_from_candidates(cands, max_holds=max_holds)

    # --- VISUALIZE AFTER DEDUP
    if debug:
        draw_candidates_on_image(image, [Candidate(rect=h.rect, outline=h.outline) for h in holds], title="After dedup")
    return holds


# ---- point resolution

def score_candidate(c: Candidate, point: NormalizedPoint) -> float:
    """Proximity plus containment score. Signed: far misses go negative."""
    k = MATCH_SCORE
    d = distance(c.rect.center, point)
    distance_score = max(0.0, 1.0 - d / k["distance_divisor"])
    area_score = max(0.0, 1.0 - abs(c.rect.area - k["area_target"]) / k["area_span"])

    score = k["distance_weight"] * distance_score + k["area_weight"] * area_score

    in_rect = c.rect.contains(point)
    in_outline = bool(c.outline) and point_in_polygon(point, c.outline)
    if in_rect:
        score += k["rect_bonus"]
    if in_outline:
        score += k["outline_bonus"]
    if not in_rect and not in_outline and d > k["miss_distance"]:
        score -= k["miss_penalty"]
    return score


def best_match(cands: List[Candidate], point: NormalizedPoint) -> Optional[Candidate]:
    if not cands:
        return None
    scored = [(score_candidate(c, point), c) for c in cands]
    # first candidate wins ties
    best_score, best = max(scored, key=lambda sc: sc[0])
    if best_score <= MATCH_SCORE["accept_above"]:
        logger.debug("Best score %.3f below acceptance, no match", best_score)
        return None
    return best


def match_from_candidates(cands: List[Candidate], point: NormalizedPoint) -> Optional[Hold]:
    point = point.clamped()
    filtered = filter_candidates(cands, "resolution")
    kept = dedup_by_iou(filtered, IOU_THRESH["resolution"])
    match = best_match(kept, point)
    logger.info("Resolution at (%.3f, %.3f): %d candidates, matched=%s", point.x, point.y, len(kept), match is not None)

    if match is None:
        return None
    return Hold(rect=match.rect, outline=match.outline, confidence=1.0, source=HoldSource.MANUAL)


def resolve_point(
    image: np.ndarray,
    point: NormalizedPoint,
    *,
    detector: Detector = detect_contours,
    sweep: Sequence[DetectorParams] = RESOLUTION_SWEEP,
    executor: Optional[Executor] = None,
) -> Optional[Hold]:
    """Return the hold a tap at `point` most plausibly refers to, or None."""
    cands = collect_candidates(image, sweep, detector=detector, executor=executor)
    return match_from_candidates(cands, point)


def manual_hold(point: NormalizedPoint, size: float = MANUAL_HOLD_SIZE) -> Hold:
    p = point.clamped()
    rect = NormalizedRect(x=p.x - size / 2.0, y=p.y - size / 2.0, width=size, height=size).clamped()
    return Hold(rect=rect, confidence=1.0, source=HoldSource.MANUAL)


# ---- walls and problems

def detect_wall_holds(wall: Wall, image: np.ndarray, **kwargs) -> List[Hold]:
    """Replace every hold on the wall with a fresh detection run."""
    holds = detect_holds(image, **kwargs)
    wall.holds = list(holds)
    wall.touch()
    return holds


def remove_hold(wall: Wall, hold_id: str) -> bool:
    before = len(wall.holds)
    wall.holds = [h for h in wall.holds if h.id != hold_id]
    removed = len(wall.holds) != before
    if removed:
        wall.touch()
    return removed


def hold_contains(hold: Hold, point: NormalizedPoint) -> bool:
    # outline first, the bbox still counts for taps just outside it
    if len(hold.outline) >= 3 and point_in_polygon(point, hold.outline):
        return True
    return hold.rect.contains(point)


def hold_at(wall: Wall, point: NormalizedPoint) -> Optional[Hold]:
    """The most recently added hold under `point`, if any."""
    point = point.clamped()
    for hold in reversed(wall.holds):
        if hold_contains(hold, point):
            return hold
    return None


def add_manual_hold(wall: Wall, point: NormalizedPoint, size: float = MANUAL_HOLD_SIZE) -> Hold:
    """
    Place a manual hold at `point`. A tap on an existing hold returns that
    hold and leaves the wall unchanged.
    """
    existing = hold_at(wall, point)
    if existing is not None:
        return existing
    hold = manual_hold(point, size=size)
    wall.holds.append(hold)
    wall.touch()
    return hold


def save_boulder(
    wall: Wall,
    name: str,
    grade: Union[ClimbingGrade, str],
    notes: str = "",
    hold_ids: Iterable[str] = (),
) -> Boulder:
    if isinstance(grade, ClimbingGrade):
        grade = grade.value
    boulder = Boulder(
        wall_id=wall.id,
        name=name.strip(),
        grade=grade.strip(),
        notes=notes.strip(),
        hold_ids=tuple(hold_ids),
    )
    # newest first
    wall.boulders.insert(0, boulder)
    wall.touch()
    return boulder


def delete_boulder(wall: Wall, boulder_id: str) -> bool:
    before = len(wall.boulders)
    wall.boulders = [b for b in wall.boulders if b.id != boulder_id]
    removed = len(wall.boulders) != before
    if removed:
        wall.touch()
    return removed
