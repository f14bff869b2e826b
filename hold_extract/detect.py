import logging
from typing import Dict, Iterable, List

from .config import FILTER_PROFILES
from .geometry import aspect_ratio, normalize_outline, normalize_rect
from .types import Candidate, ShapeNode

logger = logging.getLogger(__name__)


def candidate_from_node(node: ShapeNode) -> Candidate:
    return Candidate(rect=normalize_rect(node.bbox), outline=normalize_outline(node.points))


def flatten_tree(root: ShapeNode) -> List[Candidate]:
    """
    Pre-order walk of a contour tree, one Candidate per node with a usable bbox.
    Uses an explicit stack so deep nesting never hits the recursion limit.
    """
    out: List[Candidate] = []
    stack = [root]
    while stack:
        node = stack.pop()
        # degenerate native boxes are dropped before normalization pads them out
        if node.bbox.width > 0 and node.bbox.height > 0:
            out.append(candidate_from_node(node))
        stack.extend(reversed(node.children))
    return out


def passes_profile(c: Candidate, profile: Dict[str, float]) -> bool:
    r = c.rect
    area = r.area
    return (
        profile["min_side"] < r.width < profile["max_side"]
        and profile["min_side"] < r.height < profile["max_side"]
        and profile["min_area"] < area < profile["max_area"]
        and aspect_ratio(r) < profile["max_aspect"]
    )


def filter_candidates(cands: Iterable[Candidate], profile: str) -> List[Candidate]:
    bounds = FILTER_PROFILES[profile]
    cands = list(cands)
    out = [c for c in cands if passes_profile(c, bounds)]
    logger.debug("Profile %s kept %d of %d candidates", profile, len(out), len(cands))
    return out
