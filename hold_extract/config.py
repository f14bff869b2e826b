from typing import Dict, Tuple

from .types import DetectorParams

# Detector sweeps: each entry is one independent detector run, merged before filtering.
DETECTION_SWEEP: Tuple[DetectorParams, ...] = (
    DetectorParams(contrast=1.0, dark_on_light=False, max_dimension=1024),
    DetectorParams(contrast=1.0, dark_on_light=True, max_dimension=1024),
    DetectorParams(contrast=1.8, dark_on_light=False, max_dimension=1024),
)

# point taps look closer: more pixels, slightly boosted contrast
RESOLUTION_SWEEP: Tuple[DetectorParams, ...] = (
    DetectorParams(contrast=1.4, dark_on_light=False, max_dimension=2048),
    DetectorParams(contrast=1.4, dark_on_light=True, max_dimension=2048),
)

# Size / aspect predicates over a candidate's normalized rect (exclusive bounds).
FILTER_PROFILES: Dict[str, Dict[str, float]] = {
    "detection": {
        "min_side": 0.02,
        "max_side": 0.34,
        "min_area": 0.0008,
        "max_area": 0.08,
        "max_aspect": 5.0,
    },
    "resolution": {
        "min_side": 0.012,
        "max_side": 0.45,
        "min_area": 0.0002,
        "max_area": 0.14,
        "max_aspect": 6.0,
    },
}

IOU_THRESH = {
    "detection": 0.72,
    "resolution": 0.78,
}

RECT_MIN_SIZE = 0.01
OUTLINE_MAX_POINTS = 96

# detection scoring
CONFIDENCE_AREA_GAIN = 22.0
MAX_DETECTED_HOLDS = 220

# point resolution scoring
MATCH_SCORE = {
    "distance_divisor": 0.28,
    "area_target": 0.012,
    "area_span": 0.08,
    "distance_weight": 0.9,
    "area_weight": 0.25,
    "rect_bonus": 0.8,
    "outline_bonus": 1.2,
    "miss_penalty": 0.7,
    "miss_distance": 0.13,
    "accept_above": 1.0,
}

MANUAL_HOLD_SIZE = 0.08
