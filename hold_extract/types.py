import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Tuple


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DetectorParams(NamedTuple):
    contrast: float          # 1.0 leaves the image untouched
    dark_on_light: bool      # True -> dark shapes on a light wall
    max_dimension: int       # longest working side in pixels


@dataclass(frozen=True)
class NormalizedPoint:
    x: float
    y: float

    def clamped(self) -> "NormalizedPoint":
        return NormalizedPoint(x=_clamp01(self.x), y=_clamp01(self.y))

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class NormalizedRect:
    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> NormalizedPoint:
        return NormalizedPoint(self.x + self.width / 2.0, self.y + self.height / 2.0)

    def contains(self, p: NormalizedPoint) -> bool:
        return self.x <= p.x <= self.x + self.width and self.y <= p.y <= self.y + self.height

    def clamped(self, min_size: float = 0.01) -> "NormalizedRect":
        # keep room for the size floor at the far edges
        x = min(_clamp01(self.x), 1.0 - min_size)
        y = min(_clamp01(self.y), 1.0 - min_size)
        w = min(max(min_size, _finite(self.width)), 1.0 - x)
        h = min(max(min_size, _finite(self.height)), 1.0 - y)
        return NormalizedRect(x=x, y=y, width=w, height=h)

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class NativeRect:
    """Detector-native bbox: normalized to the image, origin bottom-left."""
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class ShapeNode:
    bbox: NativeRect
    points: Tuple[Tuple[float, float], ...] = ()   # native, ordered
    children: Tuple["ShapeNode", ...] = ()


@dataclass(frozen=True)
class Candidate:
    rect: NormalizedRect
    outline: Tuple[NormalizedPoint, ...] = ()   # empty or >= 3 points


class HoldSource(str, Enum):
    DETECTED = "detected"
    MANUAL = "manual"


@dataclass(frozen=True)
class Hold:
    rect: NormalizedRect
    confidence: float
    source: HoldSource
    outline: Tuple[NormalizedPoint, ...] = ()
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def to_dict(self) -> Dict[str, Any]:
        x, y, w, h = self.rect.as_tuple()
        return {
            "id": self.id,
            "rect": {"x": x, "y": y, "width": w, "height": h},
            "outline": [list(p.as_tuple()) for p in self.outline] or None,
            "confidence": self.confidence,
            "source": self.source.value,
        }


class ClimbingGrade(str, Enum):
    SIX_A = "6a"
    SIX_A_PLUS = "6a+"
    SIX_B = "6b"
    SIX_B_PLUS = "6b+"
    SIX_C = "6c"
    SIX_C_PLUS = "6c+"
    SEVEN_A = "7a"
    SEVEN_A_PLUS = "7a+"
    SEVEN_B = "7b"
    SEVEN_B_PLUS = "7b+"
    SEVEN_C = "7c"
    SEVEN_C_PLUS = "7c+"
    EIGHT_A = "8a"


@dataclass(frozen=True)
class Boulder:
    """A named problem: an ordered selection of hold ids on one wall."""
    wall_id: str
    name: str
    grade: str
    notes: str = ""
    hold_ids: Tuple[str, ...] = ()
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=_utcnow)


@dataclass
class Wall:
    """
    In-memory wall: one photo, its holds and the problems set on it.
    Holds are only ever added or removed, never edited in place.
    """
    name: str
    image_filename: str = ""
    holds: List[Hold] = field(default_factory=list)
    boulders: List[Boulder] = field(default_factory=list)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def touch(self) -> None:
        self.updated_at = _utcnow()


def _finite(v: float) -> float:
    # NaN compares false everywhere; pin it to 0 before clamping
    return 0.0 if v != v else float(v)


def _clamp01(v: float) -> float:
    return min(max(0.0, _finite(v)), 1.0)
