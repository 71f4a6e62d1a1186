from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence


# MediaPipe Pose topology (33 points). Only the indices used by the pipeline
# are named here.
NOSE = 0
LEFT_EYE_INNER = 1
RIGHT_EYE_INNER = 4
LEFT_EAR = 7
RIGHT_EAR = 8
MOUTH_LEFT = 9
MOUTH_RIGHT = 10
LEFT_SHOULDER = 11
RIGHT_SHOULDER = 12
LEFT_WRIST = 15
RIGHT_WRIST = 16
LEFT_HIP = 23
RIGHT_HIP = 24
LEFT_ANKLE = 27
RIGHT_ANKLE = 28

POSE_LANDMARK_COUNT = 33

VISIBILITY_THRESHOLD = 0.5


@dataclass(frozen=True)
class Landmark:
    # Normalised image coords in [0,1]
    x: float
    y: float
    z: Optional[float] = None
    visibility: Optional[float] = None


def dist(a: Landmark, b: Landmark, width: float, height: float) -> float:
    """Pixel distance between two normalised points in a ``width`` x ``height`` frame."""
    dx = (a.x - b.x) * width
    dy = (a.y - b.y) * height
    return math.hypot(dx, dy)


def midpoint(a: Landmark, b: Landmark) -> Landmark:
    return Landmark(x=(a.x + b.x) / 2.0, y=(a.y + b.y) / 2.0)


def is_visible(lm: Optional[Landmark], threshold: float = VISIBILITY_THRESHOLD) -> bool:
    if lm is None:
        return False
    return lm.visibility is None or lm.visibility >= threshold


def _opt_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def coerce_landmark(item: Any) -> Landmark:
    """Build a ``Landmark`` from a Landmark, a mapping or an ``(x, y[, z[, vis]])`` sequence."""
    if isinstance(item, Landmark):
        return item
    if isinstance(item, Mapping):
        return Landmark(
            x=float(item["x"]),
            y=float(item["y"]),
            z=_opt_float(item.get("z")),
            visibility=_opt_float(item.get("visibility")),
        )
    if isinstance(item, Sequence) and not isinstance(item, (str, bytes)) and len(item) >= 2:
        z = item[2] if len(item) > 2 else None
        vis = item[3] if len(item) > 3 else None
        return Landmark(x=float(item[0]), y=float(item[1]), z=_opt_float(z), visibility=_opt_float(vis))
    # Detector result objects (e.g. mediapipe NormalizedLandmark) expose attributes.
    if hasattr(item, "x") and hasattr(item, "y"):
        return Landmark(
            x=float(item.x),
            y=float(item.y),
            z=_opt_float(getattr(item, "z", None)),
            visibility=_opt_float(getattr(item, "visibility", None)),
        )
    raise ValueError(f"Cannot interpret landmark: {item!r}")


def coerce_landmarks(items: Optional[Iterable[Any]]) -> Optional[List[Landmark]]:
    if items is None:
        return None
    return [coerce_landmark(item) for item in items]
