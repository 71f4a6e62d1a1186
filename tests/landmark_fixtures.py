"""Synthetic pose-landmark frames shared by the tests.

Frames are laid out for a 480 x 640 (portrait) image.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from humancurve.landmarks import Landmark

FRAME_W = 480
FRAME_H = 640

_FULL_BODY: Dict[int, Tuple[float, float]] = {
    0: (0.50, 0.10),  # nose
    1: (0.51, 0.09),  # left eye inner
    4: (0.49, 0.09),  # right eye inner
    7: (0.54, 0.095),  # left ear
    8: (0.46, 0.095),  # right ear
    9: (0.52, 0.115),  # mouth left
    10: (0.48, 0.115),  # mouth right
    11: (0.56, 0.20),  # left shoulder
    12: (0.44, 0.20),  # right shoulder
    15: (0.62, 0.48),  # left wrist
    16: (0.38, 0.48),  # right wrist
    23: (0.54, 0.50),  # left hip
    24: (0.46, 0.50),  # right hip
    27: (0.53, 0.91),  # left ankle
    28: (0.47, 0.91),  # right ankle
}

_FACE: Dict[int, Tuple[float, float]] = {
    0: (0.50, 0.50),
    1: (0.53, 0.42),
    4: (0.47, 0.42),
    7: (0.65, 0.45),
    8: (0.35, 0.45),
    9: (0.54, 0.60),
    10: (0.46, 0.60),
}


def make_landmarks(points: Dict[int, Tuple[float, float]], visibility: Optional[float] = 0.9) -> List[Landmark]:
    out = [Landmark(0.5, 0.5, visibility=visibility) for _ in range(33)]
    for idx, (x, y) in points.items():
        out[idx] = Landmark(x, y, visibility=visibility)
    return out


def full_body_frame() -> List[Landmark]:
    return make_landmarks(_FULL_BODY)


def face_frame() -> List[Landmark]:
    return make_landmarks(_FACE)


def side_profile_frame() -> List[Landmark]:
    pts = dict(_FULL_BODY)
    pts[0] = (0.60, 0.10)
    pts[11] = (0.52, 0.20)
    pts[12] = (0.48, 0.20)
    pts[23] = (0.51, 0.50)
    pts[24] = (0.49, 0.50)
    return make_landmarks(pts)


def moved(frame: List[Landmark], idx: int, x: Optional[float] = None, y: Optional[float] = None,
          visibility: Optional[float] = None) -> List[Landmark]:
    out = list(frame)
    lm = out[idx]
    out[idx] = Landmark(
        x=lm.x if x is None else x,
        y=lm.y if y is None else y,
        visibility=lm.visibility if visibility is None else visibility,
    )
    return out
