from __future__ import annotations

from collections import deque
from dataclasses import fields
from typing import Deque, Generic, Iterator, List, Optional, Sequence, TypeVar

import numpy as np

from .measurements import FaceMeasurement, RawMeasurement
from .utils.numbers import round_to


MAX_BUFFER = 60

T = TypeVar("T")


def _mean_field(values: List[Optional[float]], name: str) -> Optional[float]:
    present = [v for v in values if v is not None]
    if not present:
        return None
    if len(present) != len(values):
        raise ValueError(f"Frames disagree on whether '{name}' was measured")
    return float(np.mean(np.asarray(present, dtype=np.float64)))


def average_raw_measurements(frames: Sequence[RawMeasurement]) -> RawMeasurement:
    """Field-wise mean of same-shaped frames. Empty input is a caller bug."""
    if len(frames) == 0:
        raise ValueError("No frames to average")
    out = {}
    for f in fields(RawMeasurement):
        out[f.name] = _mean_field([getattr(frame, f.name) for frame in frames], f.name)
    return RawMeasurement(**out)


def average_face_measurements(frames: Sequence[FaceMeasurement]) -> FaceMeasurement:
    if len(frames) == 0:
        raise ValueError("No frames to average")
    stacked = np.asarray(
        [
            (f.ear_to_ear_px, f.inner_eye_spacing_px, f.face_height_px, f.interocular_ratio, f.facial_width_ratio)
            for f in frames
        ],
        dtype=np.float64,
    )
    ear, eye, height, interocular, facial = (float(v) for v in stacked.mean(axis=0))
    return FaceMeasurement(
        ear_to_ear_px=ear,
        inner_eye_spacing_px=eye,
        face_height_px=height,
        interocular_ratio=round_to(interocular, 3),
        facial_width_ratio=round_to(facial, 3),
    )


class FrameBuffer(Generic[T]):
    """Bounded buffer of accepted frames; the oldest frame is evicted first."""

    def __init__(self, capacity: int = MAX_BUFFER) -> None:
        if capacity < 1:
            raise ValueError("Buffer capacity must be positive")
        self._frames: Deque[T] = deque(maxlen=int(capacity))

    @property
    def capacity(self) -> int:
        return int(self._frames.maxlen or 0)

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[T]:
        return iter(self._frames)

    def append(self, frame: T) -> None:
        self._frames.append(frame)

    def clear(self) -> None:
        self._frames.clear()

    def latest(self, n: int) -> List[T]:
        if n <= 0:
            return []
        return list(self._frames)[-n:]
