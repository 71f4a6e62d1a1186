from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import numpy as np

from .landmarks import POSE_LANDMARK_COUNT, Landmark


logger = logging.getLogger(__name__)


@dataclass
class PoseResult:
    landmarks: Optional[List[Landmark]]
    timestamp_ms: Optional[float] = None


def landmarks_from_result(res: Any) -> Optional[List[Landmark]]:
    """Convert a mediapipe pose result to our landmarks; None if nobody was found."""
    pose_landmarks = getattr(res, "pose_landmarks", None)
    if pose_landmarks is None:
        return None
    points = getattr(pose_landmarks, "landmark", pose_landmarks)
    out: List[Landmark] = []
    for p in points:
        vis = getattr(p, "visibility", None)
        out.append(
            Landmark(
                x=float(p.x),
                y=float(p.y),
                z=float(p.z) if getattr(p, "z", None) is not None else None,
                visibility=float(vis) if vis is not None else None,
            )
        )
    if len(out) < POSE_LANDMARK_COUNT:
        logger.debug("pose result has %d landmarks (expected %d)", len(out), POSE_LANDMARK_COUNT)
    return out


class PoseModel:
    """Handle to a loaded mediapipe pose model. Create with :func:`load_pose_model`."""

    def __init__(self, pose: Any) -> None:
        self._pose = pose

    def process_bgr(self, frame_bgr: np.ndarray, timestamp_ms: Optional[float] = None) -> PoseResult:
        frame_rgb = np.ascontiguousarray(frame_bgr[:, :, ::-1])
        res = self._pose.process(frame_rgb)
        return PoseResult(landmarks=landmarks_from_result(res), timestamp_ms=timestamp_ms)

    def close(self) -> None:
        close = getattr(self._pose, "close", None)
        if callable(close):
            close()


def load_pose_model(
    model_complexity: int = 1,
    min_detection_confidence: float = 0.5,
    min_tracking_confidence: float = 0.5,
) -> Tuple[Optional[PoseModel], Optional[Exception]]:
    """Load the pose model once. Returns ``(model, None)`` or ``(None, error)``.

    The caller keeps the handle and decides whether to retry after an error.
    """
    try:
        # Lazy import so the core can be used without mediapipe installed.
        import mediapipe as mp
    except ImportError as exc:
        logger.warning("mediapipe is not installed: %s", exc)
        return None, exc

    # MediaPipe removed the legacy "Solutions" API from mediapipe>=0.10.30.
    if not hasattr(mp, "solutions"):
        err = RuntimeError(
            "Your mediapipe package does not include the Solutions API (mp.solutions.*). "
            "Install a compatible version, e.g.: pip install 'mediapipe<0.10.30'"
        )
        logger.warning("%s", err)
        return None, err

    try:
        pose = mp.solutions.pose.Pose(
            static_image_mode=False,
            model_complexity=model_complexity,
            enable_segmentation=False,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )
    except Exception as exc:
        logger.warning("pose model failed to load: %s", exc)
        return None, exc
    return PoseModel(pose), None
