from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from .landmarks import (
    LEFT_ANKLE,
    LEFT_EAR,
    LEFT_EYE_INNER,
    LEFT_HIP,
    LEFT_SHOULDER,
    LEFT_WRIST,
    NOSE,
    POSE_LANDMARK_COUNT,
    RIGHT_ANKLE,
    RIGHT_EAR,
    RIGHT_EYE_INNER,
    RIGHT_HIP,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    VISIBILITY_THRESHOLD,
    Landmark,
    is_visible,
)
from .modes import CameraMode


# Framing thresholds in normalised image units. Fixed; reasons below are shown
# to the user verbatim.
QUALITY_THRESHOLDS: Dict[str, float] = {
    "face_width_min": 0.12,
    "face_width_max": 0.70,
    "face_nose_x_min": 0.12,
    "face_nose_x_max": 0.88,
    "face_nose_y_min": 0.08,
    "face_nose_y_max": 0.88,
    "upper_margin": 0.05,
    "upper_torso_fraction_min": 0.22,
    "side_nose_deviation_min": 0.08,
    "side_shoulder_spread_min": 0.02,
    "full_margin": 0.08,
    "full_body_fraction_min": 0.40,
    "full_body_fraction_max": 0.98,
}

FULL_BODY_LANDMARKS = (NOSE, LEFT_SHOULDER, RIGHT_SHOULDER, LEFT_HIP, RIGHT_HIP, LEFT_ANKLE, RIGHT_ANKLE)
UPPER_BODY_LANDMARKS = (LEFT_SHOULDER, RIGHT_SHOULDER, LEFT_HIP, RIGHT_HIP, LEFT_WRIST, RIGHT_WRIST)
FACE_LANDMARKS = (NOSE, LEFT_EAR, RIGHT_EAR, LEFT_EYE_INNER, RIGHT_EYE_INNER)

REASON_NOT_DETECTED = "Body not detected"


@dataclass(frozen=True)
class FrameQuality:
    accepted: bool
    reason: str


def _reject(reason: str) -> FrameQuality:
    return FrameQuality(accepted=False, reason=reason)


def _all_visible(landmarks: Sequence[Landmark], indices: Sequence[int], threshold: float) -> bool:
    for idx in indices:
        lm = landmarks[idx] if idx < len(landmarks) else None
        if not is_visible(lm, threshold):
            return False
    return True


def _check_face(landmarks: Sequence[Landmark], threshold: float) -> FrameQuality:
    t = QUALITY_THRESHOLDS
    if not _all_visible(landmarks, FACE_LANDMARKS, threshold):
        return _reject("Face not fully visible")

    nose = landmarks[NOSE]
    face_width = abs(landmarks[LEFT_EAR].x - landmarks[RIGHT_EAR].x)
    if face_width < t["face_width_min"]:
        return _reject("Move closer to the camera")
    if face_width > t["face_width_max"]:
        return _reject("Move back from the camera")
    if nose.x < t["face_nose_x_min"] or nose.x > t["face_nose_x_max"]:
        return _reject("Centre your face in frame")
    if nose.y < t["face_nose_y_min"]:
        return _reject("Tilt face down slightly")
    if nose.y > t["face_nose_y_max"]:
        return _reject("Tilt face up slightly")
    return FrameQuality(True, "Good — hold still")


def _check_upper_framing(landmarks: Sequence[Landmark], threshold: float) -> Optional[FrameQuality]:
    """Visibility and cropping checks shared by the upper-body and side poses."""
    if not _all_visible(landmarks, UPPER_BODY_LANDMARKS, threshold):
        return _reject("Upper body not fully visible")
    margin = QUALITY_THRESHOLDS["upper_margin"]
    shoulder_y = min(landmarks[LEFT_SHOULDER].y, landmarks[RIGHT_SHOULDER].y)
    if shoulder_y < margin:
        return _reject("Move back — shoulders cut off")
    hip_y = max(landmarks[LEFT_HIP].y, landmarks[RIGHT_HIP].y)
    if hip_y > 1.0 - margin:
        return _reject("Move back — hips cut off")
    return None


def _check_upper_body(landmarks: Sequence[Landmark], threshold: float) -> FrameQuality:
    framing = _check_upper_framing(landmarks, threshold)
    if framing is not None:
        return framing
    shoulder_y = min(landmarks[LEFT_SHOULDER].y, landmarks[RIGHT_SHOULDER].y)
    hip_y = max(landmarks[LEFT_HIP].y, landmarks[RIGHT_HIP].y)
    if hip_y - shoulder_y < QUALITY_THRESHOLDS["upper_torso_fraction_min"]:
        return _reject("Move closer to the camera")
    return FrameQuality(True, "Good framing — hold still")


def _check_side_profile(landmarks: Sequence[Landmark], threshold: float) -> FrameQuality:
    framing = _check_upper_framing(landmarks, threshold)
    if framing is not None:
        return framing
    ls = landmarks[LEFT_SHOULDER]
    rs = landmarks[RIGHT_SHOULDER]
    # Turned sideways: the nose sits off the shoulder midline.
    shoulder_mid_x = (ls.x + rs.x) / 2.0
    if abs(landmarks[NOSE].x - shoulder_mid_x) < QUALITY_THRESHOLDS["side_nose_deviation_min"]:
        return _reject("Turn sideways — show your profile")
    if abs(ls.x - rs.x) < QUALITY_THRESHOLDS["side_shoulder_spread_min"]:
        return _reject("Rotate slightly so both shoulders are detected")
    return FrameQuality(True, "Good profile — hold still")


def _check_full_body(landmarks: Sequence[Landmark], threshold: float) -> FrameQuality:
    t = QUALITY_THRESHOLDS
    if not _all_visible(landmarks, FULL_BODY_LANDMARKS, threshold):
        return _reject("Key body parts not visible")
    margin = t["full_margin"]
    nose = landmarks[NOSE]
    ankle_y = max(landmarks[LEFT_ANKLE].y, landmarks[RIGHT_ANKLE].y)
    if nose.y < margin:
        return _reject("Move back — head cut off")
    if ankle_y > 1.0 - margin:
        return _reject("Move back — feet cut off")
    body_fraction = ankle_y - nose.y
    if body_fraction < t["full_body_fraction_min"]:
        return _reject("Move closer — too far away")
    if body_fraction > t["full_body_fraction_max"]:
        return _reject("Move back — too close")
    return FrameQuality(True, "Good framing — hold still")


def check_landmark_quality(
    landmarks: Optional[Sequence[Landmark]],
    frame_width: float,
    frame_height: float,
    mode: CameraMode | str,
    visibility_threshold: float = VISIBILITY_THRESHOLD,
) -> FrameQuality:
    """Accept or reject one detector frame for ``mode``. Always returns a reason.

    Checks use normalised coordinates; the frame size does not change the verdict.
    """
    if not landmarks or len(landmarks) < POSE_LANDMARK_COUNT:
        return _reject(REASON_NOT_DETECTED)

    mode = CameraMode(mode)
    if mode is CameraMode.FACE:
        return _check_face(landmarks, visibility_threshold)
    if mode is CameraMode.UPPER_BODY or mode is CameraMode.CHEST_FRONT:
        return _check_upper_body(landmarks, visibility_threshold)
    if mode is CameraMode.CHEST_SIDE:
        return _check_side_profile(landmarks, visibility_threshold)
    if mode is CameraMode.FULL_BODY:
        return _check_full_body(landmarks, visibility_threshold)
    raise ValueError(f"Unknown camera mode: {mode!r}")
