"""Pixel-space measurements from a single accepted landmark frame.

Landmark indices follow the MediaPipe Pose topology (see ``landmarks``).
Nothing here is scaled to centimetres; see ``scaling`` for that step.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from .calibration import DEFAULT_CALIBRATION, Calibration
from .landmarks import (
    LEFT_ANKLE,
    LEFT_EAR,
    LEFT_EYE_INNER,
    LEFT_HIP,
    LEFT_SHOULDER,
    LEFT_WRIST,
    MOUTH_LEFT,
    MOUTH_RIGHT,
    NOSE,
    RIGHT_ANKLE,
    RIGHT_EAR,
    RIGHT_EYE_INNER,
    RIGHT_HIP,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    Landmark,
    dist,
    midpoint,
)
from .modes import CameraMode
from .utils.numbers import safe_ratio


@dataclass(frozen=True)
class RawMeasurement:
    shoulder_width_px: float
    hip_width_px: float
    # None when the pose does not show the legs (upper-body and chest poses).
    leg_length_px: Optional[float]
    torso_length_px: float
    arm_length_px: float
    wingspan_px: float
    # Head-top to ankle midpoint (full body) or to hip midpoint (upper body).
    body_height_px: float


@dataclass(frozen=True)
class FaceMeasurement:
    ear_to_ear_px: float
    inner_eye_spacing_px: float
    # Ear-midpoint to mouth-midpoint, stretched to forehead-to-chin.
    face_height_px: float
    # inner eye spacing / ear-to-ear: how wide-set the eyes are
    interocular_ratio: float
    # ear-to-ear / face height: lower means a more oval face
    facial_width_ratio: float


FrameMeasurement = Union[RawMeasurement, FaceMeasurement]


def _head_top(landmarks: Sequence[Landmark], width: float, height: float, factor: float) -> Landmark:
    nose = landmarks[NOSE]
    ear_mid = midpoint(landmarks[LEFT_EAR], landmarks[RIGHT_EAR])
    ear_to_nose_px = dist(ear_mid, nose, width, height)
    return Landmark(x=nose.x, y=nose.y - (ear_to_nose_px / height) * factor)


def _common_upper(landmarks: Sequence[Landmark], width: float, height: float):
    ls, rs = landmarks[LEFT_SHOULDER], landmarks[RIGHT_SHOULDER]
    lh, rh = landmarks[LEFT_HIP], landmarks[RIGHT_HIP]
    lw, rw = landmarks[LEFT_WRIST], landmarks[RIGHT_WRIST]

    shoulder_mid = midpoint(ls, rs)
    hip_mid = midpoint(lh, rh)
    arm_px = (dist(ls, lw, width, height) + dist(rs, rw, width, height)) / 2.0
    return {
        "shoulder_width_px": dist(ls, rs, width, height),
        "hip_width_px": dist(lh, rh, width, height),
        "torso_length_px": dist(shoulder_mid, hip_mid, width, height),
        "arm_length_px": arm_px,
        "wingspan_px": dist(lw, rw, width, height),
    }, hip_mid


def extract_raw_measurements(
    landmarks: Sequence[Landmark],
    frame_width: float,
    frame_height: float,
    calibration: Calibration = DEFAULT_CALIBRATION,
) -> RawMeasurement:
    """Full-body frame: every length including legs, height proxy to the ankles."""
    fields, hip_mid = _common_upper(landmarks, frame_width, frame_height)
    ankle_mid = midpoint(landmarks[LEFT_ANKLE], landmarks[RIGHT_ANKLE])
    head_top = _head_top(landmarks, frame_width, frame_height, calibration.head_top_factor)
    return RawMeasurement(
        leg_length_px=dist(hip_mid, ankle_mid, frame_width, frame_height),
        body_height_px=dist(head_top, ankle_mid, frame_width, frame_height),
        **fields,
    )


def extract_upper_body_measurements(
    landmarks: Sequence[Landmark],
    frame_width: float,
    frame_height: float,
    calibration: Calibration = DEFAULT_CALIBRATION,
) -> RawMeasurement:
    """Upper-body frame: no legs; height proxy is head-top to hip midpoint."""
    fields, hip_mid = _common_upper(landmarks, frame_width, frame_height)
    head_top = _head_top(landmarks, frame_width, frame_height, calibration.head_top_factor)
    return RawMeasurement(
        leg_length_px=None,
        body_height_px=dist(head_top, hip_mid, frame_width, frame_height),
        **fields,
    )


def extract_face_measurements(
    landmarks: Sequence[Landmark],
    frame_width: float,
    frame_height: float,
    calibration: Calibration = DEFAULT_CALIBRATION,
) -> FaceMeasurement:
    w, h = frame_width, frame_height
    left_ear, right_ear = landmarks[LEFT_EAR], landmarks[RIGHT_EAR]

    ear_to_ear = dist(left_ear, right_ear, w, h)
    inner_eye = dist(landmarks[LEFT_EYE_INNER], landmarks[RIGHT_EYE_INNER], w, h)
    ear_mid = midpoint(left_ear, right_ear)
    mouth_mid = midpoint(landmarks[MOUTH_LEFT], landmarks[MOUTH_RIGHT])
    face_height = dist(ear_mid, mouth_mid, w, h) * calibration.face_height_factor

    return FaceMeasurement(
        ear_to_ear_px=ear_to_ear,
        inner_eye_spacing_px=inner_eye,
        face_height_px=face_height,
        interocular_ratio=safe_ratio(inner_eye, ear_to_ear, 3),
        facial_width_ratio=safe_ratio(ear_to_ear, face_height, 3),
    )


def extract_for_mode(
    landmarks: Sequence[Landmark],
    frame_width: float,
    frame_height: float,
    mode: CameraMode | str,
    calibration: Calibration = DEFAULT_CALIBRATION,
) -> FrameMeasurement:
    mode = CameraMode(mode)
    if mode is CameraMode.FACE:
        return extract_face_measurements(landmarks, frame_width, frame_height, calibration)
    if mode is CameraMode.FULL_BODY:
        return extract_raw_measurements(landmarks, frame_width, frame_height, calibration)
    if mode in (CameraMode.UPPER_BODY, CameraMode.CHEST_FRONT, CameraMode.CHEST_SIDE):
        return extract_upper_body_measurements(landmarks, frame_width, frame_height, calibration)
    raise ValueError(f"Unknown camera mode: {mode!r}")
