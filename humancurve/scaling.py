from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from typing import Optional

from .calibration import DEFAULT_CALIBRATION, Calibration
from .measurements import FaceMeasurement, RawMeasurement
from .modes import ScanMode
from .utils.numbers import round_to, safe_ratio


@dataclass(frozen=True)
class ScaledMeasurement:
    # Lengths in cm. None means the scan mode did not measure the field.
    shoulder_width_cm: Optional[float] = None
    hip_width_cm: Optional[float] = None
    leg_length_cm: Optional[float] = None
    torso_length_cm: Optional[float] = None
    arm_length_cm: Optional[float] = None
    wingspan_cm: Optional[float] = None
    # Ratios are 0.0 when either side is missing or not positive.
    shoulder_to_hip_ratio: float = 0.0
    leg_to_torso_ratio: float = 0.0
    armspan_to_height_ratio: float = 0.0
    # cm per pixel; 1.0 when the height proxy was zero (values stay in px).
    scale_factor: float = 1.0
    face: Optional[FaceMeasurement] = None
    chest_circumference_cm: Optional[float] = None
    waist_circumference_cm: Optional[float] = None
    scan_mode: Optional[ScanMode] = None

    def to_dict(self) -> dict:
        data = dataclasses.asdict(self)
        data["scan_mode"] = self.scan_mode.value if self.scan_mode is not None else None
        return data


def _cm(px: Optional[float], scale_factor: float) -> Optional[float]:
    if px is None:
        return None
    return round_to(px * scale_factor, 1)


def effective_height_cm(
    user_height_cm: float,
    mode: ScanMode | str,
    calibration: Calibration = DEFAULT_CALIBRATION,
) -> float:
    mode = ScanMode(mode)
    if mode is ScanMode.UPPER_BODY:
        return user_height_cm * calibration.upper_body_height_fraction
    if mode is ScanMode.FULL_BODY:
        return user_height_cm
    raise ValueError(f"{mode.value} frames are not scaled by stature")


def scale_measurements(
    raw: RawMeasurement,
    user_height_cm: float,
    mode: ScanMode | str = ScanMode.FULL_BODY,
    calibration: Calibration = DEFAULT_CALIBRATION,
) -> ScaledMeasurement:
    """Convert an averaged pixel record to centimetres.

    ``mode`` is the scaling proportion (full-body or upper-body). Ratios are
    taken from the scaled, rounded cm values, not from pixels.
    """
    mode = ScanMode(mode)
    effective = effective_height_cm(user_height_cm, mode, calibration)
    scale_factor = effective / raw.body_height_px if raw.body_height_px > 0 else 1.0

    shoulder = _cm(raw.shoulder_width_px, scale_factor)
    hip = _cm(raw.hip_width_px, scale_factor)
    leg = _cm(raw.leg_length_px, scale_factor)
    torso = _cm(raw.torso_length_px, scale_factor)
    arm = _cm(raw.arm_length_px, scale_factor)
    wingspan = _cm(raw.wingspan_px, scale_factor)

    return ScaledMeasurement(
        shoulder_width_cm=shoulder,
        hip_width_cm=hip,
        leg_length_cm=leg,
        torso_length_cm=torso,
        arm_length_cm=arm,
        wingspan_cm=wingspan,
        shoulder_to_hip_ratio=safe_ratio(shoulder, hip, 2),
        leg_to_torso_ratio=safe_ratio(leg, torso, 2),
        armspan_to_height_ratio=safe_ratio(wingspan, user_height_cm, 2),
        scale_factor=scale_factor,
        scan_mode=mode,
    )


def face_result(face: FaceMeasurement) -> ScaledMeasurement:
    """Face scans keep their pixel ratios; no body field is measured."""
    return ScaledMeasurement(face=face, scale_factor=1.0, scan_mode=ScanMode.FACE)


def manual_measurements(
    shoulder_width_cm: float,
    hip_width_cm: float,
    leg_length_cm: float,
    torso_length_cm: float,
    arm_length_cm: float,
    user_height_cm: float,
) -> ScaledMeasurement:
    """Record tape-measured values the same way a full-body capture is recorded."""
    values = (shoulder_width_cm, hip_width_cm, leg_length_cm, torso_length_cm, arm_length_cm)
    if any(v is None or not math.isfinite(v) or v <= 0 for v in values):
        raise ValueError("Manual measurements must be positive numbers")
    wingspan = arm_length_cm * 2.0 + shoulder_width_cm
    return ScaledMeasurement(
        shoulder_width_cm=shoulder_width_cm,
        hip_width_cm=hip_width_cm,
        leg_length_cm=leg_length_cm,
        torso_length_cm=torso_length_cm,
        arm_length_cm=arm_length_cm,
        wingspan_cm=wingspan,
        shoulder_to_hip_ratio=safe_ratio(shoulder_width_cm, hip_width_cm, 2),
        leg_to_torso_ratio=safe_ratio(leg_length_cm, torso_length_cm, 2),
        armspan_to_height_ratio=safe_ratio(wingspan, user_height_cm, 2),
        scale_factor=1.0,
        scan_mode=ScanMode.FULL_BODY,
    )


# ── Circumference ───────────────────────────────────────────────────────────


def ellipse_circumference(a: float, b: float) -> float:
    """Ramanujan's second approximation for semi-axes ``a`` and ``b`` (1 dp).

    Returns 0 when either semi-axis is not positive.
    """
    if a <= 0 or b <= 0:
        return 0.0
    h = (a - b) ** 2 / (a + b) ** 2
    c = math.pi * (a + b) * (1.0 + (3.0 * h) / (10.0 + math.sqrt(4.0 - 3.0 * h)))
    return round_to(c, 1)


def compute_chest_circumference(
    front_shoulder_width_cm: Optional[float],
    side_shoulder_width_cm: Optional[float],
    calibration: Calibration = DEFAULT_CALIBRATION,
) -> float:
    # The side pose's shoulder-to-shoulder span is the chest depth.
    if front_shoulder_width_cm is None or side_shoulder_width_cm is None:
        return 0.0
    a = calibration.chest_width_factor * front_shoulder_width_cm / 2.0
    b = side_shoulder_width_cm / 2.0
    return ellipse_circumference(a, b)


def compute_waist_circumference(
    front_hip_width_cm: Optional[float],
    side_hip_width_cm: Optional[float],
    calibration: Calibration = DEFAULT_CALIBRATION,
) -> float:
    if front_hip_width_cm is None or side_hip_width_cm is None:
        return 0.0
    a = calibration.waist_width_factor * front_hip_width_cm / 2.0
    b = side_hip_width_cm / 2.0
    return ellipse_circumference(a, b)


def combine_two_pose(
    front: ScaledMeasurement,
    side: ScaledMeasurement,
    scan_mode: ScanMode | str,
    calibration: Calibration = DEFAULT_CALIBRATION,
) -> ScaledMeasurement:
    """Attach the chest or waist circumference to the front-pose record."""
    scan_mode = ScanMode(scan_mode)
    if scan_mode is ScanMode.CHEST:
        circ = compute_chest_circumference(front.shoulder_width_cm, side.shoulder_width_cm, calibration)
        return dataclasses.replace(front, chest_circumference_cm=circ, scan_mode=scan_mode)
    if scan_mode is ScanMode.WAIST:
        circ = compute_waist_circumference(front.hip_width_cm, side.hip_width_cm, calibration)
        return dataclasses.replace(front, waist_circumference_cm=circ, scan_mode=scan_mode)
    raise ValueError(f"{scan_mode.value} is not a two-pose scan mode")
