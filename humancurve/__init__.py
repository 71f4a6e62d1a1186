from __future__ import annotations

from .capture import CaptureSession, CaptureState, TwoPoseScan, advance, tick
from .modes import CameraMode, ScanMode
from .quality import FrameQuality, check_landmark_quality
from .scaling import ScaledMeasurement, scale_measurements
from .stats import compute_percentile, normal_cdf, normal_curve_points, ordinal_suffix

__version__ = "0.1.0"

__all__ = [
    "CameraMode",
    "CaptureSession",
    "CaptureState",
    "FrameQuality",
    "ScaledMeasurement",
    "ScanMode",
    "TwoPoseScan",
    "advance",
    "check_landmark_quality",
    "compute_percentile",
    "normal_cdf",
    "normal_curve_points",
    "ordinal_suffix",
    "scale_measurements",
    "tick",
]
