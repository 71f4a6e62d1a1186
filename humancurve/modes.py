from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class CameraMode(str, Enum):
    """Capture context for one camera session. Decides landmarks and formulas."""

    FACE = "face"
    UPPER_BODY = "upper-body"
    FULL_BODY = "full-body"
    CHEST_FRONT = "chest-front"
    CHEST_SIDE = "chest-side"


class ScanMode(str, Enum):
    """User-facing scan kind. Chest and waist are captured in two poses."""

    FACE = "face"
    UPPER_BODY = "upper-body"
    FULL_BODY = "full-body"
    CHEST = "chest"
    WAIST = "waist"


TWO_POSE_MODES = (ScanMode.CHEST, ScanMode.WAIST)


@dataclass(frozen=True)
class ScanModeOption:
    mode: ScanMode
    label: str
    tagline: str
    auto_capture: bool
    # Number of stable frames required before capture unlocks / countdown starts
    required_good_frames: int
    details: Tuple[str, ...] = field(default_factory=tuple)
    recommended: bool = False


SCAN_MODE_OPTIONS: List[ScanModeOption] = [
    ScanModeOption(
        mode=ScanMode.FACE,
        label="Face",
        tagline="Facial proportions & symmetry",
        auto_capture=False,
        required_good_frames=20,
        details=("Hold phone at arm's length", "Look straight ahead", "Good frontal lighting"),
    ),
    ScanModeOption(
        mode=ScanMode.UPPER_BODY,
        label="Upper Body",
        tagline="Shoulders, arms & torso",
        auto_capture=False,
        required_good_frames=25,
        details=("Stand ~1 m from the camera", "Upper body fully visible", "Arms relaxed at sides"),
    ),
    ScanModeOption(
        mode=ScanMode.CHEST,
        label="Chest",
        tagline="Chest circumference - two quick poses",
        auto_capture=True,
        required_good_frames=25,
        details=(
            "Stand ~1 m from the camera",
            "Pose 1: face the camera directly",
            "Pose 2: turn 90° to your side",
            "Each pose auto-captures in 3 seconds",
        ),
    ),
    ScanModeOption(
        mode=ScanMode.WAIST,
        label="Waist",
        tagline="Waist circumference - two quick poses",
        auto_capture=True,
        required_good_frames=25,
        details=(
            "Stand ~1 m from the camera",
            "Pose 1: face the camera directly",
            "Pose 2: turn 90° to your side",
            "Each pose auto-captures in 3 seconds",
        ),
    ),
    ScanModeOption(
        mode=ScanMode.FULL_BODY,
        label="Full Body",
        tagline="Complete body proportions",
        auto_capture=True,
        required_good_frames=30,
        details=(
            "Stand 2-3 m from the camera",
            "Full body visible - head to feet",
            "Auto-captures after 3-second countdown",
        ),
        recommended=True,
    ),
]


def get_scan_mode_option(mode: ScanMode | str) -> ScanModeOption:
    mode = ScanMode(mode)
    for opt in SCAN_MODE_OPTIONS:
        if opt.mode is mode:
            return opt
    raise ValueError(f"No scan mode option for {mode.value}")


def camera_mode_for(scan_mode: ScanMode | str, pose: Optional[str] = None) -> CameraMode:
    """Camera mode for a scan; two-pose scans need ``pose`` of ``front`` or ``side``."""
    scan_mode = ScanMode(scan_mode)
    if scan_mode is ScanMode.FACE:
        return CameraMode.FACE
    if scan_mode is ScanMode.UPPER_BODY:
        return CameraMode.UPPER_BODY
    if scan_mode is ScanMode.FULL_BODY:
        return CameraMode.FULL_BODY
    if scan_mode in TWO_POSE_MODES:
        if pose == "front":
            return CameraMode.CHEST_FRONT
        if pose == "side":
            return CameraMode.CHEST_SIDE
        raise ValueError(f"{scan_mode.value} scans need pose='front' or pose='side', got {pose!r}")
    raise ValueError(f"Unknown scan mode: {scan_mode!r}")


def scale_mode_for(camera_mode: CameraMode | str) -> ScanMode:
    """Scaling proportion to use for frames captured in ``camera_mode``.

    Chest poses frame the upper body, so they share the head-to-hip proxy.
    Face frames are never scaled and map to themselves.
    """
    camera_mode = CameraMode(camera_mode)
    if camera_mode is CameraMode.FULL_BODY:
        return ScanMode.FULL_BODY
    if camera_mode in (CameraMode.UPPER_BODY, CameraMode.CHEST_FRONT, CameraMode.CHEST_SIDE):
        return ScanMode.UPPER_BODY
    if camera_mode is CameraMode.FACE:
        return ScanMode.FACE
    raise ValueError(f"Unknown camera mode: {camera_mode!r}")
