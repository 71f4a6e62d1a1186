"""Feed recorded landmark streams through a capture session."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import yaml

from .calibration import DEFAULT_CALIBRATION, Calibration
from .capture import CaptureSession, TwoPoseScan
from .modes import ScanMode, TWO_POSE_MODES
from .quality import FrameQuality
from .scaling import ScaledMeasurement


# Frames arrive at most every 50 ms, so one countdown second is ~20 frames.
DEFAULT_FRAMES_PER_TICK = 20


@dataclass
class Recording:
    width: int
    height: int
    frames: List[Optional[List[Any]]] = field(default_factory=list)


@dataclass
class ReplayOutcome:
    result: Optional[ScaledMeasurement]
    frames_seen: int
    qualities: List[FrameQuality] = field(default_factory=list)


def load_recording(path: Path) -> Recording:
    """Read ``{"width", "height", "frames"}`` from JSON or YAML."""
    text = Path(path).read_text(encoding="utf-8")
    if Path(path).suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError(f"Recording must be a mapping: {path}")
    try:
        width = int(data["width"])
        height = int(data["height"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Recording needs integer width and height: {path}") from exc
    frames = data.get("frames") or []
    if not isinstance(frames, list):
        raise ValueError(f"Recording frames must be a list: {path}")
    return Recording(width=width, height=height, frames=frames)


def replay_session(
    session: CaptureSession,
    recording: Recording,
    frames_per_tick: int = DEFAULT_FRAMES_PER_TICK,
) -> ReplayOutcome:
    """Run one pose. Manual sessions capture as soon as they are ready."""
    outcome = ReplayOutcome(result=None, frames_seen=0)
    since_tick = 0
    for frame in recording.frames:
        outcome.frames_seen += 1
        outcome.qualities.append(session.process_frame(frame, recording.width, recording.height))
        if not session.ready:
            since_tick = 0
            continue
        if not session.auto_capture:
            outcome.result = session.capture()
            return outcome
        since_tick += 1
        if since_tick >= frames_per_tick:
            since_tick = 0
            fired = session.tick()
            if fired is not None:
                outcome.result = fired
                return outcome
    return outcome


def replay_scan(
    scan_mode: ScanMode | str,
    user_height_cm: float,
    recording: Recording,
    side_recording: Optional[Recording] = None,
    frames_per_tick: int = DEFAULT_FRAMES_PER_TICK,
    calibration: Calibration = DEFAULT_CALIBRATION,
) -> Optional[ScaledMeasurement]:
    scan_mode = ScanMode(scan_mode)
    if scan_mode in TWO_POSE_MODES:
        if side_recording is None:
            raise ValueError(f"{scan_mode.value} scans need a side-pose recording")
        scan = TwoPoseScan(scan_mode, user_height_cm, calibration=calibration)
        for rec in (recording, side_recording):
            outcome = replay_session(scan.session, rec, frames_per_tick)
            if outcome.result is None:
                return None
            scan.accept(outcome.result)
        return scan.result
    session = CaptureSession.for_scan(scan_mode, user_height_cm, calibration=calibration)
    return replay_session(session, recording, frames_per_tick).result
