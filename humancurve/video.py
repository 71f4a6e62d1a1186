from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .calibration import DEFAULT_CALIBRATION, Calibration
from .capture import CaptureSession
from .modes import ScanMode
from .pose import load_pose_model
from .scaling import ScaledMeasurement


logger = logging.getLogger(__name__)

MIN_FRAME_INTERVAL_MS = 50.0
COUNTDOWN_UNIT_MS = 1000.0


def measure_video(
    video_path: Path,
    scan_mode: ScanMode | str,
    user_height_cm: float,
    show: bool = False,
    calibration: Calibration = DEFAULT_CALIBRATION,
) -> Optional[ScaledMeasurement]:
    """Run a single-pose scan over a video file using the file's own clock."""
    import cv2

    model, err = load_pose_model()
    if model is None:
        raise RuntimeError(f"Pose model unavailable: {err}")

    session = CaptureSession.for_scan(scan_mode, user_height_cm, calibration=calibration)
    cap = cv2.VideoCapture(str(video_path))
    if not cap.isOpened():
        model.close()
        raise FileNotFoundError(f"Cannot open video: {video_path}")

    window = "Human Curve"
    last_ms: Optional[float] = None
    last_tick_ms: Optional[float] = None
    try:
        while True:
            ok, frame = cap.read()
            if not ok:
                break
            now_ms = float(cap.get(cv2.CAP_PROP_POS_MSEC))
            if last_ms is not None and now_ms - last_ms < MIN_FRAME_INTERVAL_MS:
                continue
            last_ms = now_ms

            h, w = frame.shape[:2]
            pose = model.process_bgr(frame, timestamp_ms=now_ms)
            quality = session.process_frame(pose.landmarks, w, h)

            if session.ready and not session.auto_capture:
                return session.capture()
            if session.state.countdown_remaining is not None:
                if last_tick_ms is None:
                    last_tick_ms = now_ms
                elif now_ms - last_tick_ms >= COUNTDOWN_UNIT_MS:
                    last_tick_ms = now_ms
                    fired = session.tick()
                    if fired is not None:
                        return fired
            else:
                last_tick_ms = None

            if show:
                msg = quality.reason
                if session.state.countdown_remaining is not None:
                    msg = f"{msg} ({session.state.countdown_remaining})"
                color = (120, 220, 120) if quality.accepted else (0, 200, 255)
                cv2.putText(frame, msg, (20, 40), cv2.FONT_HERSHEY_SIMPLEX, 0.8, color, 2)
                cv2.imshow(window, frame)
                if cv2.waitKey(1) & 0xFF == ord("q"):
                    break
        logger.info("video ended before capture (%d/%d good frames)",
                    session.state.good_frame_count, session.state.required_good_frames)
        return None
    finally:
        cap.release()
        model.close()
        if show:
            cv2.destroyWindow(window)
