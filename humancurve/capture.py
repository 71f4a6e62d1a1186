from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

from .calibration import DEFAULT_CALIBRATION, Calibration
from .landmarks import coerce_landmarks
from .measurements import FaceMeasurement, RawMeasurement, extract_for_mode
from .modes import CameraMode, ScanMode, TWO_POSE_MODES, camera_mode_for, get_scan_mode_option, scale_mode_for
from .quality import FrameQuality, check_landmark_quality
from .scaling import ScaledMeasurement, combine_two_pose, face_result, scale_measurements
from .smoothing import FrameBuffer, average_face_measurements, average_raw_measurements


logger = logging.getLogger(__name__)

REASON_NO_POSE = "Body not detected — face the camera"


class CapturePhase(str, Enum):
    CALIBRATING = "calibrating"
    READY = "ready"
    CAPTURING = "capturing"
    DONE = "done"


@dataclass(frozen=True)
class CaptureState:
    good_frame_count: int
    required_good_frames: int
    ready: bool = False
    # None while no countdown runs; counts down to 0 in auto-capture modes.
    countdown_remaining: Optional[int] = None
    phase: CapturePhase = CapturePhase.CALIBRATING

    @staticmethod
    def initial(required_good_frames: int) -> "CaptureState":
        if required_good_frames < 1:
            raise ValueError("required_good_frames must be positive")
        return CaptureState(good_frame_count=0, required_good_frames=int(required_good_frames))

    @property
    def progress(self) -> float:
        """Fraction of the good-frame threshold reached, for the quality meter."""
        return min(1.0, self.good_frame_count / float(self.required_good_frames))


def advance(
    state: CaptureState,
    accepted: bool,
    auto_capture: bool,
    calibration: Calibration = DEFAULT_CALIBRATION,
) -> CaptureState:
    """Next state after one validated frame.

    Accepted frames add one (capped at the threshold); rejected frames cost
    ``bad_frame_penalty`` (floored at zero). Ready follows the counter both
    ways. Entering Ready in auto-capture mode starts the countdown and leaving
    it cancels the countdown.
    """
    if state.phase in (CapturePhase.CAPTURING, CapturePhase.DONE):
        return state

    if accepted:
        count = min(state.good_frame_count + calibration.good_frame_reward, state.required_good_frames)
    else:
        count = max(0, state.good_frame_count - calibration.bad_frame_penalty)
    ready = count >= state.required_good_frames

    countdown = state.countdown_remaining
    if not ready:
        countdown = None
    elif auto_capture and countdown is None:
        countdown = calibration.countdown_units

    phase = CapturePhase.READY if ready else CapturePhase.CALIBRATING
    if ready != state.ready:
        logger.debug("capture %s (count=%d/%d)", phase.value, count, state.required_good_frames)
    return dataclasses.replace(
        state,
        good_frame_count=count,
        ready=ready,
        countdown_remaining=countdown,
        phase=phase,
    )


def tick(state: CaptureState) -> CaptureState:
    """One countdown unit elapsed. At zero the state moves to Capturing."""
    if state.phase is not CapturePhase.READY or state.countdown_remaining is None:
        return state
    remaining = max(0, state.countdown_remaining - 1)
    if remaining == 0:
        return dataclasses.replace(state, countdown_remaining=None, phase=CapturePhase.CAPTURING)
    return dataclasses.replace(state, countdown_remaining=remaining)


class CaptureSession:
    """One camera session: validation, buffering, readiness and capture.

    Owns the only mutable state of the pipeline. Feed frames one at a time with
    :meth:`process_frame`; call :meth:`tick` once per countdown unit in
    auto-capture modes, or :meth:`capture` on an explicit trigger.
    """

    def __init__(
        self,
        mode: CameraMode | str,
        user_height_cm: float,
        required_good_frames: int,
        auto_capture: bool = False,
        calibration: Calibration = DEFAULT_CALIBRATION,
    ) -> None:
        self.mode = CameraMode(mode)
        self.user_height_cm = float(user_height_cm)
        self.auto_capture = bool(auto_capture)
        self.calibration = calibration
        self._required = int(required_good_frames)
        self._buffer: FrameBuffer[Any] = FrameBuffer(calibration.buffer_capacity)
        self.state = CaptureState.initial(self._required)
        self.last_quality: Optional[FrameQuality] = None
        self.result: Optional[ScaledMeasurement] = None

    @classmethod
    def for_scan(
        cls,
        scan_mode: ScanMode | str,
        user_height_cm: float,
        pose: Optional[str] = None,
        calibration: Calibration = DEFAULT_CALIBRATION,
    ) -> "CaptureSession":
        opt = get_scan_mode_option(scan_mode)
        return cls(
            camera_mode_for(opt.mode, pose),
            user_height_cm,
            required_good_frames=opt.required_good_frames,
            auto_capture=opt.auto_capture,
            calibration=calibration,
        )

    @property
    def buffered_frames(self) -> int:
        return len(self._buffer)

    @property
    def ready(self) -> bool:
        return self.state.ready

    @property
    def done(self) -> bool:
        return self.state.phase is CapturePhase.DONE

    def reset(self, scan_mode: Optional[ScanMode | str] = None, pose: Optional[str] = None) -> None:
        """Back to the initial state; a new ``scan_mode`` also brings its threshold and capture style."""
        if scan_mode is not None:
            opt = get_scan_mode_option(scan_mode)
            self.mode = camera_mode_for(opt.mode, pose)
            self._required = opt.required_good_frames
            self.auto_capture = opt.auto_capture
        self._buffer.clear()
        self.state = CaptureState.initial(self._required)
        self.last_quality = None
        self.result = None

    def process_frame(
        self,
        landmarks: Optional[Sequence[Any]],
        frame_width: float,
        frame_height: float,
    ) -> FrameQuality:
        """Validate one detector frame and update the buffer and readiness.

        ``None`` means the detector found no pose at all; that drops the
        calibration progress entirely rather than applying the usual penalty.
        """
        if self.state.phase in (CapturePhase.CAPTURING, CapturePhase.DONE):
            return self.last_quality or FrameQuality(False, "Capture in progress")

        if landmarks is None:
            self._buffer.clear()
            self.state = CaptureState.initial(self._required)
            self.last_quality = FrameQuality(False, REASON_NO_POSE)
            return self.last_quality

        try:
            points = coerce_landmarks(landmarks)
        except (KeyError, TypeError, ValueError) as exc:
            logger.debug("malformed landmark frame: %s", exc)
            points = None
        quality = check_landmark_quality(
            points,
            frame_width,
            frame_height,
            self.mode,
            visibility_threshold=self.calibration.visibility_threshold,
        )
        if quality.accepted:
            assert points is not None
            self._buffer.append(extract_for_mode(points, frame_width, frame_height, self.mode, self.calibration))

        self.state = advance(self.state, quality.accepted, self.auto_capture, self.calibration)
        self.last_quality = quality
        return quality

    def tick(self) -> Optional[ScaledMeasurement]:
        """Advance the countdown; returns the measurement when it fires."""
        self.state = tick(self.state)
        if self.state.phase is CapturePhase.CAPTURING:
            return self._finish()
        return None

    def capture(self) -> ScaledMeasurement:
        """Explicit capture trigger. Only valid while Ready."""
        if self.state.phase is CapturePhase.DONE and self.result is not None:
            return self.result
        if not self.state.ready:
            raise RuntimeError(
                f"Capture is not ready ({self.state.good_frame_count}/{self.state.required_good_frames} good frames)"
            )
        self.state = dataclasses.replace(self.state, countdown_remaining=None, phase=CapturePhase.CAPTURING)
        return self._finish()

    def _finish(self) -> ScaledMeasurement:
        frames = self._buffer.latest(self._required)
        if self.mode is CameraMode.FACE:
            face_frames = [f for f in frames if isinstance(f, FaceMeasurement)]
            result = face_result(average_face_measurements(face_frames))
        else:
            raw_frames = [f for f in frames if isinstance(f, RawMeasurement)]
            avg = average_raw_measurements(raw_frames)
            result = scale_measurements(avg, self.user_height_cm, scale_mode_for(self.mode), self.calibration)
        self.result = result
        self.state = dataclasses.replace(self.state, phase=CapturePhase.DONE)
        logger.debug("captured %s from %d frames (scale=%.4f)", self.mode.value, len(frames), result.scale_factor)
        return result


class TwoPoseScan:
    """Front pose then side pose, combined into a chest or waist circumference."""

    def __init__(
        self,
        scan_mode: ScanMode | str,
        user_height_cm: float,
        calibration: Calibration = DEFAULT_CALIBRATION,
    ) -> None:
        self.scan_mode = ScanMode(scan_mode)
        if self.scan_mode not in TWO_POSE_MODES:
            raise ValueError(f"{self.scan_mode.value} is not a two-pose scan mode")
        self.user_height_cm = float(user_height_cm)
        self.calibration = calibration
        self.front: Optional[ScaledMeasurement] = None
        self.result: Optional[ScaledMeasurement] = None
        self.session = CaptureSession.for_scan(self.scan_mode, user_height_cm, pose="front", calibration=calibration)

    @property
    def pose(self) -> str:
        return "front" if self.front is None else "side"

    @property
    def done(self) -> bool:
        return self.result is not None

    def accept(self, measurement: ScaledMeasurement) -> Optional[ScaledMeasurement]:
        """Record the measurement of the current pose; returns the final result after the side pose."""
        if self.result is not None:
            return self.result
        if self.front is None:
            self.front = measurement
            self.session = CaptureSession.for_scan(
                self.scan_mode, self.user_height_cm, pose="side", calibration=self.calibration
            )
            return None
        self.result = combine_two_pose(self.front, measurement, self.scan_mode, self.calibration)
        return self.result

    def reset(self) -> None:
        self.front = None
        self.result = None
        self.session = CaptureSession.for_scan(
            self.scan_mode, self.user_height_cm, pose="front", calibration=self.calibration
        )
