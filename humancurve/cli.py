from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from .calibration import load_calibration
from .dataset import AGE_RANGES, load_reference_table
from .modes import ScanMode
from .profile import UserProfile
from .replay import DEFAULT_FRAMES_PER_TICK, load_recording, replay_scan
from .report import build_report
from .scaling import ScaledMeasurement
from .stats import compute_percentile, normal_curve_points, ordinal_suffix


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="humancurve",
        description="Body measurements from pose landmarks, compared with a reference population.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_profile_args(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--height", type=float, required=True, help="Stature in cm (100-250).")
        sp.add_argument(
            "--sex",
            choices=["male", "female", "other", "prefer-not-to-say"],
            default="prefer-not-to-say",
        )
        sp.add_argument("--age-range", choices=list(AGE_RANGES), default="25-34")
        sp.add_argument("--country", default="Global")
        sp.add_argument("--reference", default=None, help="Reference statistics YAML (default: bundled sample).")
        sp.add_argument("--calibration", default=None, help="Calibration YAML (default: bundled).")

    modes = [m.value for m in ScanMode]

    p_measure = sub.add_parser("measure", help="Replay a recorded landmark stream")
    p_measure.add_argument("--input", required=True, help="Recording (JSON or YAML) for the first/only pose.")
    p_measure.add_argument("--side-input", default=None, help="Side-pose recording for chest/waist scans.")
    p_measure.add_argument("--mode", choices=modes, default=ScanMode.FULL_BODY.value)
    p_measure.add_argument(
        "--frames-per-tick",
        type=int,
        default=DEFAULT_FRAMES_PER_TICK,
        help="Ready frames per countdown unit in auto-capture modes.",
    )
    add_profile_args(p_measure)

    p_video = sub.add_parser("video", help="Run a scan on a video file (requires the vision extra)")
    p_video.add_argument("--video", required=True)
    p_video.add_argument("--mode", choices=[ScanMode.FACE.value, ScanMode.UPPER_BODY.value, ScanMode.FULL_BODY.value],
                         default=ScanMode.FULL_BODY.value)
    p_video.add_argument("--show", action="store_true", help="Display frames with quality feedback.")
    add_profile_args(p_video)

    p_pct = sub.add_parser("percentile", help="Percentile of a value in N(mean, stddev)")
    p_pct.add_argument("--value", type=float, required=True)
    p_pct.add_argument("--mean", type=float, required=True)
    p_pct.add_argument("--stddev", type=float, required=True)
    p_pct.add_argument("--curve", type=int, default=0, help="Also emit N density-curve samples.")

    return p


def _emit(measurement: Optional[ScaledMeasurement], args: argparse.Namespace, profile: UserProfile) -> int:
    if measurement is None:
        print("[humancurve] Not enough good frames to capture.")
        return 1
    table = load_reference_table(Path(args.reference)) if args.reference else None
    report = build_report(
        measurement,
        sex=profile.reference_sex,
        age_range=profile.age_range,
        country=profile.country,
        table=table,
    )
    print(json.dumps({"measurements": measurement.to_dict(), "report": report.to_dict()}, indent=2))
    return 0


def _profile(args: argparse.Namespace) -> Optional[UserProfile]:
    try:
        return UserProfile(height_cm=args.height, sex=args.sex, age_range=args.age_range, country=args.country)
    except ValidationError as e:
        print(f"[humancurve] Invalid profile: {e}")
        return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "percentile":
        if args.curve and args.curve < 2:
            print("[humancurve] --curve needs at least 2 points (0 disables it).")
            return 2
        pct = compute_percentile(args.value, args.mean, args.stddev)
        payload = {"percentile": pct, "ordinal": ordinal_suffix(pct)}
        if args.curve and args.stddev > 0:
            payload["curve"] = [{"x": pt.x, "y": pt.y} for pt in normal_curve_points(args.mean, args.stddev, args.curve)]
        print(json.dumps(payload, indent=2))
        return 0

    profile = _profile(args)
    if profile is None:
        return 2
    calibration = load_calibration(Path(args.calibration) if args.calibration else None)

    if args.cmd == "measure":
        recording = load_recording(Path(args.input))
        side = load_recording(Path(args.side_input)) if args.side_input else None
        measurement = replay_scan(
            args.mode,
            profile.height_cm,
            recording,
            side_recording=side,
            frames_per_tick=args.frames_per_tick,
            calibration=calibration,
        )
        return _emit(measurement, args, profile)

    if args.cmd == "video":
        from .video import measure_video

        measurement = measure_video(Path(args.video), args.mode, profile.height_cm, show=args.show, calibration=calibration)
        return _emit(measurement, args, profile)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
