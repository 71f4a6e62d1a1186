from __future__ import annotations

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from dataclasses import asdict
from pathlib import Path
from typing import Any, List, Optional

import yaml

from humancurve import cli
from humancurve.capture import CaptureSession
from humancurve.modes import ScanMode
from humancurve.replay import Recording, load_recording, replay_scan, replay_session

from landmark_fixtures import FRAME_H, FRAME_W, full_body_frame, moved, side_profile_frame


def _frames(frame, n: int) -> List[Optional[List[Any]]]:
    return [[asdict(lm) for lm in frame] for _ in range(n)]


def _recording(frame, n: int) -> Recording:
    return Recording(width=FRAME_W, height=FRAME_H, frames=_frames(frame, n))


def _run_cli(argv: List[str]) -> tuple[int, str]:
    buf = io.StringIO()
    with redirect_stdout(buf):
        code = cli.main(argv)
    return code, buf.getvalue()


class LoadRecordingTests(unittest.TestCase):
    def test_json_and_yaml(self) -> None:
        payload = {"width": FRAME_W, "height": FRAME_H, "frames": _frames(full_body_frame(), 2) + [None]}
        with tempfile.TemporaryDirectory() as tmp:
            j = Path(tmp) / "rec.json"
            j.write_text(json.dumps(payload), encoding="utf-8")
            y = Path(tmp) / "rec.yaml"
            y.write_text(yaml.safe_dump(payload), encoding="utf-8")
            for path in (j, y):
                rec = load_recording(path)
                self.assertEqual((rec.width, rec.height), (FRAME_W, FRAME_H))
                self.assertEqual(len(rec.frames), 3)
                self.assertIsNone(rec.frames[-1])

    def test_bad_recordings(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "rec.json"
            path.write_text(json.dumps({"height": 640, "frames": []}), encoding="utf-8")
            with self.assertRaises(ValueError):
                load_recording(path)
            path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
            with self.assertRaises(ValueError):
                load_recording(path)


class ReplayTests(unittest.TestCase):
    def test_auto_capture_needs_countdown_ticks(self) -> None:
        session = CaptureSession.for_scan(ScanMode.FULL_BODY, 175.0)
        outcome = replay_session(session, _recording(full_body_frame(), 40), frames_per_tick=1)
        assert outcome.result is not None
        # Ready on frame 30, then one tick per ready frame: 3, 2, 1 -> capture on frame 32.
        self.assertEqual(outcome.frames_seen, 32)
        self.assertEqual(outcome.result.shoulder_width_cm, 19.3)
        self.assertTrue(all(q.accepted for q in outcome.qualities))

    def test_default_tick_rate(self) -> None:
        result = replay_scan("full-body", 175.0, _recording(full_body_frame(), 100))
        assert result is not None
        self.assertEqual(result.leg_length_cm, 87.9)
        self.assertIsNone(replay_scan("full-body", 175.0, _recording(full_body_frame(), 80)))

    def test_manual_mode_captures_when_ready(self) -> None:
        session = CaptureSession.for_scan(ScanMode.UPPER_BODY, 175.0)
        outcome = replay_session(session, _recording(full_body_frame(), 40))
        self.assertEqual(outcome.frames_seen, 25)
        assert outcome.result is not None
        self.assertEqual(outcome.result.shoulder_width_cm, 21.7)

    def test_rejections_delay_capture(self) -> None:
        bad = moved(full_body_frame(), 0, y=0.05)
        rec = Recording(FRAME_W, FRAME_H, _frames(full_body_frame(), 10) + _frames(bad, 1) + _frames(full_body_frame(), 30))
        outcome = replay_session(CaptureSession.for_scan("upper-body", 175.0), rec)
        # Upper body ignores the nose, so the frame still counts.
        self.assertEqual(outcome.frames_seen, 25)
        outcome = replay_session(CaptureSession.for_scan("full-body", 175.0), rec, frames_per_tick=1)
        # 10 good, -2, then 22 more to reach 30; the third tick lands two frames later.
        self.assertEqual(outcome.frames_seen, 10 + 1 + 22 + 2)

    def test_chest_scan(self) -> None:
        result = replay_scan(
            "chest",
            175.0,
            _recording(full_body_frame(), 30),
            side_recording=_recording(side_profile_frame(), 30),
            frames_per_tick=1,
        )
        assert result is not None
        self.assertEqual(result.scan_mode, ScanMode.CHEST)
        self.assertGreater(result.chest_circumference_cm, 0.0)
        with self.assertRaises(ValueError):
            replay_scan("waist", 175.0, _recording(full_body_frame(), 30))


class CliTests(unittest.TestCase):
    def test_percentile(self) -> None:
        code, out = _run_cli(["percentile", "--value", "110", "--mean", "100", "--stddev", "10"])
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual(data["percentile"], 84)
        self.assertEqual(data["ordinal"], "84th")
        self.assertNotIn("curve", data)

    def test_percentile_curve(self) -> None:
        code, out = _run_cli(["percentile", "--value", "1", "--mean", "0", "--stddev", "1", "--curve", "5"])
        self.assertEqual(code, 0)
        curve = json.loads(out)["curve"]
        self.assertEqual(len(curve), 5)
        self.assertAlmostEqual(curve[2]["x"], 0.0)

    def test_percentile_curve_needs_two_points(self) -> None:
        for n in ("1", "-3"):
            code, out = _run_cli(["percentile", "--value", "1", "--mean", "0", "--stddev", "1", "--curve", n])
            self.assertEqual(code, 2)
            self.assertIn("[humancurve] --curve needs at least 2 points", out)

    def test_measure(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "rec.json"
            path.write_text(
                json.dumps({"width": FRAME_W, "height": FRAME_H, "frames": _frames(full_body_frame(), 40)}),
                encoding="utf-8",
            )
            code, out = _run_cli(
                ["measure", "--input", str(path), "--height", "175", "--sex", "male", "--frames-per-tick", "1"]
            )
            self.assertEqual(code, 0)
            data = json.loads(out)
            self.assertEqual(data["measurements"]["shoulder_width_cm"], 19.3)
            self.assertEqual(data["report"]["scan_mode"], "full-body")
            self.assertEqual(data["report"]["sex"], "male")

            code, out = _run_cli(["measure", "--input", str(path), "--height", "175", "--mode", "face"])
            self.assertEqual(code, 1)
            self.assertIn("Not enough good frames", out)

    def test_invalid_height(self) -> None:
        code, out = _run_cli(["measure", "--input", "missing.json", "--height", "50"])
        self.assertEqual(code, 2)
        self.assertIn("Invalid profile", out)


if __name__ == "__main__":
    unittest.main()
