from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from pydantic import ValidationError

from humancurve.calibration import DEFAULT_CALIBRATION, Calibration, load_calibration
from humancurve.modes import SCAN_MODE_OPTIONS, ScanMode, camera_mode_for, get_scan_mode_option, scale_mode_for
from humancurve.profile import UserProfile


class CalibrationTests(unittest.TestCase):
    def test_defaults(self) -> None:
        cal = Calibration()
        self.assertEqual(cal.head_top_factor, 1.3)
        self.assertEqual(cal.face_height_factor, 1.4)
        self.assertEqual(cal.upper_body_height_fraction, 0.56)
        self.assertEqual(cal.chest_width_factor, 0.85)
        self.assertEqual(cal.waist_width_factor, 0.88)
        self.assertEqual(cal.bad_frame_penalty, 2)
        self.assertEqual(cal.countdown_units, 3)
        self.assertEqual(cal.buffer_capacity, 60)

    def test_bundled_file_matches_defaults(self) -> None:
        self.assertEqual(load_calibration(), DEFAULT_CALIBRATION)

    def test_yaml_override(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            nested = Path(tmp) / "nested.yaml"
            nested.write_text("calibration:\n  head_top_factor: 1.5\n  countdown_units: 5\n", encoding="utf-8")
            flat = Path(tmp) / "flat.yaml"
            flat.write_text("chest_width_factor: 0.8\n", encoding="utf-8")

            cal = load_calibration(nested)
            self.assertEqual(cal.head_top_factor, 1.5)
            self.assertEqual(cal.countdown_units, 5)
            self.assertEqual(cal.face_height_factor, 1.4)
            self.assertEqual(load_calibration(flat).chest_width_factor, 0.8)

    def test_missing_file_gives_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(load_calibration(Path(tmp) / "absent.yaml"), Calibration())

    def test_invalid_values(self) -> None:
        with self.assertRaises(ValidationError):
            Calibration(head_top_factor=0)
        with self.assertRaises(ValidationError):
            Calibration(upper_body_height_fraction=1.5)
        with self.assertRaises(ValidationError):
            Calibration(unknown_knob=1.0)
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "list.yaml"
            path.write_text("- 1\n- 2\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_calibration(path)

    def test_frozen(self) -> None:
        with self.assertRaises(ValidationError):
            DEFAULT_CALIBRATION.head_top_factor = 2.0  # type: ignore[misc]


class ProfileTests(unittest.TestCase):
    def test_defaults_and_reference_sex(self) -> None:
        p = UserProfile(height_cm=172)
        self.assertEqual(p.age_range, "25-34")
        self.assertEqual(p.country, "Global")
        self.assertEqual(p.reference_sex, "other")
        self.assertEqual(UserProfile(height_cm=172, sex="female").reference_sex, "female")

    def test_height_bounds(self) -> None:
        UserProfile(height_cm=100)
        UserProfile(height_cm=250)
        for bad in (99.9, 250.1, -5):
            with self.assertRaises(ValidationError):
                UserProfile(height_cm=bad)

    def test_enumerated_fields(self) -> None:
        with self.assertRaises(ValidationError):
            UserProfile(height_cm=170, sex="unknown")
        with self.assertRaises(ValidationError):
            UserProfile(height_cm=170, age_range="10-17")
        with self.assertRaises(ValidationError):
            UserProfile(height_cm=170, weight_kg=0)


class ScanModeTests(unittest.TestCase):
    def test_mode_table(self) -> None:
        self.assertEqual([o.mode for o in SCAN_MODE_OPTIONS][-1], ScanMode.FULL_BODY)
        self.assertEqual([o.mode for o in SCAN_MODE_OPTIONS if o.recommended], [ScanMode.FULL_BODY])
        self.assertEqual(get_scan_mode_option("face").required_good_frames, 20)
        self.assertFalse(get_scan_mode_option("upper-body").auto_capture)
        self.assertEqual(get_scan_mode_option(ScanMode.CHEST).required_good_frames, 25)
        self.assertTrue(get_scan_mode_option(ScanMode.WAIST).auto_capture)
        self.assertEqual(get_scan_mode_option(ScanMode.FULL_BODY).required_good_frames, 30)

    def test_camera_and_scale_modes(self) -> None:
        self.assertEqual(camera_mode_for("chest", "front").value, "chest-front")
        self.assertEqual(camera_mode_for("waist", "side").value, "chest-side")
        self.assertEqual(scale_mode_for("chest-side"), ScanMode.UPPER_BODY)
        self.assertEqual(scale_mode_for("full-body"), ScanMode.FULL_BODY)
        with self.assertRaises(ValueError):
            camera_mode_for("waist", "back")


if __name__ == "__main__":
    unittest.main()
