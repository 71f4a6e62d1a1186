from __future__ import annotations

import math
import unittest

from humancurve.stats import compute_percentile, erf, normal_cdf, normal_curve_points, ordinal_suffix


class ErfTests(unittest.TestCase):
    def test_erf_zero_and_tails(self) -> None:
        self.assertAlmostEqual(erf(0.0), 0.0, places=6)
        self.assertAlmostEqual(erf(10.0), 1.0, places=5)
        self.assertAlmostEqual(erf(-10.0), -1.0, places=5)

    def test_erf_matches_reference_values(self) -> None:
        for x in (0.1, 0.5, 1.0, 1.5, 2.5):
            self.assertAlmostEqual(erf(x), math.erf(x), delta=2e-7)

    def test_erf_is_odd(self) -> None:
        for x in (0.01, 0.3, 0.5, 1.2, 2.0, 3.7, 6.0):
            self.assertAlmostEqual(erf(-x), -erf(x), delta=1e-6)


class NormalCdfTests(unittest.TestCase):
    def test_known_quantiles(self) -> None:
        self.assertAlmostEqual(normal_cdf(0.0), 0.5, places=6)
        self.assertAlmostEqual(normal_cdf(1.645), 0.95, places=2)
        self.assertAlmostEqual(normal_cdf(-1.645), 0.05, places=2)
        self.assertAlmostEqual(normal_cdf(1.96), 0.975, places=2)
        self.assertAlmostEqual(normal_cdf(10.0), 1.0, places=5)
        self.assertAlmostEqual(normal_cdf(-10.0), 0.0, places=5)


class PercentileTests(unittest.TestCase):
    def test_mean_is_median(self) -> None:
        for sd in (0.05, 1.0, 10.0, 250.0):
            self.assertEqual(compute_percentile(100.0, 100.0, sd), 50)

    def test_degenerate_stddev_returns_median(self) -> None:
        self.assertEqual(compute_percentile(10.0, 100.0, 0.0), 50)
        self.assertEqual(compute_percentile(500.0, 100.0, -3.0), 50)

    def test_sigma_offsets(self) -> None:
        self.assertEqual(compute_percentile(110.0, 100.0, 10.0), 84)
        self.assertEqual(compute_percentile(90.0, 100.0, 10.0), 16)
        self.assertEqual(compute_percentile(120.0, 100.0, 10.0), 98)
        self.assertEqual(compute_percentile(80.0, 100.0, 10.0), 2)

    def test_result_is_bounded_integer(self) -> None:
        for value in (-1e6, 0.0, 50.0, 100.0, 150.0, 200.0, 1e6):
            p = compute_percentile(value, 100.0, 15.0)
            self.assertIsInstance(p, int)
            self.assertGreaterEqual(p, 0)
            self.assertLessEqual(p, 100)


class CurveTests(unittest.TestCase):
    def test_point_count_and_span(self) -> None:
        pts = normal_curve_points(50.0, 5.0, 100)
        self.assertEqual(len(pts), 100)
        self.assertAlmostEqual(pts[0].x, 50.0 - 17.5, places=3)
        self.assertAlmostEqual(pts[-1].x, 50.0 + 17.5, places=3)

    def test_peak_is_at_the_mean(self) -> None:
        mean, sd, n = 43.0, 3.0, 200
        pts = normal_curve_points(mean, sd, n)
        step = 7.0 * sd / (n - 1)
        peak = max(pts, key=lambda p: p.y)
        self.assertLessEqual(abs(peak.x - mean), step)

    def test_all_densities_positive(self) -> None:
        for mean, sd in ((170.0, 10.0), (0.0, 1e-3), (0.0, 1e5)):
            for p in normal_curve_points(mean, sd, 100):
                self.assertGreater(p.y, 0.0)

    def test_rejects_degenerate_inputs(self) -> None:
        with self.assertRaises(ValueError):
            normal_curve_points(0.0, 0.0, 10)
        with self.assertRaises(ValueError):
            normal_curve_points(0.0, 1.0, 1)


class OrdinalTests(unittest.TestCase):
    def test_suffixes(self) -> None:
        cases = {
            1: "1st", 2: "2nd", 3: "3rd", 4: "4th", 11: "11th", 12: "12th", 13: "13th",
            21: "21st", 22: "22nd", 23: "23rd", 50: "50th", 100: "100th", 101: "101st",
            111: "111th", 112: "112th",
        }
        for n, expected in cases.items():
            self.assertEqual(ordinal_suffix(n), expected)


if __name__ == "__main__":
    unittest.main()
