import math
import unittest
import numpy as np
from physics_utils import (
    TWO_PI, NumericDegeneracy, PhysicsError, distance, nearest_angle_delta,
    normalize_atan2_angle, normalize_vector, round_half_up, solve_quadratic_positive_root,
    threshold_angle_delta, wrap_angle,
)

class TestNormalizeVector(unittest.TestCase):

    def test_normalize_typical_vector(self):
        np.testing.assert_array_almost_equal(normalize_vector(np.array([3.0, 4.0])), np.array([0.6, 0.8]))

    def test_normalize_zero_vector(self):
        np.testing.assert_array_almost_equal(normalize_vector([0.0, 0.0]), np.array([0.0, 0.0]))

class TestAngleWrapping(unittest.TestCase):

    def test_wrap_angle_range(self):
        for angle in np.linspace(-50.0, 50.0, 1001):
            wrapped = wrap_angle(angle)
            self.assertGreaterEqual(wrapped, 0.0)
            self.assertLess(wrapped, TWO_PI)
            self.assertAlmostEqual(math.sin(wrapped), math.sin(angle), places=9)

    def test_wrap_angle_edge_values(self):
        self.assertEqual(wrap_angle(0.0), 0.0)
        self.assertEqual(wrap_angle(TWO_PI), 0.0)
        self.assertEqual(wrap_angle(-1e-17), 0.0)
        self.assertAlmostEqual(wrap_angle(-math.pi / 2), 3 * math.pi / 2)

    def test_normalize_atan2_angle(self):
        self.assertAlmostEqual(normalize_atan2_angle(-math.pi / 2), 3 * math.pi / 2)
        self.assertAlmostEqual(normalize_atan2_angle(math.pi / 3), math.pi / 3)
        self.assertAlmostEqual(normalize_atan2_angle(math.pi), math.pi)
        # atan2(-0.0, -1.0) is exactly -pi
        self.assertAlmostEqual(normalize_atan2_angle(math.atan2(-0.0, -1.0)), math.pi)

    def test_nearest_angle_delta(self):
        self.assertAlmostEqual(nearest_angle_delta(0.1), 0.1)
        self.assertAlmostEqual(nearest_angle_delta(-6.0), -6.0 + TWO_PI)
        self.assertAlmostEqual(nearest_angle_delta(6.0), 6.0 - TWO_PI)
        self.assertAlmostEqual(nearest_angle_delta(-4.0), -4.0 + TWO_PI)

class TestThresholdAngleDelta(unittest.TestCase):

    def test_small_step_without_crossing(self):
        self.assertAlmostEqual(threshold_angle_delta(0.2, 0.3), 0.1)
        self.assertAlmostEqual(threshold_angle_delta(-0.3, -0.5), -0.2)

    def test_counter_clockwise_branch_cut_crossing(self):
        self.assertAlmostEqual(threshold_angle_delta(3.0, -3.0), TWO_PI - 6.0)

    def test_clockwise_branch_cut_crossing(self):
        self.assertAlmostEqual(threshold_angle_delta(-3.0, 3.0), 6.0 - TWO_PI)

    def test_large_step_is_taken_literally(self):
        # 1.0 is not beyond pi/2, so no correction is applied
        self.assertAlmostEqual(threshold_angle_delta(1.0, -3.0), -4.0)

class TestQuadraticSolve(unittest.TestCase):

    def test_known_root(self):
        # x^2 - 3x + 2 = 0 -> roots 1 and 2
        self.assertAlmostEqual(solve_quadratic_positive_root(-3.0, 2.0), 2.0)

    def test_deferent_distance_scenario(self):
        # b = 0, c = -0.99, discriminant 3.96
        self.assertAlmostEqual(solve_quadratic_positive_root(0.0, -0.99), 0.994987, places=6)

    def test_negative_discriminant_raises(self):
        with self.assertRaises(NumericDegeneracy):
            solve_quadratic_positive_root(0.0, 1.0)
        with self.assertRaises(PhysicsError):
            solve_quadratic_positive_root(1.0, 1.0, a=0.0)

class TestDistanceAndRounding(unittest.TestCase):

    def test_distance(self):
        self.assertAlmostEqual(distance([0.0, 0.0], [3.0, 4.0]), 5.0)

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3.0)
        self.assertEqual(round_half_up(180.25, 1), 180.3)
        self.assertEqual(round_half_up(180.24, 1), 180.2)
        self.assertEqual(round_half_up(-0.5), 0.0)

if __name__ == '__main__':
    unittest.main()
