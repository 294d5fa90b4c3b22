import math
import unittest
from dataclasses import fields
import numpy as np
from observation import (
    ObservationRecord, apparent_size, convert_phase, derive_observation, elongation_readout,
    is_long_way, longitude_degrees,
)
from orbital_mechanics import compute_positions
from physics_utils import TWO_PI
from planetary import BodyPositions, PlanetClass, PlanetaryParameters, SimulationClock

def bodies_at(planet, sun=(3.0, 0.0), earth=(0.0, 0.0)):
    return BodyPositions(
        sun=np.array(sun, dtype=np.float64),
        earth=np.array(earth, dtype=np.float64),
        planet=np.array(planet, dtype=np.float64),
    )

class TestDeriveObservation(unittest.TestCase):

    def test_record_field_set(self):
        names = {f.name for f in fields(ObservationRecord)}
        self.assertEqual(names, {'sun_longitude', 'ecliptic_longitude', 'elongation_angle',
                                 'observer_target_angle', 'sun_target_angle', 'apparent_size'})

    def test_sun_longitude_at_time_zero(self):
        params = PlanetaryParameters(0.1, 90.0, 0.5, 0.6, PlanetClass.SUPERIOR)
        record = derive_observation(compute_positions(SimulationClock(), params))
        self.assertAlmostEqual(record.sun_longitude, 0.0)

    def test_longitudes_are_raw_atan2(self):
        record = derive_observation(bodies_at(planet=(-1.0, -1.0), sun=(0.0, -3.0)))
        self.assertAlmostEqual(record.ecliptic_longitude, -3 * math.pi / 4)
        self.assertAlmostEqual(record.sun_longitude, -math.pi / 2)
        sun_deg, planet_deg = longitude_degrees(record)
        self.assertAlmostEqual(sun_deg, -90.0)
        self.assertAlmostEqual(planet_deg, -135.0)

    def test_planet_between_earth_and_sun(self):
        record = derive_observation(bodies_at(planet=(1.0, 0.0)))
        self.assertAlmostEqual(record.observer_target_angle, math.pi)
        self.assertAlmostEqual(record.sun_target_angle, 0.0)
        self.assertAlmostEqual(record.elongation_angle, math.pi)
        self.assertFalse(is_long_way(record.elongation_angle))
        self.assertEqual(convert_phase(record.elongation_angle), 0.0)

    def test_target_angles_normalized(self):
        record = derive_observation(bodies_at(planet=(0.0, 1.0)))
        self.assertAlmostEqual(record.observer_target_angle, 3 * math.pi / 2)
        self.assertAlmostEqual(record.sun_target_angle, TWO_PI + math.atan2(-1.0, 3.0))
        expected = record.observer_target_angle - record.sun_target_angle + TWO_PI
        self.assertAlmostEqual(record.elongation_angle, expected)
        self.assertTrue(is_long_way(record.elongation_angle))

    def test_elongation_always_in_range(self):
        rng = np.random.default_rng(42)
        for _ in range(2000):
            planet, sun = rng.uniform(-3.5, 3.5, size=2), rng.uniform(-3.5, 3.5, size=2)
            record = derive_observation(bodies_at(planet=planet, sun=sun))
            for angle in (record.elongation_angle, record.observer_target_angle, record.sun_target_angle):
                self.assertGreaterEqual(angle, 0.0)
                self.assertLess(angle, TWO_PI)

    def test_elongation_degenerate_configurations(self):
        cases = [
            dict(planet=(0.0, 0.0)),                 # planet on the observer
            dict(planet=(3.0, 0.0)),                 # planet on the sun
            dict(planet=(-2.0, 0.0)),                # collinear, behind the observer
            dict(planet=(2.0, -0.0), earth=(0.0, -0.0)),
        ]
        for case in cases:
            with self.subTest(**case):
                record = derive_observation(bodies_at(**case))
                self.assertGreaterEqual(record.elongation_angle, 0.0)
                self.assertLess(record.elongation_angle, TWO_PI)

    def test_apparent_size_shrinks_with_distance(self):
        self.assertAlmostEqual(apparent_size(0.0), 275.0)
        self.assertAlmostEqual(apparent_size(1.5), 187.5)
        self.assertAlmostEqual(apparent_size(3.0), 100.0)
        self.assertAlmostEqual(apparent_size(7.0), 100.0)
        self.assertAlmostEqual(apparent_size(-1.0), 275.0)
        record = derive_observation(bodies_at(planet=(0.0, 2.0)))
        self.assertAlmostEqual(record.apparent_size, 275.0 - 175.0 * 2.0 / 3.0)

class TestElongationClassification(unittest.TestCase):

    def test_long_way_boundary(self):
        self.assertFalse(is_long_way(math.pi))
        self.assertTrue(is_long_way(math.radians(180.1)))
        # rounds to 180.0 at one decimal
        self.assertFalse(is_long_way(math.radians(180.04)))
        self.assertFalse(is_long_way(math.radians(90.0)))

    def test_readout(self):
        self.assertEqual(elongation_readout(0.0), (0.0, ''))
        degrees, direction = elongation_readout(math.radians(90.0))
        self.assertAlmostEqual(degrees, 90.0)
        self.assertEqual(direction, 'E')
        degrees, direction = elongation_readout(math.radians(300.0))
        self.assertAlmostEqual(degrees, 60.0)
        self.assertEqual(direction, 'W')
        self.assertEqual(elongation_readout(math.pi), (180.0, ''))

class TestConvertPhase(unittest.TestCase):

    def test_opposition_conjunction_boundary(self):
        self.assertEqual(convert_phase(math.pi), 0.0)

    def test_known_values(self):
        self.assertAlmostEqual(convert_phase(3 * math.pi / 2), 0.25)
        self.assertAlmostEqual(convert_phase(math.pi / 2), 0.75)
        self.assertAlmostEqual(convert_phase(0.0), 0.5)
        self.assertEqual(convert_phase(3 * math.pi), 0.0)
        self.assertEqual(convert_phase(100.0), 0.0)

    def test_result_always_in_unit_interval(self):
        for angle in np.linspace(-40.0, 40.0, 4001):
            phase = convert_phase(angle)
            self.assertGreaterEqual(phase, 0.0)
            self.assertLess(phase, 1.0)

if __name__ == '__main__':
    unittest.main()
