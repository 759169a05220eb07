import math
import unittest

from orrery.catalog_loader import default_bodies
from orrery.data_models import CelestialBody
from orrery.kepler import max_apoapsis, normalize_angle, orbit_path, position, solve_kepler


def planet(a=1.0, e=0.0, period=100.0, omega=0.0, name="P"):
    return CelestialBody(name=name, kind="planet", radius_km=1000.0, sma_au=a,
                         eccentricity=e, period_days=period, perihelion_deg=omega)


SUN = CelestialBody(name="Sun", kind="star", radius_km=695700.0, sma_au=0.0,
                    eccentricity=0.0, period_days=math.inf)


class TestNormalizeAngle(unittest.TestCase):

    def test_range(self):
        for angle in (-100.0, -math.pi, -1e-18, 0.0, 1.0, 2 * math.pi, 7.5, 1e6):
            a = normalize_angle(angle)
            self.assertGreaterEqual(a, 0.0)
            self.assertLess(a, 2 * math.pi)

    def test_values(self):
        self.assertAlmostEqual(normalize_angle(-math.pi / 2), 1.5 * math.pi)
        self.assertAlmostEqual(normalize_angle(5 * math.pi), math.pi)
        self.assertEqual(normalize_angle(2 * math.pi), 0.0)


class TestSolveKepler(unittest.TestCase):

    def test_circle_returns_mean_anomaly(self):
        self.assertEqual(solve_kepler(1.25, 0.0), 1.25)

    def test_residual_small_across_eccentricities(self):
        for e in (0.01, 0.2, 0.5, 0.79, 0.8, 0.9):
            for i in range(64):
                m = 2 * math.pi * i / 64
                E = solve_kepler(m, e)
                residual = E - e * math.sin(E) - m
                self.assertLess(abs(residual), 1e-8, msg=f"e={e} M={m}")

    def test_extreme_eccentricity_is_finite(self):
        for i in range(100):
            E = solve_kepler(2 * math.pi * i / 100 + 1e-9, 0.999)
            self.assertTrue(math.isfinite(E))

    def test_apsides(self):
        self.assertAlmostEqual(solve_kepler(0.0, 0.3), 0.0)
        self.assertAlmostEqual(solve_kepler(math.pi, 0.3), math.pi)
        self.assertAlmostEqual(solve_kepler(math.pi, 0.85), math.pi)


class TestPosition(unittest.TestCase):

    def test_star_at_origin(self):
        self.assertEqual(position(SUN, 0.0), (0.0, 0.0))
        self.assertEqual(position(SUN, 12345.6), (0.0, 0.0))

    def test_circular_orbit_on_circle(self):
        body = planet(a=2.5, e=0.0, period=80.0, omega=45.0)
        for t in (0.0, 3.3, 20.0, 79.9, 1000.0, -15.0):
            x, y = position(body, t)
            self.assertAlmostEqual(math.hypot(x, y), 2.5, places=12)

    def test_circular_orbit_phase(self):
        body = planet(a=1.0, e=0.0, period=100.0)
        x, y = position(body, 25.0)
        self.assertAlmostEqual(x, 0.0, places=12)
        self.assertAlmostEqual(y, 1.0, places=12)

    def test_periapsis_and_apoapsis_distance(self):
        body = planet(a=3.0, e=0.2, period=100.0, omega=30.0)
        peri = position(body, 0.0)
        apo = position(body, 50.0)
        self.assertAlmostEqual(math.hypot(*peri), 3.0 * 0.8, places=9)
        self.assertAlmostEqual(math.hypot(*apo), 3.0 * 1.2, places=9)

    def test_periapsis_direction_follows_argument_of_perihelion(self):
        body = planet(a=1.0, e=0.3, period=10.0, omega=90.0)
        x, y = position(body, 0.0)
        self.assertAlmostEqual(x, 0.0, places=12)
        self.assertAlmostEqual(y, 0.7, places=12)

    def test_distance_stays_between_apsides(self):
        body = planet(a=1.0, e=0.9, period=50.0, omega=123.0)
        for i in range(500):
            r = math.hypot(*position(body, i * 0.37))
            self.assertGreaterEqual(r, 0.1 - 1e-9)
            self.assertLessEqual(r, 1.9 + 1e-9)

    def test_periodic(self):
        body = planet(a=1.5, e=0.4, period=77.0, omega=10.0)
        a = position(body, 12.0)
        b = position(body, 12.0 + 3 * 77.0)
        self.assertAlmostEqual(a[0], b[0], places=9)
        self.assertAlmostEqual(a[1], b[1], places=9)

    def test_finite_for_many_times(self):
        for body in default_bodies():
            for t in (0.0, 0.5, 365.25, 1e5, 1e7, -42.0):
                x, y = position(body, t)
                self.assertTrue(math.isfinite(x) and math.isfinite(y), msg=f"{body.name} t={t}")

    def test_earth_regression_at_epoch(self):
        earth = next(b for b in default_bodies() if b.name == "Earth")
        x, y = position(earth, 0.0)
        omega = math.radians(102.9377)
        r = 1.0 * (1 - 0.01671)
        self.assertAlmostEqual(x, r * math.cos(omega), places=12)
        self.assertAlmostEqual(y, r * math.sin(omega), places=12)


class TestOrbitPath(unittest.TestCase):

    def test_closed_polyline(self):
        body = planet(a=2.0, e=0.5, period=100.0, omega=60.0)
        path = orbit_path(body, 256)
        self.assertEqual(len(path), 257)
        self.assertEqual(path[0], path[-1])

    def test_points_lie_on_ellipse(self):
        body = planet(a=2.0, e=0.5, period=100.0, omega=60.0)
        for x, y in orbit_path(body, 64):
            r = math.hypot(x, y)
            self.assertGreaterEqual(r, 1.0 - 1e-9)
            self.assertLessEqual(r, 3.0 + 1e-9)

    def test_path_contains_body_position_at_sample_times(self):
        body = planet(a=1.0, e=0.2, period=64.0, omega=15.0)
        path = orbit_path(body, 64)
        for i in (0, 5, 32, 63):
            x, y = position(body, float(i))
            self.assertAlmostEqual(path[i][0], x, places=9)
            self.assertAlmostEqual(path[i][1], y, places=9)

    def test_star_has_no_path(self):
        self.assertEqual(orbit_path(SUN), [])

    def test_max_apoapsis(self):
        bodies = [SUN, planet(a=1.0, e=0.1, name="A"), planet(a=2.0, e=0.5, name="B")]
        self.assertAlmostEqual(max_apoapsis(bodies), 3.0)
        self.assertEqual(max_apoapsis([SUN]), 0.0)


if __name__ == '__main__':
    unittest.main()
