import math
import unittest

from orrery.camera import Camera2D
from orrery.camera_controller import CameraController, ease_in_out
from orrery.constants import TRANSITION_MS, ZOOM_MAX, ZOOM_MIN
from orrery.data_models import CameraSnapshot, CelestialBody

SUN = CelestialBody(name="Sun", kind="star", radius_km=695700.0, sma_au=0.0,
                    eccentricity=0.0, period_days=math.inf)
EARTH = CelestialBody(name="Earth", kind="planet", radius_km=6371.0, sma_au=1.0,
                      eccentricity=0.0167, period_days=365.25, perihelion_deg=102.9)
FAR = CelestialBody(name="Far", kind="planet", radius_km=25000.0, sma_au=30.0,
                    eccentricity=0.1, period_days=60000.0)
BODIES = [SUN, EARTH, FAR]

CAMERA_STATES = [
    ((0.0, 0.0), 1.0, 18.0, (1100, 800)),
    ((3.5, -2.25), 250.0, 10.5, (640, 480)),
    ((-30.0, 12.0), 0.02, 7.0, (1920, 1080)),
    ((1.0, 0.5), 200000.0, 18.0, (320, 320)),
]


class TestCoordinateTransform(unittest.TestCase):

    def test_focus_maps_to_viewport_center(self):
        cam = Camera2D(center=(2.0, -1.0), zoom=3.0, base_scale=10.0, viewport_size=(800, 600))
        self.assertEqual(cam.to_screen(2.0, -1.0), (400.0, 300.0))

    def test_scale(self):
        cam = Camera2D(center=(0.0, 0.0), zoom=2.0, base_scale=10.0, viewport_size=(800, 600))
        self.assertEqual(cam.to_screen(1.0, 0.0), (420.0, 300.0))
        self.assertEqual(cam.scale, 20.0)

    def test_round_trip_world(self):
        for center, zoom, base, vp in CAMERA_STATES:
            cam = Camera2D(center=center, zoom=zoom, base_scale=base, viewport_size=vp)
            for wx, wy in ((0.0, 0.0), (1.0, 1.0), (-29.5, 4.25), (center[0] + 1e-5, center[1])):
                rx, ry = cam.to_world(*cam.to_screen(wx, wy))
                self.assertAlmostEqual(rx, wx, places=9)
                self.assertAlmostEqual(ry, wy, places=9)

    def test_round_trip_screen(self):
        for center, zoom, base, vp in CAMERA_STATES:
            cam = Camera2D(center=center, zoom=zoom, base_scale=base, viewport_size=vp)
            for px, py in ((0, 0), (vp[0], vp[1]), (123.5, 77.25), (-50, 3000)):
                rx, ry = cam.to_screen(*cam.to_world(px, py))
                self.assertAlmostEqual(rx, px, places=6)
                self.assertAlmostEqual(ry, py, places=6)

    def test_zoom_at_keeps_anchor_fixed(self):
        for center, zoom, base, vp in CAMERA_STATES:
            cam = Camera2D(center=center, zoom=zoom, base_scale=base, viewport_size=vp)
            anchor = (vp[0] * 0.2, vp[1] * 0.9)
            before = cam.to_world(*anchor)
            cam.zoom_at(cam.state.zoom * 1.7, anchor)
            after = cam.to_world(*anchor)
            self.assertAlmostEqual(before[0], after[0], places=9)
            self.assertAlmostEqual(before[1], after[1], places=9)

    def test_zoom_at_clamps(self):
        cam = Camera2D()
        cam.zoom_at(1e12, (10, 10))
        self.assertEqual(cam.state.zoom, ZOOM_MAX)
        cam.zoom_at(-5.0, (10, 10))
        self.assertEqual(cam.state.zoom, ZOOM_MIN)
        cam.zoom_at(float("nan"))
        self.assertEqual(cam.state.zoom, ZOOM_MIN)

    def test_pan_moves_camera_opposite_to_drag(self):
        cam = Camera2D(center=(0.0, 0.0), zoom=1.0, base_scale=10.0, viewport_size=(800, 600))
        cam.pan_pixels(50, -20)
        self.assertAlmostEqual(cam.state.x, -5.0)
        self.assertAlmostEqual(cam.state.y, 2.0)

    def test_pixel_radius(self):
        cam = Camera2D(zoom=4.0, base_scale=10.0)
        self.assertAlmostEqual(cam.pixel_radius(0.5), 20.0)


class TestCameraController(unittest.TestCase):

    def setUp(self):
        self.cam = Camera2D(viewport_size=(1000, 800))
        self.ctl = CameraController(self.cam, BODIES)
        self.ctl.fit_all()

    def test_ease(self):
        self.assertEqual(ease_in_out(0.0), 0.0)
        self.assertEqual(ease_in_out(1.0), 1.0)
        self.assertAlmostEqual(ease_in_out(0.5), 0.5)
        self.assertLess(ease_in_out(0.1), 0.1)
        self.assertGreater(ease_in_out(0.9), 0.9)

    def test_fit_all_base_scale(self):
        expected = 800 * 0.8 / (2 * FAR.apoapsis_au)
        self.assertAlmostEqual(self.cam.state.base_scale, expected)

    def test_fit_all_keeps_apoapsis_inside_viewport(self):
        for vp in ((1000, 800), (320, 240), (200, 900), (2560, 1440)):
            self.cam.set_viewport_size(*vp)
            self.ctl.fit_all()
            w, h = self.cam.viewport_size
            for angle in range(0, 360, 15):
                a = math.radians(angle)
                px, py = self.cam.to_screen(FAR.apoapsis_au * math.cos(a), FAR.apoapsis_au * math.sin(a))
                self.assertTrue(0 <= px <= w and 0 <= py <= h, msg=f"{vp} angle={angle}")

    def test_fit_all_leaves_zoom_pan_and_transition(self):
        self.cam.state.x = 1.5
        self.cam.state.zoom = 40.0
        self.ctl.focus(EARTH, (1.0, 0.0), animate=True)
        target = self.ctl.transition.end
        self.ctl.fit_all()
        self.ctl.fit_all()
        self.assertEqual(self.cam.state.x, 1.5)
        self.assertEqual(self.cam.state.zoom, 40.0)
        self.assertIs(self.ctl.transition.end, target)

    def test_focus_without_animation_is_immediate(self):
        self.ctl.focus(EARTH, (0.5, -0.25), animate=False)
        self.assertEqual((self.cam.state.x, self.cam.state.y), (0.5, -0.25))
        self.assertEqual(self.cam.state.zoom, self.ctl.focus_zoom(EARTH))
        self.assertFalse(self.ctl.is_transitioning)

    def test_focus_zoom_frames_planet(self):
        zoom = self.ctl.focus_zoom(FAR)
        self.assertLess(zoom, ZOOM_MAX)
        px = FAR.radius_au * self.cam.state.base_scale * zoom
        expected = min(max(800 * 0.22, 24), 120)
        self.assertAlmostEqual(px, expected, places=6)

    def test_focus_zoom_frames_star(self):
        zoom = self.ctl.focus_zoom(SUN)
        px = SUN.radius_au * self.cam.state.base_scale * zoom
        self.assertAlmostEqual(px, max(800 * 0.28, 220), places=6)

    def test_focus_zoom_clamped(self):
        tiny = CelestialBody(name="Pebble", kind="planet", radius_km=1e-9, sma_au=1.0,
                             eccentricity=0.0, period_days=10.0)
        self.assertEqual(self.ctl.focus_zoom(tiny), ZOOM_MAX)

    def test_transition_runs_and_terminates_exactly(self):
        self.ctl.focus(EARTH, (1.0, 0.0), animate=True)
        end = self.ctl.transition.end
        self.assertTrue(self.ctl.update(1000.0))
        self.assertEqual(self.cam.state.snapshot(), CameraSnapshot(0.0, 0.0, 1.0))
        self.assertTrue(self.ctl.update(1000.0 + TRANSITION_MS / 2))
        self.assertAlmostEqual(self.cam.state.x, 0.5)
        self.assertFalse(self.ctl.update(1000.0 + TRANSITION_MS))
        self.assertEqual(self.cam.state.snapshot(), end)
        self.assertIsNone(self.ctl.transition)
        self.cam.state.x = 7.0
        self.assertFalse(self.ctl.update(5000.0))
        self.assertEqual(self.cam.state.x, 7.0)

    def test_transition_decelerates(self):
        self.ctl.focus(EARTH, (1.0, 0.0), animate=True)
        self.ctl.update(0.0)
        xs = []
        for t in range(50, 501, 50):
            self.ctl.update(float(t))
            xs.append(self.cam.state.x)
        steps = [b - a for a, b in zip(xs, xs[1:])]
        self.assertLess(steps[-1], steps[len(steps) // 2])

    def test_new_focus_replaces_transition(self):
        self.ctl.focus(EARTH, (1.0, 0.0), animate=True)
        self.ctl.update(0.0)
        self.ctl.update(200.0)
        self.ctl.focus(FAR, (30.0, 0.0), animate=True)
        self.assertEqual(self.ctl.transition.end.x, 30.0)
        self.assertIsNone(self.ctl.transition.start_ms)
        self.assertEqual(self.ctl.transition.start.x, self.cam.state.x)

    def test_focus_when_already_there_schedules_nothing(self):
        self.ctl.focus(EARTH, (1.0, 0.0), animate=False)
        self.ctl.focus(EARTH, (1.0, 0.0), animate=True)
        self.assertFalse(self.ctl.is_transitioning)

    def test_direct_input_cancels_transition(self):
        for action in (lambda: self.ctl.pan(10, 0),
                       lambda: self.ctl.zoom_by(1.1, (10, 10)),
                       lambda: self.ctl.set_zoom(5.0),
                       lambda: self.ctl.center_on(0.0, 0.0)):
            self.ctl.focus(FAR, (30.0, 0.0), animate=True)
            self.ctl.update(0.0)
            self.ctl.update(100.0)
            action()
            self.assertFalse(self.ctl.is_transitioning)
            snap = self.cam.state.snapshot()
            self.ctl.update(400.0)
            self.assertEqual(self.cam.state.snapshot(), snap)

    def test_zoom_by_extreme_factors_saturate(self):
        self.ctl.zoom_by(1e30, (100, 100))
        self.assertEqual(self.cam.state.zoom, ZOOM_MAX)
        self.ctl.zoom_by(1e-30, (100, 100))
        self.assertEqual(self.cam.state.zoom, ZOOM_MIN)

    def test_invalid_inputs_ignored(self):
        snap = self.cam.state.snapshot()
        self.ctl.zoom_by(float("nan"), (1, 1))
        self.ctl.zoom_by(0.0, (1, 1))
        self.ctl.zoom_by(-2.0, (1, 1))
        self.ctl.pan(float("inf"), 0)
        self.ctl.set_zoom(float("nan"))
        self.ctl.center_on(float("nan"), 0.0)
        self.assertEqual(self.cam.state.snapshot(), snap)

    def test_zoom_by_keeps_anchor_world_point(self):
        self.cam.state.x, self.cam.state.y = 4.0, -3.0
        anchor = (870.0, 55.0)
        before = self.cam.to_world(*anchor)
        self.ctl.zoom_by(1.08, anchor)
        after = self.cam.to_world(*anchor)
        self.assertLess(math.hypot(before[0] - after[0], before[1] - after[1]), 1e-9)

    def test_reset(self):
        self.ctl.pan(100, 100)
        self.ctl.set_zoom(50.0)
        self.ctl.focus(FAR, (30.0, 0.0), animate=True)
        self.ctl.reset(1.0)
        self.assertEqual(self.cam.state.snapshot(), CameraSnapshot(0.0, 0.0, 1.0))
        self.assertFalse(self.ctl.is_transitioning)


if __name__ == '__main__':
    unittest.main()
