#!/usr/bin/env python3
"""
OrreryScene: the simulation context shared by the renderer, input router and control window.

What this module does
- Owns one camera, camera controller, simulation clock and the per-body trail buffers for a
  single viewer instance. Nothing here is a module global; two scenes never share state.
- Exposes the runtime control surface (pause, speed, zoom, focus, pan, toggles, fit, reset).
- Computes per-frame body views (world position, screen position, pixel radius) that both
  drawing and picking use, so what you click is exactly what was drawn.

Frame ordering
- frame(now_ms) first resolves any camera transition, then advances the clock, then positions
  the bodies. Drawing and picking within one frame see the same camera and positions.

Threading
- A scene is not thread-safe. The host mutates it from one thread only (the viewport loop);
  other threads post commands to that loop instead of calling in directly.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from . import kepler
from .camera import Camera2D
from .camera_controller import CameraController
from .clock import SimulationClock
from .constants import (
    DEFAULT_SPEED,
    DEFAULT_ZOOM,
    PICK_MARGIN,
    PICK_MIN_RADIUS,
    TRAIL_CAPACITY,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .data_models import STAR, CelestialBody, TrailBuffer
from .formatting import format_elapsed, format_speed, format_zoom
from .vector_utils import vec_len


@dataclass(frozen=True)
class BodyView:
    body: CelestialBody
    world: Tuple[float, float]
    screen: Tuple[float, float]
    radius_px: float


@dataclass(frozen=True)
class FocusInfo:
    name: str
    kind: str
    radius_km: float
    sma_au: float
    period_years: Optional[float]
    distance_au: float

    @property
    def is_star(self) -> bool:
        return self.kind == STAR


class OrreryScene:
    def __init__(self, bodies: Sequence[CelestialBody], initial_zoom: float = DEFAULT_ZOOM,
                 initial_speed: float = DEFAULT_SPEED, viewport_size=(VIEW_WIDTH, VIEW_HEIGHT),
                 trail_capacity: int = TRAIL_CAPACITY):
        if not bodies:
            raise ValueError("OrreryScene needs at least one body")
        # Star first so it is drawn underneath everything else.
        self.bodies: List[CelestialBody] = sorted(bodies, key=lambda b: not b.is_star)
        self.initial_zoom = initial_zoom
        self.initial_speed = initial_speed

        self.camera = Camera2D(zoom=initial_zoom, viewport_size=viewport_size)
        self.controller = CameraController(self.camera, self.bodies)
        self.clock = SimulationClock(initial_speed)

        self.show_orbits = True
        self.show_labels = True
        self.show_trails = False
        self.focus_name = self.bodies[0].name
        self.trails: Dict[str, TrailBuffer] = {
            b.name: TrailBuffer(capacity=trail_capacity) for b in self.bodies if not b.is_star
        }
        self._by_name = {b.name: b for b in self.bodies}
        self._orbit_paths = {b.name: kepler.orbit_path(b) for b in self.bodies if not b.is_star}

        self.controller.fit_all()

    # -----------------------
    # Lookup
    # -----------------------

    @property
    def star(self) -> CelestialBody:
        return self.bodies[0]

    def body_by_name(self, name: str) -> Optional[CelestialBody]:
        return self._by_name.get(name)

    def focused_body(self) -> CelestialBody:
        return self._by_name.get(self.focus_name, self.star)

    def orbit_path(self, body: CelestialBody) -> List[Tuple[float, float]]:
        """World-space orbit polyline, cached per body since the ellipse never changes."""
        return self._orbit_paths.get(body.name, [])

    # -----------------------
    # Per-frame
    # -----------------------

    def frame(self, now_ms: float) -> List[BodyView]:
        """Advance one frame: camera transition, then clock, then body positions."""
        self.controller.update(now_ms)
        self.clock.tick(now_ms)
        return self.body_views()

    def body_views(self) -> List[BodyView]:
        t = self.clock.elapsed_days
        views = []
        for b in self.bodies:
            world = kepler.position(b, t)
            views.append(BodyView(
                body=b,
                world=world,
                screen=self.camera.to_screen(world[0], world[1]),
                radius_px=self.camera.pixel_radius(b.radius_au),
            ))
        return views

    def record_trails(self, views: Sequence[BodyView]) -> None:
        for v in views:
            trail = self.trails.get(v.body.name)
            if trail is not None:
                trail.append(v.screen)

    def clear_trails(self) -> None:
        for trail in self.trails.values():
            trail.clear()

    def pick(self, px: float, py: float, views: Optional[Sequence[BodyView]] = None) -> Optional[CelestialBody]:
        """
        Body under the screen point, if any: the closest one whose distance is within
        max(PICK_MIN_RADIUS, radius_px + PICK_MARGIN). Ties go to the earlier body.
        """
        if views is None:
            views = self.body_views()
        best = None
        best_distance = float("inf")
        for v in views:
            distance = vec_len((px - v.screen[0], py - v.screen[1]))
            if distance < max(PICK_MIN_RADIUS, v.radius_px + PICK_MARGIN) and distance < best_distance:
                best = v.body
                best_distance = distance
        return best

    # -----------------------
    # Control surface
    # -----------------------

    def pause(self) -> None:
        self.clock.pause()

    def resume(self) -> None:
        self.clock.resume()

    def toggle_pause(self) -> bool:
        return self.clock.toggle_pause()

    @property
    def paused(self) -> bool:
        return self.clock.paused

    def set_speed(self, speed: float) -> None:
        self.clock.set_speed(speed)

    def set_zoom(self, zoom: float) -> None:
        self.controller.set_zoom(zoom)

    def pan(self, dx: float, dy: float) -> None:
        self.controller.pan(dx, dy)

    def zoom_by(self, factor: float, anchor: Optional[Tuple[float, float]] = None) -> None:
        self.controller.zoom_by(factor, anchor)

    def focus(self, name: str, animate: bool = True) -> CelestialBody:
        """Focus the named body; unknown names fall back to the star."""
        body = self._by_name.get(name)
        if body is None:
            logging.warning(f"Unknown body '{name}' requested for focus; falling back to {self.star.name}.")
            body = self.star
        self.focus_name = body.name
        self.controller.focus(body, kepler.position(body, self.clock.elapsed_days), animate)
        return body

    def focus_index(self, index: int, animate: bool = True) -> Optional[CelestialBody]:
        if 0 <= index < len(self.bodies):
            return self.focus(self.bodies[index].name, animate)
        return None

    def toggle_orbits(self) -> bool:
        self.show_orbits = not self.show_orbits
        return self.show_orbits

    def toggle_labels(self) -> bool:
        self.show_labels = not self.show_labels
        return self.show_labels

    def toggle_trails(self) -> bool:
        self.show_trails = not self.show_trails
        if not self.show_trails:
            self.clear_trails()
        return self.show_trails

    def fit_all(self) -> None:
        self.controller.fit_all()

    def center_star(self) -> None:
        self.controller.center_on(0.0, 0.0)

    def set_viewport(self, w: int, h: int) -> None:
        logging.debug(f"Viewport resized to {w}x{h}")
        self.camera.set_viewport_size(w, h)
        self.controller.fit_all()

    def reset(self) -> None:
        """Back to the start-up view: star focused, default zoom and speed, running, trails empty."""
        self.controller.reset(self.initial_zoom)
        self.clock.reset(self.initial_speed)
        self.focus_name = self.star.name
        self.clear_trails()

    # -----------------------
    # Output surface
    # -----------------------

    def focus_info(self) -> FocusInfo:
        body = self.focused_body()
        world = kepler.position(body, self.clock.elapsed_days)
        return FocusInfo(
            name=body.name,
            kind=body.kind,
            radius_km=body.radius_km,
            sma_au=body.sma_au,
            period_years=body.period_years,
            distance_au=vec_len(world),
        )

    def status(self) -> dict:
        """Plain snapshot for other threads; holds no references into live state."""
        zoom = self.camera.state.zoom
        speed = self.clock.speed
        return {
            "zoom": zoom,
            "speed": speed,
            "paused": self.clock.paused,
            "elapsed_days": self.clock.elapsed_days,
            "focus": self.focus_name,
            "focus_info": self.focus_info(),
            "zoom_text": format_zoom(zoom),
            "speed_text": format_speed(speed),
            "elapsed_text": format_elapsed(self.clock.elapsed_days),
            "show_orbits": self.show_orbits,
            "show_labels": self.show_labels,
            "show_trails": self.show_trails,
            "transitioning": self.controller.is_transitioning,
        }
