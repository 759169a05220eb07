#!/usr/bin/env python3
"""
Camera controller: direct camera input plus animated focus transitions.

The controller is in one of two states. Idle: the camera only changes through direct
input (pan, wheel zoom, zoom slider). Transitioning: an active CameraTransition overwrites
the camera once per frame until its duration has elapsed.

Direct input is always accepted. It writes the camera state and drops any in-flight
transition, so dragging while a focus animation runs takes over immediately. A new focus
request replaces the current transition rather than queueing behind it; there is never more
than one.

No method raises for out-of-range values: zooms saturate at the bounds and non-finite
inputs are ignored.
"""
import math
from typing import Iterable, Optional, Tuple

from .camera import Camera2D
from .constants import (
    FIT_PADDING,
    FOCUS_MIN_VIEWPORT,
    MIN_BASE_SCALE,
    PLANET_FOCUS_FRACTION,
    PLANET_FOCUS_MAX_PX,
    PLANET_FOCUS_MIN_PX,
    STAR_FOCUS_FRACTION,
    STAR_FOCUS_MIN_PX,
    TRANSITION_MS,
    ZOOM_MAX,
    ZOOM_MIN,
)
from .data_models import CameraSnapshot, CameraTransition, CelestialBody
from .kepler import max_apoapsis
from .vector_utils import clamp, lerp


def ease_in_out(t: float) -> float:
    """Cosine ease: 0 at t=0, 1 at t=1, zero slope at both ends."""
    return (1.0 - math.cos(t * math.pi)) * 0.5


class CameraController:
    def __init__(self, camera: Camera2D, bodies: Iterable[CelestialBody],
                 duration_ms: float = TRANSITION_MS):
        self.camera = camera
        self.max_apoapsis_au = max_apoapsis(bodies)
        self.duration_ms = duration_ms
        self.transition: Optional[CameraTransition] = None

    @property
    def is_transitioning(self) -> bool:
        return self.transition is not None

    # -----------------------
    # Direct input
    # -----------------------

    def pan(self, dx: float, dy: float) -> None:
        if not (math.isfinite(dx) and math.isfinite(dy)):
            return
        self.transition = None
        self.camera.pan_pixels(dx, dy)

    def zoom_by(self, factor: float, anchor: Optional[Tuple[float, float]] = None) -> None:
        """Multiply the zoom by factor, keeping the world point under anchor fixed."""
        if not math.isfinite(factor) or factor <= 0:
            return
        self.transition = None
        self.camera.zoom_at(self.camera.state.zoom * factor, anchor)

    def set_zoom(self, zoom: float) -> None:
        """Absolute zoom about the viewport center."""
        if not math.isfinite(zoom):
            return
        self.transition = None
        self.camera.zoom_at(zoom)

    def center_on(self, x: float, y: float) -> None:
        if not (math.isfinite(x) and math.isfinite(y)):
            return
        self.transition = None
        self.camera.state.x = x
        self.camera.state.y = y

    # -----------------------
    # Focus and framing
    # -----------------------

    def focus_zoom(self, body: CelestialBody) -> float:
        """Zoom at which body's disk fills a preferred share of the shorter viewport side."""
        viewport_min = max(FOCUS_MIN_VIEWPORT, self.camera.viewport_min)
        body_scale = max(body.radius_au * self.camera.state.base_scale, 1e-9)
        if body.is_star:
            preferred_px = max(viewport_min * STAR_FOCUS_FRACTION, STAR_FOCUS_MIN_PX)
        else:
            preferred_px = clamp(viewport_min * PLANET_FOCUS_FRACTION, PLANET_FOCUS_MIN_PX, PLANET_FOCUS_MAX_PX)
        return clamp(preferred_px / body_scale, ZOOM_MIN, ZOOM_MAX)

    def focus(self, body: CelestialBody, position: Tuple[float, float], animate: bool = True) -> None:
        """
        Frame body at its current world position.

        Animated focus eases from the current camera to the target over duration_ms; the
        transition starts on the next update(). If the camera is already at the target nothing
        is scheduled. Without animation the camera jumps immediately.
        """
        target = CameraSnapshot(position[0], position[1], self.focus_zoom(body))
        if not animate:
            self.transition = None
            self.camera.state.apply(target)
            return
        current = self.camera.state.snapshot()
        if _same_snapshot(current, target):
            self.transition = None
            return
        self.transition = CameraTransition(start=current, end=target, duration_ms=self.duration_ms)

    def update(self, now_ms: float) -> bool:
        """Advance the active transition to now_ms. Returns True while one is still running."""
        anim = self.transition
        if anim is None:
            return False
        if anim.start_ms is None:
            anim.start_ms = now_ms
        if anim.duration_ms > 0:
            t = min(1.0, max(0.0, (now_ms - anim.start_ms) / anim.duration_ms))
        else:
            t = 1.0
        state = self.camera.state
        if t >= 1.0:
            state.apply(anim.end)
            self.transition = None
            return False
        eased = ease_in_out(t)
        state.x = lerp(anim.start.x, anim.end.x, eased)
        state.y = lerp(anim.start.y, anim.end.y, eased)
        state.zoom = clamp(lerp(anim.start.zoom, anim.end.zoom, eased), ZOOM_MIN, ZOOM_MAX)
        return True

    def fit_all(self) -> None:
        """
        Recompute the base pixels-per-AU so every orbit fits the shorter viewport side with
        padding. Zoom, pan and any running transition are left alone.
        """
        usable = self.camera.viewport_min * (1.0 - FIT_PADDING * 2)
        if self.max_apoapsis_au <= 0:
            return
        scale = usable / (2.0 * self.max_apoapsis_au)
        self.camera.state.base_scale = max(MIN_BASE_SCALE, scale)

    def reset(self, zoom: float) -> None:
        self.transition = None
        self.camera.state.x = 0.0
        self.camera.state.y = 0.0
        self.camera.state.zoom = clamp(zoom, ZOOM_MIN, ZOOM_MAX)
        self.fit_all()


def _same_snapshot(a: CameraSnapshot, b: CameraSnapshot) -> bool:
    return (math.isclose(a.x, b.x, rel_tol=1e-12, abs_tol=1e-12)
            and math.isclose(a.y, b.y, rel_tol=1e-12, abs_tol=1e-12)
            and math.isclose(a.zoom, b.zoom, rel_tol=1e-12))
