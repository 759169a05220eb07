#!/usr/bin/env python3
"""
Camera utilities for 2D world-to-screen transforms.
"""
import math
from typing import Optional, Tuple

from .constants import (
    DEFAULT_BASE_SCALE,
    DEFAULT_ZOOM,
    VIEW_HEIGHT,
    VIEW_WIDTH,
    ZOOM_MAX,
    ZOOM_MIN,
)
from .data_models import CameraState
from .vector_utils import clamp


class Camera2D:
    """
    Simple 2D camera that maps world coordinates (AU) to screen pixels.

    Attributes:
        state: CameraState holding the world focus point, zoom and base pixels-per-AU.
        viewport_size: (width, height) in pixels.

    The camera focus always maps to the viewport center. to_screen and to_world are
    exact inverses for the same state and return unrounded floats; callers that draw
    round at the last moment.
    """

    def __init__(self, center=(0.0, 0.0), zoom=DEFAULT_ZOOM, base_scale=DEFAULT_BASE_SCALE,
                 viewport_size=(VIEW_WIDTH, VIEW_HEIGHT)):
        self.state = CameraState(x=float(center[0]), y=float(center[1]),
                                 zoom=clamp(zoom, ZOOM_MIN, ZOOM_MAX), base_scale=base_scale)
        self.viewport_size = (int(viewport_size[0]), int(viewport_size[1]))

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (max(int(w), 1), max(int(h), 1))

    @property
    def scale(self) -> float:
        """Effective pixels per AU."""
        return self.state.scale

    @property
    def viewport_min(self) -> int:
        return min(self.viewport_size)

    def to_screen(self, wx: float, wy: float) -> Tuple[float, float]:
        s = self.state
        scale = s.scale
        px = (wx - s.x) * scale + self.viewport_size[0] / 2
        py = (wy - s.y) * scale + self.viewport_size[1] / 2
        return (px, py)

    def to_world(self, px: float, py: float) -> Tuple[float, float]:
        s = self.state
        scale = s.scale
        wx = (px - self.viewport_size[0] / 2) / scale + s.x
        wy = (py - self.viewport_size[1] / 2) / scale + s.y
        return (wx, wy)

    def pixel_radius(self, radius_au: float) -> float:
        return radius_au * self.state.scale

    def zoom_at(self, zoom: float, pivot_screen: Optional[Tuple[float, float]] = None) -> None:
        """
        Set the zoom with an optional pivot point (screen space) so that the world point
        under the cursor remains stationary.
        """
        if not math.isfinite(zoom):
            return
        before = None
        if pivot_screen is not None:
            before = self.to_world(pivot_screen[0], pivot_screen[1])
        self.state.zoom = clamp(zoom, ZOOM_MIN, ZOOM_MAX)
        if before is not None:
            after = self.to_world(pivot_screen[0], pivot_screen[1])
            self.state.x += (before[0] - after[0])
            self.state.y += (before[1] - after[1])

    def pan_pixels(self, dx_pixels: float, dy_pixels: float) -> None:
        """Dragging the scene right moves the camera left."""
        scale = self.state.scale
        self.state.x -= dx_pixels / scale
        self.state.y -= dy_pixels / scale
