#!/usr/bin/env python3
"""
Pygame scene renderer for the Solar Orrery viewport.

Draw order per frame (later draws cover earlier ones)
1) background fill and parallax starfield
2) orbit polylines
3) origin crosshair
4) bodies, star first: glow, back half of the ring, shaded disk, rim highlight,
   front half of the ring, label, trail
5) focus ring around the focused body
6) HUD text

Visibility toggles on the scene only filter what is drawn here; the simulation is unaffected.

Coordinates
- Body and orbit positions come in as float screen pixels from the scene's BodyViews.
- gfxdraw takes 16-bit coordinates. Points go through _safe_point and are skipped outside
  SAFE_COORD_LIMIT; line segments are clipped to the viewport instead, so an orbit whose
  samples all lie far off-screen at deep zoom still shows the stretch that crosses the view.
"""
import math
import random
from typing import Dict, List, Optional, Sequence, Tuple

import pygame
from pygame import gfxdraw

from .constants import (
    BACKGROUND_COLOR,
    CLIP_MARGIN,
    CROSSHAIR_COLOR,
    FOCUS_COLOR,
    FOCUS_RING_MARGIN,
    GLOW_ALPHA,
    GLOW_INNER_COLOR,
    GLOW_MAX_PX,
    GLOW_OUTER_COLOR,
    HUD_COLOR,
    LABEL_COLOR,
    LABEL_OFFSET,
    ORBIT_COLOR,
    PARALLAX,
    RING_MAX_VIEWPORT,
    RING_SEGMENTS,
    SAFE_COORD_LIMIT,
    STAR_COUNT,
    TRAIL_COLOR,
)
from .data_models import CelestialBody
from .scene import BodyView, OrreryScene
from .utils import mix

RING_ROTATION_DEG = 180.0 / 7.0
RING_BANDS = ((1.0, 10), (0.9, 40), (0.6, 55))  # (fraction of the ring width, alpha)
HINT_TEXT = "Drag: pan | Wheel: zoom | Click/1-9: focus | Space: pause | F: fit | R: reset | O/L/T: orbits/labels/trails"


class StarField:
    """
    Layered background stars that drift slower than the scene when the camera pans.

    Star positions are stored as fractions of the viewport so a resize keeps the same sky.
    """

    def __init__(self, star_count: int = STAR_COUNT, seed: Optional[int] = None):
        rng = random.Random(seed)
        self.layers = [
            {'stars': [], 'speed_factor': 0.5, 'base_brightness': 0.45, 'count': int(star_count * 0.6)},  # Farthest
            {'stars': [], 'speed_factor': 1.0, 'base_brightness': 0.7, 'count': int(star_count * 0.3)},
            {'stars': [], 'speed_factor': 1.6, 'base_brightness': 0.95, 'count': int(star_count * 0.1)},  # Nearest
        ]
        for layer in self.layers:
            for _ in range(layer['count']):
                layer['stars'].append({
                    'pos': (rng.random(), rng.random()),
                    'brightness_mod': rng.uniform(0.3, 1.0),
                    'twinkle_phase': rng.uniform(0, 2 * math.pi),
                    'twinkle_speed': rng.uniform(0.0005, 0.002),
                    'big': rng.random() >= 0.9,
                })

    def draw(self, surface, offset_px: Tuple[float, float], time_ms: float = 0.0) -> None:
        """offset_px is the camera pan in screen pixels; each layer shifts by a fraction of it."""
        w, h = surface.get_size()
        for layer in self.layers:
            shift_x = offset_px[0] * PARALLAX * layer['speed_factor']
            shift_y = offset_px[1] * PARALLAX * layer['speed_factor']
            for star in layer['stars']:
                x = int((star['pos'][0] * w - shift_x) % w)
                y = int((star['pos'][1] * h - shift_y) % h)
                twinkle = (math.sin(time_ms * star['twinkle_speed'] + star['twinkle_phase']) + 1) / 2
                alpha = int(255 * layer['base_brightness'] * star['brightness_mod'] * (0.7 + 0.3 * twinkle))
                if alpha < 12:
                    continue
                color = (255, 255, 255, min(255, alpha))
                if star['big']:
                    gfxdraw.filled_circle(surface, x, y, 1, color)
                else:
                    gfxdraw.pixel(surface, x, y, color)


class SceneRenderer:
    """Draws an OrreryScene onto a pygame surface."""

    def __init__(self, scene: OrreryScene, star_seed: Optional[int] = None):
        self.scene = scene
        self.starfield = StarField(seed=star_seed)
        self._font = None
        self._label_font = None
        self._glow_cache: Dict[int, pygame.Surface] = {}
        self._label_cache: Dict[str, pygame.Surface] = {}

    # -----------------------
    # Frame
    # -----------------------

    def draw(self, surface, views: Sequence[BodyView], time_ms: float = 0.0, hud: bool = True) -> None:
        scene = self.scene
        surface.fill(BACKGROUND_COLOR)

        cam = scene.camera.state
        self.starfield.draw(surface, (cam.x * cam.scale, cam.y * cam.scale), time_ms)

        if scene.show_orbits:
            for v in views:
                self.draw_orbit(surface, v.body)

        self.draw_crosshair(surface)

        if scene.show_trails:
            scene.record_trails(views)

        for v in views:
            self.draw_body(surface, v)
            if scene.show_trails:
                trail = scene.trails.get(v.body.name)
                if trail is not None:
                    self.draw_polyline(surface, list(trail), TRAIL_COLOR)

        focused = scene.focused_body()
        for v in views:
            if v.body is focused:
                self.draw_focus_ring(surface, v)
                break

        if hud:
            self.draw_hud(surface)

    # -----------------------
    # Layers
    # -----------------------

    def draw_orbit(self, surface, body: CelestialBody) -> None:
        path = self.scene.orbit_path(body)
        if not path:
            return
        to_screen = self.scene.camera.to_screen
        self.draw_polyline(surface, [to_screen(x, y) for x, y in path], ORBIT_COLOR)

    def draw_polyline(self, surface, points: List[Tuple[float, float]], color) -> None:
        """
        Connected segments clipped to the viewport. Endpoints may lie arbitrarily far
        off-screen; only segments that miss the viewport entirely are dropped.
        """
        w, h = surface.get_size()
        bounds = pygame.Rect(-CLIP_MARGIN, -CLIP_MARGIN, w + 2 * CLIP_MARGIN, h + 2 * CLIP_MARGIN)
        for p0, p1 in zip(points, points[1:]):
            segment = _clip_to_safe_range(p0, p1)
            if segment is None:
                continue
            clipped = bounds.clipline(segment)
            if not clipped:
                continue
            (x0, y0), (x1, y1) = clipped
            gfxdraw.line(surface, x0, y0, x1, y1, color)

    def draw_crosshair(self, surface) -> None:
        center = _safe_point(self.scene.camera.to_screen(0.0, 0.0))
        if center is None:
            return
        cx, cy = center
        gfxdraw.hline(surface, cx - 8, cx + 8, cy, CROSSHAIR_COLOR)
        gfxdraw.vline(surface, cx, cy - 8, cy + 8, CROSSHAIR_COLOR)

    def draw_body(self, surface, view: BodyView) -> None:
        body = view.body
        w, h = surface.get_size()
        px, py = view.screen
        radius = view.radius_px

        if body.is_star:
            self.draw_glow(surface, px, py, radius)

        if not _overlaps(px, py, max(radius * 2.5, 40.0), w, h):
            return

        draw_r = max(1.0, radius)
        has_ring = body.ring is not None and self.draw_ring(surface, body, px, py, draw_r, front=False)

        self.draw_disk(surface, body, px, py, draw_r, w, h)

        if has_ring:
            self.draw_ring(surface, body, px, py, draw_r, front=True)

        if self.scene.show_labels:
            self.draw_label(surface, body.name, px, py - draw_r - LABEL_OFFSET)

    def draw_glow(self, surface, px: float, py: float, radius: float) -> None:
        glow_r = int(min(max(radius * 60, 140), GLOW_MAX_PX))
        if not _overlaps(px, py, glow_r, *surface.get_size()):
            return
        glow = self._glow_cache.get(glow_r)
        if glow is None:
            glow = pygame.Surface((glow_r * 2 + 1, glow_r * 2 + 1), pygame.SRCALPHA)
            steps = 32
            for i in range(steps):
                t = i / steps
                color = mix(GLOW_OUTER_COLOR, GLOW_INNER_COLOR, t)
                alpha = int(GLOW_ALPHA * t * t)
                pygame.draw.circle(glow, (*color, alpha), (glow_r, glow_r), max(1, int(glow_r * (1 - t))))
            self._glow_cache = {glow_r: glow}
        _blit_centered(surface, glow, px, py)

    def draw_disk(self, surface, body: CelestialBody, px: float, py: float, radius: float, w: int, h: int) -> None:
        """Radial shading from a dark limb through color2 to a color highlight up and to the left."""
        limb = mix(body.color2, (0, 0, 0), 0.6)
        if _covers(px, py, radius, w, h):
            # Deep inside the disk: shading detail is off-screen, fill with the mid tone.
            surface.fill(body.color2)
            return
        center = _safe_point((px, py))
        if center is None or radius > SAFE_COORD_LIMIT:
            return
        if radius < 3:
            pygame.draw.circle(surface, body.color, center, max(1, int(round(radius))))
            return
        steps = int(min(14, max(3, radius // 2)))
        for i in range(steps):
            t = i / (steps - 1)
            color = mix(limb, body.color2, t * 2) if t < 0.5 else mix(body.color2, body.color, (t - 0.5) * 2)
            r = radius * (1 - 0.85 * t)
            cx = px - radius * 0.3 * t
            cy = py - radius * 0.3 * t
            pygame.draw.circle(surface, color, (int(round(cx)), int(round(cy))), max(1, int(round(r))))
        if radius >= 4:
            rim = mix(body.color, (255, 255, 255), 0.35)
            rect = pygame.Rect(0, 0, int(radius * 2), int(radius * 2))
            rect.center = center
            pygame.draw.arc(surface, rim, rect, 1.15 * math.pi, 1.85 * math.pi, max(1, int(radius * 0.05)))

    def draw_label(self, surface, text: str, x: float, bottom: float) -> None:
        pos = _safe_point((x, bottom))
        if pos is None:
            return
        img = self._label_cache.get(text)
        if img is None:
            img = self._get_label_font().render(text, True, LABEL_COLOR)
            self._label_cache[text] = img
        rect = img.get_rect(midbottom=pos)
        surface.blit(img, rect)

    def draw_focus_ring(self, surface, view: BodyView) -> None:
        r = int(round(max(1.0, view.radius_px) + FOCUS_RING_MARGIN))
        center = _safe_point(view.screen)
        if center is None or r + 1 > SAFE_COORD_LIMIT:
            return
        gfxdraw.aacircle(surface, center[0], center[1], r, FOCUS_COLOR)
        gfxdraw.aacircle(surface, center[0], center[1], r + 1, FOCUS_COLOR)

    def draw_hud(self, surface) -> None:
        status = self.scene.status()
        state = "Paused" if status["paused"] else "Running"
        info = status["focus_info"]
        self.draw_text(surface, HINT_TEXT, 10, 10, HUD_COLOR)
        self.draw_text(surface, f"{status['speed_text']}  |  {status['zoom_text']}  [{state}]", 10, 30, HUD_COLOR)
        self.draw_text(surface, f"T+{status['elapsed_text']}  |  Focus: {info.name}  ({info.distance_au:.3f} AU)",
                       10, 50, HUD_COLOR)

    # -----------------------
    # Helpers
    # -----------------------

    def draw_text(self, surface, text, x, y, color):
        if self._font is None:
            self._font = _load_font(16)
        img = self._font.render(text, True, color)
        surface.blit(img, (x, y))

    def _get_label_font(self):
        if self._label_font is None:
            self._label_font = _load_font(14)
        return self._label_font

    def draw_ring(self, surface, body: CelestialBody, px: float, py: float, radius: float, front: bool) -> bool:
        """
        Draw the back (upper) or front (lower) half of the ring as alpha polygons straight onto
        the surface. Returns False when the ring is too small or too large to draw.
        """
        outer = radius * body.ring.outer
        if outer < 3 or outer > RING_MAX_VIEWPORT * max(surface.get_size()):
            return False
        if abs(px) + outer > SAFE_COORD_LIMIT or abs(py) + outer > SAFE_COORD_LIMIT:
            return False
        inner = max(1.0, radius * body.ring.inner)
        squash = max(abs(math.cos(math.radians(body.ring.tilt_deg))), 0.08)
        start = 0.0 if front else math.pi
        rotation = math.radians(RING_ROTATION_DEG)
        for frac, alpha in RING_BANDS:
            r_out = inner + (outer - inner) * frac
            points = _ring_half(px, py, inner, r_out, squash, start, rotation)
            gfxdraw.filled_polygon(surface, points, (255, 255, 255, alpha))
        return True


def _load_font(size: int):
    if not pygame.font.get_init():
        pygame.font.init()
    try:
        return pygame.font.SysFont("consolas", size)
    except (OSError, RuntimeError):
        return pygame.font.Font(None, size)


def _safe_point(pt):
    try:
        x, y = int(round(pt[0])), int(round(pt[1]))
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None


def _clip_to_safe_range(p0, p1):
    """
    Liang-Barsky clip of a float segment to the +/-SAFE_COORD_LIMIT box, returned as
    integer endpoints, or None when the segment misses the box or is not finite.
    """
    x0, y0 = p0
    x1, y1 = p1
    if not all(math.isfinite(v) for v in (x0, y0, x1, y1)):
        return None
    lo, hi = -SAFE_COORD_LIMIT, SAFE_COORD_LIMIT
    dx = x1 - x0
    dy = y1 - y0
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x0 - lo), (dx, hi - x0), (-dy, y0 - lo), (dy, hi - y0)):
        if p == 0:
            if q < 0:
                return None
            continue
        t = q / p
        if p < 0:
            if t > t1:
                return None
            t0 = max(t0, t)
        else:
            if t < t0:
                return None
            t1 = min(t1, t)
    return ((int(round(x0 + t0 * dx)), int(round(y0 + t0 * dy))),
            (int(round(x0 + t1 * dx)), int(round(y0 + t1 * dy))))


def _ring_half(px: float, py: float, inner: float, outer: float, squash: float,
               start: float, rotation: float) -> List[Tuple[int, int]]:
    """Polygon for half of a flattened annulus, from angle start through start + pi."""
    c = math.cos(rotation)
    s = math.sin(rotation)
    angles = [start + math.pi * i / RING_SEGMENTS for i in range(RING_SEGMENTS + 1)]
    points = []
    for r, seq in ((outer, angles), (inner, reversed(angles))):
        for a in seq:
            x = r * math.cos(a)
            y = r * squash * math.sin(a)
            # counter-clockwise on screen, where y points down
            points.append((int(round(px + x * c + y * s)), int(round(py - x * s + y * c))))
    return points


def _overlaps(px: float, py: float, r: float, w: int, h: int) -> bool:
    """Whether a circle's bounding box touches the viewport."""
    return px + r >= 0 and px - r <= w and py + r >= 0 and py - r <= h


def _covers(px: float, py: float, r: float, w: int, h: int) -> bool:
    """Whether a circle contains all four viewport corners."""
    r2 = r * r
    for cx, cy in ((0, 0), (w, 0), (0, h), (w, h)):
        if (cx - px) ** 2 + (cy - py) ** 2 > r2:
            return False
    return True


def _blit_centered(surface, img, px: float, py: float) -> None:
    center = _safe_point((px, py))
    if center is None:
        return
    rect = img.get_rect(center=center)
    surface.blit(img, rect)
