#!/usr/bin/env python3
"""
Data models for the Solar Orrery.

This module defines the dataclasses shared between the solver, camera, scene and renderer.

Units and usage
- Distances in the orbit plane are in astronomical units [AU]; body radii are in km.
- Times are in days of simulated time; camera timestamps are host milliseconds.
- CelestialBody is immutable configuration. CameraState, CameraTransition and
  TrailBuffer are owned by a single OrreryScene and mutated only from its frame loop.
"""
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional, Tuple

from .constants import AU_KM, DAYS_PER_YEAR, TRAIL_CAPACITY

STAR = "star"
PLANET = "planet"


@dataclass(frozen=True)
class Ring:
    """Ring geometry relative to the body radius; tilt squashes the ellipse on screen."""
    inner: float
    outer: float
    tilt_deg: float


@dataclass(frozen=True)
class CelestialBody:
    """
    A body on a fixed Kepler ellipse around the star.

    Fields:
    - name: Identifier shown in labels and used for focus
    - kind: "star" or "planet"
    - radius_km: Mean equatorial radius in kilometers
    - sma_au: Semi-major axis in AU (0 for the star)
    - eccentricity: Orbital eccentricity in [0, 1)
    - period_days: Orbital period in days (infinite for the star)
    - perihelion_deg: Argument of perihelion in degrees
    - ring: Optional ring geometry
    - color, color2: RGB tuples used for the disk shading
    """
    name: str
    kind: str
    radius_km: float
    sma_au: float
    eccentricity: float
    period_days: float
    perihelion_deg: float = 0.0
    ring: Optional[Ring] = None
    color: Tuple[int, int, int] = (200, 200, 255)
    color2: Tuple[int, int, int] = (120, 120, 160)

    @property
    def is_star(self) -> bool:
        return self.kind == STAR

    @property
    def radius_au(self) -> float:
        return self.radius_km / AU_KM

    @property
    def apoapsis_au(self) -> float:
        return self.sma_au * (1.0 + self.eccentricity)

    @property
    def periapsis_au(self) -> float:
        return self.sma_au * (1.0 - self.eccentricity)

    @property
    def period_years(self) -> Optional[float]:
        if math.isinf(self.period_days):
            return None
        return self.period_days / DAYS_PER_YEAR


@dataclass(frozen=True)
class CameraSnapshot:
    x: float
    y: float
    zoom: float


@dataclass
class CameraState:
    """
    Mutable camera: world focus point (AU), zoom multiplier and base pixels-per-AU.

    The product base_scale * zoom is the effective pixels-per-AU for a frame.
    """
    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0
    base_scale: float = 18.0

    @property
    def scale(self) -> float:
        return self.base_scale * self.zoom

    def snapshot(self) -> CameraSnapshot:
        return CameraSnapshot(self.x, self.y, self.zoom)

    def apply(self, snap: CameraSnapshot) -> None:
        self.x = snap.x
        self.y = snap.y
        self.zoom = snap.zoom


@dataclass
class CameraTransition:
    """An eased move between two snapshots; start_ms is stamped by the first update."""
    start: CameraSnapshot
    end: CameraSnapshot
    duration_ms: float
    start_ms: Optional[float] = None


@dataclass
class TrailBuffer:
    """Bounded ring buffer of recent screen positions; the oldest point is evicted first."""
    capacity: int = TRAIL_CAPACITY
    points: Deque[Tuple[float, float]] = field(default_factory=deque)

    def __post_init__(self):
        self.points = deque(self.points, maxlen=max(1, int(self.capacity)))

    def append(self, point: Tuple[float, float]) -> None:
        self.points.append((point[0], point[1]))

    def clear(self) -> None:
        self.points.clear()

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)
