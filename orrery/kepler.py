#!/usr/bin/env python3
"""
Kepler orbit solver for the Solar Orrery.

Responsibilities
- Place a body on its fixed orbital ellipse for a given number of elapsed days.
- Solve Kepler's equation E - e*sin(E) = M for the eccentric anomaly with Newton-Raphson.
- Sample whole orbits as closed polylines for drawing.

Units and conventions
- Positions are in astronomical units [AU] in the orbit plane, with the star at the origin.
- Elapsed time and periods are in days. Angles passed around internally are radians;
  the argument of perihelion on CelestialBody is stored in degrees.
- Bodies never interact: each one follows an independent two-body ellipse about a fixed focus.

Numerical notes
- The Newton iteration starts at E0 = M, or at pi when e >= 0.8. It stops after a fixed
  12 iterations or once the correction drops below 1e-8. For extreme eccentricities the cap
  can leave a small residual; that is accepted.
- Everything here is stateless and safe to call once per body per frame.
"""

import math
from typing import Iterable, List, Tuple

from .constants import (
    HIGH_ECCENTRICITY,
    KEPLER_MAX_ITERATIONS,
    KEPLER_TOLERANCE,
    ORBIT_SEGMENTS,
    TAU,
)
from .data_models import CelestialBody
from .vector_utils import rotate


def normalize_angle(angle: float) -> float:
    """Reduce an angle in radians to [0, 2*pi)."""
    a = math.fmod(angle, TAU)
    if a < 0:
        a += TAU
    # fmod of a tiny negative number can round up to exactly TAU
    if a >= TAU:
        a = 0.0
    return a


def solve_kepler(mean_anomaly: float, eccentricity: float) -> float:
    """
    Return the eccentric anomaly E (radians) for a mean anomaly M and eccentricity e.

    M is normalized to [0, 2*pi) first. A circle (e == 0) returns M unchanged.
    """
    m = normalize_angle(mean_anomaly)
    e = eccentricity
    if e == 0:
        return m
    E = m if e < HIGH_ECCENTRICITY else math.pi
    for _ in range(KEPLER_MAX_ITERATIONS):
        f = E - e * math.sin(E) - m
        f_prime = 1.0 - e * math.cos(E)
        delta = f / f_prime
        E -= delta
        if abs(delta) < KEPLER_TOLERANCE:
            break
    return E


def orbit_point(body: CelestialBody, eccentric_anomaly: float) -> Tuple[float, float]:
    """Point on the body's ellipse at eccentric anomaly E, rotated by the argument of perihelion."""
    a = body.sma_au
    e = body.eccentricity
    x_prime = a * (math.cos(eccentric_anomaly) - e)
    y_prime = a * math.sqrt(1.0 - e * e) * math.sin(eccentric_anomaly)
    return rotate((x_prime, y_prime), math.radians(body.perihelion_deg))


def position(body: CelestialBody, elapsed_days: float) -> Tuple[float, float]:
    """
    Orbit-plane position (AU) of body after elapsed_days, centered on the star.

    The star itself (semi-major axis 0) always sits at the origin.
    """
    if body.sma_au == 0 or math.isinf(body.period_days):
        return (0.0, 0.0)
    a = body.sma_au
    period = body.period_days
    if body.eccentricity == 0:
        angle = TAU * (math.fmod(elapsed_days, period) / period)
        return (a * math.cos(angle), a * math.sin(angle))

    mean_anomaly = normalize_angle(TAU / period * elapsed_days)
    E = solve_kepler(mean_anomaly, body.eccentricity)
    return orbit_point(body, E)


def orbit_path(body: CelestialBody, segments: int = ORBIT_SEGMENTS) -> List[Tuple[float, float]]:
    """
    Closed polyline of segments + 1 world points tracing the body's ellipse.

    Samples are taken at evenly spaced mean anomalies so points bunch up near apoapsis
    the same way the body's motion does. The first and last points coincide.
    """
    if body.sma_au == 0:
        return []
    segments = max(3, int(segments))
    e = body.eccentricity
    points = []
    for i in range(segments + 1):
        m = TAU * i / segments
        E = m if e == 0 else solve_kepler(m, e)
        points.append(orbit_point(body, E))
    points[-1] = points[0]
    return points


def max_apoapsis(bodies: Iterable[CelestialBody]) -> float:
    """Largest star distance any body reaches; 0 for a lone star."""
    return max((b.apoapsis_au for b in bodies), default=0.0)
