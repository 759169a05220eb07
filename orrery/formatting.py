#!/usr/bin/env python3
"""
Human-readable descriptors and slider mappings for the control window.

Purely presentational: nothing in the simulation reads these values back except through
the clamped setters on the scene.
"""
import math

from .constants import (
    SPEED_MAX,
    SPEED_MIN,
    SPEED_SLIDER_EXP,
    ZOOM_MAX,
    ZOOM_MIN,
    ZOOM_SLIDER_EXP,
)
from .vector_utils import clamp


def format_km(n: float) -> str:
    return f"{round(n):,} km"


def format_number(n: float) -> str:
    if n >= 1000:
        return f"{n:.0f}"
    if n >= 10:
        return f"{n:.1f}"
    return f"{n:.2f}"


def format_zoom(z: float) -> str:
    if z >= 1000:
        return f"{round(z):,}× zoom"
    if z >= 10:
        return f"{z:.1f}× zoom"
    if z >= 1:
        return f"{z:.2f}× zoom"
    return f"{z:.3f}× zoom"


def format_speed(days_per_second: float) -> str:
    if days_per_second <= 0:
        return "Paused"
    if days_per_second >= 365:
        return f"{format_number(days_per_second / 365)} years per second"
    if days_per_second >= 1:
        return f"{format_number(days_per_second)} days per second"
    seconds_per_day = 1 / days_per_second
    if seconds_per_day < 60:
        return f"1 day every {seconds_per_day:.1f} sec"
    minutes_per_day = seconds_per_day / 60
    if minutes_per_day < 60:
        return f"1 day every {minutes_per_day:.1f} min"
    hours_per_day = minutes_per_day / 60
    if hours_per_day < 48:
        return f"1 day every {hours_per_day:.2f} hr"
    days_real = hours_per_day / 24
    if days_real < 365:
        return f"1 day every {days_real:.1f} days"
    return f"1 day every {days_real / 365:.2f} years"


def format_elapsed(days: float) -> str:
    years = days / 365.25
    if abs(years) >= 1:
        return f"{years:,.2f} years"
    return f"{days:,.1f} days"


# Zoom slider: 0..100, logarithmic with extra resolution near the bottom of the range.

def slider_to_zoom(slider: float) -> float:
    t = clamp(slider / 100.0, 0.0, 1.0) ** ZOOM_SLIDER_EXP
    ratio = (ZOOM_MAX / ZOOM_MIN) ** t
    return clamp(ZOOM_MIN * ratio, ZOOM_MIN, ZOOM_MAX)


def zoom_to_slider(zoom: float) -> int:
    safe_zoom = clamp(zoom, ZOOM_MIN, ZOOM_MAX)
    t = math.log(safe_zoom / ZOOM_MIN) / math.log(ZOOM_MAX / ZOOM_MIN)
    return int(round(clamp(t, 0.0, 1.0) ** (1.0 / ZOOM_SLIDER_EXP) * 100))


# Speed slider: 0..100, power curve so slow speeds get most of the travel.

def slider_to_speed(slider: float) -> float:
    t = clamp(slider / 100.0, 0.0, 1.0)
    return float(round(t ** SPEED_SLIDER_EXP * SPEED_MAX))


def speed_to_slider(speed: float) -> int:
    t = clamp(speed, SPEED_MIN, SPEED_MAX) / SPEED_MAX
    return int(round(t ** (1.0 / SPEED_SLIDER_EXP) * 100))
