#!/usr/bin/env python3
"""
General utilities for the Solar Orrery.
"""
from typing import Optional, Sequence, Tuple, Union


def try_float(val) -> Optional[float]:
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def parse_color(value: Union[str, Sequence[int]]) -> Optional[Tuple[int, int, int]]:
    """Accept '#rrggbb' or an [r, g, b] list; components are clamped to 0..255."""
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) != 6:
            return None
        try:
            return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
        except ValueError:
            return None
    try:
        r, g, b = int(value[0]), int(value[1]), int(value[2])
    except (TypeError, ValueError, IndexError):
        return None
    return (max(0, min(255, r)), max(0, min(255, g)), max(0, min(255, b)))


def mix(a: Tuple[int, int, int], b: Tuple[int, int, int], t: float) -> Tuple[int, int, int]:
    """Blend color a toward b by t in [0, 1]."""
    t = max(0.0, min(1.0, t))
    return (
        int(round(a[0] + (b[0] - a[0]) * t)),
        int(round(a[1] + (b[1] - a[1]) * t)),
        int(round(a[2] + (b[2] - a[2]) * t)),
    )
