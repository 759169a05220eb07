#!/usr/bin/env python3
"""
Body catalog JSON loading and validation.

A catalog is an ordered list of bodies: exactly one star (the fixed focus every orbit is
drawn around) followed by planets on independent Kepler ellipses. Catalogs ship in
orrery/catalogs/*.json; a path to any other JSON file with the same schema works too.

Schema
======
{
  "name": "Human-friendly catalog name",
  "description": "Optional description",
  "bodies": [
    {
      "name": "Saturn",
      "type": "planet",                 # "star" | "planet"
      "radius_km": 58232,
      "sma_au": 9.5826,                 # 0 for the star
      "eccentricity": 0.053862,         # [0, 1)
      "period_days": 10759.22,          # null or omitted for the star
      "perihelion_deg": 92.4319,        # optional, default 0
      "ring": {"inner": 1.15, "outer": 2.41, "tilt_deg": 26.7},   # optional
      "color": "#ecdcb2",               # "#rrggbb" or [r, g, b]
      "color2": "#d0b98a"
    }
  ]
}

Invalid elements are rejected here, at load time, with ConfigurationError. Nothing
downstream re-validates them, so the solver never sees a zero period or an open orbit.
"""
import json
import logging
import math
import os
from typing import Any, Dict, List, Optional, Tuple

from .data_models import PLANET, STAR, CelestialBody, Ring
from .utils import parse_color, try_float

CATALOGS_DIR = os.path.join(os.path.dirname(__file__), "catalogs")
DEFAULT_CATALOG = "solar_system.json"


class ConfigurationError(Exception):
    """A body catalog could not be read or describes an invalid system."""


def _read_json(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read catalog '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Catalog '{path}' is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Catalog '{path}' must be a JSON object with a 'bodies' list.")
    return data


def _number(raw: Dict[str, Any], key: str, name: str, default: Optional[float] = None) -> float:
    if key not in raw or raw[key] is None:
        if default is None:
            raise ConfigurationError(f"Body '{name}': missing '{key}'.")
        return default
    val = try_float(raw[key])
    if val is None or math.isnan(val):
        raise ConfigurationError(f"Body '{name}': '{key}' must be a number, got {raw[key]!r}.")
    return val


def _color(raw: Dict[str, Any], key: str, name: str, default: Tuple[int, int, int]) -> Tuple[int, int, int]:
    if key not in raw:
        return default
    c = parse_color(raw[key])
    if c is None:
        raise ConfigurationError(f"Body '{name}': '{key}' must be '#rrggbb' or [r, g, b], got {raw[key]!r}.")
    return c


def _ring(raw: Any, name: str) -> Optional[Ring]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Body '{name}': 'ring' must be an object.")
    inner = _number(raw, "inner", name)
    outer = _number(raw, "outer", name)
    tilt = _number(raw, "tilt_deg", name, default=0.0)
    if not (0 < inner < outer) or math.isinf(outer):
        raise ConfigurationError(f"Body '{name}': ring needs 0 < inner < outer, got {inner} and {outer}.")
    return Ring(inner=inner, outer=outer, tilt_deg=tilt)


def body_from_dict(raw: Dict[str, Any]) -> CelestialBody:
    """Build and validate one CelestialBody from its JSON object."""
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Body entries must be objects, got {raw!r}.")
    name = str(raw.get("name") or "").strip()
    if not name:
        raise ConfigurationError("Every body needs a non-empty 'name'.")
    kind = raw.get("type", PLANET)
    if kind not in (STAR, PLANET):
        raise ConfigurationError(f"Body '{name}': 'type' must be 'star' or 'planet', got {kind!r}.")

    radius_km = _number(raw, "radius_km", name)
    if not (radius_km > 0) or math.isinf(radius_km):
        raise ConfigurationError(f"Body '{name}': radius_km must be positive, got {radius_km}.")
    eccentricity = _number(raw, "eccentricity", name, default=0.0)
    if not (0.0 <= eccentricity < 1.0):
        raise ConfigurationError(f"Body '{name}': eccentricity must be in [0, 1), got {eccentricity}.")
    perihelion_deg = _number(raw, "perihelion_deg", name, default=0.0)
    if math.isinf(perihelion_deg):
        raise ConfigurationError(f"Body '{name}': perihelion_deg must be finite.")

    if kind == STAR:
        sma_au = _number(raw, "sma_au", name, default=0.0)
        if sma_au != 0:
            raise ConfigurationError(f"Star '{name}' must sit at the origin (sma_au 0), got {sma_au}.")
        period_days = math.inf
    else:
        sma_au = _number(raw, "sma_au", name)
        if not (sma_au > 0) or math.isinf(sma_au):
            raise ConfigurationError(f"Planet '{name}': sma_au must be positive, got {sma_au}.")
        period_days = _number(raw, "period_days", name)
        if not (period_days > 0) or math.isinf(period_days):
            raise ConfigurationError(f"Planet '{name}': period_days must be positive and finite, got {period_days}.")

    return CelestialBody(
        name=name,
        kind=kind,
        radius_km=radius_km,
        sma_au=sma_au,
        eccentricity=eccentricity,
        period_days=period_days,
        perihelion_deg=perihelion_deg,
        ring=_ring(raw.get("ring"), name),
        color=_color(raw, "color", name, (200, 200, 255)),
        color2=_color(raw, "color2", name, (120, 120, 160)),
    )


def validate_bodies(bodies: List[CelestialBody]) -> List[CelestialBody]:
    """Check system-level rules and return the bodies with the star moved to the front."""
    if not bodies:
        raise ConfigurationError("A catalog needs at least one body.")
    stars = [b for b in bodies if b.is_star]
    if len(stars) != 1:
        raise ConfigurationError(f"A catalog needs exactly one star, found {len(stars)}.")
    seen = set()
    for b in bodies:
        if b.name in seen:
            raise ConfigurationError(f"Duplicate body name '{b.name}'.")
        seen.add(b.name)
    return stars + [b for b in bodies if not b.is_star]


def list_catalogs() -> List[Tuple[str, str]]:
    """Return list of (file_name, display_name) for the shipped catalogs."""
    items: List[Tuple[str, str]] = []
    if not os.path.isdir(CATALOGS_DIR):
        return items
    for fn in sorted(os.listdir(CATALOGS_DIR)):
        if not fn.lower().endswith(".json"):
            continue
        try:
            data = _read_json(os.path.join(CATALOGS_DIR, fn))
        except ConfigurationError as e:
            logging.warning(f"Skipping unreadable catalog {fn}: {e}")
            continue
        items.append((fn, data.get("name") or os.path.splitext(fn)[0]))
    return items


def resolve_catalog_path(name_or_path: str) -> str:
    """A bare file name refers to the shipped catalogs; anything else is a filesystem path."""
    if os.path.dirname(name_or_path) or os.path.isfile(name_or_path):
        return name_or_path
    file_name = name_or_path if name_or_path.lower().endswith(".json") else name_or_path + ".json"
    return os.path.join(CATALOGS_DIR, file_name)


def load_catalog(name_or_path: str = DEFAULT_CATALOG) -> Tuple[List[CelestialBody], str]:
    """
    Load and validate a catalog.
    Returns (bodies, display_name); the star is always bodies[0].
    """
    path = resolve_catalog_path(name_or_path)
    data = _read_json(path)
    raw_bodies = data.get("bodies")
    if not isinstance(raw_bodies, list):
        raise ConfigurationError(f"Catalog '{path}' has no 'bodies' list.")
    bodies = validate_bodies([body_from_dict(b) for b in raw_bodies])
    display_name = data.get("name") or os.path.splitext(os.path.basename(path))[0]
    logging.info(f"Loaded catalog '{display_name}' with {len(bodies)} bodies from {path}")
    return bodies, display_name


def default_bodies() -> List[CelestialBody]:
    return load_catalog(DEFAULT_CATALOG)[0]
