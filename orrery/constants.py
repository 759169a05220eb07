#!/usr/bin/env python3
"""
Shared constants for the Solar Orrery (AU and days unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.
"""
import math

# Astronomical constants
AU_KM = 149_597_870.7  # km per astronomical unit
DAYS_PER_YEAR = 365.25
TAU = 2.0 * math.pi

# Kepler solver
KEPLER_MAX_ITERATIONS = 12
KEPLER_TOLERANCE = 1e-8
HIGH_ECCENTRICITY = 0.8  # start Newton at pi from here on
ORBIT_SEGMENTS = 256

# Camera zoom bounds (multiplier on the base pixels-per-AU)
DEFAULT_ZOOM = 1.0
ZOOM_MIN = 0.02
ZOOM_MAX = 200_000.0
ZOOM_SLIDER_EXP = 3.4
DEFAULT_BASE_SCALE = 18.0  # pixels per AU before the first fit
MIN_BASE_SCALE = 1e-3
FIT_PADDING = 0.1  # fraction of the shorter viewport side kept free on each edge

# Focus framing (pixels)
FOCUS_MIN_VIEWPORT = 320
STAR_FOCUS_FRACTION = 0.28
STAR_FOCUS_MIN_PX = 220
PLANET_FOCUS_FRACTION = 0.22
PLANET_FOCUS_MIN_PX = 24
PLANET_FOCUS_MAX_PX = 120
TRANSITION_MS = 500.0

# Simulation speed (days of simulated time per real second)
DEFAULT_SPEED = 250.0
SPEED_MIN = 0.0
SPEED_MAX = 20_000.0
SPEED_SLIDER_EXP = 3.2
FRAME_CAP_MS = 100.0  # longest real-time step accepted per frame

# Input
PICK_MIN_RADIUS = 10.0
PICK_MARGIN = 6.0
CLICK_SLOP_PX = 4.0
WHEEL_ZOOM_STEP = 0.08
KEY_ZOOM_FACTOR = 1.25
KEY_PAN_SPEED = 600.0  # pixels per second

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
TARGET_FPS = 60
BACKGROUND_COLOR = (5, 7, 13)
ORBIT_COLOR = (255, 255, 255, 20)
TRAIL_COLOR = (170, 200, 255, 46)
FOCUS_COLOR = (106, 227, 255, 115)
CROSSHAIR_COLOR = (255, 255, 255, 16)
LABEL_COLOR = (225, 225, 225)
HUD_COLOR = (200, 200, 200)
GLOW_INNER_COLOR = (255, 220, 120)
GLOW_OUTER_COLOR = (255, 165, 60)
GLOW_ALPHA = 90
GLOW_MAX_PX = 600
RING_MAX_VIEWPORT = 2.0  # skip rings whose outer radius exceeds this many long viewport sides
RING_SEGMENTS = 48  # per half ring
CLIP_MARGIN = 16  # px kept around the viewport when clipping lines
FOCUS_RING_MARGIN = 6
LABEL_OFFSET = 6
TRAIL_CAPACITY = 80
STAR_COUNT = 800
PARALLAX = 0.08

# Safety: avoid drawing outside the 16-bit range gfxdraw accepts
SAFE_COORD_LIMIT = 30000
