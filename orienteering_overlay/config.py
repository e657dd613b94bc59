"""Central configuration for the orienteering overlay engine.

All values are constants imported by the rest of the package. Symbol sizes are
real-world distances so the drawn course stays map-scale accurate at every
zoom. Most values can be overridden from environment variables (optionally
via a local `.env`).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def _env_float_tuple(key: str, default: tuple[float, ...]) -> tuple[float, ...]:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        parsed = tuple(float(item) for item in value.split(",") if item.strip())
    except ValueError:
        return default
    return parsed or default


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Map scale
# ---------------------------------------------------------------------------
# Web Mercator ground resolution (metres per pixel) at zoom 0 on the equator.
WEB_MERCATOR_RESOLUTION_M = 156543.03392

# Latitude used for pixel sizing when the caller does not pass one.
DEFAULT_REFERENCE_LATITUDE = _env_float("DEFAULT_REFERENCE_LATITUDE", 51.0)

# Metres per degree of latitude (and of longitude on the equator).
METERS_PER_DEGREE_LAT = 111320.0

# Course line thickness on the ground: 0.35mm on a 1:15,000 map.
LINE_TARGET_WIDTH_M = _env_float("LINE_TARGET_WIDTH_M", 5.25)
LINE_MIN_WIDTH_PX = 1.0
LINE_MAX_WIDTH_PX = 10.0

# Control number height on the ground: 4mm on a 1:15,000 map.
LABEL_TARGET_HEIGHT_M = _env_float("LABEL_TARGET_HEIGHT_M", 60.0)


# ---------------------------------------------------------------------------
# Course symbols
# ---------------------------------------------------------------------------
# Control circle radius (75m diameter, 5mm at 1:15,000).
CONTROL_RADIUS_M = _env_float("CONTROL_RADIUS_M", 37.5)

# Start triangle side length. Vertices sit side / sqrt(3) from the centre.
START_TRIANGLE_SIDE_M = _env_float("START_TRIANGLE_SIDE_M", 90.0)

# Finish double circle radii. The course line stops at the outer circle.
FINISH_OUTER_RADIUS_M = _env_float("FINISH_OUTER_RADIUS_M", 10.0)
FINISH_INNER_RADIUS_M = _env_float("FINISH_INNER_RADIUS_M", 6.0)

SYMBOL_COLOR = os.getenv("SYMBOL_COLOR", "#9333ea")
VISITED_COLOR = os.getenv("VISITED_COLOR", "#22c55e")
COURSE_LINE_OPACITY = _env_float("COURSE_LINE_OPACITY", 0.7)


# ---------------------------------------------------------------------------
# Control number labels
# ---------------------------------------------------------------------------
# Clearance (metres) kept between a label box and the symbol it belongs to.
LABEL_MARGIN_M = _env_float("LABEL_MARGIN_M", 5.0)

# Minimum distance (metres) between two label anchors.
LABEL_MIN_SEPARATION_M = _env_float("LABEL_MIN_SEPARATION_M", 60.0)

# Approximate glyph width as a fraction of the font height.
LABEL_CHAR_WIDTH_RATIO = 0.6

# Angle (degrees) used when a control has no neighbours on its course.
LABEL_DEFAULT_ANGLE_DEG = 45.0


# ---------------------------------------------------------------------------
# Visit tracking
# ---------------------------------------------------------------------------
VISIT_DISTANCE_OPTIONS_M = _env_float_tuple(
    "VISIT_DISTANCE_OPTIONS_M", (5.0, 10.0, 15.0, 20.0, 25.0, 30.0)
)
VISIT_DISTANCE_DEFAULT_M = _env_float("VISIT_DISTANCE_DEFAULT_M", 10.0)
VISIT_TRACKING_ENABLED_DEFAULT = _env_bool("VISIT_TRACKING_ENABLED_DEFAULT", True)

# GPS fixes worse than these accuracies (metres) are flagged to the user.
GPS_LOW_ACCURACY_M = _env_float("GPS_LOW_ACCURACY_M", 50.0)
GPS_VERY_LOW_ACCURACY_M = _env_float("GPS_VERY_LOW_ACCURACY_M", 100.0)


# ---------------------------------------------------------------------------
# Coordinate reference resolution
# ---------------------------------------------------------------------------
# Number of parsed CRS definitions kept in memory.
CRS_CACHE_SIZE = _env_int("CRS_CACHE_SIZE", 32)
