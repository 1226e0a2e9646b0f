"""
Tracking policy constants and enumerations
"""

from enum import Enum

class AlertType(str, Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    IDLE = "idle"
    SIGNAL_LOST = "signal_lost"
    SOS = "sos"

class ShiftStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"

class GuardStatus(str, Enum):
    NORMAL = "normal"
    OUT_OF_BOUNDS = "out_of_bounds"
    IDLE = "idle"
    OFFLINE = "offline"

# Geodesy
EARTH_RADIUS_METERS = 6_371_000
METERS_PER_DEGREE_LAT = 111_320
DEFAULT_BUFFER_METERS = 100

# Idle detection (fixed policy, not per tenant)
IDLE_WINDOW_SIZE = 10          # most recent samples inspected
IDLE_MIN_SAMPLES = 5           # fewer than this and the check is skipped
IDLE_MIN_SPAN_MS = 5 * 60 * 1000
IDLE_DISTANCE_METERS = 10.0    # total path length below this means idle

# Live status
OFFLINE_AFTER_MS = 90_000

# Alert listing
ALERT_PAGE_SIZE = 100

UNKNOWN_SITE_NAME = "Unknown Site"
