"""NMEA capture constants and configuration defaults."""

from enum import Enum


class SentenceType(str, Enum):
    """Sentence types the engine knows how to frame and decode."""

    GGA = "GGA"  # Fix data
    RMC = "RMC"  # Recommended minimum data
    VTG = "VTG"  # Course over ground and ground speed
    ZDA = "ZDA"  # Time and date


class FlushPolicyMode(str, Enum):
    IMMEDIATE = "immediate"  # clear as soon as a pass matches nothing
    IDLE = "idle"  # also require min_idle_ms of silence on the line


class CoordinateConvention(str, Enum):
    SIGNED = "signed"  # S/W fold into a negative value
    HEMISPHERE = "hemisphere"  # unsigned value plus hemisphere character


# Capture buffer
DEFAULT_BUFFER_CAPACITY = 512
MIN_BUFFER_CAPACITY = 2

# Minimum quiet time before an unmatched buffer is considered garbage
DEFAULT_MIN_IDLE_MS = 50

DEFAULT_POLL_INTERVAL_MS = 50
DEFAULT_TALKERS = ("GP",)
ALL_SENTENCE_TYPES = tuple(SentenceType)

# Fixed widths of copied text fields
STATION_ID_WIDTH = 4
CHECKSUM_WIDTH = 2

# Sentinel for an absent age-of-correction field (0 is a valid age)
AGE_OF_CORRECTION_ABSENT = -1

# Two-digit RMC years are offset into this century
RMC_YEAR_BASE = 2000

# Allowed characters of enumerated single-character fields
HEMISPHERE_LAT = frozenset("NS")
HEMISPHERE_LON = frozenset("EW")
DISTANCE_UNITS = frozenset("MF")
NAV_WARNING = frozenset("AV")
MODE_INDICATORS = frozenset("NADE")
MAGNETIC_VARIATION_DIR = frozenset("EW")

# GGA quality indicator descriptions
FIX_QUALITY_DESCRIPTIONS = {
    0: "Invalid",
    1: "GPS fix",
    2: "DGPS fix",
    3: "PPS fix",
    4: "RTK fixed",
    5: "RTK float",
    6: "Estimated",
    7: "Manual input",
    8: "Simulation",
}

# Speed conversion factors
KMH_PER_KNOT = 1.852

# Serial defaults
DEFAULT_SERIAL_PORT = "/dev/serial0"
DEFAULT_BAUD_RATE = 9600
DEFAULT_RECONNECT_DELAY = 3.0
DEFAULT_READ_CHUNK = 64
