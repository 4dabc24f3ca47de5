"""Compiled sentence grammars, one per supported sentence type.

Each grammar is a bytes regular expression anchored on ``$`` plus talker plus
sentence type, one capturing group per field and a trailing ``*`` checksum
pair. Every field group can capture an empty string, which is how an absent
field shows up; only a few fixed-width slots (GGA satellite count, checksum)
insist on content. Group 0 is the whole sentence and is never a field.

The tables are built once per talker set and shared read-only.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from ..constants import DEFAULT_TALKERS, SentenceType

# Field slot building blocks
NUMBER = rb"([0-9]*\.?[0-9]*)"            # unsigned, optional fraction
SIGNED_NUMBER = rb"(-?[0-9]*\.?[0-9]*)"   # optionally negative
TIME = rb"([0-9]*)\.?([0-9]*)"            # HHMMSS + fraction (two fields)
DIGITS = rb"([0-9]*)"                     # free-length integer / text
CHECKSUM = rb"\*([0-9A-Za-z]{2})"


def enum(allowed: bytes) -> bytes:
    """Optional single character from ``allowed``."""
    return rb"([" + allowed + rb"]?)"


def fixed_int(width: int, *, signed: bool = False, optional: bool = False) -> bytes:
    body = (rb"-?" if signed else b"") + rb"[0-9]{%d}" % width
    if optional:
        return rb"((?:" + body + rb")?)"
    return rb"(" + body + rb")"


GGA_FIELDS = (
    TIME + b","                 #  1) Time HHMMSS          2) Fraction
    + NUMBER + b","             #  3) Latitude (DDMM.MMMMM)
    + enum(b"NS") + b","        #  4) Latitude N/S
    + NUMBER + b","             #  5) Longitude (DDDMM.MMMMM)
    + enum(b"EW") + b","        #  6) Longitude E/W
    + rb"([0-9]?)" + b","       #  7) Quality indicator
    + fixed_int(2) + b","       #  8) Satellites used
    + NUMBER + b","             #  9) HDOP
    + SIGNED_NUMBER + b","      # 10) Antenna altitude
    + enum(b"MF") + b","        # 11) Altitude units
    + SIGNED_NUMBER + b","      # 12) Geoidal separation
    + enum(b"MF") + b","        # 13) Separation units
    + NUMBER + b","             # 14) Age of correction
    + DIGITS                    # 15) Correction station ID
    + CHECKSUM                  # 16) Checksum
)

# The comma before the mode field is optional: NMEA 2.0 receivers omit the
# field entirely.
RMC_FIELDS = (
    TIME + b","                 #  1) Time HHMMSS          2) Fraction
    + enum(b"AV") + b","        #  3) Navigation warning A/V
    + NUMBER + b","             #  4) Latitude (DDMM.MMMMM)
    + enum(b"NS") + b","        #  5) Latitude N/S
    + NUMBER + b","             #  6) Longitude (DDDMM.MMMMM)
    + enum(b"EW") + b","        #  7) Longitude E/W
    + NUMBER + b","             #  8) Speed over ground (knots)
    + NUMBER + b","             #  9) Course over ground (degrees true)
    + DIGITS + b","             # 10) Date DDMMYY
    + NUMBER + b","             # 11) Magnetic variation
    + enum(b"EW") + b",?"       # 12) Magnetic variation E/W
    + enum(b"NADE")             # 13) Mode
    + CHECKSUM                  # 14) Checksum
)

VTG_FIELDS = (
    NUMBER + b","               #  1) Course (degrees true)
    + enum(b"T") + b","         #  2) T
    + NUMBER + b","             #  3) Course (degrees magnetic)
    + enum(b"M") + b","         #  4) M
    + NUMBER + b","             #  5) Speed (knots)
    + enum(b"N") + b","         #  6) N
    + NUMBER + b","             #  7) Speed (km/h)
    + enum(b"K") + b",?"        #  8) K
    + enum(b"NADE")             #  9) Mode
    + CHECKSUM                  # 10) Checksum
)

ZDA_FIELDS = (
    TIME + b","                                     # 1) Time HHMMSS  2) Fraction
    + fixed_int(2, optional=True) + b","            # 3) Day
    + fixed_int(2, optional=True) + b","            # 4) Month
    + fixed_int(4, optional=True) + b","            # 5) Year
    + fixed_int(2, signed=True, optional=True) + b","  # 6) Local zone hours
    + fixed_int(2, signed=True, optional=True)      # 7) Local zone minutes
    + CHECKSUM                                      # 8) Checksum
)

_FIELD_LAYOUTS: Mapping[SentenceType, tuple[bytes, tuple[str, ...]]] = {
    SentenceType.GGA: (GGA_FIELDS, (
        "utc_hms", "utc_fraction", "lat", "lat_dir", "lon", "lon_dir",
        "quality", "num_sats", "hdop", "alt", "alt_unit", "geo", "geo_unit",
        "aoc", "station", "check",
    )),
    SentenceType.RMC: (RMC_FIELDS, (
        "utc_hms", "utc_fraction", "nav_warn", "lat", "lat_dir", "lon",
        "lon_dir", "speed_kt", "course_t", "utc_dmy", "var", "var_dir",
        "mode", "check",
    )),
    SentenceType.VTG: (VTG_FIELDS, (
        "course_t", "course_t_c", "course_m", "course_m_c", "speed_kt",
        "speed_kt_c", "speed_km", "speed_km_c", "mode", "check",
    )),
    SentenceType.ZDA: (ZDA_FIELDS, (
        "utc_hms", "utc_fraction", "utc_day", "utc_month", "utc_year",
        "utc_local_hours", "utc_local_minutes", "check",
    )),
}


@dataclass(frozen=True)
class Grammar:
    """One compiled sentence layout."""

    sentence_type: SentenceType
    pattern: "re.Pattern[bytes]"
    field_names: tuple[str, ...]

    @property
    def num_fields(self) -> int:
        """Declared fields, not counting the whole-match group."""
        return len(self.field_names)


def header(talkers: Iterable[str], sentence_type: SentenceType) -> bytes:
    """``\\$GPGGA,`` style literal, with several talkers as an alternation."""
    escaped = [re.escape(t.encode("ascii")) for t in talkers]
    prefix = escaped[0] if len(escaped) == 1 else rb"(?:" + b"|".join(escaped) + rb")"
    return rb"\$" + prefix + sentence_type.value.encode("ascii") + b","


def compile_grammar(sentence_type: SentenceType, talkers: Iterable[str] = DEFAULT_TALKERS) -> Grammar:
    fields_pattern, names = _FIELD_LAYOUTS[sentence_type]
    pattern = re.compile(header(tuple(talkers), sentence_type) + fields_pattern)
    if pattern.groups != len(names):
        raise RuntimeError(
            f"{sentence_type.value} grammar has {pattern.groups} groups for {len(names)} fields"
        )
    return Grammar(sentence_type=sentence_type, pattern=pattern, field_names=names)


@functools.lru_cache(maxsize=None)
def grammar_table(talkers: tuple[str, ...] = DEFAULT_TALKERS) -> Mapping[SentenceType, Grammar]:
    """All grammars for a talker set, compiled on first use then shared."""
    return MappingProxyType(
        {sentence_type: compile_grammar(sentence_type, talkers) for sentence_type in SentenceType}
    )
