"""Decoded sentence records.

One record per sentence type, updated in place by its decoder. Fields keep
their last decoded value until the next successful decode; unit and
hemisphere characters are ``None`` until a valid character arrives.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, replace
from typing import Optional, TypeVar

from ..constants import AGE_OF_CORRECTION_ABSENT, FIX_QUALITY_DESCRIPTIONS, KMH_PER_KNOT

R = TypeVar("R", bound="NMEARecord")


def _utc_time(hours: int, minutes: int, seconds: int, fraction: int, digits: int) -> Optional[dt.time]:
    micro = 0
    if digits > 0:
        micro = int(round(fraction * 10 ** (6 - digits))) if digits <= 6 else fraction // 10 ** (digits - 6)
    try:
        return dt.time(hours, minutes, seconds, micro, tzinfo=dt.timezone.utc)
    except ValueError:
        return None


@dataclass(slots=True)
class NMEARecord:
    """Fields shared by every decoded sentence."""

    updated_at: Optional[int] = None  # tick (ms) of the last successful decode
    check: str = ""  # checksum characters as received
    checksum_valid: bool = False

    @property
    def has_data(self) -> bool:
        return self.updated_at is not None

    def copy(self: R) -> R:
        return replace(self)


@dataclass(slots=True)
class FixRecord(NMEARecord):
    """GGA: time, position, fix quality, satellites, altitude."""

    utc_h: int = 0
    utc_m: int = 0
    utc_s: int = 0
    utc_fraction: int = 0
    utc_fraction_digits: int = 0

    lat: float = 0.0
    lat_dir: Optional[str] = None
    lat_valid: bool = False
    lon: float = 0.0
    lon_dir: Optional[str] = None
    lon_valid: bool = False

    quality: int = 0
    num_sats: int = 0
    hdop: float = 0.0

    alt: float = 0.0
    alt_unit: Optional[str] = None
    geo: float = 0.0
    geo_unit: Optional[str] = None

    aoc: int = AGE_OF_CORRECTION_ABSENT
    station: str = ""

    def utc_time(self) -> Optional[dt.time]:
        return _utc_time(self.utc_h, self.utc_m, self.utc_s, self.utc_fraction, self.utc_fraction_digits)

    def has_position(self) -> bool:
        return self.lat_valid and self.lon_valid and self.quality > 0

    @property
    def quality_description(self) -> str:
        return FIX_QUALITY_DESCRIPTIONS.get(self.quality, f"Unknown ({self.quality})")


@dataclass(slots=True)
class RecommendedMinimumRecord(NMEARecord):
    """RMC: time, date, warning flag, position, speed, course, variation."""

    utc_h: int = 0
    utc_m: int = 0
    utc_s: int = 0
    utc_fraction: int = 0
    utc_fraction_digits: int = 0

    nav_warn: Optional[str] = None

    lat: float = 0.0
    lat_dir: Optional[str] = None
    lat_valid: bool = False
    lon: float = 0.0
    lon_dir: Optional[str] = None
    lon_valid: bool = False

    speed_kt: float = 0.0
    course_t: float = 0.0

    utc_day: int = 0
    utc_month: int = 0
    utc_year: int = 0

    var: float = 0.0
    var_dir: Optional[str] = None
    mode: Optional[str] = None

    def utc_time(self) -> Optional[dt.time]:
        return _utc_time(self.utc_h, self.utc_m, self.utc_s, self.utc_fraction, self.utc_fraction_digits)

    def utc_datetime(self) -> Optional[dt.datetime]:
        time_obj = self.utc_time()
        if time_obj is None:
            return None
        try:
            return dt.datetime.combine(dt.date(self.utc_year, self.utc_month, self.utc_day), time_obj)
        except ValueError:
            return None

    def has_position(self) -> bool:
        return self.lat_valid and self.lon_valid and self.nav_warn == "A"

    @property
    def speed_kmh(self) -> float:
        return self.speed_kt * KMH_PER_KNOT


@dataclass(slots=True)
class CourseSpeedRecord(NMEARecord):
    """VTG: course over ground and ground speed."""

    course_t: float = 0.0
    course_t_c: Optional[str] = None
    course_m: float = 0.0
    course_m_c: Optional[str] = None
    speed_kt: float = 0.0
    speed_kt_c: Optional[str] = None
    speed_km: float = 0.0
    speed_km_c: Optional[str] = None
    mode: Optional[str] = None


@dataclass(slots=True)
class TimeDateRecord(NMEARecord):
    """ZDA: UTC time, date and local zone offset."""

    utc_h: int = 0
    utc_m: int = 0
    utc_s: int = 0
    utc_fraction: int = 0
    utc_fraction_digits: int = 0

    utc_day: int = 0
    utc_month: int = 0
    utc_year: int = 0

    utc_local_hours: int = 0
    utc_local_minutes: int = 0

    def utc_time(self) -> Optional[dt.time]:
        return _utc_time(self.utc_h, self.utc_m, self.utc_s, self.utc_fraction, self.utc_fraction_digits)

    def utc_datetime(self) -> Optional[dt.datetime]:
        time_obj = self.utc_time()
        if time_obj is None:
            return None
        try:
            return dt.datetime.combine(dt.date(self.utc_year, self.utc_month, self.utc_day), time_obj)
        except ValueError:
            return None

    def local_offset(self) -> dt.timedelta:
        """Local zone offset; the minutes take the sign of the hours."""
        minutes = abs(self.utc_local_minutes)
        if self.utc_local_hours < 0 or self.utc_local_minutes < 0:
            minutes = -minutes
        return dt.timedelta(hours=self.utc_local_hours, minutes=minutes)
