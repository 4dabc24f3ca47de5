"""Latitude/longitude decoding strategies.

Receivers and consumers disagree on where the hemisphere goes. ``signed``
folds S and W into a negative decimal value; ``hemisphere`` keeps the value
positive and stores the N/S or E/W character next to it. Both mark the
coordinate valid only when its value field was present and numeric.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AbstractSet

from ..constants import HEMISPHERE_LAT, HEMISPHERE_LON, CoordinateConvention
from ..records.nmea_types import FixRecord, RecommendedMinimumRecord
from .field_codec import deg_min_to_dec_deg, parse_float, pick_enum

PositionRecord = FixRecord | RecommendedMinimumRecord

_AXES = {
    "lat": (HEMISPHERE_LAT, "S"),
    "lon": (HEMISPHERE_LON, "W"),
}


class CoordinateStrategy(ABC):
    convention: CoordinateConvention

    def apply(self, record: PositionRecord, axis: str, value: bytes, hemisphere: bytes) -> None:
        """Decode one coordinate pair into ``record.<axis>`` and its flags."""
        allowed, negative = _AXES[axis]
        packed = parse_float(value)
        if packed is None:
            setattr(record, axis, 0.0)
            if not value:
                setattr(record, f"{axis}_valid", False)
                self._absent(record, axis)
            return
        setattr(record, f"{axis}_valid", True)
        self._store(record, axis, packed, hemisphere, allowed, negative)

    @abstractmethod
    def _store(
        self,
        record: PositionRecord,
        axis: str,
        packed: float,
        hemisphere: bytes,
        allowed: AbstractSet[str],
        negative: str,
    ) -> None:
        ...

    def _absent(self, record: PositionRecord, axis: str) -> None:
        pass


class SignedCoordinates(CoordinateStrategy):
    convention = CoordinateConvention.SIGNED

    def _store(self, record, axis, packed, hemisphere, allowed, negative):
        setattr(record, axis, deg_min_to_dec_deg(packed, hemisphere == negative.encode()))


class HemisphereCoordinates(CoordinateStrategy):
    convention = CoordinateConvention.HEMISPHERE

    def _store(self, record, axis, packed, hemisphere, allowed, negative):
        setattr(record, axis, deg_min_to_dec_deg(packed))
        direction_attr = f"{axis}_dir"
        setattr(record, direction_attr, pick_enum(hemisphere, allowed, getattr(record, direction_attr)))

    def _absent(self, record, axis):
        setattr(record, f"{axis}_dir", None)


_STRATEGIES = {
    CoordinateConvention.SIGNED: SignedCoordinates,
    CoordinateConvention.HEMISPHERE: HemisphereCoordinates,
}


def coordinate_strategy(convention: CoordinateConvention) -> CoordinateStrategy:
    return _STRATEGIES[CoordinateConvention(convention)]()
