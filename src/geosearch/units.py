"""Distance units and the earth radius each one implies.

The radius is the only thing that changes between unit systems: the distance
expression yields an angle in radians and multiplies it by the radius.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from geosearch.core.errors import InvalidUnitsError


class DistanceUnits(str, Enum):
    """Supported unit systems."""

    MILES = "miles"
    KILOMETERS = "kilometers"
    NAUTICAL_MILES = "nautical_miles"


DEFAULT_UNITS = DistanceUnits.MILES

EARTH_RADIUS: Mapping[DistanceUnits, float] = MappingProxyType(
    {
        DistanceUnits.MILES: 3963.0,
        DistanceUnits.KILOMETERS: 6378.0,
        DistanceUnits.NAUTICAL_MILES: 3444.0,
    }
)

# Short symbols accepted for compatibility with existing model configs.
_ALIASES = {
    "kms": DistanceUnits.KILOMETERS,
    "nms": DistanceUnits.NAUTICAL_MILES,
}


def parse_units(units: Any) -> DistanceUnits:
    """Normalise a unit symbol; ``None`` means the default (miles)."""
    if units is None:
        return DEFAULT_UNITS
    if isinstance(units, DistanceUnits):
        return units
    if not isinstance(units, str):
        raise InvalidUnitsError(units)
    symbol = units.strip().lower()
    if symbol in _ALIASES:
        return _ALIASES[symbol]
    try:
        return DistanceUnits(symbol)
    except ValueError:
        raise InvalidUnitsError(units) from None


def radius_for(units: Any = None) -> float:
    return EARTH_RADIUS[parse_units(units)]


__all__ = [
    "DistanceUnits",
    "DEFAULT_UNITS",
    "EARTH_RADIUS",
    "parse_units",
    "radius_for",
]
