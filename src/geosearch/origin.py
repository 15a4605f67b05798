"""Origin resolution.

An origin is whatever the caller measures distance from. Two shapes are
accepted: an ordered ``[lat, lng]`` pair, or any object exposing attributes
named after the model's latitude/longitude columns (typically another mapped
row). Both are normalised into one of two tagged variants before resolution
so that :func:`resolve` never has to inspect arbitrary runtime types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple, Union

from geosearch.core.errors import MissingCoordinateError


class Coordinate(NamedTuple):
    """Latitude / longitude in decimal degrees."""

    lat: float
    lng: float


@dataclass(frozen=True)
class PairOrigin:
    lat: Any
    lng: Any


@dataclass(frozen=True)
class AccessorOrigin:
    obj: Any
    lat_attr: str
    lng_attr: str


Origin = Union[PairOrigin, AccessorOrigin]


def to_origin(value: Any, lat_attr: str, lng_attr: str) -> Origin:
    """Classify a caller-supplied origin into one of the tagged variants."""
    if isinstance(value, (PairOrigin, AccessorOrigin)):
        return value
    if isinstance(value, Coordinate):
        return PairOrigin(value.lat, value.lng)
    if isinstance(value, (list, tuple)):
        if len(value) != 2:
            raise MissingCoordinateError(
                value, f"Origin pair must have exactly two items (got {len(value)})"
            )
        return PairOrigin(value[0], value[1])
    if value is not None and hasattr(value, lat_attr) and hasattr(value, lng_attr):
        return AccessorOrigin(value, lat_attr, lng_attr)
    raise MissingCoordinateError(value)


def _as_degrees(origin: Any, value: Any) -> float:
    # bool is an int subclass but never a coordinate
    if value is None or isinstance(value, bool):
        raise MissingCoordinateError(origin)
    if isinstance(value, str) and not value.strip():
        raise MissingCoordinateError(origin)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise MissingCoordinateError(origin, f"Not a numeric coordinate: {value!r}") from None


def resolve(origin: Any, lat_attr: str = "lat", lng_attr: str = "lng") -> Coordinate:
    """Resolve ``origin`` to a :class:`Coordinate`.

    Raises MissingCoordinateError when the origin is neither a two item pair
    nor an object exposing both attributes, or when either value is blank or
    not numeric. No range checks are applied; see :func:`validate_range`.
    """
    variant = to_origin(origin, lat_attr, lng_attr)
    if isinstance(variant, PairOrigin):
        lat, lng = variant.lat, variant.lng
    else:
        lat = getattr(variant.obj, variant.lat_attr, None)
        lng = getattr(variant.obj, variant.lng_attr, None)
    return Coordinate(_as_degrees(origin, lat), _as_degrees(origin, lng))


def validate_range(coordinate: Coordinate) -> Coordinate:
    """Opt-in check that a coordinate lies on the globe.

    Resolution is permissive on purpose; callers that want strict input
    validation call this on the result of :func:`resolve`.
    """
    if not -90.0 <= coordinate.lat <= 90.0:
        raise MissingCoordinateError(coordinate, f"Latitude out of range: {coordinate.lat}")
    if not -180.0 <= coordinate.lng <= 180.0:
        raise MissingCoordinateError(coordinate, f"Longitude out of range: {coordinate.lng}")
    return coordinate


__all__ = [
    "Coordinate",
    "PairOrigin",
    "AccessorOrigin",
    "Origin",
    "to_origin",
    "resolve",
    "validate_range",
]
