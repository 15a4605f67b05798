"""Great-circle distance as a SQL expression.

Spherical law of cosines::

    radius * ACOS(LEAST(1,
        COS(o_lat) * COS(o_lng) * COS(RADIANS(lat)) * COS(RADIANS(lng))
      + COS(o_lat) * SIN(o_lng) * COS(RADIANS(lat)) * SIN(RADIANS(lng))
      + SIN(o_lat) * SIN(RADIANS(lat))
    ))

The origin is converted to radians in Python; row columns are converted in
SQL because they vary per row. The ``LEAST(1, ...)`` clamp keeps rounding
error from pushing the cosine sum above 1, outside the domain of ACOS, which
happens when a row sits exactly on the origin.
"""

from __future__ import annotations

import math

from sqlalchemy import Float, func, literal
from sqlalchemy.sql.elements import ColumnElement

from geosearch.origin import Coordinate


def _const(value: float) -> ColumnElement[float]:
    return literal(value, Float)


def build_distance_expression(
    origin: Coordinate,
    lat_column: ColumnElement,
    lng_column: ColumnElement,
    radius: float,
) -> ColumnElement[float]:
    """Distance from ``origin`` to each row, in the units ``radius`` implies.

    ``lat_column`` / ``lng_column`` should be columns of the FROM clause the
    expression will run against; the compiler then renders them qualified
    with that table (or alias) name and quoted for the dialect.
    """
    o_lat = math.radians(origin.lat)
    o_lng = math.radians(origin.lng)

    row_lat = func.radians(lat_column, type_=Float)
    row_lng = func.radians(lng_column, type_=Float)

    cos_o_lat = func.cos(_const(o_lat), type_=Float)
    cos_sum = (
        cos_o_lat
        * func.cos(_const(o_lng), type_=Float)
        * func.cos(row_lat, type_=Float)
        * func.cos(row_lng, type_=Float)
        + cos_o_lat
        * func.sin(_const(o_lng), type_=Float)
        * func.cos(row_lat, type_=Float)
        * func.sin(row_lng, type_=Float)
        + func.sin(_const(o_lat), type_=Float)
        * func.sin(row_lat, type_=Float)
    )
    clamped = func.least(_const(1.0), cos_sum, type_=Float)
    return func.acos(clamped, type_=Float) * _const(float(radius))


def great_circle_distance(a: Coordinate, b: Coordinate, radius: float) -> float:
    """Python twin of :func:`build_distance_expression` for two known points."""
    a_lat, a_lng = math.radians(a.lat), math.radians(a.lng)
    b_lat, b_lng = math.radians(b.lat), math.radians(b.lng)
    cos_sum = (
        math.cos(a_lat) * math.cos(a_lng) * math.cos(b_lat) * math.cos(b_lng)
        + math.cos(a_lat) * math.sin(a_lng) * math.cos(b_lat) * math.sin(b_lng)
        + math.sin(a_lat) * math.sin(b_lat)
    )
    return radius * math.acos(max(-1.0, min(1.0, cos_sum)))


__all__ = ["build_distance_expression", "great_circle_distance"]
