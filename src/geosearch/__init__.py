"""Great-circle distance search for SQLAlchemy models."""

from geosearch.core.errors import (
    AlreadyInstalledError,
    ColumnCollisionError,
    GeosearchError,
    InvalidUnitsError,
    MissingCoordinateError,
    NotInstalledError,
    UnreferencedTableError,
    UnsupportedTargetError,
)
from geosearch.expression import build_distance_expression, great_circle_distance
from geosearch.origin import AccessorOrigin, Coordinate, PairOrigin, resolve, validate_range
from geosearch.plugin import (
    GeoCapable,
    GeosearchOptions,
    TableGeoConfig,
    ainstall,
    get_geo_config,
    install,
    is_geo_capable,
)
from geosearch.query import distance_boundary, distance_expression, distance_from, order_by_distance
from geosearch.units import DistanceUnits, EARTH_RADIUS, radius_for

__all__ = [
    "AlreadyInstalledError",
    "ColumnCollisionError",
    "GeosearchError",
    "InvalidUnitsError",
    "MissingCoordinateError",
    "NotInstalledError",
    "UnreferencedTableError",
    "UnsupportedTargetError",
    "build_distance_expression",
    "great_circle_distance",
    "AccessorOrigin",
    "Coordinate",
    "PairOrigin",
    "resolve",
    "validate_range",
    "GeoCapable",
    "GeosearchOptions",
    "TableGeoConfig",
    "ainstall",
    "get_geo_config",
    "install",
    "is_geo_capable",
    "distance_boundary",
    "distance_expression",
    "distance_from",
    "order_by_distance",
    "DistanceUnits",
    "EARTH_RADIUS",
    "radius_for",
]
