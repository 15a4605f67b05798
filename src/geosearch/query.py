"""Distance-aware helpers for ``select()`` statements.

Every helper takes the statement and the geosearch-enabled model explicitly
and returns a new statement; SQLAlchemy selects are generative so the input
is never modified.

    stmt = distance_from(select(Place.name), Place, [34, -84])
    stmt = order_by_distance(stmt, Place, [34, -84]).limit(10)
    stmt = distance_boundary(select(Place), Place, Location.first, 20)
"""

from __future__ import annotations

import logging
from typing import Any, NamedTuple

from sqlalchemy import Select
from sqlalchemy.orm import with_expression
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.selectable import FromClause

from geosearch.core.errors import UnreferencedTableError
from geosearch.expression import build_distance_expression
from geosearch.origin import resolve
from geosearch.plugin import GeoCapable, TableGeoConfig, get_geo_config

logger = logging.getLogger("geosearch.query")


class _Source(NamedTuple):
    from_: FromClause
    lat: ColumnElement
    lng: ColumnElement


def _source_for(query: Select, model: type[GeoCapable], config: TableGeoConfig) -> _Source:
    """The FROM clause (and its lat/lng columns) the distance runs against.

    The first FROM whose columns derive from the model's lat/lng columns
    wins: the table itself, an alias of it, a subquery over it, or a join
    containing it. A statement without any FROM yet uses the model's table.
    """
    table = model.__table__
    lat = table.c[config.latitude_column]
    lng = table.c[config.longitude_column]
    froms = query.get_final_froms()
    if not froms:
        return _Source(table, lat, lng)
    for from_ in froms:
        src_lat = from_.corresponding_column(lat)
        src_lng = from_.corresponding_column(lng)
        if src_lat is not None and src_lng is not None:
            return _Source(from_, src_lat, src_lng)
    raise UnreferencedTableError(getattr(model, "__qualname__", repr(model)), table.name)


def _build(
    query: Select, model: type[GeoCapable], config: TableGeoConfig, origin: Any
) -> tuple[_Source, ColumnElement[float]]:
    coordinate = resolve(origin, config.latitude_attr, config.longitude_attr)
    source = _source_for(query, model, config)
    return source, build_distance_expression(coordinate, source.lat, source.lng, config.radius)


def distance_expression(
    query: Select, model: type[GeoCapable], origin: Any
) -> ColumnElement[float]:
    """Per-row distance from ``origin`` for rows of ``model`` in ``query``.

    Raises MissingCoordinateError for an unusable origin.
    """
    _, expr = _build(query, model, get_geo_config(model), origin)
    return expr


def _selects_entity(query: Select, model: type[GeoCapable]) -> bool:
    return any(desc.get("entity") is model and desc.get("expr") is model
               for desc in query.column_descriptions)


def distance_from(query: Select, model: type[GeoCapable], origin: Any) -> Select:
    """Add the distance as a column labelled with the configured name.

    An empty selection means "all columns"; since adding a column would
    narrow the result to just that column, the columns of every FROM are
    selected explicitly first. When the statement loads ``model`` instances
    the value is also delivered to their distance attribute.
    """
    config = get_geo_config(model)
    source, expr = _build(query, model, config, origin)

    if not query.selected_columns:
        froms = query.get_final_froms() or [source.from_]
        query = query.add_columns(*(c for from_ in froms for c in from_.c))
    elif _selects_entity(query, model):
        query = query.options(with_expression(getattr(model, config.distance_column), expr))

    logger.debug(
        "geosearch.query.distance_from",
        extra={"table": model.__table__.name, "distance_column": config.distance_column},
    )
    return query.add_columns(expr.label(config.distance_column))


def distance_boundary(
    query: Select, model: type[GeoCapable], origin: Any, limit: float
) -> Select:
    """Keep only rows within ``limit`` of ``origin``; the selection is untouched."""
    expr = distance_expression(query, model, origin)
    logger.debug(
        "geosearch.query.distance_boundary",
        extra={"table": model.__table__.name, "limit": limit},
    )
    return query.where(expr <= limit)


def order_by_distance(
    query: Select, model: type[GeoCapable], origin: Any, descending: bool = False
) -> Select:
    expr = distance_expression(query, model, origin)
    return query.order_by(expr.desc() if descending else expr.asc())


__all__ = [
    "distance_expression",
    "distance_from",
    "distance_boundary",
    "order_by_distance",
]
