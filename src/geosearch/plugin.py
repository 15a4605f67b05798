"""One-time geosearch installation on a mapped model.

Usage::

    class Place(Base):
        __tablename__ = "place"
        id: Mapped[int] = mapped_column(primary_key=True)
        name: Mapped[str] = mapped_column(String(80))
        lat: Mapped[float] = mapped_column(Float)
        lng: Mapped[float] = mapped_column(Float)

    with engine.connect() as conn:
        install(conn, Place, distance_units="kilometers")

``install`` validates the target and the options, then attaches an immutable
:class:`TableGeoConfig` to the model as ``__geosearch__`` and registers a
``query_expression`` attribute named after the distance column. Nothing is
attached unless every check passes.

An unsupported target (missing table, dialect without the trigonometric
functions) is a soft failure: a warning is logged and ``False`` returned so
the caller can carry on without geosearch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Table, inspect as sa_inspect
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import query_expression

from geosearch.core.config import Settings, get_settings
from geosearch.core.errors import (
    AlreadyInstalledError,
    ColumnCollisionError,
    NotInstalledError,
    UnsupportedTargetError,
)
from geosearch.units import DistanceUnits, EARTH_RADIUS, parse_units

logger = logging.getLogger("geosearch.plugin")

CONFIG_ATTR = "__geosearch__"


@dataclass(frozen=True)
class TableGeoConfig:
    """Per-model configuration, fixed at install time."""

    latitude_column: str
    longitude_column: str
    distance_column: str
    radius: float
    units: DistanceUnits
    # mapped attribute names of the lat/lng columns; read from origin objects
    latitude_attr: str
    longitude_attr: str


class GeoCapable(Protocol):
    """A mapped class with geosearch installed."""

    __geosearch__: TableGeoConfig
    __table__: Table


class GeosearchOptions(BaseModel):
    """Options recognised by :func:`install`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    latitude_column: str = Field(default="lat", min_length=1)
    longitude_column: str = Field(default="lng", min_length=1)
    distance_column: str = Field(default="distance", min_length=1)
    # left untyped so unknown symbols raise InvalidUnitsError, not a ValidationError
    distance_units: Any = None


def _target_name(model: type) -> str:
    return f"{model.__module__}.{model.__qualname__}"


def _check_target(bind: Connection | Engine, model: type, settings: Settings) -> None:
    table = model.__table__  # type: ignore[attr-defined]
    if not sa_inspect(bind).has_table(table.name, schema=table.schema):
        raise UnsupportedTargetError(_target_name(model), f"table {table.name!r} does not exist")
    dialect = bind.dialect.name.lower()
    if dialect not in settings.supported_dialects:
        raise UnsupportedTargetError(
            _target_name(model),
            f"dialect {dialect!r} is not one of {', '.join(settings.supported_dialects)}",
        )


def _build_config(model: type, opts: GeosearchOptions, settings: Settings) -> TableGeoConfig:
    units = parse_units(
        opts.distance_units if opts.distance_units is not None else settings.default_distance_units
    )

    table = model.__table__  # type: ignore[attr-defined]
    mapper = sa_inspect(model)
    declared = {c.name: c for c in table.columns}

    attrs = {}
    for option in ("latitude_column", "longitude_column"):
        name = getattr(opts, option)
        if name not in declared:
            raise UnsupportedTargetError(
                _target_name(model), f"{option} {name!r} is not a column of {table.name!r}"
            )
        attrs[option] = mapper.get_property_by_column(declared[name]).key

    dist_col = opts.distance_column
    if dist_col in declared or hasattr(model, dist_col):
        raise ColumnCollisionError(dist_col, table.name)

    return TableGeoConfig(
        latitude_column=opts.latitude_column,
        longitude_column=opts.longitude_column,
        distance_column=dist_col,
        radius=EARTH_RADIUS[units],
        units=units,
        latitude_attr=attrs["latitude_column"],
        longitude_attr=attrs["longitude_column"],
    )


def install(
    bind: Connection | Engine,
    model: type,
    *,
    strict: bool = False,
    settings: Optional[Settings] = None,
    **options: Any,
) -> bool:
    """Enable geosearch on ``model``.

    Returns ``True`` once enabled, ``False`` when the target is unsupported
    (or raises ``UnsupportedTargetError`` when ``strict``). Raises
    InvalidUnitsError, ColumnCollisionError and AlreadyInstalledError for
    configuration mistakes.
    """
    settings = settings or get_settings()
    opts = GeosearchOptions(**options)

    if CONFIG_ATTR in vars(model):
        raise AlreadyInstalledError(_target_name(model))

    try:
        _check_target(bind, model, settings)
    except UnsupportedTargetError as exc:
        if strict:
            raise
        logger.warning(
            "geosearch.install.disabled",
            extra={"model": exc.target, "reason": exc.reason},
        )
        return False

    config = _build_config(model, opts, settings)

    # accessor first: the config marks the model as enabled, so it goes last
    sa_inspect(model).add_property(config.distance_column, query_expression())
    setattr(model, CONFIG_ATTR, config)
    logger.info(
        "geosearch.install.enabled",
        extra={
            "model": _target_name(model),
            "table": model.__table__.name,  # type: ignore[attr-defined]
            "latitude_column": config.latitude_column,
            "longitude_column": config.longitude_column,
            "distance_column": config.distance_column,
            "units": config.units.value,
        },
    )
    return True


async def ainstall(engine: AsyncEngine, model: type, **kwargs: Any) -> bool:
    """:func:`install` for async engines; introspection runs via ``run_sync``."""
    async with engine.connect() as conn:
        return await conn.run_sync(install, model, **kwargs)


def is_geo_capable(model: Any) -> bool:
    return isinstance(getattr(model, CONFIG_ATTR, None), TableGeoConfig)


def get_geo_config(model: type[GeoCapable]) -> TableGeoConfig:
    config = getattr(model, CONFIG_ATTR, None)
    if not isinstance(config, TableGeoConfig):
        raise NotInstalledError(getattr(model, "__qualname__", repr(model)))
    return config


__all__ = [
    "TableGeoConfig",
    "GeoCapable",
    "GeosearchOptions",
    "install",
    "ainstall",
    "is_geo_capable",
    "get_geo_config",
]
