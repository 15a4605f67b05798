import logging

import pytest
from pydantic import ValidationError
from sqlalchemy import create_engine, inspect as sa_inspect

from geosearch.core.config import Settings
from geosearch.core.errors import (
    AlreadyInstalledError,
    ColumnCollisionError,
    InvalidUnitsError,
    NotInstalledError,
    UnsupportedTargetError,
)
from geosearch.plugin import (
    CONFIG_ATTR,
    TableGeoConfig,
    get_geo_config,
    install,
    is_geo_capable,
)
from geosearch.units import DistanceUnits


def _untouched(model, name="distance"):
    return CONFIG_ATTR not in vars(model) and not sa_inspect(model).has_property(name)


@pytest.mark.unit
def test_install_with_defaults(models, engine, settings):
    assert install(engine, models.Place, settings=settings) is True
    config = get_geo_config(models.Place)
    assert config == TableGeoConfig(
        latitude_column="lat",
        longitude_column="lng",
        distance_column="distance",
        radius=3963,
        units=DistanceUnits.MILES,
        latitude_attr="lat",
        longitude_attr="lng",
    )
    assert is_geo_capable(models.Place)
    assert sa_inspect(models.Place).has_property("distance")
    # unloaded query expressions read as None
    assert models.Place(name="x", lat=1, lng=2).distance is None


@pytest.mark.unit
def test_install_with_options(models, engine, settings):
    ok = install(
        engine,
        models.Location,
        settings=settings,
        latitude_column="latitude",
        longitude_column="longitude",
        distance_column="my_distance",
        distance_units="nms",
    )
    assert ok
    config = get_geo_config(models.Location)
    assert config.radius == 3444
    assert config.units is DistanceUnits.NAUTICAL_MILES
    assert config.distance_column == "my_distance"


@pytest.mark.unit
def test_default_units_come_from_settings(models, engine):
    settings = Settings(supported_dialects=["sqlite"], default_distance_units="kilometers")
    assert install(engine, models.Place, settings=settings)
    assert get_geo_config(models.Place).radius == 6378


@pytest.mark.unit
def test_unsupported_dialect_is_soft_failure(models, engine, caplog):
    mysql_only = Settings(supported_dialects=["mysql"])
    with caplog.at_level(logging.WARNING, logger="geosearch.plugin"):
        assert install(engine, models.Place, settings=mysql_only) is False
    assert _untouched(models.Place)
    assert any(r.getMessage() == "geosearch.install.disabled" for r in caplog.records)
    with pytest.raises(NotInstalledError):
        get_geo_config(models.Place)


@pytest.mark.unit
def test_missing_table_is_soft_failure(models, settings):
    empty = create_engine("sqlite://")
    assert install(empty, models.Place, settings=settings) is False
    assert _untouched(models.Place)
    with pytest.raises(UnsupportedTargetError) as exc:
        install(empty, models.Place, settings=settings, strict=True)
    assert "does not exist" in exc.value.reason
    empty.dispose()


@pytest.mark.unit
def test_invalid_units(models, engine, settings):
    with pytest.raises(InvalidUnitsError):
        install(engine, models.Place, settings=settings, distance_units="leagues")
    assert _untouched(models.Place)


@pytest.mark.unit
def test_distance_column_collision(models, engine, settings):
    with pytest.raises(ColumnCollisionError) as exc:
        install(
            engine,
            models.Location,
            settings=settings,
            latitude_column="latitude",
            longitude_column="longitude",
        )
    assert exc.value.column == "distance"
    assert CONFIG_ATTR not in vars(models.Location)
    assert not is_geo_capable(models.Location)


@pytest.mark.unit
def test_distance_column_may_not_shadow_attributes(models, engine, settings):
    for name in ("name", "metadata"):
        with pytest.raises(ColumnCollisionError):
            install(engine, models.Place, settings=settings, distance_column=name)
    assert CONFIG_ATTR not in vars(models.Place)


@pytest.mark.unit
def test_unknown_lat_lng_columns(models, engine, settings):
    # Location names them latitude/longitude, not lat/lng
    with pytest.raises(UnsupportedTargetError):
        install(engine, models.Location, settings=settings, distance_column="d")
    assert _untouched(models.Location, "d")


@pytest.mark.unit
def test_unknown_option_rejected(models, engine, settings):
    with pytest.raises(ValidationError):
        install(engine, models.Place, settings=settings, distance_colum="d")


@pytest.mark.unit
def test_reinstall_rejected(models, engine, settings):
    assert install(engine, models.Place, settings=settings)
    with pytest.raises(AlreadyInstalledError):
        install(engine, models.Place, settings=settings, distance_units="kilometers")
    assert get_geo_config(models.Place).radius == 3963


@pytest.mark.unit
def test_failed_accessor_registration_leaves_no_config(models, engine, settings, monkeypatch):
    from sqlalchemy.orm import Mapper

    def refuse(self, key, prop):
        raise RuntimeError("mapper is configured")

    monkeypatch.setattr(Mapper, "add_property", refuse)
    with pytest.raises(RuntimeError):
        install(engine, models.Place, settings=settings)
    assert _untouched(models.Place)
    assert not is_geo_capable(models.Place)
