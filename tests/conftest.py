import math
from types import SimpleNamespace

import pytest
from sqlalchemy import Float, String, create_engine, event, insert
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from geosearch.core.config import Settings


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: pure query construction tests")
    config.addinivalue_line("markers", "integration: tests that execute SQL against sqlite")


def make_models():
    """Fresh mapped classes per test; installation mutates the model."""

    class Base(DeclarativeBase):
        pass

    class Place(Base):
        __tablename__ = "place"
        id: Mapped[int] = mapped_column(primary_key=True)
        name: Mapped[str] = mapped_column(String(80))
        lat: Mapped[float] = mapped_column(Float)
        lng: Mapped[float] = mapped_column(Float)

    class Location(Base):
        __tablename__ = "location"
        id: Mapped[int] = mapped_column(primary_key=True)
        latitude: Mapped[float] = mapped_column(Float)
        longitude: Mapped[float] = mapped_column(Float)
        # real column named like the default distance column
        distance: Mapped[float | None] = mapped_column(Float, nullable=True)

    return SimpleNamespace(Base=Base, Place=Place, Location=Location)


def register_math_functions(dbapi_connection, _record):
    # sqlite builds vary in whether these exist; make them deterministic
    dbapi_connection.create_function("acos", 1, math.acos)
    dbapi_connection.create_function("cos", 1, math.cos)
    dbapi_connection.create_function("sin", 1, math.sin)
    dbapi_connection.create_function("radians", 1, math.radians)
    dbapi_connection.create_function("least", 2, min)


@pytest.fixture()
def models():
    return make_models()


@pytest.fixture()
def settings():
    """Settings that accept sqlite so the formula can run in tests."""
    return Settings(supported_dialects=["mysql", "mariadb", "sqlite"])


@pytest.fixture()
def engine(models):
    eng = create_engine("sqlite://")
    event.listen(eng, "connect", register_math_functions)
    models.Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


PLACES = [
    {"id": 1, "name": "origin", "lat": 34.0, "lng": -84.0},
    {"id": 2, "name": "near", "lat": 34.1, "lng": -84.1},
    {"id": 3, "name": "far", "lat": 40.7, "lng": -74.0},
    {"id": 4, "name": "equator", "lat": 0.0, "lng": 90.0},
]


@pytest.fixture()
def geo_place(models, engine, settings):
    """Place with geosearch installed and a few rows loaded."""
    from geosearch.plugin import install

    with engine.begin() as conn:
        assert install(conn, models.Place, settings=settings)
        conn.execute(insert(models.Place.__table__), PLACES)
    return models.Place
