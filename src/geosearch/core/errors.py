"""Project-wide custom exceptions.

All failures raised by geosearch derive from :class:`GeosearchError` so that
callers can catch the whole family without importing SQLAlchemy errors.

Installation-time errors (``UnsupportedTargetError``, ``InvalidUnitsError``,
``ColumnCollisionError``, ``AlreadyInstalledError``) abort ``install`` before
anything is attached to the model. Query-time errors (``MissingCoordinateError``,
``NotInstalledError``, ``UnreferencedTableError``) are raised synchronously
from the query helpers and never overlap with the installation family.
"""
from __future__ import annotations

from typing import Any


class GeosearchError(Exception):
    """Base class for all geosearch exceptions."""


class UnsupportedTargetError(GeosearchError):
    """Raised when a table is missing or its dialect lacks the math functions.

    ``install`` reports this as a disabled status (``False``) unless called
    with ``strict=True``.
    """
    def __init__(self, target: str, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(f"Geosearch unsupported for {target}: {reason}")


class InvalidUnitsError(GeosearchError):
    """Raised when ``distance_units`` is set to an unknown symbol."""
    def __init__(self, units: Any):
        self.units = units
        super().__init__(
            f"Units must be miles, kilometers, or nautical_miles (got {units!r})"
        )


class ColumnCollisionError(GeosearchError):
    """Raised when the distance column would shadow a real column."""
    def __init__(self, column: str, table: str | None = None):
        self.column = column
        self.table = table
        where = f" on {table}" if table else ""
        super().__init__(f"{column} is already defined{where}")


class AlreadyInstalledError(GeosearchError):
    """Raised when geosearch is installed twice on the same model."""
    def __init__(self, model: str):
        self.model = model
        super().__init__(f"Geosearch is already installed on {model}")


class NotInstalledError(GeosearchError):
    """Raised when a query helper is given a model without geosearch."""
    def __init__(self, model: str):
        self.model = model
        super().__init__(f"Geosearch is not installed on {model}")


class UnreferencedTableError(GeosearchError):
    """Raised when a statement has no FROM carrying the model's lat/lng columns."""
    def __init__(self, model: str, table: str):
        self.model = model
        self.table = table
        super().__init__(f"Statement does not select from {table!r} (needed by {model})")


class MissingCoordinateError(GeosearchError):
    """Raised when an origin cannot be resolved to a latitude/longitude pair.

    Carries the offending origin for logging.
    """
    def __init__(self, origin: Any, detail: str = "Cannot find Lat/Lng."):
        self.origin = origin
        super().__init__(detail)


__all__ = [
    "GeosearchError",
    "UnsupportedTargetError",
    "InvalidUnitsError",
    "ColumnCollisionError",
    "AlreadyInstalledError",
    "MissingCoordinateError",
    "NotInstalledError",
    "UnreferencedTableError",
]
