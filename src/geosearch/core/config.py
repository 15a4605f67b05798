from __future__ import annotations
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AliasChoices, field_validator
from functools import lru_cache


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL"))

    # Applied when a model installs geosearch without ``distance_units``.
    # Validated against the units table at install time, not here, so that a
    # bad value surfaces as InvalidUnitsError like any other bad option.
    default_distance_units: str = Field(
        default="miles",
        validation_alias=AliasChoices("GEOSEARCH_DISTANCE_UNITS"),
        description="Distance units used when a model does not choose its own (miles, kilometers, nautical_miles).",
    )
    # SQLAlchemy dialect names (``engine.dialect.name``) that provide ACOS,
    # COS, SIN, RADIANS and LEAST. Set from the environment as a JSON list.
    supported_dialects: list[str] = Field(
        default=["mysql", "mariadb"],
        validation_alias=AliasChoices("GEOSEARCH_SUPPORTED_DIALECTS"),
        description="Dialect names geosearch may be installed on.",
    )

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True
    )

    @field_validator("supported_dialects")
    @classmethod
    def _lower_dialects(cls, value: list[str]) -> list[str]:
        return [d.lower() for d in value]


@lru_cache
def get_settings():
    return Settings()
