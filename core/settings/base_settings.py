from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class PolytradeBaseSettings(BaseSettings):
    """
    Common base for every settings section.

    Values come from the process environment; api.dependencies loads the
    project .env into it once before any section is instantiated.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        populate_by_name=True,
    )
