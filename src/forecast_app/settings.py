from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "FORECAST_"


class EngineSettings(BaseModel):
    strict_validation: bool = Field(False, description="Reject configurations with activations that cannot produce revenue")
    monte_carlo_runs: int = Field(1000, ge=1)
    max_monte_carlo_runs: int = Field(20000, ge=1)
    max_forecast_years: int = Field(50, ge=1)
    monte_carlo_workers: int = Field(1, ge=1)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            key = f"{ENV_PREFIX}{name.upper()}"
            if key in environ:
                values[name] = environ[key]
        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    return EngineSettings.from_env()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
