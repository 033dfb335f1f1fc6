from __future__ import annotations

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

ALPHAVANTAGE_KEY_ENV = "ALPHAVANTAGE_API_KEY"


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    alphavantage_api_key: str | None = None

    @field_validator("alphavantage_api_key")
    @classmethod
    def blank_is_missing(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> Credentials:
        if load_env_file:
            load_dotenv()
        return cls(alphavantage_api_key=os.getenv(ALPHAVANTAGE_KEY_ENV))


class Settings(BaseModel):
    watchlist: str = Field(..., min_length=1)
    output: str = "report.csv"
    provider: Literal["alphavantage", "yahoo"] = "alphavantage"
    cache_path: str = ".cache/quotes.json"
    call_limit: int = Field(25, ge=0)
    pause_seconds: float = Field(1.0, ge=0)
    timeout: int = Field(20, gt=0)
    artifacts_dir: str | None = None
