"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field

from frostwatch.config.defaults import (
    CDO_BASE_URL,
    DEFAULT_TOKEN_ENV_VARS,
    DEFAULT_USER_AGENT,
    NORMALS_ANCHOR_DATE,
    NORMALS_DATASET_ID,
    NWS_BASE_URL,
)


class NormalsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = CDO_BASE_URL
    dataset_id: str = NORMALS_DATASET_ID
    anchor_date: str = NORMALS_ANCHOR_DATE
    result_limit: int = Field(default=1000, ge=1, le=1000)
    token_env_vars: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TOKEN_ENV_VARS), min_length=1
    )
    timeout_seconds: float = Field(default=30.0, gt=0.0)


class ForecastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = NWS_BASE_URL
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)
    timeout_seconds: float = Field(default=30.0, gt=0.0)


class FreezeConfig(BaseModel):
    model_config = {"extra": "forbid"}

    threshold_f: float = 36.0
    lookahead_nights: int = Field(default=5, ge=1, le=14)


class RefreshConfig(BaseModel):
    model_config = {"extra": "forbid"}

    forecast_interval_minutes: int = Field(default=15, ge=1)


class StationsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    # None means the dataset bundled with the package
    dataset_path: str | None = None


class AdvisoryConfig(BaseModel):
    model_config = {"extra": "forbid"}

    normals: NormalsConfig = NormalsConfig()
    forecast: ForecastConfig = ForecastConfig()
    freeze: FreezeConfig = FreezeConfig()
    refresh: RefreshConfig = RefreshConfig()
    stations: StationsConfig = StationsConfig()
