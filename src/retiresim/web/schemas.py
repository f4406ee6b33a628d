"""Pydantic request/response schemas for the retiresim API."""

from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


# --- Base schemas ---


class Meta(BaseModel):
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ApiResponse(BaseModel, Generic[T]):
    data: T
    meta: Meta = Field(default_factory=Meta)


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    service: str = "retiresim-api"


# --- Catalog schemas ---


class AssetInfo(BaseModel):
    symbol: str
    name: str
    expected_return: float = Field(description="Expected annual return (fraction)")
    volatility: float = Field(description="Annual volatility (fraction)")
    asset_type: str = Field(description="equity, crypto or metal")


# --- Simulation schemas ---


class HoldingInput(BaseModel):
    symbol: str = Field(min_length=1, description="Catalog symbol or custom ticker")
    weight: float = Field(gt=0, allow_inf_nan=False, description="Raw allocation weight (%)")
    expected_return_pct: float | None = Field(
        None, allow_inf_nan=False,
        description="Custom CAGR in percent; omit for catalog assets",
    )
    volatility_pct: float | None = Field(
        None, ge=0, allow_inf_nan=False,
        description="Custom annual volatility in percent; omit for catalog assets",
    )


class SimulationParamsInput(BaseModel):
    initial_equity: float = Field(ge=0, allow_inf_nan=False)
    annual_withdrawal: float = Field(ge=0, allow_inf_nan=False)
    inflation_rate: float = Field(ge=0, allow_inf_nan=False, description="Annual inflation (fraction)")
    time_horizon: int = Field(gt=0, le=100, description="Years")
    iterations: int = Field(gt=0, le=100_000)
    enable_fat_tails: bool = False
    enable_correlations: bool = False
    enable_mean_reversion: bool = False


class SimulationRequest(BaseModel):
    holdings: list[HoldingInput] = Field(min_length=1)
    params: SimulationParamsInput | None = Field(
        None, description="Run configuration; server defaults when omitted"
    )
    seed: int | None = Field(None, ge=0, description="Root seed for a reproducible run")


class SimulationResultSchema(BaseModel):
    years: list[int]
    median_path: list[float]
    top_path: list[float] = Field(description="95th percentile per year")
    bottom_path: list[float] = Field(description="5th percentile per year")
    risk_of_ruin: float = Field(description="Percent of trials ending at ~0")
    median_final: float
    expected_cagr: float = Field(description="Portfolio expected return (%)")
    expected_vol: float = Field(description="Portfolio volatility (%)")
    iterations: int
    seed: int | None = None
