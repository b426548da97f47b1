"""
FastAPI application exposing the spreadsheet analytics engine.

Routes only translate HTTP payloads; all computation lives in ``analytics``.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

from .analytics import (
    AnalyticsError,
    ChartConfig,
    ChartRequest,
    ChartValidationError,
    DataAnalytics,
    DataAnalyticsEngine,
)
from .config import get_settings, update_settings

logger = logging.getLogger(__name__)

app = FastAPI(title="Sheet Analytics", version="1.0.0", docs_url="/docs", redoc_url="/redoc", openapi_url="/openapi.json")
app.add_middleware(CORSMiddleware, allow_origins=list(get_settings().cors_origins), allow_credentials=True, allow_methods=["*"], allow_headers=["*"])


class ErrorCode:
    INVALID_CELLS = "INVALID_CELLS"
    INVALID_CHART = "INVALID_CHART"


# ============================================================================
# Pydantic Models
# ============================================================================

class AnalyticsRequest(BaseModel):
    cells: dict[str, dict[str, Any]] = Field(default_factory=dict)


class ChartGenerationRequest(BaseModel):
    cells: dict[str, dict[str, Any]] = Field(default_factory=dict)
    config: dict[str, Any]


class SettingsResponse(BaseModel):
    type_threshold: float
    outlier_z_threshold: float
    forecast_periods: int
    histogram_bins: int
    volatile_r_squared: float
    stable_slope: float
    min_trend_points: int


class ConfigUpdate(BaseModel):
    type_threshold: float | None = Field(None, gt=0, le=1)
    outlier_z_threshold: float | None = Field(None, gt=0)
    forecast_periods: int | None = Field(None, ge=0)
    histogram_bins: int | None = Field(None, ge=1)
    volatile_r_squared: float | None = Field(None, ge=0, le=1)
    stable_slope: float | None = Field(None, ge=0)
    min_trend_points: int | None = Field(None, ge=2)


def _engine(cells: dict[str, dict[str, Any]]) -> DataAnalyticsEngine:
    try:
        return DataAnalyticsEngine(cells)
    except (ValidationError, AnalyticsError) as e:
        raise HTTPException(400, {"code": ErrorCode.INVALID_CELLS, "message": str(e)})


def _settings_response() -> SettingsResponse:
    s = get_settings()
    return SettingsResponse(
        type_threshold=s.type_threshold,
        outlier_z_threshold=s.outlier_z_threshold,
        forecast_periods=s.forecast_periods,
        histogram_bins=s.histogram_bins,
        volatile_r_squared=s.volatile_r_squared,
        stable_slope=s.stable_slope,
        min_trend_points=s.min_trend_points,
    )


def _analytics(cells: dict[str, dict[str, Any]]) -> DataAnalytics:
    return _engine(cells).generate_analytics()


def _chart(cells: dict[str, dict[str, Any]], config: dict[str, Any]) -> ChartConfig:
    engine = _engine(cells)
    try:
        return engine.generate_chart(ChartRequest.model_validate(config))
    except ValidationError as e:
        raise HTTPException(400, {"code": ErrorCode.INVALID_CHART, "message": str(e)})
    except ChartValidationError as e:
        raise HTTPException(400, {"code": ErrorCode.INVALID_CHART, "message": str(e)})


# ============================================================================
# Analytics Routes
# ============================================================================

# CPU-bound work runs in a worker thread, off the event loop

@app.post("/api/analytics", response_model=DataAnalytics)
async def run_analytics(payload: AnalyticsRequest) -> DataAnalytics:
    start = time.perf_counter()
    result = await asyncio.to_thread(_analytics, payload.cells)
    logger.info("Analytics request for %d cells served in %d ms", len(payload.cells), int((time.perf_counter() - start) * 1000))
    return result


@app.post("/api/charts", response_model=ChartConfig)
async def generate_chart(payload: ChartGenerationRequest) -> ChartConfig:
    return await asyncio.to_thread(_chart, payload.cells, payload.config)


# ============================================================================
# Settings & Health Routes
# ============================================================================

@app.get("/api/settings", response_model=SettingsResponse)
async def get_api_settings() -> SettingsResponse:
    return _settings_response()


@app.post("/api/config")
async def update_config(payload: ConfigUpdate) -> dict:
    updates = {k: v for k, v in payload.model_dump().items() if v is not None}
    update_settings(updates)
    return {"status": "ok", "settings": _settings_response().model_dump()}


@app.get("/api/health")
async def health_check() -> dict:
    return {"status": "ok"}
