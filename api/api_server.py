"""
api_server.py - FastAPI Backend for the Phase Calendar
======================================================

RESTful API exposing the cycle phase calendar to a frontend.

Endpoints:
- POST /api/probability - Phase probabilities for a date
- POST /api/month-days - Per-day probabilities for a phase in a month
- POST /api/best-days - Best day of each month for a phase
- POST /api/cycles - Calculated intervals up to N years
- POST /api/visualize/heatmap - Year heatmap image

Usage:
    uvicorn api.api_server:app --reload --host 0.0.0.0 --port 8000
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from functools import lru_cache
from datetime import date, datetime
import base64
import os
import tempfile

from core import CalendarConfig, PhaseCalendar
from core.input_validation import InvalidInputError, parse_phase
from core.parameters import MAX_HORIZON_DAYS, MAX_HORIZON_YEARS

# ============================================================================
# FASTAPI APP INITIALIZATION
# ============================================================================

app = FastAPI(
    title="Phase Calendar API",
    description="Cycle phase calendar: phase probabilities, best days and cycle listings",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class CalendarRequest(BaseModel):
    horizon_years: int = Field(1, ge=0, le=MAX_HORIZON_YEARS)
    horizon_days: Optional[int] = Field(None, ge=0, le=MAX_HORIZON_DAYS)  # rotating schedule
    preset: str = "default"  # "default", "regular", "irregular"


class ProbabilityRequest(CalendarRequest):
    target_date: date


class ProbabilityResponse(BaseModel):
    target_date: date
    probabilities: Dict[str, float]  # phase -> % (0-100)
    track_count: int


class MonthDaysRequest(CalendarRequest):
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1, le=9999)
    phase: str


class DayProbabilityResponse(BaseModel):
    day: date
    probability: float


class MonthDaysResponse(BaseModel):
    phase: str
    month: int
    year: int
    days: List[DayProbabilityResponse]
    best_day: Optional[DayProbabilityResponse] = None


class BestDaysRequest(CalendarRequest):
    year: int = Field(..., ge=1, le=9999)
    phase: str


class BestDaysResponse(BaseModel):
    phase: str
    year: int
    best_days: Dict[int, date]  # month (1-12) -> date


class CyclesRequest(CalendarRequest):
    years: int = Field(1, ge=0, le=MAX_HORIZON_YEARS)


class IntervalResponse(BaseModel):
    phase: str
    start: date
    end: date


class HeatmapRequest(BestDaysRequest):
    theme: str = "light"


# ============================================================================
# HELPERS
# ============================================================================

@lru_cache(maxsize=32)
def get_calendar(preset: str, horizon_years: int, horizon_days: Optional[int] = None) -> PhaseCalendar:
    """Calendars are built once per (preset, horizon)"""
    config = CalendarConfig.from_preset(preset)
    calendar = PhaseCalendar(config)
    if horizon_days is not None:
        calendar.set_horizon_days(horizon_days)
    else:
        calendar.set_horizon(horizon_years)
    return calendar


def _calendar_for(request: CalendarRequest) -> PhaseCalendar:
    try:
        return get_calendar(request.preset, request.horizon_years, request.horizon_days)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _phase(name: str) -> str:
    try:
        return parse_phase(name)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ============================================================================
# ENDPOINTS
# ============================================================================

@app.get("/")
async def root():
    """Health check"""
    return {
        "status": "ok",
        "service": "Phase Calendar API",
        "version": "1.0.0",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat()
    }


@app.post("/api/probability", response_model=ProbabilityResponse)
async def phase_probability(request: ProbabilityRequest):
    calendar = _calendar_for(request)
    return ProbabilityResponse(
        target_date=request.target_date,
        probabilities={
            phase: round(pct, 2)
            for phase, pct in calendar.probabilities(request.target_date).items()
        },
        track_count=len(calendar.cycle_set),
    )


@app.post("/api/month-days", response_model=MonthDaysResponse)
async def month_days(request: MonthDaysRequest):
    calendar = _calendar_for(request)
    phase = _phase(request.phase)

    days = calendar.month_days(request.month, request.year, phase)
    best = calendar.best_day_in_month(request.month, request.year, phase)

    return MonthDaysResponse(
        phase=phase,
        month=request.month,
        year=request.year,
        days=[DayProbabilityResponse(day=d.day, probability=round(d.probability, 2)) for d in days],
        best_day=DayProbabilityResponse(day=best.day, probability=round(best.probability, 2))
        if best else None,
    )


@app.post("/api/best-days", response_model=BestDaysResponse)
async def best_days(request: BestDaysRequest):
    calendar = _calendar_for(request)
    phase = _phase(request.phase)
    return BestDaysResponse(
        phase=phase,
        year=request.year,
        best_days=calendar.best_days(request.year, phase),
    )


@app.post("/api/cycles", response_model=List[IntervalResponse])
async def cycles(request: CyclesRequest):
    calendar = _calendar_for(request)
    return [
        IntervalResponse(**interval.to_dict())
        for interval in calendar.list_intervals(request.years)
    ]


@app.post("/api/visualize/heatmap")
async def generate_heatmap(request: HeatmapRequest):
    """
    Generate a year heatmap for one phase
    Returns base64-encoded PNG
    """
    from visualization.phase_heatmap import PhaseHeatmap

    calendar = _calendar_for(request)
    phase = _phase(request.phase)

    with tempfile.NamedTemporaryFile(delete=False, suffix='.png') as tmp:
        path = tmp.name

    try:
        PhaseHeatmap(theme=request.theme).plot_year(calendar, request.year, phase, save_path=path)
        with open(path, 'rb') as f:
            image_data = base64.b64encode(f.read()).decode()
    finally:
        os.unlink(path)

    return {
        "image": f"data:image/png;base64,{image_data}",
        "format": "png"
    }
