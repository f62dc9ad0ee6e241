from __future__ import annotations

from typing import Dict

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .errors import ConfigurationError
from .models.configuration import BusinessConfiguration
from .schemas import (
    ForecastRequest,
    ForecastResponse,
    MonteCarloRequest,
    MonteCarloResponse,
    ScenarioCompareRequest,
    ScenarioCompareResponse,
    SensitivityRequest,
    SensitivityResponse,
)
from .services.analytics import compute_kpis
from .services.calculator import ForecastCalculator, validate_configuration
from .services.monte_carlo import MonteCarloSampler, summarize
from .services.sensitivity import adjusted_model, cac_ltv_analysis, compare_scenarios
from .settings import EngineSettings, configure_logging, get_settings

configure_logging(get_settings().log_level)

app = FastAPI(title="Business Model Forecast Engine", version="0.1.0")

calculator = ForecastCalculator()


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": exc.problems})


def _check_horizon(configuration: BusinessConfiguration, settings: EngineSettings) -> None:
    if configuration.forecast_years > settings.max_forecast_years:
        raise HTTPException(
            status_code=400,
            detail=f"forecastYears must not exceed {settings.max_forecast_years}",
        )


def _strict(requested: bool | None, settings: EngineSettings) -> bool:
    return settings.strict_validation if requested is None else requested


@app.post("/forecast", response_model=ForecastResponse)
def run_forecast(payload: ForecastRequest, settings: EngineSettings = Depends(get_settings)) -> ForecastResponse:
    _check_horizon(payload.configuration, settings)
    series = calculator.run(payload.configuration, strict=_strict(payload.strict, settings))
    return ForecastResponse(series=series, kpis=compute_kpis(series, payload.configuration))


@app.post("/sensitivity", response_model=SensitivityResponse)
def run_sensitivity(payload: SensitivityRequest, settings: EngineSettings = Depends(get_settings)) -> SensitivityResponse:
    _check_horizon(payload.configuration, settings)
    baseline = None
    if payload.use_forecast:
        baseline = calculator.run(payload.configuration, strict=settings.strict_validation)
    model = adjusted_model(payload.configuration, payload.params, baseline)
    return SensitivityResponse(model=model, cac_ltv=cac_ltv_analysis(model))


@app.post("/scenarios/compare", response_model=ScenarioCompareResponse)
def run_scenario_comparison(
    payload: ScenarioCompareRequest,
    settings: EngineSettings = Depends(get_settings),
) -> ScenarioCompareResponse:
    _check_horizon(payload.configuration, settings)
    baseline = None
    if payload.use_forecast:
        baseline = calculator.run(payload.configuration, strict=settings.strict_validation)
    outcomes = compare_scenarios(payload.configuration, payload.scenarios, baseline)
    return ScenarioCompareResponse(scenarios=outcomes)


@app.post("/monte-carlo", response_model=MonteCarloResponse)
def run_monte_carlo(payload: MonteCarloRequest, settings: EngineSettings = Depends(get_settings)) -> MonteCarloResponse:
    runs = payload.runs if payload.runs is not None else settings.monte_carlo_runs
    if runs < 1 or runs > settings.max_monte_carlo_runs:
        raise HTTPException(status_code=400, detail=f"runs must be between 1 and {settings.max_monte_carlo_runs}")
    _check_horizon(payload.configuration, settings)
    if settings.strict_validation:
        validate_configuration(payload.configuration)
    sampler = MonteCarloSampler(calculator, workers=settings.monte_carlo_workers)
    samples = sampler.run_samples(payload.configuration, runs, rerun=payload.rerun)
    return MonteCarloResponse(samples=samples, summary=summarize(samples))


@app.get("/health")
def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}
