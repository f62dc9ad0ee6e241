from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models.configuration import BusinessConfiguration
from .models.kpis import ForecastKpis
from .models.results import ForecastSeries
from .models.scenario import (
    AdjustedModel,
    CacLtvPoint,
    MonteCarloSample,
    MonteCarloSummary,
    Scenario,
    ScenarioOutcome,
    SensitivityParams,
)


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())


class ForecastRequest(ApiModel):
    configuration: BusinessConfiguration
    strict: Optional[bool] = Field(default=None, description="Overrides the server's strict validation setting")


class ForecastResponse(ApiModel):
    series: ForecastSeries
    kpis: ForecastKpis


class SensitivityRequest(ApiModel):
    configuration: BusinessConfiguration
    params: SensitivityParams = Field(default_factory=SensitivityParams)
    use_forecast: bool = Field(default=True, description="Adjust the computed forecast instead of the simplified projection")


class SensitivityResponse(ApiModel):
    model: AdjustedModel
    cac_ltv: List[CacLtvPoint]


class ScenarioCompareRequest(ApiModel):
    configuration: BusinessConfiguration
    scenarios: Optional[List[Scenario]] = None
    use_forecast: bool = True


class ScenarioCompareResponse(ApiModel):
    scenarios: List[ScenarioOutcome]


class MonteCarloRequest(ApiModel):
    configuration: BusinessConfiguration
    runs: Optional[int] = None
    rerun: bool = Field(default=True, description="Re-run the forecast per sample instead of the simplified projection")


class MonteCarloResponse(ApiModel):
    samples: List[MonteCarloSample]
    summary: MonteCarloSummary
