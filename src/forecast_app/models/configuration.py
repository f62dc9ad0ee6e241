from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from .common import Assumptions, LenientModel, ModelActivation, ModelType
from .costs import GlobalCosts
from .revenue import ModelInputs

logger = logging.getLogger(__name__)


class BusinessConfiguration(LenientModel):
    id: Optional[str] = None
    name: str = ""
    description: str = ""
    sector: str = ""
    launch_year: int
    model_activations: List[ModelActivation] = Field(default_factory=list)
    model_inputs: Dict[ModelType, ModelInputs] = Field(default_factory=dict)
    global_costs: GlobalCosts = Field(default_factory=GlobalCosts)
    assumptions: Assumptions = Field(default_factory=Assumptions)

    @model_validator(mode="before")
    @classmethod
    def _tag_model_inputs(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        key = "model_inputs" if "model_inputs" in data else "modelInputs"
        raw_inputs = data.get(key)
        if not isinstance(raw_inputs, dict):
            return data
        tagged: Dict[ModelType, Any] = {}
        for raw_type, inputs in raw_inputs.items():
            if inputs is None:
                continue
            try:
                model_type = ModelType.parse(raw_type)
            except ValueError:
                logger.warning("Ignoring inputs for unknown business model %r", raw_type)
                continue
            if isinstance(inputs, dict):
                inputs = {**inputs, "model_type": model_type.value, "modelType": model_type.value}
            tagged[model_type] = inputs
        return {**data, key: tagged}

    def inputs_for(self, model_type: ModelType) -> Optional[ModelInputs]:
        inputs = self.model_inputs.get(model_type)
        if inputs is None or inputs.model_type != model_type:
            return None
        return inputs

    def has_model(self, model_type: ModelType) -> bool:
        return any(activation.model_type == model_type for activation in self.model_activations)

    @property
    def forecast_years(self) -> int:
        return self.assumptions.forecast_years

    @property
    def end_year(self) -> int:
        return self.launch_year + self.assumptions.forecast_years
