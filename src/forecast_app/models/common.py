from __future__ import annotations

import math
import re
import types
from enum import Enum
from typing import Any, Literal, Optional, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic.fields import FieldInfo


def as_number(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def _numeric_type(annotation: Any) -> Optional[type]:
    if annotation in (int, float):
        return annotation
    if get_origin(annotation) in (Union, types.UnionType):
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1 and members[0] in (int, float):
            return members[0]
    return None


def _lenient_value(field: FieldInfo, value: Any) -> Any:
    if value is None:
        return field.get_default(call_default_factory=True)
    numeric = _numeric_type(field.annotation)
    if numeric is None:
        return value
    number = as_number(value, math.nan)
    if math.isnan(number):
        return field.get_default(call_default_factory=True)
    return numeric(number)


class LenientModel(BaseModel):
    """Base for every ingested structure.

    Numeric fields never fail validation: ``None``, non-numeric strings and
    non-finite values are replaced by the field default (or 0). This is the
    single place where missing inputs are defaulted. Literal tag fields are
    left alone so they can drive discriminated unions.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        protected_namespaces=(),
    )

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        filled = dict(data)
        for name, field in cls.model_fields.items():
            if field.is_required() or get_origin(field.annotation) is Literal:
                continue
            for key in {name, field.alias or name}:
                if key in filled:
                    filled[key] = _lenient_value(field, filled[key])
        return filled


class ModelType(str, Enum):
    SAAS = "SAAS"
    HARDWARE_SAAS = "Hardware + SAAS"
    STRAIGHT_SALES = "Straight Sales"
    MARKETPLACE = "Marketplace"
    PROPERTY_PLAY = "Property Play"
    SUBSCRIPTION_PRODUCT = "Subscription Product"
    SERVICES = "Services/Consulting"
    AD_SUPPORTED = "Ad-Supported Platform"
    LICENSING = "Licensing/IP"
    FREEMIUM = "Freemium → Premium"

    @classmethod
    def parse(cls, value: Any) -> "ModelType":
        if isinstance(value, cls):
            return value
        key = _normalize_key(str(value))
        try:
            return _MODEL_TYPE_KEYS[key]
        except KeyError:
            raise ValueError(f"Unknown business model type: {value!r}") from None


def _normalize_key(value: str) -> str:
    return re.sub(r"[^a-z0-9]", "", value.lower())


_MODEL_TYPE_KEYS = {_normalize_key(member.value): member for member in ModelType}
_MODEL_TYPE_KEYS.update(
    {
        "hardwaresaas": ModelType.HARDWARE_SAAS,
        "straightsales": ModelType.STRAIGHT_SALES,
        "propertyplay": ModelType.PROPERTY_PLAY,
        "subscription": ModelType.SUBSCRIPTION_PRODUCT,
        "services": ModelType.SERVICES,
        "adsupported": ModelType.AD_SUPPORTED,
        "licensing": ModelType.LICENSING,
        "freemium": ModelType.FREEMIUM,
    }
)

RECURRING_MODEL_TYPES = frozenset(
    {ModelType.SAAS, ModelType.HARDWARE_SAAS, ModelType.SUBSCRIPTION_PRODUCT}
)


class ModelActivation(LenientModel):
    model_type: ModelType
    start_year: int
    end_year: Optional[int] = None
    ramp_up_months: int = Field(default=0, description="0 means full capacity from the first month")

    @field_validator("model_type", mode="before")
    @classmethod
    def _parse_model_type(cls, value: Any) -> ModelType:
        return ModelType.parse(value)

    @field_validator("ramp_up_months")
    @classmethod
    def _non_negative_ramp(cls, value: int) -> int:
        return max(0, value)

    def is_active(self, year: int) -> bool:
        if year < self.start_year:
            return False
        return self.end_year is None or year <= self.end_year

    def months_since_start(self, year: int, month: int) -> int:
        return max(0, (year - self.start_year) * 12 + month - 1)


class Assumptions(LenientModel):
    inflation_rate: float = 0.03
    discount_rate: float = 0.1
    forecast_years: int = 5

    @field_validator("forecast_years")
    @classmethod
    def _at_least_one_year(cls, value: int) -> int:
        return max(1, value)
