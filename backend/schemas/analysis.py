import math
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from services.llm import parse_amount

Number = Union[int, float]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


# Larger figures are model noise, not contract amounts
MAX_AMOUNT = 10 ** 12


def _number(value):
    """parse_amount, but ValueError for infinities and absurd magnitudes"""
    number = parse_amount(value)
    if number is not None and (abs(number) > MAX_AMOUNT or not math.isfinite(number)):
        raise ValueError(f"not a usable amount: {value!r}")
    return number


def _whole(value) -> int:
    number = _number(value)
    return int(round(number)) if number is not None else 0


def _as_list(value) -> list:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"expected a list, got {type(value).__name__}")
    return list(value)


class Amounts(BaseModel):
    prime_mensuelle: Optional[Number] = None
    franchise: Optional[Number] = None
    plafond_garantie: Optional[Number] = None

    @field_validator("prime_mensuelle", "franchise", "plafond_garantie", mode="before")
    @classmethod
    def _amount(cls, value):
        return _number(value)


class CoverageGap(BaseModel):
    title: str = ""
    description: str = ""
    impact: str = ""
    solution: str = ""

    @field_validator("title", "description", "impact", "solution", mode="before")
    @classmethod
    def _string(cls, value):
        return _text(value)


class Recommendation(BaseModel):
    title: str = ""
    description: str = ""
    savings: int = 0
    priority: str = "moyenne"

    @field_validator("title", "description", mode="before")
    @classmethod
    def _string(cls, value):
        return _text(value)

    @field_validator("savings", mode="before")
    @classmethod
    def _savings(cls, value):
        return _whole(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, value):
        return _text(value).lower() or "moyenne"


class AnalysisResult(CamelModel):
    """Structured analysis returned by the model, validated at the boundary"""

    contract_type: str = "inconnu"
    main_coverages: list[str] = Field(default_factory=list)
    amounts: Amounts = Field(default_factory=Amounts)
    exclusions: list[str] = Field(default_factory=list)
    optimization_score: int = 0
    potential_savings: int = 0
    coverage_gaps: list[CoverageGap] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)

    @field_validator("contract_type", mode="before")
    @classmethod
    def _contract_type(cls, value):
        return _text(value) or "inconnu"

    @field_validator("main_coverages", "exclusions", mode="before")
    @classmethod
    def _strings(cls, value):
        if isinstance(value, str):
            return [value] if value.strip() else []
        return [_text(v) for v in _as_list(value) if _text(v)]

    @field_validator("amounts", mode="before")
    @classmethod
    def _amounts(cls, value):
        return value or {}

    @field_validator("coverage_gaps", "recommendations", mode="before")
    @classmethod
    def _items(cls, value):
        # a bare string item is read as a title
        return [{"title": v} if isinstance(v, str) else v for v in _as_list(value)]

    @field_validator("optimization_score", mode="before")
    @classmethod
    def _score(cls, value):
        return min(100, max(0, _whole(value)))

    @field_validator("potential_savings", mode="before")
    @classmethod
    def _savings(cls, value):
        return max(0, _whole(value))
