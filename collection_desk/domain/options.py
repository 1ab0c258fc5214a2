"""Pydantic option models for the search and recommendation engines"""

from dataclasses import fields as dataclass_fields
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from collection_desk.config import settings
from collection_desk.domain.exceptions import InvalidSearchOptionsError, InvalidWeightsError
from collection_desk.domain.models import DebtRecord

RECORD_FIELDS = frozenset(f.name for f in dataclass_fields(DebtRecord))

DEFAULT_SEARCH_FIELDS: Tuple[str, ...] = (
    "customer_name",
    "id_number",
    "customer_id",
    "phone",
    "collection_agent",
    "notes",
)

DEFAULT_BOOST_FIELDS: Mapping[str, float] = MappingProxyType(
    {
        "customer_name": 2.0,
        "id_number": 1.5,
        "customer_id": 1.5,
        "phone": 1.0,
        "collection_agent": 0.8,
        "notes": 0.5,
    }
)


class SearchOptions(BaseModel):
    """
    Search configuration, validated once at the engine boundary.

    Fields missing from boost_fields weigh 1.0. A boost of 0 keeps the field
    searchable but removes it from both the score and its normalization.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    fuzzy_threshold: float = Field(default_factory=lambda: settings.search_fuzzy_threshold, ge=0.0, le=1.0)
    max_results: int = Field(default_factory=lambda: settings.search_max_results, ge=1)
    fields: Tuple[str, ...] = DEFAULT_SEARCH_FIELDS
    boost_fields: Mapping[str, float] = Field(default=DEFAULT_BOOST_FIELDS, validate_default=True)
    exact_match_boost: float = Field(default_factory=lambda: settings.exact_match_boost, gt=0.0)

    @field_validator("fields")
    @classmethod
    def _fields_exist(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError("at least one field is required")
        unknown = [name for name in value if name not in RECORD_FIELDS]
        if unknown:
            raise ValueError(f"unknown record fields: {', '.join(unknown)}")
        return value

    @field_validator("boost_fields")
    @classmethod
    def _boosts_non_negative(cls, value: Mapping[str, float]) -> Mapping[str, float]:
        negative = [name for name, boost in value.items() if boost < 0]
        if negative:
            raise ValueError(f"negative boost for: {', '.join(negative)}")
        # Read-only: presets are shared module-level instances
        return MappingProxyType(dict(value))

    def boost(self, field_name: str) -> float:
        return self.boost_fields.get(field_name, 1.0)

    @classmethod
    def coerce(cls, options: "SearchOptions | Dict[str, Any] | None") -> "SearchOptions":
        """Accept a ready model, a plain mapping, or None (defaults)"""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        try:
            return cls.model_validate(options)
        except ValidationError as e:
            raise InvalidSearchOptionsError(str(e)) from e


# Preset used by the dashboard's search box
DASHBOARD_SEARCH_OPTIONS = SearchOptions(
    max_results=settings.dashboard_max_results,
    boost_fields={
        "customer_name": 3.0,
        "id_number": 2.5,
        "customer_id": 2.0,
        "phone": 1.5,
        "collection_agent": 1.0,
        "notes": 0.5,
    },
    exact_match_boost=4.0,
)


class RecommendationWeights(BaseModel):
    """Weights for combining assessment factors into an action priority"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    debt_age_weight: float = Field(0.3, ge=0.0)
    amount_weight: float = Field(0.25, ge=0.0)
    payment_history_weight: float = Field(0.2, ge=0.0)
    contact_history_weight: float = Field(0.15, ge=0.0)
    success_rate_weight: float = Field(0.1, ge=0.0)

    @classmethod
    def coerce(cls, weights: "RecommendationWeights | Dict[str, Any] | None") -> "RecommendationWeights":
        if weights is None:
            return DEFAULT_WEIGHTS
        if isinstance(weights, cls):
            return weights
        try:
            return cls.model_validate(weights)
        except ValidationError as e:
            raise InvalidWeightsError(str(e)) from e


DEFAULT_WEIGHTS = RecommendationWeights()
