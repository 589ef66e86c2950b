"""Pydantic data models — the shared business objects.

Both the oracle client and the MCP server use these models as the common
interface for validation, scoring, and tools.
"""

from __future__ import annotations

import re
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from .errors import InvalidIdentityError

IDENTITY_PATTERN = re.compile(r"[0-9a-fA-F]{64}")

MAX_HOPS = 100


class Identity(str):
    """A participant public key: exactly 64 hex characters.

    Only constructible through the pattern check, so an unvalidated string
    can never pass as an Identity. The value is kept as received.
    """

    __slots__ = ()

    def __new__(cls, value: Any) -> "Identity":
        if isinstance(value, Identity):
            return value
        if not is_identity(value):
            raise InvalidIdentityError(value)
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Identity({str.__repr__(self)})"


def is_identity(value: Any) -> bool:
    return isinstance(value, str) and IDENTITY_PATTERN.fullmatch(value) is not None


class TrustLevel(str, Enum):
    """Coarse qualitative label for a trust score."""

    VERY_HIGH = "Very High"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    VERY_LOW = "Very Low"
    UNKNOWN = "Unknown"


class DistanceInfo(BaseModel):
    """Oracle answer for a single from/to distance query.

    Unknown fields such as ``bridges`` are kept as extras.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    hops: Optional[int] = Field(None, ge=0, le=MAX_HOPS, description="Shortest-path length, None if unreachable")
    paths: Optional[int] = Field(None, ge=0, description="Number of shortest paths, when known")


class ScalarPathBonus(BaseModel):
    """Legacy form: one bonus-per-extra-path for every hop distance."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["scalar"] = "scalar"
    value: Optional[float] = None


class PerHopPathBonus(BaseModel):
    """Bonus-per-extra-path keyed by hop distance (2..4)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["per_hop"] = "per_hop"
    weights: Mapping[int, float] = Field(default_factory=lambda: MappingProxyType({}))

    @field_validator("weights")
    @classmethod
    def _freeze_weights(cls, weights: Mapping[int, float]) -> Mapping[int, float]:
        return MappingProxyType(dict(weights))

    @field_serializer("weights")
    def _dump_weights(self, weights: Mapping[int, float]) -> dict[int, float]:
        return dict(weights)


PathBonus = Annotated[Union[ScalarPathBonus, PerHopPathBonus], Field(discriminator="kind")]

DEFAULT_DISTANCE_WEIGHTS: dict[int, float] = {1: 1.0, 2: 0.5, 3: 0.25, 4: 0.1}
DEFAULT_PATH_BONUS: dict[int, float] = {2: 0.15, 3: 0.1, 4: 0.05}
DEFAULT_MAX_PATH_BONUS = 0.5


class ScoringConfig(BaseModel):
    """Weights used to turn graph facts into a trust score.

    Omitted fields take the built-in defaults. Explicitly passing
    ``path_bonus=None`` or ``max_path_bonus=None`` selects the scoring
    engine's hardcoded fallbacks instead.
    """

    model_config = ConfigDict(frozen=True)

    distance_weights: Mapping[int, float] = Field(default_factory=lambda: MappingProxyType(dict(DEFAULT_DISTANCE_WEIGHTS)))
    path_bonus: Optional[PathBonus] = Field(default_factory=lambda: PerHopPathBonus(weights=DEFAULT_PATH_BONUS))
    max_path_bonus: Optional[float] = Field(DEFAULT_MAX_PATH_BONUS, ge=0.0, le=1.0)

    @field_validator("distance_weights")
    @classmethod
    def _weights_in_unit_range(cls, weights: Mapping[int, float]) -> Mapping[int, float]:
        for hop, weight in weights.items():
            if not 0.0 <= weight <= 1.0:
                raise ValueError(f"distance weight for hop {hop} must be in [0, 1], got {weight}")
        return MappingProxyType(dict(weights))

    @field_serializer("distance_weights")
    def _dump_distance_weights(self, weights: Mapping[int, float]) -> dict[int, float]:
        return dict(weights)

    @model_validator(mode="before")
    @classmethod
    def _tag_path_bonus(cls, data: Any) -> Any:
        # Untagged input: a bare number is the legacy scalar form, a plain mapping is per-hop.
        if not isinstance(data, dict) or "path_bonus" not in data:
            return data
        bonus = data["path_bonus"]
        if isinstance(bonus, (int, float)) and not isinstance(bonus, bool):
            data = {**data, "path_bonus": {"kind": "scalar", "value": bonus}}
        elif isinstance(bonus, Mapping) and "kind" not in bonus:
            data = {**data, "path_bonus": {"kind": "per_hop", "weights": bonus}}
        return data

    @classmethod
    def from_json_dict(cls, raw: dict) -> "ScoringConfig":
        """Build a config from the oracle's camelCase JSON shape.

        Accepts ``distanceWeights``, ``pathBonus`` (number or mapping) and
        ``maxPathBonus``. Hop keys may be strings.
        """
        data: dict[str, Any] = {}
        if "distanceWeights" in raw:
            data["distance_weights"] = raw["distanceWeights"]
        if "pathBonus" in raw:
            data["path_bonus"] = raw["pathBonus"]
        if "maxPathBonus" in raw:
            data["max_path_bonus"] = raw["maxPathBonus"]
        return cls.model_validate(data)


DEFAULT_SCORING = ScoringConfig()


class TrustAssessment(BaseModel):
    """Score and label derived from one distance answer."""

    hops: Optional[int] = Field(None, description="Shortest-path length, None if unreachable")
    paths: Optional[int] = Field(None, description="Number of shortest paths, when known")
    score: float = Field(ge=0.0, le=1.0, description="Trust from 0 (none) to 1 (self)")
    level: TrustLevel
