"""Relative predictions returned by the DNA matching flow."""
from __future__ import annotations

import math

from pydantic import BaseModel, Field, field_validator


class PredictedRelative(BaseModel):
    """One candidate relative as predicted from DNA comparison."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    user_id: str = Field(alias="userId", min_length=1)
    predicted_relationship: str = Field(
        default="Possible relative", alias="predictedRelationship"
    )
    relationship_probability: float = Field(
        default=0.0, alias="relationshipProbability", ge=0.0, le=1.0
    )
    common_ancestors: list[str] | None = Field(default=None, alias="commonAncestors")
    shared_centimorgans: float | None = Field(
        default=None, alias="sharedCentimorgans", ge=0.0
    )

    @field_validator("relationship_probability", mode="before")
    @classmethod
    def _clamp_probability(cls, value: object) -> float:
        try:
            p = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError) as e:
            raise ValueError(f"probability is not a number: {value!r}") from e
        if not math.isfinite(p):
            raise ValueError(f"probability is not finite: {value!r}")
        return max(0.0, min(1.0, p))
