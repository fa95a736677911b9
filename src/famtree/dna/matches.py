"""Store relative predictions from the DNA matching flow on a user's profile.

The prediction flow is a black box that may return anything. Before the
results are written they are validated, restricted to the candidate set
that was sent to the flow, and reduced to one entry per relative.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from ..logging import get_logger
from ..models.common import iso_now
from ..models.dna import PredictedRelative
from ..store.base import USERS, DocumentStore

logger = get_logger(__name__)


@dataclass
class MatchMergeResult:
    user_id: str
    relatives: list[PredictedRelative] = field(default_factory=list)
    rejected: int = 0
    completed_at: str = ""


class RelativeMatchPostProcessor:
    """Merges validated predictions into ``users/<id>.analysis``."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def filter_predictions(
        self,
        user_id: str,
        candidate_ids: Iterable[str],
        predictions: Sequence[Any],
    ) -> tuple[list[PredictedRelative], int]:
        """Keep valid predictions for known candidates, best probability first.

        Returns the kept relatives and how many raw entries were dropped.
        """
        allowed = set(candidate_ids) - {user_id}
        best: dict[str, PredictedRelative] = {}
        rejected = 0

        for raw in predictions:
            try:
                relative = PredictedRelative.model_validate(raw)
            except ValidationError as e:
                logger.warning("prediction_invalid", user_id=user_id, error=str(e))
                rejected += 1
                continue
            if relative.user_id not in allowed:
                # Flow invented an id outside what it was given
                logger.warning(
                    "prediction_outside_candidates",
                    user_id=user_id,
                    predicted_user_id=relative.user_id,
                )
                rejected += 1
                continue
            current = best.get(relative.user_id)
            if current is None:
                best[relative.user_id] = relative
            else:
                rejected += 1
                if relative.relationship_probability > current.relationship_probability:
                    best[relative.user_id] = relative

        ranked = sorted(best.values(), key=lambda r: r.relationship_probability, reverse=True)
        return ranked, rejected

    def merge_relative_matches(
        self,
        user_id: str,
        candidate_ids: Iterable[str],
        predictions: Sequence[Any],
    ) -> MatchMergeResult:
        """Validate ``predictions`` and write them as the user's relatives.

        An empty list is a valid "no matches" outcome and is stored as such.
        """
        relatives, rejected = self.filter_predictions(user_id, candidate_ids, predictions)
        now = iso_now()
        self.store.set(
            USERS,
            user_id,
            {
                "analysis": {
                    "relatives": [
                        r.model_dump(mode="json", by_alias=True, exclude_none=True)
                        for r in relatives
                    ],
                    "completedAt": now,
                },
                "updatedAt": now,
            },
            merge=True,
        )
        logger.info(
            "relative_matches_saved",
            user_id=user_id,
            relatives=len(relatives),
            rejected=rejected,
        )
        return MatchMergeResult(
            user_id=user_id, relatives=relatives, rejected=rejected, completed_at=now
        )

    def stored_relatives(self, user_id: str) -> list[PredictedRelative]:
        document = self.store.get(USERS, user_id) or {}
        raw = (document.get("analysis") or {}).get("relatives") or []
        return [PredictedRelative.model_validate(r) for r in raw]
