from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
import logging

from journeyscope.schemas.common import EARLY_STAGES, EVALUATION_STAGE, POSITION_STAGES
from journeyscope.services.analytics.parsing import ParseFailure, parse_solution_analysis
from journeyscope.services.analytics.records import ResponseRecord

LOGGER = logging.getLogger(__name__)
DEFAULT_POSITIVE_VALUES = frozenset({'yes'})


@dataclass(frozen=True, slots=True)
class MetricsSnapshot:
    """Metrics for one group of responses.

    A metric is ``None`` when no record in the group was eligible for it, which keeps
    "no data" apart from a measured zero.
    """

    mention_rate: float | None
    avg_position: float | None
    avg_sentiment: float | None
    feature_score: float | None
    total_responses: int

    @classmethod
    def empty(cls) -> MetricsSnapshot:
        return cls(
            mention_rate=None,
            avg_position=None,
            avg_sentiment=None,
            feature_score=None,
            total_responses=0,
        )

    def or_zero(self) -> MetricsSnapshot:
        return replace(
            self,
            mention_rate=self.mention_rate or 0.0,
            avg_position=self.avg_position or 0.0,
            avg_sentiment=self.avg_sentiment or 0.0,
            feature_score=self.feature_score or 0.0,
        )


def compute_metrics(
    records: Sequence[ResponseRecord],
    *,
    positive_values: Iterable[str] = DEFAULT_POSITIVE_VALUES,
) -> MetricsSnapshot:
    return MetricsSnapshot(
        mention_rate=mention_rate(records),
        avg_position=average_position(records),
        avg_sentiment=average_sentiment(records),
        feature_score=feature_score(records, positive_values=positive_values),
        total_responses=len(records),
    )


def average_sentiment(records: Sequence[ResponseRecord]) -> float | None:
    scores = [r.sentiment_score for r in records if r.sentiment_score is not None]
    if not scores:
        return None
    return sum(scores) / len(scores) * 100.0


def average_position(records: Sequence[ResponseRecord]) -> float | None:
    positions = [
        r.ranking_position
        for r in records
        if r.buying_journey_stage in POSITION_STAGES and r.ranking_position is not None and r.ranking_position > 0
    ]
    if not positions:
        return None
    return sum(positions) / len(positions)


def mention_rate(records: Sequence[ResponseRecord]) -> float | None:
    early = [r for r in records if r.buying_journey_stage in EARLY_STAGES]
    if not early:
        return None
    mentioned = sum(1 for r in early if r.company_mentioned)
    return mentioned / len(early) * 100.0


def feature_score(
    records: Sequence[ResponseRecord],
    *,
    positive_values: Iterable[str] = DEFAULT_POSITIVE_VALUES,
) -> float | None:
    positives = frozenset(value.strip().lower() for value in positive_values)
    eligible = [
        r for r in records
        if r.buying_journey_stage == EVALUATION_STAGE and r.solution_analysis is not None
    ]
    if not eligible:
        return None
    total = sum(record_feature_score(r, positive_values=positives) for r in eligible)
    return total / len(eligible)


def record_feature_score(record: ResponseRecord, *, positive_values: frozenset[str]) -> float:
    parsed = parse_solution_analysis(record.solution_analysis)
    if isinstance(parsed, ParseFailure):
        LOGGER.warning(
            'Ignoring malformed %s on response %s: %s',
            parsed.field,
            record.id,
            parsed.reason,
        )
        return 0.0

    values = list(parsed.features.values())
    if not values:
        return 0.0
    positive = sum(1 for value in values if isinstance(value, str) and value.strip().lower() in positive_values)
    return positive / len(values) * 100.0


def eligible_counts(records: Sequence[ResponseRecord]) -> dict[str, int]:
    """Number of records each metric was computed from."""
    return {
        'mention_rate': sum(1 for r in records if r.buying_journey_stage in EARLY_STAGES),
        'avg_position': sum(
            1
            for r in records
            if r.buying_journey_stage in POSITION_STAGES and r.ranking_position is not None and r.ranking_position > 0
        ),
        'avg_sentiment': sum(1 for r in records if r.sentiment_score is not None),
        'feature_score': sum(
            1 for r in records if r.buying_journey_stage == EVALUATION_STAGE and r.solution_analysis is not None
        ),
    }
