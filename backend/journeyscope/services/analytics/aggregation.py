from __future__ import annotations

from collections.abc import Callable, Sequence
import math

from journeyscope.services.analytics.metrics import MetricsSnapshot
from journeyscope.services.analytics.records import ResponseRecord

UNKNOWN_GROUP = 'Unknown'


def aggregate_metrics(children: Sequence[MetricsSnapshot]) -> MetricsSnapshot:
    """Merge child snapshots into a parent using response-count weights.

    Each metric keeps its own weight total, since a child without data for one metric
    may still contribute to the others.
    """
    total_responses = sum(child.total_responses for child in children)
    populated = [child for child in children if child.total_responses > 0]

    return MetricsSnapshot(
        mention_rate=_weighted_mean(populated, lambda c: c.mention_rate, digits=0),
        avg_position=_weighted_mean(
            populated,
            lambda c: c.avg_position if c.avg_position is not None and c.avg_position > 0 else None,
            digits=2,
        ),
        avg_sentiment=_weighted_mean(populated, lambda c: c.avg_sentiment, digits=0),
        feature_score=_weighted_mean(populated, lambda c: c.feature_score, digits=0),
        total_responses=total_responses,
    )


def _weighted_mean(
    children: Sequence[MetricsSnapshot],
    value_of: Callable[[MetricsSnapshot], float | None],
    *,
    digits: int,
) -> float | None:
    weighted_sum = 0.0
    weight_total = 0
    for child in children:
        value = value_of(child)
        if value is None:
            continue
        weighted_sum += value * child.total_responses
        weight_total += child.total_responses
    if weight_total == 0:
        return None
    return round_half_up(weighted_sum / weight_total, digits)


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def group_by_field(records: Sequence[ResponseRecord], field: str) -> dict[str, list[ResponseRecord]]:
    grouped: dict[str, list[ResponseRecord]] = {}
    for record in records:
        key = getattr(record, field) or UNKNOWN_GROUP
        grouped.setdefault(str(key), []).append(record)
    return grouped
