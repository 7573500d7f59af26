from __future__ import annotations

from dataclasses import dataclass

from journeyscope.services.analytics.metrics import MetricsSnapshot


@dataclass(frozen=True, slots=True)
class MetricChanges:
    mention_rate: float | None
    avg_position: float
    avg_sentiment: float | None
    feature_score: float | None
    position_comparable: bool


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    current: MetricsSnapshot
    previous: MetricsSnapshot | None
    changes: MetricChanges | None


def compute_delta(current: float | None, previous: float | None) -> float | None:
    """Fractional change from ``previous`` to ``current``.

    A missing or zero baseline counts as +100% when there is any current value.
    """
    if current is None:
        return None
    if previous is None or previous == 0:
        return 1.0 if current > 0 else 0.0
    return (current - previous) / previous


def compare_snapshots(current: MetricsSnapshot, previous: MetricsSnapshot | None) -> ComparisonResult:
    if previous is None:
        return ComparisonResult(current=current, previous=None, changes=None)

    # lower is better for positions; callers decide how to present the sign
    position_comparable = current.avg_position is not None and previous.avg_position is not None
    position_change = compute_delta(current.avg_position, previous.avg_position) if position_comparable else None

    changes = MetricChanges(
        mention_rate=compute_delta(current.mention_rate, previous.mention_rate),
        avg_position=position_change if position_change is not None else 0.0,
        avg_sentiment=compute_delta(current.avg_sentiment, previous.avg_sentiment),
        feature_score=compute_delta(current.feature_score, previous.feature_score),
        position_comparable=position_comparable,
    )
    return ComparisonResult(current=current, previous=previous, changes=changes)
