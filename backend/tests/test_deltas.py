from __future__ import annotations

from journeyscope.services.analytics.deltas import compare_snapshots, compute_delta
from journeyscope.services.analytics.metrics import MetricsSnapshot


def _snapshot(**kwargs) -> MetricsSnapshot:  # type: ignore[no-untyped-def]
    values = {'mention_rate': None, 'avg_position': None, 'avg_sentiment': None, 'feature_score': None}
    values.update(kwargs)
    return MetricsSnapshot(total_responses=5, **values)


def test_compute_delta_fractional_change() -> None:
    assert compute_delta(10, 5) == 1.0
    assert compute_delta(5, 10) == -0.5
    assert compute_delta(7, 7) == 0.0


def test_compute_delta_missing_or_zero_baseline() -> None:
    assert compute_delta(5, 0) == 1.0
    assert compute_delta(5, None) == 1.0
    assert compute_delta(0, 0) == 0.0
    assert compute_delta(0, None) == 0.0
    assert compute_delta(None, 5) is None
    assert compute_delta(None, None) is None


def test_compare_without_previous_segment_has_no_changes() -> None:
    result = compare_snapshots(_snapshot(mention_rate=40.0), None)

    assert result.previous is None
    assert result.changes is None


def test_position_change_needs_both_sides() -> None:
    current = _snapshot(mention_rate=60.0, avg_position=2.0, avg_sentiment=50.0)
    previous = _snapshot(mention_rate=40.0, avg_position=None, avg_sentiment=None)

    changes = compare_snapshots(current, previous).changes
    assert changes is not None
    assert changes.position_comparable is False
    assert changes.avg_position == 0.0
    assert changes.mention_rate == 0.5
    assert changes.avg_sentiment == 1.0
    assert changes.feature_score is None


def test_position_change_sign_is_raw() -> None:
    changes = compare_snapshots(_snapshot(avg_position=2.0), _snapshot(avg_position=4.0)).changes

    assert changes is not None
    assert changes.position_comparable is True
    assert changes.avg_position == -0.5
