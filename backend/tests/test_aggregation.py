from __future__ import annotations

from journeyscope.services.analytics.aggregation import aggregate_metrics, group_by_field, round_half_up
from journeyscope.services.analytics.metrics import MetricsSnapshot, compute_metrics
from journeyscope.services.analytics.records import ResponseRecord


def _snapshot(total: int, **kwargs) -> MetricsSnapshot:  # type: ignore[no-untyped-def]
    values = {'mention_rate': None, 'avg_position': None, 'avg_sentiment': None, 'feature_score': None}
    values.update(kwargs)
    return MetricsSnapshot(total_responses=total, **values)


def _early(mentioned: bool, sentiment: float | None, region: str | None = None) -> ResponseRecord:
    return ResponseRecord(
        company_id=1,
        answer_engine='Perplexity',
        geographic_region=region,
        buying_journey_stage='problem_exploration',
        company_mentioned=mentioned,
        sentiment_score=sentiment,
    )


def test_aggregate_weights_by_response_count() -> None:
    merged = aggregate_metrics([_snapshot(10, mention_rate=80.0), _snapshot(5, mention_rate=60.0)])

    assert merged.mention_rate == 73
    assert merged.total_responses == 15


def test_aggregate_position_keeps_two_decimals_and_skips_unranked() -> None:
    merged = aggregate_metrics(
        [
            _snapshot(2, avg_position=1.5),
            _snapshot(1, avg_position=3.0),
            _snapshot(4, avg_position=None),
            _snapshot(3, avg_position=0.0),
        ]
    )

    assert merged.avg_position == 2.0
    assert merged.total_responses == 10


def test_aggregate_of_nothing_is_none() -> None:
    assert aggregate_metrics([]) == MetricsSnapshot.empty()

    merged = aggregate_metrics([MetricsSnapshot.empty(), _snapshot(3)])
    assert merged.mention_rate is None
    assert merged.avg_position is None
    assert merged.avg_sentiment is None
    assert merged.feature_score is None
    assert merged.total_responses == 3


def test_aggregate_matches_direct_computation_when_every_record_is_eligible() -> None:
    part_a = [_early(True, 0.4), _early(False, 0.8)]
    part_b = [_early(True, 0.3)]

    merged = aggregate_metrics([compute_metrics(part_a), compute_metrics(part_b)])
    direct = compute_metrics(part_a + part_b)

    assert merged.avg_sentiment == round_half_up(direct.avg_sentiment)
    assert merged.mention_rate == round_half_up(direct.mention_rate) == 67
    assert merged.avg_sentiment == 50


def test_aggregate_drifts_when_parts_hold_ineligible_records() -> None:
    # weights are response counts, not eligible-record counts
    part_a = [_early(True, 0.8), _early(True, None)]
    part_b = [_early(True, 0.2)]

    merged = aggregate_metrics([compute_metrics(part_a), compute_metrics(part_b)])
    direct = compute_metrics(part_a + part_b)

    assert merged.avg_sentiment == 60
    assert round_half_up(direct.avg_sentiment) == 50


def test_round_half_up() -> None:
    assert round_half_up(72.5) == 73
    assert round_half_up(73.49) == 73
    assert round_half_up(2.125, 2) == 2.13


def test_group_by_field_uses_unknown_for_missing_values() -> None:
    records = [_early(True, 0.1, 'EMEA'), _early(False, 0.2), _early(True, 0.3, 'EMEA')]
    grouped = group_by_field(records, 'geographic_region')

    assert list(grouped) == ['EMEA', 'Unknown']
    assert len(grouped['EMEA']) == 2
