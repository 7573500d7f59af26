from __future__ import annotations

from journeyscope.services.analytics.metrics import (
    MetricsSnapshot,
    compute_metrics,
    feature_score,
    mention_rate,
)
from journeyscope.services.analytics.records import ResponseRecord


def _record(stage: str, **kwargs) -> ResponseRecord:  # type: ignore[no-untyped-def]
    return ResponseRecord(company_id=1, answer_engine='ChatGPT', buying_journey_stage=stage, **kwargs)


def test_metrics_cover_each_stage() -> None:
    records = [
        _record('problem_exploration', company_mentioned=True, sentiment_score=0.9),
        _record('solution_education', company_mentioned=False, sentiment_score=0.5),
        _record('solution_comparison', ranking_position=2, sentiment_score=0.4),
        _record('final_research', ranking_position=4),
        _record('solution_comparison', ranking_position=0),
        _record('solution_evaluation', solution_analysis={'featureA': 'YES', 'featureB': 'NO'}),
    ]

    snapshot = compute_metrics(records)

    assert snapshot.total_responses == 6
    assert snapshot.mention_rate == 50.0
    assert snapshot.avg_position == 3.0
    assert abs(snapshot.avg_sentiment - 60.0) < 1e-9
    assert snapshot.feature_score == 50.0


def test_empty_input_has_no_metrics_and_legacy_zeros() -> None:
    snapshot = compute_metrics([])

    assert snapshot == MetricsSnapshot.empty()
    assert snapshot.mention_rate is None
    assert snapshot.avg_position is None
    zeros = snapshot.or_zero()
    assert (zeros.mention_rate, zeros.avg_position, zeros.avg_sentiment, zeros.feature_score) == (0, 0, 0, 0)
    assert zeros.total_responses == 0


def test_mention_rate_ignores_late_stages() -> None:
    records = [
        _record('solution_comparison', company_mentioned=True),
        _record('problem_exploration', company_mentioned=False),
    ]
    assert mention_rate(records) == 0.0
    assert mention_rate(records[:1]) is None


def test_feature_score_accepts_json_strings_and_configured_positives() -> None:
    records = [
        _record('solution_evaluation', solution_analysis='{"sso": "Yes", "api": "partial", "audit": "no"}'),
    ]

    assert abs(feature_score(records) - 100.0 / 3) < 1e-9
    assert abs(feature_score(records, positive_values={'yes', 'Partial'}) - 200.0 / 3) < 1e-9


def test_malformed_solution_analysis_scores_zero_but_counts() -> None:
    records = [
        _record('solution_evaluation', solution_analysis='not json'),
        _record('solution_evaluation', solution_analysis={'a': 'yes'}),
        _record('solution_evaluation', solution_analysis=None),
    ]

    assert feature_score(records) == 50.0


def test_feature_score_empty_object_scores_zero() -> None:
    assert feature_score([_record('solution_evaluation', solution_analysis={})]) == 0.0
