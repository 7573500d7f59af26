from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
import logging

from sqlalchemy.orm import Session

from journeyscope.schemas.api import (
    CompanyAnalysisResponse,
    DimensionBreakdownResponse,
    DimensionGroupOut,
    EngineBreakdownResponse,
    EngineMetricsOut,
    EngineSegmentOut,
    MetricChangesOut,
    MetricCountsOut,
    MetricsOut,
    QueryResultOut,
    SegmentComparisonResponse,
    SegmentsResponse,
    StageAnalysisOut,
    StageAnalysisResponse,
    TimelinePoint,
    TimeSegmentOut,
)
from journeyscope.schemas.common import STAGE_LABELS, SegmentType, TimePeriod
from journeyscope.services.analytics.aggregation import aggregate_metrics, group_by_field
from journeyscope.services.analytics.deltas import compare_snapshots
from journeyscope.services.analytics.metrics import (
    DEFAULT_POSITIVE_VALUES,
    MetricsSnapshot,
    compute_metrics,
    eligible_counts,
)
from journeyscope.services.analytics.parsing import ParseFailure, parse_rank_list
from journeyscope.services.analytics.records import ResponseRecord
from journeyscope.services.analytics.segments import (
    UNKNOWN_BATCH,
    TimeSegment,
    find_previous_segment,
    group_by_period,
    segment_key,
    segment_records,
)
from journeyscope.services.row_source import AnalysisScope, load_records
from journeyscope.utils.timezone import utc_now

LOGGER = logging.getLogger(__name__)

DIMENSION_FIELDS = {
    'region': 'geographic_region',
    'vertical': 'icp_vertical',
    'persona': 'buyer_persona',
}
UNKNOWN_STAGE = 'Unknown'


def metrics_out(snapshot: MetricsSnapshot) -> MetricsOut:
    return MetricsOut(
        mention_rate=snapshot.mention_rate,
        avg_position=snapshot.avg_position,
        avg_sentiment=snapshot.avg_sentiment,
        feature_score=snapshot.feature_score,
        total_responses=snapshot.total_responses,
    )


def segment_out(segment: TimeSegment) -> TimeSegmentOut:
    return TimeSegmentOut(
        id=segment.id,
        type=segment.type,
        start_date=segment.start_date,
        end_date=segment.end_date,
        label=segment.label,
        response_count=segment.response_count,
    )


def build_timeline(
    records: Sequence[ResponseRecord],
    period: TimePeriod,
    *,
    positive_values: Iterable[str] = DEFAULT_POSITIVE_VALUES,
) -> list[TimelinePoint]:
    return [
        TimelinePoint(
            period=key,
            metrics=metrics_out(compute_metrics(items, positive_values=positive_values)),
        )
        for key, items in group_by_period(records, period).items()
    ]


def build_dimension_groups(
    records: Sequence[ResponseRecord],
    field: str,
    period: TimePeriod,
    *,
    positive_values: Iterable[str] = DEFAULT_POSITIVE_VALUES,
) -> tuple[list[DimensionGroupOut], list[MetricsSnapshot]]:
    groups: list[DimensionGroupOut] = []
    snapshots: list[MetricsSnapshot] = []
    for value, items in group_by_field(records, field).items():
        snapshot = compute_metrics(items, positive_values=positive_values)
        snapshots.append(snapshot)
        groups.append(
            DimensionGroupOut(
                value=value,
                metrics=metrics_out(snapshot),
                timeline=build_timeline(items, period, positive_values=positive_values),
            )
        )
    return groups, snapshots


def build_company_analysis(
    *,
    records: Sequence[ResponseRecord],
    scope: AnalysisScope,
    period: TimePeriod,
    positive_values: Iterable[str] = DEFAULT_POSITIVE_VALUES,
) -> CompanyAnalysisResponse:
    regions, region_snapshots = build_dimension_groups(
        records,
        DIMENSION_FIELDS['region'],
        period,
        positive_values=positive_values,
    )
    return CompanyAnalysisResponse(
        company_id=scope.company_id,
        period=period,
        date_from=scope.start,
        date_to=scope.end,
        metrics=metrics_out(aggregate_metrics(region_snapshots)),
        regions=regions,
        timeline=build_timeline(records, period, positive_values=positive_values),
    )


def build_dimension_breakdown(
    *,
    records: Sequence[ResponseRecord],
    scope: AnalysisScope,
    dimension: str,
    period: TimePeriod,
    positive_values: Iterable[str] = DEFAULT_POSITIVE_VALUES,
) -> DimensionBreakdownResponse:
    field = DIMENSION_FIELDS[dimension]
    groups, snapshots = build_dimension_groups(records, field, period, positive_values=positive_values)
    return DimensionBreakdownResponse(
        company_id=scope.company_id,
        dimension=dimension,
        period=period,
        date_from=scope.start,
        date_to=scope.end,
        region=scope.region,
        vertical=scope.vertical,
        metrics=metrics_out(aggregate_metrics(snapshots)),
        groups=groups,
    )


def build_stage_analysis(
    *,
    records: Sequence[ResponseRecord],
    scope: AnalysisScope,
    period: TimePeriod,
    positive_values: Iterable[str] = DEFAULT_POSITIVE_VALUES,
) -> StageAnalysisResponse:
    by_stage: dict[str, list[ResponseRecord]] = {}
    for record in records:
        by_stage.setdefault(record.buying_journey_stage or UNKNOWN_STAGE, []).append(record)

    stages: list[StageAnalysisOut] = []
    for stage, items in by_stage.items():
        per_query = [compute_metrics([item], positive_values=positive_values) for item in items]
        timeline = [
            TimelinePoint(
                period=key,
                metrics=metrics_out(
                    aggregate_metrics([compute_metrics([item], positive_values=positive_values) for item in bucket])
                ),
            )
            for key, bucket in group_by_period(items, period).items()
        ]
        stages.append(
            StageAnalysisOut(
                stage=stage,
                stage_label=STAGE_LABELS.get(stage, stage),
                metrics=metrics_out(aggregate_metrics(per_query)),
                queries=[_query_result(item, snapshot) for item, snapshot in zip(items, per_query)],
                timeline=timeline,
            )
        )

    return StageAnalysisResponse(
        company_id=scope.company_id,
        region=scope.region or '',
        vertical=scope.vertical or '',
        persona=scope.persona or '',
        batch_id=scope.batch_id,
        period=period,
        date_from=scope.start,
        date_to=scope.end,
        stages=stages,
    )


def _query_result(record: ResponseRecord, snapshot: MetricsSnapshot) -> QueryResultOut:
    rankings = parse_rank_list(record.rank_list)
    if isinstance(rankings, ParseFailure):
        LOGGER.warning('Ignoring malformed rank_list on response %s: %s', record.id, rankings.reason)
        platform_rankings: dict[str, int] = {}
        rankings_error: str | None = rankings.reason
    else:
        platform_rankings = rankings.rankings
        rankings_error = None

    return QueryResultOut(
        query_id=record.query_id,
        query_text=record.query_text or '',
        answer_engine=record.answer_engine,
        response_text=record.response_text,
        metrics=metrics_out(snapshot),
        platform_rankings=platform_rankings,
        rankings_error=rankings_error,
        competitors=list(record.competitors),
        mentioned_companies=list(record.mentioned_companies),
        citations=list(record.citations),
    )


def build_segments_response(
    *,
    segments: Sequence[TimeSegment],
    scope: AnalysisScope,
    mode: SegmentType,
) -> SegmentsResponse:
    return SegmentsResponse(
        company_id=scope.company_id,
        mode=mode,
        date_from=scope.start,
        date_to=scope.end,
        segments=[segment_out(segment) for segment in segments],
    )


def build_segment_comparison(
    db: Session,
    *,
    scope: AnalysisScope,
    segments: Sequence[TimeSegment],
    segment_id: str,
    positive_values: Iterable[str] = DEFAULT_POSITIVE_VALUES,
) -> SegmentComparisonResponse:
    segment = next((s for s in segments if s.id == segment_id), None)
    if segment is None:
        raise LookupError(f'Unknown segment {segment_id}')
    previous_segment = find_previous_segment(segments, segment_id)

    current = compute_metrics(load_records(db, _segment_scope(scope, segment)), positive_values=positive_values)
    previous = None
    if previous_segment is not None:
        previous = compute_metrics(
            load_records(db, _segment_scope(scope, previous_segment)),
            positive_values=positive_values,
        )

    comparison = compare_snapshots(current, previous)
    changes = None
    if comparison.changes is not None:
        changes = MetricChangesOut(
            mention_rate=comparison.changes.mention_rate,
            avg_position=comparison.changes.avg_position,
            avg_sentiment=comparison.changes.avg_sentiment,
            feature_score=comparison.changes.feature_score,
            position_comparable=comparison.changes.position_comparable,
        )

    return SegmentComparisonResponse(
        company_id=scope.company_id,
        segment=segment_out(segment),
        previous_segment=segment_out(previous_segment) if previous_segment is not None else None,
        current=metrics_out(comparison.current),
        previous=metrics_out(comparison.previous) if comparison.previous is not None else None,
        changes=changes,
    )


def _segment_scope(scope: AnalysisScope, segment: TimeSegment) -> AnalysisScope:
    if segment.type != SegmentType.batch:
        return scope.narrowed(start=segment.start_date, end=segment.end_date, batch_id=None, batch_is_null=False)
    if segment.id == UNKNOWN_BATCH:
        return scope.narrowed(start=segment.start_date, end=segment.end_date, batch_id=None, batch_is_null=True)
    return scope.narrowed(start=segment.start_date, end=segment.end_date, batch_id=segment.id, batch_is_null=False)


def build_engine_breakdown(
    *,
    records: Sequence[ResponseRecord],
    scope: AnalysisScope,
    mode: SegmentType,
    positive_values: Iterable[str] = DEFAULT_POSITIVE_VALUES,
    reference_time: datetime | None = None,
) -> EngineBreakdownResponse:
    """Per answer engine metrics inside each batch, week or month segment."""
    if reference_time is None:
        reference_time = utc_now()

    by_segment: dict[str, list[ResponseRecord]] = {}
    for record in records:
        by_segment.setdefault(segment_key(record, mode, reference_time=reference_time), []).append(record)

    engine_names: list[str] = []
    segments: list[EngineSegmentOut] = []
    for segment in segment_records(records, mode, reference_time=reference_time):
        engines: list[EngineMetricsOut] = []
        for engine, items in sorted(group_by_field(by_segment.get(segment.id, []), 'answer_engine').items()):
            if engine not in engine_names:
                engine_names.append(engine)
            engines.append(
                EngineMetricsOut(
                    engine=engine,
                    metrics=metrics_out(compute_metrics(items, positive_values=positive_values)),
                    metric_counts=MetricCountsOut(**eligible_counts(items)),
                )
            )
        segments.append(EngineSegmentOut(segment=segment_out(segment), engines=engines))

    return EngineBreakdownResponse(
        company_id=scope.company_id,
        mode=mode,
        date_from=scope.start,
        date_to=scope.end,
        engines=sorted(engine_names),
        segments=segments,
    )
