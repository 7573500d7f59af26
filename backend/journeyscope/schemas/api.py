from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from journeyscope.schemas.common import SegmentType, TimePeriod


class MetricsOut(BaseModel):
    mention_rate: float | None
    avg_position: float | None
    avg_sentiment: float | None
    feature_score: float | None
    total_responses: int


class TimelinePoint(BaseModel):
    period: str
    metrics: MetricsOut


class DimensionGroupOut(BaseModel):
    value: str
    metrics: MetricsOut
    timeline: list[TimelinePoint]


class CompanyAnalysisResponse(BaseModel):
    company_id: int
    period: TimePeriod
    date_from: datetime
    date_to: datetime
    metrics: MetricsOut
    regions: list[DimensionGroupOut]
    timeline: list[TimelinePoint]


class DimensionBreakdownResponse(BaseModel):
    company_id: int
    dimension: str
    period: TimePeriod
    date_from: datetime
    date_to: datetime
    region: str | None = None
    vertical: str | None = None
    metrics: MetricsOut
    groups: list[DimensionGroupOut]


class QueryResultOut(BaseModel):
    query_id: int | None
    query_text: str
    answer_engine: str
    response_text: str | None
    metrics: MetricsOut
    platform_rankings: dict[str, int]
    rankings_error: str | None = None
    competitors: list[str]
    mentioned_companies: list[str]
    citations: list[str]


class StageAnalysisOut(BaseModel):
    stage: str
    stage_label: str
    metrics: MetricsOut
    queries: list[QueryResultOut]
    timeline: list[TimelinePoint]


class StageAnalysisResponse(BaseModel):
    company_id: int
    region: str
    vertical: str
    persona: str
    batch_id: str | None = None
    period: TimePeriod
    date_from: datetime
    date_to: datetime
    stages: list[StageAnalysisOut]


class TimeSegmentOut(BaseModel):
    id: str
    type: SegmentType
    start_date: datetime
    end_date: datetime
    label: str
    response_count: int


class SegmentsResponse(BaseModel):
    company_id: int
    mode: SegmentType
    date_from: datetime
    date_to: datetime
    segments: list[TimeSegmentOut]


class MetricChangesOut(BaseModel):
    mention_rate: float | None
    avg_position: float
    avg_sentiment: float | None
    feature_score: float | None
    position_comparable: bool


class SegmentComparisonResponse(BaseModel):
    company_id: int
    segment: TimeSegmentOut
    previous_segment: TimeSegmentOut | None
    current: MetricsOut
    previous: MetricsOut | None
    changes: MetricChangesOut | None


class MetricCountsOut(BaseModel):
    mention_rate: int
    avg_position: int
    avg_sentiment: int
    feature_score: int


class EngineMetricsOut(BaseModel):
    engine: str
    metrics: MetricsOut
    metric_counts: MetricCountsOut


class EngineSegmentOut(BaseModel):
    segment: TimeSegmentOut
    engines: list[EngineMetricsOut]


class EngineBreakdownResponse(BaseModel):
    company_id: int
    mode: SegmentType
    date_from: datetime
    date_to: datetime
    engines: list[str]
    segments: list[EngineSegmentOut]
