from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from journeyscope.api.deps import get_db
from journeyscope.api.route_utils import (
    fetch_records,
    lookback_scope,
    parse_mode_param,
    parse_period_param,
    period_scope,
    settings,
)
from journeyscope.schemas.api import (
    CompanyAnalysisResponse,
    DimensionBreakdownResponse,
    EngineBreakdownResponse,
    SegmentComparisonResponse,
    SegmentsResponse,
    StageAnalysisResponse,
)
from journeyscope.services.analytics.segments import segment_records
from journeyscope.services.analytics.service import (
    build_company_analysis,
    build_dimension_breakdown,
    build_engine_breakdown,
    build_segment_comparison,
    build_segments_response,
    build_stage_analysis,
)
from journeyscope.services.errors import RowSourceError
from journeyscope.services.row_source import load_records

router = APIRouter(prefix='/companies/{company_id}')


@router.get('/analysis', response_model=CompanyAnalysisResponse)
def get_company_analysis(
    company_id: int,
    account_id: str | None = Query(default=None),
    period: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> CompanyAnalysisResponse:
    time_period = parse_period_param(period)
    scope = period_scope(company_id, account_id, time_period)
    return build_company_analysis(
        records=fetch_records(db, scope),
        scope=scope,
        period=time_period,
        positive_values=settings.feature_positive_values,
    )


@router.get('/regions', response_model=DimensionBreakdownResponse)
def get_regions(
    company_id: int,
    account_id: str | None = Query(default=None),
    period: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> DimensionBreakdownResponse:
    time_period = parse_period_param(period)
    scope = period_scope(company_id, account_id, time_period)
    return build_dimension_breakdown(
        records=fetch_records(db, scope),
        scope=scope,
        dimension='region',
        period=time_period,
        positive_values=settings.feature_positive_values,
    )


@router.get('/regions/{region}/verticals', response_model=DimensionBreakdownResponse)
def get_verticals(
    company_id: int,
    region: str,
    account_id: str | None = Query(default=None),
    period: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> DimensionBreakdownResponse:
    time_period = parse_period_param(period)
    scope = period_scope(company_id, account_id, time_period, region=region)
    return build_dimension_breakdown(
        records=fetch_records(db, scope),
        scope=scope,
        dimension='vertical',
        period=time_period,
        positive_values=settings.feature_positive_values,
    )


@router.get('/regions/{region}/verticals/{vertical}/personas', response_model=DimensionBreakdownResponse)
def get_personas(
    company_id: int,
    region: str,
    vertical: str,
    account_id: str | None = Query(default=None),
    period: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> DimensionBreakdownResponse:
    time_period = parse_period_param(period)
    scope = period_scope(company_id, account_id, time_period, region=region, vertical=vertical)
    return build_dimension_breakdown(
        records=fetch_records(db, scope),
        scope=scope,
        dimension='persona',
        period=time_period,
        positive_values=settings.feature_positive_values,
    )


@router.get(
    '/regions/{region}/verticals/{vertical}/personas/{persona}/stages',
    response_model=StageAnalysisResponse,
)
def get_stages(
    company_id: int,
    region: str,
    vertical: str,
    persona: str,
    account_id: str | None = Query(default=None),
    period: str | None = Query(default=None),
    batch_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> StageAnalysisResponse:
    time_period = parse_period_param(period)
    scope = period_scope(
        company_id,
        account_id,
        time_period,
        region=region,
        vertical=vertical,
        persona=persona,
        batch_id=batch_id or None,
    )
    return build_stage_analysis(
        records=fetch_records(db, scope),
        scope=scope,
        period=time_period,
        positive_values=settings.feature_positive_values,
    )


@router.get('/segments', response_model=SegmentsResponse)
def get_segments(
    company_id: int,
    account_id: str | None = Query(default=None),
    mode: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> SegmentsResponse:
    segment_mode = parse_mode_param(mode)
    scope = lookback_scope(company_id, account_id)
    try:
        records = load_records(db, scope)
    except RowSourceError as exc:
        raise HTTPException(status_code=500, detail='Failed to load time segments') from exc
    return build_segments_response(
        segments=segment_records(records, segment_mode),
        scope=scope,
        mode=segment_mode,
    )


@router.get('/engines', response_model=EngineBreakdownResponse)
def get_engine_breakdown(
    company_id: int,
    account_id: str | None = Query(default=None),
    mode: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> EngineBreakdownResponse:
    segment_mode = parse_mode_param(mode)
    scope = lookback_scope(company_id, account_id)
    try:
        records = load_records(db, scope)
    except RowSourceError as exc:
        raise HTTPException(status_code=500, detail='Failed to load engine metrics') from exc
    return build_engine_breakdown(
        records=records,
        scope=scope,
        mode=segment_mode,
        positive_values=settings.feature_positive_values,
    )


@router.get('/segments/{segment_id}/comparison', response_model=SegmentComparisonResponse)
def get_segment_comparison(
    company_id: int,
    segment_id: str,
    account_id: str | None = Query(default=None),
    mode: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> SegmentComparisonResponse:
    segment_mode = parse_mode_param(mode)
    scope = lookback_scope(company_id, account_id)
    try:
        segments = segment_records(load_records(db, scope), segment_mode)
        return build_segment_comparison(
            db,
            scope=scope,
            segments=segments,
            segment_id=segment_id,
            positive_values=settings.feature_positive_values,
        )
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except RowSourceError as exc:
        raise HTTPException(status_code=500, detail='Failed to load metrics') from exc
