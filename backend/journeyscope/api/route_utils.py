from __future__ import annotations

from datetime import datetime, timedelta

from fastapi import HTTPException
from sqlalchemy.orm import Session

from journeyscope.core.config import get_settings
from journeyscope.schemas.common import SegmentType, TimePeriod
from journeyscope.services.analytics.records import ResponseRecord
from journeyscope.services.analytics.segments import date_range_for_period
from journeyscope.services.errors import EmptyResultError, RowSourceError
from journeyscope.services.row_source import AnalysisScope, require_records
from journeyscope.utils.timezone import utc_now

settings = get_settings()


def parse_period_param(period: str | None) -> TimePeriod:
    if not period:
        return TimePeriod.weekly
    try:
        return TimePeriod(period.strip().lower())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="period must be 'weekly' or 'monthly'") from exc


def parse_mode_param(mode: str | None) -> SegmentType:
    if not mode:
        return SegmentType.batch
    try:
        return SegmentType(mode.strip().upper())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="mode must be 'batch', 'week' or 'month'") from exc


def require_account(account_id: str | None) -> str:
    if not account_id or not account_id.strip():
        raise HTTPException(status_code=400, detail='account_id is required')
    return account_id.strip()


def period_scope(company_id: int, account_id: str | None, period: TimePeriod, **filters: str | None) -> AnalysisScope:
    account = require_account(account_id)
    start, end = date_range_for_period(period, periods=settings.timeline_periods)
    return AnalysisScope(
        company_id=company_id,
        account_id=account,
        is_super_admin=settings.is_super_admin(account),
        start=start,
        end=end,
        **filters,
    )


def lookback_scope(company_id: int, account_id: str | None) -> AnalysisScope:
    account = require_account(account_id)
    end: datetime = utc_now()
    return AnalysisScope(
        company_id=company_id,
        account_id=account,
        is_super_admin=settings.is_super_admin(account),
        start=end - timedelta(days=settings.segment_lookback_days),
        end=end,
    )


def fetch_records(db: Session, scope: AnalysisScope) -> list[ResponseRecord]:
    try:
        return require_records(db, scope)
    except EmptyResultError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except RowSourceError as exc:
        raise HTTPException(status_code=500, detail='Failed to load analysis data') from exc
