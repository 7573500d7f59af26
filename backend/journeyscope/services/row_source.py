from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from journeyscope.models.response_analysis import ResponseAnalysis
from journeyscope.services.analytics.records import ResponseRecord, record_from_row
from journeyscope.services.errors import EmptyResultError, RowSourceError
from journeyscope.utils.timezone import ensure_aware

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AnalysisScope:
    company_id: int
    account_id: str | None
    start: datetime
    end: datetime
    is_super_admin: bool = False
    region: str | None = None
    vertical: str | None = None
    persona: str | None = None
    batch_id: str | None = None
    batch_is_null: bool = False

    def narrowed(self, **changes: object) -> AnalysisScope:
        return replace(self, **changes)

    def describe(self) -> str:
        parts = [f'company {self.company_id}']
        if self.region:
            parts.append(f'region {self.region}')
        if self.vertical:
            parts.append(f'vertical {self.vertical}')
        if self.persona:
            parts.append(f'persona {self.persona}')
        if self.batch_id:
            parts.append(f'batch {self.batch_id}')
        elif self.batch_is_null:
            parts.append('no batch')
        return ', '.join(parts)


def load_records(db: Session, scope: AnalysisScope) -> list[ResponseRecord]:
    query = select(ResponseAnalysis).where(
        ResponseAnalysis.company_id == scope.company_id,
        ResponseAnalysis.created_at >= _utc(scope.start),
        ResponseAnalysis.created_at <= _utc(scope.end),
    )
    if not scope.is_super_admin:
        query = query.where(ResponseAnalysis.account_id == scope.account_id)
    if scope.region:
        query = query.where(ResponseAnalysis.geographic_region == scope.region)
    if scope.vertical:
        query = query.where(ResponseAnalysis.icp_vertical == scope.vertical)
    if scope.persona:
        query = query.where(ResponseAnalysis.buyer_persona == scope.persona)
    if scope.batch_is_null:
        # records without a batch id are segmented together as the unknown batch
        query = query.where(
            or_(ResponseAnalysis.analysis_batch_id.is_(None), ResponseAnalysis.analysis_batch_id == ''),
        )
    elif scope.batch_id:
        query = query.where(ResponseAnalysis.analysis_batch_id == scope.batch_id)
    query = query.order_by(ResponseAnalysis.created_at.asc(), ResponseAnalysis.id.asc())

    try:
        rows = db.execute(query).scalars().all()
    except SQLAlchemyError as exc:
        LOGGER.exception('Failed to fetch analysis data for %s', scope.describe())
        raise RowSourceError(f'Failed to fetch analysis data: {exc}') from exc

    LOGGER.debug('Loaded %d responses for %s', len(rows), scope.describe())
    return [record_from_row(row) for row in rows]


def require_records(db: Session, scope: AnalysisScope) -> list[ResponseRecord]:
    records = load_records(db, scope)
    if not records:
        raise EmptyResultError(f'No analysis data found for {scope.describe()}')
    return records


def _utc(dt: datetime) -> datetime:
    return ensure_aware(dt).astimezone(timezone.utc)
