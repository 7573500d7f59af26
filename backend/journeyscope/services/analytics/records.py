from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from journeyscope.models.response_analysis import ResponseAnalysis
from journeyscope.utils.timezone import ensure_aware


@dataclass(frozen=True, slots=True)
class ResponseRecord:
    company_id: int
    answer_engine: str
    created_at: datetime | None = None
    batch_id: str | None = None
    geographic_region: str | None = None
    icp_vertical: str | None = None
    buyer_persona: str | None = None
    buying_journey_stage: str | None = None
    sentiment_score: float | None = None
    ranking_position: int | None = None
    company_mentioned: bool = False
    solution_analysis: Any = None
    rank_list: str | None = None
    response_text: str | None = None
    citations: tuple[str, ...] = ()
    mentioned_companies: tuple[str, ...] = ()
    competitors: tuple[str, ...] = ()
    query_id: int | None = None
    query_text: str | None = None
    id: int | None = None


def record_from_row(row: ResponseAnalysis) -> ResponseRecord:
    return ResponseRecord(
        id=row.id,
        company_id=row.company_id,
        answer_engine=row.answer_engine,
        created_at=ensure_aware(row.created_at) if row.created_at is not None else None,
        batch_id=row.analysis_batch_id,
        geographic_region=row.geographic_region,
        icp_vertical=row.icp_vertical,
        buyer_persona=row.buyer_persona,
        buying_journey_stage=row.buying_journey_stage,
        sentiment_score=row.sentiment_score,
        ranking_position=row.ranking_position,
        company_mentioned=bool(row.company_mentioned),
        solution_analysis=row.solution_analysis,
        rank_list=row.rank_list,
        response_text=row.response_text,
        citations=_citation_urls(row.citations_parsed),
        mentioned_companies=tuple(row.mentioned_companies or ()),
        competitors=tuple(row.competitors_list or ()),
        query_id=row.query_id,
        query_text=row.query_text,
    )


def _citation_urls(value: Any) -> tuple[str, ...]:
    if isinstance(value, dict):
        urls = value.get('urls') or []
        return tuple(str(url) for url in urls)
    if isinstance(value, list):
        return tuple(str(url) for url in value)
    return ()
