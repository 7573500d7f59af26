from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from journeyscope.db.base import Base


class ResponseAnalysis(Base):
    __tablename__ = 'response_analysis'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    account_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    created_at: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    analysis_batch_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)

    geographic_region: Mapped[str | None] = mapped_column(String(128), nullable=True)
    icp_vertical: Mapped[str | None] = mapped_column(String(128), nullable=True)
    buyer_persona: Mapped[str | None] = mapped_column(String(128), nullable=True)
    buying_journey_stage: Mapped[str | None] = mapped_column(String(32), nullable=True)

    query_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    query_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    answer_engine: Mapped[str] = mapped_column(String(64), nullable=False)
    response_text: Mapped[str | None] = mapped_column(Text, nullable=True)

    sentiment_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    ranking_position: Mapped[int | None] = mapped_column(Integer, nullable=True)
    company_mentioned: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    recommended: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    solution_analysis: Mapped[Any] = mapped_column(JSON, nullable=True)
    rank_list: Mapped[str | None] = mapped_column(Text, nullable=True)
    citations_parsed: Mapped[Any] = mapped_column(JSON, nullable=True)
    mentioned_companies: Mapped[Any] = mapped_column(JSON, nullable=True)
    competitors_list: Mapped[Any] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        Index('ix_response_analysis_company_created', 'company_id', 'created_at'),
        Index('ix_response_analysis_company_region_vertical', 'company_id', 'geographic_region', 'icp_vertical'),
    )
