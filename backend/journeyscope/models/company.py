from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journeyscope.db.base import Base


class Company(Base):
    __tablename__ = 'companies'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    industry: Mapped[str | None] = mapped_column(String(255), nullable=True)
    number_of_employees: Mapped[int | None] = mapped_column(Integer, nullable=True)
    annual_revenue: Mapped[str | None] = mapped_column(String(64), nullable=True)
    markets_operating_in: Mapped[Any] = mapped_column(JSON, nullable=True)
    setup_completed_at: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), nullable=False)

    products = relationship('Product', back_populates='company', cascade='all, delete-orphan')
    competitors = relationship('Competitor', back_populates='company', cascade='all, delete-orphan')
    icps = relationship('IdealCustomerProfile', back_populates='company', cascade='all, delete-orphan')


class Product(Base):
    __tablename__ = 'products'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True)
    account_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')

    company = relationship('Company', back_populates='products')


class Competitor(Base):
    __tablename__ = 'competitors'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True)
    account_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    competitor_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')

    company = relationship('Company', back_populates='competitors')


class IdealCustomerProfile(Base):
    __tablename__ = 'ideal_customer_profiles'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True)
    account_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    vertical: Mapped[str] = mapped_column(String(255), nullable=False)
    company_size: Mapped[str] = mapped_column(String(64), nullable=False)
    region: Mapped[str] = mapped_column(String(128), nullable=False)

    company = relationship('Company', back_populates='icps')
    personas = relationship('Persona', back_populates='icp', cascade='all, delete-orphan')


class Persona(Base):
    __tablename__ = 'personas'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    icp_id: Mapped[int] = mapped_column(
        ForeignKey('ideal_customer_profiles.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    account_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    seniority_level: Mapped[str] = mapped_column(String(64), nullable=False)
    department: Mapped[str] = mapped_column(String(128), nullable=False)

    icp = relationship('IdealCustomerProfile', back_populates='personas')
