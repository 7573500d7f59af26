from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from journeyscope.schemas.common import WizardStep


class PersonaIn(BaseModel):
    title: str
    seniority_level: str
    department: str


class IcpIn(BaseModel):
    vertical: str
    company_size: str
    region: str
    personas: list[PersonaIn] = Field(default_factory=list)


class ProductIn(BaseModel):
    name: str
    description: str = ''


class CompetitorIn(BaseModel):
    name: str
    description: str = ''


class CompanyInfoIn(BaseModel):
    industry: str | None = None
    number_of_employees: int | None = None
    annual_revenue: str | None = None
    markets_operating_in: list[str] = Field(default_factory=list)


class CompanyStepIn(BaseModel):
    company_name: str
    company_info: CompanyInfoIn | None = None


class ProductsStepIn(BaseModel):
    products: list[ProductIn]


class CompetitorsStepIn(BaseModel):
    competitors: list[CompetitorIn]


class IcpsStepIn(BaseModel):
    icps: list[IcpIn]


class WizardDraft(BaseModel):
    company_name: str = ''
    company_info: CompanyInfoIn | None = None
    products: list[ProductIn] = Field(default_factory=list)
    competitors: list[CompetitorIn] = Field(default_factory=list)
    icps: list[IcpIn] = Field(default_factory=list)


class WizardSessionCreate(BaseModel):
    account_id: str
    company_name: str = ''


class WizardSessionOut(BaseModel):
    id: str
    account_id: str
    current_step: WizardStep
    draft: WizardDraft
    completed_steps: list[WizardStep]
    company_id: int | None = None
    created_at: datetime
    updated_at: datetime
