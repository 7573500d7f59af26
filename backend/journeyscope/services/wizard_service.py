from __future__ import annotations

import logging
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from journeyscope.models.company import Company, Competitor, IdealCustomerProfile, Persona, Product
from journeyscope.models.wizard_session import WizardSession
from journeyscope.schemas.common import WIZARD_STEP_ORDER, WizardStep
from journeyscope.schemas.wizard import (
    CompanyStepIn,
    CompetitorsStepIn,
    IcpsStepIn,
    ProductsStepIn,
    WizardDraft,
    WizardSessionOut,
)
from journeyscope.services.errors import WizardNotFoundError, WizardPersistenceError, WizardStateError
from journeyscope.utils.timezone import ensure_aware, utc_now

LOGGER = logging.getLogger(__name__)

STEP_PAYLOADS: dict[WizardStep, type[BaseModel]] = {
    WizardStep.company: CompanyStepIn,
    WizardStep.products: ProductsStepIn,
    WizardStep.competitors: CompetitorsStepIn,
    WizardStep.icps: IcpsStepIn,
    WizardStep.personas: IcpsStepIn,
}


def step_errors(draft: WizardDraft, step: WizardStep) -> list[str]:
    """Validation problems that block leaving ``step``."""
    errors: list[str] = []
    if step == WizardStep.company:
        if not draft.company_name.strip():
            errors.append('company name is required')
    elif step == WizardStep.products:
        if not draft.products:
            errors.append('at least one product is required')
        errors.extend(f'product {idx + 1} needs a name' for idx, p in enumerate(draft.products) if not p.name.strip())
    elif step == WizardStep.competitors:
        if not draft.competitors:
            errors.append('at least one competitor is required')
        errors.extend(
            f'competitor {idx + 1} needs a name' for idx, c in enumerate(draft.competitors) if not c.name.strip()
        )
    elif step == WizardStep.icps:
        if not draft.icps:
            errors.append('at least one ICP is required')
        for idx, icp in enumerate(draft.icps):
            missing = [name for name in ('vertical', 'company_size', 'region') if not getattr(icp, name).strip()]
            if missing:
                errors.append(f"ICP {idx + 1} is missing {', '.join(missing)}")
    elif step == WizardStep.personas:
        if not any(icp.personas for icp in draft.icps):
            errors.append('at least one persona is required')
        for icp_idx, icp in enumerate(draft.icps):
            for idx, persona in enumerate(icp.personas):
                missing = [
                    name for name in ('title', 'seniority_level', 'department') if not getattr(persona, name).strip()
                ]
                if missing:
                    errors.append(f"ICP {icp_idx + 1} persona {idx + 1} is missing {', '.join(missing)}")
    elif step == WizardStep.review:
        for earlier in WIZARD_STEP_ORDER[: WIZARD_STEP_ORDER.index(WizardStep.review)]:
            errors.extend(step_errors(draft, earlier))
    return errors


class WizardService:
    """Company setup wizard as an explicit state machine.

    Steps run company -> products -> competitors -> icps -> personas -> review -> done.
    The draft is stored as JSON on every change so an interrupted session can resume,
    and ``submit`` writes every table in a single transaction.
    """

    def create_session(self, db: Session, *, account_id: str, company_name: str = '') -> WizardSession:
        if not account_id.strip():
            raise WizardStateError('account_id is required')
        now = utc_now()
        row = WizardSession(
            id=str(uuid4()),
            account_id=account_id.strip(),
            current_step=WizardStep.company.value,
            draft_json=WizardDraft(company_name=company_name).model_dump_json(),
            created_at=now,
            updated_at=now,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        LOGGER.info('Started setup wizard %s for account %s', row.id, row.account_id)
        return row

    def get_session(self, db: Session, session_id: str) -> WizardSession:
        row = db.get(WizardSession, session_id)
        if row is None:
            raise WizardNotFoundError(f'Wizard session {session_id} not found')
        return row

    def load_draft(self, row: WizardSession) -> WizardDraft:
        return WizardDraft.model_validate_json(row.draft_json)

    def update_step(self, db: Session, session_id: str, step: WizardStep, payload: dict[str, Any]) -> WizardSession:
        row = self.get_session(db, session_id)
        current = WizardStep(row.current_step)
        if step not in STEP_PAYLOADS:
            raise WizardStateError(f'step {step.value} does not accept data')
        if current == WizardStep.done:
            raise WizardStateError('wizard is already submitted')
        if _index(step) > _index(current):
            raise WizardStateError(f'cannot edit {step.value} before reaching it (current step: {current.value})')

        try:
            data = STEP_PAYLOADS[step].model_validate(payload)
        except ValidationError as exc:
            raise WizardStateError(f'invalid {step.value} data: {exc.error_count()} error(s)') from exc

        draft = self.load_draft(row)
        if isinstance(data, CompanyStepIn):
            draft.company_name = data.company_name
            if data.company_info is not None:
                draft.company_info = data.company_info
        elif isinstance(data, ProductsStepIn):
            draft.products = data.products
        elif isinstance(data, CompetitorsStepIn):
            draft.competitors = data.competitors
        elif isinstance(data, IcpsStepIn):
            draft.icps = data.icps

        return self._save(db, row, draft=draft)

    def advance(self, db: Session, session_id: str) -> WizardSession:
        row = self.get_session(db, session_id)
        current = WizardStep(row.current_step)
        if current in {WizardStep.review, WizardStep.done}:
            raise WizardStateError(f'cannot advance from {current.value}; submit the wizard instead')

        errors = step_errors(self.load_draft(row), current)
        if errors:
            raise WizardStateError('; '.join(errors))
        return self._save(db, row, step=WIZARD_STEP_ORDER[_index(current) + 1])

    def back(self, db: Session, session_id: str) -> WizardSession:
        row = self.get_session(db, session_id)
        current = WizardStep(row.current_step)
        if current == WizardStep.done:
            raise WizardStateError('wizard is already submitted')
        if current == WizardStep.company:
            raise WizardStateError('already at the first step')
        return self._save(db, row, step=WIZARD_STEP_ORDER[_index(current) - 1])

    def submit(self, db: Session, session_id: str) -> WizardSession:
        row = self.get_session(db, session_id)
        current = WizardStep(row.current_step)
        if current != WizardStep.review:
            raise WizardStateError(f'wizard can only be submitted from review (current step: {current.value})')

        draft = self.load_draft(row)
        errors = step_errors(draft, WizardStep.review)
        if errors:
            raise WizardStateError('; '.join(errors))

        account_id = row.account_id
        try:
            company = build_company_graph(draft, account_id=account_id)
            db.add(company)
            db.flush()
            row.company_id = company.id
            row.current_step = WizardStep.done.value
            row.updated_at = utc_now()
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            LOGGER.exception('Failed to save setup wizard %s', session_id)
            raise WizardPersistenceError('Failed to save company setup; nothing was written') from exc

        db.refresh(row)
        LOGGER.info('Setup wizard %s created company %s', row.id, row.company_id)
        return row

    def to_out(self, row: WizardSession) -> WizardSessionOut:
        current = WizardStep(row.current_step)
        return WizardSessionOut(
            id=row.id,
            account_id=row.account_id,
            current_step=current,
            draft=self.load_draft(row),
            completed_steps=WIZARD_STEP_ORDER[: _index(current)],
            company_id=row.company_id,
            created_at=ensure_aware(row.created_at),
            updated_at=ensure_aware(row.updated_at),
        )

    def _save(
        self,
        db: Session,
        row: WizardSession,
        *,
        draft: WizardDraft | None = None,
        step: WizardStep | None = None,
    ) -> WizardSession:
        if draft is not None:
            row.draft_json = draft.model_dump_json()
        if step is not None:
            row.current_step = step.value
        row.updated_at = utc_now()
        db.commit()
        db.refresh(row)
        return row


def build_company_graph(draft: WizardDraft, *, account_id: str) -> Company:
    info = draft.company_info
    now = utc_now()
    return Company(
        name=draft.company_name.strip(),
        account_id=account_id,
        industry=info.industry if info else None,
        number_of_employees=info.number_of_employees if info else None,
        annual_revenue=info.annual_revenue if info else None,
        markets_operating_in=list(info.markets_operating_in) if info else None,
        setup_completed_at=now,
        created_at=now,
        products=[
            Product(name=p.name.strip(), description=p.description, account_id=account_id) for p in draft.products
        ],
        competitors=[
            Competitor(competitor_name=c.name.strip(), description=c.description, account_id=account_id)
            for c in draft.competitors
        ],
        icps=[
            IdealCustomerProfile(
                vertical=icp.vertical.strip(),
                company_size=icp.company_size.strip(),
                region=icp.region.strip(),
                account_id=account_id,
                personas=[
                    Persona(
                        title=persona.title.strip(),
                        seniority_level=persona.seniority_level.strip(),
                        department=persona.department.strip(),
                        account_id=account_id,
                    )
                    for persona in icp.personas
                ],
            )
            for icp in draft.icps
        ],
    )


def _index(step: WizardStep) -> int:
    return WIZARD_STEP_ORDER.index(step)
