from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from journeyscope.api.deps import get_db, get_wizard_service
from journeyscope.schemas.common import WizardStep
from journeyscope.schemas.wizard import WizardSessionCreate, WizardSessionOut
from journeyscope.services.errors import WizardNotFoundError, WizardPersistenceError, WizardStateError
from journeyscope.services.wizard_service import WizardService

router = APIRouter(prefix='/wizard/sessions')


@router.post('', response_model=WizardSessionOut, status_code=201)
def create_wizard_session(
    payload: WizardSessionCreate,
    db: Session = Depends(get_db),
    wizard_service: WizardService = Depends(get_wizard_service),
) -> WizardSessionOut:
    try:
        row = wizard_service.create_session(db, account_id=payload.account_id, company_name=payload.company_name)
    except WizardStateError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return wizard_service.to_out(row)


@router.get('/{session_id}', response_model=WizardSessionOut)
def get_wizard_session(
    session_id: str,
    db: Session = Depends(get_db),
    wizard_service: WizardService = Depends(get_wizard_service),
) -> WizardSessionOut:
    try:
        row = wizard_service.get_session(db, session_id)
    except WizardNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return wizard_service.to_out(row)


@router.put('/{session_id}/steps/{step}', response_model=WizardSessionOut)
def update_wizard_step(
    session_id: str,
    step: WizardStep,
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    wizard_service: WizardService = Depends(get_wizard_service),
) -> WizardSessionOut:
    try:
        row = wizard_service.update_step(db, session_id, step, payload)
    except WizardNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except WizardStateError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return wizard_service.to_out(row)


@router.post('/{session_id}/advance', response_model=WizardSessionOut)
def advance_wizard(
    session_id: str,
    db: Session = Depends(get_db),
    wizard_service: WizardService = Depends(get_wizard_service),
) -> WizardSessionOut:
    try:
        row = wizard_service.advance(db, session_id)
    except WizardNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except WizardStateError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return wizard_service.to_out(row)


@router.post('/{session_id}/back', response_model=WizardSessionOut)
def wizard_back(
    session_id: str,
    db: Session = Depends(get_db),
    wizard_service: WizardService = Depends(get_wizard_service),
) -> WizardSessionOut:
    try:
        row = wizard_service.back(db, session_id)
    except WizardNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except WizardStateError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return wizard_service.to_out(row)


@router.post('/{session_id}/submit', response_model=WizardSessionOut)
def submit_wizard(
    session_id: str,
    db: Session = Depends(get_db),
    wizard_service: WizardService = Depends(get_wizard_service),
) -> WizardSessionOut:
    try:
        row = wizard_service.submit(db, session_id)
    except WizardNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except WizardStateError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except WizardPersistenceError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return wizard_service.to_out(row)
