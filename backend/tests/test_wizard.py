from __future__ import annotations

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from journeyscope.db.session import SessionLocal
from journeyscope.main import app
from journeyscope.models.company import Company, Competitor, IdealCustomerProfile, Persona, Product
from journeyscope.schemas.common import WizardStep
from journeyscope.schemas.wizard import WizardDraft
from journeyscope.services.errors import WizardPersistenceError, WizardStateError
from journeyscope.services.wizard_service import WizardService, step_errors

ICP = {'vertical': 'Fintech', 'company_size': '50-200', 'region': 'EMEA'}
PERSONA = {'title': 'CFO', 'seniority_level': 'C-level', 'department': 'Finance'}


def _walk_to_review(client: TestClient, session_id: str) -> None:
    base = f'/api/wizard/sessions/{session_id}'
    assert client.post(f'{base}/advance').status_code == 200
    assert client.put(f'{base}/steps/products', json={'products': [{'name': 'Ledger'}]}).status_code == 200
    assert client.post(f'{base}/advance').status_code == 200
    assert client.put(f'{base}/steps/competitors', json={'competitors': [{'name': 'Globex'}]}).status_code == 200
    assert client.post(f'{base}/advance').status_code == 200
    assert client.put(f'{base}/steps/icps', json={'icps': [ICP]}).status_code == 200
    assert client.post(f'{base}/advance').status_code == 200
    assert client.put(f'{base}/steps/personas', json={'icps': [{**ICP, 'personas': [PERSONA]}]}).status_code == 200
    res = client.post(f'{base}/advance')
    assert res.status_code == 200
    assert res.json()['current_step'] == 'review'


def test_wizard_full_flow_creates_company_graph() -> None:
    client = TestClient(app)

    res = client.post('/api/wizard/sessions', json={'account_id': 'acct-w1', 'company_name': 'Wizard Flow Inc'})
    assert res.status_code == 201
    session_id = res.json()['id']
    assert res.json()['current_step'] == 'company'
    assert res.json()['completed_steps'] == []

    _walk_to_review(client, session_id)

    res = client.post(f'/api/wizard/sessions/{session_id}/submit')
    assert res.status_code == 200
    payload = res.json()
    assert payload['current_step'] == 'done'
    assert payload['company_id'] is not None

    with SessionLocal() as db:
        company = db.get(Company, payload['company_id'])
        assert company is not None
        assert company.name == 'Wizard Flow Inc'
        assert company.account_id == 'acct-w1'
        assert company.setup_completed_at is not None
        assert [p.name for p in company.products] == ['Ledger']
        assert [c.competitor_name for c in company.competitors] == ['Globex']
        assert [icp.vertical for icp in company.icps] == ['Fintech']
        assert [persona.title for persona in company.icps[0].personas] == ['CFO']

    assert client.post(f'/api/wizard/sessions/{session_id}/submit').status_code == 400
    assert client.post(f'/api/wizard/sessions/{session_id}/back').status_code == 400


def test_wizard_rejects_out_of_order_and_incomplete_steps() -> None:
    client = TestClient(app)
    session_id = client.post('/api/wizard/sessions', json={'account_id': 'acct-w2'}).json()['id']
    base = f'/api/wizard/sessions/{session_id}'

    assert client.post(f'{base}/advance').status_code == 400
    assert client.post(f'{base}/back').status_code == 400
    assert client.put(f'{base}/steps/products', json={'products': [{'name': 'Early'}]}).status_code == 400
    assert client.post(f'{base}/submit').status_code == 400

    assert client.put(f'{base}/steps/company', json={'company_name': 'Later Co'}).status_code == 200
    assert client.post(f'{base}/advance').status_code == 200

    res = client.post(f'{base}/advance')
    assert res.status_code == 400
    assert 'product' in res.json()['detail']

    assert client.put(f'{base}/steps/products', json={'products': [{'description': 'no name'}]}).status_code == 400
    assert client.put(f'{base}/steps/review', json={}).status_code == 400

    res = client.post(f'{base}/back')
    assert res.status_code == 200
    assert res.json()['current_step'] == 'company'
    assert res.json()['draft']['company_name'] == 'Later Co'


def test_wizard_blocks_review_without_personas() -> None:
    client = TestClient(app)
    res = client.post('/api/wizard/sessions', json={'account_id': 'acct-w3', 'company_name': 'NoPersona'})
    session_id = res.json()['id']
    base = f'/api/wizard/sessions/{session_id}'

    client.post(f'{base}/advance')
    client.put(f'{base}/steps/products', json={'products': [{'name': 'P'}]})
    client.post(f'{base}/advance')
    client.put(f'{base}/steps/competitors', json={'competitors': [{'name': 'C'}]})
    client.post(f'{base}/advance')
    client.put(f'{base}/steps/icps', json={'icps': [ICP]})
    res = client.post(f'{base}/advance')
    assert res.json()['current_step'] == 'personas'

    res = client.post(f'{base}/advance')
    assert res.status_code == 400
    assert 'persona' in res.json()['detail']


def test_wizard_unknown_session_is_404() -> None:
    client = TestClient(app)
    assert client.get('/api/wizard/sessions/missing').status_code == 404
    assert client.post('/api/wizard/sessions/missing/advance').status_code == 404


def test_step_errors_on_review_collects_every_step() -> None:
    errors = step_errors(WizardDraft(), WizardStep.review)

    assert 'company name is required' in errors
    assert 'at least one product is required' in errors
    assert 'at least one persona is required' in errors


def test_wizard_submit_rolls_back_on_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    client = TestClient(app)
    session_id = client.post(
        '/api/wizard/sessions',
        json={'account_id': 'acct-w4', 'company_name': 'Rollback Corp'},
    ).json()['id']
    _walk_to_review(client, session_id)

    def _fail_flush(self: Session, objects: object = None) -> None:
        raise OperationalError('INSERT', {}, Exception('disk full'))

    service = WizardService()
    with SessionLocal() as db:
        monkeypatch.setattr(Session, 'flush', _fail_flush)
        with pytest.raises(WizardPersistenceError):
            service.submit(db, session_id)
        monkeypatch.undo()

        assert service.get_session(db, session_id).current_step == WizardStep.review.value
        for model, column in (
            (Company, Company.account_id),
            (Product, Product.account_id),
            (Competitor, Competitor.account_id),
            (IdealCustomerProfile, IdealCustomerProfile.account_id),
            (Persona, Persona.account_id),
        ):
            count = db.execute(select(func.count()).select_from(model).where(column == 'acct-w4')).scalar_one()
            assert count == 0


def test_create_session_requires_account() -> None:
    with SessionLocal() as db:
        with pytest.raises(WizardStateError):
            WizardService().create_session(db, account_id='  ')
