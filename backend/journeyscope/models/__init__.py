from journeyscope.models.company import Company, Competitor, IdealCustomerProfile, Persona, Product
from journeyscope.models.response_analysis import ResponseAnalysis
from journeyscope.models.wizard_session import WizardSession

__all__ = [
    'Company',
    'Competitor',
    'IdealCustomerProfile',
    'Persona',
    'Product',
    'ResponseAnalysis',
    'WizardSession',
]
