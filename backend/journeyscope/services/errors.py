from __future__ import annotations


class JourneyScopeError(Exception):
    """Base class for errors raised by the analysis and wizard services."""


class RowSourceError(JourneyScopeError):
    """The response-analysis query failed."""


class EmptyResultError(JourneyScopeError):
    """The query succeeded but matched no rows."""


class MalformedFieldError(JourneyScopeError, ValueError):
    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f'{field}: {reason}')
        self.field = field
        self.reason = reason


class WizardStateError(JourneyScopeError, ValueError):
    """A wizard transition was requested from the wrong step or with incomplete data."""


class WizardNotFoundError(JourneyScopeError, LookupError):
    pass


class WizardPersistenceError(JourneyScopeError):
    """Submitting the wizard failed; the transaction was rolled back."""
