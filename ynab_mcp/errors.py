"""Error types raised by the YNAB MCP server."""

from typing import Any, Dict, List, Optional


class BudgetError(Exception):
    """Base class for every expected failure reported back to the caller."""


class ConfigurationError(BudgetError):
    pass


class RemoteApiError(BudgetError):
    """Non-success response from the YNAB API."""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class AuthenticationError(RemoteApiError):
    pass


class RateLimitError(RemoteApiError):
    pass


class NoBudgetError(BudgetError):
    pass


class InvalidDateError(BudgetError, ValueError):
    pass


class ValidationError(BudgetError, ValueError):
    """Input rejected before any remote mutation was attempted."""


class NameResolutionError(BudgetError):
    """A name did not resolve to exactly one entity."""

    def __init__(self, message: str, candidates: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.candidates = candidates or []


class UnknownToolError(BudgetError):
    pass


class PartialReconciliationError(BudgetError):
    """Reconciliation stopped partway; earlier updates were not rolled back."""

    def __init__(self, message: str, reconciled: int, total: int):
        super().__init__(message)
        self.reconciled = reconciled
        self.total = total
