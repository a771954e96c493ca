"""Thin async call layer over the YNAB v1 REST API."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from .errors import AuthenticationError, NoBudgetError, RateLimitError, RemoteApiError

logger = logging.getLogger(__name__)


def extract_error_detail(response: httpx.Response) -> Optional[str]:
    """Pull ``error.detail`` out of a YNAB error body, if there is one."""
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict) and error.get("detail"):
        return str(error["detail"])
    return None


class YNABGateway:
    """Budget-scoped access to YNAB resources.

    Every method maps one-to-one onto an API endpoint and returns the
    unwrapped ``data`` member of the response. No retries are attempted.
    """

    def __init__(
        self,
        token: str,
        budget_id: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.budget_id = budget_id
        self.budget_name: Optional[str] = None
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "YNABGateway":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def call(
        self,
        endpoint: str,
        method: str = "GET",
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Issue one request and return the parsed JSON payload."""
        logger.debug("%s %s %s", method, endpoint, params or "")
        try:
            response = await self._client.request(
                method,
                f"{self.base_url}{endpoint}",
                headers=self._headers,
                json=body,
                params={k: v for k, v in (params or {}).items() if v is not None} or None,
            )
        except httpx.RequestError as e:
            raise RemoteApiError(f"Could not reach the YNAB API: {e}", detail=str(e)) from e

        if response.is_success:
            if not response.content:
                return {}
            return response.json()

        detail = extract_error_detail(response)
        if response.status_code == 401:
            raise AuthenticationError(
                "YNAB authentication failed - check your API token",
                status_code=401,
                detail=detail,
            )
        if response.status_code == 429:
            raise RateLimitError(
                "YNAB rate limit exceeded - wait a few minutes and try again",
                status_code=429,
                detail=detail,
            )
        raise RemoteApiError(
            f"YNAB API error: {detail or response.reason_phrase or response.status_code}",
            status_code=response.status_code,
            detail=detail,
        )

    async def _data(self, endpoint: str, method: str = "GET", **kwargs: Any) -> Dict[str, Any]:
        payload = await self.call(endpoint, method, **kwargs)
        data = payload.get("data") if isinstance(payload, dict) else None
        return data if isinstance(data, dict) else {}

    def _budget_path(self, suffix: str = "") -> str:
        if not self.budget_id:
            raise RuntimeError("YNAB gateway not initialized - call initialize() first")
        return f"/budgets/{self.budget_id}{suffix}"

    # -- startup ----------------------------------------------------------

    async def list_budgets(self) -> List[Dict[str, Any]]:
        data = await self._data("/budgets")
        return data.get("budgets", [])

    async def initialize(self) -> str:
        """Resolve the budget id once, defaulting to the first available budget."""
        if not self.budget_id:
            budgets = await self.list_budgets()
            if not budgets:
                raise NoBudgetError("No budgets found in your YNAB account")
            self.budget_id = budgets[0]["id"]
            self.budget_name = budgets[0].get("name")
        logger.info("Using YNAB budget %s (%s)", self.budget_name or "", self.budget_id)
        return self.budget_id

    # -- budget & months --------------------------------------------------

    async def get_budget(self) -> Dict[str, Any]:
        data = await self._data(self._budget_path())
        return data.get("budget", {})

    async def get_months(self) -> List[Dict[str, Any]]:
        data = await self._data(self._budget_path("/months"))
        return data.get("months", [])

    async def get_month(self, month: str) -> Dict[str, Any]:
        data = await self._data(self._budget_path(f"/months/{month}"))
        return data.get("month", {})

    # -- accounts ---------------------------------------------------------

    async def get_accounts(self) -> List[Dict[str, Any]]:
        data = await self._data(self._budget_path("/accounts"))
        return data.get("accounts", [])

    async def get_account(self, account_id: str) -> Dict[str, Any]:
        data = await self._data(self._budget_path(f"/accounts/{account_id}"))
        return data.get("account", {})

    async def create_account(self, name: str, account_type: str, balance: int) -> Dict[str, Any]:
        data = await self._data(
            self._budget_path("/accounts"),
            "POST",
            body={"account": {"name": name, "type": account_type, "balance": balance}},
        )
        return data.get("account", {})

    # -- categories -------------------------------------------------------

    async def get_category_groups(self) -> List[Dict[str, Any]]:
        data = await self._data(self._budget_path("/categories"))
        return data.get("category_groups", [])

    async def get_month_category(self, month: str, category_id: str) -> Dict[str, Any]:
        data = await self._data(self._budget_path(f"/months/{month}/categories/{category_id}"))
        return data.get("category", {})

    async def update_month_category(self, month: str, category_id: str, budgeted: int) -> Dict[str, Any]:
        data = await self._data(
            self._budget_path(f"/months/{month}/categories/{category_id}"),
            "PATCH",
            body={"category": {"budgeted": budgeted}},
        )
        return data.get("category", {})

    async def update_category(self, category_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        data = await self._data(
            self._budget_path(f"/categories/{category_id}"),
            "PATCH",
            body={"category": updates},
        )
        return data.get("category", {})

    # -- payees -----------------------------------------------------------

    async def get_payees(self) -> List[Dict[str, Any]]:
        data = await self._data(self._budget_path("/payees"))
        return data.get("payees", [])

    async def get_payee(self, payee_id: str) -> Dict[str, Any]:
        data = await self._data(self._budget_path(f"/payees/{payee_id}"))
        return data.get("payee", {})

    async def update_payee(self, payee_id: str, name: str) -> Dict[str, Any]:
        data = await self._data(
            self._budget_path(f"/payees/{payee_id}"),
            "PATCH",
            body={"payee": {"name": name}},
        )
        return data.get("payee", {})

    # -- transactions -----------------------------------------------------

    async def get_transactions(
        self,
        since_date: Optional[str] = None,
        account_id: Optional[str] = None,
        category_id: Optional[str] = None,
        payee_id: Optional[str] = None,
        transaction_type: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """List transactions, nested under one account/category/payee when given.

        The API returns them in ascending date order.
        """
        if account_id:
            endpoint = self._budget_path(f"/accounts/{account_id}/transactions")
        elif category_id:
            endpoint = self._budget_path(f"/categories/{category_id}/transactions")
        elif payee_id:
            endpoint = self._budget_path(f"/payees/{payee_id}/transactions")
        else:
            endpoint = self._budget_path("/transactions")

        data = await self._data(endpoint, params={"since_date": since_date, "type": transaction_type})
        return data.get("transactions", [])

    async def get_month_transactions(
        self,
        month: str,
        since_date: Optional[str] = None,
        transaction_type: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        data = await self._data(
            self._budget_path(f"/months/{month}/transactions"),
            params={"since_date": since_date, "type": transaction_type},
        )
        return data.get("transactions", [])

    async def get_transaction(self, transaction_id: str) -> Dict[str, Any]:
        data = await self._data(self._budget_path(f"/transactions/{transaction_id}"))
        return data.get("transaction", {})

    async def create_transaction(self, transaction: Dict[str, Any]) -> Dict[str, Any]:
        data = await self._data(
            self._budget_path("/transactions"),
            "POST",
            body={"transaction": transaction},
        )
        return data.get("transaction", {})

    async def update_transaction(self, transaction_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        data = await self._data(
            self._budget_path(f"/transactions/{transaction_id}"),
            "PUT",
            body={"transaction": updates},
        )
        return data.get("transaction", {})

    async def delete_transaction(self, transaction_id: str) -> Dict[str, Any]:
        data = await self._data(self._budget_path(f"/transactions/{transaction_id}"), "DELETE")
        return data.get("transaction", {})

    # -- scheduled transactions -------------------------------------------

    async def get_scheduled_transactions(self) -> List[Dict[str, Any]]:
        data = await self._data(self._budget_path("/scheduled_transactions"))
        return data.get("scheduled_transactions", [])

    async def create_scheduled_transaction(self, transaction: Dict[str, Any]) -> Dict[str, Any]:
        data = await self._data(
            self._budget_path("/scheduled_transactions"),
            "POST",
            body={"scheduled_transaction": transaction},
        )
        return data.get("scheduled_transaction", {})
