from typing import Any, Dict, List, Optional

import pytest

from ynab_mcp.errors import RemoteApiError
from ynab_mcp.handlers import ToolHandlers
from ynab_mcp.resolver import EntityResolver


def make_account(id, name, balance=0, cleared_balance=None, closed=False, type="checking"):
    return {
        "id": id,
        "name": name,
        "type": type,
        "on_budget": True,
        "closed": closed,
        "deleted": False,
        "balance": balance,
        "cleared_balance": balance if cleared_balance is None else cleared_balance,
        "uncleared_balance": 0,
    }


def make_category(id, name, budgeted=0, activity=0, balance=0, hidden=False, **goal):
    category = {
        "id": id,
        "name": name,
        "hidden": hidden,
        "deleted": False,
        "budgeted": budgeted,
        "activity": activity,
        "balance": balance,
        "goal_type": None,
    }
    category.update(goal)
    return category


def make_group(id, name, categories, hidden=False):
    return {"id": id, "name": name, "hidden": hidden, "deleted": False, "categories": categories}


def make_payee(id, name, transfer_account_id=None):
    return {"id": id, "name": name, "transfer_account_id": transfer_account_id, "deleted": False}


def make_txn(id, date, amount, cleared="uncleared", payee_name="Store", category_name="Groceries", **extra):
    txn = {
        "id": id,
        "date": date,
        "amount": amount,
        "memo": None,
        "cleared": cleared,
        "approved": True,
        "account_id": "acc-checking",
        "account_name": "Checking",
        "payee_id": None,
        "payee_name": payee_name,
        "category_id": None,
        "category_name": category_name,
        "subtransactions": [],
    }
    txn.update(extra)
    return txn


class FakeGateway:
    """In-memory stand-in for YNABGateway that records every call."""

    def __init__(
        self,
        accounts: Optional[List[Dict[str, Any]]] = None,
        category_groups: Optional[List[Dict[str, Any]]] = None,
        payees: Optional[List[Dict[str, Any]]] = None,
        transactions: Optional[List[Dict[str, Any]]] = None,
    ):
        self.accounts = accounts or []
        self.category_groups = category_groups or []
        self.payees = payees or []
        self.transactions = transactions or []
        self.transaction_windows = None
        self.scheduled: List[Dict[str, Any]] = []
        self.months: List[Dict[str, Any]] = []
        self.fail_update_on: Optional[str] = None
        self.calls: List[tuple] = []

    def _record(self, name: str, *args: Any, **kwargs: Any) -> None:
        self.calls.append((name, args, kwargs))

    def called(self, name: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == name]

    @property
    def writes(self) -> List[tuple]:
        return [c for c in self.calls if c[0].split("_")[0] in ("create", "update", "delete")]

    def _account_name(self, account_id: str) -> Optional[str]:
        return next((a["name"] for a in self.accounts if a["id"] == account_id), None)

    def _payee_name(self, payee_id: Optional[str]) -> Optional[str]:
        return next((p["name"] for p in self.payees if p["id"] == payee_id), None)

    async def get_budget(self):
        self._record("get_budget")
        return {"id": "budget-1", "name": "My Budget"}

    async def get_months(self):
        self._record("get_months")
        return self.months

    async def get_month(self, month):
        self._record("get_month", month)
        return {
            "month": "2026-10-01" if month == "current" else month,
            "income": 5000000,
            "budgeted": 4000000,
            "activity": -3500000,
            "to_be_budgeted": 1000000,
            "age_of_money": None,
        }

    async def get_accounts(self):
        self._record("get_accounts")
        return [dict(a) for a in self.accounts]

    async def get_account(self, account_id):
        self._record("get_account", account_id)
        return next(a for a in self.accounts if a["id"] == account_id)

    async def create_account(self, name, account_type, balance):
        self._record("create_account", name, account_type, balance)
        return make_account("acc-new", name, balance=balance, type=account_type)

    async def get_category_groups(self):
        self._record("get_category_groups")
        return list(self.category_groups)

    async def get_month_category(self, month, category_id):
        self._record("get_month_category", month, category_id)
        for group in self.category_groups:
            for category in group["categories"]:
                if category["id"] == category_id:
                    return dict(category)
        raise RemoteApiError("YNAB API error: Resource not found", status_code=404)

    async def update_month_category(self, month, category_id, budgeted):
        self._record("update_month_category", month, category_id, budgeted)
        category = await self.get_month_category(month, category_id)
        return {**category, "budgeted": budgeted}

    async def update_category(self, category_id, updates):
        self._record("update_category", category_id, updates)
        category = await self.get_month_category("current", category_id)
        return {**category, **updates}

    async def get_payees(self):
        self._record("get_payees")
        return [dict(p) for p in self.payees]

    async def get_payee(self, payee_id):
        self._record("get_payee", payee_id)
        return dict(next(p for p in self.payees if p["id"] == payee_id))

    async def update_payee(self, payee_id, name):
        self._record("update_payee", payee_id, name)
        for payee in self.payees:
            if payee["id"] == payee_id:
                payee["name"] = name
                return dict(payee)
        raise RemoteApiError("YNAB API error: Resource not found", status_code=404)

    async def get_transactions(self, since_date=None, account_id=None, category_id=None, payee_id=None,
                               transaction_type=None):
        self._record(
            "get_transactions",
            since_date=since_date,
            account_id=account_id,
            category_id=category_id,
            payee_id=payee_id,
            transaction_type=transaction_type,
        )
        if self.transaction_windows is not None:
            return list(self.transaction_windows(since_date))
        return [t for t in self.transactions if not since_date or t["date"] >= since_date]

    async def get_month_transactions(self, month, since_date=None, transaction_type=None):
        self._record("get_month_transactions", month, since_date=since_date, transaction_type=transaction_type)
        return list(self.transactions)

    async def get_transaction(self, transaction_id):
        self._record("get_transaction", transaction_id)
        return next(t for t in self.transactions if t["id"] == transaction_id)

    async def create_transaction(self, transaction):
        self._record("create_transaction", transaction)
        created = {
            "id": "txn-new",
            "date": transaction["date"],
            "amount": transaction["amount"],
            "memo": transaction.get("memo"),
            "cleared": transaction.get("cleared", "uncleared"),
            "approved": False,
            "account_id": transaction["account_id"],
            "account_name": self._account_name(transaction["account_id"]),
            "payee_id": transaction.get("payee_id"),
            "payee_name": transaction.get("payee_name") or self._payee_name(transaction.get("payee_id")),
            "category_id": transaction.get("category_id"),
            "category_name": None,
            "subtransactions": [
                {**sub, "category_name": None, "payee_name": sub.get("payee_name")}
                for sub in transaction.get("subtransactions", [])
            ],
        }
        if "payee_name" in transaction:
            self.payees.append(make_payee(f"payee-{len(self.payees) + 1}", transaction["payee_name"]))
        return created

    async def update_transaction(self, transaction_id, updates):
        self._record("update_transaction", transaction_id, updates)
        if transaction_id == self.fail_update_on:
            raise RemoteApiError("YNAB API error: Internal Server Error", status_code=500)
        txn = next((t for t in self.transactions if t["id"] == transaction_id), make_txn(transaction_id, "2026-10-01", 0))
        return {**txn, **updates}

    async def delete_transaction(self, transaction_id):
        self._record("delete_transaction", transaction_id)
        return {"id": transaction_id, "deleted": True}

    async def get_scheduled_transactions(self):
        self._record("get_scheduled_transactions")
        return list(self.scheduled)

    async def create_scheduled_transaction(self, transaction):
        self._record("create_scheduled_transaction", transaction)
        return {
            "id": "sched-new",
            "date_first": transaction["date"],
            "date_next": transaction["date"],
            "frequency": transaction["frequency"],
            "amount": transaction["amount"],
            "account_name": self._account_name(transaction["account_id"]),
            "payee_name": transaction.get("payee_name") or self._payee_name(transaction.get("payee_id")),
            "category_name": None,
        }


@pytest.fixture
def gateway():
    return FakeGateway(
        accounts=[
            make_account("acc-checking", "Checking", balance=1500000, cleared_balance=1200000),
            make_account("acc-savings", "Savings", balance=5000000, type="savings"),
            make_account("acc-visa", "Visa Card", balance=-250000, type="creditCard"),
            make_account("acc-old", "Old Checking", closed=True),
        ],
        category_groups=[
            make_group("grp-bills", "Bills", [
                make_category("cat-rent", "Rent", budgeted=1500000, activity=-1500000),
                make_category("cat-electric", "Electric", budgeted=100000),
            ]),
            make_group("grp-food", "Food", [
                make_category("cat-groceries", "Groceries", budgeted=600000, activity=-420000, balance=180000),
                make_category("cat-dining", "Dining Out", budgeted=200000),
                make_category("cat-old-food", "Old Food", hidden=True),
            ]),
            make_group("grp-hidden", "Hidden Categories", [make_category("cat-secret", "Secret Stash")], hidden=True),
        ],
        payees=[
            make_payee("payee-amazon", "Amazon.com"),
            make_payee("payee-prime", "Amazon Prime"),
            make_payee("payee-fresh", "AmazonFresh"),
            make_payee("payee-kroger", "Kroger"),
            make_payee("payee-landlord", "Landlord LLC"),
            make_payee("payee-transfer", "Transfer : Savings", transfer_account_id="acc-savings"),
        ],
    )


@pytest.fixture
def handlers(gateway):
    return ToolHandlers(gateway, EntityResolver(gateway))
