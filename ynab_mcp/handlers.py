"""Operation handlers: one coroutine per tool.

Each handler normalizes its arguments, resolves names to IDs, calls the
gateway and renders the result as text. Failures the caller can act on are
raised as ``BudgetError`` subclasses; the server turns them into error
results.
"""

import asyncio
import logging
import math
from datetime import timedelta
from decimal import Decimal
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .errors import NameResolutionError, PartialReconciliationError, UnknownToolError, ValidationError
from .formatting import (
    format_account_detail,
    format_account_line,
    format_age_of_money,
    format_category_amounts,
    format_category_detail,
    format_goal,
    format_month,
    format_scheduled_line,
    format_split_lines,
    format_transaction_detail,
    format_transaction_line,
)
from .resolver import Ambiguous, EntityResolver, Found, NewCandidate, NotFound, Resolution, category_label
from .tools import (
    ACCOUNT_TYPES,
    CATALOG,
    CLEARED_STATES,
    FREQUENCIES,
    TOOL_CATEGORIES,
    TOOL_NAMES,
    TRANSACTION_TYPES,
    search_catalog,
)
from .units import format_usd, local_today, month_token, parse_date, to_milliunits

logger = logging.getLogger(__name__)

Arguments = Dict[str, Any]

# Lookback windows (days) tried in order when no since_date is given.
LOOKBACK_WINDOWS = (30, 90, 180, 365)
DEFAULT_TRANSACTION_LIMIT = 20
MAX_BUDGET_MONTHS = 24
MAX_LISTED_PAYEES = 50
# Sub-transaction totals may drift from the parent by half a cent.
SPLIT_TOLERANCE_MILLIUNITS = 5
RECONCILIATION_PAYEE = "Reconciliation Balance Adjustment"
# Passed as since_date to fetch an account's whole history.
FULL_HISTORY_SINCE = "1900-01-01"


def newest_first(transactions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(transactions, key=lambda t: t.get("date") or "", reverse=True)


def require_text(arguments: Arguments, key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{key}' is required")
    return value.strip()


def optional_text(arguments: Arguments, key: str) -> Optional[str]:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"'{key}' must be a string")
    return value


def require_amount(arguments: Arguments, key: str) -> int:
    """Read a dollar amount and return it in milliunits."""
    value = arguments.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValidationError(f"'{key}' must be a number of dollars")
    if (isinstance(value, float) and not math.isfinite(value)) or (isinstance(value, Decimal) and not value.is_finite()):
        raise ValidationError(f"'{key}' must be a finite number of dollars")
    return to_milliunits(value)


def require_choice(arguments: Arguments, key: str, choices: List[str]) -> str:
    value = arguments.get(key)
    if value not in choices:
        raise ValidationError(f"'{key}' must be one of: {', '.join(choices)}")
    return value


def split_total_matches(parent: int, parts: List[int]) -> bool:
    return abs(sum(parts) - parent) <= SPLIT_TOLERANCE_MILLIUNITS


class ToolHandlers:
    """Tool implementations sharing one gateway and one resolver."""

    def __init__(self, gateway: Any, resolver: EntityResolver, timezone: Any = None):
        self.gateway = gateway
        self.resolver = resolver
        self.timezone = timezone
        self._routes: Dict[str, Callable[[Arguments], Awaitable[str]]] = {
            name: getattr(self, name) for name in TOOL_NAMES
        }

    async def dispatch(self, name: str, arguments: Optional[Arguments]) -> str:
        handler = self._routes.get(name)
        if handler is None:
            raise UnknownToolError(f"Unknown tool '{name}'")
        return await handler(dict(arguments or {}))

    # -- normalization helpers --------------------------------------------

    def today(self) -> str:
        return local_today(self.timezone).isoformat()

    def _date(self, value: str) -> str:
        return parse_date(value, today=local_today(self.timezone))

    def _month(self, value: str) -> str:
        return month_token(value, today=local_today(self.timezone))

    # -- resolution helpers -----------------------------------------------

    @staticmethod
    def _unwrap(resolution: Resolution, prefix: str = "") -> Dict[str, Any]:
        """Return the matched entity or raise with the resolver's message."""
        if isinstance(resolution, Found):
            return resolution.entity
        if isinstance(resolution, (Ambiguous, NotFound)):
            logger.warning("Name resolution failed: %s", resolution.message)
            raise NameResolutionError(prefix + resolution.message, resolution.candidates)
        raise NameResolutionError(f'{prefix}No payee found matching "{resolution.name}".')

    async def _account(self, query: str) -> Dict[str, Any]:
        return self._unwrap(await self.resolver.resolve_account(query))

    async def _account_or_default(self, query: Optional[str]) -> Dict[str, Any]:
        if query:
            return await self._account(query)
        accounts = await self.resolver.accounts()
        if not accounts:
            raise NameResolutionError("No accounts found in your budget")
        return accounts[0]

    async def _category(self, query: str, prefix: str = "") -> Dict[str, Any]:
        return self._unwrap(await self.resolver.resolve_category(query), prefix)

    async def _existing_payee(self, query: str) -> Dict[str, Any]:
        return self._unwrap(await self.resolver.resolve_payee(query))

    async def _payee_reference(self, query: str, confirm_new: bool, prefix: str = "") -> Dict[str, str]:
        """Resolve a payee for a write: ``payee_id`` when known, ``payee_name`` when confirmed new."""
        resolution = await self.resolver.resolve_payee(query)
        if isinstance(resolution, Found):
            return {"payee_id": resolution.entity["id"]}
        if isinstance(resolution, NewCandidate):
            if not confirm_new:
                logger.warning("Refusing to create unconfirmed payee %r", resolution.name)
                raise NameResolutionError(
                    f'{prefix}"{resolution.name}" is a new payee that doesn\'t exist in your budget yet. '
                    "To create this transaction with a new payee, set confirm_new_payee to true."
                )
            return {"payee_name": resolution.name}

        names = "\n".join(f"  - {p['name']}" for p in resolution.candidates)
        logger.warning("Name resolution failed: %s", resolution.message)
        raise NameResolutionError(
            f'{prefix}Multiple payees match "{query}":\n{names}\n\n'
            "Please specify which payee you mean, or use the exact name.",
            resolution.candidates,
        )

    # -- budget -----------------------------------------------------------

    async def get_budget_summary(self, arguments: Arguments) -> str:
        budget, month, accounts = await asyncio.gather(
            self.gateway.get_budget(),
            self.gateway.get_month("current"),
            self.resolver.accounts(),
        )
        account_lines = "\n".join(f"  {a['name']}: {format_usd(a.get('balance'))}" for a in accounts)
        return (
            f"Budget: {budget.get('name')}\n\n"
            f"Ready to Assign: {format_usd(month.get('to_be_budgeted'))}\n"
            f"Total Budgeted: {format_usd(month.get('budgeted'))}\n"
            f"Total Activity: {format_usd(month.get('activity'))}\n"
            f"Income: {format_usd(month.get('income'))}\n"
            f"Age of Money: {format_age_of_money(month.get('age_of_money'))}\n\n"
            f"Accounts:\n{account_lines}"
        )

    async def get_monthly_budget(self, arguments: Arguments) -> str:
        month = await self.gateway.get_month(self._month(require_text(arguments, "month")))
        return format_month(month)

    async def get_budget_months(self, arguments: Arguments) -> str:
        months = (await self.gateway.get_months())[:MAX_BUDGET_MONTHS]
        lines = [
            f"{m.get('month')}: Budgeted {format_usd(m.get('budgeted'))} | "
            f"Activity {format_usd(m.get('activity'))} | "
            f"To Be Budgeted {format_usd(m.get('to_be_budgeted'))} | "
            f"Income {format_usd(m.get('income'))}"
            for m in months
        ]
        return f"Budget Months (up to {MAX_BUDGET_MONTHS}):\n" + "\n".join(lines)

    # -- accounts ---------------------------------------------------------

    async def get_accounts(self, arguments: Arguments) -> str:
        accounts = await self.resolver.accounts()
        if not accounts:
            return "No open accounts found."
        return "Accounts:\n" + "\n".join(format_account_line(a) for a in accounts)

    async def get_account(self, arguments: Arguments) -> str:
        account = await self._account(require_text(arguments, "name"))
        return format_account_detail(await self.gateway.get_account(account["id"]))

    async def create_account(self, arguments: Arguments) -> str:
        name = require_text(arguments, "name")
        account_type = require_choice(arguments, "type", ACCOUNT_TYPES)
        balance = require_amount(arguments, "balance")

        account = await self.gateway.create_account(name, account_type, balance)
        logger.info("Created account %s (%s)", account.get("name"), account.get("id"))
        return (
            f"Account created: {account.get('name')}\n"
            f"Type: {account.get('type')}\n"
            f"Balance: {format_usd(account.get('balance'))}"
        )

    async def reconcile_account(self, arguments: Arguments) -> str:
        """Mark cleared transactions reconciled, then correct any balance drift.

        The per-transaction updates are not atomic. If one fails, the ones
        before it stay reconciled and the error reports how far it got.
        """
        target = require_amount(arguments, "balance") if arguments.get("balance") is not None else None
        account = await self._account(require_text(arguments, "account"))

        transactions = await self.gateway.get_transactions(
            account_id=account["id"],
            since_date=FULL_HISTORY_SINCE,
        )
        cleared = [t for t in transactions if t.get("cleared") == "cleared"]

        reconciled = 0
        for txn in cleared:
            try:
                await self.gateway.update_transaction(txn["id"], {"cleared": "reconciled"})
            except Exception as e:
                logger.error(
                    "Reconciliation of %s stopped after %d of %d transactions: %s",
                    account["name"], reconciled, len(cleared), e,
                )
                raise PartialReconciliationError(
                    f"Reconciliation of {account['name']} stopped after {reconciled} of "
                    f"{len(cleared)} cleared transactions were reconciled: {e}",
                    reconciled=reconciled,
                    total=len(cleared),
                ) from e
            reconciled += 1
        logger.info("Reconciled %d transactions in %s", reconciled, account["name"])

        adjustment = ""
        if target is not None:
            cleared_balance = account.get("cleared_balance", 0)
            if target != cleared_balance:
                difference = target - cleared_balance
                await self.gateway.create_transaction({
                    "account_id": account["id"],
                    "date": self.today(),
                    "amount": difference,
                    "payee_name": RECONCILIATION_PAYEE,
                    "cleared": "reconciled",
                })
                await self.resolver.refresh_payees()
                logger.info("Created reconciliation adjustment of %d milliunits in %s", difference, account["name"])
                adjustment = (
                    f"\nBalance adjustment: {format_usd(difference)} "
                    f"(cleared balance was {format_usd(cleared_balance)}, target {format_usd(target)})"
                )
            else:
                adjustment = "\nNo balance adjustment needed - cleared balance matches."

        return f"Reconciled account: {account['name']}\nTransactions reconciled: {reconciled}{adjustment}"

    # -- categories -------------------------------------------------------

    async def get_categories(self, arguments: Arguments) -> str:
        groups = await self.resolver.category_groups()
        blocks = []
        for group in groups:
            lines = [
                f"    {c['name']}: Budgeted {format_usd(c.get('budgeted'))} | "
                f"Spent {format_usd(c.get('activity'))} | Available {format_usd(c.get('balance'))}"
                for c in group["categories"]
            ]
            blocks.append(f"{group['name']}:\n" + "\n".join(lines))
        return "\n\n".join(blocks) or "No categories found."

    async def get_category(self, arguments: Arguments) -> str:
        category = await self._category(require_text(arguments, "name"))
        heading = f"Category: {category_label(category)}"
        return "\n".join(
            [heading]
            + format_category_amounts(category, activity_label="Activity (Spent)")
            + format_goal(category)
        )

    async def get_month_category(self, arguments: Arguments) -> str:
        month = self._month(require_text(arguments, "month"))
        category = await self._category(require_text(arguments, "category"))
        detail = await self.gateway.get_month_category(month, category["id"])
        detail = {**detail, "category_group_name": category.get("category_group_name")}
        return format_category_detail(detail, month=month)

    async def set_category_budget(self, arguments: Arguments) -> str:
        month = self._month(require_text(arguments, "month"))
        budgeted = require_amount(arguments, "amount")
        category = await self._category(require_text(arguments, "category"))

        updated = await self.gateway.update_month_category(month, category["id"], budgeted)
        logger.info("Set %s budget for %s to %d milliunits", category["name"], month, budgeted)
        return "\n".join(
            [f"Budget updated: {category.get('category_group_name')}: {updated.get('name')} ({month})"]
            + format_category_amounts(updated)
        )

    async def update_category(self, arguments: Arguments) -> str:
        updates: Dict[str, Any] = {}
        if arguments.get("name") is not None:
            updates["name"] = require_text(arguments, "name")
        if arguments.get("note") is not None:
            updates["note"] = optional_text(arguments, "note")
        if arguments.get("goal_target") is not None:
            updates["goal_target"] = require_amount(arguments, "goal_target")
        if not updates:
            raise ValidationError("No updates specified.")

        category = await self._category(require_text(arguments, "category"))
        updated = await self.gateway.update_category(category["id"], updates)
        logger.info("Updated category %s: %s", category["id"], sorted(updates))

        lines = [f"Category updated: {updated.get('name')}"] + format_category_amounts(updated)
        if updated.get("goal_target"):
            lines.append(f"Goal Target: {format_usd(updated['goal_target'])}")
        return "\n".join(lines)

    # -- transactions -----------------------------------------------------

    async def recent_transactions(
        self,
        limit: int,
        keep: Optional[Callable[[Dict[str, Any]], bool]] = None,
        **filters: Any,
    ) -> List[Dict[str, Any]]:
        """Fetch through widening lookback windows until ``limit`` rows pass ``keep``.

        Falls back to the full history when even the widest window is short.
        """
        today = local_today(self.timezone)
        for days in LOOKBACK_WINDOWS:
            since = (today - timedelta(days=days)).isoformat()
            transactions = await self.gateway.get_transactions(since_date=since, **filters)
            if keep is not None:
                transactions = [t for t in transactions if keep(t)]
            if len(transactions) >= limit:
                return newest_first(transactions)
        transactions = await self.gateway.get_transactions(**filters)
        if keep is not None:
            transactions = [t for t in transactions if keep(t)]
        return newest_first(transactions)

    async def get_transactions(self, arguments: Arguments) -> str:
        limit = arguments.get("limit", DEFAULT_TRANSACTION_LIMIT)
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValidationError("'limit' must be a positive integer")

        amount_min = require_amount(arguments, "amount_min") if arguments.get("amount_min") is not None else None
        amount_max = require_amount(arguments, "amount_max") if arguments.get("amount_max") is not None else None
        if amount_min is not None and amount_max is not None and amount_min > amount_max:
            raise ValidationError("amount_min cannot be greater than amount_max")

        transaction_type = arguments.get("type")
        if transaction_type is not None:
            transaction_type = require_choice(arguments, "type", TRANSACTION_TYPES)
        since_date = self._date(arguments["since_date"]) if arguments.get("since_date") else None

        # The API nests listings under one entity; any further filters are applied locally.
        scoped: Dict[str, str] = {}
        if arguments.get("account"):
            scoped["account_id"] = (await self._account(arguments["account"]))["id"]
        if arguments.get("category"):
            scoped["category_id"] = (await self._category(arguments["category"]))["id"]
        if arguments.get("payee"):
            scoped["payee_id"] = (await self._existing_payee(arguments["payee"]))["id"]

        endpoint_filter = dict(list(scoped.items())[:1])
        local_filters = dict(list(scoped.items())[1:])

        def keep(txn: Dict[str, Any]) -> bool:
            if any(txn.get(key) != value for key, value in local_filters.items()):
                return False
            amount = txn.get("amount", 0)
            if amount_min is not None and amount < amount_min:
                return False
            if amount_max is not None and amount > amount_max:
                return False
            return True

        if since_date:
            fetched = await self.gateway.get_transactions(
                since_date=since_date,
                transaction_type=transaction_type,
                **endpoint_filter,
            )
            transactions = newest_first([t for t in fetched if keep(t)])
        else:
            # Local filters count toward the limit when deciding whether to widen the window.
            transactions = await self.recent_transactions(
                limit,
                keep,
                transaction_type=transaction_type,
                **endpoint_filter,
            )

        limited = transactions[:limit]
        if not limited:
            return "No transactions found matching your criteria."

        count = f"{len(limited)} of {len(transactions)}" if len(transactions) > limit else str(len(limited))
        return f"Transactions ({count}):\n" + "\n".join(format_transaction_line(t) for t in limited)

    async def get_transaction(self, arguments: Arguments) -> str:
        txn = await self.gateway.get_transaction(require_text(arguments, "transaction_id"))
        return format_transaction_detail(txn)

    async def get_month_transactions(self, arguments: Arguments) -> str:
        month = self._month(require_text(arguments, "month"))
        since_date = self._date(arguments["since_date"]) if arguments.get("since_date") else None
        transaction_type = arguments.get("type")
        if transaction_type is not None:
            transaction_type = require_choice(arguments, "type", TRANSACTION_TYPES)

        transactions = newest_first(
            await self.gateway.get_month_transactions(month, since_date=since_date, transaction_type=transaction_type)
        )
        if not transactions:
            return "No transactions found for this month."
        lines = [format_transaction_line(t, include_status=False) for t in transactions]
        return f"Transactions for {month} ({len(transactions)}):\n" + "\n".join(lines)

    async def create_transaction(self, arguments: Arguments) -> str:
        amount = require_amount(arguments, "amount")
        payee = require_text(arguments, "payee")
        confirm_new = bool(arguments.get("confirm_new_payee", False))
        memo = optional_text(arguments, "memo")

        splits = arguments.get("subtransactions") or []
        if not isinstance(splits, list):
            raise ValidationError("'subtransactions' must be a list")
        split_amounts = [require_amount(s if isinstance(s, dict) else {}, "amount") for s in splits]
        if splits and not split_total_matches(amount, split_amounts):
            raise ValidationError(
                "Subtransaction amounts must sum to the parent amount. "
                f"Parent: {format_usd(amount)}, subtransactions sum: {format_usd(sum(split_amounts))}"
            )
        txn_date = self._date(arguments["date"]) if arguments.get("date") else self.today()

        account = await self._account_or_default(arguments.get("account"))
        transaction: Dict[str, Any] = {
            "account_id": account["id"],
            "date": txn_date,
            "amount": amount,
            "cleared": "uncleared",
        }
        transaction.update(await self._payee_reference(payee, confirm_new))
        if arguments.get("category") and not splits:
            transaction["category_id"] = (await self._category(arguments["category"]))["id"]
        if memo is not None:
            transaction["memo"] = memo

        # Every split line resolves before anything is written.
        subtransactions = []
        for split, split_amount in zip(splits, split_amounts):
            line: Dict[str, Any] = {"amount": split_amount}
            if split.get("category"):
                category = await self._category(split["category"], prefix="Subtransaction category error: ")
                line["category_id"] = category["id"]
            if split.get("payee"):
                line.update(await self._payee_reference(
                    split["payee"], confirm_new, prefix="Subtransaction payee error: ",
                ))
            if split.get("memo"):
                line["memo"] = split["memo"]
            subtransactions.append(line)
        if subtransactions:
            # YNAB marks the parent as a split category itself.
            transaction["subtransactions"] = subtransactions

        created = await self.gateway.create_transaction(transaction)
        logger.info("Created transaction %s in %s", created.get("id"), account.get("name"))
        if "payee_name" in transaction or any("payee_name" in s for s in subtransactions):
            await self.resolver.refresh_payees()

        lines = [
            "Transaction created successfully:",
            f"Date: {created.get('date')}",
            f"Amount: {format_usd(created.get('amount', 0))}",
            f"Payee: {created.get('payee_name')}",
            f"Category: {created.get('category_name') or 'Uncategorized'}",
            f"Account: {created.get('account_name')}",
        ]
        if created.get("memo"):
            lines.append(f"Memo: {created['memo']}")
        lines.append(f"ID: {created.get('id')}")
        split_lines = format_split_lines(created.get("subtransactions"))
        if split_lines:
            lines.append("Split:")
            lines.extend(split_lines)
        return "\n".join(lines)

    async def update_transaction(self, arguments: Arguments) -> str:
        transaction_id = require_text(arguments, "transaction_id")
        fields = ("cleared", "amount", "payee", "category", "date", "memo")
        if all(arguments.get(f) is None for f in fields):
            raise ValidationError("No updates specified.")

        # The cleared state is set directly; no transition order is enforced.
        updates: Dict[str, Any] = {}
        if arguments.get("cleared") is not None:
            updates["cleared"] = require_choice(arguments, "cleared", CLEARED_STATES)
        if arguments.get("amount") is not None:
            updates["amount"] = require_amount(arguments, "amount")
        if arguments.get("date") is not None:
            updates["date"] = self._date(arguments["date"])
        if arguments.get("memo") is not None:
            updates["memo"] = optional_text(arguments, "memo")
        if arguments.get("payee") is not None:
            updates.update(await self._payee_reference(
                require_text(arguments, "payee"),
                bool(arguments.get("confirm_new_payee", False)),
            ))
        if arguments.get("category") is not None:
            updates["category_id"] = (await self._category(require_text(arguments, "category")))["id"]

        txn = await self.gateway.update_transaction(transaction_id, updates)
        logger.info("Updated transaction %s: %s", transaction_id, sorted(updates))
        if "payee_name" in updates:
            await self.resolver.refresh_payees()

        lines = [
            "Transaction updated:",
            f"Date: {txn.get('date')}",
            f"Amount: {format_usd(txn.get('amount', 0))}",
            f"Payee: {txn.get('payee_name')}",
            f"Category: {txn.get('category_name') or 'Uncategorized'}",
            f"Account: {txn.get('account_name')}",
            f"Cleared: {txn.get('cleared')}",
        ]
        if txn.get("memo"):
            lines.append(f"Memo: {txn['memo']}")
        return "\n".join(lines)

    async def delete_transaction(self, arguments: Arguments) -> str:
        transaction_id = require_text(arguments, "transaction_id")
        await self.gateway.delete_transaction(transaction_id)
        logger.info("Deleted transaction %s", transaction_id)
        return f"Transaction {transaction_id} has been permanently deleted."

    # -- scheduled --------------------------------------------------------

    async def get_scheduled_transactions(self, arguments: Arguments) -> str:
        transactions = await self.gateway.get_scheduled_transactions()
        if not transactions:
            return "No scheduled transactions found."
        lines = [format_scheduled_line(t) for t in transactions]
        return f"Scheduled Transactions ({len(transactions)}):\n" + "\n".join(lines)

    async def create_scheduled_transaction(self, arguments: Arguments) -> str:
        amount = require_amount(arguments, "amount")
        payee = require_text(arguments, "payee")
        frequency = require_choice(arguments, "frequency", FREQUENCIES)
        date_first = self._date(require_text(arguments, "start_date"))
        memo = optional_text(arguments, "memo")

        account = await self._account_or_default(arguments.get("account"))
        scheduled: Dict[str, Any] = {
            "account_id": account["id"],
            "date": date_first,
            "frequency": frequency,
            "amount": amount,
        }
        scheduled.update(await self._payee_reference(payee, bool(arguments.get("confirm_new_payee", False))))
        if arguments.get("category"):
            scheduled["category_id"] = (await self._category(arguments["category"]))["id"]
        if memo is not None:
            scheduled["memo"] = memo

        created = await self.gateway.create_scheduled_transaction(scheduled)
        logger.info("Created scheduled transaction %s (%s)", created.get("id"), frequency)
        if "payee_name" in scheduled:
            await self.resolver.refresh_payees()

        return "\n".join([
            "Scheduled transaction created:",
            f"First Date: {created.get('date_first')}",
            f"Next Date: {created.get('date_next')}",
            f"Frequency: {created.get('frequency')}",
            f"Amount: {format_usd(created.get('amount', 0))}",
            f"Payee: {created.get('payee_name')}",
            f"Category: {created.get('category_name') or 'Uncategorized'}",
            f"Account: {created.get('account_name')}",
        ])

    # -- payees -----------------------------------------------------------

    async def get_payees(self, arguments: Arguments) -> str:
        payees = (await self.resolver.listed_payees())[:MAX_LISTED_PAYEES]
        return f"Payees (showing up to {MAX_LISTED_PAYEES}):\n" + ", ".join(p["name"] for p in payees)

    async def get_payee(self, arguments: Arguments) -> str:
        match = await self._existing_payee(require_text(arguments, "name"))
        payee = await self.gateway.get_payee(match["id"])
        return (
            f"Payee: {payee.get('name')}\n"
            f"ID: {payee.get('id')}\n"
            f"Transfer Account: {payee.get('transfer_account_id') or 'None'}"
        )

    async def update_payee(self, arguments: Arguments) -> str:
        query = require_text(arguments, "payee")
        new_name = require_text(arguments, "name")
        match = await self._existing_payee(query)
        old_name = match["name"]

        updated = await self.gateway.update_payee(match["id"], new_name)
        await self.resolver.refresh_payees()
        logger.info("Renamed payee %s to %r", match["id"], new_name)
        return f'Payee updated: {updated.get("name")} (was "{old_name}")'

    # -- discovery --------------------------------------------------------

    async def search_tools(self, arguments: Arguments) -> str:
        query = require_text(arguments, "query")
        matches = search_catalog(query)
        if not matches:
            everything = "\n".join(f"  {t['name']}: {t['description']}" for t in CATALOG)
            return (
                f'No tools found matching "{query}". '
                f"Available categories: {', '.join(TOOL_CATEGORIES)}.\n\nAll tools:\n{everything}"
            )
        plural = "" if len(matches) == 1 else "s"
        listing = "\n".join(f"  {t['name']}: {t['description']}" for t in matches)
        return f'Found {len(matches)} tool{plural} matching "{query}":\n{listing}'
