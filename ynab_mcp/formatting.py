"""Render YNAB payloads as concise, human-readable text."""

from typing import Any, Dict, List, Optional

from .resolver import category_label
from .units import format_usd


def flow(amount: int) -> str:
    return "outflow" if amount < 0 else "inflow"


def format_split_lines(subtransactions: Optional[List[Dict[str, Any]]]) -> List[str]:
    lines = []
    for sub in subtransactions or []:
        line = f"  -> {format_usd(sub.get('amount', 0))} | {sub.get('category_name') or 'Uncategorized'}"
        if sub.get("payee_name"):
            line += f" | {sub['payee_name']}"
        if sub.get("memo"):
            line += f' | "{sub["memo"]}"'
        lines.append(line)
    return lines


def format_transaction_line(txn: Dict[str, Any], include_status: bool = True) -> str:
    """One-line listing row, followed by split rows when present."""
    amount = txn.get("amount", 0)
    parts = [f"[{txn.get('id')}] {txn.get('date')}", f"{format_usd(amount)} ({flow(amount)})"]
    if include_status:
        parts.append(str(txn.get("cleared")))
        parts.append("approved" if txn.get("approved") else "pending")
    parts.append(txn.get("payee_name") or "No payee")
    parts.append(txn.get("category_name") or "Uncategorized")
    parts.append(str(txn.get("account_name")))
    if txn.get("memo"):
        parts.append(f'"{txn["memo"]}"')
    return "\n".join([" | ".join(parts)] + format_split_lines(txn.get("subtransactions")))


def format_transaction_detail(txn: Dict[str, Any], heading: str = "Transaction") -> str:
    amount = txn.get("amount", 0)
    lines = [
        f"{heading}: {txn.get('id')}",
        f"Date: {txn.get('date')}",
        f"Amount: {format_usd(amount)} ({flow(amount)})",
        f"Payee: {txn.get('payee_name') or 'No payee'}",
        f"Category: {txn.get('category_name') or 'Uncategorized'}",
        f"Account: {txn.get('account_name')}",
        f"Cleared: {txn.get('cleared')}",
        f"Status: {'approved' if txn.get('approved') else 'pending'}",
    ]
    if txn.get("memo"):
        lines.append(f"Memo: {txn['memo']}")
    splits = format_split_lines(txn.get("subtransactions"))
    if splits:
        lines.append("Split:")
        lines.extend(splits)
    return "\n".join(lines)


def format_scheduled_line(txn: Dict[str, Any]) -> str:
    amount = txn.get("amount", 0)
    line = (
        f"{txn.get('date_next')} | {txn.get('frequency')} | {format_usd(amount)} ({flow(amount)}) | "
        f"{txn.get('payee_name') or 'No payee'} | {txn.get('category_name') or 'Uncategorized'} | "
        f"{txn.get('account_name')} | First: {txn.get('date_first')}"
    )
    if txn.get("memo"):
        line += f' | "{txn["memo"]}"'
    return line


def format_account_line(account: Dict[str, Any]) -> str:
    return (
        f"{account.get('name')} ({account.get('type')}): {format_usd(account.get('balance'))} "
        f"(cleared: {format_usd(account.get('cleared_balance'))}, "
        f"uncleared: {format_usd(account.get('uncleared_balance'))})"
    )


def format_account_detail(account: Dict[str, Any]) -> str:
    return "\n".join([
        f"Account: {account.get('name')}",
        f"Type: {account.get('type')}",
        f"On Budget: {str(bool(account.get('on_budget'))).lower()}",
        f"Balance: {format_usd(account.get('balance'))}",
        f"Cleared Balance: {format_usd(account.get('cleared_balance'))}",
        f"Uncleared Balance: {format_usd(account.get('uncleared_balance'))}",
    ])


def format_goal(category: Dict[str, Any]) -> List[str]:
    """Goal block for a category, empty when the category has no goal."""
    if not category.get("goal_type"):
        return []

    lines = ["", f"Goal: {category['goal_type']}"]
    if category.get("goal_target"):
        lines.append(f"  Target: {format_usd(category['goal_target'])}")
    if category.get("goal_target_month"):
        lines.append(f"  Target Month: {category['goal_target_month']}")
    if category.get("goal_percentage_complete") is not None:
        lines.append(f"  Progress: {category['goal_percentage_complete']}% complete")
    if category.get("goal_overall_funded") is not None:
        lines.append(f"  Funded: {format_usd(category['goal_overall_funded'])}")
    if category.get("goal_overall_left") is not None:
        lines.append(f"  Remaining: {format_usd(category['goal_overall_left'])}")
    if category.get("goal_under_funded"):
        lines.append(f"  Under-funded: {format_usd(category['goal_under_funded'])}")
    if category.get("goal_months_to_budget") is not None:
        lines.append(f"  Months to Budget: {category['goal_months_to_budget']}")
    if category.get("goal_creation_month"):
        lines.append(f"  Created: {category['goal_creation_month']}")
    return lines


def format_category_amounts(category: Dict[str, Any], activity_label: str = "Activity") -> List[str]:
    return [
        f"Budgeted: {format_usd(category.get('budgeted'))}",
        f"{activity_label}: {format_usd(category.get('activity'))}",
        f"Balance: {format_usd(category.get('balance'))}",
    ]


def format_category_detail(category: Dict[str, Any], month: Optional[str] = None) -> str:
    heading = f"Category: {category_label(category)}"
    if month:
        heading += f" ({month})"
    return "\n".join([heading] + format_category_amounts(category) + format_goal(category))


def format_month(month: Dict[str, Any]) -> str:
    return "\n".join([
        f"Month: {month.get('month')}",
        f"Income: {format_usd(month.get('income'))}",
        f"Budgeted: {format_usd(month.get('budgeted'))}",
        f"Activity: {format_usd(month.get('activity'))}",
        f"To Be Budgeted: {format_usd(month.get('to_be_budgeted'))}",
        f"Age of Money: {format_age_of_money(month.get('age_of_money'))}",
    ])


def format_age_of_money(days: Optional[int]) -> str:
    return "N/A" if days is None else f"{days} days"
