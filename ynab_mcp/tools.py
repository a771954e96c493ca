"""Tool declarations exposed over MCP, plus the static search catalog."""

from typing import Dict, List, Sequence

from mcp.types import Tool

ACCOUNT_TYPES = [
    "checking",
    "savings",
    "cash",
    "creditCard",
    "lineOfCredit",
    "otherAsset",
    "otherLiability",
    "mortgage",
    "autoLoan",
    "studentLoan",
    "personalLoan",
    "medicalDebt",
    "otherDebt",
]

FREQUENCIES = [
    "daily",
    "weekly",
    "everyOtherWeek",
    "twiceAMonth",
    "every4Weeks",
    "monthly",
    "everyOtherMonth",
    "every3Months",
    "every4Months",
    "twiceAYear",
    "yearly",
    "everyOtherYear",
]

CLEARED_STATES = ["uncleared", "cleared", "reconciled"]

TRANSACTION_TYPES = ["uncategorized", "unapproved"]

TOOL_CATEGORIES = ["budget", "accounts", "categories", "transactions", "scheduled", "payees"]

MONTH_PROPERTY = {
    "type": "string",
    "description": "Month in YYYY-MM-DD format (day is ignored) or 'current' for this month",
}

DATE_DESCRIPTION = "Accepts 'today', 'yesterday', 'tomorrow', or YYYY-MM-DD"

CONFIRM_NEW_PAYEE_PROPERTY = {
    "type": "boolean",
    "description": (
        "Set to true to confirm creating a new payee that doesn't exist yet. "
        "Without it, an unknown payee name is rejected so typos don't create duplicates."
    ),
    "default": False,
}

NO_ARGUMENTS = {"type": "object", "properties": {}, "additionalProperties": False}


def _schema(properties: Dict, required: Sequence[str] = ()) -> Dict:
    schema = {"type": "object", "properties": properties, "additionalProperties": False}
    if required:
        schema["required"] = list(required)
    return schema


TOOLS: List[Tool] = [
    # -- budget -----------------------------------------------------------
    Tool(
        name="get_budget_summary",
        description=(
            "Get an overview of the budget for the current month: ready to assign, total budgeted, "
            "activity, income, age of money, and every open account balance."
        ),
        inputSchema=NO_ARGUMENTS,
    ),
    Tool(
        name="get_monthly_budget",
        description="Get the income, budgeted, activity and to-be-budgeted totals for one month.",
        inputSchema=_schema({"month": MONTH_PROPERTY}, ["month"]),
    ),
    Tool(
        name="get_budget_months",
        description="List up to 24 budget months with budgeted, activity, to-be-budgeted and income totals.",
        inputSchema=NO_ARGUMENTS,
    ),
    # -- accounts ---------------------------------------------------------
    Tool(
        name="get_accounts",
        description="List all open accounts with balance, cleared balance and uncleared balance.",
        inputSchema=NO_ARGUMENTS,
    ),
    Tool(
        name="get_account",
        description="Get detailed info for a single account by name. Names are matched case-insensitively.",
        inputSchema=_schema(
            {"name": {"type": "string", "description": "Account name (fuzzy matched)"}},
            ["name"],
        ),
    ),
    Tool(
        name="create_account",
        description="Create a new account (checking, savings, credit card, loan, etc.) with a starting balance.",
        inputSchema=_schema(
            {
                "name": {"type": "string", "description": "Account name"},
                "type": {"type": "string", "enum": ACCOUNT_TYPES, "description": "Account type"},
                "balance": {
                    "type": "number",
                    "description": (
                        "Starting balance in dollars (e.g., 1000 for $1,000.00). "
                        "Use negative for debt accounts."
                    ),
                },
            },
            ["name", "type", "balance"],
        ),
    ),
    Tool(
        name="reconcile_account",
        description=(
            "Reconcile an account: marks every cleared transaction as reconciled, then optionally "
            "creates a 'Reconciliation Balance Adjustment' transaction when the real-world balance "
            "differs from the cleared balance. Not atomic: on failure the message reports how many "
            "transactions were already reconciled."
        ),
        inputSchema=_schema(
            {
                "account": {"type": "string", "description": "Account name (fuzzy matched)"},
                "balance": {
                    "type": "number",
                    "description": "The real-world account balance in dollars from your statement.",
                },
            },
            ["account"],
        ),
    ),
    # -- categories -------------------------------------------------------
    Tool(
        name="get_categories",
        description="List all visible budget categories by group with budgeted, spent, and available amounts.",
        inputSchema=NO_ARGUMENTS,
    ),
    Tool(
        name="get_category",
        description="Get details for one category by name for the current month, including goal progress.",
        inputSchema=_schema(
            {"name": {"type": "string", "description": "Category name (e.g., 'Groceries', 'Rent')"}},
            ["name"],
        ),
    ),
    Tool(
        name="get_month_category",
        description="Get one category's budgeted, activity, balance and goal details for a specific month.",
        inputSchema=_schema(
            {
                "month": MONTH_PROPERTY,
                "category": {"type": "string", "description": "Category name (fuzzy matched)"},
            },
            ["month", "category"],
        ),
    ),
    Tool(
        name="set_category_budget",
        description="Set the budgeted (assigned) amount for a category in a specific month.",
        inputSchema=_schema(
            {
                "month": MONTH_PROPERTY,
                "category": {"type": "string", "description": "Category name (fuzzy matched)"},
                "amount": {"type": "number", "description": "Amount to budget in dollars (e.g., 500 for $500.00)"},
            },
            ["month", "category", "amount"],
        ),
    ),
    Tool(
        name="update_category",
        description="Update a category's name, note, or goal target. At least one change is required.",
        inputSchema=_schema(
            {
                "category": {"type": "string", "description": "Category name (fuzzy matched)"},
                "name": {"type": "string", "description": "New category name"},
                "note": {"type": "string", "description": "New category note"},
                "goal_target": {"type": "number", "description": "New goal target amount in dollars"},
            },
            ["category"],
        ),
    ),
    # -- transactions -----------------------------------------------------
    Tool(
        name="get_transactions",
        description=(
            "Get transactions sorted by most recent first, optionally filtered by account, category, "
            "payee, date, type or amount range. Without since_date only recent history is searched "
            "until enough transactions are found."
        ),
        inputSchema=_schema(
            {
                "since_date": {
                    "type": "string",
                    "description": f"Only show transactions on or after this date. {DATE_DESCRIPTION}",
                },
                "account": {"type": "string", "description": "Filter by account name"},
                "category": {"type": "string", "description": "Filter by category name"},
                "payee": {"type": "string", "description": "Filter by payee name"},
                "type": {
                    "type": "string",
                    "enum": TRANSACTION_TYPES,
                    "description": "Only 'uncategorized' or only 'unapproved' transactions",
                },
                "amount_min": {
                    "type": "number",
                    "description": "Keep only transactions with amount >= this value in dollars.",
                },
                "amount_max": {
                    "type": "number",
                    "description": "Keep only transactions with amount <= this value in dollars.",
                },
                "limit": {
                    "type": "integer",
                    "description": "Maximum number of transactions to return",
                    "minimum": 1,
                    "default": 20,
                },
            }
        ),
    ),
    Tool(
        name="get_transaction",
        description="Get a single transaction by its ID, including split lines.",
        inputSchema=_schema(
            {"transaction_id": {"type": "string", "description": "The transaction ID"}},
            ["transaction_id"],
        ),
    ),
    Tool(
        name="get_month_transactions",
        description="Get all transactions for a specific budget month, most recent first.",
        inputSchema=_schema(
            {
                "month": MONTH_PROPERTY,
                "since_date": {
                    "type": "string",
                    "description": f"Only show transactions on or after this date. {DATE_DESCRIPTION}",
                },
                "type": {
                    "type": "string",
                    "enum": TRANSACTION_TYPES,
                    "description": "Filter by type: 'uncategorized' or 'unapproved'",
                },
            },
            ["month"],
        ),
    ),
    Tool(
        name="create_transaction",
        description=(
            "Create a new transaction. Amounts are positive for inflows (income) and negative for "
            "outflows (spending). Payee, category and account names are matched against existing ones; "
            "supply subtransactions to split the amount across categories."
        ),
        inputSchema=_schema(
            {
                "amount": {
                    "type": "number",
                    "description": "Amount in dollars. Example: -50.00 for a $50 purchase",
                },
                "payee": {
                    "type": "string",
                    "description": "Payee name. Matches an existing payee or, with confirm_new_payee, creates one",
                },
                "category": {"type": "string", "description": "Category name (e.g., 'Groceries'). Optional for inflows"},
                "account": {"type": "string", "description": "Account name. Defaults to the first open account"},
                "date": {"type": "string", "description": f"Transaction date, defaults to today. {DATE_DESCRIPTION}"},
                "memo": {"type": "string", "description": "Optional memo/note for the transaction"},
                "confirm_new_payee": CONFIRM_NEW_PAYEE_PROPERTY,
                "subtransactions": {
                    "type": "array",
                    "description": "Split lines. Amounts must sum to the parent amount.",
                    "items": {
                        "type": "object",
                        "properties": {
                            "amount": {"type": "number", "description": "Amount in dollars"},
                            "category": {"type": "string", "description": "Category name (fuzzy matched)"},
                            "payee": {"type": "string", "description": "Payee name, defaults to the parent payee"},
                            "memo": {"type": "string", "description": "Memo for this split line"},
                        },
                        "required": ["amount"],
                        "additionalProperties": False,
                    },
                },
            },
            ["amount", "payee"],
        ),
    ),
    Tool(
        name="update_transaction",
        description="Update an existing transaction's cleared status, amount, payee, category, date, or memo.",
        inputSchema=_schema(
            {
                "transaction_id": {
                    "type": "string",
                    "description": "The transaction ID to update. Get this from get_transactions",
                },
                "cleared": {"type": "string", "enum": CLEARED_STATES, "description": "Set the cleared status"},
                "amount": {"type": "number", "description": "New amount in dollars. Negative for outflows"},
                "payee": {"type": "string", "description": "New payee name (fuzzy matched)"},
                "category": {"type": "string", "description": "New category name (fuzzy matched)"},
                "date": {"type": "string", "description": f"New date. {DATE_DESCRIPTION}"},
                "memo": {"type": "string", "description": "New memo/note"},
                "confirm_new_payee": CONFIRM_NEW_PAYEE_PROPERTY,
            },
            ["transaction_id"],
        ),
    ),
    Tool(
        name="delete_transaction",
        description=(
            "⚠️ PERMANENTLY delete a transaction. This cannot be undone. "
            "Only use this if you're certain you want to remove the transaction."
        ),
        inputSchema=_schema(
            {
                "transaction_id": {
                    "type": "string",
                    "description": "The transaction ID to delete. Get this from get_transactions",
                }
            },
            ["transaction_id"],
        ),
    ),
    # -- scheduled --------------------------------------------------------
    Tool(
        name="get_scheduled_transactions",
        description="List all scheduled (recurring) transactions with their frequency and next date.",
        inputSchema=NO_ARGUMENTS,
    ),
    Tool(
        name="create_scheduled_transaction",
        description="Create a recurring scheduled transaction.",
        inputSchema=_schema(
            {
                "amount": {"type": "number", "description": "Amount in dollars. Negative for spending"},
                "payee": {"type": "string", "description": "Payee name"},
                "frequency": {"type": "string", "enum": FREQUENCIES, "description": "How often it repeats"},
                "start_date": {
                    "type": "string",
                    "description": f"First occurrence date. {DATE_DESCRIPTION}",
                },
                "category": {"type": "string", "description": "Category name"},
                "account": {"type": "string", "description": "Account name. Defaults to the first open account"},
                "memo": {"type": "string", "description": "Optional memo"},
                "confirm_new_payee": CONFIRM_NEW_PAYEE_PROPERTY,
            },
            ["amount", "payee", "frequency", "start_date"],
        ),
    ),
    # -- payees -----------------------------------------------------------
    Tool(
        name="get_payees",
        description="List payees in the budget (up to 50, transfer payees excluded).",
        inputSchema=NO_ARGUMENTS,
    ),
    Tool(
        name="get_payee",
        description="Get details for a single payee by name.",
        inputSchema=_schema(
            {"name": {"type": "string", "description": "Payee name (fuzzy matched)"}},
            ["name"],
        ),
    ),
    Tool(
        name="update_payee",
        description="Rename a payee.",
        inputSchema=_schema(
            {
                "payee": {"type": "string", "description": "Current payee name (fuzzy matched)"},
                "name": {"type": "string", "description": "New payee name"},
            },
            ["payee", "name"],
        ),
    ),
    # -- discovery --------------------------------------------------------
    Tool(
        name="search_tools",
        description=(
            "Search the available tools by keyword or category. Use this to discover the right tool "
            "for a task. Categories: " + ", ".join(TOOL_CATEGORIES) + "."
        ),
        inputSchema=_schema(
            {
                "query": {
                    "type": "string",
                    "description": "Search keyword (e.g., 'budget', 'reconcile', 'payee') or category name",
                }
            },
            ["query"],
        ),
    ),
]

TOOL_NAMES = [tool.name for tool in TOOLS]

TOOL_CATEGORY_BY_NAME = {
    "get_budget_summary": "budget",
    "get_monthly_budget": "budget",
    "get_budget_months": "budget",
    "get_accounts": "accounts",
    "get_account": "accounts",
    "create_account": "accounts",
    "reconcile_account": "accounts",
    "get_categories": "categories",
    "get_category": "categories",
    "get_month_category": "categories",
    "set_category_budget": "categories",
    "update_category": "categories",
    "get_transactions": "transactions",
    "get_transaction": "transactions",
    "get_month_transactions": "transactions",
    "create_transaction": "transactions",
    "update_transaction": "transactions",
    "delete_transaction": "transactions",
    "get_scheduled_transactions": "scheduled",
    "create_scheduled_transaction": "scheduled",
    "get_payees": "payees",
    "get_payee": "payees",
    "update_payee": "payees",
}

# search_tools itself is left out of its own results.
CATALOG: List[Dict[str, str]] = [
    {"name": tool.name, "description": tool.description, "category": TOOL_CATEGORY_BY_NAME[tool.name]}
    for tool in TOOLS
    if tool.name in TOOL_CATEGORY_BY_NAME
]


def search_catalog(query: str) -> List[Dict[str, str]]:
    """Catalog entries whose name, description or category contains ``query``."""
    q = query.strip().lower()
    return [
        entry for entry in CATALOG
        if q in entry["name"].lower()
        or q in entry["description"].lower()
        or q in entry["category"].lower()
    ]
