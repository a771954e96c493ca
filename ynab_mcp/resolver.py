"""Name resolution for accounts, categories and payees.

A free-text name resolves to one of four outcomes:

- ``Found``: exactly one entity (an exact case-insensitive name match always
  wins, otherwise the single substring match).
- ``Ambiguous``: several entities contain the query.
- ``NotFound``: nothing matched an account or category query.
- ``NewCandidate``: nothing matched a payee query, so the name may be a payee
  the caller wants to create.

None of these raise. Only gateway failures propagate.

Payees are cached in memory because the list is large and rarely changes.
Accounts and categories are fetched on every call since their balances are
what the caller is usually asking about.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Union

logger = logging.getLogger(__name__)

MAX_PAYEE_CANDIDATES = 5
CATEGORY_HINT_COUNT = 10


@dataclass(frozen=True)
class Found:
    entity: Dict[str, Any]


@dataclass(frozen=True)
class Ambiguous:
    query: str
    candidates: List[Dict[str, Any]]
    message: str
    total: int = 0


@dataclass(frozen=True)
class NotFound:
    query: str
    message: str
    candidates: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class NewCandidate:
    name: str


Resolution = Union[Found, Ambiguous, NotFound, NewCandidate]


def match_name(query: str, candidates: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Return the candidates matching ``query``.

    A one-element list is a unique hit. An exact case-insensitive match
    short-circuits even when other names also contain the query.
    """
    q = query.strip().lower()
    if not q:
        return []

    for candidate in candidates:
        if (candidate.get("name") or "").lower() == q:
            return [candidate]

    # A prefix match is always a substring match, so "contains" covers both.
    return [c for c in candidates if q in (c.get("name") or "").lower()]


def open_accounts(accounts: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [a for a in accounts if not a.get("closed") and not a.get("deleted")]


def visible_categories(groups: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten category groups, dropping hidden/deleted groups and categories.

    Each category is copied with its ``category_group_name`` filled in.
    """
    categories = []
    for group in groups:
        if group.get("hidden") or group.get("deleted"):
            continue
        for category in group.get("categories", []):
            if category.get("hidden") or category.get("deleted"):
                continue
            categories.append({**category, "category_group_name": group.get("name")})
    return categories


def category_label(category: Dict[str, Any]) -> str:
    group = category.get("category_group_name")
    return f"{group}: {category.get('name')}" if group else str(category.get("name"))


class EntityResolver:
    """Owns the payee cache and resolves names through the gateway."""

    def __init__(self, gateway: Any):
        self._gateway = gateway
        self._payees: List[Dict[str, Any]] = []
        self.loaded = False

    async def refresh_payees(self) -> List[Dict[str, Any]]:
        """Replace the payee cache wholesale with a fresh list."""
        payees = await self._gateway.get_payees()
        # Swap the whole list so readers never see a partial refresh.
        self._payees = [p for p in payees if not p.get("deleted")]
        self.loaded = True
        logger.info("Cached %d YNAB payees", len(self._payees))
        return self._payees

    async def payees(self) -> List[Dict[str, Any]]:
        if not self.loaded:
            await self.refresh_payees()
        return self._payees

    async def listed_payees(self) -> List[Dict[str, Any]]:
        """Payees fit for listing; transfer payees are left out."""
        return [p for p in await self.payees() if not p.get("transfer_account_id")]

    async def accounts(self) -> List[Dict[str, Any]]:
        return open_accounts(await self._gateway.get_accounts())

    async def category_groups(self) -> List[Dict[str, Any]]:
        groups = []
        for group in await self._gateway.get_category_groups():
            if group.get("hidden") or group.get("deleted"):
                continue
            groups.append({**group, "categories": visible_categories([group])})
        return groups

    async def categories(self) -> List[Dict[str, Any]]:
        return visible_categories(await self._gateway.get_category_groups())

    async def resolve_account(self, query: str) -> Resolution:
        accounts = await self.accounts()
        matches = match_name(query, accounts)
        if len(matches) == 1:
            return Found(matches[0])
        if matches:
            names = ", ".join(a["name"] for a in matches)
            return Ambiguous(
                query=query,
                candidates=matches,
                message=f'Multiple accounts match "{query}": {names}',
                total=len(matches),
            )
        known = ", ".join(a["name"] for a in accounts)
        return NotFound(query=query, message=f'No account found matching "{query}". Available: {known}')

    async def resolve_category(self, query: str) -> Resolution:
        categories = await self.categories()
        matches = match_name(query, categories)
        if len(matches) == 1:
            return Found(matches[0])
        if matches:
            names = ", ".join(category_label(c) for c in matches)
            return Ambiguous(
                query=query,
                candidates=matches,
                message=f'Multiple categories match "{query}": {names}',
                total=len(matches),
            )
        hint = ", ".join(c["name"] for c in categories[:CATEGORY_HINT_COUNT])
        return NotFound(query=query, message=f'No category found matching "{query}". Try one of: {hint}...')

    async def resolve_payee(self, query: str) -> Resolution:
        matches = match_name(query, await self.payees())
        if len(matches) == 1:
            return Found(matches[0])
        if matches:
            shown = matches[:MAX_PAYEE_CANDIDATES]
            names = ", ".join(p["name"] for p in shown)
            more = len(matches) - len(shown)
            suffix = f" (and {more} more)" if more > 0 else ""
            return Ambiguous(
                query=query,
                candidates=shown,
                message=f'Multiple payees match "{query}": {names}{suffix}',
                total=len(matches),
            )
        return NewCandidate(name=query.strip())
