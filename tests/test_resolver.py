import pytest

from conftest import FakeGateway, make_account, make_category, make_group, make_payee
from ynab_mcp.resolver import (
    Ambiguous,
    EntityResolver,
    Found,
    NewCandidate,
    NotFound,
    match_name,
    visible_categories,
)


def names(entities):
    return [e["name"] for e in entities]


def test_match_name_exact_short_circuits_substring_hits():
    candidates = [{"name": "Amazon.com"}, {"name": "Amazon.com Marketplace"}]
    assert names(match_name("amazon.com", candidates)) == ["Amazon.com"]


def test_match_name_substring_collects_all_hits():
    candidates = [{"name": "Amazon.com"}, {"name": "Amazon Prime"}, {"name": "AmazonFresh"}, {"name": "Kroger"}]
    assert names(match_name("amazon", candidates)) == ["Amazon.com", "Amazon Prime", "AmazonFresh"]


def test_match_name_blank_query_matches_nothing():
    assert match_name("  ", [{"name": "Kroger"}]) == []


def test_visible_categories_skips_hidden_and_tags_group():
    groups = [
        make_group("g1", "Food", [make_category("c1", "Groceries"), make_category("c2", "Old", hidden=True)]),
        make_group("g2", "Hidden", [make_category("c3", "Secret")], hidden=True),
    ]
    categories = visible_categories(groups)
    assert names(categories) == ["Groceries"]
    assert categories[0]["category_group_name"] == "Food"


@pytest.mark.asyncio
async def test_resolve_payee_ambiguous_lists_all_three(gateway):
    resolver = EntityResolver(gateway)
    result = await resolver.resolve_payee("amazon")
    assert isinstance(result, Ambiguous)
    assert names(result.candidates) == ["Amazon.com", "Amazon Prime", "AmazonFresh"]
    assert "Amazon.com, Amazon Prime, AmazonFresh" in result.message


@pytest.mark.asyncio
async def test_resolve_payee_exact_match(gateway):
    resolver = EntityResolver(gateway)
    result = await resolver.resolve_payee("Amazon.com")
    assert isinstance(result, Found)
    assert result.entity["id"] == "payee-amazon"


@pytest.mark.asyncio
async def test_resolve_payee_unknown_is_new_candidate(gateway):
    resolver = EntityResolver(gateway)
    result = await resolver.resolve_payee("Trader Joe's")
    assert result == NewCandidate(name="Trader Joe's")


@pytest.mark.asyncio
async def test_resolve_payee_truncates_to_five_candidates():
    gateway = FakeGateway(payees=[make_payee(f"p{i}", f"Shell Station {i}") for i in range(8)])
    result = await EntityResolver(gateway).resolve_payee("shell")
    assert isinstance(result, Ambiguous)
    assert len(result.candidates) == 5
    assert result.total == 8
    assert result.message.endswith("(and 3 more)")


@pytest.mark.asyncio
async def test_transfer_payees_resolve_but_are_not_listed(gateway):
    resolver = EntityResolver(gateway)
    assert isinstance(await resolver.resolve_payee("Transfer : Savings"), Found)
    assert "Transfer : Savings" not in names(await resolver.listed_payees())


@pytest.mark.asyncio
async def test_payees_are_cached_until_refreshed(gateway):
    resolver = EntityResolver(gateway)
    await resolver.resolve_payee("kroger")
    await resolver.resolve_payee("landlord")
    assert len(gateway.called("get_payees")) == 1

    gateway.payees.append(make_payee("payee-tj", "Trader Joe's"))
    assert isinstance(await resolver.resolve_payee("Trader Joe's"), NewCandidate)
    await resolver.refresh_payees()
    assert isinstance(await resolver.resolve_payee("Trader Joe's"), Found)


@pytest.mark.asyncio
async def test_accounts_are_fetched_every_time_and_skip_closed(gateway):
    resolver = EntityResolver(gateway)
    assert isinstance(await resolver.resolve_account("checking"), Found)
    await resolver.resolve_account("savings")
    assert len(gateway.called("get_accounts")) == 2

    result = await resolver.resolve_account("Old Checking")
    assert isinstance(result, NotFound)
    assert "Available: Checking, Savings, Visa Card" in result.message


@pytest.mark.asyncio
async def test_account_substring_unique_hit(gateway):
    result = await EntityResolver(gateway).resolve_account("visa")
    assert isinstance(result, Found)
    assert result.entity["id"] == "acc-visa"


@pytest.mark.asyncio
async def test_ambiguous_accounts_are_not_truncated():
    gateway = FakeGateway(accounts=[make_account(f"a{i}", f"Card {i}") for i in range(7)])
    result = await EntityResolver(gateway).resolve_account("card")
    assert isinstance(result, Ambiguous)
    assert len(result.candidates) == 7


@pytest.mark.asyncio
async def test_category_resolution(gateway):
    resolver = EntityResolver(gateway)
    found = await resolver.resolve_category("GROCERIES")
    assert isinstance(found, Found)
    assert found.entity["category_group_name"] == "Food"

    hidden = await resolver.resolve_category("secret")
    assert isinstance(hidden, NotFound)
    assert "Try one of: Rent, Electric, Groceries, Dining Out" in hidden.message


@pytest.mark.asyncio
async def test_category_ambiguity_message_includes_groups():
    gateway = FakeGateway(category_groups=[
        make_group("g1", "Kids", [make_category("c1", "Kids Clothing")]),
        make_group("g2", "Me", [make_category("c2", "My Clothing")]),
    ])
    result = await EntityResolver(gateway).resolve_category("clothing")
    assert isinstance(result, Ambiguous)
    assert result.message == 'Multiple categories match "clothing": Kids: Kids Clothing, Me: My Clothing'
