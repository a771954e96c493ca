import pytest
from mcp import types

from ynab_mcp.handlers import ToolHandlers
from ynab_mcp.resolver import EntityResolver
from ynab_mcp.server import build_server


async def call(server, name, arguments):
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )
    return (await handler(request)).root


@pytest.fixture
def server(handlers):
    return build_server(handlers)


@pytest.mark.asyncio
async def test_list_tools(server):
    handler = server.request_handlers[types.ListToolsRequest]
    result = (await handler(types.ListToolsRequest(method="tools/list"))).root

    names = [tool.name for tool in result.tools]
    assert len(names) == 24
    assert "create_transaction" in names
    assert "search_tools" in names


@pytest.mark.asyncio
async def test_successful_call_returns_text(server):
    result = await call(server, "get_accounts", {})
    assert not result.isError
    assert result.content[0].text.startswith("Accounts:\n")


@pytest.mark.asyncio
async def test_resolution_failure_is_an_error_result(server, gateway):
    result = await call(server, "create_transaction", {"amount": -12.5, "payee": "Trader Joe's"})
    assert result.isError
    assert "set confirm_new_payee to true" in result.content[0].text
    assert gateway.writes == []


@pytest.mark.asyncio
async def test_unknown_tool_is_an_error_result(server):
    result = await call(server, "transfer_money", {})
    assert result.isError
    assert "Unknown tool 'transfer_money'" in result.content[0].text


@pytest.mark.asyncio
async def test_unexpected_failure_names_the_tool(gateway):
    async def broken():
        raise KeyError("balance")

    gateway.get_accounts = broken
    server = build_server(ToolHandlers(gateway, EntityResolver(gateway)))

    result = await call(server, "get_accounts", {})
    assert result.isError
    assert "Error executing get_accounts: 'balance'" in result.content[0].text
