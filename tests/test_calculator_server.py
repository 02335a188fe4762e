"""End-to-end tests: calculator tools called through an in-memory MCP client."""

import math

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from calculator_mcp.mcp_clients.calculator_client import CalculatorClient, parse_number
from calculator_mcp.mcp_servers import calculator_server
from calculator_mcp.tools.math_tools import TOOL_NAMES


@pytest.fixture
def mcp():
    return calculator_server.create_server()


@pytest.mark.asyncio
async def test_server_lists_every_tool(mcp):
    async with Client(mcp) as client:
        tools = await client.list_tools()

    by_name = {t.name: t for t in tools}
    assert set(by_name) == set(TOOL_NAMES)
    assert by_name["squareRoot"].description.startswith("Principal square root")
    assert set(by_name["power"].inputSchema["required"]) == {"base", "exponent"}
    assert by_name["absolute"].inputSchema["properties"]["number"]["type"] == "number"


@pytest.mark.asyncio
@pytest.mark.parametrize("name, args, expected", [
    ("add", {"a": 2, "b": 3}, 5.0),
    ("subtract", {"a": 2, "b": 3}, -1.0),
    ("multiply", {"a": 2.5, "b": 4}, 10.0),
    ("divide", {"a": 1, "b": 4}, 0.25),
    ("modulus", {"a": -7, "b": 3}, -1.0),
    ("power", {"base": 2, "exponent": 10}, 1024.0),
    ("power", {"base": 2, "exponent": -1}, 0.5),
    ("squareRoot", {"number": 4}, 2.0),
    ("absolute", {"number": -5}, 5.0),
])
async def test_tool_results(mcp, name, args, expected):
    async with Client(mcp) as client:
        result = await client.call_tool(name, args)
    assert result.structured_content is None
    assert float(result.content[0].text) == expected


@pytest.mark.asyncio
@pytest.mark.parametrize("name, args, expected", [
    ("modulus", {"a": 1, "b": 0}, math.nan),
    ("modulus", {"a": 5, "b": -0.0}, math.nan),
    ("power", {"base": 10, "exponent": 400}, math.inf),
    ("power", {"base": -10, "exponent": 401}, -math.inf),
    ("power", {"base": -8, "exponent": 0.5}, math.nan),
    ("power", {"base": 0, "exponent": -1}, math.inf),
])
async def test_non_finite_results_cross_the_wire(mcp, name, args, expected):
    async with CalculatorClient(transport=mcp) as client:
        value = await client.calculate(name, **args)
    if math.isnan(expected):
        assert math.isnan(value)
    else:
        assert value == expected


@pytest.mark.asyncio
async def test_negative_zero_square_root_keeps_its_sign(mcp):
    async with CalculatorClient(transport=mcp) as client:
        value = await client.calculate("squareRoot", number=-0.0)
    assert value == 0 and math.copysign(1, value) == -1


@pytest.mark.asyncio
async def test_served_input_schemas_match_registry(mcp):
    from calculator_mcp.utils.registry import REGISTRY, input_schema_mismatches

    async with Client(mcp) as client:
        tools = await client.list_tools()
    for served in tools:
        assert input_schema_mismatches(REGISTRY.get(served.name), served.inputSchema) == []


@pytest.mark.asyncio
async def test_divide_by_zero_surfaces_as_tool_error(mcp):
    async with Client(mcp) as client:
        with pytest.raises(ToolError, match="Cannot divide by zero"):
            await client.call_tool("divide", {"a": 1, "b": 0})


@pytest.mark.asyncio
async def test_negative_square_root_surfaces_as_tool_error(mcp):
    async with Client(mcp) as client:
        with pytest.raises(ToolError, match="square root of a negative number"):
            await client.call_tool("squareRoot", {"number": -4})


@pytest.mark.asyncio
async def test_calculator_client_calculate(mcp):
    async with CalculatorClient(transport=mcp) as client:
        assert await client.calculate("add", a=1.5, b=1.5) == 3.0
        assert await client.calculate("multiply", a=3, b=0) == 0.0
        with pytest.raises(ToolError):
            await client.calculate("divide", a=3, b=0)


@pytest.mark.asyncio
async def test_calculator_client_run_prints_examples(mcp, capsys):
    await CalculatorClient(transport=mcp).run()
    out = capsys.readouterr().out

    assert "Available Tools:" in out
    assert "Tool: squareRoot" in out
    assert "power(base=2, exponent=10) = 1024.0" in out
    assert "divide(a=1, b=0) -> error: Cannot divide by zero" in out
    assert "squareRoot(number=-4) -> error" in out


def test_client_url():
    client = CalculatorClient("example.com", 9000)
    assert client.url == "http://example.com:9000/mcp"


def test_create_server_with_empty_package(tmp_path, monkeypatch):
    (tmp_path / "empty_calc_tools").mkdir()
    (tmp_path / "empty_calc_tools" / "__init__.py").write_text("")
    monkeypatch.syspath_prepend(str(tmp_path))
    mcp = calculator_server.create_server(name="Empty", package="empty_calc_tools")
    assert mcp.name == "Empty"


@pytest.mark.parametrize("transport", ["http", "stdio"])
def test_launch_server_runs_requested_transport(monkeypatch, transport):
    runs = []

    class FakeServer:
        def run(self, **kwargs):
            runs.append(kwargs)

    monkeypatch.setattr(calculator_server, "create_server", FakeServer)
    calculator_server.launch_server("0.0.0.0", 9001, transport)

    if transport == "stdio":
        assert runs == [{"transport": "stdio"}]
    else:
        assert runs == [{"transport": "http", "host": "0.0.0.0", "port": 9001}]


def test_main_parses_arguments(monkeypatch):
    launched = []
    monkeypatch.setattr(calculator_server, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(calculator_server, "launch_server",
                        lambda *args: launched.append(args))
    calculator_server.main(["--host", "0.0.0.0", "--port", "9002", "--transport", "SSE"])
    assert launched == [("0.0.0.0", 9002, "sse")]


def test_modulus_nan_through_registry_dispatch():
    from calculator_mcp.utils.registry import REGISTRY

    assert math.isnan(REGISTRY.call("modulus", a=1, b=0))


@pytest.mark.parametrize("text, expected", [
    ("1024.0", 1024.0),
    ("Infinity", math.inf),
    ("-Infinity", -math.inf),
    ("-0.0", -0.0),
])
def test_parse_number(text, expected):
    assert parse_number(text) == expected


def test_parse_number_nan_and_garbage():
    assert math.isnan(parse_number("NaN"))
    with pytest.raises(ValueError, match="non-numeric result"):
        parse_number("null")
