""" calculator_client.py
    Connect to the calculator MCP server, output its available tools,
    and demonstrate calling each of them.
    Based on https://gofastmcp.com/clients/client
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from fastmcp import Client
from fastmcp.exceptions import ToolError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------
# Example calls made by run(); the last two are rejected by the server.
# ---------------------------------------------------------------------
EXAMPLE_CALLS: List[Tuple[str, Dict[str, float]]] = [
    ("add", {"a": 5, "b": 3}),
    ("subtract", {"a": 5, "b": 3}),
    ("multiply", {"a": 5, "b": 3}),
    ("divide", {"a": 5, "b": 2}),
    ("modulus", {"a": -7, "b": 3}),
    ("power", {"base": 2, "exponent": 10}),
    ("squareRoot", {"number": 16}),
    ("absolute", {"number": -5}),
    ("divide", {"a": 1, "b": 0}),
    ("squareRoot", {"number": -4}),
]


def parse_number(text: str) -> float:
    """Decode a tool's JSON number text, including the non-finite spellings."""
    try:
        return float(text)
    except ValueError as e:
        raise ValueError(f"Tool returned a non-numeric result: {text!r}") from e


class CalculatorClient(Client):
    """ An MCP client for the calculator server.
        Connects over HTTP to http://host:port/mcp, or to `transport` when one
        is given (for example a FastMCP instance for in-process use).
    """

    def __init__(self, host: str = "127.0.0.1", port: int = 8085,
                 transport: Optional[Any] = None):
        self.url = f"http://{host}:{port}/mcp"
        super().__init__(transport if transport is not None else self.url)

    async def calculate(self, tool_name: str, **arguments: float) -> float:
        """Call an arithmetic tool and return its numeric result.
            The tools answer with JSON text, which spells non-finite values
            as NaN, Infinity and -Infinity; float() reads all three.
            Raises:
                ToolError: the server rejected the arguments.
        """
        result = await self.call_tool(tool_name, arguments)
        if result.data is not None:
            return float(result.data)
        return parse_number(result.content[0].text)

    async def run(self) -> None:
        """ Connect to the MCP server, list available tools,
            and run the example calculations.
        """
        async with self:
            await self.ping()

            tools = await self.list_tools()
            self._show_tools(tools)

            await self._run_example_tools({tool.name for tool in tools})

    def _show_tools(self, tools) -> None:
        """Print available tools."""
        print(
            "\nNo Tools available.\n"
            if not tools
            else "\nAvailable Tools:\n",
        )
        for tool in tools:
            print(f"Tool: {tool.name}")
            print(f"Description: {tool.description}")
            if tool.inputSchema:
                print(f"Parameters: {tool.inputSchema}")
            print("")

    async def _run_example_tools(self, tool_names) -> None:
        """Run the example calculations the server supports."""
        for name, args in EXAMPLE_CALLS:
            if name not in tool_names:
                print(f"\n'{name}' tool not available on this server.")
                continue
            shown = ", ".join(f"{k}={v}" for k, v in args.items())
            try:
                value = await self.calculate(name, **args)
                print(f"{name}({shown}) = {value}")
            except ToolError as e:
                logger.warning("⚠️ %s(%s) was rejected: %s", name, shown, e)
                print(f"{name}({shown}) -> error: {e}")
