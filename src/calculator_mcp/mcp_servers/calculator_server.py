""" calculator_server.py: FastMCP server that discovers the calculator tools.
    Based on https://gofastmcp.com/servers/server
    Every module in the 'tools' package that exposes register(mcp) is attached
    at startup.
"""

import argparse
import logging
import sys
from fastmcp import FastMCP
from ..utils.logging_config import setup_logging
from ..utils.settings import TRANSPORTS, Settings, parse_port
from ..utils.tool_loader import DEFAULT_TOOLS_PACKAGE, register_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "CalculatorServer"


# -----------------------------
# Server instance & conventions
# -----------------------------
def create_server(name: str = SERVER_NAME,
                  package: str = DEFAULT_TOOLS_PACKAGE) -> FastMCP:
    """ Build a FastMCP server and register all tools from `package` on it.
        Warning: The server will pull in all the code from the tool package.
        A module that fails to import is skipped; the rest still load.
    """
    mcp = FastMCP(
        name=name,
        include_tags={"public", "api"},
        exclude_tags={"internal", "deprecated"},
        on_duplicate_tools="error",
    )
    count = register_tools(mcp, package=package)
    logger.info("✅ %d tool module(s) registered on %s.", count, name)
    return mcp


def launch_server(host: str = "127.0.0.1", port: int = 8085,
                  transport: str = "http") -> None:
    """ The entry point to start the FastMCP server.
        The stdio transport ignores host and port.
    """
    mcp = create_server()
    if transport == "stdio":
        logger.info("✅ %s starting on stdio.", SERVER_NAME)
        mcp.run(transport="stdio")
    else:
        logger.info("✅ %s starting on http://%s:%i.", SERVER_NAME, host, port)
        mcp.run(transport=transport, host=host, port=port)


# -----------------------------
# CLI
# -----------------------------
def port_type(value: str) -> int:
    """ Custom argparse type that validates a TCP port number. """
    try:
        return parse_port(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the calculator MCP server.")
    parser.add_argument("--host", type=str, default=settings.host,
                        help=f"Host name or IP address (default {settings.host}).")
    parser.add_argument("--port", type=port_type, default=settings.port,
                        help=f"TCP port to bind (default {settings.port}).")
    parser.add_argument("--transport", choices=TRANSPORTS, type=str.lower,
                        default=settings.transport,
                        help=f"MCP transport (default {settings.transport}).")
    return parser


def main(argv=None):
    """ Main entry point when launched "stand alone".
        Parse arguments and start the server.
    """
    settings = Settings.from_env()
    args = build_parser(settings).parse_args(argv)
    # stdout carries the protocol on the stdio transport
    setup_logging(level=settings.log_level,
                  stream=sys.stderr if args.transport == "stdio" else None)
    launch_server(args.host, args.port, args.transport)


if __name__ == "__main__":
    main()
