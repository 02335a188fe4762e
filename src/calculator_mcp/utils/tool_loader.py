# utils/tool_loader.py
"""
Dynamic discovery and registration of MCP tools.
This loader scans a package for tool modules, imports them safely,
and registers them into an MCP server through each module's register(mcp).
"""

import importlib
import pkgutil
import logging
from types import ModuleType
from typing import List, TypeVar
from fastmcp import FastMCP

T = TypeVar("T", bound=FastMCP)

logger = logging.getLogger(__name__)

DEFAULT_TOOLS_PACKAGE = "calculator_mcp.tools"


def discover_tools(package: str = DEFAULT_TOOLS_PACKAGE) -> List[ModuleType]:
    """
    Discover all tool modules inside the given package.

    Args:
        package (str): Dotted name of the package containing the tool modules.

    Returns:
        List[ModuleType]: A list of successfully imported modules.
    """
    try:
        pkg = importlib.import_module(package)
    except ImportError as e:
        logger.error("❌ Could not import tools package '%s': %s", package, e)
        return []

    modules: List[ModuleType] = []

    for _, modname, ispkg in pkgutil.iter_modules(pkg.__path__):
        # Subpackages are not flattened into the server namespace.
        if ispkg:
            continue

        full_name = f"{package}.{modname}"
        try:
            module = importlib.import_module(full_name)
            modules.append(module)
            logger.info("✅ Loaded tool module: %s", full_name)
        except Exception as e:
            logger.exception("❌ Error importing module %s: %s", full_name, e)

    return modules


def register_tools(mcp: T, package: str = DEFAULT_TOOLS_PACKAGE) -> int:
    """
    Register all discovered tool modules with the MCP server.

    Args:
        mcp (FastMCP): The MCP server instance.
        package (str): Package to scan for tool modules.

    Returns:
        int: Number of modules whose tools were registered.
    """
    modules = discover_tools(package)
    if not modules:
        logger.warning("⚠️ No tool modules found in package '%s'", package)

    return sum(1 for module in modules if register_tools_in_module(mcp, module))


def register_tools_in_module(mcp: T, module: ModuleType) -> bool:
    """
    Register all tools from a specific module.

    Args:
        mcp (FastMCP): The MCP server instance.
        module (ModuleType): The module containing a register(mcp) method.

    Returns:
        bool: True when the module's tools were registered.
    """
    if not hasattr(module, "register"):
        logger.warning("⚠️ Module %s has no register(mcp) function", module.__name__)
        return False

    try:
        module.register(mcp)
        logger.info("🔧 Registered tools from %s", module.__name__)
        return True
    except Exception as e:
        logger.exception("❌ Failed to register tools from %s: %s", module.__name__, e)
        return False
