# tools/math_tools.py
"""
Arithmetic tools.
Eight stateless operations on floats, registered by tool name in the
shared registry and attached to an MCP server by register(mcp).

Edge cases follow IEEE-754 double semantics: operations return inf or nan
rather than raising, except for the two guarded preconditions
(division by zero, square root of a negative number).
"""

import logging
import math
from pathlib import Path
from typing import TypeVar
from fastmcp import FastMCP

from ..utils.errors import InvalidArgumentError
from ..utils.registry import REGISTRY, tool

T = TypeVar("T", bound=FastMCP)

logger = logging.getLogger(Path(__file__).stem)

# Registered without an output schema, so results travel as JSON text
# ("1024.0", "NaN", "Infinity") and non-finite values survive the wire.
TAGS = ["public", "api"]
TOOL_NAMES = [
    "add",
    "subtract",
    "multiply",
    "divide",
    "modulus",
    "power",
    "squareRoot",
    "absolute",
]


# -----------------------
# Core Functions
# -----------------------
@tool(tags=TAGS)
def add(a: float, b: float) -> float:
    """Add two numbers."""
    logger.debug("add(%r, %r)", a, b)
    return float(a) + float(b)


@tool(tags=TAGS)
def subtract(a: float, b: float) -> float:
    """Subtract b from a."""
    logger.debug("subtract(%r, %r)", a, b)
    return float(a) - float(b)


@tool(tags=TAGS)
def multiply(a: float, b: float) -> float:
    """Multiply two numbers."""
    logger.debug("multiply(%r, %r)", a, b)
    return float(a) * float(b)


@tool(tags=TAGS)
def divide(a: float, b: float) -> float:
    """Divide a by b. Fails when b is zero."""
    logger.debug("divide(%r, %r)", a, b)
    if b == 0:
        logger.warning("❌ divide rejected: divisor is zero.")
        raise InvalidArgumentError("Cannot divide by zero")
    return float(a) / float(b)


@tool(tags=TAGS)
def modulus(a: float, b: float) -> float:
    """Remainder of a divided by b; the result takes the sign of a."""
    logger.debug("modulus(%r, %r)", a, b)
    # No zero guard here, unlike divide: a zero divisor yields nan.
    if b == 0 or math.isinf(a):
        return math.nan
    return math.fmod(a, b)


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and float(x).is_integer() and x % 2 == 1


@tool(tags=TAGS)
def power(base: float, exponent: float) -> float:
    """Raise base to the power of exponent."""
    logger.debug("power(%r, %r)", base, exponent)
    base, exponent = float(base), float(exponent)
    if exponent == 0:
        return 1.0
    if math.isnan(exponent) or (abs(base) == 1 and math.isinf(exponent)):
        return math.nan
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        # math.pow refuses 0 ** negative and negative ** fractional
        if base == 0:
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


@tool(name="squareRoot", tags=TAGS)
def square_root(number: float) -> float:
    """Principal square root of a number. Fails for negative numbers."""
    logger.debug("squareRoot(%r)", number)
    if number < 0:
        logger.warning("❌ squareRoot rejected: %r is negative.", number)
        raise InvalidArgumentError("Cannot take square root of a negative number")
    return math.sqrt(number)


@tool(tags=TAGS)
def absolute(number: float) -> float:
    """Absolute value of a number."""
    logger.debug("absolute(%r)", number)
    return abs(float(number))


# -----------------------
# MCP Registration
# -----------------------
def register(mcp: T):
    """Register math tools with MCPServer."""
    logger.info("✅ Registering math tools")
    REGISTRY.attach(mcp, TOOL_NAMES)


# -----------------------
# CLI Testing
# -----------------------
if __name__ == "__main__":
    print("🧮 Testing Math Tools")
    op = input(f"Enter tool ({', '.join(TOOL_NAMES)}): ").strip()
    params = REGISTRY.get(op).input_schema["properties"]
    args = {p: float(input(f"{p} = ")) for p in params}
    print(REGISTRY.call(op, **args))
