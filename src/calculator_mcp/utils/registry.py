# utils/registry.py
"""Name-to-function registry for calculator tools.

Tool modules decorate plain functions with ``@tool(...)``. The decorator
records a ``ToolSpec`` in ``REGISTRY`` and hands the function back unchanged,
so the functions stay directly callable. Servers attach the recorded specs
with ``ToolRegistry.attach``; callers without a server use ``ToolRegistry.call``.

A spec with no ``output_schema`` is served without structured content: the
client gets the JSON text of the result only. That text carries ``NaN`` and
``Infinity``, which a ``{"type": "number"}`` structured result cannot.
"""

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar

from fastmcp import FastMCP

from .errors import InvalidArgumentError

T = TypeVar("T", bound=FastMCP)

logger = logging.getLogger(__name__)

_JSON_TYPES = {
    float: "number",
    int: "integer",
    str: "string",
    bool: "boolean",
}


@dataclass
class ToolSpec:
    name: str
    func: Callable[..., Any]
    description: Optional[str] = None
    input_schema: Optional[Dict[str, Any]] = None
    output_schema: Optional[Dict[str, Any]] = None
    tags: List[str] = field(default_factory=list)


class ToolRegistry:
    def __init__(self) -> None:
        self.tools: Dict[str, ToolSpec] = {}

    def register_tool(self, spec: ToolSpec) -> None:
        if spec.name in self.tools:
            raise ValueError(f"Duplicate tool name: {spec.name}")
        self.tools[spec.name] = spec

    def get(self, name: str) -> ToolSpec:
        try:
            return self.tools[name]
        except KeyError:
            raise KeyError(f"Unknown tool: {name}") from None

    def names(self) -> List[str]:
        return list(self.tools)

    def __contains__(self, name: object) -> bool:
        return name in self.tools

    def __len__(self) -> int:
        return len(self.tools)

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self.tools.values())

    def call(self, name: str, **arguments: Any) -> Any:
        """Dispatch a call to the tool registered under `name`.

        Raises:
            KeyError: no tool has that name.
            InvalidArgumentError: the arguments do not match the tool signature,
                or the tool itself rejects them.
        """
        spec = self.get(name)
        try:
            bound = inspect.signature(spec.func).bind(**arguments)
        except TypeError as e:
            raise InvalidArgumentError(f"Bad arguments for tool '{name}': {e}") from e
        return spec.func(*bound.args, **bound.kwargs)

    def attach(self, mcp: T, names: Optional[List[str]] = None) -> None:
        """Register the given tools (all of them by default) on a FastMCP server.

        FastMCP derives its own input schema from the signature; a disagreement
        with the registry schema is logged.
        """
        for tool_name in names if names is not None else self.names():
            spec = self.get(tool_name)
            served = mcp.tool(
                name=spec.name,
                description=spec.description,
                tags=set(spec.tags),
                output_schema=spec.output_schema,
            )(spec.func)
            served_schema = getattr(served, "parameters", None)
            if isinstance(served_schema, dict):
                mismatched = input_schema_mismatches(spec, served_schema)
                if mismatched:
                    logger.warning("⚠️ Tool %s: served input schema differs for %s",
                                   spec.name, ", ".join(mismatched))
            logger.debug("Attached tool %s", spec.name)


REGISTRY = ToolRegistry()

# ---------- Decorators ----------

def _json_type(annotation: Any) -> str:
    return _JSON_TYPES.get(annotation, "string")


def _derive_input_schema(func: Callable[..., Any]) -> Dict[str, Any]:
    params = inspect.signature(func).parameters
    properties, required = {}, []
    for p in params.values():
        if p.kind in (p.POSITIONAL_OR_KEYWORD, p.KEYWORD_ONLY):
            properties[p.name] = {"type": _json_type(p.annotation)}
            if p.default is p.empty:
                required.append(p.name)
    return {"type": "object", "properties": properties, "required": required}


def _first_line(text: Optional[str]) -> str:
    return (text or "").strip().split("\n", 1)[0].strip()


def tool(name: Optional[str] = None, description: Optional[str] = None,
         input_schema: Optional[Dict[str, Any]] = None,
         output_schema: Optional[Dict[str, Any]] = None,
         tags: Optional[List[str]] = None,
         registry: Optional[ToolRegistry] = None):
    """Decorator to auto-register a function as a ToolSpec."""
    def wrap(func: Callable[..., Any]):
        tool_name = name or func.__name__
        (registry if registry is not None else REGISTRY).register_tool(ToolSpec(
            name=tool_name,
            func=func,
            description=description or _first_line(func.__doc__) or tool_name,
            input_schema=input_schema or _derive_input_schema(func),
            output_schema=output_schema,
            tags=tags or []
        ))
        return func
    return wrap


def input_schema_mismatches(spec: ToolSpec, served_schema: Dict[str, Any]) -> List[str]:
    """Compare a registry input schema with the one a server advertises.

    Returns the names of parameters whose type or required-ness differ;
    an empty list means the two agree.
    """
    ours = spec.input_schema or {}
    our_props = ours.get("properties", {})
    served_props = served_schema.get("properties", {})
    required = set(ours.get("required", []))
    served_required = set(served_schema.get("required", []))

    mismatched = []
    for param in sorted(set(our_props) | set(served_props)):
        if (our_props.get(param, {}).get("type") != served_props.get(param, {}).get("type")
                or (param in required) != (param in served_required)):
            mismatched.append(param)
    return mismatched
