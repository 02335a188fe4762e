"""Tests for tool module discovery and registration."""

import logging
import sys
import textwrap
from unittest.mock import MagicMock

import pytest

from calculator_mcp.utils import tool_loader


@pytest.fixture
def tools_package(tmp_path, monkeypatch):
    """A throwaway tools package with good, broken and register-less modules."""
    pkg = tmp_path / "fake_calc_tools"
    pkg.mkdir()
    (pkg / "__init__.py").write_text("")
    (pkg / "good_tools.py").write_text(textwrap.dedent("""
        def register(mcp):
            mcp.registered.append(__name__)
    """))
    (pkg / "plain_helpers.py").write_text("VALUE = 1\n")
    (pkg / "broken_tools.py").write_text("raise RuntimeError('boom')\n")
    (pkg / "failing_tools.py").write_text(textwrap.dedent("""
        def register(mcp):
            raise RuntimeError('cannot register')
    """))
    sub = pkg / "nested"
    sub.mkdir()
    (sub / "__init__.py").write_text("def register(mcp):\n    raise AssertionError\n")
    monkeypatch.syspath_prepend(str(tmp_path))
    yield "fake_calc_tools"
    for name in [m for m in sys.modules if m.split(".")[0] == "fake_calc_tools"]:
        del sys.modules[name]


def test_discover_skips_broken_modules_and_subpackages(tools_package, caplog):
    with caplog.at_level(logging.INFO):
        modules = tool_loader.discover_tools(tools_package)

    names = sorted(m.__name__ for m in modules)
    assert names == [
        "fake_calc_tools.failing_tools",
        "fake_calc_tools.good_tools",
        "fake_calc_tools.plain_helpers",
    ]
    assert "Error importing module fake_calc_tools.broken_tools" in caplog.text


def test_discover_missing_package_returns_empty(caplog):
    assert tool_loader.discover_tools("no_such_calc_package") == []
    assert "Could not import tools package" in caplog.text


def test_register_tools_counts_successful_modules(tools_package, caplog):
    mcp = MagicMock()
    mcp.registered = []

    count = tool_loader.register_tools(mcp, package=tools_package)

    assert count == 1
    assert mcp.registered == ["fake_calc_tools.good_tools"]
    assert "has no register(mcp) function" in caplog.text
    assert "Failed to register tools from fake_calc_tools.failing_tools" in caplog.text


def test_register_tools_warns_when_nothing_found(caplog):
    assert tool_loader.register_tools(MagicMock(), package="no_such_calc_package") == 0
    assert "No tool modules found" in caplog.text


def test_register_tools_in_module_calls_register():
    module = MagicMock(__name__="some_tools")
    mcp = object()
    assert tool_loader.register_tools_in_module(mcp, module) is True
    module.register.assert_called_once_with(mcp)


def test_default_package_holds_math_tools():
    names = [m.__name__ for m in tool_loader.discover_tools()]
    assert "calculator_mcp.tools.math_tools" in names
