"""calculator_mcp: arithmetic tools served over the Model Context Protocol."""

__version__ = "0.1.0"
