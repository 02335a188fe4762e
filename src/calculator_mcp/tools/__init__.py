"""Tool modules. Every module here exposing register(mcp) is loaded by the server."""
