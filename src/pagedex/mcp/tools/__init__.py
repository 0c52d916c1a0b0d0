"""Tool registration modules for the Pagedex MCP server."""

from .index import register_index_tools

__all__ = [
    "register_index_tools",
]
