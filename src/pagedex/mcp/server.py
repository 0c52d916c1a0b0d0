"""Pagedex MCP server entrypoint using FastMCP.

Exposes the local page index to the host application as tools.
Run with:
  - pagedex-mcp
  - or: python -m pagedex.mcp.server (ensure PYTHONPATH includes ./src)
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Callable, Optional

from fastmcp import FastMCP

from pagedex.config import Settings, load_settings
from pagedex.exceptions import SnapshotCorruptionError
from pagedex.mcp.tools import register_index_tools
from pagedex.search.page_index import PageIndex
from pagedex.storage.checkpoint import CheckpointScheduler

logger = logging.getLogger(__name__)


class AppState:
    """Application state shared by MCP tools."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.page_index: Optional[PageIndex] = None
        self.checkpoints: Optional[CheckpointScheduler] = None

    def init_index(self) -> None:
        """Open the page index and, when flushing is deferred, start checkpointing."""
        cfg = self.settings.index
        self.page_index = PageIndex.from_config(cfg, on_corruption=_report_corruption)
        self.page_index.open()
        if not cfg.flush_on_mutation:
            self.checkpoints = CheckpointScheduler()
            self.checkpoints.schedule_checkpoint(
                self.page_index, interval=timedelta(seconds=cfg.checkpoint_seconds)
            )
            self.checkpoints.start()

    def shutdown(self) -> None:
        if self.checkpoints is not None:
            self.checkpoints.shutdown()
            self.checkpoints = None
        if self.page_index is not None:
            self.page_index.close()


def _report_corruption(err: SnapshotCorruptionError) -> None:
    logger.error("Index file %s is corrupt; starting empty. Run rebuild_index to diagnose.", err.path)


# Global state
_state: Optional[AppState] = None


def create_server(settings: Settings, get_state: Callable[[], Optional[AppState]]) -> FastMCP:
    """Build the FastMCP server named after `settings.app.name` with all tools registered."""
    mcp = FastMCP(settings.app.name)

    @mcp.tool
    def health() -> str:
        """Simple health check tool."""
        return "ok"

    register_index_tools(mcp, get_state=get_state)
    return mcp


# ----- Entrypoint -----

def main() -> None:
    """Initialize state and run the MCP server."""
    global _state
    settings = load_settings()
    logging.basicConfig(level=settings.app.log_level.upper())
    _state = AppState(settings)
    _state.init_index()
    mcp = create_server(settings, get_state=lambda: _state)
    try:
        # Choose transport based on configuration: stdio (default), http, or sse
        transport = settings.app.transport
        if transport in ("http", "sse"):
            mcp.run(transport=transport, host=settings.app.host, port=settings.app.port)
        else:
            mcp.run()
    finally:
        _state.shutdown()


if __name__ == "__main__":  # pragma: no cover
    main()
