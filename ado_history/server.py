"""Main MCP server entry point."""
import logging
import sys

from .config import mcp, ADO_LOG_LEVEL, require_settings


def main():
    """Entry point for the MCP server."""
    # stdout carries the stdio transport, so logs go to stderr
    logging.basicConfig(
        level=ADO_LOG_LEVEL,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    require_settings()

    # Import all modules to trigger tool registration
    from . import tools  # noqa: F401

    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
