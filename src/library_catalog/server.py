"""Library Catalog MCP Server

Exposes the catalog over the Model Context Protocol. Each tool runs one
unit of work in its own transaction scope; see ``tools.catalog``.

Clients connect via the stdio transport, so logs go to stderr and stdout is
left to the protocol.
"""

import logging
import signal
import sys
from typing import Any

from fastmcp import FastMCP

from .config import CatalogConfig, get_config
from .database.session import get_db_manager
from .observability import initialize_observability
from .tools import all_tools

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)

logger = logging.getLogger(__name__)

config = get_config()

mcp = FastMCP(
    name=config.server_name,
    instructions=(
        "Library Catalog - books and their bibliographic records. Every "
        "mutating tool is atomic: an error response means no change was applied. "
        "Deleted books and records are kept and can be listed separately."
    ),
)

for tool in all_tools:
    logger.debug("Registering tool: %s", tool["name"])
    try:
        mcp.tool(
            name=tool["name"],
            description=tool["description"],
        )(tool["handler"])
    except Exception:
        logger.exception("Failed to register tool %s", tool["name"])
        raise

logger.info("Registered %d tools", len(all_tools))


def configure_logging(settings: CatalogConfig) -> None:
    """Set the root log level; outside development fastmcp is kept at WARNING."""
    if settings.is_development:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug mode enabled")
    else:
        logging.getLogger().setLevel(settings.log_level)
        logging.getLogger("fastmcp").setLevel(logging.WARNING)


def run_stdio_server() -> None:
    """Run the MCP server using stdio transport."""
    logger.info("Starting %s v%s on stdio transport", config.server_name, config.server_version)

    configure_logging(config)

    def signal_handler(signum: int, _frame: Any) -> None:
        logger.info("Received signal %s, initiating shutdown...", signum)
        get_db_manager().close()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        mcp.run(transport="stdio")
    except Exception:
        logger.exception("Fatal error in MCP server")
        sys.exit(1)


def main() -> None:
    """Entry point: ``library-catalog`` or ``python -m library_catalog.server``."""
    try:
        logger.info("Library Catalog MCP Server v%s", config.server_version)
        initialize_observability(config)

        db_manager = get_db_manager()
        if not db_manager.verify_connection():
            logger.error("Database is not reachable, refusing to start")
            sys.exit(1)
        db_manager.init_database()

        run_stdio_server()
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    finally:
        get_db_manager().close()


if __name__ == "__main__":
    main()
