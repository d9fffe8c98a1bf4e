"""Logfire tracing for Library Catalog service operations."""

import functools
import logging
from collections.abc import Callable
from datetime import datetime

import logfire

from .config import CatalogConfig, get_config

logger = logging.getLogger(__name__)


def initialize_observability(config: CatalogConfig | None = None) -> None:
    """Configure Logfire from the catalog configuration."""
    config = config or get_config()

    logfire.configure(
        service_name=config.server_name,
        service_version=config.server_version,
        environment=config.environment,
        send_to_logfire=config.logfire_send,
        console=None if config.logfire_console else False,
    )
    logger.debug(
        "Observability configured (send=%s, console=%s)",
        config.logfire_send,
        config.logfire_console,
    )


def traced(operation: str):
    """Decorator wrapping a service method in a ``catalog.<operation>`` span."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with logfire.span(f"catalog.{operation}", operation=operation) as span:
                start_time = datetime.now()
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    span.set_attribute("operation.success", False)
                    span.set_attribute("operation.error", type(e).__name__)
                    raise

                span.set_attribute("operation.success", True)
                span.set_attribute(
                    "operation.duration_ms", (datetime.now() - start_time).total_seconds() * 1000
                )
                if isinstance(result, list):
                    span.set_attribute("result.item_count", len(result))
                return result

        return wrapper

    return decorator


__all__ = [
    "initialize_observability",
    "traced",
]
