"""
Structured Logging Configuration
"""

import logging
import sys
from typing import Any, Callable, Dict

import structlog

from callback_auth.core.config import Settings

Processor = Callable[[Any, str, Dict[str, Any]], Dict[str, Any]]


def service_context(settings: Settings) -> Processor:
    """Build a processor tagging every entry with the service and its mode"""
    context = {
        "service": settings.SERVICE_NAME,
        "environment": settings.ENVIRONMENT,
        "mock_mode": settings.CALLBACK_USE_MOCK_SERVICE,
    }

    def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        for key, value in context.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_service_context


def _renderer(settings: Settings):
    if settings.ENVIRONMENT == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=settings.ENVIRONMENT == "development")


def setup_logging(settings: Settings):
    """Configure structlog over stdlib logging at the configured level"""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            service_context(settings),
            _renderer(settings),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
