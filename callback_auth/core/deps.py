"""
FastAPI Dependencies
Provider lookup and credential extraction
"""

from typing import Dict, List

from fastapi import HTTPException, Request, status
import structlog

from callback_auth.models import Credentials
from callback_auth.services.provider import CallbackAuthenticationProvider

logger = structlog.get_logger()


def get_provider(request: Request) -> CallbackAuthenticationProvider:
    """Authentication provider created during application startup"""
    provider = getattr(request.app.state, "provider", None)
    if provider is None:
        logger.error("Authentication provider is not initialised")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unavailable",
        )
    return provider


def get_credentials(request: Request) -> Credentials:
    """
    Collect the request's query parameters as login credentials.

    Repeated names keep every value, in order.
    """
    parameters: Dict[str, List[str]] = {}
    for name, value in request.query_params.multi_items():
        parameters.setdefault(name, []).append(value)

    return Credentials(
        parameters=parameters,
        remote_address=request.client.host if request.client else None,
    )
