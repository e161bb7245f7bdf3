"""
Authentication Endpoints
Callback-backed login
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
import structlog

from callback_auth.core.deps import get_credentials, get_provider
from callback_auth.core.exceptions import InvalidCredentialsError
from callback_auth.models import Credentials
from callback_auth.schemas.auth import LoginResponse
from callback_auth.services.provider import CallbackAuthenticationProvider

logger = structlog.get_logger()
router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: Credentials = Depends(get_credentials),
    provider: CallbackAuthenticationProvider = Depends(get_provider),
) -> Any:
    """
    Log in through the configured callback.

    Every query parameter of this request is forwarded to the callback.

    Raises:
        HTTPException: 401 if no authorization data could be resolved
    """
    try:
        authenticated_user = await provider.authenticate_user(credentials)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )

    view = await provider.get_user_context(authenticated_user)
    return LoginResponse.from_view(view, provider.identifier)
