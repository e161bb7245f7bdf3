"""
Callback Authentication Provider
Entry point a login host calls: authenticate, then hand out the authorization view
"""

from typing import Optional

import httpx
import structlog

from callback_auth.core.config import ConfigurationService, Settings
from callback_auth.core.exceptions import InvalidCredentialsError
from callback_auth.models import AuthenticatedUser, Credentials
from callback_auth.services.authorization import AuthorizationView
from callback_auth.services.callback import CallbackService
from callback_auth.services.default_record import DefaultRecordLoader
from callback_auth.services.resolution import RecordResolver

logger = structlog.get_logger()


class CallbackAuthenticationProvider:
    """Authentication provider backed by an HTTP callback."""

    identifier = "callback"

    def __init__(self, resolver: RecordResolver):
        self._resolver = resolver

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient,
        default_loader: Optional[DefaultRecordLoader] = None,
    ) -> "CallbackAuthenticationProvider":
        """Wire the provider from settings and a shared HTTP client."""
        resolver = RecordResolver(
            config=ConfigurationService(settings),
            callback_service=CallbackService(http_client),
            default_loader=default_loader or DefaultRecordLoader(
                cache_enabled=settings.CALLBACK_DEFAULT_RECORD_CACHE
            ),
        )
        return cls(resolver)

    async def authenticate_user(self, credentials: Credentials) -> AuthenticatedUser:
        """
        Resolve the login's record.

        Raises:
            InvalidCredentialsError: no record could be resolved.
            ConfigurationError: the provider is misconfigured.
        """
        record = await self._resolver.resolve(credentials)
        if record is None:
            logger.info("Login failed, no user data available")
            raise InvalidCredentialsError()

        logger.info(
            "Login succeeded",
            username=record.username,
            connections=len(record.connections) if record.connections is not None else 0,
        )
        return AuthenticatedUser(
            identifier=record.username,
            authentication_provider_id=self.identifier,
            credentials=credentials,
            record=record,
        )

    async def update_authenticated_user(
        self,
        authenticated_user: AuthenticatedUser,
        credentials: Credentials,
    ) -> AuthenticatedUser:
        return authenticated_user

    async def get_user_context(self, authenticated_user: AuthenticatedUser) -> AuthorizationView:
        return AuthorizationView(authenticated_user.record, authentication_provider=self)

    async def update_user_context(
        self,
        context: AuthorizationView,
        authenticated_user: AuthenticatedUser,
        credentials: Credentials,
    ) -> AuthorizationView:
        return context
