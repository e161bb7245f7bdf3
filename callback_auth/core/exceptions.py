"""
Exceptions raised by the callback authentication service
"""

from typing import Optional


class CallbackAuthError(Exception):
    """Base class for callback authentication errors"""


class ConfigurationError(CallbackAuthError):
    """Required configuration is missing or malformed. Not recoverable per request."""

    def __init__(self, message: str, property_name: Optional[str] = None):
        super().__init__(message)
        self.property_name = property_name


class InvalidCredentialsError(CallbackAuthError):
    """
    The login attempt produced no authorization data.

    The message is deliberately generic; callers may show it to end users.
    """

    def __init__(self, message: str = "Invalid login."):
        super().__init__(message)
