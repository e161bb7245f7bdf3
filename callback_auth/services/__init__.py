"""Login resolution and authorization view services."""

from .authorization import ROOT_CONNECTION_GROUP, AuthorizationView
from .callback import CallbackResult, CallbackService, CallbackStatus
from .default_record import DefaultRecordLoader
from .provider import CallbackAuthenticationProvider
from .resolution import RecordResolver

__all__ = [
    "ROOT_CONNECTION_GROUP",
    "AuthorizationView",
    "CallbackResult",
    "CallbackService",
    "CallbackStatus",
    "DefaultRecordLoader",
    "CallbackAuthenticationProvider",
    "RecordResolver",
]
