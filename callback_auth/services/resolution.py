"""
Record Resolution
Chooses between the mock default, the live callback and the default record for one login
"""

import asyncio
from typing import Optional

import structlog

from callback_auth.core.config import ConfigurationService
from callback_auth.core.metrics import RESOLUTIONS_TOTAL
from callback_auth.models import Credentials
from callback_auth.schemas.record import Record
from callback_auth.services.callback import CallbackService, CallbackStatus
from callback_auth.services.default_record import DefaultRecordLoader

logger = structlog.get_logger()


class RecordResolver:
    """
    Resolves the Record for a single login attempt.

    - Mock mode answers with the default record and never calls out.
    - A 4xx/5xx answer is a deliberate rejection: no record, no fallback.
    - A 2xx answer carrying a record wins.
    - Empty or unparseable answers and transport failures fall back to the
      default record.

    ``None`` means the login has failed. Holds no per-request state, so one
    instance serves concurrent logins.
    """

    def __init__(
        self,
        config: ConfigurationService,
        callback_service: CallbackService,
        default_loader: DefaultRecordLoader,
    ):
        self._config = config
        self._callback_service = callback_service
        self._default_loader = default_loader

    async def resolve(self, credentials: Credentials) -> Optional[Record]:
        if self._config.use_mock_service():
            record = await self._load_default()
            self._count("mock" if record is not None else "none")
            return record

        # Missing URI is a configuration error and propagates
        uri = self._config.callback_uri()
        result = await self._callback_service.invoke(uri, credentials.parameters)

        if result.status == CallbackStatus.REJECTED:
            logger.info("Callback refused login", status_code=result.status_code)
            self._count("rejected")
            return None

        if result.status == CallbackStatus.SUCCESS:
            self._count("callback")
            return result.record

        record = await self._load_default()
        logger.debug(
            "Using default record",
            callback_status=result.status.value,
            available=record is not None,
        )
        self._count("default" if record is not None else "none")
        return record

    async def _load_default(self) -> Optional[Record]:
        # Blocking file read, kept off the event loop
        return await asyncio.to_thread(self._default_loader.load, self._config.default_record_path())

    @staticmethod
    def _count(source: str) -> None:
        RESOLUTIONS_TOTAL.labels(source=source).inc()
