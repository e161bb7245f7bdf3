"""
Callback Invoker
POSTs the login request parameters to the configured callback and classifies the answer
"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Mapping, Optional, Tuple

import httpx
import structlog
from pydantic import ValidationError

from callback_auth.core.metrics import CALLBACK_LATENCY, CALLBACK_REQUESTS_TOTAL
from callback_auth.models import ParameterValues
from callback_auth.schemas.record import Record

logger = structlog.get_logger()


class CallbackStatus(str, Enum):
    """How a callback invocation ended"""
    SUCCESS = "success"                     # 2xx with a Record body
    EMPTY = "empty"                         # 2xx without a body
    INVALID_RESPONSE = "invalid_response"   # body is not a Record, or status outside 2xx/4xx/5xx
    REJECTED = "rejected"                   # 4xx or 5xx
    TRANSPORT_ERROR = "transport_error"     # no usable HTTP exchange


@dataclass
class CallbackResult:
    """Result of one callback invocation"""
    status: CallbackStatus
    latency_ms: float
    timestamp: datetime
    record: Optional[Record] = None
    status_code: Optional[int] = None
    error_code: Optional[str] = None
    message: Optional[str] = None


def build_query_params(parameters: Optional[Mapping[str, ParameterValues]]) -> List[Tuple[str, str]]:
    """
    Flatten request parameters into query pairs.

    Each value of a multi-valued parameter becomes its own pair, in order.
    """
    if not parameters:
        return []

    pairs: List[Tuple[str, str]] = []
    for name, values in parameters.items():
        if isinstance(values, str):
            pairs.append((name, values))
            continue
        for value in values:
            pairs.append((name, value))
    return pairs


def build_callback_url(uri: str, parameters: Optional[Mapping[str, ParameterValues]]) -> httpx.URL:
    """
    Append the forwarded parameters to the callback URI.

    Pairs already in the URI's query are kept and come first; forwarded
    pairs with the same name are added after them, never replacing them.
    """
    url = httpx.URL(uri)
    pairs = list(url.params.multi_items()) + build_query_params(parameters)
    return url.copy_with(params=pairs)


class CallbackService:
    """Invokes the HTTP callback through a shared, pooled httpx.AsyncClient."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def invoke(
        self,
        uri: str,
        parameters: Optional[Mapping[str, ParameterValues]] = None,
    ) -> CallbackResult:
        start_time = time.perf_counter()
        timestamp = datetime.now(timezone.utc)

        url = build_callback_url(uri, parameters)

        try:
            response = await self._client.post(
                url,
                headers={"Accept": "*/*"},
            )
            # Read the body inside the transport guard; streaming errors are transport errors
            body = response.content
        except httpx.HTTPError as e:
            result = CallbackResult(
                status=CallbackStatus.TRANSPORT_ERROR,
                latency_ms=self._elapsed_ms(start_time),
                timestamp=timestamp,
                error_code=self._get_error_code(e),
                message=str(e),
            )
            logger.info(
                "Callback could not be reached",
                error_code=result.error_code,
                error=str(e),
            )
            return self._observe(result)

        latency_ms = self._elapsed_ms(start_time)
        status_code = response.status_code

        if response.is_client_error or response.is_server_error:
            logger.debug("Callback rejected the login", status_code=status_code)
            return self._observe(CallbackResult(
                status=CallbackStatus.REJECTED,
                latency_ms=latency_ms,
                timestamp=timestamp,
                status_code=status_code,
                error_code=f"HTTP_{status_code}",
                message=f"HTTP error {status_code}",
            ))

        if not response.is_success:
            logger.debug("Callback answered with an unexpected status", status_code=status_code)
            return self._observe(CallbackResult(
                status=CallbackStatus.INVALID_RESPONSE,
                latency_ms=latency_ms,
                timestamp=timestamp,
                status_code=status_code,
                error_code=f"HTTP_{status_code}",
                message=f"Unexpected HTTP status {status_code}",
            ))

        if not body.strip():
            return self._observe(CallbackResult(
                status=CallbackStatus.EMPTY,
                latency_ms=latency_ms,
                timestamp=timestamp,
                status_code=status_code,
                message=f"HTTP {status_code}",
            ))

        try:
            record = Record.model_validate_json(body)
        except ValidationError as e:
            # Simple callbacks answer without JSON and rely on the default record
            logger.debug(
                "Callback response was not valid user data JSON",
                status_code=status_code,
                error=str(e),
            )
            return self._observe(CallbackResult(
                status=CallbackStatus.INVALID_RESPONSE,
                latency_ms=latency_ms,
                timestamp=timestamp,
                status_code=status_code,
                error_code="INVALID_BODY",
                message="Response body is not valid user data",
            ))

        return self._observe(CallbackResult(
            status=CallbackStatus.SUCCESS,
            latency_ms=latency_ms,
            timestamp=timestamp,
            record=record,
            status_code=status_code,
            message=f"HTTP {status_code}",
        ))

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return (time.perf_counter() - start_time) * 1000

    @staticmethod
    def _observe(result: CallbackResult) -> CallbackResult:
        CALLBACK_REQUESTS_TOTAL.labels(status=result.status.value).inc()
        CALLBACK_LATENCY.observe(result.latency_ms / 1000)
        return result

    @staticmethod
    def _get_error_code(error: httpx.HTTPError) -> str:
        """Get standardized error code from a transport exception"""
        if isinstance(error, httpx.TimeoutException):
            return "TIMEOUT"
        if isinstance(error, httpx.ConnectError):
            return "CONNECTION_REFUSED"
        return "TRANSPORT_ERROR"
