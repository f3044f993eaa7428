"""Implementations of NotificationClient."""

import asyncio
from typing import Any, Dict

import httpx
import structlog

from credit_ledger.core.config import settings
from credit_ledger.domain.interfaces import NotificationClient

logger = structlog.get_logger(__name__)


class LocalNotificationClient(NotificationClient):
    """
    Simulated delivery: the code is logged instead of sent.

    Used for local approval, where the code is shown to the seller on
    the same device for the buyer to read back.
    """

    async def send_code(self, destination: str, code: str) -> bool:
        logger.info(
            "approval_code_simulated",
            destination=destination,
            code=code,
        )
        return True


class HttpNotificationClient(NotificationClient):
    """
    HTTP client for an SMS/notification gateway.

    Posts the code with retry logic and exponential backoff.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
    ):
        self._base_url = base_url or settings.notification_gateway_url
        self._timeout = timeout or settings.notification_timeout
        self._max_retries = max_retries or settings.notification_max_retries

        if not self._base_url:
            raise ValueError("HttpNotificationClient requires a gateway URL")

    async def send_code(self, destination: str, code: str) -> bool:
        payload = {
            "event": "approval_code",
            "destination": destination,
            "code": code,
        }

        return await self._post(payload)

    async def _post(self, payload: Dict[str, Any]) -> bool:
        """
        Send a notification with retry logic.

        Uses exponential backoff: 0.1s, 0.2s, 0.4s, ...
        """
        log = logger.bind(destination=payload["destination"])

        for attempt in range(self._max_retries):
            try:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(
                        self._base_url,
                        json=payload,
                        headers={"Content-Type": "application/json"},
                    )

                if response.status_code < 400:
                    log.info(
                        "notification_sent",
                        status_code=response.status_code,
                    )
                    return True

                log.warning(
                    "notification_failed",
                    status_code=response.status_code,
                    attempt=attempt + 1,
                    response=response.text[:200],
                )

            except httpx.TimeoutException:
                log.warning(
                    "notification_timeout",
                    attempt=attempt + 1,
                )
            except httpx.HTTPError as e:
                log.error(
                    "notification_error",
                    attempt=attempt + 1,
                    error=str(e),
                )

            if attempt < self._max_retries - 1:
                delay = 2 ** attempt * 0.1
                await asyncio.sleep(delay)

        log.error(
            "notification_exhausted_retries",
            max_retries=self._max_retries,
        )
        return False
