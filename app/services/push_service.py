"""Expo push notification service."""

import logging
from typing import Any

import httpx

from app.core.config import settings
from app.core.errors import UpstreamServiceError

logger = logging.getLogger(__name__)


class PushService:
    """Service to send push notifications through the Expo push API."""

    def __init__(
        self,
        push_url: str | None = None,
        access_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize push service."""
        self.transport = transport
        self.push_url = push_url or settings.EXPO_PUSH_URL
        self.access_token = access_token if access_token is not None else settings.EXPO_ACCESS_TOKEN
        self.timeout = 10.0

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def send(
        self,
        push_token: str,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Send one push notification.

        Args:
            push_token: Expo push token of the device
            title: Notification title
            body: Notification body
            data: Extra payload delivered to the app

        Returns:
            Expo push ticket response

        Raises:
            UpstreamServiceError: If the request fails or Expo returns an error status
        """
        message = {
            "to": push_token,
            "title": title,
            "body": body,
            "sound": "default",
            "priority": "high",
            "data": data or {},
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.push_url, json=message, headers=self._headers())
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Expo push HTTP error %s: %s", e.response.status_code, e.response.text)
            raise UpstreamServiceError(f"Expo push failed with status {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error sending push notification: %s", e)
            raise UpstreamServiceError("Expo push request failed") from e

        logger.debug("Push notification sent: %s", result)
        return result
