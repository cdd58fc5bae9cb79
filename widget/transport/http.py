from typing import Any

import httpx

from shared.logging.logger import get_logger
from widget.core.config import settings

logger = get_logger("widget.http")

ANALYTICS_PATH = "/api/analytics"
PLAYBACK_PATH = "/api/playback"
CONVERSATION_PATH = "/api/conversation"


class DeliveryError(Exception):
    """An analytics payload was not accepted (transport error or non-2xx)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ApiClient:
    """Async HTTP client for everything the widget asks of the API."""

    def __init__(
        self,
        api_base: str,
        timeout: float = settings.widget_request_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.api_base,
            timeout=timeout,
            transport=transport,
        )

    async def _post_analytics(self, body: dict[str, Any]) -> None:
        try:
            resp = await self.client.post(ANALYTICS_PATH, json=body)
        except httpx.HTTPError as e:
            raise DeliveryError(f"analytics request failed: {e}") from e
        if not resp.is_success:
            raise DeliveryError(
                f"analytics rejected: {resp.status_code}", status_code=resp.status_code
            )

    async def send_event(self, event: dict[str, Any]) -> None:
        await self._post_analytics({"event": event})

    async def send_batch(self, events: list[dict[str, Any]]) -> None:
        await self._post_analytics({"events": events})

    async def get_playback(self, params: dict[str, str]) -> dict[str, Any] | None:
        """Fetch the playback context; None when the API has nothing to play."""
        resp = await self.client.get(PLAYBACK_PATH, params=params)
        if not resp.is_success:
            logger.info(
                "playback_unavailable", extra={"status_code": resp.status_code}
            )
            return None
        return resp.json()

    async def post_conversation(self, audio: bytes, site_id: str) -> dict[str, Any]:
        resp = await self.client.post(
            CONVERSATION_PATH,
            files={"audio": ("recording.mp3", audio, "audio/mp3")},
            data={"siteId": site_id},
        )
        resp.raise_for_status()
        return resp.json()

    async def aclose(self) -> None:
        await self.client.aclose()
