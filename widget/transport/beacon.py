"""Fire-and-forget delivery for page teardown.

``send`` serialises the payload, hands it to a background worker and returns
at once, like ``navigator.sendBeacon``: the caller learns whether the payload
was accepted for delivery, never whether it arrived.
"""

import json
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterator

import httpx

from shared.logging.logger import get_logger
from shared.metrics import get_counter
from widget.core.config import settings
from widget.transport.http import ANALYTICS_PATH

logger = get_logger("widget.beacon")

# Envelope overhead around the encoded events, and between two of them
ENVELOPE_BYTES = len(b'{"events": []}')
SEPARATOR_BYTES = len(b", ")

BEACONS_QUEUED = get_counter(
    "beacons_queued_total", "Beacon payloads accepted for delivery", "widget"
)
BEACONS_REJECTED = get_counter(
    "beacons_rejected_total", "Beacon payloads refused before sending", "widget"
)


def _encode(payload: Any) -> bytes:
    return json.dumps(payload, default=str).encode("utf-8")


def pack_events(
    payloads: list[dict[str, Any]], max_bytes: int
) -> Iterator[tuple[int, int]]:
    """Split ``payloads`` into consecutive ``[start, end)`` runs whose
    ``{"events": [...]}`` envelope encodes to at most ``max_bytes``.

    An event too large to fit on its own still gets a run of one, which the
    sender then refuses.
    """
    start, size = 0, ENVELOPE_BYTES
    for i, payload in enumerate(payloads):
        event_size = len(_encode(payload))
        added = event_size if i == start else event_size + SEPARATOR_BYTES
        if i > start and size + added > max_bytes:
            yield start, i
            start, size = i, ENVELOPE_BYTES + event_size
        else:
            size += added
    if start < len(payloads):
        yield start, len(payloads)


class BeaconSender:
    def __init__(
        self,
        api_base: str,
        max_bytes: int = settings.widget_beacon_max_bytes,
        timeout: float = settings.widget_request_timeout_seconds,
        transport: httpx.BaseTransport | None = None,
    ):
        self.url = api_base.rstrip("/") + ANALYTICS_PATH
        self.max_bytes = max_bytes
        self.client = httpx.Client(timeout=timeout, transport=transport)
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="vh-beacon"
        )
        self._closed = False

    def send(self, payload: dict[str, Any]) -> bool:
        """Queue ``payload`` for delivery. Never raises."""
        if self._closed:
            BEACONS_REJECTED.inc()
            return False
        try:
            body = _encode(payload)
        except (TypeError, ValueError) as e:
            logger.warning("beacon_payload_unserialisable", extra={"error": str(e)})
            BEACONS_REJECTED.inc()
            return False
        if len(body) > self.max_bytes:
            logger.warning(
                "beacon_payload_too_large",
                extra={"size": len(body), "limit": self.max_bytes},
            )
            BEACONS_REJECTED.inc()
            return False
        try:
            self._executor.submit(self._deliver, body)
        except RuntimeError:  # executor already shut down
            BEACONS_REJECTED.inc()
            return False
        BEACONS_QUEUED.inc()
        return True

    def send_events(self, payloads: list[dict[str, Any]]) -> list[int]:
        """Beacon ``payloads`` in as many size-capped batches as needed.

        Returns the indexes of the events no batch was accepted for.
        """
        refused: list[int] = []
        for start, end in pack_events(payloads, self.max_bytes):
            if not self.send({"events": payloads[start:end]}):
                refused.extend(range(start, end))
        return refused

    def _deliver(self, body: bytes) -> None:
        try:
            resp = self.client.post(
                self.url, content=body, headers={"Content-Type": "application/json"}
            )
            logger.debug("beacon_delivered", extra={"status_code": resp.status_code})
        except httpx.HTTPError as e:
            logger.debug("beacon_lost", extra={"error": str(e)})

    def close(self, wait: bool = True) -> None:
        """Stop accepting beacons; with ``wait`` drain the ones in flight."""
        self._closed = True
        self._executor.shutdown(wait=wait)
        self.client.close()
