from __future__ import annotations

import asyncio
import json
import time
from typing import Dict, Optional

import httpx

from ..constants import Defaults
from ..errors import DeliveryError
from ..logging import ResponderLogger
from ..models import DeliveryResult, TelemetryRecord
from .schemas import build_payload


async def _post_once(
    endpoint: str,
    body: str,
    headers: Dict[str, str],
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport],
) -> httpx.Response:
    async def _post() -> httpx.Response:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            return await client.post(endpoint, content=body, headers=headers)

    # httpx timeouts are per phase; wait_for bounds connect through last body byte.
    return await asyncio.wait_for(_post(), timeout)


def send_telemetry(
    record: TelemetryRecord,
    endpoint: str,
    max_retries: int = Defaults.MAX_RETRIES,
    retry_delay: float = Defaults.RETRY_DELAY_SECONDS,
    timeout: float = Defaults.REQUEST_TIMEOUT_SECONDS,
    logger: Optional[ResponderLogger] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> DeliveryResult:
    """
    POST the record to the collection endpoint.

    Best-effort: attempt k waits (k - 1) * retry_delay first, each attempt
    must finish within timeout seconds, any non-2xx response, transport error
    or missed deadline is retried, and exhausting all attempts returns the
    last error instead of raising.
    """
    body = json.dumps(build_payload(record))
    headers = {"Content-Type": "application/json"}

    if logger:
        logger.info("Sending telemetry data", endpoint=endpoint)

    last_error: Optional[DeliveryError] = None
    for attempt in range(1, max_retries + 1):
        if attempt > 1:
            delay = (attempt - 1) * retry_delay
            if logger:
                logger.info(
                    "Retrying telemetry upload",
                    attempt=attempt,
                    max_retries=max_retries,
                    delay_seconds=delay,
                )
            time.sleep(delay)

        try:
            response = asyncio.run(_post_once(endpoint, body, headers, timeout, transport))
        except (asyncio.TimeoutError, httpx.TimeoutException):
            last_error = DeliveryError(f"request did not complete within {timeout}s")
        except Exception as exc:
            last_error = DeliveryError(f"failed to send request: {exc}")
        else:
            if 200 <= response.status_code < 300:
                if logger:
                    logger.info(
                        "Telemetry uploaded",
                        status=response.status_code,
                        attempt=attempt,
                    )
                return DeliveryResult(delivered=True, attempts=attempt)
            last_error = DeliveryError(f"unexpected status code: {response.status_code}")

        if logger:
            logger.warning(
                "Telemetry upload failed",
                attempt=attempt,
                error=str(last_error),
            )

    return DeliveryResult(delivered=False, attempts=max_retries, error=last_error)
