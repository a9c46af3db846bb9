import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from config.settings import settings

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = ("succeeded", "failed", "canceled")


def _headers() -> Dict[str, str]:
    token = settings.REPLICATE_API_TOKEN
    if not token:
        raise RuntimeError("REPLICATE_API_TOKEN is not set")
    return {"Authorization": f"Bearer {token}", "Prefer": "wait"}


async def create_prediction(
    model: str,
    model_input: Dict[str, Any],
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """
    POST an input to /models/{owner}/{name}/predictions.
    With `Prefer: wait` Replicate holds the request open and usually
    answers with a finished prediction.
    """
    url = f"{settings.REPLICATE_API_URL.rstrip('/')}/models/{model}/predictions"

    async with httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT, transport=transport) as client:
        r = await client.post(url, json={"input": model_input}, headers=_headers())

        if r.status_code >= 400:
            logger.error("[ReplicateClient] %s returned %s: %s", model, r.status_code, r.text[:500])
            try:
                detail = r.json().get("detail")
            except ValueError:
                detail = None
            raise RuntimeError(detail or f"Replicate returned status {r.status_code}")

        data = r.json()
        if not data.get("id"):
            raise RuntimeError(f"Replicate did not return a prediction id: {data}")
        logger.info("[ReplicateClient] Got prediction %s, status=%s", data["id"], data.get("status"))
        return data


async def wait_for_prediction(
    prediction: Dict[str, Any],
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """
    Poll the prediction's `urls.get` until it reaches a terminal status.
    Gives up after `timeout` seconds (REQUEST_TIMEOUT by default).
    """
    if poll_interval is None:
        poll_interval = settings.POLL_INTERVAL
    if timeout is None:
        timeout = settings.REQUEST_TIMEOUT
    if prediction.get("status") in TERMINAL_STATUSES:
        return prediction

    url = (prediction.get("urls") or {}).get("get")
    if not url:
        raise RuntimeError(f"Prediction {prediction.get('id')} has no polling url")

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    async with httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT, transport=transport) as client:
        while True:
            if loop.time() >= deadline:
                raise RuntimeError(f"Prediction {prediction.get('id')} did not finish within {timeout:g}s")
            await asyncio.sleep(poll_interval)
            r = await client.get(url, headers=_headers())
            r.raise_for_status()
            data = r.json()
            logger.debug("[ReplicateClient] Polling %s, status=%s", url, data.get("status"))
            if data.get("status") in TERMINAL_STATUSES:
                return data


def extract_output_url(prediction: Dict[str, Any]) -> Optional[str]:
    """Output is a URL string, or a list of them for multi-output models; take the first."""
    output = prediction.get("output")
    if isinstance(output, list):
        output = output[0] if output else None
    if isinstance(output, str) and output:
        return output
    return None


async def run_model(
    model: str,
    model_input: Dict[str, Any],
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Run a model to completion and return its output image URL."""
    prediction = await create_prediction(model, model_input, transport=transport)
    prediction = await wait_for_prediction(prediction, transport=transport)

    status = prediction.get("status")
    if status != "succeeded":
        raise RuntimeError(prediction.get("error") or f"Prediction {status}")

    url = extract_output_url(prediction)
    if not url:
        raise RuntimeError(f"Prediction {prediction.get('id')} has no output image")
    logger.info("[ReplicateClient] Output: %s", url)
    return url
