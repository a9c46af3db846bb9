"""
Async client for the image service routes (/api/image-edit, /api/image-generate).

Every failure mode comes back as CollaboratorError:
- transport errors (connect, read timeout, ...)
- non-2xx responses, using `details` / `error` from the body when present
- 2xx responses with `success: false` or without a usable `output`
"""

import logging
from typing import Any, Dict, Optional, Sequence

import httpx

from config.settings import settings

from .errors import CollaboratorError
from .job_request import build_edit_request, build_generate_request
from .model import EncodedImage, JobRequest

logger = logging.getLogger(__name__)

EDIT_PATH = "/api/image-edit"
GENERATE_PATH = "/api/image-generate"


class ImageServiceClient:
    def __init__(
        self,
        base_url: str = settings.BACKEND_URL,
        timeout: float = settings.REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def submit(self, request: JobRequest) -> str:
        """Post a built request; the body is exactly request.payload()."""
        path = EDIT_PATH if request.mode == "edit" else GENERATE_PATH
        return await self._post(path, request.payload())

    async def edit(self, images: Sequence[EncodedImage], prompt: str) -> str:
        return await self.submit(build_edit_request(prompt, images))

    async def generate(self, prompt: str) -> str:
        return await self.submit(build_generate_request(prompt))

    async def _post(self, path: str, payload: Dict[str, Any]) -> str:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.error("[ServiceClient] Request to %s failed: %s", url, e)
            raise CollaboratorError(f"Could not reach image service: {e}") from e

        data = _json_or_none(r)

        if r.status_code < 200 or r.status_code >= 300:
            logger.error("[ServiceClient] %s returned %s: %s", path, r.status_code, r.text[:500])
            details = _detail_text(data) or r.text[:500] or r.reason_phrase
            raise CollaboratorError(details, status_code=r.status_code, details=details)

        if data is None:
            raise CollaboratorError("Image service returned a malformed response", status_code=r.status_code)

        if not data.get("success"):
            details = _detail_text(data) or "Image service reported failure"
            raise CollaboratorError(details, status_code=r.status_code, details=details)

        output = data.get("output")
        if not isinstance(output, str) or not output:
            raise CollaboratorError("Image service response has no output image", status_code=r.status_code)

        logger.info("[ServiceClient] %s -> %s", path, output)
        return output


def _json_or_none(r: httpx.Response) -> Optional[Dict[str, Any]]:
    try:
        data = r.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _detail_text(data: Optional[Dict[str, Any]]) -> Optional[str]:
    if not data:
        return None
    error, details = data.get("error"), data.get("details")
    if error and details:
        return f"{error}: {details}"
    return details or error
