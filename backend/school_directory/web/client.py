"""
School Directory — API Client for the Web Views
=================================================

What:  Async HTTP client the server-rendered pages use to reach the REST API.
How:   One httpx.AsyncClient per call against settings.api_url, with a timeout.
       No retries: a failure is reported once as ApiClientError and the page
       shows it to the user.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from school_directory.exceptions import ApiClientError
from school_directory.services.upload_service import UPLOAD_FIELD, ImageUpload

logger = logging.getLogger(__name__)


class DirectoryClient:
    """
    Thin wrapper over the /api endpoints.

    Args:
        base_url:  API root, e.g. http://localhost:3001
        timeout:   seconds per request
        transport: optional httpx transport (tests pass httpx.MockTransport
                   or an ASGITransport)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def list_schools(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/schools")

    async def get_stats(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/stats")

    async def create_school(
        self,
        fields: Dict[str, str],
        image: Optional[ImageUpload] = None,
    ) -> Dict[str, Any]:
        """POST every field as text, plus the image as a binary part when given."""
        files = None
        if image is not None and image.filename:
            files = {
                UPLOAD_FIELD: (
                    image.filename,
                    image.content,
                    image.content_type or "application/octet-stream",
                )
            }
        return await self._request("POST", "/api/schools", data=fields, files=files)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, str(e))
            raise ApiClientError(context={"path": path, "error_type": type(e).__name__})

        if response.is_error:
            logger.warning("%s %s returned %d", method, path, response.status_code)
            raise ApiClientError(
                message=_error_message(response),
                status_code=response.status_code,
                context={"path": path},
            )
        try:
            return response.json()
        except ValueError:
            raise ApiClientError(
                message="The directory API returned an unreadable response",
                status_code=response.status_code,
                context={"path": path},
            )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase
