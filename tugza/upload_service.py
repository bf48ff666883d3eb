# upload_service.py
# Sends ID photos to the object-store upload endpoint.

import asyncio
import logging
from typing import Optional

import httpx

from .config import Settings
from .errors import UpstreamFailure
from .validation import IdPhoto

log = logging.getLogger(__name__)


class UploadClient:
    """POSTs a multipart form (`file`, `folder`) and returns the stored URL.

    Transport errors and 5xx answers are retried up to `max_attempts`
    times with a linear backoff; 4xx answers fail at once.
    """

    def __init__(
        self,
        url: str,
        folder: str = "id-photos",
        timeout: float = 10.0,
        max_attempts: int = 3,
        retry_delay: float = 0.5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.folder = folder
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadClient":
        return cls(
            settings.UPLOAD_API_URL,
            folder=settings.UPLOAD_FOLDER,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            max_attempts=settings.UPLOAD_MAX_ATTEMPTS,
            retry_delay=settings.UPLOAD_RETRY_DELAY_SECONDS,
        )

    async def upload(self, photo: IdPhoto) -> str:
        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._post(photo)
            except (httpx.TransportError, _RetryableStatus) as e:
                last_error = e
                log.warning(f"Upload of {photo.filename} failed (attempt {attempt}/{self.max_attempts}): {e!r}")
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.retry_delay * attempt)
        raise UpstreamFailure(f"Upload failed after {self.max_attempts} attempts: {last_error!r}") from last_error

    async def _post(self, photo: IdPhoto) -> str:
        files = {"file": (photo.filename, photo.content, photo.content_type)}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.url, files=files, data={"folder": self.folder})

        if response.status_code >= 500:
            raise _RetryableStatus(response.status_code)
        if response.is_error:
            raise UpstreamFailure(f"Upload rejected with status {response.status_code}")
        try:
            url = response.json().get("url")
        except (ValueError, AttributeError) as e:
            raise UpstreamFailure("Upload service returned invalid JSON") from e
        if not url:
            raise UpstreamFailure("Upload service returned no url")
        return url


class _RetryableStatus(Exception):
    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"status {status_code}")
