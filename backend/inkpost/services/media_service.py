"""
InkPost Backend: Media Upload Service
======================================

What:  Forwards an uploaded image to the Cloudinary-compatible media host and
       relays the hosted URL and metadata.
How:   The file becomes a base64 data URI; the request parameters are signed
       with the Cloudinary SDK's api_sign_request and posted through one
       shared httpx.AsyncClient. Connection failures are retried with tenacity.
Who:   Called by POST /api/v1/blog/upload.

Signature format:
    Only `folder` and `timestamp` are signed. The SDK produces
    sha1("folder=<folder>&timestamp=<unix seconds>" + api_secret) in hex,
    which the media host recomputes on its side.

Retries:
    Only failures to establish a connection are retried. Once the request
    may have reached the host (read/write errors, read timeouts) a retry
    could store the same asset twice, so those fail immediately.

Error mapping:
    empty / non-image / oversized file → ValidationError (400)
    transport failure                  → UpstreamServiceError (500)
    non-2xx answer from the host       → UpstreamServiceError (500), body logged
"""

import base64
import logging
import time
from typing import Any, Dict, Optional

import cloudinary.utils
import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from inkpost.config import settings
from inkpost.exceptions import UpstreamServiceError, ValidationError
from inkpost.schemas.blog import UploadResponse

logger = logging.getLogger(__name__)

# Raised before any byte of the request is sent
RETRYABLE_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)


def build_signature(folder: str, timestamp: int, api_secret: str) -> str:
    """Signature for a folder/timestamp upload, as the media host expects it."""
    return cloudinary.utils.api_sign_request(
        {"folder": folder, "timestamp": timestamp}, api_secret
    )


def to_data_uri(content: bytes, content_type: str) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


class MediaService:
    """
    Client for the media host's signed upload endpoint.

    The httpx client is created on first use and reused for every upload;
    tests pass their own client (e.g. one backed by httpx.MockTransport).
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=settings.media_upload_timeout)
        return self._client

    async def aclose(self) -> None:
        """Close the shared client (called on application shutdown)."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def validate_image(self, content: bytes, content_type: Optional[str]) -> str:
        """Reject empty, non-image or oversized uploads. Returns the MIME type."""
        if not content:
            raise ValidationError(message="Uploaded image is empty", field="image")

        mime_type = (content_type or "").split(";")[0].strip().lower()
        if not mime_type.startswith("image/"):
            raise ValidationError(
                message="Uploaded file must be an image",
                field="image",
                context={"content_type": mime_type or None},
            )

        self.check_size(len(content))
        return mime_type

    def check_size(self, size: Optional[int]) -> None:
        """
        Reject uploads above MAX_UPLOAD_SIZE.

        Called with the size the multipart parser recorded before the file is
        read into memory; an unknown size (None) is checked again after reading.
        """
        if size is not None and size > settings.max_upload_size:
            max_mb = settings.max_upload_size / (1024 * 1024)
            raise ValidationError(
                message=f"Image exceeds the maximum size of {max_mb:.0f}MB",
                field="image",
                context={"max_size": settings.max_upload_size, "actual_size": size},
            )

    def build_upload_fields(self, data_uri: str, timestamp: Optional[int] = None) -> Dict[str, Any]:
        """Form fields for one signed upload."""
        ts = int(time.time()) if timestamp is None else timestamp
        folder = settings.media_folder
        return {
            "file": data_uri,
            "api_key": settings.cloudinary_api_key,
            "timestamp": str(ts),
            "folder": folder,
            "signature": build_signature(folder, ts, settings.cloudinary_api_secret),
        }

    @retry(
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential(
            multiplier=settings.retry_min_wait,
            min=settings.retry_min_wait,
            max=settings.retry_max_wait,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _post_with_retry(self, url: str, fields: Dict[str, Any]) -> httpx.Response:
        """Only connection failures are retried; HTTP error answers are returned as-is."""
        return await self.client.post(url, data=fields)

    async def upload_image(
        self,
        filename: str,
        content: bytes,
        content_type: Optional[str],
    ) -> UploadResponse:
        """
        Validate, sign and forward one image.

        Returns:
            UploadResponse with secure_url, public_id, width, height, format.

        Raises:
            ValidationError: The file is not an acceptable image.
            UpstreamServiceError: The media host is unreachable, rejected the
                upload, or answered with something unparseable.
        """
        mime_type = self.validate_image(content, content_type)

        if not (settings.cloudinary_cloud_name and settings.cloudinary_api_key
                and settings.cloudinary_api_secret):
            logger.error("Image upload attempted but media credentials are not configured")
            raise UpstreamServiceError(message="Image uploads are not available right now.")

        fields = self.build_upload_fields(to_data_uri(content, mime_type))
        start_time = time.perf_counter()

        try:
            response = await self._post_with_retry(settings.media_upload_url, fields)
        except httpx.HTTPError as e:
            logger.error("Media host unreachable for %s: %s", filename, str(e))
            raise UpstreamServiceError(context={"error_type": type(e).__name__})

        duration_ms = (time.perf_counter() - start_time) * 1000

        if not response.is_success:
            logger.error(
                "Media host rejected upload of %s with %d after %.0fms: %s",
                filename,
                response.status_code,
                duration_ms,
                response.text,
            )
            raise UpstreamServiceError(status_code=response.status_code)

        try:
            body = response.json()
            result = UploadResponse(
                secure_url=body["secure_url"],
                public_id=body["public_id"],
                width=body.get("width"),
                height=body.get("height"),
                format=body.get("format"),
            )
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Unexpected media host response for %s: %s", filename, response.text)
            raise UpstreamServiceError(context={"error_type": type(e).__name__})

        logger.info(
            "Uploaded %s (%d bytes) as %s in %.0fms",
            filename,
            len(content),
            result.public_id,
            duration_ms,
        )
        return result


# ── Singleton Instance ────────────────────────────────────────────────────
# Holds the pooled httpx client shared by all requests.
media_service = MediaService()
