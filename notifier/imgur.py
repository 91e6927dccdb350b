"""Imgur image hosting (https://apidocs.imgur.com)."""

import base64
import logging
from pathlib import Path
from typing import Optional

import httpx

from notifier.exceptions import UploadError
from notifier.schemas.notification import ImgurConfig

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.imgur.com/3/image"


class ImgurUploader:
    """Re-host an image (local file or remote URL) on Imgur and return its link."""

    def __init__(self, config: Optional[ImgurConfig] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config or ImgurConfig()
        self.api_url = self.config.api_url or DEFAULT_API_URL
        self._transport = transport

    @classmethod
    def from_config(cls, config: Optional[ImgurConfig]) -> Optional["ImgurUploader"]:
        """None when image uploads are not configured."""
        if config is None:
            return None
        return cls(config)

    async def upload_image(self, source: str, image_name: Optional[str] = None) -> str:
        """
        Upload ``source`` and return the hosted URL.

        Raises:
            UploadError: if the image cannot be read or Imgur rejects it.
        """
        async with httpx.AsyncClient(timeout=30, transport=self._transport) as client:
            try:
                data = await self._read(client, source)
                headers = {"Content-Type": "application/json"}
                if self.config.client_id:
                    headers["Authorization"] = f"Client-ID {self.config.client_id}"
                resp = await client.post(
                    self.api_url,
                    headers=headers,
                    json={
                        "image": base64.b64encode(data).decode("ascii"),
                        "type": "base64",
                        "name": image_name or "notification-image",
                    },
                )
            except (httpx.HTTPError, OSError) as e:
                raise UploadError(f"Imgur upload failed: {e}") from e

        if resp.status_code >= 400:
            raise UploadError(f"Imgur upload failed: {resp.status_code} {resp.text[:200]}")
        try:
            result = resp.json()
        except ValueError as e:
            raise UploadError("Imgur upload failed: invalid JSON response") from e
        if not result.get("success"):
            error = (result.get("data") or {}).get("error", "unknown error")
            raise UploadError(f"Imgur upload failed: {error}")

        link = result["data"]["link"]
        logger.info("Image uploaded to Imgur: %s", link)
        return link

    @staticmethod
    async def _read(client: httpx.AsyncClient, source: str) -> bytes:
        if source.startswith(("http://", "https://")):
            resp = await client.get(source)
            resp.raise_for_status()
            return resp.content
        return Path(source).expanduser().read_bytes()
