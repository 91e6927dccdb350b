"""Notification dispatcher: image resolution, request building, delivery."""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from notifier.channels.factory import create_formatter
from notifier.exceptions import (
    ConfigurationError,
    DeliveryError,
    NetworkError,
    NotifierError,
    PayloadError,
    UploadError,
)
from notifier.imgur import ImgurUploader
from notifier.schemas.notification import NotificationMessage, NotifierConfig, WebhookConfig
from notifier.security import safe_http_client

logger = logging.getLogger(__name__)


@dataclass
class DeliveryResult:
    delivered: bool
    status_code: Optional[int]
    text: str

    def describe(self) -> str:
        if self.delivered:
            return f"Notification sent successfully: {self.text}" if self.text else "Notification sent successfully"
        if self.status_code is not None:
            return f"Failed to send notification: HTTP {self.status_code} {self.text}".rstrip()
        return f"Failed to send notification: {self.text}"


def _is_remote(url: str) -> bool:
    return url.startswith(("http://", "https://"))


class Dispatcher:
    """
    Sends NotificationMessages to the configured webhook.

    Nothing is retried. deliver() raises on failure; send() never does and
    reports the outcome as a DeliveryResult instead.
    """

    def __init__(
        self,
        config: WebhookConfig,
        uploader: Optional[ImgurUploader] = None,
        timeout: Optional[float] = None,
        block_private_networks: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not config.url:
            raise ConfigurationError(
                "No webhook URL configured. Set WEBHOOK_URL or create a webhook-config.json file."
            )
        self.config = config
        self.formatter = create_formatter(config)
        self.uploader = uploader
        self.timeout = timeout
        self.block_private_networks = block_private_networks
        self._transport = transport

    @classmethod
    def from_config(cls, config: NotifierConfig) -> "Dispatcher":
        return cls(
            config.webhook,
            uploader=ImgurUploader.from_config(config.imgur),
            timeout=config.request_timeout,
            block_private_networks=config.block_private_networks,
        )

    async def resolve_images(self, message: NotificationMessage) -> NotificationMessage:
        """
        Settle which image the message carries.

        A local path wins over a remote URL. Upload failures drop the image
        (or keep the original remote URL) rather than failing the send.
        """
        local = message.image
        remote = message.image_url
        if remote and not _is_remote(remote):
            local, remote = local or remote, None

        if local and self.formatter.handles_local_files:
            return message

        if local:
            if self.uploader is not None:
                try:
                    url = await self.uploader.upload_image(local)
                    return message.model_copy(update={"image": None, "image_url": url})
                except UploadError:
                    logger.warning("Failed to upload local image %s, continuing without it", local, exc_info=True)
            else:
                logger.warning("Local image %s ignored: no image uploader configured", local)
            message = message.model_copy(update={"image": None, "image_url": remote})

        if remote and self.uploader is not None:
            try:
                url = await self.uploader.upload_image(remote)
                return message.model_copy(update={"image_url": url})
            except UploadError:
                logger.warning("Failed to re-host image %s, using the original URL", remote, exc_info=True)

        return message

    async def deliver(self, message: NotificationMessage) -> DeliveryResult:
        """
        Send one notification.

        Raises:
            PayloadError: the request could not be built (unreadable local file,
                invalid URL, header value that is not ASCII).
            DeliveryError: the webhook answered with a non-2xx status.
            NetworkError: the webhook could not be reached.
        """
        message = await self.resolve_images(message)
        provider = self.formatter.provider_type
        try:
            payload = self.formatter.prepare_request(message)
        except OSError as e:
            raise PayloadError(f"Could not build {provider} request: {e}") from e

        try:
            async with safe_http_client(
                timeout=self.timeout,
                block_private_networks=self.block_private_networks,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method=payload.method,
                    url=payload.url,
                    headers=payload.headers,
                    content=payload.body,
                    params=payload.params or None,
                )
        except (httpx.InvalidURL, UnicodeError) as e:
            raise PayloadError(f"Could not build {provider} request: {e}") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Could not reach {provider} webhook: {e}") from e

        if not response.is_success:
            raise DeliveryError(response.status_code, response.text[:500])

        logger.debug("Delivered notification via %s (%d)", provider, response.status_code)
        return DeliveryResult(delivered=True, status_code=response.status_code, text=response.text)

    async def send(self, message: NotificationMessage) -> DeliveryResult:
        try:
            return await self.deliver(message)
        except DeliveryError as e:
            logger.warning(
                "%s webhook returned status %d: %s",
                self.formatter.provider_type, e.status_code, e.text[:200],
            )
            return DeliveryResult(delivered=False, status_code=e.status_code, text=e.text)
        except NotifierError as e:
            logger.error("Failed to send notification: %s", e, exc_info=True)
            return DeliveryResult(delivered=False, status_code=None, text=str(e))
        except Exception as e:
            logger.error("Unexpected error sending %s notification", self.formatter.provider_type, exc_info=True)
            return DeliveryResult(delivered=False, status_code=None, text=f"Unexpected error: {e}")
