"""WeCom (WeChat Work) group robot webhook channel."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

WECOM_WEBHOOK_URL = "https://qyapi.weixin.qq.com/cgi-bin/webhook/send"


class NotificationError(Exception):
    """Raised when a webhook message cannot be delivered."""


class WeComChannel:
    """WeCom group robot channel for sending markdown alerts.

    The robot is addressed by its webhook key, passed as the ``key`` query
    parameter of the webhook URL.
    """

    def __init__(
        self,
        key: str,
        *,
        name: str = "wecom",
        base_url: str = WECOM_WEBHOOK_URL,
        timeout: float = 10.0,
    ) -> None:
        """Initialize WeCom channel.

        Args:
            key: Group robot webhook key.
            name: Label used in logs; never contains the key itself.
            base_url: Webhook endpoint without query string.
            timeout: HTTP request timeout in seconds.
        """
        self.key = key
        self.name = name
        self.base_url = base_url
        self.timeout = timeout

    @property
    def webhook_url(self) -> str:
        """Return the webhook URL with the key embedded."""
        return f"{self.base_url}?key={quote(self.key, safe='')}"

    def send(self, message: str) -> int:
        """Post a markdown message to the robot.

        Args:
            message: Markdown content.

        Returns:
            HTTP status code of the webhook response.

        Raises:
            NotificationError: On transport failure or a non-2xx response.
        """
        payload = {
            "msgtype": "markdown",
            "markdown": {"content": message},
        }

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.webhook_url, json=payload)
        except httpx.HTTPError as e:
            raise NotificationError(f"Failed to send wechat message via {self.name}: {e}") from e

        if not response.is_success:
            raise NotificationError(
                f"WeCom webhook {self.name} failed with status code {response.status_code}"
            )

        logger.info(
            f"Wechat message sent successfully via {self.name} "
            f"with status code: {response.status_code}"
        )
        return response.status_code
