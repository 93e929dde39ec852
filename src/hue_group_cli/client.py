"""Async client for the Hue bridge group action endpoint."""

from __future__ import annotations

from typing import Any, Mapping, Optional
from urllib.parse import quote

import httpx

from .config import BridgeConfig
from .errors import NetworkError
from .logging import get_logger, redact_url

DEFAULT_TIMEOUT = 10.0

logger = get_logger("hue.client")


class HueClient:
    """Client for the group endpoints of a Hue bridge's v1 REST API."""

    def __init__(
        self,
        ip: str,
        user_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the bridge client.

        Args:
            ip: Bridge host or IP address (e.g., 192.168.1.20)
            user_key: API user key issued by the bridge
            timeout: Request timeout in seconds
            transport: Optional transport override, mainly for tests
        """
        self.ip = ip
        self.user_key = user_key
        self.timeout = timeout
        self._transport = transport
        self._async_client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_config(
        cls,
        config: BridgeConfig,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> HueClient:
        return cls(config.ip, config.user_key, timeout=timeout, transport=transport)

    @property
    def base_url(self) -> str:
        return f"http://{self.ip}/api/{quote(self.user_key, safe='')}"

    @property
    def async_client(self) -> httpx.AsyncClient:
        """Get or create asynchronous HTTP client."""
        if self._async_client is None:
            self._async_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._async_client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._async_client:
            await self._async_client.aclose()
            self._async_client = None

    async def __aenter__(self) -> HueClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    @staticmethod
    def group_action_path(group: int) -> str:
        return f"/groups/{group}/action"

    def group_action_url(self, group: int) -> str:
        return f"{self.base_url}{self.group_action_path(group)}"

    async def set_group_state(self, group: int, state: Mapping[str, Any]) -> None:
        """Send one state change to every light in `group`.

        Only transport failures are reported; the bridge's response body is
        not inspected.
        """
        url = redact_url(self.group_action_url(group))
        logger.debug("PUT %s", url, extra={"body": dict(state)})
        try:
            response = await self.async_client.put(
                self.group_action_path(group), json=dict(state)
            )
        except httpx.InvalidURL as exc:
            raise NetworkError(f"Invalid bridge address {self.ip!r}: {exc}") from exc
        except httpx.RequestError as exc:
            raise NetworkError(f"Request to bridge at {self.ip} failed: {exc}") from exc
        if response.is_error:
            logger.warning(
                "Bridge responded with HTTP %s",
                response.status_code,
                extra={"url": url},
            )
        else:
            logger.info("Group action dispatched", extra={"group": group, "status": response.status_code})

    async def set_group_on(self, group: int, on: bool) -> None:
        await self.set_group_state(group, {"on": on})

    async def set_group_color(self, group: int, x: float, y: float) -> None:
        await self.set_group_state(group, {"xy": [x, y]})
