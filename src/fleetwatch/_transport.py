"""JSON-over-HTTP transport for the fleet store service."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from fleetwatch._constants import USER_AGENT
from fleetwatch._redact import redact_for_log
from fleetwatch.config import FleetConfig
from fleetwatch.exceptions import FleetTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`JsonTransport`) concrete.
    """

    async def get_json(self, endpoint: str) -> Any: ...

    async def post_json(self, endpoint: str, payload: Mapping[str, Any] | None = None) -> Any: ...


class JsonTransport:
    """HTTP transport that sends and decodes JSON bodies."""

    def __init__(self, config: FleetConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def get_json(self, endpoint: str) -> Any:
        return await self._request("GET", endpoint)

    async def post_json(self, endpoint: str, payload: Mapping[str, Any] | None = None) -> Any:
        return await self._request("POST", endpoint, payload)

    async def _request(self, method: str, endpoint: str, payload: Mapping[str, Any] | None = None) -> Any:
        url = f"{self._config.api_base}{endpoint}"
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        body: str | None = None
        if payload is not None:
            headers["content-type"] = "application/json; charset=UTF-8"
            body = json.dumps(payload, separators=(",", ":"))

        _logger.debug("%s %s %s", method, url, redact_for_log(payload) if payload is not None else "")

        try:
            async with self._http.request(method, url, data=body, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status < 200 or resp.status >= 300:
                    raise FleetTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except FleetTransportError:
            raise
        except TimeoutError as exc:
            raise FleetTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise FleetTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            decoded = json.loads(text)
        except json.JSONDecodeError as exc:
            raise FleetTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=resp.status,
                endpoint=endpoint,
            ) from exc

        _logger.debug("%s %s -> %s", method, url, redact_for_log(decoded, max_string=256))
        return decoded
