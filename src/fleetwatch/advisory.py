"""Fleet risk advisories from Gemini.

The advisory service is optional and untrusted: a missing API key, an
SDK error, a timeout, an empty reply or JSON that does not match
:class:`~fleetwatch.models.advisory.Advisory` all produce
:data:`~fleetwatch.models.advisory.FALLBACK_ADVISORY`. :meth:`AdvisoryClient.analyze`
never raises. There are no retries and nothing is cached.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from collections.abc import Sequence
from typing import Any, Protocol

from google import genai
from google.genai import types
from pydantic import ValidationError

from fleetwatch._constants import KARACHI_LOCATIONS
from fleetwatch.config import FleetConfig
from fleetwatch.exceptions import FleetAdvisoryError
from fleetwatch.models.advisory import FALLBACK_ADVISORY, Advisory
from fleetwatch.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)

_FENCE_START = re.compile(r"^```(?:json)?\s*")
_FENCE_END = re.compile(r"\s*```\s*$")

_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "summary": types.Schema(type=types.Type.STRING),
        "recommendations": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
        ),
        "riskLevel": types.Schema(type=types.Type.STRING, enum=["Low", "Medium", "High"]),
    },
    required=["summary", "recommendations", "riskLevel"],
)


class Advisor(Protocol):
    async def analyze(self, vehicles: Sequence[Vehicle]) -> Advisory: ...


def build_prompt(vehicles: Sequence[Vehicle]) -> str:
    """Fixed operations context plus the serialized fleet snapshot."""
    fleet_json = json.dumps([vehicle.to_wire() for vehicle in vehicles], separators=(",", ":"))
    hubs = ", ".join(loc["name"] for loc in KARACHI_LOCATIONS if loc["type"] == "hub")
    return (
        "System Role: You are the Lead AI Controller for KHI SECURE.\n"
        f"Analyze this real-time Karachi fleet data: {fleet_json}.\n\n"
        "Karachi Context:\n"
        "- Port Qasim to SITE route often has heavy traffic.\n"
        "- Sharea Faisal is a high-speed but congested artery.\n"
        "- Night-time security near bypass areas is critical.\n"
        f"- Industrial hubs: {hubs}.\n\n"
        "Task: Evaluate security risks, battery levels, and route efficiency.\n"
        "Output exactly in JSON format:\n"
        "{\n"
        '  "summary": "Brief professional overview of fleet health (2 sentences)",\n'
        '  "recommendations": ["4 specific tactical steps for operators"],\n'
        '  "riskLevel": "Low" | "Medium" | "High"\n'
        "}"
    )


def parse_advisory(text: str | None) -> Advisory:
    """Parse a model reply, tolerating markdown code fences.

    Raises :class:`FleetAdvisoryError` for empty or malformed replies.
    """
    if not text or not text.strip():
        raise FleetAdvisoryError("Empty advisory response")
    cleaned = _FENCE_END.sub("", _FENCE_START.sub("", text.strip()))
    try:
        decoded: Any = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise FleetAdvisoryError(f"Advisory response is not JSON: {cleaned[:128]}") from exc
    if not isinstance(decoded, dict):
        raise FleetAdvisoryError(f"Advisory response is {type(decoded).__name__}, expected an object")
    try:
        return Advisory.model_validate(decoded)
    except ValidationError as exc:
        raise FleetAdvisoryError(f"Advisory response does not match schema: {exc}") from exc


class AdvisoryClient:
    """Request fleet risk advisories from Gemini with a hard timeout."""

    def __init__(self, config: FleetConfig, *, client: genai.Client | None = None) -> None:
        self._config = config
        self._client = client

    def _require_client(self) -> genai.Client:
        if self._client is None:
            if not self._config.advisory_api_key:
                raise FleetAdvisoryError("No advisory API key configured (set GEMINI_API_KEY)")
            self._client = genai.Client(api_key=self._config.advisory_api_key)
        return self._client

    async def analyze(self, vehicles: Sequence[Vehicle]) -> Advisory:
        """Return an advisory for *vehicles*, or the fallback on any failure."""
        try:
            async with asyncio.timeout(self._config.advisory_timeout):
                text = await self._request(vehicles)
            return parse_advisory(text)
        except FleetAdvisoryError as exc:
            _logger.error("Fleet advisory failed: %s", exc)
        except TimeoutError:
            _logger.error("Fleet advisory timed out after %ss", self._config.advisory_timeout)
        except Exception:
            _logger.exception("Fleet advisory request failed")
        return FALLBACK_ADVISORY

    async def _request(self, vehicles: Sequence[Vehicle]) -> str | None:
        client = self._require_client()
        _logger.debug("Requesting advisory for %d vehicles from %s", len(vehicles), self._config.advisory_model)
        response = await client.aio.models.generate_content(
            model=self._config.advisory_model,
            contents=build_prompt(vehicles),
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=_RESPONSE_SCHEMA,
            ),
        )
        return response.text
