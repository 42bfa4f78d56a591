"""Custom exception hierarchy for fleetwatch."""

from __future__ import annotations


class FleetError(Exception):
    """Base exception for all fleetwatch errors."""


class FleetConfigError(FleetError):
    """Invalid or missing configuration."""


class FleetTransportError(FleetError):
    """HTTP-level failure (network, timeout, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class FleetApiError(FleetError):
    """The store answered, but with an error or an unexpected payload."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class FleetNotFoundError(FleetApiError):
    """The referenced vehicle does not exist in the store."""


class FleetAdvisoryError(FleetError):
    """The advisory service failed or returned an unusable payload.

    Never escapes :meth:`fleetwatch.advisory.AdvisoryClient.analyze`;
    it is converted to the fallback advisory there.
    """
