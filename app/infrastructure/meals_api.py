"""HTTP client for the catalogue endpoint that creates meals in bulk."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)

BULK_CREATE_PATH = "/meals/bulk"


class MealsApiError(RuntimeError):
    """Raised when the bulk-create request itself fails."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _extract_error_message(response: httpx.Response) -> str:
    """Return the ``message`` reported by the catalogue, or a generic text."""

    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return f"Catalogue API responded with status {response.status_code}"


class MealsApiClient:
    """Thin async wrapper around the catalogue bulk-create endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "MealsApiClient":
        settings = settings or get_settings()
        return cls(
            settings.meals_api_base_url,
            token=settings.meals_api_token,
            timeout=settings.meals_api_timeout_seconds,
        )

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def bulk_create_meals(
        self, meals: Sequence[dict[str, Any]]
    ) -> dict[str, Any]:
        """Send ``meals`` in a single request and return the decoded JSON body.

        Transport failures, timeouts, non-2xx statuses and bodies that are not
        a JSON object all raise :class:`MealsApiError`.
        """

        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.post(
                    BULK_CREATE_PATH, json={"meals": list(meals)}
                )
            except httpx.HTTPError as exc:
                logger.error("Bulk meal request to %s failed: %s", self.base_url, exc)
                raise MealsApiError(f"Request failed: {exc}") from exc

        if response.status_code >= 400:
            message = _extract_error_message(response)
            logger.error(
                "Catalogue API rejected bulk meal request with status %s: %s",
                response.status_code,
                message,
            )
            raise MealsApiError(message, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise MealsApiError(
                "Catalogue API returned a response that is not JSON",
                status_code=response.status_code,
            ) from exc
        if not isinstance(body, dict):
            raise MealsApiError(
                "Catalogue API returned an unexpected response shape",
                status_code=response.status_code,
            )
        return body


__all__ = ["BULK_CREATE_PATH", "MealsApiClient", "MealsApiError"]
