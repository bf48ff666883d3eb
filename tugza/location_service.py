# location_service.py
# Client for the remote country/state/city lookup API.

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from .config import Settings
from .errors import UpstreamFailure
from .schemas import Location

log = logging.getLogger(__name__)


class LocationClient:
    """Read-only lookups against `GET /api/locations`.

    The endpoint answers `{"countries": [...]}` with no parameters,
    `{"states": [...]}` for `countryId` and `{"cities": [...]}` for
    `countryId` + `stateId`.
    """

    def __init__(self, base_url: str, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocationClient":
        return cls(settings.LOCATION_API_URL, timeout=settings.HTTP_TIMEOUT_SECONDS)

    async def list_countries(self) -> List[Location]:
        return await self._fetch("countries", {})

    async def list_states(self, country_id: str) -> List[Location]:
        return await self._fetch("states", {"countryId": country_id})

    async def list_cities(self, country_id: str, state_id: str) -> List[Location]:
        return await self._fetch("cities", {"countryId": country_id, "stateId": state_id})

    async def _fetch(self, key: str, params: Dict[str, str]) -> List[Location]:
        try:
            async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport) as client:
                response = await client.get("/api/locations", params=params)
            response.raise_for_status()
            payload: Any = response.json()
        except httpx.HTTPStatusError as e:
            log.warning(f"Location lookup for {key} failed with status {e.response.status_code}")
            raise UpstreamFailure(f"Location service returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            log.warning(f"Location lookup for {key} failed: {e!r}")
            raise UpstreamFailure(f"Location service unreachable: {e!r}") from e
        except ValueError as e:
            log.warning(f"Location lookup for {key} returned invalid JSON")
            raise UpstreamFailure("Location service returned invalid JSON") from e

        items = payload.get(key) if isinstance(payload, dict) else None
        if not isinstance(items, list):
            raise UpstreamFailure(f"Location service response has no '{key}' list")
        try:
            return [Location.model_validate(item) for item in items]
        except ValidationError as e:
            raise UpstreamFailure(f"Location service returned malformed {key}") from e
