"""Location lookup client."""

import asyncio
import ipaddress

import aiohttp
from limiter import Limiter
from pydantic import ValidationError

from plexcord import __version__, log
from plexcord.exceptions import LocationLookupError
from plexcord.models.schemas.geoip import Location
from plexcord.utils.cache import gattl_cache

__all__ = ["LocationClient", "is_public_address"]

# Free freegeoip-style services allow roughly 15k requests per hour; stay well below
geoip_limiter = Limiter(rate=2, capacity=5, jitter=False)


def is_public_address(ip: str | None) -> bool:
    """Check whether ``ip`` is a globally routable address worth looking up."""
    if not ip:
        return False
    try:
        return ipaddress.ip_address(ip).is_global
    except ValueError:
        return False


class LocationClient:
    """Client resolving viewer IP addresses to a rough location.

    Talks to any service exposing ``GET {base_url}/{ip}`` with a freegeoip-style
    JSON body. Results are cached for an hour, since viewers rarely move while
    watching.
    """

    def __init__(self, base_url: str, timeout: float = 5.0) -> None:
        """Initialize the location client.

        Args:
            base_url (str): Base URL of the location service, without trailing slash.
            timeout (float): Total request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={
                    "Accept": "application/json",
                    "User-Agent": f"PlexCord/{__version__}",
                },
            )
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    @gattl_cache(ttl=3600, key=lambda self, ip: (self.base_url, ip))
    async def lookup(self, ip: str) -> Location:
        """Resolve ``ip`` to a location.

        Args:
            ip (str): The viewer's public IP address.

        Returns:
            Location: The location record reported by the service.

        Raises:
            LocationLookupError: If the address is not public, the service cannot
                be reached, or its response is not a location record.
        """
        if not is_public_address(ip):
            raise LocationLookupError(f"'{ip}' is not a public address")

        data = await self._make_request(ip)
        try:
            return Location.model_validate(data)
        except ValidationError as e:
            raise LocationLookupError(f"Unexpected location response: {e}") from e

    @geoip_limiter()
    async def _make_request(self, ip: str) -> dict:
        """Make a rate-limited request to the location service."""
        session = await self._get_session()
        url = f"{self.base_url}/{ip}"

        try:
            async with session.get(url) as response:
                if response.status != 200:
                    raise LocationLookupError(
                        f"Location service responded with HTTP {response.status}"
                    )
                data = await response.json(content_type=None)
        except (TimeoutError, asyncio.TimeoutError, aiohttp.ClientError) as e:
            log.debug(f"Location lookup for $$'{ip}'$$ failed: {e}")
            raise LocationLookupError(f"Location service unreachable: {e}") from e
        except ValueError as e:
            raise LocationLookupError(f"Invalid location response: {e}") from e

        if not isinstance(data, dict):
            raise LocationLookupError("Location response is not an object")
        return data
