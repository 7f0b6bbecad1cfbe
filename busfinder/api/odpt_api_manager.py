"""
ODPT API manager for fetching bus data from the public open-data API.

This module handles all communication with the ODPT API: one GET per
operation, status checking, JSON decoding and stop identifier
normalization. There is no caching, rate limiting or retrying; every call is
a fresh, self-contained request.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional, TypeVar

import aiohttp

from version import __odpt_api_provider__, get_user_agent
from ..managers.config_manager import ODPTConfig
from ..models.bus_data import (
    BusStop,
    RoutePattern,
    StopTimetable,
    VehiclePosition,
    VehiclePositionFeed,
)
from .payload_decoder import (
    PayloadDecodeError,
    decode_bus_stop,
    decode_route_pattern,
    decode_stop_timetable,
    decode_vehicle_position_feed,
    list_decoder,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ODPTAPIException(Exception):
    """Base exception for ODPT API-related errors."""

    pass


class ODPTNetworkException(ODPTAPIException):
    """Exception for transport-level failures (DNS, connection, TLS, timeout)."""

    pass


class ODPTHTTPException(ODPTAPIException):
    """Exception for non-success HTTP status codes."""

    def __init__(self, status_code: int, url: str = ""):
        super().__init__(f"API returned status {status_code}")
        self.status_code = status_code
        self.url = url


class ODPTDecodeException(ODPTAPIException):
    """Exception for response bodies that are not the expected JSON shape."""

    pass


@dataclass
class ODPTAPIResponse:
    """Container for a raw ODPT API response."""

    status_code: int
    body: Optional[str]
    timestamp: datetime
    source: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class HTTPClient(ABC):
    """Abstract HTTP client interface for dependency injection."""

    @abstractmethod
    async def get(self, url: str) -> ODPTAPIResponse:
        """Make HTTP GET request."""
        pass


class AioHttpClient(HTTPClient):
    """
    HTTP client implementation using aiohttp.

    A new session is opened for every request and closed before returning,
    so no connection state outlives a single call.
    """

    def __init__(
        self, timeout_seconds: Optional[int] = None, user_agent: Optional[str] = None
    ):
        """
        Initialize HTTP client.

        Args:
            timeout_seconds: Total request timeout; None keeps aiohttp's default
            user_agent: User-Agent header value
        """
        self._timeout = (
            aiohttp.ClientTimeout(total=timeout_seconds) if timeout_seconds else None
        )
        self._headers = {"User-Agent": user_agent or get_user_agent()}

    def _create_session(self) -> aiohttp.ClientSession:
        if self._timeout is None:
            return aiohttp.ClientSession(headers=self._headers)
        return aiohttp.ClientSession(timeout=self._timeout, headers=self._headers)

    async def get(self, url: str) -> ODPTAPIResponse:
        """
        Make HTTP GET request.

        The body is only read for 2xx responses; error bodies are discarded.

        Raises:
            ODPTNetworkException: For transport failures
            ODPTDecodeException: If a success body is not valid UTF-8
        """
        try:
            async with self._create_session() as session:
                async with session.get(url) as response:
                    status = response.status
                    body = None
                    if 200 <= status < 300:
                        body = await response.text(encoding="utf-8")
                    return ODPTAPIResponse(
                        status_code=status,
                        body=body,
                        timestamp=datetime.now(),
                        source=__odpt_api_provider__,
                    )
        except UnicodeDecodeError as e:
            raise ODPTDecodeException(f"Response body is not valid UTF-8: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ODPTNetworkException(f"Network error: {e!r}") from e


class ODPTDataFetcher:
    """
    Generic fetch-and-decode operation.

    Issues one GET, checks the status and runs the body through a decoder.
    Any failure is total for the call.
    """

    def __init__(self, http_client: HTTPClient):
        self._http_client = http_client

    async def fetch(self, url: str, decode: Callable[[Any], T]) -> T:
        """
        Fetch ``url`` and decode its JSON body.

        Args:
            url: Absolute URL, requested without query parameters
            decode: Callable turning parsed JSON into records

        Returns:
            The decoded value

        Raises:
            ODPTNetworkException: For transport failures
            ODPTHTTPException: For status codes outside 200-299
            ODPTDecodeException: For malformed JSON or unexpected shapes
        """
        logger.debug(f"Fetching {url}")
        response = await self._http_client.get(url)
        logger.debug(f"API response status: {response.status_code} for {url}")

        if not response.is_success:
            logger.error(f"API error {response.status_code} for {url}")
            raise ODPTHTTPException(response.status_code, url)

        try:
            payload = json.loads(response.body)
        except (json.JSONDecodeError, TypeError, RecursionError) as e:
            logger.error(f"Invalid JSON from {url}: {e}")
            raise ODPTDecodeException(f"Invalid JSON: {e}") from e

        try:
            return decode(payload)
        except (PayloadDecodeError, RecursionError) as e:
            logger.error(f"Unexpected payload shape from {url}: {e}")
            raise ODPTDecodeException(f"Unexpected payload: {e}") from e


def normalize_stop_ids(stops: List[BusStop]) -> List[BusStop]:
    """Return new stop records with ``short_id`` derived from ``external_id``."""
    return [stop.with_short_id() for stop in stops]


class ODPTBusAPIManager:
    """
    High-level bus data retrieval.

    Binds the generic fetcher to the four ODPT resources. Errors are raised
    as typed ``ODPTAPIException`` subclasses.
    """

    def __init__(self, fetcher: ODPTDataFetcher, config: ODPTConfig):
        """
        Initialize bus API manager.

        Args:
            fetcher: Generic fetch operation
            config: ODPT endpoint configuration
        """
        self._fetcher = fetcher
        self._config = config
        logger.debug(f"ODPTBusAPIManager initialized for {config.base_url}")

    async def get_bus_stops(self) -> List[BusStop]:
        """Fetch all bus stop poles with ``short_id`` populated."""
        stops = await self._fetcher.fetch(
            self._config.endpoint_url("bus_stops"), list_decoder(decode_bus_stop)
        )
        stops = normalize_stop_ids(stops)
        logger.info(f"Fetched {len(stops)} bus stops")
        return stops

    async def get_bus_routes(self) -> List[RoutePattern]:
        routes = await self._fetcher.fetch(
            self._config.endpoint_url("bus_routes"),
            list_decoder(decode_route_pattern),
        )
        logger.info(f"Fetched {len(routes)} route patterns")
        return routes

    async def get_bus_timetables(self) -> List[StopTimetable]:
        timetables = await self._fetcher.fetch(
            self._config.endpoint_url("bus_timetables"),
            list_decoder(decode_stop_timetable),
        )
        logger.info(f"Fetched {len(timetables)} stop timetables")
        return timetables

    async def get_bus_realtime(self) -> List[VehiclePosition]:
        """Fetch the realtime feed and return only its vehicle positions."""
        feed: VehiclePositionFeed = await self._fetcher.fetch(
            self._config.endpoint_url("bus_realtime"), decode_vehicle_position_feed
        )
        positions = list(feed.entities)
        logger.info(
            f"Fetched {len(positions)} vehicle positions from "
            f"{self._config.realtime_feed}"
        )
        return positions


class ODPTAPIFactory:
    """
    Factory for creating bus API managers.

    Implements Factory pattern for easy instantiation.
    """

    @staticmethod
    def create_manager(config: ODPTConfig) -> ODPTBusAPIManager:
        """Create bus API manager using aiohttp."""
        http_client = AioHttpClient(
            timeout_seconds=config.timeout_seconds, user_agent=config.user_agent
        )
        return ODPTBusAPIManager(ODPTDataFetcher(http_client), config)
