"""
Command bridge between the bus API manager and the desktop host.

The host only needs "data or a message", so this is the one place where the
typed ``ODPTAPIException`` hierarchy is collapsed into a single
human-readable error string.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, TypeVar

from ..api.odpt_api_manager import (
    ODPTAPIException,
    ODPTBusAPIManager,
    ODPTDecodeException,
    ODPTHTTPException,
    ODPTNetworkException,
)
from ..models.bus_data import BusStop, RoutePattern, StopTimetable, VehiclePosition

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CommandResult(Generic[T]):
    """Outcome of one host command: either ``data`` or an ``error`` message."""

    data: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def format_error(error: ODPTAPIException) -> str:
    """Collapse a typed API error into the message shown to the user."""
    if isinstance(error, ODPTHTTPException):
        return f"API error: {error.status_code}"
    if isinstance(error, ODPTDecodeException):
        return f"JSON parse error: {error}"
    if isinstance(error, ODPTNetworkException):
        return f"Request error: {error}"
    return f"Unexpected API error: {error}"


class BusCommandBridge:
    """
    Exposes the four bus data commands to the host.

    Each command performs exactly one fetch and never raises
    ``ODPTAPIException``; failures come back as ``CommandResult.error``.
    """

    COMMANDS = (
        "get_bus_stops",
        "get_bus_routes",
        "get_bus_timetables",
        "get_bus_realtime",
    )

    def __init__(self, api_manager: ODPTBusAPIManager):
        self._api_manager = api_manager

    async def _run(
        self, name: str, operation: Callable[[], Awaitable[T]]
    ) -> CommandResult[T]:
        logger.debug(f"Command {name} invoked")
        try:
            data = await operation()
        except ODPTAPIException as e:
            message = format_error(e)
            logger.error(f"Command {name} failed: {message}")
            return CommandResult(error=message)
        return CommandResult(data=data)

    async def get_bus_stops(self) -> CommandResult[List[BusStop]]:
        return await self._run("get_bus_stops", self._api_manager.get_bus_stops)

    async def get_bus_routes(self) -> CommandResult[List[RoutePattern]]:
        return await self._run("get_bus_routes", self._api_manager.get_bus_routes)

    async def get_bus_timetables(self) -> CommandResult[List[StopTimetable]]:
        return await self._run(
            "get_bus_timetables", self._api_manager.get_bus_timetables
        )

    async def get_bus_realtime(self) -> CommandResult[List[VehiclePosition]]:
        return await self._run("get_bus_realtime", self._api_manager.get_bus_realtime)

    def command_table(self) -> Dict[str, Callable[[], Awaitable[CommandResult[Any]]]]:
        """Map command names to their bound coroutine functions."""
        return {name: getattr(self, name) for name in self.COMMANDS}

    async def invoke(self, name: str) -> CommandResult[Any]:
        """
        Run a command by name.

        Raises:
            KeyError: If ``name`` is not a registered command
        """
        table = self.command_table()
        if name not in table:
            raise KeyError(f"Unknown command: {name}")
        return await table[name]()
