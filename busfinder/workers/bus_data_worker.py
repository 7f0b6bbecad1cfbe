"""
Bus Data Background Worker

Runs one bus data command off the UI thread so the window stays responsive
while the ODPT request is in flight.
"""

import asyncio
import logging
import time
from typing import Optional

from PySide6.QtCore import QObject, QThread, Signal

from ..managers.command_bridge import BusCommandBridge

logger = logging.getLogger(__name__)


class BusDataWorker(QThread):
    """
    Background worker for a single bus data command.

    The command runs on a private asyncio event loop inside ``run()``.
    """

    # Signals
    data_loading_started = Signal(str)  # command name
    data_loaded = Signal(str, object)  # command name, list of records
    data_failed = Signal(str, str)  # command name, error message

    def __init__(
        self,
        bridge: BusCommandBridge,
        command: str,
        parent: Optional[QObject] = None,
    ):
        """
        Initialize the bus data worker.

        Args:
            bridge: Command bridge used to run the fetch
            command: One of ``BusCommandBridge.COMMANDS``
            parent: Parent QObject

        Raises:
            ValueError: If ``command`` is not a known command
        """
        super().__init__(parent)
        if command not in BusCommandBridge.COMMANDS:
            raise ValueError(f"Unknown bus data command: {command}")
        self._bridge = bridge
        self._command = command
        self._should_stop = False

    @property
    def command(self) -> str:
        return self._command

    def stop_loading(self):
        """Request the worker to drop its result; the request itself is abandoned."""
        self._should_stop = True
        logger.info(f"Bus data worker stop requested for {self._command}")

    def run(self):
        """Main worker thread execution."""
        logger.debug(f"Starting background command {self._command}")
        self.data_loading_started.emit(self._command)
        start_time = time.time()

        try:
            result = asyncio.run(self._bridge.invoke(self._command))
        except Exception as e:
            logger.error(f"Command {self._command} crashed: {e}", exc_info=True)
            if not self._should_stop:
                self.data_failed.emit(self._command, str(e))
            return

        if self._should_stop:
            logger.debug(f"Discarding result of stopped command {self._command}")
            return

        if result.ok:
            logger.info(
                f"{self._command} completed in {time.time() - start_time:.2f}s"
            )
            self.data_loaded.emit(self._command, result.data)
        else:
            self.data_failed.emit(self._command, result.error)
