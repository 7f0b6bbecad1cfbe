"""
Main entry point for the Bus Finder application.

This module sets up logging, loads the configuration and runs the bus data
commands on background workers, reporting each outcome to the log.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QCoreApplication, QObject, Qt, Signal, Slot

from busfinder.api.odpt_api_manager import ODPTAPIFactory
from busfinder.managers.bus_stop_directory import remove_duplicate_bus_stops
from busfinder.managers.command_bridge import BusCommandBridge
from busfinder.managers.config_manager import (
    ConfigData,
    ConfigManager,
    ConfigurationError,
)
from busfinder.workers.bus_data_worker import BusDataWorker
from version import __app_name__, __version__, get_version_string

logger = logging.getLogger(__name__)


def get_log_dir() -> Path:
    """Per-user log directory."""
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Logs" / __app_name__
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", Path.home())) / __app_name__ / "logs"
    return Path.home() / ".local" / "share" / __app_name__.lower() / "logs"


def setup_logging(config: ConfigData) -> None:
    """Setup application logging with file and console output."""
    handlers = [logging.StreamHandler()]
    if config.logging.log_to_file:
        log_dir = get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_dir / "busfinder.log")))

    level = getattr(logging, config.logging.level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    # Set specific log levels for different modules
    logging.getLogger("busfinder.api").setLevel(level)
    logging.getLogger("busfinder.managers").setLevel(level)
    logging.getLogger("busfinder.workers").setLevel(level)


class CommandResultCollector(QObject):
    """
    Collects worker results on the main thread.

    Lives in the thread that created it, so worker signals reach its slots
    through the event loop and ``pending`` is only touched there.
    """

    all_finished = Signal()

    def __init__(self, commands, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.pending = set(commands)
        self.failures = {}
        self.record_counts = {}

    @Slot(str, object)
    def on_loaded(self, command: str, data) -> None:
        self.record_counts[command] = len(data)
        if command == "get_bus_stops":
            unique = remove_duplicate_bus_stops(data)
            logger.warning(f"{command}: {len(data)} poles, {len(unique)} named stops")
        else:
            logger.warning(f"{command}: {len(data)} records")
        self._finish(command)

    @Slot(str, str)
    def on_failed(self, command: str, message: str) -> None:
        self.failures[command] = message
        logger.error(f"{command}: {message}")
        self._finish(command)

    def _finish(self, command: str) -> None:
        if command not in self.pending:
            return
        self.pending.discard(command)
        if not self.pending:
            self.all_finished.emit()


def start_workers(app: QCoreApplication, bridge: BusCommandBridge):
    """Start one worker per command and quit the app once all have reported."""
    workers = [BusDataWorker(bridge, name) for name in BusCommandBridge.COMMANDS]
    collector = CommandResultCollector(worker.command for worker in workers)
    collector.all_finished.connect(app.quit)

    for worker in workers:
        worker.data_loaded.connect(collector.on_loaded, Qt.QueuedConnection)
        worker.data_failed.connect(collector.on_failed, Qt.QueuedConnection)
        worker.start()
    return workers, collector


def main():
    """Main application entry point."""
    try:
        config = ConfigManager().load_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(config)
    logger.warning(f"Starting {get_version_string()}")

    app = QCoreApplication(sys.argv)
    app.setApplicationName(__app_name__)
    app.setApplicationVersion(__version__)

    bridge = BusCommandBridge(ODPTAPIFactory.create_manager(config.odpt))
    workers, collector = start_workers(app, bridge)

    exit_code = app.exec()
    for worker in workers:
        worker.wait()
    logger.info(f"Application exiting with code {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
