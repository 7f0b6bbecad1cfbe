"""
Worker thread package for asynchronous operations.

Keeps ODPT requests off the UI thread.
"""

from .bus_data_worker import BusDataWorker

__all__ = ["BusDataWorker"]
