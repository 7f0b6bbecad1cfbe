"""
API integration for the Bus Finder application.

This module handles communication with the ODPT public API,
including error handling and response decoding.
"""

from .odpt_api_manager import (
    ODPTAPIException,
    ODPTAPIFactory,
    ODPTBusAPIManager,
    ODPTDataFetcher,
    ODPTDecodeException,
    ODPTHTTPException,
    ODPTNetworkException,
)
from .payload_decoder import PayloadDecodeError, resolve_title

__all__ = [
    "ODPTAPIException",
    "ODPTAPIFactory",
    "ODPTBusAPIManager",
    "ODPTDataFetcher",
    "ODPTDecodeException",
    "ODPTHTTPException",
    "ODPTNetworkException",
    "PayloadDecodeError",
    "resolve_title",
]
