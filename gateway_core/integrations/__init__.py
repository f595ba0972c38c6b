"""Processor adapter base and HTTP transport."""
from .gateway import Capability, Gateway, UnsupportedOperation
from .transport import ConnectionFailure, HttpResponse, HttpTransport

__all__ = [
    "Capability",
    "ConnectionFailure",
    "Gateway",
    "HttpResponse",
    "HttpTransport",
    "UnsupportedOperation",
]
