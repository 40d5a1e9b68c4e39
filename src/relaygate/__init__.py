"""Relaygate - single-endpoint HTTP relay."""

__version__ = "0.1.0"

from .app import app, create_app
from .config import Settings
from .models import RedirectResult, RequestControl, StreamResult
from .origin import OriginGate
from .query import normalize_query
from .services import RelayService

__all__ = [
    "OriginGate",
    "RedirectResult",
    "RelayService",
    "RequestControl",
    "Settings",
    "StreamResult",
    "app",
    "create_app",
    "normalize_query",
]
