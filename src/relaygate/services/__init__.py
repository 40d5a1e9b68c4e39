"""Services module for Relaygate."""

from .relay import RelayService, build_proxy_redirect

__all__ = ["RelayService", "build_proxy_redirect"]
