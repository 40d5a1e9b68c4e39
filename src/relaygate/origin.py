"""Origin gate: keep the relay from being embedded on arbitrary pages."""

from typing import Iterable, Optional

import structlog
from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import HTMLResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .errors import OriginRejected

logger = structlog.get_logger(__name__)

REJECTION_STATUS = 418

REJECTION_PAGE = """
<html>
  <head>
    <title>Leave us alone!</title>
  </head>
  <body>
    <h1 style="color:#111111">Unauthorized origin.</h1><br>
    <h2>You shall not pass!</h2>
  </body>
</html>
"""


class OriginGate:
    """Static allow/deny decision on the request's declared Origin."""

    def __init__(self, allowed_origins: Iterable[str]):
        self.allowed_origins = frozenset(allowed_origins)

    def is_permitted(self, origin: Optional[str]) -> bool:
        # Same-origin and non-browser clients send no Origin
        if not origin:
            return True
        return origin in self.allowed_origins

    def check(self, origin: Optional[str]) -> None:
        """Raise OriginRejected unless ``origin`` is permitted."""
        if not self.is_permitted(origin):
            raise OriginRejected(origin)


class OriginGateMiddleware:
    """ASGI middleware running the origin gate before any route."""

    def __init__(self, app: ASGIApp, gate: OriginGate):
        self.app = app
        self.gate = gate
        self.logger = logger.bind(component="OriginGate")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        origin = Headers(scope=scope).get("origin")
        try:
            self.gate.check(origin)
        except OriginRejected as e:
            self.logger.warning("Rejected request", origin=e.origin, path=scope["path"])
            response = HTMLResponse(REJECTION_PAGE, status_code=REJECTION_STATUS)
            await response(scope, receive, send)
            return

        if not origin:
            await self.app(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                if "access-control-allow-origin" not in headers:
                    headers["Access-Control-Allow-Origin"] = origin
                    headers.add_vary_header("Origin")
            await send(message)

        await self.app(scope, receive, send_with_cors)
