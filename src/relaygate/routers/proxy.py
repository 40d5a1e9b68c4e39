"""Relay endpoint."""

from typing import AsyncIterator

import anyio
import httpx
import structlog
from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import StreamingResponse
from starlette.types import Receive, Scope, Send

from ..errors import RelayError, UpstreamTransportError
from ..models import RedirectResult, StreamResult
from ..query import normalize_query
from ..services import RelayService

logger = structlog.get_logger(__name__)
router = APIRouter(tags=["proxy"])

PROXY_PATH = "/proxy"


class UpstreamStreamResponse(StreamingResponse):
    """Pipes an open upstream response and always releases it."""

    def __init__(self, result: StreamResult):
        self.upstream = result.upstream
        self.decompress = result.decompress
        super().__init__(
            self._relay_chunks(),
            status_code=result.status_code,
            headers=result.headers,
        )

    def _chunks(self) -> AsyncIterator[bytes]:
        if self.decompress:
            return self.upstream.aiter_bytes()
        return self.upstream.aiter_raw()

    async def _relay_chunks(self) -> AsyncIterator[bytes]:
        # An upstream whose body was already read has nothing left to stream
        if self.upstream.is_stream_consumed:
            yield self.upstream.content
            return
        try:
            async for chunk in self._chunks():
                yield chunk
        except httpx.HTTPError as e:
            logger.error("Upstream stream failed", url=str(self.upstream.url), error=str(e))
            raise UpstreamTransportError(f"Upstream stream failed: {e}") from e

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            # Runs on client disconnect too, when the task is being cancelled
            with anyio.CancelScope(shield=True):
                await self.upstream.aclose()


def get_relay_service(request: Request) -> RelayService:
    """Relay service bound to the application's shared upstream client."""
    proxy_path = request.scope.get("root_path", "") + PROXY_PATH
    return RelayService(request.app.state.http_client, proxy_path=proxy_path)


@router.get(PROXY_PATH, name="relay")
async def relay(request: Request):
    """Forward ``url`` upstream and relay the answer."""
    try:
        control = normalize_query(request.query_params.multi_items())
        result = await get_relay_service(request).relay(control, request.headers)
    except RelayError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e

    if isinstance(result, RedirectResult):
        return Response(status_code=result.status_code, headers=result.headers)
    return UpstreamStreamResponse(result)
