"""Relay engine: forward the request upstream and shape the response."""

from typing import Mapping, Sequence, Tuple
from urllib.parse import quote, urlencode, urljoin, urlsplit

import httpx
import structlog

from ..errors import UpstreamTransportError
from ..headers import (
    BODY_HEADERS,
    build_request_headers,
    build_response_headers,
    drop_headers,
)
from ..models import RedirectResult, RequestControl, StreamResult

logger = structlog.get_logger(__name__)


def build_proxy_redirect(
    location: str, raw_query: Sequence[Tuple[str, str]], proxy_path: str = "/proxy"
) -> str:
    """Point ``location`` back at the relay, keeping every other query parameter."""
    params = [("url", location)]
    params.extend((name, value) for name, value in raw_query if name != "url")
    return f"{proxy_path}?{urlencode(params, quote_via=quote, safe='')}"


class RelayService:
    """Issues the upstream call for a RequestControl and classifies the answer."""

    def __init__(self, client: httpx.AsyncClient, proxy_path: str = "/proxy"):
        self.client = client
        self.proxy_path = proxy_path
        self.logger = logger.bind(component="RelayService")

    async def relay(
        self, control: RequestControl, incoming_headers: Mapping[str, str]
    ) -> RedirectResult | StreamResult:
        """Relay one request; the caller owns the upstream of a StreamResult."""
        # Host header never carries userinfo
        target_host = urlsplit(control.target_url).netloc.rpartition("@")[2]
        headers = build_request_headers(control, target_host, incoming_headers)

        upstream = await self._send(control, headers)
        try:
            response_headers = build_response_headers(control, upstream.headers)
            location = response_headers.get("location")
        except BaseException:
            await upstream.aclose()
            raise

        if location is not None:
            await upstream.aclose()
            return self._redirect(
                control, upstream.status_code, location, response_headers
            )

        self.logger.info(
            "Relaying upstream response",
            target=control.target_url,
            status=upstream.status_code,
        )
        return StreamResult(
            status_code=upstream.status_code,
            headers=response_headers,
            upstream=upstream,
            decompress=control.decompress_response,
        )

    async def _send(
        self, control: RequestControl, headers: Mapping[str, str]
    ) -> httpx.Response:
        try:
            request = self.client.build_request(
                "GET", control.target_url, headers=headers
            )
            return await self.client.send(
                request, stream=True, follow_redirects=control.follow_redirects
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.logger.error(
                "Upstream request failed", target=control.target_url, error=str(e)
            )
            raise UpstreamTransportError(f"Upstream request failed: {e}") from e

    def _redirect(
        self,
        control: RequestControl,
        status_code: int,
        location: str,
        response_headers: Mapping[str, str],
    ) -> RedirectResult:
        if control.rewrite_redirects_through_proxy:
            absolute = urljoin(control.target_url, location)
            location = build_proxy_redirect(absolute, control.raw_query, self.proxy_path)

        self.logger.info(
            "Intercepted upstream redirect",
            target=control.target_url,
            status=status_code,
            location=location,
            proxied=control.rewrite_redirects_through_proxy,
        )
        headers = drop_headers(response_headers, BODY_HEADERS)
        headers["location"] = location
        return RedirectResult(
            status_code=status_code, location=location, headers=headers
        )
