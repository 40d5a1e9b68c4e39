"""Data models for Relaygate."""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, Field

HeaderMap = Dict[str, str]


class RequestControl(BaseModel):
    """Normalized per-request configuration built from the query string."""

    model_config = ConfigDict(frozen=True)

    target_url: str = Field(..., description="Decoded absolute upstream URL")
    ignore_incoming_headers: bool = Field(
        False, description="Do not forward the caller's request headers"
    )
    follow_redirects: bool = Field(
        False, description="Let the transport chase upstream redirects"
    )
    rewrite_redirects_through_proxy: bool = Field(
        False, description="Point Location headers back at the relay"
    )
    decompress_response: bool = Field(
        False, description="Decode compressed upstream bodies"
    )
    append_request_headers: HeaderMap = Field(default_factory=dict)
    append_response_headers: HeaderMap = Field(default_factory=dict)
    delete_request_headers: FrozenSet[str] = Field(default_factory=frozenset)
    delete_response_headers: FrozenSet[str] = Field(default_factory=frozenset)
    raw_query: Tuple[Tuple[str, str], ...] = Field(
        default_factory=tuple,
        description="Original query parameters, verbatim and in order",
    )


@dataclass(frozen=True)
class RedirectResult:
    """Upstream answered with a Location; no body is relayed."""

    status_code: int
    location: str
    headers: HeaderMap = field(default_factory=dict)


@dataclass(frozen=True)
class StreamResult:
    """Upstream body to be piped through unchanged.

    The transport owns ``upstream`` and must close it.
    """

    status_code: int
    headers: HeaderMap
    upstream: httpx.Response
    decompress: bool = False
