"""Header codec: parse header lists from the query string and merge header maps."""

import json
from typing import Any, Callable, Iterable, List, Mapping, Optional

from .models import HeaderMap, RequestControl

# Framing headers that belong to a single connection hop
HOP_BY_HOP = frozenset({"connection", "keep-alive", "transfer-encoding"})

# Headers describing an encoded body, invalid once the relay decodes it
ENCODING_HEADERS = frozenset({"content-encoding", "content-length"})

BODY_HEADERS = frozenset({"content-encoding", "content-length", "content-type"})

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "*",
}


def _strict_json(text: str) -> Any:
    return json.loads(text)


def _single_quoted_json(text: str) -> Any:
    return json.loads(text.replace("'", '"'))


# Tried in order; the first attempt that yields a list or object wins
PARSE_ATTEMPTS: List[Callable[[str], Any]] = [_strict_json, _single_quoted_json]


def _try_parse(attempt: Callable[[str], Any], text: str) -> Optional[Any]:
    try:
        value = attempt(text)
    except ValueError:
        return None
    return value if isinstance(value, (list, dict)) else None


def parse_header_list(text: Optional[str]) -> Any:
    """Parse a header list such as ``[["cookie", "a=b"]]``.

    Hand-written query strings often use single quotes, so a strict JSON parse
    is retried with quotes normalized. Anything still unparsable yields an
    empty list instead of an error.
    """
    if not text:
        return []
    for attempt in PARSE_ATTEMPTS:
        value = _try_parse(attempt, text)
        if value is not None:
            return value
    return []


def compose_headers(entries: Any) -> HeaderMap:
    """Turn ``[[name, value], ...]`` (or an object) into a header map."""
    if isinstance(entries, Mapping):
        pairs: Iterable = entries.items()
    else:
        pairs = (
            entry
            for entry in entries
            if isinstance(entry, (list, tuple)) and len(entry) == 2
        )
    return {str(name).lower(): str(value) for name, value in pairs}


def header_names(entries: Any) -> frozenset:
    """Collect lower-cased names from a flat name list or a list of pairs."""
    if isinstance(entries, Mapping):
        return frozenset(str(name).lower() for name in entries)
    names = set()
    for entry in entries:
        if isinstance(entry, str):
            names.add(entry.lower())
        elif isinstance(entry, (list, tuple)) and entry:
            names.add(str(entry[0]).lower())
    return frozenset(names)


def merge_headers(*sources: Mapping[str, str]) -> HeaderMap:
    """Merge header sources left to right; the rightmost value wins."""
    merged: HeaderMap = {}
    for source in sources:
        merged = {**merged, **{key.lower(): value for key, value in source.items()}}
    return merged


def drop_headers(headers: Mapping[str, str], names: Iterable[str]) -> HeaderMap:
    """Return ``headers`` without ``names`` (case-insensitive)."""
    excluded = {name.lower() for name in names}
    return {key: value for key, value in headers.items() if key.lower() not in excluded}


def keep_encodable(headers: Mapping[str, str], encoding: str) -> HeaderMap:
    """Drop headers that cannot be written on the wire in ``encoding``."""
    kept: HeaderMap = {}
    for key, value in headers.items():
        try:
            key.encode(encoding)
            value.encode(encoding)
        except UnicodeEncodeError:
            continue
        kept[key] = value
    return kept


def build_request_headers(
    control: RequestControl, target_host: str, incoming: Mapping[str, str]
) -> HeaderMap:
    """Headers for the outbound upstream request."""
    relay_headers = merge_headers({"host": target_host}, control.append_request_headers)
    if control.ignore_incoming_headers:
        headers = relay_headers
    else:
        # Target host and appended headers override the caller's
        headers = merge_headers(incoming, relay_headers)
    headers = drop_headers(headers, control.delete_request_headers | HOP_BY_HOP)
    return keep_encodable(headers, "ascii")


def build_response_headers(
    control: RequestControl, upstream: Mapping[str, str]
) -> HeaderMap:
    """Headers for the response returned to the caller."""
    upstream_headers = drop_headers(upstream, HOP_BY_HOP)
    if control.decompress_response:
        upstream_headers = drop_headers(upstream_headers, ENCODING_HEADERS)
    headers = merge_headers(
        upstream_headers, CORS_HEADERS, control.append_response_headers
    )
    headers = drop_headers(headers, control.delete_response_headers)
    return keep_encodable(headers, "latin-1")
