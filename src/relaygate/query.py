"""Query normalizer: coerce raw query parameters into a RequestControl."""

from typing import Iterable, Mapping, Tuple, Union
from urllib.parse import unquote, urlsplit

import structlog

from .errors import InvalidTargetURL, MissingTargetURL
from .headers import compose_headers, header_names, parse_header_list
from .models import RequestControl

logger = structlog.get_logger(__name__)

QueryParams = Union[Mapping[str, str], Iterable[Tuple[str, str]]]

# Query parameter name -> RequestControl field
FLAG_PARAMS = {
    "ignoreReqHeaders": "ignore_incoming_headers",
    "followRedirect": "follow_redirects",
    "redirectWithProxy": "rewrite_redirects_through_proxy",
    "decompress": "decompress_response",
}

APPEND_PARAMS = {
    "appendReqHeaders": "append_request_headers",
    "appendResHeaders": "append_response_headers",
}

DELETE_PARAMS = {
    "deleteReqHeaders": "delete_request_headers",
    "deleteResHeaders": "delete_response_headers",
}

_KNOWN_PARAMS = {"url", *FLAG_PARAMS, *APPEND_PARAMS, *DELETE_PARAMS}


def parse_flag(value: str | None) -> bool:
    """Only the literal string ``"true"`` is true."""
    return value == "true"


def decode_target_url(raw: str) -> str:
    """Percent-decode ``raw`` once and check it is an absolute http(s) URL."""
    decoded = unquote(raw)
    try:
        parts = urlsplit(decoded)
        # Out-of-range ports only raise when read
        parts.port
    except ValueError as e:
        raise InvalidTargetURL(f"Invalid url: {decoded}") from e
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise InvalidTargetURL(f"Invalid url: {decoded}")
    return decoded


def normalize_query(params: QueryParams) -> RequestControl:
    """Build the typed control structure for one relay request.

    ``params`` keeps the arrival order; when a name repeats, the last value
    is used for the control fields while every pair is kept in ``raw_query``.
    """
    pairs = tuple(params.items() if isinstance(params, Mapping) else params)
    values = dict(pairs)

    url = values.get("url")
    if not url:
        raise MissingTargetURL()

    fields = {
        "target_url": decode_target_url(url),
        "raw_query": pairs,
    }
    for param, name in FLAG_PARAMS.items():
        fields[name] = parse_flag(values.get(param))
    for param, name in APPEND_PARAMS.items():
        fields[name] = compose_headers(parse_header_list(values.get(param)))
    for param, name in DELETE_PARAMS.items():
        fields[name] = header_names(parse_header_list(values.get(param)))

    logger.debug(
        "Normalized relay query",
        target=fields["target_url"],
        ignored=[key for key in values if key not in _KNOWN_PARAMS],
    )
    return RequestControl(**fields)
