"""Error taxonomy for the relay pipeline."""


class RelayError(Exception):
    """Base class for errors surfaced to the caller."""

    status_code = 500
    detail = "Relay error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class MissingTargetURL(RelayError):
    status_code = 400
    detail = "Missing url"


class InvalidTargetURL(RelayError):
    status_code = 400
    detail = "Invalid url"


class OriginRejected(RelayError):
    """The declared Origin is not in the allowlist."""

    status_code = 418
    detail = "Unauthorized origin"

    def __init__(self, origin: str):
        self.origin = origin
        super().__init__(f"Unauthorized origin: {origin}")


class UpstreamTransportError(RelayError):
    """DNS failure, refused connection, redirect loop or broken stream."""

    status_code = 502
    detail = "Upstream request failed"
