"""Tests for the origin gate."""

import pytest

from relaygate.errors import OriginRejected
from relaygate.origin import OriginGate


class TestOriginGate:
    """Tests for the allow/deny decision."""

    def test_no_origin_is_permitted(self):
        gate = OriginGate(["example.com"])
        assert gate.is_permitted(None) is True
        assert gate.is_permitted("") is True

    def test_allowlisted_origin(self):
        assert OriginGate(["example.com"]).is_permitted("example.com") is True

    def test_other_origin_rejected(self):
        gate = OriginGate(["example.com"])
        assert gate.is_permitted("evil.com") is False
        with pytest.raises(OriginRejected) as exc_info:
            gate.check("evil.com")
        assert exc_info.value.origin == "evil.com"
        assert exc_info.value.status_code == 418

    def test_allowlist_is_frozen(self):
        origins = ["example.com"]
        gate = OriginGate(origins)
        origins.append("evil.com")
        assert gate.is_permitted("evil.com") is False
        assert isinstance(gate.allowed_origins, frozenset)
