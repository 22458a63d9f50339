from __future__ import annotations

"""
Unit tests for the error taxonomy.
"""

import pytest

from cclog.domain.errors import CCLogError, InvalidArgument, InvalidLevel, SinkUnavailable


@pytest.mark.parametrize("cls, code, builtin", [
    (InvalidLevel, "INVALID_LEVEL", ValueError),
    (InvalidArgument, "INVALID_ARGUMENT", TypeError),
    (SinkUnavailable, "SINK_UNAVAILABLE", CCLogError),
])
def test_default_codes_and_bases(cls, code, builtin) -> None:
    err = cls("bad")
    assert err.code == code
    assert isinstance(err, CCLogError)
    assert isinstance(err, builtin)
    assert str(err) == "bad"
    assert err.details == {}


def test_custom_code_and_details() -> None:
    err = CCLogError("boom", code="CUSTOM", details={"k": 1})
    assert err.code == "CUSTOM"
    assert err.details == {"k": 1}
    assert repr(err) == "CCLogError(message='boom', code='CUSTOM')"
