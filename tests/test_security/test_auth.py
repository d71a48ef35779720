"""Tests for demo bearer-token parsing."""
from __future__ import annotations

import pytest

from app.security.auth import BearerTokenError, parse_bearer_user_id


def test_parses_integer_user_id():
    assert parse_bearer_user_id("Bearer 42", "Bearer") == 42
    assert parse_bearer_user_id("Bearer  7 ", "Bearer") == 7


@pytest.mark.parametrize("raw", ["Token 1", "bearer 1", "Bearer", "Bearer ", "Bearer bob", "Bearer -3"])
def test_rejects_malformed_headers(raw):
    with pytest.raises(BearerTokenError):
        parse_bearer_user_id(raw, "Bearer")


def test_custom_prefix():
    assert parse_bearer_user_id("Demo 5", "Demo") == 5
