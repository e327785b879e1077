from __future__ import annotations

import pytest

from tubeintake.controller.error_policy import classify_resolution_error, failure_hint, format_classified_error


@pytest.mark.parametrize(
    ("message", "category", "retryable"),
    [
        ("HTTP 429: too many requests", "rate_limit", True),
        ("Timed out resolving https://youtube.com/@a", "network", True),
        ("Resolution did not settle within 5.0s", "network", True),
        ("HTTP 404: not found (https://youtube.com/@a)", "not_found", False),
        ("No record found", "not_found", False),
        ("HTTP 403: private or sign in required", "authentication", False),
        ("Unsupported token: junk", "unsupported", False),
        ("something odd", "unknown", False),
        ("", "unknown", False),
    ],
)
def test_classify_resolution_error(message, category, retryable):
    assert classify_resolution_error(message) == (category, retryable)


def test_format_classified_error_prefixes_category():
    assert format_classified_error("HTTP 429: too many requests") == "RATE_LIMIT: HTTP 429: too many requests"
    assert format_classified_error("") == "UNKNOWN"


def test_failure_hint_has_fallback():
    assert "rate-limiting" in failure_hint("RATE_LIMIT")
    assert failure_hint("whatever").startswith("Unknown failure")
