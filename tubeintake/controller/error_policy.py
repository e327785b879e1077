from __future__ import annotations


_ERROR_PATTERNS: tuple[tuple[str, bool, tuple[str, ...]], ...] = (
    (
        "rate_limit",
        True,
        ("429", "too many requests", "rate limit", "quota", "try again later"),
    ),
    (
        "network",
        True,
        (
            "timeout",
            "timed out",
            "did not settle",
            "connection reset",
            "connection aborted",
            "connection refused",
            "network",
            "dns",
            "temporarily unavailable",
            "service unavailable",
        ),
    ),
    (
        "not_found",
        False,
        ("404", "not found", "no record found", "does not exist"),
    ),
    (
        "authentication",
        False,
        ("401", "403", "sign in", "private", "members-only", "forbidden"),
    ),
    (
        "unsupported",
        False,
        ("unsupported", "unexpected response", "invalid"),
    ),
)

_FAILURE_HINTS: dict[str, str] = {
    "rate_limit": "The service is rate-limiting requests. Wait a bit or lower concurrency.",
    "network": "Network issue detected. Retry later or lower concurrency.",
    "not_found": "The channel, playlist or video no longer exists or the link is mistyped.",
    "authentication": "This item is private or needs a signed-in account.",
    "unsupported": "This entry could not be understood as a channel, playlist or video.",
}


def classify_resolution_error(message: str) -> tuple[str, bool]:
    text = str(message or "").strip().lower()
    if not text:
        return "unknown", False
    for category, retryable, tokens in _ERROR_PATTERNS:
        if any(token in text for token in tokens):
            return category, retryable
    return "unknown", False


def format_classified_error(message: str) -> str:
    raw = str(message or "").strip()
    category, _retryable = classify_resolution_error(raw)
    short = raw.replace("\r", " ").replace("\n", " ")
    if len(short) > 280:
        short = f"{short[:279]}..."
    return f"{category.upper()}: {short}" if short else category.upper()


def failure_hint(category: str) -> str:
    normalized = str(category or "").strip().lower()
    return _FAILURE_HINTS.get(normalized, "Unknown failure. Retry and check the link or ID.")
