"""CORS header resolution for the WebDAV gateway."""

from typing import Dict, Optional

from gateway import vars as config

ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
MAX_AGE = "Access-Control-Max-Age"


def is_allowed_origin(origin: Optional[str]) -> bool:
    """
    True when ``origin`` is non-empty and matches an allowlist entry.

    Matching is a plain string prefix test by default, so
    ``http://localhost.evil.com`` is accepted for ``http://localhost``.
    Set ``CORS_ORIGIN_MATCH=exact`` to require an exact match instead.
    """
    if not origin:
        return False
    if config.CORS_ORIGIN_MATCH == "exact":
        return origin in config.ALLOWED_ORIGINS
    return any(origin.startswith(allowed) for allowed in config.ALLOWED_ORIGINS)


def get_cors_headers(origin: Optional[str]) -> Dict[str, str]:
    """Build the CORS headers for a request coming from ``origin``."""
    headers: Dict[str, str] = {}
    if is_allowed_origin(origin):
        headers[ALLOW_ORIGIN] = origin
    headers[ALLOW_METHODS] = config.ALLOWED_METHODS
    headers[ALLOW_HEADERS] = config.ALLOWED_HEADERS
    headers[MAX_AGE] = config.CORS_MAX_AGE
    return headers


def origin_is_allowed(cors_headers: Dict[str, str]) -> bool:
    return ALLOW_ORIGIN in cors_headers
