import os
from typing import Optional

SERVICE_NAME = os.getenv("SERVICE_NAME", "nextcloud-dav-gateway")
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "10000"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "info").lower()

OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
OTLP_HEADERS = os.getenv("OTLP_HEADERS", "")

DEFAULT_ALLOWED_ORIGINS = (
    "http://localhost",
    "http://127.0.0.1",
    "https://haha3403.github.io",
)


def _parse_origins(raw: str) -> tuple:
    origins = tuple(o.strip() for o in raw.split(",") if o.strip())
    return origins or DEFAULT_ALLOWED_ORIGINS


def _parse_timeout(raw: str) -> Optional[float]:
    if not raw:
        return None
    return float(raw)


ALLOWED_ORIGINS = _parse_origins(os.getenv("ALLOWED_ORIGINS", ""))
# "prefix" keeps http://localhost.evil.com matching http://localhost
CORS_ORIGIN_MATCH = os.getenv("CORS_ORIGIN_MATCH", "prefix").lower()

ALLOWED_METHODS = "GET, POST, PUT, DELETE, OPTIONS, PROPFIND, MOVE, MKCOL"
ALLOWED_HEADERS = (
    "Content-Type, Authorization, X-Nextcloud-Server, X-Nextcloud-User, "
    "X-Nextcloud-Pass, X-Nextcloud-Path, X-Destination"
)
CORS_MAX_AGE = "86400"

# Verbs both apps route: plain HTTP plus everything Nextcloud speaks over WebDAV
ROUTABLE_METHODS = (
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "OPTIONS",
    "PROPFIND",
    "PROPPATCH",
    "MKCOL",
    "COPY",
    "MOVE",
    "LOCK",
    "UNLOCK",
    "REPORT",
    "SEARCH",
)

# None means the upstream call may wait indefinitely
UPSTREAM_TIMEOUT = _parse_timeout(os.getenv("UPSTREAM_TIMEOUT", ""))
