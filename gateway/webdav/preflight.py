from typing import Dict, Mapping

from fastapi.responses import Response

from gateway import vars as config

PREFLIGHT_HEADERS = (
    "origin",
    "access-control-request-method",
    "access-control-request-headers",
)


def is_preflight(headers: Mapping[str, str]) -> bool:
    return all(headers.get(name) for name in PREFLIGHT_HEADERS)


def handle_options(headers: Mapping[str, str], cors_headers: Dict[str, str]) -> Response:
    """
    Answer an OPTIONS request. A full CORS preflight gets 204 with the CORS
    headers; any other OPTIONS request only learns the allowed methods.
    """
    if is_preflight(headers):
        return Response(status_code=204, headers=cors_headers)
    return Response(headers={"Allow": config.ALLOWED_METHODS})
