import pytest
from starlette.datastructures import Headers

from gateway.webdav.cors import get_cors_headers
from gateway.webdav.preflight import handle_options, is_preflight

FULL_PREFLIGHT = {
    "Origin": "http://localhost:5173",
    "Access-Control-Request-Method": "PROPFIND",
    "Access-Control-Request-Headers": "x-nextcloud-server, x-nextcloud-user",
}


def test_full_preflight_returns_204_with_cors():
    headers = Headers(FULL_PREFLIGHT)

    response = handle_options(headers, get_cors_headers(headers.get("origin")))

    assert response.status_code == 204
    assert response.body == b""
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
    assert response.headers["access-control-max-age"] == "86400"


@pytest.mark.parametrize("missing", list(FULL_PREFLIGHT))
def test_partial_preflight_only_gets_allow(missing):
    sent = {k: v for k, v in FULL_PREFLIGHT.items() if k != missing}
    headers = Headers(sent)

    response = handle_options(headers, get_cors_headers(headers.get("origin")))

    assert response.status_code == 200
    assert "PROPFIND" in response.headers["allow"]
    assert "access-control-allow-origin" not in response.headers
    assert "access-control-allow-methods" not in response.headers


def test_empty_header_value_is_not_a_preflight():
    headers = Headers({**FULL_PREFLIGHT, "Access-Control-Request-Headers": ""})

    assert is_preflight(headers) is False
