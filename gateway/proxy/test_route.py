from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi import Request
from httpx import AsyncClient, ConnectError
from httpx import Response as HttpxResponse

from gateway.errors import ErrorKind, GatewayError
from gateway.proxy.route import PROXY_PREFIX, fetch_text, get_target_url


@pytest.fixture
def mock_request():
    """Create a mock FastAPI Request object."""
    request = Mock(spec=Request)
    request.method = "GET"
    request.scope = {}
    request.url.path = f"{PROXY_PREFIX}https://example.com/data"
    request.url.query = ""
    return request


class TestGetTargetUrl:
    def test_plain_url(self, mock_request):
        assert get_target_url(mock_request) == "https://example.com/data"

    def test_query_preserved(self, mock_request):
        mock_request.url.query = "symbol=ACME&range=1d"

        assert get_target_url(mock_request) == "https://example.com/data?symbol=ACME&range=1d"

    def test_raw_path_keeps_escapes(self, mock_request):
        mock_request.scope = {"raw_path": b"/proxy/https://example.com/a%2Fb%20c"}

        assert get_target_url(mock_request) == "https://example.com/a%2Fb%20c"

    def test_raw_path_with_query_not_duplicated(self, mock_request):
        mock_request.scope = {"raw_path": b"/proxy/https://example.com/q?x=1"}
        mock_request.url.query = "x=1"

        assert get_target_url(mock_request) == "https://example.com/q?x=1"

    def test_no_validation(self, mock_request):
        mock_request.url.path = f"{PROXY_PREFIX}http://169.254.169.254/latest"

        assert get_target_url(mock_request) == "http://169.254.169.254/latest"


class TestFetchText:
    @pytest.mark.asyncio
    async def test_returns_text_regardless_of_status(self):
        with patch.object(AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = HttpxResponse(503, text="maintenance")

            result = await fetch_text("https://example.com/data")

        assert result == "maintenance"
        mock_get.assert_awaited_once_with("https://example.com/data")

    @pytest.mark.asyncio
    async def test_connection_error_becomes_fetch_failed(self):
        with patch.object(AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.side_effect = ConnectError("Connection refused")

            with pytest.raises(GatewayError) as exc_info:
                await fetch_text("https://example.com/data")

        assert exc_info.value.kind is ErrorKind.FETCH_FAILED
        assert exc_info.value.details == "Connection refused"


class TestProxyApp:
    def test_root(self, proxy_client):
        r = proxy_client.get("/")

        assert r.status_code == 200
        assert r.json() == {"message": "Proxy running!"}

    def test_proxies_get_and_keeps_query(self, proxy_client):
        with patch.object(AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = HttpxResponse(200, text='{"price": 12.5}')

            r = proxy_client.get("/proxy/https://example.com/data?symbol=ACME")

        assert r.status_code == 200
        assert r.text == '{"price": 12.5}'
        mock_get.assert_awaited_once_with("https://example.com/data?symbol=ACME")

    def test_upstream_error_status_becomes_200(self, proxy_client):
        with patch.object(AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = HttpxResponse(404, text="Not Found")

            r = proxy_client.get("/proxy/https://example.com/missing")

        assert r.status_code == 200
        assert r.text == "Not Found"

    def test_method_and_body_ignored(self, proxy_client):
        with patch.object(AsyncClient, "get", new_callable=AsyncMock) as mock_get, \
                patch.object(AsyncClient, "request", new_callable=AsyncMock) as mock_any:
            mock_get.return_value = HttpxResponse(200, text="ok")

            r = proxy_client.post("/proxy/https://example.com/submit", content=b"ignored")

        assert r.status_code == 200
        mock_get.assert_awaited_once_with("https://example.com/submit")
        mock_any.assert_not_called()

    @pytest.mark.parametrize("method", ["PROPFIND", "MKCOL", "REPORT"])
    def test_webdav_verbs_become_get(self, proxy_client, method):
        with patch.object(AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = HttpxResponse(200, text="ok")

            r = proxy_client.request(method, "/proxy/https://example.com/x")

        assert r.status_code == 200
        assert r.text == "ok"
        mock_get.assert_awaited_once_with("https://example.com/x")

    def test_fetch_failure_is_500_with_message(self, proxy_client):
        with patch.object(AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.side_effect = ConnectError("getaddrinfo failed")

            r = proxy_client.get("/proxy/https://unreachable.invalid/")

        assert r.status_code == 500
        assert r.text == "Error: getaddrinfo failed"

    def test_malformed_url_is_500(self, proxy_client):
        r = proxy_client.get("/proxy/not-a-url")

        assert r.status_code == 500
        assert r.text.startswith("Error: ")

    def test_metrics_exposed(self, proxy_client):
        proxy_client.get("/")
        r = proxy_client.get("/metrics")

        assert r.status_code == 200
        assert "http_requests_total" in r.text
