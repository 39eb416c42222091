"""
WebDAV gateway: a catch-all route that authenticates against a Nextcloud
server on behalf of a browser client.

Routing and credentials come from ``X-Nextcloud-*`` headers rather than the
request path. The outbound request carries Basic auth instead, and the
upstream response is relayed as a stream with CORS headers overlaid.
"""

import logging
from typing import Dict, Tuple

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import Response, StreamingResponse
from opentelemetry import trace
from starlette.background import BackgroundTask

from gateway import vars as config
from gateway.errors import ErrorKind, GatewayError, origin_rejected, upstream_unreachable
from gateway.headers import has_request_body, relayable_response_headers
from gateway.webdav.cors import get_cors_headers, origin_is_allowed
from gateway.webdav.credentials import NextcloudCredentials, build_upstream_headers
from gateway.webdav.preflight import handle_options

router = APIRouter()
tracer = trace.get_tracer(__name__)
logger = logging.getLogger("uvicorn.error")


async def open_upstream(
    request: Request, credentials: NextcloudCredentials
) -> Tuple[httpx.AsyncClient, httpx.Response]:
    """
    Send the rewritten request to Nextcloud and return the client together
    with the still-open streamed response. The caller owns closing both.
    """
    target_url = credentials.webdav_url()
    headers = build_upstream_headers(request.method, request.headers, credentials)
    content = request.stream() if has_request_body(request.headers) else None

    client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.UPSTREAM_TIMEOUT),
        follow_redirects=False,
    )
    try:
        upstream_request = client.build_request(
            request.method,
            target_url,
            headers=headers.raw,
            content=content,
        )
        response = await client.send(upstream_request, stream=True)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        await client.aclose()
        raise upstream_unreachable(e) from e
    return client, response


async def _close_upstream(response: httpx.Response, client: httpx.AsyncClient) -> None:
    await response.aclose()
    await client.aclose()


def relay_response(
    upstream: httpx.Response, client: httpx.AsyncClient, cors_headers: Dict[str, str]
) -> StreamingResponse:
    """Relay status, headers and the raw body; CORS headers win over upstream ones."""
    response = StreamingResponse(
        upstream.aiter_raw(),
        status_code=upstream.status_code,
        background=BackgroundTask(_close_upstream, upstream, client),
    )
    response.raw_headers.extend(relayable_response_headers(upstream.headers.raw))
    for name, value in cors_headers.items():
        response.headers[name] = value
    return response


async def forward_to_nextcloud(request: Request) -> Response:
    origin = request.headers.get("origin")
    cors_headers = get_cors_headers(origin)

    if request.method == "OPTIONS":
        return handle_options(request.headers, cors_headers)

    with tracer.start_as_current_span("webdav_request") as span:
        span.set_attribute("webdav.method", request.method)
        try:
            if not origin_is_allowed(cors_headers):
                raise origin_rejected(origin)

            credentials = NextcloudCredentials.from_headers(request.headers)
            span.set_attribute("webdav.server", credentials.server)
            logger.debug(f"[WebDAV] {request.method} -> {credentials.server}")

            client, upstream = await open_upstream(request, credentials)
            span.set_attribute("webdav.status_code", upstream.status_code)
            return relay_response(upstream, client, cors_headers)

        except GatewayError as e:
            span.set_attribute("webdav.error", e.kind.value)
            if e.kind is ErrorKind.ORIGIN_REJECTED:
                logger.warning(f"[WebDAV] {e.message}")
                return e.to_response()
            if e.kind is ErrorKind.UPSTREAM_UNREACHABLE:
                logger.warning(f"[WebDAV] {e.message} {e.details}")
            return e.to_response(cors_headers)


@router.api_route(
    "/{path:path}", methods=list(config.ROUTABLE_METHODS), include_in_schema=False
)
async def webdav_gateway(request: Request, path: str):
    """Catch-all endpoint; the path is ignored, routing comes from headers."""
    return await forward_to_nextcloud(request)
