import logging

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, Response
from opentelemetry import trace

from gateway import vars as config
from gateway.errors import GatewayError, fetch_failed

router = APIRouter()
tracer = trace.get_tracer(__name__)
logger = logging.getLogger("uvicorn.error")

PROXY_PREFIX = "/proxy/"


def get_target_url(request: Request) -> str:
    """
    Recover the literal target URL: everything after ``/proxy/`` plus the
    query string. The undecoded raw path is preferred so percent-escapes in
    the target survive.
    """
    raw_path = request.scope.get("raw_path")
    if raw_path:
        # some servers leave the query on raw_path
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = request.url.path
    if path.startswith(PROXY_PREFIX):
        path = path[len(PROXY_PREFIX):]

    query_string = str(request.url.query)
    if query_string:
        path = f"{path}?{query_string}"
    return path


async def fetch_text(target_url: str) -> str:
    """GET ``target_url`` and return its body as text, whatever the status."""
    with tracer.start_as_current_span("proxy_fetch") as span:
        span.set_attribute("proxy.target_url", target_url)
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(config.UPSTREAM_TIMEOUT),
                follow_redirects=True,
            ) as client:
                response = await client.get(target_url)
                span.set_attribute("proxy.status_code", response.status_code)
                return response.text
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            span.set_attribute("proxy.error", str(e))
            raise fetch_failed(e) from e


@router.get("/")
async def root():
    return {"message": "Proxy running!"}


@router.api_route(PROXY_PREFIX + "{target:path}", methods=list(config.ROUTABLE_METHODS))
async def proxy(request: Request, target: str) -> Response:
    """Fetch the URL embedded in the path; method and body are ignored."""
    target_url = get_target_url(request)
    logger.debug(f"[Proxy] {request.method} {request.url.path} -> GET {target_url}")
    try:
        text = await fetch_text(target_url)
    except GatewayError as e:
        logger.warning(f"[Proxy] Fetch failed for {target_url}: {e.details}")
        return e.to_response()
    return HTMLResponse(text)
