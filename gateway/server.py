from fastapi import FastAPI
from prometheus_client import Info
from prometheus_fastapi_instrumentator import Instrumentator

from gateway.proxy.route import router as proxy_router
from gateway.telemetry import instrument_app
from gateway.vars import SERVICE_NAME
from gateway.webdav.route import router as webdav_router


def create_proxy_app() -> FastAPI:
    """Generic path proxy: ``/`` liveness, ``/proxy/<url>`` and ``/metrics``."""
    app = FastAPI(title=f"{SERVICE_NAME} proxy")
    Instrumentator().instrument(app).expose(app)
    instrument_app(app)
    app.include_router(proxy_router)
    return app


def create_webdav_app() -> FastAPI:
    """
    WebDAV gateway. Every path belongs to the catch-all route, so the docs,
    OpenAPI and metrics endpoints are not mounted.
    """
    app = FastAPI(
        title=f"{SERVICE_NAME} webdav",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    instrument_app(app)
    app.include_router(webdav_router)
    return app


proxy_app = create_proxy_app()
webdav_app = create_webdav_app()

app_info = Info("gateway_app_info", "Application Info")
app_info.info({"app_name": SERVICE_NAME})

APPS = {
    "proxy": proxy_app,
    "webdav": webdav_app,
}
