# Make `import gateway` resolve to this checkout when running pytest from the
# repository root without an editable install.
import os
import sys

import pytest
from fastapi.testclient import TestClient

SERVICE_ROOT = os.path.dirname(__file__)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)


@pytest.fixture
def nextcloud_headers():
    """A complete, allowed set of gateway request headers."""
    return {
        "Origin": "http://localhost:5173",
        "X-Nextcloud-Server": "example.com",
        "X-Nextcloud-User": "alice",
        "X-Nextcloud-Pass": "secret",
        "X-Nextcloud-Path": "docs/file.txt",
    }


@pytest.fixture(scope="session")
def webdav_client():
    from gateway.server import webdav_app

    with TestClient(webdav_app) as client:
        yield client


@pytest.fixture(scope="session")
def proxy_client():
    from gateway.server import proxy_app

    with TestClient(proxy_app) as client:
        yield client
