"""
Nextcloud credentials carried in custom request headers, and the outbound
request rewrite that turns them into a regular WebDAV call.
"""

import base64
from dataclasses import dataclass, field
from typing import Mapping, Optional

from starlette.datastructures import MutableHeaders

from gateway.errors import missing_headers
from gateway.headers import clone_request_headers

SERVER_HEADER = "x-nextcloud-server"
USER_HEADER = "x-nextcloud-user"
PASS_HEADER = "x-nextcloud-pass"
PATH_HEADER = "x-nextcloud-path"
DESTINATION_HEADER = "x-destination"

CREDENTIAL_HEADERS = (SERVER_HEADER, USER_HEADER, PASS_HEADER, PATH_HEADER)

WEBDAV_URL_TEMPLATE = "https://{server}/remote.php/dav/files/{user}/{path}"


@dataclass(frozen=True)
class NextcloudCredentials:
    server: str
    user: str
    password: str = field(repr=False)
    path: str
    destination: Optional[str] = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "NextcloudCredentials":
        """Read the four required headers; raises a MISSING_HEADERS error."""
        values = [headers.get(name) for name in CREDENTIAL_HEADERS]
        if not all(values):
            raise missing_headers()
        server, user, password, path = values
        return cls(
            server=server,
            user=user,
            password=password,
            path=path,
            destination=headers.get(DESTINATION_HEADER) or None,
        )

    def webdav_url(self, path: Optional[str] = None) -> str:
        return WEBDAV_URL_TEMPLATE.format(
            server=self.server,
            user=self.user,
            path=self.path if path is None else path,
        )

    @property
    def authorization(self) -> str:
        # header values arrive latin-1 decoded; encode back to the wire bytes
        token = base64.b64encode(f"{self.user}:{self.password}".encode("latin-1"))
        return f"Basic {token.decode('ascii')}"


def build_upstream_headers(
    method: str, headers: Mapping[str, str], credentials: NextcloudCredentials
) -> MutableHeaders:
    """
    Clone the incoming headers for the upstream call: inject Basic auth and
    strip the credential headers and Origin. For MOVE, X-Destination becomes
    a full Destination URL on the same server.
    """
    outbound = clone_request_headers(headers)
    outbound["authorization"] = credentials.authorization
    for name in CREDENTIAL_HEADERS:
        del outbound[name]
    del outbound["origin"]

    if method.upper() == "MOVE" and credentials.destination:
        outbound["destination"] = credentials.webdav_url(credentials.destination)
    del outbound[DESTINATION_HEADER]
    return outbound
