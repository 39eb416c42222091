"""
Typed error values for both gateway variants.

Every failure a request can hit is raised as a ``GatewayError`` carrying one
of the ``ErrorKind`` members, and converted to an HTTP response at the route
boundary with ``GatewayError.to_response``.
"""

from enum import Enum
from typing import Mapping, Optional

from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel


class ErrorKind(str, Enum):
    ORIGIN_REJECTED = "origin_rejected"
    MISSING_HEADERS = "missing_headers"
    UPSTREAM_UNREACHABLE = "upstream_unreachable"
    FETCH_FAILED = "fetch_failed"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.ORIGIN_REJECTED: 403,
    ErrorKind.MISSING_HEADERS: 400,
    ErrorKind.UPSTREAM_UNREACHABLE: 502,
    ErrorKind.FETCH_FAILED: 500,
}


class ErrorBody(BaseModel):
    error: str
    details: Optional[str] = None


class GatewayError(Exception):
    """A request failure with a known kind and an optional underlying cause."""

    def __init__(
        self, kind: ErrorKind, message: str, details: Optional[str] = None
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def to_response(self, headers: Optional[Mapping[str, str]] = None) -> Response:
        """
        Render the error. The generic proxy's fetch failures are plain text
        (``Error: <cause>``); everything else is a JSON ``ErrorBody``.
        """
        if self.kind is ErrorKind.FETCH_FAILED:
            return PlainTextResponse(
                f"Error: {self.details if self.details is not None else self.message}",
                status_code=self.status_code,
                headers=dict(headers) if headers else None,
            )

        body = ErrorBody(error=self.message, details=self.details)
        return JSONResponse(
            body.model_dump(exclude_none=True),
            status_code=self.status_code,
            headers=dict(headers) if headers else None,
        )


def origin_rejected(origin: Optional[str]) -> GatewayError:
    shown = origin if origin is not None else "null"
    return GatewayError(ErrorKind.ORIGIN_REJECTED, f"Origin '{shown}' is not allowed.")


def missing_headers() -> GatewayError:
    return GatewayError(
        ErrorKind.MISSING_HEADERS,
        "Missing required Nextcloud headers (Server, User, Pass, or Path).",
    )


def upstream_unreachable(cause: Exception) -> GatewayError:
    return GatewayError(
        ErrorKind.UPSTREAM_UNREACHABLE,
        "Failed to connect to the Nextcloud server.",
        details=str(cause),
    )


def fetch_failed(cause: Exception) -> GatewayError:
    return GatewayError(ErrorKind.FETCH_FAILED, "Proxy fetch failed", details=str(cause))
