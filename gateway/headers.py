from typing import Iterable, List, Mapping, Tuple

from starlette.datastructures import Headers, MutableHeaders

# Hop-by-hop headers that should NOT be forwarded (RFC 2616)
HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
}

RawHeaders = List[Tuple[bytes, bytes]]


def _is_hop_by_hop(name: bytes) -> bool:
    return name.decode("latin-1").lower() in HOP_BY_HOP_HEADERS


def clone_request_headers(headers: Mapping[str, str]) -> MutableHeaders:
    """
    Copy incoming request headers into a case-insensitive mutable mapping,
    dropping hop-by-hop headers and Host (the client sets Host for the new
    target). Values stay as the latin-1 wire bytes they arrived as.
    """
    if isinstance(headers, Headers):
        raw = headers.raw
    else:
        raw = [
            (name.encode("latin-1"), value.encode("latin-1"))
            for name, value in headers.items()
        ]
    kept = [
        (name.lower(), value)
        for name, value in raw
        if not _is_hop_by_hop(name) and name.lower() != b"host"
    ]
    return MutableHeaders(raw=kept)


def relayable_response_headers(raw: Iterable[Tuple[bytes, bytes]]) -> RawHeaders:
    """Upstream response headers minus hop-by-hop ones, repeats preserved."""
    return [(name.lower(), value) for name, value in raw if not _is_hop_by_hop(name)]


def has_request_body(headers: Mapping[str, str]) -> bool:
    return "content-length" in headers or "transfer-encoding" in headers
