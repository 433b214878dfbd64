"""
Request forwarding rules

Everything here is free of I/O: route resolution, the translation of an
inbound request into the request sent to the backend, response header
filtering and the mapping of transport failures to gateway responses.
"""

import json
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import httpx

API_PREFIX = "/api"

Headers = List[Tuple[str, str]]

# RFC 9110 section 7.6.1, plus the legacy "trailers" spelling
HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "proxy-connection",
    "te",
    "trailer",
    "trailers",
    "transfer-encoding",
    "upgrade",
})

# Recomputed by the HTTP client for the outbound request
REQUEST_HEADERS_TO_DROP = frozenset({"host", "content-length"})

# httpx hands back a decoded body, so the original framing no longer applies
RESPONSE_HEADERS_TO_DROP = frozenset({"content-length", "content-encoding"})


@dataclass(frozen=True)
class InboundRequest:
    """Request as received by the gateway"""
    method: str
    path: str
    query: str = ""
    headers: Headers = field(default_factory=list)
    body: bytes = b""
    client_host: Optional[str] = None
    scheme: str = "http"


@dataclass(frozen=True)
class OutboundRequest:
    """Request to be sent to the backend"""
    method: str
    url: str
    headers: Headers
    body: bytes
    timeout: httpx.Timeout
    # Wall-clock limit for the whole exchange, in seconds
    deadline: Optional[float] = None


@dataclass(frozen=True)
class ProxyResponse:
    """Response to be returned to the client"""
    status_code: int
    headers: Headers
    body: bytes


def backend_path(path: str) -> Optional[str]:
    """
    Resolve the backend path for a gateway path.

    Works on the raw, still percent-encoded path so escapes such as %2F and
    %3F reach the backend unchanged.

    Returns None when the path is not under the /api prefix. The prefix is
    stripped, so /api/products maps to /products and /api maps to /.
    """
    if path == API_PREFIX:
        return "/"
    if path.startswith(API_PREFIX + "/"):
        return path[len(API_PREFIX):]
    return None


def _connection_tokens(headers: Headers) -> set:
    tokens = set()
    for name, value in headers:
        if name.lower() == "connection":
            tokens.update(t.strip().lower() for t in value.split(",") if t.strip())
    return tokens


def strip_hop_by_hop(headers: Headers, extra: frozenset = frozenset()) -> Headers:
    """Remove hop-by-hop headers, including any named in Connection"""
    dropped = HOP_BY_HOP_HEADERS | extra | _connection_tokens(headers)
    return [(name, value) for name, value in headers if name.lower() not in dropped]


def build_timeout(total: float, connect: float) -> httpx.Timeout:
    return httpx.Timeout(total, connect=min(connect, total))


def build_outbound_request(
    inbound: InboundRequest,
    backend_url: str,
    timeout: httpx.Timeout,
    deadline: Optional[float] = None,
) -> OutboundRequest:
    """
    Translate an inbound /api request into the request sent to the backend.

    Raises ValueError if the inbound path is not forwardable.
    """
    path = backend_path(inbound.path)
    if path is None:
        raise ValueError(f"Path is not forwarded: {inbound.path}")

    url = backend_url.rstrip("/") + path
    if inbound.query:
        url = f"{url}?{inbound.query}"

    headers = strip_hop_by_hop(inbound.headers, REQUEST_HEADERS_TO_DROP)

    original_host = next(
        (value for name, value in inbound.headers if name.lower() == "host"), None
    )
    prior_forwarded_for = [
        value for name, value in headers if name.lower() == "x-forwarded-for"
    ]
    headers = [
        (name, value) for name, value in headers
        if name.lower() not in ("x-forwarded-for", "x-forwarded-proto", "x-forwarded-host")
    ]
    if inbound.client_host:
        headers.append(
            ("x-forwarded-for", ", ".join(prior_forwarded_for + [inbound.client_host]))
        )
    elif prior_forwarded_for:
        headers.append(("x-forwarded-for", ", ".join(prior_forwarded_for)))
    headers.append(("x-forwarded-proto", inbound.scheme))
    if original_host:
        headers.append(("x-forwarded-host", original_host))

    return OutboundRequest(
        method=inbound.method.upper(),
        url=url,
        headers=headers,
        body=inbound.body,
        timeout=timeout,
        deadline=deadline,
    )


def relay_headers(headers: Headers, method: str = "GET") -> Headers:
    """
    Filter backend response headers down to the ones relayed to the client.

    A HEAD response has no body to decode, so its Content-Length and
    Content-Encoding describe the resource and are kept.
    """
    if method.upper() == "HEAD":
        return strip_hop_by_hop(headers)
    return strip_hop_by_hop(headers, RESPONSE_HEADERS_TO_DROP)


def _error_response(status_code: int, error: str, message: str) -> ProxyResponse:
    body = json.dumps({"error": error, "message": message}).encode("utf-8")
    return ProxyResponse(
        status_code=status_code,
        headers=[("content-type", "application/json")],
        body=body,
    )


def deadline_exceeded() -> ProxyResponse:
    """Response for a backend exchange that outlived its deadline"""
    return _error_response(503, "Service unavailable", "Backend did not respond in time")


def map_upstream_error(exc: httpx.RequestError) -> ProxyResponse:
    """
    Map a failed backend call to the response returned to the client.

    Refused connections and timeouts mean the backend is unavailable (503);
    any other transport failure is a bad gateway (502).
    """
    if isinstance(exc, httpx.TimeoutException):
        return deadline_exceeded()
    if isinstance(exc, httpx.ConnectError):
        return _error_response(503, "Service unavailable", "Backend is unreachable")
    return _error_response(502, "Bad gateway", "Invalid response from backend")
