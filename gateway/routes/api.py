"""
Forwarding routes for /api traffic
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from gateway.config import Settings
from gateway.proxy import (
    InboundRequest,
    ProxyResponse,
    build_outbound_request,
    build_timeout,
)
from gateway.utils.backend_client import BackendClient

router = APIRouter()

FORWARDED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def get_backend_client(request: Request) -> BackendClient:
    """Dependency to get the backend client"""
    return request.app.state.backend


def get_gateway_settings(request: Request) -> Settings:
    """Dependency to get the gateway settings"""
    return request.app.state.settings


def raw_request_path(request: Request) -> str:
    """Path as sent by the client, percent-escapes intact"""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.decode("latin-1").split("?", 1)[0]
    return request.url.path


async def to_inbound_request(request: Request) -> InboundRequest:
    return InboundRequest(
        method=request.method,
        path=raw_request_path(request),
        query=request.url.query,
        headers=[
            (name.decode("latin-1"), value.decode("latin-1"))
            for name, value in request.headers.raw
        ],
        body=await request.body(),
        client_host=request.client.host if request.client else None,
        scheme=request.url.scheme,
    )


def to_response(proxied: ProxyResponse) -> Response:
    response = Response(content=proxied.body, status_code=proxied.status_code)
    # A relayed Content-Length (HEAD) replaces the one computed from the body
    if any(name.lower() == "content-length" for name, _ in proxied.headers):
        del response.headers["content-length"]
    for name, value in proxied.headers:
        response.headers.append(name, value)
    return response


@router.api_route("/api", methods=FORWARDED_METHODS, include_in_schema=False)
@router.api_route("/api/{path:path}", methods=FORWARDED_METHODS, include_in_schema=False)
async def forward(
    request: Request,
    backend: BackendClient = Depends(get_backend_client),
    settings: Settings = Depends(get_gateway_settings),
):
    """Forward the request to the backend with the /api prefix stripped"""
    inbound = await to_inbound_request(request)
    outbound = build_outbound_request(
        inbound,
        backend.base_url,
        build_timeout(settings.backend_timeout, settings.backend_connect_timeout),
        deadline=settings.backend_timeout,
    )
    proxied = await backend.send(outbound)
    return to_response(proxied)
