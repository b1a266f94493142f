"""
Workspace Host Middleware

Normalizes the inbound host (X-Forwarded-Host from the edge proxy, else Host)
and exposes it as request.state.workspace_host and in the logging context.
Resolution to a workspace happens in the handlers that need it; nothing is
cached here so a freshly created workspace is visible on the next request.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from blueprintos.logging_config import workspace_host_ctx
from blueprintos.services.workspace_resolver import normalize_host


def _inbound_host(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-host", "")
    if forwarded:
        # proxies may append; the first entry is the client-facing host
        return forwarded.split(",")[0]
    return request.headers.get("host", "")


def request_host(request: Request) -> str:
    host = getattr(request.state, "workspace_host", None)
    if host is None:
        host = normalize_host(_inbound_host(request))
    return host


class WorkspaceHostMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        host = normalize_host(_inbound_host(request))
        request.state.workspace_host = host
        workspace_host_ctx.set(host or "-")
        return await call_next(request)
