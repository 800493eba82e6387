"""Per-request middleware: request IDs, response hardening headers, CORS."""

import uuid
from contextvars import ContextVar

from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

# Current request's ID, for log lines written while handling it
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID and harden every response.

    The ID comes from ``X-Request-ID`` when the caller sends one, otherwise a
    fresh UUID4. It is available through ``request_id_var`` while the request
    is handled and is echoed back on the response.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        response.headers.update(_SECURITY_HEADERS)
        return response


class PreflightCORSMiddleware(CORSMiddleware):
    """CORS whose pre-flight always answers ``200 ok``.

    Starlette refuses a pre-flight that asks for an undeclared header. Here the
    declared header list is returned regardless of what was requested, and the
    browser decides whether the real request may proceed.
    """

    def preflight_response(self, request_headers: Headers) -> Response:
        headers = dict(self.preflight_headers)
        origin = request_headers["origin"]
        if self.preflight_explicit_allow_origin and self.is_allowed_origin(origin):
            headers["Access-Control-Allow-Origin"] = origin
        return PlainTextResponse("ok", status_code=200, headers=headers)
