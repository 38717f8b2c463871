"""Client context middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from shortlinks.common.headers import client_context_from_headers, extract_forwarded_headers


class ClientContextMiddleware(BaseHTTPMiddleware):
    """Capture referrer, user agent, client location and X-Forwarded-* headers per request."""
    
    async def dispatch(self, request: Request, call_next: Callable):
        """Store request metadata in request state for the routes."""
        headers = dict(request.headers)
        
        forwarded = extract_forwarded_headers(headers)
        request.state.forwarded_proto = forwarded["forwarded_proto"]
        request.state.forwarded_host = forwarded["forwarded_host"]
        request.state.forwarded_for = forwarded["forwarded_for"]
        request.state.client_context = client_context_from_headers(headers)
        
        response = await call_next(request)
        return response
