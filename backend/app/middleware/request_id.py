"""
Middleware that injects a request ID into every incoming request.

An incoming ``X-Request-ID`` header is reused so traces can span services;
otherwise a short random id is generated. The id is bound to the logging
context and echoed back in the response headers.
"""

import uuid

from fastapi import Request

from devconnector.logging import bind_context, clear_context


class RequestIDMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive=receive)
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        scope.setdefault("state", {})["request_id"] = request_id

        # Bind request ID to logging context
        clear_context()
        bind_context(request_id=request_id)

        async def send_wrapper(response):
            if response["type"] == "http.response.start":
                headers = response.setdefault("headers", [])
                headers.append((b"x-request-id", request_id.encode()))
            await send(response)

        await self.app(scope, receive, send_wrapper)
