"""ASGI middleware for HTML form clients.

Browsers can only submit GET and POST forms, so edit and delete forms post
to ``...?_method=PUT`` or ``...?_method=DELETE`` and this middleware
rewrites the request method before routing.
"""

from __future__ import annotations

from urllib.parse import parse_qs

from starlette.types import ASGIApp, Receive, Scope, Send

OVERRIDABLE_METHODS = frozenset({"PUT", "PATCH", "DELETE"})


class MethodOverrideMiddleware:
    """Treat ``POST ?_method=VERB`` as a ``VERB`` request.

    Only POST requests are rewritten, and only to PUT, PATCH or DELETE.
    """

    def __init__(self, app: ASGIApp, param: str = "_method") -> None:
        self.app = app
        self.param = param

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "POST":
            query = parse_qs(scope.get("query_string", b"").decode("latin-1"))
            override = query.get(self.param, [""])[0].upper()
            if override in OVERRIDABLE_METHODS:
                scope = dict(scope, method=override)
        await self.app(scope, receive, send)
