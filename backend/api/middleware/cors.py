"""
CORS middleware that leaves selected paths alone.

The checkout endpoint writes its own CORS headers (and must answer preflight
from any origin with 200), so the app-wide Starlette CORSMiddleware skips it.
"""

from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send


class ScopedCORSMiddleware(CORSMiddleware):
    def __init__(self, app: ASGIApp, exclude_paths: tuple[str, ...] = (), **kwargs) -> None:
        super().__init__(app, **kwargs)
        self.exclude_paths = exclude_paths

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope.get("path", "").rstrip("/") in self.exclude_paths:
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)
