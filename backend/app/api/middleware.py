"""Request Pipeline — ordered middleware stages run ahead of every route.

Invariants:
    - Stage order is fixed by build_middleware(): authentication initializer,
      URL-encoded parser, JSON parser, CORS
    - Any stage may short-circuit with the standard error envelope
    - request.state.parsed_body is always present (defaults to {})
    - A parsed body is replayed unchanged to downstream apps (GraphQL reads it raw)
    - Only the stage whose media type matches Content-Type touches the body

Design Decisions:
    - Pure ASGI stages over BaseHTTPMiddleware: body replay without relying on
      Starlette's request caching, no task-group overhead
    - Stages render their own errors: they sit outside FastAPI's exception handlers
"""

import logging
from typing import Callable

from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.middleware import Middleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.config import Settings
from app.core.body_parsing import (
    charset_of, media_type_of, parse_json, parse_urlencoded,
)
from app.core.domain_types import BodyFormat
from app.core.errors import ChirpError, ErrorContext, PayloadTooLargeError
from app.core.security import extract_bearer_token

logger = logging.getLogger(__name__)

BodyDecoder = Callable[[bytes, str], object]


def _request_state(scope: Scope) -> dict:
    return scope.setdefault("state", {})


class AuthenticationInitializer:
    """Per-request auth setup: clears the user slot and captures the bearer token.

    Verification happens later, only on routes that depend on get_current_user.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            state = _request_state(scope)
            state["user"] = None
            state["bearer_token"] = extract_bearer_token(
                Headers(scope=scope).get("authorization"),
            )
        await self.app(scope, receive, send)


class BodyParser:
    """Parses the request body when Content-Type matches this stage's format."""

    def __init__(
        self,
        app: ASGIApp,
        body_format: BodyFormat,
        decoder: BodyDecoder,
        limit: int = 100 * 1024,
    ) -> None:
        self.app = app
        self.body_format = body_format
        self.decoder = decoder
        self.limit = limit

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        state = _request_state(scope)
        state.setdefault("parsed_body", {})
        headers = Headers(scope=scope)
        content_type = headers.get("content-type")
        if (
            state.get("body_parsed")
            or media_type_of(content_type) != self.body_format.value
        ):
            await self.app(scope, receive, send)
            return

        try:
            body = await self._read_body(headers, receive)
            state["parsed_body"] = self.decoder(body, charset_of(content_type))
        except ChirpError as e:
            await self._reject(e, scope, receive, send)
            return

        state["body_parsed"] = True
        await self.app(scope, _replay(body, receive), send)

    async def _read_body(self, headers: Headers, receive: Receive) -> bytes:
        declared = headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > self.limit:
            raise PayloadTooLargeError(
                f"Request body exceeds {self.limit} bytes", self.limit,
            )
        chunks: list[bytes] = []
        size = 0
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                break
            chunk = message.get("body", b"")
            size += len(chunk)
            if size > self.limit:
                raise PayloadTooLargeError(
                    f"Request body exceeds {self.limit} bytes", self.limit,
                )
            chunks.append(chunk)
            if not message.get("more_body", False):
                break
        return b"".join(chunks)

    async def _reject(
        self, exc: ChirpError, scope: Scope, receive: Receive, send: Send,
    ) -> None:
        path = scope.get("path")
        exc.context = ErrorContext(path=path)
        logger.warning(
            f"Rejected {self.body_format.value} body: {exc.message}",
            extra={"error_code": exc.code, "path": path, "method": scope.get("method")},
        )
        response = JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )
        await response(scope, receive, send)


def _replay(body: bytes, receive: Receive) -> Receive:
    """Receive callable that yields the already-read body once, then defers."""
    delivered = False

    async def replay() -> Message:
        nonlocal delivered
        if not delivered:
            delivered = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


def build_middleware(settings: Settings) -> list[Middleware]:
    """Pipeline stages in execution order (first entry sees the request first)."""

    def urlencoded(body: bytes, charset: str) -> dict:
        return parse_urlencoded(body, charset, settings.max_form_fields)

    return [
        Middleware(AuthenticationInitializer),
        Middleware(
            BodyParser, body_format=BodyFormat.URLENCODED,
            decoder=urlencoded, limit=settings.max_body_bytes,
        ),
        Middleware(
            BodyParser, body_format=BodyFormat.JSON,
            decoder=parse_json, limit=settings.max_body_bytes,
        ),
        Middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        ),
    ]
