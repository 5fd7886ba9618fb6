from __future__ import annotations

import logging
import typing as t

from ccpolicy._config import PolicyOptions
from ccpolicy._exceptions import HTTPResponseError
from ccpolicy._middleware import HeaderPass, PolicyFactory, add_cache_headers
from ccpolicy._models import Headers, Request, Response
from ccpolicy._policy import CachePolicy

# Configure logger for this module
logger = logging.getLogger(__name__)

__all__ = ("ASGICacheControlMiddleware",)


class _ASGIScope(t.TypedDict, total=False):
    """ASGI HTTP scope type."""

    type: str
    asgi: dict[str, str]
    http_version: str
    method: str
    scheme: str
    path: str
    query_string: bytes
    root_path: str
    headers: list[tuple[bytes, bytes]]
    server: tuple[str, int | None] | None
    client: tuple[str, int] | None
    state: dict[str, t.Any]
    extensions: dict[str, t.Any]


_Scope = _ASGIScope
_Receive = t.Callable[[], t.Awaitable[dict[str, t.Any]]]
_Send = t.Callable[[dict[str, t.Any]], t.Awaitable[None]]
_ASGIApp = t.Callable[[_Scope, _Receive, _Send], t.Awaitable[None]]


class ASGICacheControlMiddleware:
    """
    ASGI middleware that resolves the ``Cache-Control`` header of every HTTP response.

    Each request gets its own ``CachePolicy``, stored in ``scope["state"]["cache_policy"]``
    (``request.state.cache_policy`` in Starlette and FastAPI). When the application
    starts its response, the supplementary header pass runs over the outgoing headers.
    An ``HTTPResponseError`` raised by the application before it started responding
    is turned into the response it carries.

    Args:
        app: The ASGI application to wrap.
        policy_factory: Builds the policy for each request. Defaults to ``CachePolicy(options)``.
        options: Policy options. Defaults to ``PolicyOptions()``.
        legacy_pass: The supplementary header pass. Defaults to ``add_cache_headers``.

    Example:
        ```python
        from ccpolicy.asgi import ASGICacheControlMiddleware

        app = ASGICacheControlMiddleware(app=my_asgi_app)
        ```
    """

    def __init__(
        self,
        app: _ASGIApp,
        policy_factory: PolicyFactory | None = None,
        options: PolicyOptions | None = None,
        legacy_pass: HeaderPass | None = None,
    ) -> None:
        self.app = app
        self.options = options or PolicyOptions()
        self._policy_factory = policy_factory or (lambda: CachePolicy(self.options))
        self._legacy_pass = legacy_pass or add_cache_headers

        logger.info(
            "Initialized ASGICacheControlMiddleware with public_cache_mode=%s, disable_http_cache=%s",
            self.options.public_cache_mode,
            self.options.disable_http_cache,
        )

    async def __call__(self, scope: _Scope, receive: _Receive, send: _Send) -> None:
        """
        Handle an ASGI request.

        Args:
            scope: The ASGI scope dictionary.
            receive: The ASGI receive callable.
            send: The ASGI send callable.
        """
        # Only handle HTTP requests
        if scope["type"] != "http":
            logger.debug("Skipping non-HTTP request: type=%s", scope["type"])
            await self.app(scope, receive, send)
            return

        policy = self._policy_factory()
        # copy, the server may share the state dict between requests
        scope = t.cast(_Scope, {**scope, "state": {**scope.get("state", {}), "cache_policy": policy}})
        request = self._asgi_to_internal_request(scope)
        request.cache_policy = policy

        logger.debug("Incoming HTTP request: method=%s url=%s", request.method, request.url)

        response_started = False

        async def inner_send(message: dict[str, t.Any]) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
                message = self._apply_policy(message, policy, request)
            await send(message)

        try:
            await self.app(scope, receive, inner_send)
        except HTTPResponseError as exc:
            if response_started:
                logger.error(
                    "Application aborted after the response started: url=%s status=%d",
                    request.url,
                    exc.response.status_code,
                    exc_info=True,
                )
                raise
            logger.debug("Recovered response from application: status=%d", exc.response.status_code)
            self._legacy_pass(exc.response, policy, self.options, request)
            await self._send_internal_response(exc.response, send)

        logger.debug(
            "Resolved cache policy: method=%s url=%s state=%s",
            request.method,
            request.url,
            policy.state.value,
        )

    def _apply_policy(self, message: dict[str, t.Any], policy: CachePolicy, request: Request) -> dict[str, t.Any]:
        headers = Headers()
        for key, value in message.get("headers", []):
            headers.add(key.decode("latin1"), value.decode("latin1"))

        response = Response(status_code=message["status"], headers=headers)
        self._legacy_pass(response, policy, self.options, request)

        return {
            **message,
            "headers": [(key.encode("latin1"), value.encode("latin1")) for key, value in headers.multi_items()],
        }

    def _asgi_to_internal_request(self, scope: _Scope) -> Request:
        """
        Convert an ASGI HTTP scope to an internal Request object.
        """
        scheme = scope.get("scheme", "http")
        server = scope.get("server")

        if server is None:
            server = ("localhost", 80)

        host = server[0]
        port = server[1] if server[1] is not None else (443 if scheme == "https" else 80)

        # Add port to host if non-standard
        if (scheme == "http" and port != 80) or (scheme == "https" and port != 443):
            host = f"{host}:{port}"

        path = scope.get("path", "/")
        query_string = scope.get("query_string", b"")
        if query_string:
            path = f"{path}?{query_string.decode('latin1')}"

        headers = Headers()
        for key, value in scope.get("headers", []):
            headers.add(key.decode("latin1"), value.decode("latin1"))

        return Request(
            method=scope.get("method", "GET"),
            url=f"{scheme}://{host}{path}",
            headers=headers,
        )

    async def _send_internal_response(self, response: Response, send: _Send) -> None:
        headers: list[tuple[bytes, bytes]] = [
            (key.encode("latin1"), value.encode("latin1")) for key, value in response.headers.multi_items()
        ]
        if "content-length" not in response.headers:
            headers.append((b"content-length", str(len(response.content)).encode("latin1")))

        await send(
            {
                "type": "http.response.start",
                "status": response.status_code,
                "headers": headers,
            }
        )
        await send(
            {
                "type": "http.response.body",
                "body": response.content,
                "more_body": False,
            }
        )
