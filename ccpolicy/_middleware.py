from __future__ import annotations

import logging
import typing as tp

from ccpolicy._config import PolicyOptions
from ccpolicy._exceptions import HTTPResponseError
from ccpolicy._models import Request, Response
from ccpolicy._policy import CachePolicy

logger = logging.getLogger(__name__)

__all__ = ("CacheControlMiddleware", "add_cache_headers")

PolicyFactory = tp.Callable[[], CachePolicy]
RequestHandler = tp.Callable[[Request], Response]
HeaderPass = tp.Callable[[Response, CachePolicy, PolicyOptions, tp.Optional[Request]], None]


def add_cache_headers(
    response: Response,
    policy: CachePolicy,
    options: PolicyOptions,
    request: Request | None = None,
) -> None:
    """
    Supplementary cache header pass run on every response.

    Disables caching (unforced) for development setups, AJAX requests when
    they must not be cached, and error responses. Then adds the policy's
    headers and ``Vary``, leaving alone any header the response already carries.
    """
    if options.disable_http_cache:
        logger.debug("HTTP caching disabled by configuration")
        policy.disable_cache()

    if not options.cache_ajax_requests and request is not None and request.is_ajax:
        logger.debug("Disabling cache for AJAX request: url=%s", request.url)
        policy.disable_cache()

    # errors are not cached unless user code forced a state
    if response.is_error:
        logger.debug("Disabling cache for error response: status=%d", response.status_code)
        policy.disable_cache()

    headers = policy.generate_headers()
    if options.vary:
        headers["Vary"] = options.vary

    for name, value in headers.items():
        if name not in response.headers:
            response.add_header(name, value)
        else:
            logger.debug("Keeping existing %s header: %s", name, response.headers[name])


class CacheControlMiddleware:
    """
    Request middleware that resolves the cache policy of every response.

    A fresh ``CachePolicy`` is attached to ``request.cache_policy`` before the
    handler runs, so handlers can call ``request.cache_policy.disable_cache()``
    and friends. An ``HTTPResponseError`` raised by the handler is recovered
    into its response, so error responses get cache headers too.

    Args:
        policy_factory: Builds the policy for each request. Defaults to
            ``CachePolicy(options)``.
        options: Policy options. Defaults to ``PolicyOptions()``.
        legacy_pass: The supplementary header pass. Defaults to ``add_cache_headers``.

    Example:
        ```python
        middleware = CacheControlMiddleware()

        def handler(request: Request) -> Response:
            request.cache_policy.public_cache().set_max_age(600)
            return Response(200, content=b"ok")

        response = middleware.process(Request("GET", "/"), handler)
        response.headers["Cache-Control"]
        # 'public, must-revalidate, max-age=600'
        ```
    """

    def __init__(
        self,
        policy_factory: PolicyFactory | None = None,
        options: PolicyOptions | None = None,
        legacy_pass: HeaderPass | None = None,
    ) -> None:
        self.options = options or PolicyOptions()
        self._policy_factory = policy_factory or (lambda: CachePolicy(self.options))
        self._legacy_pass = legacy_pass or add_cache_headers

        logger.info(
            "Initialized CacheControlMiddleware with public_cache_mode=%s, disable_http_cache=%s",
            self.options.public_cache_mode,
            self.options.disable_http_cache,
        )

    def process(self, request: Request, delegate: RequestHandler) -> Response:
        if request.cache_policy is None:
            request.cache_policy = self._policy_factory()
        policy = request.cache_policy

        try:
            response = delegate(request)
        except HTTPResponseError as exc:
            logger.debug("Recovered response from handler: status=%d", exc.response.status_code)
            response = exc.response

        self._legacy_pass(response, policy, self.options, request)
        logger.debug(
            "Resolved cache policy: method=%s url=%s state=%s",
            request.method,
            request.url,
            policy.state.value,
        )
        return response

    __call__ = process
