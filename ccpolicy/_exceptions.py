from __future__ import annotations

import typing as tp

if tp.TYPE_CHECKING:
    from ccpolicy._models import Response

__all__ = (
    "CachePolicyError",
    "InvalidState",
    "InvalidDirective",
    "InvalidValue",
    "HTTPResponseError",
)


class CachePolicyError(Exception): ...


class InvalidState(CachePolicyError): ...


class InvalidDirective(CachePolicyError): ...


class InvalidValue(CachePolicyError): ...


class HTTPResponseError(Exception):
    """
    Raised by a request handler to abort with a fully formed response.

    The middlewares recover the attached response instead of propagating
    the exception, so cache headers are still applied to it.
    """

    def __init__(self, response: Response, message: str | None = None) -> None:
        super().__init__(message or f"Aborted with status {response.status_code}")
        self.response = response
