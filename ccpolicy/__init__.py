from ccpolicy._config import (
    DEFAULT_ALLOWED_DIRECTIVES as DEFAULT_ALLOWED_DIRECTIVES,
    PolicyOptions as PolicyOptions,
    get_default_options as get_default_options,
)
from ccpolicy._exceptions import (
    CachePolicyError as CachePolicyError,
    HTTPResponseError as HTTPResponseError,
    InvalidDirective as InvalidDirective,
    InvalidState as InvalidState,
    InvalidValue as InvalidValue,
)
from ccpolicy._middleware import (
    CacheControlMiddleware as CacheControlMiddleware,
    add_cache_headers as add_cache_headers,
)
from ccpolicy._models import Headers as Headers, Request as Request, Response as Response
from ccpolicy._policy import CachePolicy as CachePolicy
from ccpolicy._registry import (
    PolicyRegistry as PolicyRegistry,
    get_policy as get_policy,
    reset_policies as reset_policies,
)
from ccpolicy._states import CacheLevel as CacheLevel, CacheState as CacheState

__all__ = (
    ## States
    "CacheState",
    "CacheLevel",
    ## Policy
    "CachePolicy",
    "PolicyOptions",
    "DEFAULT_ALLOWED_DIRECTIVES",
    "get_default_options",
    ## Registry
    "PolicyRegistry",
    "get_policy",
    "reset_policies",
    ## Middleware
    "CacheControlMiddleware",
    "add_cache_headers",
    ## Models
    "Headers",
    "Request",
    "Response",
    ## Exceptions
    "CachePolicyError",
    "InvalidState",
    "InvalidDirective",
    "InvalidValue",
    "HTTPResponseError",
)
