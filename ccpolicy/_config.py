from __future__ import annotations

import os
import typing as tp
from dataclasses import dataclass, field

__all__ = ("PolicyOptions", "DEFAULT_ALLOWED_DIRECTIVES", "get_default_options")

DEFAULT_ALLOWED_DIRECTIVES = (
    "public",
    "private",
    "no-cache",
    "max-age",
    "s-maxage",
    "must-revalidate",
    "proxy-revalidate",
    "no-store",
    "no-transform",
)

PublicCacheMode = tp.Literal["strict", "legacy"]

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")


@dataclass
class PolicyOptions:
    """
    Configuration for cache policy resolution and the supplementary header pass.

    Attributes:
    ----------
    allowed_directives : list[str]
        Directive names accepted by ``CachePolicy.set_state_directive``.
        Experimental directives are not included; extend the list to enable them.

        Examples:
        --------
        >>> options = PolicyOptions(
        ...     allowed_directives=[*DEFAULT_ALLOWED_DIRECTIVES, "immutable"]
        ... )

    public_cache_mode : "strict" | "legacy"
        ``"strict"`` makes ``public_cache()`` transition when its priority request
        is accepted, like the other state methods. ``"legacy"`` reproduces the
        historical behaviour of transitioning when the request is rejected.

        Default: "strict"

    disable_http_cache : bool
        Disable caching for every response (unforced). Useful in development
        environments where templates and data change frequently.

        Default: False

    cache_ajax_requests : bool
        When False, responses to ``X-Requested-With: XMLHttpRequest`` requests
        get caching disabled.

        Default: True

    vary : str | None
        Value of the ``Vary`` header added to responses that don't set one.
        None disables it.

        Default: "X-Requested-With, X-Forwarded-Protocol"
    """

    allowed_directives: list[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_DIRECTIVES))
    public_cache_mode: PublicCacheMode = "strict"
    disable_http_cache: bool = False
    cache_ajax_requests: bool = True
    vary: tp.Optional[str] = "X-Requested-With, X-Forwarded-Protocol"

    def __post_init__(self) -> None:
        if self.public_cache_mode not in ("strict", "legacy"):
            raise ValueError(f"Unknown public_cache_mode {self.public_cache_mode!r}")
        self.allowed_directives = [directive.lower() for directive in self.allowed_directives]


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"Invalid boolean value {value!r} for {name}")


def get_default_options() -> PolicyOptions:
    """Get the default options, overridden by CCPOLICY_* environment variables."""

    # comma separated, appended to the defaults
    extra_directives = [
        directive.strip()
        for directive in os.getenv("CCPOLICY_ALLOWED_DIRECTIVES", "").split(",")
        if directive.strip()
    ]
    PUBLIC_CACHE_MODE = os.getenv("CCPOLICY_PUBLIC_CACHE_MODE", "strict")
    DISABLE_HTTP_CACHE = _env_bool("CCPOLICY_DISABLE_HTTP_CACHE", False)
    CACHE_AJAX_REQUESTS = _env_bool("CCPOLICY_CACHE_AJAX_REQUESTS", True)
    VARY = os.getenv("CCPOLICY_VARY", "X-Requested-With, X-Forwarded-Protocol")

    return PolicyOptions(
        allowed_directives=[*DEFAULT_ALLOWED_DIRECTIVES, *extra_directives],
        public_cache_mode=tp.cast(PublicCacheMode, PUBLIC_CACHE_MODE),
        disable_http_cache=DISABLE_HTTP_CACHE,
        cache_ajax_requests=CACHE_AJAX_REQUESTS,
        vary=VARY or None,
    )
