from __future__ import annotations

import typing as t

from ccpolicy._policy import CachePolicy

try:
    import fastapi
except ImportError as e:
    raise ImportError(
        "fastapi is required to use ccpolicy.fastapi module. "
        "Please install ccpolicy with the 'fastapi' extra, "
        "e.g., 'pip install ccpolicy[fastapi]'."
    ) from e

__all__ = ("get_cache_policy", "CachePolicyDep")


def get_cache_policy(request: fastapi.Request) -> CachePolicy:
    """
    FastAPI dependency returning the cache policy of the current request.

    The policy is the one created by ``ASGICacheControlMiddleware``. Without the
    middleware a fresh policy is stored on ``request.state``, and the endpoint is
    responsible for applying it.

    Examples:
        >>> from fastapi import FastAPI
        >>> from ccpolicy import CachePolicy
        >>> from ccpolicy.asgi import ASGICacheControlMiddleware
        >>> from ccpolicy.fastapi import CachePolicyDep
        >>>
        >>> app = FastAPI()
        >>> app.add_middleware(ASGICacheControlMiddleware)
        >>>
        >>> @app.get("/api/user/profile")
        >>> async def get_profile(policy: CachePolicy = CachePolicyDep):
        ...     policy.private_cache().set_max_age(300)
        ...     return {"name": "John"}
    """
    policy: t.Optional[CachePolicy] = getattr(request.state, "cache_policy", None)
    if policy is None:
        policy = CachePolicy()
        request.state.cache_policy = policy
    return policy


CachePolicyDep: t.Any = fastapi.Depends(get_cache_policy)
