from __future__ import annotations

import logging
import typing as tp

from ccpolicy._config import PolicyOptions
from ccpolicy._policy import CachePolicy
from ccpolicy._synchronization import Lock

logger = logging.getLogger(__name__)

__all__ = ("PolicyRegistry", "get_policy", "reset_policies", "default_registry")

P = tp.TypeVar("P", bound=CachePolicy)


class PolicyRegistry:
    """
    Shared policy instances, one per policy type.

    Prefer constructing a policy per request; the registry exists for code that
    can't receive one explicitly. Call ``reset()`` between requests and tests so
    no accepted state leaks from one to the next.
    """

    def __init__(self, options: PolicyOptions | None = None) -> None:
        self.options = options or PolicyOptions()
        self._instances: dict[type[CachePolicy], CachePolicy] = {}
        self._lock = Lock()

    def get(self, cls: type[P] = CachePolicy) -> P:  # type: ignore[assignment]
        with self._lock:
            instance = self._instances.get(cls)
            if instance is None:
                logger.debug("Creating shared %s instance", cls.__name__)
                instance = cls(self.options, thread_safe=True)
                self._instances[cls] = instance
            return tp.cast(P, instance)

    def register(self, instance: CachePolicy) -> None:
        with self._lock:
            self._instances[type(instance)] = instance

    def reset(self) -> None:
        with self._lock:
            logger.debug("Dropping %d shared policy instance(s)", len(self._instances))
            self._instances.clear()


default_registry = PolicyRegistry()


def get_policy() -> CachePolicy:
    return default_registry.get(CachePolicy)


def reset_policies() -> None:
    default_registry.reset()
