from __future__ import annotations

import copy
import logging
import typing as tp

from ccpolicy._config import PolicyOptions
from ccpolicy._exceptions import InvalidDirective, InvalidValue
from ccpolicy._models import Response
from ccpolicy._states import (
    DEFAULT_STATE_DIRECTIVES,
    NON_DISABLED_STATES,
    STATE_LEVELS,
    CacheLevel,
    CacheState,
    DirectiveValue,
    to_state,
    to_states,
)
from ccpolicy._synchronization import Lock, NoLock

if tp.TYPE_CHECKING:  # pragma: no cover
    from typing_extensions import Self

logger = logging.getLogger(__name__)

__all__ = ("CachePolicy",)

StateLike = tp.Union[CacheState, str]
StatesLike = tp.Union[StateLike, tp.Iterable[StateLike]]


class CachePolicy:
    """
    Resolves the ``Cache-Control`` header of a response from competing callers.

    Callers request one of four states through ``enable_cache``, ``public_cache``,
    ``private_cache`` and ``disable_cache``. Each request carries a forcing level;
    a request whose level is below the highest level accepted so far is silently
    rejected, so a forced ``disable_cache(force=True)`` can't be undone by an
    unforced ``public_cache()`` issued later in the request.

    Every state has its own directive table, and the header is rendered from the
    table of the current state.

    A policy holds mutable per-request state. Construct one per request (the
    middlewares do this), or pass ``thread_safe=True`` when one instance must be
    shared between threads.

    Example:
        ```python
        policy = CachePolicy()
        policy.private_cache().set_max_age(3600)
        policy.generate_cache_header_value()
        # 'private, must-revalidate, max-age=3600'
        ```
    """

    def __init__(self, options: PolicyOptions | None = None, thread_safe: bool = False) -> None:
        self._options = options or PolicyOptions()
        self._lock: Lock | NoLock = Lock() if thread_safe else NoLock()
        self._state = CacheState.ENABLED
        self._forcing_level = 0
        self._state_directives = self._default_directives()

        if self._options.public_cache_mode == "legacy":
            logger.warning("public_cache() runs in legacy mode and transitions when its request is rejected")

    @staticmethod
    def _default_directives() -> dict[CacheState, dict[str, DirectiveValue]]:
        return copy.deepcopy(DEFAULT_STATE_DIRECTIVES)

    @property
    def options(self) -> PolicyOptions:
        return self._options

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def forcing_level(self) -> int:
        return self._forcing_level

    def reset(self) -> Self:
        """Drop every accepted request and directive change."""
        with self._lock:
            self._state = CacheState.ENABLED
            self._forcing_level = 0
            self._state_directives = self._default_directives()
        return self

    # Priority arbitration

    def request_state(self, level: int, force: bool = False) -> bool:
        """
        Ask for a change with a given level, optionally forced to a higher priority.

        Args:
            level: Priority of the change, one of the non-forced ``CacheLevel`` values.
            force: Add ``CacheLevel.FORCED`` to the level. Higher-priority forced
                changes can still reject a forced request.

        Returns:
            True if the change is accepted and the forcing level threshold was
            raised (if necessary) to the new level.
        """
        effective_level = level + (CacheLevel.FORCED if force else 0)
        with self._lock:
            if effective_level < self._forcing_level:
                logger.debug(
                    "Rejected state request: level=%d forcing_level=%d",
                    effective_level,
                    self._forcing_level,
                )
                return False
            self._forcing_level = effective_level
        return True

    def _set_state(self, state: StateLike) -> None:
        self._state = to_state(state)
        logger.debug("Cache state set to %s (forcing_level=%d)", self._state.value, self._forcing_level)

    def _transition(self, state: CacheState, force: bool) -> Self:
        with self._lock:
            if self.request_state(STATE_LEVELS[state], force):
                self._set_state(state)
        return self

    def enable_cache(self, force: bool = False) -> Self:
        """
        Put the response in a cacheable state, rendered from the ``enabled`` directives.

        Does not add ``public``; ``set_max_age()`` is usually sufficient.
        Use ``public_cache()`` when the directive is explicitly required.
        """
        return self._transition(CacheState.ENABLED, force)

    def disable_cache(self, force: bool = False) -> Self:
        """
        Put the response in a non-cacheable state, rendered from the ``disabled`` directives.

        Takes precedence over unforced ``enable_cache()``, ``private_cache()``
        and ``public_cache()`` calls.
        """
        return self._transition(CacheState.DISABLED, force)

    def private_cache(self, force: bool = False) -> Self:
        """
        Allow private caches (browsers) only, rendered from the ``private`` directives.
        """
        return self._transition(CacheState.PRIVATE, force)

    def public_cache(self, force: bool = False) -> Self:
        """
        Allow any cache (CDNs, proxies, browsers), rendered from the ``public`` directives.

        In ``legacy`` mode the state changes when the priority request is
        rejected instead of accepted.
        """
        if self._options.public_cache_mode == "strict":
            return self._transition(CacheState.PUBLIC, force)

        with self._lock:
            if not self.request_state(CacheLevel.PUBLIC, force):
                self._set_state(CacheState.PUBLIC)
        return self

    # Directive tables

    def set_state_directive(self, states: StatesLike, directive: str, value: DirectiveValue = True) -> Self:
        """
        Set a directive on one or more states, or remove it with ``False``.

        Args:
            states: State(s) to apply this directive to.
            directive: Directive name, case-insensitive, must be in the allowed directives.
            value: True to set the flag, False to remove it, an int, float or str
                to assign a specific value.

        Raises:
            InvalidValue: The value is None or not a scalar.
            InvalidDirective: The directive is not allowed.
            InvalidState: One of the states is unknown. No state is modified.
        """
        if value is None or not isinstance(value, (bool, int, float, str)):
            raise InvalidValue(f"Invalid value {value!r} for directive {directive!r}")

        directive = directive.lower()
        if directive not in self._options.allowed_directives:
            raise InvalidDirective(f"Directive {directive} is not allowed")

        targets = to_states(states)

        with self._lock:
            for state in targets:
                if value is False:
                    self._state_directives[state].pop(directive, None)
                else:
                    self._state_directives[state][directive] = value

        logger.debug(
            "Directive %s=%r applied to states %s",
            directive,
            value,
            ", ".join(state.value for state in targets),
        )
        return self

    def set_state_directives_from_dict(self, states: StatesLike, directives: tp.Mapping[str, DirectiveValue]) -> Self:
        """
        Apply several directives at once.

        Entries are applied in order; the first invalid entry raises and the
        entries before it stay applied.
        """
        # materialize once, a generator of states would be exhausted by the first entry
        targets = to_states(states)
        with self._lock:
            for directive, value in directives.items():
                self.set_state_directive(targets, directive, value)
        return self

    def remove_state_directive(self, states: StatesLike, directive: str) -> Self:
        return self.set_state_directive(states, directive, False)

    def has_state_directive(self, state: StateLike, directive: str) -> bool:
        with self._lock:
            return directive.lower() in self._state_directives[to_state(state)]

    def get_state_directive(self, state: StateLike, directive: str) -> DirectiveValue:
        """
        Value of a directive for a state. True means the flag is set, False means
        it is absent.
        """
        with self._lock:
            return self._state_directives[to_state(state)].get(directive.lower(), False)

    def get_state_directives(self, state: StateLike) -> dict[str, DirectiveValue]:
        with self._lock:
            return dict(self._state_directives[to_state(state)])

    # Shortcuts for every non-disabled state

    def set_no_store(self, no_store: bool = True) -> Self:
        """
        Forbid caches from storing anything about the request or response.

        Also removes ``max-age`` and ``s-maxage``, a response that can't be
        stored has no freshness lifetime.
        """
        with self._lock:
            if no_store:
                self.set_state_directive(NON_DISABLED_STATES, "no-store")
                self.remove_state_directive(NON_DISABLED_STATES, "max-age")
                self.remove_state_directive(NON_DISABLED_STATES, "s-maxage")
            else:
                self.remove_state_directive(NON_DISABLED_STATES, "no-store")
        return self

    def set_no_cache(self, no_cache: bool = True) -> Self:
        """Force caches to revalidate with the origin before releasing a cached copy."""
        return self.set_state_directive(NON_DISABLED_STATES, "no-cache", no_cache)

    def set_max_age(self, age: int) -> Self:
        """Seconds for which the response is considered fresh, relative to the request time."""
        return self.set_state_directive(NON_DISABLED_STATES, "max-age", age)

    def set_shared_max_age(self, age: int) -> Self:
        """Like ``set_max_age`` but only for shared caches (proxies, CDNs)."""
        return self.set_state_directive(NON_DISABLED_STATES, "s-maxage", age)

    def set_must_revalidate(self, must_revalidate: bool = True) -> Self:
        return self.set_state_directive(NON_DISABLED_STATES, "must-revalidate", must_revalidate)

    # Header generation

    def generate_cache_header_value(self) -> str:
        with self._lock:
            directives = self._state_directives[self._state]
            cache_control = []
            for directive, value in directives.items():
                if value is True:
                    cache_control.append(directive)
                else:
                    cache_control.append(f"{directive}={value}")
        return ", ".join(cache_control)

    def generate_headers(self) -> dict[str, str]:
        return {"Cache-Control": self.generate_cache_header_value()}

    def apply_to_response(self, response: Response) -> Self:
        """Add the generated headers to a response, keeping any existing values."""
        for name, value in self.generate_headers().items():
            response.add_header(name, value)
        return self

    def __repr__(self) -> str:
        return f"<{type(self).__name__} state={self._state.value} forcing_level={self._forcing_level}>"
