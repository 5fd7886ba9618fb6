from __future__ import annotations

import enum
import typing as tp

from ccpolicy._exceptions import InvalidState

DirectiveValue = tp.Union[bool, int, float, str]

__all__ = (
    "CacheState",
    "CacheLevel",
    "DirectiveValue",
    "DEFAULT_STATE_DIRECTIVES",
    "NON_DISABLED_STATES",
    "STATE_LEVELS",
    "to_state",
    "to_states",
)


class CacheState(enum.Enum):
    """
    Mutually exclusive caching policies, declared from the strongest to the weakest.
    """

    DISABLED = "disabled"
    PRIVATE = "private"
    PUBLIC = "public"
    ENABLED = "enabled"


class CacheLevel(enum.IntEnum):
    """
    Forcing levels. A higher level wins; ``FORCED`` is added on top of
    one of the others when the caller forces a change.
    """

    ENABLED = 0
    PUBLIC = 1
    PRIVATE = 2
    DISABLED = 3
    FORCED = 10


STATE_LEVELS: tp.Dict[CacheState, CacheLevel] = {
    CacheState.ENABLED: CacheLevel.ENABLED,
    CacheState.PUBLIC: CacheLevel.PUBLIC,
    CacheState.PRIVATE: CacheLevel.PRIVATE,
    CacheState.DISABLED: CacheLevel.DISABLED,
}

DEFAULT_STATE_DIRECTIVES: tp.Dict[CacheState, tp.Dict[str, DirectiveValue]] = {
    # no-store alone is sufficient, the others follow Mozilla's recommendation
    CacheState.DISABLED: {
        "no-cache": True,
        "no-store": True,
        "must-revalidate": True,
    },
    CacheState.PRIVATE: {
        "private": True,
        "must-revalidate": True,
    },
    CacheState.PUBLIC: {
        "public": True,
        "must-revalidate": True,
    },
    CacheState.ENABLED: {
        "must-revalidate": True,
    },
}

NON_DISABLED_STATES = (CacheState.ENABLED, CacheState.PRIVATE, CacheState.PUBLIC)


def to_state(state: tp.Union[CacheState, str]) -> CacheState:
    if isinstance(state, CacheState):
        return state
    try:
        return CacheState(state)
    except ValueError:
        raise InvalidState(f"Invalid state {state!r}") from None


def to_states(states: tp.Union[CacheState, str, tp.Iterable[tp.Union[CacheState, str]]]) -> tp.List[CacheState]:
    """
    Normalize one state or an iterable of states into a list of ``CacheState``.

    Every entry is validated before anything is returned, so callers can
    mutate their tables knowing that all the targets exist.

    Examples:
        >>> to_states("public")
        [<CacheState.PUBLIC: 'public'>]
        >>> to_states([CacheState.ENABLED, "private"])
        [<CacheState.ENABLED: 'enabled'>, <CacheState.PRIVATE: 'private'>]
    """
    if isinstance(states, (CacheState, str)) or not isinstance(states, tp.Iterable):
        return [to_state(states)]  # type: ignore[arg-type]
    return [to_state(state) for state in states]
