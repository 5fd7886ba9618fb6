from __future__ import annotations

import typing as tp
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Mapping, MutableMapping, Optional, Union

if tp.TYPE_CHECKING:
    from ccpolicy._policy import CachePolicy

__all__ = ("Headers", "Request", "Response")


class Headers(MutableMapping[str, str]):
    """
    Case-insensitive, multi-valued header mapping.

    Reading a header joins its values with ``", "``; assigning replaces every
    value, while ``add`` appends one.
    """

    def __init__(self, headers: Optional[Mapping[str, Union[str, List[str]]]] = None) -> None:
        self._headers = {k.lower(): ([v] if isinstance(v, str) else v[:]) for k, v in (headers or {}).items()}

    def get_list(self, key: str) -> Optional[List[str]]:
        return self._headers.get(key.lower(), None)

    def add(self, key: str, value: str) -> None:
        self._headers.setdefault(key.lower(), []).append(value)

    def __getitem__(self, key: str) -> str:
        return ", ".join(self._headers[key.lower()])

    def __setitem__(self, key: str, value: str) -> None:
        self._headers[key.lower()] = [value]

    def __delitem__(self, key: str) -> None:
        del self._headers[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._headers

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def multi_items(self) -> List[tuple[str, str]]:
        return [(key, value) for key, values in self._headers.items() for value in values]

    def __repr__(self) -> str:
        return repr(self._headers)

    def __str__(self) -> str:
        return str(self._headers)

    def __eq__(self, other_headers: Any) -> bool:
        return isinstance(other_headers, Headers) and self._headers == other_headers._headers


@dataclass
class Request:
    method: str
    url: str
    headers: Headers = field(default_factory=Headers)
    cache_policy: Optional["CachePolicy"] = None
    """Resolver for this request, attached by the middleware."""

    @property
    def is_ajax(self) -> bool:
        return self.headers.get("X-Requested-With", "").lower() == "xmlhttprequest"


@dataclass
class Response:
    status_code: int = 200
    headers: Headers = field(default_factory=Headers)
    content: bytes = b""

    @property
    def is_error(self) -> bool:
        return self.status_code >= 400

    def add_header(self, name: str, value: str) -> None:
        self.headers.add(name, value)
