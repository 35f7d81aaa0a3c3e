"""HTTP request methods."""

from __future__ import annotations

from functools import total_ordering

_WELL_KNOWN: tuple[str, ...] = (
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "DELETE",
    "OPTIONS",
    "TRACE",
    "PATCH",
)
_RANK = {name: index for index, name in enumerate(_WELL_KNOWN)}


@total_ordering
class Method:
    """An HTTP method: one of the well-known verbs or a custom one.

    Well-known verbs match only in their exact upper-case spelling; anything
    else becomes a custom method whose name is upper-cased.
    """

    __slots__ = ("_name", "_custom")

    def __init__(self, name: str) -> None:
        if name in _RANK:
            self._name = name
            self._custom = False
        else:
            self._name = name.upper()
            self._custom = True

    @classmethod
    def parse(cls, name: str | "Method") -> "Method":
        """Return the method for the verb ``name``."""
        if isinstance(name, Method):
            return name
        return cls(name)

    @classmethod
    def well_known(cls) -> tuple["Method", ...]:
        """All well-known methods."""
        return tuple(cls(name) for name in _WELL_KNOWN)

    def is_well_known(self) -> bool:
        return not self._custom

    def is_custom(self) -> bool:
        return self._custom

    def well_known_str(self) -> str | None:
        """The verb, or None for a custom method."""
        return None if self._custom else self._name

    def as_str(self) -> str:
        return self._name

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"Method({self._name!r})"

    def _key(self) -> tuple[int, str]:
        if self._custom:
            return (len(_WELL_KNOWN), self._name)
        return (_RANK[self._name], "")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Method):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Method):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())


Method.GET = Method("GET")
Method.HEAD = Method("HEAD")
Method.POST = Method("POST")
Method.PUT = Method("PUT")
Method.DELETE = Method("DELETE")
Method.OPTIONS = Method("OPTIONS")
Method.TRACE = Method("TRACE")
Method.PATCH = Method("PATCH")