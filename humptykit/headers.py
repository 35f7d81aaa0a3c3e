"""HTTP header names, single headers and ordered header collections."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import total_ordering
from typing import Iterator, Union

# Canonical spellings in the order they are reported by ``HeaderName.well_known``.
_WELL_KNOWN_ORDER: tuple[str, ...] = (
    "Accept",
    "Accept",
    "Accept-Charset",
    "Accept-Encoding",
    "Accept-Language",
    "Access-Control-Request-Method",
    "Access-Control-Request-Headers",
    "Authorization",
    "Cache-Control",
    "Connection",
    "Content-Encoding",
    "Content-Length",
    "Content-Type",
    "Cookie",
    "Date",
    "Expect",
    "Forwarded",
    "From",
    "Host",
    "Origin",
    "Pragma",
    "Referer",
    "Upgrade",
    "User-Agent",
    "Via",
    "Warning",
    "Access-Control-Allow-Origin",
    "Access-Control-Allow-Headers",
    "Access-Control-Allow-Methods",
    "Age",
    "Allow",
    "Content-Disposition",
    "Content-Language",
    "Content-Location",
    "ETag",
    "Expires",
    "Last-Modified",
    "Link",
    "Location",
    "Server",
    "Set-Cookie",
    "Transfer-Encoding",
    "Trailer",
    "TE",
    "Proxy-Authenticate",
)

_CANONICAL_BY_LOWER: dict[str, str] = {name.lower(): name for name in _WELL_KNOWN_ORDER}


@total_ordering
class HeaderName:
    """The name of an HTTP header.

    Well-known names are matched case-insensitively and stored in their
    canonical spelling; any other name is kept verbatim as a custom header.
    """

    __slots__ = ("_name", "_custom")

    def __init__(self, name: str) -> None:
        canonical = _CANONICAL_BY_LOWER.get(name.lower())
        if canonical is None:
            self._name = name
            self._custom = True
        else:
            self._name = canonical
            self._custom = False

    @classmethod
    def parse(cls, name: Union[str, "HeaderName"]) -> "HeaderName":
        """Return the header name for ``name``, which may already be one."""
        if isinstance(name, HeaderName):
            return name
        return cls(name)

    @classmethod
    def well_known(cls) -> tuple["HeaderName", ...]:
        """All well-known header names."""
        return tuple(cls(name) for name in _WELL_KNOWN_ORDER)

    def is_custom(self) -> bool:
        return self._custom

    def is_well_known(self) -> bool:
        return not self._custom

    def well_known_str(self) -> str | None:
        """The canonical spelling, or None for a custom header."""
        return None if self._custom else self._name

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        kind = "custom" if self._custom else "well-known"
        return f"HeaderName({self._name!r}, {kind})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderName):
            return NotImplemented
        return self._custom == other._custom and self._name == other._name

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, HeaderName):
            return NotImplemented
        return self._name < other._name

    def __hash__(self) -> int:
        return hash((self._custom, self._name))


for _canonical in dict.fromkeys(_WELL_KNOWN_ORDER):
    setattr(HeaderName, _canonical.upper().replace("-", "_"), HeaderName(_canonical))
del _canonical


NameLike = Union[str, HeaderName]


@dataclass(frozen=True)
class Header:
    """A single header: a name and its value."""

    name: HeaderName
    value: str

    @classmethod
    def create(cls, name: NameLike, value: str) -> "Header":
        """Build a header from a name given as text or as a ``HeaderName``."""
        return cls(HeaderName.parse(name), str(value))

    def __str__(self) -> str:
        return f"{self.name}: {self.value}"


@dataclass
class Headers:
    """An ordered collection of headers that may repeat names."""

    _items: list[Header] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Header]:
        return iter(self._items)

    def add(self, name: NameLike, value: str) -> None:
        """Append a new header."""
        self._items.append(Header.create(name, value))

    def push(self, header: Header) -> None:
        """Append an existing header."""
        self._items.append(header)

    def get(self, name: NameLike) -> str | None:
        """Value of the first header with the given name, if any."""
        wanted = HeaderName.parse(name)
        return next((h.value for h in self._items if h.name == wanted), None)

    def set(self, name: NameLike, value: str) -> None:
        """Remove every header of this name, then add it once with ``value``."""
        self.remove(name)
        self.add(name, value)

    def try_set(self, name: NameLike, value: str) -> str | None:
        """Add the header unless present; return the existing value if it was."""
        existing = self.get(name)
        if existing is not None:
            return existing
        self.add(name, value)
        return None

    def replace_all(self, name: NameLike, value: str) -> list[Header]:
        """Replace all headers of this name by one appended header.

        Returns the headers that were removed, in their original order.
        """
        wanted = HeaderName.parse(name)
        removed = [h for h in self._items if h.name == wanted]
        self._items = [h for h in self._items if h.name != wanted]
        self._items.append(Header.create(wanted, value))
        return removed

    def get_all(self, name: NameLike) -> list[str]:
        """Values of every header with the given name, in order."""
        wanted = HeaderName.parse(name)
        return [h.value for h in self._items if h.name == wanted]

    def remove(self, name: NameLike) -> None:
        """Remove every header with the given name."""
        wanted = HeaderName.parse(name)
        self._items = [h for h in self._items if h.name != wanted]