"""Cookies for the ``Cookie`` request header and the ``Set-Cookie`` response header."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Iterable

from humptykit.headers import Header


class SameSite(enum.Enum):
    """The SameSite attribute of a cookie."""

    STRICT = "Strict"
    LAX = "Lax"
    NONE = "None"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Cookie:
    """A cookie as sent by a client in the ``Cookie`` header."""

    name: str
    value: str

    @classmethod
    def to_header(cls, cookies: Iterable["Cookie"]) -> Header | None:
        """Join cookies into one ``Cookie`` header, or None if there are none."""
        pairs = [f"{cookie.name}={cookie.value}" for cookie in cookies]
        if not pairs:
            return None
        return Header.create("Cookie", "; ".join(pairs))


@dataclass(frozen=True)
class SetCookie:
    """A cookie the server asks the client to store, with its attributes.

    The ``with_*`` methods return a modified copy.
    """

    name: str
    value: str
    expires: str | None = None
    max_age: timedelta | None = None
    domain: str | None = None
    path: str | None = None
    secure: bool = False
    http_only: bool = False
    same_site: SameSite | None = None

    def with_expires(self, expires: str) -> "SetCookie":
        """Set the expiry date; it must be a valid HTTP timestamp."""
        return replace(self, expires=str(expires))

    def with_max_age(self, max_age: timedelta) -> "SetCookie":
        return replace(self, max_age=max_age)

    def with_domain(self, domain: str) -> "SetCookie":
        return replace(self, domain=str(domain))

    def with_path(self, path: str) -> "SetCookie":
        return replace(self, path=str(path))

    def with_secure(self, secure: bool) -> "SetCookie":
        return replace(self, secure=bool(secure))

    def with_http_only(self, http_only: bool) -> "SetCookie":
        return replace(self, http_only=bool(http_only))

    def with_same_site(self, same_site: SameSite) -> "SetCookie":
        return replace(self, same_site=SameSite(same_site))

    def to_header(self) -> Header:
        """Render this cookie as a ``Set-Cookie`` header."""
        parts = [f"{self.name}={self.value}"]
        if self.expires is not None:
            parts.append(f"Expires={self.expires}")
        if self.max_age is not None:
            parts.append(f"Max-Age={int(self.max_age.total_seconds())}")
        if self.domain is not None:
            parts.append(f"Domain={self.domain}")
        if self.path is not None:
            parts.append(f"Path={self.path}")
        if self.same_site is not None:
            parts.append(f"SameSite={self.same_site.value}")
        if self.secure:
            parts.append("Secure")
        if self.http_only:
            parts.append("HttpOnly")
        return Header.create("Set-Cookie", "; ".join(parts))