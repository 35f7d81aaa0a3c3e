"""Ready-made endpoints that serve files, directories and redirects."""

from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass, field
from http import HTTPStatus
from pathlib import Path
from typing import Callable, Sequence, Union

from humptykit.headers import Headers

INDEX_FILES: tuple[str, ...] = ("index.html", "index.htm")
DEFAULT_MIME = "application/octet-stream"
DEFAULT_ROUTE = "/*"

PathLike = Union[str, "os.PathLike[str]"]


@dataclass
class StaticResponse:
    """A response produced by one of the static endpoints."""

    status: HTTPStatus
    headers: Headers = field(default_factory=Headers)
    body: bytes | None = None

    @property
    def content_type(self) -> str | None:
        return self.headers.get("Content-Type")

    @property
    def location(self) -> str | None:
        return self.headers.get("Location")

    @classmethod
    def ok(cls, body: bytes, mime: str) -> "StaticResponse":
        response = cls(HTTPStatus.OK, body=body)
        response.headers.set("Content-Type", mime)
        return response

    @classmethod
    def moved_permanently(cls, location: str) -> "StaticResponse":
        response = cls(HTTPStatus.MOVED_PERMANENTLY)
        response.headers.set("Location", location)
        return response

    @classmethod
    def not_found(cls) -> "StaticResponse":
        return cls(HTTPStatus.NOT_FOUND)


@dataclass(frozen=True)
class LocatedPath:
    """Result of a lookup: a directory (no path) or a file at ``path``."""

    path: Path | None = None

    @property
    def is_directory(self) -> bool:
        return self.path is None

    @property
    def is_file(self) -> bool:
        return self.path is not None


Handler = Callable[..., StaticResponse]


def _mime_for(path: Path) -> str:
    suffix = path.suffix.lower()
    if not suffix:
        return DEFAULT_MIME
    return mimetypes.types_map.get(suffix, DEFAULT_MIME)


def _open_file(path: Path) -> StaticResponse:
    """Serve the file at ``path``; 404 if it does not exist, other errors raise."""
    mime = _mime_for(path)
    try:
        body = path.read_bytes()
    except FileNotFoundError:
        return StaticResponse.not_found()
    return StaticResponse.ok(body, mime)


def _strip_suffix(text: str, suffix: str) -> str:
    return text[: -len(suffix)] if suffix and text.endswith(suffix) else text


def _strip_prefix(text: str, prefix: str) -> str:
    return text[len(prefix):] if text.startswith(prefix) else text


def find_path(
    directory: PathLike, request_path: str, index_files: Sequence[str] = INDEX_FILES
) -> LocatedPath | None:
    """Locate ``request_path`` below ``directory``.

    A path ending in ``/`` (or an empty one) is looked up through the index
    files. Paths containing ``..`` or ``:`` are refused.
    """
    if ".." in request_path or ":" in request_path:
        return None

    request_path = request_path.lstrip("/")
    base = os.fspath(directory).rstrip("/")

    if request_path.endswith("/") or not request_path:
        for filename in index_files:
            candidate = f"{base}/{request_path}{filename}"
            if os.path.isfile(candidate):
                try:
                    return LocatedPath(Path(os.path.realpath(candidate, strict=True)))
                except OSError:
                    return None
        return None

    candidate = f"{base}/{request_path}"
    if os.path.isfile(candidate):
        try:
            return LocatedPath(Path(os.path.realpath(candidate, strict=True)))
        except OSError:
            return None
    if os.path.isdir(candidate):
        return LocatedPath()
    return None


def serve_file(file_path: PathLike) -> Handler:
    """Endpoint that always serves ``file_path``, or 404 if it is missing."""
    target = Path(file_path)

    def handler(path: str = "/", routed_path: str = DEFAULT_ROUTE) -> StaticResponse:
        return _open_file(target)

    return handler


def serve_as_file_path(directory_path: PathLike) -> Handler:
    """Endpoint that maps the whole request path onto a file below the directory."""
    directory = _strip_suffix(os.fspath(directory_path), "/")

    def handler(path: str, routed_path: str = DEFAULT_ROUTE) -> StaticResponse:
        file_path = _strip_prefix(path, "/")
        return _open_file(Path(f"{directory}/{file_path}"))

    return handler


def serve_dir(directory_path: PathLike) -> Handler:
    """Endpoint that serves a directory, honouring index files.

    ``/dir`` serves the file ``dir``, redirects to ``/dir/`` if it is a
    directory, or is 404; ``/dir/`` serves an index file or is 404.
    """
    directory = os.fspath(directory_path)

    def handler(path: str, routed_path: str = DEFAULT_ROUTE) -> StaticResponse:
        route = _strip_suffix(routed_path, "*")
        remainder = path[len(route):] if path.startswith(route) else routed_path

        located = find_path(directory, remainder, INDEX_FILES)
        if located is None:
            return StaticResponse.not_found()
        if located.is_directory:
            return StaticResponse.moved_permanently(f"{path}/")
        return _open_file(located.path)

    return handler


def redirect(location: str) -> Handler:
    """Endpoint that answers every request with a 301 redirect to ``location``."""

    def handler(path: str = "/", routed_path: str = DEFAULT_ROUTE) -> StaticResponse:
        return StaticResponse.moved_permanently(location)

    return handler