"""Map outbound requests to canonical fixture paths.

The fixture tree mirrors the API: the host is the top directory, every
path segment but the last is a directory, and the last segment names the
file. Query parameters and bodies add a short digest suffix, non-GET
verbs add a ``-METHOD`` suffix:

    GET  https://example.com/users/show.json       -> example.com/users/show.json
    GET  https://example.com/users?page=2          -> example.com/users-<digest>.json
    POST https://example.com/items/                -> example.com/items-POST.json
    GET  https://example.com/users/show.json?id=1  -> example.com/users/show.json-<digest>.json
"""

import hashlib
from typing import Any
from urllib.parse import urlencode

from mockapi.models import RequestDescriptor
from mockapi.utils.constants import DEFAULT_EXTENSION, DIGEST_LENGTH, SIMPLE_MEDIA_TYPES

_ESCAPED_CHARS = str.maketrans({"%": "%25", "/": "%2F", "\\": "%5C", "\x00": "%00"})


def encode(request: RequestDescriptor) -> str:
    """Return the fixture path for a request, relative to a mock root.

    Args:
        request: The request to encode

    Returns:
        POSIX-style relative path, stable across calls and processes
    """
    directories = [_host_directory(request)]
    segments = [_clean_segment(s) for s in request.path_segments]

    if segments:
        directories.extend(segments[:-1])
        stem = segments[-1]
    else:
        # Bare host: the file sits next to the host directory
        stem = directories.pop()

    extension = recognized_extension(stem)
    suffixes = []

    digest = request_digest(request)
    if digest:
        suffixes.append(digest)
    if request.method != "GET":
        suffixes.append(request.method)

    if suffixes:
        filename = "-".join([stem, *suffixes]) + (extension or DEFAULT_EXTENSION)
    elif extension:
        filename = stem
    else:
        filename = stem + DEFAULT_EXTENSION

    return "/".join([*directories, filename])


def build_mock_path(
    method: str,
    url: str,
    params: Any = None,
    body: bytes | str | dict[str, Any] | list[Any] | None = None,
) -> str:
    """Encode a request given as plain method, URL, params and body."""
    return encode(RequestDescriptor.from_url(method, url, params=params, body=body))


def request_digest(request: RequestDescriptor) -> str | None:
    """Short hex digest over the sorted query and body, or None if both are empty."""
    if not request.query and not request.body:
        return None

    canonical = urlencode(sorted(request.query)).encode("utf-8")
    if request.body:
        # NUL never appears in an urlencoded query, so the split is unambiguous
        canonical += b"\x00" + request.body

    return hashlib.md5(canonical).hexdigest()[:DIGEST_LENGTH]


def recognized_extension(name: str) -> str | None:
    """Return the simple media type extension ``name`` ends with, if any."""
    lowered = name.lower()
    for extension in SIMPLE_MEDIA_TYPES:
        if lowered.endswith(extension) and len(name) > len(extension):
            return name[-len(extension) :]
    return None


def _host_directory(request: RequestDescriptor) -> str:
    host = _clean_segment(request.host) or "localhost"
    if request.port is not None:
        return f"{host}-{request.port}"
    return host


def _clean_segment(segment: str) -> str:
    """Re-escape characters that cannot appear in a file name.

    Escaping is reversible, so distinct segments never share a file.
    """
    segment = segment.translate(_ESCAPED_CHARS)
    if segment in (".", ".."):
        return segment.replace(".", "%2E")
    return segment
