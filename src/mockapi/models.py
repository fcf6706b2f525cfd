"""Request, response and scope models shared by the interception core."""

import base64
import binascii
import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Literal
from urllib.parse import unquote

import httpx
from pydantic import BaseModel, Field

from mockapi.utils.constants import DEFAULT_REDACTED_HEADERS, ENCODING_HEADERS


class Mode(Enum):
    """Interception modes, one per active scope."""

    INACTIVE = "inactive"
    MOCK_LOOKUP = "mock_lookup"
    NO_NETWORK = "no_network"
    CAPTURE = "capture"


@dataclass(frozen=True)
class ScopeOptions:
    """Per-scope settings carried on the dispatcher stack."""

    mock_roots: tuple[Path, ...] = ()
    simplify: bool = True
    overwrite: bool = True
    redact_headers: tuple[str, ...] = DEFAULT_REDACTED_HEADERS


@dataclass(frozen=True)
class RequestDescriptor:
    """An outbound request, decomposed for fixture lookup."""

    method: str
    url: str
    host: str
    port: int | None = None
    path_segments: tuple[str, ...] = ()
    trailing_slash: bool = False
    query: tuple[tuple[str, str], ...] = ()
    body: bytes | None = None

    @classmethod
    def from_url(
        cls,
        method: str,
        url: str | httpx.URL,
        params: Any = None,
        body: bytes | str | dict[str, Any] | list[Any] | None = None,
    ) -> "RequestDescriptor":
        """Build a descriptor from a URL and optional query params and body.

        Args:
            method: HTTP verb
            url: Absolute URL, may already carry a query string
            params: Extra query parameters, anything httpx accepts
            body: Raw bytes, text, or a JSON-serialisable object

        Returns:
            The request descriptor
        """
        parsed = httpx.URL(url)
        if params:
            parsed = parsed.copy_merge_params(params)

        if isinstance(body, (dict, list)):
            # Same compact form httpx uses for json= payloads
            body = json.dumps(body, ensure_ascii=False, separators=(",", ":"))
        if isinstance(body, str):
            body = body.encode("utf-8")

        return cls._from_parsed(method, parsed, body)

    @classmethod
    def from_httpx(cls, request: httpx.Request) -> "RequestDescriptor":
        """Build a descriptor from an httpx request whose body has been read."""
        return cls._from_parsed(request.method, request.url, request.content)

    @classmethod
    def _from_parsed(
        cls, method: str, url: httpx.URL, body: bytes | None
    ) -> "RequestDescriptor":
        raw_path = url.raw_path.decode("ascii").split("?", 1)[0]
        segments = [unquote(segment) for segment in raw_path.split("/")]

        return cls(
            method=method.upper(),
            url=str(url),
            host=url.host,
            port=url.port,
            path_segments=tuple(segment for segment in segments if segment),
            trailing_slash=raw_path.endswith("/") and raw_path != "/",
            query=tuple(url.params.multi_items()),
            body=body or None,
        )


@dataclass
class ResponseDescriptor:
    """A response as stored in, or served from, a fixture."""

    status: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def __post_init__(self) -> None:
        # Header names are case-insensitive; keep them lower-case
        self.headers = {key.lower(): value for key, value in self.headers.items()}

    @property
    def content_type(self) -> str | None:
        """Declared Content-Type header, if any."""
        return self.headers.get("content-type")

    @property
    def media_type(self) -> str | None:
        """Content type without parameters such as charset."""
        if not self.content_type:
            return None
        return self.content_type.split(";", 1)[0].strip().lower()

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "ResponseDescriptor":
        """Convert a live httpx response whose body has been read.

        The stored body is already decoded, so wire encoding headers are
        dropped to keep the descriptor self-consistent.
        """
        headers = {
            key: value
            for key, value in response.headers.items()
            if key.lower() not in ENCODING_HEADERS
        }
        return cls(status=response.status_code, headers=headers, body=response.content)

    def to_httpx(self, request: httpx.Request | None = None) -> httpx.Response:
        """Build an httpx response equivalent to this descriptor."""
        headers = {
            key: value
            for key, value in self.headers.items()
            if key not in ENCODING_HEADERS
        }
        return httpx.Response(
            status_code=self.status,
            headers=headers,
            content=self.body,
            request=request,
        )


class FixtureDocument(BaseModel):
    """Full-descriptor fixture record, stored as JSON."""

    status: int = Field(default=200, ge=100, le=599)
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""
    body_encoding: Literal["utf-8", "base64"] = "utf-8"

    @classmethod
    def from_descriptor(cls, response: ResponseDescriptor) -> "FixtureDocument":
        """Serialise a response, falling back to base64 for binary bodies."""
        try:
            return cls(
                status=response.status,
                headers=response.headers,
                body=response.body.decode("utf-8"),
            )
        except UnicodeDecodeError:
            return cls(
                status=response.status,
                headers=response.headers,
                body=base64.b64encode(response.body).decode("ascii"),
                body_encoding="base64",
            )

    def to_descriptor(self) -> ResponseDescriptor:
        """Rebuild the response this record describes.

        Raises:
            ValueError: If a base64 body is malformed
        """
        if self.body_encoding == "base64":
            try:
                body = base64.b64decode(self.body, validate=True)
            except binascii.Error as e:
                raise ValueError(f"Invalid base64 body: {e}") from e
        else:
            body = self.body.encode("utf-8")

        return ResponseDescriptor(status=self.status, headers=self.headers, body=body)
