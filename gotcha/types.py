"""
Request descriptors, targets and the success value returned by a request.
"""

import asyncio
import math
from typing import Any, Dict, Literal, Mapping, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import InvalidTargetError

RestVerb = Literal["GET", "PUT", "POST", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE", "CONNECT"]

URL_OBJECT_KEYS = ("port", "path", "pathname", "hostname", "origin", "search")


def _to_headers(value: Any) -> httpx.Headers:
    if value is None:
        return httpx.Headers()
    if isinstance(value, httpx.Headers):
        return value
    return httpx.Headers(value)


class UrlObject(BaseModel):
    """Structured host/port/path form of a target."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    port: Optional[Union[int, str]] = None
    path: Optional[str] = None
    pathname: Optional[str] = None
    hostname: Optional[str] = None
    origin: Optional[str] = None
    search: Optional[str] = None

    def _full_path(self) -> str:
        if self.path is not None:
            return self.path
        return (self.pathname or "") + (self.search or "")

    def to_string(self) -> str:
        path = self._full_path().lstrip("/")
        return f"{self.hostname}:{self.port or 80}/{path}"

    def to_url(self) -> httpx.URL:
        path = self._full_path()
        if path and not path.startswith("/"):
            path = "/" + path
        if self.origin:
            return httpx.URL(self.origin.rstrip("/") + path)
        if not self.hostname:
            raise InvalidTargetError("A URL object needs either an 'origin' or a 'hostname'.")
        return httpx.URL(f"http://{self.hostname}:{self.port or 80}{path}")


class UpgradeOptions(BaseModel):
    """Option shape for protocol upgrades; accepted but never performed."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    path: str
    method: str = "GET"
    headers: httpx.Headers = Field(default_factory=httpx.Headers)
    protocol: Optional[str] = None
    signal: Optional[asyncio.Event] = None

    @field_validator("headers", mode="before")
    @classmethod
    def _headers(cls, value):
        return _to_headers(value)


class RequestOptions(BaseModel):
    """Everything about a request except its target."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    method: RestVerb = "GET"
    headers: httpx.Headers = Field(default_factory=httpx.Headers)
    body: Any = None
    timeout: Optional[float] = None
    signal: Optional[asyncio.Event] = None
    opaque: Any = None
    upgrade: Optional[UpgradeOptions] = None

    @field_validator("method", mode="before")
    @classmethod
    def _method(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("headers", mode="before")
    @classmethod
    def _headers(cls, value):
        return _to_headers(value)

    @field_validator("timeout", mode="before")
    @classmethod
    def _timeout(cls, value):
        # anything but a real number leaves the timer disarmed
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if isinstance(value, int):
            try:
                return float(value)
            except OverflowError:
                return math.inf
        return value

    @classmethod
    def coerce(cls, value: Union["RequestOptions", Mapping[str, Any], None]) -> "RequestOptions":
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls.model_validate(dict(value))


Target = Union[str, httpx.URL, UrlObject, Mapping[str, Any]]


class RequestCall(BaseModel):
    """Explicit form of a request call: a target plus its options."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    target: Union[str, httpx.URL, UrlObject]
    options: RequestOptions = Field(default_factory=RequestOptions)

    @field_validator("target", mode="before")
    @classmethod
    def _target(cls, value):
        if isinstance(value, Mapping):
            return UrlObject.model_validate(dict(value))
        return value

    @field_validator("options", mode="before")
    @classmethod
    def _options(cls, value):
        return RequestOptions.coerce(value)


class Configure(BaseModel):
    """Reserved configuration call shape. Not implemented yet."""

    foo: int
    bar: int


class NetworkResponse:
    """A response that was not classified as an error.

    The caller owns ``body`` and must read it or close it.
    """

    def __init__(
        self,
        status_code: int,
        headers: httpx.Headers,
        body,
        trailers: Dict[str, str] = None,
        opaque: Any = None,
        context: Dict[str, Any] = None,
    ):
        self.status_code = status_code
        self.headers = headers
        self.body = body
        self.trailers = trailers or {}
        self.opaque = opaque
        self.context = context or {}

    def __repr__(self) -> str:
        return f"<NetworkResponse [{self.status_code}]>"


def as_url_object(target: Any) -> Optional[UrlObject]:
    if isinstance(target, UrlObject):
        return target
    if isinstance(target, Mapping):
        return UrlObject.model_validate(dict(target))
    return None


def target_to_string(target: Target) -> str:
    """Canonical string form of a target, as used in messages and contexts."""
    if isinstance(target, str):
        return target
    if isinstance(target, httpx.URL):
        return str(target)
    url_object = as_url_object(target)
    if url_object is not None:
        return url_object.to_string()
    return ""


def resolve_url(target: Target) -> httpx.URL:
    """Absolute URL a target points at."""
    try:
        if isinstance(target, (str, httpx.URL)):
            url = httpx.URL(target)
        else:
            url_object = as_url_object(target)
            if url_object is None:
                raise InvalidTargetError(f"Unsupported request target: {target!r}")
            url = url_object.to_url()
    except (httpx.InvalidURL, ValueError) as e:
        if isinstance(e, InvalidTargetError):
            raise
        raise InvalidTargetError(f"Invalid request target {target!r}: {e}") from e

    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidTargetError(f"Request target must be an absolute http(s) URL: {str(url)!r}")
    return url
