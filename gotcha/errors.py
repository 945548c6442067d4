import re
from typing import Any, Dict, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field


# Raised exceptions
class GotchaError(Exception):
    """Base class for conditions gotcha raises instead of returning."""
    pass

class InvalidTargetError(GotchaError, ValueError):
    """Raised when a request target does not resolve to an absolute URL."""
    pass

class RequestAborted(GotchaError):
    """Raised when the caller's cancellation signal aborts a request."""

    def __init__(self, message: str, url: str = "", before_send: bool = False):
        super().__init__(message)
        self.url = url
        self.before_send = before_send


# Returned error values
class ResponseContext(BaseModel):
    """Context of a redirection, client or server error: the response as received."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    headers: Any
    code: int
    body: Any = None
    context: Optional[Dict[str, Any]] = None
    opaque: Any = None
    trailers: Dict[str, str] = Field(default_factory=dict)
    url: str
    library: Literal["gotcha"] = "gotcha"


class TimeoutContext(BaseModel):
    """Context of a request cancelled by its own timeout."""

    model_config = ConfigDict(frozen=True)

    url: str
    timeout: float
    elapsed_time: int
    """milliseconds since the request started until it was cancelled"""
    method: str
    library: Literal["gotcha"] = "gotcha"


class KindError(Exception):
    """An error value tagged with an immutable ``kind``.

    Instances are returned to the caller, not raised. Subclasses are normally
    built with :func:`create_kind_error`.
    """

    kind: str = "kind-error"

    def __init__(self, message: str, context: Any = None):
        super().__init__(message)
        object.__setattr__(self, "message", message)
        object.__setattr__(self, "context", context)

    def __setattr__(self, name, value):
        if name in ("kind", "message", "context"):
            raise AttributeError(f"'{name}' of a {type(self).__name__} cannot be reassigned")
        super().__setattr__(name, value)

    @classmethod
    def is_(cls, value: Any) -> bool:
        return isinstance(value, cls)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r}, message={self.message!r})"


def kebab_case(name: str) -> str:
    """``"ClientError"`` -> ``"client-error"``."""
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", name)
    return re.sub(r"[\s_]+", "-", name).lower()


def create_kind_error(name: str) -> Type[KindError]:
    """Build a KindError subclass whose ``kind`` is the kebab-case form of ``name``."""
    return type(name, (KindError,), {
        "kind": kebab_case(name),
        "__doc__": f"Error value of kind '{kebab_case(name)}'.",
    })


Redirection = create_kind_error("Redirection")
ClientError = create_kind_error("ClientError")
ServerError = create_kind_error("ServerError")
Timeout = create_kind_error("Timeout")

ERROR_KINDS = (Redirection, ClientError, ServerError, Timeout)
