"""
Predicates over request outcomes and call shapes. None of them have side
effects.
"""

from typing import Any, Mapping, Sequence, TypeGuard

import httpx

from .errors import ClientError, KindError, Redirection, ServerError, Timeout
from .types import URL_OBJECT_KEYS, NetworkResponse, RequestCall, UrlObject


def is_ok(value: Any) -> TypeGuard[NetworkResponse]:
    """True unless ``value`` is one of the four error values."""
    return not isinstance(value, KindError)


def was_redirected(value: Any) -> TypeGuard[KindError]:
    return Redirection.is_(value)


def was_client_error(value: Any) -> TypeGuard[KindError]:
    return ClientError.is_(value)


def was_server_error(value: Any) -> TypeGuard[KindError]:
    return ServerError.is_(value)


def timed_out(value: Any) -> TypeGuard[KindError]:
    """True when the request was cancelled by its own timeout.

    The context then carries ``timeout`` (the configured limit) and
    ``elapsed_time``, both in milliseconds.
    """
    return Timeout.is_(value)


def _is_number_like(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        try:
            float(value)
        except ValueError:
            return False
        return True
    return False


def is_url_object(value: Any) -> TypeGuard[UrlObject]:
    """A UrlObject, or a mapping shaped like one."""
    if isinstance(value, UrlObject):
        return True
    if not isinstance(value, Mapping) or not value:
        return False
    if not all(key in URL_OBJECT_KEYS for key in value):
        return False
    port = value.get("port")
    if port is not None and not _is_number_like(port):
        return False
    return all(
        value.get(key) is None or isinstance(value.get(key), str)
        for key in URL_OBJECT_KEYS if key != "port"
    )


def is_request_target(value: Any) -> bool:
    return isinstance(value, (str, httpx.URL)) or is_url_object(value)


def is_gotcha_request(args: Any) -> bool:
    """True when a call's arguments describe a request rather than the reserved shape."""
    if isinstance(args, RequestCall):
        return True
    if not isinstance(args, Sequence) or isinstance(args, (str, bytes)) or not args:
        return False
    return isinstance(args[0], RequestCall) or is_request_target(args[0])
