"""gotcha - typed outcomes for single HTTP requests."""

from .config import Config
from .errors import (
    ClientError,
    GotchaError,
    InvalidTargetError,
    KindError,
    Redirection,
    RequestAborted,
    ResponseContext,
    ServerError,
    Timeout,
    TimeoutContext,
    create_kind_error,
)
from .dispatch import gotcha
from .guards import (
    is_gotcha_request,
    is_ok,
    is_url_object,
    timed_out,
    was_client_error,
    was_redirected,
    was_server_error,
)
from .log import configure_logging
from .request import request
from .transport import Body, HttpxTransport, Transport, TransportResponse
from .types import Configure, NetworkResponse, RequestCall, RequestOptions, UpgradeOptions, UrlObject

__version__ = "0.3.0"
