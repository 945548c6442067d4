"""
Status code classification: which responses come back as error values.
"""

from typing import Optional, Type, Union

from .errors import ClientError, KindError, Redirection, ResponseContext, ServerError
from .transport import TransportResponse
from .types import NetworkResponse

MESSAGES = {
    Redirection: "A redirection took place while requesting the URL: '{url}'.",
    ClientError: "A client-based network error happened requesting the URL: '{url}'.",
    ServerError: "A server-based network error happened requesting the URL: '{url}'.",
}


def outcome_kind(status_code: int) -> Optional[Type[KindError]]:
    """Error kind for a status code, or None when the response passes through."""
    if status_code < 300:
        return None
    elif status_code < 400:
        return Redirection
    elif status_code < 500:
        return ClientError
    else:
        return ServerError


def classify(response: TransportResponse, url: str) -> Union[NetworkResponse, KindError]:
    kind = outcome_kind(response.status_code)
    if kind is None:
        return NetworkResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=response.body,
            trailers=response.trailers,
            opaque=response.opaque,
            context=response.context,
        )

    return kind(
        MESSAGES[kind].format(url=url),
        ResponseContext(
            headers=response.headers,
            code=response.status_code,
            body=response.body,
            context=response.context or None,
            opaque=response.opaque,
            trailers=response.trailers or {},
            url=url,
        ),
    )
