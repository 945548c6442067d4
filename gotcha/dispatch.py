"""
Entry point: routes a call to the request executor, or refuses the reserved
configuration shape.
"""

from typing import Any, Optional, Union

from .errors import KindError
from .guards import is_gotcha_request
from .request import request
from .transport import Transport
from .types import NetworkResponse, RequestCall


def _as_request_call(args: tuple) -> RequestCall:
    if isinstance(args[0], RequestCall):
        return args[0]
    target = args[0]
    options = args[1] if len(args) > 1 else None
    return RequestCall(target=target, options=options)


async def gotcha(*args: Any, transport: Optional[Transport] = None) -> Union[NetworkResponse, KindError]:
    """Request a URL and return the response or a typed error value.

    Called either as ``gotcha(target, options)`` or ``gotcha(RequestCall(...))``.
    ``gotcha(Configure(...))`` is reserved and raises NotImplementedError.
    """
    if not is_gotcha_request(args):
        raise NotImplementedError("Configure type not yet implemented")

    call = _as_request_call(args)
    return await request(call.target, call.options, transport=transport)
