"""
Runs one request: races the transport against the optional timeout and the
caller's cancellation signal, then classifies whatever came back.
"""

import asyncio
import math
import threading
import time
from typing import Mapping, Optional, Union

import structlog

from .classify import classify
from .errors import KindError, RequestAborted, Timeout, TimeoutContext
from .transport import HttpxTransport, Transport
from .types import NetworkResponse, RequestOptions, Target, resolve_url, target_to_string

logger = structlog.get_logger(__name__)

# largest delay the platform's timers accept, in milliseconds
MAX_TIMEOUT_MS = threading.TIMEOUT_MAX * 1000


def effective_timeout(timeout) -> Optional[float]:
    """Timeout in seconds, or None when no timer should be armed."""
    if timeout is None or isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        return None
    if not math.isfinite(timeout) or timeout <= 0 or timeout > MAX_TIMEOUT_MS:
        return None
    return timeout / 1000


def _format_ms(value: float) -> str:
    return f"{value:g}"


async def _settle(call: asyncio.Future) -> None:
    """Cancel the transport call and wait until it has finished."""
    call.cancel()
    await asyncio.wait({call})
    if call.cancelled():
        return
    if call.exception() is not None:
        # the transport failed while being cancelled by us
        logger.debug("transport_cancel_fault", error=str(call.exception()))
        return
    body = getattr(call.result(), 'body', None)
    if body is not None and hasattr(body, 'aclose'):
        await body.aclose()


async def request(
    target: Target,
    options: Union[RequestOptions, Mapping, None] = None,
    transport: Optional[Transport] = None,
) -> Union[NetworkResponse, KindError]:
    """Perform one request and classify its outcome.

    Redirections, client errors, server errors and timeouts are returned as
    error values. ``RequestAborted``, ``InvalidTargetError`` and transport
    faults the timeout did not cause are raised.
    """
    start = time.monotonic()
    options = RequestOptions.coerce(options)
    resolved = resolve_url(target)
    url = target_to_string(target)
    signal = options.signal

    if signal is not None and signal.is_set():
        logger.warning("request_aborted", url=url, method=options.method, before_send=True)
        raise RequestAborted(f"The request to '{url}' was aborted before it was sent.", url=url, before_send=True)

    timeout = effective_timeout(options.timeout)
    transport = transport or HttpxTransport()
    logger.debug("request_started", url=url, method=options.method, timeout=options.timeout if timeout else None)

    call = asyncio.ensure_future(transport(resolved, options))
    aborted = asyncio.ensure_future(signal.wait()) if signal is not None else None
    waiting = {call} if aborted is None else {call, aborted}

    try:
        done, _ = await asyncio.wait(waiting, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)

        if call not in done:
            await _settle(call)

            if aborted is not None and aborted in done:
                logger.warning("request_aborted", url=url, method=options.method, before_send=False)
                raise RequestAborted(f"The request to '{url}' was aborted by its cancellation signal.", url=url)

            elapsed = round((time.monotonic() - start) * 1000)
            logger.warning("request_timed_out", url=url, method=options.method,
                           timeout=options.timeout, elapsed_time=elapsed)
            return Timeout(
                f"Request timed out after {elapsed}ms (timeout: {_format_ms(options.timeout)}ms) "
                f"while requesting the URL: '{url}'.",
                TimeoutContext(url=url, timeout=options.timeout, elapsed_time=elapsed, method=options.method),
            )

        try:
            response = call.result()
        except Exception as e:
            logger.warning("transport_fault", url=url, method=options.method, error=str(e))
            raise
    finally:
        pending = [f for f in (call, aborted) if f is not None and not f.done()]
        for future in pending:
            future.cancel()
        if pending:
            await asyncio.wait(pending)

    result = classify(response, url)
    logger.debug("request_completed", url=url, status_code=response.status_code,
                 kind=getattr(result, 'kind', 'success'))
    return result
