"""
Network I/O behind a request: sends it with httpx and hands back the status,
headers and a lazily consumed body. Classification happens elsewhere.
"""

from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional, Protocol

import httpx
import structlog

from .config import Config
from .types import RequestOptions

logger = structlog.get_logger(__name__)


class Body:
    """Streaming response body. Reading it drains and closes the stream."""

    def __init__(self, response: httpx.Response, on_close: Optional[Callable[[], Awaitable[None]]] = None):
        self._response = response
        self._on_close = on_close
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def read(self) -> bytes:
        try:
            return await self._response.aread()
        finally:
            await self.aclose()

    async def text(self) -> str:
        await self.read()
        return self._response.text

    async def json(self) -> Any:
        await self.read()
        return self._response.json()

    async def aiter_bytes(self, chunk_size: int = 8192) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_bytes(chunk_size=chunk_size):
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._response.aclose()
        finally:
            if self._on_close is not None:
                await self._on_close()

    async def __aenter__(self) -> "Body":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


class TransportResponse:
    def __init__(
        self,
        status_code: int,
        headers: httpx.Headers,
        body: Any,
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


class Transport(Protocol):
    """Anything that can perform one request.

    Cancellation arrives as cancellation of the task awaiting the call.
    """

    async def __call__(self, url: httpx.URL, options: RequestOptions) -> TransportResponse:
        ...


class HttpxTransport:
    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        config: Optional[Config] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Send requests on ``client``, or on a one-shot client per request.

        A one-shot client lives until the response body is closed and is
        built from ``config``, sending through ``http_transport`` when given.
        """
        self._client = client
        self._config = config
        self._http_transport = http_transport

    def _settings(self) -> Dict[str, Any]:
        if self._config is None:
            self._config = Config()
        return self._config.transport

    def _new_client(self) -> httpx.AsyncClient:
        settings = self._settings()
        connect_timeout = settings.get('connect_timeout')

        headers = {
            'User-Agent': settings.get('user_agent', 'gotcha'),
        }
        return httpx.AsyncClient(
            timeout=httpx.Timeout(None, connect=connect_timeout),
            follow_redirects=False,
            transport=self._http_transport,
            verify=settings.get('verify', True),
            headers=headers,
            limits=httpx.Limits(
                max_connections=settings.get('max_connections', 20),
                max_keepalive_connections=settings.get('max_keepalive_connections', 10),
            ),
        )

    def _build_request(self, client: httpx.AsyncClient, url: httpx.URL, options: RequestOptions) -> httpx.Request:
        body = options.body
        kwargs: Dict[str, Any] = {'headers': options.headers}
        if body is not None:
            kwargs['content'] = body
        return client.build_request(options.method, url, **kwargs)

    async def __call__(self, url: httpx.URL, options: RequestOptions) -> TransportResponse:
        if options.upgrade is not None:
            raise NotImplementedError("Protocol upgrades are not supported by HttpxTransport")

        owns_client = self._client is None
        client = self._new_client() if owns_client else self._client

        try:
            request = self._build_request(client, url, options)
            logger.debug("transport_send", method=options.method, url=str(url))
            response = await client.send(request, stream=True)
        except BaseException:
            if owns_client:
                await client.aclose()
            raise

        return TransportResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=Body(response, on_close=client.aclose if owns_client else None),
            trailers={},
            opaque=options.opaque,
            context={
                'http_version': response.http_version,
                'reason_phrase': response.reason_phrase,
            },
        )
