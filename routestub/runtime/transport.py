"""
HTTP transports used by generated client stubs.

Both transports expose the same small builder surface::

    response = await HttpxRequest('POST', '/api/users').body(text, 'application/json').send()
    user = await response.json(User)

``FetchRequest`` runs on the client platform (Pyodide) on top of the browser's
fetch. ``HttpxRequest`` is used by client code running anywhere else, such as
one server calling another. Every failure surfaces as ``RpcError``; nothing is
retried.
"""

from abc import ABC, abstractmethod
from typing import Any, Self

import httpx

from routestub.exceptions import RpcError
from routestub.runtime.codec import decode_json
from routestub.runtime.settings import settings

TEXT_CONTENT_TYPE = 'text/plain; charset=utf-8'


class Response(ABC):
    """A received response whose body can be read once as text or JSON."""

    def __init__(self, status_code: int):
        self.status_code = status_code

    @abstractmethod
    async def _read(self) -> str: ...

    async def text(self) -> str:
        return await self._read()

    async def json(self, model: Any) -> Any:
        return decode_json(await self._read(), model)


class HttpxResponse(Response):
    def __init__(self, response: httpx.Response):
        super().__init__(response.status_code)
        self._response = response

    async def _read(self) -> str:
        return self._response.text


class FetchResponse(Response):
    def __init__(self, response: Any):
        super().__init__(response.status)
        self._response = response

    async def _read(self) -> str:
        try:
            return await self._response.text()
        except OSError as exc:
            raise RpcError('transport', 'failed to read response body', cause=exc) from exc


class Request(ABC):
    """One outgoing request: method, target and an optional text body."""

    def __init__(self, method: str, url: str):
        self.method = method
        self.url = url
        self.content: str | None = None
        self.content_type: str | None = None

    def body(self, content: str, content_type: str = TEXT_CONTENT_TYPE) -> Self:
        self.content = content
        self.content_type = content_type
        return self

    @property
    def headers(self) -> dict[str, str]:
        if self.content_type is None:
            return {}
        return {'Content-Type': self.content_type}

    def _check_status(self, status_code: int) -> None:
        if settings.raise_for_status and not 200 <= status_code < 300:
            raise RpcError(
                'status',
                f'{self.method} {self.url} returned {status_code}',
                status_code=status_code,
            )

    @abstractmethod
    async def send(self) -> Response: ...


class HttpxRequest(Request):
    """Request sent with ``httpx.AsyncClient``.

    Relative targets are resolved against ``ROUTESTUB_BASE_URL``.
    """

    # replaced in tests with httpx.MockTransport
    transport: httpx.AsyncBaseTransport | None = None

    async def send(self) -> Response:
        try:
            async with httpx.AsyncClient(
                base_url=settings.base_url,
                timeout=settings.timeout,
                transport=self.transport,
            ) as client:
                response = await client.request(
                    self.method, self.url, content=self.content, headers=self.headers
                )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise RpcError(
                'transport', f'{self.method} {self.url} failed', cause=exc
            ) from exc

        self._check_status(response.status_code)
        return HttpxResponse(response)


class FetchRequest(Request):
    """Request sent with Pyodide's ``pyfetch``; only usable on the client platform."""

    async def send(self) -> Response:
        from pyodide.http import pyfetch

        options: dict[str, Any] = {'method': self.method, 'headers': self.headers}
        if self.content is not None:
            options['body'] = self.content

        try:
            response = await pyfetch(self.url, **options)
        except OSError as exc:
            raise RpcError(
                'transport', f'{self.method} {self.url} failed', cause=exc
            ) from exc

        self._check_status(response.status)
        return FetchResponse(response)
