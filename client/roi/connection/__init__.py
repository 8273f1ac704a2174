import os
import httpx
import asyncio
import logging
import contextlib
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union
from roi.connection.builder import NO_PAYLOAD, build_request
from roi.connection.classifier import classify
from roi.connection.models import RequestConfig, RequestOptions
from roi.connection.redirects import RedirectGuard, next_hop
from roi.connection.types import Classification, Method
from roi.exceptions import HTTPFailureException, TransportException

logger = logging.getLogger(__name__)

Options = Union[RequestOptions, Dict[str, Any]]
SuccessHandler = Callable[[httpx.Response], Awaitable[Any]]


class ConnectionManager:
    """Runs call chains: one verb against one endpoint, following redirects.

    Every public method is a coroutine that issues the request, classifies
    the response and either resolves, fails, or moves on to the redirect
    Location until the redirect budget of that call is spent. Calls share
    no state with each other, so a manager can serve concurrent calls.

    Attributes:
        request_config (RequestConfig): Timeouts, redirect budget and chunk size
        transport (Optional[httpx.AsyncBaseTransport]): Custom transport handed
            to httpx, None for the default network transport

    Example:
        manager = ConnectionManager(request_config=RequestConfig(max_redirects=5))
        chunks = await manager.get({"endpoint": "https://api.example.com/items"})
    """

    def __init__(self, request_config: Optional[RequestConfig] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the manager.

        Args:
            request_config: Settings for every call. If None, default settings
                          will be used.
            transport: Transport to route requests through, mainly for tests.
        """
        self.request_config = request_config or RequestConfig()
        self.transport = transport

    # @context: Public
    async def get(self, options: Options) -> List[str]:
        """Send a GET request and collect the response body.

        Args:
            options: Endpoint and optional credentials

        Returns:
            List[str]: Decoded text chunks in the order they arrived

        Raises:
            HTTPFailureException: On a status code >= 400
            RedirectExhaustedException: When redirected too many times
            TransportException: When the connection fails

        Example:
            body = "".join(await manager.get({"endpoint": "http://example.com"}))
        """
        return await self._run(options, Method.GET, self._read_chunks)

    async def post(self, options: Options, payload: Any) -> httpx.Response:
        """Send payload as JSON in a POST request.

        Args:
            options: Endpoint and optional credentials
            payload: JSON-serializable body

        Returns:
            httpx.Response: Final response, body already drained
        """
        return await self._run(options, Method.POST, self._drain, payload=payload)

    async def put(self, options: Options, payload: Any) -> httpx.Response:
        """Send payload as JSON in a PUT request.

        Args:
            options: Endpoint and optional credentials
            payload: JSON-serializable body

        Returns:
            httpx.Response: Final response, body already drained
        """
        return await self._run(options, Method.PUT, self._drain, payload=payload)

    async def delete(self, options: Options) -> httpx.Response:
        """Send a DELETE request and return the drained response."""
        return await self._run(options, Method.DELETE, self._drain)

    async def exists(self, options: Options) -> httpx.Response:
        """Send a HEAD request and return the response.

        Any status below 400 (after redirects) resolves, so callers decide
        what counts as existing from response.status_code.
        """
        return await self._run(options, Method.HEAD, self._drain)

    async def download(self, options: Options, file_path: str) -> httpx.Response:
        """Stream the response body of a GET request into a local file.

        The file is only created once a successful response arrives. If the
        body stream breaks halfway, the partial file is removed.

        Args:
            options: Endpoint and optional credentials
            file_path: Local destination, overwritten if it exists

        Returns:
            httpx.Response: Final response, resolved once the file is written
        """
        async def write_file(response: httpx.Response) -> httpx.Response:
            return await self._write_file(response, file_path)

        return await self._run(options, Method.GET, write_file)

    async def upload(self, options: Options, file_path: str) -> str:
        """Stream a local file as the body of a POST request.

        The local path is sent in the "filename" header. When redirected,
        the whole file is sent again to the new location.

        Args:
            options: Endpoint and optional credentials
            file_path: Local file to send

        Returns:
            str: Response body text

        Raises:
            FileNotFoundError: If file_path does not exist, before any request
        """
        chunks = await self._run(options, Method.POST, self._read_chunks, upload_path=file_path)
        return "".join(chunks)

    # @context: Private
    @staticmethod
    def _coerce_options(options: Options) -> RequestOptions:
        if isinstance(options, RequestOptions):
            return options
        return RequestOptions.model_validate(options)

    def _client(self) -> httpx.AsyncClient:
        # @note: Redirects are followed by _run, never by httpx
        return httpx.AsyncClient(
            timeout=self.request_config.timeout,
            follow_redirects=False,
            transport=self.transport
        )

    async def _run(self, options: Options, method: Method, on_success: SuccessHandler,
                   payload: Any = NO_PAYLOAD, upload_path: Optional[str] = None) -> Any:
        """Drive one call chain until it succeeds, fails or runs out of redirects.

        Each iteration is one hop: build the request, send it, classify the
        response. Only a redirect starts another iteration, and the guard
        bounds how many of those can happen.

        Args:
            options: Options of the first hop
            method: Verb used for every hop
            on_success: Coroutine consuming the successful response
            payload: JSON body for POST/PUT
            upload_path: Local file streamed as the body of every hop

        Returns:
            Any: Whatever on_success returns

        Raises:
            HTTPFailureException: On a status code >= 400
            RedirectExhaustedException: When the redirect budget is spent
            InvalidRedirectException: On a redirect without Location
            TransportException: When the connection fails
        """
        options = self._coerce_options(options)
        guard = RedirectGuard(self.request_config.max_redirects)
        upload_size = os.path.getsize(upload_path) if upload_path is not None else None

        async with self._client() as client:
            while True:
                descriptor = build_request(
                    options, method, payload,
                    filename=upload_path,
                    content_length=upload_size
                )
                logger.debug(f"{method.value} {descriptor.url} (redirects so far: {guard.hops})")

                try:
                    with self._open_upload(upload_path) as upload_file:
                        content = self._iter_file(upload_file) if upload_file is not None else descriptor.content
                        async with client.stream(
                            descriptor.method.value,
                            descriptor.url,
                            headers=descriptor.headers,
                            content=content
                        ) as response:
                            outcome = classify(response.status_code)

                            if outcome is Classification.SUCCESS:
                                result = await on_success(response)
                                logger.info(f"{method.value} {descriptor.url} completed with {response.status_code}")
                                return result

                            if outcome is Classification.FAILURE:
                                logger.warning(
                                    f"{method.value} {descriptor.url} failed with {response.status_code}")
                                raise HTTPFailureException(response.status_code, response.reason_phrase)

                            guard.check_and_consume()
                            options = next_hop(options, response)
                except httpx.TransportError as e:
                    logger.error(f"{method.value} {descriptor.url} transport failure: {e!r}")
                    raise TransportException(
                        f"Transport failure on {method.value} {descriptor.url}: {e!r}", original=e) from e

    @staticmethod
    def _open_upload(upload_path: Optional[str]):
        if upload_path is None:
            return contextlib.nullcontext()
        return open(upload_path, "rb")

    async def _iter_file(self, upload_file):
        while True:
            chunk = await asyncio.to_thread(upload_file.read, self.request_config.chunk_size)
            if not chunk:
                break
            yield chunk

    @staticmethod
    async def _read_chunks(response: httpx.Response) -> List[str]:
        return [chunk async for chunk in response.aiter_text()]

    @staticmethod
    async def _drain(response: httpx.Response) -> httpx.Response:
        # @note: Read to the end so the connection is released and .content stays usable
        await response.aread()
        return response

    async def _write_file(self, response: httpx.Response, file_path: str) -> httpx.Response:
        """Pipe the response body into file_path.

        The partial file is removed on any abort, cancellation included.

        Raises:
            OSError: If the file cannot be written
            httpx.TransportError: If the body stream breaks; the partial file
                is removed first
        """
        try:
            with open(file_path, "wb") as stream:
                async for chunk in response.aiter_bytes(self.request_config.chunk_size):
                    await asyncio.to_thread(stream.write, chunk)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.remove(file_path)
            logger.error(f"Download to {file_path} aborted, partial file removed")
            raise

        logger.debug(f"Wrote response body of {response.url} to {file_path}")
        return response
