from typing import Any, List, Optional
import httpx
from roi.connection import ConnectionManager, Options
from roi.connection.models import RequestConfig


async def get(options: Options, config: Optional[RequestConfig] = None) -> List[str]:
    """Send a GET request and collect the response body.

    Args:
        options: Endpoint and optional credentials
        config: Call settings. If None, default settings will be used.

    Returns:
        List[str]: Decoded text chunks in the order they arrived

    Raises:
        HTTPFailureException: On a status code >= 400
        RedirectExhaustedException: When redirected too many times
        TransportException: When the connection fails
    """
    return await ConnectionManager(request_config=config).get(options)


async def post(options: Options, payload: Any, config: Optional[RequestConfig] = None) -> httpx.Response:
    """Send payload as JSON in a POST request.

    Args:
        options: Endpoint and optional credentials
        payload: JSON-serializable body
        config: Call settings. If None, default settings will be used.

    Returns:
        httpx.Response: Final response, body already drained

    Raises:
        HTTPFailureException: On a status code >= 400
        RedirectExhaustedException: When redirected too many times
        TransportException: When the connection fails
    """
    return await ConnectionManager(request_config=config).post(options, payload)


async def put(options: Options, payload: Any, config: Optional[RequestConfig] = None) -> httpx.Response:
    """Send payload as JSON in a PUT request.

    Args:
        options: Endpoint and optional credentials
        payload: JSON-serializable body
        config: Call settings. If None, default settings will be used.

    Returns:
        httpx.Response: Final response, body already drained

    Raises:
        HTTPFailureException: On a status code >= 400
        RedirectExhaustedException: When redirected too many times
        TransportException: When the connection fails
    """
    return await ConnectionManager(request_config=config).put(options, payload)


async def delete(options: Options, config: Optional[RequestConfig] = None) -> httpx.Response:
    """Send a DELETE request.

    Args:
        options: Endpoint and optional credentials
        config: Call settings. If None, default settings will be used.

    Returns:
        httpx.Response: Final response, body already drained

    Raises:
        HTTPFailureException: On a status code >= 400
        RedirectExhaustedException: When redirected too many times
        TransportException: When the connection fails
    """
    return await ConnectionManager(request_config=config).delete(options)


async def exists(options: Options, config: Optional[RequestConfig] = None) -> httpx.Response:
    """Send a HEAD request.

    Args:
        options: Endpoint and optional credentials
        config: Call settings. If None, default settings will be used.

    Returns:
        httpx.Response: Final response, status below 400

    Raises:
        HTTPFailureException: On a status code >= 400
        RedirectExhaustedException: When redirected too many times
        TransportException: When the connection fails
    """
    return await ConnectionManager(request_config=config).exists(options)


async def download(options: Options, file_path: str, config: Optional[RequestConfig] = None) -> httpx.Response:
    """Stream the response body of a GET request into a local file.

    Args:
        options: Endpoint and optional credentials
        file_path: Local destination, overwritten if it exists
        config: Call settings. If None, default settings will be used.

    Returns:
        httpx.Response: Final response, resolved once the file is written

    Raises:
        HTTPFailureException: On a status code >= 400, the file is not created
        RedirectExhaustedException: When redirected too many times
        TransportException: When the connection fails
    """
    return await ConnectionManager(request_config=config).download(options, file_path)


async def upload(options: Options, file_path: str, config: Optional[RequestConfig] = None) -> str:
    """Stream a local file as the body of a POST request.

    Args:
        options: Endpoint and optional credentials
        file_path: Local file to send
        config: Call settings. If None, default settings will be used.

    Returns:
        str: Response body text

    Raises:
        FileNotFoundError: If file_path does not exist, before any request
        HTTPFailureException: On a status code >= 400
        RedirectExhaustedException: When redirected too many times
        TransportException: When the connection fails
    """
    return await ConnectionManager(request_config=config).upload(options, file_path)
