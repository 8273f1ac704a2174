import json
import base64
from urllib.parse import quote
from typing import Any, Dict, Optional
from roi.connection.endpoint import resolve
from roi.connection.models import RequestDescriptor, RequestOptions
from roi.connection.types import Method

NO_PAYLOAD = object()


def basic_auth(options: RequestOptions) -> str:
    """Build the Authorization header value for the given options.

    Args:
        options: Request options carrying the optional credentials

    Returns:
        str: "Basic <base64(username:password)>" when a username is set,
             an empty string otherwise
    """
    if not options.username:
        return ""
    credentials = f"{options.username}:{options.password or ''}"
    return "Basic " + base64.b64encode(credentials.encode("utf-8")).decode("ascii")


def default_headers(options: RequestOptions) -> Dict[str, str]:
    """Headers injected into every hop, whatever the verb."""
    return {
        "Accept": "application/json,text/plain",
        "Content-type": "application/json",
        "Authorization": basic_auth(options),
    }


def encode_payload(payload: Any) -> bytes:
    """Serialize a payload as compact UTF-8 JSON ({"a":1}, no spaces)."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def build_request(options: RequestOptions, method: Method, payload: Any = NO_PAYLOAD,
                  filename: Optional[str] = None, content_length: Optional[int] = None) -> RequestDescriptor:
    """Merge options, verb and body metadata into a transport-ready descriptor.

    Performs no I/O. Upload bodies are streamed by the caller, so only their
    filename and size end up in the headers.

    Args:
        options: Resolved request options for this hop
        method: HTTP verb to send
        payload: JSON-serializable body, only used for POST and PUT
        filename: Local file path advertised, percent-encoded, in the "filename" header (upload)
        content_length: Size in bytes of a streamed body (upload)

    Returns:
        RequestDescriptor: Method, URL, headers and encoded body of the hop

    Raises:
        ValueError: If the endpoint cannot be resolved
        TypeError: If the payload is not JSON serializable
    """
    endpoint = resolve(options.endpoint)
    headers = default_headers(options)
    content = None

    if method.sends_payload and payload is not NO_PAYLOAD:
        content = encode_payload(payload)
        headers["Content-Length"] = str(len(content))

    if filename is not None:
        # @note: Header values are ASCII on the wire, so the path is percent-encoded
        headers["filename"] = quote(filename)
        if content_length is not None:
            headers["Content-Length"] = str(content_length)

    return RequestDescriptor(
        method=method,
        url=endpoint.url,
        headers=headers,
        content=content
    )
