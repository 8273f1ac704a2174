from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, field_validator
from roi.connection.endpoint import resolve
from roi.connection.types import Method


class RequestOptions(BaseModel):
    """What the caller wants to reach, independent of any single hop.

    Options are immutable: a redirect produces a new instance pointing at the
    Location instead of rewriting this one.

    Attributes:
        endpoint (str): Absolute http/https URI of the target
        username (Optional[str]): Enables Basic auth when set
        password (Optional[str]): Password paired with username

    Example:
        ```
        options = RequestOptions(
            endpoint="https://api.example.com/items",
            username="admin",
            password="secret"
        )
        ```
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    endpoint: str
    username: Optional[str] = None
    password: Optional[str] = None

    @field_validator('endpoint')
    def validate_endpoint(cls, v):
        """Reject endpoints that cannot be resolved into transport parameters."""
        resolve(v)
        return v.strip()

    def __repr__(self):
        # @note: Keep the password out of logs and tracebacks
        return f"<RequestOptions endpoint={self.endpoint} username={self.username}>"

    def __str__(self):
        return f"RequestOptions(endpoint={self.endpoint}, username={self.username})"


class RequestDescriptor(BaseModel):
    """Transport-ready description of a single hop.

    Attributes:
        method (Method): HTTP verb to send
        url (str): Fully resolved URL of the hop
        headers (Dict[str, str]): Headers to send, defaults already injected
        content (Optional[bytes]): Encoded body, None when there is none or
            when the body is streamed from a file
    """
    model_config = ConfigDict(frozen=True)

    method: Method
    url: str
    headers: Dict[str, str]
    content: Optional[bytes] = None


class RequestConfig:
    """Configuration settings for call chains.

    Attributes:
        timeout (int): Maximum time in seconds to wait on the transport
        max_redirects (int): Redirect hops allowed per call chain before failing
        chunk_size (int): Bytes per chunk when streaming files

    Example:
        ```
        config = RequestConfig(
            timeout=60,
            max_redirects=5
        )
        ```
    """

    def __init__(self, timeout: int = 30, max_redirects: int = 3, chunk_size: int = 64 * 1024):
        if max_redirects < 0:
            raise ValueError("max_redirects must not be negative")
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

        self.timeout: int = timeout
        self.max_redirects: int = max_redirects
        self.chunk_size: int = chunk_size
