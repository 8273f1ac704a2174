from urllib.parse import urlsplit
from pydantic import BaseModel, ConfigDict

SUPPORTED_SCHEMES = ("http", "https")
DEFAULT_PORTS = {"http": 80, "https": 443}


class Endpoint(BaseModel):
    """Transport parameters extracted from an endpoint URI.

    Attributes:
        scheme (str): Either "http" or "https", selects plain or TLS transport
        host (str): Hostname without port or credentials
        port (int): Explicit port, or the scheme default when the URI omits it
        path (str): Path plus query string, "/" when the URI has none
    """
    model_config = ConfigDict(frozen=True)

    scheme: str
    host: str
    port: int
    path: str

    @property
    def url(self) -> str:
        # @note: IPv6 literals need their brackets back
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.scheme}://{host}:{self.port}{self.path}"


def resolve(endpoint: str) -> Endpoint:
    """Parse an absolute endpoint URI into its transport parameters.

    Args:
        endpoint: Absolute http/https URI

    Returns:
        Endpoint: Parsed scheme, host, port and path

    Raises:
        ValueError: If the URI is not absolute, has no host, an invalid port,
                    or a scheme other than http/https

    Example:
        >>> resolve("http://example.com:8080/items?page=2")
        Endpoint(scheme='http', host='example.com', port=8080, path='/items?page=2')
    """
    if not isinstance(endpoint, str) or not endpoint.strip():
        raise ValueError("Endpoint must be a non-empty string")

    # @note: urlsplit keeps ";params" of the last segment inside .path
    uri = urlsplit(endpoint.strip())
    if not all([uri.scheme, uri.hostname]):
        raise ValueError(f"Invalid endpoint (expected an absolute URI): {endpoint}")

    scheme = uri.scheme.lower()
    if scheme not in SUPPORTED_SCHEMES:
        raise ValueError(f"Unsupported scheme '{uri.scheme}' in endpoint: {endpoint}")

    # @note: urlsplit raises ValueError itself for out of range ports
    port = uri.port or DEFAULT_PORTS[scheme]

    path = uri.path or "/"
    if uri.query:
        path = f"{path}?{uri.query}"

    return Endpoint(scheme=scheme, host=uri.hostname, port=port, path=path)
