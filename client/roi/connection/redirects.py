import logging
from urllib.parse import urljoin
import httpx
from roi.connection.models import RequestOptions
from roi.exceptions import InvalidRedirectException, RedirectExhaustedException

logger = logging.getLogger(__name__)

DEFAULT_MAX_REDIRECTS = 3


class RedirectGuard:
    """Bounds the number of redirect hops of one call chain.

    A guard is created for every top-level call and dropped with it, so
    concurrent chains never consume each other's budget.

    Attributes:
        max_redirects (int): Hops allowed before the chain fails
        hops (int): Hops consumed so far

    Example:
        >>> guard = RedirectGuard(max_redirects=1)
        >>> guard.check_and_consume()
        >>> guard.check_and_consume()
        Traceback (most recent call last):
        ...
        roi.exceptions.RedirectExhaustedException: Maximum redirects reached.
    """

    def __init__(self, max_redirects: int = DEFAULT_MAX_REDIRECTS):
        self.max_redirects = max_redirects
        self.hops = 0

    @property
    def exhausted(self) -> bool:
        return self.hops >= self.max_redirects

    def check_and_consume(self) -> None:
        """Consume one hop of the budget.

        Raises:
            RedirectExhaustedException: If the budget is already spent. The
                counter is reset to zero before raising.
        """
        if self.exhausted:
            logger.warning(f"Redirect budget of {self.max_redirects} exhausted")
            self.hops = 0
            raise RedirectExhaustedException("Maximum redirects reached.")
        self.hops += 1


def next_hop(options: RequestOptions, response: httpx.Response) -> RequestOptions:
    """Derive the options of the next hop from a redirect response.

    The Location header is resolved against the current endpoint, so relative
    locations ("/login", "../v2") land on the same host.

    Args:
        options: Options used for the hop that got redirected
        response: The 3xx response

    Returns:
        RequestOptions: Copy of options pointing at the new location

    Raises:
        InvalidRedirectException: If the response has no Location header
        ValueError: If the location does not resolve to an http/https URI
    """
    location = response.headers.get("location")
    if not location:
        raise InvalidRedirectException(
            f"Redirect [{response.status_code}] from {options.endpoint} has no Location header")

    target = urljoin(options.endpoint, location)
    logger.debug(f"Redirect [{response.status_code}] {options.endpoint} -> {target}")
    return RequestOptions(endpoint=target, username=options.username, password=options.password)
