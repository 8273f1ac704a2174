from enum import Enum


class Method(Enum):
    """HTTP verbs a call chain can issue."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    # @note: Used by exists(), body is expected to be empty
    HEAD = "HEAD"

    @property
    def sends_payload(self) -> bool:
        return self in (Method.POST, Method.PUT)


class Classification(Enum):
    """Outcome of a single response.

    Attributes:
        SUCCESS: Status below 300, the chain resolves
        REDIRECT: Status in the 3xx band, the chain moves to the Location
        FAILURE: Status 400 or above, the chain fails
    """
    SUCCESS = 0
    REDIRECT = 1
    FAILURE = 2
