from typing import Optional


class RoiException(Exception):
    """Base exception for every failure raised by a call chain."""
    pass


class TransportException(RoiException):
    """Exception raised when the connection itself fails (DNS, refused, reset).

    Attributes:
        original (Exception): The error raised by the underlying transport
    """

    def __init__(self, message: str, original: Optional[Exception] = None):
        super().__init__(message)
        self.original = original


class HTTPFailureException(RoiException):
    """Exception raised when the server answers with a status code >= 400.

    Attributes:
        status_code (int): HTTP status code of the failing response
        status_message (str): Reason phrase sent with the status code
    """

    def __init__(self, status_code: int, status_message: str):
        super().__init__(f"[{status_code}] - {status_message}")
        self.status_code = status_code
        self.status_message = status_message


class RedirectExhaustedException(RoiException):
    """Exception raised when a call chain is redirected more times than allowed."""
    pass


class InvalidRedirectException(RoiException):
    """Exception raised when a redirect response carries no Location header."""
    pass
