from roi.api import delete, download, exists, get, post, put, upload
from roi.connection import ConnectionManager
from roi.connection.models import RequestConfig, RequestOptions
from roi.exceptions import (
    HTTPFailureException,
    InvalidRedirectException,
    RedirectExhaustedException,
    RoiException,
    TransportException,
)

__all__ = [
    "get",
    "post",
    "put",
    "delete",
    "exists",
    "download",
    "upload",
    "ConnectionManager",
    "RequestConfig",
    "RequestOptions",
    "RoiException",
    "TransportException",
    "HTTPFailureException",
    "RedirectExhaustedException",
    "InvalidRedirectException",
]
