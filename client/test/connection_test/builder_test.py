import base64
import pytest
from roi.connection.builder import basic_auth, build_request, encode_payload
from roi.connection.models import RequestOptions
from roi.connection.types import Method


@pytest.fixture
def options():
    return RequestOptions(endpoint="https://api.example.com/items")


@pytest.fixture
def auth_options():
    return RequestOptions(endpoint="https://api.example.com/items", username="user", password="pass")


def test_basic_auth_with_credentials(auth_options):
    """Test the Authorization value is Basic base64(user:pass)."""
    assert basic_auth(auth_options) == "Basic " + base64.b64encode(b"user:pass").decode("ascii")


def test_basic_auth_without_username(options):
    """Test no username gives an empty Authorization value."""
    assert basic_auth(options) == ""


def test_basic_auth_without_password():
    """Test a missing password is encoded as empty."""
    options = RequestOptions(endpoint="http://example.com", username="user")

    assert basic_auth(options) == "Basic " + base64.b64encode(b"user:").decode("ascii")


def test_encode_payload_is_compact():
    """Test payloads are encoded without whitespace."""
    assert encode_payload({"a": 1}) == b'{"a":1}'
    assert encode_payload([1, "é"]) == '[1,"é"]'.encode("utf-8")


@pytest.mark.parametrize("method", [Method.GET, Method.DELETE, Method.HEAD])
def test_build_request_default_headers(options, method):
    """Test every verb gets the default headers and no body."""
    descriptor = build_request(options, method)

    assert descriptor.method == method
    assert descriptor.url == "https://api.example.com:443/items"
    assert descriptor.headers == {
        "Accept": "application/json,text/plain",
        "Content-type": "application/json",
        "Authorization": "",
    }
    assert descriptor.content is None


@pytest.mark.parametrize("method", [Method.POST, Method.PUT])
def test_build_request_with_payload(auth_options, method):
    """Test POST and PUT carry the JSON body and its byte length."""
    descriptor = build_request(auth_options, method, {"name": "café"})

    assert descriptor.content == '{"name":"café"}'.encode("utf-8")
    assert descriptor.headers["Content-Length"] == str(len(descriptor.content))
    assert descriptor.headers["Content-Length"] == "16"
    assert descriptor.headers["Authorization"].startswith("Basic ")


def test_build_request_ignores_payload_for_get(options):
    """Test a payload is never attached to a GET."""
    descriptor = build_request(options, Method.GET, {"a": 1})

    assert descriptor.content is None
    assert "Content-Length" not in descriptor.headers


def test_build_request_upload_headers(options):
    """Test upload metadata lands in the headers and the body stays with the caller."""
    descriptor = build_request(options, Method.POST, filename="/tmp/data.csv", content_length=42)

    assert descriptor.headers["filename"] == "/tmp/data.csv"
    assert descriptor.headers["Content-Length"] == "42"
    assert descriptor.content is None


def test_build_request_unserializable_payload(options):
    """Test a payload JSON cannot encode raises TypeError."""
    with pytest.raises(TypeError):
        build_request(options, Method.POST, {"when": object()})


def test_build_request_encodes_non_ascii_filename(options):
    """Test a non-ASCII upload path is percent-encoded in the filename header."""
    descriptor = build_request(options, Method.POST, filename="/tmp/données/café.txt", content_length=3)

    assert descriptor.headers["filename"] == "/tmp/donn%C3%A9es/caf%C3%A9.txt"
    assert descriptor.headers["filename"].isascii()
