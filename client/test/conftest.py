import socket
import threading
import time
import flask
import pytest
from urllib.parse import unquote
from werkzeug.serving import make_server

ALL_METHODS = ['GET', 'POST', 'PUT', 'DELETE', 'HEAD']
FILE_BYTES = bytes(range(256)) * 1024


class LiveServerThread(threading.Thread):
    def __init__(self, app, host='127.0.0.1'):
        super().__init__()
        self.daemon = True  # @note: Allow main program to exit even if this thread is running
        self.app = app
        self.host = host
        # @note: Bind to port 0 to let the OS choose a free port
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind((self.host, 0))
            self.port = s.getsockname()[1]

        self.server = make_server(
            self.host, self.port, self.app, threaded=True)
        self.ctx = self.app.app_context()
        self.url = f"http://{self.host}:{self.port}"

    def run(self):
        self.ctx.push()
        self.server.serve_forever()

    def shutdown(self):
        self.server.shutdown()
        self.join(timeout=5)


@pytest.fixture(scope="session")
def roi_flask_app():
    """Fixture to create the Flask app instance the call chains talk to."""
    app = flask.Flask(__name__)
    app.testing = True

    @app.route('/hello', methods=['GET'])
    def hello():
        return flask.Response("hello", mimetype="text/plain")

    @app.route('/redirect/<int:hops>', methods=ALL_METHODS)
    def redirect_chain(hops):
        body = flask.request.get_data(as_text=True)
        if hops > 0:
            # @note: Relative Location, resolved by the client against the current endpoint
            return flask.redirect(f"/redirect/{hops - 1}", code=302)
        return flask.jsonify({
            "method": flask.request.method,
            "body": body,
        })

    @app.route('/status/<int:code>', methods=ALL_METHODS)
    def status(code):
        flask.request.get_data()
        return flask.Response("status", status=code)

    @app.route('/no-location', methods=['GET'])
    def no_location():
        return flask.Response("", status=302)

    @app.route('/headers', methods=ALL_METHODS)
    def headers():
        flask.request.get_data()
        return flask.jsonify({
            "accept": flask.request.headers.get("Accept"),
            "content_type": flask.request.headers.get("Content-Type"),
            "authorization": flask.request.headers.get("Authorization"),
            "content_length": flask.request.headers.get("Content-Length"),
            "filename": flask.request.headers.get("filename"),
        })

    @app.route('/echo', methods=['POST', 'PUT'])
    def echo():
        return flask.jsonify({
            "method": flask.request.method,
            "body": flask.request.get_data(as_text=True),
            "content_length": flask.request.headers.get("Content-Length"),
        }), 201

    @app.route('/resource', methods=['DELETE'])
    def resource():
        return "", 204

    @app.route('/file', methods=['GET'])
    def file():
        return flask.Response(FILE_BYTES, mimetype="application/octet-stream")

    @app.route('/upload', methods=['POST'])
    def upload():
        body = flask.request.get_data(as_text=True)
        return f"{unquote(flask.request.headers.get('filename'))}|{body}"

    @app.route('/upload-moved', methods=['POST'])
    def upload_moved():
        flask.request.get_data()
        return flask.redirect("/upload", code=307)

    return app


@pytest.fixture(scope="session")
def live_server(roi_flask_app):
    """Fixture to start the Flask app on a live server and yield its base URL."""
    server_thread = LiveServerThread(roi_flask_app)
    server_thread.start()
    time.sleep(0.1)
    yield server_thread.url
    server_thread.shutdown()


@pytest.fixture
def closed_port():
    """Fixture yielding a local port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        port = s.getsockname()[1]
    return port


@pytest.fixture
def file_bytes():
    """Fixture returning the exact body served by /file."""
    return FILE_BYTES
