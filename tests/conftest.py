"""Pytest configuration and fixtures."""

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
from formpost.models import UploadResult


@pytest.fixture
def sample_result():
    """Create a sample UploadResult object."""
    return UploadResult(
        status_code=200,
        reason="OK",
        http_version="1.1",
        headers=[
            ("Content-Type", "text/plain; charset=utf-8"),
            ("Content-Length", "9"),
        ],
        body=b"report-42",
    )


@pytest.fixture
def upload_file(tmp_path):
    """Create a small non-empty file to upload."""
    path = tmp_path / "minidump.dmp"
    path.write_bytes(b"MDMP\x00\x01\x02binary\r\n--payload")
    return str(path)


@pytest.fixture
def empty_file(tmp_path):
    """Create a zero-length file."""
    path = tmp_path / "empty.dmp"
    path.write_bytes(b"")
    return str(path)


class _RecordingHandler(BaseHTTPRequestHandler):
    """Answers every POST with the status configured on the server."""

    def do_POST(self):
        length = int(self.headers.get("Content-Length", "0"))
        body = self.rfile.read(length)
        self.server.received.append((self.path, dict(self.headers), body))
        payload = self.server.response_body
        self.send_response(self.server.status)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def upload_server():
    """
    Run a local HTTP server on an ephemeral port.

    Tests set `server.status` to choose the reply code; received requests are
    recorded in `server.received` as (path, headers, body).
    """
    server = ThreadingHTTPServer(("127.0.0.1", 0), _RecordingHandler)
    server.status = 200
    server.response_body = b"CrashID=bp-1234"
    server.received = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
