"""Shared fixtures: an in-process resumable upload endpoint."""

import json
import os
import re
import shutil
import tempfile
import uuid
from http.server import BaseHTTPRequestHandler, HTTPServer
from threading import Thread
from typing import Any, Callable, Optional
from urllib.parse import parse_qs, urlparse

import pytest

TOKEN = "test-token"

_CONTENT_RANGE = re.compile(r"bytes (\d+)-(\d+)/(\d+)")
_STATUS_QUERY = re.compile(r"bytes \*/(\d+)")


def error_body(status: int, message: str) -> bytes:
    return json.dumps({"error": {"code": status, "message": message, "errors": []}}).encode()


class FakeDriveServer:
    """Resumable endpoint that keeps uploads in memory.

    Knobs let tests force the failure modes the client must handle.
    """

    def __init__(self, base_path: str = "/upload/files"):
        self.base_path = base_path
        self.sessions: dict[str, dict[str, Any]] = {}
        self.requests: list[tuple[str, Optional[str], int]] = []
        self.omit_location = False
        self.reject_chunk_at: Optional[int] = None
        self.complete_after_bytes: Optional[int] = None
        self.range_override: Optional[str] = None
        self.on_chunk: Optional[Callable[[int, int], None]] = None

    def add_session(self, data: bytes = b"", complete: bool = False) -> str:
        """Pre-create a session as a previous run would have left it."""
        upload_id = uuid.uuid4().hex
        self.sessions[upload_id] = {
            "name": "seeded",
            "data": bytearray(data),
            "complete": complete,
        }
        return upload_id

    def chunk_requests(self) -> list[tuple[str, Optional[str], int]]:
        return [r for r in self.requests if r[0] == "PUT" and r[1] and "*" not in r[1]]

    def handle_request(
        self, method: str, path: str, headers: dict[str, str], body: bytes
    ) -> tuple[int, dict[str, str], bytes]:
        headers = {k.lower(): v for k, v in headers.items()}
        self.requests.append((method, headers.get("content-range"), len(body)))

        if headers.get("authorization") != f"Bearer {TOKEN}":
            return (401, {}, error_body(401, "Invalid Credentials"))

        parsed = urlparse(path)
        query = parse_qs(parsed.query)
        if parsed.path != self.base_path or query.get("uploadType") != ["resumable"]:
            return (404, {}, error_body(404, "Not Found"))

        if method == "POST":
            return self._handle_create(headers, body)

        upload_id = query.get("upload_id", [None])[0]
        session = self.sessions.get(upload_id)
        if method != "PUT" or session is None:
            return (404, {}, error_body(404, "Upload session not found"))
        return self._handle_put(session, headers, body)

    def _handle_create(self, headers, body):
        try:
            metadata = json.loads(body)
        except ValueError:
            return (400, {}, error_body(400, "Invalid JSON payload"))
        upload_id = uuid.uuid4().hex
        self.sessions[upload_id] = {
            "name": metadata.get("name"),
            "mimeType": metadata.get("mimeType"),
            "data": bytearray(),
            "complete": False,
        }
        response_headers = {}
        if not self.omit_location:
            response_headers["Location"] = (
                f"{self.base_path}?uploadType=resumable&upload_id={upload_id}"
            )
        return (200, response_headers, b"")

    def _handle_put(self, session, headers, body):
        content_range = headers.get("content-range", "")
        received = len(session["data"])

        if _STATUS_QUERY.fullmatch(content_range):
            if session["complete"]:
                return (200, {"Content-Type": "application/json"}, b'{"id": "done"}')
            return (308, self._range_headers(received), b"")

        match = _CONTENT_RANGE.fullmatch(content_range)
        if not match:
            return (400, {}, error_body(400, f"Bad Content-Range {content_range!r}"))
        start, end, total = (int(g) for g in match.groups())

        if self.on_chunk:
            self.on_chunk(start, end)
        if self.reject_chunk_at == start:
            return (503, {}, error_body(503, "Backend Error"))
        if start != received or end - start + 1 != len(body):
            return (400, {}, error_body(400, "Chunk does not continue the upload"))

        session["data"].extend(body)
        received = len(session["data"])
        if received == total or (
            self.complete_after_bytes is not None and received >= self.complete_after_bytes
        ):
            session["complete"] = True
            return (200, {"Content-Type": "application/json"}, b'{"id": "done"}')
        return (308, self._range_headers(received), b"")

    def _range_headers(self, received: int) -> dict[str, str]:
        if self.range_override is not None:
            return {"Range": self.range_override}
        if received == 0:
            return {}
        return {"Range": f"bytes=0-{received - 1}"}


class FakeDriveHandler(BaseHTTPRequestHandler):
    """HTTP request handler backed by a FakeDriveServer."""

    drive: FakeDriveServer = None

    def do_POST(self) -> None:
        self._handle_request("POST")

    def do_PUT(self) -> None:
        self._handle_request("PUT")

    def _handle_request(self, method: str) -> None:
        content_length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(content_length) if content_length > 0 else b""

        status, response_headers, response_body = self.drive.handle_request(
            method, self.path, dict(self.headers), body
        )

        self.send_response(status)
        for key, value in response_headers.items():
            self.send_header(key, value)
        self.send_header("Content-Length", str(len(response_body)))
        self.end_headers()
        if response_body:
            self.wfile.write(response_body)

    def log_message(self, format: str, *args: Any) -> None:
        """Suppress default logging."""
        pass


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def drive_server():
    """Start a fake resumable endpoint; yields (upload_url, FakeDriveServer)."""
    drive = FakeDriveServer()

    class Handler(FakeDriveHandler):
        pass

    Handler.drive = drive

    server = HTTPServer(("127.0.0.1", 0), Handler)
    port = server.server_address[1]
    thread = Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield f"http://127.0.0.1:{port}{drive.base_path}", drive

    server.shutdown()
    server.server_close()


@pytest.fixture
def make_file(temp_dir):
    """Factory writing a file of ``size`` patterned bytes into temp_dir."""

    def _make(size: int, name: str = "movie.mov") -> str:
        path = os.path.join(temp_dir, name)
        with open(path, "wb") as f:
            f.write(bytes(i % 251 for i in range(size)))
        return path

    return _make


@pytest.fixture
def session_url(drive_server):
    """Build the URL of a session held by the fake server."""
    url, _ = drive_server

    def _url(upload_id: str) -> str:
        return f"{url}?uploadType=resumable&upload_id={upload_id}"

    return _url


@pytest.fixture
def token():
    """Bearer token the fake endpoint accepts."""
    return TOKEN
