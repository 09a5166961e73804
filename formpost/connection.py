from __future__ import annotations

import socket
import ssl
from collections.abc import Iterable
from typing import BinaryIO

from .errors import (
    ConnectFailed,
    EncodingError,
    ProtocolError,
    SendFailed,
    TLSNegotiationError,
)
from .models import UploadResult

# Upper bound for the status line and each header line.
MAX_LINE = 65536


def encode_head(method: str, path: str, headers: Iterable[tuple[str, str]]) -> bytes:
    """
    Encode the request line (ASCII) and header lines (latin-1).

    Raises EncodingError for text outside those charsets, so callers can
    reject a request before any connection is opened.
    """
    try:
        lines = [f"{method} {path} HTTP/1.1\r\n".encode("ascii")]
        for name, value in headers:
            lines.append(f"{name}: {value}\r\n".encode("latin-1"))
    except UnicodeEncodeError as exc:
        raise EncodingError(f"Request head is not encodable: {exc}") from exc
    lines.append(b"\r\n")
    return b"".join(lines)


class Connection:
    """
    Single TCP/TLS connection carrying one HTTP/1.1 request.

    Use it as a context manager so the socket is closed on every exit path:

        with Connection(host, port, "https") as conn:
            result = conn.request("POST", path, headers, body)
    """

    def __init__(
        self,
        host: str,
        port: int,
        scheme: str,
        timeout: float = 10.0,
        verify: bool = True,
    ) -> None:
        self.host = host
        self.port = port
        self.scheme = scheme
        self.timeout = timeout
        self.verify = verify
        self.sock: socket.socket | ssl.SSLSocket | None = None
        self.closed = True

    def connect(self) -> None:
        raw = self._open_tcp()

        if self.scheme == "https":
            context = ssl.create_default_context()
            if not self.verify:
                context.check_hostname = False
                context.verify_mode = ssl.CERT_NONE
            context.set_alpn_protocols(["http/1.1"])
            try:
                self.sock = context.wrap_socket(raw, server_hostname=self.host)
            except (ssl.SSLError, OSError) as exc:
                raw.close()
                raise TLSNegotiationError(f"TLS handshake failed: {exc}") from exc
        else:
            self.sock = raw

        self.sock.settimeout(self.timeout)
        self.closed = False

    def request(
        self,
        method: str,
        path: str,
        headers: Iterable[tuple[str, str]],
        body: bytes | None = None,
    ) -> UploadResult:
        head = encode_head(method, path, headers)
        if self.closed or self.sock is None:
            self.connect()
        assert self.sock is not None

        try:
            self.sock.sendall(head + (body or b""))
        except OSError as exc:
            self.close()
            raise SendFailed(f"Send failed: {exc}") from exc

        try:
            with self.sock.makefile("rb") as reader:
                return self._read_response(reader)
        except OSError as exc:
            self.close()
            raise ProtocolError(f"Reading response failed: {exc}") from exc

    def _read_response(self, reader: BinaryIO) -> UploadResult:
        status_line = reader.readline(MAX_LINE)
        if not status_line:
            raise ProtocolError("Empty response")
        try:
            # e.g., HTTP/1.1 200 OK
            version, code, *rest = status_line.decode("latin-1").strip().split(" ", 2)
            if not version.startswith("HTTP/"):
                raise ValueError(version)
            status_code = int(code)
        except ValueError as exc:
            raise ProtocolError(f"Malformed status line: {status_line!r}") from exc
        reason = rest[0] if rest else ""

        headers = self._read_headers(reader)
        header_map = {name.lower(): value for name, value in headers}
        if "chunked" in header_map.get("transfer-encoding", "").lower():
            body = self._read_chunked(reader)
        elif "content-length" in header_map:
            try:
                length = int(header_map["content-length"])
            except ValueError as exc:
                raise ProtocolError("Invalid Content-Length") from exc
            body = reader.read(length)
            if len(body) < length:
                raise ProtocolError("Unexpected EOF while reading body")
        else:
            # Connection: close was requested, so EOF ends the body.
            body = reader.read()
        return UploadResult(status_code, reason, version[5:], headers, body)

    def _read_headers(self, reader: BinaryIO) -> list[tuple[str, str]]:
        headers: list[tuple[str, str]] = []
        for line in iter(lambda: reader.readline(MAX_LINE), b""):
            if line in (b"\r\n", b"\n"):
                break
            name, sep, value = line.partition(b":")
            if not sep:
                raise ProtocolError(f"Malformed header line: {line!r}")
            headers.append(
                (name.decode("latin-1").strip(), value.decode("latin-1").strip())
            )
        return headers

    def _read_chunked(self, reader: BinaryIO) -> bytes:
        chunks: list[bytes] = []
        while True:
            line = reader.readline(MAX_LINE)
            if not line:
                raise ProtocolError("Unexpected EOF in chunked body")
            try:
                size = int(line.split(b";", 1)[0].strip(), 16)
            except ValueError as exc:
                raise ProtocolError(f"Invalid chunk size line: {line!r}") from exc
            if size == 0:
                # Trailers, if any, are discarded.
                self._read_headers(reader)
                return b"".join(chunks)
            chunk = reader.read(size)
            if len(chunk) < size:
                raise ProtocolError("Unexpected EOF in chunked body")
            chunks.append(chunk)
            reader.readline(MAX_LINE)

    def close(self) -> None:
        if self.sock:
            try:
                self.sock.close()
            finally:
                self.sock = None
        self.closed = True

    def _open_tcp(self) -> socket.socket:
        try:
            return socket.create_connection(
                (self.host, self.port), timeout=self.timeout
            )
        except OSError as exc:
            raise ConnectFailed(f"TCP connection failed: {exc}") from exc

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
