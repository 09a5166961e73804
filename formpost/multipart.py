from __future__ import annotations

import random
from collections.abc import Mapping

from .errors import EncodingError, FileReadError

# 27 dashes, then 16 hex digits.
BOUNDARY_PREFIX = "-" * 27

FILE_CONTENT_TYPE = "application/octet-stream"


def generate_boundary() -> str:
    """Return a fresh boundary. Not cryptographically strong."""
    r0 = random.getrandbits(32)
    r1 = random.getrandbits(32)
    return f"{BOUNDARY_PREFIX}{r0:08X}{r1:08X}"


def content_type_header(boundary: str) -> str:
    return f"multipart/form-data; boundary={boundary}"


def to_wire_encoding(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise EncodingError(f"Cannot encode {text!r} as UTF-8") from exc


def read_upload_file(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            contents = f.read()
    except OSError as exc:
        raise FileReadError(f"Cannot read upload file {path!r}: {exc}") from exc
    if not contents:
        raise FileReadError(f"Upload file {path!r} is empty")
    return contents


def _encode_field(name: bytes, value: bytes) -> bytes:
    return (
        b'Content-Disposition: form-data; name="' + name + b'"\r\n\r\n'
        + value + b"\r\n"
    )


def _encode_file(name: bytes, filename: bytes, content: bytes) -> bytes:
    headers = (
        b'Content-Disposition: form-data; name="' + name
        + b'"; filename="' + filename + b'"\r\n'
        + f"Content-Type: {FILE_CONTENT_TYPE}\r\n\r\n".encode("ascii")
    )
    return headers + content + b"\r\n"


def encode_multipart(
    parameters: Mapping[str, str],
    file_part_name: str,
    filename: str,
    content: bytes,
    boundary: str,
) -> bytes:
    """
    Assemble a multipart/form-data body from already-read file bytes.

    One part is emitted per parameter, in the mapping's iteration order,
    followed by the file part and the closing boundary. The file bytes are
    inserted untouched; names are inserted verbatim.
    """
    boundary_bytes = to_wire_encoding(boundary)
    if not boundary_bytes:
        raise EncodingError("Boundary is empty")
    filename_bytes = to_wire_encoding(filename)
    if not filename_bytes:
        raise EncodingError("Upload file name is empty")
    part_name_bytes = to_wire_encoding(file_part_name)
    if not part_name_bytes:
        raise EncodingError("File part name is empty")

    delimiter = b"--" + boundary_bytes + b"\r\n"
    body_chunks: list[bytes] = []
    for name, value in parameters.items():
        body_chunks.append(delimiter)
        body_chunks.append(_encode_field(to_wire_encoding(name), to_wire_encoding(value)))
    body_chunks.append(delimiter)
    body_chunks.append(_encode_file(part_name_bytes, filename_bytes, content))
    body_chunks.append(b"--" + boundary_bytes + b"--\r\n")
    return b"".join(body_chunks)


def build_body(
    parameters: Mapping[str, str],
    upload_file: str,
    file_part_name: str,
    boundary: str,
) -> bytes:
    """
    Read `upload_file` and build the request body for it.

    The path itself is used as the part's filename. Raises FileReadError for
    a missing or empty file and EncodingError for names that do not encode.
    """
    content = read_upload_file(upload_file)
    return encode_multipart(parameters, file_part_name, upload_file, content, boundary)


def find_boundary_collision(
    boundary: str, parameters: Mapping[str, str], content: bytes
) -> bool:
    marker = b"--" + to_wire_encoding(boundary)
    if marker in content:
        return True
    return any(marker in to_wire_encoding(value) for value in parameters.values())
