"""Tests for formpost.multipart module."""

import re

import pytest
from formpost.errors import EncodingError, FileReadError
from formpost.multipart import (
    BOUNDARY_PREFIX,
    build_body,
    content_type_header,
    encode_multipart,
    find_boundary_collision,
    generate_boundary,
    read_upload_file,
    to_wire_encoding,
    _encode_field,
    _encode_file,
)


class TestGenerateBoundary:
    """Tests for generate_boundary function."""

    def test_boundary_format(self):
        """Test boundary is 27 dashes followed by 16 uppercase hex digits."""
        boundary = generate_boundary()
        assert re.fullmatch(r"-{27}[0-9A-F]{16}", boundary)
        assert boundary.startswith(BOUNDARY_PREFIX)
        assert len(BOUNDARY_PREFIX) == 27

    def test_boundary_is_unique(self):
        """Test each call generates a fresh boundary."""
        assert generate_boundary() != generate_boundary()

    def test_boundary_zero_padded(self, mocker):
        """Test small random values are zero-padded to eight digits each."""
        mocker.patch("formpost.multipart.random.getrandbits", side_effect=[0x1A, 0xFFFFFFFF])
        assert generate_boundary() == BOUNDARY_PREFIX + "0000001AFFFFFFFF"


class TestContentTypeHeader:
    """Tests for content_type_header function."""

    def test_header_value(self):
        """Test the multipart content type carries the boundary."""
        assert content_type_header("XYZ") == "multipart/form-data; boundary=XYZ"


class TestToWireEncoding:
    """Tests for to_wire_encoding function."""

    def test_ascii(self):
        """Test ASCII text encodes unchanged."""
        assert to_wire_encoding("abc") == b"abc"

    def test_utf8(self):
        """Test non-ASCII text is encoded as UTF-8."""
        assert to_wire_encoding("café") == b"caf\xc3\xa9"

    def test_lone_surrogate_raises(self):
        """Test unencodable text raises EncodingError."""
        with pytest.raises(EncodingError):
            to_wire_encoding("\ud800")


class TestReadUploadFile:
    """Tests for read_upload_file function."""

    def test_reads_binary(self, upload_file):
        """Test file contents are returned as raw bytes."""
        assert read_upload_file(upload_file) == b"MDMP\x00\x01\x02binary\r\n--payload"

    def test_missing_file_raises(self, tmp_path):
        """Test a missing file raises FileReadError."""
        with pytest.raises(FileReadError, match="Cannot read"):
            read_upload_file(str(tmp_path / "nope.dmp"))

    def test_empty_file_raises(self, empty_file):
        """Test a zero-length file raises FileReadError."""
        with pytest.raises(FileReadError, match="empty"):
            read_upload_file(empty_file)

    def test_directory_raises(self, tmp_path):
        """Test a directory path raises FileReadError."""
        with pytest.raises(FileReadError):
            read_upload_file(str(tmp_path))


class TestEncodeHelpers:
    """Tests for the per-part helpers."""

    def test_encode_field(self):
        """Test a form field part."""
        assert _encode_field(b"name", b"John") == (
            b'Content-Disposition: form-data; name="name"\r\n\r\nJohn\r\n'
        )

    def test_encode_file(self):
        """Test a file part always uses application/octet-stream."""
        assert _encode_file(b"upload", b"a.bin", b"\x00\x01") == (
            b'Content-Disposition: form-data; name="upload"; filename="a.bin"\r\n'
            b"Content-Type: application/octet-stream\r\n\r\n\x00\x01\r\n"
        )


class TestBuildBody:
    """Tests for build_body function."""

    def test_exact_body(self, tmp_path):
        """Test the body matches the wire layout byte for byte."""
        path = tmp_path / "f.txt"
        path.write_bytes(b"XYZ")
        body = build_body({"a": "b"}, str(path), "upload", "BOUND")
        expected = (
            b"--BOUND\r\n"
            b'Content-Disposition: form-data; name="a"\r\n\r\n'
            b"b\r\n"
            b"--BOUND\r\n"
            b'Content-Disposition: form-data; name="upload"; filename="'
            + str(path).encode("utf-8")
            + b'"\r\n'
            b"Content-Type: application/octet-stream\r\n\r\n"
            b"XYZ\r\n"
            b"--BOUND--\r\n"
        )
        assert body == expected

    def test_empty_file_fails(self, empty_file):
        """Test a zero-length file fails without producing a body."""
        with pytest.raises(FileReadError):
            build_body({"a": "b"}, empty_file, "upload", "BOUND")

    def test_missing_file_fails(self, tmp_path):
        """Test a missing file fails."""
        with pytest.raises(FileReadError):
            build_body({}, str(tmp_path / "missing"), "upload", "BOUND")

    def test_fields_in_mapping_order_before_file(self, upload_file):
        """Test fields are emitted in insertion order, each as its own part."""
        params = {"zeta": "1", "alpha": "2", "mid": "3"}
        body = build_body(params, upload_file, "upload_file_minidump", "B")

        positions = [body.index(f'name="{k}"'.encode()) for k in params]
        assert positions == sorted(positions)
        assert body.count(b"--B\r\n") == 4
        assert positions[-1] < body.index(b'name="upload_file_minidump"')

    def test_no_fields(self, upload_file):
        """Test a body with only the file part."""
        body = build_body({}, upload_file, "upload", "B")
        assert body.startswith(b'--B\r\nContent-Disposition: form-data; name="upload"; filename=')
        assert body.endswith(b"\r\n--B--\r\n")

    def test_binary_content_preserved(self, tmp_path):
        """Test file bytes are inserted untouched."""
        binary = bytes(range(256))
        path = tmp_path / "blob.bin"
        path.write_bytes(binary)
        body = build_body({}, str(path), "f", "B")
        assert b"\r\n\r\n" + binary + b"\r\n--B--\r\n" in body

    def test_values_utf8_encoded(self, upload_file):
        """Test non-ASCII values go on the wire as UTF-8."""
        body = build_body({"comment": "über"}, upload_file, "f", "B")
        assert b"\r\n\r\n\xc3\xbcber\r\n" in body

    def test_filename_inserted_verbatim(self, tmp_path):
        """Test quotes in the path are not escaped."""
        path = tmp_path / 'odd"name.dmp'
        path.write_bytes(b"x")
        body = build_body({}, str(path), "f", "B")
        assert f'filename="{path}"'.encode() in body


class TestEncodeMultipart:
    """Tests for encode_multipart function."""

    def test_empty_part_name_raises(self):
        """Test an empty file part name raises EncodingError."""
        with pytest.raises(EncodingError, match="part name"):
            encode_multipart({}, "", "a.bin", b"x", "B")

    def test_empty_filename_raises(self):
        """Test an empty filename raises EncodingError."""
        with pytest.raises(EncodingError, match="file name"):
            encode_multipart({}, "f", "", b"x", "B")

    def test_empty_boundary_raises(self):
        """Test an empty boundary raises EncodingError."""
        with pytest.raises(EncodingError, match="Boundary"):
            encode_multipart({}, "f", "a.bin", b"x", "")

    def test_uses_given_filename(self):
        """Test the filename argument is used instead of a path."""
        body = encode_multipart({}, "f", "report.dmp", b"x", "B")
        assert b'name="f"; filename="report.dmp"' in body


class TestFindBoundaryCollision:
    """Tests for find_boundary_collision function."""

    def test_no_collision(self):
        """Test unrelated payloads do not collide."""
        assert find_boundary_collision("B0", {"a": "b"}, b"content") is False

    def test_collision_in_content(self):
        """Test the delimiter inside file content is detected."""
        assert find_boundary_collision("B0", {}, b"xx--B0yy") is True

    def test_collision_in_value(self):
        """Test the delimiter inside a field value is detected."""
        assert find_boundary_collision("B0", {"a": "--B0"}, b"content") is True

    def test_boundary_without_dashes_is_not_collision(self):
        """Test the bare boundary text without the leading dashes is allowed."""
        assert find_boundary_collision("B0", {"a": "B0"}, b"B0") is False
