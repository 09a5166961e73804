from __future__ import annotations

from collections.abc import Mapping

import structlog

from formpost import __version__
from formpost.connection import Connection, encode_head
from formpost.errors import EncodingError, UploadError
from formpost.headers import canonicalize_headers
from formpost.models import UploadRequest, UploadResult
from formpost.multipart import (
    content_type_header,
    encode_multipart,
    find_boundary_collision,
    generate_boundary,
    read_upload_file,
)
from formpost.utils import host_header, parse_url
from formpost.validation import validate_parameters

logger = structlog.get_logger("formpost.uploader")

DEFAULT_USER_AGENT = f"formpost/{__version__}"

MAX_BOUNDARY_ATTEMPTS = 8


def choose_boundary(parameters: Mapping[str, str], content: bytes) -> str:
    """Generate boundaries until one does not occur in the payload."""
    for _ in range(MAX_BOUNDARY_ATTEMPTS):
        boundary = generate_boundary()
        if not find_boundary_collision(boundary, parameters, content):
            return boundary
    raise EncodingError(
        f"No collision-free boundary found after {MAX_BOUNDARY_ATTEMPTS} attempts"
    )


class Uploader:
    """
    Sends one file plus string form fields as a multipart/form-data POST.

    Every call is independent: a new boundary, body and connection are made
    per upload and the connection is closed before the call returns.

    Args:
        timeout: Connect and read timeout in seconds
        verify: Whether to verify TLS certificates
        user_agent: Value of the User-Agent header
        headers: Extra request headers merged over the defaults
    """

    def __init__(
        self,
        timeout: float = 10.0,
        verify: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.timeout = timeout
        self.verify = verify
        self.user_agent = user_agent
        self.headers = dict(headers or {})

    def upload(
        self,
        url: str,
        parameters: Mapping[str, str] | None,
        upload_file: str,
        file_part_name: str,
    ) -> UploadResult:
        """
        Upload `upload_file` to `url` under the form field `file_part_name`.

        Args:
            url: http or https target URL
            parameters: Form fields sent before the file part
            upload_file: Path of the file to send; also used as its filename
            file_part_name: Form field name of the file part

        Returns:
            UploadResult for the completed exchange, whatever its status

        Raises:
            UploadError: a subclass naming the step that failed
        """
        parameters = parameters or {}
        validate_parameters(parameters)
        parsed, host, port, path = parse_url(url)

        content = read_upload_file(upload_file)
        boundary = choose_boundary(parameters, content)
        body = encode_multipart(parameters, file_part_name, upload_file, content, boundary)

        request_headers = canonicalize_headers(
            [
                ("Host", host_header(host, port, parsed.scheme)),
                ("User-Agent", self.user_agent),
                ("Accept", "*/*"),
                ("Accept-Encoding", "identity"),
                ("Content-Type", content_type_header(boundary)),
                ("Content-Length", str(len(body))),
                ("Connection", "close"),
            ],
            self.headers,
        )
        # Unencodable header text fails here, before any socket is opened.
        encode_head("POST", path, request_headers)

        log = logger.bind(url=url, file=upload_file)
        log.debug("upload_started", fields=len(parameters), body_bytes=len(body))
        with Connection(
            host,
            port,
            parsed.scheme,
            timeout=self.timeout,
            verify=self.verify,
        ) as conn:
            conn.connect()
            log.debug("upload_connected", host=host, port=port)
            result = conn.request("POST", path, request_headers, body)
        log.debug("upload_finished", status_code=result.status_code)
        return result

    def submit(self, request: UploadRequest) -> UploadResult:
        return self.upload(
            request.url, request.parameters, request.upload_file, request.file_part_name
        )

    def send_request(
        self,
        url: str,
        parameters: Mapping[str, str] | None,
        upload_file: str,
        file_part_name: str,
    ) -> bool:
        """
        Upload and report success as a boolean: True only for HTTP 200.
        Every UploadError is reported as False.
        """
        try:
            result = self.upload(url, parameters, upload_file, file_part_name)
        except UploadError as exc:
            logger.debug(
                "upload_failed",
                url=url,
                error=type(exc).__name__,
                message=str(exc),
            )
            return False
        return result.ok


def send_request(
    url: str,
    parameters: Mapping[str, str] | None,
    upload_file: str,
    file_part_name: str,
    **uploader_options,
) -> bool:
    return Uploader(**uploader_options).send_request(
        url, parameters, upload_file, file_part_name
    )
