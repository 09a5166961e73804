class UploadError(Exception):
    """Base error for formpost."""


class InvalidParameterName(UploadError, ValueError):
    """Raised when a form field name is empty or has disallowed characters."""


class FileReadError(UploadError, OSError):
    """Raised when the upload file is missing, unreadable, or empty."""


class EncodingError(UploadError, ValueError):
    """Raised when text cannot be converted to its wire encoding."""


class UnsupportedScheme(UploadError, ValueError):
    """Raised when the URL scheme is neither http nor https."""


class MalformedURL(UploadError, ValueError):
    """Raised when a URL cannot be split into scheme, host and path."""


class TransportError(UploadError):
    """Raised for failures in the HTTP client layer."""


class ConnectFailed(TransportError):
    """Raised when a TCP connection cannot be established."""


class TLSNegotiationError(ConnectFailed):
    """Raised when the TLS handshake fails."""


class SendFailed(TransportError):
    """Raised when the request could not be written to the socket."""


class ProtocolError(TransportError):
    """Raised when the server response cannot be parsed."""


class NonSuccessStatus(UploadError):
    """Raised when the server answers with a status other than 200."""

    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Upload rejected with HTTP {status_code} {reason}".rstrip())
