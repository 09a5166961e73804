__version__ = "0.1.0"

from formpost.errors import (
    UploadError,
    InvalidParameterName,
    FileReadError,
    EncodingError,
    UnsupportedScheme,
    MalformedURL,
    TransportError,
    ConnectFailed,
    TLSNegotiationError,
    SendFailed,
    ProtocolError,
    NonSuccessStatus,
)
from formpost.models import UploadRequest, UploadResult
from formpost.multipart import build_body, generate_boundary
from formpost.validation import check_parameters
from formpost.uploader import Uploader, send_request
from formpost.logs import setup_logging

__all__ = [
    "__version__",
    "Uploader",
    "send_request",
    "UploadRequest",
    "UploadResult",
    "build_body",
    "generate_boundary",
    "check_parameters",
    "setup_logging",
    "UploadError",
    "InvalidParameterName",
    "FileReadError",
    "EncodingError",
    "UnsupportedScheme",
    "MalformedURL",
    "TransportError",
    "ConnectFailed",
    "TLSNegotiationError",
    "SendFailed",
    "ProtocolError",
    "NonSuccessStatus",
]
