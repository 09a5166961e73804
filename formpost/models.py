from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .errors import NonSuccessStatus

SUCCESS_STATUS = 200


@dataclass(frozen=True)
class UploadRequest:
    """Input of a single upload: target URL, form fields and the file to attach."""

    url: str
    upload_file: str
    file_part_name: str
    parameters: Mapping[str, str] = field(default_factory=dict)


class UploadResult:
    """
    Outcome of a completed HTTP exchange. Header order is preserved;
    `ok` holds only for status 200 exactly.
    """

    def __init__(
        self,
        status_code: int,
        reason: str,
        http_version: str,
        headers: Iterable[tuple[str, str]],
        body: bytes,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.http_version = http_version
        self.raw_headers: list[tuple[str, str]] = list(headers)
        self._body = body

    @property
    def ok(self) -> bool:
        return self.status_code == SUCCESS_STATUS

    @property
    def headers(self) -> dict[str, str]:
        # Last-write wins while keeping access case-insensitive for callers.
        out: dict[str, str] = {}
        for name, value in self.raw_headers:
            out[name.lower()] = value
        return out

    @property
    def content(self) -> bytes:
        return self._body

    @property
    def text(self) -> str:
        encoding = "utf-8"
        ctype = self.headers.get("content-type")
        if ctype and "charset=" in ctype:
            encoding = ctype.split("charset=")[-1].split(";")[0].strip() or encoding
        try:
            return self._body.decode(encoding, errors="replace")
        except LookupError:
            return self._body.decode("utf-8", errors="replace")

    def raise_for_status(self) -> None:
        if not self.ok:
            raise NonSuccessStatus(self.status_code, self.reason)

    def __bool__(self) -> bool:
        return self.ok

    def __repr__(self) -> str:
        return f"<UploadResult [{self.status_code}] {len(self._body)} bytes>"
