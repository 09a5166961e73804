from __future__ import annotations

from collections.abc import Mapping

from .errors import InvalidParameterName


def _is_valid_name(name: str) -> bool:
    if not name:
        return False
    for ch in name:
        code = ord(ch)
        # Non-ASCII names are not supported.
        if code < 32 or ch == '"' or code > 127:
            return False
    return True


def check_parameters(parameters: Mapping[str, str]) -> bool:
    """
    Return True when every form field name can be placed in a
    Content-Disposition header as-is. Values are not inspected.
    """
    return all(_is_valid_name(name) for name in parameters)


def validate_parameters(parameters: Mapping[str, str]) -> None:
    for name in parameters:
        if not _is_valid_name(name):
            raise InvalidParameterName(f"Invalid form field name: {name!r}")
