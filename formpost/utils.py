from __future__ import annotations

from urllib.parse import quote, urlparse

from .errors import MalformedURL, UnsupportedScheme

DEFAULT_PORTS = {"http": 80, "https": 443}

# Characters left as-is when percent-encoding; "%" keeps existing escapes intact.
_PATH_SAFE = "/%:@!$&'()*+,;=~"
_QUERY_SAFE = _PATH_SAFE + "?"


def _ascii_host(host: str, url: str) -> str:
    if host.isascii():
        return host
    try:
        return host.encode("idna").decode("ascii")
    except UnicodeError as exc:
        raise MalformedURL(f"Cannot IDNA-encode host of {url!r}: {exc}") from exc


def parse_url(url: str):
    """
    Split `url` into (parsed, host, port, path).

    The host comes back ASCII (IDNA for international names) and the path,
    query included, is percent-encoded, so both can go on the wire as-is.
    """
    try:
        parsed = urlparse(url)
    except ValueError as exc:
        raise MalformedURL(f"Cannot parse URL {url!r}: {exc}") from exc
    if parsed.scheme not in DEFAULT_PORTS:
        raise UnsupportedScheme("Only http and https schemes are supported")
    host = parsed.hostname or ""
    if not host:
        raise MalformedURL(f"URL has no host: {url!r}")
    host = _ascii_host(host, url)
    try:
        port = parsed.port
    except ValueError as exc:
        raise MalformedURL(f"Invalid port in URL {url!r}") from exc
    if port is None:
        port = DEFAULT_PORTS[parsed.scheme]
    elif port == 0:
        raise MalformedURL(f"Invalid port in URL {url!r}")
    path = quote(parsed.path, safe=_PATH_SAFE) or "/"
    if parsed.query:
        path = f"{path}?{quote(parsed.query, safe=_QUERY_SAFE)}"
    return parsed, host, port, path


def host_header(host: str, port: int, scheme: str) -> str:
    """Value of the Host header; the port is omitted when it is the scheme default."""
    if ":" in host:
        host = f"[{host}]"
    if port == DEFAULT_PORTS.get(scheme):
        return host
    return f"{host}:{port}"
