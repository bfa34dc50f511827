"""HTTP client construction."""

from __future__ import annotations

import re
from collections.abc import Mapping
from urllib.parse import urlsplit

import requests

MAX_REDIRECTS = 10
_PROXY_SCHEMES = frozenset({"http", "https", "socks4", "socks4a", "socks5", "socks5h"})
_HEADER_NAME = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_BAD_HEADER_VALUE = re.compile(r"[\r\n\x00]")


class HttpClient:
    """A configured HTTP session used for every request of a scan."""

    def __init__(self, timeout, user_agent, redirects, insecure, headers, proxy):
        self.timeout = timeout
        self.user_agent = user_agent
        self.redirects = redirects
        self.insecure = insecure
        self.headers = dict(headers)
        self.proxy = proxy
        self.closed = False

        self.session = requests.Session()
        self.session.headers["User-Agent"] = user_agent
        self.session.headers.update(self.headers)
        self.session.verify = not insecure
        self.session.max_redirects = MAX_REDIRECTS
        if proxy:
            self.session.proxies = {"http": proxy, "https": proxy}

    def get(self, url: str) -> requests.Response:
        """Send a GET request to url."""
        if self.closed:
            raise RuntimeError("client is closed")
        return self.session.get(
            url,
            timeout=self.timeout or None,
            allow_redirects=self.redirects,
        )

    def close(self) -> None:
        """Release the underlying connections."""
        self.session.close()
        self.closed = True

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"HttpClient(timeout={self.timeout!r}, user_agent={self.user_agent!r}, "
            f"redirects={self.redirects!r}, insecure={self.insecure!r}, proxy={self.proxy!r})"
        )


def _validate_proxy(proxy: str) -> str:
    candidate = proxy if "://" in proxy else f"http://{proxy}"
    try:
        parts = urlsplit(candidate)
        parts.port  # raises on a malformed port
    except ValueError as exc:
        raise ValueError(f"invalid proxy {proxy!r}: {exc}") from exc
    if parts.scheme.lower() not in _PROXY_SCHEMES:
        raise ValueError(f"invalid proxy {proxy!r}: unsupported scheme")
    host = parts.hostname or ""
    if not host or any(ch.isspace() for ch in parts.netloc):
        raise ValueError(f"invalid proxy {proxy!r}: bad host")
    return candidate


def _validate_headers(headers: Mapping[str, str]) -> None:
    for name, value in headers.items():
        if not _HEADER_NAME.match(name):
            raise ValueError(f"invalid header name {name!r}")
        if _BAD_HEADER_VALUE.search(value):
            raise ValueError(f"invalid header value for {name!r}")


def build_client(timeout, user_agent, redirects, insecure, headers, proxy) -> HttpClient:
    """Create an HttpClient; redirects are followed up to ten hops when enabled.

    Raises ValueError for malformed headers or proxy.
    """
    _validate_headers(headers)
    if proxy:
        proxy = _validate_proxy(proxy)
    else:
        proxy = None
    return HttpClient(timeout, user_agent, redirects, insecure, headers, proxy)