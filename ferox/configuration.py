"""The running configuration of a scan and its (de)serialisation."""

from __future__ import annotations

import json
import re
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from .client import HttpClient, build_client
from .defaults import (
    DEFAULT_DEPTH,
    DEFAULT_SAVE_STATE,
    DEFAULT_THREADS,
    DEFAULT_TIMEOUT,
    DEFAULT_WORDLIST,
    SERIALIZED_TYPE,
    ConfigurationError,
    OutputLevel,
    RequesterPolicy,
    default_status_codes,
    default_user_agent,
)

_SKIPPED = frozenset({"client", "replay_client", "output_level", "requester_policy"})


def _default_client() -> HttpClient:
    return build_client(DEFAULT_TIMEOUT, default_user_agent(), False, False, {}, None)


@dataclass
class Configuration:
    """Defaults, overridden by config files, overridden by command-line options."""

    kind: str = SERIALIZED_TYPE
    wordlist: str = DEFAULT_WORDLIST
    config: str = ""
    proxy: str = ""
    replay_proxy: str = ""
    target_url: str = ""
    status_codes: list[int] = field(default_factory=default_status_codes)
    replay_codes: list[int] = field(default_factory=default_status_codes)
    filter_status: list[int] = field(default_factory=list)
    client: HttpClient = field(default_factory=_default_client, compare=False, repr=False)
    replay_client: HttpClient | None = field(default=None, compare=False, repr=False)
    threads: int = DEFAULT_THREADS
    timeout: int = DEFAULT_TIMEOUT
    verbosity: int = 0
    silent: bool = False
    quiet: bool = False
    output_level: OutputLevel = OutputLevel.DEFAULT
    auto_bail: bool = False
    auto_tune: bool = False
    requester_policy: RequesterPolicy = RequesterPolicy.DEFAULT
    json: bool = False
    output: str = ""
    debug_log: str = ""
    user_agent: str = field(default_factory=default_user_agent)
    random_agent: bool = False
    redirects: bool = False
    insecure: bool = False
    extensions: list[str] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict)
    queries: list[tuple[str, str]] = field(default_factory=list)
    no_recursion: bool = False
    extract_links: bool = False
    add_slash: bool = False
    stdin: bool = False
    depth: int = DEFAULT_DEPTH
    scan_limit: int = 0
    parallel: int = 0
    rate_limit: int = 0
    filter_size: list[int] = field(default_factory=list)
    filter_line_count: list[int] = field(default_factory=list)
    filter_word_count: list[int] = field(default_factory=list)
    filter_regex: list[str] = field(default_factory=list)
    dont_filter: bool = False
    resumed: bool = False
    resume_from: str = ""
    save_state: bool = DEFAULT_SAVE_STATE
    time_limit: str = ""
    filter_similar: list[str] = field(default_factory=list)
    url_denylist: list[str] = field(default_factory=list)
    regex_denylist: list[re.Pattern] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialisable fields as plain data, with the kind stored under "type"."""
        result: dict[str, Any] = {}
        for f in fields(self):
            if f.name in _SKIPPED:
                continue
            key = "type" if f.name == "kind" else f.name
            result[key] = _plain(getattr(self, f.name))
        return result

    def as_json(self) -> str:
        """One line of JSON followed by a newline."""
        try:
            return json.dumps(self.to_dict(), separators=(",", ":")) + "\n"
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Could not convert Configuration to JSON: {exc}") from exc

    def as_str(self) -> str:
        """A multi-line, human readable dump of every field."""
        values = [(f.name, getattr(self, f.name)) for f in fields(self)]
        return _debug_struct("Configuration", values, 0) + "\n"


def _plain(value: Any) -> Any:
    if isinstance(value, re.Pattern):
        return value.pattern
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    return value


def _debug_struct(name: str, values: list[tuple[str, Any]], level: int) -> str:
    pad = "    " * (level + 1)
    body = "".join(f"{pad}{key}: {_debug(value, level + 1)},\n" for key, value in values)
    return f"{name} {{\n{body}{'    ' * level}}}"


def _debug_seq(open_: str, close: str, items: list[str], level: int) -> str:
    if not items:
        return open_ + close
    pad = "    " * (level + 1)
    body = "".join(f"{pad}{item},\n" for item in items)
    return f"{open_}\n{body}{'    ' * level}{close}"


def _debug(value: Any, level: int) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "None"
    if isinstance(value, Enum):
        return "".join(part.capitalize() for part in value.name.split("_"))
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, re.Pattern):
        return _debug(value.pattern, level)
    if isinstance(value, HttpClient):
        return _debug_struct(
            "Client",
            [
                ("timeout", value.timeout),
                ("user_agent", value.user_agent),
                ("redirects", value.redirects),
                ("insecure", value.insecure),
                ("headers", value.headers),
                ("proxy", value.proxy),
            ],
            level,
        )
    if isinstance(value, dict):
        items = [f"{_debug(k, level + 1)}: {_debug(v, level + 1)}" for k, v in value.items()]
        return _debug_seq("{", "}", items, level)
    if isinstance(value, tuple):
        return _debug_seq("(", ")", [_debug(v, level + 1) for v in value], level)
    if isinstance(value, list):
        return _debug_seq("[", "]", [_debug(v, level + 1) for v in value], level)
    return repr(value)


def _normalize_url(value: str) -> str:
    """Parse an absolute URL; raise ValueError the way a URL parser reports problems."""
    try:
        parts = urlsplit(value)
        parts.port
    except ValueError as exc:
        raise ValueError(f"invalid port number in {value!r}") from exc
    if not parts.scheme:
        raise ValueError("relative URL without a base")
    if not parts.hostname:
        raise ValueError("empty host")
    userinfo, sep, hostport = parts.netloc.rpartition("@")
    netloc = f"{userinfo}{sep}{hostport.lower()}"
    return urlunsplit((parts.scheme.lower(), netloc, parts.path or "/", parts.query, parts.fragment))


def _fail(name: str, expected: str, value: Any) -> ConfigurationError:
    return ConfigurationError(f"invalid value for {name}: expected {expected}, got {value!r}")


def _as_str(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise _fail(name, "a string", value)
    return value


def _as_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise _fail(name, "a boolean", value)
    return value


def _uint(maximum: int | None = None) -> Callable[[str, Any], int]:
    def convert(name: str, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise _fail(name, "a non-negative integer", value)
        if maximum is not None and value > maximum:
            raise _fail(name, f"an integer no larger than {maximum}", value)
        return value

    return convert


def _list_of(item: Callable[[str, Any], Any]) -> Callable[[str, Any], list]:
    def convert(name: str, value: Any) -> list:
        if not isinstance(value, list):
            raise _fail(name, "a list", value)
        return [item(name, element) for element in value]

    return convert


def _as_headers(name: str, value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping):
        raise _fail(name, "a table of strings", value)
    return {_as_str(name, key): _as_str(name, item) for key, item in value.items()}


def _as_query(name: str, value: Any) -> tuple[str, str]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise _fail(name, "a pair of strings", value)
    return (_as_str(name, value[0]), _as_str(name, value[1]))


def _as_url(name: str, value: Any) -> str:
    try:
        return _normalize_url(_as_str(name, value))
    except ValueError as exc:
        raise ConfigurationError(f"invalid url in {name}: {exc}") from exc


def _as_regex(name: str, value: Any) -> re.Pattern:
    try:
        return re.compile(_as_str(name, value))
    except re.error as exc:
        raise ConfigurationError(f"invalid regex in {name}: {exc}") from exc


_STR_FIELDS = (
    "kind", "wordlist", "config", "proxy", "replay_proxy", "target_url", "output",
    "debug_log", "user_agent", "resume_from", "time_limit",
)
_BOOL_FIELDS = (
    "silent", "quiet", "auto_bail", "auto_tune", "json", "random_agent", "redirects",
    "insecure", "no_recursion", "extract_links", "add_slash", "stdin", "dont_filter",
    "resumed", "save_state",
)
_UINT_FIELDS = ("threads", "timeout", "depth", "scan_limit", "parallel", "rate_limit")

_CONVERTERS: dict[str, Callable[[str, Any], Any]] = {
    **{name: _as_str for name in _STR_FIELDS},
    **{name: _as_bool for name in _BOOL_FIELDS},
    **{name: _uint() for name in _UINT_FIELDS},
    "verbosity": _uint(255),
    "status_codes": _list_of(_uint(65535)),
    "replay_codes": _list_of(_uint(65535)),
    "filter_status": _list_of(_uint(65535)),
    "filter_size": _list_of(_uint()),
    "filter_line_count": _list_of(_uint()),
    "filter_word_count": _list_of(_uint()),
    "extensions": _list_of(_as_str),
    "filter_regex": _list_of(_as_str),
    "filter_similar": _list_of(_as_str),
    "headers": _as_headers,
    "queries": _list_of(_as_query),
    "url_denylist": _list_of(_as_url),
    "regex_denylist": _list_of(_as_regex),
}


def from_dict(data: Mapping[str, Any]) -> Configuration:
    """Build a Configuration from plain data; absent keys keep their defaults."""
    if not isinstance(data, Mapping):
        raise ConfigurationError("configuration data must be a table")
    kwargs: dict[str, Any] = {}
    for f in fields(Configuration):
        if f.name in _SKIPPED:
            continue
        key = "type" if f.name == "kind" else f.name
        if key in data:
            kwargs[f.name] = _CONVERTERS[f.name](key, data[key])
    return Configuration(**kwargs)


def from_json(text: str) -> Configuration:
    """Build a Configuration from its JSON form."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"invalid JSON configuration: {exc}") from exc
    return from_dict(data)


def parse_config(config_file: str | Path) -> Configuration:
    """Read a TOML configuration file."""
    content = Path(config_file).read_text(encoding="utf-8")
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"invalid TOML in {config_file}: {exc}") from exc
    return from_dict(data)