"""Locating, reading and merging configuration files, and parsing option values."""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Iterable
from pathlib import Path

from .configuration import Configuration, _normalize_url, parse_config
from .defaults import DEFAULT_CONFIG_NAME, report_and_exit
from .merging import merge_config, rebuild_clients

_EXPECTED_URL_ERRORS = ("relative URL without a base", "empty host")
_STATUS_CODE = re.compile(r"^[1-9][0-9]{2}$")


def _user_config_dir() -> Path:
    if sys.platform.startswith("win"):
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg and Path(xdg).is_absolute():
        return Path(xdg)
    return Path.home() / ".config"


def _default_search_dirs() -> list[Path]:
    """Directories searched for a config file, lowest precedence first."""
    dirs = [Path("/etc/feroxbuster"), _user_config_dir() / "feroxbuster"]
    if sys.argv and sys.argv[0]:
        dirs.append(Path(sys.argv[0]).resolve().parent)
    dirs.append(Path.cwd())
    return dirs


def parse_and_merge_config(config_file: str | Path, config: Configuration) -> None:
    """Merge config_file into config when the file exists, recording its path."""
    path = Path(config_file)
    if not path.exists():
        return
    settings = parse_config(path)
    config.config = str(path)
    merge_config(config, settings)


def parse_config_files(
    config: Configuration, search_dirs: Iterable[str | Path] | None = None
) -> None:
    """Merge every config file found in search_dirs, later ones overriding earlier ones.

    Without search_dirs the standard locations are used: /etc/feroxbuster, the user's
    configuration directory, the directory of the running program and the working
    directory.
    """
    dirs = _default_search_dirs() if search_dirs is None else [Path(d) for d in search_dirs]
    for directory in dirs:
        parse_and_merge_config(directory / DEFAULT_CONFIG_NAME, config)


def parse_denylist(values: Iterable[str]) -> tuple[list[str], list[re.Pattern]]:
    """Split deny-list entries into absolute URLs and compiled regular expressions.

    Entries that are not absolute URLs (relative, or without a host) are treated as
    regular expressions; anything else that fails to parse is a configuration error.
    """
    urls: list[str] = []
    regexes: list[re.Pattern] = []
    for denier in values:
        try:
            urls.append(_normalize_url(denier.rstrip("/")))
        except ValueError as exc:
            message = str(exc)
            if not any(expected in message for expected in _EXPECTED_URL_ERRORS):
                report_and_exit(message)
            try:
                regexes.append(re.compile(denier))
            except re.error as regex_exc:
                report_and_exit(str(regex_exc))
    return urls, regexes


def parse_header(value: str) -> tuple[str, str]:
    """Split "Name: value" at its first colon; only the name is trimmed."""
    name, _, rest = value.partition(":")
    return name.strip(), rest


def parse_query(value: str) -> tuple[str, str]:
    """Split "name=value" at its first equals sign; only the name is trimmed."""
    name, _, rest = value.partition("=")
    return name.strip(), rest


def parse_status_code(value: str) -> int:
    """Parse a three-digit HTTP status code in the range 100-999."""
    if not _STATUS_CODE.match(value):
        report_and_exit("invalid status code")
    return int(value)


def load_configuration(search_dirs: Iterable[str | Path] | None = None) -> Configuration:
    """Build the configuration from defaults and config files, with clients rebuilt."""
    config = Configuration()
    parse_config_files(config, search_dirs)
    rebuild_clients(config)
    return config