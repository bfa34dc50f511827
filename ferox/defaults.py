"""Default settings, output levels and requester policies."""

from __future__ import annotations

import sys
from enum import Enum

VERSION = "2.4.1"

DEFAULT_CONFIG_NAME = "ferox-config.toml"
DEFAULT_WORDLIST = "/usr/share/seclists/Discovery/Web-Content/raft-medium-directories.txt"
DEFAULT_STATUS_CODES = (200, 204, 301, 302, 307, 308, 401, 403, 405)
SERIALIZED_TYPE = "configuration"
DEFAULT_TIMEOUT = 7
DEFAULT_THREADS = 50
DEFAULT_DEPTH = 4
DEFAULT_SAVE_STATE = True

_RESET = "\x1b[0m"
_RED = "\x1b[31m"
_GREEN = "\x1b[32m"
_YELLOW = "\x1b[33m"
_BLUE = "\x1b[34m"
_MAGENTA = "\x1b[35m"
_CYAN = "\x1b[36m"
_BOLD_RED = "\x1b[1;31m"

_STATUS_COLORS = {
    "1": _BLUE,
    "2": _GREEN,
    "3": _YELLOW,
    "4": _RED,
    "5": _RED,
}

_WORD_COLORS = {
    "ERROR": _BOLD_RED,
    "WLD": _CYAN,
    "DIR": _CYAN,
    "MSG": _MAGENTA,
}


class ConfigurationError(Exception):
    """Raised when the configuration cannot be built from its inputs."""


class OutputLevel(Enum):
    """How much informational output (not logging) a scan produces."""

    DEFAULT = "default"
    QUIET = "quiet"
    SILENT = "silent"


class RequesterPolicy(Enum):
    """What the requester does when errors pile up."""

    AUTO_TUNE = "auto_tune"
    AUTO_BAIL = "auto_bail"
    DEFAULT = "default"


def status_colorizer(status: str) -> str:
    """Wrap a status code or status word in an ANSI colour."""
    color = _WORD_COLORS.get(status)
    if color is None and status[:1].isdigit():
        color = _STATUS_COLORS.get(status[:1])
    if color is None:
        return status
    return f"{color}{status}{_RESET}"


def _module_colorizer(name: str) -> str:
    return f"{_CYAN}{name}{_RESET}"


def report_and_exit(err: str) -> None:
    """Print a configuration error to stderr and raise ConfigurationError."""
    print(
        f"{status_colorizer('ERROR')} {_module_colorizer('Configuration.new')}: {err}",
        file=sys.stderr,
    )
    raise ConfigurationError(err)


def determine_output_level(quiet: bool, silent: bool) -> OutputLevel:
    """Pick the output level; silent wins when both flags are set."""
    if silent:
        return OutputLevel.SILENT
    if quiet:
        return OutputLevel.QUIET
    return OutputLevel.DEFAULT


def determine_requester_policy(auto_tune: bool, auto_bail: bool) -> RequesterPolicy:
    """Pick the requester policy; auto-bail wins when both flags are set."""
    if auto_bail:
        return RequesterPolicy.AUTO_BAIL
    if auto_tune:
        return RequesterPolicy.AUTO_TUNE
    return RequesterPolicy.DEFAULT


def default_status_codes() -> list[int]:
    """Return a fresh list of the default allowed status codes."""
    return list(DEFAULT_STATUS_CODES)


def default_user_agent() -> str:
    """Return the default User-Agent string."""
    return f"feroxbuster/{VERSION}"