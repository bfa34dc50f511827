"""The banner printed when a scan starts."""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import TextIO
from urllib.parse import urlsplit

from wcwidth import wcswidth

from .client import HttpClient
from .configuration import Configuration
from .defaults import VERSION, status_colorizer

UPDATE_URL = "https://api.example.com/feroxbuster/releases/latest"
RELEASES_URL = "https://releases.example.com/feroxbuster/latest"

INDENT = 3
COL_WIDTH = 22

_RESET = "\x1b[0m"
_YELLOW = "\x1b[33m"
_BRIGHT_YELLOW = "\x1b[93m"

_VOLUME = ("🔈", "🔉", "🔊", "📢")


def _wants_emoji() -> bool:
    if sys.platform.startswith("win"):
        return "WT_SESSION" in os.environ
    return True


def _emoji(emoji: str, fallback: str) -> str:
    return emoji if _wants_emoji() else fallback


def _flag(value: bool) -> str:
    return "true" if value else "false"


class UpdateStatus(Enum):
    """Whether a newer release than the running one is known."""

    UP_TO_DATE = "up_to_date"
    OUT_OF_DATE = "out_of_date"
    UNKNOWN = "unknown"


@dataclass
class BannerEntry:
    """A single line of the banner."""

    emoji: str = ""
    title: str = ""
    value: str = ""

    def format_emoji(self) -> str:
        """The emoji, or blank padding when the terminal does not show emoji."""
        width = max(wcswidth(self.emoji), 0)
        pad = " ".ljust(width * width)
        return _emoji(self.emoji, pad)

    def __str__(self) -> str:
        return f" {self.format_emoji():<{INDENT}}{self.title:<{COL_WIDTH}}\u2502 {self.value}"


class Banner:
    """All banner entries built from a configuration, and the means to print them."""

    def __init__(self, targets, config: Configuration):
        self.targets = [BannerEntry("🎯", "Target Url", target) for target in targets]

        self.url_denylist = [
            BannerEntry("🚫", "Don't Scan Url", url) for url in config.url_denylist
        ] + [
            BannerEntry("🚫", "Don't Scan Regex", regex.pattern)
            for regex in config.regex_denylist
        ]

        def codes(values) -> str:
            return "[" + ", ".join(status_colorizer(str(code)) for code in values) + "]"

        self.status_codes = BannerEntry("👌", "Status Codes", codes(config.status_codes))
        self.filter_status = BannerEntry(
            "💢", "Status Code Filters", codes(config.filter_status)
        )
        self.replay_codes = BannerEntry("📼", "Replay Proxy Codes", codes(config.replay_codes))

        self.headers = [
            BannerEntry("🤯", "Header", f"{name}: {value}")
            for name, value in config.headers.items()
        ]
        self.filter_size = [
            BannerEntry("💢", "Size Filter", str(size)) for size in config.filter_size
        ]
        self.filter_similar = [
            BannerEntry("💢", "Similarity Filter", url) for url in config.filter_similar
        ]
        self.filter_word_count = [
            BannerEntry("💢", "Word Count Filter", str(count))
            for count in config.filter_word_count
        ]
        self.filter_line_count = [
            BannerEntry("💢", "Line Count Filter", str(count))
            for count in config.filter_line_count
        ]
        self.filter_regex = [
            BannerEntry("💢", "Regex Filter", regex) for regex in config.filter_regex
        ]
        self.queries = [
            BannerEntry("🤔", "Query Parameter", f"{name}={value}")
            for name, value in config.queries
        ]

        if 1 <= config.verbosity <= 4:
            self.verbosity = BannerEntry(
                _VOLUME[config.verbosity - 1], "Verbosity", str(config.verbosity)
            )
        else:
            self.verbosity = BannerEntry()

        if not config.no_recursion:
            depth = "INFINITE" if config.depth == 0 else str(config.depth)
            self.no_recursion = BannerEntry("🔃", "Recursion Depth", depth)
        else:
            self.no_recursion = BannerEntry(
                "🚫", "Do Not Recurse", _flag(config.no_recursion)
            )

        self.scan_limit = BannerEntry("🦥", "Concurrent Scan Limit", str(config.scan_limit))
        self.replay_proxy = BannerEntry("🎥", "Replay Proxy", config.replay_proxy)
        self.auto_tune = BannerEntry("🎶", "Auto Tune", _flag(config.auto_tune))
        self.auto_bail = BannerEntry("🪣", "Auto Bail", _flag(config.auto_bail))
        self.config = BannerEntry("💉", "Config File", config.config)
        self.proxy = BannerEntry("💎", "Proxy", config.proxy)
        self.threads = BannerEntry("🚀", "Threads", str(config.threads))
        self.wordlist = BannerEntry("📖", "Wordlist", config.wordlist)
        self.timeout = BannerEntry("💥", "Timeout (secs)", str(config.timeout))
        self.user_agent = BannerEntry("🦡", "User-Agent", config.user_agent)
        self.random_agent = BannerEntry("🦡", "User-Agent", "Random")
        self.extract_links = BannerEntry("🔎", "Extract Links", _flag(config.extract_links))
        self.json = BannerEntry("🧔", "JSON Output", _flag(config.json))
        self.output = BannerEntry("💾", "Output File", config.output)
        self.debug_log = BannerEntry("🪲", "Debugging Log", config.debug_log)
        self.extensions = BannerEntry(
            "💲", "Extensions", "[" + ", ".join(config.extensions) + "]"
        )
        self.insecure = BannerEntry("🔓", "Insecure", _flag(config.insecure))
        self.redirects = BannerEntry("📍", "Follow Redirects", _flag(config.redirects))
        self.dont_filter = BannerEntry("🤪", "Filter Wildcards", _flag(not config.dont_filter))
        self.add_slash = BannerEntry("🪓", "Add Slash", _flag(config.add_slash))
        self.time_limit = BannerEntry("🕖", "Time Limit", config.time_limit)
        self.parallel = BannerEntry("🛤", "Parallel Scans", str(config.parallel))
        self.rate_limit = BannerEntry("🚧", "Requests per Second", str(config.rate_limit))

        self.version = VERSION
        self.update_status = UpdateStatus.UNKNOWN

    def header(self) -> str:
        """The artwork and the top border of the banner."""
        artwork = (
            r"""
 ___  ___  __   __     __      __         __   ___
|__  |__  |__) |__) | /  `    /  \ \_/ | |  \ |__
|    |___ |  \ |  \ | \__,    \__/ / \ | |__/ |___
"""
            + f"{_emoji('🤓', '  ')}                                 ver: {self.version}"
        )
        top = "───────────────────────────┬──────────────────────"
        return f"{artwork}\n{top}"

    def footer(self) -> str:
        """The bottom border and the scan-menu hint."""
        addl_section = "──────────────────────────────────────────────────"
        bottom = "───────────────────────────┴──────────────────────"
        instructions = (
            f" 🏁  Press [{_YELLOW}ENTER{_RESET}] to use the "
            f"{_BRIGHT_YELLOW}Scan Management Menu{_RESET}™"
        )
        return f"{bottom}\n{instructions}\n{addl_section}"

    def check_for_updates(self, url: str, client: HttpClient) -> None:
        """Compare the running version with the tag_name of the latest release at url.

        Raises ValueError for a bad url or response, and the client's errors as they come.
        """
        parts = urlsplit(url)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"invalid url {url!r}")

        body = client.get(url).text
        data = json.loads(body)

        tag = data.get("tag_name") if isinstance(data, dict) else None
        if not isinstance(tag, str):
            raise ValueError(f"JSON has no tag_name: {data}")

        latest_version = tag.lstrip("v")
        if latest_version == self.version:
            self.update_status = UpdateStatus.UP_TO_DATE
        else:
            self.update_status = UpdateStatus.OUT_OF_DATE

    def print_to(self, writer: TextIO, config: Configuration) -> None:
        """Write the banner to writer, showing only the entries config makes relevant."""

        def line(item) -> None:
            writer.write(f"{item}\n")

        line(self.header())

        for entry in self.targets:
            line(entry)
        for entry in self.url_denylist:
            line(entry)

        line(self.threads)
        line(self.wordlist)
        line(self.status_codes)

        if config.filter_status:
            line(self.filter_status)

        line(self.timeout)
        line(self.random_agent if config.random_agent else self.user_agent)

        if config.config:
            line(self.config)
        if config.proxy:
            line(self.proxy)
        if config.replay_proxy:
            line(self.replay_proxy)
            line(self.replay_codes)

        for group in (
            self.headers,
            self.filter_size,
            self.filter_similar,
            self.filter_word_count,
            self.filter_line_count,
            self.filter_regex,
        ):
            for entry in group:
                line(entry)

        if config.extract_links:
            line(self.extract_links)
        if config.json:
            line(self.json)

        for entry in self.queries:
            line(entry)

        if config.output:
            line(self.output)
        if config.debug_log:
            line(self.debug_log)
        if config.extensions:
            line(self.extensions)
        if config.insecure:
            line(self.insecure)
        if config.auto_bail:
            line(self.auto_bail)
        if config.auto_tune:
            line(self.auto_tune)
        if config.redirects:
            line(self.redirects)
        if config.dont_filter:
            line(self.dont_filter)
        if 1 <= config.verbosity <= 4:
            line(self.verbosity)
        if config.add_slash:
            line(self.add_slash)

        line(self.no_recursion)

        if config.scan_limit > 0:
            line(self.scan_limit)
        if config.parallel > 0:
            line(self.parallel)
        if config.rate_limit > 0:
            line(self.rate_limit)
        if config.time_limit:
            line(self.time_limit)

        if self.update_status is UpdateStatus.OUT_OF_DATE:
            line(BannerEntry("🎉", "New Version Available", RELEASES_URL))

        line(self.footer())