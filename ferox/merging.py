"""Combining configurations and rebuilding their HTTP clients."""

from __future__ import annotations

from typing import Any

from .client import build_client
from .configuration import Configuration
from .defaults import (
    DEFAULT_DEPTH,
    DEFAULT_SAVE_STATE,
    DEFAULT_THREADS,
    DEFAULT_TIMEOUT,
    DEFAULT_WORDLIST,
    ConfigurationError,
    default_status_codes,
    default_user_agent,
    determine_output_level,
    determine_requester_policy,
)


def _defaults_before_levels() -> tuple[tuple[str, Any], ...]:
    return (
        ("target_url", ""),
        ("time_limit", ""),
        ("proxy", ""),
        ("verbosity", 0),
        ("silent", False),
        ("quiet", False),
        ("auto_bail", False),
        ("auto_tune", False),
    )


def _defaults_after_levels() -> tuple[tuple[str, Any], ...]:
    return (
        ("output", ""),
        ("redirects", False),
        ("insecure", False),
        ("extract_links", False),
        ("extensions", []),
        ("url_denylist", []),
    )


def _defaults_after_denylist() -> tuple[tuple[str, Any], ...]:
    return (
        ("headers", {}),
        ("queries", []),
        ("no_recursion", False),
        ("add_slash", False),
        ("stdin", False),
        ("filter_size", []),
        ("filter_regex", []),
        ("filter_similar", []),
        ("filter_word_count", []),
        ("filter_line_count", []),
        ("filter_status", []),
        ("dont_filter", False),
        ("scan_limit", 0),
        ("parallel", 0),
        ("rate_limit", 0),
        ("replay_proxy", ""),
        ("debug_log", ""),
        ("resume_from", ""),
        ("json", False),
        ("timeout", DEFAULT_TIMEOUT),
        ("user_agent", default_user_agent()),
        ("random_agent", False),
        ("threads", DEFAULT_THREADS),
        ("depth", DEFAULT_DEPTH),
        ("wordlist", DEFAULT_WORDLIST),
        ("status_codes", default_status_codes()),
        # the default for replay codes is the default status codes
        ("replay_codes", default_status_codes()),
        ("save_state", DEFAULT_SAVE_STATE),
    )


def _update_if_not_default(conf: Configuration, new: Configuration, table) -> None:
    for name, default in table:
        value = getattr(new, name)
        if value != default:
            setattr(conf, name, value)


def merge_config(conf: Configuration, new: Configuration) -> None:
    """Overwrite fields of conf with every field of new that differs from its default.

    The kind, clients, resumed flag and config-file path are left untouched.
    """
    _update_if_not_default(conf, new, _defaults_before_levels())
    conf.output_level = determine_output_level(conf.quiet, conf.silent)
    conf.requester_policy = determine_requester_policy(conf.auto_tune, conf.auto_bail)
    _update_if_not_default(conf, new, _defaults_after_levels())
    if new.regex_denylist:
        conf.regex_denylist = list(new.regex_denylist)
    _update_if_not_default(conf, new, _defaults_after_denylist())


def _client_for(config: Configuration, proxy: str | None):
    try:
        return build_client(
            config.timeout,
            config.user_agent,
            config.redirects,
            config.insecure,
            config.headers,
            proxy,
        )
    except ValueError as exc:
        raise ConfigurationError(f"Could not rebuild client: {exc}") from exc


def rebuild_clients(config: Configuration) -> None:
    """Rebuild the clients of config when any client-related setting changed.

    Raises ConfigurationError when a client cannot be built.
    """
    needs_rebuild = (
        bool(config.proxy)
        or config.timeout != DEFAULT_TIMEOUT
        or config.user_agent != default_user_agent()
        or config.redirects
        or config.insecure
        or bool(config.headers)
        or config.resumed
    )
    if needs_rebuild:
        config.client = _client_for(config, config.proxy or None)

    if config.replay_proxy:
        config.replay_client = _client_for(config, config.replay_proxy)