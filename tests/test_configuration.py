import json

import pytest

from ferox.configuration import Configuration, from_dict, from_json, parse_config
from ferox.defaults import (
    DEFAULT_CONFIG_NAME,
    DEFAULT_WORDLIST,
    ConfigurationError,
    OutputLevel,
    RequesterPolicy,
)

CONFIG_DATA = """
wordlist = "/some/path"
status_codes = [201, 301, 401]
replay_codes = [201, 301]
threads = 40
timeout = 5
proxy = "http://127.0.0.1:8080"
replay_proxy = "http://127.0.0.1:8081"
quiet = true
silent = true
auto_tune = true
auto_bail = true
verbosity = 1
scan_limit = 6
parallel = 14
rate_limit = 250
time_limit = "10m"
output = "/some/otherpath"
debug_log = "/yet/anotherpath"
resume_from = "/some/state/file"
redirects = true
insecure = true
extensions = ["html", "php", "js"]
url_denylist = ["http://dont-scan.me", "https://also-not.me"]
regex_denylist = ["/deny.*"]
headers = {stuff = "things", mostuff = "mothings"}
queries = [["name","value"], ["rick", "astley"]]
no_recursion = true
add_slash = true
stdin = true
dont_filter = true
extract_links = true
json = true
save_state = false
depth = 1
filter_size = [4120]
filter_regex = ["^ignore me$"]
filter_similar = ["https://somesite.com/soft404"]
filter_word_count = [994, 992]
filter_line_count = [34]
filter_status = [201]
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / DEFAULT_CONFIG_NAME
    path.write_text(CONFIG_DATA)
    return path


@pytest.fixture
def parsed(config_file):
    return parse_config(config_file)


def test_default_configuration():
    config = Configuration()
    assert config.wordlist == DEFAULT_WORDLIST
    assert config.proxy == ""
    assert config.target_url == ""
    assert config.time_limit == ""
    assert config.resume_from == ""
    assert config.debug_log == ""
    assert config.config == ""
    assert config.replay_proxy == ""
    assert config.status_codes == [200, 204, 301, 302, 307, 308, 401, 403, 405]
    assert config.replay_codes == config.status_codes
    assert config.replay_client is None
    assert config.threads == 50
    assert config.depth == 4
    assert config.timeout == 7
    assert config.verbosity == 0
    assert config.scan_limit == 0
    assert config.silent is False
    assert config.quiet is False
    assert config.output_level is OutputLevel.DEFAULT
    assert config.dont_filter is False
    assert config.auto_tune is False
    assert config.auto_bail is False
    assert config.requester_policy is RequesterPolicy.DEFAULT
    assert config.no_recursion is False
    assert config.random_agent is False
    assert config.json is False
    assert config.save_state is True
    assert config.stdin is False
    assert config.add_slash is False
    assert config.redirects is False
    assert config.extract_links is False
    assert config.insecure is False
    assert config.regex_denylist == []
    assert config.queries == []
    assert config.filter_size == []
    assert config.extensions == []
    assert config.url_denylist == []
    assert config.filter_regex == []
    assert config.filter_similar == []
    assert config.filter_word_count == []
    assert config.filter_line_count == []
    assert config.filter_status == []
    assert config.headers == {}
    assert config.client.timeout == 7


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("wordlist", "/some/path"),
        ("debug_log", "/yet/anotherpath"),
        ("status_codes", [201, 301, 401]),
        ("replay_codes", [201, 301]),
        ("threads", 40),
        ("depth", 1),
        ("scan_limit", 6),
        ("parallel", 14),
        ("rate_limit", 250),
        ("timeout", 5),
        ("proxy", "http://127.0.0.1:8080"),
        ("replay_proxy", "http://127.0.0.1:8081"),
        ("silent", True),
        ("quiet", True),
        ("json", True),
        ("auto_bail", True),
        ("auto_tune", True),
        ("verbosity", 1),
        ("output", "/some/otherpath"),
        ("redirects", True),
        ("insecure", True),
        ("no_recursion", True),
        ("stdin", True),
        ("dont_filter", True),
        ("add_slash", True),
        ("extract_links", True),
        ("extensions", ["html", "php", "js"]),
        ("url_denylist", ["http://dont-scan.me/", "https://also-not.me/"]),
        ("filter_regex", ["^ignore me$"]),
        ("filter_similar", ["https://somesite.com/soft404"]),
        ("filter_size", [4120]),
        ("filter_word_count", [994, 992]),
        ("filter_line_count", [34]),
        ("filter_status", [201]),
        ("save_state", False),
        ("time_limit", "10m"),
        ("resume_from", "/some/state/file"),
        ("headers", {"stuff": "things", "mostuff": "mothings"}),
        ("queries", [("name", "value"), ("rick", "astley")]),
        ("random_agent", False),
    ],
)
def test_config_reads_value(parsed, name, expected):
    assert getattr(parsed, name) == expected


def test_config_reads_regex_denylist(parsed):
    assert parsed.regex_denylist[0].pattern == "/deny.*"


def test_parsed_config_keeps_default_levels(parsed):
    assert parsed.output_level is OutputLevel.DEFAULT
    assert parsed.requester_policy is RequesterPolicy.DEFAULT


def test_as_str_returns_string_with_newline():
    config_str = Configuration().as_str()
    assert config_str.startswith("Configuration {")
    assert config_str.endswith("}\n")
    assert "replay_codes:" in config_str
    assert "client: Client {" in config_str
    assert 'user_agent: "feroxbuster' in config_str


def test_as_json_round_trip():
    config = Configuration()
    config.timeout = 12
    config.depth = 2
    config_str = config.as_json()
    assert config_str.endswith("\n")
    restored = from_json(config_str)
    assert restored.config == config.config
    assert restored.wordlist == config.wordlist
    assert restored.replay_codes == config.replay_codes
    assert restored.timeout == 12
    assert restored.depth == 2


def test_as_json_round_trip_of_parsed_file(parsed):
    restored = from_json(parsed.as_json())
    assert restored.queries == parsed.queries
    assert restored.headers == parsed.headers
    assert restored.url_denylist == parsed.url_denylist
    assert [r.pattern for r in restored.regex_denylist] == ["/deny.*"]


def test_to_dict_uses_type_key_and_skips_runtime_fields():
    data = Configuration().to_dict()
    assert data["type"] == "configuration"
    assert "kind" not in data
    assert "client" not in data
    assert "output_level" not in data
    assert json.loads(Configuration().as_json())["status_codes"][0] == 200


def test_from_dict_ignores_unknown_keys():
    config = from_dict({"threads": 3, "not_a_field": 1})
    assert config.threads == 3


@pytest.mark.parametrize(
    "data",
    [
        {"threads": "many"},
        {"threads": -1},
        {"status_codes": [70000]},
        {"verbosity": 300},
        {"silent": "yes"},
        {"queries": [["only-one"]]},
        {"url_denylist": ["/relative"]},
        {"regex_denylist": ["("]},
    ],
)
def test_from_dict_rejects_bad_values(data):
    with pytest.raises(ConfigurationError):
        from_dict(data)


def test_parse_config_rejects_bad_toml(tmp_path):
    path = tmp_path / DEFAULT_CONFIG_NAME
    path.write_text("threads = = 4")
    with pytest.raises(ConfigurationError):
        parse_config(path)


def test_parse_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_config(tmp_path / "missing.toml")