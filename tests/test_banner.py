import io
import re

import pytest
import requests
import responses

from ferox.banner import Banner, BannerEntry, UpdateStatus
from ferox.client import build_client
from ferox.configuration import Configuration

LATEST = "http://localhost:9999/latest"


@pytest.fixture(autouse=True)
def emoji_terminal(monkeypatch):
    monkeypatch.setenv("WT_SESSION", "1")


@pytest.fixture
def client():
    with build_client(7, "feroxbuster-test", False, False, {}, None) as http:
        yield http


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def render(banner, config):
    buffer = io.StringIO()
    banner.print_to(buffer, config)
    return buffer.getvalue()


def line_with(text, title):
    return next(line for line in text.splitlines() if title in line)


def test_entry_formatting():
    entry = BannerEntry("🚀", "Threads", "50")
    assert str(entry) == " 🚀  Threads" + " " * 15 + "│ 50"


def test_default_entry_is_blank_columns():
    assert str(BannerEntry()) == " " + " " * 3 + " " * 22 + "│ "


def test_banner_without_targets():
    config = Configuration()
    output = render(Banner([], config), config)
    assert "Target Url" not in output
    assert "ver: " in output
    assert "Scan Management Menu" in output
    assert "│ 50" in line_with(output, "Threads")


def test_banner_without_status_codes():
    config = Configuration(status_codes=[])
    output = render(Banner(["http://localhost"], config), config)
    assert line_with(output, "Status Codes").endswith("│ []")
    assert line_with(output, "Target Url").endswith("│ http://localhost")


def test_banner_without_config_file():
    config = Configuration(config="")
    output = render(Banner(["http://localhost"], config), config)
    assert "Config File" not in output


def test_banner_with_empty_query():
    config = Configuration(queries=[("", "")])
    output = render(Banner(["http://localhost"], config), config)
    assert line_with(output, "Query Parameter").endswith("│ =")


def test_banner_recursion_depth_infinite():
    config = Configuration(depth=0)
    output = render(Banner([], config), config)
    assert line_with(output, "Recursion Depth").endswith("│ INFINITE")


def test_banner_no_recursion():
    config = Configuration(no_recursion=True)
    output = render(Banner([], config), config)
    assert line_with(output, "Do Not Recurse").endswith("│ true")
    assert "Recursion Depth" not in output


def test_banner_verbosity_and_dont_filter():
    config = Configuration(verbosity=2, dont_filter=True)
    output = render(Banner([], config), config)
    assert line_with(output, "Verbosity").startswith(" 🔉")
    assert line_with(output, "Filter Wildcards").endswith("│ false")


def test_banner_random_agent_and_denylist():
    config = Configuration(
        random_agent=True,
        url_denylist=["http://dont-scan.me/"],
        regex_denylist=[re.compile("/deny.*")],
    )
    output = render(Banner([], config), config)
    assert line_with(output, "User-Agent").endswith("│ Random")
    assert line_with(output, "Don't Scan Url").endswith("│ http://dont-scan.me/")
    assert line_with(output, "Don't Scan Regex").endswith("│ /deny.*")


def test_banner_replay_proxy_shows_codes():
    config = Configuration(replay_proxy="http://127.0.0.1:8081", replay_codes=[201])
    output = render(Banner([], config), config)
    assert "Replay Proxy Codes" in output
    assert "201" in line_with(output, "Replay Proxy Codes")


def test_needs_update_unknown_with_bad_url(client):
    banner = Banner(["http://localhost"], Configuration())
    with pytest.raises(ValueError):
        banner.check_for_updates("", client)
    assert banner.update_status is UpdateStatus.UNKNOWN


def test_needs_update_up_to_date(client, mocked):
    mocked.add(responses.GET, LATEST, body='{"tag_name":"v1.1.0"}', status=200)
    banner = Banner(["http://localhost:9999"], Configuration())
    banner.version = "1.1.0"
    banner.check_for_updates(LATEST, client)
    assert len(mocked.calls) == 1
    assert banner.update_status is UpdateStatus.UP_TO_DATE


def test_needs_update_out_of_date(client, mocked):
    mocked.add(responses.GET, LATEST, body='{"tag_name":"v1.1.0"}', status=200)
    config = Configuration()
    banner = Banner(["http://localhost:9999"], config)
    banner.version = "1.0.1"
    banner.check_for_updates(LATEST, client)
    assert len(mocked.calls) == 1
    assert banner.update_status is UpdateStatus.OUT_OF_DATE
    assert "New Version Available" in render(banner, config)


def test_needs_update_unknown_on_timeout(client, mocked):
    mocked.add(responses.GET, LATEST, body=requests.exceptions.ReadTimeout())
    banner = Banner(["http://localhost:9999"], Configuration())
    with pytest.raises(requests.exceptions.Timeout):
        banner.check_for_updates(LATEST, client)
    assert len(mocked.calls) == 1
    assert banner.update_status is UpdateStatus.UNKNOWN


def test_needs_update_unknown_on_bad_json(client, mocked):
    mocked.add(responses.GET, LATEST, body="not json", status=200)
    banner = Banner(["http://localhost:9999"], Configuration())
    with pytest.raises(ValueError):
        banner.check_for_updates(LATEST, client)
    assert len(mocked.calls) == 1
    assert banner.update_status is UpdateStatus.UNKNOWN


def test_needs_update_unknown_without_tag_name(client, mocked):
    mocked.add(
        responses.GET, LATEST, body='{"no tag_name": "doesn\'t exist"}', status=200
    )
    banner = Banner(["http://localhost:9999"], Configuration())
    banner.version = "1.0.1"
    with pytest.raises(ValueError, match="tag_name"):
        banner.check_for_updates(LATEST, client)
    assert len(mocked.calls) == 1
    assert banner.update_status is UpdateStatus.UNKNOWN
    assert "New Version Available" not in render(banner, Configuration())