# ferox

The configuration and start-up layer of a recursive content discovery scanner:

- built-in defaults: status codes, threads, timeout, user agent, recursion depth
  (`ferox.defaults`);
- the `Configuration` dataclass, with JSON and TOML (de)serialisation
  (`ferox.configuration`);
- merging one configuration over another and rebuilding HTTP clients
  (`ferox.merging`);
- finding and reading `ferox-config.toml` files, and parsing single option
  values (`ferox.loader`);
- building the HTTP client used for requests (`ferox.client`);
- the banner shown when a scan starts, including a check for a newer release
  (`ferox.banner`).

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Configuration

`ferox.configuration.Configuration` holds every setting and starts out with the
built-in defaults. A TOML file can override any of them:

```toml
wordlist = "/usr/share/wordlists/common.txt"
status_codes = [200, 301, 302]
threads = 40
timeout = 5
extensions = ["php", "html"]
headers = {Accept = "text/html"}
queries = [["name", "value"]]
url_denylist = ["http://dont-scan.example.com"]
regex_denylist = ["/deny.*"]
```

```python
from ferox.configuration import parse_config

config = parse_config("ferox-config.toml")
print(config.threads)       # 40
print(config.as_json())     # one line of JSON, ending in a newline
print(config.as_str())      # a multi-line dump of every field
```

Keys missing from the file keep their defaults; values of the wrong type, bad
URLs and bad regular expressions raise `ferox.defaults.ConfigurationError`.
`from_dict` and `from_json` build a configuration from plain data or from the
output of `as_json`, and `to_dict` goes the other way.

### Loading and merging

`ferox.loader.load_configuration(search_dirs=None)` starts from the defaults,
merges every `ferox-config.toml` found (in `/etc/feroxbuster`, the user's
configuration directory, the directory of the running program and the working
directory, later ones winning; or in the given `search_dirs`), records the last
file used in `config.config`, and rebuilds the HTTP clients.

`ferox.merging.merge_config(conf, new)` copies onto `conf` every field of `new`
that differs from its default, then recomputes the output level and requester
policy. `rebuild_clients(config)` builds a new client when any client-related
setting differs from its default, and a replay client when `replay_proxy` is set.

### Option values

`ferox.loader` also parses single values of the kind a command line supplies:

- `parse_denylist(values)` splits entries into absolute URLs and compiled
  regular expressions;
- `parse_status_code(value)` accepts a three-digit code from 100 to 999;
- `parse_header("Name: value")` and `parse_query("name=value")` split at the
  first separator and trim only the name.

`parse_denylist` and `parse_status_code` print an error to stderr and raise
`ConfigurationError` on bad input (`ferox.defaults.report_and_exit`).

## HTTP client

```python
from ferox.client import build_client

with build_client(7, "ferox/0.1.0", False, False, {}, "http://127.0.0.1:8080") as client:
    response = client.get("http://localhost/")
```

Redirects are followed, up to ten hops, only when enabled. A proxy string that
is not a valid URL, or a malformed header, raises `ValueError` straight away.

## Banner

```python
import sys
from ferox.banner import Banner
from ferox.configuration import Configuration

config = Configuration()
banner = Banner(["http://localhost"], config)
banner.print_to(sys.stderr, config)
```

`Banner.check_for_updates(url, client)` fetches a JSON document holding a
`tag_name` field and sets `banner.update_status` to an `UpdateStatus`; the
banner then mentions a new version when one is available. A bad URL or a
response without `tag_name` raises `ValueError` and leaves the status unknown.

## What this package does not do

There is no command to run and no command-line parser: options are parsed one
value at a time by the helpers above. The package does not send the scan's
requests, recurse into directories, filter responses, write results or save and
resume scan state; it only prepares the configuration, client and banner for
such a scan.