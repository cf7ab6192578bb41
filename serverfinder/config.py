"""Paths and constants."""

from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "server-finder"

# Lookup file discovery
LOOKUP_FILENAME = "server-finder-data.json"
LOOKUP_FILE_ENVVAR = "SERVER_FINDER_LOOKUP_FILE"
DATA_DIR = Path(user_data_dir(APP_NAME))

LOOKUP_SEARCH_PATHS = [
    DATA_DIR / LOOKUP_FILENAME,
    Path("data") / LOOKUP_FILENAME,
    Path.home() / f".{LOOKUP_FILENAME}",
    Path("/etc/server-finder") / LOOKUP_FILENAME,
]

# DNS
# AAAA is deliberately not queried; IPv6-only hosts resolve to nothing.
DNS_RECORD_TYPES = ("A", "CNAME")
