"""Static configuration for threadlink.

All non-secret settings (server, storage, Slack channel, logging) live in a
single JSON file for quick edits without touching Python. Secrets come from
the environment, see client.py.
"""

import json
import os

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Server and storage settings are loaded from config.json so deployments can
# move the database or port without editing code.
CONFIG_PATH = os.environ.get("THREADLINK_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

_server = _CONFIG.get("server", {})
HOST = _server.get("host", "0.0.0.0")
PORT = int(_server.get("port", 8787))

# Where to store the SQLite database. Relative paths are resolved against the
# project root.
_storage = _CONFIG.get("storage", {})
DB_PATH = _storage.get("db_path", "threadlink.db")
if not os.path.isabs(DB_PATH):
    DB_PATH = os.path.join(PROJECT_ROOT, DB_PATH)

# Channel new threads are posted to when running in single-account mode
# (ACCOUNT_ID set). Accounts stored in the database carry their own channel.
_slack = _CONFIG.get("slack", {})
DEFAULT_CHANNEL = _slack.get("default_channel", "")

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
