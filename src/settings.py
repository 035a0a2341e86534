"""Static configuration for reviewbug.

All user-editable settings (notifier, messages, plugins, storage, logging)
live in a single JSON file for quick edits without touching Python.
"""

import json
import os

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# config.json sits at the project root unless REVIEWBUG_CONFIG points elsewhere.
CONFIG_PATH = os.environ.get("REVIEWBUG_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _normalize_plugins(raw_plugins: list[dict]) -> tuple[list[str], dict[str, str]]:
    """Return enabled plugin slugs and a slug -> display name map."""

    slugs: list[str] = []
    names: dict[str, str] = {}
    for entry in raw_plugins:
        slug = entry.get("slug")
        if not slug or not entry.get("enabled", True):
            continue
        slugs.append(slug)
        name = entry.get("name")
        if name:
            names[slug] = name
    return slugs, names


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Raw notifier block; core.config.build_notifier_config applies defaults.
NOTIFIER = _CONFIG.get("notifier", {})

# Notice text overrides merged over the built-in defaults.
MESSAGES = _CONFIG.get("messages", {})

# Tracked plugins and their display names.
PLUGINS, PLUGIN_NAMES = _normalize_plugins(_CONFIG.get("plugins", []))

# Capabilities granted to whoever runs the CLI.
CAPABILITIES = list(_CONFIG.get("capabilities", ["manage_options"]))

# Where to store the SQLite option database.
_storage = _CONFIG.get("storage", {})
DB_PATH = _storage.get("db_path", "reviewbug.db")
if not os.path.isabs(DB_PATH):
    DB_PATH = os.path.join(PROJECT_ROOT, DB_PATH)

# Anti-forgery token lifetime; the secret itself comes from REVIEWBUG_SECRET.
_security = _CONFIG.get("security", {})
NONCE_LIFETIME_SECONDS = int(_security.get("nonce_lifetime_seconds", 24 * 60 * 60))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
