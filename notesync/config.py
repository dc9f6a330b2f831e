"""
Environment-driven configuration for the sync.

Values are read from the process environment. The CLI calls load_dotenv()
at import time, so a local .env file works the same way it does for the
GitHub Actions secrets the job normally runs with.

Required:
    • NOTION_TOKEN
    • NOTION_DATABASE_ID
    • FIREBASE_SA_JSON      (stringified service account JSON)

Optional:
    • FIREBASE_UID          (limit the sync to one user's notes)
    • NOTION_TITLE_PROP     (defaults to "Content")
    • NOTION_DELETE_MODE    (informational; pages are always archived)
"""

import json
import os
from typing import Mapping, Optional

from notesync.types import SyncSettings

REQUIRED_KEYS = ("FIREBASE_SA_JSON", "NOTION_TOKEN", "NOTION_DATABASE_ID")

DEFAULT_TITLE_PROP = "Content"
DEFAULT_DELETE_MODE = "archive"


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing or malformed."""


def load_settings(env: Optional[Mapping[str, str]] = None) -> SyncSettings:
    """
    Build SyncSettings from the environment.

    Parameters
    ----------
    env : Mapping[str, str] | None
        Source of configuration values. Defaults to os.environ; tests pass
        a plain dict.

    Raises
    ------
    ConfigurationError
        If any required key is missing or empty, or if FIREBASE_SA_JSON does
        not decode to a JSON object.
    """
    if env is None:
        env = os.environ

    missing = [key for key in REQUIRED_KEYS if not env.get(key)]
    if missing:
        raise ConfigurationError(f"Missing {' or '.join(missing)}")

    try:
        service_account = json.loads(env["FIREBASE_SA_JSON"])
    except json.JSONDecodeError as e:
        raise ConfigurationError("FIREBASE_SA_JSON is not valid JSON") from e

    if not isinstance(service_account, dict):
        raise ConfigurationError("FIREBASE_SA_JSON must be a JSON object")

    return {
        "notion_token": env["NOTION_TOKEN"],
        "notion_database_id": env["NOTION_DATABASE_ID"],
        "firebase_service_account": service_account,
        "firebase_uid": env.get("FIREBASE_UID") or None,
        "title_property": env.get("NOTION_TITLE_PROP") or DEFAULT_TITLE_PROP,
        "delete_mode": (env.get("NOTION_DELETE_MODE") or DEFAULT_DELETE_MODE).lower(),
    }
