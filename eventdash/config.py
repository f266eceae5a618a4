"""
Event Dashboard — Configuration: paths, source names, constants.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths: override with EVENTDASH_DATA_DIR env var for cloud deployment
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("EVENTDASH_DATA_DIR", str(Path.cwd() / "data")))
DATA_FOLDER = _data_dir
REPORTS_FOLDER = Path(os.environ.get("EVENTDASH_REPORTS_DIR", str(_data_dir / "reports")))

# ---------------------------------------------------------------------------
# Source documents. When EVENTDASH_SOURCE_URL is set the three exports are
# fetched over HTTP from that base URL instead of DATA_FOLDER
# ---------------------------------------------------------------------------
SOURCE_BASE_URL = os.environ.get("EVENTDASH_SOURCE_URL", "").rstrip("/")
EVENTS_SOURCE = os.environ.get("EVENTDASH_EVENTS_FILE", "events.json")
USERS_SOURCE = os.environ.get("EVENTDASH_USERS_FILE", "users.json")
REGISTRATIONS_SOURCE = os.environ.get("EVENTDASH_REGISTRATIONS_FILE", "registrations.json")

FETCH_TIMEOUT = float(os.environ.get("EVENTDASH_FETCH_TIMEOUT", "30"))

# ---------------------------------------------------------------------------
# Normalization constants
# ---------------------------------------------------------------------------
UNKNOWN_USER_NAME = "Unknown User"
SYNTHETIC_NAME_SUFFIX_LEN = 6

# Single-key wrapper objects produced by the registration platform's export
EXPORT_WRAPPER_KEYS = ("$oid", "$date", "$numberLong", "$numberInt")

# ---------------------------------------------------------------------------
# Dashboard filters (first entry is the default)
# ---------------------------------------------------------------------------
EVENT_TYPE_FILTERS = ("all", "technical", "non-tech")
SORT_KEYS = ("registrations", "name")

LOAD_ERROR_MESSAGE = "Failed to load data. Please make sure the JSON files are available."
