import re
from pathlib import Path

# Paths (relative to the repository checkout the workflow runs in)
DATA_PATH = Path("docs/data/markers.geojson")
RESULT_PATH = Path("tools/last_result.json")
CFG_PATH = Path("config.json")

# Issue labels
LABEL_ADD = "marker-add"
LABEL_UPDATE = "marker-update"
LABEL_DELETE = "marker-delete"
LABEL_DONE = "marker-done"
LABEL_ERROR = "marker-error"

# Issue form fields (normalized headings), first hit wins
FIELD_ID = ("marker_id", "id")
FIELD_LAT = ("latitude", "lat")
FIELD_LNG = ("longitude", "lng")
FIELD_FOCUS = (
    "optional_map_behavior",
    "focus_on_load",
    "recenter_map_to_this_marker_on_load_sets_properties_focus_on_load_true",
)
FIELD_CONFIRM = ("confirmation", "confirm_delete")

# Regex Constants
RE_HEADING = re.compile(r"^### (.*)$")
RE_NON_ALNUM = re.compile(r"[^a-z0-9]+")
RE_NO_RESPONSE = re.compile(r"^_?no response_?$", re.IGNORECASE)
RE_CHECKBOX = re.compile(r"^- \[[ xX]\][ \t]*", re.MULTILINE)
RE_CHECKED = re.compile(r"^- \[[xX]\]", re.MULTILINE)
RE_ANY_CHECKBOX = re.compile(r"^- \[[ xX]\]", re.MULTILINE)
RE_NO_CHANGE = re.compile(r"^\(no change\)$", re.IGNORECASE)
RE_CLEAR = re.compile(r"^\(none\)$", re.IGNORECASE)
RE_AFFIRMATIVE = re.compile(r"\b(understand|yes|confirm|confirmed|delete)\b", re.IGNORECASE)

# Bounds
LAT_MIN, LAT_MAX = -90.0, 90.0
LNG_MIN, LNG_MAX = -180.0, 180.0

ICON_DEFAULT = "default"
ID_PREFIX = "m"

# Timeouts
GITHUB_TIMEOUT_S = 25
GIT_TIMEOUT_S = 30
