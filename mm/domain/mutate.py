"""
Marker mutation engine.

An issue is classified once from its labels into an Operation
(AddMarker / UpdateMarker / DeleteMarker), then applied to the in-memory
FeatureCollection. Failures are raised as MarkerError subclasses and turned
into an Outcome by apply_issue; the collection is only touched after every
check for the request has passed.
"""
import math
import secrets
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..core.constants import (
    LABEL_ADD, LABEL_UPDATE, LABEL_DELETE,
    FIELD_ID, FIELD_LAT, FIELD_LNG, FIELD_FOCUS, FIELD_CONFIRM,
    RE_NO_CHANGE, RE_CLEAR, RE_AFFIRMATIVE, RE_ANY_CHECKBOX,
    LAT_MIN, LAT_MAX, LNG_MIN, LNG_MAX, ICON_DEFAULT, ID_PREFIX,
)
from ..core.errors import (
    MarkerError, ClassificationError, InputError, NotFoundError, ConflictError, ConfirmationError,
)
from ..core.models import (
    OpKind, FieldState, FieldInput, FormField, MarkerFields,
    AddMarker, UpdateMarker, DeleteMarker, Operation, Outcome, ABSENT, CLEARED,
)
from ..utils.log import log_line
from ..utils.time import now_utc, iso_timestamp, compact_date
from .issue_form import parse_issue_form, field_checked
from .validate import is_valid_url, is_number

_LABEL_ORDER = ((LABEL_ADD, OpKind.ADD), (LABEL_UPDATE, OpKind.UPDATE), (LABEL_DELETE, OpKind.DELETE))

# ---------------------------------------------------------------------------
# classification / field extraction
# ---------------------------------------------------------------------------

def label_names(labels: Optional[Iterable[Any]]) -> List[str]:
    names = []
    for lb in labels or []:
        name = lb.get("name") if isinstance(lb, dict) else lb
        if isinstance(name, str):
            names.append(name.strip().lower())
    return names

def classify_labels(labels: Optional[Iterable[Any]]) -> Optional[OpKind]:
    names = label_names(labels)
    for label, kind in _LABEL_ORDER:
        if label in names:
            return kind
    return None

def field_input(text: str) -> FieldInput:
    t = (text or "").strip()
    if not t or RE_NO_CHANGE.match(t):
        return ABSENT
    if RE_CLEAR.match(t):
        return CLEARED
    return FieldInput(FieldState.SET, t)

def pick_input(form: Dict[str, FormField], *keys: str) -> FieldInput:
    """First alias holding a value; placeholders under one key fall through to the next."""
    picked = ABSENT
    for k in keys:
        f = form.get(k)
        fi = field_input(f.value) if f else ABSENT
        if fi.is_set:
            return fi
        if fi.state is FieldState.CLEARED:
            picked = CLEARED
    return picked

def parse_number(fi: FieldInput, kind: str) -> Optional[float]:
    if not fi.is_set:
        return None
    try:
        num = float(fi.value)
    except ValueError:
        raise InputError(f"{kind} must be a number.") from None
    if not math.isfinite(num):
        raise InputError(f"{kind} must be a number.")
    return num

def check_range(lat: Optional[float], lng: Optional[float]) -> None:
    if lat is not None and not (LAT_MIN <= lat <= LAT_MAX):
        raise InputError("Latitude must be in range -90..90.")
    if lng is not None and not (LNG_MIN <= lng <= LNG_MAX):
        raise InputError("Longitude must be in range -180..180.")

def read_fields(form: Dict[str, FormField]) -> MarkerFields:
    return MarkerFields(
        title=pick_input(form, "title"),
        description=pick_input(form, "description"),
        link=pick_input(form, "link"),
        category=pick_input(form, "category"),
        icon=pick_input(form, "icon"),
        lat=pick_input(form, *FIELD_LAT),
        lng=pick_input(form, *FIELD_LNG),
    )

def read_coords(fields: MarkerFields) -> Tuple[Optional[float], Optional[float]]:
    """(lat, lng) as numbers, None where not given; raises InputError on junk or out-of-range."""
    lat = parse_number(fields.lat, "Latitude")
    lng = parse_number(fields.lng, "Longitude")
    check_range(lat, lng)
    return lat, lng

def check_urls(fields: MarkerFields) -> None:
    if fields.link.is_set and not is_valid_url(fields.link.value):
        raise InputError("Link must be a valid http/https URL.")
    if fields.icon.is_set and fields.icon.value != ICON_DEFAULT and not is_valid_url(fields.icon.value):
        raise InputError('Icon must be "default" or a valid http/https URL.')

def read_marker_id(form: Dict[str, FormField]) -> Optional[str]:
    fi = pick_input(form, *FIELD_ID)
    return fi.value if fi.is_set else None

def is_delete_confirmed(form: Dict[str, FormField]) -> bool:
    if field_checked(form, *FIELD_CONFIRM):
        return True
    for key in FIELD_CONFIRM:
        f = form.get(key)
        # free-text answer only; an unticked checkbox option must not count
        if f and f.value and not RE_ANY_CHECKBOX.search(f.raw) and RE_AFFIRMATIVE.search(f.value):
            return True
    return False

def build_operation(kind: OpKind, form: Dict[str, FormField], issue_number: Optional[int] = None) -> Operation:
    if kind is OpKind.ADD:
        return AddMarker(fields=read_fields(form), marker_id=read_marker_id(form), issue_number=issue_number)

    marker_id = read_marker_id(form)

    if kind is OpKind.UPDATE:
        if not marker_id:
            raise InputError("Marker ID is required for Update Marker issues.")
        return UpdateMarker(marker_id=marker_id, fields=read_fields(form), focus=field_checked(form, *FIELD_FOCUS))

    if kind is OpKind.DELETE:
        if not marker_id:
            raise InputError("Marker ID is required for Delete Marker issues.")
        return DeleteMarker(marker_id=marker_id, confirmed=is_delete_confirmed(form))

    raise ClassificationError(f"Unsupported operation: {kind!r}")

# ---------------------------------------------------------------------------
# collection helpers
# ---------------------------------------------------------------------------

def feature_id(feature: Any) -> str:
    if not isinstance(feature, dict):
        return ""
    props = feature.get("properties")
    if not isinstance(props, dict):
        return ""
    fid = props.get("id")
    return fid if isinstance(fid, str) else ""

def sort_features(collection: Dict[str, Any]) -> None:
    collection["features"].sort(key=feature_id)

def find_feature(collection: Dict[str, Any], marker_id: str) -> Optional[Dict[str, Any]]:
    for f in collection["features"]:
        if feature_id(f) == marker_id:
            return f
    return None

def generate_id(issue_number: Optional[int], now: Optional[datetime] = None) -> str:
    suffix = str(issue_number) if issue_number else secrets.token_hex(3)
    return f"{ID_PREFIX}-{compact_date(now)}-{suffix}"

def _current_coords(feature: Dict[str, Any]) -> Tuple[Optional[float], Optional[float]]:
    """(lng, lat) of the stored geometry, None where missing."""
    geometry = feature.get("geometry")
    coords = geometry.get("coordinates") if isinstance(geometry, dict) else None
    if isinstance(coords, list) and len(coords) == 2:
        lng, lat = coords
        return (lng if is_number(lng) else None), (lat if is_number(lat) else None)
    return None, None

# ---------------------------------------------------------------------------
# operations
# ---------------------------------------------------------------------------

def _add(op: AddMarker, collection: Dict[str, Any], now: datetime) -> Outcome:
    fields = op.fields
    if not fields.title.is_set:
        raise InputError("Title is required for Add Marker issues.")
    lat, lng = read_coords(fields)
    if lat is None or lng is None:
        raise InputError("Latitude and longitude are required for Add Marker issues.")
    check_urls(fields)

    marker_id = op.marker_id or generate_id(op.issue_number, now)
    if find_feature(collection, marker_id) is not None:
        raise ConflictError(f'A marker with id "{marker_id}" already exists.')

    props: Dict[str, Any] = {"id": marker_id}
    for name, fi in fields.optional().items():
        if fi.is_set:
            props[name] = fi.value
    props["updated_at"] = iso_timestamp(now)

    collection["features"].append({
        "type": "Feature",
        "properties": props,
        "geometry": {"type": "Point", "coordinates": [lng, lat]},
    })
    sort_features(collection)
    return Outcome.success(f'Added marker "{marker_id}".')

def _update(op: UpdateMarker, collection: Dict[str, Any], now: datetime) -> Outcome:
    target = find_feature(collection, op.marker_id)
    if target is None:
        raise NotFoundError(f'Marker with id "{op.marker_id}" was not found.')

    fields = op.fields
    if fields.title.state is FieldState.CLEARED:
        raise InputError("Title cannot be cleared.")

    new_lat, new_lng = read_coords(fields)
    check_urls(fields)

    geometry = None
    if new_lat is not None or new_lng is not None:
        cur_lng, cur_lat = _current_coords(target)
        lng = new_lng if new_lng is not None else cur_lng
        lat = new_lat if new_lat is not None else cur_lat
        if lat is None or lng is None:
            raise InputError("Both latitude and longitude are required: the marker has no stored position.")
        check_range(lat, lng)
        geometry = {"type": "Point", "coordinates": [lng, lat]}

    # all checks passed, write
    props = target.get("properties")
    if not isinstance(props, dict):
        props = {}
        target["properties"] = props
    for name, fi in fields.optional().items():
        if fi.state is FieldState.SET:
            props[name] = fi.value
        elif fi.state is FieldState.CLEARED:
            props.pop(name, None)
    if op.focus:
        props["focus_on_load"] = True
    if geometry is not None:
        target["geometry"] = geometry
    props["updated_at"] = iso_timestamp(now)

    sort_features(collection)
    return Outcome.success(f'Updated marker "{op.marker_id}".')

def _delete(op: DeleteMarker, collection: Dict[str, Any]) -> Outcome:
    if not op.confirmed:
        raise ConfirmationError("Delete confirmation checkbox must be checked.")

    target = find_feature(collection, op.marker_id)
    if target is None:
        raise NotFoundError(f'Marker with id "{op.marker_id}" was not found.')

    collection["features"].remove(target)
    sort_features(collection)
    return Outcome.success(f'Deleted marker "{op.marker_id}".')

def apply_operation(op: Operation, collection: Dict[str, Any], now: Optional[datetime] = None) -> Outcome:
    now = now or now_utc()
    if isinstance(op, AddMarker):
        return _add(op, collection, now)
    if isinstance(op, UpdateMarker):
        return _update(op, collection, now)
    if isinstance(op, DeleteMarker):
        return _delete(op, collection)
    raise ClassificationError(f"Unsupported operation: {type(op).__name__}")

def apply_issue(issue: Dict[str, Any], collection: Dict[str, Any], now: Optional[datetime] = None) -> Outcome:
    """Classify, parse and apply one issue against `collection` (mutated in place on success)."""
    number = issue.get("number")
    kind = classify_labels(issue.get("labels"))
    if kind is None:
        log_line(f"APPLY | issue={number} | unrecognized labels={label_names(issue.get('labels'))}")
        return Outcome.fail("Issue is missing one of marker-add, marker-update, or marker-delete labels.")

    if not isinstance(collection.get("features"), list):
        return Outcome.fail("Dataset is not a GeoJSON FeatureCollection.")

    log_line(f"APPLY | issue={number} | op={kind.value}")
    try:
        op = build_operation(kind, parse_issue_form(issue.get("body") or ""), number if isinstance(number, int) else None)
        return apply_operation(op, collection, now)
    except MarkerError as e:
        log_line(f"APPLY FAILED | issue={number} | {type(e).__name__}: {e}")
        return Outcome.fail(str(e))
