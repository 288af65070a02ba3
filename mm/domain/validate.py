import argparse
import json
import math
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence
from urllib.parse import urlparse

from ..core.constants import DATA_PATH, ICON_DEFAULT, LAT_MIN, LAT_MAX, LNG_MIN, LNG_MAX
from ..utils.time import parse_iso_datetime

def is_valid_url(value: Any) -> bool:
    """Absolute http(s) URL with a host."""
    if not isinstance(value, str) or not value.strip() or value != value.strip():
        return False
    try:
        u = urlparse(value)
        _ = u.port  # raises on a malformed port
    except ValueError:
        return False
    return u.scheme in ("http", "https") and bool(u.netloc) and bool(u.hostname)

def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)

def validate_geojson(data: Any) -> List[str]:
    """
    Check a marker FeatureCollection. Returns violations in feature order
    (empty list = valid). Never mutates `data`.

    Coordinates are stored GeoJSON-style as [lng, lat]: coordinates[1] is
    checked against the latitude bounds, coordinates[0] against longitude.
    """
    errors: List[str] = []

    if not isinstance(data, dict) or data.get("type") != "FeatureCollection" or not isinstance(data.get("features"), list):
        errors.append("Root object must be a GeoJSON FeatureCollection with a features array.")
        return errors

    ids = set()

    for index, feature in enumerate(data["features"]):
        prefix = f"feature[{index}]"
        if not isinstance(feature, dict) or feature.get("type") != "Feature":
            errors.append(f'{prefix}: must be type "Feature".')
            continue

        props = feature.get("properties")
        if not isinstance(props, dict):
            props = {}
        geom = feature.get("geometry")

        fid = props.get("id")
        if not isinstance(fid, str) or not fid:
            errors.append(f"{prefix}: properties.id is required and must be a string.")
        elif fid in ids:
            errors.append(f'{prefix}: duplicate id "{fid}".')
        else:
            ids.add(fid)

        title = props.get("title")
        if not isinstance(title, str) or not title.strip():
            errors.append(f"{prefix}: properties.title is required and must be a non-empty string.")

        link = props.get("link")
        if link not in (None, "") and not is_valid_url(link):
            errors.append(f"{prefix}: properties.link must be a valid http/https URL if provided.")

        icon = props.get("icon")
        if icon not in (None, "") and icon != ICON_DEFAULT and not is_valid_url(icon):
            errors.append(f'{prefix}: properties.icon must be "default" or a valid URL.')

        if parse_iso_datetime(props.get("updated_at")) is None:
            errors.append(f"{prefix}: properties.updated_at must be an ISO datetime string.")

        coords = geom.get("coordinates") if isinstance(geom, dict) else None
        if not isinstance(geom, dict) or geom.get("type") != "Point" or not isinstance(coords, list) or len(coords) != 2:
            errors.append(f"{prefix}: geometry must be Point with [lng, lat] coordinates.")
            continue

        lng, lat = coords
        if not is_number(lat) or not (LAT_MIN <= lat <= LAT_MAX):
            errors.append(f"{prefix}: latitude must be a number in [-90, 90] (got {lat!r}).")
        if not is_number(lng) or not (LNG_MIN <= lng <= LNG_MAX):
            errors.append(f"{prefix}: longitude must be a number in [-180, 180] (got {lng!r}).")

    return errors

def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate the markers GeoJSON file")
    parser.add_argument("path", nargs="?", default=str(DATA_PATH))
    args = parser.parse_args(argv)

    path = Path(args.path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"GeoJSON validation failed: cannot read {path}: {e}", file=sys.stderr)
        return 1

    errors = validate_geojson(data)
    if errors:
        print("GeoJSON validation failed:", file=sys.stderr)
        for err in errors:
            print(f"- {err}", file=sys.stderr)
        return 1

    print(f"GeoJSON validation passed: {path}")
    return 0
