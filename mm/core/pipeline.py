import copy
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .errors import SetupError
from .models import Outcome
from ..domain.mutate import apply_issue
from ..domain.validate import validate_geojson
from ..utils.files import load_json, save_json
from ..utils.log import log_line

def _load_required(path: Optional[Path], what: str) -> Any:
    if not path:
        raise SetupError(f"{what} path is not configured.")
    path = Path(path)
    if not path.exists():
        raise SetupError(f"{what} not found: {path}")
    try:
        return load_json(path, None)
    except (OSError, ValueError) as e:
        raise SetupError(f"{what} is unreadable: {path}: {e}") from e

def load_event(path: Optional[Path]) -> Dict[str, Any]:
    """Load the GitHub event payload and return its issue."""
    event = _load_required(path, "Event payload")
    issue = event.get("issue") if isinstance(event, dict) else None
    if not isinstance(issue, dict):
        raise SetupError("This script must run on an issues event payload.")
    return issue

def load_collection(path: Path) -> Dict[str, Any]:
    data = _load_required(path, "Markers dataset")
    if not isinstance(data, dict):
        raise SetupError(f"Markers dataset is not a JSON object: {path}")
    return data

def process_issue(
    issue: Dict[str, Any],
    collection: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Tuple[Outcome, Optional[Dict[str, Any]]]:
    """
    Mutate a private copy of `collection` and re-validate it.
    Returns (outcome, new_collection); new_collection is None unless the
    mutation succeeded AND the result passed schema validation.
    """
    candidate = copy.deepcopy(collection)

    outcome = apply_issue(issue, candidate, now)
    if not outcome.ok:
        return outcome, None

    errors = validate_geojson(candidate)
    if errors:
        log_line(f"VALIDATION FAILED | issue={issue.get('number')} | errors={len(errors)}")
        return Outcome.fail(f"GeoJSON validation failed after mutation: {' | '.join(errors)}"), None

    return outcome, candidate

def run_issue_event(cfg: Dict[str, Any], now: Optional[datetime] = None) -> Tuple[Dict[str, Any], Outcome]:
    """
    One workflow run: load event + dataset, mutate, validate, then either
    persist the dataset or leave it untouched. The outcome record is always
    written; returns (issue, outcome). SetupError propagates (nothing has been mutated at that point).
    """
    data_path = Path(cfg["data_path"])
    result_path = Path(cfg["result_path"])

    issue = load_event(cfg.get("event_path"))
    collection = load_collection(data_path)
    log_line(f"LOADED | issue={issue.get('number')} | markers={len(collection.get('features') or [])}")

    outcome, updated = process_issue(issue, collection, now)

    if updated is not None:
        save_json(data_path, updated)
        log_line(f"SAVED | {data_path} | markers={len(updated['features'])}")
    else:
        log_line(f"DISCARDED | issue={issue.get('number')} | {outcome.message}")

    save_json(result_path, outcome.to_dict())
    return issue, outcome
