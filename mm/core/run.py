import argparse
import json
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import mm
from .config import load_config, DEFAULTS
from .errors import SetupError
from .models import Outcome
from .pipeline import run_issue_event
from ..adapters.git_ops import auto_git_push_markers
from ..adapters.github_api import report_outcome
from ..utils.files import save_json
from ..utils.log import log_line, setup_logging

def _emit(outcome: Outcome) -> None:
    # single JSON line on stdout for the workflow to pick up
    print(json.dumps(outcome.to_dict(), ensure_ascii=False), flush=True)

def _fail_setup(cfg: Dict[str, Any], err: Exception) -> Outcome:
    outcome = Outcome.fail(str(err) or "Unknown error")
    log_line(f"SETUP ERROR | {err}")
    try:
        save_json(Path(cfg.get("result_path") or DEFAULTS["result_path"]), outcome.to_dict())
    except OSError as e:
        log_line(f"ERROR | cannot write result file | {e!r}")
    return outcome

def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Apply a marker-add/update/delete issue to the markers dataset")
    ap.add_argument("--config", default=None, help="Config JSON (default: ./config.json)")
    ap.add_argument("--event", default=None, help="Event payload (default: $GITHUB_EVENT_PATH)")
    ap.add_argument("--data", default=None, help="Markers GeoJSON path")
    ap.add_argument("--result", default=None, help="Outcome record path")
    args = ap.parse_args(argv)

    cfg: Dict[str, Any] = dict(DEFAULTS)
    issue: Dict[str, Any] = {}
    try:
        cfg = load_config(Path(args.config) if args.config else None)
        for key, val in (("event_path", args.event), ("data_path", args.data), ("result_path", args.result)):
            if val:
                cfg[key] = val
        setup_logging(Path(cfg["log_dir"]) if cfg.get("log_dir") else None)
        log_line(f"RUN STARTED (marker bot v{mm.__version__})")

        issue, outcome = run_issue_event(cfg)
    except SetupError as e:
        outcome = _fail_setup(cfg, e)

    _emit(outcome)

    if outcome.ok:
        auto_git_push_markers(cfg, Path(".").resolve(), str(cfg["data_path"]), reason=f"issue #{issue.get('number')}")

    report_outcome(cfg, issue.get("number"), outcome)
    return 0 if outcome.ok else 1
