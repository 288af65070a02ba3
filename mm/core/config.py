import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .constants import CFG_PATH, DATA_PATH, RESULT_PATH, LABEL_DONE, LABEL_ERROR
from .errors import SetupError
from ..utils.files import load_json

DEFAULTS: Dict[str, Any] = {
    "data_path": str(DATA_PATH),
    "result_path": str(RESULT_PATH),
    "event_path": None,
    "report_to_github": False,
    "github_token": None,
    "repository": None,
    "api_url": "https://api.github.com",
    "done_label": LABEL_DONE,
    "error_label": LABEL_ERROR,
    "auto_push_markers": False,
    "git_remote": "origin",
    "git_branch": "main",
    "log_dir": None,
    "user_agent": "MarkerMapBot/1.0",
}

# config key -> environment variable
ENV_KEYS = {
    "data_path": "MARKERS_PATH",
    "result_path": "RESULT_PATH",
    "event_path": "GITHUB_EVENT_PATH",
    "report_to_github": "REPORT_TO_GITHUB",
    "github_token": "GITHUB_TOKEN",
    "repository": "GITHUB_REPOSITORY",
    "api_url": "GITHUB_API_URL",
    "log_dir": "MARKER_LOG_DIR",
}

BOOL_KEYS = ("report_to_github", "auto_push_markers")

def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in ("1", "true", "yes", "on")

def load_config(path: Optional[Path] = None, env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """defaults < config.json < environment"""
    path = Path(path) if path else CFG_PATH
    env = os.environ if env is None else env

    cfg = dict(DEFAULTS)
    try:
        file_cfg = load_json(path, {})
    except (OSError, ValueError) as e:
        raise SetupError(f"Cannot read {path}: {e}") from e
    if not isinstance(file_cfg, dict):
        raise SetupError(f"{path} must contain a JSON object.")
    cfg.update(file_cfg)

    for key, var in ENV_KEYS.items():
        val = env.get(var)
        if val:
            cfg[key] = val

    for key in BOOL_KEYS:
        cfg[key] = _as_bool(cfg.get(key))
    return cfg
