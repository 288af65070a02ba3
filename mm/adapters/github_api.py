import requests
from typing import Dict, Any, List, Optional
from ..core.constants import GITHUB_TIMEOUT_S
from ..core.models import Outcome
from ..utils.log import log_line

def _api_headers(cfg: Dict[str, Any]) -> Dict[str, str]:
    token = str(cfg.get("github_token", "") or "")
    ua = str(cfg.get("user_agent", "MarkerMapBot/1.0") or "MarkerMapBot/1.0")
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "User-Agent": ua,
    }

def _issue_url(cfg: Dict[str, Any], issue_number: int) -> str:
    api = str(cfg.get("api_url", "") or "https://api.github.com").rstrip("/")
    return f"{api}/repos/{cfg['repository']}/issues/{issue_number}"

def api_post(cfg: Dict[str, Any], url: str, payload: Dict[str, Any]) -> requests.Response:
    return requests.post(url, headers=_api_headers(cfg), json=payload, timeout=GITHUB_TIMEOUT_S)

def api_patch(cfg: Dict[str, Any], url: str, payload: Dict[str, Any]) -> requests.Response:
    return requests.patch(url, headers=_api_headers(cfg), json=payload, timeout=GITHUB_TIMEOUT_S)

def can_report(cfg: Dict[str, Any]) -> bool:
    return bool(cfg.get("report_to_github") and cfg.get("github_token") and cfg.get("repository"))

def _ok(r: requests.Response, what: str, issue_number: int) -> bool:
    if 200 <= r.status_code < 300:
        return True
    log_line(f"WARN | github {what} | issue={issue_number} | status={r.status_code} | body={r.text[:200]!r}")
    return False

def add_labels(cfg: Dict[str, Any], issue_number: int, labels: List[str]) -> bool:
    try:
        r = api_post(cfg, f"{_issue_url(cfg, issue_number)}/labels", {"labels": labels})
        return _ok(r, "add_labels", issue_number)
    except requests.RequestException as e:
        log_line(f"ERROR | github add_labels | issue={issue_number} | err={e!r}")
        return False

def post_comment(cfg: Dict[str, Any], issue_number: int, body: str) -> bool:
    try:
        r = api_post(cfg, f"{_issue_url(cfg, issue_number)}/comments", {"body": body})
        return _ok(r, "post_comment", issue_number)
    except requests.RequestException as e:
        log_line(f"ERROR | github post_comment | issue={issue_number} | err={e!r}")
        return False

def close_issue(cfg: Dict[str, Any], issue_number: int) -> bool:
    try:
        r = api_patch(cfg, _issue_url(cfg, issue_number), {"state": "closed", "state_reason": "completed"})
        return _ok(r, "close_issue", issue_number)
    except requests.RequestException as e:
        log_line(f"ERROR | github close_issue | issue={issue_number} | err={e!r}")
        return False

def build_comment(outcome: Outcome) -> str:
    if outcome.ok:
        return f"✅ {outcome.message}\n\nThe map data has been updated."
    return f"⚠️ {outcome.message}\n\nPlease edit the issue to fix the problem."

def report_outcome(cfg: Dict[str, Any], issue_number: Optional[int], outcome: Outcome) -> bool:
    """
    Mirror the outcome on the issue:
    - ok:    done label + comment + close
    - error: error label + comment (issue stays open)
    Returns True when every call succeeded. Never raises for HTTP problems.
    """
    if not can_report(cfg) or not issue_number:
        return False

    label = cfg.get("done_label") if outcome.ok else cfg.get("error_label")
    ok = add_labels(cfg, issue_number, [label])
    ok = post_comment(cfg, issue_number, build_comment(outcome)) and ok
    if outcome.ok:
        ok = close_issue(cfg, issue_number) and ok

    log_line(f"REPORTED | issue={issue_number} | ok={outcome.ok} | calls_ok={ok}")
    return ok
