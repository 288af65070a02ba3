import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Any

# Set by mm.core.run when a log directory is configured
LOG_PATH: Optional[Path] = None

_LOG_LOCK = threading.Lock()

def setup_logging(log_dir: Optional[Path], log_name: Optional[str] = None) -> Optional[Path]:
    """Point log_line at logs/bot-YYYY-MM-DD.log inside log_dir (or disable file logging)."""
    global LOG_PATH
    if not log_dir:
        LOG_PATH = None
        return None
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    name = log_name or f"bot-{datetime.now(timezone.utc).strftime('%Y-%m-%d')}.log"
    LOG_PATH = log_dir / name
    return LOG_PATH

def _append(path: Path, line: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(line + "\n")

def log_line(msg: Any) -> None:
    """
    Logging wrapper (single timestamp, readable):
    - Prefix every line with: YYYY-MM-DD // HH:MM:SS+00:00 -
    - Goes to stderr: stdout is reserved for the outcome JSON line.
    """
    line = str(msg).strip()

    with _LOG_LOCK:
        ts = datetime.now(timezone.utc)
        prefix = ts.strftime("%Y-%m-%d // %H:%M:%S%z")
        if len(prefix) >= 5:
            prefix = prefix[:-2] + ":" + prefix[-2:]

        full = f"{prefix} - {line}" if line else f"{prefix} -"

        if LOG_PATH:
            _append(LOG_PATH, full)

        print(full, file=sys.stderr, flush=True)
