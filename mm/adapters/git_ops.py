import subprocess
import pathlib
from typing import Dict, Any, Tuple
from ..core.constants import GIT_TIMEOUT_S
from ..utils.log import log_line

def auto_git_push_markers(cfg: Dict[str, Any], root_dir: pathlib.Path, relpath: str, reason: str) -> bool:
    """
    Commit and push the markers file. (No pull, no rebase: runs are serialized upstream.)
    Returns True if pushed (or clean / disabled), False on error.
    """
    if not cfg.get("auto_push_markers", False):
        return True

    remote = str(cfg.get("git_remote", "origin") or "origin")
    branch = str(cfg.get("git_branch", "main") or "main")

    def run_git(args) -> Tuple[int, str]:
        try:
            r = subprocess.run(
                ["git"] + args,
                cwd=str(root_dir),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=GIT_TIMEOUT_S,
            )
            return r.returncode, r.stdout.strip()
        except (OSError, subprocess.SubprocessError) as e:
            return -1, str(e)

    # 1. Check status
    rc, out = run_git(["status", "--porcelain", "--", relpath])
    if rc != 0:
        log_line(f"ERROR | auto_push | git_status rc {rc} | out {out!r}")
        return False

    if not out.strip():
        return True

    # 2. Add
    rc, out = run_git(["add", "--", relpath])
    if rc != 0:
        log_line(f"ERROR | auto_push | git_add rc {rc} | out {out!r}")
        return False

    # 3. Commit
    rc, out = run_git(["commit", "-m", f"Update markers ({reason})"])
    if rc != 0:
        log_line(f"ERROR | auto_push | git_commit rc {rc} | out {out!r}")
        return False

    # 4. Push
    rc, out = run_git(["push", remote, f"HEAD:{branch}"])
    if rc != 0:
        log_line(f"ERROR | auto_push | git_push rc {rc} | out {out!r}")
        return False

    log_line(f"GIT PUSH OK | reason={reason}")
    return True
