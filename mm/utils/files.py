import json
import os
import pathlib
import tempfile
from pathlib import Path
from typing import Any, Union

def load_json(path: pathlib.Path, default: Any) -> Any:
    """Load JSON if the file exists, else return default.
    Invalid JSON is NOT swallowed here: a corrupt dataset must stop the run.
    """
    if not path.exists():
        return default
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)

def dump_json(obj: Any) -> str:
    """Pretty-printed JSON with a trailing newline (stable git diffs)."""
    data = json.dumps(obj, ensure_ascii=False, indent=2)
    if not data.endswith("\n"):
        data += "\n"
    return data

def save_json(path: Union[str, pathlib.Path], obj: Any) -> None:
    """
    Atomic JSON write.
    The whole document is serialized first, then written to a unique temp file
    in the same directory and moved over the target with os.replace.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = dump_json(obj)

    fd = None
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=str(path.parent))
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            fd = None
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    finally:
        if fd is not None:
            os.close(fd)
        if tmp_name:
            Path(tmp_name).unlink(missing_ok=True)
