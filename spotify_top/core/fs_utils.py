import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Optional


def ensure_parent_dir(path: Path | str) -> None:
    """
    Create the directory that will hold `path`, if it is missing.
    """
    parent = Path(path).parent
    if str(parent) and not parent.exists():
        parent.mkdir(parents=True, exist_ok=True)


def write_json(path: str | Path, data: Any) -> None:
    """
    Persist a JSON document with an atomic replace.

    The document is dumped into a temporary sibling file, fsynced, then moved
    over `path` with os.replace. Readers therefore see either the previous
    document or the new one, never a half-written file. The users and cache
    stores rely on this because several request workers share those files.
    """
    target_path = Path(path)
    ensure_parent_dir(target_path)

    fd, tmp_name = tempfile.mkstemp(
        dir=str(target_path.parent),
        prefix=target_path.name,
        suffix=".tmp",
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, target_path)
    except Exception:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise


def read_json(
    path: str | Path,
    default: Any = None,
    *,
    on_error: Optional[Callable[[Exception], None]] = None,
) -> Any:
    """
    Load a JSON document.

    - missing file      -> `default`
    - undecodable JSON  -> `default`, after calling `on_error(exc)` if given

    Other I/O errors (permissions, unreadable disk) propagate so that the
    caller decides whether they are fatal.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return default
    except json.JSONDecodeError as e:
        if on_error:
            on_error(e)
        return default
