from __future__ import annotations

import shutil
from pathlib import Path
from typing import Optional

from .errors import SiteError


def parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    return False


def parse_int(value: object, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def list_files(root: Path, exclude: Optional[Path] = None) -> list[Path]:
    """Regular, non-hidden files under ``root`` in a stable order.

    Anything inside ``exclude`` (the shared fragments directory) is skipped.
    """
    if not root.exists():
        return []
    files = []
    for path in sorted(root.rglob("*"), key=lambda p: p.as_posix()):
        if not path.is_file() or is_hidden(path):
            continue
        if exclude is not None and path.is_relative_to(exclude):
            continue
        files.append(path)
    return files


def clean_output_dir(output_dir: Path, project_root: Path) -> None:
    if not output_dir.exists():
        return
    output_resolved = output_dir.resolve()
    root_resolved = project_root.resolve()
    if output_resolved == root_resolved:
        raise SiteError("Refusing to clean project root.")
    if not output_resolved.is_relative_to(root_resolved):
        raise SiteError("Refusing to clean output directory outside project root.")
    shutil.rmtree(output_dir)
