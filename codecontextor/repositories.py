from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


def is_git_repo(directory: Path) -> bool:
    return (directory / ".git").exists()


def repo_name(directory: str | Path) -> str | None:
    """Name a repository after its directory, if the directory holds ``.git``."""
    path = Path(directory).resolve()
    if not path.is_dir() or not is_git_repo(path):
        return None
    return path.name or None


def project_name(targets: Sequence[str | Path]) -> str | None:
    """Repository name of the first directory target, if it is a repository."""
    for target in targets:
        if Path(target).is_dir():
            return repo_name(target)
    return None
