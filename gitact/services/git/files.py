"""Write file batches into a working tree and enumerate its files.

Enumeration honours .gitignore (comments and negations skipped) plus a
built-in exclusion of the .git directory. Symlinks are never followed.
"""

import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, List

from gitact.errors import ActionError
from gitact.models import FileDescriptor, LocalRepoHandle
from gitact.services.git.checks import require_repository

LOG = logging.getLogger("gitact.services.git.files")

BUILTIN_IGNORES = [".git"]


def write_files(
    handle: LocalRepoHandle,
    files: Iterable[FileDescriptor],
    log: logging.Logger | None = None,
) -> List[Path]:
    """Write each file under the working tree, creating parent directories.

    Existing files are overwritten. Not transactional: a failure leaves the
    files written so far in place.

    Raises:
        RepositoryNotInitializedError: the clone does not exist.
        ActionError: a path resolves outside the tree or cannot be written.
    """
    log = log or LOG
    require_repository(handle, operation="write_files", log=log)
    root = handle.path.resolve()
    written: List[Path] = []
    for descriptor in files:
        target = (root / descriptor.path).resolve()
        if not target.is_relative_to(root):
            raise ActionError(
                f"Refusing to write {descriptor.path!r} outside the working tree",
                operation="write_files",
                repo=handle.ref.full_name,
            )
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(descriptor.content, encoding="utf-8", newline="")
        except OSError as e:
            raise ActionError(
                f"Cannot write {descriptor.path}: {e}",
                operation="write_files",
                repo=handle.ref.full_name,
                cause=str(e),
            ) from e
        written.append(target)
        log.debug("Wrote %s", descriptor.path)
    log.info("Wrote %d file(s) into %s", len(written), handle.ref)
    return written


def load_ignore_patterns(root: Path) -> List[str]:
    """Built-in exclusions plus patterns from <root>/.gitignore."""
    patterns = list(BUILTIN_IGNORES)
    gitignore = Path(root) / ".gitignore"
    if not gitignore.is_file():
        return patterns
    for raw in gitignore.read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or line.startswith("!"):
            continue
        line = line.strip("/")
        while line.startswith("**/"):
            line = line[3:]
        if line.endswith("/**"):
            line = line[:-3]
        if line:
            patterns.append(line)
    return patterns


def is_ignored(rel_path: str, patterns: List[str]) -> bool:
    """True if any contiguous run of path components matches a pattern.

    "build" excludes build/ at any depth; "*.log" any log file;
    "docs/tmp" that directory wherever it appears.
    """
    parts = [p for p in rel_path.split("/") if p]
    for end in range(1, len(parts) + 1):
        for start in range(end):
            candidate = "/".join(parts[start:end])
            if any(fnmatchcase(candidate, pattern) for pattern in patterns):
                return True
    return False


def retrieve_files(
    handle: LocalRepoHandle,
    sub_path: str | None = None,
    log: logging.Logger | None = None,
) -> List[str]:
    """Relative POSIX paths of non-ignored regular files, sorted, dotfiles included.

    sub_path limits the walk to one directory of the tree; a missing
    sub_path yields an empty list.
    """
    log = log or LOG
    require_repository(handle, operation="retrieve_files", log=log)
    root = handle.path.resolve()
    base = (root / sub_path).resolve() if sub_path else root
    if not base.is_relative_to(root):
        raise ActionError(
            f"Path {sub_path!r} is outside the working tree",
            operation="retrieve_files",
            repo=handle.ref.full_name,
        )
    if not base.is_dir():
        log.warning("Search path %s does not exist in %s", sub_path, handle.ref)
        return []

    patterns = load_ignore_patterns(root)
    log.debug("Ignore patterns: %s", patterns)
    found: List[str] = []
    for dirpath, dirnames, filenames in os.walk(base):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else f"{rel_dir}/"
        dirnames[:] = sorted(
            d
            for d in dirnames
            if not os.path.islink(os.path.join(dirpath, d)) and not is_ignored(f"{prefix}{d}", patterns)
        )
        for name in filenames:
            rel = f"{prefix}{name}"
            if os.path.islink(os.path.join(dirpath, name)):
                log.debug("Skip symlink %s", rel)
                continue
            if not is_ignored(rel, patterns):
                found.append(rel)
    found.sort()
    log.info("Retrieved %d file(s) from %s", len(found), handle.ref)
    return found


def read_file(handle: LocalRepoHandle, rel_path: str) -> str:
    """Text content of a working-tree file (undecodable bytes replaced).

    Raises ActionError for paths outside the tree and unreadable files.
    """
    root = handle.path.resolve()
    target = (root / rel_path).resolve()
    if not target.is_relative_to(root):
        raise ActionError(
            f"Refusing to read {rel_path!r} outside the working tree",
            operation="read_file",
            repo=handle.ref.full_name,
        )
    try:
        return target.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ActionError(
            f"Cannot read {rel_path}: {e}",
            operation="read_file",
            repo=handle.ref.full_name,
            cause=str(e),
        ) from e
