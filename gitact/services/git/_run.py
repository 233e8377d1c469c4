"""Internal helpers: run git commands and return their result as a value."""

import logging
import subprocess
from pathlib import Path

from gitact.sanitize import redact_message


class GitResult:
    """Outcome of one git invocation. Never raised; callers inspect it."""

    def __init__(self, args: list[str], returncode: int, stdout: str = "", stderr: str = "") -> None:
        self.args = args
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Stripped stdout."""
        return self.stdout.strip()

    @property
    def error(self) -> str:
        """Redacted failure text (stderr, else stdout)."""
        return redact_message((self.stderr or self.stdout).strip())

    def describe(self) -> str:
        """One-line summary for error messages: git <args>: <error>."""
        return f"git {' '.join(self.args)}: {self.error or f'exit code {self.returncode}'}"


GIT_NOT_FOUND = 127


def run_git(
    args: list[str],
    cwd: Path,
    log: logging.Logger | None = None,
    timeout: float | None = None,
) -> GitResult:
    """Run a git command in cwd and return a GitResult.

    Non-zero exits, a missing git binary and timeouts are all reported
    through the result, never as exceptions.
    """
    cmd = ["git"] + args
    try:
        proc = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError as e:
        return GitResult(args, GIT_NOT_FOUND, stderr=f"git not available: {e}")
    except subprocess.TimeoutExpired:
        return GitResult(args, -1, stderr=f"timed out after {timeout}s")
    result = GitResult(args, proc.returncode, proc.stdout, proc.stderr)
    if not result.ok and log:
        log.debug("Git %s failed: %s", args, result.error)
    return result
