"""Internal helpers: run git commands, GitRunnerError."""

import logging
import subprocess
from pathlib import Path

# Local commands only; fetch talks to the network and runs without a timeout.
LOCAL_TIMEOUT = 60


class GitRunnerError(Exception):
    """Raised when a git command fails."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


def _run_git(
    args: list[str],
    cwd: Path,
    log: logging.Logger | None = None,
    input: bytes | None = None,
    timeout: int | None = LOCAL_TIMEOUT,
) -> str:
    """Run git command and return its stripped stdout; raise GitRunnerError on
    non-zero exit."""
    return _run_git_bytes(args, cwd=cwd, log=log, input=input, timeout=timeout).decode("utf-8").strip()


def _run_git_bytes(
    args: list[str],
    cwd: Path,
    log: logging.Logger | None = None,
    input: bytes | None = None,
    timeout: int | None = LOCAL_TIMEOUT,
) -> bytes:
    """Run git command and return raw stdout (for blob contents)."""
    cmd = ["git"] + args
    try:
        proc = subprocess.run(cmd, cwd=cwd, check=True, capture_output=True, input=input, timeout=timeout)
    except subprocess.CalledProcessError as e:
        err = (e.stderr or e.stdout or b"").decode("utf-8", errors="replace").strip()
        if log:
            log.debug("Git %s failed (%s): %s", args, e.returncode, err)
        raise GitRunnerError(f"git {' '.join(args)}: {err}", returncode=e.returncode) from e
    except subprocess.TimeoutExpired as e:
        raise GitRunnerError(f"git {' '.join(args)}: timed out after {timeout}s") from e
    except FileNotFoundError as e:
        raise GitRunnerError("git not found") from e
    return proc.stdout
