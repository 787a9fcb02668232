"""Subprocess execution with rich error context.

Gateway implementations run every external command through
run_subprocess_with_context so failures carry the command, exit code and
captured output.
"""

import logging
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


def run_subprocess_with_context(
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path | None = None,
    *,
    input: str | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Execute subprocess with enriched error reporting for the gateway layer.

    Wraps subprocess.run() to catch CalledProcessError and re-raise as RuntimeError
    with operation context, stderr output, and command details.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human-readable description of operation
        cwd: Working directory for command execution
        input: Text passed to the command on stdin
        env: Full environment for the child process (None inherits ours)
        check: Whether to raise on non-zero exit (default: True)

    Returns:
        CompletedProcess instance from subprocess.run()

    Raises:
        RuntimeError: If command fails or the binary is missing
    """
    cmd_str = " ".join(str(arg) for arg in cmd)
    logger.debug("$ %s", cmd_str)
    try:
        return subprocess.run(
            list(cmd),
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            input=input,
            env=dict(env) if env is not None else None,
            check=check,
        )

    except subprocess.CalledProcessError as e:
        error_msg = f"Failed to {operation_context}"
        error_msg += f"\nCommand: {cmd_str}"
        error_msg += f"\nExit code: {e.returncode}"

        stdout_stripped = (e.stdout or "").strip()
        if stdout_stripped:
            error_msg += f"\nstdout: {stdout_stripped}"

        stderr_stripped = (e.stderr or "").strip()
        if stderr_stripped:
            error_msg += f"\nstderr: {stderr_stripped}"

        raise RuntimeError(error_msg) from e

    except FileNotFoundError as e:
        error_msg = f"Command not found while trying to {operation_context}: {cmd[0]}"
        error_msg += f"\nFull command: {cmd_str}"
        raise RuntimeError(error_msg) from e
