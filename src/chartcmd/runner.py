"""Execution of the helm binary as a child process.

Each invocation gets its cache, config and data paths pointed at a private
home directory so that concurrent sessions never share helm state.
"""

import os
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from icecream import ic

from chartcmd.exceptions import BinaryNotFoundError, ExecutionError
from chartcmd.models import ToolProfile
from chartcmd.redaction import redact, redact_command


def isolated_environment(home_dir: str | Path, base: Mapping[str, str] | None = None) -> dict[str, str]:
    """Build the environment for a helm process rooted at a private home.

    Args:
        home_dir: The session's private home directory.
        base: Environment to start from; defaults to the current process environment.

    Returns:
        A new mapping; the base environment is never modified.

    """
    env = dict(os.environ if base is None else base)
    env.update(
        {
            "XDG_CACHE_HOME": os.path.join(home_dir, "cache"),
            "XDG_CONFIG_HOME": os.path.join(home_dir, "config"),
            "XDG_DATA_HOME": os.path.join(home_dir, "data"),
            "HELM_HOME": str(home_dir),
        }
    )
    return env


def execute(
    binary: str,
    args: Sequence[str],
    work_dir: str | Path,
    env: Mapping[str, str] | None = None,
) -> str:
    """Run a binary and return its combined output.

    Args:
        binary: Program to run.
        args: Arguments, without the program name.
        work_dir: Working directory of the child process.
        env: Full environment of the child; None inherits the current one.

    Returns:
        The redacted combined stdout and stderr.

    Raises:
        BinaryNotFoundError: If the binary cannot be found.
        ExecutionError: If the process exits with a nonzero status or is
            terminated by a signal.

    """
    cmd = [binary, *args]
    command_line = redact_command(cmd)
    ic(command_line, str(work_dir))

    try:
        result = subprocess.run(
            cmd,
            cwd=work_dir,
            env=None if env is None else dict(env),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except FileNotFoundError as err:
        raise BinaryNotFoundError(
            f"{binary} not found; please install helm and ensure it's on PATH. See: https://helm.sh/docs/intro/install/"
        ) from err

    output = redact(result.stdout or "")
    if result.returncode != 0:
        raise ExecutionError(result.returncode, output, command_line)
    return output


def run(profile: ToolProfile, args: Sequence[str], work_dir: str | Path, home_dir: str | Path) -> str:
    """Run helm as described by the profile inside an isolated home.

    Args:
        profile: The session's tool profile.
        args: Arguments built by chartcmd.commands.
        work_dir: Working directory, usually an unpacked chart.
        home_dir: The session's private home directory.

    Returns:
        The redacted combined output.

    """
    return execute(profile.binary_name, args, work_dir, env=isolated_environment(home_dir))
