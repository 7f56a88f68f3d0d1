"""Detection of the installed helm generation.

This module queries the helm binary for its version and maps the result to
one of the known ToolProfiles. Versions outside the known generations are
rejected instead of being guessed.
"""

import dataclasses
import os
import re
from pathlib import Path

from icecream import ic

from chartcmd import runner
from chartcmd.exceptions import BinaryNotFoundError, ExecutionError, VersionDetectionError
from chartcmd.models import LEGACY_PROFILE, MODERN_PROFILE, ToolGeneration, ToolProfile

DEFAULT_BINARY = "helm"
BINARY_ENV_VAR = "CHARTCMD_HELM_BINARY"

VERSION_ARGS = ["version", "--client", "--short"]

# Matches 'v3.12.0+gc9f554d' as well as 'Client: v2.16.1+gbbdfe5e'
_VERSION_PATTERN = re.compile(r"\bv?(\d+)\.(\d+)\.(\d+)(?:-[\w.]+)?(?:\+[\w.]+)?")

_PROFILES_BY_MAJOR: dict[int, ToolProfile] = {
    2: LEGACY_PROFILE,
    3: MODERN_PROFILE,
    4: MODERN_PROFILE,
}


def default_binary() -> str:
    """Return the helm binary configured through the environment, or 'helm'."""
    return os.environ.get(BINARY_ENV_VAR) or DEFAULT_BINARY


def parse_version(text: str) -> tuple[int, int, int]:
    """Extract the semantic version from `helm version` output.

    Args:
        text: Output of the version query.

    Returns:
        The (major, minor, patch) tuple.

    Raises:
        VersionDetectionError: If no version string is present.

    """
    match = _VERSION_PATTERN.search(text)
    if match is None:
        raise VersionDetectionError(f"Cannot parse helm version from output: {text.strip()!r}")
    major, minor, patch = (int(part) for part in match.groups())
    return major, minor, patch


def profile_for_version(version: tuple[int, int, int], binary_name: str = DEFAULT_BINARY) -> ToolProfile:
    """Map a helm version to its ToolProfile.

    Args:
        version: The (major, minor, patch) tuple.
        binary_name: The binary the version was read from.

    Returns:
        The matching profile, bound to binary_name.

    Raises:
        VersionDetectionError: If the major version is not a known generation.

    """
    profile = _PROFILES_BY_MAJOR.get(version[0])
    if profile is None:
        raise VersionDetectionError(f"Unsupported helm version: {'.'.join(str(part) for part in version)}")
    return dataclasses.replace(profile, binary_name=binary_name)


def profile_for_generation(generation: ToolGeneration, binary_name: str = DEFAULT_BINARY) -> ToolProfile:
    """Return the profile of a pinned generation without querying the binary."""
    profile = LEGACY_PROFILE if generation is ToolGeneration.LEGACY else MODERN_PROFILE
    return dataclasses.replace(profile, binary_name=binary_name)


def resolve(work_dir: str | Path, binary_name: str | None = None) -> ToolProfile:
    """Detect the installed helm generation.

    Args:
        work_dir: Directory to run the version query in.
        binary_name: Binary to query; defaults to default_binary().

    Returns:
        The ToolProfile for the installed version.

    Raises:
        VersionDetectionError: If the query fails or its output is not a
            known helm version.

    """
    binary = binary_name or default_binary()
    try:
        output = runner.execute(binary, VERSION_ARGS, work_dir)
    except (BinaryNotFoundError, ExecutionError) as err:
        raise VersionDetectionError(f"Failed to query {binary} version: {err}") from err

    version = parse_version(output)
    ic(binary, version)
    return profile_for_version(version, binary_name=binary)
