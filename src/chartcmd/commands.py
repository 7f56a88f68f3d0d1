"""Argument lists for helm sub-commands.

Every function here is pure: it takes the session's ToolProfile and typed
options and returns the ordered arguments, without the program name. All
differences between helm generations are read from the profile.
"""

import re
from collections.abc import Sequence

from chartcmd.models import TemplateOptions, ToolProfile

# A comma not preceded by a backslash
_UNESCAPED_COMMA = re.compile(r"(?<!\\),")


def init_args() -> list[str]:
    """Arguments for the one-time client initialisation of legacy helm."""
    return ["init", "--client-only", "--skip-refresh"]


def repo_add_args(name: str, url: str, credential_flags: Sequence[str] = ()) -> list[str]:
    """Arguments for adding a chart repository.

    Args:
        name: Local name of the repository.
        url: Repository URL.
        credential_flags: Flags produced by chartcmd.credentials.

    Returns:
        `repo add <credential flags> <name> <url>`.

    """
    return ["repo", "add", *credential_flags, name, url]


def fetch_args(
    profile: ToolProfile,
    repo: str,
    chart_name: str,
    version: str,
    destination: str,
    credential_flags: Sequence[str] = (),
) -> list[str]:
    """Arguments for downloading a chart archive.

    Args:
        profile: The session's tool profile.
        repo: Repository URL.
        chart_name: Name of the chart in the repository.
        version: Chart version; an empty string fetches the latest.
        destination: Existing directory to download into.
        credential_flags: Flags produced by chartcmd.credentials.

    Returns:
        The pull command with destination, optional version, credentials
        and the trailing `--repo <repo> <chart>`.

    """
    args = [profile.pull_command, "--destination", destination]
    if version:
        args.extend(["--version", version])
    args.extend(credential_flags)
    args.extend(["--repo", repo, chart_name])
    return args


def dependency_build_args() -> list[str]:
    return ["dependency", "build"]


def inspect_values_args(profile: ToolProfile, values: str) -> list[str]:
    """Arguments for printing the default values of a chart."""
    return [profile.show_command, "values", values]


def clean_set_parameters(value: str) -> str:
    """Escape commas that helm would otherwise read as list separators.

    Commas already preceded by a backslash are left alone, so applying the
    function twice gives the same result as applying it once.

    Args:
        value: A value for `--set`, `--set-string` or `--set-file`.

    Returns:
        The value with every unescaped comma escaped.

    Example:
        >>> clean_set_parameters("a,b")
        'a\\\\,b'

    """
    return _UNESCAPED_COMMA.sub(r"\\,", value)


def template_args(profile: ToolProfile, chart_path: str, options: TemplateOptions) -> list[str]:
    """Arguments for rendering a chart into manifests.

    Args:
        profile: The session's tool profile.
        chart_path: Path of an unpacked chart directory.
        options: Release name, namespace and values to render with.

    Returns:
        The ordered `template` arguments.

    """
    args = ["template", chart_path, profile.template_name_arg, options.release_name]

    if options.namespace:
        args.extend(["--namespace", options.namespace])
    if options.kube_version and profile.kube_version_supported:
        args.extend(["--kube-version", options.kube_version])
    for flag, entries in (
        ("--set", options.set_values),
        ("--set-string", options.set_string_values),
        ("--set-file", options.set_file_values),
    ):
        for key, val in entries.items():
            args.extend([flag, f"{key}={clean_set_parameters(val)}"])
    for path in options.values_files:
        args.extend(["--values", path])
    for api_version in options.api_versions:
        args.extend(["--api-versions", api_version])

    return args
