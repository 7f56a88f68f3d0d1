"""Data models for chartcmd.

This module provides the type-safe data structures shared by the command
builders, the credential handling and the session.
"""

from dataclasses import dataclass, field
from enum import Enum


class ToolGeneration(str, Enum):
    """Known generations of the helm command-line tool.

    Inherits from str to allow direct use in string contexts
    (e.g., CLI option values, log output).
    """

    LEGACY = "v2"
    MODERN = "v3"


class SessionState(str, Enum):
    """Lifecycle states of a HelmSession."""

    CREATED = "created"
    RESOLVED = "resolved"
    ACTIVE = "active"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class ToolProfile:
    """Version-specific facts about the installed helm binary.

    Attributes:
        generation: The tool generation this profile describes.
        binary_name: Name or path of the binary to execute.
        init_supported: Whether a one-time client init step exists.
        pull_command: Sub-command used to download a chart archive.
        show_command: Sub-command used to inspect chart values.
        template_name_arg: Flag used to pass the release name to `template`.
        kube_version_supported: Whether `template` accepts `--kube-version`.

    """

    generation: ToolGeneration
    binary_name: str
    init_supported: bool
    pull_command: str
    show_command: str
    template_name_arg: str
    kube_version_supported: bool


LEGACY_PROFILE = ToolProfile(
    generation=ToolGeneration.LEGACY,
    binary_name="helm",
    init_supported=True,
    pull_command="fetch",
    show_command="inspect",
    template_name_arg="--name",
    kube_version_supported=True,
)

MODERN_PROFILE = ToolProfile(
    generation=ToolGeneration.MODERN,
    binary_name="helm",
    init_supported=False,
    pull_command="pull",
    show_command="show",
    template_name_arg="--name-template",
    kube_version_supported=False,
)


@dataclass(frozen=True, slots=True)
class Credentials:
    """Credentials for a chart repository.

    Attributes:
        username: Repository user name, passed inline.
        password: Repository password, passed inline.
        ca_path: Path to a CA bundle, passed through verbatim.
        cert_data: PEM client certificate, written to a transient file.
        key_data: PEM client key, written to a transient file.

    """

    username: str = ""
    password: str = ""
    ca_path: str = ""
    cert_data: bytes = b""
    key_data: bytes = b""

    @property
    def has_files(self) -> bool:
        """Whether any secret must be materialized on disk."""
        return bool(self.cert_data or self.key_data)

    def __repr__(self) -> str:
        """Return a representation that never shows secret values."""
        return (
            f"Credentials(username={self.username!r}, password={'***' if self.password else ''!r}, "
            f"ca_path={self.ca_path!r}, cert_data=<{len(self.cert_data)} bytes>, "
            f"key_data=<{len(self.key_data)} bytes>)"
        )


@dataclass(frozen=True, slots=True)
class TemplateOptions:
    """Options for rendering a chart with `helm template`.

    Mapping entries are emitted in insertion order.

    Attributes:
        release_name: Name of the release.
        namespace: Target namespace, omitted when empty.
        kube_version: Target Kubernetes version, omitted when empty or unsupported.
        api_versions: Extra API versions available to capability checks.
        set_values: Entries for `--set`.
        set_string_values: Entries for `--set-string`.
        set_file_values: Entries for `--set-file`.
        values_files: Paths for `--values`.

    """

    release_name: str
    namespace: str = ""
    kube_version: str = ""
    api_versions: list[str] = field(default_factory=list)
    set_values: dict[str, str] = field(default_factory=dict)
    set_string_values: dict[str, str] = field(default_factory=dict)
    set_file_values: dict[str, str] = field(default_factory=dict)
    values_files: list[str] = field(default_factory=list)
