"""chartcmd: version-aware wrapper for the helm binary.

This package adds chart repositories, fetches chart archives and renders
chart templates through the installed helm binary, hiding the differences
between helm generations and keeping credentials out of logs.

Example usage:
    from chartcmd import HelmSession, TemplateOptions

    # Detect the installed helm version and render a chart
    with HelmSession("./mychart") as session:
        manifests = session.template(".", TemplateOptions(release_name="demo"))
"""

__version__ = "0.1.0"

from chartcmd.core.session import HelmSession
from chartcmd.exceptions import (
    BinaryNotFoundError,
    ChartCmdError,
    CredentialMaterializationError,
    ExecutionError,
    SessionClosedError,
    VersionDetectionError,
)
from chartcmd.models import (
    LEGACY_PROFILE,
    MODERN_PROFILE,
    Credentials,
    SessionState,
    TemplateOptions,
    ToolGeneration,
    ToolProfile,
)

__all__ = [
    # Version
    "__version__",
    # Classes
    "HelmSession",
    "Credentials",
    "SessionState",
    "TemplateOptions",
    "ToolGeneration",
    "ToolProfile",
    "LEGACY_PROFILE",
    "MODERN_PROFILE",
    # Exceptions
    "ChartCmdError",
    "BinaryNotFoundError",
    "CredentialMaterializationError",
    "ExecutionError",
    "SessionClosedError",
    "VersionDetectionError",
]
