"""Custom exceptions for chartcmd.

This module defines the exception hierarchy used throughout the package
to report failures of the helm binary and of the session around it.
"""


class ChartCmdError(Exception):
    """Base exception for all chartcmd errors.

    All custom exceptions in this package inherit from this class,
    allowing callers to catch all chartcmd errors with a single
    except clause if desired.
    """

    pass


class VersionDetectionError(ChartCmdError):
    """Raised when the installed helm version cannot be determined.

    This can occur when:
    - The version query fails or the binary is missing
    - The output does not contain a version string
    - The major version does not belong to a known generation
    """

    pass


class CredentialMaterializationError(ChartCmdError):
    """Raised when a certificate or key cannot be written to a temporary file."""

    pass


class ExecutionError(ChartCmdError):
    """Raised when the helm binary exits with a nonzero status.

    Attributes:
        exit_code: The process exit code (negative when killed by a signal).
        output: The redacted combined stdout and stderr of the process.
        command: The redacted command line.

    """

    def __init__(self, exit_code: int, output: str, command: str = "") -> None:
        self.exit_code = exit_code
        self.output = output
        self.command = command
        message = f"`{command}` failed with exit code {exit_code}" if command else f"exit code {exit_code}"
        details = output.strip()
        if details:
            message = f"{message}: {details}"
        super().__init__(message)


class SessionClosedError(ChartCmdError):
    """Raised when an operation is attempted on a closed session."""

    pass


class BinaryNotFoundError(ChartCmdError):
    """Raised when the helm binary is not found.

    This can occur when:
    - The binary is not installed
    - The binary is not in the system PATH
    """

    pass
