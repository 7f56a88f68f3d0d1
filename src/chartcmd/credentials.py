"""Credential flags and transient secret files.

User names and passwords are passed to helm as inline flag values. Client
certificates and keys only exist in memory, so they are written to
short-lived files that are removed as soon as the command finishes.
"""

import contextlib
import os
from collections.abc import Generator
from pathlib import Path
from tempfile import NamedTemporaryFile

from icecream import ic

from chartcmd import console
from chartcmd.exceptions import CredentialMaterializationError
from chartcmd.models import Credentials

_FILE_PREFIX = "chartcmd-"


class TransientCredentialFile:
    """A temporary file holding a single certificate or key.

    The file is created on construction, readable only by the current user,
    and removed by remove() or when the context manager exits.

    Attributes:
        path: Location of the file on disk.

    """

    def __init__(self) -> None:
        """Create an empty file with owner-only permissions.

        Raises:
            CredentialMaterializationError: If the file cannot be created.

        """
        try:
            # Close immediately; the data is written separately
            temp_file = NamedTemporaryFile(prefix=_FILE_PREFIX, delete=False)
            temp_file.close()
        except OSError as err:
            raise CredentialMaterializationError(f"Cannot create temporary credential file: {err.strerror}") from err
        self.path: Path = Path(temp_file.name)
        try:
            os.chmod(self.path, 0o600)
        except OSError as err:
            self.remove()
            raise CredentialMaterializationError(
                f"Cannot restrict permissions of {self.path}: {err.strerror}"
            ) from err

    def __enter__(self) -> "TransientCredentialFile":
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.remove()

    def __repr__(self) -> str:
        return f"TransientCredentialFile(path={str(self.path)!r})"

    def write(self, data: bytes) -> None:
        """Write the secret to the file.

        Args:
            data: The certificate or key bytes.

        Raises:
            CredentialMaterializationError: If the write fails.

        """
        try:
            self.path.write_bytes(data)
        except OSError as err:
            raise CredentialMaterializationError(f"Cannot write credential file {self.path}: {err.strerror}") from err

    def remove(self) -> None:
        """Delete the file. Safe to call more than once."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as err:
            # Reported only, so the error that ended the operation is not masked
            console.warning(f"Failed to remove credential file {self.path}: {err.strerror}")


def credential_flags(creds: Credentials, cert_path: str = "", key_path: str = "") -> list[str]:
    """Build the credential flags for `repo add` and the pull command.

    Args:
        creds: The repository credentials.
        cert_path: Path of the materialized client certificate, if any.
        key_path: Path of the materialized client key, if any.

    Returns:
        Flags in a fixed order, each present only when its value is set.

    """
    flags: list[str] = []
    if creds.username:
        flags.extend(["--username", creds.username])
    if creds.password:
        flags.extend(["--password", creds.password])
    if creds.ca_path:
        flags.extend(["--ca-file", creds.ca_path])
    if cert_path:
        flags.extend(["--cert-file", cert_path])
    if key_path:
        flags.extend(["--key-file", key_path])
    return flags


def _materialize_file(stack: contextlib.ExitStack, data: bytes) -> str:
    """Write data to a transient file owned by the given stack and return its path."""
    secret_file = stack.enter_context(TransientCredentialFile())
    secret_file.write(data)
    return str(secret_file.path)


@contextlib.contextmanager
def materialize(creds: Credentials | None) -> Generator[list[str], None, None]:
    """Turn credentials into command-line flags for the duration of a block.

    Certificate and key bytes are written to transient files which are
    removed when the block exits, whether it succeeds or raises.

    Args:
        creds: The repository credentials, or None for anonymous access.

    Yields:
        The credential flags to append to the helm command.

    Raises:
        CredentialMaterializationError: If a file cannot be created or written.
            Files created before the failure are removed first.

    """
    if creds is None:
        yield []
        return

    if not creds.has_files:
        yield credential_flags(creds)
        return

    with contextlib.ExitStack() as stack:
        cert_path = _materialize_file(stack, creds.cert_data) if creds.cert_data else ""
        key_path = _materialize_file(stack, creds.key_data) if creds.key_data else ""
        ic(cert_path, key_path)
        yield credential_flags(creds, cert_path=cert_path, key_path=key_path)
