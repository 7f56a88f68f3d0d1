"""HelmSession facade class.

This module provides the HelmSession class which serves as the main entry
point for helm operations, coordinating version detection, credential
handling, command construction and process execution.
"""

import contextlib
import shutil
import tempfile
from collections.abc import Generator, Sequence
from pathlib import Path

from icecream import ic

from chartcmd import commands, console, credentials, runner
from chartcmd.exceptions import SessionClosedError
from chartcmd.models import Credentials, SessionState, TemplateOptions, ToolProfile
from chartcmd.version import resolve


class HelmSession:
    """Wrapper for helm binary operations with a private home directory.

    A session owns a temporary directory that isolates the helm cache,
    config and data paths, and a ToolProfile bound once when the session
    opens. Operations on one session must not run concurrently; use
    separate sessions for parallel work.

    Attributes:
        work_dir: Working directory of every helm invocation.
        home_dir: The private helm home, removed on close.
        profile: The bound tool profile.
        state: Current lifecycle state.

    """

    def __init__(
        self,
        work_dir: str | Path,
        *,
        profile: ToolProfile | None = None,
        binary_name: str | None = None,
    ) -> None:
        """Open a session, detecting the helm version unless a profile is given.

        Args:
            work_dir: Working directory for helm, e.g. an unpacked chart.
            profile: Pinned tool profile; skips version detection.
            binary_name: Binary to query when detecting the version.

        Raises:
            VersionDetectionError: If no profile is given and detection fails.
                The home directory is removed before the error propagates.

        """
        self.work_dir: Path = Path(work_dir)
        self.home_dir: Path = Path(tempfile.mkdtemp(prefix="helm"))
        self.state: SessionState = SessionState.CREATED
        ic(self.home_dir)

        try:
            self.profile: ToolProfile = profile or resolve(self.work_dir, binary_name=binary_name)
        except BaseException:
            self.close()
            raise
        self.state = SessionState.RESOLVED

    def __enter__(self) -> "HelmSession":
        """Enter context manager.

        Returns:
            The HelmSession instance.

        """
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        """Exit context manager and remove the home directory."""
        self.close()

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        generation = self.profile.generation.value if hasattr(self, "profile") else None
        return f"HelmSession(work_dir={str(self.work_dir)!r}, generation={generation!r}, state={self.state.value!r})"

    def __del__(self) -> None:
        """Ensure home cleanup if close() was never called."""
        if hasattr(self, "state"):
            self.close()

    @property
    def closed(self) -> bool:
        return self.state is SessionState.CLOSED

    def close(self) -> None:
        """Remove the home directory. Safe to call more than once."""
        if self.state is SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED
        try:
            shutil.rmtree(self.home_dir)
        except FileNotFoundError:
            pass
        except OSError as err:
            console.warning(f"Failed to remove helm home {self.home_dir}: {err.strerror}")

    @contextlib.contextmanager
    def _operation(self) -> Generator[None, None, None]:
        """Mark the session active while a helm process runs.

        Raises:
            SessionClosedError: If the session is closed.

        """
        if self.state is SessionState.CLOSED:
            raise SessionClosedError("helm session is closed")
        self.state = SessionState.ACTIVE
        try:
            yield
        finally:
            if self.state is SessionState.ACTIVE:
                self.state = SessionState.RESOLVED

    def _run(self, args: Sequence[str]) -> str:
        return runner.run(self.profile, args, self.work_dir, self.home_dir)

    def init(self) -> str:
        """Initialise the helm client for generations that need it.

        Returns:
            The command output, or an empty string when init is not supported.

        """
        with self._operation():
            if not self.profile.init_supported:
                return ""
            return self._run(commands.init_args())

    def repo_add(self, name: str, url: str, creds: Credentials | None = None) -> str:
        """Add a chart repository.

        Args:
            name: Local name of the repository.
            url: Repository URL.
            creds: Optional repository credentials.

        Returns:
            The command output.

        """
        with self._operation(), credentials.materialize(creds) as flags:
            return self._run(commands.repo_add_args(name, url, flags))

    def fetch(
        self,
        repo: str,
        chart_name: str,
        version: str,
        destination: str | Path,
        creds: Credentials | None = None,
    ) -> str:
        """Download a chart archive into an existing directory.

        Args:
            repo: Repository URL.
            chart_name: Name of the chart.
            version: Chart version; an empty string fetches the latest.
            destination: Existing directory to download into.
            creds: Optional repository credentials.

        Returns:
            The command output.

        """
        with self._operation(), credentials.materialize(creds) as flags:
            args = commands.fetch_args(self.profile, repo, chart_name, version, str(destination), flags)
            return self._run(args)

    def dependency_build(self) -> str:
        """Build the dependencies of the chart in the working directory."""
        with self._operation():
            return self._run(commands.dependency_build_args())

    def inspect_values(self, values: str) -> str:
        """Print the default values of a chart."""
        with self._operation():
            return self._run(commands.inspect_values_args(self.profile, values))

    def template(self, chart_path: str | Path, options: TemplateOptions) -> str:
        """Render a chart into Kubernetes manifests.

        Args:
            chart_path: Path of an unpacked chart directory.
            options: Release name, namespace and values.

        Returns:
            The rendered manifests as helm prints them.

        """
        with self._operation():
            return self._run(commands.template_args(self.profile, str(chart_path), options))
