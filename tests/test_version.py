"""Tests for version.py module."""

from unittest.mock import patch

import pytest

from chartcmd.exceptions import VersionDetectionError
from chartcmd.models import LEGACY_PROFILE, MODERN_PROFILE, ToolGeneration
from chartcmd.version import (
    BINARY_ENV_VAR,
    VERSION_ARGS,
    default_binary,
    parse_version,
    profile_for_generation,
    profile_for_version,
    resolve,
)


class TestParseVersion:
    """Tests for version string parsing."""

    @pytest.mark.parametrize(
        ("output", "expected"),
        [
            ("v3.12.0+gc9f554d\n", (3, 12, 0)),
            ("Client: v2.16.1+gbbdfe5e\n", (2, 16, 1)),
            ("v3.14.0-rc.1+g1234567", (3, 14, 0)),
            ('version.BuildInfo{Version:"v3.2.0", GitCommit:"e11b7ce"}', (3, 2, 0)),
        ],
    )
    def test_known_formats(self, output, expected):
        """Test the short and long version formats of both generations."""
        assert parse_version(output) == expected

    @pytest.mark.parametrize("output", ["", "helm: command not found", "version unknown"])
    def test_unparseable(self, output):
        """Test output without a version raises VersionDetectionError."""
        with pytest.raises(VersionDetectionError):
            parse_version(output)


class TestProfileForVersion:
    """Tests for mapping versions to profiles."""

    def test_helm2_is_legacy(self):
        """Test major version 2 maps to the legacy profile."""
        assert profile_for_version((2, 16, 1)) == LEGACY_PROFILE

    def test_helm3_is_modern(self):
        """Test major version 3 maps to the modern profile."""
        assert profile_for_version((3, 12, 0)) == MODERN_PROFILE

    def test_helm4_is_modern(self):
        """Test major version 4 keeps the helm 3 vocabulary."""
        assert profile_for_version((4, 0, 0)).generation is ToolGeneration.MODERN

    def test_binary_name_bound(self):
        """Test the profile runs the binary that was queried."""
        profile = profile_for_version((2, 17, 0), binary_name="/usr/local/bin/helm2")

        assert profile.binary_name == "/usr/local/bin/helm2"
        assert profile.pull_command == "fetch"

    @pytest.mark.parametrize("version", [(1, 0, 0), (5, 0, 0), (0, 1, 0)])
    def test_unknown_major_fails(self, version):
        """Test unknown generations are rejected instead of guessed."""
        with pytest.raises(VersionDetectionError) as exc_info:
            profile_for_version(version)

        assert "Unsupported helm version" in str(exc_info.value)


class TestProfileForGeneration:
    """Tests for pinned generations."""

    def test_pinned_legacy(self):
        """Test pinning helm 2 with a custom binary."""
        profile = profile_for_generation(ToolGeneration.LEGACY, binary_name="helm2")

        assert profile.generation is ToolGeneration.LEGACY
        assert profile.binary_name == "helm2"
        assert profile.init_supported is True

    def test_pinned_modern(self):
        """Test pinning helm 3."""
        assert profile_for_generation(ToolGeneration.MODERN) == MODERN_PROFILE


class TestDefaultBinary:
    """Tests for the binary configuration."""

    def test_default(self, monkeypatch):
        """Test 'helm' when nothing is configured."""
        monkeypatch.delenv(BINARY_ENV_VAR, raising=False)
        assert default_binary() == "helm"

    def test_from_environment(self, monkeypatch):
        """Test the environment variable overrides the default."""
        monkeypatch.setenv(BINARY_ENV_VAR, "/opt/helm/bin/helm")
        assert default_binary() == "/opt/helm/bin/helm"


class TestResolve:
    """Tests for detecting the installed version."""

    def test_resolves_modern(self, mock_subprocess, tmp_path, monkeypatch):
        """Test detection of helm 3 through the version query."""
        monkeypatch.delenv(BINARY_ENV_VAR, raising=False)
        mock_subprocess.return_value.stdout = "v3.12.0+gc9f554d\n"

        profile = resolve(tmp_path)

        assert profile == MODERN_PROFILE
        cmd = mock_subprocess.call_args[0][0]
        assert cmd == ["helm", *VERSION_ARGS]
        assert mock_subprocess.call_args[1]["cwd"] == tmp_path

    def test_resolves_legacy_with_binary(self, mock_subprocess, tmp_path):
        """Test detection of helm 2 for an explicit binary."""
        mock_subprocess.return_value.stdout = "Client: v2.16.1+gbbdfe5e\n"

        profile = resolve(tmp_path, binary_name="helm2")

        assert profile.generation is ToolGeneration.LEGACY
        assert profile.binary_name == "helm2"
        assert mock_subprocess.call_args[0][0][0] == "helm2"

    def test_unrecognized_version_fails(self, mock_subprocess, tmp_path):
        """Test an unknown generation raises VersionDetectionError."""
        mock_subprocess.return_value.stdout = "v9.0.0\n"

        with pytest.raises(VersionDetectionError):
            resolve(tmp_path)

    def test_query_failure(self, mock_subprocess, tmp_path):
        """Test a failing version query raises VersionDetectionError."""
        mock_subprocess.return_value.returncode = 1
        mock_subprocess.return_value.stdout = "Error: unknown flag: --client\n"

        with pytest.raises(VersionDetectionError) as exc_info:
            resolve(tmp_path)

        assert "unknown flag" in str(exc_info.value)

    def test_missing_binary(self, tmp_path):
        """Test a missing binary raises VersionDetectionError."""
        with (
            patch("subprocess.run", side_effect=FileNotFoundError("helm")),
            pytest.raises(VersionDetectionError),
        ):
            resolve(tmp_path, binary_name="helm")
