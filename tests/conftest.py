"""Shared test fixtures for chartcmd tests."""

import tempfile
from unittest.mock import MagicMock, patch

import pytest

from chartcmd.core.session import HelmSession
from chartcmd.models import LEGACY_PROFILE, MODERN_PROFILE


@pytest.fixture
def mock_subprocess():
    """Mock subprocess.run for helm execution."""
    with patch("subprocess.run") as mock:
        mock.return_value = MagicMock(returncode=0, stdout="")
        yield mock


@pytest.fixture
def private_tmp(tmp_path, monkeypatch):
    """Point the tempfile module at an empty directory so leftovers can be counted."""
    tmp_root = tmp_path / "tmp"
    tmp_root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_root))
    return tmp_root


@pytest.fixture
def modern_session(tmp_path):
    """A session pinned to the helm 3 profile."""
    session = HelmSession(tmp_path, profile=MODERN_PROFILE)
    yield session
    session.close()


@pytest.fixture
def legacy_session(tmp_path):
    """A session pinned to the helm 2 profile."""
    session = HelmSession(tmp_path, profile=LEGACY_PROFILE)
    yield session
    session.close()


@pytest.fixture
def sample_manifests():
    """Sample output of helm template."""
    return """---
# Source: demo/templates/service.yaml
apiVersion: v1
kind: Service
metadata:
  name: r1-demo
spec:
  ports:
    - port: 80
"""
