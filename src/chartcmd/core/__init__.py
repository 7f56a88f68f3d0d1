"""Core session subpackage.

This package contains the HelmSession facade that ties version
detection, credentials and process execution together.
"""

from chartcmd.core.session import HelmSession

__all__ = [
    "HelmSession",
]
