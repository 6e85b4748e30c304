"""
VISTA Versioning

Keeps a MAJOR.MINOR.PATCH.BUILD version in a version.properties file and
derives a project's effective version from that file or VISTA_* environment
overrides.
"""

from ._version import __version__
from .engine import (
    VersionComponents,
    VersionResult,
    compute_effective_version,
    increment,
)
from .store import VersionSnapshot

__description__ = "Semantic version state manager backed by a version.properties file"
