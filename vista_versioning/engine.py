"""
Version engine for VISTA versioning.

Owns the MAJOR.MINOR.PATCH.BUILD state machine and the effective-version rule.

Bumping a component resets every finer component to zero:

    bump-major  major += 1, minor = patch = build = 0
    bump-minor  minor += 1, patch = build = 0
    bump-patch  patch += 1, build = 0
    bump-build  build += 1

Bumps read the persisted snapshot only. Environment overrides
(VISTA_VERSION_MAJOR etc.) apply to the effective version alone, so a
persisted bump is reproducible from the file.
"""

import os
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Tuple
from loguru import logger

from . import store
from .store import Source, VersionSnapshot
from .utils import parse_int

DEFAULT_VERSION_FILE = 'version.properties'

MAJOR_KEY = 'VERSION_MAJOR'
MINOR_KEY = 'VERSION_MINOR'
PATCH_KEY = 'VERSION_PATCH'
BUILD_KEY = 'BUILD_NUMBER'

# Coarsest to finest
COMPONENT_KEYS = (MAJOR_KEY, MINOR_KEY, PATCH_KEY, BUILD_KEY)

ENV_PREFIX = 'VISTA_'


def env_var_name(key: str) -> str:
    """Name of the environment variable that overrides a component key."""
    return f"{ENV_PREFIX}{key}"


@dataclass(frozen=True)
class VersionComponents:
    """The four non-negative integers that make up a version."""
    
    major: int = 0
    minor: int = 0
    patch: int = 0
    build: int = 0
    
    @classmethod
    def from_snapshot(cls, snapshot: VersionSnapshot) -> 'VersionComponents':
        """Project a snapshot onto its four components, defaulting to 0."""
        return cls(*(_component(snapshot, key) for key in COMPONENT_KEYS))
    
    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.major, self.minor, self.patch, self.build)
    
    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}.{self.build}"


@dataclass(frozen=True)
class VersionResult:
    """Outcome of a file-level operation."""
    
    version: str
    components: VersionComponents
    path: Optional[str] = None


def _component(snapshot: VersionSnapshot, key: str) -> int:
    """Read one component from the snapshot, treating bad or negative values as 0."""
    value = store.get_int(snapshot, key, -1)
    if value < 0:
        if key in snapshot:
            logger.debug(f"Ignoring invalid {key} value {snapshot.get(key)!r}, using 0")
        return 0
    return value


def _bump(snapshot: VersionSnapshot, index: int) -> Tuple[VersionSnapshot, VersionComponents]:
    """Increment the component at index and zero every finer component."""
    updated = snapshot.copy()
    key = COMPONENT_KEYS[index]
    updated.set(key, str(_component(snapshot, key) + 1))
    for finer_key in COMPONENT_KEYS[index + 1:]:
        updated.set(finer_key, '0')
    return updated, VersionComponents.from_snapshot(updated)


def bump_major(snapshot: VersionSnapshot) -> Tuple[VersionSnapshot, VersionComponents]:
    """Increment MAJOR and reset MINOR, PATCH and BUILD. The input is not modified."""
    return _bump(snapshot, 0)


def bump_minor(snapshot: VersionSnapshot) -> Tuple[VersionSnapshot, VersionComponents]:
    """Increment MINOR and reset PATCH and BUILD. The input is not modified."""
    return _bump(snapshot, 1)


def bump_patch(snapshot: VersionSnapshot) -> Tuple[VersionSnapshot, VersionComponents]:
    """Increment PATCH and reset BUILD. The input is not modified."""
    return _bump(snapshot, 2)


def bump_build(snapshot: VersionSnapshot) -> Tuple[VersionSnapshot, VersionComponents]:
    """Increment BUILD only. The input is not modified."""
    return _bump(snapshot, 3)


BUMP_OPERATIONS: Dict[str, Callable[[VersionSnapshot], Tuple[VersionSnapshot, VersionComponents]]] = {
    'major': bump_major,
    'minor': bump_minor,
    'patch': bump_patch,
    'build': bump_build,
}


def resolve_component(snapshot: VersionSnapshot, key: str, env: Optional[Mapping[str, str]] = None) -> int:
    """
    Resolve the effective value of one component.
    
    Precedence: VISTA_<KEY> environment variable (if it parses as a
    non-negative integer) > snapshot value (if it parses) > 0.
    
    Args:
        snapshot: Persisted snapshot
        key: Component key, e.g. VERSION_MAJOR
        env: Environment mapping (defaults to os.environ)
        
    Returns:
        int: The resolved component value
    """
    if env is None:
        env = os.environ
    env_key = env_var_name(key)
    env_value = env.get(env_key)
    if env_value is not None:
        override = parse_int(env_value)
        if override is not None and override >= 0:
            logger.debug(f"Using {env_key}={override} over version file")
            return override
        logger.debug(f"Ignoring invalid {env_key} value {env_value!r}")
    return _component(snapshot, key)


def compute_effective_version(snapshot: VersionSnapshot, env: Optional[Mapping[str, str]] = None) -> str:
    """Format the effective version with environment overrides applied. Read-only."""
    return str(effective_components(snapshot, env))


def effective_components(snapshot: VersionSnapshot, env: Optional[Mapping[str, str]] = None) -> VersionComponents:
    return VersionComponents(*(resolve_component(snapshot, key, env) for key in COMPONENT_KEYS))


def _describe(target: Source) -> str:
    if store.is_stream(target):
        return str(getattr(target, 'name', '<stream>'))
    return os.fspath(target)


def increment(target: Source, part: str) -> VersionResult:
    """
    Bump one component of the version file at target and save it.
    
    Args:
        target: Path to the version file (created if missing), or a
            seekable read-write binary stream
        part: One of 'major', 'minor', 'patch', 'build'
        
    Returns:
        VersionResult: The new persisted version
        
    Raises:
        ValueError: If part is not a known component
        OSError: If the file cannot be read or written
    """
    try:
        operation = BUMP_OPERATIONS[part]
    except KeyError:
        raise ValueError(f"Unknown version component '{part}' (expected one of {', '.join(BUMP_OPERATIONS)})")
    
    snapshot = store.load(target)
    updated, components = operation(snapshot)
    # Read-write streams are rewritten in place
    store.save(updated, target, rewrite=True)
    
    logger.info(f"✅ Updated {part} version: {components}")
    return VersionResult(version=str(components), components=components, path=_describe(target))


def bump_major_file(target: Source) -> VersionResult:
    return increment(target, 'major')


def bump_minor_file(target: Source) -> VersionResult:
    return increment(target, 'minor')


def bump_patch_file(target: Source) -> VersionResult:
    return increment(target, 'patch')


def bump_build_file(target: Source) -> VersionResult:
    return increment(target, 'build')


def effective_version_file(target: Source, env: Optional[Mapping[str, str]] = None) -> VersionResult:
    """Compute the effective version for the file at target without writing to it."""
    components = effective_components(store.load(target), env)
    return VersionResult(version=str(components), components=components, path=_describe(target))


def current_version_file(target: Source) -> VersionResult:
    """Read the persisted version, ignoring environment overrides."""
    components = VersionComponents.from_snapshot(store.load(target))
    return VersionResult(version=str(components), components=components, path=_describe(target))
