"""
Version store for VISTA versioning.

Byte-level persistence of a flat KEY=VALUE snapshot. The store knows nothing
about version semantics: it loads, serializes and atomically saves an ordered
mapping of string keys to string values.
"""

import os
import tempfile
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple, Union, BinaryIO
from loguru import logger

from .utils import parse_int

ENCODING = 'utf-8'
ENCODING_ERRORS = 'surrogateescape'
COMMENT_PREFIXES = ('#', '!')
SEPARATOR = '='

Source = Union[str, os.PathLike, BinaryIO]


class VersionSnapshot:
    """Ordered mapping of keys to raw string values read from a version file."""
    
    def __init__(self, entries: Optional[Dict[str, str]] = None):
        self._entries: Dict[str, str] = dict(entries or {})
    
    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._entries.get(key, default)
    
    def set(self, key: str, value: str) -> None:
        """Set a value. Existing keys keep their position, new keys are appended."""
        self._entries[key] = str(value)
    
    def keys(self):
        return self._entries.keys()
    
    def items(self):
        return self._entries.items()
    
    def copy(self) -> 'VersionSnapshot':
        return VersionSnapshot(self._entries)
    
    def __contains__(self, key: object) -> bool:
        return key in self._entries
    
    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
    
    def __len__(self) -> int:
        return len(self._entries)
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionSnapshot):
            return NotImplemented
        # Order is part of the on-disk representation
        return list(self._entries.items()) == list(other._entries.items())
    
    def __repr__(self) -> str:
        return f"VersionSnapshot({self._entries!r})"


def _split_line(line: str) -> Tuple[str, str]:
    """Split a property line on the first '='."""
    key, _, value = line.partition(SEPARATOR)
    return key.strip(), value.strip()


def loads(data: bytes) -> VersionSnapshot:
    """
    Parse KEY=VALUE lines into a snapshot.
    
    Blank lines and lines starting with '#' or '!' are skipped. A line without
    a separator is read as a key with an empty value. When a key repeats, the
    last value wins and the key keeps its first position.
    
    Args:
        data: Raw file contents
        
    Returns:
        VersionSnapshot: Parsed snapshot (empty for empty input)
    """
    snapshot = VersionSnapshot()
    text = data.decode(ENCODING, errors=ENCODING_ERRORS)
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(COMMENT_PREFIXES):
            continue
        key, value = _split_line(line)
        if not key:
            continue
        snapshot.set(key, value)
    return snapshot


def dumps(snapshot: VersionSnapshot) -> bytes:
    """Serialize a snapshot as KEY=VALUE lines in insertion order."""
    text = ''.join(f"{key}={value}\n" for key, value in snapshot.items())
    return text.encode(ENCODING, errors=ENCODING_ERRORS)


def is_stream(target) -> bool:
    return hasattr(target, 'read') or hasattr(target, 'write')


def load(source: Source) -> VersionSnapshot:
    """
    Load a snapshot from a file path or a binary stream.
    
    A missing file is not an error: it loads as an empty snapshot so callers
    see all defaults.
    
    Args:
        source: Path to the version file, or a readable binary stream
        
    Returns:
        VersionSnapshot: Loaded snapshot
        
    Raises:
        OSError: If the file exists but cannot be read
    """
    if is_stream(source):
        data = source.read()
        snapshot = loads(data or b'')
        logger.debug(f"Loaded {len(snapshot)} entries from stream")
        return snapshot
    
    path = Path(source)
    if not path.exists():
        logger.debug(f"Version file {path} not found, using empty snapshot")
        return VersionSnapshot()
    
    with open(path, 'rb') as f:
        snapshot = loads(f.read())
    logger.debug(f"Loaded {len(snapshot)} entries from {path}")
    return snapshot


def _write_atomic(path: Path, data: bytes) -> None:
    """
    Write bytes to path atomically.
    
    Uses write-to-temp + rename so a failed write never leaves a partially
    written version file behind.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_fd, temp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix='.tmp', dir=str(path.parent))
    try:
        with os.fdopen(temp_fd, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except BaseException:
        try:
            os.unlink(temp_path)
        except OSError as cleanup_error:
            logger.warning(f"Failed to remove temporary file {temp_path}: {cleanup_error}")
        raise


def save(snapshot: VersionSnapshot, sink: Source, rewrite: bool = False) -> None:
    """
    Save a snapshot to a file path or a binary stream.
    
    The snapshot is serialized before anything is written. Path sinks are
    replaced atomically. Stream sinks are not: a failing write on the
    stream itself can leave it partially written.
    
    Args:
        snapshot: Snapshot to serialize
        sink: Path to the version file, or a writable binary stream
        rewrite: For streams, seek to the start and truncate before writing
        
    Raises:
        OSError: If the file cannot be written; the previous file is left intact
    """
    data = dumps(snapshot)
    if is_stream(sink):
        if rewrite:
            sink.seek(0)
            sink.truncate()
        sink.write(data)
        logger.debug(f"Saved {len(snapshot)} entries to stream")
        return
    
    path = Path(sink)
    _write_atomic(path, data)
    logger.debug(f"Saved {len(snapshot)} entries to {path}")


def get_int(snapshot: VersionSnapshot, key: str, default: int = 0) -> int:
    """Get an integer value, or default if the key is absent or not an integer."""
    value = parse_int(snapshot.get(key))
    return default if value is None else value
