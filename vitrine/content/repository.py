"""
Content repositories.

A content repository answers one question for the build: does the logical key
(a POSIX-style path relative to the source tree, e.g. ``images/logos/pacman.png``)
exist, and where is it? Directory listing is offered for the few places that
enumerate a folder (artwork, disks, NVRAM, extras).
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional, Sequence

logger = logging.getLogger(__name__)


def join_key(*parts: str) -> str:
    """
    Join key parts with forward slashes.

    Example:
        >>> join_key('mame', 'roms', '0.281', 'pacman.zip')
        'mame/roms/0.281/pacman.zip'
    """
    return str(PurePosixPath(*[str(part) for part in parts if part != '']))


def _matches_extension(name: str, extensions: Optional[Sequence[str]]) -> bool:
    if not extensions or '*' in extensions:
        return True
    suffix = PurePosixPath(name).suffix.lower().lstrip('.')
    return suffix in extensions


def _strip_extension(name: str) -> str:
    return PurePosixPath(name).stem if '.' in name else name


class ContentRepository(ABC):
    """Read-only view of the build's source content."""

    @abstractmethod
    def resolve(self, key: str) -> Optional[Path]:
        """
        Resolve a logical file key to its physical location.

        Args:
            key: Logical key, e.g. 'video/previews/pacman.mp4'

        Returns:
            Path to the file, or None if no such file exists
        """

    @abstractmethod
    def has_directory(self, key: str) -> bool:
        """Check whether a logical directory exists."""

    @abstractmethod
    def _list_entries(self, key: str, directories: bool) -> List[str]:
        """List names of files (or directories) directly under a key."""

    @abstractmethod
    def read_text(self, key: str) -> str:
        """
        Read a text file.

        Raises:
            FileNotFoundError: If the key does not resolve to a file
        """

    @abstractmethod
    def read_bytes(self, key: str) -> bytes:
        """
        Read a file's raw content.

        Raises:
            FileNotFoundError: If the key does not resolve to a file
        """

    def exists(self, key: str) -> bool:
        return self.resolve(key) is not None

    def list_names(
        self,
        key: str,
        extensions: Optional[Sequence[str]] = None,
        include_extension: bool = True,
    ) -> List[str]:
        """
        List file names directly inside a logical directory.

        Args:
            key: Logical directory key
            extensions: Lowercase extensions to keep (None or ['*'] keeps all)
            include_extension: Return 'bezel.png' rather than 'bezel'

        Returns:
            Sorted list of names (empty if the directory does not exist)
        """
        names = [
            name for name in self._list_entries(key, directories=False)
            if _matches_extension(name, extensions)
        ]
        if not include_extension:
            names = [_strip_extension(name) for name in names]
        return sorted(names)

    def list_directories(self, key: str) -> List[str]:
        """List sub-directory names directly inside a logical directory, sorted."""
        return sorted(self._list_entries(key, directories=True))

    def walk(self, key: str) -> List[str]:
        """Keys of every file below a logical directory, recursively, sorted."""
        keys = [join_key(key, name) for name in self._list_entries(key, directories=False)]
        for directory in self._list_entries(key, directories=True):
            keys.extend(self.walk(join_key(key, directory)))
        return sorted(keys)


class FilesystemRepository(ContentRepository):
    """Content repository backed by a directory on local disk."""

    def __init__(self, root: Path):
        """
        Initialize repository.

        Args:
            root: Source tree root (keys are resolved relative to it)
        """
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        return self.root.joinpath(*PurePosixPath(key).parts)

    def resolve(self, key: str) -> Optional[Path]:
        path = self.path_for(key)
        if path.is_file():
            return path
        return None

    def has_directory(self, key: str) -> bool:
        return self.path_for(key).is_dir()

    def _list_entries(self, key: str, directories: bool) -> List[str]:
        path = self.path_for(key)
        if not path.is_dir():
            return []

        try:
            return [
                item.name for item in path.iterdir()
                if (item.is_dir() if directories else item.is_file())
            ]
        except OSError as e:
            logger.error(f"Error reading directory {path}: {e}")
            return []

    def read_text(self, key: str) -> str:
        """
        Read a text file from the source tree.

        Raises:
            FileNotFoundError: If the key does not resolve to a file
        """
        path = self.resolve(key)
        if path is None:
            raise FileNotFoundError(f"Content not found: {key}")
        return path.read_text(encoding='utf-8')

    def read_bytes(self, key: str) -> bytes:
        path = self.resolve(key)
        if path is None:
            raise FileNotFoundError(f"Content not found: {key}")
        return path.read_bytes()


class MemoryRepository(ContentRepository):
    """
    In-memory content repository.

    Holds a set of file keys (and optional text content) so resolution logic
    can be exercised without touching the filesystem.
    """

    def __init__(self, files: Iterable[str] = (), contents: Optional[dict] = None):
        self.contents = dict(contents or {})
        self.files = set(files) | set(self.contents)

    def add(self, key: str, content: str = '') -> None:
        self.files.add(key)
        if content:
            self.contents[key] = content

    def resolve(self, key: str) -> Optional[Path]:
        if key in self.files:
            return Path(key)
        return None

    def has_directory(self, key: str) -> bool:
        prefix = key.rstrip('/') + '/'
        return any(name.startswith(prefix) for name in self.files)

    def _list_entries(self, key: str, directories: bool) -> List[str]:
        prefix = key.rstrip('/') + '/'
        entries = set()
        for name in self.files:
            if not name.startswith(prefix):
                continue
            rest = name[len(prefix):]
            head, sep, _ = rest.partition('/')
            if bool(sep) == directories:
                entries.add(head)
        return list(entries)

    def read_text(self, key: str) -> str:
        if key not in self.files:
            raise FileNotFoundError(f"Content not found: {key}")
        return self.contents.get(key, '')

    def read_bytes(self, key: str) -> bytes:
        if key not in self.files:
            raise FileNotFoundError(f"Content not found: {key}")
        content = self.contents.get(key, '')
        if isinstance(content, bytes):
            return content
        return content.encode('utf-8')
