"""
Publishing of source content into the output tree.

Copies files from the source tree to mirrored (or explicit) locations under the
output root, writes generated documents, and clears the previous run's
documents.
"""

import json
import logging
import shutil
from pathlib import Path, PurePosixPath
from typing import Any, Optional

from .repository import FilesystemRepository

logger = logging.getLogger(__name__)


class AssetStore:
    """Copies and writes published files below the output root."""

    def __init__(self, repository: FilesystemRepository, output_root: Path):
        """
        Initialize asset store.

        Args:
            repository: Source content repository
            output_root: Root of the published site (e.g. Path('public'))
        """
        self.repository = repository
        self.output_root = Path(output_root)

    def output_path(self, key: str) -> Path:
        return self.output_root.joinpath(*PurePosixPath(key).parts)

    def publish(self, source_key: str, dest_key: Optional[str] = None) -> bool:
        """
        Copy a source file into the output tree.

        Args:
            source_key: Logical key of the source file
            dest_key: Output key (default: same as source_key)

        Returns:
            True if the file existed and was copied
        """
        source = self.repository.resolve(source_key)
        if source is None:
            return False

        target = self.output_path(dest_key or source_key)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)
        except OSError as e:
            logger.error(f"Error copying {source_key}: {e}")
            return False

        return True

    def write_text(self, key: str, text: str) -> Path:
        """Write a text file below the output root, creating parent directories."""
        target = self.output_path(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding='utf-8')
        return target

    def write_json(self, key: str, data: Any, indent: Optional[int] = None) -> Path:
        """Serialize data as JSON below the output root."""
        return self.write_text(key, json.dumps(data, indent=indent, ensure_ascii=False))

    def clear_documents(self, key: str, extension: str) -> bool:
        """
        Delete previously published files with an extension from one directory.

        A missing directory is created (nothing to clear).

        Args:
            key: Output directory key (e.g. 'games')
            extension: Extension without dot (e.g. 'html')

        Returns:
            True on success, False if any file could not be deleted
        """
        directory = self.output_path(key)

        try:
            directory.mkdir(parents=True, exist_ok=True)
            deleted = 0
            for item in directory.iterdir():
                if item.is_file() and item.suffix == f".{extension}":
                    item.unlink()
                    deleted += 1
        except OSError as e:
            logger.error(f"Error clearing {directory}: {e}")
            return False

        logger.debug(f"Deleted {deleted} .{extension} file(s) from {directory}")
        return True
