"""File access for visualcodex: reads, writes and directory listings."""

import datetime
import os
from pathlib import Path
from typing import Optional, Union

from ..models import FileOpResult, DirectoryEntry, DirectoryListing
from ..utils.helpers import resolve_path
from ..utils.logging import logger

# ValueError covers paths the OS cannot represent, such as an embedded NUL
_PATH_ERRORS = (OSError, UnicodeError, ValueError)


class FileAccessor:
    """Reads and writes files relative to a working directory.

    Every filesystem or path failure comes back as a result value with
    ``success=False``; nothing raised while resolving or touching a path
    crosses this class's boundary.
    """

    def __init__(self, working_directory: Union[str, Path, None] = None):
        """Initialize file accessor.

        Args:
            working_directory: Base for relative paths (process cwd if None)
        """
        self.working_directory = Path(working_directory) if working_directory else Path(os.getcwd())

    def resolve(self, path: Union[str, Path]) -> Path:
        """Resolve a path against the working directory; absolute paths pass through."""
        return resolve_path(path, self.working_directory)

    def read(self, path: str) -> FileOpResult:
        """Read a whole file as UTF-8, preserving line endings."""
        try:
            file_path = self.resolve(path)
            with open(file_path, 'r', encoding='utf-8', newline='') as f:
                content = f.read()
        except _PATH_ERRORS as e:
            logger.warning(f"Could not read {path}: {e}")
            return FileOpResult(success=False, path=str(path), error=str(e))

        logger.file(f"Read {len(content)} chars from {file_path}")
        return FileOpResult(success=True, path=str(path), content=content)

    def write(self, path: str, content: str) -> FileOpResult:
        """Replace a file's contents, creating missing parent directories first."""
        try:
            file_path = self.resolve(path)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8', newline='') as f:
                f.write(content)
        except _PATH_ERRORS as e:
            logger.warning(f"Could not write {path}: {e}")
            return FileOpResult(success=False, path=str(path), error=str(e))

        logger.file(f"Wrote {len(content)} chars to {file_path}")
        return FileOpResult(success=True, path=str(path), content=content)

    def list_directory(self, path: Optional[str] = None) -> DirectoryListing:
        """List a directory, directories first, then files, each sorted by name."""
        entries = []
        try:
            dir_path = self.resolve(path) if path else self.working_directory
            with os.scandir(dir_path) as it:
                for entry in it:
                    try:
                        stats = entry.stat()
                    except OSError:
                        # Dangling symlink: describe the link itself
                        stats = entry.stat(follow_symlinks=False)
                    entries.append(DirectoryEntry(
                        name=entry.name,
                        path=str(Path(dir_path) / entry.name),
                        is_directory=entry.is_dir(),
                        size=stats.st_size,
                        modified_time=datetime.datetime.fromtimestamp(
                            stats.st_mtime, tz=datetime.timezone.utc
                        ),
                    ))
        except _PATH_ERRORS as e:
            logger.warning(f"Could not list {path or self.working_directory}: {e}")
            return DirectoryListing(success=False, error=str(e))

        entries.sort(key=lambda e: (not e.is_directory, e.name.lower()))
        logger.debug(f"Listed {len(entries)} entries in {dir_path}")
        return DirectoryListing(success=True, entries=entries)


def create_file_accessor(working_directory: Union[str, Path, None] = None) -> FileAccessor:
    """Create a file accessor bound to a working directory."""
    return FileAccessor(working_directory)
