"""File access for visualcodex."""

from .accessor import FileAccessor, create_file_accessor

__all__ = [
    "FileAccessor",
    "create_file_accessor",
]
