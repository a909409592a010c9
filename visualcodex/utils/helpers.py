"""Helper utility functions for visualcodex."""

import os
import socket
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..constants import MAX_IO_WORKERS
from ..utils.logging import logger, get_current_timestamp


def prompt_context(working_directory: Optional[str] = None) -> Dict[str, str]:
    """Values a system prompt template may reference."""
    return dict(
        current_directory=str(working_directory or os.getcwd()),
        current_time=get_current_timestamp(),
        current_hostname=socket.gethostname(),
    )


def resolve_path(path: Union[str, Path], working_directory: Union[str, Path]) -> Path:
    """Resolve a path against a working directory; absolute paths pass through."""
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    return Path(working_directory) / candidate


def ensure_directory_exists(directory: Path) -> None:
    """Ensure a directory exists, creating it if necessary."""
    try:
        directory.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Directory ensured: {directory}")
    except OSError as e:
        logger.error(f"Failed to create directory {directory}: {e}")
        raise


def mask_secret(value: str) -> str:
    """Mask all but the last four characters of a secret for display."""
    if not value:
        return "(not set)"
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]


def run_batch(func: Callable[[Any], Any], items: Sequence[Any], max_workers: int = MAX_IO_WORKERS) -> List[Any]:
    """Run func over items concurrently and return results in the items' order.

    Every task is launched up front and all are joined before returning;
    completion order never leaks into the result order.
    """
    if not items:
        return []
    if len(items) == 1:
        return [func(items[0])]

    results: List[Any] = [None] * len(items)
    with ThreadPoolExecutor(max_workers=min(max_workers, len(items))) as executor:
        futures = {executor.submit(func, item): index for index, item in enumerate(items)}
        for future in as_completed(futures):
            results[futures[future]] = future.result()
    return results
