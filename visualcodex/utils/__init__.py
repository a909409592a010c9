"""Utility functions and helpers for visualcodex."""

from .logging import logger, get_current_timestamp
from .helpers import (
    prompt_context,
    resolve_path,
    ensure_directory_exists,
    mask_secret,
    run_batch,
)

__all__ = [
    "logger",
    "get_current_timestamp",
    "prompt_context",
    "resolve_path",
    "ensure_directory_exists",
    "mask_secret",
    "run_batch",
]
