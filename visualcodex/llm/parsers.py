"""LLM response parsing utilities for visualcodex."""

import re
from typing import Any, List, Optional

from ..constants import (
    FILE_WRITE_EXTENSIONS, ILLUSTRATIVE_PATH_MARKERS, LANGUAGE_TAG_PREFIXES
)
from ..models import (
    Operation, FileRead, FileWrite, CommandExecution, DirectResponse
)
from ..utils.logging import logger


class OperationParser:
    """Turns a free-form model reply into an ordered list of operations.

    The textual conventions are:

    * a fenced block whose opening line is a file path writes that file,
    * ``Execute: <command>`` runs a shell command,
    * ``Read file: <path>`` asks for a file's contents,
    * anything else is a plain answer.

    How the conventions are matched is private to this class.
    """

    def __init__(self, extensions: Optional[List[str]] = None):
        """Initialize the parser.

        Args:
            extensions: File extensions recognised on a fence path line
        """
        self.extensions = list(extensions or FILE_WRITE_EXTENSIONS)
        # Longest first so "json" is tried before "js"
        alternation = "|".join(re.escape(ext) for ext in sorted(self.extensions, key=len, reverse=True))
        self._file_write_pattern = re.compile(
            r"```(?:Write to: )?([^`\n]+\.(?:" + alternation + r"))\r?\n(.*?)```",
            re.DOTALL,
        )
        self._command_pattern = re.compile(r"Execute: (.+)")
        self._file_read_pattern = re.compile(r"Read file: (.+)")

    def parse(self, response_text: str) -> List[Operation]:
        """Extract operations from a model reply.

        Never fails: a reply without any recognised marker comes back as a
        single DirectResponse holding the unmodified text.

        Args:
            response_text: Raw model output

        Returns:
            File writes, then commands, then file reads, each in order of appearance
        """
        operations: List[Operation] = []
        operations.extend(self._parse_file_writes(response_text))
        operations.extend(self._parse_commands(response_text))
        operations.extend(self._parse_file_reads(response_text))

        if not operations:
            logger.debug("No operation markers found; treating reply as a direct response")
            return [DirectResponse(content=response_text)]

        logger.debug(f"Parsed {len(operations)} operation(s) from model reply")
        return operations

    def _parse_file_writes(self, text: str) -> List[FileWrite]:
        writes = []
        for match in self._file_write_pattern.finditer(text):
            path = match.group(1).strip()
            content = match.group(2)

            if self._is_illustrative(path):
                logger.debug(f"Skipping illustrative code block '{path}'")
                continue
            if not path or not content:
                logger.debug(f"Skipping code block '{path}' with no content")
                continue

            writes.append(FileWrite(path=path, content=content))
        return writes

    def _parse_commands(self, text: str) -> List[CommandExecution]:
        commands = []
        for match in self._command_pattern.finditer(text):
            command = match.group(1).strip()
            if command:
                commands.append(CommandExecution(command=command))
        return commands

    def _parse_file_reads(self, text: str) -> List[FileRead]:
        reads = []
        for match in self._file_read_pattern.finditer(text):
            path = match.group(1).strip()
            if path:
                reads.append(FileRead(path=path))
        return reads

    @staticmethod
    def _is_illustrative(path: str) -> bool:
        """Whether a fence path marks a documentation snippet rather than a real file."""
        lowered = path.lower()
        if any(marker in lowered for marker in ILLUSTRATIVE_PATH_MARKERS):
            return True
        return any(lowered.startswith(prefix) for prefix in LANGUAGE_TAG_PREFIXES)


_default_parser = OperationParser()


def parse_operations(response_text: str) -> List[Operation]:
    """Parse a model reply with the default extension set."""
    return _default_parser.parse(response_text)


_PATH_TOKEN = re.compile(r"\.([^.\[\]]+)|\[(\d+)\]")


def extract_response_content(response_data: Any, response_path: str) -> Optional[Any]:
    """Follow a jq-style path such as ``.choices[0].message.content``.

    Returns None when the path is malformed or leads nowhere in the data.
    """
    if not response_path.startswith('.'):
        logger.warning(f"Response path should start with '.': {response_path}")
        return None

    tokens = list(_PATH_TOKEN.finditer(response_path))
    if "".join(token.group(0) for token in tokens) != response_path:
        logger.warning(f"Unsupported response path: {response_path}")
        return None

    current = response_data
    for token in tokens:
        key, index = token.groups()
        if key is not None:
            if not isinstance(current, dict) or key not in current:
                return None
            current = current[key]
        else:
            position = int(index)
            if not isinstance(current, list) or position >= len(current):
                return None
            current = current[position]
    return current
