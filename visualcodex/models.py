"""Data model shared by the parser, the policy and the orchestrator."""

import datetime
import functools
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .utils.logging import logger


class OperationKind(Enum):
    """Kinds of intent that can be extracted from a model reply."""
    FILE_READ = "file-read"
    FILE_WRITE = "file-write"
    COMMAND_EXECUTION = "command"
    DIRECT_RESPONSE = "response"


@functools.total_ordering
class AutonomyLevel(Enum):
    """How much the assistant may do without asking, least to most."""
    SUGGEST = "suggest"
    AUTO_EDIT = "auto-edit"
    FULL_AUTO = "full-auto"

    @property
    def rank(self) -> int:
        return list(AutonomyLevel).index(self)

    def __lt__(self, other):
        if not isinstance(other, AutonomyLevel):
            return NotImplemented
        return self.rank < other.rank

    @classmethod
    def parse(cls, value) -> "AutonomyLevel":
        """Accept 'auto-edit', 'AUTO_EDIT', 'auto_edit' and the like."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", "-")
        for level in cls:
            if level.value == normalized:
                return level
        raise ValueError(
            f"Unknown autonomy level '{value}'. "
            f"Expected one of: {', '.join(level.value for level in cls)}"
        )


class PolicyDecision(Enum):
    """What the executor does with a classified operation."""
    EXECUTE = "execute"
    DESCRIBE = "describe"
    SKIP = "skip"


class Operation:
    """Base of the four operation variants."""

    @property
    def kind(self) -> OperationKind:
        raise NotImplementedError


def _require_text(variant: str, field_name: str, value: Any) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{variant} requires a non-empty '{field_name}'")


@dataclass(frozen=True)
class FileRead(Operation):
    path: str

    def __post_init__(self):
        _require_text("FileRead", "path", self.path)

    @property
    def kind(self) -> OperationKind:
        return OperationKind.FILE_READ


@dataclass(frozen=True)
class FileWrite(Operation):
    path: str
    content: str

    def __post_init__(self):
        _require_text("FileWrite", "path", self.path)
        _require_text("FileWrite", "content", self.content)

    @property
    def kind(self) -> OperationKind:
        return OperationKind.FILE_WRITE


@dataclass(frozen=True)
class CommandExecution(Operation):
    command: str

    def __post_init__(self):
        _require_text("CommandExecution", "command", self.command)

    @property
    def kind(self) -> OperationKind:
        return OperationKind.COMMAND_EXECUTION


@dataclass(frozen=True)
class DirectResponse(Operation):
    # May be empty: a blank model reply is still a reply
    content: str

    @property
    def kind(self) -> OperationKind:
        return OperationKind.DIRECT_RESPONSE


@dataclass
class FileOpResult:
    """Outcome of a single read or write."""
    success: bool
    path: str
    content: str = ""
    error: Optional[str] = None


@dataclass
class CommandResult:
    """Outcome of a single shell command."""
    command: str
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        """Whether the command ran and exited cleanly."""
        return self.exit_code == 0 and not self.error

    @property
    def output(self) -> str:
        """Combined stdout and stderr output."""
        combined = []
        if self.stdout.strip():
            combined.append(self.stdout.strip())
        if self.stderr.strip():
            combined.append(self.stderr.strip())
        return "\n".join(combined)


@dataclass
class DirectoryEntry:
    name: str
    path: str
    is_directory: bool
    size: int
    modified_time: datetime.datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "isDirectory": self.is_directory,
            "size": self.size,
            "modifiedTime": self.modified_time.isoformat(),
        }


@dataclass
class DirectoryListing:
    success: bool
    entries: List[DirectoryEntry] = field(default_factory=list)
    error: Optional[str] = None


class TurnState(Enum):
    """States of a single conversation turn."""
    IDLE = "idle"
    AWAITING_INITIAL_RESPONSE = "awaiting_initial_response"
    EXTRACTING_OPERATIONS = "extracting_operations"
    RESOLVING_READS = "resolving_reads"
    AWAITING_FOLLOW_UP = "awaiting_follow_up"
    APPLYING_POLICY = "applying_policy"
    EXECUTING = "executing"
    FORMATTING = "formatting"
    DONE = "done"
    FAILED = "failed"


_TRANSITIONS = {
    TurnState.IDLE: {TurnState.AWAITING_INITIAL_RESPONSE, TurnState.FAILED},
    TurnState.AWAITING_INITIAL_RESPONSE: {TurnState.EXTRACTING_OPERATIONS, TurnState.FAILED},
    TurnState.EXTRACTING_OPERATIONS: {TurnState.RESOLVING_READS, TurnState.APPLYING_POLICY},
    TurnState.RESOLVING_READS: {TurnState.AWAITING_FOLLOW_UP, TurnState.APPLYING_POLICY},
    TurnState.AWAITING_FOLLOW_UP: {TurnState.APPLYING_POLICY},
    TurnState.APPLYING_POLICY: {TurnState.EXECUTING},
    TurnState.EXECUTING: {TurnState.FORMATTING},
    TurnState.FORMATTING: {TurnState.DONE},
    TurnState.DONE: set(),
    TurnState.FAILED: set(),
}


@dataclass
class ConversationTurn:
    """Working state of one prompt-to-reply cycle. Never persisted."""
    prompt: str
    working_directory: str
    autonomy_level: AutonomyLevel
    state: TurnState = TurnState.IDLE
    operations: List[Operation] = field(default_factory=list)
    read_results: List[str] = field(default_factory=list)
    direct_results: List[str] = field(default_factory=list)
    write_results: List[str] = field(default_factory=list)
    command_results: List[str] = field(default_factory=list)
    history: List[TurnState] = field(default_factory=lambda: [TurnState.IDLE])
    follow_up_done: bool = False

    def advance(self, new_state: TurnState) -> None:
        """Move to the next state, refusing transitions the machine does not have."""
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal turn transition {self.state.name} -> {new_state.name}")
        logger.debug(f"Turn state: {self.state.name} -> {new_state.name}")
        self.state = new_state
        self.history.append(new_state)

    def operations_of(self, kind: OperationKind) -> List[Operation]:
        return [op for op in self.operations if op.kind is kind]

    def all_results(self) -> List[str]:
        """Result strings in reporting order: reads, responses, writes, commands."""
        return self.read_results + self.direct_results + self.write_results + self.command_results


@dataclass
class TurnResult:
    """Structured reply handed back to the caller of a turn."""
    success: bool
    output: str = ""
    error: Optional[str] = None
    error_type: Optional[str] = None
    exit_code: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": self.success, "output": self.output}
        if self.error is not None:
            result["error"] = self.error
        if self.error_type is not None:
            result["errorType"] = self.error_type
        if self.exit_code is not None:
            result["exitCode"] = self.exit_code
        return result
