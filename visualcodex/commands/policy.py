"""Approval policy for visualcodex: which operations may run at which autonomy level."""

from typing import Dict, Optional

from ..models import (
    AutonomyLevel, CommandExecution, FileWrite, Operation, OperationKind, PolicyDecision
)
from ..utils.logging import logger


EXECUTE = PolicyDecision.EXECUTE
DESCRIBE = PolicyDecision.DESCRIBE

# Reads and plain answers carry no risk and always go through.
POLICY_TABLE: Dict[OperationKind, Dict[AutonomyLevel, PolicyDecision]] = {
    OperationKind.FILE_READ: {
        AutonomyLevel.SUGGEST: EXECUTE,
        AutonomyLevel.AUTO_EDIT: EXECUTE,
        AutonomyLevel.FULL_AUTO: EXECUTE,
    },
    OperationKind.FILE_WRITE: {
        AutonomyLevel.SUGGEST: DESCRIBE,
        AutonomyLevel.AUTO_EDIT: EXECUTE,
        AutonomyLevel.FULL_AUTO: EXECUTE,
    },
    OperationKind.COMMAND_EXECUTION: {
        AutonomyLevel.SUGGEST: DESCRIBE,
        AutonomyLevel.AUTO_EDIT: DESCRIBE,
        AutonomyLevel.FULL_AUTO: EXECUTE,
    },
    OperationKind.DIRECT_RESPONSE: {
        AutonomyLevel.SUGGEST: EXECUTE,
        AutonomyLevel.AUTO_EDIT: EXECUTE,
        AutonomyLevel.FULL_AUTO: EXECUTE,
    },
}


class ApprovalPolicy:
    """Maps an operation kind and autonomy level to an execution decision."""

    def __init__(self, table: Optional[Dict[OperationKind, Dict[AutonomyLevel, PolicyDecision]]] = None):
        """Initialize approval policy.

        Args:
            table: Decision table (the built-in table if None)

        Raises:
            ValueError: The table grants something at a lower level that a higher level forbids
        """
        self.table = table or POLICY_TABLE
        if not self.is_monotonic():
            raise ValueError("Approval table must not revoke at a higher level what a lower level executes")

    def classify(self, kind: OperationKind, level: AutonomyLevel) -> PolicyDecision:
        """Decide whether an operation kind runs, is described, or is skipped.

        Kinds missing from the table are skipped.
        """
        decision = self.table.get(kind, {}).get(level, PolicyDecision.SKIP)
        logger.debug(f"Policy: {kind.value} at {level.value} -> {decision.value}")
        return decision

    def is_monotonic(self) -> bool:
        """Check that raising the autonomy level never takes an Execute away."""
        levels = sorted(AutonomyLevel)
        for row in self.table.values():
            executed = False
            for level in levels:
                if row.get(level) is PolicyDecision.EXECUTE:
                    executed = True
                elif executed:
                    return False
        return True

    @staticmethod
    def describe(operation: Operation) -> str:
        """Say what an operation would do without doing it."""
        if isinstance(operation, FileWrite):
            return f"Would write to file: {operation.path}\n```\n{operation.content}\n```"
        if isinstance(operation, CommandExecution):
            return f"Would execute command: {operation.command}"
        return ""


def create_approval_policy() -> ApprovalPolicy:
    """Create an approval policy with the built-in table."""
    return ApprovalPolicy()
