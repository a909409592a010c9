"""Command execution and approval policy for visualcodex."""

from .executor import CommandRunner, create_command_runner
from .policy import ApprovalPolicy, POLICY_TABLE, create_approval_policy

__all__ = [
    "CommandRunner",
    "create_command_runner",
    "ApprovalPolicy",
    "POLICY_TABLE",
    "create_approval_policy",
]
