"""Core application logic for visualcodex."""

from .application import VisualCodex, create_application
from .orchestrator import ConversationOrchestrator, create_orchestrator

__all__ = [
    "VisualCodex",
    "create_application",
    "ConversationOrchestrator",
    "create_orchestrator",
]
