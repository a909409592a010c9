"""
visualcodex - chat with an LLM that can act on your repository.

The model's free-form reply is read as a list of operations (read a file,
write a file, run a command, or just answer). Requested files are fed back to
the model in one follow-up round, and writes and commands are performed or
only described depending on the chosen approval mode.
"""

__version__ = "0.1.0"

# Main API imports
from .core.application import VisualCodex, create_application
from .core.orchestrator import ConversationOrchestrator, create_orchestrator
from .config.manager import ConfigManager, ConfigSnapshot, create_config_manager
from .models import AutonomyLevel, TurnResult

__all__ = [
    "VisualCodex",
    "create_application",
    "ConversationOrchestrator",
    "create_orchestrator",
    "ConfigManager",
    "ConfigSnapshot",
    "create_config_manager",
    "AutonomyLevel",
    "TurnResult",
    "__version__",
]
