"""Main application class for visualcodex."""

import signal
import sys
from pathlib import Path
from typing import Optional

from ..config.manager import create_config_manager
from ..core.orchestrator import create_orchestrator
from ..files import create_file_accessor
from ..models import AutonomyLevel, DirectoryListing, FileOpResult, TurnResult
from ..utils.logging import logger
from ..constants import CLR_BOLD_RED, CLR_RESET


class VisualCodex:
    """Entry points used by a front end: chat turns plus file browsing."""

    def __init__(self, config_dir: Optional[str] = None, debug: bool = False,
                 model: Optional[str] = None, config_manager=None, orchestrator=None):
        """Initialize the visualcodex application.

        Args:
            config_dir: Custom configuration directory path
            debug: Enable debug logging
            model: Model id overriding the configured default for this process
            config_manager: Pre-built configuration manager (created from config_dir if None)
            orchestrator: Pre-built orchestrator (created from the config manager if None)

        Raises:
            ConfigurationError: The settings file exists but is invalid
        """
        logger.set_debug(debug)

        config_path = Path(config_dir) if config_dir else None
        self.config_manager = config_manager or create_config_manager(config_path)
        self.config_manager.apply_overrides(default_model=model)

        # Update debug setting from config if not explicitly set
        if not debug and self.config_manager.get("enable_debug", False):
            logger.set_debug(True)

        self.orchestrator = orchestrator or create_orchestrator(self.config_manager)

        logger.debug("Application initialization complete")

    @property
    def default_autonomy_level(self) -> AutonomyLevel:
        return self.config_manager.get_approval_mode()

    def execute_turn(self, prompt: str, working_directory: Optional[str] = None,
                     autonomy_level=None) -> TurnResult:
        """Run one chat turn.

        Args:
            prompt: The user's message
            working_directory: Repository to work in (process cwd if None)
            autonomy_level: Level for this turn (configured approval_mode if None)

        Returns:
            TurnResult; never raises
        """
        level = autonomy_level if autonomy_level is not None else self.default_autonomy_level
        try:
            return self.orchestrator.execute_turn(prompt, working_directory, level)
        except KeyboardInterrupt:
            logger.system("Turn interrupted by user")
            return TurnResult(success=False, error="Interrupted", error_type="KeyboardInterrupt")
        except Exception as e:
            logger.error(f"Unexpected error during turn: {e}")
            return TurnResult(success=False, error=str(e), error_type=type(e).__name__)

    def read_file(self, path: str, working_directory: Optional[str] = None) -> FileOpResult:
        """Read a file for direct browsing; relative paths start at working_directory (cwd if None)."""
        return create_file_accessor(working_directory).read(path)

    def write_file(self, path: str, content: str,
                   working_directory: Optional[str] = None) -> FileOpResult:
        """Write a file for direct editing."""
        return create_file_accessor(working_directory).write(path, content)

    def list_directory(self, path: Optional[str] = None,
                       working_directory: Optional[str] = None) -> DirectoryListing:
        """List a directory for the file browser."""
        return create_file_accessor(working_directory).list_directory(path)

    def run_single_task(self, prompt: str, working_directory: Optional[str] = None,
                        autonomy_level=None) -> bool:
        """Run one turn, print its output and report success."""
        result = self.execute_turn(prompt, working_directory, autonomy_level)
        if result.success:
            print(result.output)
        else:
            logger.error(result.error or "Turn failed")
        return result.success

    def run_interactive_mode(self, working_directory: Optional[str] = None,
                             autonomy_level=None) -> None:
        """Prompt for messages until the user quits.

        ``/mode <level>`` changes the autonomy level for the following turns.
        """
        level = AutonomyLevel.parse(autonomy_level) if autonomy_level else self.default_autonomy_level
        logger.system(f"Starting interactive mode ({level.value}). Type 'exit', 'quit', or use Ctrl+D to stop.")
        logger.system("Commands: /mode suggest|auto-edit|full-auto")

        while True:
            try:
                user_input = input(f"\n{CLR_BOLD_RED}visualcodex>{CLR_RESET} ").strip()
            except KeyboardInterrupt:
                logger.system("\nUse 'exit' or 'quit' to stop gracefully")
                continue
            except EOFError:
                logger.system("\nGoodbye!")
                break

            if user_input.lower() in ['exit', 'quit', 'q']:
                logger.system("Goodbye!")
                break
            if not user_input:
                continue

            if user_input.startswith('/mode'):
                requested = user_input[len('/mode'):].strip()
                try:
                    level = AutonomyLevel.parse(requested)
                    logger.system(f"Autonomy level set to {level.value}")
                except ValueError as e:
                    logger.warning(str(e))
                continue

            if not self.run_single_task(user_input, working_directory, level):
                logger.warning("Turn did not complete successfully")

    def install_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""
        def signal_handler(sig, frame):
            logger.system(f"Received signal {sig}, shutting down gracefully...")
            sys.exit(0)

        signal.signal(signal.SIGTERM, signal_handler)
        if hasattr(signal, 'SIGHUP'):
            signal.signal(signal.SIGHUP, signal_handler)

    def print_config_summary(self) -> None:
        """Print a summary of the current configuration."""
        logger.system("Configuration Summary:")
        for key, value in self.config_manager.get_config_summary().items():
            logger.system(f"  {key}: {value}")


def create_application(config_dir: Optional[str] = None, debug: bool = False,
                       model: Optional[str] = None) -> VisualCodex:
    """Create and initialize a VisualCodex application instance.

    Args:
        config_dir: Custom configuration directory path
        debug: Enable debug logging
        model: Model id override

    Returns:
        Initialized VisualCodex instance
    """
    return VisualCodex(config_dir, debug, model)
