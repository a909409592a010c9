"""Command-line interface for visualcodex."""

import argparse
import sys
from typing import List, Optional

from colorama import init as colorama_init

from .constants import APPROVAL_MODES, CLR_BOLD_BLUE, CLR_RESET
from .core.application import create_application
from .errors import ConfigurationError
from .utils.logging import logger
from . import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="visualcodex: chat with an LLM that can read files, write files and run commands in your repository.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  visualcodex "explain what src/app.py does"          # One turn, suggest mode
  visualcodex --mode auto-edit "add a README.md"      # Apply file writes
  visualcodex --cwd ~/project --mode full-auto "run the tests"
  visualcodex --list src                              # Browse files
  visualcodex  # Interactive mode

Approval Modes:
  suggest   - File writes and commands are described, never performed (default)
  auto-edit - File writes are applied, commands are described
  full-auto - File writes are applied and commands are run (USE WITH CAUTION!)
        """
    )

    parser.add_argument(
        'prompt',
        nargs='*',
        help="Message for the assistant. If empty, enters interactive mode."
    )

    parser.add_argument(
        '-m', '--mode',
        choices=APPROVAL_MODES,
        help="Approval mode for this session (defaults to approval_mode from the config)"
    )

    parser.add_argument(
        '--cwd',
        type=str,
        help="Repository directory to work in and to resolve --read/--list against (defaults to the current directory)"
    )

    parser.add_argument(
        '--model',
        type=str,
        help="Model id overriding default_model from the config"
    )

    parser.add_argument(
        '--read',
        metavar='PATH',
        help="Print a file and exit"
    )

    parser.add_argument(
        '--list',
        metavar='DIR',
        nargs='?',
        const='.',
        help="List a directory (default: current) and exit"
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'visualcodex {__version__}'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help="Enable debug logging output"
    )

    parser.add_argument(
        '--config-dir',
        type=str,
        help="Custom configuration directory path"
    )

    parser.add_argument(
        '--config-summary',
        action='store_true',
        help="Show configuration summary and exit"
    )

    return parser


def _print_listing(app, path: str, working_directory: Optional[str] = None) -> bool:
    listing = app.list_directory(path, working_directory)
    if not listing.success:
        logger.error(f"Could not list {path}: {listing.error}")
        return False
    for entry in listing.entries:
        if entry.is_directory:
            print(f"{CLR_BOLD_BLUE}{entry.name}/{CLR_RESET}")
        else:
            print(f"{entry.name:<40} {entry.size:>10}  {entry.modified_time:%Y-%m-%d %H:%M}")
    return True


def _print_file(app, path: str, working_directory: Optional[str] = None) -> bool:
    result = app.read_file(path, working_directory)
    if not result.success:
        logger.error(f"Could not read {path}: {result.error}")
        return False
    print(result.content, end="" if result.content.endswith("\n") else "\n")
    return True


def main(args: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    colorama_init(autoreset=True)

    parser = create_parser()
    parsed_args = parser.parse_args(args)

    try:
        app = create_application(
            config_dir=parsed_args.config_dir,
            debug=parsed_args.debug,
            model=parsed_args.model,
        )
    except ConfigurationError as e:
        logger.error(f"Failed to initialize visualcodex: {e}")
        sys.exit(1)

    if parsed_args.config_summary:
        app.print_config_summary()
        return

    if parsed_args.read:
        sys.exit(0 if _print_file(app, parsed_args.read, parsed_args.cwd) else 1)

    if parsed_args.list:
        sys.exit(0 if _print_listing(app, parsed_args.list, parsed_args.cwd) else 1)

    app.install_signal_handlers()

    if parsed_args.prompt:
        prompt = " ".join(parsed_args.prompt)
        success = app.run_single_task(prompt, parsed_args.cwd, parsed_args.mode)
        sys.exit(0 if success else 1)

    app.run_interactive_mode(parsed_args.cwd, parsed_args.mode)
    logger.system("visualcodex session ended.")


if __name__ == "__main__":
    main()
