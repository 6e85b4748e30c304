"""
Command-line interface for VISTA versioning.

Main entry point that wires configuration and logging to the version engine.
Each invocation runs exactly one operation against the version file and
prints the resulting version string on stdout.
"""

import sys
import argparse
from typing import List, Optional
from loguru import logger
from rich.console import Console

from . import engine
from ._version import __version__
from .config import Config, load_config
from .logging_config import setup_logging

# Logs go to stderr so stdout only carries the version string
console = Console(stderr=True)

BUMP_COMMANDS = {
    'bump-major': 'major',
    'bump-minor': 'minor',
    'bump-patch': 'patch',
    'bump-build': 'build',
}

COMMAND_ALIASES = {
    'increment-version': 'bump-build',
    'version': 'effective-version',
}


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='vista-version',
        description='Manage a MAJOR.MINOR.PATCH.BUILD version stored in a version.properties file'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    
    # Version file location
    parser.add_argument('--file', help='Version file name or path (default: version.properties)')
    parser.add_argument('--root-dir', help='Directory the version file is resolved against (default: current directory)')
    
    # Logging
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'debug', 'info', 'warning', 'error'], help='Logging level (default: INFO)')
    
    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True
    subparsers.add_parser('bump-major', help='Increment MAJOR and reset MINOR, PATCH and BUILD')
    subparsers.add_parser('bump-minor', help='Increment MINOR and reset PATCH and BUILD')
    subparsers.add_parser('bump-patch', help='Increment PATCH and reset BUILD')
    subparsers.add_parser('bump-build', aliases=['increment-version'], help='Increment BUILD')
    subparsers.add_parser(
        'effective-version', aliases=['version'],
        help='Print the version with VISTA_* environment overrides applied'
    )
    subparsers.add_parser('show', help='Print the persisted version, ignoring environment overrides')
    
    args = parser.parse_args(argv)
    args.command = COMMAND_ALIASES.get(args.command, args.command)
    return args


def run_command(config: Config, command: str) -> int:
    """
    Run a single version operation.
    
    Args:
        config: Validated configuration
        command: Canonical command name
        
    Returns:
        int: Process exit code (0 on success, 1 on I/O failure)
    """
    version_path = config.version_path
    logger.debug(f"Using version file {version_path}")
    
    try:
        if command in BUMP_COMMANDS:
            result = engine.increment(version_path, BUMP_COMMANDS[command])
        elif command == 'effective-version':
            result = engine.effective_version_file(version_path)
        elif command == 'show':
            result = engine.current_version_file(version_path)
        else:
            logger.error(f"Unknown command: {command}")
            return 1
    except OSError as e:
        logger.error(f"Failed to access version file {version_path}: {e}")
        return 1
    
    print(result.version)
    return 0


def setup_application(argv: Optional[List[str]] = None) -> tuple:
    """Set up logging, parse arguments, and load configuration."""
    # Set up logging with default level first
    setup_logging(console=console)
    
    args = parse_arguments(argv)
    
    # Apply log level from arguments if provided
    if args.log_level:
        setup_logging(args.log_level.upper(), console=console)
    
    config = load_config(args)
    if config is None:
        return args, None
    
    setup_logging(config.log_level, console=console)
    return args, config


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the application."""
    args, config = setup_application(argv)
    if config is None:
        sys.exit(1)
    
    exit_code = run_command(config, args.command)
    if exit_code:
        sys.exit(exit_code)


if __name__ == '__main__':
    main()
