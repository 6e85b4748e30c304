"""
Configuration management for VISTA versioning.

Handles environment variable loading, validation, and provides a centralized
configuration object for the command-line interface.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from loguru import logger

from .engine import DEFAULT_VERSION_FILE

# Load environment variables from .env file
load_dotenv()

VALID_LOG_LEVELS = ['DEBUG', 'VERBOSE', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def get_config_value(cli_args, field_name: str, env_key: str, default, value_type: type = str):
    """
    Get configuration value with proper precedence: CLI args > env vars > defaults.
    
    Args:
        cli_args: CLI arguments object or None
        field_name: Name of the CLI argument field
        env_key: Environment variable key
        default: Default value if neither CLI nor env var is set
        value_type: Type to convert the value to (str, int)
        
    Returns:
        The configuration value converted to the specified type
    """
    cli_value = getattr(cli_args, field_name, None) if cli_args else None
    if cli_value is not None:
        return cli_value
    
    env_value = os.environ.get(env_key, '')
    if not env_value:
        return default
    
    try:
        return value_type(env_value)
    except (ValueError, TypeError):
        return default


def get_config_value_str(cli_args, field_name: str, env_key: str, default: str = '') -> str:
    """Get string configuration value."""
    return get_config_value(cli_args, field_name, env_key, default, str)


@dataclass
class Config:
    """Configuration object containing all application settings."""
    
    # Version file location
    version_file: str
    root_dir: str
    
    # Logging
    log_level: str
    
    @property
    def version_path(self) -> Path:
        """Absolute path of the version file (absolute version_file wins over root_dir)."""
        return Path(self.root_dir) / self.version_file


def load_config(cli_args=None) -> Optional[Config]:
    """
    Load and validate configuration from CLI arguments and environment variables.
    CLI arguments take precedence over environment variables.
    
    Args:
        cli_args: Parsed CLI arguments or None
        
    Returns:
        Optional[Config]: Validated configuration object, or None if validation failed
    """
    version_file = get_config_value_str(cli_args, 'file', 'VISTA_VERSION_FILE', DEFAULT_VERSION_FILE)
    root_dir = get_config_value_str(cli_args, 'root_dir', 'VISTA_ROOT_DIR', os.getcwd())
    
    # Handle log_level (case insensitive)
    log_level = get_config_value_str(cli_args, 'log_level', 'LOG_LEVEL', 'INFO').upper()
    
    validation_errors = []
    
    if log_level not in VALID_LOG_LEVELS:
        validation_errors.append(f'LOG_LEVEL must be one of {VALID_LOG_LEVELS} (got: {log_level})')
    
    if not version_file.strip():
        validation_errors.append('VISTA_VERSION_FILE must not be empty')
    
    if not os.path.isdir(root_dir):
        validation_errors.append(f'VISTA_ROOT_DIR ({root_dir}) is not an existing directory')
    
    if validation_errors:
        logger.error('❌ Configuration Error:')
        for i, error_msg in enumerate(validation_errors, 1):
            logger.error(f'   {i}. {error_msg}')
        return None
    
    config = Config(
        version_file=version_file,
        root_dir=os.path.abspath(root_dir),
        log_level=log_level
    )
    
    logger.debug(f'VISTA_VERSION_FILE = {config.version_file}')
    logger.debug(f'VISTA_ROOT_DIR = {config.root_dir}')
    logger.debug(f'LOG_LEVEL = {config.log_level}')
    
    return config
