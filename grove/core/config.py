"""Configuration management for Grove.

Reads and writes both repository-local and global INI configuration.
"""

import os
import configparser
from pathlib import Path
from typing import Optional, Tuple

DEFAULT_USER_NAME = 'Grove User'
DEFAULT_USER_EMAIL = 'grove@localhost'


class Config:
    """
    Manages Grove configuration files.

    Configuration is stored in INI format, similar to Git:
    - Global config: ~/.groveconfig
    - Repository config: .grove/config

    Repository config takes precedence over global config.
    Environment variables take highest precedence.
    """

    GLOBAL_CONFIG_PATH = Path.home() / '.groveconfig'

    def __init__(self, repo_config_path: Optional[Path] = None):
        """
        Initialize Config manager.

        Args:
            repo_config_path: Path to repository config file, if in a repo
        """
        self.repo_config_path = repo_config_path
        self._global_config = None
        self._repo_config = None

    @staticmethod
    def _load(path: Optional[Path]) -> configparser.ConfigParser:
        parser = configparser.ConfigParser()
        if path is not None and path.exists():
            parser.read(path)
        return parser

    @property
    def global_config(self) -> configparser.ConfigParser:
        """Load and return global configuration."""
        if self._global_config is None:
            self._global_config = self._load(self.GLOBAL_CONFIG_PATH)
        return self._global_config

    @property
    def repo_config(self) -> Optional[configparser.ConfigParser]:
        """Load and return repository configuration."""
        if self._repo_config is None and self.repo_config_path:
            self._repo_config = self._load(self.repo_config_path)
        return self._repo_config

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """
        Get a configuration value.

        Priority order (highest to lowest):
        1. Environment variables (GROVE_<SECTION>_<KEY>)
        2. Repository config
        3. Global config
        4. Fallback value
        """
        env_value = os.environ.get(f"GROVE_{section.upper()}_{key.upper()}")
        if env_value is not None:
            return env_value

        if self.repo_config and self.repo_config.has_option(section, key):
            return self.repo_config.get(section, key)

        if self.global_config.has_option(section, key):
            return self.global_config.get(section, key)

        return fallback

    def _target(self, global_config: bool):
        if global_config:
            return self.global_config, self.GLOBAL_CONFIG_PATH
        if not self.repo_config_path:
            raise ValueError("No repository config path available")
        return self.repo_config, self.repo_config_path

    def set(self, section: str, key: str, value: str, global_config: bool = False) -> None:
        """
        Set a configuration value.

        Args:
            section: Config section
            key: Config key
            value: Value to set
            global_config: If True, write to global config; otherwise repo config
        """
        config, config_path = self._target(global_config)

        if not config.has_section(section):
            config.add_section(section)
        config.set(section, key, value)

        with open(config_path, 'w') as f:
            config.write(f)

    def unset(self, section: str, key: str, global_config: bool = False) -> bool:
        """
        Remove a configuration value.

        Returns:
            True if the key existed and was removed
        """
        config, config_path = self._target(global_config)

        if not config.has_option(section, key):
            return False
        config.remove_option(section, key)
        if not config.options(section):
            config.remove_section(section)

        with open(config_path, 'w') as f:
            config.write(f)
        return True

    def get_user_identity(self) -> Tuple[str, str]:
        """
        Get user name and email for commits and tags.

        Returns:
            Tuple of (name, email), with defaults when unset
        """
        name = self.get('user', 'name', DEFAULT_USER_NAME)
        email = self.get('user', 'email', DEFAULT_USER_EMAIL)
        return name, email

    def get_signature(self) -> str:
        """'Name <email>' string used in commit and tag headers."""
        name, email = self.get_user_identity()
        return f"{name} <{email}>"


def get_config(repo=None) -> Config:
    """
    Get a Config instance.

    Args:
        repo: Repository instance, or None for global-only config
    """
    if repo:
        return Config(repo.config_file)
    return Config()
