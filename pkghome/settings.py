#!/usr/bin/env python3
"""
Settings loader for pkghome.
Supports configuration from _pkgdown.yml, _pkgdown.yaml or pkgdown/_pkgdown.yml.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

import yaml

logger = logging.getLogger('pkghome.settings')


@dataclass(frozen=True)
class HomeLink:
    text: str
    href: str


@dataclass(frozen=True)
class HomeConfig:
    """The ``home`` section of the site configuration."""
    sidebar: Optional[str] = None
    links: List[HomeLink] = field(default_factory=list)
    strip_header: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], source: str = '<config>') -> 'HomeConfig':
        """
        Build a HomeConfig from the raw ``home`` mapping.

        Args:
            data: The ``home`` mapping, or None
            source: Where the mapping came from, used in error messages

        Returns:
            HomeConfig instance
        """
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"'home' must be a mapping in {source}")

        links = []
        for item in data.get('links') or []:
            if not isinstance(item, dict) or 'text' not in item or 'href' not in item:
                raise ValueError(f"Each entry of 'home.links' needs 'text' and 'href' in {source}")
            links.append(HomeLink(text=str(item['text']), href=str(item['href'])))

        strip_header = data.get('strip_header', False)
        if not isinstance(strip_header, bool):
            raise ValueError(f"'home.strip_header' must be true or false in {source}")

        sidebar = data.get('sidebar')
        return cls(
            sidebar=str(sidebar) if sidebar is not None else None,
            links=links,
            strip_header=strip_header,
        )


@dataclass(frozen=True)
class BuildOptions:
    """Explicit build configuration passed through the pipeline."""
    depth: int = 0
    encoding: str = 'UTF-8'
    registry_mirror: Optional[str] = None
    check_registry: bool = True
    templates_dir: Optional[str] = None


class SiteSettings:
    """Load and manage site configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'destination': 'docs',
        'templates': None,
        'depth': 0,
        'encoding': 'UTF-8',
        'registry_mirror': None,
        'check_registry': True,
        'home': None,
    }

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['_pkgdown.yml', '_pkgdown.yaml', os.path.join('pkgdown', '_pkgdown.yml')]

    def __init__(self, config_dir: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Package root to look for config files in. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = self.DEFAULT_SETTINGS.copy()
        self.config_file_path = None

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from configuration file if it exists.

        Returns:
            Dictionary of configuration settings
        """
        config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            loaded_settings = self._load_config_file(config_file)
            if loaded_settings:
                self.settings.update(loaded_settings)
                logger.debug(f"Loaded configuration from: {config_file}")

        return self.settings.copy()

    def _find_config_file(self) -> Optional[str]:
        """Find the first available configuration file."""
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except PermissionError:
            raise PermissionError(f"Permission denied reading configuration file: {config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}")
        except (IOError, OSError) as e:
            raise IOError(f"Error reading configuration file {config_path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {config_path} must contain a mapping")
        return data

    def home_config(self) -> HomeConfig:
        """Parse the ``home`` section of the loaded settings."""
        return HomeConfig.from_dict(self.settings.get('home'), self.config_file_path or '<defaults>')

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of command-line arguments

        Returns:
            Merged configuration dictionary
        """
        merged = self.settings.copy()

        for key, value in args_dict.items():
            if value is not None:
                merged[key] = value

        return merged

    @staticmethod
    def build_options(merged: Dict[str, Any]) -> BuildOptions:
        """Turn a merged settings dictionary into BuildOptions."""
        return BuildOptions(
            depth=int(merged.get('depth') or 0),
            encoding=merged.get('encoding') or 'UTF-8',
            registry_mirror=merged.get('registry_mirror'),
            check_registry=bool(merged.get('check_registry', True)),
            templates_dir=merged.get('templates'),
        )
