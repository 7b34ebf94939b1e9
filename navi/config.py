"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables
  2. Project config (.navi/config.yaml)
  3. User config (~/.navi/config.yaml)
  4. Defaults

Environment variables:
- NAVI_CONTEXT_LINES: search.context_lines
- NAVI_PROFILE_PATH: extra profile files, os.pathsep-separated (appended
  to profiles.paths)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .core.languages import register_builtins
from .core.loader import load_profile_file
from .core.registry import PatternRegistry
from .presentation.symbols import get_symbols

logger = logging.getLogger(__name__)


@dataclass
class SearchConfig:
    """Search defaults."""
    context_lines: int = 0
    exclusive_levels: bool = False

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if not isinstance(self.context_lines, int) or self.context_lines < 0:
            return f"context_lines must be a non-negative integer, got {self.context_lines!r}"
        return None


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"
    format: str = "auto"   # "auto" | "text" | "json"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        valid_symbols = ("unicode", "ascii", "auto")
        if self.symbols not in valid_symbols:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(valid_symbols)}"

        valid_formats = ("auto", "text", "json")
        if self.format not in valid_formats:
            return f"Unknown format '{self.format}'. Valid: {', '.join(valid_formats)}"
        return None


@dataclass
class ProfilesConfig:
    """Where language profiles come from."""
    builtin: bool = True
    paths: List[str] = field(default_factory=list)


@dataclass
class Config:
    """Application configuration."""
    search: SearchConfig = field(default_factory=SearchConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    profiles: ProfilesConfig = field(default_factory=ProfilesConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "search": {
                "context_lines": self.search.context_lines,
                "exclusive_levels": self.search.exclusive_levels
            },
            "display": {
                "symbols": self.display.symbols,
                "format": self.display.format
            },
            "profiles": {
                "builtin": self.profiles.builtin,
                "paths": list(self.profiles.paths)
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        search_data = data.get("search") or {}
        display_data = data.get("display") or {}
        profiles_data = data.get("profiles") or {}

        return cls(
            search=SearchConfig(
                context_lines=_as_int(search_data.get("context_lines", 0), "search.context_lines"),
                exclusive_levels=_as_bool(search_data.get("exclusive_levels", False))
            ),
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto"),
                format=display_data.get("format", "auto")
            ),
            profiles=ProfilesConfig(
                builtin=_as_bool(profiles_data.get("builtin", True)),
                paths=[str(p) for p in profiles_data.get("paths") or []]
            )
        )

    def validate(self) -> Optional[str]:
        return self.search.validate() or self.display.validate()


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment variables
      2. Project config (.navi/config.yaml)
      3. User config (~/.navi/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".navi"
    PROJECT_CONFIG_DIR = ".navi"
    CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_DIR / self.CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        # Start with defaults
        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data = self._merge(config_data, self._read(self.project_config_path))

        # Layer 3: Environment overrides
        if os.environ.get("NAVI_CONTEXT_LINES"):
            config_data.setdefault("search", {})["context_lines"] = os.environ["NAVI_CONTEXT_LINES"]
        if os.environ.get("NAVI_PROFILE_PATH"):
            extra = [p for p in os.environ["NAVI_PROFILE_PATH"].split(os.pathsep) if p]
            profiles = config_data.setdefault("profiles", {})
            profiles["paths"] = list(profiles.get("paths") or []) + extra

        try:
            config = Config.from_dict(config_data)
        except ValueError as e:
            logger.warning("Ignoring invalid configuration: %s", e)
            config = Config()

        error = config.validate()
        if error:
            logger.warning("Ignoring invalid configuration: %s", error)
            config = Config()

        self._config = config
        return self._config

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.USER_CONFIG_DIR.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "search.context_lines")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'search.context_lines')"

        section, setting = parts

        if section == "search":
            if setting == "context_lines":
                try:
                    config.search.context_lines = int(value)
                except ValueError:
                    return f"context_lines must be an integer, got '{value}'"
            elif setting == "exclusive_levels":
                config.search.exclusive_levels = _as_bool(value)
            else:
                return f"Unknown search setting: {setting}. Valid: context_lines, exclusive_levels"
            error = config.search.validate()
            if error:
                return error

        elif section == "display":
            if setting == "symbols":
                config.display.symbols = value
            elif setting == "format":
                config.display.format = value
            else:
                return f"Unknown display setting: {setting}. Valid: symbols, format"
            error = config.display.validate()
            if error:
                return error

        elif section == "profiles":
            if setting == "builtin":
                config.profiles.builtin = _as_bool(value)
            elif setting == "paths":
                config.profiles.paths = [p for p in value.split(os.pathsep) if p]
            else:
                return f"Unknown profiles setting: {setting}. Valid: builtin, paths"
        else:
            return f"Unknown section: {section}. Valid: search, display, profiles"

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts

        if section == "search":
            if setting == "context_lines":
                return str(config.search.context_lines)
            elif setting == "exclusive_levels":
                return str(config.search.exclusive_levels).lower()
        elif section == "display":
            if setting == "symbols":
                return config.display.symbols
            elif setting == "format":
                return config.display.format
        elif section == "profiles":
            if setting == "builtin":
                return str(config.profiles.builtin).lower()
            elif setting == "paths":
                return os.pathsep.join(config.profiles.paths)

        return None

    def build_registry(self) -> PatternRegistry:
        """
        Build a pattern registry from built-ins and configured profile files.

        Relative profile paths are resolved against the project directory.

        Raises:
            ProfileConfigError: If a profile file is missing or malformed
        """
        config = self.load()
        registry = PatternRegistry()
        if config.profiles.builtin:
            register_builtins(registry)
        for entry in config.profiles.paths:
            path = Path(entry).expanduser()
            if not path.is_absolute():
                path = self.project_dir / path
            load_profile_file(path, registry)
        return registry

    def _read(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring malformed config %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: top level must be a mapping", path)
            return {}
        return data

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        symbols = get_symbols(config.display.symbols)

        paths = config.profiles.paths or ["(none)"]
        lines = [
            "Configuration:",
            "",
            "Search:",
            f"  Context lines: {config.search.context_lines}",
            f"  Exclusive levels: {config.search.exclusive_levels}",
            "",
            "Display:",
            f"  Symbols: {config.display.symbols}",
            f"  Format: {config.display.format}",
            "",
            "Profiles:",
            f"  Built-in: {symbols.check_pass if config.profiles.builtin else symbols.check_fail}",
        ]
        lines.extend(f"  {symbols.bullet} {p}" for p in paths)
        lines.extend([
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ])

        return "\n".join(lines)


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('true', '1', 'yes', 'on')


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
