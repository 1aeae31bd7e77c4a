"""
Configuration management for gardennav.

Provides a hierarchical configuration system with sensible defaults.
Supports both global (~/.config/gardennav/config.toml) and local
(gardennav.toml) configurations.
"""
import os
import logging
import tomli
import tomli_w
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field, asdict

from gardennav.errors import ConfigError

ENV_PREFIX = "GARDENNAV_"


@dataclass
class NavConfig:
    """
    Navigation layer configuration with sensible defaults.

    Configuration hierarchy (highest to lowest priority):
    1. Keyword overrides passed to init_config()
    2. Environment variables (GARDENNAV_*)
    3. Local config file (./gardennav.toml or ./.gardennavrc)
    4. User config file (~/.config/gardennav/config.toml)
    5. System defaults
    """

    # Drawing surface
    width: int = field(default=220)
    height: int = field(default=220)
    current_radius: float = field(default=14.0)
    node_radius: float = field(default=6.0)

    # Labels
    label_max_width: int = field(default=32)
    current_label_offset: int = field(default=28)
    label_offset: int = field(default=18)

    # Forces
    centering_strength: float = field(default=0.1)
    charge_strength: float = field(default=-150.0)
    charge_distance_min: float = field(default=1.0)
    link_distance: float = field(default=100.0)
    collision_strength: float = field(default=1.0)

    # Simulation temperature
    alpha_start: float = field(default=1.0)
    alpha_min: float = field(default=0.001)
    alpha_decay: float = field(default=1 - 0.001 ** (1 / 300))
    velocity_decay: float = field(default=0.4)
    reheat_alpha: float = field(default=0.3)
    frame_interval: float = field(default=1 / 60)

    # Graph scope
    local_graph_depth: int = field(default=2)

    # Page containers
    article_selector: str = field(default="article")
    outline_selector: str = field(default="#toc")
    graph_selector: str = field(default="#graph")
    hide_class: str = field(default="hide")

    log_level: str = field(default="WARNING")

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> "NavConfig":
        """
        Load configuration from files and environment.

        Args:
            config_file: Specific config file to load (overrides search)

        Returns:
            Merged configuration object
        """
        config = cls()

        user_config_path = Path.home() / ".config" / "gardennav" / "config.toml"
        if user_config_path.exists():
            config._merge(cls._load_toml(user_config_path))

        local_paths = [
            Path.cwd() / "gardennav.toml",
            Path.cwd() / ".gardennavrc",
        ]

        for path in local_paths:
            if path.exists():
                config._merge(cls._load_toml(path))
                break

        if config_file and config_file.exists():
            config._merge(cls._load_toml(config_file))

        config._apply_env_vars()

        return config

    @staticmethod
    def _load_toml(path: Path) -> Dict[str, Any]:
        """Load TOML configuration file."""
        try:
            with open(path, "rb") as f:
                return tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e

    def _merge(self, data: Dict[str, Any]):
        """Merge configuration data into this instance."""
        for key, value in data.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def _apply_env_vars(self):
        """Apply environment variables with GARDENNAV_ prefix."""
        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue
            config_key = key[len(ENV_PREFIX):].lower()
            if not hasattr(self, config_key):
                continue
            current_value = getattr(self, config_key)
            try:
                # bool before int: bool is an int subclass
                if isinstance(current_value, bool):
                    setattr(self, config_key, value.lower() in ("true", "1", "yes"))
                elif isinstance(current_value, int):
                    setattr(self, config_key, int(value))
                elif isinstance(current_value, float):
                    setattr(self, config_key, float(value))
                else:
                    setattr(self, config_key, value)
            except ValueError as e:
                raise ConfigError(f"Invalid value for {key}: {value!r}") from e

    def save(self, path: Optional[Path] = None):
        """
        Save current configuration to TOML file.

        Args:
            path: Path to save to (defaults to user config)
        """
        if path is None:
            path = Path.home() / ".config" / "gardennav" / "config.toml"

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "wb") as f:
            tomli_w.dump(asdict(self), f)

    @property
    def center(self):
        """Canvas centre as an (x, y) tuple."""
        return self.width / 2, self.height / 2


# Global configuration instance
_config: Optional[NavConfig] = None


def get_config(reload: bool = False, config_file: Optional[Path] = None) -> NavConfig:
    """
    Get the global configuration instance.

    Args:
        reload: Force reload configuration from files
        config_file: Specific config file to load

    Returns:
        Global configuration instance
    """
    global _config
    if _config is None or reload:
        _config = NavConfig.load(config_file)
    return _config


def init_config(**kwargs) -> NavConfig:
    """
    Initialize configuration with explicit overrides.

    Args:
        **kwargs: Configuration overrides; None values are ignored

    Returns:
        Configured instance
    """
    config = get_config()

    for key, value in kwargs.items():
        if hasattr(config, key) and value is not None:
            setattr(config, key, value)

    return config


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Apply the configured log level to the package logger."""
    level = level or get_config().log_level
    package_logger = logging.getLogger("gardennav")
    package_logger.setLevel(level.upper())
    return package_logger
