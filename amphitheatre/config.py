"""
Configuration management for amphitheatre tooling.

Loads $AMP_HOME/config.yaml (default ~/.config/amphitheatre/config.yaml).
An optional env_file is loaded into the process environment with
python-dotenv; AMP_LOG_LEVEL overrides the configured log level.
"""

import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from amphitheatre.errors import ConfigError
from amphitheatre.schemas.source import DEFAULT_PATH

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_amp_home() -> Path:
    """Directory holding config.yaml, overridable with AMP_HOME."""
    home = os.environ.get("AMP_HOME")
    if home:
        return Path(home).expanduser()
    return Path("~/.config/amphitheatre").expanduser()


@dataclass
class AmpConfig:
    """
    Local configuration.

    Attributes:
        default_path: Configuration file path assumed when a spec has none
        namespace: Namespace assigned to actors loaded without one
        log_level: Logging level name
        env_file: Optional dotenv file loaded into the environment
    """
    default_path: str = DEFAULT_PATH
    namespace: str = "default"
    log_level: str = "WARNING"
    env_file: Optional[str] = None

    def __post_init__(self):
        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"Invalid log_level: {self.log_level}")
        if not self.namespace:
            raise ConfigError("namespace must not be empty")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AmpConfig":
        known = {"default_path", "namespace", "log_level", "env_file"}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**data)


def load_config(config_path: Optional[Path] = None) -> AmpConfig:
    """
    Load configuration from YAML.

    Args:
        config_path: Path to config file. Defaults to $AMP_HOME/config.yaml

    Returns:
        AmpConfig instance

    Raises:
        FileNotFoundError: If the config file does not exist
        ConfigError: If the config is invalid
    """
    if config_path is None:
        config_path = get_amp_home() / "config.yaml"

    if not config_path.exists():
        raise FileNotFoundError(f"amphitheatre config.yaml not found at {config_path}")

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("Configuration file must contain a mapping")

    config = AmpConfig.from_dict(data)

    if config.env_file:
        env_path = Path(config.env_file).expanduser()
        if env_path.exists():
            load_dotenv(env_path)
        else:
            logger.warning(f"env_file not found: {env_path}")

    override = os.environ.get("AMP_LOG_LEVEL")
    if override:
        config.log_level = override.upper()
        if config.log_level not in LOG_LEVELS:
            raise ConfigError(f"Invalid AMP_LOG_LEVEL: {override}")

    return config
