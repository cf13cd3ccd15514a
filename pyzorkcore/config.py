"""Configuration management for PyZorkCore.

Configuration is loaded from (in order of precedence):
1. Environment variables (PYZORKCORE_*)
2. User config file (~/.pyzorkcore/config.json)
3. Default values

Environment variables:
    PYZORKCORE_SEED - Seed for the game's random number generator
    PYZORKCORE_LOG_LEVEL - Logging level name (DEBUG, INFO, WARNING, ...)
    PYZORKCORE_STRICT_VOCABULARY - Report unknown verbs by name (true/false)
    PYZORKCORE_PLAYER_NAME - Name used in the opening greeting
    PYZORKCORE_LAMP_ENABLED - Run the lamp and candle timers (true/false)
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

# Default config directory
CONFIG_DIR = Path.home() / ".pyzorkcore"
CONFIG_FILE = CONFIG_DIR / "config.json"


@dataclass
class ParserConfig:
    """Parser configuration."""

    strict_vocabulary: bool = False


@dataclass
class ClockConfig:
    """Turn clock configuration."""

    light_timers: bool = True


@dataclass
class GameConfig:
    """Game configuration."""

    player_name: str = "Adventurer"
    seed: int | None = None
    log_level: str = "WARNING"


@dataclass
class Config:
    """Main configuration container."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    clock: ClockConfig = field(default_factory=ClockConfig)
    game: GameConfig = field(default_factory=GameConfig)

    def to_dict(self) -> dict:
        """Convert to dictionary for saving."""
        return {
            "parser": asdict(self.parser),
            "clock": asdict(self.clock),
            "game": asdict(self.game),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create from dictionary."""
        config = cls()
        if "parser" in data:
            config.parser = ParserConfig(**data["parser"])
        if "clock" in data:
            config.clock = ClockConfig(**data["clock"])
        if "game" in data:
            config.game = GameConfig(**data["game"])
        return config


def _get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.environ.get(key, "").lower()
    if value in ("true", "1", "yes", "on"):
        return True
    if value in ("false", "0", "no", "off"):
        return False
    return default


def _get_env_int(key: str, default: int | None) -> int | None:
    """Get integer from environment variable."""
    value = os.environ.get(key, "")
    try:
        return int(value)
    except ValueError:
        return default


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from environment and/or file.

    Environment variables take precedence over file config.
    """
    config_file = config_file or CONFIG_FILE
    config = Config()

    # Try to load from file first
    if config_file.exists():
        try:
            with open(config_file) as f:
                data = json.load(f)
                config = Config.from_dict(data)
        except (json.JSONDecodeError, OSError, TypeError) as e:
            logger.warning(f"Ignoring unreadable config {config_file}: {e}")
            config = Config()

    # Override with environment variables
    if "PYZORKCORE_SEED" in os.environ:
        config.game.seed = _get_env_int("PYZORKCORE_SEED", config.game.seed)
    if "PYZORKCORE_LOG_LEVEL" in os.environ:
        config.game.log_level = os.environ["PYZORKCORE_LOG_LEVEL"].upper()
    if "PYZORKCORE_PLAYER_NAME" in os.environ:
        config.game.player_name = os.environ["PYZORKCORE_PLAYER_NAME"]
    if "PYZORKCORE_STRICT_VOCABULARY" in os.environ:
        config.parser.strict_vocabulary = _get_env_bool("PYZORKCORE_STRICT_VOCABULARY")
    if "PYZORKCORE_LAMP_ENABLED" in os.environ:
        config.clock.light_timers = _get_env_bool("PYZORKCORE_LAMP_ENABLED", True)

    return config


def save_config(config: Config, config_file: Path | None = None) -> None:
    """Save configuration to file."""
    config_file = config_file or CONFIG_FILE
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        json.dump(config.to_dict(), f, indent=2)


def get_example_config() -> str:
    """Get example configuration file content."""
    return '''{
  "parser": {
    "strict_vocabulary": false
  },
  "clock": {
    "light_timers": true
  },
  "game": {
    "player_name": "YourName",
    "seed": null,
    "log_level": "WARNING"
  }
}'''


# Global config instance (lazy loaded)
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """Reload configuration from sources."""
    global _config
    _config = load_config()
    return _config
