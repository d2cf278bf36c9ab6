"""
Configuration management for AFLFleet.
"""

import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional

AFL_CORPUS = "/tmp/afl_input"
AFL_OUTPUT = "/tmp/afl_output"


@dataclass
class Config:
    """
    Main configuration class for AFLFleet.

    Configuration can be loaded from:
    1. Default values
    2. Config file (~/.aflfleet/config.json)
    3. Environment variables (AFLFLEET_*)
    4. Command line arguments
    """

    # Campaign defaults
    input_dir: str = AFL_CORPUS
    output_dir: str = AFL_OUTPUT
    runners: int = 1
    dictionary: Optional[str] = None
    seed: Optional[int] = None

    # Tool paths
    afl_path: Optional[str] = None

    # General settings
    verbose: int = 0
    tmux_session: str = "aflfleet"

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """
        Load configuration from file and environment.

        Args:
            config_path: Optional path to config file

        Returns:
            Loaded Config instance
        """
        config = cls()

        default_path = cls.default_path()
        if config_path:
            config_file = Path(config_path)
        elif default_path.exists():
            config_file = default_path
        else:
            config_file = None

        if config_file and config_file.exists():
            with open(config_file) as f:
                config = cls._from_dict(json.load(f))

        config._load_from_env()

        return config

    @staticmethod
    def default_path() -> Path:
        return Path.home() / ".aflfleet" / "config.json"

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known = set(cls.__dataclass_fields__)
        return cls(**{k: v for k, v in data.items() if k in known})

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        env_mapping = {
            "AFLFLEET_INPUT_DIR": "input_dir",
            "AFLFLEET_OUTPUT_DIR": "output_dir",
            "AFLFLEET_RUNNERS": ("runners", int),
            "AFLFLEET_AFL_PATH": "afl_path",
            "AFLFLEET_DICTIONARY": "dictionary",
            "AFLFLEET_SEED": ("seed", int),
            "AFLFLEET_VERBOSE": ("verbose", int),
            "AFLFLEET_TMUX_SESSION": "tmux_session",
        }

        for env_var, attr in env_mapping.items():
            value = os.environ.get(env_var)
            if value:
                if isinstance(attr, tuple):
                    attr_name, converter = attr
                    setattr(self, attr_name, converter(value))
                else:
                    setattr(self, attr, value)

    def save(self, config_path: Optional[str] = None) -> None:
        """
        Save configuration to file.

        Args:
            config_path: Optional path for config file
        """
        path = Path(config_path) if config_path else self.default_path()
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.load()
    return _config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
