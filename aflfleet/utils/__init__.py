"""Utility modules for logging and configuration."""

from aflfleet.utils.logging import get_logger, setup_logging
from aflfleet.utils.config import Config, get_config, set_config

__all__ = ["get_logger", "setup_logging", "Config", "get_config", "set_config"]
