"""Configuration module for regionecon."""

from regionecon.config.schema import Config
from regionecon.config.validator import ConfigurationError, ConfigValidator

__all__ = ["Config", "ConfigurationError", "ConfigValidator"]
