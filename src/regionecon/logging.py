"""
Custom logging configuration for regionecon.

Extends Python's standard logging with a custom DEEP_DEBUG level (5)
for very verbose output (intermediate values inside a tick). Provides the
RegionLogger class and a ``getLogger`` factory.

Log Levels
----------
- CRITICAL (50): Critical errors
- ERROR (40): Errors
- WARNING (30): Warnings (e.g. elasticity sums far from 1.0)
- INFO (20): Per-tick summaries (default)
- DEBUG (10): Per-region results, cycle phase transitions
- DEEP_DEBUG (5): Every intermediate value of the per-region pass

Examples
--------
Use a module logger:

>>> from regionecon import logging
>>> log = logging.getLogger("regionecon.tick")
>>> log.info("Tick complete")
>>> log.deep("raw output=%.3f", 22.36)

Configure levels per module through the simulation config:

>>> import regionecon as rc
>>> sim = rc.Simulation.init(
...     logging={"default_level": "INFO", "modules": {"tick": "DEBUG"}}
... )

See Also
--------
regionecon.config.validator.ConfigValidator : Logging section validation
"""

import logging
from typing import Any

(CRITICAL, ERROR, WARNING, INFO, DEBUG) = (
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
)
DEEP_DEBUG = 5
logging.addLevelName(DEEP_DEBUG, "DEEP")


class RegionLogger(logging.Logger):
    """
    Custom logger with DEEP_DEBUG level support.

    Examples
    --------
    >>> logger = RegionLogger("test")
    >>> logger.setLevel(5)  # DEEP_DEBUG
    >>> logger.deep("Very verbose message")
    """

    def deep(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """
        Log message at DEEP_DEBUG level (5).

        Parameters
        ----------
        msg : str
            Message format string.
        *args : Any
            Arguments for message formatting.
        **kwargs : Any
            Additional logging kwargs.
        """
        if self.isEnabledFor(DEEP_DEBUG):
            self._log(DEEP_DEBUG, msg, args, **kwargs)


# Make the logging module hand out our subclass from now on
logging.setLoggerClass(RegionLogger)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)


def getLogger(name: str | None = None) -> RegionLogger:
    """
    Get a RegionLogger instance.

    Parameters
    ----------
    name : str, optional
        Logger name. If None, returns root logger.

    Returns
    -------
    RegionLogger
        Logger instance with deep() method.
    """
    return logging.getLogger(name)  # type: ignore[return-value]


def level_from_name(name: str) -> int:
    """Translate a level name (``"DEEP_DEBUG"``, ``"info"``, ...) to its number."""
    upper = name.upper()
    if upper in ("DEEP_DEBUG", "DEEP"):
        return DEEP_DEBUG
    return int(getattr(logging, upper))


def configure(log_config: dict[str, Any]) -> None:
    """
    Apply a logging configuration section.

    Parameters
    ----------
    log_config : dict
        Mapping with keys:
        - default_level: str (level for the ``regionecon`` logger)
        - modules: dict[str, str] (per-module overrides, e.g. ``{"tick": "DEBUG"}``)
    """
    default_level = log_config.get("default_level", "INFO")
    logging.getLogger("regionecon").setLevel(level_from_name(default_level))

    for module_name, level in log_config.get("modules", {}).items():
        logger_name = f"regionecon.{module_name}"
        logging.getLogger(logger_name).setLevel(level_from_name(level))
