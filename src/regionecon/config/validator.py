"""Centralized configuration validation for regionecon."""

from __future__ import annotations

import warnings
from typing import Any


class ConfigurationError(ValueError):
    """A parameter set that can never produce a valid economy."""


PHASE_NAMES = ("Expansion", "Peak", "Contraction", "Trough")


class ConfigValidator:
    """
    Centralized validation for simulation configuration.

    All validation happens once at Simulation.init() to ensure:
    - Type correctness
    - Valid parameter ranges
    - Relationship constraints between parameters
    - Clear error messages with actionable feedback
    """

    # Valid log levels for logging configuration
    VALID_LOG_LEVELS = {"DEEP_DEBUG", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

    # Tolerance for the labor + capital elasticity ≈ 1.0 convention
    ELASTICITY_SUM_TOLERANCE = 0.05

    @staticmethod
    def validate_config(cfg: dict[str, Any]) -> None:
        """
        Validate all configuration parameters.

        Parameters
        ----------
        cfg : dict
            Configuration dictionary to validate.

        Raises
        ------
        ConfigurationError
            If any validation check fails.
        """
        # Type checking
        ConfigValidator._validate_types(cfg)

        # Range validation
        ConfigValidator._validate_ranges(cfg)

        # Tables (elasticities, cycle coefficients)
        ConfigValidator._validate_tables(cfg)

        # Relationship constraints
        ConfigValidator._validate_relationships(cfg)

        # Logging configuration
        if "logging" in cfg:
            ConfigValidator._validate_logging(cfg["logging"])

    @staticmethod
    def _validate_types(cfg: dict[str, Any]) -> None:
        """
        Ensure correct types for configuration parameters.

        Raises
        ------
        ConfigurationError
            If any parameter has incorrect type.
        """
        int_params = ["cycle_length", "n_ticks", "seed"]

        float_params = [
            "productivity_factor",
            "labor_elasticity",
            "capital_elasticity",
            "efficiency_modifier",
            "decay_rate",
            "maintenance_cost_factor",
            "max_infrastructure_level",
            "infrastructure_growth_rate",
            "infrastructure_growth_diminishing",
            "base_consumption_rate",
            "wealth_consumption_exponent",
            "unmet_demand_unrest_factor",
            "initial_price",
            "volatility_factor",
            "price_shock_volatility",
        ]

        bool_params = [
            "income_adjusted_demand",
            "shared_market",
            "enable_economic_cycles",
            "apply_infrastructure_upkeep",
        ]

        # bool is a subclass of int; reject it for numeric parameters
        for key in int_params:
            if key not in cfg:
                continue
            val = cfg[key]
            if val is not None and (isinstance(val, bool) or not isinstance(val, int)):
                raise ConfigurationError(
                    f"Config parameter '{key}' must be int, got {type(val).__name__}"
                )

        for key in float_params:
            if key not in cfg:
                continue
            val = cfg[key]
            if isinstance(val, bool) or not isinstance(val, (int, float)):
                raise ConfigurationError(
                    f"Config parameter '{key}' must be float, got {type(val).__name__}"
                )

        for key in bool_params:
            if key in cfg and not isinstance(cfg[key], bool):
                raise ConfigurationError(
                    f"Config parameter '{key}' must be bool, "
                    f"got {type(cfg[key]).__name__}"
                )

        if "resource_types" in cfg:
            val = cfg["resource_types"]
            if isinstance(val, str) or not all(isinstance(r, str) for r in val):
                raise ConfigurationError(
                    "Config parameter 'resource_types' must be a list of str"
                )

    @staticmethod
    def _validate_ranges(cfg: dict[str, Any]) -> None:
        """
        Ensure parameters are in valid ranges.

        Raises
        ------
        ConfigurationError
            If any parameter is out of valid range.
        """
        # (min_val, max_val, min_exclusive); None means unbounded
        constraints = {
            "productivity_factor": (0.0, None, True),
            "labor_elasticity": (0.0, 1.0, True),
            "capital_elasticity": (0.0, 1.0, True),
            "efficiency_modifier": (0.0, None, True),
            "decay_rate": (0.0, 1.0, False),
            "maintenance_cost_factor": (0.0, None, True),
            "max_infrastructure_level": (0.0, None, True),
            "infrastructure_growth_rate": (0.0, None, False),
            "infrastructure_growth_diminishing": (0.0, None, False),
            "base_consumption_rate": (0.0, 1.0, False),
            "wealth_consumption_exponent": (0.0, 1.0, False),
            "unmet_demand_unrest_factor": (0.0, None, True),
            "initial_price": (0.0, None, False),
            "volatility_factor": (0.0, None, True),
            "price_shock_volatility": (0.0, 1.0, False),
            "cycle_length": (1, None, False),
            "n_ticks": (0, None, False),
        }

        for key, (min_val, max_val, exclusive) in constraints.items():
            if key not in cfg:
                continue

            val = cfg[key]

            # Skip None values for optional parameters
            if val is None:
                continue

            # Check minimum
            if exclusive and val <= min_val:
                raise ConfigurationError(
                    f"Config parameter '{key}' must be > {min_val}, got {val}"
                )
            if val < min_val:
                raise ConfigurationError(
                    f"Config parameter '{key}' must be >= {min_val}, got {val}"
                )

            # Check maximum
            if max_val is not None and val > max_val:
                raise ConfigurationError(
                    f"Config parameter '{key}' must be <= {max_val}, got {val}"
                )

    @staticmethod
    def _validate_tables(cfg: dict[str, Any]) -> None:
        """
        Validate the per-resource and per-phase coefficient tables.

        Raises
        ------
        ConfigurationError
            If a table is malformed or holds a non-positive coefficient.
        """
        for key in ("resource_elasticities", "income_elasticities"):
            if key not in cfg:
                continue
            table = cfg[key]
            if not isinstance(table, dict):
                raise ConfigurationError(
                    f"Config parameter '{key}' must be dict, got {type(table).__name__}"
                )
            for resource, value in table.items():
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ConfigurationError(
                        f"{key}['{resource}'] must be float, "
                        f"got {type(value).__name__}"
                    )
                if value <= 0:
                    raise ConfigurationError(
                        f"{key}['{resource}'] must be > 0, got {value}"
                    )

        if "phase_coefficients" not in cfg:
            return
        table = cfg["phase_coefficients"]
        if not isinstance(table, dict):
            raise ConfigurationError(
                "Config parameter 'phase_coefficients' must be dict, "
                f"got {type(table).__name__}"
            )
        for phase_name, effects in table.items():
            if phase_name not in PHASE_NAMES:
                raise ConfigurationError(
                    f"Unknown cycle phase '{phase_name}'. "
                    f"Must be one of {list(PHASE_NAMES)}"
                )
            if not isinstance(effects, dict):
                raise ConfigurationError(
                    f"Coefficients for phase '{phase_name}' must be dict, "
                    f"got {type(effects).__name__}"
                )
            for effect_name, value in effects.items():
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ConfigurationError(
                        f"Coefficient {phase_name}.{effect_name} must be float, "
                        f"got {type(value).__name__}"
                    )
                if value < 0:
                    raise ConfigurationError(
                        f"Coefficient {phase_name}.{effect_name} must be >= 0, "
                        f"got {value}"
                    )

    @staticmethod
    def _validate_relationships(cfg: dict[str, Any]) -> None:
        """
        Validate cross-parameter constraints.

        Only warns: these settings are unusual, not invalid.
        """
        alpha = cfg.get("labor_elasticity")
        beta = cfg.get("capital_elasticity")
        if alpha is not None and beta is not None:
            total = alpha + beta
            if abs(total - 1.0) > ConfigValidator.ELASTICITY_SUM_TOLERANCE:
                warnings.warn(
                    f"labor_elasticity + capital_elasticity = {total:.3f}. "
                    "Values far from 1.0 give increasing or decreasing "
                    "returns to scale.",
                    UserWarning,
                    stacklevel=3,
                )

        resource_types = cfg.get("resource_types")
        if resource_types is not None and len(resource_types) == 0:
            warnings.warn(
                "No resource_types configured; prices will not be tracked.",
                UserWarning,
                stacklevel=3,
            )

    @staticmethod
    def _validate_logging(log_config: dict[str, Any]) -> None:
        """
        Validate logging configuration.

        Parameters
        ----------
        log_config : dict
            Logging configuration dictionary with keys:
            - default_level: str (e.g., 'INFO', 'DEBUG')
            - modules: dict[str, str] (per-module overrides)

        Raises
        ------
        ConfigurationError
            If logging configuration is invalid.
        """
        if not isinstance(log_config, dict):
            raise ConfigurationError(
                f"Logging config must be dict, got {type(log_config).__name__}"
            )

        if "default_level" in log_config:
            level = log_config["default_level"]
            if not isinstance(level, str):
                raise ConfigurationError(
                    f"Logging default_level must be str, got {type(level).__name__}"
                )

            if level.upper() not in ConfigValidator.VALID_LOG_LEVELS:
                raise ConfigurationError(
                    f"Invalid log level '{level}'. "
                    f"Must be one of {ConfigValidator.VALID_LOG_LEVELS}"
                )

        if "modules" in log_config:
            modules = log_config["modules"]
            if not isinstance(modules, dict):
                raise ConfigurationError(
                    f"Logging modules must be dict, got {type(modules).__name__}"
                )

            for module_name, level in modules.items():
                if not isinstance(module_name, str):
                    raise ConfigurationError(
                        f"Module name must be str, got {type(module_name).__name__}"
                    )

                if not isinstance(level, str):
                    raise ConfigurationError(
                        f"Log level for module '{module_name}' must be str, "
                        f"got {type(level).__name__}"
                    )

                if level.upper() not in ConfigValidator.VALID_LOG_LEVELS:
                    raise ConfigurationError(
                        f"Invalid log level '{level}' for module '{module_name}'. "
                        f"Must be one of {ConfigValidator.VALID_LOG_LEVELS}"
                    )
