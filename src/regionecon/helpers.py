# src/regionecon/helpers.py
from __future__ import annotations

from typing import Any

import numpy as np
from numpy.random import Generator, default_rng

from regionecon.typing import Float1D, FloatLike


def as_float_array(value: FloatLike) -> Float1D:
    """Return *value* as a float64 array (0-d for scalars)."""
    return np.asarray(value, dtype=np.float64)


def unwrap(result: Float1D) -> FloatLike:
    """Hand scalars back as plain ``float``; leave real arrays untouched."""
    if np.ndim(result) == 0:
        return float(result)
    return result


def clip_nonneg(value: FloatLike) -> Float1D:
    """Clamp negatives to zero (callers' contract violations are silent)."""
    return np.maximum(as_float_array(value), 0.0)


def round_half_even(value: float) -> int:
    """Round to the nearest integer, ties to even (matches ``round``)."""
    return int(round(float(value)))


def make_generator(seed: int | Generator | None) -> Generator:
    """Accept a seed or an existing Generator."""
    if isinstance(seed, Generator):
        return seed
    return default_rng(seed)


def check_known_params(obj: Any, params: dict[str, Any]) -> None:
    """Raise if *params* holds a name that is not a dataclass field of *obj*."""
    from regionecon.config.validator import ConfigurationError

    unknown = sorted(set(params) - set(obj.__dataclass_fields__))
    if unknown:
        raise ConfigurationError(
            f"{type(obj).__name__} has no parameter(s) {unknown}. "
            f"Available: {sorted(obj.__dataclass_fields__)}"
        )


def update_params(obj: Any, params: dict[str, Any]) -> None:
    """
    Set *params* on a calculator and re-run its ``_validate``.

    If validation fails the previous values are restored before the
    ``ConfigurationError`` propagates.
    """
    from regionecon.config.validator import ConfigurationError

    check_known_params(obj, params)
    previous = {name: getattr(obj, name) for name in params}
    for name, value in params.items():
        setattr(obj, name, value)
    try:
        obj._validate()
    except ConfigurationError:
        for name, value in previous.items():
            setattr(obj, name, value)
        raise
