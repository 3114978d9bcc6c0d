"""
Type aliases for regionecon.

Every calculator accepts either a Python scalar (one region) or a 1-D
NumPy array (many regions at once). The aliases below name those two
shapes.
"""

from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

# === Array Type Aliases (precise numpy types) ===

Float1D: TypeAlias = NDArray[np.float64]

# === Scalar-or-vector inputs ===

FloatLike: TypeAlias = float | Float1D
"""A single value or one value per region."""

__all__ = [
    "Float1D",
    "FloatLike",
]
