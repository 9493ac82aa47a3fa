"""
Helpers over plain value maps {key: value}.

Values are Sim2 transforms, 2D points (numpy arrays of shape (2,)) or anything
else; helpers only touch the kinds they understand and skip the rest.
Nothing here mutates its input; perturbation and frame changes return new maps.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional, Set

import numpy as np

from sim2_geometry import constants
from sim2_geometry.common.validation import ContractViolation
from sim2_geometry.config import PerturbationConfig, ToleranceConfig
from sim2_geometry.geometry.manifold import ManifoldValue
from sim2_geometry.geometry.sim2 import Sim2

logger = logging.getLogger(__name__)

_INDEX_MASK = (1 << constants.SYMBOL_INDEX_BITS) - 1


# =============================================================================
# Keys
# =============================================================================


def symbol(char: str, index: int) -> int:
    """Pack a character and an index into one integer key."""
    if len(char) != 1:
        raise ContractViolation(f"symbol: Expected a single character, got {char!r}")
    index = int(index)
    if index < 0 or index > _INDEX_MASK:
        raise ContractViolation(f"symbol: Index out of range: {index}")
    return (ord(char) << constants.SYMBOL_INDEX_BITS) | index


def symbol_char(key: int) -> str:
    return chr(key >> constants.SYMBOL_INDEX_BITS)


def symbol_index(key: int) -> int:
    return key & _INDEX_MASK


def create_key_list(indices: Iterable[int], char: Optional[str] = None) -> List[int]:
    """Keys from indices, optionally packed with a symbol character."""
    if char is None:
        return [int(i) for i in indices]
    return [symbol(char[0], i) for i in indices]


def create_key_set(indices: Iterable[int], char: Optional[str] = None) -> Set[int]:
    return set(create_key_list(indices, char))


# =============================================================================
# Extraction
# =============================================================================


def _is_point2(value: Any) -> bool:
    return isinstance(value, np.ndarray) and value.shape == (2,)


def extract_sim2(values: Mapping[Hashable, Any]) -> np.ndarray:
    """All Sim2 values as rows [x, y, theta, s], in map order."""
    rows = [value.vector() for value in values.values() if isinstance(value, Sim2)]
    if not rows:
        return np.zeros((0, constants.SIM2_DIM), dtype=float)
    return np.vstack(rows)


def extract_point2(values: Mapping[Hashable, Any]) -> np.ndarray:
    """All 2D point values as rows [x, y], in map order."""
    rows = [np.asarray(value, dtype=float) for value in values.values() if _is_point2(value)]
    if not rows:
        return np.zeros((0, 2), dtype=float)
    return np.vstack(rows)


# =============================================================================
# Perturbation
# =============================================================================


def perturb_sim2(
    values: Mapping[Hashable, Any],
    sigma_t: float,
    sigma_r: float,
    sigma_s: float,
    seed: Optional[int] = None,
    config: Optional[PerturbationConfig] = None,
) -> Dict[Hashable, Any]:
    """
    Retract every Sim2 value by a sample of N(0, diag(sigma_t, sigma_t, sigma_r, sigma_s)^2).

    Args:
        seed: Sampler seed; falls back to config.seed
    """
    if seed is None:
        seed = (config or PerturbationConfig()).seed
    rng = np.random.default_rng(seed)
    sigmas = np.array([sigma_t, sigma_t, sigma_r, sigma_s], dtype=float)

    result: Dict[Hashable, Any] = {}
    for key, value in values.items():
        if isinstance(value, Sim2):
            result[key] = value.retract(rng.normal(0.0, 1.0, constants.SIM2_DIM) * sigmas)
        else:
            result[key] = value
    return result


def perturb_point2(
    values: Mapping[Hashable, Any],
    sigma: float,
    seed: Optional[int] = None,
    config: Optional[PerturbationConfig] = None,
) -> Dict[Hashable, Any]:
    """Add isotropic Gaussian noise to every 2D point value."""
    if seed is None:
        seed = (config or PerturbationConfig()).seed
    rng = np.random.default_rng(seed)

    result: Dict[Hashable, Any] = {}
    for key, value in values.items():
        if _is_point2(value):
            result[key] = value + sigma * rng.normal(0.0, 1.0, 2)
        else:
            result[key] = value
    return result


# =============================================================================
# Frames
# =============================================================================


def local_to_world(
    local: Mapping[Hashable, Any],
    base: Sim2,
    keys: Optional[Iterable[Hashable]] = None,
) -> Dict[Hashable, Any]:
    """
    Express local values in the world frame of base.

    Sim2 values are composed with base, 2D points are mapped through
    base.transform_from; other values and keys missing from local are skipped.

    Args:
        keys: Keys to convert (defaults to all keys of local)
    """
    keys = list(local.keys()) if keys is None else list(keys)

    world: Dict[Hashable, Any] = {}
    for key in keys:
        if key not in local:
            logger.debug("local_to_world: key %r not in local values, skipping", key)
            continue
        value = local[key]
        if isinstance(value, Sim2):
            world[key] = base.compose(value)
        elif _is_point2(value):
            world[key] = base.transform_from(value)
        else:
            logger.debug("local_to_world: skipping %r of type %s", key, type(value).__name__)
    return world


# =============================================================================
# Comparison
# =============================================================================


def values_equal(
    a: Mapping[Hashable, Any],
    b: Mapping[Hashable, Any],
    tol: Optional[float] = None,
    config: Optional[ToleranceConfig] = None,
) -> bool:
    """
    Same keys and pairwise-equal values within tol.

    Manifold values compare through equals(); arrays through max abs difference.
    """
    if tol is None:
        tol = (config or ToleranceConfig()).equals_tolerance
    if set(a.keys()) != set(b.keys()):
        return False

    for key, value in a.items():
        other = b[key]
        if isinstance(value, ManifoldValue):
            if not value.equals(other, tol):
                return False
        elif isinstance(value, np.ndarray):
            other = np.asarray(other)
            if other.shape != value.shape or np.max(np.abs(value - other), initial=0.0) > tol:
                return False
        elif value != other:
            return False
    return True
