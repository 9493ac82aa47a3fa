"""Contract validation utilities for Sim(2) geometry.

This module provides validation functions to enforce contracts at module boundaries.
Violations are caller programming errors and are raised immediately, never coerced.
"""
import numpy as np

from sim2_geometry.constants import SIM2_DIM


class ContractViolation(ValueError):
    """Raised when a data contract is violated."""
    pass


def validate_tangent(xi, name: str = "xi") -> np.ndarray:
    """Validate a 4D tangent vector [tx, ty, theta, lambda].

    Args:
        xi: Array-like tangent vector
        name: Name for error messages

    Returns:
        The tangent vector as a float array of shape (4,)

    Raises:
        ContractViolation: If xi is not a finite 4-vector
    """
    xi = np.asarray(xi, dtype=float)
    if xi.shape != (SIM2_DIM,):
        raise ContractViolation(f"{name}: Expected shape ({SIM2_DIM},), got {xi.shape}")
    if not np.all(np.isfinite(xi)):
        raise ContractViolation(f"{name}: Contains inf/nan: {xi}")
    return xi


def validate_matrix3(T, name: str = "T") -> np.ndarray:
    """Validate a 3x3 homogeneous Sim(2) matrix.

    The bottom-right entry holds 1/scale and must be strictly positive.

    Raises:
        ContractViolation: If T is not a finite 3x3 matrix with positive T[2, 2]
    """
    T = np.asarray(T, dtype=float)
    if T.shape != (3, 3):
        raise ContractViolation(f"{name}: Expected 3x3 matrix, got shape {T.shape}")
    if not np.all(np.isfinite(T)):
        raise ContractViolation(f"{name}: Contains inf/nan")
    if T[2, 2] <= 0.0:
        raise ContractViolation(f"{name}: Inverse scale T[2, 2] must be positive, got {T[2, 2]}")
    return T


def validate_rotation2(R, name: str = "rotation") -> np.ndarray:
    """Validate a 2x2 rotation matrix (orthonormal, det +1)."""
    R = np.asarray(R, dtype=float)
    if R.shape != (2, 2):
        raise ContractViolation(f"{name}: Expected 2x2 matrix, got shape {R.shape}")
    if not np.allclose(R @ R.T, np.eye(2), atol=1e-6) or np.linalg.det(R) <= 0.0:
        raise ContractViolation(f"{name}: Not a rotation matrix: {R.tolist()}")
    return R


def validate_scale(scale, name: str = "scale") -> float:
    """Validate a similarity scale factor.

    Raises:
        ContractViolation: If scale is not finite and strictly positive
    """
    scale = float(scale)
    if not np.isfinite(scale):
        raise ContractViolation(f"{name}: Not finite: {scale}")
    if scale <= 0.0:
        raise ContractViolation(f"{name}: Must be strictly positive, got {scale}")
    return scale


def validate_point2(p, name: str = "point") -> np.ndarray:
    """Validate a single 2D point of shape (2,)."""
    p = np.asarray(p, dtype=float)
    if p.shape != (2,):
        raise ContractViolation(f"{name}: Expected shape (2,), got {p.shape}")
    if not np.all(np.isfinite(p)):
        raise ContractViolation(f"{name}: Contains inf/nan: {p}")
    return p


def validate_points(points, name: str = "points") -> np.ndarray:
    """Validate a single point (2,) or a batch of points (N, 2)."""
    points = np.asarray(points, dtype=float)
    if points.ndim == 1:
        return validate_point2(points, name)
    if points.ndim != 2 or points.shape[1] != 2:
        raise ContractViolation(f"{name}: Expected (2,) or (N, 2) array, got shape {points.shape}")
    if not np.all(np.isfinite(points)):
        raise ContractViolation(f"{name}: Contains inf/nan")
    return points
