"""
Sim(2) geometry using Lie algebra (tangent space) representation.

State representation: (x, y, theta, s) where:
- (x, y): translation in R^2
- theta: rotation angle in (-pi, pi]
- s: positive uniform scale

Homogeneous matrix form:

    [ R(theta)  t  ]
    [ 0   0   1/s  ]

The bottom-right entry stores the INVERSE scale. With this convention matrix
multiplication gives the composition law

    (theta1, t1, s1) * (theta2, t2, s2) = (theta1 + theta2, t1 / s2 + R1 t2, s1 s2)

and points act through the projective normalization s (R p + t).

Tangent representation: (tx, ty, w, lambda) with hat operator

    [ 0  -w  tx     ]
    [ w   0  ty     ]
    [ 0   0  lambda ]

so that the exponential map has bottom-right entry e^lambda = 1/s.

Numerical Policy:
    EXPMAP_EPSILON = 1e-10 selects the first-order series of the V integral.
    Away from the origin the closed form is evaluated with expm1 and the
    half-angle identity 1 - cos(w) = 2 sin^2(w/2), which keeps absolute errors
    at machine precision for small (w, lambda).

References:
- Eade (2013): Lie Groups for Computer Vision (Sim(3) section)
- Sola et al. (2018): A micro Lie theory for state estimation
"""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from sim2_geometry.common.validation import (
    ContractViolation,
    validate_matrix3,
    validate_points,
    validate_scale,
    validate_tangent,
)
from sim2_geometry.constants import EXPMAP_EPSILON, SIM2_DIM


# =============================================================================
# SO(2) helpers
# =============================================================================

# Generator of so(2): rotation by +90 degrees
J2 = np.array([[0.0, -1.0], [1.0, 0.0]], dtype=float)


def wrap_angle(theta: float) -> float:
    """Wrap an angle to the canonical range (-pi, pi]. Angles already in range are returned unchanged."""
    if -math.pi < theta <= math.pi:
        return float(theta)
    wrapped = math.atan2(math.sin(theta), math.cos(theta))
    if wrapped <= -math.pi:
        return math.pi
    return wrapped


def rot2(theta: float) -> np.ndarray:
    """2x2 rotation matrix for angle theta (exp: so(2) -> SO(2))."""
    c = math.cos(theta)
    s = math.sin(theta)
    return np.array([[c, -s], [s, c]], dtype=float)


def rot2_angle(R: np.ndarray) -> float:
    """Angle of a 2x2 rotation matrix (log: SO(2) -> so(2))."""
    return math.atan2(R[1, 0], R[0, 0])


def skew2(w: float) -> np.ndarray:
    """Skew-symmetric 2x2 matrix w * J (hat operator of so(2))."""
    return w * J2


# =============================================================================
# sim(2) algebra
# =============================================================================


def sim2_wedge(vx: float, vy: float, w: float, scale: float) -> np.ndarray:
    """Hat operator: R^4 -> sim(2) as a 3x3 matrix."""
    return np.array([
        [0.0, -w, vx],
        [w, 0.0, vy],
        [0.0, 0.0, scale],
    ], dtype=float)


def sim2_vee(W: np.ndarray) -> np.ndarray:
    """Vee operator: sim(2) 3x3 matrix -> [vx, vy, w, scale]."""
    W = np.asarray(W, dtype=float)
    if W.shape != (3, 3):
        raise ContractViolation(f"Expected 3x3 matrix, got shape {W.shape}")
    return np.array([W[0, 2], W[1, 2], W[1, 0], W[2, 2]], dtype=float)


def sim2_v_coefficients(w: float, lam: float) -> Tuple[float, float]:
    """
    Coefficients (alpha, beta) of V = alpha I + beta J.

    V is the translation block of exp(hat(u, w, lambda)) divided by u:

        V = integral_0^1 e^{lambda (1 - tau)} R(w tau) d tau

    Identifying alpha I + beta J with the complex number alpha + i beta this is
    (e^{iw} - e^lambda) / (iw - lambda), whose real and imaginary parts are

        alpha = (w sin w + lambda (e^lambda - cos w)) / (w^2 + lambda^2)
        beta  = (w (e^lambda - cos w) - lambda sin w) / (w^2 + lambda^2)

    Reduces to (sin w / w, (1 - cos w) / w) for lambda = 0 and to
    ((e^lambda - 1) / lambda, 0) for w = 0.
    """
    rho2 = w * w + lam * lam
    if rho2 < EXPMAP_EPSILON * EXPMAP_EPSILON:
        # First-order Taylor expansion; error is O(w^2 + lambda^2)
        return 1.0 + 0.5 * lam, 0.5 * w

    sin_w = math.sin(w)
    # e^lambda - cos(w) without cancellation near the origin
    e_minus_c = math.expm1(lam) + 2.0 * math.sin(0.5 * w) ** 2

    alpha = (w * sin_w + lam * e_minus_c) / rho2
    beta = (w * e_minus_c - lam * sin_w) / rho2
    return alpha, beta


def sim2_v_matrix(w: float, lam: float) -> np.ndarray:
    """V(w, lambda) as a 2x2 matrix."""
    alpha, beta = sim2_v_coefficients(w, lam)
    return np.array([[alpha, -beta], [beta, alpha]], dtype=float)


def sim2_v_inverse(w: float, lam: float) -> np.ndarray:
    """
    Inverse of V(w, lambda).

    V is invertible unless lambda = 0 and w is a nonzero multiple of 2 pi,
    which cannot occur for wrapped angles.
    """
    alpha, beta = sim2_v_coefficients(w, lam)
    det = alpha * alpha + beta * beta
    return np.array([[alpha, beta], [-beta, alpha]], dtype=float) / det


# =============================================================================
# Sim(2) group operations (state vectors [x, y, theta, s])
# =============================================================================


def _validate_state(T: np.ndarray, name: str = "T") -> np.ndarray:
    T = np.asarray(T, dtype=float).reshape(-1)
    if len(T) != SIM2_DIM:
        raise ContractViolation(f"{name}: Expected 4D state [x, y, theta, s], got shape {T.shape}")
    validate_scale(T[3], f"{name}.scale")
    return T


def sim2_compose(T1: np.ndarray, T2: np.ndarray) -> np.ndarray:
    """
    Compose two Sim(2) transforms: T_result = T1 * T2.

    Args:
        T1, T2: Sim(2) states as 4D vectors (x, y, theta, s)

    Returns:
        4D state (R1 R2, t1 / s2 + R1 t2, s1 s2)
    """
    T1 = _validate_state(T1, "T1")
    T2 = _validate_state(T2, "T2")

    R1 = rot2(T1[2])
    t = T1[:2] / T2[3] + R1 @ T2[:2]
    theta = wrap_angle(T1[2] + T2[2])
    return np.array([t[0], t[1], theta, T1[3] * T2[3]], dtype=float)


def sim2_inverse(T: np.ndarray) -> np.ndarray:
    """
    Compute inverse of Sim(2) transform: T_inv such that T * T_inv = I.

    Returns:
        4D state (-theta, -s R^T t, 1 / s)
    """
    T = _validate_state(T)
    R_inv = rot2(T[2]).T
    t_inv = -T[3] * (R_inv @ T[:2])
    return np.array([t_inv[0], t_inv[1], wrap_angle(-T[2]), 1.0 / T[3]], dtype=float)


def sim2_relative(T_from: np.ndarray, T_to: np.ndarray) -> np.ndarray:
    """Relative transform: T_rel = T_from^{-1} * T_to."""
    return sim2_compose(sim2_inverse(T_from), T_to)


def sim2_apply(T: np.ndarray, p: np.ndarray) -> np.ndarray:
    """
    Apply Sim(2) transform to point(s): p_transformed = s (R p + t).

    Args:
        T: Sim(2) state as 4D vector
        p: 2D point (2,) or batch of points (N, 2)

    Returns:
        2D transformed point(s), same shape as input
    """
    T = _validate_state(T)
    p = validate_points(p)
    R = rot2(T[2])
    if p.ndim == 1:
        return T[3] * (R @ p + T[:2])
    return T[3] * ((R @ p.T).T + T[:2])


def sim2_apply_inverse(T: np.ndarray, q: np.ndarray) -> np.ndarray:
    """
    Apply the inverse action to point(s): p = R^T (q / s - t).

    Args:
        T: Sim(2) state as 4D vector
        q: 2D point (2,) or batch of points (N, 2)
    """
    T = _validate_state(T)
    q = validate_points(q, "q")
    R = rot2(T[2])
    if q.ndim == 1:
        return R.T @ (q / T[3] - T[:2])
    return (q / T[3] - T[:2]) @ R


def sim2_adjoint(T: np.ndarray) -> np.ndarray:
    """
    Compute adjoint representation of Sim(2) transform.

    Conjugation T * exp(hat(xi)) * T^{-1} = exp(hat(Ad_T xi)):

        Ad = [ s R   s (ty, -tx)^T   s (tx, ty)^T ]
             [ 0 0        1               0       ]
             [ 0 0        0               1       ]

    Adjoint is used for covariance transport:
        Cov(T * x) = Adjoint(T) * Cov(x) * Adjoint(T)^T

    Returns:
        4x4 adjoint matrix
    """
    T = _validate_state(T)
    x, y, theta, s = T
    Ad = np.eye(SIM2_DIM, dtype=float)
    Ad[:2, :2] = s * rot2(theta)
    Ad[:2, 2] = s * np.array([y, -x])
    Ad[:2, 3] = s * np.array([x, y])
    return Ad


def sim2_cov_compose(cov_a: np.ndarray, cov_b: np.ndarray, T: np.ndarray = None) -> np.ndarray:
    """
    Compose two covariances with optional Sim(2) transport.

    If T is provided:
        Result = cov_a + Ad(T) @ cov_b @ Ad(T).T
    Otherwise:
        Result = cov_a + cov_b
    """
    cov_a = np.asarray(cov_a, dtype=float)
    cov_b = np.asarray(cov_b, dtype=float)

    if cov_a.shape != (SIM2_DIM, SIM2_DIM):
        raise ContractViolation(f"Expected 4x4 covariance for cov_a, got shape {cov_a.shape}")
    if cov_b.shape != (SIM2_DIM, SIM2_DIM):
        raise ContractViolation(f"Expected 4x4 covariance for cov_b, got shape {cov_b.shape}")

    if T is None:
        return cov_a + cov_b

    Ad = sim2_adjoint(T)
    return cov_a + Ad @ cov_b @ Ad.T


def sim2_exp(xi: np.ndarray) -> np.ndarray:
    """
    Exponential map: sim(2) -> Sim(2).

    Closed form of the matrix exponential of sim2_wedge(*xi):
        R = R(w),  t = V(w, lambda) u,  1/s = e^lambda

    Args:
        xi: 4D tangent vector (tx, ty, w, lambda)

    Returns:
        4D Sim(2) state (x, y, theta, s)
    """
    xi = validate_tangent(xi)
    u = xi[:2]
    w = xi[2]
    lam = xi[3]
    t = sim2_v_matrix(w, lam) @ u
    return np.array([t[0], t[1], wrap_angle(w), math.exp(-lam)], dtype=float)


def sim2_log(T: np.ndarray) -> np.ndarray:
    """
    Logarithmic map: Sim(2) -> sim(2).

    Inverse of sim2_exp for rotation angles in (-pi, pi]:
        w = theta,  lambda = -log(s),  u = V(w, lambda)^{-1} t

    Returns:
        4D tangent vector (tx, ty, w, lambda)
    """
    T = _validate_state(T)
    w = wrap_angle(T[2])
    lam = -math.log(T[3])
    u = sim2_v_inverse(w, lam) @ T[:2]
    return np.array([u[0], u[1], w, lam], dtype=float)


def sim2_to_matrix(T: np.ndarray) -> np.ndarray:
    """4D state -> 3x3 homogeneous matrix with 1/s in the bottom-right entry."""
    T = _validate_state(T)
    M = np.zeros((3, 3), dtype=float)
    M[:2, :2] = rot2(T[2])
    M[:2, 2] = T[:2]
    M[2, 2] = 1.0 / T[3]
    return M


def sim2_from_matrix(M: np.ndarray) -> np.ndarray:
    """
    3x3 homogeneous matrix -> 4D state.

    theta = atan2(M[1, 0], M[0, 0]), t = (M[0, 2], M[1, 2]), s = 1 / M[2, 2].
    """
    M = validate_matrix3(M)
    theta = math.atan2(M[1, 0], M[0, 0])
    return np.array([M[0, 2], M[1, 2], wrap_angle(theta), 1.0 / M[2, 2]], dtype=float)
