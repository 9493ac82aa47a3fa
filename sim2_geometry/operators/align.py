"""
Sim2 alignment operator.

Closed-form similarity estimation from point correspondences (p_i, q_i) with
q_i ~ S.transform_from(p_i) = s (R p_i + t).

Degenerate input (too few pairs, coincident sources or targets) has no unique
solution and yields None rather than an exception.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from sim2_geometry.common.validation import ContractViolation
from sim2_geometry.config import AlignmentConfig
from sim2_geometry.geometry.sim2 import Sim2

logger = logging.getLogger(__name__)

Point2Pair = Tuple[Sequence[float], Sequence[float]]


# =============================================================================
# Data Structures
# =============================================================================


@dataclass
class AlignmentResult:
    """Result of the Sim2 alignment operator."""
    transform: Sim2  # best-fit S with q ~ S.transform_from(p)
    rms_residual: float  # sqrt(mean |S.transform_from(p_i) - q_i|^2)
    n_pairs: int


# =============================================================================
# Main Operator
# =============================================================================


def _pairs_to_arrays(pairs: Iterable[Point2Pair]) -> Tuple[np.ndarray, np.ndarray]:
    pairs = list(pairs)
    if not pairs:
        return np.zeros((0, 2)), np.zeros((0, 2))

    try:
        P = np.array([np.asarray(p, dtype=float) for p, _ in pairs], dtype=float)
        Q = np.array([np.asarray(q, dtype=float) for _, q in pairs], dtype=float)
    except (TypeError, ValueError) as exc:
        raise ContractViolation(f"Expected (p, q) pairs of 2D points: {exc}") from exc

    if P.ndim != 2 or P.shape[1] != 2 or Q.shape != P.shape:
        raise ContractViolation(f"Expected (p, q) pairs of 2D points, got shapes {P.shape} and {Q.shape}")
    if not (np.all(np.isfinite(P)) and np.all(np.isfinite(Q))):
        raise ContractViolation("Correspondences contain inf/nan")
    return P, Q


def _align_core(P: np.ndarray, Q: np.ndarray, degenerate_epsilon: float) -> Optional[Sim2]:
    """
    Core closed-form estimation.

    Args:
        P: Source points (N, 2)
        Q: Target points (N, 2)

    Returns:
        Sim2 or None for degenerate input
    """
    p_bar = P.mean(axis=0)
    q_bar = Q.mean(axis=0)
    dP = P - p_bar
    dQ = Q - q_bar

    var_p = float(np.sum(dP * dP))
    var_q = float(np.sum(dQ * dQ))
    # Relative to the raw second moments so the test does not depend on units
    if var_p <= degenerate_epsilon * float(np.sum(P * P)):
        logger.debug("Sim2 align: source points coincide (variance %.3e)", var_p)
        return None
    if var_q <= degenerate_epsilon * float(np.sum(Q * Q)):
        logger.debug("Sim2 align: target points coincide (variance %.3e)", var_q)
        return None

    # Rotation from summed cross and dot products of centered vectors
    cross = float(np.sum(dP[:, 0] * dQ[:, 1] - dP[:, 1] * dQ[:, 0]))
    dot = float(np.sum(dP[:, 0] * dQ[:, 0] + dP[:, 1] * dQ[:, 1]))
    theta = math.atan2(cross, dot)

    # Scale as ratio of RMS norms of centered targets vs sources
    scale = math.sqrt(var_q / var_p)

    # q_bar = s (R p_bar + t)
    R = Sim2(theta).rotation()
    t = q_bar / scale - R @ p_bar
    return Sim2(theta, t, scale)


def estimate_alignment(
    pairs: Iterable[Point2Pair],
    config: Optional[AlignmentConfig] = None,
) -> Optional[AlignmentResult]:
    """
    Estimate the best-fit Sim2 from point correspondences.

    Minimizes sum_i |q_i - S.transform_from(p_i)|^2 over rotation, translation
    and scale using centroid subtraction.

    Args:
        pairs: Iterable of (p, q) 2D point pairs
        config: Alignment configuration (defaults to AlignmentConfig())

    Returns:
        AlignmentResult, or None if fewer than config.min_pairs pairs are
        given or the points are degenerate

    Raises:
        ContractViolation: If pairs are not 2D point pairs
    """
    config = config or AlignmentConfig()
    P, Q = _pairs_to_arrays(pairs)

    n_pairs = P.shape[0]
    if n_pairs < config.min_pairs:
        logger.debug("Sim2 align: %d pairs, need at least %d", n_pairs, config.min_pairs)
        return None

    transform = _align_core(P, Q, config.degenerate_epsilon)
    if transform is None:
        return None

    residuals = transform.transform_from(P) - Q
    rms = float(np.sqrt(np.mean(np.sum(residuals * residuals, axis=1))))
    return AlignmentResult(transform=transform, rms_residual=rms, n_pairs=n_pairs)


def align(
    pairs: Iterable[Point2Pair],
    config: Optional[AlignmentConfig] = None,
) -> Optional[Sim2]:
    """
    Best-fit Sim2 S such that q_i ~ S.transform_from(p_i).

    Returns:
        Sim2, or None for fewer than 2 pairs or degenerate points
    """
    result = estimate_alignment(pairs, config)
    if result is None:
        return None
    return result.transform
