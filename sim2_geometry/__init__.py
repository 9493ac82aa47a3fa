"""
sim2_geometry: 2D similarity transforms as a Lie group.

Usage:
    from sim2_geometry import Sim2, align

    p = Sim2.from_xy_theta(1.0, 0.0, 0.0, 2.0)
    q = p.retract([0.01, 0.02, 0.01, 0.01])
    xi = p.local_coordinates(q)

    S = align([(p_i, q_i) for p_i, q_i in correspondences])
"""

from sim2_geometry.common.validation import ContractViolation
from sim2_geometry.geometry.sim2 import Sim2
from sim2_geometry.geometry.manifold import ManifoldValue
from sim2_geometry.operators.align import AlignmentResult, align, estimate_alignment

__version__ = "0.1.0"

__all__ = [
    "ContractViolation",
    "Sim2",
    "ManifoldValue",
    "AlignmentResult",
    "align",
    "estimate_alignment",
]
