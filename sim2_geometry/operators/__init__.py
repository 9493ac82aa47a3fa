"""
Operators over Sim(2) values.

- align: closed-form similarity estimation from point correspondences
"""

from sim2_geometry.operators.align import AlignmentResult, align, estimate_alignment

__all__ = [
    "AlignmentResult",
    "align",
    "estimate_alignment",
]
