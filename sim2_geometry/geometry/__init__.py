"""
Geometry module for Sim(2) operations using Lie algebra representation.

Sim(2) Representation Conventions
=================================

State Vector: (x, y, theta, s)
  - (x, y): Translation in R²
  - theta: Rotation angle in (-π, π]
  - s: Uniform scale, strictly positive

Homogeneous Matrix:
  [ R(theta)  t  ]
  [ 0   0   1/s  ]

  The bottom-right entry is the INVERSE scale. Matrix products are
  compositions, and points act as s (R p + t).

Tangent Vector: (tx, ty, w, lambda)
  - Indices [0, 1]: translation block
  - Index 2: rotation
  - Index 3: scale; e^lambda is the bottom-right matrix entry, so s = e^-lambda

Retraction
----------
Right perturbation: p.retract(xi) = p * Expmap(xi). Jacobians returned by
compose/between/inverse and the point action use the same convention.

Representation Boundaries
--------------------------
Internal State:
  - Sim2 objects (immutable)
Computation:
  - 4D state vectors and 3x3 matrices via sim2_numpy
Persistence:
  - Versioned {rotation, translation, scale} records via codec

References
----------
- Eade (2013): "Lie Groups for Computer Vision"
- Sola et al. (2018): "A micro Lie theory for state estimation"
"""

from sim2_geometry.geometry.sim2_numpy import (
    J2,
    wrap_angle,
    rot2,
    rot2_angle,
    skew2,
    sim2_wedge,
    sim2_vee,
    sim2_v_matrix,
    sim2_v_inverse,
    sim2_compose,
    sim2_inverse,
    sim2_relative,
    sim2_apply,
    sim2_apply_inverse,
    sim2_adjoint,
    sim2_cov_compose,
    sim2_exp,
    sim2_log,
    sim2_to_matrix,
    sim2_from_matrix,
)
from sim2_geometry.geometry.sim2 import Sim2
from sim2_geometry.geometry.manifold import ManifoldValue
from sim2_geometry.geometry.codec import encode, decode, to_json, from_json

__all__ = [
    # SO(2) operations
    "J2",
    "wrap_angle",
    "rot2",
    "rot2_angle",
    "skew2",
    # sim(2) algebra
    "sim2_wedge",
    "sim2_vee",
    "sim2_v_matrix",
    "sim2_v_inverse",
    # Sim(2) operations
    "sim2_compose",
    "sim2_inverse",
    "sim2_relative",
    "sim2_apply",
    "sim2_apply_inverse",
    "sim2_adjoint",
    "sim2_cov_compose",
    "sim2_exp",
    "sim2_log",
    "sim2_to_matrix",
    "sim2_from_matrix",
    # Types
    "Sim2",
    "ManifoldValue",
    # Persistence
    "encode",
    "decode",
    "to_json",
    "from_json",
]
