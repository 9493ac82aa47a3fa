"""Sim2 - 2D similarity transform (rotation + translation + uniform scale).

Sim2 is an immutable value type. Every group, manifold and point operation
returns a new instance; the receiver is never modified.

Composition formula:
    (theta1, t1, s1) * (theta2, t2, s2):
        new_theta = theta1 + theta2
        new_t     = t1 / s2 + R1 t2
        new_s     = s1 * s2

Retraction convention (right perturbation):
    p.retract(xi)         = p * Expmap(xi)
    p.local_coordinates(q) = Logmap(p^{-1} * q)

Jacobians follow the same convention: H maps a tangent perturbation of an
input (in that input's local frame) to the tangent perturbation of the output.
They are computed only when ``jacobians=True`` is passed, in which case the
operation returns a tuple ``(value, H...)`` instead of the bare value.
"""

from __future__ import annotations

import math
from typing import Tuple, Union

import numpy as np

from sim2_geometry.common.validation import (
    ContractViolation,
    validate_point2,
    validate_rotation2,
    validate_scale,
)
from sim2_geometry.constants import (
    EQUALS_TOLERANCE_DEFAULT,
    RANGE_EPSILON,
    SIM2_DIM,
    SIM2_ROTATION_END,
    SIM2_ROTATION_START,
    SIM2_SCALE_END,
    SIM2_SCALE_START,
    SIM2_TRANSLATION_END,
    SIM2_TRANSLATION_START,
)
from sim2_geometry.geometry.sim2_numpy import (
    J2,
    rot2,
    rot2_angle,
    sim2_adjoint,
    sim2_apply,
    sim2_apply_inverse,
    sim2_compose,
    sim2_exp,
    sim2_from_matrix,
    sim2_inverse,
    sim2_log,
    sim2_to_matrix,
    sim2_vee,
    sim2_wedge,
    wrap_angle,
)


class Sim2:
    """A 2D similarity transform, represented by angle, translation vector and scale."""

    __slots__ = ("_theta", "_t", "_s")

    DIMENSION = SIM2_DIM

    def __init__(self, rotation=0.0, translation=None, scale: float = 1.0):
        """
        Args:
            rotation: Rotation angle in radians, or a 2x2 rotation matrix
            translation: 2D translation (defaults to the origin)
            scale: Strictly positive scale factor (defaults to 1.0)
        """
        if np.ndim(rotation) == 0:
            theta = float(rotation)
            if not math.isfinite(theta):
                raise ContractViolation(f"rotation: Not finite: {theta}")
        else:
            theta = rot2_angle(validate_rotation2(rotation))

        if translation is None:
            t = np.zeros(2, dtype=float)
        else:
            t = validate_point2(translation, "translation").copy()
        t.setflags(write=False)

        object.__setattr__(self, "_theta", wrap_angle(theta))
        object.__setattr__(self, "_t", t)
        object.__setattr__(self, "_s", validate_scale(scale))

    def __setattr__(self, name, value):
        raise AttributeError("Sim2 is immutable")

    def __reduce__(self):
        return (Sim2, (self._theta, self._t.tolist(), self._s))

    # --- Factory methods ---

    @staticmethod
    def identity() -> "Sim2":
        """Neutral element: zero translation, zero angle, unit scale."""
        return Sim2()

    @staticmethod
    def from_xy_theta(x: float, y: float, theta: float, scale: float = 1.0) -> "Sim2":
        """Create from (x, y, theta, scale)."""
        return Sim2(theta, (x, y), scale)

    @staticmethod
    def from_vector(v) -> "Sim2":
        """Create from a 4D state vector [x, y, theta, s]."""
        v = np.asarray(v, dtype=float).reshape(-1)
        if len(v) != SIM2_DIM:
            raise ContractViolation(f"Expected 4D state [x, y, theta, s], got shape {v.shape}")
        return Sim2(v[2], v[:2], v[3])

    @staticmethod
    def from_matrix(T) -> "Sim2":
        """
        Create from a 3x3 homogeneous matrix.

        theta = atan2(T[1, 0], T[0, 0]), t = (T[0, 2], T[1, 2]), s = 1 / T[2, 2].
        """
        return Sim2.from_vector(sim2_from_matrix(T))

    # --- Accessors ---

    def theta(self) -> float:
        return self._theta

    def rotation(self) -> np.ndarray:
        """2x2 rotation matrix."""
        return rot2(self._theta)

    def translation(self) -> np.ndarray:
        return self._t.copy()

    def x(self) -> float:
        return float(self._t[0])

    def y(self) -> float:
        return float(self._t[1])

    def scale(self) -> float:
        return self._s

    def vector(self) -> np.ndarray:
        """State vector [x, y, theta, s]."""
        return np.array([self._t[0], self._t[1], self._theta, self._s], dtype=float)

    def matrix(self) -> np.ndarray:
        """3x3 homogeneous matrix; the bottom-right entry is 1/s."""
        return sim2_to_matrix(self.vector())

    # --- Testable interface ---

    def __repr__(self):
        return (
            f"Sim2(theta={self._theta:.9g}, "
            f"t=[{self._t[0]:.9g}, {self._t[1]:.9g}], s={self._s:.9g})"
        )

    __str__ = __repr__

    def print(self, label: str = "") -> None:
        """Print a human-readable form, prefixed by label."""
        print(f"{label}{self!r}")

    def equals(self, other: "Sim2", tol: float = EQUALS_TOLERANCE_DEFAULT) -> bool:
        """
        Tolerance-based comparison of angle, translation and scale.

        The angle difference is wrapped so that -pi and pi compare equal.
        """
        if not isinstance(other, Sim2):
            return False
        if abs(wrap_angle(self._theta - other._theta)) > tol:
            return False
        if np.max(np.abs(self._t - other._t)) > tol:
            return False
        return abs(self._s - other._s) <= tol

    def __eq__(self, other):
        if not isinstance(other, Sim2):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    # --- Group algebra ---

    def inverse(self, jacobians: bool = False):
        """
        Group inverse (-theta, -s R^T t, 1/s).

        Returns:
            inv, or (inv, H) with H = -Ad(self) when jacobians=True
        """
        inv = Sim2.from_vector(sim2_inverse(self.vector()))
        if not jacobians:
            return inv
        return inv, -self.adjoint_map()

    def compose(self, other: "Sim2", jacobians: bool = False):
        """
        Group multiplication self * other.

        Returns:
            result, or (result, H1, H2) with H1 = Ad(other^{-1}), H2 = I
        """
        result = Sim2.from_vector(sim2_compose(self.vector(), other.vector()))
        if not jacobians:
            return result
        H1 = other.inverse().adjoint_map()
        H2 = np.eye(SIM2_DIM, dtype=float)
        return result, H1, H2

    def __mul__(self, other):
        if not isinstance(other, Sim2):
            return NotImplemented
        return self.compose(other)

    def between(self, other: "Sim2", jacobians: bool = False):
        """
        Relative transform self^{-1} * other.

        Returns:
            result, or (result, H1, H2) with H1 = -Ad(result^{-1}), H2 = I
        """
        result = self.inverse().compose(other)
        if not jacobians:
            return result
        H1 = -result.inverse().adjoint_map()
        H2 = np.eye(SIM2_DIM, dtype=float)
        return result, H1, H2

    # --- Manifold / Lie group algebra ---

    @staticmethod
    def dim() -> int:
        return SIM2_DIM

    @staticmethod
    def expmap(xi) -> "Sim2":
        """Exponential map of tangent vector [tx, ty, w, lambda]."""
        return Sim2.from_vector(sim2_exp(xi))

    @staticmethod
    def logmap(p: "Sim2") -> np.ndarray:
        """Logarithm map, inverse of expmap."""
        return sim2_log(p.vector())

    def retract(self, v) -> "Sim2":
        """self * Expmap(v)."""
        return self.compose(Sim2.expmap(v))

    def local_coordinates(self, other: "Sim2") -> np.ndarray:
        """Logmap(self^{-1} * other); inverse of retract."""
        return Sim2.logmap(self.between(other))

    def adjoint_map(self) -> np.ndarray:
        """4x4 Adjoint: self * Expmap(v) * self^{-1} = Expmap(Ad v)."""
        return sim2_adjoint(self.vector())

    def adjoint(self, xi) -> np.ndarray:
        """Apply the Adjoint to a tangent vector."""
        return self.adjoint_map() @ np.asarray(xi, dtype=float)

    @staticmethod
    def wedge(vx: float, vy: float, w: float, scale: float) -> np.ndarray:
        """3x3 Lie algebra matrix [[0, -w, vx], [w, 0, vy], [0, 0, scale]]."""
        return sim2_wedge(vx, vy, w, scale)

    @staticmethod
    def vee(W) -> np.ndarray:
        return sim2_vee(W)

    @staticmethod
    def translation_interval() -> Tuple[int, int]:
        return SIM2_TRANSLATION_START, SIM2_TRANSLATION_END

    @staticmethod
    def rotation_interval() -> Tuple[int, int]:
        return SIM2_ROTATION_START, SIM2_ROTATION_END

    @staticmethod
    def scale_interval() -> Tuple[int, int]:
        return SIM2_SCALE_START, SIM2_SCALE_END

    # --- Point action ---

    def transform_from(self, point, jacobians: bool = False):
        """
        Map a point from this transform's local frame to the reference frame.

        q = s (R p + t). Accepts a point (2,) or a batch (N, 2).

        Returns:
            q, or (q, H_pose, H_point) when jacobians=True:
                H_pose  = [sR, sR J p, -sR p]  (2x4)
                H_point = sR                   (2x2)
        """
        q = sim2_apply(self.vector(), point)
        if not jacobians:
            return q
        p = validate_point2(point)
        sR = self._s * self.rotation()
        H_pose = np.zeros((2, SIM2_DIM), dtype=float)
        H_pose[:, :2] = sR
        H_pose[:, 2] = sR @ (J2 @ p)
        H_pose[:, 3] = -(sR @ p)
        return q, H_pose, sR

    def transform_to(self, point, jacobians: bool = False):
        """
        Map a point from the reference frame into this transform's local frame.

        p = R^T (q / s - t). Accepts a point (2,) or a batch (N, 2).

        Returns:
            p, or (p, H_pose, H_point) when jacobians=True:
                H_pose  = [-I, -J p, p]  (2x4)
                H_point = R^T / s        (2x2)
        """
        p = sim2_apply_inverse(self.vector(), point)
        if not jacobians:
            return p
        validate_point2(point)
        H_pose = np.zeros((2, SIM2_DIM), dtype=float)
        H_pose[:, :2] = -np.eye(2)
        H_pose[:, 2] = -(J2 @ p)
        H_pose[:, 3] = p
        H_point = self.rotation().T / self._s
        return p, H_pose, H_point

    def _translation_jacobian(self) -> np.ndarray:
        # d t / d xi under retraction: t * exp(xi) has translation t (1 + lambda) + R u
        H = np.zeros((2, SIM2_DIM), dtype=float)
        H[:, :2] = self.rotation()
        H[:, 3] = self._t
        return H

    def bearing(self, target: Union["Sim2", np.ndarray], jacobians: bool = False):
        """
        Direction from this transform's translation toward a point (or another
        transform's translation), relative to this transform's heading.

        d = R^T (target - t); the angle is atan2(d). Like range this is
        independent of scale, and it equals the direction of transform_to(target)
        when s = 1.

        Returns:
            angle, or (angle, H_self (1x4), H_target (1x2 or 1x4))
        """
        if isinstance(target, Sim2):
            point = target._t
        else:
            point = validate_point2(target)

        Rt = self.rotation().T
        d = Rt @ (point - self._t)
        # atan2 yields -pi for d = (-x, -0.0); keep the canonical (-pi, pi]
        angle = wrap_angle(math.atan2(d[1], d[0]))
        if not jacobians:
            return angle

        # d d / d xi = [-I, -J d, -R^T t]
        H_pose = np.zeros((2, SIM2_DIM), dtype=float)
        H_pose[:, :2] = -np.eye(2)
        H_pose[:, 2] = -(J2 @ d)
        H_pose[:, 3] = -(Rt @ self._t)
        H_point = Rt

        r2 = float(d @ d)
        if r2 < RANGE_EPSILON * RANGE_EPSILON:
            D = np.zeros((1, 2), dtype=float)
        else:
            D = np.array([[-d[1], d[0]]], dtype=float) / r2

        H_self = D @ H_pose
        if isinstance(target, Sim2):
            H_target = D @ H_point @ target._translation_jacobian()
        else:
            H_target = D @ H_point
        return angle, H_self, H_target

    def range(self, target: Union["Sim2", np.ndarray], jacobians: bool = False):
        """
        Euclidean distance from this transform's translation to a point (or
        another transform's translation). Independent of rotation and scale.

        Returns:
            range, or (range, H_self (1x4), H_target (1x2 or 1x4))
        """
        if isinstance(target, Sim2):
            point = target._t
        else:
            point = validate_point2(target)

        d = point - self._t
        r = float(np.linalg.norm(d))
        if not jacobians:
            return r

        if r < RANGE_EPSILON:
            D = np.zeros((1, 2), dtype=float)
        else:
            D = (d / r).reshape(1, 2)

        H_self = -D @ self._translation_jacobian()
        if isinstance(target, Sim2):
            H_target = D @ target._translation_jacobian()
        else:
            H_target = D
        return r, H_self, H_target

    # --- Persisted fields ---

    def to_dict(self) -> dict:
        from sim2_geometry.geometry.codec import encode
        return encode(self)

    @staticmethod
    def from_dict(record: dict) -> "Sim2":
        from sim2_geometry.geometry.codec import decode
        return decode(record)

    # --- Camel-case names used by optimizer-facing code ---

    Expmap = expmap
    Logmap = logmap
    localCoordinates = local_coordinates
    AdjointMap = adjoint_map
    Adjoint = adjoint
    transformFrom = transform_from
    transformTo = transform_to
    translationInterval = translation_interval
    rotationInterval = rotation_interval
    scaleInterval = scale_interval
