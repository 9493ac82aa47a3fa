"""
Capability interface shared by values stored in optimizer containers.

A container holding many geometric types only needs this surface; it does not
depend on any base class of the stored values.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class ManifoldValue(Protocol):
    """Manifold value: printable, comparable, with retract/local coordinates."""

    def print(self, label: str = "") -> None: ...

    def equals(self, other, tol: float = ...) -> bool: ...

    def dim(self) -> int: ...

    def retract(self, v) -> "ManifoldValue": ...

    def local_coordinates(self, other) -> np.ndarray: ...
