"""
Common package for Sim(2) geometry.

Shared validation and parameter models used by geometry, operators and utils.
"""

from sim2_geometry.common.validation import ContractViolation

__all__ = [
    "ContractViolation",
]
