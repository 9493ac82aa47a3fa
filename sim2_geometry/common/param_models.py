"""
Pydantic models for validated Sim(2) geometry parameters and persisted records.
"""

from __future__ import annotations

from typing import Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field

from sim2_geometry import constants


class GeometryParams(BaseModel):
    """Validated geometry configuration (flat, as loaded from YAML)."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    # Tolerances
    equals_tolerance: float = Field(default=constants.EQUALS_TOLERANCE_DEFAULT, ge=0.0)

    # Alignment
    align_min_pairs: int = Field(default=constants.ALIGN_MIN_PAIRS, ge=constants.ALIGN_MIN_PAIRS)
    align_degenerate_epsilon: float = Field(default=constants.ALIGN_DEGENERATE_EPSILON, ge=0.0)

    # Perturbation
    perturb_seed: int = Field(default=constants.PERTURB_SEED_DEFAULT, ge=0)


class Sim2Record(BaseModel):
    """Persisted Sim2 fields, current version (scale included)."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    version: Literal[1] = constants.SIM2_RECORD_VERSION
    rotation: float
    translation: Tuple[float, float]
    scale: float = Field(gt=0.0)


class LegacySim2Record(BaseModel):
    """Version 0 records persisted rotation and translation only."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    version: Literal[0]
    rotation: float
    translation: Tuple[float, float]
