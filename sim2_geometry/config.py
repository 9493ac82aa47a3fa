"""
Configuration classes for Sim(2) geometry parameters.

Organizes parameters into logical groups and loads them from YAML files.

Usage:
    from sim2_geometry.config import load_geometry_config

    # Defaults
    config = get_default_config()

    # Base file, optional preset and overrides (later sources win)
    config = load_geometry_config("geometry.yaml", overrides={"align_min_pairs": 3})
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from sim2_geometry import constants
from sim2_geometry.common.param_models import GeometryParams
from sim2_geometry.common.validation import ContractViolation


@dataclass
class ToleranceConfig:
    """Comparison tolerances."""
    equals_tolerance: float = constants.EQUALS_TOLERANCE_DEFAULT


@dataclass
class AlignmentConfig:
    """Closed-form alignment solver configuration."""
    min_pairs: int = constants.ALIGN_MIN_PAIRS
    degenerate_epsilon: float = constants.ALIGN_DEGENERATE_EPSILON


@dataclass
class PerturbationConfig:
    """Sampler configuration for value perturbation utilities."""
    seed: int = constants.PERTURB_SEED_DEFAULT


@dataclass
class GeometryConfig:
    """Complete geometry configuration."""
    tolerances: ToleranceConfig = field(default_factory=ToleranceConfig)
    alignment: AlignmentConfig = field(default_factory=AlignmentConfig)
    perturbation: PerturbationConfig = field(default_factory=PerturbationConfig)

    @classmethod
    def from_params(cls, params: GeometryParams) -> "GeometryConfig":
        """Create configuration from validated parameters."""
        return cls(
            tolerances=ToleranceConfig(
                equals_tolerance=params.equals_tolerance,
            ),
            alignment=AlignmentConfig(
                min_pairs=params.align_min_pairs,
                degenerate_epsilon=params.align_degenerate_epsilon,
            ),
            perturbation=PerturbationConfig(seed=params.perturb_seed),
        )


def get_default_config() -> GeometryConfig:
    return GeometryConfig()


def load_yaml_config(config_path: str | Path) -> Dict[str, Any]:
    """
    Read one geometry YAML document.

    An empty file reads as {}. The document must be a mapping, either flat or
    holding the parameters under a ``sim2_geometry`` key (see _section).

    Raises:
        FileNotFoundError: If config_path does not exist
        ContractViolation: If the document is not a mapping
        yaml.YAMLError: If the file is not valid YAML
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Geometry config not found: {config_path}")

    with open(config_path, "r") as f:
        document = yaml.safe_load(f)
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ContractViolation(
            f"{config_path}: Expected a mapping of geometry parameters, got {type(document).__name__}"
        )
    return document


def merge_configs(*configs: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Layer parameter dicts into a fresh dict; later layers win key by key.

    Empty or None layers are ignored. Inputs are copied, never modified.
    """
    result: Dict[str, Any] = {}
    for config in configs:
        if config:
            _deep_merge(result, config)
    return result


def _deep_merge(target: Dict[str, Any], layer: Dict[str, Any]) -> None:
    # Nested mappings merge recursively; everything else is replaced by a copy
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _deep_merge(current, value)
        else:
            target[key] = copy.deepcopy(value)


def load_geometry_config(
    base_path: Optional[str | Path] = None,
    preset_path: Optional[str | Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> GeometryConfig:
    """
    Load and validate geometry configuration.

    Layers, lowest precedence first: the base file, the preset file, then
    overrides. Each file contributes its ``sim2_geometry`` section, or the
    whole document when that key is absent.

    Raises:
        FileNotFoundError: If a given file does not exist
        pydantic.ValidationError: If the merged parameters are invalid
    """
    layers = [_section(load_yaml_config(path)) for path in (base_path, preset_path) if path]
    layers.append(overrides or {})
    return GeometryConfig.from_params(GeometryParams(**merge_configs(*layers)))


def _section(document: Dict[str, Any]) -> Dict[str, Any]:
    return document.get("sim2_geometry", document) or {}
