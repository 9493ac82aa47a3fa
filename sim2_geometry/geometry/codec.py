"""
Versioned encode/decode of persisted Sim2 fields.

Record layout (version 1):
    {"version": 1, "rotation": theta, "translation": [x, y], "scale": s}

Version 0 records carry rotation and translation only. They decode with
scale 1.0; a warning is logged since the original scale is unrecoverable.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from pydantic import ValidationError

from sim2_geometry import constants
from sim2_geometry.common.param_models import LegacySim2Record, Sim2Record
from sim2_geometry.common.validation import ContractViolation
from sim2_geometry.geometry.sim2 import Sim2

logger = logging.getLogger(__name__)


def encode(p: Sim2) -> dict:
    """Encode a Sim2 into the current record version."""
    record = Sim2Record(
        version=constants.SIM2_RECORD_VERSION,
        rotation=p.theta(),
        translation=(p.x(), p.y()),
        scale=p.scale(),
    )
    return {
        "version": record.version,
        "rotation": record.rotation,
        "translation": list(record.translation),
        "scale": record.scale,
    }


def decode(record: Mapping[str, Any]) -> Sim2:
    """
    Decode a persisted record into a Sim2.

    Raises:
        ContractViolation: If the record is malformed or has an unknown version
    """
    if not isinstance(record, Mapping):
        raise ContractViolation(f"Sim2 record must be a mapping, got {type(record).__name__}")

    version = record.get("version")
    try:
        if version == constants.SIM2_RECORD_VERSION:
            parsed = Sim2Record(**record)
            return Sim2(parsed.rotation, parsed.translation, parsed.scale)
        if version == constants.SIM2_RECORD_LEGACY_VERSION:
            legacy = LegacySim2Record(**record)
            logger.warning(
                "Decoding version 0 Sim2 record without scale; using scale 1.0"
            )
            return Sim2(legacy.rotation, legacy.translation, 1.0)
    except ValidationError as exc:
        raise ContractViolation(f"Invalid Sim2 record (version {version}): {exc}") from exc

    raise ContractViolation(f"Unsupported Sim2 record version: {version!r}")


def to_json(p: Sim2) -> str:
    return json.dumps(encode(p), sort_keys=True)


def from_json(text: str) -> Sim2:
    try:
        record = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ContractViolation(f"Invalid Sim2 JSON: {exc}") from exc
    return decode(record)
