"""Utilities over plain {key: value} maps."""

from sim2_geometry.utils.values import (
    create_key_list,
    create_key_set,
    extract_point2,
    extract_sim2,
    local_to_world,
    perturb_point2,
    perturb_sim2,
    symbol,
    symbol_char,
    symbol_index,
    values_equal,
)

__all__ = [
    "create_key_list",
    "create_key_set",
    "extract_point2",
    "extract_sim2",
    "local_to_world",
    "perturb_point2",
    "perturb_sim2",
    "symbol",
    "symbol_char",
    "symbol_index",
    "values_equal",
]
