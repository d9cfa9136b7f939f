"""Shared helpers for the Polytrade operations toolkit."""

from .identifiers import compute_main_id, main_id_hex
from .logging import get_logger
from .units import FIXED_POINT_DECIMALS, from_fixed_point, to_fixed_point

__all__ = [
    "FIXED_POINT_DECIMALS",
    "compute_main_id",
    "from_fixed_point",
    "get_logger",
    "main_id_hex",
    "to_fixed_point",
]
