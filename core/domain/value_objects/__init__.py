"""Domain value objects."""

from .main_id import MainId
from .value_objects import ZERO_ADDRESS, Address, ExecutionID, FractionsAmount

__all__ = [
    "Address",
    "ExecutionID",
    "FractionsAmount",
    "MainId",
    "ZERO_ADDRESS",
]
