"""Domain value objects - immutable types shared across the workflow."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Union
from uuid import UUID, uuid4

from eth_utils import is_hex_address, to_checksum_address

from polytrade_sdk.units import from_fixed_point, to_fixed_point


@dataclass(frozen=True)
class ExecutionID:
    """Unique identifier for workflow execution tracing."""

    value: UUID

    @classmethod
    def generate(cls) -> "ExecutionID":
        """Generate a new ExecutionID."""
        return cls(value=uuid4())

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)


ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


@dataclass(frozen=True)
class Address:
    """
    20-byte account or contract address.

    Accepts 0x-prefixed hex as well as the XDC native ``xdc`` prefix and
    stores the EIP-55 checksummed form, so equality is case-insensitive.
    """

    value: str

    def __post_init__(self):
        raw = self.value.strip() if isinstance(self.value, str) else ""
        if raw[:3].lower() == "xdc":
            raw = "0x" + raw[3:]
        if not is_hex_address(raw):
            raise ValueError(f"Not a valid address: {self.value!r}")
        object.__setattr__(self, "value", to_checksum_address(raw))

    @classmethod
    def zero(cls) -> "Address":
        return cls(ZERO_ADDRESS)

    @property
    def is_zero(self) -> bool:
        return self.value == ZERO_ADDRESS

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FractionsAmount:
    """
    Number of fractions to mint on wrap.

    ``display`` is the human quantity, ``base_units`` the 18-decimal
    fixed-point integer sent on chain.
    """

    display: Decimal
    base_units: int

    @classmethod
    def from_display(cls, value: Union[str, int, Decimal]) -> "FractionsAmount":
        base_units = to_fixed_point(value)
        if base_units <= 0:
            raise ValueError(f"Fractions must be positive, got: {value}")
        return cls(display=from_fixed_point(base_units), base_units=base_units)

    def __str__(self) -> str:
        return str(self.display)
