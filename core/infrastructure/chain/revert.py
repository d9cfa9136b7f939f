"""
Revert data decoding.

Turns raw revert bytes into a readable reason: ``Error(string)``,
``Panic(uint256)`` and the platform's custom errors. Unknown selectors
are reported as their hex selector.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex, function_signature_to_4byte_selector, to_checksum_address

from core.domain.errors import revert_hint

from .abis import PLATFORM_ERRORS_ABI

ERROR_STRING_SELECTOR = bytes.fromhex("08c379a0")
PANIC_SELECTOR = bytes.fromhex("4e487b71")

PANIC_CODES = {
    0x01: "assertion failed",
    0x11: "arithmetic overflow or underflow",
    0x12: "division or modulo by zero",
    0x21: "invalid enum value",
    0x31: "pop on empty array",
    0x32: "array index out of bounds",
    0x41: "out of memory",
    0x51: "call to uninitialized function",
}

@dataclass
class DecodedRevert:
    """A decoded revert."""

    reason: str
    name: Optional[str] = None
    args: Dict[str, Any] = field(default_factory=dict)
    selector: Optional[str] = None

    @property
    def hint(self) -> Optional[str]:
        return revert_hint(self.name)


class RevertDecoder:
    """Decoder for the known error set, keyed by 4-byte selector."""

    def __init__(self, error_abi: Optional[List[Dict[str, Any]]] = None) -> None:
        self._errors: Dict[bytes, Dict[str, Any]] = {}
        for item in error_abi if error_abi is not None else PLATFORM_ERRORS_ABI:
            if item.get("type") != "error":
                continue
            types = ",".join(i["type"] for i in item["inputs"])
            selector = function_signature_to_4byte_selector(f"{item['name']}({types})")
            self._errors[selector] = item

    def decode(self, data: Union[bytes, str, None]) -> DecodedRevert:
        if data is None:
            return DecodedRevert(reason="execution reverted without data")
        raw = decode_hex(data) if isinstance(data, str) else bytes(data)
        if len(raw) < 4:
            return DecodedRevert(reason="execution reverted without data")

        selector, payload = raw[:4], raw[4:]
        try:
            if selector == ERROR_STRING_SELECTOR:
                (message,) = abi_decode(["string"], payload)
                return DecodedRevert(reason=message, name="Error", args={"message": message},
                                     selector="0x" + selector.hex())
            if selector == PANIC_SELECTOR:
                (code,) = abi_decode(["uint256"], payload)
                meaning = PANIC_CODES.get(code, "unknown panic")
                return DecodedRevert(reason=f"Panic(0x{code:02x}): {meaning}", name="Panic",
                                     args={"code": code}, selector="0x" + selector.hex())
            if selector in self._errors:
                return self._decode_custom(selector, payload)
        except DecodingError:
            return DecodedRevert(reason=f"undecodable revert data 0x{raw.hex()}",
                                 selector="0x" + selector.hex())

        return DecodedRevert(reason=f"unknown custom error 0x{selector.hex()}", selector="0x" + selector.hex())

    def _decode_custom(self, selector: bytes, payload: bytes) -> DecodedRevert:
        item = self._errors[selector]
        types = [i["type"] for i in item["inputs"]]
        names = [i["name"] for i in item["inputs"]]
        values = abi_decode(types, payload) if types else ()
        args: Dict[str, Any] = {}
        for name, type_, value in zip(names, types, values):
            if type_ == "address":
                value = to_checksum_address(value)
            elif type_.startswith("bytes"):
                value = "0x" + bytes(value).hex()
            args[name] = value
        rendered = ", ".join(f"{k}={v}" for k, v in args.items())
        return DecodedRevert(reason=f"{item['name']}({rendered})", name=item["name"], args=args,
                             selector="0x" + selector.hex())

    def from_exception(self, exc: Exception) -> DecodedRevert:
        """Decode a web3 ContractLogicError (or anything carrying revert data)."""
        data = getattr(exc, "data", None)
        if isinstance(data, bytes) and len(data) >= 4:
            return self.decode(data)
        if isinstance(data, str) and data.startswith("0x") and len(data) >= 10:
            return self.decode(data)
        message = getattr(exc, "message", None) or str(exc)
        message = message.replace("execution reverted: ", "").strip()
        return DecodedRevert(reason=message or "execution reverted")
