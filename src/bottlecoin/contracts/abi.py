"""
ABI helpers - selectors, call encoding and result decoding.

Uses eth-abi for encoding and eth-hash for Keccak-256.
"""

from __future__ import annotations

from typing import Any

from eth_abi import decode, encode
from eth_hash.auto import keccak


def keccak256(data: bytes) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(data)


def find_function(abi: list, function_name: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def _canonical_type(param: dict[str, Any]) -> str:
    kind = param["type"]
    if kind.startswith("tuple"):
        inner = ",".join(_canonical_type(c) for c in param.get("components", []))
        return f"({inner}){kind[len('tuple'):]}"
    return kind


def function_signature(entry: dict[str, Any]) -> str:
    input_types = [_canonical_type(inp) for inp in entry.get("inputs", [])]
    return f"{entry['name']}({','.join(input_types)})"


def function_selector(entry: dict[str, Any]) -> bytes:
    """First 4 bytes of keccak256 of the canonical signature."""
    return keccak256(function_signature(entry).encode("utf-8"))[:4]


def encode_call(abi: list, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = find_function(abi, function_name)
    input_types = [_canonical_type(inp) for inp in func.get("inputs", [])]
    if len(args) != len(input_types):
        raise ValueError(
            f"{function_name} expects {len(input_types)} argument(s), got {len(args)}"
        )

    encoded_args = encode(input_types, args) if args else b""
    return "0x" + function_selector(func).hex() + encoded_args.hex()


def decode_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        Decoded result (None, a single value or a tuple)
    """
    func = find_function(abi, function_name)
    output_types = [_canonical_type(out) for out in func.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:]) if data.startswith("0x") else bytes.fromhex(data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format."""
    addr = address.lower().replace("0x", "")
    if len(addr) != 40:
        raise ValueError(f"Invalid address length: {address!r}")
    int(addr, 16)  # raises ValueError on non-hex input
    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


__all__ = [
    "decode_result",
    "encode_call",
    "find_function",
    "function_selector",
    "function_signature",
    "keccak256",
    "to_checksum_address",
]
