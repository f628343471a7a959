"""
Address helpers

Ethereum-compatible address validation and contract address derivation.
"""

from eth_utils import is_address, keccak, to_checksum_address
import rlp

from ..constants import ZERO_ADDRESS
from ..exceptions import InvalidInput


def checksum(address: str) -> str:
    """
    Validate and normalize an address to EIP-55 checksum format.

    Raises:
        InvalidInput: if the string is not a 20-byte hex address
    """
    if not isinstance(address, str) or not is_address(address):
        raise InvalidInput(f"Invalid address: {address!r}")
    return to_checksum_address(address)


def is_zero_address(address: str) -> bool:
    return int(address, 16) == 0 if address else True


def generate_contract_address(sender: str, nonce: int) -> str:
    """
    Generate contract address using CREATE opcode logic.

    Address = keccak256(rlp([sender, nonce]))[-20:]

    Args:
        sender: Deployer address (0x-prefixed hex)
        nonce: Deployer nonce

    Returns:
        Contract address (checksum format)
    """
    sender_bytes = bytes.fromhex(checksum(sender)[2:])
    hash_bytes = keccak(rlp.encode([sender_bytes, nonce]))
    return to_checksum_address('0x' + hash_bytes[-20:].hex())


def address_from_label(label: str) -> str:
    """Deterministic externally-owned address for a human label (tests, sandbox)."""
    return to_checksum_address('0x' + keccak(text=label)[-20:].hex())


__all__ = [
    "ZERO_ADDRESS",
    "checksum",
    "is_zero_address",
    "generate_contract_address",
    "address_from_label",
]
