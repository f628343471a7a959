"""
BurnSwap reference ledger

In-memory collaborators the swap engine runs against:
  - LedgerState   : native balances, contract storage, snapshot / revert
  - Token         : ERC-20 style fungible token ledger
  - WrappedNative : 1:1 wrapped native asset (deposit / withdraw)
  - TokenRegistry : address → ledger lookup
"""

from .address import (
    address_from_label,
    checksum,
    generate_contract_address,
    is_zero_address,
)
from .state import LedgerState
from .token import ApprovalEvent, Token, TokenRegistry, TransferEvent
from .weth import DepositEvent, WithdrawalEvent, WrappedNative

__all__ = [
    "address_from_label", "checksum", "generate_contract_address", "is_zero_address",
    "LedgerState",
    "ApprovalEvent", "Token", "TokenRegistry", "TransferEvent",
    "DepositEvent", "WithdrawalEvent", "WrappedNative",
]
