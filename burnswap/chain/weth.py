"""
Wrapped native asset: 1:1 tradeable representation of native value.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict

from ..constants import NATIVE_SYMBOL
from ..exceptions import LedgerError
from ..logger import get_logger
from .state import LedgerState
from .token import Token

logger = get_logger(__name__)


@dataclass(frozen=True)
class DepositEvent:
    token: str
    holder: str
    amount: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {"event": "Deposit", "token": self.token, "dst": self.holder,
                "amount": self.amount, "timestamp": self.timestamp}


@dataclass(frozen=True)
class WithdrawalEvent:
    token: str
    holder: str
    amount: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {"event": "Withdrawal", "token": self.token, "src": self.holder,
                "amount": self.amount, "timestamp": self.timestamp}


class WrappedNative(Token):
    """
    Wrapped native ledger.

    ``deposit`` locks native value in this contract and mints the same
    amount of wrapped units; ``withdraw`` burns wrapped units and sends the
    native value back with a call-style transfer, which runs the holder's
    receive hook.
    """

    def __init__(self, state: LedgerState, address: str, native_symbol: str = NATIVE_SYMBOL):
        super().__init__(state, address, f"Wrapped {native_symbol}", f"W{native_symbol}", 18)

    def deposit(self, sender: str, value: int) -> None:
        if value <= 0:
            raise LedgerError("Deposit amount must be positive")
        self.state.transfer_native(sender, self.address, value)
        self.mint(sender, value)
        self.state.emit(DepositEvent(self.address, sender, value))

    def withdraw(self, sender: str, amount: int) -> None:
        if amount <= 0:
            raise LedgerError("Withdraw amount must be positive")
        self.burn(sender, amount)
        if not self.state.send_native(self.address, sender, amount):
            raise LedgerError(f"Native transfer of {amount} to {sender} failed")
        self.state.emit(WithdrawalEvent(self.address, sender, amount))

    @property
    def locked_native(self) -> int:
        return self.state.native_balance(self.address)
