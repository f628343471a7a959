"""
Fungible token ledger: ERC-20 semantics over ``LedgerState``.

Implements:
  - ERC-20 interface (transfer, approve, transfer_from, balance_of, allowance)
  - Unlimited allowances (``MAX_UINT256`` is never decremented)
  - Mint / burn for genesis allocations and wrapped assets
  - Transfer / Approval events on the shared ledger log
  - A registry resolving token addresses to ledgers

Balances live in the shared ledger storage, so every transfer is covered
by ledger snapshots.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..constants import DEFAULT_DECIMALS, MAX_UINT256, ZERO_ADDRESS
from ..exceptions import (
    InsufficientAllowance,
    InsufficientBalance,
    InvalidInput,
    LedgerError,
)
from ..logger import get_logger
from .address import checksum, is_zero_address
from .state import LedgerState

logger = get_logger(__name__)

_TOTAL_SUPPLY = "totalSupply"


# ══════════════════════════════════════════════════════════════════════
#  EVENTS
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TransferEvent:
    """Emitted on every successful transfer, mint and burn."""
    token: str
    sender: str
    recipient: str
    amount: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "Transfer",
            "token": self.token,
            "from": self.sender,
            "to": self.recipient,
            "amount": self.amount,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ApprovalEvent:
    """Emitted on every successful approve."""
    token: str
    owner: str
    spender: str
    amount: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "Approval",
            "token": self.token,
            "owner": self.owner,
            "spender": self.spender,
            "amount": self.amount,
            "timestamp": self.timestamp,
        }


# ══════════════════════════════════════════════════════════════════════
#  TOKEN
# ══════════════════════════════════════════════════════════════════════

class Token:
    """
    Fungible token ledger.

    Mirrors ERC-20 semantics:
        - balance_of(address) → int
        - transfer(sender, recipient, amount) → True
        - approve(owner, spender, amount) → True
        - transfer_from(spender, owner, recipient, amount) → True
        - total_supply → int

    Every mutating call either succeeds and returns True or raises a
    ``LedgerError`` subclass.
    """

    def __init__(
        self,
        state: LedgerState,
        address: str,
        name: str,
        symbol: str,
        decimals: int = DEFAULT_DECIMALS,
    ):
        if not name:
            raise LedgerError("Token name cannot be empty")
        if not symbol:
            raise LedgerError("Token symbol cannot be empty")
        if decimals < 0 or decimals > 18:
            raise LedgerError(f"Decimals must be 0-18, got {decimals}")

        self.state = state
        self.address = checksum(address)
        self.name = name
        self.symbol = symbol
        self.decimals = decimals

    # ── Read-only views ───────────────────────────────────────────────

    @property
    def total_supply(self) -> int:
        return self.state.load(self.address, _TOTAL_SUPPLY)

    def balance_of(self, address: str) -> int:
        return self.state.load(self.address, ("balance", address))

    def allowance(self, owner: str, spender: str) -> int:
        return self.state.load(self.address, ("allowance", owner, spender))

    # ── Core ERC-20 operations ────────────────────────────────────────

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        self._move(sender, recipient, amount)
        return True

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        if amount < 0 or amount > MAX_UINT256:
            raise LedgerError(f"Allowance amount out of range: {amount}")
        if is_zero_address(spender):
            raise LedgerError("Cannot approve the zero address")

        self.state.store(self.address, ("allowance", owner, spender), amount)
        self.state.emit(ApprovalEvent(self.address, owner, spender, amount))
        logger.debug(f"Approve: {owner} → {spender} allowance={amount} {self.symbol}")
        return True

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool:
        """
        Transfer on behalf of *owner* using *spender*'s allowance.

        Raises:
            InsufficientAllowance: allowance below *amount*
            InsufficientBalance: owner balance below *amount*
        """
        allow = self.allowance(owner, spender)
        if allow < amount:
            raise InsufficientAllowance(
                f"{self.symbol}: allowance {allow} of {spender} < transfer amount {amount}"
            )
        self._move(owner, recipient, amount)
        if allow != MAX_UINT256:
            self.state.store(self.address, ("allowance", owner, spender), allow - amount)
        return True

    # ── Supply ────────────────────────────────────────────────────────

    def mint(self, recipient: str, amount: int) -> None:
        if amount < 0:
            raise LedgerError("Mint amount cannot be negative")
        if is_zero_address(recipient):
            raise LedgerError("Cannot mint to the zero address")

        self.state.store(self.address, _TOTAL_SUPPLY, self.total_supply + amount)
        self.state.store(self.address, ("balance", recipient), self.balance_of(recipient) + amount)
        self.state.emit(TransferEvent(self.address, ZERO_ADDRESS, recipient, amount))

    def burn(self, holder: str, amount: int) -> None:
        if amount < 0:
            raise LedgerError("Burn amount cannot be negative")
        bal = self.balance_of(holder)
        if bal < amount:
            raise InsufficientBalance(f"{holder} balance {bal} < burn amount {amount} {self.symbol}")

        self.state.store(self.address, ("balance", holder), bal - amount)
        self.state.store(self.address, _TOTAL_SUPPLY, self.total_supply - amount)
        self.state.emit(TransferEvent(self.address, holder, ZERO_ADDRESS, amount))

    # ── Internal ──────────────────────────────────────────────────────

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise LedgerError("Transfer amount cannot be negative")
        if is_zero_address(recipient):
            raise LedgerError("Cannot transfer to the zero address")

        bal = self.balance_of(sender)
        if bal < amount:
            raise InsufficientBalance(
                f"{sender} balance {bal} < transfer amount {amount} {self.symbol}"
            )

        self.state.store(self.address, ("balance", sender), bal - amount)
        self.state.store(self.address, ("balance", recipient), self.balance_of(recipient) + amount)
        self.state.emit(TransferEvent(self.address, sender, recipient, amount))
        logger.debug(f"Transfer: {sender} → {recipient} {amount} {self.symbol}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "totalSupply": self.total_supply,
        }

    def __repr__(self) -> str:
        return f"<Token {self.symbol} {self.address}>"


# ══════════════════════════════════════════════════════════════════════
#  TOKEN REGISTRY
# ══════════════════════════════════════════════════════════════════════

class TokenRegistry:
    """
    Resolves token addresses to ledgers for the exchange and the swap engine.
    """

    def __init__(self) -> None:
        self._tokens: Dict[str, Token] = {}

    def register(self, token: Token) -> Token:
        if token.address in self._tokens:
            raise LedgerError(f"Token {token.address} already registered")
        self._tokens[token.address] = token
        logger.info(f"Token registered: {token.symbol} ({token.address})")
        return token

    def get(self, address: str) -> Optional[Token]:
        try:
            return self._tokens.get(checksum(address))
        except InvalidInput:
            return None

    def get_or_raise(self, address: str) -> Token:
        token = self.get(address)
        if token is None:
            raise LedgerError(f"Token {address} not found in registry")
        return token

    @property
    def count(self) -> int:
        return len(self._tokens)

    def __repr__(self) -> str:
        return f"<TokenRegistry tokens={self.count}>"
