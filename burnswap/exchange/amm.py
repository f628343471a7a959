"""
Reference Constant-Product AMM

Minimal exchange the swap engine trades against in simulations and tests:
  - Four fee tiers: 0.01%, 0.05%, 0.30%, 1.00% (hundredths of a bp)
  - x·y = k pricing, integer arithmetic, fee taken from the input
  - Reserves and LP shares kept in the shared ledger, so a reverted trade
    reverts the pool too
  - Pools keyed by (token pair, fee tier), deterministic pool addresses

Security features:
  - Slippage protection (min_amount_out on every swap)
  - Input verified against the pool's actual balance before paying out
  - Reentrancy lock on swap + liquidity mutations
  - Minimum locked liquidity on the first deposit
  - Emergency pause
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

from ..chain.address import checksum, generate_contract_address
from ..chain.state import LedgerState
from ..chain.token import Token, TokenRegistry
from ..constants import MINIMUM_LIQUIDITY
from ..exceptions import ExchangeError, InvalidInput

logger = logging.getLogger(__name__)

FEE_DENOMINATOR = 1_000_000


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class FeeTier(IntEnum):
    """Fee tiers in hundredths of a basis point."""
    ULTRA_LOW = 100      # 0.01 %
    LOW = 500            # 0.05 %
    MEDIUM = 3000        # 0.30 %
    HIGH = 10000         # 1.00 %

    @property
    def percent(self) -> float:
        return int(self) / FEE_DENOMINATOR * 100


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------

@dataclass
class PoolInfo:
    """
    Immutable identity of a pool.

    token0 < token1 (canonical ordering).
    """
    address: str
    token0: str
    token1: str
    fee_tier: FeeTier
    creator: str
    created_at: float = field(default_factory=time.time)


# ---------------------------------------------------------------------------
# Constant-product pool
# ---------------------------------------------------------------------------

class ConstantProductPool:
    """
    Single constant-product pool engine.

    Implements:
      - Swap (exact-in) with slippage protection
      - Add / remove liquidity with share accounting
      - Reentrancy protection
      - Emergency pause
    """

    def __init__(self, state: LedgerState, tokens: TokenRegistry, info: PoolInfo):
        self.state = state
        self.info = info
        self.token0: Token = tokens.get_or_raise(info.token0)
        self.token1: Token = tokens.get_or_raise(info.token1)
        self._locked: bool = False   # reentrancy guard
        self._paused: bool = False   # emergency pause

    @property
    def address(self) -> str:
        return self.info.address

    # -- Reentrancy guard ---------------------------------------------------

    def _acquire_lock(self) -> None:
        if self._locked:
            raise ExchangeError("Reentrancy detected: pool is locked")
        self._locked = True

    def _release_lock(self) -> None:
        self._locked = False

    # -- Emergency controls -------------------------------------------------

    def pause(self) -> None:
        self._paused = True

    def unpause(self) -> None:
        self._paused = False

    @property
    def is_paused(self) -> bool:
        return self._paused

    # -- Views --------------------------------------------------------------

    @property
    def reserves(self) -> Tuple[int, int]:
        return (
            self.state.load(self.address, "reserve0"),
            self.state.load(self.address, "reserve1"),
        )

    @property
    def liquidity(self) -> int:
        """Geometric-mean liquidity snapshot, sqrt(reserve0 · reserve1)."""
        r0, r1 = self.reserves
        return math.isqrt(r0 * r1)

    @property
    def total_shares(self) -> int:
        return self.state.load(self.address, "totalShares")

    def shares_of(self, provider: str) -> int:
        return self.state.load(self.address, ("shares", provider))

    def is_zero_for_one(self, token_in: str) -> bool:
        token_in = checksum(token_in)
        if token_in == self.info.token0:
            return True
        if token_in == self.info.token1:
            return False
        raise ExchangeError(f"Token {token_in} is not traded by pool {self.address}")

    def get_amount_out(self, amount_in: int, zero_for_one: bool) -> int:
        """Quote an exact-input swap WITHOUT executing it."""
        if amount_in <= 0:
            return 0
        r0, r1 = self.reserves
        reserve_in, reserve_out = (r0, r1) if zero_for_one else (r1, r0)
        if reserve_in == 0 or reserve_out == 0:
            return 0
        amount_in_with_fee = amount_in * (FEE_DENOMINATOR - int(self.info.fee_tier))
        return (amount_in_with_fee * reserve_out) // (reserve_in * FEE_DENOMINATOR + amount_in_with_fee)

    # -- Swap ---------------------------------------------------------------

    def swap(
        self,
        amount_in: int,
        zero_for_one: bool,
        recipient: str,
        min_amount_out: int = 0,
    ) -> int:
        """
        Execute a swap whose input has already been transferred to the pool.

        Returns:
            amount_out

        Raises:
            ExchangeError: on pause, zero amount, missing input, no liquidity,
                slippage exceeded, or reentrancy
        """
        if self._paused:
            raise ExchangeError("Pool is paused: emergency mode")
        if amount_in <= 0:
            raise ExchangeError("Swap amount must be positive")
        if self.liquidity <= 0:
            raise ExchangeError("No liquidity in pool")

        self._acquire_lock()
        try:
            return self._execute_swap(amount_in, zero_for_one, recipient, min_amount_out)
        finally:
            self._release_lock()

    def _execute_swap(
        self,
        amount_in: int,
        zero_for_one: bool,
        recipient: str,
        min_amount_out: int,
    ) -> int:
        """Core swap logic, called under reentrancy lock."""
        token_in, token_out = (self.token0, self.token1) if zero_for_one else (self.token1, self.token0)
        r0, r1 = self.reserves
        reserve_in = r0 if zero_for_one else r1

        received = token_in.balance_of(self.address) - reserve_in
        if received < amount_in:
            raise ExchangeError(f"Insufficient input: expected {amount_in}, received {received}")

        amount_out = self.get_amount_out(amount_in, zero_for_one)
        if amount_out <= 0:
            raise ExchangeError("Insufficient output amount")

        # --- Slippage protection ---
        if amount_out < min_amount_out:
            raise ExchangeError(
                f"Too little received: got {amount_out}, minimum {min_amount_out}"
            )

        token_out.transfer(self.address, recipient, amount_out)
        self._sync()
        return amount_out

    # -- Liquidity ----------------------------------------------------------

    def add_liquidity(self, provider: str, amount0: int, amount1: int) -> int:
        """
        Deposit both tokens and mint pool shares.

        Returns:
            Shares minted to *provider*
        """
        if self._paused:
            raise ExchangeError("Pool is paused: emergency mode")
        if amount0 <= 0 or amount1 <= 0:
            raise ExchangeError("Liquidity amounts must be positive")

        self._acquire_lock()
        try:
            r0, r1 = self.reserves
            total = self.total_shares
            if total == 0:
                shares = math.isqrt(amount0 * amount1) - MINIMUM_LIQUIDITY
                if shares <= 0:
                    raise ExchangeError("Initial liquidity below minimum")
                # permanently locked
                total = MINIMUM_LIQUIDITY
            else:
                shares = min(amount0 * total // r0, amount1 * total // r1)
                if shares <= 0:
                    raise ExchangeError("Insufficient liquidity minted")

            self.token0.transfer(provider, self.address, amount0)
            self.token1.transfer(provider, self.address, amount1)

            self.state.store(self.address, "totalShares", total + shares)
            self.state.store(self.address, ("shares", provider), self.shares_of(provider) + shares)
            self._sync()
            return shares
        finally:
            self._release_lock()

    def remove_liquidity(self, provider: str, shares: Optional[int] = None) -> Tuple[int, int]:
        """
        Burn pool shares and return the underlying tokens.

        Args:
            provider: share owner
            shares: shares to burn (None = all)

        Returns:
            (amount0, amount1)
        """
        held = self.shares_of(provider)
        burn = held if shares is None else shares
        if burn <= 0:
            raise ExchangeError("Nothing to remove")
        if burn > held:
            raise ExchangeError("Cannot remove more shares than position holds")

        self._acquire_lock()
        try:
            r0, r1 = self.reserves
            total = self.total_shares
            amount0 = burn * r0 // total
            amount1 = burn * r1 // total

            self.state.store(self.address, ("shares", provider), held - burn)
            self.state.store(self.address, "totalShares", total - burn)
            self.token0.transfer(self.address, provider, amount0)
            self.token1.transfer(self.address, provider, amount1)
            self._sync()
            return amount0, amount1
        finally:
            self._release_lock()

    # -- Internal -----------------------------------------------------------

    def _sync(self) -> None:
        self.state.store(self.address, "reserve0", self.token0.balance_of(self.address))
        self.state.store(self.address, "reserve1", self.token1.balance_of(self.address))

    def to_dict(self) -> Dict[str, Any]:
        r0, r1 = self.reserves
        return {
            "address": self.address,
            "token0": self.info.token0,
            "token1": self.info.token1,
            "fee_tier": int(self.info.fee_tier),
            "reserve0": r0,
            "reserve1": r1,
            "liquidity": self.liquidity,
            "paused": self._paused,
        }


# ---------------------------------------------------------------------------
# Pool Manager
# ---------------------------------------------------------------------------

class PoolManager:
    """
    Registry of all pools.

    Handles:
      - Pool creation with deterministic addresses
      - Lookup by (pair, fee tier) or address
    """

    def __init__(self, state: LedgerState, tokens: TokenRegistry, factory_address: str) -> None:
        self.state = state
        self.tokens = tokens
        self.factory_address = checksum(factory_address)
        self._pools: Dict[str, ConstantProductPool] = {}
        self._pair_index: Dict[Tuple[str, str, int], str] = {}

    @property
    def pool_count(self) -> int:
        return len(self._pools)

    @staticmethod
    def _sort(token_a: str, token_b: str) -> Tuple[str, str]:
        token_a, token_b = checksum(token_a), checksum(token_b)
        if token_a.lower() > token_b.lower():
            token_a, token_b = token_b, token_a
        return token_a, token_b

    def create_pool(self, token_a: str, token_b: str, fee_tier: FeeTier, creator: str) -> ConstantProductPool:
        """Create a new pool for a token pair at a fee tier."""
        try:
            fee_tier = FeeTier(int(fee_tier))
        except ValueError:
            raise InvalidInput(f"Unsupported fee tier: {fee_tier}")

        token0, token1 = self._sort(token_a, token_b)
        if token0 == token1:
            raise ExchangeError("Pool tokens must differ")

        key = (token0, token1, int(fee_tier))
        if key in self._pair_index:
            raise ExchangeError(f"Pool already exists for {token0}:{token1} with fee tier {int(fee_tier)}")

        address = generate_contract_address(
            self.factory_address, self.state.next_nonce(self.factory_address)
        )
        info = PoolInfo(address=address, token0=token0, token1=token1, fee_tier=fee_tier, creator=creator)
        pool = ConstantProductPool(self.state, self.tokens, info)
        self._pools[address] = pool
        self._pair_index[key] = address

        logger.info("Pool %s created: %s/%s fee=%d", address, token0, token1, int(fee_tier))
        return pool

    def get_pool(self, token_a: str, token_b: str, fee_tier: int) -> Optional[ConstantProductPool]:
        token0, token1 = self._sort(token_a, token_b)
        address = self._pair_index.get((token0, token1, int(fee_tier)))
        return self._pools.get(address) if address else None

    def get_pool_by_address(self, address: str) -> Optional[ConstantProductPool]:
        return self._pools.get(checksum(address))
