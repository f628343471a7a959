"""
Reference Swap Router

Exact-input single-pool swaps against ``PoolManager`` pools:
  - Pulls the input from the caller with ``transfer_from`` (the caller must
    have approved the router)
  - Enforces ``amount_out_minimum``: fails instead of under-delivering
  - Read-only quoting (quote_exact_input_single does NOT mutate pool state)
  - Price limits are not supported; ``sqrt_price_limit_x96`` must be 0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

from ..chain.address import checksum
from ..chain.state import LedgerState
from ..chain.token import TokenRegistry
from ..exceptions import ExchangeError, LedgerError
from .amm import ConstantProductPool, PoolManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExactInputSingleParams:
    """Parameters of an exact-input single-pool swap."""
    token_in: str
    token_out: str
    fee: int
    recipient: str
    amount_in: int
    amount_out_minimum: int = 0
    sqrt_price_limit_x96: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tokenIn": self.token_in,
            "tokenOut": self.token_out,
            "fee": self.fee,
            "recipient": self.recipient,
            "amountIn": self.amount_in,
            "amountOutMinimum": self.amount_out_minimum,
            "sqrtPriceLimitX96": self.sqrt_price_limit_x96,
        }


class SwapRouter:
    """
    Exact-input router.

    Any failure (unknown pool, empty pool, output floor, ledger error while
    pulling the input) raises ``ExchangeError``.
    """

    def __init__(self, state: LedgerState, pool_manager: PoolManager, tokens: TokenRegistry, address: str):
        self.state = state
        self.pool_manager = pool_manager
        self.tokens = tokens
        self.address = checksum(address)
        self._total_swaps: int = 0

    @property
    def total_swaps(self) -> int:
        return self._total_swaps

    def _resolve_pool(self, params: ExactInputSingleParams) -> ConstantProductPool:
        if params.sqrt_price_limit_x96 != 0:
            raise ExchangeError("Price limits are not supported")
        if params.amount_in <= 0:
            raise ExchangeError("Swap amount must be positive")
        if params.amount_out_minimum < 0:
            raise ExchangeError("Minimum output cannot be negative")
        pool = self.pool_manager.get_pool(params.token_in, params.token_out, params.fee)
        if pool is None:
            raise ExchangeError(
                f"No pool for {params.token_in}/{params.token_out} fee={params.fee}"
            )
        return pool

    def quote_exact_input_single(self, params: ExactInputSingleParams) -> int:
        pool = self._resolve_pool(params)
        return pool.get_amount_out(params.amount_in, pool.is_zero_for_one(params.token_in))

    def exact_input_single(self, caller: str, params: ExactInputSingleParams) -> int:
        """
        Swap exactly ``params.amount_in`` of token_in held by *caller*.

        Returns:
            amount_out delivered to ``params.recipient``
        """
        pool = self._resolve_pool(params)
        zero_for_one = pool.is_zero_for_one(params.token_in)
        token_in = self.tokens.get_or_raise(params.token_in)

        try:
            token_in.transfer_from(self.address, caller, pool.address, params.amount_in)
        except LedgerError as e:
            raise ExchangeError(f"Input transfer failed: {e}") from e

        amount_out = pool.swap(
            params.amount_in, zero_for_one, params.recipient, params.amount_out_minimum
        )
        self._total_swaps += 1
        logger.debug(
            "Router swap %d %s → %d %s for %s",
            params.amount_in, params.token_in, amount_out, params.token_out, params.recipient,
        )
        return amount_out
