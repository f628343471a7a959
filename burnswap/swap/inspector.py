"""
Read-only diagnostics over the engine's exchange setup and its users'
authorizations. Nothing here mutates state.
"""

from __future__ import annotations

from ..chain.address import checksum
from ..chain.token import Token
from ..chain.weth import WrappedNative
from ..exchange.amm import PoolManager
from .types import ContractConfig, PoolStateReport, UserApprovalReport


class PoolStateInspector:

    def __init__(
        self,
        address: str,
        config: ContractConfig,
        token: Token,
        weth: WrappedNative,
        pool_manager: PoolManager,
    ):
        self.address = address
        self.config = config
        self.token = token
        self.weth = weth
        self.pool_manager = pool_manager

    def check_pool_state(self) -> PoolStateReport:
        pool = self.pool_manager.get_pool(self.config.token, self.config.wrapped_native, self.config.fee_tier)
        exists = pool is not None and pool.address == self.config.pool
        return PoolStateReport(
            pool_exists=exists,
            pool_liquidity=pool.liquidity if exists else 0,
            exchange_allowance_for_wrapped=self.weth.allowance(self.address, self.config.router),
            exchange_allowance_for_token=self.token.allowance(self.address, self.config.router),
            own_wrapped_balance=self.weth.balance_of(self.address),
        )


class ApprovalInspector:

    def __init__(self, address: str, token: Token):
        self.address = address
        self.token = token

    def check_user_approval(self, user: str) -> UserApprovalReport:
        """How much of *user*'s token balance the engine may currently pull."""
        user = checksum(user)
        return UserApprovalReport(
            allowance=self.token.allowance(user, self.address),
            balance=self.token.balance_of(user),
        )
