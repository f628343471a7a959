"""
In-memory sandbox

Builds a complete reference world around one BurnSwap deployment: ledger,
traded token, wrapped native asset, exchange pool with liquidity, router,
and funded accounts. Used by ``burnswap simulate`` and the test-suite.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .chain.address import address_from_label, checksum, generate_contract_address
from .chain.state import LedgerState
from .chain.token import Token, TokenRegistry
from .chain.weth import WrappedNative
from .config.loader import BurnSwapConfig
from .exchange.amm import ConstantProductPool, PoolManager
from .exchange.router import SwapRouter
from .logger import get_logger
from .swap.contract import BurnSwap

logger = get_logger(__name__)


@dataclass
class Sandbox:
    state: LedgerState
    tokens: TokenRegistry
    token: Token
    weth: WrappedNative
    pool_manager: PoolManager
    router: SwapRouter
    pool: ConstantProductPool
    swap: BurnSwap
    deployer: str
    owner: str
    creator: str
    trader: str
    liquidity_provider: str

    def approve_sell(self, account: str, amount: int) -> None:
        """Authorize the engine to pull *amount* tokens from *account*."""
        self.token.approve(account, self.swap.address, amount)


def _deploy_address(state: LedgerState, deployer: str) -> str:
    return generate_contract_address(deployer, state.next_nonce(deployer))


def build_sandbox(config: Optional[BurnSwapConfig] = None, log_events: bool = False) -> Sandbox:
    """
    Create a funded world with one pool and one BurnSwap deployment.

    Addresses not given in *config* are derived from fixed labels, so two
    sandboxes built from the same config are identical.
    """
    config = config or BurnSwapConfig()
    config.validate()
    sandbox_cfg = config.sandbox

    state = LedgerState()
    tokens = TokenRegistry()

    deployer = address_from_label("burnswap:deployer")
    owner = checksum(config.admin.owner) if config.admin.owner else address_from_label("burnswap:owner")
    creator = (
        checksum(config.admin.creator_wallet)
        if config.admin.creator_wallet
        else address_from_label("burnswap:creator")
    )
    trader = address_from_label("burnswap:trader")
    provider = address_from_label("burnswap:liquidity-provider")

    weth = tokens.register(WrappedNative(state, _deploy_address(state, deployer)))
    token = tokens.register(Token(
        state, _deploy_address(state, deployer), sandbox_cfg.token_name, sandbox_cfg.token_symbol,
    ))
    pool_manager = PoolManager(state, tokens, _deploy_address(state, deployer))
    router = SwapRouter(state, pool_manager, tokens, _deploy_address(state, deployer))

    pool = pool_manager.create_pool(token.address, weth.address, config.contract.fee_tier, deployer)

    # Seed the pool
    state.mint_native(provider, sandbox_cfg.liquidity_native)
    weth.deposit(provider, sandbox_cfg.liquidity_native)
    token.mint(provider, sandbox_cfg.liquidity_token)
    if pool.info.token0 == weth.address:
        pool.add_liquidity(provider, sandbox_cfg.liquidity_native, sandbox_cfg.liquidity_token)
    else:
        pool.add_liquidity(provider, sandbox_cfg.liquidity_token, sandbox_cfg.liquidity_native)

    # Fund the trader
    state.mint_native(trader, sandbox_cfg.trader_native)
    if sandbox_cfg.trader_tokens:
        token.mint(trader, sandbox_cfg.trader_tokens)

    contract_config = config.contract.to_contract_config(
        token=token.address,
        wrapped_native=weth.address,
        router=router.address,
        pool=pool.address,
    )
    swap = BurnSwap.deploy(
        state, contract_config, owner, creator, router, pool_manager,
        rates=config.fees.to_rates(), log_events=log_events,
    )

    logger.debug("Sandbox ready: pool %s, engine %s", pool.address, swap.address)
    return Sandbox(
        state=state,
        tokens=tokens,
        token=token,
        weth=weth,
        pool_manager=pool_manager,
        router=router,
        pool=pool,
        swap=swap,
        deployer=deployer,
        owner=owner,
        creator=creator,
        trader=trader,
        liquidity_provider=provider,
    )
