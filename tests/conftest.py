"""
Shared fixtures for the BurnSwap test-suite.

Two worlds are available:
  - ``sandbox``: the full in-memory reference world (constant-product pool,
    router, funded trader) built by ``burnswap.sandbox.build_sandbox``
  - ``fixed_world``: a BurnSwap deployment in front of ``FixedOutputRouter``,
    an exchange double that returns a preset output, for exact-number
    scenarios
"""

from dataclasses import dataclass
from typing import List, Optional

import pytest

from burnswap.chain import LedgerState, Token, TokenRegistry, WrappedNative, address_from_label
from burnswap.exceptions import ExchangeError, LedgerError
from burnswap.exchange import ExactInputSingleParams, PoolManager
from burnswap.sandbox import build_sandbox
from burnswap.swap import BurnSwap, ContractConfig

OWNER = address_from_label("test:owner")
CREATOR = address_from_label("test:creator")
TRADER = address_from_label("test:trader")
OTHER = address_from_label("test:other")
BURN_SINK = address_from_label("test:burn-sink")

WETH_ADDR = address_from_label("test:weth")
TOKEN_ADDR = address_from_label("test:token")
ROUTER_ADDR = address_from_label("test:router")
POOL_ADDR = address_from_label("test:pool")
FACTORY_ADDR = address_from_label("test:factory")

ONE_ETHER = 10**18


class FixedOutputRouter:
    """
    Exchange double with the router interface.

    Pulls ``amount_in`` from the caller, pays ``output`` of token_out from its
    own inventory and reports ``output``. ``deliver`` makes it send a
    different amount than it reports; ``enforce_minimum=False`` makes it
    ignore ``amount_out_minimum``; ``fail`` makes every swap raise.
    """

    def __init__(self, state: LedgerState, tokens: TokenRegistry, address: str, output: int):
        self.state = state
        self.tokens = tokens
        self.address = address
        self.output = output
        self.deliver: Optional[int] = None
        self.enforce_minimum = True
        self.fail = False
        self.calls: List[ExactInputSingleParams] = []

    def exact_input_single(self, caller: str, params: ExactInputSingleParams) -> int:
        self.calls.append(params)
        if self.fail:
            raise ExchangeError("Exchange unavailable")
        if self.enforce_minimum and self.output < params.amount_out_minimum:
            raise ExchangeError(
                f"Too little received: got {self.output}, minimum {params.amount_out_minimum}"
            )
        token_in = self.tokens.get_or_raise(params.token_in)
        token_out = self.tokens.get_or_raise(params.token_out)
        try:
            token_in.transfer_from(self.address, caller, self.address, params.amount_in)
        except LedgerError as e:
            raise ExchangeError(f"Input transfer failed: {e}") from e
        token_out.transfer(
            self.address, params.recipient, self.output if self.deliver is None else self.deliver
        )
        return self.output


@dataclass
class FixedWorld:
    state: LedgerState
    tokens: TokenRegistry
    token: Token
    weth: WrappedNative
    router: FixedOutputRouter
    swap: BurnSwap


def make_fixed_world(output: int, inventory: int = 10**30) -> FixedWorld:
    state = LedgerState()
    tokens = TokenRegistry()
    weth = tokens.register(WrappedNative(state, WETH_ADDR))
    token = tokens.register(Token(state, TOKEN_ADDR, "Burn Token", "BURN"))
    router = FixedOutputRouter(state, tokens, ROUTER_ADDR, output)

    # Router inventory of both assets
    token.mint(ROUTER_ADDR, inventory)
    state.mint_native(ROUTER_ADDR, inventory)
    weth.deposit(ROUTER_ADDR, inventory)

    state.mint_native(TRADER, 100 * ONE_ETHER)

    config = ContractConfig(
        token=TOKEN_ADDR,
        wrapped_native=WETH_ADDR,
        router=ROUTER_ADDR,
        pool=POOL_ADDR,
        burn_sink=BURN_SINK,
    )
    pool_manager = PoolManager(state, tokens, FACTORY_ADDR)
    swap = BurnSwap.deploy(state, config, OWNER, CREATOR, router, pool_manager)
    return FixedWorld(state, tokens, token, weth, router, swap)


@pytest.fixture
def sandbox():
    return build_sandbox()


@pytest.fixture
def fixed_world():
    """Factory: ``fixed_world(output)`` builds a world whose exchange returns *output*."""
    return make_fixed_world
