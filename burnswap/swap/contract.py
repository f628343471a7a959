"""
BurnSwap deployment facade.

Wires the gates, wrap adapter, orchestrator, inspectors and admin control
of one deployment together and exposes the public query / mutating surface.
"""

from __future__ import annotations

from typing import List, Optional

from ..chain.address import checksum, generate_contract_address, is_zero_address
from ..chain.state import LedgerState
from ..chain.token import Token
from ..chain.weth import WrappedNative
from ..exceptions import ConfigurationError, InvalidInput
from ..exchange.amm import PoolManager
from ..exchange.router import SwapRouter
from ..logger import get_logger
from .admin import AdminControl
from .events import EventLog, EventSubscriber, LoggingSubscriber, SwapEvent
from .fees import DEFAULT_FEE_RATES, FeeBreakdown, FeeRates, split
from .gates import PauseGate, ReentrancyGate
from .inspector import ApprovalInspector, PoolStateInspector
from .orchestrator import SwapOrchestrator
from .types import ContractConfig, MutableState, Phase, PoolStateReport, UserApprovalReport
from .wrap import WrapAdapter

logger = get_logger(__name__)


class BurnSwap:
    """
    One deployed swap engine.

    Use ``BurnSwap.deploy`` to create an instance; it derives the engine's
    address from the owner's nonce and sets up router approvals.
    """

    def __init__(
        self,
        state: LedgerState,
        address: str,
        config: ContractConfig,
        owner: str,
        creator_wallet: str,
        router: SwapRouter,
        pool_manager: PoolManager,
        rates: FeeRates = DEFAULT_FEE_RATES,
    ):
        token = router.tokens.get(config.token)
        weth = router.tokens.get(config.wrapped_native)
        if token is None:
            raise ConfigurationError(f"Token {config.token} is not registered with the exchange")
        if not isinstance(weth, WrappedNative):
            raise ConfigurationError(f"{config.wrapped_native} is not a wrapped native asset")
        if router.address != config.router:
            raise ConfigurationError(f"Router {router.address} does not match configured {config.router}")

        creator_wallet = checksum(creator_wallet)
        if is_zero_address(creator_wallet):
            raise InvalidInput("Creator wallet cannot be the zero address")

        self.state = state
        self.address = checksum(address)
        self.config = config
        self.rates = rates
        self.token: Token = token
        self.weth: WrappedNative = weth
        self.router = router
        self.pool_manager = pool_manager

        self._mutable = MutableState(creator_wallet=creator_wallet)
        self._lock = ReentrancyGate()
        self._pause_gate = PauseGate()
        self._events = EventLog(state, self.address)

        self._adapter = WrapAdapter(state, weth, self.address)
        self._orchestrator = SwapOrchestrator(
            state, self.address, config, token, weth, router, self._adapter,
            self._lock, self._pause_gate, self._mutable, self._events, rates,
        )
        self._pool_inspector = PoolStateInspector(self.address, config, token, weth, pool_manager)
        self._approval_inspector = ApprovalInspector(self.address, token)
        self._admin = AdminControl(
            state, self.address, owner, config, token, weth,
            self._mutable, self._lock, self._pause_gate, self._events,
        )

        state.register_receiver(self.address, self.receive_native)

    @classmethod
    def deploy(
        cls,
        state: LedgerState,
        config: ContractConfig,
        owner: str,
        creator_wallet: str,
        router: SwapRouter,
        pool_manager: PoolManager,
        rates: FeeRates = DEFAULT_FEE_RATES,
        log_events: bool = False,
    ) -> "BurnSwap":
        owner = checksum(owner)
        address = generate_contract_address(owner, state.next_nonce(owner))
        swap = cls(state, address, config, owner, creator_wallet, router, pool_manager, rates)
        if log_events:
            swap.subscribe(LoggingSubscriber())
        swap._admin.initialize_approvals()
        logger.info("BurnSwap deployed at %s (token=%s owner=%s)", address, config.token, owner)
        return swap

    # -- Queries ------------------------------------------------------------

    @property
    def owner(self) -> str:
        return self._admin.owner

    @property
    def creator_wallet(self) -> str:
        return self._mutable.creator_wallet

    @property
    def phase(self) -> Phase:
        return self._orchestrator.phase

    @property
    def locked(self) -> bool:
        return self._lock.locked

    def paused(self) -> bool:
        return self._pause_gate.is_paused

    def estimate_buy_fees(self, gross_token_out: int) -> FeeBreakdown:
        """Fee split of a buy whose exchange output is *gross_token_out*."""
        return split(gross_token_out, self.rates)

    def estimate_sell_fees(self, token_amount: int) -> FeeBreakdown:
        return split(token_amount, self.rates)

    def check_pool_state(self) -> PoolStateReport:
        return self._pool_inspector.check_pool_state()

    def check_user_approval(self, user: str) -> UserApprovalReport:
        return self._approval_inspector.check_user_approval(user)

    def events(self, event_type: Optional[type] = None) -> List[SwapEvent]:
        if event_type is None:
            return self._events.records
        return self._events.of_type(event_type)

    def subscribe(self, subscriber: EventSubscriber) -> None:
        self._events.subscribe(subscriber)

    def unsubscribe(self, subscriber: EventSubscriber) -> None:
        self._events.unsubscribe(subscriber)

    # -- Trading ------------------------------------------------------------

    def buy_native_for_token(self, initiator: str, value: int, min_output: int = 0) -> int:
        return self._orchestrator.buy(initiator, value, min_output)

    def sell_token_for_native(self, initiator: str, amount: int, min_output: int = 0) -> int:
        return self._orchestrator.sell(initiator, amount, min_output)

    def receive_native(self, sender: str, amount: int) -> bool:
        """Plain native transfers are accepted only from the wrapped-native contract."""
        if sender != self.weth.address:
            raise InvalidInput(f"Direct native transfers from {sender} are not accepted")
        return True

    # -- Admin --------------------------------------------------------------

    def set_creator_wallet(self, caller: str, new_wallet: str) -> None:
        self._admin.set_creator_wallet(caller, new_wallet)

    def recover_approvals(self, caller: str) -> None:
        self._admin.recover_approvals(caller)

    def pause(self, caller: str, reason: str = "Emergency pause") -> None:
        self._admin.pause(caller, reason)

    def unpause(self, caller: str) -> None:
        self._admin.unpause(caller)

    def to_dict(self):
        return {
            "address": self.address,
            "owner": self.owner,
            "creatorWallet": self.creator_wallet,
            "paused": self.paused(),
            "config": self.config.to_dict(),
            "fees": self.rates.to_dict(),
        }

    def __repr__(self) -> str:
        return f"<BurnSwap {self.address} token={self.config.token}>"
