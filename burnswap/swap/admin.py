"""
Owner-gated administration: creator wallet, pause switch and exchange
approvals.
"""

from __future__ import annotations

from ..chain.address import checksum, is_zero_address
from ..chain.state import LedgerState
from ..chain.token import Token
from ..chain.weth import WrappedNative
from ..constants import MAX_UINT256
from ..exceptions import BurnSwapException, InvalidInput, Unauthorized
from ..logger import get_logger
from .events import ApprovalsRecovered, CreatorWalletChanged, EventLog, Paused, Unpaused
from .gates import PauseGate, ReentrancyGate
from .types import ContractConfig, MutableState

logger = get_logger(__name__)


class AdminControl:
    """
    Every mutating operation checks ``require_owner`` first and runs under
    the same reentrancy gate as trading.
    """

    def __init__(
        self,
        state: LedgerState,
        address: str,
        owner: str,
        config: ContractConfig,
        token: Token,
        weth: WrappedNative,
        mutable: MutableState,
        lock: ReentrancyGate,
        pause_gate: PauseGate,
        events: EventLog,
    ):
        self.state = state
        self.address = address
        self.owner = checksum(owner)
        self.config = config
        self.token = token
        self.weth = weth
        self.mutable = mutable
        self.lock = lock
        self.pause_gate = pause_gate
        self.events = events

    def require_owner(self, caller: str) -> None:
        try:
            caller = checksum(caller)
        except InvalidInput:
            raise Unauthorized(f"Caller {caller!r} is not the owner") from None
        if caller != self.owner:
            raise Unauthorized(f"Caller {caller} is not the owner")

    # -- Creator wallet -----------------------------------------------------

    def set_creator_wallet(self, caller: str, new_wallet: str) -> None:
        self.require_owner(caller)
        with self.lock:
            new_wallet = checksum(new_wallet)
            if is_zero_address(new_wallet):
                raise InvalidInput("Creator wallet cannot be the zero address")
            old_wallet = self.mutable.creator_wallet
            if new_wallet == old_wallet:
                raise InvalidInput("New creator wallet is the same as the current one")

            self.mutable.creator_wallet = new_wallet
            self.events.emit(CreatorWalletChanged(self.address, old_wallet, new_wallet))
            logger.info("Creator wallet changed: %s → %s", old_wallet, new_wallet)

    # -- Pause --------------------------------------------------------------

    def pause(self, caller: str, reason: str = "Emergency pause") -> None:
        self.require_owner(caller)
        with self.lock:
            self.pause_gate.pause(reason)
            self.events.emit(Paused(self.address, checksum(caller)))

    def unpause(self, caller: str) -> None:
        self.require_owner(caller)
        with self.lock:
            self.pause_gate.unpause()
            self.events.emit(Unpaused(self.address, checksum(caller)))

    # -- Approvals ----------------------------------------------------------

    def recover_approvals(self, caller: str) -> None:
        """Reset the engine's router allowances to unlimited for both assets."""
        self.require_owner(caller)
        with self.lock:
            self._approve_router()

    def initialize_approvals(self) -> bool:
        """
        Deployment-time approval setup. Failures are logged, not raised;
        ``recover_approvals`` repairs them later.
        """
        try:
            with self.lock:
                self._approve_router()
        except BurnSwapException as e:
            logger.error("Initial router approvals failed: %s", e)
            return False
        return True

    def _approve_router(self) -> None:
        router = self.config.router
        with self.state.transaction():
            self.weth.approve(self.address, router, MAX_UINT256)
            self.token.approve(self.address, router, MAX_UINT256)
            self.events.emit(ApprovalsRecovered(
                self.address, router,
                wrapped_allowance=self.weth.allowance(self.address, router),
                token_allowance=self.token.allowance(self.address, router),
            ))
        logger.info("Router %s approved for unlimited %s and %s", router, self.weth.symbol, self.token.symbol)
