"""
Swap orchestrator: the buy / sell state machine.

    IDLE → WRAPPING_OR_RECEIVING → EXCHANGING → DISTRIBUTING → PAYING_OUT → IDLE
                          any non-idle phase → REVERTED → IDLE

A trade runs under the reentrancy gate and inside one ledger transaction.
Any failure reverts every balance, allowance and event the trade touched.
"""

from __future__ import annotations

from dataclasses import replace

from ..chain.address import checksum
from ..chain.state import LedgerState
from ..chain.token import Token
from ..chain.weth import WrappedNative
from ..constants import ZERO_ADDRESS
from ..exceptions import (
    ExchangeError,
    ExternalSwapFailure,
    InvalidInput,
    LedgerError,
    SlippageExceeded,
    TransferFailed,
)
from ..exchange.router import ExactInputSingleParams, SwapRouter
from ..logger import get_logger
from .events import FEE_KIND_BURN, FEE_KIND_CREATOR, EventLog, FeeCollected, TradeExecuted
from .fees import DEFAULT_FEE_RATES, FeeBreakdown, FeeRates, min_gross_for_net, split
from .gates import PauseGate, ReentrancyGate
from .types import ContractConfig, MutableState, Phase, TradeDirection, TradeRecord, TradeRequest
from .wrap import WrapAdapter

logger = get_logger(__name__)

# Asset identifier used for the native asset in trade records.
NATIVE_ASSET = ZERO_ADDRESS


class SwapOrchestrator:
    """
    Executes trades for one deployment.

    Holds no balances of its own between calls: everything it receives
    during a trade is paid out (fees, net output) before the trade commits.
    """

    def __init__(
        self,
        state: LedgerState,
        address: str,
        config: ContractConfig,
        token: Token,
        weth: WrappedNative,
        router: SwapRouter,
        adapter: WrapAdapter,
        lock: ReentrancyGate,
        pause_gate: PauseGate,
        mutable: MutableState,
        events: EventLog,
        rates: FeeRates = DEFAULT_FEE_RATES,
    ):
        self.state = state
        self.address = address
        self.config = config
        self.token = token
        self.weth = weth
        self.router = router
        self.adapter = adapter
        self.lock = lock
        self.pause_gate = pause_gate
        self.mutable = mutable
        self.events = events
        self.rates = rates
        self._phase = Phase.IDLE

    @property
    def phase(self) -> Phase:
        return self._phase

    def _enter(self, phase: Phase) -> None:
        logger.debug("Phase %s → %s", self._phase.value, phase.value)
        self._phase = phase

    # -- Entry points -------------------------------------------------------

    def buy(self, initiator: str, value: int, min_output: int = 0) -> int:
        """Trade *value* native for tokens. Returns the net tokens delivered."""
        return self.execute(TradeRequest(TradeDirection.NATIVE_TO_TOKEN, value, min_output, initiator))

    def sell(self, initiator: str, amount: int, min_output: int = 0) -> int:
        """Trade *amount* tokens for native. Returns the native amount paid."""
        return self.execute(TradeRequest(TradeDirection.TOKEN_TO_NATIVE, amount, min_output, initiator))

    def execute(self, request: TradeRequest) -> int:
        self.pause_gate.require_active()

        with self.lock:
            request = self._validate(request)
            try:
                with self.state.transaction():
                    if request.direction is TradeDirection.NATIVE_TO_TOKEN:
                        output = self._buy(request)
                    else:
                        output = self._sell(request)
            except Exception as e:
                self._enter(Phase.REVERTED)
                logger.warning(
                    "Trade reverted (%s %d by %s): %s: %s",
                    request.direction.value, request.input_amount, request.initiator,
                    type(e).__name__, e,
                )
                raise
            finally:
                self._enter(Phase.IDLE)

        return output

    # -- Directional sequences ----------------------------------------------

    def _buy(self, request: TradeRequest) -> int:
        self._enter(Phase.WRAPPING_OR_RECEIVING)
        self.state.transfer_native(request.initiator, self.address, request.input_amount)
        self.adapter.wrap_in(request.input_amount)

        self._enter(Phase.EXCHANGING)
        gross_out = self._swap_exact_input(
            self.weth, self.token, request.input_amount,
            min_gross_for_net(request.min_output, self.rates),
        )

        self._enter(Phase.DISTRIBUTING)
        breakdown = split(gross_out, self.rates)
        if request.min_output > 0 and breakdown.net_amount < request.min_output:
            raise SlippageExceeded(
                f"Net output {breakdown.net_amount} below minimum {request.min_output}"
            )
        self._distribute_fees(breakdown)

        self._enter(Phase.PAYING_OUT)
        self._safe_transfer(self.token, request.initiator, breakdown.net_amount)

        self._record(TradeRecord(
            initiator=request.initiator,
            input_asset=NATIVE_ASSET,
            output_asset=self.token.address,
            input_amount=request.input_amount,
            output_amount=breakdown.net_amount,
            burn_amount=breakdown.burn_amount,
            creator_amount=breakdown.creator_amount,
        ))
        return breakdown.net_amount

    def _sell(self, request: TradeRequest) -> int:
        self._enter(Phase.WRAPPING_OR_RECEIVING)
        self.token.transfer_from(self.address, request.initiator, self.address, request.input_amount)

        self._enter(Phase.DISTRIBUTING)
        breakdown = split(request.input_amount, self.rates)
        self._distribute_fees(breakdown)

        self._enter(Phase.EXCHANGING)
        native_out = self._swap_exact_input(
            self.token, self.weth, breakdown.net_amount, request.min_output,
        )
        # Same integer comparison as the exchange floor.
        if request.min_output > 0 and native_out < request.min_output:
            raise SlippageExceeded(f"Output {native_out} below minimum {request.min_output}")

        self._enter(Phase.PAYING_OUT)
        self.adapter.unwrap_out(native_out)
        self.adapter.pay_out(request.initiator, native_out)

        self._record(TradeRecord(
            initiator=request.initiator,
            input_asset=self.token.address,
            output_asset=NATIVE_ASSET,
            input_amount=request.input_amount,
            output_amount=native_out,
            burn_amount=breakdown.burn_amount,
            creator_amount=breakdown.creator_amount,
        ))
        return native_out

    # -- Steps --------------------------------------------------------------

    def _validate(self, request: TradeRequest) -> TradeRequest:
        for name in ("input_amount", "min_output"):
            value = getattr(request, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidInput(f"{name} must be an integer, got {value!r}")
        if request.input_amount <= 0:
            raise InvalidInput("Trade amount must be greater than zero")
        if request.min_output < 0:
            raise InvalidInput("Minimum output cannot be negative")
        return replace(request, initiator=checksum(request.initiator))

    def _swap_exact_input(self, token_in: Token, token_out: Token, amount_in: int, amount_out_minimum: int) -> int:
        """
        Swap through the router with the engine as payer and recipient.

        The output is measured as the engine's balance delta and must match
        what the router reports.
        """
        params = ExactInputSingleParams(
            token_in=token_in.address,
            token_out=token_out.address,
            fee=self.config.fee_tier,
            recipient=self.address,
            amount_in=amount_in,
            amount_out_minimum=amount_out_minimum,
            sqrt_price_limit_x96=0,
        )
        before = token_out.balance_of(self.address)
        try:
            reported = self.router.exact_input_single(self.address, params)
        except (ExchangeError, LedgerError) as e:
            raise ExternalSwapFailure(f"Exchange swap failed: {e}") from e

        received = token_out.balance_of(self.address) - before
        if received != reported:
            raise ExternalSwapFailure(
                f"Exchange reported {reported} {token_out.symbol} but delivered {received}"
            )
        return received

    def _distribute_fees(self, breakdown: FeeBreakdown) -> None:
        burn_sink = self.config.burn_sink
        creator = self.mutable.creator_wallet

        self._safe_transfer(self.token, burn_sink, breakdown.burn_amount)
        self._safe_transfer(self.token, creator, breakdown.creator_amount)

        self.events.emit(FeeCollected(
            contract=self.address, asset=self.token.address, recipient=burn_sink,
            amount=breakdown.burn_amount, kind=FEE_KIND_BURN,
        ))
        self.events.emit(FeeCollected(
            contract=self.address, asset=self.token.address, recipient=creator,
            amount=breakdown.creator_amount, kind=FEE_KIND_CREATOR,
        ))

    def _safe_transfer(self, ledger: Token, recipient: str, amount: int) -> None:
        if amount == 0:
            return
        if ledger.transfer(self.address, recipient, amount) is not True:
            raise TransferFailed(f"{ledger.symbol} transfer of {amount} to {recipient} failed")

    def _record(self, record: TradeRecord) -> None:
        self.events.emit(TradeExecuted.from_record(self.address, record))
        logger.info(
            "Trade %s: %d %s → %d %s (burn=%d creator=%d)",
            record.initiator, record.input_amount, record.input_asset,
            record.output_amount, record.output_asset,
            record.burn_amount, record.creator_amount,
        )
