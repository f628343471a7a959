"""
Swap engine events and observers.

Events are emitted onto the ledger log, so events raised inside a trade are
published only when the trade commits and are dropped when it reverts.
``EventLog`` collects the committed events of one deployment and forwards
them to its subscribers in registration order.
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List

from ..chain.state import LedgerState
from ..logger import get_logger
from .types import TradeRecord

logger = logging.getLogger(__name__)

FEE_KIND_BURN = "burn"
FEE_KIND_CREATOR = "creator"


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SwapEvent:
    """Base of every event the swap engine emits."""
    contract: str

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["event"] = self.name
        return data


@dataclass(frozen=True)
class TradeExecuted(SwapEvent):
    initiator: str
    input_asset: str
    output_asset: str
    input_amount: int
    output_amount: int
    burn_amount: int
    creator_amount: int
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def from_record(cls, contract: str, record: TradeRecord) -> "TradeExecuted":
        return cls(contract=contract, **record.to_dict())

    def to_record(self) -> TradeRecord:
        return TradeRecord(
            initiator=self.initiator,
            input_asset=self.input_asset,
            output_asset=self.output_asset,
            input_amount=self.input_amount,
            output_amount=self.output_amount,
            burn_amount=self.burn_amount,
            creator_amount=self.creator_amount,
        )


@dataclass(frozen=True)
class FeeCollected(SwapEvent):
    asset: str
    recipient: str
    amount: int
    kind: str
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class CreatorWalletChanged(SwapEvent):
    old_wallet: str
    new_wallet: str
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class Paused(SwapEvent):
    account: str
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class Unpaused(SwapEvent):
    account: str
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class ApprovalsRecovered(SwapEvent):
    router: str
    wrapped_allowance: int
    token_allowance: int
    timestamp: float = field(default_factory=time.time)


EventSubscriber = Callable[[SwapEvent], None]


# ---------------------------------------------------------------------------
# Event log
# ---------------------------------------------------------------------------

class EventLog:
    """
    Append-only log of committed events for one deployment.

    Subscribers run in registration order. A subscriber that raises is
    logged and skipped; it never aborts the trade that produced the event.
    """

    def __init__(self, state: LedgerState, contract: str) -> None:
        self.state = state
        self.contract = contract
        self._records: List[SwapEvent] = []
        self._subscribers: List[EventSubscriber] = []
        state.subscribe(self._on_ledger_event)

    def emit(self, event: SwapEvent) -> None:
        """Queue *event* on the ledger log; published on commit."""
        self.state.emit(event)

    def subscribe(self, subscriber: EventSubscriber) -> None:
        self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: EventSubscriber) -> None:
        self._subscribers = [s for s in self._subscribers if s is not subscriber]

    @property
    def records(self) -> List[SwapEvent]:
        return list(self._records)

    def of_type(self, event_type: type) -> List[SwapEvent]:
        return [e for e in self._records if isinstance(e, event_type)]

    def _on_ledger_event(self, event: Any) -> None:
        if not isinstance(event, SwapEvent) or event.contract != self.contract:
            return
        self._records.append(event)
        for subscriber in self._subscribers:
            try:
                subscriber(event)
            except Exception as e:
                logger.error("Event subscriber %r failed on %s: %s", subscriber, event.name, e)


class LoggingSubscriber:
    """Writes every committed event to the package logger."""

    def __init__(self, name: str = "burnswap.events", level: int = logging.INFO) -> None:
        self.logger = get_logger(name)
        self.level = level

    def __call__(self, event: SwapEvent) -> None:
        if isinstance(event, TradeExecuted):
            self.logger.log(
                self.level,
                "[TRADE] %s: %d %s → %d %s (burn=%d creator=%d)",
                event.initiator, event.input_amount, event.input_asset,
                event.output_amount, event.output_asset,
                event.burn_amount, event.creator_amount,
            )
        elif isinstance(event, FeeCollected):
            self.logger.log(
                self.level, "[FEE] %s %d %s → %s",
                event.kind, event.amount, event.asset, event.recipient,
            )
        else:
            self.logger.log(self.level, "[EVENT] %s %s", event.name, event.to_dict())
