"""
BurnSwap swap engine

Fee-skimming native ↔ token swaps over an external exchange:
  - Fee engine (burn + creator fee, rounding-consistent inverse)
  - Buy / sell orchestrator with all-or-nothing execution
  - Reentrancy and pause gates
  - Owner-gated administration and read-only diagnostics
  - Committed-event log with subscribers
"""

from .admin import AdminControl
from .contract import BurnSwap
from .events import (
    FEE_KIND_BURN,
    FEE_KIND_CREATOR,
    ApprovalsRecovered,
    CreatorWalletChanged,
    EventLog,
    FeeCollected,
    LoggingSubscriber,
    Paused,
    SwapEvent,
    TradeExecuted,
    Unpaused,
)
from .fees import DEFAULT_FEE_RATES, FeeBreakdown, FeeRates, min_gross_for_net, split
from .gates import PauseGate, ReentrancyGate
from .inspector import ApprovalInspector, PoolStateInspector
from .orchestrator import NATIVE_ASSET, SwapOrchestrator
from .types import (
    ContractConfig,
    GateState,
    MutableState,
    Phase,
    PoolStateReport,
    TradeDirection,
    TradeRecord,
    TradeRequest,
    UserApprovalReport,
)
from .wrap import WrapAdapter

__all__ = [
    # Facade
    "BurnSwap",
    # Fees
    "DEFAULT_FEE_RATES", "FeeBreakdown", "FeeRates", "min_gross_for_net", "split",
    # Engine
    "AdminControl", "ApprovalInspector", "PoolStateInspector", "SwapOrchestrator",
    "WrapAdapter", "PauseGate", "ReentrancyGate", "NATIVE_ASSET",
    # Events
    "FEE_KIND_BURN", "FEE_KIND_CREATOR", "ApprovalsRecovered", "CreatorWalletChanged",
    "EventLog", "FeeCollected", "LoggingSubscriber", "Paused", "SwapEvent",
    "TradeExecuted", "Unpaused",
    # Types
    "ContractConfig", "GateState", "MutableState", "Phase", "PoolStateReport",
    "TradeDirection", "TradeRecord", "TradeRequest", "UserApprovalReport",
]
