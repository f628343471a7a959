"""
Swap engine data model.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict

from ..chain.address import checksum, is_zero_address
from ..constants import DEAD_ADDRESS, DEFAULT_POOL_FEE_TIER
from ..exceptions import ConfigurationError, InvalidInput


class TradeDirection(str, Enum):
    NATIVE_TO_TOKEN = "native_to_token"    # buy
    TOKEN_TO_NATIVE = "token_to_native"    # sell


class Phase(str, Enum):
    """Orchestrator state machine phases."""
    IDLE = "idle"
    WRAPPING_OR_RECEIVING = "wrapping_or_receiving"
    EXCHANGING = "exchanging"
    DISTRIBUTING = "distributing"
    PAYING_OUT = "paying_out"
    REVERTED = "reverted"


class GateState(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"


@dataclass(frozen=True)
class TradeRequest:
    """
    One trade, built per call and never persisted.

    ``min_output`` of 0 means no bound.
    """
    direction: TradeDirection
    input_amount: int
    min_output: int
    initiator: str


@dataclass(frozen=True)
class TradeRecord:
    """What a completed trade moved, as reported to observers."""
    initiator: str
    input_asset: str
    output_asset: str
    input_amount: int
    output_amount: int
    burn_amount: int
    creator_amount: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PoolStateReport:
    pool_exists: bool
    pool_liquidity: int
    exchange_allowance_for_wrapped: int
    exchange_allowance_for_token: int
    own_wrapped_balance: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class UserApprovalReport:
    allowance: int
    balance: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ContractConfig:
    """
    Addresses and exchange parameters fixed at deployment.

    Every address is normalized to checksum form on construction.
    """
    token: str
    wrapped_native: str
    router: str
    pool: str
    burn_sink: str = DEAD_ADDRESS
    fee_tier: int = DEFAULT_POOL_FEE_TIER

    def __post_init__(self) -> None:
        for name in ("token", "wrapped_native", "router", "pool", "burn_sink"):
            try:
                object.__setattr__(self, name, checksum(getattr(self, name)))
            except InvalidInput as e:
                raise ConfigurationError(f"Invalid {name} address: {e}") from e
        if self.token == self.wrapped_native:
            raise ConfigurationError("Token and wrapped native asset must differ")
        if is_zero_address(self.burn_sink):
            raise ConfigurationError("Burn sink cannot be the zero address")
        if not isinstance(self.fee_tier, int) or self.fee_tier <= 0:
            raise ConfigurationError(f"Invalid fee tier: {self.fee_tier!r}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MutableState:
    """Owner-settable deployment state."""
    creator_wallet: str
