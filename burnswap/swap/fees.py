"""
Fee engine: pure fee-splitting arithmetic, no I/O.

Every trade pays a burn fee and a creator fee, each a whole number of basis
points of the gross amount. Both fees round down, so the trader's net amount
absorbs the rounding and fees never round up.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from ..constants import BURN_FEE_BPS, CREATOR_FEE_BPS, FEE_DENOMINATOR_BPS
from ..exceptions import ConfigurationError, InvalidInput


@dataclass(frozen=True)
class FeeRates:
    """Fee rates in basis points of ``denominator_bps``."""
    burn_rate_bps: int = BURN_FEE_BPS
    creator_rate_bps: int = CREATOR_FEE_BPS
    denominator_bps: int = FEE_DENOMINATOR_BPS

    def __post_init__(self) -> None:
        for name in ("burn_rate_bps", "creator_rate_bps", "denominator_bps"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")
        if self.denominator_bps == 0:
            raise ConfigurationError("denominator_bps must be positive")
        if self.total_rate_bps >= self.denominator_bps:
            raise ConfigurationError(
                f"Total fee {self.total_rate_bps} bps must be below {self.denominator_bps} bps"
            )

    @property
    def total_rate_bps(self) -> int:
        return self.burn_rate_bps + self.creator_rate_bps

    def to_dict(self) -> Dict[str, int]:
        return {
            "burnRateBps": self.burn_rate_bps,
            "creatorRateBps": self.creator_rate_bps,
            "denominatorBps": self.denominator_bps,
        }


DEFAULT_FEE_RATES = FeeRates()


@dataclass(frozen=True)
class FeeBreakdown:
    """
    Split of a gross amount.

    burn_amount + creator_amount + net_amount == gross_amount
    total_fee_amount == burn_amount + creator_amount
    """
    burn_amount: int
    creator_amount: int
    net_amount: int
    total_fee_amount: int

    @property
    def gross_amount(self) -> int:
        return self.burn_amount + self.creator_amount + self.net_amount

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grossAmount": self.gross_amount,
            "burnAmount": self.burn_amount,
            "creatorAmount": self.creator_amount,
            "netAmount": self.net_amount,
            "totalFeeAmount": self.total_fee_amount,
        }


def split(gross_amount: int, rates: FeeRates = DEFAULT_FEE_RATES) -> FeeBreakdown:
    """
    Split *gross_amount* into burn, creator and net parts.

    Defined for every non-negative integer; 0 splits into all zeros.
    """
    if gross_amount < 0:
        raise InvalidInput(f"Gross amount cannot be negative: {gross_amount}")
    burn = gross_amount * rates.burn_rate_bps // rates.denominator_bps
    creator = gross_amount * rates.creator_rate_bps // rates.denominator_bps
    return FeeBreakdown(
        burn_amount=burn,
        creator_amount=creator,
        net_amount=gross_amount - burn - creator,
        total_fee_amount=burn + creator,
    )


def min_gross_for_net(min_net: int, rates: FeeRates = DEFAULT_FEE_RATES) -> int:
    """
    Smallest gross output the exchange must deliver so that the net amount
    left after ``split`` is at least *min_net*.

    Rounds up: for every gross >= result, split(gross).net_amount >= min_net.
    Returns 0 (no bound) when *min_net* is 0.
    """
    if min_net < 0:
        raise InvalidInput(f"Minimum output cannot be negative: {min_net}")
    if min_net == 0:
        return 0
    keep_bps = rates.denominator_bps - rates.total_rate_bps
    return -(-min_net * rates.denominator_bps // keep_bps)
