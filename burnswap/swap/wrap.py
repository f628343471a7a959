"""
Wrap adapter: moves value between the native asset and its wrapped form on
behalf of the swap engine, and pays native value out to traders.

Every conversion is checked against the balance it should have changed
rather than trusted from the wrapped-native contract.
"""

from __future__ import annotations

import logging

from ..chain.state import LedgerState
from ..chain.weth import WrappedNative
from ..exceptions import LedgerError, PayoutFailure, UnwrapFailure, WrapFailure

logger = logging.getLogger(__name__)


class WrapAdapter:

    def __init__(self, state: LedgerState, weth: WrappedNative, holder: str) -> None:
        self.state = state
        self.weth = weth
        self.holder = holder

    def wrap_in(self, amount: int) -> None:
        """Wrap *amount* of the holder's native balance."""
        if amount == 0:
            return
        before = self.weth.balance_of(self.holder)
        try:
            self.weth.deposit(self.holder, amount)
        except LedgerError as e:
            raise WrapFailure(f"Wrapping {amount} failed: {e}") from e

        credited = self.weth.balance_of(self.holder) - before
        if credited != amount:
            raise WrapFailure(f"Wrapping credited {credited}, expected {amount}")

    def unwrap_out(self, amount: int) -> None:
        """Unwrap *amount* of the holder's wrapped balance back to native."""
        if amount == 0:
            return
        before = self.state.native_balance(self.holder)
        try:
            self.weth.withdraw(self.holder, amount)
        except LedgerError as e:
            raise UnwrapFailure(f"Unwrapping {amount} failed: {e}") from e

        released = self.state.native_balance(self.holder) - before
        if released != amount:
            raise UnwrapFailure(f"Unwrapping released {released}, expected {amount}")

    def pay_out(self, recipient: str, amount: int) -> None:
        """
        Send *amount* of native value to *recipient*.

        The recipient's receive hook runs; if it rejects or raises, the
        payout fails.
        """
        if amount == 0:
            return
        try:
            ok = self.state.send_native(self.holder, recipient, amount)
        except Exception as e:
            raise PayoutFailure(f"Native payout of {amount} to {recipient} raised: {e}") from e
        if ok is not True:
            raise PayoutFailure(f"Native payout of {amount} to {recipient} failed")
        logger.debug("Paid %d native to %s", amount, recipient)
