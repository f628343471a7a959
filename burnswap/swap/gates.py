"""
Trading gates

  - ReentrancyGate : single-slot lock shared by every trading entry point
  - PauseGate      : owner-controlled circuit breaker

Neither gate checks ownership; AdminControl does that before calling in.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..exceptions import InvalidInput, PausedError, ReentrancyError
from .types import GateState

logger = logging.getLogger(__name__)


class ReentrancyGate:
    """
    Boolean lock, acquired with ``with gate:``.

    Entering while held raises ``ReentrancyError`` and leaves the holder's
    lock untouched. Leaving always clears it, also when the body raises.
    """

    def __init__(self) -> None:
        self._locked: bool = False

    @property
    def locked(self) -> bool:
        return self._locked

    def __enter__(self) -> "ReentrancyGate":
        if self._locked:
            raise ReentrancyError("Reentrant call rejected: swap engine is locked")
        self._locked = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._locked = False


class PauseGate:
    """
    Circuit breaker, ``ACTIVE`` until paused.

    While paused every trading entry point fails with ``PausedError``;
    read-only operations keep working.
    """

    def __init__(self, state: GateState = GateState.ACTIVE) -> None:
        self._state = state
        self._reason: Optional[str] = None

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_paused(self) -> bool:
        return self._state is GateState.PAUSED

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def pause(self, reason: str = "Emergency pause") -> None:
        if self.is_paused:
            raise InvalidInput("Trading is already paused")
        self._state = GateState.PAUSED
        self._reason = reason
        logger.warning("Trading PAUSED: %s", reason)

    def unpause(self) -> None:
        if not self.is_paused:
            raise InvalidInput("Trading is not paused")
        self._state = GateState.ACTIVE
        self._reason = None
        logger.info("Trading RESUMED")

    def require_active(self) -> None:
        if self.is_paused:
            raise PausedError(f"Trading is paused: {self._reason}")
