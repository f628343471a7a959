"""
In-memory ledger state with snapshot / revert.

Holds every balance the swap engine touches: native balances per account,
contract storage (token balances, allowances, supplies) and the event log.
All of it is covered by the snapshot stack, so a trade wrapped in
``transaction()`` either commits as a whole or leaves no trace.

Events emitted inside a transaction are published to subscribers only when
the outermost transaction commits.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Tuple

from ..exceptions import InsufficientBalance, InvalidInput

logger = logging.getLogger(__name__)

ReceiveHook = Callable[[str, int], bool]
EventSubscriber = Callable[[Any], None]


class LedgerState:
    """
    Account and contract-storage state for a single simulated chain.

    Provides:
    - Native balances with strict (raising) and call-style (bool) transfers
    - Per-contract integer storage slots
    - Receive hooks, invoked when an account is sent native value
    - Nested snapshots and reverts
    - Append-only event log, published on commit
    """

    def __init__(self) -> None:
        self._native: Dict[str, int] = {}
        self._storage: Dict[Tuple[str, Any], int] = {}
        self._nonces: Dict[str, int] = {}
        self._logs: List[Any] = []
        self._snapshots: List[Dict[str, Any]] = []
        self._receivers: Dict[str, ReceiveHook] = {}
        self._subscribers: List[EventSubscriber] = []

    # -- Native balances ----------------------------------------------------

    def native_balance(self, address: str) -> int:
        return self._native.get(address, 0)

    def mint_native(self, address: str, amount: int) -> None:
        """Credit native value out of thin air (genesis allocation)."""
        if amount < 0:
            raise InvalidInput("Mint amount cannot be negative")
        self._native[address] = self.native_balance(address) + amount

    def transfer_native(self, sender: str, recipient: str, amount: int) -> None:
        """
        Move native value attached to a call. Does not run receive hooks.

        Raises:
            InsufficientBalance: if *sender* cannot cover *amount*
        """
        if amount < 0:
            raise InvalidInput("Native amount cannot be negative")
        bal = self.native_balance(sender)
        if bal < amount:
            raise InsufficientBalance(
                f"{sender} native balance {bal} < amount {amount}"
            )
        self._native[sender] = bal - amount
        self._native[recipient] = self.native_balance(recipient) + amount

    def send_native(self, sender: str, recipient: str, amount: int) -> bool:
        """
        Send native value like a low-level call: runs the recipient's receive
        hook and reports success instead of raising.

        A hook that raises or returns False rejects the transfer; everything
        it did is reverted and False is returned.
        """
        sid = self.snapshot()
        try:
            self.transfer_native(sender, recipient, amount)
            hook = self._receivers.get(recipient)
            accepted = True if hook is None else bool(hook(sender, amount))
        except Exception as e:
            logger.debug("Native send %s → %s (%d) rejected: %s", sender, recipient, amount, e)
            accepted = False

        if not accepted:
            self.revert(sid)
            return False
        self.release(sid)
        return True

    def register_receiver(self, address: str, hook: ReceiveHook) -> None:
        self._receivers[address] = hook

    def unregister_receiver(self, address: str) -> None:
        self._receivers.pop(address, None)

    # -- Contract storage ---------------------------------------------------

    def load(self, contract: str, key: Any) -> int:
        return self._storage.get((contract, key), 0)

    def store(self, contract: str, key: Any, value: int) -> None:
        if value:
            self._storage[(contract, key)] = value
        else:
            self._storage.pop((contract, key), None)

    def next_nonce(self, address: str) -> int:
        """Return the current nonce of *address* and advance it."""
        nonce = self._nonces.get(address, 0)
        self._nonces[address] = nonce + 1
        return nonce

    # -- Event log ----------------------------------------------------------

    def emit(self, event: Any) -> None:
        self._logs.append(event)
        if not self.in_transaction:
            self._publish([event])

    @property
    def logs(self) -> List[Any]:
        return list(self._logs)

    def subscribe(self, subscriber: EventSubscriber) -> None:
        self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: EventSubscriber) -> None:
        self._subscribers = [s for s in self._subscribers if s is not subscriber]

    def _publish(self, events: List[Any]) -> None:
        for event in events:
            for subscriber in self._subscribers:
                try:
                    subscriber(event)
                except Exception as e:
                    logger.error("Event subscriber %r failed: %s", subscriber, e)

    # -- Snapshots ----------------------------------------------------------

    @property
    def in_transaction(self) -> bool:
        return bool(self._snapshots)

    def snapshot(self) -> int:
        """
        Create state snapshot for revert.

        Returns:
            Snapshot ID
        """
        snapshot = {
            'native': dict(self._native),
            'storage': dict(self._storage),
            'nonces': dict(self._nonces),
            'log_length': len(self._logs),
        }
        self._snapshots.append(snapshot)
        return len(self._snapshots) - 1

    def revert(self, snapshot_id: int) -> None:
        """
        Revert state to snapshot, dropping it and every newer one.

        Args:
            snapshot_id: Snapshot ID from snapshot()
        """
        if snapshot_id < 0 or snapshot_id >= len(self._snapshots):
            raise ValueError(f"Invalid snapshot ID: {snapshot_id}")

        snapshot = self._snapshots[snapshot_id]
        self._native = snapshot['native']
        self._storage = snapshot['storage']
        self._nonces = snapshot['nonces']
        del self._logs[snapshot['log_length']:]

        self._snapshots = self._snapshots[:snapshot_id]

    def release(self, snapshot_id: int) -> None:
        """
        Keep the changes made since *snapshot_id* and drop the snapshot.

        Releasing the outermost snapshot commits: events logged since then
        are published.
        """
        if snapshot_id < 0 or snapshot_id >= len(self._snapshots):
            raise ValueError(f"Invalid snapshot ID: {snapshot_id}")

        log_length = self._snapshots[snapshot_id]['log_length']
        self._snapshots = self._snapshots[:snapshot_id]
        if not self._snapshots:
            self._publish(self._logs[log_length:])

    @contextmanager
    def transaction(self) -> Iterator[int]:
        """
        All-or-nothing boundary: reverts every change made in the body if
        it raises, otherwise keeps them.
        """
        sid = self.snapshot()
        try:
            yield sid
        except BaseException:
            self.revert(sid)
            raise
        self.release(sid)
