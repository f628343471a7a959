"""
Test suite for the reference ledger

Covers:
  - Address helpers (checksum, CREATE derivation)
  - LedgerState: native transfers, receive hooks, snapshots, transactions,
    event publication on commit
  - Token: ERC-20 semantics
  - WrappedNative: deposit / withdraw
"""

import pytest

from burnswap.chain import (
    LedgerState,
    Token,
    TokenRegistry,
    TransferEvent,
    WrappedNative,
    address_from_label,
    checksum,
    generate_contract_address,
    is_zero_address,
)
from burnswap.constants import MAX_UINT256, ZERO_ADDRESS
from burnswap.exceptions import (
    InsufficientAllowance,
    InsufficientBalance,
    InvalidInput,
    LedgerError,
)

ADDR_A = address_from_label("ledger:alice")
ADDR_B = address_from_label("ledger:bob")
ADDR_C = address_from_label("ledger:carol")
TOKEN_ADDR = address_from_label("ledger:token")
WETH_ADDR = address_from_label("ledger:weth")


@pytest.fixture
def state():
    return LedgerState()


@pytest.fixture
def token(state):
    t = Token(state, TOKEN_ADDR, "Test Token", "TST")
    t.mint(ADDR_A, 1_000)
    return t


# ============================================================================
#  ADDRESSES
# ============================================================================

class TestAddress:

    def test_checksum_normalizes(self):
        assert checksum(ADDR_A.lower()) == ADDR_A

    def test_checksum_rejects_garbage(self):
        with pytest.raises(InvalidInput, match="Invalid address"):
            checksum("0x1234")
        with pytest.raises(InvalidInput):
            checksum(None)  # type: ignore[arg-type]

    def test_zero_address(self):
        assert is_zero_address(ZERO_ADDRESS)
        assert not is_zero_address(ADDR_A)

    def test_create_address_known_vector(self):
        sender = "0x6ac7ea33f8831ea9dcc53393aaa88b25a785dbf0"
        assert generate_contract_address(sender, 0).lower() == "0xcd234a471b72ba2f1ccf0a70fcaba648a5eecd8d"
        assert generate_contract_address(sender, 1).lower() == "0x343c43a37d37dff08ae8c4a11544c718abb4fcf8"

    def test_label_addresses_deterministic(self):
        assert address_from_label("x") == address_from_label("x")
        assert address_from_label("x") != address_from_label("y")


# ============================================================================
#  LEDGER STATE
# ============================================================================

class TestNativeBalances:

    def test_mint_and_transfer(self, state):
        state.mint_native(ADDR_A, 100)
        state.transfer_native(ADDR_A, ADDR_B, 40)
        assert state.native_balance(ADDR_A) == 60
        assert state.native_balance(ADDR_B) == 40

    def test_transfer_insufficient(self, state):
        state.mint_native(ADDR_A, 10)
        with pytest.raises(InsufficientBalance):
            state.transfer_native(ADDR_A, ADDR_B, 11)
        assert state.native_balance(ADDR_A) == 10

    def test_send_native_runs_hook(self, state):
        seen = []
        state.mint_native(ADDR_A, 100)
        state.register_receiver(ADDR_B, lambda sender, amount: seen.append((sender, amount)) or True)
        assert state.send_native(ADDR_A, ADDR_B, 30) is True
        assert seen == [(ADDR_A, 30)]
        assert state.native_balance(ADDR_B) == 30

    def test_send_native_rejected_by_hook(self, state):
        state.mint_native(ADDR_A, 100)
        state.register_receiver(ADDR_B, lambda sender, amount: False)
        assert state.send_native(ADDR_A, ADDR_B, 30) is False
        assert state.native_balance(ADDR_A) == 100
        assert state.native_balance(ADDR_B) == 0

    def test_send_native_hook_raises(self, state):
        def hook(sender, amount):
            state.mint_native(ADDR_C, 5)
            raise RuntimeError("no thanks")

        state.mint_native(ADDR_A, 100)
        state.register_receiver(ADDR_B, hook)
        assert state.send_native(ADDR_A, ADDR_B, 30) is False
        # the hook's own changes are reverted too
        assert state.native_balance(ADDR_C) == 0
        assert state.native_balance(ADDR_A) == 100

    def test_send_native_insufficient_returns_false(self, state):
        assert state.send_native(ADDR_A, ADDR_B, 1) is False

    def test_unregister_receiver(self, state):
        state.mint_native(ADDR_A, 10)
        state.register_receiver(ADDR_B, lambda s, a: False)
        state.unregister_receiver(ADDR_B)
        assert state.send_native(ADDR_A, ADDR_B, 10) is True


class TestSnapshots:

    def test_revert_restores_everything(self, state, token):
        state.mint_native(ADDR_A, 50)
        sid = state.snapshot()
        state.transfer_native(ADDR_A, ADDR_B, 50)
        token.transfer(ADDR_A, ADDR_B, 500)
        state.next_nonce(ADDR_A)
        state.revert(sid)
        assert state.native_balance(ADDR_A) == 50
        assert token.balance_of(ADDR_A) == 1_000
        assert token.balance_of(ADDR_B) == 0
        assert state.next_nonce(ADDR_A) == 0
        assert not state.in_transaction

    def test_invalid_snapshot_id(self, state):
        with pytest.raises(ValueError):
            state.revert(0)
        with pytest.raises(ValueError):
            state.release(3)

    def test_transaction_commits(self, state, token):
        with state.transaction():
            token.transfer(ADDR_A, ADDR_B, 10)
        assert token.balance_of(ADDR_B) == 10

    def test_transaction_reverts_on_error(self, state, token):
        with pytest.raises(LedgerError):
            with state.transaction():
                token.transfer(ADDR_A, ADDR_B, 10)
                token.transfer(ADDR_A, ADDR_C, 10_000)
        assert token.balance_of(ADDR_A) == 1_000
        assert token.balance_of(ADDR_B) == 0

    def test_nested_inner_revert_keeps_outer(self, state, token):
        with state.transaction():
            token.transfer(ADDR_A, ADDR_B, 10)
            with pytest.raises(InsufficientBalance):
                with state.transaction():
                    token.transfer(ADDR_A, ADDR_C, 5)
                    token.transfer(ADDR_C, ADDR_B, 6)
        assert token.balance_of(ADDR_B) == 10
        assert token.balance_of(ADDR_C) == 0


class TestEventPublication:

    def test_published_immediately_outside_transaction(self, state, token):
        seen = []
        state.subscribe(seen.append)
        token.transfer(ADDR_A, ADDR_B, 1)
        assert len(seen) == 1
        assert isinstance(seen[0], TransferEvent)

    def test_published_on_commit_only(self, state, token):
        seen = []
        state.subscribe(seen.append)
        with state.transaction():
            token.transfer(ADDR_A, ADDR_B, 1)
            token.transfer(ADDR_A, ADDR_B, 1)
            assert seen == []
        assert len(seen) == 2

    def test_dropped_on_revert(self, state, token):
        seen = []
        state.subscribe(seen.append)
        logs_before = len(state.logs)
        with pytest.raises(InsufficientBalance):
            with state.transaction():
                token.transfer(ADDR_A, ADDR_B, 1)
                token.transfer(ADDR_A, ADDR_B, 5_000)
        assert seen == []
        assert len(state.logs) == logs_before

    def test_failing_subscriber_isolated(self, state, token):
        seen = []

        def broken(event):
            raise RuntimeError("subscriber down")

        state.subscribe(broken)
        state.subscribe(seen.append)
        token.transfer(ADDR_A, ADDR_B, 1)
        assert len(seen) == 1
        assert token.balance_of(ADDR_B) == 1

    def test_unsubscribe(self, state, token):
        seen = []
        subscriber = seen.append
        state.subscribe(subscriber)
        state.unsubscribe(subscriber)
        token.transfer(ADDR_A, ADDR_B, 1)
        assert seen == []


# ============================================================================
#  TOKEN
# ============================================================================

class TestToken:

    def test_metadata(self, token):
        assert token.symbol == "TST"
        assert token.decimals == 18
        assert token.total_supply == 1_000
        assert token.to_dict()["totalSupply"] == 1_000

    def test_invalid_metadata(self, state):
        with pytest.raises(LedgerError, match="name"):
            Token(state, TOKEN_ADDR, "", "X")
        with pytest.raises(LedgerError, match="Decimals"):
            Token(state, TOKEN_ADDR, "X", "X", decimals=19)

    def test_transfer(self, token):
        assert token.transfer(ADDR_A, ADDR_B, 300) is True
        assert token.balance_of(ADDR_A) == 700
        assert token.balance_of(ADDR_B) == 300

    def test_transfer_insufficient(self, token):
        with pytest.raises(InsufficientBalance):
            token.transfer(ADDR_B, ADDR_A, 1)

    def test_transfer_to_zero_rejected(self, token):
        with pytest.raises(LedgerError, match="zero address"):
            token.transfer(ADDR_A, ZERO_ADDRESS, 1)

    def test_transfer_from_uses_allowance(self, token):
        token.approve(ADDR_A, ADDR_B, 100)
        token.transfer_from(ADDR_B, ADDR_A, ADDR_C, 60)
        assert token.allowance(ADDR_A, ADDR_B) == 40
        assert token.balance_of(ADDR_C) == 60

    def test_transfer_from_without_allowance(self, token):
        with pytest.raises(InsufficientAllowance):
            token.transfer_from(ADDR_B, ADDR_A, ADDR_C, 1)
        assert token.balance_of(ADDR_A) == 1_000

    def test_transfer_from_allowance_checked_before_balance(self, token):
        token.approve(ADDR_C, ADDR_B, 10)
        with pytest.raises(InsufficientBalance):
            token.transfer_from(ADDR_B, ADDR_C, ADDR_A, 10)
        assert token.allowance(ADDR_C, ADDR_B) == 10

    def test_unlimited_allowance_not_decremented(self, token):
        token.approve(ADDR_A, ADDR_B, MAX_UINT256)
        token.transfer_from(ADDR_B, ADDR_A, ADDR_C, 500)
        assert token.allowance(ADDR_A, ADDR_B) == MAX_UINT256

    def test_approve_out_of_range(self, token):
        with pytest.raises(LedgerError, match="out of range"):
            token.approve(ADDR_A, ADDR_B, MAX_UINT256 + 1)

    def test_burn(self, token):
        token.burn(ADDR_A, 400)
        assert token.total_supply == 600
        with pytest.raises(InsufficientBalance):
            token.burn(ADDR_A, 601)


class TestTokenRegistry:

    def test_register_and_lookup(self, state, token):
        reg = TokenRegistry()
        reg.register(token)
        assert reg.get(TOKEN_ADDR.lower()) is token
        assert reg.get("not-an-address") is None
        assert reg.count == 1

    def test_duplicate_rejected(self, state, token):
        reg = TokenRegistry()
        reg.register(token)
        with pytest.raises(LedgerError, match="already registered"):
            reg.register(token)

    def test_get_or_raise(self):
        with pytest.raises(LedgerError, match="not found"):
            TokenRegistry().get_or_raise(ADDR_A)


# ============================================================================
#  WRAPPED NATIVE
# ============================================================================

class TestWrappedNative:

    def test_deposit_withdraw(self, state):
        weth = WrappedNative(state, WETH_ADDR)
        state.mint_native(ADDR_A, 1_000)
        weth.deposit(ADDR_A, 400)
        assert weth.balance_of(ADDR_A) == 400
        assert weth.locked_native == 400
        assert state.native_balance(ADDR_A) == 600
        weth.withdraw(ADDR_A, 150)
        assert weth.balance_of(ADDR_A) == 250
        assert state.native_balance(ADDR_A) == 750
        assert weth.symbol == "WETH"

    def test_deposit_without_native(self, state):
        weth = WrappedNative(state, WETH_ADDR)
        with pytest.raises(InsufficientBalance):
            weth.deposit(ADDR_A, 1)

    def test_zero_amounts_rejected(self, state):
        weth = WrappedNative(state, WETH_ADDR)
        with pytest.raises(LedgerError, match="positive"):
            weth.deposit(ADDR_A, 0)
        with pytest.raises(LedgerError, match="positive"):
            weth.withdraw(ADDR_A, 0)

    def test_withdraw_rejected_by_receiver(self, state):
        weth = WrappedNative(state, WETH_ADDR)
        state.mint_native(ADDR_A, 100)
        weth.deposit(ADDR_A, 100)
        state.register_receiver(ADDR_A, lambda sender, amount: False)
        with pytest.raises(LedgerError, match="failed"):
            with state.transaction():
                weth.withdraw(ADDR_A, 100)
        assert weth.balance_of(ADDR_A) == 100
        assert state.native_balance(ADDR_A) == 0
