"""
BurnSwap Exceptions

Custom exception classes for the swap engine and its ledger collaborators.
Every error aborts the whole operation it was raised in.
"""


class BurnSwapException(Exception):
    """Base exception for BurnSwap."""
    pass


class InvalidInput(BurnSwapException):
    """Zero amount, bad address, or a no-op admin change."""
    pass


class LedgerError(BurnSwapException):
    """Ledger-layer failure (transfer, approval, mint, burn)."""
    pass


class InsufficientBalance(LedgerError):
    """Sender balance is too low."""
    pass


class InsufficientAllowance(LedgerError):
    """Spender authorization is too low."""
    pass


class TransferFailed(LedgerError):
    """A ledger transfer reported failure instead of raising."""
    pass


class SlippageExceeded(BurnSwapException):
    """Final output fell below the caller's minimum."""
    pass


class WrapFailure(BurnSwapException):
    """Wrapping did not credit the expected amount."""
    pass


class UnwrapFailure(BurnSwapException):
    """Unwrapping did not release the expected native amount."""
    pass


class ExchangeError(BurnSwapException):
    """Raised by the exchange itself (no pool, no liquidity, output floor)."""
    pass


class ExternalSwapFailure(BurnSwapException):
    """The external exchange rejected or under-delivered a swap."""
    pass


class PayoutFailure(BurnSwapException):
    """Native payout to the initiator failed."""
    pass


class PausedError(BurnSwapException):
    """Trading attempted while halted."""
    pass


class ReentrancyError(BurnSwapException):
    """Nested invocation of a guarded entry point."""
    pass


class Unauthorized(BurnSwapException):
    """Non-owner invoked an admin operation."""
    pass


class ConfigurationError(BurnSwapException):
    """Configuration error."""
    pass
