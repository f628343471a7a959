"""
BurnSwap Package

Fee-skimming native ↔ token swap engine over an external AMM exchange.

Core imports are lazily loaded so that importing a submodule does not pull
in the whole engine. For direct module access, import from submodules:

    from burnswap.swap import BurnSwap, split
    from burnswap.chain import LedgerState, Token, WrappedNative
    from burnswap.exceptions import SlippageExceeded
"""

__version__ = "1.0.0"


# Lazy imports to avoid loading everything at package import
def __getattr__(name):
    """Lazy module loading."""
    if name == 'BurnSwap':
        from .swap import BurnSwap
        return BurnSwap
    elif name == 'build_sandbox':
        from .sandbox import build_sandbox
        return build_sandbox
    elif name == 'load_config':
        from .config import load_config
        return load_config
    elif name == 'BurnSwapException':
        from .exceptions import BurnSwapException
        return BurnSwapException
    raise AttributeError(f"module 'burnswap' has no attribute {name!r}")

__all__ = ['BurnSwap', 'build_sandbox', 'load_config', 'BurnSwapException']
