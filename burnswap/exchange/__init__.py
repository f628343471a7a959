"""
BurnSwap reference exchange

External AMM the swap engine delegates to:
  - Constant-product pools keyed by pair and fee tier
  - Pool registry with deterministic pool addresses
  - Exact-input single-pool router with an output floor
"""

from .amm import (
    FEE_DENOMINATOR,
    ConstantProductPool,
    FeeTier,
    PoolInfo,
    PoolManager,
)
from .router import (
    ExactInputSingleParams,
    SwapRouter,
)

__all__ = [
    # AMM
    "FEE_DENOMINATOR", "ConstantProductPool", "FeeTier", "PoolInfo", "PoolManager",
    # Router
    "ExactInputSingleParams", "SwapRouter",
]
