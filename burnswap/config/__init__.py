"""
BurnSwap Unified Configuration

Loads all sections of burnswap.toml.
Environment variables override TOML values.
"""

from .loader import (
    AdminSection,
    BurnSwapConfig,
    ContractSection,
    FeesSection,
    LoggingSection,
    SandboxSection,
    load_config,
)

__all__ = [
    "AdminSection",
    "BurnSwapConfig",
    "ContractSection",
    "FeesSection",
    "LoggingSection",
    "SandboxSection",
    "load_config",
]
