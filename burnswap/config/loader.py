"""
BurnSwap TOML Configuration Loader

Loads every section of burnswap.toml with environment variable overrides.
Each section is a dataclass with ``from_dict`` and, where it has overridable
values, ``apply_env``.

Environment variable mapping:
    [contract] token          → BURNSWAP_TOKEN
    [contract] fee_tier       → BURNSWAP_FEE_TIER
    [fees] burn_rate_bps      → BURNSWAP_BURN_FEE_BPS
    [admin] creator_wallet    → BURNSWAP_CREATOR_WALLET
    [logging] level           → BURNSWAP_LOG_LEVEL
    ...
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    import tomli  # type: ignore[no-redef]

from ..chain.address import checksum
from ..constants import (
    BURN_FEE_BPS,
    CREATOR_FEE_BPS,
    DEAD_ADDRESS,
    DEFAULT_POOL_FEE_TIER,
    FEE_DENOMINATOR_BPS,
)
from ..exceptions import ConfigurationError, InvalidInput
from ..swap.fees import FeeRates
from ..swap.types import ContractConfig

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from None


# ---------------------------------------------------------------------------
# Section dataclasses, one per [section] of config.example.toml
# ---------------------------------------------------------------------------


@dataclass
class ContractSection:
    """[contract] section. Empty addresses are filled in by the sandbox."""
    token: str = ""
    wrapped_native: str = ""
    router: str = ""
    pool: str = ""
    burn_sink: str = DEAD_ADDRESS
    fee_tier: int = DEFAULT_POOL_FEE_TIER

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContractSection":
        return cls(
            token=data.get("token", ""),
            wrapped_native=data.get("wrapped_native", ""),
            router=data.get("router", ""),
            pool=data.get("pool", ""),
            burn_sink=data.get("burn_sink", DEAD_ADDRESS),
            fee_tier=data.get("fee_tier", DEFAULT_POOL_FEE_TIER),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("BURNSWAP_TOKEN"):
            self.token = v
        if v := os.environ.get("BURNSWAP_WRAPPED_NATIVE"):
            self.wrapped_native = v
        if v := os.environ.get("BURNSWAP_ROUTER"):
            self.router = v
        if v := os.environ.get("BURNSWAP_POOL"):
            self.pool = v
        if v := os.environ.get("BURNSWAP_BURN_SINK"):
            self.burn_sink = v
        if v := os.environ.get("BURNSWAP_FEE_TIER"):
            self.fee_tier = _env_int("BURNSWAP_FEE_TIER", v)

    @property
    def is_complete(self) -> bool:
        return all((self.token, self.wrapped_native, self.router, self.pool))

    def to_contract_config(self, **overrides: str) -> ContractConfig:
        """
        Build the immutable deployment config. *overrides* fill in (or
        replace) addresses, e.g. those of a freshly built sandbox.
        """
        values = {
            "token": self.token,
            "wrapped_native": self.wrapped_native,
            "router": self.router,
            "pool": self.pool,
            "burn_sink": self.burn_sink,
        }
        values.update(overrides)
        missing = [k for k, v in values.items() if not v]
        if missing:
            raise ConfigurationError(f"Missing [contract] addresses: {', '.join(missing)}")
        return ContractConfig(fee_tier=self.fee_tier, **values)


@dataclass
class FeesSection:
    """[fees] section."""
    burn_rate_bps: int = BURN_FEE_BPS
    creator_rate_bps: int = CREATOR_FEE_BPS
    denominator_bps: int = FEE_DENOMINATOR_BPS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeesSection":
        return cls(
            burn_rate_bps=data.get("burn_rate_bps", BURN_FEE_BPS),
            creator_rate_bps=data.get("creator_rate_bps", CREATOR_FEE_BPS),
            denominator_bps=data.get("denominator_bps", FEE_DENOMINATOR_BPS),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("BURNSWAP_BURN_FEE_BPS"):
            self.burn_rate_bps = _env_int("BURNSWAP_BURN_FEE_BPS", v)
        if v := os.environ.get("BURNSWAP_CREATOR_FEE_BPS"):
            self.creator_rate_bps = _env_int("BURNSWAP_CREATOR_FEE_BPS", v)

    def to_rates(self) -> FeeRates:
        return FeeRates(
            burn_rate_bps=self.burn_rate_bps,
            creator_rate_bps=self.creator_rate_bps,
            denominator_bps=self.denominator_bps,
        )


@dataclass
class AdminSection:
    """[admin] section."""
    owner: str = ""
    creator_wallet: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdminSection":
        return cls(
            owner=data.get("owner", ""),
            creator_wallet=data.get("creator_wallet", ""),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("BURNSWAP_OWNER"):
            self.owner = v
        if v := os.environ.get("BURNSWAP_CREATOR_WALLET"):
            self.creator_wallet = v


@dataclass
class LoggingSection:
    """[logging] section."""
    level: str = "INFO"
    console_output: bool = True
    file_output: bool = False
    log_events: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingSection":
        return cls(
            level=str(data.get("level", "INFO")).upper(),
            console_output=data.get("console_output", True),
            file_output=data.get("file_output", False),
            log_events=data.get("log_events", True),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("BURNSWAP_LOG_LEVEL"):
            self.level = v.upper()


@dataclass
class SandboxSection:
    """[sandbox] section: the in-memory world used by ``burnswap simulate``."""
    token_name: str = "Burn Token"
    token_symbol: str = "BURN"
    trader_native: int = 10 * 10**18
    trader_tokens: int = 0
    liquidity_native: int = 100 * 10**18
    liquidity_token: int = 1_000_000 * 10**18

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SandboxSection":
        return cls(
            token_name=data.get("token_name", "Burn Token"),
            token_symbol=data.get("token_symbol", "BURN"),
            trader_native=data.get("trader_native", 10 * 10**18),
            trader_tokens=data.get("trader_tokens", 0),
            liquidity_native=data.get("liquidity_native", 100 * 10**18),
            liquidity_token=data.get("liquidity_token", 1_000_000 * 10**18),
        )


# -----------------------------------------------------------------------
# Top-level config
# -----------------------------------------------------------------------

@dataclass
class BurnSwapConfig:
    """
    Unified configuration.

    Loads every section of burnswap.toml and applies environment variable
    overrides.
    """
    contract: ContractSection = field(default_factory=ContractSection)
    fees: FeesSection = field(default_factory=FeesSection)
    admin: AdminSection = field(default_factory=AdminSection)
    logging: LoggingSection = field(default_factory=LoggingSection)
    sandbox: SandboxSection = field(default_factory=SandboxSection)

    # --- factories --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BurnSwapConfig":
        """Create BurnSwapConfig from a parsed TOML dict."""
        return cls(
            contract=ContractSection.from_dict(data.get("contract", {})),
            fees=FeesSection.from_dict(data.get("fees", {})),
            admin=AdminSection.from_dict(data.get("admin", {})),
            logging=LoggingSection.from_dict(data.get("logging", {})),
            sandbox=SandboxSection.from_dict(data.get("sandbox", {})),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "BurnSwapConfig":
        """
        Load configuration from a TOML file. A missing file yields the
        defaults (with env overrides).
        """
        path = Path(config_path)
        if not path.exists():
            logger.warning("Config file not found: %s, using defaults", config_path)
            cfg = cls()
            cfg.apply_env()
            return cfg

        try:
            with open(path, "rb") as f:
                raw = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {config_path}: {e}") from e

        cfg = cls.from_dict(raw)
        cfg.apply_env()
        return cfg

    # --- env overrides ----------------------------------------------------

    def apply_env(self) -> None:
        """Apply environment variable overrides to all sections."""
        self.contract.apply_env()
        self.fees.apply_env()
        self.admin.apply_env()
        self.logging.apply_env()

    # --- validation -------------------------------------------------------

    def validate(self) -> bool:
        """
        Validate all configuration sections. Addresses are normalized to
        checksum form in place.

        Raises:
            ConfigurationError: on invalid config
        """
        for section_name, section, names in (
            ("contract", self.contract, ("token", "wrapped_native", "router", "pool", "burn_sink")),
            ("admin", self.admin, ("owner", "creator_wallet")),
        ):
            for name in names:
                value = getattr(section, name)
                if not value:
                    continue
                try:
                    setattr(section, name, checksum(value))
                except InvalidInput:
                    raise ConfigurationError(
                        f"[{section_name}] {name} is not a valid address: {value!r}"
                    ) from None

        if not isinstance(self.contract.fee_tier, int) or self.contract.fee_tier <= 0:
            raise ConfigurationError(f"Invalid fee_tier: {self.contract.fee_tier!r}")
        if self.logging.level not in LOG_LEVELS:
            raise ConfigurationError(f"Invalid log level: {self.logging.level}")
        self.fees.to_rates()
        return True

    # --- serialisation ----------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict (for diagnostics, NOT for re-creating TOML)."""
        return {
            "contract": {
                "token": self.contract.token,
                "wrapped_native": self.contract.wrapped_native,
                "router": self.contract.router,
                "pool": self.contract.pool,
                "burn_sink": self.contract.burn_sink,
                "fee_tier": self.contract.fee_tier,
            },
            "fees": {
                "burn_rate_bps": self.fees.burn_rate_bps,
                "creator_rate_bps": self.fees.creator_rate_bps,
                "denominator_bps": self.fees.denominator_bps,
            },
            "admin": {
                "owner": self.admin.owner,
                "creator_wallet": self.admin.creator_wallet,
            },
            "logging": {
                "level": self.logging.level,
                "console_output": self.logging.console_output,
                "file_output": self.logging.file_output,
                "log_events": self.logging.log_events,
            },
            "sandbox": {
                "token_name": self.sandbox.token_name,
                "token_symbol": self.sandbox.token_symbol,
                "trader_native": self.sandbox.trader_native,
                "trader_tokens": self.sandbox.trader_tokens,
                "liquidity_native": self.sandbox.liquidity_native,
                "liquidity_token": self.sandbox.liquidity_token,
            },
        }


# -----------------------------------------------------------------------
# Convenience function
# -----------------------------------------------------------------------

def load_config(path: Optional[str] = None) -> BurnSwapConfig:
    """
    Load configuration.

    Resolution order:
        1. Explicit *path* argument
        2. BURNSWAP_CONFIG env var
        3. ./burnswap.toml in current directory
        4. Defaults (with env overrides)
    """
    if path is None:
        path = os.environ.get("BURNSWAP_CONFIG", "burnswap.toml")

    return BurnSwapConfig.from_file(path)
