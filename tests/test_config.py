"""
Test suite for the TOML configuration loader.
"""

import pytest

from burnswap.chain import address_from_label
from burnswap.config import (
    AdminSection,
    BurnSwapConfig,
    ContractSection,
    FeesSection,
    load_config,
)
from burnswap.constants import DEAD_ADDRESS
from burnswap.exceptions import ConfigurationError

TOKEN = address_from_label("config:token")
WETH = address_from_label("config:weth")
ROUTER = address_from_label("config:router")
POOL = address_from_label("config:pool")
OWNER = address_from_label("config:owner")

ENV_VARS = (
    "BURNSWAP_CONFIG",
    "BURNSWAP_TOKEN",
    "BURNSWAP_WRAPPED_NATIVE",
    "BURNSWAP_ROUTER",
    "BURNSWAP_POOL",
    "BURNSWAP_BURN_SINK",
    "BURNSWAP_FEE_TIER",
    "BURNSWAP_BURN_FEE_BPS",
    "BURNSWAP_CREATOR_FEE_BPS",
    "BURNSWAP_OWNER",
    "BURNSWAP_CREATOR_WALLET",
    "BURNSWAP_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def write_toml(tmp_path, body: str, name: str = "burnswap.toml"):
    path = tmp_path / name
    path.write_text(body)
    return path


class TestDefaults:

    def test_default_sections(self):
        cfg = BurnSwapConfig()
        assert cfg.contract.burn_sink == DEAD_ADDRESS
        assert cfg.contract.fee_tier == 3000
        assert not cfg.contract.is_complete
        assert cfg.fees.burn_rate_bps == 25
        assert cfg.fees.creator_rate_bps == 25
        assert cfg.logging.level == "INFO"
        assert cfg.sandbox.token_symbol == "BURN"
        assert cfg.validate()

    def test_from_dict_partial(self):
        cfg = BurnSwapConfig.from_dict({
            "fees": {"burn_rate_bps": 10},
            "logging": {"level": "debug"},
        })
        assert cfg.fees.burn_rate_bps == 10
        assert cfg.fees.creator_rate_bps == 25
        assert cfg.logging.level == "DEBUG"

    def test_to_dict_sections(self):
        d = BurnSwapConfig().to_dict()
        assert set(d) == {"contract", "fees", "admin", "logging", "sandbox"}
        assert d["fees"]["denominator_bps"] == 10_000


class TestFromFile:

    def test_loads_toml(self, tmp_path):
        path = write_toml(tmp_path, f"""
[contract]
token = "{TOKEN}"
wrapped_native = "{WETH}"
router = "{ROUTER}"
pool = "{POOL}"
fee_tier = 500

[fees]
burn_rate_bps = 50
creator_rate_bps = 10

[admin]
owner = "{OWNER.lower()}"

[sandbox]
token_symbol = "TST"
""")
        cfg = BurnSwapConfig.from_file(str(path))
        assert cfg.contract.is_complete
        assert cfg.contract.fee_tier == 500
        assert cfg.fees.to_rates().total_rate_bps == 60
        assert cfg.sandbox.token_symbol == "TST"

        cfg.validate()
        assert cfg.admin.owner == OWNER

        contract = cfg.contract.to_contract_config()
        assert contract.token == TOKEN
        assert contract.fee_tier == 500
        assert contract.burn_sink == DEAD_ADDRESS

    def test_missing_file_uses_defaults(self, tmp_path):
        cfg = BurnSwapConfig.from_file(str(tmp_path / "absent.toml"))
        assert cfg.contract.token == ""
        assert cfg.fees.burn_rate_bps == 25

    def test_invalid_toml(self, tmp_path):
        path = write_toml(tmp_path, "[contract\ntoken = ")
        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            BurnSwapConfig.from_file(str(path))

    def test_load_config_from_env_path(self, tmp_path, monkeypatch):
        path = write_toml(tmp_path, '[logging]\nlevel = "WARNING"\n', name="custom.toml")
        monkeypatch.setenv("BURNSWAP_CONFIG", str(path))
        assert load_config().logging.level == "WARNING"

    def test_explicit_path_wins(self, tmp_path, monkeypatch):
        env_path = write_toml(tmp_path, '[logging]\nlevel = "WARNING"\n', name="env.toml")
        explicit = write_toml(tmp_path, '[logging]\nlevel = "ERROR"\n', name="explicit.toml")
        monkeypatch.setenv("BURNSWAP_CONFIG", str(env_path))
        assert load_config(str(explicit)).logging.level == "ERROR"


class TestEnvOverrides:

    def test_env_beats_file(self, tmp_path, monkeypatch):
        path = write_toml(tmp_path, "[fees]\nburn_rate_bps = 50\n[contract]\nfee_tier = 500\n")
        monkeypatch.setenv("BURNSWAP_BURN_FEE_BPS", "40")
        monkeypatch.setenv("BURNSWAP_FEE_TIER", "10000")
        monkeypatch.setenv("BURNSWAP_TOKEN", TOKEN)
        monkeypatch.setenv("BURNSWAP_LOG_LEVEL", "debug")
        cfg = BurnSwapConfig.from_file(str(path))
        assert cfg.fees.burn_rate_bps == 40
        assert cfg.contract.fee_tier == 10000
        assert cfg.contract.token == TOKEN
        assert cfg.logging.level == "DEBUG"

    def test_admin_env(self, monkeypatch):
        monkeypatch.setenv("BURNSWAP_OWNER", OWNER)
        monkeypatch.setenv("BURNSWAP_CREATOR_WALLET", TOKEN)
        admin = AdminSection()
        admin.apply_env()
        assert admin.owner == OWNER
        assert admin.creator_wallet == TOKEN


class TestValidation:

    def test_invalid_address(self):
        cfg = BurnSwapConfig.from_dict({"contract": {"router": "0x1234"}})
        with pytest.raises(ConfigurationError, match=r"\[contract\] router"):
            cfg.validate()

    def test_invalid_admin_address(self):
        cfg = BurnSwapConfig.from_dict({"admin": {"creator_wallet": "bob"}})
        with pytest.raises(ConfigurationError, match=r"\[admin\] creator_wallet"):
            cfg.validate()

    def test_invalid_log_level(self):
        cfg = BurnSwapConfig.from_dict({"logging": {"level": "chatty"}})
        with pytest.raises(ConfigurationError, match="log level"):
            cfg.validate()

    def test_invalid_fee_tier(self):
        cfg = BurnSwapConfig.from_dict({"contract": {"fee_tier": 0}})
        with pytest.raises(ConfigurationError, match="fee_tier"):
            cfg.validate()

    def test_fees_must_leave_a_net_amount(self):
        fees = FeesSection(burn_rate_bps=6_000, creator_rate_bps=4_000)
        with pytest.raises(ConfigurationError, match="below"):
            fees.to_rates()
        cfg = BurnSwapConfig(fees=fees)
        with pytest.raises(ConfigurationError):
            cfg.validate()

    def test_incomplete_contract_section(self):
        section = ContractSection(token=TOKEN, wrapped_native=WETH)
        with pytest.raises(ConfigurationError, match="router, pool"):
            section.to_contract_config()

    def test_overrides_fill_missing_addresses(self):
        section = ContractSection(token=TOKEN)
        cfg = section.to_contract_config(wrapped_native=WETH, router=ROUTER, pool=POOL)
        assert cfg.wrapped_native == WETH
        assert cfg.pool == POOL


class TestEnvIntegers:

    @pytest.mark.parametrize("name", [
        "BURNSWAP_FEE_TIER", "BURNSWAP_BURN_FEE_BPS", "BURNSWAP_CREATOR_FEE_BPS",
    ])
    def test_non_integer_rejected(self, monkeypatch, name):
        monkeypatch.setenv(name, "abc")
        with pytest.raises(ConfigurationError, match=f"{name} must be an integer"):
            BurnSwapConfig().apply_env()
