"""
BurnSwap Constants

This module consolidates the global constants and environment configuration
used throughout the codebase. Constants are organized by category for easy
reference and maintenance.
"""
import ast
from dotenv import dotenv_values

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================
# Load environment variables once at module import
_config = dotenv_values(".env")

LOGGER_DEFAULTS = {
    'LOG_LEVEL':                       'INFO',
    'LOG_FORMAT':                      '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    'LOG_DATE_FORMAT':                 '%Y-%m-%dT%H:%M:%S',
    'LOG_CONSOLE_HIGHLIGHTING':        'True',
    'LOG_FILE_OUTPUT':                 'False',
}

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024 # 10MB
LOG_BACKUP_COUNT = 5


# WARNING: THE FEE VALUES BELOW ARE PART OF THE USER-FACING GUARANTEE. A DEPLOYMENT
# FIXES THEM FOR ITS WHOLE LIFETIME; CHANGE THEM ONLY FOR A NEW DEPLOYMENT.

# ==================================================================================
# FEE PARAMETERS (basis points)
# ==================================================================================
BURN_FEE_BPS = 25            # 0.25 %
CREATOR_FEE_BPS = 25         # 0.25 %
FEE_DENOMINATOR_BPS = 10_000


# ==================================================================================
# LEDGER CONSTANTS
# ==================================================================================
ZERO_ADDRESS = '0x0000000000000000000000000000000000000000'
DEAD_ADDRESS = '0x000000000000000000000000000000000000dEaD'
MAX_UINT256 = 2**256 - 1
NATIVE_SYMBOL = 'ETH'
DEFAULT_DECIMALS = 18


# ==================================================================================
# EXCHANGE CONSTANTS
# ==================================================================================
# Fee tier of the traded pool, in hundredths of a basis point (3000 = 0.30 %)
DEFAULT_POOL_FEE_TIER = 3000
MINIMUM_LIQUIDITY = 1000


# ==================================================================================
# DYNAMIC CONFIGURATION LOADING
# ==================================================================================
namespace = globals()

def parse_bool(v):
    """
    Convert "True"/"False" (any casing, with surrounding whitespace) into bool.
    Avoids exceptions by only calling ast.literal_eval for known literals.
    """
    if not isinstance(v, str):
        return v
    s = v.strip()
    if s.casefold() in {"true", "false"}:
        return ast.literal_eval(s.title())
    return v

for key, default_raw in LOGGER_DEFAULTS.items():
    # dotenv_values returns strings or None. None is treated as missing.
    raw = _config.get(key)
    namespace[key] = parse_bool(default_raw if raw is None else raw)
