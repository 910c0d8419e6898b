from .addresses import ZERO_ADDRESS, is_unusable, is_well_formed, same_address
from .loader import load_profile_set, parse_profile_set
from .models import (
    ContractPoint,
    EnforcedOption,
    Endpoint,
    ExecutorOptionType,
    LookupSource,
    ProfileSet,
    Resolved,
    SecurityStackConfig,
    ValidatorCandidate,
)
from .profiles import MAINNET, TESTNET, get_profile_set, profile_set_names
from .registry import DEFAULT_CONFIRMATIONS, ChainRegistry, ConfigurationError
from .selector import ValidatorSetSelector

__all__ = [
    "ChainRegistry",
    "ConfigurationError",
    "ContractPoint",
    "DEFAULT_CONFIRMATIONS",
    "EnforcedOption",
    "Endpoint",
    "ExecutorOptionType",
    "LookupSource",
    "MAINNET",
    "ProfileSet",
    "Resolved",
    "SecurityStackConfig",
    "TESTNET",
    "ValidatorCandidate",
    "ValidatorSetSelector",
    "ZERO_ADDRESS",
    "get_profile_set",
    "is_unusable",
    "is_well_formed",
    "load_profile_set",
    "parse_profile_set",
    "profile_set_names",
    "same_address",
]
