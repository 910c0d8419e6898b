"""Built-in profile sets for the WXRP bridge deployments."""

from typing import Dict, Tuple

from .models import (
    ContractPoint,
    EnforcedOption,
    Endpoint,
    ExecutorOptionType,
    ProfileSet,
    ValidatorCandidate,
)
from .registry import DEFAULT_CONFIRMATIONS, ConfigurationError

ETHEREUM_V2_MAINNET = 30101
HYPERLIQUID_V2_MAINNET = 30367
SEPOLIA_V2_TESTNET = 40161
HYPERLIQUID_V2_TESTNET = 40362

OPTIONAL_VALIDATOR_THRESHOLD = 2

ADAPTER_CONTRACT = "WXRPMintBurnOFTAdapter"
TOKEN_CONTRACT = "WXRPToken"


def _option(msg_type: int, gas: int) -> EnforcedOption:
    return EnforcedOption(
        msg_type=msg_type,
        option_type=ExecutorOptionType.LZ_RECEIVE,
        gas=gas,
        value=0,
    )


# Only three validators serve Sepolia <-> HyperEVM testnet; they stand in for
# the mainnet 2-of-4 optional set.
TESTNET = ProfileSet(
    name="testnet",
    endpoints=(
        Endpoint(SEPOLIA_V2_TESTNET, "ethereum-testnet"),
        Endpoint(HYPERLIQUID_V2_TESTNET, "hyperevm-testnet"),
    ),
    validator_pool=(
        ValidatorCandidate(
            "LAYERZERO_LABS",
            (
                (SEPOLIA_V2_TESTNET, "0x8eebf8b423b73bfca51a1db4b7354aa0bfca9193"),
                (HYPERLIQUID_V2_TESTNET, "0x91e698871030d0e1b6c9268c20bb57e2720618dd"),
            ),
        ),
        ValidatorCandidate(
            "MANTLE01",
            (
                (SEPOLIA_V2_TESTNET, "0x6943872cfc48f6b18f8b81d57816733d4545eca3"),
                (HYPERLIQUID_V2_TESTNET, "0x003bd8adc7ba8a7353b950541904b61011e38dae"),
            ),
        ),
        ValidatorCandidate(
            "P2P",
            (
                (SEPOLIA_V2_TESTNET, "0x9efba56c8598853e5b40fd9a66b54a6c163742d7"),
                (HYPERLIQUID_V2_TESTNET, "0x4c90f152707c6eab6cd801e326d25b0591e449a2"),
            ),
        ),
    ),
    optional_threshold=OPTIONAL_VALIDATOR_THRESHOLD,
    default_confirmations=DEFAULT_CONFIRMATIONS,
    default_enforced_options=(_option(1, 120_000),),
    confirmations=(
        (SEPOLIA_V2_TESTNET, 2),
        (HYPERLIQUID_V2_TESTNET, 1),
    ),
    owners=(
        (SEPOLIA_V2_TESTNET, "0xa4B4c951E9Fae331c65700C9BB6A21c236fcF165"),
        (HYPERLIQUID_V2_TESTNET, "0xa4B4c951E9Fae331c65700C9BB6A21c236fcF165"),
    ),
    contracts=(
        ContractPoint(SEPOLIA_V2_TESTNET, ADAPTER_CONTRACT),
        ContractPoint(HYPERLIQUID_V2_TESTNET, ADAPTER_CONTRACT),
    ),
    token_contracts=(
        (SEPOLIA_V2_TESTNET, TOKEN_CONTRACT),
        (HYPERLIQUID_V2_TESTNET, TOKEN_CONTRACT),
    ),
)

_MAINNET_OPTIONS = (_option(1, 100_000), _option(2, 100_000))

MAINNET = ProfileSet(
    name="mainnet",
    endpoints=(
        Endpoint(ETHEREUM_V2_MAINNET, "ethereum"),
        Endpoint(HYPERLIQUID_V2_MAINNET, "hyperevm"),
    ),
    validator_pool=(
        ValidatorCandidate(
            "CANARY",
            (
                (ETHEREUM_V2_MAINNET, "0xa4fe5a5b9a846458a70cd0748228aed3bf65c2cd"),
                (HYPERLIQUID_V2_MAINNET, "0x83342ec538df0460e730a8f543fe63063e2d44c4"),
            ),
        ),
        ValidatorCandidate(
            "DEUTSCHE_TELEKOM",
            (
                (ETHEREUM_V2_MAINNET, "0x373a6e5c0c4e89e24819f00aa37ea370917aaff4"),
                (HYPERLIQUID_V2_MAINNET, "0x32ffd21260172518a8844fec76a88c8f239c384b"),
            ),
        ),
        ValidatorCandidate(
            "LUGANODES",
            (
                (ETHEREUM_V2_MAINNET, "0x58249a2ec05c1978bf21df1f5ec1847e42455cf4"),
                (HYPERLIQUID_V2_MAINNET, "0x9e451905f65ef78d62b93dac3513486da8429d0a"),
            ),
        ),
        ValidatorCandidate(
            "P2P",
            (
                (ETHEREUM_V2_MAINNET, "0x06559ee34d85a88317bf0bfe307444116c631b67"),
                (HYPERLIQUID_V2_MAINNET, "0xc7423626016bc40375458bc0277f28681ec91c8e"),
            ),
        ),
    ),
    optional_threshold=OPTIONAL_VALIDATOR_THRESHOLD,
    default_confirmations=DEFAULT_CONFIRMATIONS,
    default_enforced_options=_MAINNET_OPTIONS,
    confirmations=(
        (ETHEREUM_V2_MAINNET, 15),
        (HYPERLIQUID_V2_MAINNET, 1),
    ),
    enforced_options=(
        (ETHEREUM_V2_MAINNET, _MAINNET_OPTIONS),
        (HYPERLIQUID_V2_MAINNET, _MAINNET_OPTIONS),
    ),
    owners=(
        (ETHEREUM_V2_MAINNET, "0xfA633B67b1d9371eBa32cf3476F275D75C75ce77"),
        (HYPERLIQUID_V2_MAINNET, "0xfA633B67b1d9371eBa32cf3476F275D75C75ce77"),
    ),
    contracts=(
        ContractPoint(ETHEREUM_V2_MAINNET, ADAPTER_CONTRACT),
        ContractPoint(HYPERLIQUID_V2_MAINNET, ADAPTER_CONTRACT),
    ),
    token_contracts=(
        (ETHEREUM_V2_MAINNET, TOKEN_CONTRACT),
        (HYPERLIQUID_V2_MAINNET, TOKEN_CONTRACT),
    ),
)

PROFILE_SETS: Dict[str, ProfileSet] = {
    TESTNET.name: TESTNET,
    MAINNET.name: MAINNET,
}


def profile_set_names() -> Tuple[str, ...]:
    return tuple(sorted(PROFILE_SETS))


def get_profile_set(name: str) -> ProfileSet:
    normalized = name.strip().lower()
    if normalized not in PROFILE_SETS:
        raise ConfigurationError(
            f"Unknown network {name!r}; expected one of {', '.join(profile_set_names())}"
        )
    return PROFILE_SETS[normalized]
