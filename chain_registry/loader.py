"""Load profile sets from JSON documents."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from .models import (
    ContractPoint,
    EnforcedOption,
    Endpoint,
    ExecutorOptionType,
    ProfileSet,
    ValidatorCandidate,
)
from .registry import DEFAULT_CONFIRMATIONS, ConfigurationError


class EndpointDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    eid: int
    name: str
    contract: Optional[str] = None
    token_contract: Optional[str] = None


class EnforcedOptionDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    msg_type: int
    option_type: str = "LZ_RECEIVE"
    gas: int
    value: int = 0


class ProfileSetDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    endpoints: List[EndpointDocument]
    optional_validators: Dict[str, Dict[int, str]] = {}
    optional_threshold: int
    required_validators: Dict[int, List[str]] = {}
    default_confirmations: int = DEFAULT_CONFIRMATIONS
    confirmations: Dict[int, int] = {}
    default_enforced_options: List[EnforcedOptionDocument]
    enforced_options: Dict[int, List[EnforcedOptionDocument]] = {}
    owners: Dict[int, str] = {}


def load_profile_set(path: Path) -> ProfileSet:
    try:
        data = json.loads(Path(path).read_text())
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read profile file {path}: {exc}") from exc
    return parse_profile_set(data)


def parse_profile_set(data: dict) -> ProfileSet:
    try:
        document = ProfileSetDocument.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid profile document: {exc}") from exc

    # Dict order is the pool order.
    pool = tuple(
        ValidatorCandidate(
            name=name,
            addresses=tuple((int(eid), address) for eid, address in addresses.items()),
        )
        for name, addresses in document.optional_validators.items()
    )
    return ProfileSet(
        name=document.name,
        endpoints=tuple(Endpoint(item.eid, item.name) for item in document.endpoints),
        validator_pool=pool,
        optional_threshold=document.optional_threshold,
        default_confirmations=document.default_confirmations,
        default_enforced_options=_options(document.default_enforced_options),
        confirmations=tuple(document.confirmations.items()),
        required_validators=tuple(
            (eid, tuple(addresses)) for eid, addresses in document.required_validators.items()
        ),
        enforced_options=tuple(
            (eid, _options(options)) for eid, options in document.enforced_options.items()
        ),
        owners=tuple(document.owners.items()),
        contracts=tuple(
            ContractPoint(item.eid, item.contract) for item in document.endpoints if item.contract
        ),
        token_contracts=tuple(
            (item.eid, item.token_contract) for item in document.endpoints if item.token_contract
        ),
    )


def _options(documents: List[EnforcedOptionDocument]) -> tuple:
    return tuple(_option(item) for item in documents)


def _option(document: EnforcedOptionDocument) -> EnforcedOption:
    try:
        option_type = ExecutorOptionType[document.option_type.strip().upper()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown executor option type {document.option_type!r}"
        ) from None
    return EnforcedOption(
        msg_type=document.msg_type,
        option_type=option_type,
        gas=document.gas,
        value=document.value,
    )
