"""Validator set selection for one endpoint's security stack."""

from .models import SecurityStackConfig
from .registry import ChainRegistry, ConfigurationError


class ValidatorSetSelector:
    """Composes validated security stacks from registry facts."""

    def __init__(self, registry: ChainRegistry) -> None:
        self._registry = registry

    def security_stack(self, eid: int, confirmations: int) -> SecurityStackConfig:
        """Return the validator set of ``eid`` paired with ``confirmations``.

        The confirmation depth is supplied by the caller because the receive
        path of a connection uses the destination's depth with the source's
        validators.
        """

        required = self._registry.required_validators(eid)
        optional = self._registry.optional_validators(eid)
        threshold = self._registry.optional_threshold

        if confirmations < 0:
            raise ConfigurationError(f"Confirmations for endpoint {eid} must be non-negative.")
        if threshold < 0:
            raise ConfigurationError("Optional validator threshold must be non-negative.")
        if threshold > len(optional):
            raise ConfigurationError(
                f"Optional validator threshold {threshold} exceeds the "
                f"{len(optional)} optional validators available on endpoint {eid}"
            )
        if optional and threshold == 0:
            raise ConfigurationError(
                f"Endpoint {eid} lists optional validators but a threshold of zero."
            )
        if not required and not optional:
            raise ConfigurationError(f"Endpoint {eid} has no validators configured.")

        return SecurityStackConfig(
            required_validators=required,
            optional_validators=optional,
            optional_threshold=threshold,
            confirmations=confirmations,
        )
