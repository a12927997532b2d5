"""Service layer: the Validator facade and its shared cache."""

from fieldguard.service.validator import (
    Validator,
    ValidatorCache,
    ValidatorOptions,
    clear_validator_cache,
    get_validator,
    validator_cache,
)

__all__ = [
    "Validator",
    "ValidatorCache",
    "ValidatorOptions",
    "clear_validator_cache",
    "get_validator",
    "validator_cache",
]
