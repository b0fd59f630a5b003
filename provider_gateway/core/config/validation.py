"""Loading and checking of schema-declared environment variables.

Each variable in ConfigSchema is read from the process environment, coerced
to its declared type and passed through its validator. Failures surface as
ConfigError naming the variable, the offending raw value and what the
variable is for, so an operator can fix the deployment without reading code.
"""

import os
from typing import Any

from provider_gateway.core.config.schema import ConfigSchema, EnvVarSpec

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})


class ConfigError(Exception):
    """An environment variable holds a value the gateway cannot use.

    Raised while the Config singleton is built, so an invalid PORT or a
    malformed PROXY stops startup instead of failing the first request.

    Attributes:
        env_var: The environment variable name
        value: The raw value found in the environment
        message: What went wrong with it
        hint: The variable's schema description
    """

    def __init__(self, env_var: str, value: str, message: str, hint: str | None = None) -> None:
        self.env_var = env_var
        self.value = value
        self.message = message
        self.hint = hint
        super().__init__(f"{env_var}={value}: {message}")


def _coerce(spec: EnvVarSpec, raw_value: str) -> Any:
    if spec.coerce is not None:
        return spec.coerce(raw_value)
    if spec.type_hint is bool:
        return raw_value.strip().lower() in _TRUE_VALUES
    if spec.type_hint is int:
        return int(raw_value)
    if spec.type_hint is float:
        return float(raw_value)
    return raw_value


def load_env_var(spec: EnvVarSpec) -> Any:
    """Read one variable and return its coerced, validated value.

    Unset and blank variables both yield the schema default, which is
    never passed through the validator.

    Args:
        spec: Variable specification from ConfigSchema

    Returns:
        The coerced value, or ``spec.default``

    Raises:
        ConfigError: If coercion fails or the validator rejects the value
    """
    raw_value = os.environ.get(spec.name)
    if raw_value is None or not raw_value.strip():
        return spec.default

    try:
        value = _coerce(spec, raw_value)
    except (ValueError, TypeError) as e:
        raise ConfigError(
            spec.name,
            raw_value,
            f"Cannot convert to {spec.type_hint.__name__}: {e}",
            hint=spec.description,
        ) from e

    if spec.validator is None:
        return value

    try:
        accepted = spec.validator(value)
    except (TypeError, AttributeError) as e:
        raise ConfigError(
            spec.name, raw_value, f"Validation error: {e}", hint=spec.description
        ) from e
    if not accepted:
        raise ConfigError(
            spec.name,
            raw_value,
            f"Validation failed for type {spec.type_hint.__name__}",
            hint=spec.description,
        )
    return value


def validate_all() -> list[ConfigError]:
    """Check every schema variable and collect the failures.

    Unlike building Config, this does not stop at the first bad value, so
    `pgw config` can report everything at once.

    Returns:
        One ConfigError per invalid variable, in schema order
    """
    errors: list[ConfigError] = []
    for spec in ConfigSchema.all_specs().values():
        try:
            load_env_var(spec)
        except ConfigError as e:
            errors.append(e)
    return errors
