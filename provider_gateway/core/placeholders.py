"""Environment placeholder handling for operator-declared credentials.

A configured value such as ``${OPENROUTER_KEY}`` is replaced by the
environment variable's value. A value that is *entirely* a placeholder and
whose variable is unset is returned unchanged, so callers can detect it
with ENV_VAR_PATTERN and fail fast.
"""

import os
import re

USER_PROVIDED = "user_provided"

# Whole-value placeholder, e.g. "${OPENAI_API_KEY}"
ENV_VAR_PATTERN = re.compile(r"^\$\{(.+)\}$")

_EMBEDDED_ENV_VAR = re.compile(r"\$\{([^}]+)\}")


def extract_env_variable(value: str | None) -> str:
    """Substitute ``${VAR}`` references with environment values.

    Embedded references inside a longer string are replaced individually;
    unset variables leave their reference in place.
    """
    if not value:
        return ""

    trimmed = value.strip()
    single = ENV_VAR_PATTERN.match(trimmed)
    if single and "${" not in single.group(1):
        return os.environ.get(single.group(1)) or trimmed

    return _EMBEDDED_ENV_VAR.sub(lambda m: os.environ.get(m.group(1)) or m.group(0), trimmed)


def is_unresolved(value: str) -> bool:
    """True when the value is still a bare placeholder."""
    return ENV_VAR_PATTERN.match(value) is not None


def is_user_provided(value: str | None) -> bool:
    return value == USER_PROVIDED
