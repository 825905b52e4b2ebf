"""
Environment helpers.

Settings are read from the process environment at call time, so tests and
long-running processes pick up changes without re-importing modules.
"""

import os


DEV_CHECKS_ENV = "BLOCKTREE_DEV_CHECKS"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean flag from the environment.

    Unset or blank variables fall back to `default`. Unrecognised values
    raise ValueError rather than silently picking a side.
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be one of {sorted(_TRUE_VALUES | _FALSE_VALUES)}, got {raw!r}")


def dev_checks_enabled() -> bool:
    """
    Whether whole-tree validity checks run around composite operations.

    Defaults to the interpreter's __debug__ flag, so the checks are on in
    normal runs and off under `python -O`.
    """
    return get_bool_env(DEV_CHECKS_ENV, __debug__)
