# topmark:header:start
#
#   project      : LogMark
#   file         : context.py
#   file_relpath : src/logmark/config/context.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Test-context detection for LogMark.

Marks are only meaningful while a test is running. The registry and the handler
consult a zero-argument predicate to decide this; the default predicate is
[`is_test_context`][logmark.config.context.is_test_context], and any other callable
can be injected instead (see [`MarkRegistry`][logmark.core.registry.MarkRegistry]).

Resolution order of the default predicate:
    1. ``LOGMARK_TEST_CONTEXT`` forces the answer when it holds a recognized
       boolean literal (``1/true/yes/on`` or ``0/false/no/off``).
    2. ``PYTEST_CURRENT_TEST`` is set by pytest while a test is being set up,
       executed or torn down.
    3. Otherwise the process is not considered to be running a test.
"""

from __future__ import annotations

import os
from typing import Callable, Final

TEST_CONTEXT_ENV: Final[str] = "LOGMARK_TEST_CONTEXT"
PYTEST_CURRENT_TEST_ENV: Final[str] = "PYTEST_CURRENT_TEST"

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSY: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})

# Zero-argument predicate answering "is a test running right now?".
TestContextOracle = Callable[[], bool]


def parse_env_flag(value: str | None) -> bool | None:
    """Interpret an environment variable value as a tri-state boolean.

    Args:
        value (str | None): Raw value from ``os.environ`` (``None`` when unset).

    Returns:
        bool | None: ``True``/``False`` for recognized literals, ``None`` otherwise.
    """
    if value is None:
        return None
    v: str = value.strip().lower()
    if v in _TRUTHY:
        return True
    if v in _FALSY:
        return False
    return None


def is_test_context() -> bool:
    """Return True when the current process is executing a test."""
    forced: bool | None = parse_env_flag(os.environ.get(TEST_CONTEXT_ENV))
    if forced is not None:
        return forced
    return PYTEST_CURRENT_TEST_ENV in os.environ
