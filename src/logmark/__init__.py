# topmark:header:start
#
#   project      : LogMark
#   file         : __init__.py
#   file_relpath : src/logmark/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""LogMark package.

LogMark links source code and tests through ordinary log messages. Production
code logs as usual; a test *checks* that a specific message (a *mark*) was
logged while the code path it exercises ran. Searching the code base for the
message text then finds the test, and vice versa.

Public API:
    * [`check`][logmark.core.registry.check] / [`expect_hit`][logmark.core.registry.expect_hit]
      arm and consume a mark on the default registry.
    * [`MarkHandler`][logmark.core.handler.MarkHandler] /
      [`wrap_handler`][logmark.core.handler.wrap_handler] decorate a logging handler so
      its messages are recorded while tests run.
"""

from __future__ import annotations

from logmark.config.context import is_test_context
from logmark.core.errors import MarkError, MarkNotHitError, MarkUsageError
from logmark.core.handler import MarkHandler, wrap_handler
from logmark.core.registry import (
    Mark,
    MarkRegistry,
    MarkState,
    check,
    default_registry,
    expect_hit,
)
from logmark.core.sink import ContextHandler

__all__ = [
    "ContextHandler",
    "Mark",
    "MarkError",
    "MarkHandler",
    "MarkNotHitError",
    "MarkRegistry",
    "MarkState",
    "MarkUsageError",
    "check",
    "default_registry",
    "expect_hit",
    "is_test_context",
    "wrap_handler",
]
