# topmark:header:start
#
#   project      : LogMark
#   file         : errors.py
#   file_relpath : src/logmark/core/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exception types for LogMark.

Two tiers:
    * [`MarkUsageError`][logmark.core.errors.MarkUsageError]: incorrect use of the
      mark API (wrong sequencing, use outside tests, corrupted registry state).
      Always raised; it signals a defect in test code and is not meant to be caught.
    * [`MarkNotHitError`][logmark.core.errors.MarkNotHitError]: the ordinary test
      failure "the expected message was never logged". Returned by
      ``expect_hit()`` so the caller decides how to report it; it subclasses
      ``AssertionError`` so that raising it fails a test like a plain ``assert``.
"""

from __future__ import annotations


class MarkError(Exception):
    """Base class for all LogMark errors."""


class MarkUsageError(MarkError, RuntimeError):
    """Raised when the mark API is used out of sequence or outside a test."""


class MarkNotHitError(MarkError, AssertionError):
    """The armed mark was not observed in any log message before it was consumed."""

    def __init__(self, name: str) -> None:
        super().__init__(f'mark "{name}" not hit')
        self.name: str = name
