# topmark:header:start
#
#   project      : LogMark
#   file         : __init__.py
#   file_relpath : src/logmark/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Runtime configuration for LogMark.

LogMark is configured through environment variables only:

* ``LOGMARK_LOG_LEVEL``: level of LogMark's own diagnostics (see
  [`logmark.config.logging`][logmark.config.logging]).
* ``LOGMARK_TEST_CONTEXT``: force test-context detection on or off (see
  [`logmark.config.context`][logmark.config.context]).
"""

from __future__ import annotations
