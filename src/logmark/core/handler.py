# topmark:header:start
#
#   project      : LogMark
#   file         : handler.py
#   file_relpath : src/logmark/core/handler.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Logging handler feeding rendered messages to a mark registry.

[`MarkHandler`][logmark.core.handler.MarkHandler] decorates an existing handler.
While a test is running it hands each record's rendered message to a
[`MarkRegistry`][logmark.core.registry.MarkRegistry]; in every case it then passes
the untouched record on to the wrapped handler. Outside tests it is a plain
passthrough.

Typical usage:
    ```python
    import logging

    import logmark

    handler = logmark.wrap_handler(logging.StreamHandler())
    logging.getLogger("myapp").addHandler(handler)
    ```
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from logmark.core.registry import MarkRegistry, default_registry
from logmark.core.sink import as_derivable, handler_enabled

if TYPE_CHECKING:
    from collections.abc import Mapping

    from logmark.config.context import TestContextOracle


class MarkHandler(logging.Handler):
    """Handler recording log messages as mark hits before delegating.

    The level check is delegated to the wrapped handler: leave this handler's own
    level at ``NOTSET`` so filtering behaves exactly as without the decorator.

    Args:
        inner (logging.Handler): The handler receiving every record.
        registry (MarkRegistry | None): Registry to record messages into; defaults to
            the process-wide registry.
        is_test_context (TestContextOracle | None): Predicate gating the recording;
            defaults to the registry's own predicate.
    """

    def __init__(
        self,
        inner: logging.Handler,
        *,
        registry: MarkRegistry | None = None,
        is_test_context: TestContextOracle | None = None,
    ) -> None:
        super().__init__()
        self.inner: logging.Handler = inner
        self.registry: MarkRegistry = registry if registry is not None else default_registry()
        self._oracle: TestContextOracle = (
            is_test_context if is_test_context is not None else self.registry.is_test_context
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} inner={self.inner!r}>"

    def enabled(self, level: int) -> bool:
        """Return whether the wrapped handler accepts records at ``level``."""
        return handler_enabled(self.inner, level)

    def handle(self, record: logging.LogRecord) -> bool:
        """Record the message as a potential mark hit, then delegate.

        Args:
            record (logging.LogRecord): Record emitted by a logger.

        Returns:
            bool: The wrapped handler's result; False if the record is not enabled
            or rejected by this handler's filters.
        """
        if not self.enabled(record.levelno) or not self.filter(record):
            return False
        if self._oracle():
            self._record(record)
        return bool(self.inner.handle(record))

    def emit(self, record: logging.LogRecord) -> None:
        self.handle(record)

    def _record(self, record: logging.LogRecord) -> None:
        try:
            message: str = record.getMessage()
        except (TypeError, ValueError):
            # Mismatched format arguments: the wrapped handler reports it via handleError.
            return
        self.registry.record(message)

    def with_attrs(self, attrs: Mapping[str, object]) -> MarkHandler:
        """Return a ``MarkHandler`` around the wrapped handler's attribute variant.

        Args:
            attrs (Mapping[str, object]): Attributes stamped on every record.

        Returns:
            MarkHandler: A new decorator sharing this handler's registry and predicate.
        """
        return MarkHandler(
            as_derivable(self.inner).with_attrs(attrs),  # type: ignore[arg-type]
            registry=self.registry,
            is_test_context=self._oracle,
        )

    def with_group(self, name: str) -> MarkHandler:
        """Return a ``MarkHandler`` around the wrapped handler's grouped variant.

        Args:
            name (str): Group qualifying attributes added afterwards.

        Returns:
            MarkHandler: A new decorator sharing this handler's registry and predicate.
        """
        return MarkHandler(
            as_derivable(self.inner).with_group(name),  # type: ignore[arg-type]
            registry=self.registry,
            is_test_context=self._oracle,
        )

    def flush(self) -> None:
        self.inner.flush()

    def setFormatter(self, fmt: logging.Formatter | None) -> None:  # noqa: N802
        """Set the formatter of the wrapped handler, which does all the formatting."""
        self.inner.setFormatter(fmt)

    def close(self) -> None:
        """Close the wrapped handler, then detach this one."""
        try:
            self.inner.close()
        finally:
            super().close()


def wrap_handler(
    inner: logging.Handler,
    *,
    registry: MarkRegistry | None = None,
    is_test_context: TestContextOracle | None = None,
) -> MarkHandler:
    """Decorate ``inner`` so its messages can satisfy armed marks.

    Args:
        inner (logging.Handler): Handler to decorate.
        registry (MarkRegistry | None): Registry to record into (default registry if None).
        is_test_context (TestContextOracle | None): Optional predicate override.

    Returns:
        MarkHandler: The decorating handler.
    """
    return MarkHandler(inner, registry=registry, is_test_context=is_test_context)
