# topmark:header:start
#
#   project      : LogMark
#   file         : sink.py
#   file_relpath : src/logmark/core/sink.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Derivable log sinks.

A *sink* is anything that accepts log records. LogMark decorates sinks that can:

* accept a record (``handle``),
* report whether a level is enabled (``enabled``),
* derive a variant carrying extra structured attributes (``with_attrs``),
* derive a variant whose subsequent attributes live under a group (``with_group``).

Standard ``logging.Handler`` objects only provide the first capability, so
[`ContextHandler`][logmark.core.sink.ContextHandler] adds the other three on top
of any handler. Attributes are stamped onto a *copy* of each record, which makes
them available to formatters (``%(request_id)s``, ``%(db.host)s``) without
mutating the record seen by sibling handlers.
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


@runtime_checkable
class DerivableHandler(Protocol):
    """Structural type of a handler supporting level checks and derivation."""

    def handle(self, record: logging.LogRecord) -> bool | logging.LogRecord: ...

    def enabled(self, level: int) -> bool: ...

    def with_attrs(self, attrs: Mapping[str, object]) -> DerivableHandler: ...

    def with_group(self, name: str) -> DerivableHandler: ...


def handler_enabled(handler: logging.Handler, level: int) -> bool:
    """Return True if ``handler`` would accept a record at ``level``.

    Args:
        handler (logging.Handler): Handler to query.
        level (int): Numeric logging level.

    Returns:
        bool: The handler's own ``enabled`` answer when it has one, otherwise the
        comparison against its threshold level.
    """
    if isinstance(handler, DerivableHandler):
        return handler.enabled(level)
    return level >= handler.level


class ContextHandler(logging.Handler):
    """Handler that stamps structured attributes on records before delegating.

    Args:
        inner (logging.Handler): The handler receiving the stamped records.
        attrs (Iterable[tuple[str, object]]): Already-qualified attribute pairs.
        groups (Iterable[str]): Open groups; they qualify attributes added later.
    """

    def __init__(
        self,
        inner: logging.Handler,
        attrs: Iterable[tuple[str, object]] = (),
        groups: Iterable[str] = (),
    ) -> None:
        super().__init__()
        self.inner: logging.Handler = inner
        self.attrs: tuple[tuple[str, object], ...] = tuple(attrs)
        self.groups: tuple[str, ...] = tuple(groups)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} groups={self.groups!r} inner={self.inner!r}>"

    def _qualify(self, key: str) -> str:
        return ".".join((*self.groups, key))

    def enabled(self, level: int) -> bool:
        """Return True if both this handler and the inner handler accept ``level``."""
        return level >= self.level and handler_enabled(self.inner, level)

    def with_attrs(self, attrs: Mapping[str, object]) -> ContextHandler:
        """Return a variant that also stamps ``attrs`` (qualified by the open groups).

        Args:
            attrs (Mapping[str, object]): Attribute names and values.

        Returns:
            ContextHandler: ``self`` when ``attrs`` is empty, otherwise a new handler.
        """
        if not attrs:
            return self
        added = tuple((self._qualify(k), v) for k, v in attrs.items())
        return ContextHandler(self.inner, attrs=self.attrs + added, groups=self.groups)

    def with_group(self, name: str) -> ContextHandler:
        """Return a variant whose subsequent attributes are nested under ``name``.

        Args:
            name (str): Group name.

        Returns:
            ContextHandler: ``self`` when ``name`` is empty, otherwise a new handler.
        """
        if not name:
            return self
        return ContextHandler(self.inner, attrs=self.attrs, groups=(*self.groups, name))

    def handle(self, record: logging.LogRecord) -> bool:
        """Stamp a copy of ``record`` and pass it to the inner handler.

        Args:
            record (logging.LogRecord): Record emitted by a logger.

        Returns:
            bool: Whatever the inner handler returns, or False when filtered out here.
        """
        if not self.enabled(record.levelno) or not self.filter(record):
            return False
        return bool(self.inner.handle(self._stamp(record)))

    def emit(self, record: logging.LogRecord) -> None:
        self.handle(record)

    def _stamp(self, record: logging.LogRecord) -> logging.LogRecord:
        if not self.attrs:
            return record
        stamped: logging.LogRecord = copy.copy(record)
        for key, value in self.attrs:
            setattr(stamped, key, value)
        return stamped


def as_derivable(handler: logging.Handler) -> DerivableHandler:
    """Return ``handler`` itself if it supports derivation, else wrap it.

    Args:
        handler (logging.Handler): Any standard or derivable handler.

    Returns:
        DerivableHandler: A handler offering ``with_attrs``/``with_group``.
    """
    if isinstance(handler, DerivableHandler):
        return handler
    return ContextHandler(handler)
