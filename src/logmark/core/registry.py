# topmark:header:start
#
#   project      : LogMark
#   file         : registry.py
#   file_relpath : src/logmark/core/registry.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Mark registry: the arm -> record -> consume state machine.

A test *arms* a mark with the substring it expects the code under test to log,
runs that code, then *consumes* the mark. In between, every rendered log message
that passes through a [`MarkHandler`][logmark.core.handler.MarkHandler] is
*recorded*: the first message containing the armed substring flips the mark to
"hit".

States:
    * Idle: no mark armed (``name is None``, ``hit is False``).
    * Armed: a substring is armed; ``hit`` tells whether it was observed.

``check`` is only valid from Idle, ``expect_hit`` only from Armed, and
``expect_hit`` always returns the registry to Idle, whatever the outcome.

Typical usage:
    ```python
    import logmark

    mark = logmark.check("x is even")
    function_under_test(2)
    err = mark.expect_hit()
    assert err is None, err

    # or, equivalently:
    with logmark.check("x is even"):
        function_under_test(2)
    ```

Warning:
    A registry is plain, unsynchronized state. The process-wide default registry
    assumes that arm/record/consume cycles never overlap, i.e. tests that use it
    do not run concurrently in the same process. Runners executing tests in
    parallel threads should give each test its own ``MarkRegistry`` and
    ``MarkHandler``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from logmark.config.context import is_test_context
from logmark.config.logging import get_logger
from logmark.core.errors import MarkNotHitError, MarkUsageError

if TYPE_CHECKING:
    from types import TracebackType

    from logmark.config.context import TestContextOracle
    from logmark.config.logging import LogmarkLogger


logger: LogmarkLogger = get_logger(__name__)


@dataclass(frozen=True)
class MarkState:
    """Immutable snapshot of a registry's state.

    Attributes:
        name: The armed substring, or ``None`` when no mark is armed.
        hit: Whether a message containing ``name`` was recorded since arming.
    """

    name: str | None = None
    hit: bool = False

    @property
    def is_armed(self) -> bool:
        """Return True if a mark is armed."""
        return self.name is not None


@dataclass(frozen=True)
class Mark:
    """Handle returned by [`check`][logmark.core.registry.MarkRegistry.check].

    The handle only remembers which substring it armed (and on which registry), so
    that the consuming call can verify it matches the arming call.

    A ``Mark`` is also a context manager that consumes itself on exit and raises
    [`MarkNotHitError`][logmark.core.errors.MarkNotHitError] on a miss.

    Attributes:
        name: The substring this mark was armed with.
        registry: The registry holding the armed state. ``None`` means the
            process-wide default registry.
    """

    name: str
    registry: MarkRegistry | None = field(default=None, compare=False, repr=False)

    def _registry(self) -> MarkRegistry:
        return self.registry if self.registry is not None else default_registry()

    def expect_hit(self) -> MarkNotHitError | None:
        """Consume this mark and report whether it was hit.

        Returns:
            MarkNotHitError | None: ``None`` if a matching message was logged,
            otherwise the (unraised) failure to report.

        Raises:
            MarkUsageError: See [`MarkRegistry.expect_hit`][logmark.core.registry.MarkRegistry.expect_hit].
        """
        return self._registry().expect_hit(self)

    def assert_hit(self) -> None:
        """Consume this mark and raise if it was not hit.

        Raises:
            MarkNotHitError: If no matching message was logged.
        """
        err: MarkNotHitError | None = self.expect_hit()
        if err is not None:
            raise err

    def __enter__(self) -> Mark:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        err: MarkNotHitError | None = self.expect_hit()
        # An exception from the block takes precedence over the miss.
        if exc_type is None and err is not None:
            raise err


class MarkRegistry:
    """Holds at most one armed mark and tracks whether it was hit.

    Args:
        is_test_context (TestContextOracle | None): Predicate telling whether a test
            is running. Defaults to
            [`is_test_context`][logmark.config.context.is_test_context].
    """

    def __init__(self, is_test_context: TestContextOracle | None = None) -> None:
        self._oracle: TestContextOracle = (
            is_test_context if is_test_context is not None else _default_oracle
        )
        self._name: str | None = None
        self._hit: bool = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, hit={self._hit!r})"

    def is_test_context(self) -> bool:
        """Return the answer of this registry's test-context predicate."""
        return self._oracle()

    @property
    def state(self) -> MarkState:
        """Return a snapshot of the current state."""
        return MarkState(name=self._name, hit=self._hit)

    @property
    def is_armed(self) -> bool:
        """Return True if a mark is currently armed."""
        return self._name is not None

    def check(self, name: str) -> Mark:
        """Arm a mark expecting ``name`` to appear in a subsequent log message.

        Args:
            name (str): Substring expected in a message logged by the code under test.

        Returns:
            Mark: The handle to pass to [`expect_hit`][logmark.core.registry.MarkRegistry.expect_hit].

        Raises:
            MarkUsageError: Outside a test, when another mark is still armed, or when
                the registry was not cleared properly.
        """
        if not self._oracle():
            raise MarkUsageError("mark: logmark.check can only be used in tests")

        if self._name is not None:
            # Two check() calls in a row without expect_hit() in between.
            raise MarkUsageError(
                f'mark: mark name "{name}" should be None, '
                "missing the corresponding ExpectHit call"
            )

        if self._hit:
            raise MarkUsageError(f'mark: hit should be False for mark "{name}"')

        # Logged while still idle so this line cannot hit the mark it announces.
        logger.trace("arming mark %r", name)
        self._name = name
        self._hit = False
        return Mark(name=name, registry=self)

    def record(self, message: str) -> None:
        """Flag the armed mark as hit if ``message`` contains its substring.

        Called by [`MarkHandler`][logmark.core.handler.MarkHandler] for every
        rendered message. Matching is plain, case-sensitive substring containment.
        No-op while idle or once the mark is hit.

        Args:
            message (str): Fully rendered log message.
        """
        if self._name is not None and not self._hit and self._name in message:
            self._hit = True

    def expect_hit(self, mark: Mark) -> MarkNotHitError | None:
        """Consume the armed mark and report whether it was hit.

        The registry is back to idle when this returns or raises (except when
        called outside a test, which is rejected before touching any state).

        Args:
            mark (Mark): Handle returned by the matching [`check`][logmark.core.registry.MarkRegistry.check].

        Returns:
            MarkNotHitError | None: ``None`` on a hit, otherwise the failure to report.

        Raises:
            MarkUsageError: Outside a test, when no mark is armed, or when ``mark``
                does not correspond to the armed mark.
        """
        if not self._oracle():
            raise MarkUsageError("mark: ExpectHit can only be used in tests")

        previous: MarkState = self.reset()

        if previous.name is None:
            raise MarkUsageError("mark: ExpectHit called without first calling Check")

        if previous.name != mark.name:
            raise MarkUsageError("mark: registry state does not match the given Mark")

        logger.trace("consumed mark %r (hit=%s)", previous.name, previous.hit)
        if not previous.hit:
            return MarkNotHitError(previous.name)
        return None

    def reset(self) -> MarkState:
        """Return the registry to idle.

        Returns:
            MarkState: The state the registry held before the reset.
        """
        previous = MarkState(name=self._name, hit=self._hit)
        self._name = None
        self._hit = False
        return previous


def _default_oracle() -> bool:
    # Looked up at call time so tests can patch the module attribute.
    return is_test_context()


_DEFAULT_REGISTRY: MarkRegistry = MarkRegistry()


def default_registry() -> MarkRegistry:
    """Return the process-wide registry used by the module-level helpers."""
    return _DEFAULT_REGISTRY


def check(name: str) -> Mark:
    """Arm ``name`` on the default registry.

    See [`MarkRegistry.check`][logmark.core.registry.MarkRegistry.check].

    Args:
        name (str): Substring expected in a message logged by the code under test.

    Returns:
        Mark: The armed handle.
    """
    return _DEFAULT_REGISTRY.check(name)


def expect_hit(mark: Mark) -> MarkNotHitError | None:
    """Consume ``mark`` on its registry (the default registry unless bound elsewhere).

    Args:
        mark (Mark): Handle returned by [`check`][logmark.core.registry.check].

    Returns:
        MarkNotHitError | None: ``None`` on a hit, otherwise the failure to report.
    """
    return mark.expect_hit()
