# topmark:header:start
#
#   project      : LogMark
#   file         : pytest_plugin.py
#   file_relpath : src/logmark/pytest_plugin.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""pytest integration for LogMark.

Registered through the ``pytest11`` entry point, so installing LogMark makes the
``mark_checker`` fixture available to every test session.

Example:
    ```python
    def test_even(mark_checker):
        mark = mark_checker.check("x is even")
        function_under_test(2)
        mark_checker.expect_hit(mark)
    ```

A miss is reported through ``pytest.fail``. A mark armed but never consumed is
reported when the fixture is torn down; the ``logmark_strict`` ini option
(default ``true``) decides whether that fails the test or only logs a warning.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from logmark.config.logging import get_logger
from logmark.core.registry import MarkRegistry, default_registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from logmark.config.logging import LogmarkLogger
    from logmark.core.errors import MarkNotHitError
    from logmark.core.registry import Mark, MarkState


logger: LogmarkLogger = get_logger(__name__)

STRICT_INI: str = "logmark_strict"


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register LogMark's ini options.

    Args:
        parser (pytest.Parser): The pytest argument/ini parser.
    """
    parser.addini(
        STRICT_INI,
        help="Fail a test that arms a mark without consuming it (default: true).",
        type="bool",
        default=True,
    )


class MarkChecker:
    """Test-facing helper reporting mark misses as pytest failures.

    Args:
        registry (MarkRegistry): Registry the marks are armed on.
    """

    def __init__(self, registry: MarkRegistry) -> None:
        self.registry: MarkRegistry = registry

    def check(self, name: str) -> Mark:
        """Arm ``name``; see [`MarkRegistry.check`][logmark.core.registry.MarkRegistry.check]."""
        return self.registry.check(name)

    def expect_hit(self, mark: Mark) -> None:
        """Consume ``mark`` and fail the current test if it was not hit.

        Args:
            mark (Mark): Handle returned by [`check`][logmark.pytest_plugin.MarkChecker.check].
        """
        err: MarkNotHitError | None = self.registry.expect_hit(mark)
        if err is not None:
            pytest.fail(str(err), pytrace=False)


@pytest.fixture
def mark_checker(request: pytest.FixtureRequest) -> Iterator[MarkChecker]:
    """Provide a [`MarkChecker`][logmark.pytest_plugin.MarkChecker] on the default registry.

    Args:
        request (pytest.FixtureRequest): The requesting test's context.

    Yields:
        MarkChecker: The checker bound to the process-wide registry.
    """
    registry: MarkRegistry = default_registry()
    yield MarkChecker(registry)

    if not registry.is_armed:
        return
    dangling: MarkState = registry.reset()
    message: str = (
        f'mark "{dangling.name}" is still armed, missing the corresponding ExpectHit call'
    )
    if request.config.getini(STRICT_INI):
        pytest.fail(message, pytrace=False)
    logger.warning(message)
