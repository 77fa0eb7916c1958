# topmark:header:start
#
#   project      : LogMark
#   file         : test_pytest_plugin.py
#   file_relpath : tests/plugin/test_pytest_plugin.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""pytest plugin: the `mark_checker` fixture and dangling-mark reporting.

Each test writes a small test module and runs it in an inner pytest session via
`pytester`; the plugin is picked up through its ``pytest11`` entry point.
"""

from __future__ import annotations

import pytest

PRODUCTION = """
import io
import logging

import logmark

logger = logging.getLogger("inner.production")
logger.handlers = [logmark.wrap_handler(logging.StreamHandler(io.StringIO()))]
logger.setLevel(logging.INFO)
logger.propagate = False


def parity(x):
    if x % 2 == 0:
        logger.info("x is even (x=%d)", x)
    else:
        logger.info("x is odd (x=%d)", x)
"""


@pytest.fixture
def project(pytester: pytest.Pytester) -> pytest.Pytester:
    """Return a pytester project containing the `production` module.

    Args:
        pytester (pytest.Pytester): The pytester fixture.

    Returns:
        pytest.Pytester: The prepared project.
    """
    pytester.makepyfile(production=PRODUCTION)
    pytester.syspathinsert()
    return pytester


def test_hit_passes(project: pytest.Pytester) -> None:
    """A logged mark lets the inner test pass."""
    project.makepyfile(
        test_inner="""
        from production import parity

        def test_even(mark_checker):
            mark = mark_checker.check("x is even")
            parity(2)
            mark_checker.expect_hit(mark)
        """
    )

    result = project.runpytest()

    result.assert_outcomes(passed=1)


def test_miss_fails_with_mark_name(project: pytest.Pytester) -> None:
    """A miss is reported as a regular test failure naming the mark."""
    project.makepyfile(
        test_inner="""
        from production import parity

        def test_even(mark_checker):
            mark = mark_checker.check("x is even")
            parity(3)
            mark_checker.expect_hit(mark)
        """
    )

    result = project.runpytest()

    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines(['*mark "x is even" not hit*'])


def test_dangling_mark_errors_on_teardown(project: pytest.Pytester) -> None:
    """A mark armed but never consumed errors the test and frees the registry."""
    project.makepyfile(
        test_inner="""
        import logmark

        def test_forgets_expect_hit(mark_checker):
            mark_checker.check("x is even")

        def test_next_one_starts_idle():
            assert not logmark.default_registry().is_armed
        """
    )

    result = project.runpytest()

    result.assert_outcomes(passed=2, errors=1)
    result.stdout.fnmatch_lines(
        ['*mark "x is even" is still armed, missing the corresponding ExpectHit call*']
    )


def test_dangling_mark_is_a_warning_when_not_strict(project: pytest.Pytester) -> None:
    """With `logmark_strict = false` a dangling mark is only logged."""
    project.makeini(
        """
        [pytest]
        logmark_strict = false
        """
    )
    project.makepyfile(
        test_inner="""
        def test_forgets_expect_hit(mark_checker):
            mark_checker.check("x is even")
        """
    )

    result = project.runpytest()

    result.assert_outcomes(passed=1)


def test_usage_errors_are_not_swallowed(project: pytest.Pytester) -> None:
    """Sequencing mistakes surface as errors raised from the test body."""
    project.makepyfile(
        test_inner="""
        def test_double_check(mark_checker):
            mark_checker.check("foo")
            mark_checker.check("foo2")
        """
    )

    result = project.runpytest()

    result.assert_outcomes(failed=1, errors=1)
    result.stdout.fnmatch_lines(["*MarkUsageError*foo2*missing the corresponding ExpectHit call*"])
