# topmark:header:start
#
#   project      : LogMark
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the LogMark test suite.

This file sets up global fixtures and customizes the logging configuration for test runs,
ensuring consistent and verbose logging output during testing.

Notes:
    The default mark registry is process-wide state. Every test starts and ends
    with it idle (see `reset_default_registry`); tests exercising edge cases
    should prefer a private `MarkRegistry` (see the `registry` fixture).
"""

from __future__ import annotations

import io
import logging as std_logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from logmark.config import logging
from logmark.config.context import TEST_CONTEXT_ENV
from logmark.core.handler import MarkHandler
from logmark.core.registry import MarkRegistry, default_registry

if TYPE_CHECKING:
    from collections.abc import Iterator

pytest_plugins = ["pytester"]

F = TypeVar("F", bound=Callable[..., object])

# This defines the type for the decorator function itself:
# It takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.integration`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_integration: DecoratorType[Any] = as_typed_mark(pytest.mark.integration)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.mark.parametrize`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.mark.parametrize`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure LogMark's environment switches are not inherited from the shell.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture used to manipulate
            environment variables.
    """
    monkeypatch.delenv(logging.LOG_LEVEL_ENV, raising=False)
    monkeypatch.delenv(TEST_CONTEXT_ENV, raising=False)


@pytest.fixture(autouse=True)
def reset_default_registry() -> Iterator[None]:
    """Leave the process-wide registry idle before and after every test.

    Yields:
        None: Control is handed to the test.
    """
    default_registry().reset()
    yield
    default_registry().reset()


@pytest.hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Configure LogMark's own logging for the test suite.

    This function sets the logging level to TRACE for all tests, so that registry
    transitions show up in captured output of failing tests.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.setup_logging(level=logging.TRACE_LEVEL)


class TestContext:
    """Switchable test-context predicate for registries and handlers."""

    __test__ = False

    def __init__(self, active: bool = True) -> None:
        self.active: bool = active

    def __call__(self) -> bool:
        return self.active


class ListHandler(std_logging.Handler):
    """Handler collecting the records it receives."""

    def __init__(self, level: int = std_logging.NOTSET) -> None:
        super().__init__(level)
        self.records: list[std_logging.LogRecord] = []

    def emit(self, record: std_logging.LogRecord) -> None:
        self.records.append(record)

    @property
    def messages(self) -> list[str]:
        """Return the rendered messages received so far."""
        return [r.getMessage() for r in self.records]


class ProductionCode:
    """Stand-in for application code logging through a marked handler."""

    def __init__(self, logger: std_logging.Logger) -> None:
        self.logger: std_logging.Logger = logger

    def parity(self, x: int) -> None:
        """Log whether ``x`` is even or odd."""
        if x % 2 == 0:
            self.logger.info("x is even (x=%d)", x)
        else:
            self.logger.info("x is odd (x=%d)", x)


@pytest.fixture
def context() -> TestContext:
    """Return a test-context predicate that starts active.

    Returns:
        TestContext: Predicate whose ``active`` flag tests can flip.
    """
    return TestContext()


@pytest.fixture
def registry(context: TestContext) -> MarkRegistry:
    """Return a private registry driven by the `context` predicate.

    Args:
        context (TestContext): The switchable predicate.

    Returns:
        MarkRegistry: A fresh, idle registry.
    """
    return MarkRegistry(is_test_context=context)


def make_logger(name: str, handler: std_logging.Handler) -> std_logging.Logger:
    """Return an isolated INFO logger whose only handler is ``handler``.

    Args:
        name (str): Logger name, unique per test.
        handler (std_logging.Handler): The handler to attach.

    Returns:
        std_logging.Logger: The configured logger.
    """
    logger = std_logging.getLogger(name)
    logger.handlers = [handler]
    logger.setLevel(std_logging.INFO)
    logger.propagate = False
    return logger


@pytest.fixture
def production(request: pytest.FixtureRequest) -> Iterator[ProductionCode]:
    """Return production code logging to a discarded stream via the default registry.

    Args:
        request (pytest.FixtureRequest): Used to derive a unique logger name.

    Yields:
        ProductionCode: Code under test wired to a `MarkHandler`.
    """
    handler = MarkHandler(std_logging.StreamHandler(io.StringIO()))
    logger = make_logger(f"tests.production.{request.node.name}", handler)
    yield ProductionCode(logger)
    logger.handlers.clear()
