"""
Pytest plugin providing mock stream fixtures.

Registered through the ``pytest11`` entry point, so installing the package is
enough to make these fixtures available:

- ``io_mock``: one ``(mock, handle)`` pair.
- ``make_io_mock``: factory for any number of pairs, e.g. both ends of a proxy.

Every mock handed out is disposed at teardown. Unused scripted actions fail the
test, unless its body already failed, in which case they are only logged. When
several mocks fail verification, all of them are reported in one group.
"""

from __future__ import annotations

from collections.abc import Callable, Generator

import pytest

from . import mock
from .config import MockConfig
from .handle import Handle
from .stream import Mock

_CALL_REPORT_KEY = pytest.StashKey[pytest.TestReport]()


@pytest.hookimpl(wrapper=True, tryfirst=True)
def pytest_runtest_makereport(
    item: pytest.Item, call: pytest.CallInfo[None]
) -> Generator[None, pytest.TestReport, pytest.TestReport]:
    """Keep the call-phase report so fixtures can tell whether the test body failed."""
    report = yield
    if report.when == "call":
        item.stash[_CALL_REPORT_KEY] = report
    return report


def _body_failed(request: pytest.FixtureRequest) -> bool:
    report = request.node.stash.get(_CALL_REPORT_KEY, None)
    return report is None or report.failed


@pytest.fixture
def make_io_mock(
    request: pytest.FixtureRequest,
) -> Generator[Callable[..., tuple[Mock, Handle]], None, None]:
    """
    Factory fixture for mock stream pairs.

    Returns a callable taking the same keyword arguments as `MockConfig`.
    """
    created: list[Mock] = []

    def _make(**settings: object) -> tuple[Mock, Handle]:
        pair = mock(MockConfig.model_validate(settings))
        created.append(pair[0])
        return pair

    yield _make

    unwinding = _body_failed(request)
    failures: list[Exception] = []
    for stream in created:
        try:
            stream.dispose(unwinding=unwinding)
        except Exception as e:
            failures.append(e)
    if len(failures) == 1:
        raise failures[0]
    if failures:
        raise ExceptionGroup(f"{len(failures)} mocks failed verification at teardown", failures)


@pytest.fixture
def io_mock(make_io_mock: Callable[..., tuple[Mock, Handle]]) -> tuple[Mock, Handle]:
    """A single mock stream pair, verified at teardown."""
    return make_io_mock()
