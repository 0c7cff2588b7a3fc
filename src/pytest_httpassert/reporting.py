"""Failure reporting for soft assertions.

Requests and assertions never raise on a failed check. They hand a
message to a reporter that is passed in explicitly by the calling test,
and the test keeps running.
"""

import logging
from typing import Protocol, runtime_checkable

import pytest

logger = logging.getLogger(__name__)


@runtime_checkable
class FailureReporter(Protocol):
    def error(self, message: str) -> None: ...


class SoftAssertions:
    """Collects failure messages without interrupting the test.

    Usable directly or through the ``soft_assertions`` fixture, which fails
    the test at the end of its call phase if anything was recorded.
    """

    def __init__(self) -> None:
        self.failures: list[str] = []

    def error(self, message: str) -> None:
        logger.error(message)
        self.failures.append(message)

    @property
    def failed(self) -> bool:
        return len(self.failures) > 0

    def summary(self) -> str:
        count = len(self.failures)
        header = f"{count} soft assertion{'s' if count != 1 else ''} failed:"
        return "\n".join([header, *(f"  - {message}" for message in self.failures)])

    def raise_failures(self) -> None:
        if self.failed:
            pytest.fail(reason=self.summary(), pytrace=False)

    def clear(self) -> None:
        self.failures.clear()
