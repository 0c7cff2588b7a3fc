import logging

import pytest

from pytest_httpassert.reporting import FailureReporter, SoftAssertions


def test_soft_assertions_is_a_reporter():
    assert isinstance(SoftAssertions(), FailureReporter)


def test_error_collects_without_raising(caplog):
    checks = SoftAssertions()

    with caplog.at_level(logging.ERROR, logger="pytest_httpassert.reporting"):
        checks.error("first")
        checks.error("second")

    assert checks.failed
    assert checks.failures == ["first", "second"]
    assert "first" in caplog.text


def test_summary_lists_every_failure():
    checks = SoftAssertions()
    checks.error("Invalid response code. Expected 200, Received 404")

    summary = checks.summary()

    assert summary.startswith("1 soft assertion failed:")
    assert "  - Invalid response code. Expected 200, Received 404" in summary


def test_raise_failures_fails_test():
    checks = SoftAssertions()
    checks.error("boom")
    checks.error("bang")

    with pytest.raises(pytest.fail.Exception, match="2 soft assertions failed"):
        checks.raise_failures()


def test_raise_failures_noop_when_clean():
    checks = SoftAssertions()
    checks.raise_failures()
    assert not checks.failed


def test_clear():
    checks = SoftAssertions()
    checks.error("boom")
    checks.clear()
    assert not checks.failed
