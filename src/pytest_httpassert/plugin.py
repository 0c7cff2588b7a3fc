"""Pytest plugin for functional HTTP assertions.

This module wires soft assertions into pytest: fixtures hand out a
failure collector and a request issuer bound to it, and the report hook
turns collected failures into a failed test.
"""

import logging
from collections.abc import Iterator
from typing import Any

import bs4
import pytest
from _pytest import config, nodes, reports, runner
from _pytest.config import argparsing

from pytest_httpassert.constants import ConfigOptions

from .report_formatter import format_request, format_response
from .reporting import SoftAssertions
from .request import Requester
from .selector import DEFAULT_PARSER

logger = logging.getLogger(__name__)

soft_assertions_key = pytest.StashKey[SoftAssertions]()
requester_key = pytest.StashKey[Requester]()


def _timeout_option(config: config.Config) -> float | None:
    raw = str(config.getini(ConfigOptions.TIMEOUT)).strip()
    if not raw:
        return None
    return float(raw)


def pytest_addoption(parser: argparsing.Parser) -> None:
    """Add ini options for the plugin.

    - httpassert_timeout: Request timeout in seconds, empty for none
    - httpassert_parser: BeautifulSoup tree builder used by selector checks
    - httpassert_report_exchange: Attach the last request/response to reports
    """
    parser.addini(
        name=ConfigOptions.TIMEOUT,
        help="Request timeout in seconds. Empty means wait indefinitely.",
        type="string",
        default="",
    )
    parser.addini(
        name=ConfigOptions.PARSER,
        help="BeautifulSoup parser used to build documents for selector assertions.",
        type="string",
        default=DEFAULT_PARSER,
    )
    parser.addini(
        name=ConfigOptions.REPORT_EXCHANGE,
        help="Add the last HTTP request and response to failed test reports.",
        type="bool",
        default=True,
    )


def pytest_configure(config: config.Config) -> None:
    """Validate configuration settings.

    Raises:
        ValueError: If the timeout is not a positive number or the parser
            is not available
    """
    try:
        timeout = _timeout_option(config)
    except ValueError:
        raise ValueError("httpassert_timeout must be a number of seconds") from None
    if timeout is not None and timeout <= 0:
        raise ValueError("httpassert_timeout must be greater than 0")

    parser = str(config.getini(ConfigOptions.PARSER))
    try:
        bs4.BeautifulSoup("", features=parser)
    except bs4.FeatureNotFound:
        raise ValueError(f"httpassert_parser '{parser}' is not available") from None


@pytest.fixture
def soft_assertions(request: pytest.FixtureRequest) -> SoftAssertions:
    """Failure collector checked once the test body has run."""
    collector = SoftAssertions()
    request.node.stash[soft_assertions_key] = collector
    return collector


@pytest.fixture
def http_client(request: pytest.FixtureRequest, soft_assertions: SoftAssertions) -> Iterator[Requester]:
    """Request issuer reporting to the test's soft assertions."""
    requester = Requester(
        soft_assertions,
        timeout=_timeout_option(request.config),
        parser=str(request.config.getini(ConfigOptions.PARSER)),
    )
    request.node.stash[requester_key] = requester
    with requester:
        yield requester


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: nodes.Item, call: runner.CallInfo[Any]) -> Any:
    """Fail tests that recorded soft assertion failures.

    Also attaches the last HTTP exchange made through ``http_client`` as
    report sections.
    """
    outcome = yield
    report: reports.TestReport = outcome.get_result()

    if call.when != "call":
        return

    collector = item.stash.get(soft_assertions_key, None)
    if collector is not None and collector.failed:
        logger.info(f"{item.nodeid}: {len(collector.failures)} soft assertion failure(s)")
        if not report.passed:
            report.sections.append(("Soft assertions", collector.summary()))
        elif hasattr(report, "wasxfail"):
            report.outcome = "skipped"
        else:
            report.outcome = "failed"
            report.longrepr = collector.summary()

    requester = item.stash.get(requester_key, None)
    if requester is None or not item.config.getini(ConfigOptions.REPORT_EXCHANGE):
        return

    last = requester.last_response
    if last is None:
        return
    if last.request is not None:
        report.sections.append(("HTTP Request", format_request(last.request)))
    if last.response is not None:
        report.sections.append(("HTTP Response", format_response(last.response)))
