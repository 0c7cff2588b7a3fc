import logging
from dataclasses import dataclass, field
from typing import Self

import httpx

from .exceptions import BodyReadError, DocumentParseError, SelectorError
from .reporting import FailureReporter
from .selector import DEFAULT_PARSER, apply_query, compile_selector, parse_document, split_selector

logger = logging.getLogger(__name__)


@dataclass
class TestResponse:
    """An issued request paired with the response it received.

    The response is left streaming: its body is read by the first body
    based assertion and closed right after. Later reads see an exhausted
    stream and get an empty body.

    Every assertion reports failures to the reporter it is given and
    returns the wrapper, so checks can be chained.
    """

    __test__ = False

    url: str
    request: httpx.Request | None
    response: httpx.Response | None
    parser: str = DEFAULT_PARSER
    _client: httpx.Client | None = field(default=None, repr=False)
    _body_consumed: bool = field(default=False, init=False, repr=False)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self.response is not None:
            self.response.close()
        if self._client is not None:
            self._client.close()
            self._client = None

    @property
    def body_consumed(self) -> bool:
        return self._body_consumed

    def read_body(self, reporter: FailureReporter) -> bytes | None:
        """Read the whole body once, then release the response.

        Returns None when there is nothing to read or the read failed, in
        which case the failure has already been reported.
        """
        if not self._has_response(reporter):
            return None

        if self._body_consumed:
            logger.warning(f"Response body of {self.url} was already consumed")
            return b""

        self._body_consumed = True
        try:
            return self._consume_body()
        except BodyReadError as e:
            logger.error(str(e))
            reporter.error(f"Response not readable: {self.url}")
            return None

    def _consume_body(self) -> bytes:
        try:
            return b"".join(self.response.iter_bytes())
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise BodyReadError(f"Cannot read response body of {self.url}: {str(e)}") from e
        finally:
            self.close()

    def _has_response(self, reporter: FailureReporter) -> bool:
        if self.response is None:
            reporter.error(f"No response received: {self.url}")
            return False
        return True

    def _body_text(self, body: bytes) -> str:
        return body.decode(self.response.encoding or "utf-8", errors="replace")

    def assert_redirected_to(self, url: str, reporter: FailureReporter) -> Self:
        """Check that the response sends the client to ``url``.

        The Location header is resolved against the request URL before the
        exact string comparison.
        """
        if not self._has_response(reporter):
            return self

        location = self.response.headers.get("Location")
        try:
            resolved = self._resolve_location(location)
        except httpx.InvalidURL:
            resolved = None

        if resolved is None:
            reporter.error(f"Response not a redirect: {self.response.status_code} {self.response.reason_phrase}")
        elif resolved != url:
            reporter.error(f"Redirect not matched: {resolved} does not equal {url}")
        return self

    def _resolve_location(self, location: str | None) -> str | None:
        if location is None:
            return None
        if self.request is None:
            return str(httpx.URL(location))
        return str(self.request.url.join(location))

    def assert_contains(self, text: str, reporter: FailureReporter) -> Self:
        """Check that ``text`` occurs somewhere in the response body."""
        body = self.read_body(reporter)
        if body is None:
            return self

        if text not in self._body_text(body):
            reporter.error(f"Response body does not contain {text}")
        return self

    def assert_selector(self, selector: str, reporter: FailureReporter) -> Self:
        """Check that a space separated CSS selector chain matches the body.

        Every invalid token is reported and skipped; the remaining tokens
        still form the query.
        """
        body = self.read_body(reporter)
        if body is None:
            return self

        try:
            document = parse_document(body, self.parser)
        except DocumentParseError as e:
            logger.error(str(e))
            reporter.error(f"Could not parse response: {self.url}")
            return self

        query = []
        for token in split_selector(selector):
            try:
                query.append(compile_selector(token))
            except SelectorError as e:
                logger.error(str(e))
                reporter.error(f"Problem with selector: {token}")

        if not apply_query(query, document):
            reporter.error(f"Selector not found: {selector}")
        return self

    def assert_code(self, code: int, reporter: FailureReporter) -> Self:
        if not self._has_response(reporter):
            return self

        if self.response.status_code != code:
            reporter.error(f"Invalid response code. Expected {code}, Received {self.response.status_code}")
        return self
