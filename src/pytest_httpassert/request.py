import logging
from collections.abc import Mapping
from http import HTTPMethod
from typing import Self

import httpx

from .constants import FORM_CONTENT_TYPE
from .exceptions import TransportError
from .models import HeaderSet, ParameterSet
from .reporting import FailureReporter
from .response import TestResponse
from .selector import DEFAULT_PARSER

logger = logging.getLogger(__name__)

Params = Mapping[str, str] | ParameterSet | None
Headers = Mapping[str, str] | HeaderSet | None


def build_get_url(url: str, params: ParameterSet | None) -> str:
    if params is None:
        return url
    return f"{url}?{params.encode()}"


def build_post_body(params: ParameterSet | None) -> bytes | None:
    if params is None:
        return None
    return params.encode().encode("ascii")


def build_headers(method: HTTPMethod, headers: HeaderSet | None) -> httpx.Headers:
    """Caller headers first, then the form content type for every POST."""
    result = headers.to_httpx() if headers is not None else httpx.Headers()
    if method == HTTPMethod.POST:
        result["Content-Type"] = FORM_CONTENT_TYPE
    return result


class Requester:
    """Issues single requests against a server under test.

    Redirects are never followed, so 3xx responses reach the assertions
    untouched. Transport failures are reported to ``reporter`` and yield a
    TestResponse without a response.
    """

    def __init__(
        self,
        reporter: FailureReporter,
        *,
        client: httpx.Client | None = None,
        timeout: float | None = None,
        parser: str = DEFAULT_PARSER,
    ):
        self.reporter = reporter
        self.timeout = timeout
        self.parser = parser
        self._owns_client = client is None
        self.client = client if client is not None else httpx.Client(follow_redirects=False)
        self.last_response: TestResponse | None = None
        self._issued: list[TestResponse] = []

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        for issued in self._issued:
            issued.close()
        self._issued.clear()
        if self._owns_client:
            self.client.close()

    def get(self, url: str, params: Params = None, headers: Headers = None) -> TestResponse:
        request_url = build_get_url(url, ParameterSet.coerce(params))
        return self._issue(HTTPMethod.GET, request_url, None, HeaderSet.coerce(headers))

    def post(self, url: str, params: Params = None, headers: Headers = None) -> TestResponse:
        body = build_post_body(ParameterSet.coerce(params))
        return self._issue(HTTPMethod.POST, url, body, HeaderSet.coerce(headers))

    def _issue(self, method: HTTPMethod, url: str, body: bytes | None, headers: HeaderSet | None) -> TestResponse:
        request: httpx.Request | None = None
        response: httpx.Response | None = None

        try:
            request = self.client.build_request(
                method.value,
                url,
                headers=build_headers(method, headers),
                content=body,
                timeout=self.timeout,
            )
            response = self._send(request)
        except (httpx.InvalidURL, UnicodeEncodeError, TransportError) as e:
            logger.error(f"{method.value} {url} failed: {str(e)}")
            self.reporter.error(f"Bad response: {str(e)}")

        result = TestResponse(url=url, request=request, response=response, parser=self.parser)
        self._issued.append(result)
        self.last_response = result
        return result

    def _send(self, request: httpx.Request) -> httpx.Response:
        logger.info(f"{request.method} {request.url}")
        try:
            response = self.client.send(request, stream=True, follow_redirects=False)
        except httpx.TimeoutException as e:
            raise TransportError(f"HTTP request timed out: {str(e)}") from e
        except httpx.ConnectError as e:
            raise TransportError(f"HTTP connection error: {str(e)}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP request failed: {str(e)}") from e
        logger.info(f"{request.method} {request.url} -> {response.status_code}")
        return response


def _issue_once(method: HTTPMethod, url: str, params: Params, headers: Headers, reporter: FailureReporter, client: httpx.Client | None) -> TestResponse:
    requester = Requester(reporter, client=client)
    if method == HTTPMethod.POST:
        result = requester.post(url, params, headers)
    else:
        result = requester.get(url, params, headers)
    if not requester._owns_client:
        return result
    if result.response is None:
        requester.client.close()
    else:
        # released together with the response body
        result._client = requester.client
    return result


def get(url: str, params: Params = None, headers: Headers = None, *, reporter: FailureReporter, client: httpx.Client | None = None) -> TestResponse:
    """Issue a GET request and wrap the result for later assertions."""
    return _issue_once(HTTPMethod.GET, url, params, headers, reporter, client)


def post(url: str, params: Params = None, headers: Headers = None, *, reporter: FailureReporter, client: httpx.Client | None = None) -> TestResponse:
    """Issue a POST request and wrap the result for later assertions."""
    return _issue_once(HTTPMethod.POST, url, params, headers, reporter, client)
