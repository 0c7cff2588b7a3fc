"""Soft HTTP assertions for functional tests."""

from .exceptions import BodyReadError, DocumentParseError, HttpAssertError, SelectorError, TransportError
from .models import HeaderSet, ParameterSet
from .reporting import FailureReporter, SoftAssertions
from .request import Requester, get, post
from .response import TestResponse

__all__ = [
    "BodyReadError",
    "DocumentParseError",
    "FailureReporter",
    "HeaderSet",
    "HttpAssertError",
    "ParameterSet",
    "Requester",
    "SelectorError",
    "SoftAssertions",
    "TestResponse",
    "TransportError",
    "get",
    "post",
]
