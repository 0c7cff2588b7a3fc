"""Structural selector queries over parsed HTML documents.

A selector expression is a whitespace separated chain of simple CSS
selectors. Each token is compiled on its own and the chain is applied as
a series of descendant lookups, starting from the document root.
"""

import logging
import warnings

import bs4
import soupsieve
from bs4 import BeautifulSoup

from .exceptions import DocumentParseError, SelectorError

logger = logging.getLogger(__name__)

DEFAULT_PARSER = "html.parser"


def parse_document(body: bytes | str, parser: str = DEFAULT_PARSER) -> BeautifulSoup:
    try:
        with warnings.catch_warnings():
            # short bodies like "index.html" trip the locator heuristic
            warnings.simplefilter("ignore", bs4.MarkupResemblesLocatorWarning)
            return BeautifulSoup(body, features=parser)
    except bs4.FeatureNotFound as e:
        raise DocumentParseError(f"Unknown parser '{parser}'") from e
    except bs4.ParserRejectedMarkup as e:
        raise DocumentParseError(f"Markup rejected by '{parser}': {str(e)}") from e


def split_selector(expression: str) -> list[str]:
    return expression.split()


def compile_selector(token: str) -> soupsieve.SoupSieve:
    try:
        return soupsieve.compile(token)
    except (soupsieve.SelectorSyntaxError, NotImplementedError) as e:
        raise SelectorError(f"Invalid selector '{token}': {str(e)}") from e


def apply_query(query: list[soupsieve.SoupSieve], document: BeautifulSoup) -> list[bs4.Tag]:
    """Return the elements reached by walking ``query`` down from ``document``."""
    nodes: list[bs4.Tag] = [document]
    for step in query:
        seen: set[int] = set()
        matched: list[bs4.Tag] = []
        for node in nodes:
            for candidate in step.select(node):
                if id(candidate) not in seen:
                    seen.add(id(candidate))
                    matched.append(candidate)
        logger.debug(f"Selector step {step.pattern!r} matched {len(matched)} element(s)")
        nodes = matched
        if not nodes:
            break
    return nodes if query else []
