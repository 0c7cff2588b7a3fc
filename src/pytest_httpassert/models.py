from collections.abc import Mapping
from typing import Self

import httpx
from pydantic import Field, RootModel


class _StringMapping(RootModel[dict[str, str]]):
    root: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def coerce(cls, value: "Mapping[str, str] | _StringMapping | None") -> Self | None:
        """Build an instance from a plain mapping, passing through ready ones.

        Returns None when nothing was supplied, so callers can tell
        "absent" apart from a populated set.
        """
        match value:
            case None:
                return None
            case cls():
                return value
            case _StringMapping():
                return cls(value.root)
            case _:
                return cls.model_validate(dict(value))

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, key: str) -> str:
        return self.root[key]

    def items(self):
        return self.root.items()


class ParameterSet(_StringMapping):
    """Query string or form body parameters for a single request."""

    def encode(self) -> str:
        # keys sorted to keep the encoded form stable between runs
        return str(httpx.QueryParams(sorted(self.root.items())))


class HeaderSet(_StringMapping):
    """Headers applied verbatim to a single outgoing request."""

    def to_httpx(self) -> httpx.Headers:
        return httpx.Headers(self.root)
