"""Result and outcome models shared by the search pipeline and its callers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field


class SearchResult(BaseModel):
    """One match returned by the provider; list position is the relevance rank."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    target_url: str = ""
    description: str = ""
    score: float | None = Field(default=None, ge=0.0, le=1.0)


class FailureKind(str, Enum):
    ENCODING = "encoding"
    CONFIGURATION = "configuration"
    NETWORK = "network"
    HTTP_STATUS = "http_status"
    PARSE = "parse"
    NO_MATCHES = "no_matches"
    INTERNAL = "internal"


@dataclass(frozen=True, slots=True)
class SearchSuccess:
    results: tuple[SearchResult, ...]

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class SearchFailure:
    kind: FailureKind
    message: str
    status_code: int | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return False


SearchOutcome = Union[SearchSuccess, SearchFailure]


__all__ = [
    "FailureKind",
    "SearchFailure",
    "SearchOutcome",
    "SearchResult",
    "SearchSuccess",
]
