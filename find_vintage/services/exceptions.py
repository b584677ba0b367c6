"""Domain-specific exceptions."""

from __future__ import annotations

from find_vintage.domain.models import FailureKind, SearchFailure

ERROR_BODY_PREVIEW_LIMIT = 500


class ServiceError(Exception):
    pass


class SearchError(ServiceError):
    """Base for failures that end a search call."""

    kind: FailureKind = FailureKind.INTERNAL

    def to_failure(self) -> SearchFailure:
        return SearchFailure(kind=self.kind, message=str(self))


class EncodingError(SearchError):
    kind = FailureKind.ENCODING


class ConfigurationError(SearchError):
    kind = FailureKind.CONFIGURATION


class NetworkError(SearchError):
    kind = FailureKind.NETWORK


class HttpStatusError(SearchError):
    kind = FailureKind.HTTP_STATUS

    def __init__(self, status_code: int, body: bytes = b"") -> None:
        super().__init__(f"Provider responded with HTTP {status_code}")
        self.status_code = status_code
        self.body = body

    @property
    def body_preview(self) -> str:
        return self.body.decode("utf-8", errors="replace")[:ERROR_BODY_PREVIEW_LIMIT]

    def to_failure(self) -> SearchFailure:
        return SearchFailure(
            kind=self.kind,
            message=str(self),
            status_code=self.status_code,
            detail=self.body_preview or None,
        )


class ParseError(SearchError):
    kind = FailureKind.PARSE


__all__ = [
    "ConfigurationError",
    "EncodingError",
    "HttpStatusError",
    "NetworkError",
    "ParseError",
    "SearchError",
    "ServiceError",
]
