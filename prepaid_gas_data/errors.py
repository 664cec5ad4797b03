"""
Error types raised by the subgraph data layer

Every failure mode carries its own class and a ``kind`` tag so callers can
tell configuration mistakes, transport failures and malformed wire data
apart without parsing messages.
"""

from typing import Any, List, Optional


class SubgraphError(Exception):
    """Base class for all data layer errors"""
    kind = "subgraph"


class ValidationError(SubgraphError, ValueError):
    """Invalid builder configuration, raised before any network call"""
    kind = "validation"


class UnsupportedFilterError(ValidationError):
    """A where key or relationship filter cannot be expressed"""
    kind = "unsupported_filter"


class QueryError(SubgraphError):
    """The transport failed or the response did not have the expected shape

    Attributes:
        cause: Original exception, if any
        errors: GraphQL ``errors`` array returned by the server
        status_code: HTTP status of a non-2xx response
    """
    kind = "query"

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        errors: Optional[List[Any]] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.cause = cause
        self.errors = errors or []
        self.status_code = status_code
        if cause is not None:
            self.__cause__ = cause


class ParseError(SubgraphError, ValueError):
    """A wire value could not be parsed back into an integer"""
    kind = "parse"

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value
