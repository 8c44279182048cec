"""
Call result model

Every client call resolves to one ApiResult: either ``Ok`` carrying the
exchange's ``result`` payload, or ``Err`` tagged with the kind of failure.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from kraken_client.core.exceptions import (
    APIError,
    ConfigurationError,
    KrakenClientError,
    ResponseParseError,
    TransportError,
    ValidationError,
)


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    TRANSPORT = "transport"
    API = "api"


_EXCEPTION_BY_KIND = {
    ErrorKind.CONFIGURATION: ConfigurationError,
    ErrorKind.VALIDATION: ValidationError,
    ErrorKind.TRANSPORT: TransportError,
}


class ApiResult(BaseModel):
    """
    Discriminated outcome of a call.

    ``ok`` is True only when the request was transported, parsed, and the
    exchange reported no errors. Exchange-reported errors are failures of
    kind ``API``; the parsed envelope is kept in ``envelope`` for callers
    that want to look at it.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ok: bool
    result: Any = None
    kind: Optional[ErrorKind] = None
    message: Optional[str] = None
    errors: List[str] = Field(default_factory=list)
    details: Dict[str, Any] = Field(default_factory=dict)
    envelope: Optional[Dict[str, Any]] = None
    exception: Optional[KrakenClientError] = Field(default=None, exclude=True, repr=False)

    @classmethod
    def success(cls, result: Any, envelope: Optional[Dict[str, Any]] = None) -> "ApiResult":
        return cls(ok=True, result=result, envelope=envelope)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        *,
        errors: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None,
        envelope: Optional[Dict[str, Any]] = None,
        exception: Optional[KrakenClientError] = None,
    ) -> "ApiResult":
        return cls(
            ok=False,
            kind=kind,
            message=message,
            errors=list(errors or []),
            details=dict(details or {}),
            envelope=envelope,
            exception=exception,
        )

    @classmethod
    def from_exception(cls, kind: ErrorKind, exc: KrakenClientError) -> "ApiResult":
        errors = exc.errors if isinstance(exc, APIError) else None
        return cls.failure(
            kind,
            exc.message,
            errors=errors,
            details=exc.details,
            exception=exc,
        )

    @classmethod
    def from_envelope(cls, envelope: Dict[str, Any]) -> "ApiResult":
        """
        Classify a parsed ``{error, result}`` response.

        An ``error`` field that is neither a list nor a string means the
        body is not an envelope; that is a TRANSPORT failure.
        """
        raw_errors = envelope.get("error")
        if raw_errors is None:
            raw_errors = []
        elif isinstance(raw_errors, str):
            raw_errors = [raw_errors] if raw_errors else []
        elif not isinstance(raw_errors, list):
            return cls.from_exception(
                ErrorKind.TRANSPORT,
                ResponseParseError(
                    "Response is not an API envelope",
                    details={"error_type": type(raw_errors).__name__},
                ),
            )
        errors = [str(e) for e in raw_errors]
        if errors:
            return cls.failure(
                ErrorKind.API,
                "; ".join(errors),
                errors=errors,
                envelope=envelope,
            )
        return cls.success(envelope.get("result"), envelope=envelope)

    @property
    def is_ok(self) -> bool:
        return self.ok

    @property
    def is_err(self) -> bool:
        return not self.ok

    def to_exception(self) -> Optional[KrakenClientError]:
        """Exception matching this failure, None for successes"""
        if self.ok:
            return None
        if self.exception is not None:
            return self.exception
        if self.kind == ErrorKind.API:
            return APIError(self.message or "Exchange error", errors=self.errors, details=self.details)
        exc_class = _EXCEPTION_BY_KIND.get(self.kind, KrakenClientError)
        return exc_class(self.message or "Request failed", details=self.details)

    def unwrap(self) -> Any:
        """
        Return the result payload or raise the tagged exception.

        Raises:
            ConfigurationError, ValidationError, TransportError or APIError
        """
        if self.ok:
            return self.result
        raise self.to_exception()

    def unwrap_or(self, default: Any) -> Any:
        return self.result if self.ok else default
