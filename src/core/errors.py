"""Typed error model with stable, machine-readable error codes.

Every failure is fatal to the current invocation. Errors chain their cause
(``raise ... from exc``) and render it in ``str()`` so the message printed on
stderr explains what was attempted and what failed.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum


class ErrorCode(str, Enum):
    """Stable error identifiers used across the CLI and services."""

    CONFIGURATION = "E_CONFIGURATION"
    REQUEST = "E_REQUEST"
    NETWORK = "E_NETWORK"
    INTEGRITY = "E_INTEGRITY"
    STORAGE = "E_STORAGE"
    UNIMPLEMENTED = "E_UNIMPLEMENTED"


class HttpResourceError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        for k, v in self.context.items():
            if v:
                parts.append(f"  {k}: {v}")
        if self.__cause__ is not None:
            parts.append(f"Caused by: {self.__cause__}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ConfigurationError(HttpResourceError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.CONFIGURATION, hint=hint, context=context)


class RequestConstructionError(HttpResourceError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.REQUEST, hint=hint, context=context)


class NetworkError(HttpResourceError):
    """Connection, transport or timeout failure. Never retried."""

    def __init__(
        self,
        message: str,
        *,
        timed_out: bool = False,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.NETWORK, hint=hint, context=context)
        self.timed_out = timed_out


class IntegrityMismatchError(HttpResourceError):
    """The observed etag/sha1 differs from the pinned one."""

    def __init__(
        self,
        *,
        field: str,
        expected: str,
        observed: str | None,
        url: str | None = None,
    ) -> None:
        observed_text = observed if observed else "<none>"
        super().__init__(
            f"unexpected {field} {observed_text!r}, expected {expected!r}",
            code=ErrorCode.INTEGRITY,
            hint="The pinned version is no longer what the server serves.",
            context={
                "field": field,
                "url": url or "",
                "expected": expected,
                "observed": observed_text,
            },
        )
        self.field = field
        self.expected = expected
        self.observed = observed


class StorageError(HttpResourceError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.STORAGE, hint=hint, context=context)


class UnimplementedError(HttpResourceError):
    def __init__(self, message: str = "not implemented") -> None:
        super().__init__(message, code=ErrorCode.UNIMPLEMENTED)


__all__ = [
    "ConfigurationError",
    "ErrorCode",
    "HttpResourceError",
    "IntegrityMismatchError",
    "NetworkError",
    "RequestConstructionError",
    "StorageError",
    "UnimplementedError",
]
