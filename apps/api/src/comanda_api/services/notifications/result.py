"""Uniform return contract shared by the push and mail dispatchers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PROVIDER = "provider"
    STORE = "store"


class ConfigurationError(RuntimeError):
    """Raised at startup when a required provider setting is missing or unusable."""


@dataclass(frozen=True, slots=True)
class DispatchResult(Generic[T]):
    """Outcome of a dispatcher call.

    ``value`` may be populated on failure too (e.g. an empty multicast summary),
    so callers branch on ``ok`` rather than on ``value``.
    """

    ok: bool
    value: T | None = None
    error: ErrorKind | None = None
    detail: str | None = None

    @classmethod
    def success(cls, value: T) -> "DispatchResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(
        cls,
        error: ErrorKind,
        detail: str,
        *,
        value: T | None = None,
    ) -> "DispatchResult[T]":
        return cls(ok=False, value=value, error=error, detail=detail)


def validate_required_fields(payload: object, fields: list[str]) -> list[str]:
    """Return the required fields that are absent or falsy in ``payload``."""

    if not isinstance(payload, dict):
        return list(fields)
    return [field for field in fields if not payload.get(field)]


__all__ = [
    "ConfigurationError",
    "DispatchResult",
    "ErrorKind",
    "validate_required_fields",
]
