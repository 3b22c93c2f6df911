"""
Result type: explicit success/failure tracks for every fallible stage.

A Result[T] is either Success(value: T) or Failure(error: FailureDescription).
Stages return Result instead of raising, and .flat_map() short-circuits
on the first failure:

    resolve path ──Success──▶ scan manifest ──Success──▶ write artifact
         │ Failure                 │ Failure                  │ Failure
         └─────────────────────────┴──────────────────────────┴──▶ Result[T]

Per-entry decoding also yields a Result[bytes], so the emitter can see
why a slot is empty instead of receiving a silently swallowed exception.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


@unique
class ErrorCode(Enum):
    """Failure categories for the extraction pipeline."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """Missing keybox location or a path that is not valid UTF-8 (fatal)."""

    PARSE_ERROR = "PARSE_ERROR"
    """Manifest is not well-formed or uses forbidden XML constructs (fatal)."""

    IO_ERROR = "IO_ERROR"
    """Generated artifact could not be written (fatal)."""

    DECODE_ERROR = "DECODE_ERROR"
    """A single captured block is not valid base64 (recovered per slot)."""

    NOT_FOUND = "NOT_FOUND"
    """No manifest entry exists for a slot (recovered per slot)."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """Immutable failure descriptor: error code, message and optional cause."""

    code: ErrorCode
    message: str
    exception: Optional[BaseException] = field(default=None, repr=False)

    def full_stack_trace(self) -> str:
        """Message followed by the formatted exception chain, if any."""
        if self.exception is None:
            return self.message
        tb = "".join(
            traceback.format_exception(type(self.exception), self.exception, self.exception.__traceback__)
        )
        return f"{self.message}\n{tb}"


class Result(Generic[T]):
    """
    Success or Failure. All transformations short-circuit on failure.

        >>> Result.success(b"\\x00").map(len).value()
        1
        >>> Result.failure(ErrorCode.DECODE_ERROR, "bad").get_or_else(b"")
        b''
    """

    # ──────────────────────── Introspection ────────────────────────

    def is_success(self) -> bool:
        return isinstance(self, Success)

    def is_failure(self) -> bool:
        return isinstance(self, Failure)

    def value(self) -> T:
        """Extract the success value. Raises ValueError on a Failure."""
        match self:
            case Success(v):
                return v
            case Failure(err):
                raise ValueError(f"Cannot get value from a Failure: {err.message}")
        raise TypeError("unreachable")  # pragma: no cover

    def error(self) -> FailureDescription:
        """Extract the failure description. Raises ValueError on a Success."""
        match self:
            case Failure(err):
                return err
            case Success(v):
                raise ValueError(f"Cannot get error from a Success: {v!r}")
        raise TypeError("unreachable")  # pragma: no cover

    # ──────────────────────── Transformations ────────────────────────

    def either(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[FailureDescription], R],
    ) -> R:
        """Apply one of two functions depending on the track."""
        match self:
            case Success(v):
                return on_success(v)
            case Failure(err):
                return on_failure(err)
        raise TypeError("unreachable")  # pragma: no cover

    def map(self, mapper: Callable[[T], U]) -> Result[U]:
        """Transform the success value. Failures pass through unchanged."""
        match self:
            case Success(v):
                return Success(mapper(v))
            case Failure(err):
                return Failure(err)
        raise TypeError("unreachable")  # pragma: no cover

    def flat_map(self, mapper: Callable[[T], Result[U]]) -> Result[U]:
        """
        Chain a Result-returning stage. Short-circuits on failure.

            resolve_manifest_path(directory).flat_map(scanner.scan)
        """
        match self:
            case Success(v):
                return mapper(v)
            case Failure(err):
                return Failure(err)
        raise TypeError("unreachable")  # pragma: no cover

    # ──────────────────────── Side Effects ────────────────────────

    def peek(self, action: Callable[[T], Any]) -> Result[T]:
        """Run a side effect (usually logging) on the success value."""
        match self:
            case Success(v):
                action(v)
        return self

    def peek_failure(self, action: Callable[[FailureDescription], Any]) -> Result[T]:
        """Run a side effect on the failure description."""
        match self:
            case Failure(err):
                action(err)
        return self

    # ──────────────────────── Recovery ────────────────────────

    def get_or_else(self, default: T) -> T:
        """Extract the value or return a default on failure."""
        match self:
            case Success(v):
                return v
            case _:
                return default

    # ──────────────────────── Static Factories ────────────────────────

    @staticmethod
    def success(value: T) -> Result[T]:
        return Success(value)

    @staticmethod
    def failure(
        code: ErrorCode,
        message: str,
        exception: Optional[BaseException] = None,
    ) -> Result[T]:
        """
        Create a failed Result.

            Result.failure(ErrorCode.IO_ERROR, "Cannot write artifact", exc)
        """
        return Failure(FailureDescription(code=code, message=message, exception=exception))

    @staticmethod
    def from_computation(
        computation: Callable[[], T],
        error_code: ErrorCode,
        error_message: str,
    ) -> Result[T]:
        """
        Run a computation that may raise and capture any exception as a Failure.

        This is the adapter-boundary tool: I/O and decoding calls are wrapped
        here so nothing above the adapters needs try/except.
        """
        try:
            return Result.success(computation())
        except Exception as e:
            return Result.failure(error_code, f"{error_message}: {e}", e)

    @staticmethod
    def from_optional(
        value: Optional[T],
        error_message: str,
        error_code: ErrorCode = ErrorCode.NOT_FOUND,
    ) -> Result[T]:
        """Success for a present value, Failure(error_code) for None."""
        if value is not None:
            return Result.success(value)
        return Result.failure(error_code, error_message)


@dataclass(frozen=True, slots=True)
class Success(Result[T]):
    """The success track: wraps a value of type T."""

    _value: T

    def __post_init__(self) -> None:
        if self._value is None:
            raise TypeError("Success value must not be None")

    def __repr__(self) -> str:
        return f"Success({self._value!r})"


@dataclass(frozen=True, slots=True, eq=False)
class Failure(Result[T]):
    """The failure track: wraps a FailureDescription."""

    _error: FailureDescription

    def __post_init__(self) -> None:
        if self._error is None:
            raise TypeError("Failure error must not be None")

    def __repr__(self) -> str:
        return f"Failure({self._error.code.value}: {self._error.message!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Failure):
            return self._error.code == other._error.code and self._error.message == other._error.message
        return NotImplemented

    def __hash__(self) -> int:
        return hash(("Failure", self._error.code, self._error.message))
