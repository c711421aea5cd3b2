# =============================================================================
# Error Handling Types (Result + ErrorReport)
# =============================================================================
# Configuration problems travel as Result values; non-fatal conditions met
# while building a menu (alphabet exhausted, capacity unreachable) are
# collected in an ErrorReport attached to the result instead of raised.

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from loguru import logger

T = TypeVar('T')


class ErrorType(Enum):
    FILE_NOT_FOUND = "file_not_found"
    PARSE_ERROR = "parse_error"
    VALIDATION_ERROR = "validation_error"
    LABELS_EXHAUSTED = "labels_exhausted"
    CAPACITY_BLOCKED = "capacity_blocked"


@dataclass
class Error:
    error_type: ErrorType
    message: str
    context: dict = field(default_factory=dict)
    original_exception: Exception | None = None

    def describe(self) -> str:
        """One-line description for a terminal, naming the offending option."""
        option = self.context.get("option")
        if option:
            return f"{self.message} [{option}]"
        return self.message


@dataclass
class Result(Generic[T]):
    success: bool
    value: T = None
    error: Error | None = None

    @staticmethod
    def ok(value: T) -> 'Result[T]':
        return Result(success=True, value=value)

    @staticmethod
    def err(error: Error) -> 'Result[T]':
        return Result(success=False, error=error)

    def is_ok(self) -> bool:
        return self.success

    def is_err(self) -> bool:
        return not self.success


@dataclass
class ErrorReport:
    errors: list[Error] = field(default_factory=list)
    warnings: list[Error] = field(default_factory=list)

    def _log(self, level: str, error: Error):
        logger.log(
            level,
            error.message,
            operation="error_report",
            status=level.lower(),
            error_type=error.error_type.value,
            **error.context
        )

    def add_error(self, error: Error):
        self.errors.append(error)
        self._log("ERROR", error)

    def add_warning(self, error: Error):
        self.warnings.append(error)
        self._log("WARNING", error)

    def of_type(self, error_type: ErrorType) -> list[Error]:
        """Errors and warnings of one type, errors first."""
        return [e for e in self.errors + self.warnings if e.error_type is error_type]

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def summary(self) -> dict:
        return {
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "types": sorted({e.error_type.value for e in self.errors + self.warnings}),
        }

    def log_summary(self, op_trace_id: str):
        """Log the outcome of one menu build."""
        logger.debug(
            "Menu build report",
            operation="error_report",
            status="complete" if not self.has_errors() else "failed",
            trace_id=op_trace_id,
            metrics=self.summary()
        )
