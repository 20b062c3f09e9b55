"""Exceptions raised while loading and normalizing topic datasets."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import ValidationError


@dataclass(frozen=True)
class FieldIssue:
    code: str
    message: str
    path: tuple[str | int, ...] = ()

    def __str__(self) -> str:
        where = ".".join(str(part) for part in self.path)
        return f"{where}: {self.message}" if where else self.message


class NormalizationError(ValueError):
    """A raw record field is missing, empty, or cannot be coerced."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class RecordValidationError(NormalizationError):
    """A normalized record failed its schema or a cross-field invariant.

    Every problem pydantic found is kept in ``issues`` so callers can list
    them all instead of only the first.
    """

    def __init__(self, issues: list[FieldIssue], label: str = "record"):
        self.issues = list(issues)
        lines = [f"{label} failed validation ({len(self.issues)} issue(s)):"]
        lines.extend(f"  - {issue}" for issue in self.issues)
        super().__init__("\n".join(lines))

    @classmethod
    def from_pydantic(
        cls,
        exc: ValidationError,
        label: str = "record",
        prefix: tuple[str | int, ...] = (),
    ) -> RecordValidationError:
        issues = [
            FieldIssue(
                code=err["type"],
                message=err["msg"],
                path=prefix + tuple(err["loc"]),
            )
            for err in exc.errors()
        ]
        return cls(issues, label=label)


class DatasetValidationError(RecordValidationError):
    """A whole dataset failed validation (empty, or a record is invalid)."""


class DataSourceNotFoundError(FileNotFoundError):
    """Neither the JSON nor the CSV artifact exists for a topic."""


class UnknownTopicError(KeyError):
    """A topic id that is not registered was requested."""

    def __str__(self) -> str:
        return f"Unknown topic: {self.args[0]!r}" if self.args else "Unknown topic"
