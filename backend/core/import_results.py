from enum import Enum
from typing import Iterable

from pydantic import BaseModel


class ImportStatus(str, Enum):
    CREATED = "Created"
    UPDATED = "Updated"
    WARNING = "Warning"
    ERROR = "Error"


class ImportResult(BaseModel):
    row: int
    status: ImportStatus
    message: str


class ImportSummary(BaseModel):
    created: int = 0
    updated: int = 0
    warning: int = 0
    error: int = 0


def created(row: int, message: str) -> ImportResult:
    return ImportResult(row=row, status=ImportStatus.CREATED, message=message)


def updated(row: int, message: str) -> ImportResult:
    return ImportResult(row=row, status=ImportStatus.UPDATED, message=message)


def failed(row: int, message: str) -> ImportResult:
    return ImportResult(row=row, status=ImportStatus.ERROR, message=message)


def summarize_results(results: Iterable[ImportResult]) -> ImportSummary:
    summary = ImportSummary()
    for r in results:
        if r.status == ImportStatus.CREATED:
            summary.created += 1
        elif r.status == ImportStatus.UPDATED:
            summary.updated += 1
        elif r.status == ImportStatus.WARNING:
            summary.warning += 1
        else:
            summary.error += 1
    return summary
