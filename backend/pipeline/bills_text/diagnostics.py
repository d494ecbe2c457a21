"""Warnings, notes, and the end-of-run report."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """A message about one bill (or the run) worth reporting at the end."""

    message: str
    bill_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"message": self.message}
        if self.bill_id:
            data["bill_id"] = self.bill_id
        return data


@dataclass
class RunDiagnostics:
    """Collects warnings and notes for a single run.

    Owned by the run coordinator and handed to each stage; nothing carries
    over between runs.
    """

    warnings: list[Diagnostic] = field(default_factory=list)
    notes: list[Diagnostic] = field(default_factory=list)

    def warn(self, message: str, bill_id: str | None = None) -> None:
        logger.debug(f"Warning [{bill_id or '-'}]: {message}")
        self.warnings.append(Diagnostic(message, bill_id))

    def note(self, message: str, bill_id: str | None = None) -> None:
        logger.debug(f"Note [{bill_id or '-'}]: {message}")
        self.notes.append(Diagnostic(message, bill_id))


@dataclass
class RunReport:
    """Outcome of one bill text run."""

    congress: int
    bills_processed: int = 0
    versions_processed: int = 0
    bills_skipped: int = 0
    bills_failed: int = 0
    warnings: list[Diagnostic] = field(default_factory=list)
    notes: list[Diagnostic] = field(default_factory=list)

    @property
    def summary(self) -> str:
        return (
            f"Loaded in full text of {self.bills_processed} bills "
            f"({self.versions_processed} versions) for congress #{self.congress}."
        )


class Reporter(Protocol):
    """Receives the end-of-run report."""

    def success(self, message: str, report: RunReport) -> None: ...

    def warning(self, message: str, warnings: list[Diagnostic]) -> None: ...

    def note(self, message: str, notes: list[Diagnostic]) -> None: ...


class LoggingReporter:
    """Writes the report to the log."""

    def success(self, message: str, report: RunReport) -> None:
        logger.info(message)
        if report.bills_skipped or report.bills_failed:
            logger.info(
                f"  {report.bills_skipped} skipped, {report.bills_failed} failed"
            )

    def warning(self, message: str, warnings: list[Diagnostic]) -> None:
        logger.warning(f"{message} ({len(warnings)})")
        for item in warnings:
            prefix = f"[{item.bill_id}] " if item.bill_id else ""
            logger.warning(f"  {prefix}{item.message}")

    def note(self, message: str, notes: list[Diagnostic]) -> None:
        logger.info(f"{message} ({len(notes)})")
        for item in notes:
            prefix = f"[{item.bill_id}] " if item.bill_id else ""
            logger.info(f"  {prefix}{item.message}")
