"""
Excepciones del motor de puntos.

Precondition/IllegalState abortan la ejecución antes de escribir nada.
Persistence es por usuario y se puede reintentar.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fantaf1.models.scoring import ScoringReport


class ScoringError(Exception):
    """Base exception for scoring errors."""
    pass


class PreconditionError(ScoringError):
    """Raised when the official result is missing or incomplete."""
    pass


class RaceNotFoundError(PreconditionError):
    """Raised when the race document does not exist."""
    pass


class IllegalStateError(ScoringError):
    """Raised when scoring a cancelled race or structurally invalid picks."""
    pass


class PersistenceError(ScoringError):
    """Raised when a store read/write fails (network, contention)."""

    def __init__(self, message: str, user_id: str | None = None):
        self.user_id = user_id
        super().__init__(message)


class PartialFailureError(ScoringError):
    """Raised when some per-user writes of a scoring run failed."""

    def __init__(self, report: "ScoringReport"):
        self.report = report
        failed = ", ".join(report.failed_user_ids)
        super().__init__(
            f"{len(report.failed_user_ids)} of {report.processed} users failed: {failed}"
        )
