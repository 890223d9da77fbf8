from typing import Optional
from pydantic import BaseModel, Field

from fantaf1.core.exceptions import PartialFailureError
from fantaf1.models.ranking import LedgerLine


class RaceScore(BaseModel):
    """Puntos de una formación para una gara, ya ajustados"""

    user_id: str
    main_pts: int
    sprint_pts: int = 0
    jolly_granted: int = 0

    def to_ledger_line(self) -> LedgerLine:
        return LedgerLine(
            main_pts=self.main_pts,
            sprint_pts=self.sprint_pts,
            jolly_granted=self.jolly_granted,
        )


class ChampionshipScore(BaseModel):
    user_id: str
    drivers_pts: int
    constructors_pts: int
    jolly_granted: int = 0

    @property
    def total(self) -> int:
        return self.drivers_pts + self.constructors_pts

    def to_ledger_line(self) -> LedgerLine:
        return LedgerLine(main_pts=self.total, jolly_granted=self.jolly_granted)


class LedgerDelta(BaseModel):
    """Resultado de reconciliar una línea del ledger"""

    user_id: str
    key: str
    delta: int
    jolly_delta: int
    total_points: int


class ScoringReport(BaseModel):
    """Resumen de una ejecución de cálculo de puntos"""

    kind: str  # race | championship
    key: Optional[str] = None

    processed: int = 0
    updated_user_ids: list[str] = Field(default_factory=list)
    failed_user_ids: list[str] = Field(default_factory=list)

    snapshot_id: Optional[str] = None

    @property
    def updated(self) -> int:
        return len(self.updated_user_ids)

    @property
    def succeeded(self) -> bool:
        return not self.failed_user_ids

    @property
    def message(self) -> str:
        if self.succeeded:
            return f"Cálculo completado: actualizados {self.updated} usuarios"
        return (
            f"Cálculo parcial: actualizados {self.updated} usuarios, "
            f"fallaron {len(self.failed_user_ids)} ({', '.join(self.failed_user_ids)})"
        )

    def raise_for_failures(self) -> None:
        if self.failed_user_ids:
            raise PartialFailureError(self)


class SubmissionBreakdown(BaseModel):
    """Detalle por casilla de una formación, para la tabla de resultados"""

    user_id: str
    is_late: bool = False

    main: dict[str, int]
    sprint: dict[str, int]

    points_earned: Optional[int] = None
    points_earned_sprint: Optional[int] = None
