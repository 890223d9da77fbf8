from typing import Optional
from pydantic import BaseModel, Field


class LedgerLine(BaseModel):
    """Puntos registrados para una clave del ledger (una gara o el campeonato)"""

    main_pts: int = 0
    sprint_pts: int = 0
    jolly_granted: int = 0

    @property
    def total(self) -> int:
        return self.main_pts + self.sprint_pts


class RankingEntry(BaseModel):
    """Entrada de la clasificación de un usuario, viva toda la temporada"""

    user_id: str = Field(..., alias="_id")
    name: Optional[str] = None

    total_points: int = 0
    jolly: int = 0

    points_by_race: dict[str, LedgerLine] = Field(default_factory=dict)

    championship_pts: int = 0
    championship_jolly: int = 0
    championship_drivers: list[str] = Field(default_factory=list)
    championship_constructors: list[str] = Field(default_factory=list)

    ledger_version: int = 0

    class Config:
        populate_by_name = True
