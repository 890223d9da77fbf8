from typing import Optional
from pydantic import BaseModel, Field


class OfficialResult(BaseModel):
    """Podio oficial de una gara (y de la sprint si se corrió)"""

    p1: Optional[str] = None
    p2: Optional[str] = None
    p3: Optional[str] = None

    sp1: Optional[str] = None
    sp2: Optional[str] = None
    sp3: Optional[str] = None

    double_points: bool = False  # solo la última gara de la temporada

    cancelled_main: bool = False
    cancelled_sprint: bool = False

    class Config:
        populate_by_name = True

    @property
    def podium(self) -> list[Optional[str]]:
        return [self.p1, self.p2, self.p3]

    @property
    def sprint_podium(self) -> list[Optional[str]]:
        return [self.sp1, self.sp2, self.sp3]

    @property
    def is_complete(self) -> bool:
        return all(self.podium)

    @property
    def is_scorable(self) -> bool:
        return self.is_complete and not self.cancelled_main

    @property
    def has_sprint(self) -> bool:
        return bool(self.sp1) and not self.cancelled_sprint


class Race(BaseModel):
    id: str = Field(..., alias="_id")

    season: int
    round: int
    name: Optional[str] = None

    cancelled_main: bool = False
    cancelled_sprint: bool = False

    official_results: Optional[OfficialResult] = None

    class Config:
        populate_by_name = True

    def effective_result(self) -> Optional[OfficialResult]:
        """Resultado oficial con los flags de cancelación de la gara aplicados"""
        if self.official_results is None:
            return None
        return self.official_results.model_copy(update={
            "cancelled_main": self.cancelled_main or self.official_results.cancelled_main,
            "cancelled_sprint": self.cancelled_sprint or self.official_results.cancelled_sprint,
        })


class ChampionshipResult(BaseModel):
    """Top 3 final de pilotos (p1..p3) y constructores (c1..c3)"""

    p1: Optional[str] = None
    p2: Optional[str] = None
    p3: Optional[str] = None

    c1: Optional[str] = None
    c2: Optional[str] = None
    c3: Optional[str] = None

    class Config:
        populate_by_name = True

    @property
    def drivers(self) -> list[Optional[str]]:
        return [self.p1, self.p2, self.p3]

    @property
    def constructors(self) -> list[Optional[str]]:
        return [self.c1, self.c2, self.c3]

    @property
    def is_complete(self) -> bool:
        return all(self.drivers) and all(self.constructors)
