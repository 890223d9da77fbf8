from typing import Optional
from pydantic import BaseModel, Field


class Submission(BaseModel):
    """Formación de un usuario para una gara"""

    id: str = Field(..., alias="_id")  # race_id:user_id

    race_id: str
    user_id: str

    main_p1: Optional[str] = None
    main_p2: Optional[str] = None
    main_p3: Optional[str] = None
    main_jolly: Optional[str] = None
    main_jolly2: Optional[str] = None

    # Solo en fines de semana con sprint
    sprint_p1: Optional[str] = None
    sprint_p2: Optional[str] = None
    sprint_p3: Optional[str] = None
    sprint_jolly: Optional[str] = None

    is_late: bool = False

    # Cache escrita por el motor de puntos
    points_earned: Optional[int] = None
    points_earned_sprint: Optional[int] = None

    class Config:
        populate_by_name = True

    @property
    def has_main_picks(self) -> bool:
        return bool(self.main_p1)

    @property
    def has_sprint_picks(self) -> bool:
        return bool(self.sprint_p1)
