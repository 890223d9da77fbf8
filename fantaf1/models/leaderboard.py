from typing import Optional
from pydantic import BaseModel


class LeaderboardEntry(BaseModel):
    """Entrada en la clasificación (posición actual y tendencia)"""

    user_id: str
    name: Optional[str] = None

    position: int
    total_points: int
    jolly: int = 0
    championship_pts: int = 0

    position_delta: int = 0  # positivo = ha subido

    class Config:
        populate_by_name = True
