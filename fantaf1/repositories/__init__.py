from .race_repository import RaceRepository
from .submission_repository import SubmissionRepository
from .championship_repository import ChampionshipRepository
from .ranking_repository import RankingRepository
from .snapshot_repository import SnapshotRepository

__all__ = [
    "RaceRepository",
    "SubmissionRepository",
    "ChampionshipRepository",
    "RankingRepository",
    "SnapshotRepository",
]
