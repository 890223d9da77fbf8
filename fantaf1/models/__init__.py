from .submission import Submission
from .race import Race, OfficialResult, ChampionshipResult
from .ranking import LedgerLine, RankingEntry
from .snapshot import RankingSnapshot, SnapshotEntry
from .scoring import RaceScore, ChampionshipScore, LedgerDelta, ScoringReport, SubmissionBreakdown
from .leaderboard import LeaderboardEntry

__all__ = [
    "Submission",
    "Race",
    "OfficialResult",
    "ChampionshipResult",
    "LedgerLine",
    "RankingEntry",
    "RankingSnapshot",
    "SnapshotEntry",
    "RaceScore",
    "ChampionshipScore",
    "LedgerDelta",
    "ScoringReport",
    "SubmissionBreakdown",
    "LeaderboardEntry",
]
