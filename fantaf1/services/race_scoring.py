"""
Race scoring engine.

Pure functions: (submission, official result, race metadata) -> points.
Nothing here touches the database; the caller persists the returned
RaceScore through the ledger.

Main race:
- Empty formation: -3 (no-show), nothing else applies
- Exact position: 12 / 10 / 7
- Each jolly on the podium (any position): +5
- Late submission: -3
- Exactly 29 -> 30 and one extra jolly token

Sprint:
- Empty formation: -3, only if the sprint was run
- Exact position: 8 / 6 / 4
- Sprint jolly on the sprint podium: +2

Final race: main and sprint are doubled after the 29 -> 30 adjustment.
"""

from typing import Iterable, Optional, Sequence

from fantaf1.core.constants import (
    BONUS_JOLLY_MAIN,
    BONUS_JOLLY_SPRINT,
    DOUBLE_POINTS_FACTOR,
    LATE_PENALTY,
    MAIN_POS_PTS,
    PENALTY_EMPTY_LIST,
    ROUND_UP_FROM,
    ROUND_UP_TO,
    SPRINT_POS_PTS,
)
from fantaf1.core.exceptions import IllegalStateError, PreconditionError
from fantaf1.models.race import OfficialResult
from fantaf1.models.scoring import RaceScore
from fantaf1.models.submission import Submission


def podium_points(
    picks: Sequence[Optional[str]],
    podium: Sequence[Optional[str]],
    table: dict[int, int]
) -> int:
    """Points for exact-position matches between picks and podium."""
    points = 0
    for position, (pick, official) in enumerate(zip(picks, podium), start=1):
        if pick and pick == official:
            points += table[position]
    return points


def jolly_bonus(
    jollies: Iterable[Optional[str]],
    podium: Sequence[Optional[str]],
    bonus: int
) -> int:
    """One bonus per jolly that finished anywhere on the podium."""
    return sum(bonus for jolly in jollies if jolly and jolly in podium)


def apply_round_up(points: int) -> tuple[int, int]:
    """
    Regla del 29: returns (points, jolly_granted).

    Only the literal value 29 triggers it.
    """
    if points == ROUND_UP_FROM:
        return ROUND_UP_TO, 1
    return points, 0


def score_main(submission: Submission, official: OfficialResult) -> int:
    """Raw main-race points, late penalty included, before round-up."""
    if not submission.has_main_picks:
        return PENALTY_EMPTY_LIST

    podium = official.podium
    points = podium_points(
        [submission.main_p1, submission.main_p2, submission.main_p3],
        podium,
        MAIN_POS_PTS
    )
    points += jolly_bonus(
        [submission.main_jolly, submission.main_jolly2],
        podium,
        BONUS_JOLLY_MAIN
    )

    if submission.is_late:
        points += LATE_PENALTY

    return points


def score_sprint(submission: Submission, official: OfficialResult) -> int:
    """Sprint points; 0 when there was no sprint or it was cancelled."""
    if not official.has_sprint:
        return 0

    if not submission.has_sprint_picks:
        return PENALTY_EMPTY_LIST

    podium = official.sprint_podium
    points = podium_points(
        [submission.sprint_p1, submission.sprint_p2, submission.sprint_p3],
        podium,
        SPRINT_POS_PTS
    )
    points += jolly_bonus([submission.sprint_jolly], podium, BONUS_JOLLY_SPRINT)
    return points


def main_breakdown(submission: Submission, official: OfficialResult) -> dict[str, int]:
    """Per-slot main points for detailed result tables."""
    podium = official.podium
    p1 = MAIN_POS_PTS[1] if submission.main_p1 and submission.main_p1 == official.p1 else 0
    p2 = MAIN_POS_PTS[2] if submission.main_p2 and submission.main_p2 == official.p2 else 0
    p3 = MAIN_POS_PTS[3] if submission.main_p3 and submission.main_p3 == official.p3 else 0
    j1 = jolly_bonus([submission.main_jolly], podium, BONUS_JOLLY_MAIN)
    j2 = jolly_bonus([submission.main_jolly2], podium, BONUS_JOLLY_MAIN)

    return {
        "p1_pts": p1,
        "p2_pts": p2,
        "p3_pts": p3,
        "j1_pts": j1,
        "j2_pts": j2,
        "total": p1 + p2 + p3 + j1 + j2,
    }


def sprint_breakdown(submission: Submission, official: OfficialResult) -> dict[str, int]:
    """Per-slot sprint points; all zeros when no sprint was run."""
    if not official.has_sprint:
        return {"sp1_pts": 0, "sp2_pts": 0, "sp3_pts": 0, "jsp_pts": 0, "total": 0}

    podium = official.sprint_podium
    sp1 = SPRINT_POS_PTS[1] if submission.sprint_p1 and submission.sprint_p1 == official.sp1 else 0
    sp2 = SPRINT_POS_PTS[2] if submission.sprint_p2 and submission.sprint_p2 == official.sp2 else 0
    sp3 = SPRINT_POS_PTS[3] if submission.sprint_p3 and submission.sprint_p3 == official.sp3 else 0
    jsp = jolly_bonus([submission.sprint_jolly], podium, BONUS_JOLLY_SPRINT)

    return {
        "sp1_pts": sp1,
        "sp2_pts": sp2,
        "sp3_pts": sp3,
        "jsp_pts": jsp,
        "total": sp1 + sp2 + sp3 + jsp,
    }


def score_submission(
    submission: Submission,
    official: OfficialResult,
    is_final_race: bool = False
) -> RaceScore:
    """Final (main, sprint) pair for one submission after every adjustment."""
    main_pts, jolly_granted = apply_round_up(score_main(submission, official))
    sprint_pts = score_sprint(submission, official)

    if is_final_race:
        main_pts *= DOUBLE_POINTS_FACTOR
        sprint_pts *= DOUBLE_POINTS_FACTOR

    return RaceScore(
        user_id=submission.user_id,
        main_pts=main_pts,
        sprint_pts=sprint_pts,
        jolly_granted=jolly_granted,
    )


def validate_official_result(official: Optional[OfficialResult]) -> OfficialResult:
    """Fail fast before anything is written."""
    if official is None:
        raise PreconditionError("Official results not found")

    if official.is_scorable:
        return official

    if official.cancelled_main:
        raise IllegalStateError("Race cancelled: scoring is disabled")

    raise PreconditionError("Official results incomplete (podium missing)")


def score_race(
    official: Optional[OfficialResult],
    submissions: Iterable[Submission],
    is_final_race: Optional[bool] = None
) -> dict[str, RaceScore]:
    """
    Score every submission of a race.

    Args:
        official: Podio oficial (y sprint si existe)
        submissions: Formaciones de los usuarios
        is_final_race: Dobla los puntos; por defecto usa official.double_points

    Returns:
        Dict user_id -> RaceScore
    """
    official = validate_official_result(official)

    if is_final_race is None:
        is_final_race = official.double_points

    return {
        submission.user_id: score_submission(submission, official, is_final_race)
        for submission in submissions
    }
