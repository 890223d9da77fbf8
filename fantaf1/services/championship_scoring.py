"""
Championship scoring engine.

Compares each user's pre-season top 3 (drivers and constructors) with the
final standings. Same position points as the main race, no jolly bonus.
The 29 -> 30 rule applies to each subtotal on its own.
"""

from typing import Iterable, Optional, Sequence

from fantaf1.core.constants import MAIN_POS_PTS
from fantaf1.core.exceptions import IllegalStateError, PreconditionError
from fantaf1.models.race import ChampionshipResult
from fantaf1.models.ranking import RankingEntry
from fantaf1.models.scoring import ChampionshipScore
from fantaf1.services.race_scoring import apply_round_up, podium_points

PICK_SLOTS = 3


def _normalize_picks(picks: Optional[Sequence[str]], user_id: str, label: str) -> list[Optional[str]]:
    # Missing slots count as "no match"; extra slots mean a malformed document
    picks = list(picks or [])
    if len(picks) > PICK_SLOTS:
        raise IllegalStateError(
            f"User {user_id} has {len(picks)} {label} picks, expected {PICK_SLOTS}"
        )
    return picks + [None] * (PICK_SLOTS - len(picks))


def validate_championship_result(result: Optional[ChampionshipResult]) -> ChampionshipResult:
    if result is None:
        raise PreconditionError("Championship results not found")
    if not all(result.drivers):
        raise PreconditionError("Championship results incomplete (drivers)")
    if not all(result.constructors):
        raise PreconditionError("Championship results incomplete (constructors)")
    return result


def score_championship_picks(
    user_id: str,
    drivers: Optional[Sequence[str]],
    constructors: Optional[Sequence[str]],
    result: ChampionshipResult
) -> ChampionshipScore:
    drivers_pts = podium_points(
        _normalize_picks(drivers, user_id, "driver"), result.drivers, MAIN_POS_PTS
    )
    constructors_pts = podium_points(
        _normalize_picks(constructors, user_id, "constructor"), result.constructors, MAIN_POS_PTS
    )

    drivers_pts, drivers_jolly = apply_round_up(drivers_pts)
    constructors_pts, constructors_jolly = apply_round_up(constructors_pts)

    return ChampionshipScore(
        user_id=user_id,
        drivers_pts=drivers_pts,
        constructors_pts=constructors_pts,
        jolly_granted=drivers_jolly + constructors_jolly,
    )


def score_championship(
    result: Optional[ChampionshipResult],
    entries: Iterable[RankingEntry]
) -> dict[str, ChampionshipScore]:
    """
    Score every ranking entry against the final championship standings.

    Validates the official result and every user's picks before returning,
    so a malformed document aborts the run before anything is written.
    """
    result = validate_championship_result(result)

    return {
        entry.user_id: score_championship_picks(
            entry.user_id,
            entry.championship_drivers,
            entry.championship_constructors,
            result
        )
        for entry in entries
    }
