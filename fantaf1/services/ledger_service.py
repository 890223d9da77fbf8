"""
LedgerService - Idempotent settlement of computed points.

Each ranking entry keeps one ledger line per race (plus one for the
championship). Reconciling a key applies only the difference between the
new line and the one already stored, so re-saving an official result and
recomputing never double counts points or jolly tokens.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from fantaf1.core.constants import CHAMPIONSHIP_KEY
from fantaf1.core.exceptions import IllegalStateError, PersistenceError
from fantaf1.models.ranking import LedgerLine, RankingEntry
from fantaf1.models.scoring import LedgerDelta
from fantaf1.repositories.ranking_repository import RankingRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 5


def stored_line(entry: RankingEntry, key: str) -> LedgerLine:
    """Ledger line currently recorded for key (empty if never scored)."""
    if key == CHAMPIONSHIP_KEY:
        return LedgerLine(
            main_pts=entry.championship_pts,
            jolly_granted=entry.championship_jolly,
        )
    return entry.points_by_race.get(key, LedgerLine())


def expected_total(entry: RankingEntry) -> int:
    return sum(line.total for line in entry.points_by_race.values()) + entry.championship_pts


def verify(entry: RankingEntry) -> bool:
    """total_points must equal the sum of every ledger line."""
    return entry.total_points == expected_total(entry)


def validate_key(key: str) -> None:
    # The race id becomes part of a dotted Mongo path
    if not key or "." in key or key.startswith("$"):
        raise IllegalStateError(f"Invalid ledger key: {key!r}")


def validate_race_key(race_id: str) -> None:
    """A race id must not collide with the championship line."""
    validate_key(race_id)
    if race_id == CHAMPIONSHIP_KEY:
        raise IllegalStateError(f"Race id {race_id!r} is reserved for the championship ledger")


class LedgerService:
    def __init__(self, db: AsyncIOMotorDatabase, max_retries: int = DEFAULT_MAX_RETRIES):
        self.ranking_repo = RankingRepository(db)
        self.max_retries = max_retries

    async def reconcile(self, user_id: str, key: str, line: LedgerLine) -> LedgerDelta:
        """
        Overwrite the ledger line for key and move the running total by the delta.

        Read prior line, compute delta, write line + new total as a single
        compare-and-swap on the user's document. A stale read is retried.

        Raises:
            PersistenceError: store failure or too many concurrent conflicts
        """
        validate_key(key)

        try:
            for attempt in range(1, self.max_retries + 1):
                entry = await self.ranking_repo.get_or_create(user_id)
                prior = stored_line(entry, key)

                delta = line.total - prior.total
                jolly_delta = line.jolly_granted - prior.jolly_granted

                updated = await self.ranking_repo.compare_and_set_ledger(
                    user_id,
                    entry.ledger_version,
                    key,
                    line,
                    delta,
                    jolly_delta
                )
                if updated is not None:
                    return LedgerDelta(
                        user_id=user_id,
                        key=key,
                        delta=delta,
                        jolly_delta=jolly_delta,
                        total_points=updated.total_points,
                    )

                logger.warning(
                    "Ledger conflict for user %s on %s (attempt %d/%d)",
                    user_id, key, attempt, self.max_retries
                )
        except PyMongoError as e:
            raise PersistenceError(f"Ledger write failed for {user_id}: {e}", user_id) from e

        raise PersistenceError(
            f"Ledger for {user_id} kept changing, gave up after {self.max_retries} attempts",
            user_id
        )

    async def audit(self) -> list[str]:
        """User ids whose running total does not match their ledger."""
        entries = await self.ranking_repo.list_all()
        broken = [entry.user_id for entry in entries if not verify(entry)]
        for user_id in broken:
            logger.error("Ledger mismatch for user %s", user_id)
        return broken
