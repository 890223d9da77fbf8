"""
Servicio de Puntos - Calcula y asigna puntos de gara y campeonato
"""

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from fantaf1.core.constants import CHAMPIONSHIP_KEY
from fantaf1.core.exceptions import PersistenceError, RaceNotFoundError
from fantaf1.models.race import ChampionshipResult, OfficialResult
from fantaf1.models.scoring import ScoringReport, SubmissionBreakdown
from fantaf1.repositories.championship_repository import ChampionshipRepository
from fantaf1.repositories.race_repository import RaceRepository
from fantaf1.repositories.ranking_repository import RankingRepository
from fantaf1.repositories.submission_repository import SubmissionRepository
from fantaf1.services.championship_scoring import score_championship
from fantaf1.services.ledger_service import DEFAULT_MAX_RETRIES, LedgerService, validate_race_key
from fantaf1.services.race_scoring import (
    main_breakdown,
    score_race,
    sprint_breakdown,
    validate_official_result,
)
from fantaf1.services.snapshot_service import SnapshotService

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 10


class PointsService:
    """
    Servicio para calcular y asignar puntos.

    Flujo de un cálculo:
    1. (Opcional) guarda el resultado oficial recibido
    2. Valida el resultado; si falta o la gara está cancelada no escribe nada
    3. Calcula los puntos de cada usuario (motor puro)
    4. Reconcilia el ledger de cada usuario en paralelo
    5. Guarda un snapshot de la clasificación

    Un fallo al escribir un usuario no detiene a los demás: se registra
    y aparece en failed_user_ids del informe.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        max_retries: int = DEFAULT_MAX_RETRIES
    ):
        self.db = db
        self.race_repo = RaceRepository(db)
        self.submission_repo = SubmissionRepository(db)
        self.ranking_repo = RankingRepository(db)
        self.championship_repo = ChampionshipRepository(db)
        self.ledger = LedgerService(db, max_retries=max_retries)
        self.snapshots = SnapshotService(db)
        self.max_concurrency = max_concurrency

    async def calculate_points_for_race(
        self,
        race_id: str,
        official: Optional[OfficialResult] = None
    ) -> ScoringReport:
        """
        Calcular y asignar puntos de una gara.

        Args:
            race_id: ID de la gara
            official: Si se pasa, se guarda antes de calcular

        Returns:
            ScoringReport con usuarios actualizados y fallidos

        Raises:
            RaceNotFoundError, PreconditionError, IllegalStateError
        """
        race = await self.race_repo.get_by_id(race_id)
        if race is None:
            raise RaceNotFoundError(f"Race {race_id} not found")
        validate_race_key(race_id)

        if official is not None:
            await self.race_repo.save_official_result(race_id, official)

        stored = await self.race_repo.get_official_result(race_id)
        submissions = await self.submission_repo.list_for_race(race_id)

        # Falla aquí, antes de cualquier escritura
        scores = score_race(stored, submissions)

        logger.info("Scoring race %s: %d submissions", race_id, len(scores))

        async def settle(user_id: str) -> None:
            score = scores[user_id]
            await self.submission_repo.write_points(
                race_id, user_id, score.main_pts, score.sprint_pts
            )
            await self.ledger.reconcile(user_id, race_id, score.to_ledger_line())

        report = ScoringReport(kind="race", key=race_id, processed=len(scores))
        await self._fan_out(scores.keys(), settle, report)

        report.snapshot_id = await self.snapshots.snapshot("race", race_id)
        logger.info("Race %s: %s", race_id, report.message)
        return report

    async def calculate_championship_points(
        self,
        result: Optional[ChampionshipResult] = None
    ) -> ScoringReport:
        """
        Calcular puntos de campeonato (pilotos + constructores) para todos
        los usuarios de la clasificación.
        """
        if result is not None:
            await self.championship_repo.save_result(result)

        stored = await self.championship_repo.get_result()
        entries = await self.ranking_repo.list_all()

        scores = score_championship(stored, entries)

        logger.info("Scoring championship: %d users", len(scores))

        async def settle(user_id: str) -> None:
            await self.ledger.reconcile(
                user_id, CHAMPIONSHIP_KEY, scores[user_id].to_ledger_line()
            )

        report = ScoringReport(kind="championship", processed=len(scores))
        await self._fan_out(scores.keys(), settle, report)

        report.snapshot_id = await self.snapshots.snapshot("championship", None)
        logger.info("Championship: %s", report.message)
        return report

    async def get_race_breakdown(self, race_id: str) -> list[SubmissionBreakdown]:
        """
        Detalle por casilla de cada formación contra el resultado guardado.

        Solo lectura: no recalcula ni escribe nada.
        """
        race = await self.race_repo.get_by_id(race_id)
        if race is None:
            raise RaceNotFoundError(f"Race {race_id} not found")

        official = validate_official_result(race.effective_result())
        submissions = await self.submission_repo.list_for_race(race_id)

        return [
            SubmissionBreakdown(
                user_id=submission.user_id,
                is_late=submission.is_late,
                main=main_breakdown(submission, official),
                sprint=sprint_breakdown(submission, official),
                points_earned=submission.points_earned,
                points_earned_sprint=submission.points_earned_sprint
            )
            for submission in submissions
        ]

    async def _fan_out(
        self,
        user_ids: Iterable[str],
        settle: Callable[[str], Awaitable[None]],
        report: ScoringReport
    ) -> None:
        """Ejecuta settle por usuario en paralelo y reparte éxitos/fallos"""
        semaphore = asyncio.Semaphore(self.max_concurrency)
        user_ids = list(user_ids)

        async def run(user_id: str) -> bool:
            async with semaphore:
                try:
                    await settle(user_id)
                    return True
                except (PersistenceError, PyMongoError) as e:
                    logger.error("Failed to settle points for user %s: %s", user_id, e)
                    return False
                except Exception:
                    # Documento corrupto u otro fallo inesperado: solo afecta a este usuario
                    logger.exception("Unexpected error settling points for user %s", user_id)
                    return False

        outcomes = await asyncio.gather(*(run(user_id) for user_id in user_ids))

        for user_id, ok in zip(user_ids, outcomes):
            if ok:
                report.updated_user_ids.append(user_id)
            else:
                report.failed_user_ids.append(user_id)
