# vibevault/services/log_service.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable, List, Mapping, Optional, Tuple, TypeVar

from vibevault.errors import StorageError, ValidationError, join_fields
from vibevault.persistence.repositories.logs_repo import EnergyLogRepository, SaveResult
from vibevault.services.log_record import EnergyLog
from vibevault.services.log_validator import normalize_submission, parse_log_date
from vibevault.services.streaks import badge_for_streak, streak_ending_at
from vibevault.services.summary_service import MAX_LOGS, SummaryComposer, select_for_summary

logger = logging.getLogger(__name__)

T = TypeVar("T")

READ_FAILED_MESSAGE = "Impossible de lire tes journaux pour le moment."


def guarded_read(loader: Callable[..., T], fallback: T, *args: Any) -> Tuple[T, Optional[str]]:
    """
    Lecture pour l'UI : (valeur, None) si tout va bien,
    (fallback, message) si la base a échoué. L'erreur est journalisée ici.
    """
    try:
        return loader(*args), None
    except StorageError as e:
        logger.error("Lecture impossible (%s): %s", getattr(loader, "__name__", loader), e)
        return fallback, f"{READ_FAILED_MESSAGE} ({e})"


class EnergyLogService:
    """
    Point d'entrée utilisé par l'UI :
    valide -> calcule série/badge -> upsert. Rien n'est écrit si la saisie est invalide.
    """

    def __init__(self, repo: EnergyLogRepository, composer: Optional[SummaryComposer] = None) -> None:
        self.repo = repo
        self.composer = composer or SummaryComposer()

    def save(self, user_id: str, date_string: Any, payload: Mapping[str, Any]) -> SaveResult:
        try:
            day = parse_log_date(date_string)
            record = normalize_submission(payload)
        except ValidationError as e:
            logger.info("Saisie refusée user=%s: %s", user_id, e)
            return SaveResult(False, f"Saisie invalide ({join_fields(e.fields)}) : {e}", e)

        try:
            streak = streak_ending_at(lambda start, end: self.repo.dates_between(user_id, start, end), day)
        except StorageError as e:
            return SaveResult(False, f"Échec de l'enregistrement du journal : {e}", e)
        record = dataclasses.replace(record, log_streak_count=streak, reward_badge=badge_for_streak(streak))
        return self.repo.upsert(user_id, day, record)

    def get_log(self, user_id: str, date_string: Any) -> Optional[EnergyLog]:
        return self.repo.get_by_date(user_id, date_string)

    def get_recent(self, user_id: str, count: int = 7) -> List[EnergyLog]:
        return self.repo.get_recent(user_id, count)

    def summarize_recent(self, user_id: str, count: int = MAX_LOGS) -> str:
        try:
            logs = self.repo.get_recent(user_id, min(count, MAX_LOGS))
        except StorageError as e:
            logger.warning("Analyse impossible, lecture en échec user=%s: %s", user_id, e)
            return READ_FAILED_MESSAGE
        return self.composer.compose(select_for_summary(logs))
