# vibevault/persistence/repositories/logs_repo.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from sqlalchemy import select, and_, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from vibevault.errors import StorageError
from vibevault.persistence.db import get_session
from vibevault.persistence.models import EnergyLogRow
from vibevault.services.log_record import LOG_FIELDS, EnergyLog
from vibevault.services.log_validator import parse_log_date

logger = logging.getLogger(__name__)

SAVE_OK_MESSAGE = "Journal enregistré avec succès !"

# champ EnergyLog -> colonne (les autres portent le même nom)
_COLUMN_FOR = {"energy": "energy_level", "note": "quick_note"}

InvalidationHook = Callable[[str, dt.date], None]

# backends offrant un upsert atomique
_UPSERT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


@dataclass(frozen=True)
class SaveResult:
    success: bool
    message: str
    error: Optional[Exception] = None


def _column(field: str) -> str:
    return _COLUMN_FOR.get(field, field)


def row_to_log(row: EnergyLogRow) -> EnergyLog:
    values = {f: getattr(row, _column(f)) for f in LOG_FIELDS}
    # SQLite peut renvoyer des entiers pour les colonnes Float
    for f in ("sleep_hours", "hydration_liters"):
        if values[f] is not None:
            values[f] = float(values[f])
    return EnergyLog(id=row.id, user_id=row.user_identifier, log_date=row.log_date, **values)


class EnergyLogRepository:
    """
    Passerelle de persistance des journaux, clé unique (user, date).

    - upsert : écrase l'entrée du jour si elle existe (jamais de doublon)
    - get_by_date / get_recent : lecture, "rien trouvé" n'est pas une erreur
    - après chaque upsert réussi, les hooks d'invalidation sont appelés
      (l'UI y branche le .clear() de ses caches st.cache_data)
    """

    def __init__(self) -> None:
        self._hooks: List[InvalidationHook] = []

    def add_invalidation_hook(self, hook: InvalidationHook) -> None:
        self._hooks.append(hook)

    def _invalidate(self, user_id: str, day: dt.date) -> None:
        for hook in self._hooks:
            hook(user_id, day)

    def upsert(self, user_id: str, date, record: EnergyLog) -> SaveResult:
        """
        INSERT ... ON CONFLICT (user_identifier, log_date) DO UPDATE :
        une seule instruction, donc deux saisies simultanées du même jour
        ne se heurtent pas à la contrainte unique (la dernière gagne).
        """
        day = parse_log_date(date)
        columns = {_column(f): v for f, v in record.field_values().items()}
        try:
            with get_session() as s:
                insert = _UPSERT_INSERTS.get(s.get_bind().dialect.name)
                if insert is None:
                    raise StorageError(f"upsert non supporté pour le backend {s.get_bind().dialect.name!r}")
                stmt = insert(EnergyLogRow).values(user_identifier=user_id, log_date=day, **columns)
                stmt = stmt.on_conflict_do_update(
                    index_elements=["user_identifier", "log_date"],
                    set_={**{k: stmt.excluded[k] for k in columns}, "updated_at": func.now()},
                )
                s.execute(stmt)
        except StorageError as e:
            logger.error("Échec upsert journal user=%s date=%s: %s", user_id, day, e)
            return SaveResult(False, f"Échec de l'enregistrement du journal : {e}", e)
        except SQLAlchemyError as e:
            logger.error("Échec upsert journal user=%s date=%s", user_id, day, exc_info=e)
            err = StorageError(str(e))
            err.__cause__ = e
            return SaveResult(False, f"Échec de l'enregistrement du journal : {e}", err)

        logger.info("Journal enregistré user=%s date=%s", user_id, day)
        self._invalidate(user_id, day)
        return SaveResult(True, SAVE_OK_MESSAGE)

    def get_by_date(self, user_id: str, date) -> Optional[EnergyLog]:
        day = parse_log_date(date)
        try:
            with get_session() as s:
                row = s.scalar(select(EnergyLogRow).where(and_(
                    EnergyLogRow.user_identifier == user_id,
                    EnergyLogRow.log_date == day,
                )).limit(1))
                return row_to_log(row) if row is not None else None
        except SQLAlchemyError as e:
            logger.error("Échec lecture journal user=%s date=%s", user_id, day, exc_info=e)
            raise StorageError(str(e)) from e

    def get_recent(self, user_id: str, count: int = 7) -> List[EnergyLog]:
        """Au plus `count` journaux, du plus récent au plus ancien."""
        if count <= 0:
            return []
        try:
            with get_session() as s:
                stmt = (select(EnergyLogRow)
                        .where(EnergyLogRow.user_identifier == user_id)
                        .order_by(EnergyLogRow.log_date.desc())
                        .limit(count))
                return [row_to_log(r) for r in s.scalars(stmt)]
        except SQLAlchemyError as e:
            logger.error("Échec lecture journaux récents user=%s", user_id, exc_info=e)
            raise StorageError(str(e)) from e

    def get_range(self, user_id: str, start=None, end=None, asc=True) -> List[EnergyLog]:
        try:
            with get_session() as s:
                stmt = select(EnergyLogRow).where(EnergyLogRow.user_identifier == user_id)
                if start is not None:
                    stmt = stmt.where(EnergyLogRow.log_date >= parse_log_date(start))
                if end is not None:
                    stmt = stmt.where(EnergyLogRow.log_date <= parse_log_date(end))
                stmt = stmt.order_by(EnergyLogRow.log_date.asc() if asc else EnergyLogRow.log_date.desc())
                return [row_to_log(r) for r in s.scalars(stmt)]
        except SQLAlchemyError as e:
            logger.error("Échec lecture période user=%s", user_id, exc_info=e)
            raise StorageError(str(e)) from e

    def dates_between(self, user_id: str, start, end) -> List[dt.date]:
        try:
            with get_session() as s:
                stmt = (select(EnergyLogRow.log_date)
                        .where(and_(
                            EnergyLogRow.user_identifier == user_id,
                            EnergyLogRow.log_date >= parse_log_date(start),
                            EnergyLogRow.log_date <= parse_log_date(end),
                        ))
                        .order_by(EnergyLogRow.log_date.asc()))
                return list(s.scalars(stmt))
        except SQLAlchemyError as e:
            logger.error("Échec lecture dates user=%s", user_id, exc_info=e)
            raise StorageError(str(e)) from e
