# vibevault/services/log_validator.py
# -*- coding: utf-8 -*-
"""
Validation + normalisation d'une saisie de journal.

Entrée : un dict venant du formulaire (ou d'un script), clés en snake_case.
Sortie : un EnergyLog figé où chaque champ optionnel absent vaut None.

Toutes les erreurs sont collectées puis levées en une seule ValidationError
(le message et `.fields` nomment chaque champ fautif).
"""

from __future__ import annotations

import datetime as dt
import math
import re
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type

from vibevault.errors import ValidationError
from vibevault.services.log_record import (
    MAX_ENERGY,
    MAX_HYDRATION_LITERS,
    MAX_RATING,
    MAX_SLEEP_HOURS,
    MIN_ENERGY,
    MIN_RATING,
    TEXT_LIMITS,
    ActivityIntensity,
    ActivityType,
    EmotionTag,
    EnergyLog,
    MenstrualCyclePhase,
    SocialInteraction,
    WeatherType,
    Workload,
)

TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

RATING_FIELDS = ("sleep_quality", "sugar_intake_rating", "stress_level", "general_health_rating")

ENUM_FIELDS: Dict[str, Type[Enum]] = {
    "activity_intensity": ActivityIntensity,
    "activity_type": ActivityType,
    "emotion_tag": EmotionTag,
    "weather_type": WeatherType,
    "social_interactions": SocialInteraction,
    "workload": Workload,
    "menstrual_cycle_phase": MenstrualCyclePhase,
}

REQUIRED_FIELDS = ("energy", "hydration_liters", "activity_intensity")


class _Missing:
    pass


_MISSING = _Missing()


def _is_blank(v: Any) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())


def _to_float(v: Any) -> float:
    if isinstance(v, bool):
        raise ValueError("booléen refusé")
    if isinstance(v, str):
        v = v.strip().replace(",", ".")
    try:
        f = float(v)
    except OverflowError as e:
        raise ValueError("nombre trop grand") from e
    if math.isnan(f) or math.isinf(f):
        raise ValueError("nombre non fini")
    return f


def _to_int(v: Any) -> int:
    f = _to_float(v)
    if not f.is_integer():
        raise ValueError("entier attendu")
    return int(f)


def parse_log_date(value: Any) -> dt.date:
    """date | datetime | 'YYYY-MM-DD' -> date. Lève ValidationError sinon."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str) and DATE_RE.match(value.strip()):
        try:
            return dt.date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationError.single("date", f"date invalide: {value!r} (attendu YYYY-MM-DD)")


class _Checker:
    """Accumule les erreurs champ par champ."""

    def __init__(self, payload: Mapping[str, Any]):
        self.payload = payload
        self.errors: Dict[str, str] = {}
        self.out: Dict[str, Any] = {}

    def _raw(self, name: str) -> Any:
        v = self.payload.get(name, _MISSING)
        if v is _MISSING or _is_blank(v):
            return _MISSING
        return v

    def _absent(self, name: str, required: bool) -> bool:
        if self._raw(name) is _MISSING:
            if required:
                self.errors[name] = "champ requis"
            else:
                self.out[name] = None
            return True
        return False

    def integer(self, name: str, lo: Optional[int], hi: Optional[int], required: bool = False) -> None:
        if self._absent(name, required):
            return
        raw = self._raw(name)
        try:
            v = _to_int(raw)
        except (TypeError, ValueError):
            self.errors[name] = f"entier attendu, reçu {raw!r}"
            return
        if (lo is not None and v < lo) or (hi is not None and v > hi):
            self.errors[name] = f"hors bornes: {v} (attendu {_bounds(lo, hi)})"
            return
        self.out[name] = v

    def real(self, name: str, lo: Optional[float], hi: Optional[float], required: bool = False) -> None:
        if self._absent(name, required):
            return
        raw = self._raw(name)
        try:
            v = _to_float(raw)
        except (TypeError, ValueError):
            self.errors[name] = f"nombre attendu, reçu {raw!r}"
            return
        if (lo is not None and v < lo) or (hi is not None and v > hi):
            self.errors[name] = f"hors bornes: {v} (attendu {_bounds(lo, hi)})"
            return
        self.out[name] = v

    def choice(self, name: str, enum_cls: Type[Enum], required: bool = False) -> None:
        if self._absent(name, required):
            return
        raw = self._raw(name)
        if isinstance(raw, enum_cls):
            self.out[name] = raw
            return
        try:
            self.out[name] = enum_cls(raw.strip() if isinstance(raw, str) else raw)
        except ValueError:
            allowed = ", ".join(m.value for m in enum_cls)
            self.errors[name] = f"valeur inconnue {raw!r} (attendu: {allowed})"

    def time_of_day(self, name: str) -> None:
        if self._absent(name, False):
            return
        raw = self._raw(name)
        if isinstance(raw, dt.time):
            raw = raw.strftime("%H:%M")
        if not isinstance(raw, str) or not TIME_RE.match(raw.strip()):
            self.errors[name] = f"heure invalide {raw!r} (format HH:MM)"
            return
        self.out[name] = raw.strip()

    def text(self, name: str, max_len: int) -> None:
        if self._absent(name, False):
            return
        raw = self._raw(name)
        if not isinstance(raw, str):
            self.errors[name] = f"texte attendu, reçu {type(raw).__name__}"
            return
        value = raw.strip()
        if len(value) > max_len:
            self.errors[name] = f"trop long: {len(value)} caractères (max {max_len})"
            return
        self.out[name] = value


def _bounds(lo, hi) -> str:
    if hi is None:
        return f">= {lo}"
    return f"{lo}..{hi}"


def normalize_submission(payload: Mapping[str, Any]) -> EnergyLog:
    """
    Valide une saisie et renvoie l'EnergyLog normalisé.

    - Champs requis : energy (1..10), hydration_liters (0..10), activity_intensity.
    - Les chaînes vides / None / clés absentes -> None pour les optionnels.
    - Les nombres reçus en texte ("7", "7,5") sont convertis ; les booléens refusés.
    - Les clés inconnues sont ignorées.

    Raises:
        ValidationError: avec la liste de TOUS les champs fautifs.
    """
    c = _Checker(payload)

    c.integer("energy", MIN_ENERGY, MAX_ENERGY, required=True)
    c.real("hydration_liters", 0.0, MAX_HYDRATION_LITERS, required=True)
    c.choice("activity_intensity", ActivityIntensity, required=True)

    c.real("sleep_hours", 0.0, MAX_SLEEP_HOURS)
    c.time_of_day("bedtime")
    c.time_of_day("wake_up_time")
    for name in RATING_FIELDS:
        c.integer(name, MIN_RATING, MAX_RATING)

    for name, enum_cls in ENUM_FIELDS.items():
        if name != "activity_intensity":
            c.choice(name, enum_cls)

    c.integer("activity_duration_minutes", 0, None)
    c.integer("energy_goal", MIN_ENERGY, MAX_ENERGY)
    c.integer("log_streak_count", 0, None)

    for name, max_len in TEXT_LIMITS.items():
        c.text(name, max_len)

    if c.errors:
        raise ValidationError(c.errors)

    return EnergyLog(**c.out)
