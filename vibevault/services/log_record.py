# vibevault/services/log_record.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, fields as dc_fields
from enum import Enum
from typing import Any, Dict, Optional

# Bornes (reprises du formulaire complet)
MIN_ENERGY = 1
MAX_ENERGY = 10
MIN_RATING = 1
MAX_RATING = 5
MAX_SLEEP_HOURS = 24.0
MAX_HYDRATION_LITERS = 10.0

# Longueurs max des champs texte libres
TEXT_LIMITS: Dict[str, int] = {
    "note": 500,
    "sleep_notes": 500,
    "meal_tags": 500,
    "caffeine_intake": 100,
    "alcohol_intake": 100,
    "symptoms": 500,
    "medication_taken": 200,
    "journal_note": 2000,
    "reward_badge": 100,
}


class ActivityIntensity(str, Enum):
    NONE = "None"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ActivityType(str, Enum):
    GYM = "Gym"
    RUNNING = "Running"
    WALKING = "Walking"
    CYCLING = "Cycling"
    SWIMMING = "Swimming"
    YOGA = "Yoga"
    PILATES = "Pilates"
    SPORTS = "Sports"
    STRENGTH_TRAINING = "Strength Training"
    HIIT = "HIIT"
    DANCE = "Dance"
    HIKING = "Hiking"
    HOUSEWORK = "Housework"
    GARDENING = "Gardening"
    STRETCHING = "Stretching"
    REST_DAY = "Rest Day"
    SEDENTARY = "Sedentary"
    OTHER = "Other"


class EmotionTag(str, Enum):
    # positives
    HAPPY = "Happy"
    CONTENT = "Content"
    GRATEFUL = "Grateful"
    EXCITED = "Excited"
    OPTIMISTIC = "Optimistic"
    # neutres
    NEUTRAL = "Neutral"
    OKAY = "Okay"
    # calme
    CALM = "Calm"
    RELAXED = "Relaxed"
    PEACEFUL = "Peaceful"
    # stress / anxiété
    STRESSED = "Stressed"
    ANXIOUS = "Anxious"
    OVERWHELMED = "Overwhelmed"
    WORRIED = "Worried"
    # tristesse
    SAD = "Sad"
    DISAPPOINTED = "Disappointed"
    LONELY = "Lonely"
    GRIEVING = "Grieving"
    # énergie / productivité
    ENERGETIC = "Energetic"
    PRODUCTIVE = "Productive"
    FOCUSED = "Focused"
    MOTIVATED = "Motivated"
    INSPIRED = "Inspired"
    # fatigue
    TIRED = "Tired"
    FATIGUED = "Fatigued"
    EXHAUSTED = "Exhausted"
    # irritation
    IRRITABLE = "Irritable"
    FRUSTRATED = "Frustrated"
    ANGRY = "Angry"
    OTHER = "Other"


class WeatherType(str, Enum):
    SUNNY = "Sunny"
    CLOUDY = "Cloudy"
    RAINY = "Rainy"
    SNOWY = "Snowy"
    WINDY = "Windy"
    FOGGY = "Foggy"
    STORMY = "Stormy"
    OTHER = "Other"


class SocialInteraction(str, Enum):
    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"
    DRAINING = "Draining"
    NONE = "None"


class Workload(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    OVERLOADED = "Overloaded"


class MenstrualCyclePhase(str, Enum):
    MENSTRUATION = "Menstruation"
    FOLLICULAR = "Follicular"
    OVULATION = "Ovulation"
    LUTEAL = "Luteal"
    NONE = "None"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class EnergyLog:
    """
    Journal normalisé d'une journée.

    Tout champ optionnel absent vaut None (jamais "" ni valeur bidon).
    `id`, `user_id` et `log_date` ne sont renseignés qu'une fois l'entrée
    relue depuis la base.
    """
    # requis
    energy: int
    hydration_liters: float
    activity_intensity: ActivityIntensity

    note: Optional[str] = None

    # sommeil
    sleep_hours: Optional[float] = None
    sleep_quality: Optional[int] = None
    bedtime: Optional[str] = None
    wake_up_time: Optional[str] = None
    sleep_notes: Optional[str] = None

    # alimentation
    meal_tags: Optional[str] = None
    caffeine_intake: Optional[str] = None
    alcohol_intake: Optional[str] = None
    sugar_intake_rating: Optional[int] = None

    # activité
    activity_type: Optional[ActivityType] = None
    activity_duration_minutes: Optional[int] = None

    # humeur / stress
    emotion_tag: Optional[EmotionTag] = None
    stress_level: Optional[int] = None

    # santé
    general_health_rating: Optional[int] = None
    symptoms: Optional[str] = None
    medication_taken: Optional[str] = None

    # environnement
    weather_type: Optional[WeatherType] = None
    social_interactions: Optional[SocialInteraction] = None
    workload: Optional[Workload] = None
    menstrual_cycle_phase: Optional[MenstrualCyclePhase] = None

    # journal & objectifs
    journal_note: Optional[str] = None
    energy_goal: Optional[int] = None

    # maintenus par l'application
    log_streak_count: Optional[int] = None
    reward_badge: Optional[str] = None

    # identité (remplie à la relecture)
    id: Optional[str] = None
    user_id: Optional[str] = None
    log_date: Optional[dt.date] = None

    def field_values(self) -> Dict[str, Any]:
        """Champs de saisie uniquement (sans id / user_id / log_date)."""
        return {
            f.name: getattr(self, f.name)
            for f in dc_fields(self)
            if f.name not in IDENTITY_FIELDS
        }


IDENTITY_FIELDS = ("id", "user_id", "log_date")
SYSTEM_FIELDS = ("log_streak_count", "reward_badge")
LOG_FIELDS = tuple(f.name for f in dc_fields(EnergyLog) if f.name not in IDENTITY_FIELDS)


@dataclass(frozen=True)
class SimplifiedLogView:
    """Projection réduite d'un journal, uniquement pour construire le prompt IA."""
    date: str
    energy_level: int
    emotion_tag: Optional[str] = None
    sleep_hours: Optional[float] = None
    stress_level: Optional[int] = None
    activity_type: Optional[str] = None
    activity_intensity: Optional[str] = None
    quick_note: Optional[str] = None


def date_label(d: dt.date) -> str:
    """Libellé court type 'Jan 5' (indépendant de la locale)."""
    months = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
    return f"{months[d.month - 1]} {d.day}"


def _enum_value(v: Optional[Enum]) -> Optional[str]:
    return v.value if v is not None else None


def to_simplified(log: EnergyLog) -> SimplifiedLogView:
    if log.log_date is None:
        raise ValueError("log_date requis pour construire la vue simplifiée")
    return SimplifiedLogView(
        date=date_label(log.log_date),
        energy_level=log.energy,
        emotion_tag=_enum_value(log.emotion_tag),
        sleep_hours=log.sleep_hours,
        stress_level=log.stress_level,
        activity_type=_enum_value(log.activity_type),
        activity_intensity=_enum_value(log.activity_intensity),
        quick_note=log.note,
    )
