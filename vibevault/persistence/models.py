# vibevault/persistence/models.py
# -*- coding: utf-8 -*-
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import Integer, String, Float, Date, DateTime, Enum, UniqueConstraint, CheckConstraint, func
import datetime as dt
import uuid

from vibevault.services.log_record import (
    ActivityIntensity, ActivityType, EmotionTag, WeatherType,
    SocialInteraction, Workload, MenstrualCyclePhase,
)


class Base(DeclarativeBase):
    pass


def _text_enum(enum_cls, name: str) -> Enum:
    # colonne texte + CHECK sur les valeurs (pas de type natif)
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        create_constraint=True,
        validate_strings=True,
        length=32,
        values_callable=lambda e: [m.value for m in e],
    )


def _new_id() -> str:
    return str(uuid.uuid4())


class EnergyLogRow(Base):
    __tablename__ = "energy_logs"
    __table_args__ = (
        UniqueConstraint("user_identifier", "log_date", name="uq_user_log_date"),
        CheckConstraint("energy_level BETWEEN 1 AND 10", name="ck_energy_level"),
        CheckConstraint("hydration_liters >= 0", name="ck_hydration"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_identifier: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    log_date: Mapped[dt.date] = mapped_column(Date, index=True, nullable=False)

    energy_level: Mapped[int] = mapped_column(Integer, nullable=False)
    quick_note: Mapped[str | None] = mapped_column(String(500), nullable=True)

    sleep_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    sleep_quality: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bedtime: Mapped[str | None] = mapped_column(String(5), nullable=True)
    wake_up_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    sleep_notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    hydration_liters: Mapped[float] = mapped_column(Float, nullable=False)
    meal_tags: Mapped[str | None] = mapped_column(String(500), nullable=True)
    caffeine_intake: Mapped[str | None] = mapped_column(String(100), nullable=True)
    alcohol_intake: Mapped[str | None] = mapped_column(String(100), nullable=True)
    sugar_intake_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)

    activity_type: Mapped[ActivityType | None] = mapped_column(_text_enum(ActivityType, "activity_type"), nullable=True)
    activity_intensity: Mapped[ActivityIntensity] = mapped_column(
        _text_enum(ActivityIntensity, "activity_intensity"), nullable=False
    )
    activity_duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)

    emotion_tag: Mapped[EmotionTag | None] = mapped_column(_text_enum(EmotionTag, "emotion_tag"), nullable=True)
    stress_level: Mapped[int | None] = mapped_column(Integer, nullable=True)

    general_health_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    symptoms: Mapped[str | None] = mapped_column(String(500), nullable=True)
    medication_taken: Mapped[str | None] = mapped_column(String(200), nullable=True)

    weather_type: Mapped[WeatherType | None] = mapped_column(_text_enum(WeatherType, "weather_type"), nullable=True)
    social_interactions: Mapped[SocialInteraction | None] = mapped_column(
        _text_enum(SocialInteraction, "social_interactions"), nullable=True
    )
    workload: Mapped[Workload | None] = mapped_column(_text_enum(Workload, "workload"), nullable=True)
    menstrual_cycle_phase: Mapped[MenstrualCyclePhase | None] = mapped_column(
        _text_enum(MenstrualCyclePhase, "menstrual_cycle_phase"), nullable=True
    )

    journal_note: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    energy_goal: Mapped[int | None] = mapped_column(Integer, nullable=True)
    log_streak_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reward_badge: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=func.now(), nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)
