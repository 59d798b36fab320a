# vibevault/services/log_display.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import List

from vibevault.services.log_record import EnergyLog

WEEKDAYS = ("Lun", "Mar", "Mer", "Jeu", "Ven", "Sam", "Dim")


def card_title(log: EnergyLog) -> str:
    d = log.log_date
    return f"{WEEKDAYS[d.weekday()]} {d.isoformat()}" if d else "—"


def _stars(rating: int, max_: int = 5) -> str:
    return "★" * rating + "☆" * (max_ - rating)


def describe_log(log: EnergyLog) -> List[str]:
    """Lignes affichées sur la carte d'un journal (champs renseignés uniquement)."""
    lines = [f"⚡ Énergie : {log.energy}/10"]
    if log.energy_goal is not None:
        lines.append(f"🎯 Objectif : {log.energy_goal}/10")
    if log.log_streak_count:
        lines.append(f"🔥 Série : {log.log_streak_count} jour(s)")
    if log.reward_badge:
        lines.append(f"🏅 {log.reward_badge}")
    if log.note:
        lines.append(f"📝 Note : {log.note}")

    # sommeil
    if log.sleep_hours is not None:
        lines.append(f"🛏️ Sommeil : {log.sleep_hours:g} h")
    if log.sleep_quality is not None:
        lines.append(f"Qualité du sommeil : {_stars(log.sleep_quality)}")
    if log.bedtime:
        lines.append(f"🌙 Coucher : {log.bedtime}")
    if log.wake_up_time:
        lines.append(f"🌅 Réveil : {log.wake_up_time}")
    if log.sleep_notes:
        lines.append(f"Notes sommeil : {log.sleep_notes}")

    # alimentation
    lines.append(f"💧 Hydratation : {log.hydration_liters:g} L")
    if log.meal_tags:
        lines.append(f"🍽️ Repas : {log.meal_tags}")
    if log.caffeine_intake:
        lines.append(f"☕ Caféine : {log.caffeine_intake}")
    if log.alcohol_intake:
        lines.append(f"🍷 Alcool : {log.alcohol_intake}")
    if log.sugar_intake_rating is not None:
        lines.append(f"🍪 Sucre : {log.sugar_intake_rating}/5")

    # activité
    activity = log.activity_type.value if log.activity_type else "—"
    line = f"🏃 Activité : {activity} ({log.activity_intensity.value})"
    if log.activity_duration_minutes:
        line += f", {log.activity_duration_minutes} min"
    lines.append(line)

    # humeur / santé
    if log.emotion_tag:
        lines.append(f"🙂 Émotion : {log.emotion_tag.value}")
    if log.stress_level is not None:
        lines.append(f"🧠 Stress : {log.stress_level}/5")
    if log.general_health_rating is not None:
        lines.append(f"❤️ Santé : {_stars(log.general_health_rating)}")
    if log.symptoms:
        lines.append(f"🤒 Symptômes : {log.symptoms}")
    if log.medication_taken:
        lines.append(f"💊 Médicaments : {log.medication_taken}")

    # environnement
    if log.weather_type:
        lines.append(f"🌤️ Météo : {log.weather_type.value}")
    if log.social_interactions:
        lines.append(f"👥 Social : {log.social_interactions.value}")
    if log.workload:
        lines.append(f"💼 Charge de travail : {log.workload.value}")
    if log.menstrual_cycle_phase:
        lines.append(f"🗓️ Cycle : {log.menstrual_cycle_phase.value}")

    if log.journal_note:
        lines.append(f"📓 Journal : {log.journal_note}")
    return lines
