# scripts/seed_local_data.py
# -*- coding: utf-8 -*-
"""
Seed local pour Vibe Vault : crée des journaux quotidiens réalistes pour plusieurs identifiants.

Caractéristiques :
- Idempotent : réexécutable sans doublons (upsert par user + date)
- Passe par EnergyLogService : validation + série/badge comme depuis l'UI
- Paramétrable via CLI : nb d'utilisateurs, nb de jours, date de fin, trous aléatoires
- Option (--with-ai) pour afficher une analyse IA par utilisateur (StubProvider par défaut)
- Option (--wipe) pour drop+recreate le schéma (utile en dev)

Exemples :
    # 3 utilisateurs, 14 jours jusqu'à aujourd'hui
    python scripts/seed_local_data.py

    # 5 utilisateurs, 30 jours, quelques trous, avec analyse IA
    python scripts/seed_local_data.py --users 5 --days 30 --gap-rate 0.15 --with-ai

    # Repartir de zéro avec un préfixe d'identifiant
    python scripts/seed_local_data.py --users 1 --user-prefix demo --wipe
"""

from __future__ import annotations

import argparse
import datetime as dt
import random
from typing import Any, Dict

from vibevault.persistence.db import init_db
from vibevault.persistence.models import Base
from vibevault.persistence.repositories.logs_repo import EnergyLogRepository
from vibevault.services.log_record import (
    ActivityIntensity, ActivityType, EmotionTag, WeatherType, SocialInteraction, Workload,
)
from vibevault.services.log_service import EnergyLogService
from vibevault.services.summary_service import SummaryComposer


# -------------------------------------------------------------------
# Utils
# -------------------------------------------------------------------

def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def sample_day_payload() -> Dict[str, Any]:
    """
    Génère une saisie "réaliste" pour une journée.
    L'énergie suit grossièrement le sommeil et le stress.
    """
    sleep = round(clamp(random.gauss(7.0, 1.2), 4.0, 10.0) * 4) / 4  # pas de 0.25h
    stress = int(clamp(round(random.gauss(3, 1)), 1, 5))
    energy = int(clamp(round(2 + (sleep - 4) * 1.0 - (stress - 3) + random.gauss(0, 1)), 1, 10))
    intensity = random.choice(list(ActivityIntensity))
    activity = ActivityType.REST_DAY if intensity is ActivityIntensity.NONE else random.choice(list(ActivityType))
    return {
        "energy": energy,
        "sleep_hours": sleep,
        "sleep_quality": int(clamp(round(sleep - 3), 1, 5)),
        "bedtime": f"{random.choice([22, 23, 23, 0]):02d}:{random.choice([0, 15, 30, 45]):02d}",
        "wake_up_time": f"{random.choice([6, 7, 7, 8]):02d}:{random.choice([0, 15, 30, 45]):02d}",
        "hydration_liters": round(clamp(random.gauss(1.8, 0.5), 0.3, 4.0), 1),
        "sugar_intake_rating": random.randint(1, 5),
        "activity_type": activity,
        "activity_intensity": intensity,
        "activity_duration_minutes": 0 if intensity is ActivityIntensity.NONE else random.choice([20, 30, 45, 60]),
        "emotion_tag": random.choice(list(EmotionTag)),
        "stress_level": stress,
        "general_health_rating": random.randint(2, 5),
        "weather_type": random.choice(list(WeatherType)),
        "social_interactions": random.choice(list(SocialInteraction)),
        "workload": random.choice(list(Workload)),
        "energy_goal": 7,
    }


def daterange(end: dt.date, days: int):
    """Génère des dates [end - (days-1) .. end] incluses, en ordre croissant."""
    for i in range(days):
        yield end - dt.timedelta(days=(days - 1 - i))


# -------------------------------------------------------------------
# Seeding
# -------------------------------------------------------------------

def seed(
    *,
    users: int,
    days: int,
    end_date: dt.date,
    user_prefix: str,
    gap_rate: float,
    with_ai: bool,
) -> None:
    """
    Remplit la base avec `users` identifiants, chacun ayant jusqu'à `days` journaux,
    avec des trous éventuels (gap_rate). Les journaux sont upsertés : réentrant.
    """
    service = EnergyLogService(EnergyLogRepository(), SummaryComposer())

    print(f"➡️  Seeding {users} user(s), {days} jour(s), fin au {end_date.isoformat()}"
          f" | gaps ~{int(gap_rate*100)}% | AI={'on' if with_ai else 'off'}")

    total_records = 0
    failures = 0
    for i in range(1, users + 1):
        user_id = f"{user_prefix}_{i:03d}"
        print(f"   • {user_id}")

        for day in daterange(end=end_date, days=days):
            if random.random() < gap_rate:
                continue
            result = service.save(user_id, day.isoformat(), sample_day_payload())
            if result.success:
                total_records += 1
            else:
                failures += 1
                print(f"     ⚠️  {day.isoformat()} : {result.message}")

        if with_ai:
            print(f"     🤖 {service.summarize_recent(user_id)}")

    print(f"✅ Terminé : {users} user(s), {total_records} journal(aux) créés/mis à jour, {failures} échec(s).")


# -------------------------------------------------------------------
# CLI
# -------------------------------------------------------------------

def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Seed local data for Vibe Vault")
    p.add_argument("--users", type=int, default=3, help="Nombre d'utilisateurs (défaut: 3)")
    p.add_argument("--days", type=int, default=14, help="Nombre de jours (défaut: 14)")
    p.add_argument("--end", type=str, default=None, help="Date de fin (YYYY-MM-DD). Défaut: aujourd'hui")
    p.add_argument("--user-prefix", type=str, default="user", help="Préfixe d'identifiant (défaut: 'user')")
    p.add_argument("--gap-rate", type=float, default=0.1, help="Probabilité de sauter un jour (0..1, défaut: 0.1)")
    p.add_argument("--seed", type=int, default=None, help="Seed du générateur aléatoire pour reproductibilité")
    p.add_argument("--with-ai", action="store_true", help="Afficher une analyse IA par utilisateur (Stub/HF selon env)")
    p.add_argument("--wipe", action="store_true", help="Drop + recreate la base avant seeding")
    return p.parse_args()


def main():
    args = parse_args()

    if args.seed is not None:
        random.seed(args.seed)

    end_date = dt.date.fromisoformat(args.end) if args.end else dt.date.today()

    if args.wipe:
        print("⚠️  Wipe : drop & recreate le schéma…")

    init_db(Base, drop_and_recreate=bool(args.wipe))

    seed(
        users=max(1, args.users),
        days=max(1, args.days),
        end_date=end_date,
        user_prefix=args.user_prefix,
        gap_rate=clamp(args.gap_rate, 0.0, 0.9),
        with_ai=bool(args.with_ai),
    )


if __name__ == "__main__":
    main()
