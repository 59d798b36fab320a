# tests/conftest.py
# -*- coding: utf-8 -*-
"""
Fixtures partagées :
- `store` : base SQLite temporaire + EnergyLogRepository branché dessus
- `full_payload` / `minimal_payload` : saisies de formulaire prêtes à l'emploi
"""

import importlib
from dataclasses import dataclass

import pytest


@dataclass
class Store:
    repo: object
    db: object
    models: object

    def count_rows(self) -> int:
        from sqlalchemy import func, select
        with self.db.get_session() as s:
            return s.scalar(select(func.count(self.models.EnergyLogRow.id))) or 0


@pytest.fixture
def store(tmp_path, monkeypatch) -> Store:
    """
    Prépare un environnement propre :
    - crée une base SQLite temporaire
    - définit DB_URL AVANT de (re)charger les modules
    - (re)charge db/models/repo pour régénérer l'engine et les tables
    """
    db_path = tmp_path / "test_vibevault.db"
    monkeypatch.setenv("DB_URL", f"sqlite:///{db_path}")

    import vibevault.persistence.db as db
    import vibevault.persistence.models as models
    importlib.reload(db)
    importlib.reload(models)

    db.init_db(models.Base, drop_and_recreate=True)

    import vibevault.persistence.repositories.logs_repo as logs_repo
    importlib.reload(logs_repo)

    return Store(repo=logs_repo.EnergyLogRepository(), db=db, models=models)


@pytest.fixture
def minimal_payload():
    return {"energy": 6, "hydration_liters": 1.5, "activity_intensity": "Low"}


@pytest.fixture
def full_payload():
    return {
        "energy": 8,
        "note": "Bonne journée",
        "sleep_hours": 7.25,
        "sleep_quality": 4,
        "bedtime": "23:15",
        "wake_up_time": "07:00",
        "sleep_notes": "Réveil une fois",
        "hydration_liters": 2.2,
        "meal_tags": "#petit-dej, #salade",
        "caffeine_intake": "2 cafés",
        "alcohol_intake": "aucun",
        "sugar_intake_rating": 2,
        "activity_type": "Running",
        "activity_intensity": "Medium",
        "activity_duration_minutes": 45,
        "emotion_tag": "Energetic",
        "stress_level": 2,
        "general_health_rating": 5,
        "symptoms": "léger mal de tête",
        "medication_taken": "Vitamine D",
        "weather_type": "Sunny",
        "social_interactions": "Positive",
        "workload": "High",
        "menstrual_cycle_phase": "Unknown",
        "journal_note": "Longue réflexion du soir.",
        "energy_goal": 7,
        "log_streak_count": 4,
        "reward_badge": "🌱 3 jours d'affilée",
    }
