# tests/test_log_validator.py
# -*- coding: utf-8 -*-
"""
Tests unitaires pour vibevault/services/log_validator.py

Ce fichier couvre :
- les champs requis (énergie, hydratation, intensité d'activité),
- les bornes numériques et les notes 1..5,
- l'appartenance aux listes fermées (enums),
- le format HH:MM des heures,
- la normalisation : "" / None / clé absente -> None, conversion des nombres reçus en texte,
- la collecte de TOUTES les erreurs dans une seule ValidationError,
- le parsing de la date du journal.
"""

import datetime as dt

import pytest

from vibevault.errors import ValidationError
from vibevault.services.log_record import (
    ActivityIntensity,
    ActivityType,
    EmotionTag,
    EnergyLog,
    LOG_FIELDS,
    MAX_SLEEP_HOURS,
    TEXT_LIMITS,
)
from vibevault.services.log_validator import normalize_submission, parse_log_date


# -----------------------------------------------------------------------------
# Cas nominaux
# -----------------------------------------------------------------------------

def test_minimal_payload_ok(minimal_payload):
    """Seuls les champs requis : tous les optionnels valent None."""
    log = normalize_submission(minimal_payload)
    assert isinstance(log, EnergyLog)
    assert log.energy == 6
    assert log.hydration_liters == 1.5
    assert log.activity_intensity is ActivityIntensity.LOW
    assert log.note is None
    assert log.sleep_hours is None
    assert log.emotion_tag is None
    assert log.reward_badge is None


def test_full_payload_ok(full_payload):
    log = normalize_submission(full_payload)
    assert log.activity_type is ActivityType.RUNNING
    assert log.emotion_tag is EmotionTag.ENERGETIC
    assert log.sleep_hours == 7.25
    assert log.bedtime == "23:15"
    assert log.activity_duration_minutes == 45
    assert log.log_streak_count == 4


def test_every_log_field_is_normalized(full_payload):
    """Le formulaire complet couvre tous les champs : aucun ne doit retomber à None."""
    assert set(full_payload) == set(LOG_FIELDS)
    log = normalize_submission(full_payload)
    assert [k for k, v in log.field_values().items() if v is None] == []


@pytest.mark.parametrize("energy", [1, 10, 5])
def test_energy_bounds_accepted(minimal_payload, energy):
    minimal_payload["energy"] = energy
    assert normalize_submission(minimal_payload).energy == energy


def test_blank_optional_fields_become_none(minimal_payload):
    """Une chaîne vide n'est jamais conservée : l'absence est explicite (None)."""
    minimal_payload.update(note="", sleep_notes="   ", bedtime="", emotion_tag="", sleep_hours=None)
    log = normalize_submission(minimal_payload)
    assert log.note is None
    assert log.sleep_notes is None
    assert log.bedtime is None
    assert log.emotion_tag is None
    assert log.sleep_hours is None


def test_text_is_stripped(minimal_payload):
    minimal_payload["note"] = "  fatigué  "
    assert normalize_submission(minimal_payload).note == "fatigué"


def test_numbers_as_text_are_coerced(minimal_payload):
    """Les formulaires renvoient parfois du texte : '7' -> 7, '7,5' -> 7.5."""
    minimal_payload.update(energy="7", sleep_hours="7,5", stress_level="3")
    log = normalize_submission(minimal_payload)
    assert log.energy == 7 and isinstance(log.energy, int)
    assert log.sleep_hours == 7.5
    assert log.stress_level == 3


def test_integral_float_accepted_as_int(minimal_payload):
    minimal_payload["energy"] = 7.0
    log = normalize_submission(minimal_payload)
    assert log.energy == 7
    assert isinstance(log.energy, int)


def test_enum_members_and_values_both_accepted(minimal_payload):
    minimal_payload.update(activity_intensity=ActivityIntensity.HIGH, activity_type="Strength Training")
    log = normalize_submission(minimal_payload)
    assert log.activity_intensity is ActivityIntensity.HIGH
    assert log.activity_type is ActivityType.STRENGTH_TRAINING


def test_time_object_accepted(minimal_payload):
    minimal_payload["wake_up_time"] = dt.time(6, 5)
    assert normalize_submission(minimal_payload).wake_up_time == "06:05"


def test_unknown_keys_ignored(minimal_payload):
    minimal_payload["whatever"] = "x"
    normalize_submission(minimal_payload)


def test_sleep_upper_bound_allowed(minimal_payload):
    minimal_payload["sleep_hours"] = MAX_SLEEP_HOURS
    assert normalize_submission(minimal_payload).sleep_hours == MAX_SLEEP_HOURS


# -----------------------------------------------------------------------------
# Rejets
# -----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "field_name,value",
    [
        ("energy", 0),
        ("energy", 11),
        ("energy", 7.5),
        ("energy", True),
        ("energy", "beaucoup"),
        ("energy", 10**400),
        ("hydration_liters", 10**400),
        ("hydration_liters", -0.1),
        ("hydration_liters", 10.5),
        ("sleep_hours", -1),
        ("sleep_hours", 24.5),
        ("sleep_quality", 0),
        ("sleep_quality", 6),
        ("sugar_intake_rating", 6),
        ("stress_level", 0),
        ("general_health_rating", 9),
        ("energy_goal", 11),
        ("activity_duration_minutes", -5),
        ("log_streak_count", -1),
        ("activity_intensity", "Extreme"),
        ("activity_type", "Parkour"),
        ("emotion_tag", "Hangry"),
        ("weather_type", "Hail"),
        ("social_interactions", "Great"),
        ("workload", "Crazy"),
        ("menstrual_cycle_phase", "Other"),
        ("bedtime", "7:30"),
        ("bedtime", "24:00"),
        ("wake_up_time", "12:60"),
        ("wake_up_time", "noon"),
    ],
)
def test_invalid_field_raises_with_field_name(minimal_payload, field_name, value):
    """Hors bornes / hors liste / mauvais format => ValidationError nommant le champ."""
    minimal_payload[field_name] = value
    with pytest.raises(ValidationError) as exc:
        normalize_submission(minimal_payload)
    assert exc.value.fields == [field_name]
    assert field_name in str(exc.value)


def test_text_too_long_rejected(minimal_payload):
    minimal_payload["note"] = "x" * (TEXT_LIMITS["note"] + 1)
    with pytest.raises(ValidationError) as exc:
        normalize_submission(minimal_payload)
    assert "note" in exc.value.fields


def test_missing_required_fields_all_reported():
    with pytest.raises(ValidationError) as exc:
        normalize_submission({})
    assert set(exc.value.fields) == {"energy", "hydration_liters", "activity_intensity"}


def test_all_errors_collected_at_once(minimal_payload):
    minimal_payload.update(energy=42, stress_level=9, bedtime="late")
    with pytest.raises(ValidationError) as exc:
        normalize_submission(minimal_payload)
    assert set(exc.value.fields) == {"energy", "stress_level", "bedtime"}


def test_validation_error_is_a_value_error(minimal_payload):
    minimal_payload["energy"] = -3
    with pytest.raises(ValueError):
        normalize_submission(minimal_payload)


# -----------------------------------------------------------------------------
# Date du journal
# -----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "value",
    ["2025-03-04", dt.date(2025, 3, 4), dt.datetime(2025, 3, 4, 18, 30)],
)
def test_parse_log_date_variants(value):
    assert parse_log_date(value) == dt.date(2025, 3, 4)


@pytest.mark.parametrize(
    "value",
    ["04/03/2025", "2025-13-01", "", None, 20250304, "20250304", "2025-W10-2", "2025-3-4", "2025-03-04T10:00"],
)
def test_parse_log_date_invalid(value):
    with pytest.raises(ValidationError) as exc:
        parse_log_date(value)
    assert exc.value.fields == ["date"]
