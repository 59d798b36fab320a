# vibevault/main.py
# -*- coding: utf-8 -*-
# --- bootstrap import path (run as script via streamlit) ---
import os, sys
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
# -----------------------------------------------------------
import datetime as dt
import logging
import streamlit as st

from vibevault.persistence.db import init_db
from vibevault.persistence.models import Base
from vibevault.persistence.repositories.logs_repo import EnergyLogRepository
from vibevault.services.log_record import (
    ActivityIntensity, ActivityType, EmotionTag, WeatherType,
    SocialInteraction, Workload, MenstrualCyclePhase,
)
from vibevault.services.log_service import EnergyLogService, guarded_read
from vibevault.services.log_display import card_title, describe_log
from vibevault.services.summary_service import SummaryComposer

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ---------------------------------------------------------------------
# Bootstrapping
# ---------------------------------------------------------------------
init_db(Base, drop_and_recreate=False)
repo = EnergyLogRepository()
service = EnergyLogService(repo, SummaryComposer())

st.set_page_config(page_title="Vibe Vault", page_icon="⚡", layout="centered")


@st.cache_data(show_spinner=False)
def load_recent(user_id: str, count: int = 7):
    return service.get_recent(user_id, count)


@st.cache_data(show_spinner=False)
def load_log(user_id: str, day: dt.date):
    return service.get_log(user_id, day)


# un upsert réussi vide toute la liste en cache (invalidation grossière)
repo.add_invalidation_hook(lambda _user, _day: load_recent.clear())
repo.add_invalidation_hook(lambda _user, _day: load_log.clear())

# ---------------------------------------------------------------------
# Sidebar – identifiant utilisateur (pas d'authentification)
# ---------------------------------------------------------------------
st.sidebar.title("👤 Utilisateur")
default_user = os.getenv("VV_DEFAULT_USER", "user_001")
user_id = st.sidebar.text_input("Identifiant", value=default_user, help="Chaque identifiant a son propre journal").strip()
if not user_id:
    st.sidebar.warning("Renseigne un identifiant.")
    st.stop()

st.caption(f"Journal de **{user_id}**")

# ---------------------------------------------------------------------
# Choix de la date + chargement de l'entrée existante
# ---------------------------------------------------------------------
st.title("⚡ Vibe Vault — Journal d'énergie")

today = dt.date.today()
day = st.date_input("Date", value=today, min_value=dt.date(2000, 1, 1), max_value=today)
current, read_error = guarded_read(load_log, None, user_id, day)
if read_error:
    st.error(read_error)


def _default(attr, fallback):
    v = getattr(current, attr) if current is not None else None
    return fallback if v is None else v


def _choice(label, enum_cls, attr, fallback=None, optional=True):
    options = ([None] if optional else []) + list(enum_cls)
    value = _default(attr, fallback)
    return st.selectbox(
        label,
        options=options,
        index=options.index(value) if value in options else 0,
        format_func=lambda v: "—" if v is None else v.value,
    )


RATINGS = [None, 1, 2, 3, 4, 5]


def _rating(label, attr, fallback=3):
    value = _default(attr, fallback)
    return st.selectbox(label, options=RATINGS, index=RATINGS.index(value),
                        format_func=lambda v: "—" if v is None else str(v))


# ---------------------------------------------------------------------
# Formulaire complet
# ---------------------------------------------------------------------
with st.form("energy_form", clear_on_submit=False):
    energy = st.slider("Niveau d'énergie", min_value=1, max_value=10, value=int(_default("energy", 5)))
    note = st.text_area("Note rapide (optionnel)", value=_default("note", ""), max_chars=500)

    st.subheader("🛏️ Sommeil")
    c1, c2 = st.columns(2)
    with c1:
        sleep_hours = st.number_input("Sommeil (h)", min_value=0.0, max_value=24.0, step=0.25,
                                      value=_default("sleep_hours", 7.0))
        bedtime = st.text_input("Coucher (HH:MM)", value=_default("bedtime", ""))
    with c2:
        sleep_quality = _rating("Qualité du sommeil (1-5)", "sleep_quality")
        wake_up_time = st.text_input("Réveil (HH:MM)", value=_default("wake_up_time", ""))
    sleep_notes = st.text_area("Notes sommeil (optionnel)", value=_default("sleep_notes", ""), max_chars=500)

    st.subheader("💧 Alimentation & hydratation")
    c1, c2 = st.columns(2)
    with c1:
        hydration = st.number_input("Hydratation (L)", min_value=0.0, max_value=10.0, step=0.1,
                                    value=float(_default("hydration_liters", 1.5)))
        caffeine = st.text_input("Caféine (optionnel)", value=_default("caffeine_intake", ""), max_chars=100)
    with c2:
        sugar = _rating("Sucre (1 faible - 5 élevé)", "sugar_intake_rating")
        alcohol = st.text_input("Alcool (optionnel)", value=_default("alcohol_intake", ""), max_chars=100)
    meal_tags = st.text_input("Repas (tags, optionnel)", value=_default("meal_tags", ""), max_chars=500)

    st.subheader("🏃 Activité")
    c1, c2, c3 = st.columns(3)
    with c1:
        activity_type = _choice("Type", ActivityType, "activity_type", ActivityType.SEDENTARY)
    with c2:
        activity_intensity = _choice("Intensité", ActivityIntensity, "activity_intensity",
                                     ActivityIntensity.NONE, optional=False)
    with c3:
        duration = st.number_input("Durée (min)", min_value=0, step=5,
                                   value=int(_default("activity_duration_minutes", 0)))

    st.subheader("🙂 Humeur & santé")
    c1, c2 = st.columns(2)
    with c1:
        emotion = _choice("Émotion principale", EmotionTag, "emotion_tag", EmotionTag.NEUTRAL)
        health = _rating("Santé générale (1-5)", "general_health_rating")
    with c2:
        stress = _rating("Stress (1-5)", "stress_level")
        symptoms = st.text_input("Symptômes (optionnel)", value=_default("symptoms", ""), max_chars=500)
    medication = st.text_input("Médicaments (optionnel)", value=_default("medication_taken", ""), max_chars=200)

    st.subheader("🌤️ Environnement")
    c1, c2 = st.columns(2)
    with c1:
        weather = _choice("Météo", WeatherType, "weather_type", WeatherType.SUNNY)
        workload = _choice("Charge de travail", Workload, "workload", Workload.MEDIUM)
    with c2:
        social = _choice("Interactions sociales", SocialInteraction, "social_interactions", SocialInteraction.NEUTRAL)
        cycle = _choice("Phase du cycle (optionnel)", MenstrualCyclePhase, "menstrual_cycle_phase",
                        MenstrualCyclePhase.NONE)

    st.subheader("📓 Journal & objectif")
    energy_goal = st.slider("Énergie visée", min_value=1, max_value=10, value=int(_default("energy_goal", 7)))
    journal_note = st.text_area("Réflexion du jour (optionnel)", value=_default("journal_note", ""),
                                max_chars=2000, height=120)

    submitted = st.form_submit_button("Mettre à jour" if current else "Enregistrer")

if submitted:
    result = service.save(user_id, day.isoformat(), {
        "energy": energy,
        "note": note,
        "sleep_hours": sleep_hours,
        "sleep_quality": sleep_quality,
        "bedtime": bedtime,
        "wake_up_time": wake_up_time,
        "sleep_notes": sleep_notes,
        "hydration_liters": hydration,
        "meal_tags": meal_tags,
        "caffeine_intake": caffeine,
        "alcohol_intake": alcohol,
        "sugar_intake_rating": sugar,
        "activity_type": activity_type,
        "activity_intensity": activity_intensity,
        "activity_duration_minutes": duration,
        "emotion_tag": emotion,
        "stress_level": stress,
        "general_health_rating": health,
        "symptoms": symptoms,
        "medication_taken": medication,
        "weather_type": weather,
        "social_interactions": social,
        "workload": workload,
        "menstrual_cycle_phase": cycle,
        "journal_note": journal_note,
        "energy_goal": energy_goal,
    })
    if result.success:
        st.success(f"✅ {result.message} ({day.isoformat()})")
    else:
        st.error(result.message)

# ---------------------------------------------------------------------
# Timeline des derniers journaux
# ---------------------------------------------------------------------
st.header("🗓️ Derniers journaux")
recent, read_error = guarded_read(load_recent, [], user_id, 7)
if read_error:
    st.error(read_error)
elif not recent:
    st.info("Aucun journal récent. Commence à suivre ton énergie !")
for log in recent:
    with st.expander(card_title(log), expanded=False):
        for line in describe_log(log):
            st.write(line)

# ---------------------------------------------------------------------
# Analyse IA
# ---------------------------------------------------------------------
st.header("✨ Analyse de tes vibes (IA)")
st.caption("Stub par défaut ; Hugging Face si configuré. Au moins 2 journaux nécessaires.")
if st.button("Lancer l'analyse"):
    with st.spinner("Analyse en cours…"):
        st.markdown(service.summarize_recent(user_id))
