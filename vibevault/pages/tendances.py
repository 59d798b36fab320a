# vibevault/pages/tendances.py
# -*- coding: utf-8 -*-

# --- bootstrap import path (page streamlit dans vibevault/pages) ---
import os, sys
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
# -------------------------------------------------------------

import datetime as dt
import io
import pandas as pd
import streamlit as st
import altair as alt

from vibevault.persistence.db import init_db
from vibevault.persistence.models import Base
from vibevault.persistence.repositories.logs_repo import EnergyLogRepository
from vibevault.services.log_service import guarded_read
from vibevault.services.trends import build_trend_frame, has_metric

# Boot DB
init_db(Base, drop_and_recreate=False)
repo = EnergyLogRepository()

st.set_page_config(page_title="Tendances — Vibe Vault", page_icon="📈", layout="wide")
st.title("📈 Tendances")

user_id = st.sidebar.text_input("Identifiant", value=os.getenv("VV_DEFAULT_USER", "user_001")).strip()
st.caption(f"Journal de **{user_id}**")

# --- Filtres ---
st.sidebar.header("Filtres")
today = dt.date.today()
start = st.sidebar.date_input("Du", value=today - dt.timedelta(days=30))
end = st.sidebar.date_input("Au", value=today)

if start > end:
    st.warning("Vérifie les bornes : la date de début doit être ≤ à la date de fin.")
    st.stop()

logs, read_error = guarded_read(repo.get_range, [], user_id, start, end, True)
if read_error:
    st.error(read_error)
    st.stop()
df = build_trend_frame(logs)

if df.empty:
    st.info("Aucune donnée dans cette période. Enregistre au moins un journal pour voir tes tendances.")
    st.stop()

# KPIs
col1, col2, col3 = st.columns(3)
with col1:
    st.metric("Nb. jours", len(df))
with col2:
    st.metric("Énergie moyenne", f"{df['energy'].mean():.1f}")
with col3:
    st.metric("Énergie max", int(df["energy"].max()))

x_day = alt.X("yearmonthdate(date):T", title="Jour", axis=alt.Axis(format="%Y-%m-%d", labelAngle=-45))

# Énergie dans le temps
energy_chart = (
    alt.Chart(df)
    .mark_line(point=True)
    .encode(
        x=x_day,
        y=alt.Y("energy:Q", title="Énergie", scale=alt.Scale(domain=[0, 10])),
        tooltip=[alt.Tooltip("date:T", title="Jour", format="%Y-%m-%d"), "energy:Q"],
    )
    .properties(height=280)
)
st.subheader("Niveau d'énergie")
st.altair_chart(energy_chart, use_container_width=True)

# Activité vs fatigue estimée
act_long = df.melt(id_vars="date", value_vars=["activity", "fatigue"], var_name="métrique", value_name="valeur")
act_chart = (
    alt.Chart(act_long)
    .mark_bar()
    .encode(
        x=x_day,
        xOffset="métrique:N",
        y=alt.Y("valeur:Q", title="Valeur", scale=alt.Scale(domain=[0, 10])),
        color=alt.Color("métrique:N", title=""),
        tooltip=[alt.Tooltip("date:T", title="Jour", format="%Y-%m-%d"), "métrique:N", "valeur:Q"],
    )
    .properties(height=280)
)
st.subheader("Intensité d'activité & fatigue estimée")
st.caption("Intensité : 1 = aucune … 4 = élevée ; fatigue = 10 − énergie")
st.altair_chart(act_chart, use_container_width=True)


def _dual_chart(metric: str, title: str):
    long = df.melt(id_vars="date", value_vars=[metric, "energy"], var_name="métrique", value_name="valeur").dropna()
    return (
        alt.Chart(long)
        .mark_line(point=True)
        .encode(
            x=x_day,
            y=alt.Y("valeur:Q", title=title),
            color=alt.Color("métrique:N", title=""),
            tooltip=[alt.Tooltip("date:T", title="Jour", format="%Y-%m-%d"), "métrique:N", "valeur:Q"],
        )
        .properties(height=280)
    )


if has_metric(df, "sleep_hours"):
    st.subheader("Sommeil & énergie")
    st.altair_chart(_dual_chart("sleep_hours", "Heures / niveau"), use_container_width=True)

if has_metric(df, "stress_level"):
    st.subheader("Stress & énergie")
    st.altair_chart(_dual_chart("stress_level", "Niveau"), use_container_width=True)

# Export CSV
export = pd.DataFrame([{"log_date": l.log_date, **{k: getattr(v, "value", v) for k, v in l.field_values().items()}}
                       for l in logs])
csv_buf = io.StringIO()
export.to_csv(csv_buf, index=False)
st.download_button("⬇️ Export CSV", data=csv_buf.getvalue(), file_name="vibevault_journal.csv", mime="text/csv")
