# vibevault/services/trends.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Dict, Optional, Sequence

import pandas as pd

from vibevault.services.log_record import ActivityIntensity, EnergyLog, date_label

# intensité -> valeur numérique pour les graphiques (0 = non renseigné)
INTENSITY_SCORE: Dict[ActivityIntensity, int] = {
    ActivityIntensity.NONE: 1,
    ActivityIntensity.LOW: 2,
    ActivityIntensity.MEDIUM: 3,
    ActivityIntensity.HIGH: 4,
}

TREND_COLUMNS = ["date", "label", "energy", "activity", "fatigue", "sleep_hours", "stress_level"]


def intensity_score(intensity: Optional[ActivityIntensity]) -> int:
    return INTENSITY_SCORE.get(intensity, 0)


def build_trend_frame(logs: Sequence[EnergyLog]) -> pd.DataFrame:
    """
    Une ligne par journal, triée par date croissante.
    fatigue = 10 - énergie (indicateur dérivé, pas une saisie).
    """
    if not logs:
        return pd.DataFrame(columns=TREND_COLUMNS)
    df = pd.DataFrame([{
        "date": pd.Timestamp(l.log_date),
        "label": date_label(l.log_date),
        "energy": l.energy,
        "activity": intensity_score(l.activity_intensity),
        "fatigue": 10 - l.energy,
        "sleep_hours": l.sleep_hours,
        "stress_level": l.stress_level,
    } for l in logs], columns=TREND_COLUMNS)
    return df.sort_values("date").reset_index(drop=True)


def has_metric(df: pd.DataFrame, column: str) -> bool:
    """Vrai si au moins une valeur > 0 est renseignée (sinon on masque le graphique)."""
    if df.empty:
        return False
    values = pd.to_numeric(df[column], errors="coerce")
    return bool((values > 0).any())
