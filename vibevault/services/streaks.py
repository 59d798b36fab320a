# vibevault/services/streaks.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import datetime as dt
from typing import Callable, Dict, Iterable, Optional

# Paliers de série (jours consécutifs) -> badge
STREAK_BADGES: Dict[int, str] = {
    3: "🌱 3 jours d'affilée",
    7: "🔥 Une semaine complète",
    14: "⚡ Deux semaines de suite",
    30: "🏆 Un mois de régularité",
    100: "👑 100 jours !",
}

# taille de la fenêtre de dates relue par requête
STREAK_LOOKBACK_DAYS = max(STREAK_BADGES) + 1

DateFetcher = Callable[[dt.date, dt.date], Iterable[dt.date]]


def compute_streak(logged_dates: Iterable[dt.date], day: dt.date) -> int:
    """
    Nombre de jours consécutifs journalisés se terminant à `day` (inclus).
    `day` est considéré comme journalisé (on calcule au moment de l'enregistrer).
    """
    seen = set(logged_dates)
    seen.add(day)
    streak = 0
    cur = day
    while cur in seen:
        streak += 1
        cur -= dt.timedelta(days=1)
    return streak


def streak_ending_at(fetch_dates: DateFetcher, day: dt.date, window: int = STREAK_LOOKBACK_DAYS) -> int:
    """
    Comme compute_streak, mais sans plafond : relit les dates fenêtre par fenêtre
    (fetch_dates(début, fin), bornes incluses) tant que la série couvre toute la fenêtre.
    """
    streak = 0
    end = day
    while True:
        start = end - dt.timedelta(days=window - 1)
        logged = set(fetch_dates(start, end))
        if streak and end not in logged:
            return streak
        run = compute_streak(logged, end)
        streak += run
        if run < window:
            return streak
        end = start - dt.timedelta(days=1)


def badge_for_streak(streak: int) -> Optional[str]:
    """Badge du plus haut palier atteint, ou None."""
    reached = [n for n in STREAK_BADGES if streak >= n]
    return STREAK_BADGES[max(reached)] if reached else None
