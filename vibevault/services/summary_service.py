# vibevault/services/summary_service.py
# -*- coding: utf-8 -*-
"""
Analyse IA des journaux récents pour Vibe Vault.

Le SummaryComposer :
1. réduit chaque EnergyLog en SimplifiedLogView,
2. les insère dans un prompt fixe,
3. appelle un provider qui doit renvoyer {"analysis": "<texte>"},
4. renvoie ce texte tel quel, ou un message de repli si l'appel échoue.

Deux providers :
- StubProvider : offline, déterministe, idéal pour tests/MVP.
- HuggingFaceProvider : utilise l'Inference API (si HF_TOKEN présent).

Usage:
    from vibevault.services.summary_service import SummaryComposer, select_for_summary

    composer = SummaryComposer()  # auto: stub si pas de token
    txt = composer.compose(select_for_summary(recent_logs))
"""

from __future__ import annotations

import json
import logging
import os
from statistics import mean
from typing import Any, List, Mapping, Optional, Sequence

import httpx

from vibevault.errors import ExternalServiceError
from vibevault.services.log_record import EnergyLog, SimplifiedLogView, to_simplified

logger = logging.getLogger(__name__)

MIN_LOGS = 2
MAX_LOGS = 14

NEED_MORE_DATA_MESSAGE = (
    "J'ai besoin d'au moins deux journaux pour repérer une tendance. Continue à noter tes vibes !"
)
FALLBACK_MESSAGE = (
    "Je n'ai pas pu générer d'analyse pour le moment. Réessaie un peu plus tard."
)

PROMPT_HEADER = """Tu es l'assistant bien-être de Vibe Vault, bienveillant et perspicace.
Ton objectif : analyser les journaux d'énergie fournis pour cet utilisateur.
À partir de ces journaux, rédige une courte analyse qui doit :
1. Repérer les tendances ou motifs notables du niveau d'énergie.
2. Explorer les corrélations possibles : l'énergie est-elle plus haute après plus de sommeil ? Le stress pèse-t-il sur l'énergie ? Le type / l'intensité d'activité joue-t-il ?
3. Proposer 1 à 2 conseils bien-être généraux, positifs et encourageants. **Aucun conseil médical.**
4. Rester concise : 3 à 5 phrases ou quelques puces.
5. Si les données sont très maigres (moins de 3 journaux ou peu de détails), dire gentiment que plus de données permettraient une analyse plus riche, tout en tentant une petite observation.
6. Utiliser du markdown léger (puces) si cela aide la lecture.

Réponds UNIQUEMENT avec un objet JSON de la forme {"analysis": "<ton analyse>"}.

Voici les journaux récents :"""

PROMPT_FOOTER = "Merci de fournir ton analyse à partir de ces journaux."


# -----------------------------------------------------------------------------
# Prompt
# -----------------------------------------------------------------------------

def _fmt_num(v: float) -> str:
    return f"{v:g}"


def render_log_block(v: SimplifiedLogView) -> str:
    lines = [f"- **{v.date}** :", f"  - Énergie : {v.energy_level}/10"]
    if v.emotion_tag:
        lines.append(f"  - Émotion : {v.emotion_tag}")
    if v.sleep_hours:
        lines.append(f"  - Sommeil : {_fmt_num(v.sleep_hours)} heures")
    if v.stress_level:
        lines.append(f"  - Stress : {v.stress_level}/5")
    if v.activity_type:
        lines.append(f"  - Activité : {v.activity_type} ({v.activity_intensity})")
    if v.quick_note:
        lines.append(f'  - Note : "{v.quick_note}"')
    return "\n".join(lines)


def build_prompt(views: Sequence[SimplifiedLogView]) -> str:
    body = "\n".join(render_log_block(v) for v in views) or "Aucun journal fourni pour l'analyse."
    return f"{PROMPT_HEADER}\n{body}\n\n{PROMPT_FOOTER}"


def select_for_summary(logs: Sequence[EnergyLog], limit: int = MAX_LOGS) -> List[EnergyLog]:
    """Garde les `limit` journaux les plus récents, triés chronologiquement."""
    newest_first = sorted(logs, key=lambda l: l.log_date, reverse=True)[:limit]
    return list(reversed(newest_first))


# -----------------------------------------------------------------------------
# Provider: Stub (déterministe, offline)
# -----------------------------------------------------------------------------

class StubProvider:
    """
    Produit une analyse courte à partir des vues simplifiées, sans aucun appel réseau.
    Déterministe -> parfait pour tests/unit et usage local.
    """

    def generate(self, *, prompt: str, logs: Sequence[SimplifiedLogView]) -> dict:
        energies = [v.energy_level for v in logs]
        avg = mean(energies)
        parts = [f"Énergie moyenne sur {len(logs)} jours : {avg:.1f}/10."]

        delta = energies[-1] - energies[0]
        if delta >= 2:
            parts.append("Ton énergie est en hausse sur la période.")
        elif delta <= -2:
            parts.append("Ton énergie est en baisse sur la période.")
        else:
            parts.append("Ton énergie reste plutôt stable.")

        rested = [v.energy_level for v in logs if v.sleep_hours is not None and v.sleep_hours >= 7]
        short = [v.energy_level for v in logs if v.sleep_hours is not None and v.sleep_hours < 7]
        if rested and short and mean(rested) > mean(short):
            parts.append("Les nuits de 7h ou plus semblent coïncider avec plus d'énergie.")

        stressed = [v for v in logs if v.stress_level is not None and v.stress_level >= 4]
        if stressed:
            parts.append("Quelques jours de stress élevé : une courte marche ou des respirations lentes peuvent aider.")

        if len(logs) < 3:
            parts.append("Avec quelques journaux de plus, l'analyse sera plus riche.")

        return {"analysis": " ".join(parts)}


# -----------------------------------------------------------------------------
# Provider: Hugging Face Inference API
# -----------------------------------------------------------------------------

class HuggingFaceProvider:
    """
    Client simple pour l'Inference API de Hugging Face.

    Variables d'environnement supportées:
        HF_TOKEN           : token secret (obligatoire)
        HF_MODEL           : ex. 'mistralai/Mistral-7B-Instruct-v0.2'
        HF_API_URL         : URL override; sinon déduite du modèle
        HF_MAX_TOKENS      : int (par défaut 300)
        HF_TEMPERATURE     : float (par défaut 0.5)
        HF_TOP_P           : float (par défaut 0.9)
        HF_TIMEOUT_SEC     : int/float (par défaut 20)

    Notes:
        - S'il y a la moindre erreur réseau, on relève l'exception ;
          le SummaryComposer la convertit en message de repli.
    """

    def __init__(self) -> None:
        self.token = os.getenv("HF_TOKEN", "").strip()
        if not self.token:
            raise RuntimeError("HF_TOKEN manquant pour HuggingFaceProvider.")

        self.model = os.getenv("HF_MODEL", "mistralai/Mistral-7B-Instruct-v0.2").strip()
        self.api_url = os.getenv("HF_API_URL", f"https://api-inference.huggingface.co/models/{self.model}").strip()
        self.max_tokens = int(os.getenv("HF_MAX_TOKENS", "300"))
        self.temperature = float(os.getenv("HF_TEMPERATURE", "0.5"))
        self.top_p = float(os.getenv("HF_TOP_P", "0.9"))
        self.timeout_sec = float(os.getenv("HF_TIMEOUT_SEC", "20"))

        self._headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }

    def generate(self, *, prompt: str, logs: Sequence[SimplifiedLogView]) -> dict:
        payload = {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": self.max_tokens,
                "temperature": self.temperature,
                "top_p": self.top_p,
                "return_full_text": False,
                "do_sample": True,
            },
            "options": {"wait_for_model": True},
        }

        with httpx.Client(timeout=self.timeout_sec) as client:
            resp = client.post(self.api_url, headers=self._headers, json=payload)
            resp.raise_for_status()
            data = resp.json()

        # Formats possibles : liste [{"generated_text": "..."}] ou dict variante
        text: Optional[str] = None
        if isinstance(data, list) and data and isinstance(data[0], dict):
            text = data[0].get("generated_text")
        elif isinstance(data, dict):
            for key in ("generated_text", "text", "content"):
                if isinstance(data.get(key), str):
                    text = data[key]
                    break

        if not isinstance(text, str):
            raise ExternalServiceError(f"Réponse HF inattendue: {json.dumps(data, ensure_ascii=False)[:200]}")

        return _parse_model_output(text)


def _parse_model_output(text: str) -> dict:
    """Le modèle doit répondre {"analysis": ...} ; sinon on garde le texte brut."""
    stripped = text.strip()
    try:
        parsed = json.loads(stripped)
    except ValueError:
        return {"analysis": stripped}
    if isinstance(parsed, dict) and "analysis" in parsed:
        return parsed
    return {"analysis": stripped}


# -----------------------------------------------------------------------------
# Façade principale
# -----------------------------------------------------------------------------

def _extract_analysis(payload: Any) -> str:
    if not isinstance(payload, Mapping):
        raise ExternalServiceError(f"réponse non structurée: {type(payload).__name__}")
    analysis = payload.get("analysis")
    if not isinstance(analysis, str) or not analysis.strip():
        raise ExternalServiceError("champ 'analysis' absent ou vide")
    return analysis


class SummaryComposer:
    """
    Façade qui choisit automatiquement le provider selon l'environnement :
      - AI_PROVIDER=hf  -> HuggingFaceProvider (si HF_TOKEN présent)
      - sinon           -> StubProvider (par défaut)

    On peut forcer un provider en passant `provider=...` dans __init__.
    """

    def __init__(self, provider: Optional[object] = None) -> None:
        if provider is not None:
            self._provider = provider
            return

        prov = os.getenv("AI_PROVIDER", "stub").strip().lower()
        if prov == "hf":
            try:
                self._provider = HuggingFaceProvider()
            except RuntimeError as e:
                logger.warning("Config HF incomplète (%s), bascule sur le stub", e)
                self._provider = StubProvider()
        else:
            self._provider = StubProvider()

    def compose(self, logs: Sequence[EnergyLog]) -> str:
        """
        Génère l'analyse textuelle des journaux (ordre chronologique).

        Args:
            logs: 2 à 14 journaux complets, du plus ancien au plus récent

        Returns:
            str: analyse prête à afficher, NEED_MORE_DATA_MESSAGE (< 2 journaux)
                 ou FALLBACK_MESSAGE (échec du provider)

        Raises:
            ValueError: plus de MAX_LOGS journaux (tronquer via select_for_summary)
        """
        if len(logs) < MIN_LOGS:
            return NEED_MORE_DATA_MESSAGE
        if len(logs) > MAX_LOGS:
            raise ValueError(f"{len(logs)} journaux fournis, maximum {MAX_LOGS}")

        views = [to_simplified(l) for l in logs]
        prompt = build_prompt(views)
        try:
            return _extract_analysis(self._provider.generate(prompt=prompt, logs=views))
        except Exception as e:
            logger.warning("Analyse IA indisponible: %s", e, exc_info=True)
            return FALLBACK_MESSAGE
