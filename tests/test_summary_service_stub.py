# tests/test_summary_service_stub.py
# -*- coding: utf-8 -*-
"""
Tests pour vibevault/services/summary_service.py

Ce fichier couvre :
1) SummaryComposer (façade) :
   - < 2 journaux -> message "besoin de plus de données", provider JAMAIS appelé
   - texte de l'analyse renvoyé tel quel
   - > 14 journaux -> ValueError
   - toute anomalie du provider (exception, vide, non-dict, clé absente) -> message de repli
   - choix du provider par variables d'environnement
2) Prompt : contenu attendu, champs absents omis
3) StubProvider : tendance déterministe
4) HuggingFaceProvider : mock de `httpx`, formats de réponse, propagation d'erreur

Notes :
- AUCUN appel réseau réel : on monkey-patche `summary_service.httpx`.
"""

from __future__ import annotations

import datetime as dt
import json
import types

import pytest

import vibevault.services.summary_service as summary_svc
from vibevault.errors import ExternalServiceError
from vibevault.services.log_record import (
    ActivityIntensity,
    ActivityType,
    EmotionTag,
    EnergyLog,
    to_simplified,
)
from vibevault.services.summary_service import (
    FALLBACK_MESSAGE,
    MAX_LOGS,
    NEED_MORE_DATA_MESSAGE,
    HuggingFaceProvider,
    StubProvider,
    SummaryComposer,
    build_prompt,
    select_for_summary,
)

START = dt.date(2025, 1, 1)


# ---------------------------------------------------------------------
# Helpers / Fixtures
# ---------------------------------------------------------------------

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isole chaque test des variables IA de l'environnement."""
    for key in [
        "AI_PROVIDER",
        "HF_TOKEN",
        "HF_MODEL",
        "HF_API_URL",
        "HF_MAX_TOKENS",
        "HF_TEMPERATURE",
        "HF_TOP_P",
        "HF_TIMEOUT_SEC",
    ]:
        monkeypatch.delenv(key, raising=False)
    yield


def make_log(day_offset: int, energy: int = 6, **kw) -> EnergyLog:
    return EnergyLog(
        energy=energy,
        hydration_liters=kw.pop("hydration_liters", 1.5),
        activity_intensity=kw.pop("activity_intensity", ActivityIntensity.LOW),
        log_date=START + dt.timedelta(days=day_offset),
        user_id="user_001",
        **kw,
    )


class SpyProvider:
    """Provider espion : mémorise les appels et renvoie une réponse choisie."""

    def __init__(self, response=None):
        self.calls = []
        self.response = response if response is not None else {"analysis": "Analyse espion"}

    def generate(self, *, prompt, logs):
        self.calls.append({"prompt": prompt, "logs": list(logs)})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


# ---------------------------------------------------------------------
# 1) SummaryComposer
# ---------------------------------------------------------------------

@pytest.mark.parametrize("n", [0, 1])
def test_not_enough_logs_skips_provider(n):
    spy = SpyProvider()
    out = SummaryComposer(provider=spy).compose([make_log(i) for i in range(n)])
    assert out == NEED_MORE_DATA_MESSAGE
    assert spy.calls == []


def test_two_minimal_logs_analysis_returned_verbatim():
    spy = SpyProvider({"analysis": "  **Tendance** : stable  "})
    out = SummaryComposer(provider=spy).compose([make_log(0), make_log(1)])
    assert out == "  **Tendance** : stable  "
    assert len(spy.calls) == 1
    assert [v.energy_level for v in spy.calls[0]["logs"]] == [6, 6]


def test_max_logs_accepted_and_more_rejected():
    spy = SpyProvider()
    composer = SummaryComposer(provider=spy)
    assert composer.compose([make_log(i) for i in range(MAX_LOGS)]) == "Analyse espion"

    with pytest.raises(ValueError):
        composer.compose([make_log(i) for i in range(MAX_LOGS + 1)])


@pytest.mark.parametrize(
    "response",
    [
        RuntimeError("panne"),
        ExternalServiceError("timeout"),
        {"analysis": ""},
        {"analysis": "   "},
        {"analysis": 42},
        {"text": "pas la bonne clé"},
        "juste une chaîne",
        ["liste"],
    ],
)
def test_provider_anomalies_give_fallback(response):
    out = SummaryComposer(provider=SpyProvider(response)).compose([make_log(0), make_log(1)])
    assert out == FALLBACK_MESSAGE


def test_default_is_stub():
    assert isinstance(SummaryComposer()._provider, StubProvider)


def test_env_hf_without_token_falls_back_to_stub(monkeypatch):
    monkeypatch.setenv("AI_PROVIDER", "hf")
    assert isinstance(SummaryComposer()._provider, StubProvider)


# ---------------------------------------------------------------------
# 2) Prompt
# ---------------------------------------------------------------------

def test_prompt_lists_each_log_with_present_fields():
    logs = [
        make_log(4, energy=8, sleep_hours=7.5, stress_level=2, emotion_tag=EmotionTag.HAPPY,
                 activity_type=ActivityType.YOGA, activity_intensity=ActivityIntensity.MEDIUM,
                 note="Top"),
        make_log(5, energy=3),
    ]
    prompt = build_prompt([to_simplified(l) for l in logs])

    assert '{"analysis"' in prompt
    assert "- **Jan 5** :" in prompt
    assert "  - Énergie : 8/10" in prompt
    assert "  - Émotion : Happy" in prompt
    assert "  - Sommeil : 7.5 heures" in prompt
    assert "  - Stress : 2/5" in prompt
    assert "  - Activité : Yoga (Medium)" in prompt
    assert '  - Note : "Top"' in prompt

    # le 2e journal n'a que l'énergie : aucune ligne optionnelle pour lui
    second_block = prompt.split("- **Jan 6** :")[1].split("\n\n")[0]
    assert "Énergie : 3/10" in second_block
    for label in ("Émotion", "Sommeil", "Stress", "Activité", "Note"):
        assert label not in second_block


def test_composer_builds_chronological_prompt():
    spy = SpyProvider()
    SummaryComposer(provider=spy).compose([make_log(0, energy=2), make_log(1, energy=9)])
    prompt = spy.calls[0]["prompt"]
    assert prompt.index("Jan 1") < prompt.index("Jan 2")


def test_select_for_summary_keeps_most_recent_in_chronological_order():
    logs = [make_log(i, energy=(i % 10) + 1) for i in range(20)]
    picked = select_for_summary(list(reversed(logs)))
    assert len(picked) == MAX_LOGS
    assert picked[0].log_date == START + dt.timedelta(days=6)
    assert picked[-1].log_date == START + dt.timedelta(days=19)
    assert [p.log_date for p in picked] == sorted(p.log_date for p in picked)


def test_select_for_summary_small_input():
    assert select_for_summary([]) == []
    logs = [make_log(2), make_log(0)]
    assert [l.log_date.day for l in select_for_summary(logs)] == [1, 3]


# ---------------------------------------------------------------------
# 3) StubProvider
# ---------------------------------------------------------------------

@pytest.mark.parametrize(
    "energies, snippet",
    [
        ([3, 5, 8], "en hausse"),
        ([8, 6, 4], "en baisse"),
        ([6, 7, 6], "stable"),
    ],
)
def test_stub_trend(energies, snippet):
    logs = [make_log(i, energy=e) for i, e in enumerate(energies)]
    out = SummaryComposer().compose(logs)
    assert snippet in out
    assert "Énergie moyenne sur 3 jours" in out


def test_stub_sleep_stress_and_sparse_notes():
    logs = [
        make_log(0, energy=4, sleep_hours=5.0, stress_level=5),
        make_log(1, energy=8, sleep_hours=8.0),
    ]
    out = SummaryComposer().compose(logs)
    assert "7h ou plus" in out
    assert "stress élevé" in out
    assert "quelques journaux de plus" in out


def test_stub_is_deterministic():
    logs = [make_log(i, energy=e) for i, e in enumerate([5, 6, 7, 4])]
    assert SummaryComposer().compose(logs) == SummaryComposer().compose(logs)


# ---------------------------------------------------------------------
# 4) HuggingFaceProvider (avec mock httpx, SANS réseau)
# ---------------------------------------------------------------------

class _FakeResponse:
    def __init__(self, payload):
        self._payload = payload

    def json(self):
        return self._payload

    def raise_for_status(self):
        return None


class _FakeClient:
    """Client factice utilisé via "with httpx.Client(...) as client:"."""

    def __init__(self, *, payload_to_return):
        self.payload_to_return = payload_to_return
        self.last_json = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def post(self, url, headers=None, json=None):
        assert headers["Authorization"].startswith("Bearer ")
        self.last_json = json
        return _FakeResponse(self.payload_to_return)


def _patch_httpx(monkeypatch, payload):
    client = _FakeClient(payload_to_return=payload)
    fake_httpx = types.SimpleNamespace(Client=lambda timeout=None: client)
    monkeypatch.setattr(summary_svc, "httpx", fake_httpx, raising=True)
    return client


def _hf_env(monkeypatch):
    monkeypatch.setenv("AI_PROVIDER", "hf")
    monkeypatch.setenv("HF_TOKEN", "dummy_token")


def test_hf_provider_parses_list_format(monkeypatch):
    _hf_env(monkeypatch)
    client = _patch_httpx(monkeypatch, [{"generated_text": "Texte HF"}])

    composer = SummaryComposer()
    assert isinstance(composer._provider, HuggingFaceProvider)
    assert composer.compose([make_log(0), make_log(1)]) == "Texte HF"
    assert "Énergie : 6/10" in client.last_json["inputs"]


def test_hf_provider_parses_json_object_output(monkeypatch):
    _hf_env(monkeypatch)
    _patch_httpx(monkeypatch, [{"generated_text": json.dumps({"analysis": "Analyse JSON"})}])
    assert SummaryComposer().compose([make_log(0), make_log(1)]) == "Analyse JSON"


def test_hf_provider_parses_dict_variants(monkeypatch):
    _hf_env(monkeypatch)
    _patch_httpx(monkeypatch, {"text": "Réponse variante"})
    assert SummaryComposer().compose([make_log(0), make_log(1)]) == "Réponse variante"


def test_hf_unexpected_shape_raises_directly_and_falls_back_in_composer(monkeypatch):
    _hf_env(monkeypatch)
    _patch_httpx(monkeypatch, {"error": "Model is loading"})

    with pytest.raises(ExternalServiceError):
        HuggingFaceProvider().generate(prompt="p", logs=[])

    assert SummaryComposer().compose([make_log(0), make_log(1)]) == FALLBACK_MESSAGE


def test_hf_provider_raises_when_used_directly_and_http_fails(monkeypatch):
    class _FailingClient:
        def __enter__(self): return self
        def __exit__(self, *args): return False
        def post(self, *args, **kwargs):
            raise RuntimeError("échec réseau simulé")

    monkeypatch.setattr(summary_svc, "httpx", types.SimpleNamespace(Client=lambda timeout=None: _FailingClient()))
    monkeypatch.setenv("HF_TOKEN", "token")
    provider = HuggingFaceProvider()

    with pytest.raises(RuntimeError):
        provider.generate(prompt="p", logs=[])


def test_hf_provider_requires_token():
    with pytest.raises(RuntimeError):
        HuggingFaceProvider()
