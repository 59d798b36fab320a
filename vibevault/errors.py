# vibevault/errors.py
# -*- coding: utf-8 -*-
"""
Erreurs métier de Vibe Vault.

Trois familles :
- ValidationError      : contrainte de champ violée (levée AVANT toute écriture)
- StorageError         : la base a refusé / raté l'opération (pas de retry)
- ExternalServiceError : le service de génération de texte a échoué
                         (absorbée par le SummaryComposer -> message de repli)
"""

from __future__ import annotations

from typing import Iterable, List


class VibeVaultError(Exception):
    """Classe de base pour toutes les erreurs de l'application."""


class ValidationError(VibeVaultError, ValueError):
    """Une ou plusieurs contraintes de champ ne sont pas respectées."""

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))

    @property
    def fields(self) -> List[str]:
        return list(self.errors)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls({field: message})


class StorageError(VibeVaultError):
    """La couche de persistance a échoué (erreur SQLAlchemy encapsulée)."""


class ExternalServiceError(VibeVaultError):
    """Appel au fournisseur IA en échec, ou réponse de forme inutilisable."""


def join_fields(fields: Iterable[str]) -> str:
    return ", ".join(fields)
