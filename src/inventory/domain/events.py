"""
Events du domaine.

Les events représentent des faits qui se sont produits dans le système.
Ils sont immuables et nommés au passé (quelque chose s'est passé).

Ici, ils servent de canal de diagnostic : la persistance étant
best-effort, un échec d'écriture n'est jamais levé vers l'appelant
mais enregistré sous forme d'event.
"""

from dataclasses import dataclass


class Event:
    """Classe de base pour tous les events du domaine."""
    pass


@dataclass(frozen=True)
class MirroringFailed(Event):
    """Une écriture vers une collection persistante a échoué."""

    operation: str
    collection: str
    error: str


@dataclass(frozen=True)
class PersistenceDisabled(Event):
    """La connexion n'a pas pu être établie : mode cache seul."""

    reason: str
