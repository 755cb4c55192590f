"""
Bootstrap : assemblage de l'application (Composition Root).

Ce module construit l'InventoryStore avec toutes ses dépendances.
C'est ici que l'injection de dépendances est réalisée :
on assemble les composants concrets (ou les fakes pour les tests).

C'est le seul endroit de l'application qui connaît les
implémentations concrètes de chaque abstraction. L'appelant
possède le store retourné et doit appeler close() une fois,
à l'arrêt du processus.
"""

from __future__ import annotations

import logging

from inventory.adapters import collections
from inventory.adapters.gateway import PersistenceGateway
from inventory.config import Settings
from inventory.service_layer.store import InventoryStore

logger = logging.getLogger(__name__)


def bootstrap(
    settings: Settings | None = None,
    gateway: PersistenceGateway | None = None,
    load: bool = True,
) -> InventoryStore:
    """
    Construit et retourne un InventoryStore ouvert.

    En production, le gateway est construit à partir de
    `settings.database_url`. Si la base ne répond pas, le store
    démarre en mode cache seul au lieu d'échouer.
    En test, on injecte un gateway construit sur des fakes.
    """
    settings = settings or Settings()
    if gateway is None:
        gateway = connect_gateway(settings)

    store = InventoryStore(gateway, low_stock_threshold=settings.low_stock_threshold)
    if load:
        store.open()
    return store


def connect_gateway(settings: Settings) -> PersistenceGateway:
    try:
        engine = collections.connect(settings.database_url)
    except collections.PersistenceUnavailable as e:
        return PersistenceGateway.cache_only(str(e))
    return PersistenceGateway(collections.sqlalchemy_collections(engine), engine=engine)
