"""
Configuration partagée pour les tests.

Les fakes remplacent la base de documents : des collections en
mémoire qui implémentent la même interface que SqlAlchemyCollection.
Les tests unitaires construisent leur store sur ces fakes ; les tests
d'intégration utilisent SQLite en mémoire.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from inventory.adapters.collections import AbstractCollection, matches
from inventory.adapters.gateway import PersistenceGateway
from inventory.domain import model
from inventory.service_layer.store import InventoryStore


class FakeCollection(AbstractCollection):
    """Collection en mémoire : une simple liste de dicts."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.documents: list[dict] = []

    def find_all(self) -> list[dict]:
        return [dict(doc) for doc in self.documents]

    def insert_one(self, document: dict) -> None:
        self.documents.append(dict(document))

    def update_one(self, filter_: dict, fields: dict) -> bool:
        doc = next((d for d in self.documents if matches(d, filter_)), None)
        if doc is None:
            return False
        doc.update(fields)
        return True

    def delete_one(self, filter_: dict) -> bool:
        doc = next((d for d in self.documents if matches(d, filter_)), None)
        if doc is None:
            return False
        self.documents.remove(doc)
        return True


@pytest.fixture
def collections() -> dict[str, FakeCollection]:
    return {
        name: FakeCollection(name)
        for name in ("products", "suppliers", "orders", "sell_orders")
    }


@pytest.fixture
def gateway(collections) -> PersistenceGateway:
    return PersistenceGateway(collections)


@pytest.fixture
def store(gateway) -> InventoryStore:
    """Store ouvert sur des collections vides."""
    return InventoryStore(gateway).open()


@pytest.fixture
def make_product():
    """Fabrique de produits avec des valeurs par défaut lisibles."""

    def _make(
        sku: str,
        quantity: int = 10,
        price: str = "2.50",
        name: str | None = None,
        description: str = "",
        supplier_id: str = "FOURN-001",
    ) -> model.Product:
        return model.Product(
            sku=sku,
            name=name or sku.title(),
            description=description,
            quantity=quantity,
            price=Decimal(price),
            supplier_id=supplier_id,
            date_received="2024-03-01",
        )

    return _make
