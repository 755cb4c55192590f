"""
Tests de bout en bout : composition root + SQLite sur disque.

On vérifie le flux complet :
bootstrap → InventoryStore → PersistenceGateway → collections SQLite,
puis la relecture des données par un second store.
"""

import logging
from datetime import date
from decimal import Decimal

import pytest

from inventory.adapters import collections
from inventory.config import Settings, configure_logging
from inventory.domain.model import Order, OrderItem, Product, SellOrder, Supplier
from inventory.service_layer import bootstrap


@pytest.fixture
def settings(tmp_path):
    return Settings(database_url=f"sqlite:///{tmp_path / 'inventory.db'}")


def test_les_données_survivent_à_la_réouverture(settings):
    store = bootstrap.bootstrap(settings)
    store.add_supplier(Supplier("FOURN-001", "Bois & Cie", "contact@bois.fr"))
    store.add_product(
        Product("CHAISE-BLEUE", "Chaise", "Chaise de cuisine", 10, Decimal("24.90"),
                "FOURN-001", "2024-03-01")
    )
    store.add_product(
        Product("TABLE-BASSE", "Table", "Plateau en chêne", 2, Decimal("80.00"),
                "FOURN-001", "2024-03-01")
    )
    store.add_order(Order("CMD-001", "FOURN-001", [OrderItem("CHAISE-BLEUE", 5)], date(2024, 3, 2)))
    store.add_sell_order(
        SellOrder("VTE-001", "Alice", [OrderItem("CHAISE-BLEUE", 3)], date(2024, 3, 5))
    )
    store.update_product("TABLE-BASSE", 1, Decimal("75.00"))
    store.close()

    with bootstrap.bootstrap(settings) as rouvert:
        assert rouvert.find_product_by_sku("CHAISE-BLEUE").quantity == 7
        table = rouvert.find_product_by_sku("TABLE-BASSE")
        assert table.quantity == 1
        assert table.price == Decimal("75.00")
        assert rouvert.find_supplier_by_id("FOURN-001").contact == "contact@bois.fr"
        assert rouvert.all_orders()[0].items == (OrderItem("CHAISE-BLEUE", 5),)
        assert rouvert.all_sell_orders()[0].order_date == date(2024, 3, 5)


def test_suppression_persistée(settings):
    store = bootstrap.bootstrap(settings)
    store.add_product(Product("VASE-BLANC", "Vase", "", 1, Decimal("9.00")))
    store.remove_product("VASE-BLANC")
    store.close()

    with bootstrap.bootstrap(settings) as rouvert:
        assert rouvert.all_products() == []


def test_base_injoignable_démarre_en_cache_seul(tmp_path):
    settings = Settings(database_url=f"sqlite:///{tmp_path / 'absent' / 'inventory.db'}")

    store = bootstrap.bootstrap(settings)
    store.add_product(Product("VASE-BLANC", "Vase", "", 3, Decimal("9.00")))

    assert not store.gateway.available
    assert store.total_quantity() == 3
    store.close()


def test_pilote_absent_démarre_en_cache_seul(monkeypatch):
    def create_engine(url):
        raise ModuleNotFoundError("No module named 'psycopg2'")

    monkeypatch.setattr(collections, "create_engine", create_engine)

    store = bootstrap.bootstrap(Settings(database_url="postgresql://inventaire@localhost/magasin"))

    assert not store.gateway.available
    store.close()


def test_sans_chargement(settings):
    store = bootstrap.bootstrap(settings)
    store.add_product(Product("VASE-BLANC", "Vase", "", 3, Decimal("9.00")))
    store.close()

    store = bootstrap.bootstrap(settings, load=False)
    assert store.all_products() == []
    store.close()


def test_seuil_de_stock_faible_configurable(monkeypatch, tmp_path):
    monkeypatch.setenv("INVENTORY_DATABASE_URL", f"sqlite:///{tmp_path / 'inventory.db'}")
    monkeypatch.setenv("INVENTORY_LOW_STOCK_THRESHOLD", "5")

    with bootstrap.bootstrap() as store:
        store.add_product(Product("VASE-BLANC", "Vase", "", 4, Decimal("9.00")))
        store.add_product(Product("LAMPE-DESIGN", "Lampe", "", 8, Decimal("1.00")))

        assert store.dashboard()["low_stock"] == 1


def test_configure_logging_applique_le_niveau():
    root = logging.getLogger()
    niveau, handlers = root.level, list(root.handlers)
    root.handlers = []
    try:
        configure_logging(Settings(log_level="debug"))
        assert root.level == logging.DEBUG
    finally:
        root.handlers = handlers
        root.setLevel(niveau)
