"""
Views (lecture) : le moteur de requêtes et d'agrégats.

Les views sont des fonctions de lecture pure. Elles n'interrogent
jamais la base : elles travaillent sur les accesseurs de lecture de
l'InventoryStore, qui retournent des copies du cache.

Aucun résultat n'est mis en cache : chaque appel reparcourt
l'ensemble des produits, ce qui garantit un résultat à jour
après n'importe quelle mutation.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Iterable

from inventory.domain import model

if TYPE_CHECKING:
    from inventory.service_layer.store import InventoryStore

DEFAULT_LOW_STOCK_THRESHOLD = 10


def search_products(store: InventoryStore, term: str) -> list[model.Product]:
    """
    Produits dont le nom, le SKU ou la description contient `term`,
    sans tenir compte de la casse. Un terme vide n'a pas de
    traitement particulier (il correspond à tout).
    """
    needle = term.lower()
    return [
        p
        for p in store.all_products()
        if needle in p.name.lower()
        or needle in p.sku.lower()
        or needle in p.description.lower()
    ]


def products_for_supplier(store: InventoryStore, supplier_id: str) -> list[model.Product]:
    return [p for p in store.all_products() if p.supplier_id == supplier_id]


# --- Agrégats ---


def total_products(store: InventoryStore) -> int:
    return len(store.all_products())


def total_quantity(store: InventoryStore) -> int:
    return sum(p.quantity for p in store.all_products())


def total_value(store: InventoryStore) -> Decimal:
    """Somme de prix × quantité sur tous les produits."""
    return sum((p.price * p.quantity for p in store.all_products()), Decimal("0"))


def low_stock_count(store: InventoryStore, threshold: int) -> int:
    """Nombre de produits dont la quantité est strictement inférieure au seuil."""
    return sum(1 for p in store.all_products() if p.quantity < threshold)


def dashboard(
    store: InventoryStore, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
) -> dict:
    """Les quatre indicateurs du tableau de bord."""
    return {
        "total_products": total_products(store),
        "total_quantity": total_quantity(store),
        "total_value": total_value(store),
        "low_stock": low_stock_count(store, threshold),
    }


# --- Pré-contrôle du stock ---


def stock_available(store: InventoryStore, sku: str, quantity: int) -> bool:
    """
    Vrai si le produit existe et en a au moins `quantity` en stock.

    L'InventoryStore ne revalide pas le stock lors d'une vente :
    c'est à l'appelant de vérifier avant de passer la commande.
    """
    product = store.find_product_by_sku(sku)
    return product is not None and product.quantity >= quantity


def stock_shortfalls(
    store: InventoryStore, items: Iterable[model.OrderItem]
) -> list[model.OrderItem]:
    """
    Lignes qui ne seraient pas entièrement servies.

    Les quantités demandées pour un même SKU sont cumulées,
    dans l'ordre des lignes.
    """
    requested: dict[str, int] = {}
    shortfalls = []
    for item in items:
        requested[item.sku] = requested.get(item.sku, 0) + item.quantity
        if not stock_available(store, item.sku, requested[item.sku]):
            shortfalls.append(item)
    return shortfalls
