"""
Persistence Gateway.

Le gateway recopie, en best-effort, chaque mutation du cache vers
les quatre collections de documents (products, suppliers, orders,
sell_orders). Il ne fait jamais autorité : le cache de l'InventoryStore
est la référence, la base n'en est qu'un miroir.

Deux règles :
- Une écriture qui échoue n'est jamais levée vers l'appelant. L'erreur
  est enregistrée dans `failures` (event MirroringFailed) et loggée
  en warning. La mutation du cache, déjà faite, n'est pas annulée.
- Sans connexion (mode cache seul), chaque opération est un no-op ;
  la dégradation est loggée une seule fois, à la construction.

Conséquence acceptée : le cache et la base peuvent diverger
silencieusement. Rien n'est rejoué.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Iterable, TypeVar

from sqlalchemy.engine import Engine

from inventory.adapters import documents
from inventory.adapters.collections import AbstractCollection, Document
from inventory.domain import events, model

logger = logging.getLogger(__name__)

T = TypeVar("T")

PRODUCTS = "products"
SUPPLIERS = "suppliers"
ORDERS = "orders"
SELL_ORDERS = "sell_orders"

# Seuls les échecs les plus récents sont gardés
MAX_FAILURES = 1000


class PersistenceGateway:
    """
    Adapter entre l'InventoryStore et les collections de documents.

    `collections` associe chaque nom de collection à son implémentation ;
    None signifie mode cache seul. `engine`, s'il est fourni, est la
    connexion possédée par le gateway et libérée par close().
    `failures` ne garde que les `max_failures` derniers events.
    """

    def __init__(
        self,
        collections: dict[str, AbstractCollection] | None,
        engine: Engine | None = None,
        unavailable_reason: str = "aucune connexion configurée",
        max_failures: int = MAX_FAILURES,
    ):
        self.collections = collections
        self.engine = engine
        self.failures: deque[events.Event] = deque(maxlen=max_failures)
        self.closed = False
        if collections is None:
            self._record_unavailable(unavailable_reason)

    @classmethod
    def cache_only(cls, reason: str) -> PersistenceGateway:
        """Gateway sans connexion : toutes les opérations sont des no-ops."""
        return cls(collections=None, unavailable_reason=reason)

    @property
    def available(self) -> bool:
        return self.collections is not None

    # --- Chargement ---

    def load_products(self) -> list[model.Product]:
        return self._load(PRODUCTS, documents.product_from_document)

    def load_suppliers(self) -> list[model.Supplier]:
        return self._load(SUPPLIERS, documents.supplier_from_document)

    def load_orders(self) -> list[model.Order]:
        return self._load(ORDERS, documents.order_from_document)

    def load_sell_orders(self) -> list[model.SellOrder]:
        return self._load(SELL_ORDERS, documents.sell_order_from_document)

    # --- Écritures ---

    def save_product(self, product: model.Product) -> None:
        self._mirror(
            "insert", PRODUCTS, lambda c: c.insert_one(documents.product_to_document(product))
        )

    def update_product(self, product: model.Product) -> None:
        self._mirror(
            "update",
            PRODUCTS,
            lambda c: c.update_one(
                {"sku": product.sku}, documents.product_stock_fields(product)
            ),
        )

    def remove_product(self, sku: str) -> None:
        self._mirror("delete", PRODUCTS, lambda c: c.delete_one({"sku": sku}))

    def save_supplier(self, supplier: model.Supplier) -> None:
        self._mirror(
            "insert", SUPPLIERS, lambda c: c.insert_one(documents.supplier_to_document(supplier))
        )

    def save_order(self, order: model.Order) -> None:
        self._mirror(
            "insert", ORDERS, lambda c: c.insert_one(documents.order_to_document(order))
        )

    def save_sell_order(self, sell_order: model.SellOrder) -> None:
        self._mirror(
            "insert",
            SELL_ORDERS,
            lambda c: c.insert_one(documents.sell_order_to_document(sell_order)),
        )

    # --- Cycle de vie ---

    def close(self) -> None:
        """
        Libère la connexion. Idempotent : la libération n'a lieu
        qu'une fois, les appels suivants ne font rien.
        """
        if self.closed:
            return
        self.closed = True
        self.collections = None
        if self.engine is not None:
            self.engine.dispose()
            logger.debug("Connexion à la base de documents libérée")

    # --- Interne ---

    def _record_unavailable(self, reason: str) -> None:
        logger.warning("Persistance indisponible (%s) : mode cache seul", reason)
        self.failures.append(events.PersistenceDisabled(reason=reason))

    def _mirror(
        self,
        operation: str,
        name: str,
        call: Callable[[AbstractCollection], Any],
    ) -> Any:
        """
        Exécute une primitive sur une collection en contenant l'erreur.

        Retourne le résultat de la primitive, ou None si le gateway est
        en mode cache seul ou si l'appel a échoué.
        """
        if self.collections is None:
            return None
        collection = self.collections[name]
        try:
            logger.debug("Miroir %s sur %s", operation, name)
            return call(collection)
        except Exception as e:
            logger.warning("Échec du miroir %s sur %s : %s", operation, name, e)
            self.failures.append(
                events.MirroringFailed(operation=operation, collection=name, error=str(e))
            )
            return None

    def _load(self, name: str, decode: Callable[[Document], T]) -> list[T]:
        """
        Lit une collection entière et décode chaque document.

        Un document illisible est ignoré (warning) plutôt que
        d'interrompre le chargement des autres.
        """
        raw: Iterable[Document] = self._mirror("find", name, lambda c: c.find_all()) or []
        entities: list[T] = []
        for doc in raw:
            try:
                entities.append(decode(doc))
            except (KeyError, TypeError, ValueError, ArithmeticError) as e:
                logger.warning("Document ignoré dans %s (%r) : %s", name, doc, e)
        return entities
