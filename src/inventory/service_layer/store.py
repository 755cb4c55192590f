"""
InventoryStore : la service layer de l'inventaire.

Le store garde en mémoire l'ensemble des entités (produits,
fournisseurs, commandes d'achat, commandes de vente), chargées une
fois à l'ouverture depuis les collections persistantes, puis tenues
à jour par chaque mutation.

Fonctionnement d'une mutation :
1. Le cache est modifié (c'est la référence)
2. La modification est recopiée, de façon synchrone et best-effort,
   vers le PersistenceGateway

Les lectures ne touchent jamais la persistance. Le store ne
donne jamais accès à ses listes internes ni aux produits du
cache : tout ce qui sort est une copie.

Le store n'est pas un singleton : il est construit par le
composition root (voir bootstrap) et passé aux consommateurs.
Un seul flux de contrôle à la fois est attendu ; rien n'est verrouillé.
"""

from __future__ import annotations

import dataclasses
import logging
from decimal import Decimal

from inventory.adapters.gateway import PersistenceGateway
from inventory.domain import model
from inventory.views import views

logger = logging.getLogger(__name__)


# --- Exceptions ---


class OperationNotSupported(Exception):
    """
    Levée pour une opération que le store n'implémente pas.

    Distincte d'un « introuvable » : l'opération échoue
    que l'entité visée existe ou non.
    """
    pass


def _copy(product: model.Product) -> model.Product:
    return dataclasses.replace(product)


class InventoryStore:
    def __init__(
        self,
        gateway: PersistenceGateway,
        low_stock_threshold: int = views.DEFAULT_LOW_STOCK_THRESHOLD,
    ):
        self.gateway = gateway
        self.low_stock_threshold = low_stock_threshold
        self._products: list[model.Product] = []
        self._suppliers: list[model.Supplier] = []
        self._orders: list[model.Order] = []
        self._sell_orders: list[model.SellOrder] = []

    # --- Cycle de vie ---

    def __enter__(self) -> InventoryStore:
        return self.open()

    def __exit__(self, *args: object) -> None:
        self.close()

    def open(self) -> InventoryStore:
        """
        Charge les quatre collections dans le cache.

        Sans persistance (mode cache seul, ou gateway fermé), le cache
        est la seule copie des données : il est conservé tel quel.
        """
        if not self.gateway.available:
            logger.info("Persistance indisponible : cache conservé (%d produits)",
                        len(self._products))
            return self
        self._products = self.gateway.load_products()
        self._suppliers = self.gateway.load_suppliers()
        self._orders = self.gateway.load_orders()
        self._sell_orders = self.gateway.load_sell_orders()
        logger.info(
            "Inventaire chargé : %d produits, %d fournisseurs, "
            "%d commandes d'achat, %d commandes de vente",
            len(self._products),
            len(self._suppliers),
            len(self._orders),
            len(self._sell_orders),
        )
        return self

    def reload(self) -> InventoryStore:
        """Abandonne le cache et relit la persistance, si elle est disponible."""
        return self.open()

    def close(self) -> None:
        """Libère la connexion du gateway (une seule fois)."""
        self.gateway.close()
        logger.info("Inventaire fermé")

    # --- Produits ---

    def add_product(self, product: model.Product) -> None:
        """
        Ajoute un produit. Aucune vérification d'unicité :
        un SKU déjà présent est ajouté une seconde fois.
        """
        product = _copy(product)
        self._products.append(product)
        self.gateway.save_product(product)

    def all_products(self) -> list[model.Product]:
        return [_copy(p) for p in self._products]

    def find_product_by_sku(self, sku: str) -> model.Product | None:
        product = self._find_product(sku)
        return _copy(product) if product is not None else None

    def update_product(self, sku: str, quantity: int, price: Decimal) -> None:
        """
        Remplace la quantité et le prix du premier produit portant ce SKU.

        SKU inconnu : ne fait rien, sans erreur. La quantité n'est
        pas validée ici, l'appelant est responsable de sa saisie.
        """
        product = self._find_product(sku)
        if product is None:
            logger.debug("Mise à jour ignorée, SKU inconnu : %s", sku)
            return
        product.quantity = quantity
        product.price = price
        self.gateway.update_product(product)

    def remove_product(self, sku: str) -> bool:
        """
        Retire TOUS les produits portant ce SKU.

        Retourne True si au moins un produit a été retiré ; la
        suppression n'est recopiée vers la base que dans ce cas.
        """
        remaining = [p for p in self._products if p.sku != sku]
        removed = len(remaining) != len(self._products)
        self._products = remaining
        if removed:
            self.gateway.remove_product(sku)
        return removed

    def search_products(self, term: str) -> list[model.Product]:
        return views.search_products(self, term)

    # --- Fournisseurs ---

    def add_supplier(self, supplier: model.Supplier) -> None:
        self._suppliers.append(supplier)
        self.gateway.save_supplier(supplier)

    def all_suppliers(self) -> list[model.Supplier]:
        return list(self._suppliers)

    def find_supplier_by_id(self, id: str) -> model.Supplier | None:
        return next((s for s in self._suppliers if s.id == id), None)

    def remove_supplier(self, id: str) -> None:
        raise OperationNotSupported(
            f"La suppression de fournisseur n'est pas prise en charge : {id}"
        )

    # --- Commandes d'achat ---

    def add_order(self, order: model.Order) -> None:
        """Enregistre une commande d'achat ; le stock n'est pas modifié."""
        self._orders.append(order)
        self.gateway.save_order(order)

    def all_orders(self) -> list[model.Order]:
        return list(self._orders)

    # --- Commandes de vente ---

    def add_sell_order(self, sell_order: model.SellOrder) -> None:
        """
        Enregistre une commande de vente puis décrémente le stock.

        Pour chaque ligne, la quantité du produit devient
        max(0, quantité - vendue) : le stock ne passe jamais sous zéro.
        Une ligne dont le SKU est inconnu est ignorée, sans erreur.

        Non transactionnel : la commande est enregistrée en entier
        même si des produits manquent ou sont insuffisants, et rien
        n'est annulé pour les lignes déjà appliquées.
        """
        self._sell_orders.append(sell_order)
        self.gateway.save_sell_order(sell_order)

        for item in sell_order.items:
            product = self._find_product(item.sku)
            if product is None:
                logger.debug(
                    "Ligne ignorée dans %s, SKU inconnu : %s",
                    sell_order.order_id,
                    item.sku,
                )
                continue
            product.quantity = max(0, product.quantity - item.quantity)
            self.gateway.update_product(product)

    def all_sell_orders(self) -> list[model.SellOrder]:
        return list(self._sell_orders)

    # --- Agrégats ---

    def total_products(self) -> int:
        return views.total_products(self)

    def total_quantity(self) -> int:
        return views.total_quantity(self)

    def total_value(self) -> Decimal:
        return views.total_value(self)

    def low_stock_count(self, threshold: int) -> int:
        return views.low_stock_count(self, threshold)

    def dashboard(self) -> dict:
        return views.dashboard(self, self.low_stock_threshold)

    # --- Interne ---

    def _find_product(self, sku: str) -> model.Product | None:
        # Premier trouvé : en cas de SKU dupliqué, les suivants sont ignorés
        return next((p for p in self._products if p.sku == sku), None)
